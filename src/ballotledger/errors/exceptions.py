"""Exception hierarchy for BallotLedger.

This module defines the exception hierarchy for the ledger, providing
structured error reporting and categorization. Every governance precondition
failure has its own class so callers can tell rejections apart without
parsing messages.
"""

import time
import traceback
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories."""

    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    STORAGE = "storage"
    GOVERNANCE = "governance"
    ACCESS = "access"
    SYSTEM = "system"


@dataclass
class ErrorContext:
    """Context information for an error."""

    timestamp: float = field(default_factory=time.time)
    component: Optional[str] = None
    operation: Optional[str] = None
    caller: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert context to dictionary."""
        return {
            "timestamp": self.timestamp,
            "component": self.component,
            "operation": self.operation,
            "caller": self.caller,
            "metadata": self.metadata,
        }


class BallotLedgerError(Exception):
    """Base exception for all BallotLedger errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.SYSTEM,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.severity = severity
        self.category = category
        self.context = context or ErrorContext()
        self.cause = cause
        self.metadata = metadata or {}
        self.timestamp = time.time()
        self.traceback = traceback.format_exc()

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "severity": self.severity.value,
            "category": self.category.value,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
            "metadata": self.metadata,
            "timestamp": self.timestamp,
        }

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"{self.__class__.__name__}: {self.message}"]

        if self.error_code:
            parts.append(f"Code: {self.error_code}")

        if self.severity != ErrorSeverity.MEDIUM:
            parts.append(f"Severity: {self.severity.value}")

        if self.category != ErrorCategory.SYSTEM:
            parts.append(f"Category: {self.category.value}")

        return " | ".join(parts)


class ValidationError(BallotLedgerError):
    """Validation error."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        expected: Optional[Any] = None,
        **kwargs,
    ):
        super().__init__(message, category=ErrorCategory.VALIDATION, **kwargs)
        self.field = field
        self.value = value
        self.expected = expected

    def to_dict(self) -> Dict[str, Any]:
        """Convert validation error to dictionary."""
        data = super().to_dict()
        data.update(
            {
                "field": self.field,
                "value": str(self.value) if self.value is not None else None,
                "expected": str(self.expected) if self.expected is not None else None,
            }
        )
        return data


class ConfigurationError(BallotLedgerError):
    """Configuration error."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        **kwargs,
    ):
        super().__init__(message, category=ErrorCategory.CONFIGURATION, **kwargs)
        self.config_key = config_key
        self.config_value = config_value

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration error to dictionary."""
        data = super().to_dict()
        data.update(
            {
                "config_key": self.config_key,
                "config_value": str(self.config_value)
                if self.config_value is not None
                else None,
            }
        )
        return data


class StorageError(BallotLedgerError):
    """Snapshot storage error."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.STORAGE,
            severity=ErrorSeverity.HIGH,
            **kwargs,
        )
        self.path = path

    def to_dict(self) -> Dict[str, Any]:
        """Convert storage error to dictionary."""
        data = super().to_dict()
        data.update({"path": self.path})
        return data


class GovernanceError(BallotLedgerError):
    """Base class for rejected ledger operations.

    Subclasses set ``code``; it doubles as the stable ``error_code`` reported
    to callers.
    """

    code = "GovernanceError"

    def __init__(
        self,
        message: str,
        proposal_id: Optional[int] = None,
        caller: Optional[str] = None,
        **kwargs,
    ):
        kwargs.setdefault("error_code", self.code)
        kwargs.setdefault("category", ErrorCategory.GOVERNANCE)
        super().__init__(message, **kwargs)
        self.proposal_id = proposal_id
        self.caller = caller

    def to_dict(self) -> Dict[str, Any]:
        """Convert governance error to dictionary."""
        data = super().to_dict()
        data.update({"proposal_id": self.proposal_id, "caller": self.caller})
        return data


class Unauthorized(GovernanceError):
    """Caller lacks the capability the operation requires."""

    code = "Unauthorized"

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("category", ErrorCategory.ACCESS)
        kwargs.setdefault("severity", ErrorSeverity.HIGH)
        super().__init__(message, **kwargs)


class InvalidDuration(GovernanceError):
    """Voting duration cannot produce a representable deadline."""

    code = "InvalidDuration"

    def __init__(self, message: str, duration: Optional[Any] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.duration = duration

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"duration": str(self.duration) if self.duration is not None else None})
        return data


class ProposalNotFound(GovernanceError):
    """Proposal index outside the ledger's sequence."""

    code = "ProposalNotFound"


class VotingClosed(GovernanceError):
    """Vote attempted at or after the proposal deadline."""

    code = "VotingClosed"


class AlreadyVoted(GovernanceError):
    """Identity already has a recorded vote on the proposal."""

    code = "AlreadyVoted"


class NoVotingPower(GovernanceError):
    """Identity has zero weight at vote time."""

    code = "NoVotingPower"


class VotingStillOpen(GovernanceError):
    """Finalization attempted before the deadline."""

    code = "VotingStillOpen"


class AlreadyExecuted(GovernanceError):
    """Proposal was already finalized."""

    code = "AlreadyExecuted"


# Convenience functions for common error patterns
def create_validation_error(
    field: str, value: Any, expected: Any, message: Optional[str] = None
) -> ValidationError:
    """Create a validation error."""
    if message is None:
        message = f"Invalid value for field '{field}': expected {expected}, got {value}"

    return ValidationError(message=message, field=field, value=value, expected=expected)
