"""BallotLedger Error Handling.

This module provides the exception hierarchy for the ledger: the ambient
validation, configuration and storage errors, plus one class per rejected
governance operation.
"""

from .exceptions import (
    AlreadyExecuted,
    AlreadyVoted,
    BallotLedgerError,
    ConfigurationError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    GovernanceError,
    InvalidDuration,
    NoVotingPower,
    ProposalNotFound,
    StorageError,
    Unauthorized,
    ValidationError,
    VotingClosed,
    VotingStillOpen,
    create_validation_error,
)

__all__ = [
    # Base
    "BallotLedgerError",
    "ErrorCategory",
    "ErrorContext",
    "ErrorSeverity",
    # Ambient
    "ValidationError",
    "ConfigurationError",
    "StorageError",
    "create_validation_error",
    # Governance
    "GovernanceError",
    "Unauthorized",
    "InvalidDuration",
    "ProposalNotFound",
    "VotingClosed",
    "AlreadyVoted",
    "NoVotingPower",
    "VotingStillOpen",
    "AlreadyExecuted",
]
