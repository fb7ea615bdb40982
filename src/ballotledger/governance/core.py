"""
Core governance types and the proposal ledger.

This module defines the proposal record, the ledger configuration and the
``ProposalLedger`` state machine. Every operation takes the calling identity
and, where time matters, the current time as explicit arguments; the ledger
itself never reads a clock or any ambient caller state.
"""

import logging

logger = logging.getLogger(__name__)
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Tuple

from ..errors.exceptions import (
    AlreadyExecuted,
    AlreadyVoted,
    ConfigurationError,
    GovernanceError,
    InvalidDuration,
    NoVotingPower,
    ProposalNotFound,
    Unauthorized,
    ValidationError,
    VotingClosed,
    VotingStillOpen,
)
from .observability import EventType, GovernanceEvents
from .weights import WeightProvider

# Largest deadline an unsigned 256-bit timestamp can hold
MAX_UINT256 = 2**256 - 1


def _is_uint(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class ProposalStatus(Enum):
    """Lifecycle status of a proposal at a given instant."""

    OPEN = "open"
    CLOSED = "closed"
    FINALIZED = "finalized"


@dataclass
class Proposal:
    """A governance proposal."""

    description: str
    deadline: int
    vote_count: int = 0
    executed: bool = False

    def is_open(self, now: int) -> bool:
        """Voting window is half-open: open strictly before the deadline."""
        return now < self.deadline

    def status(self, now: int) -> ProposalStatus:
        """Get the lifecycle status at time ``now``."""
        if self.executed:
            return ProposalStatus.FINALIZED
        if self.is_open(now):
            return ProposalStatus.OPEN
        return ProposalStatus.CLOSED

    def as_tuple(self) -> Tuple[str, int, int, bool]:
        """Return ``(description, vote_count, deadline, executed)``."""
        return (self.description, self.vote_count, self.deadline, self.executed)

    def to_dict(self) -> Dict[str, Any]:
        """Convert proposal to dictionary."""
        return {
            "description": self.description,
            "vote_count": self.vote_count,
            "deadline": self.deadline,
            "executed": self.executed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Proposal":
        """Create proposal from dictionary."""
        proposal = cls(
            description=data["description"],
            deadline=data["deadline"],
            vote_count=data.get("vote_count", 0),
            executed=data.get("executed", False),
        )

        if not isinstance(proposal.description, str):
            raise ValidationError(
                "Proposal description must be text",
                field="description",
                value=proposal.description,
                expected="str",
            )

        if not isinstance(proposal.executed, bool):
            raise ValidationError(
                "Proposal executed flag must be a boolean",
                field="executed",
                value=proposal.executed,
                expected="bool",
            )

        if not _is_uint(proposal.deadline) or not _is_uint(proposal.vote_count):
            raise ValidationError("Proposal deadline and vote count must be non-negative integers")

        return proposal


@dataclass(frozen=True)
class LedgerConfig:
    """Configuration for the proposal ledger."""

    admin_address: str
    max_timestamp: int = MAX_UINT256

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.validate()

    def validate(self) -> None:
        """Validate configuration."""
        if not isinstance(self.admin_address, str) or not self.admin_address:
            raise ConfigurationError(
                "Admin address must be a non-empty string",
                config_key="admin_address",
                config_value=self.admin_address,
            )

        if not _is_uint(self.max_timestamp) or self.max_timestamp == 0:
            raise ConfigurationError(
                "Max timestamp must be a positive integer",
                config_key="max_timestamp",
                config_value=self.max_timestamp,
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "admin_address": self.admin_address,
            "max_timestamp": self.max_timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LedgerConfig":
        """Create configuration from dictionary."""
        if "admin_address" not in data:
            raise ConfigurationError("Missing admin address", config_key="admin_address")

        return cls(
            admin_address=data["admin_address"],
            max_timestamp=data.get("max_timestamp", MAX_UINT256),
        )


class ProposalLedger:
    """Append-only ledger of weighted, time-bounded proposals.

    Proposals are identified by their zero-based position in the ledger. Only
    the configured admin may create proposals; any identity with positive
    weight may vote once per proposal while it is open; anyone may finalize a
    proposal once its deadline has passed.

    Operations are expected to be delivered one at a time. Each either commits
    fully or raises a ``GovernanceError`` subclass without touching state.
    """

    def __init__(
        self,
        config: LedgerConfig,
        weights: WeightProvider,
        events: Optional[GovernanceEvents] = None,
    ):
        """Initialize proposal ledger."""
        config.validate()
        self.config = config
        self.weights = weights
        self.events = events if events is not None else GovernanceEvents()

        self._proposals: List[Proposal] = []
        self._voters: List[Set[str]] = []

    @property
    def admin_address(self) -> str:
        return self.config.admin_address

    def create_proposal(
        self,
        caller: str,
        description: str,
        duration_seconds: int,
        now: int,
    ) -> int:
        """Create a new proposal open for ``duration_seconds`` from ``now``."""
        if caller != self.config.admin_address:
            self._reject(
                Unauthorized(
                    f"{caller} is not allowed to create proposals",
                    caller=caller,
                ),
                "create_proposal",
            )

        self._require_timestamp(now)

        if not isinstance(description, str):
            raise ValidationError("Description must be text", field="description", value=description)

        if not _is_uint(duration_seconds):
            self._reject(
                InvalidDuration(
                    "Duration must be a non-negative integer",
                    caller=caller,
                    duration=duration_seconds,
                ),
                "create_proposal",
            )

        deadline = now + duration_seconds
        if deadline > self.config.max_timestamp:
            self._reject(
                InvalidDuration(
                    f"Deadline {now} + {duration_seconds} exceeds {self.config.max_timestamp}",
                    caller=caller,
                    duration=duration_seconds,
                ),
                "create_proposal",
            )

        proposal = Proposal(description=description, deadline=deadline)
        self._proposals.append(proposal)
        self._voters.append(set())
        proposal_id = len(self._proposals) - 1

        logger.info(f"Proposal {proposal_id} created by {caller}, deadline {deadline}")
        self.events.emit_event(
            EventType.PROPOSAL_CREATED,
            timestamp=now,
            proposal_id=proposal_id,
            metadata={"description": description, "deadline": deadline},
        )

        return proposal_id

    def cast_vote(self, caller: str, proposal_id: int, now: int) -> int:
        """Cast the caller's full current weight in favour of a proposal.

        Returns the weight that was added to the tally.
        """
        proposal = self._get(proposal_id, "cast_vote")
        self._require_timestamp(now)

        # An executed proposal stays closed whatever `now` is passed
        if proposal.executed or not proposal.is_open(now):
            self._reject(
                VotingClosed(
                    f"Voting on proposal {proposal_id} closed at {proposal.deadline}",
                    proposal_id=proposal_id,
                    caller=caller,
                ),
                "cast_vote",
            )

        voters = self._voters[proposal_id]
        if caller in voters:
            self._reject(
                AlreadyVoted(
                    f"{caller} has already voted on proposal {proposal_id}",
                    proposal_id=proposal_id,
                    caller=caller,
                ),
                "cast_vote",
            )

        weight = self.weights.balance_of(caller)
        if not isinstance(weight, int) or isinstance(weight, bool):
            raise ValidationError(
                f"Weight provider returned {weight!r} for {caller}",
                field="weight",
                value=weight,
                expected="integer",
            )

        if weight <= 0:
            self._reject(
                NoVotingPower(
                    f"{caller} has no voting power",
                    proposal_id=proposal_id,
                    caller=caller,
                ),
                "cast_vote",
            )

        # Tally and vote record change together
        proposal.vote_count += weight
        voters.add(caller)

        logger.info(f"{caller} voted on proposal {proposal_id} with weight {weight}")
        self.events.emit_event(
            EventType.VOTED,
            timestamp=now,
            proposal_id=proposal_id,
            voter_address=caller,
            metadata={"weight": weight},
        )

        return weight

    def finalize_proposal(self, caller: str, proposal_id: int, now: int) -> None:
        """Mark a closed proposal as executed. Any caller may do this."""
        proposal = self._get(proposal_id, "finalize_proposal")
        self._require_timestamp(now)

        if proposal.executed:
            self._reject(
                AlreadyExecuted(
                    f"Proposal {proposal_id} has already been executed",
                    proposal_id=proposal_id,
                    caller=caller,
                ),
                "finalize_proposal",
            )

        if proposal.is_open(now):
            self._reject(
                VotingStillOpen(
                    f"Voting on proposal {proposal_id} is open until {proposal.deadline}",
                    proposal_id=proposal_id,
                    caller=caller,
                ),
                "finalize_proposal",
            )

        proposal.executed = True

        logger.info(f"Proposal {proposal_id} executed by {caller} with {proposal.vote_count} votes")
        self.events.emit_event(
            EventType.PROPOSAL_EXECUTED,
            timestamp=now,
            proposal_id=proposal_id,
            metadata={"vote_count": proposal.vote_count},
        )

    def get_proposal(self, proposal_id: int) -> Proposal:
        """Get a detached copy of a proposal."""
        return replace(self._get(proposal_id, "get_proposal"))

    def get_proposal_count(self) -> int:
        """Get the number of proposals ever created."""
        return len(self._proposals)

    def has_voted(self, proposal_id: int, voter_address: str) -> bool:
        """Check whether an identity has a recorded vote on a proposal."""
        self._get(proposal_id, "has_voted")
        return voter_address in self._voters[proposal_id]

    def proposal_status(self, proposal_id: int, now: int) -> ProposalStatus:
        """Get the lifecycle status of a proposal at time ``now``."""
        return self._get(proposal_id, "proposal_status").status(now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert ledger state to dictionary."""
        return {
            "config": self.config.to_dict(),
            "proposals": [proposal.to_dict() for proposal in self._proposals],
            "voters": [sorted(voters) for voters in self._voters],
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        weights: WeightProvider,
        events: Optional[GovernanceEvents] = None,
    ) -> "ProposalLedger":
        """Restore a ledger from dictionary.

        Events are not replayed; ``events`` only receives what happens after
        the restore.
        """
        ledger = cls(LedgerConfig.from_dict(data["config"]), weights, events)

        proposals = [Proposal.from_dict(item) for item in data.get("proposals", [])]
        voters = []
        for item in data.get("voters", []):
            if not isinstance(item, list) or not all(isinstance(voter, str) for voter in item):
                raise ValidationError(
                    "Vote records must be lists of addresses",
                    field="voters",
                    value=item,
                    expected="list of str",
                )
            voters.append(set(item))
        if len(voters) != len(proposals):
            raise ValidationError(
                "Vote records do not match proposals",
                field="voters",
                value=len(voters),
                expected=len(proposals),
            )

        ledger._proposals = proposals
        ledger._voters = voters
        return ledger

    def _get(self, proposal_id: int, operation: str) -> Proposal:
        if (
            not isinstance(proposal_id, int)
            or isinstance(proposal_id, bool)
            or not 0 <= proposal_id < len(self._proposals)
        ):
            self._reject(
                ProposalNotFound(
                    f"Proposal {proposal_id} not found",
                    proposal_id=proposal_id if isinstance(proposal_id, int) else None,
                ),
                operation,
            )
        return self._proposals[proposal_id]

    @staticmethod
    def _require_timestamp(now: int) -> None:
        if not _is_uint(now):
            raise ValidationError(
                "Current time must be a non-negative integer",
                field="now",
                value=now,
                expected="non-negative integer",
            )

    @staticmethod
    def _reject(error: GovernanceError, operation: str) -> None:
        error.context.component = "ProposalLedger"
        error.context.operation = operation
        error.context.caller = error.caller
        logger.debug(f"Rejected {operation}: {error}")
        raise error
