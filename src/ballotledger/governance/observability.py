"""
Notification channel and audit trail for the proposal ledger.

The ledger reports every committed state transition to a ``GovernanceEvents``
channel. Events are appended to a hash-chained audit trail and then fanned out
to listeners registered per event type. Nothing here writes back into ledger
state.
"""

import logging

logger = logging.getLogger(__name__)
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from ..crypto.hashing import Hash, SHA256Hasher


class EventType(Enum):
    """Types of governance events."""

    PROPOSAL_CREATED = "proposal_created"
    VOTED = "voted"
    PROPOSAL_EXECUTED = "proposal_executed"


@dataclass
class GovernanceEvent:
    """A governance event for audit trail."""

    sequence: int
    event_type: EventType
    timestamp: int
    proposal_id: Optional[int] = None
    voter_address: Optional[str] = None

    # Event metadata
    metadata: Dict[str, Any] = field(default_factory=dict)

    # Cryptographic integrity
    previous_event_hash: str = field(default_factory=lambda: Hash.zero().to_hex())
    event_hash: Optional[str] = None

    def __post_init__(self):
        """Calculate event hash after initialization."""
        self.event_hash = self.calculate_hash()

    @property
    def event_id(self) -> str:
        return f"{self.event_type.value}_{self.sequence}"

    def calculate_hash(self) -> str:
        """Calculate hash of this event chained to its predecessor."""
        event_data = {
            "sequence": self.sequence,
            "event_type": self.event_type.value,
            "timestamp": self.timestamp,
            "proposal_id": self.proposal_id,
            "voter_address": self.voter_address,
            "metadata": self.metadata,
        }

        event_json = json.dumps(event_data, sort_keys=True, default=str)
        return SHA256Hasher.hash_list([self.previous_event_hash, event_json]).to_hex()

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary."""
        return {
            "event_id": self.event_id,
            "sequence": self.sequence,
            "event_type": self.event_type.value,
            "timestamp": self.timestamp,
            "proposal_id": self.proposal_id,
            "voter_address": self.voter_address,
            "metadata": self.metadata,
            "event_hash": self.event_hash,
            "previous_event_hash": self.previous_event_hash,
        }


class AuditTrail:
    """Maintains an append-only audit trail of governance events."""

    def __init__(self):
        """Initialize audit trail."""
        self.events: List[GovernanceEvent] = []
        self.proposal_events: Dict[int, List[GovernanceEvent]] = {}
        self.voter_events: Dict[str, List[GovernanceEvent]] = {}

    @property
    def head_hash(self) -> str:
        """Hash of the most recent event, or the zero hash when empty."""
        if self.events:
            return self.events[-1].event_hash
        return Hash.zero().to_hex()

    def add_event(self, event: GovernanceEvent) -> None:
        """Add an event to the audit trail."""
        # Link to the current head before recording
        event.previous_event_hash = self.head_hash
        event.event_hash = event.calculate_hash()

        self.events.append(event)

        if event.proposal_id is not None:
            self.proposal_events.setdefault(event.proposal_id, []).append(event)

        if event.voter_address:
            self.voter_events.setdefault(event.voter_address, []).append(event)

    def get_proposal_events(self, proposal_id: int) -> List[GovernanceEvent]:
        """Get all events for a proposal."""
        return list(self.proposal_events.get(proposal_id, []))

    def get_voter_events(self, voter_address: str) -> List[GovernanceEvent]:
        """Get all events for a voter."""
        return list(self.voter_events.get(voter_address, []))

    def get_events_by_type(self, event_type: EventType) -> List[GovernanceEvent]:
        """Get all events of one type, in emission order."""
        return [event for event in self.events if event.event_type == event_type]

    def verify_integrity(self) -> bool:
        """Verify the integrity of the audit trail."""
        previous_hash = Hash.zero().to_hex()
        for event in self.events:
            if event.previous_event_hash != previous_hash:
                return False

            if event.event_hash != event.calculate_hash():
                return False

            previous_hash = event.event_hash

        return True

    def get_audit_summary(self) -> Dict[str, Any]:
        """Get audit trail summary."""
        event_counts: Dict[str, int] = {}
        for event in self.events:
            event_type = event.event_type.value
            event_counts[event_type] = event_counts.get(event_type, 0) + 1

        return {
            "total_events": len(self.events),
            "event_counts": event_counts,
            "unique_proposals": len(self.proposal_events),
            "unique_voters": len(self.voter_events),
            "head_hash": self.head_hash,
            "integrity_verified": self.verify_integrity(),
        }


class GovernanceEvents:
    """Notification channel the ledger writes to."""

    def __init__(self):
        """Initialize governance events system."""
        self.audit_trail = AuditTrail()
        self.event_listeners: Dict[EventType, List[Callable[[GovernanceEvent], None]]] = {}

    def add_event_listener(
        self, event_type: EventType, listener: Callable[[GovernanceEvent], None]
    ) -> None:
        """Add an event listener."""
        self.event_listeners.setdefault(event_type, []).append(listener)

    def remove_event_listener(
        self, event_type: EventType, listener: Callable[[GovernanceEvent], None]
    ) -> None:
        """Remove a previously added event listener."""
        listeners = self.event_listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def emit_event(
        self,
        event_type: EventType,
        timestamp: int,
        proposal_id: Optional[int] = None,
        voter_address: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> GovernanceEvent:
        """Emit a governance event."""
        event = GovernanceEvent(
            sequence=len(self.audit_trail.events),
            event_type=event_type,
            timestamp=timestamp,
            proposal_id=proposal_id,
            voter_address=voter_address,
            metadata=metadata or {},
        )

        self.audit_trail.add_event(event)

        # The ledger transition is already committed; listeners only observe it
        for listener in self.event_listeners.get(event_type, []):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Error in event listener for {event.event_id}: {e}", exc_info=True)

        return event

    def get_audit_trail(self) -> AuditTrail:
        """Get the audit trail."""
        return self.audit_trail

    def export_audit_trail(self) -> List[Dict[str, Any]]:
        """Export the full audit trail."""
        return [event.to_dict() for event in self.audit_trail.events]

    def verify_audit_integrity(self) -> bool:
        """Verify the integrity of the audit trail."""
        return self.audit_trail.verify_integrity()
