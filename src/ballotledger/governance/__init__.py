"""
Weighted Governance Ledger.

This module provides the proposal ledger and its collaborators:
- Admin-gated, time-bounded proposal creation
- One weighted vote per identity per proposal
- Permissionless finalization once voting closes
- Pluggable weight providers (token balances)
- Hash-chained notification log and audit trail
- JSON snapshots of ledger state
"""

from .core import (
    MAX_UINT256,
    LedgerConfig,
    Proposal,
    ProposalLedger,
    ProposalStatus,
)
from .observability import (
    AuditTrail,
    EventType,
    GovernanceEvent,
    GovernanceEvents,
)
from .snapshot import load_ledger, save_ledger
from .weights import TokenBalances, WeightProvider

__all__ = [
    # Core
    "MAX_UINT256",
    "LedgerConfig",
    "Proposal",
    "ProposalLedger",
    "ProposalStatus",

    # Weights
    "WeightProvider",
    "TokenBalances",

    # Observability
    "AuditTrail",
    "EventType",
    "GovernanceEvent",
    "GovernanceEvents",

    # Snapshots
    "load_ledger",
    "save_ledger",
]
