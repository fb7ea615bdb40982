"""BallotLedger: a weighted governance-voting ledger."""

from .governance import (
    LedgerConfig,
    ProposalLedger,
    TokenBalances,
    WeightProvider,
)

__version__ = "0.1.0"

__all__ = [
    "LedgerConfig",
    "ProposalLedger",
    "TokenBalances",
    "WeightProvider",
]
