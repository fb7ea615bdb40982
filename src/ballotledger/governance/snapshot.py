"""
JSON snapshots of ledger state.
"""

import logging

logger = logging.getLogger(__name__)
import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from ..errors.exceptions import BallotLedgerError, StorageError
from .core import ProposalLedger
from .observability import GovernanceEvents
from .weights import WeightProvider

SNAPSHOT_VERSION = 1


def save_ledger(ledger: ProposalLedger, path: Union[str, Path]) -> Path:
    """Write the ledger state to ``path`` atomically."""
    path = Path(path)
    payload = {"version": SNAPSHOT_VERSION, "ledger": ledger.to_dict()}

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), suffix=".json.tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, sort_keys=True)
            os.replace(tmp_name, path)
        except Exception:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
    except OSError as e:
        raise StorageError(f"Failed to write snapshot: {e}", path=str(path), cause=e)

    logger.info(f"Saved {ledger.get_proposal_count()} proposals to {path}")
    return path


def load_ledger(
    path: Union[str, Path],
    weights: WeightProvider,
    events: Optional[GovernanceEvents] = None,
) -> ProposalLedger:
    """Restore a ledger previously written by ``save_ledger``."""
    path = Path(path)

    try:
        with path.open("r", encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, ValueError) as e:
        raise StorageError(f"Failed to read snapshot: {e}", path=str(path), cause=e)

    if not isinstance(payload, dict) or payload.get("version") != SNAPSHOT_VERSION:
        raise StorageError("Unsupported snapshot format", path=str(path))

    try:
        ledger = ProposalLedger.from_dict(payload["ledger"], weights, events)
    except (KeyError, TypeError) as e:
        raise StorageError(f"Malformed snapshot: {e}", path=str(path), cause=e)
    except BallotLedgerError as e:
        raise StorageError(f"Invalid snapshot contents: {e.message}", path=str(path), cause=e)

    logger.info(f"Loaded {ledger.get_proposal_count()} proposals from {path}")
    return ledger
