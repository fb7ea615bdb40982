"""
Governance ledger demonstration.

This script walks one proposal through its whole lifecycle: creation by the
admin, weighted voting, rejected duplicate and late votes, and finalization,
using the real wall clock.
"""

import logging

logger = logging.getLogger(__name__)
import sys
import tempfile
import time
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ballotledger.governance import (
    EventType,
    GovernanceEvents,
    LedgerConfig,
    ProposalLedger,
    TokenBalances,
    load_ledger,
    save_ledger,
)
from ballotledger.errors import GovernanceError

ADMIN = "0xadmin"
VOTING_SECONDS = 2


def print_section(title: str):
    """Print a section header."""
    logger.info(f"\n{'='*60}")
    logger.info(f"🎯 {title}")
    logger.info('='*60)


def now() -> int:
    return int(time.time())


def demo_setup():
    """Create token balances, the event channel and the ledger."""
    print_section("Ledger Setup")

    token = TokenBalances({"0xalice": 10, "0xbob": 25, "0xcarol": 0})
    events = GovernanceEvents()
    events.add_event_listener(
        EventType.VOTED,
        lambda event: logger.info(f"   📨 Voted: {event.voter_address} +{event.metadata['weight']}"),
    )

    ledger = ProposalLedger(LedgerConfig(admin_address=ADMIN), token, events)
    logger.info(f"✅ Ledger created, admin {ledger.admin_address}")
    logger.info(f"   - Token supply: {token.total_supply}")

    return token, events, ledger


def try_operation(description: str, operation):
    """Run an operation and log success or the rejection reason."""
    try:
        result = operation()
        logger.info(f"✅ {description}: {result}")
    except GovernanceError as e:
        logger.info(f"❌ {description}: {e.error_code}")


def demo_lifecycle(token, ledger):
    """Walk a proposal from creation to finalization."""
    print_section("Proposal Lifecycle")

    try_operation("Non-admin creates", lambda: ledger.create_proposal("0xalice", "Adopt v2", VOTING_SECONDS, now()))
    proposal_id = ledger.create_proposal(ADMIN, "Adopt v2", VOTING_SECONDS, now())
    logger.info(f"✅ Proposal {proposal_id} created")

    try_operation("Alice votes", lambda: ledger.cast_vote("0xalice", proposal_id, now()))
    try_operation("Alice votes again", lambda: ledger.cast_vote("0xalice", proposal_id, now()))
    try_operation("Carol votes without tokens", lambda: ledger.cast_vote("0xcarol", proposal_id, now()))

    token.transfer("0xbob", "0xcarol", 5)
    try_operation("Carol votes after a transfer", lambda: ledger.cast_vote("0xcarol", proposal_id, now()))
    try_operation("Early finalize", lambda: ledger.finalize_proposal("0xbob", proposal_id, now()))

    logger.info(f"⏳ Waiting {VOTING_SECONDS}s for voting to close...")
    time.sleep(VOTING_SECONDS)

    try_operation("Bob votes late", lambda: ledger.cast_vote("0xbob", proposal_id, now()))
    try_operation("Finalize", lambda: ledger.finalize_proposal("0xbob", proposal_id, now()))
    try_operation("Finalize again", lambda: ledger.finalize_proposal("0xbob", proposal_id, now()))

    description, vote_count, deadline, executed = ledger.get_proposal(proposal_id).as_tuple()
    logger.info(f"📋 {description}: {vote_count} votes, deadline {deadline}, executed={executed}")

    return proposal_id


def demo_audit_and_snapshot(token, events, ledger):
    """Show the audit trail and a snapshot round trip."""
    print_section("Audit Trail & Snapshot")

    summary = events.get_audit_trail().get_audit_summary()
    logger.info(f"✅ {summary['total_events']} events, integrity={summary['integrity_verified']}")
    for event_type, count in summary["event_counts"].items():
        logger.info(f"   - {event_type}: {count}")

    with tempfile.TemporaryDirectory() as tmp:
        path = save_ledger(ledger, Path(tmp) / "ledger.json")
        restored = load_ledger(path, token)
        logger.info(f"✅ Restored {restored.get_proposal_count()} proposal(s) from {path.name}")


def main():
    """Run the demonstration."""
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    logger.info("🚀 BallotLedger Governance Demo")

    token, events, ledger = demo_setup()
    demo_lifecycle(token, ledger)
    demo_audit_and_snapshot(token, events, ledger)

    logger.info("\n🎉 Demo complete")


if __name__ == "__main__":
    main()
