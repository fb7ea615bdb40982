"""
Integration tests for governance system.

This module walks complete proposal lifecycles through the ledger, the token
balances that weight votes, the notification channel, and snapshots.
"""

import logging

logger = logging.getLogger(__name__)
import pytest
from unittest.mock import Mock

from ballotledger.governance import (
    EventType,
    GovernanceEvents,
    LedgerConfig,
    ProposalLedger,
    ProposalStatus,
    TokenBalances,
    load_ledger,
    save_ledger,
)
from ballotledger.errors.exceptions import (
    AlreadyExecuted,
    AlreadyVoted,
    GovernanceError,
    NoVotingPower,
    VotingClosed,
    VotingStillOpen,
)

ADMIN = "0xadmin"


class TestGovernanceIntegration:
    """Test integrated governance system functionality."""

    @pytest.fixture
    def token(self):
        """Create token balances for tests."""
        return TokenBalances({"A": 10, "B": 4})

    @pytest.fixture
    def events(self):
        """Create event channel for tests."""
        return GovernanceEvents()

    @pytest.fixture
    def ledger(self, token, events):
        """Create proposal ledger for tests."""
        return ProposalLedger(LedgerConfig(admin_address=ADMIN), token, events)

    def test_adopt_v2_lifecycle(self, ledger, events):
        """Test the full create, vote, close, finalize lifecycle."""
        proposal_id = ledger.create_proposal(ADMIN, "Adopt v2", 100, now=0)
        assert ledger.proposal_status(proposal_id, 0) == ProposalStatus.OPEN

        assert ledger.cast_vote("A", proposal_id, now=50) == 10
        assert ledger.get_proposal(proposal_id).vote_count == 10

        with pytest.raises(AlreadyVoted):
            ledger.cast_vote("A", proposal_id, now=60)
        assert ledger.get_proposal(proposal_id).vote_count == 10

        with pytest.raises(VotingClosed):
            ledger.cast_vote("B", proposal_id, now=150)
        assert ledger.proposal_status(proposal_id, 150) == ProposalStatus.CLOSED

        ledger.finalize_proposal("B", proposal_id, now=150)

        assert ledger.get_proposal(proposal_id).as_tuple() == ("Adopt v2", 10, 100, True)
        assert ledger.proposal_status(proposal_id, 150) == ProposalStatus.FINALIZED

        with pytest.raises(AlreadyExecuted):
            ledger.finalize_proposal("A", proposal_id, now=151)

        assert [e.event_type for e in events.audit_trail.get_proposal_events(proposal_id)] == [
            EventType.PROPOSAL_CREATED,
            EventType.VOTED,
            EventType.PROPOSAL_EXECUTED,
        ]
        assert events.verify_audit_integrity() is True

    def test_zero_weight_voter_can_retry(self, ledger, token):
        """Test that a rejected zero-weight vote leaves no record."""
        proposal_id = ledger.create_proposal(ADMIN, "Adopt v2", 100, now=0)

        with pytest.raises(NoVotingPower):
            ledger.cast_vote("C", proposal_id, now=10)
        assert ledger.has_voted(proposal_id, "C") is False

        token.transfer("B", "C", 4)

        assert ledger.cast_vote("C", proposal_id, now=20) == 4
        assert ledger.has_voted(proposal_id, "C") is True

        # B gave away everything
        with pytest.raises(NoVotingPower):
            ledger.cast_vote("B", proposal_id, now=30)

    def test_finalize_requires_closed_window(self, ledger):
        """Test finalization timing."""
        proposal_id = ledger.create_proposal(ADMIN, "Adopt v2", 100, now=0)

        for now in (0, 50, 99):
            with pytest.raises(VotingStillOpen):
                ledger.finalize_proposal("A", proposal_id, now=now)

        ledger.finalize_proposal("A", proposal_id, now=100)

    def test_transferred_tokens_vote_twice(self, ledger, token):
        """Test that weight follows the balance at vote time.

        The same tokens can be counted for two holders if they move between
        votes; weight is not snapshotted at creation.
        """
        proposal_id = ledger.create_proposal(ADMIN, "Adopt v2", 100, now=0)

        ledger.cast_vote("A", proposal_id, now=1)
        token.transfer("A", "D", 10)
        ledger.cast_vote("D", proposal_id, now=2)

        assert ledger.get_proposal(proposal_id).vote_count == 20

    def test_listeners_observe_committed_state(self, ledger, events):
        """Test that notifications arrive after the state change."""
        seen = []

        def on_vote(event):
            seen.append((event.voter_address, ledger.get_proposal(event.proposal_id).vote_count))

        events.add_event_listener(EventType.VOTED, on_vote)
        proposal_id = ledger.create_proposal(ADMIN, "Adopt v2", 100, now=0)
        ledger.cast_vote("A", proposal_id, now=1)
        ledger.cast_vote("B", proposal_id, now=2)

        assert seen == [("A", 10), ("B", 14)]

    def test_failing_listener_does_not_roll_back(self, ledger, events):
        """Test that a broken observer cannot undo a committed vote."""
        events.add_event_listener(EventType.VOTED, Mock(side_effect=RuntimeError("boom")))
        proposal_id = ledger.create_proposal(ADMIN, "Adopt v2", 100, now=0)

        assert ledger.cast_vote("A", proposal_id, now=1) == 10
        assert ledger.has_voted(proposal_id, "A") is True

    def test_rejections_emit_nothing(self, ledger, events):
        """Test that failed operations leave the notification log untouched."""
        proposal_id = ledger.create_proposal(ADMIN, "Adopt v2", 100, now=0)
        before = len(events.audit_trail.events)

        for call in (
            lambda: ledger.create_proposal("A", "Nope", 10, now=0),
            lambda: ledger.cast_vote("C", proposal_id, now=1),
            lambda: ledger.finalize_proposal("A", proposal_id, now=1),
            lambda: ledger.cast_vote("A", proposal_id, now=100),
        ):
            with pytest.raises(GovernanceError):
                call()

        assert len(events.audit_trail.events) == before

    def test_snapshot_resume(self, tmp_path, ledger, token):
        """Test stopping and resuming the ledger from a snapshot."""
        proposal_id = ledger.create_proposal(ADMIN, "Adopt v2", 100, now=0)
        ledger.cast_vote("A", proposal_id, now=10)
        path = save_ledger(ledger, tmp_path / "ledger.json")

        resumed = load_ledger(path, token)
        resumed.cast_vote("B", proposal_id, now=20)
        resumed.finalize_proposal("A", proposal_id, now=100)

        assert resumed.get_proposal(proposal_id).as_tuple() == ("Adopt v2", 14, 100, True)
        assert ledger.get_proposal(proposal_id).vote_count == 10
