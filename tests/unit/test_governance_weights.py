"""
Unit tests for voting weight providers.
"""

import logging

logger = logging.getLogger(__name__)
import pytest

from ballotledger.governance.weights import TokenBalances, WeightProvider
from ballotledger.errors.exceptions import ValidationError


class TestTokenBalances:
    """Test TokenBalances class."""

    def test_initial_balances(self):
        """Test seeding balances at construction."""
        token = TokenBalances({"0xalice": 10, "0xbob": 5})

        assert isinstance(token, WeightProvider)
        assert token.balance_of("0xalice") == 10
        assert token.balance_of("0xbob") == 5
        assert token.total_supply == 15

    def test_unknown_address_has_zero_balance(self):
        """Test that unknown holders have no weight."""
        assert TokenBalances().balance_of("0xnobody") == 0

    def test_mint(self):
        """Test minting tokens."""
        token = TokenBalances()

        token.mint("0xalice", 7)
        token.mint("0xalice", 3)

        assert token.balance_of("0xalice") == 10
        assert token.total_supply == 10

    @pytest.mark.parametrize("amount", [-1, 2.5, "10", True])
    def test_mint_invalid_amount(self, amount):
        """Test that mint amounts must be non-negative integers."""
        token = TokenBalances()

        with pytest.raises(ValidationError):
            token.mint("0xalice", amount)

        assert token.total_supply == 0

    def test_mint_requires_recipient(self):
        """Test that minting to an empty address fails."""
        with pytest.raises(ValidationError):
            TokenBalances().mint("", 1)

    def test_transfer(self):
        """Test transferring tokens."""
        token = TokenBalances({"0xalice": 10})

        token.transfer("0xalice", "0xbob", 4)

        assert token.balance_of("0xalice") == 6
        assert token.balance_of("0xbob") == 4
        assert token.total_supply == 10

    def test_transfer_insufficient_balance(self):
        """Test that overdrafts are rejected without moving tokens."""
        token = TokenBalances({"0xalice": 10})

        with pytest.raises(ValidationError) as exc_info:
            token.transfer("0xalice", "0xbob", 11)

        assert exc_info.value.field == "amount"
        assert token.balance_of("0xalice") == 10
        assert token.balance_of("0xbob") == 0

    def test_transfer_to_self(self):
        """Test that a self transfer leaves the balance unchanged."""
        token = TokenBalances({"0xalice": 10})

        token.transfer("0xalice", "0xalice", 10)

        assert token.balance_of("0xalice") == 10

    def test_to_dict_omits_empty_balances(self):
        """Test balance export."""
        token = TokenBalances({"0xalice": 10})
        token.transfer("0xalice", "0xbob", 10)

        assert token.to_dict() == {"0xbob": 10}
