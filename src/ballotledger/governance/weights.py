"""
Voting weight sources for the proposal ledger.

The ledger never stores voting power itself. It asks a ``WeightProvider`` for
the caller's current balance at the moment a vote is cast, so weight can
change between proposal creation and any individual vote.
"""

import logging

logger = logging.getLogger(__name__)
from abc import ABC, abstractmethod
from typing import Dict, Optional

from ..errors.exceptions import ValidationError, create_validation_error


class WeightProvider(ABC):
    """Abstract balance lookup consumed by the ledger."""

    @abstractmethod
    def balance_of(self, address: str) -> int:
        """Return the current voting weight of ``address``.

        Must be free of side effects visible to the ledger.
        """
        pass


class TokenBalances(WeightProvider):
    """In-memory fungible token whose balances act as voting weight."""

    def __init__(self, balances: Optional[Dict[str, int]] = None):
        """Initialize token balances."""
        self._balances: Dict[str, int] = {}
        self._total_supply = 0

        for address, amount in (balances or {}).items():
            self.mint(address, amount)

    @property
    def total_supply(self) -> int:
        """Total number of tokens in circulation."""
        return self._total_supply

    def balance_of(self, address: str) -> int:
        """Get the token balance of an address."""
        return self._balances.get(address, 0)

    def mint(self, to: str, amount: int) -> None:
        """Create ``amount`` new tokens for ``to``."""
        if not to:
            raise ValidationError("Mint recipient must be provided", field="to")
        self._validate_amount(amount)

        self._balances[to] = self.balance_of(to) + amount
        self._total_supply += amount
        logger.debug(f"Minted {amount} tokens to {to}")

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """Move ``amount`` tokens from ``sender`` to ``recipient``."""
        if not recipient:
            raise ValidationError("Transfer recipient must be provided", field="recipient")
        self._validate_amount(amount)

        balance = self.balance_of(sender)
        if balance < amount:
            raise ValidationError(
                f"Insufficient balance: {sender} holds {balance}, needs {amount}",
                field="amount",
                value=amount,
                expected=f"<= {balance}",
            )

        self._balances[sender] = balance - amount
        self._balances[recipient] = self.balance_of(recipient) + amount
        logger.debug(f"Transferred {amount} tokens from {sender} to {recipient}")

    def to_dict(self) -> Dict[str, int]:
        """Convert balances to dictionary."""
        return {address: amount for address, amount in self._balances.items() if amount}

    @staticmethod
    def _validate_amount(amount: int) -> None:
        # bool is an int subclass but never a token amount
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
            raise create_validation_error("amount", amount, "non-negative integer")
