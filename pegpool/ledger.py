"""Token bookkeeping consumed by pools.

Pools never hold balances themselves: every asset and the pool token live
in a TokenLedger keyed by (token, account). The in-memory ledger supports
tokens that charge a fee on transfer so that pools can measure what
actually arrived.
"""

from __future__ import annotations

import copy
from collections import defaultdict
from typing import Any, Protocol

import structlog

from pegpool.basket.errors import PoolError
from pegpool.constants import SCALE

logger = structlog.get_logger()


class LedgerError(PoolError):
    """Token movement rejected by the ledger."""

    pass


class InsufficientBalanceError(LedgerError):
    pass


class TokenLedger(Protocol):
    def balance_of(self, token: str, account: str) -> int: ...

    def total_supply(self, token: str) -> int: ...

    def transfer(self, token: str, sender: str, recipient: str, amount: int) -> int:
        """Move amount; returns what the recipient received."""
        ...

    def mint(self, token: str, account: str, amount: int) -> None: ...

    def burn(self, token: str, account: str, amount: int) -> None: ...


class InMemoryLedger:
    """Dictionary-backed ledger.

    Addresses are compared case-insensitively. A token registered with a
    transfer fee burns that fraction of every transfer.
    """

    def __init__(self) -> None:
        self._balances: dict[str, dict[str, int]] = defaultdict(dict)
        self._supply: dict[str, int] = defaultdict(int)
        self._transfer_fees: dict[str, int] = {}

    def set_transfer_fee(self, token: str, rate: int) -> None:
        """Charge rate (1e18 = 100%) on every transfer of token."""
        if not 0 <= rate < SCALE:
            raise ValueError(f"Transfer fee must be in [0, 1e18), got {rate}")
        self._transfer_fees[token.lower()] = rate

    def transfer_fee_of(self, token: str) -> int:
        return self._transfer_fees.get(token.lower(), 0)

    def balance_of(self, token: str, account: str) -> int:
        return self._balances[token.lower()].get(account.lower(), 0)

    def total_supply(self, token: str) -> int:
        return self._supply[token.lower()]

    def transfer(self, token: str, sender: str, recipient: str, amount: int) -> int:
        token, sender, recipient = token.lower(), sender.lower(), recipient.lower()
        if amount < 0:
            raise ValueError(f"Transfer amount must be non-negative, got {amount}")
        balances = self._balances[token]
        held = balances.get(sender, 0)
        if held < amount:
            raise InsufficientBalanceError(
                f"Insufficient balance: {sender} holds {held} of {token}, needs {amount}"
            )

        fee = amount * self._transfer_fees.get(token, 0) // SCALE
        received = amount - fee
        balances[sender] = held - amount
        balances[recipient] = balances.get(recipient, 0) + received
        self._supply[token] -= fee
        return received

    def mint(self, token: str, account: str, amount: int) -> None:
        token, account = token.lower(), account.lower()
        balances = self._balances[token]
        balances[account] = balances.get(account, 0) + amount
        self._supply[token] += amount

    def burn(self, token: str, account: str, amount: int) -> None:
        token, account = token.lower(), account.lower()
        balances = self._balances[token]
        held = balances.get(account, 0)
        if held < amount:
            raise InsufficientBalanceError(
                f"Burn exceeds balance: {account} holds {held} of {token}, needs {amount}"
            )
        balances[account] = held - amount
        self._supply[token] -= amount

    def snapshot(self) -> Any:
        return copy.deepcopy((self._balances, self._supply, self._transfer_fees))

    def restore(self, state: Any) -> None:
        self._balances, self._supply, self._transfer_fees = copy.deepcopy(state)
