"""Yield platform adapters.

An integrator holds basket assets on a pool's behalf. Part of each balance
is idle cash (held at the integrator's ledger address) and the rest is
lent to the platform, where it may accrue interest.
"""

from __future__ import annotations

import copy
from typing import Any, Protocol

import structlog

from pegpool.constants import SCALE
from pegpool.ledger import InMemoryLedger, InsufficientBalanceError

logger = structlog.get_logger()


class PlatformIntegration(Protocol):
    address: str

    def deposit(self, asset: str, amount: int, has_tx_fee: bool) -> int:
        """Lend amount of idle cash; returns the amount credited."""
        ...

    def withdraw(
        self, recipient: str, asset: str, amount: int, total_amount: int, has_tx_fee: bool
    ) -> None:
        """Recall total_amount from the platform and send amount to recipient."""
        ...

    def withdraw_raw(self, recipient: str, asset: str, amount: int) -> None:
        """Send amount of idle cash to recipient."""
        ...

    def check_balance(self, asset: str) -> int:
        """Amount currently lent to the platform."""
        ...


class InMemoryIntegration:
    """Platform simulated on top of an InMemoryLedger.

    Lent balances are tracked separately from the ledger; accrue() grows
    them to simulate interest.
    """

    def __init__(self, address: str, ledger: InMemoryLedger) -> None:
        self.address = address.lower()
        self.ledger = ledger
        self._lent: dict[str, int] = {}

    def cash(self, asset: str) -> int:
        return self.ledger.balance_of(asset, self.address)

    def check_balance(self, asset: str) -> int:
        return self._lent.get(asset.lower(), 0)

    def deposit(self, asset: str, amount: int, has_tx_fee: bool) -> int:
        asset = asset.lower()
        if amount == 0:
            return 0
        # Idle cash leaves the ledger when it is lent out
        self.ledger.burn(asset, self.address, amount)
        credited = amount
        if has_tx_fee:
            credited -= amount * self.ledger.transfer_fee_of(asset) // SCALE
        self._lent[asset] = self._lent.get(asset, 0) + credited
        logger.debug("integration_deposit", integration=self.address, asset=asset, amount=credited)
        return credited

    def withdraw(
        self, recipient: str, asset: str, amount: int, total_amount: int, has_tx_fee: bool
    ) -> None:
        asset = asset.lower()
        if total_amount > 0:
            lent = self._lent.get(asset, 0)
            if lent < total_amount:
                raise InsufficientBalanceError(
                    f"Platform holds {lent} of {asset}, cannot withdraw {total_amount}"
                )
            self._lent[asset] = lent - total_amount
            self.ledger.mint(asset, self.address, total_amount)
        self.withdraw_raw(recipient, asset, amount)

    def withdraw_raw(self, recipient: str, asset: str, amount: int) -> None:
        if amount == 0:
            return
        self.ledger.transfer(asset, self.address, recipient, amount)
        logger.debug(
            "integration_withdraw",
            integration=self.address,
            asset=asset,
            recipient=recipient,
            amount=amount,
        )

    def accrue(self, asset: str, amount: int) -> None:
        """Grow the lent balance by amount of interest."""
        asset = asset.lower()
        self._lent[asset] = self._lent.get(asset, 0) + amount

    def snapshot(self) -> Any:
        return copy.deepcopy(self._lent)

    def restore(self, state: Any) -> None:
        self._lent = copy.deepcopy(state)
