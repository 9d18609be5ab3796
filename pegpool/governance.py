"""Role checks for privileged pool operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from pegpool.basket.errors import AuthorizationError


class AccessControl(Protocol):
    def is_governor(self, account: str) -> bool: ...

    def is_savings_manager(self, account: str) -> bool: ...

    def is_keeper(self, account: str) -> bool: ...


@dataclass(frozen=True)
class StaticAccessControl:
    """Fixed role assignment.

    Attributes:
        governor: Account allowed to change parameters
        savings_manager: Account allowed to collect interest
        keepers: Accounts allowed to flag peg loss besides the governor
    """

    governor: str
    savings_manager: str | None = None
    keepers: frozenset[str] = field(default_factory=frozenset)

    def is_governor(self, account: str) -> bool:
        return account.lower() == self.governor.lower()

    def is_savings_manager(self, account: str) -> bool:
        return self.savings_manager is not None and account.lower() == self.savings_manager.lower()

    def is_keeper(self, account: str) -> bool:
        return account.lower() in {k.lower() for k in self.keepers}


def require_governor(access: AccessControl, account: str) -> None:
    if not access.is_governor(account):
        raise AuthorizationError("Only governor can execute")


def require_governor_or_keeper(access: AccessControl, account: str) -> None:
    if not (access.is_governor(account) or access.is_keeper(account)):
        raise AuthorizationError("Only governor or keeper can execute")


def require_savings_manager(access: AccessControl, account: str) -> None:
    if not access.is_savings_manager(account):
        raise AuthorizationError("Must be savings manager")
