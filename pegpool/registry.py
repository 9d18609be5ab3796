"""Registry of pools loaded from definition snapshots.

All pools in a registry share one in-memory ledger and one clock, so a
feeder pool can hold the token of the primary pool it nests. Pool tokens
and the primary tokens held by feeders are minted to SNAPSHOT_HOLDER.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import structlog

from pegpool.basket.models import AssetStatus
from pegpool.clock import Clock, SystemClock
from pegpool.config import load_settings_from_env
from pegpool.governance import StaticAccessControl
from pegpool.ledger import InMemoryLedger
from pegpool.models.definitions import (
    FeederPoolDefinition,
    PoolSetDefinition,
    PrimaryPoolDefinition,
)
from pegpool.models.types import normalize_address
from pegpool.pools.feeder import FeederPool
from pegpool.pools.pool import Pool

logger = structlog.get_logger()

# Holder of every pool token minted while seeding snapshots
SNAPSHOT_HOLDER = "0x" + "5" * 40

# Governor of snapshot pools; the quoting service never calls admin operations
SNAPSHOT_GOVERNOR = "0x" + "6" * 40


class UnknownPoolError(LookupError):
    """No pool is registered under the given address."""


class PoolRegistry:
    """Pools keyed by lowercase address."""

    def __init__(self, ledger: InMemoryLedger | None = None, clock: Clock | None = None) -> None:
        self.ledger = ledger or InMemoryLedger()
        self.clock: Clock = clock or SystemClock()
        self._pools: dict[str, Pool] = {}

    def __len__(self) -> int:
        return len(self._pools)

    def __iter__(self) -> Iterator[Pool]:
        return iter(self._pools.values())

    def __contains__(self, address: object) -> bool:
        return isinstance(address, str) and normalize_address(address) in self._pools

    def add(self, pool: Pool) -> None:
        if pool.address in self._pools:
            raise ValueError(f"Pool {pool.address} already registered")
        self._pools[pool.address] = pool

    def get(self, address: str) -> Pool:
        try:
            return self._pools[normalize_address(address)]
        except KeyError:
            raise UnknownPoolError(address) from None

    def addresses(self) -> list[str]:
        return list(self._pools)


def _add_primary(registry: PoolRegistry, definition: PrimaryPoolDefinition) -> Pool:
    pool = Pool(
        address=definition.address,
        assets=[a.to_config() for a in definition.assets],
        ledger=registry.ledger,
        access=StaticAccessControl(governor=SNAPSHOT_GOVERNOR),
        clock=registry.clock,
        settings=definition.pool_settings(load_settings_from_env()),
    )
    for asset in definition.assets:
        registry.ledger.mint(asset.address.lower(), pool.address, int(asset.vault_balance))
    registry.ledger.mint(pool.address, SNAPSHOT_HOLDER, int(definition.total_supply))
    pool.import_state(
        [int(a.vault_balance) for a in definition.assets],
        surplus=int(definition.surplus),
        statuses=[a.status for a in definition.assets],
    )
    registry.add(pool)
    return pool


def _add_feeder(registry: PoolRegistry, definition: FeederPoolDefinition) -> Pool:
    primary = registry.get(definition.primary)
    f_asset = definition.f_asset
    pool = FeederPool(
        address=definition.address,
        primary=primary,
        f_asset=f_asset.to_config(),
        ledger=registry.ledger,
        access=StaticAccessControl(governor=SNAPSHOT_GOVERNOR),
        clock=registry.clock,
        settings=definition.pool_settings(load_settings_from_env("PEGPOOL_FEEDER", feeder=True)),
    )
    m_balance = int(definition.m_asset_vault_balance)
    registry.ledger.transfer(primary.address, SNAPSHOT_HOLDER, pool.address, m_balance)
    registry.ledger.mint(f_asset.address.lower(), pool.address, int(f_asset.vault_balance))
    registry.ledger.mint(pool.address, SNAPSHOT_HOLDER, int(definition.total_supply))
    pool.import_state(
        [m_balance, int(f_asset.vault_balance)],
        surplus=int(definition.surplus),
        statuses=[AssetStatus.NORMAL, f_asset.status],
    )
    registry.add(pool)
    return pool


def build_registry(definitions: PoolSetDefinition, clock: Clock | None = None) -> PoolRegistry:
    """Create and seed every pool of a definition set, in order."""
    registry = PoolRegistry(clock=clock)
    for definition in definitions.pools:
        if isinstance(definition, FeederPoolDefinition):
            _add_feeder(registry, definition)
        else:
            _add_primary(registry, definition)
        logger.info("pool_loaded", pool=definition.address.lower(), kind=definition.kind)
    return registry


def load_registry(path: str | Path | None = None) -> PoolRegistry:
    """Load pools from a JSON definition file.

    The path defaults to PEGPOOL_POOLS_FILE; with neither set the registry
    is empty.
    """
    path = path or os.environ.get("PEGPOOL_POOLS_FILE")
    if not path:
        logger.info("no_pool_definitions", reason="PEGPOOL_POOLS_FILE not set")
        return PoolRegistry()
    definitions = PoolSetDefinition.model_validate_json(Path(path).read_text())
    return build_registry(definitions)


_default_registry: PoolRegistry | None = None


def get_default_registry() -> PoolRegistry:
    """Registry loaded from PEGPOOL_POOLS_FILE on first use."""
    global _default_registry
    if _default_registry is None:
        _default_registry = load_registry()
    return _default_registry
