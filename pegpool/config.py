"""Pool configuration.

Settings are frozen dataclasses so that a pool's initial parameters can be
shared between tests and deployments. Governance changes after launch go
through the pool's admin operations, not through these objects.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from pegpool.constants import (
    DEFAULT_AMPLIFICATION,
    DEFAULT_CACHE_SIZE,
    DEFAULT_FEEDER_FEE,
    DEFAULT_FEEDER_MAX_WEIGHT,
    DEFAULT_FEEDER_MIN_WEIGHT,
    DEFAULT_MAX_WEIGHT,
    DEFAULT_MIN_WEIGHT,
    DEFAULT_RECOL_FEE,
    DEFAULT_REDEMPTION_FEE,
    DEFAULT_SWAP_FEE,
)


@dataclass(frozen=True)
class PoolSettings:
    """Initial parameters of a pool.

    Attributes:
        amplification: Unscaled A (100 -> 10_000 internally)
        min_weight: Hard lower weight bound (1e18 = 100%)
        max_weight: Hard upper weight bound
        swap_fee: Rate on swaps and single-asset redemptions
        redemption_fee: Rate on proportional redemptions
        cache_size: Fraction of supply integrators may hold as idle cash
        recol_fee: Rate withheld while under-collateralised
    """

    amplification: int = DEFAULT_AMPLIFICATION
    min_weight: int = DEFAULT_MIN_WEIGHT
    max_weight: int = DEFAULT_MAX_WEIGHT
    swap_fee: int = DEFAULT_SWAP_FEE
    redemption_fee: int = DEFAULT_REDEMPTION_FEE
    cache_size: int = DEFAULT_CACHE_SIZE
    recol_fee: int = DEFAULT_RECOL_FEE


@dataclass(frozen=True)
class FeederSettings(PoolSettings):
    """Initial parameters of a feeder pool."""

    min_weight: int = DEFAULT_FEEDER_MIN_WEIGHT
    max_weight: int = DEFAULT_FEEDER_MAX_WEIGHT
    swap_fee: int = DEFAULT_FEEDER_FEE
    redemption_fee: int = DEFAULT_FEEDER_FEE


# Default configuration instances
DEFAULT_POOL_SETTINGS = PoolSettings()
DEFAULT_FEEDER_SETTINGS = FeederSettings()


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    return int(raw)


def load_settings_from_env(prefix: str = "PEGPOOL", feeder: bool = False) -> PoolSettings:
    """Build settings from environment variables.

    Reads {prefix}_AMPLIFICATION, {prefix}_MIN_WEIGHT, {prefix}_MAX_WEIGHT,
    {prefix}_SWAP_FEE, {prefix}_REDEMPTION_FEE, {prefix}_CACHE_SIZE and
    {prefix}_RECOL_FEE; unset variables keep the defaults.
    """
    base = DEFAULT_FEEDER_SETTINGS if feeder else DEFAULT_POOL_SETTINGS
    cls = FeederSettings if feeder else PoolSettings
    return cls(
        amplification=_env_int(f"{prefix}_AMPLIFICATION", base.amplification),
        min_weight=_env_int(f"{prefix}_MIN_WEIGHT", base.min_weight),
        max_weight=_env_int(f"{prefix}_MAX_WEIGHT", base.max_weight),
        swap_fee=_env_int(f"{prefix}_SWAP_FEE", base.swap_fee),
        redemption_fee=_env_int(f"{prefix}_REDEMPTION_FEE", base.redemption_fee),
        cache_size=_env_int(f"{prefix}_CACHE_SIZE", base.cache_size),
        recol_fee=_env_int(f"{prefix}_RECOL_FEE", base.recol_fee),
    )


@dataclass(frozen=True)
class AssetConfig:
    """Static description of a basket asset at pool launch.

    Attributes:
        address: Asset identifier
        decimals: Native decimals; ratio = 10 ** (26 - decimals)
        integrator: Address of the platform integration holding the asset
        has_tx_fee: Whether the asset charges a fee on transfer
    """

    address: str
    decimals: int = 18
    integrator: str | None = None
    has_tx_fee: bool = False
