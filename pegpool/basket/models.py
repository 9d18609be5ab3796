"""Basket data structures.

Mutable state (assets, reserves, ramp, accounting) is held in plain
dataclasses owned by a pool. Values handed to the solver are frozen.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pegpool.math.fixed_point import to_scaled


class AssetStatus(str, Enum):
    """Peg status of a basket asset."""

    NORMAL = "Normal"
    BROKEN_BELOW_PEG = "BrokenBelowPeg"
    BROKEN_ABOVE_PEG = "BrokenAbovePeg"

    @property
    def is_broken(self) -> bool:
        return self is not AssetStatus.NORMAL


@dataclass
class Asset:
    """Personal data of a basket asset.

    Attributes:
        address: Asset identifier (lower-case address)
        integrator: Id of the yield platform holding the asset, or None when
            the pool holds it directly
        has_tx_fee: Whether transfers of the asset may arrive short
        status: Peg status
    """

    address: str
    integrator: str | None = None
    has_tx_fee: bool = False
    status: AssetStatus = AssetStatus.NORMAL


@dataclass
class AssetReserve:
    """Accounting data of a basket asset.

    Attributes:
        ratio: 10 ** (26 - decimals); maps native units to 18 decimals
        vault_balance: Native units attributed to the basket
    """

    ratio: int
    vault_balance: int

    @property
    def scaled(self) -> int:
        return to_scaled(self.vault_balance, self.ratio)


@dataclass(frozen=True)
class WeightLimits:
    """Hard weight bounds, 18-decimal fractions of the basket value."""

    min: int
    max: int


@dataclass
class AmpData:
    """Amplification ramp state. A values are scaled by A_PRECISION."""

    initial_a: int
    target_a: int
    ramp_start_time: int = 0
    ramp_end_time: int = 0


@dataclass(frozen=True)
class InvariantConfig:
    """Parameters passed to the basket logic for one computation.

    Attributes:
        supply: totalSupply + surplus of the pool token
        a: Current amplification, scaled by A_PRECISION
        limits: Hard weight bounds
        recol_fee: Fraction withheld while the basket is under-collateralised
    """

    supply: int
    a: int
    limits: WeightLimits
    recol_fee: int


@dataclass
class PoolData:
    """Complete mutable state of a pool.

    Attributes:
        assets: Personal data, index-aligned with reserves
        reserves: Ratio and vault balance per asset
        amp_data: Amplification ramp state
        weight_limits: Hard weight bounds
        recol_fee: Recollateralisation fee
        surplus: Accrued, not yet distributed pool tokens
        swap_fee: Fee on swaps and single-asset redemptions
        redemption_fee: Fee on proportional redemptions
        cache_size: Fraction of supply integrators may keep as idle cash
        cached_price: Last computed price
        cached_k: Invariant the cached price was computed from
        cached_price_timestamp: Clock time of cached_price, None when stale
        undergoing_recol: True while any asset is not Normal
    """

    assets: list[Asset]
    reserves: list[AssetReserve]
    amp_data: AmpData
    weight_limits: WeightLimits
    recol_fee: int
    surplus: int = 0
    swap_fee: int = 0
    redemption_fee: int = 0
    cache_size: int = 0
    cached_price: int = 0
    cached_k: int = 0
    cached_price_timestamp: int | None = None
    undergoing_recol: bool = False

    def index_of(self, address: str) -> int | None:
        address_lower = address.lower()
        for i, asset in enumerate(self.assets):
            if asset.address == address_lower:
                return i
        return None

    @property
    def scaled_reserves(self) -> list[int]:
        return [r.scaled for r in self.reserves]
