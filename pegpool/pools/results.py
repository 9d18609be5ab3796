"""Structured results of pool operations and views."""

from __future__ import annotations

from dataclasses import dataclass

from pegpool.basket.models import AmpData, Asset, AssetReserve, WeightLimits


@dataclass(frozen=True)
class MintResult:
    """Outcome of mint or mintMulti.

    Attributes:
        minted: Pool tokens sent to the recipient
        assets: Deposited assets
        quantities: Native amounts received per asset (after transfer fees)
        recipient: Receiver of the pool tokens
    """

    minted: int
    assets: tuple[str, ...]
    quantities: tuple[int, ...]
    recipient: str


@dataclass(frozen=True)
class SwapResult:
    """Outcome of a swap.

    Attributes:
        output: Native amount of the output asset sent to the recipient
        scaled_fee: Fee accrued to surplus, in pool-token units
    """

    input_asset: str
    output_asset: str
    input_quantity: int
    output: int
    scaled_fee: int
    recipient: str


@dataclass(frozen=True)
class RedeemResult:
    """Outcome of a single-asset redemption."""

    output_asset: str
    burned: int
    output: int
    scaled_fee: int
    recipient: str


@dataclass(frozen=True)
class RedeemExactResult:
    """Outcome of redeemExactBassets.

    Attributes:
        burned: Pool tokens burned from the caller, fee included
        scaled_fee: Part of burned accrued to surplus
    """

    assets: tuple[str, ...]
    quantities: tuple[int, ...]
    burned: int
    scaled_fee: int
    recipient: str


@dataclass(frozen=True)
class RedeemProportionateResult:
    """Outcome of redeemProportionately."""

    assets: tuple[str, ...]
    outputs: tuple[int, ...]
    burned: int
    scaled_fee: int
    recipient: str


@dataclass(frozen=True)
class Price:
    """Pool-token price in basket value (1e18 = at peg) and invariant k."""

    price: int
    k: int


@dataclass(frozen=True)
class BassetView:
    personal: Asset
    reserve: AssetReserve


@dataclass(frozen=True)
class PoolConfigView:
    """Read-only snapshot of the parameters the solver runs with.

    Attributes:
        supply: totalSupply + surplus
        a: Current amplification, scaled
        limits: Hard weight bounds
        recol_fee: Recollateralisation fee
    """

    supply: int
    a: int
    limits: WeightLimits
    recol_fee: int
    amp_data: AmpData
    swap_fee: int
    redemption_fee: int
    cache_size: int
