"""Pool facades: the primary basket pool and the feeder pool."""

from .feeder import F_ASSET_INDEX, M_ASSET_INDEX, FeederPool
from .pool import Pool
from .results import (
    BassetView,
    MintResult,
    PoolConfigView,
    Price,
    RedeemExactResult,
    RedeemProportionateResult,
    RedeemResult,
    SwapResult,
)

__all__ = [
    "BassetView",
    "F_ASSET_INDEX",
    "FeederPool",
    "M_ASSET_INDEX",
    "MintResult",
    "Pool",
    "PoolConfigView",
    "Price",
    "RedeemExactResult",
    "RedeemProportionateResult",
    "RedeemResult",
    "SwapResult",
]
