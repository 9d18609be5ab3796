"""Fee calculation for basket pools.

Three fees are charged:
- swap fee on the invariant growth of a swap, and on single-asset
  redemptions; accrued into surplus
- redemption fee on the gross pool tokens of a proportional redemption;
  accrued into surplus
- recollateralisation fee withheld from the caller while the basket is
  under-collateralised (supply > k); retained as collateral

Settlement of surplus and deficit against the invariant also lives here.
"""

from __future__ import annotations

from dataclasses import dataclass

from pegpool.constants import MAX_CACHE_SIZE, MAX_FEE, SCALE
from pegpool.math.fixed_point import Fixed

from .errors import ParameterOutOfBoundsError, SettlementError


@dataclass(frozen=True)
class FeeEngine:
    """Fee rates of a pool, all 18-decimal fractions.

    Attributes:
        swap_fee: Rate on swaps, redeem and redeemExactBassets
        redemption_fee: Rate on redeemProportionately
        recol_fee: Rate withheld while under-collateralised
    """

    swap_fee: int
    redemption_fee: int
    recol_fee: int

    @classmethod
    def validated(cls, swap_fee: int, redemption_fee: int, recol_fee: int) -> FeeEngine:
        """Build from governance input, enforcing the 1% cap."""
        if swap_fee < 0 or swap_fee > MAX_FEE:
            raise ParameterOutOfBoundsError("Swap rate oob")
        if redemption_fee < 0 or redemption_fee > MAX_FEE:
            raise ParameterOutOfBoundsError("Redemption rate oob")
        return cls(swap_fee=swap_fee, redemption_fee=redemption_fee, recol_fee=recol_fee)

    @staticmethod
    def fee_on(quantity: int, rate: int) -> int:
        """quantity * rate, rounded down."""
        return Fixed(quantity).mul_down(rate).value

    @staticmethod
    def retained_rate(recol_rate: int, penalty: int) -> int:
        """Fraction of the caller's output kept by the basket."""
        return min(recol_rate + penalty, SCALE - 1)

    @staticmethod
    def apply_haircut(amount: int, rate: int) -> int:
        """amount * (1 - rate), rounded down."""
        return Fixed(amount).mul_down(Fixed(rate).complement()).value

    @staticmethod
    def gross_up(amount: int, rate: int) -> int:
        """Smallest gross such that gross * (1 - rate) covers amount."""
        return Fixed(amount).div_up(Fixed(rate).complement()).value


def validate_cache_size(cache_size: int) -> int:
    if cache_size < 0 or cache_size > MAX_CACHE_SIZE:
        raise ParameterOutOfBoundsError("Must be <= 20%")
    return cache_size


def deficit_to_mint(supply: int, k: int) -> int:
    """Pool tokens to add to surplus so that supply reaches k.

    Raises:
        SettlementError: "No deficit" unless k > supply
    """
    if k <= supply:
        raise SettlementError("No deficit")
    return k - supply


def surplus_to_burn(supply: int, k: int) -> int:
    """Pool tokens to burn so that supply falls to k.

    Raises:
        SettlementError: "No surplus" unless supply > k
    """
    if supply <= k:
        raise SettlementError("No surplus")
    return supply - k
