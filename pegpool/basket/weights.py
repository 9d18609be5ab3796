"""Basket weight limits.

weight_i = x_i / sum(x) over scaled reserves. Two kinds of bound:

- Hard: every weight must lie in [min, max] after a mint, swap or
  single-asset redemption, else WeightLimitExceededError.
- Soft: a penalty zone of width (max - min) / 10 inside each bound. An
  asset pushed into the zone costs the caller a penalty growing
  quadratically with depth, reaching MAX_WEIGHT_PENALTY at the bound.
"""

from __future__ import annotations

from dataclasses import dataclass

from pegpool.constants import (
    FEEDER_MAX_WEIGHT_FLOOR,
    FEEDER_MIN_WEIGHT_CAP,
    MAX_WEIGHT_PENALTY,
    PENALTY_ZONE_DIVISOR,
    SCALE,
)

from .errors import ParameterOutOfBoundsError, WeightLimitExceededError
from .models import WeightLimits


@dataclass(frozen=True)
class WeightLimitGuard:
    """Hard and soft weight bounds for a basket.

    Attributes:
        limits: Hard bounds as 18-decimal fractions
    """

    limits: WeightLimits

    @classmethod
    def validated(cls, n_assets: int, min_weight: int, max_weight: int) -> WeightLimitGuard:
        """Build a guard from governance input.

        The minimum may not exceed half an equal share and the maximum may
        not be below 1/(n-1). Two-asset baskets use fixed 30%/70% caps.

        Raises:
            ParameterOutOfBoundsError: "Min weight oob" or "Max weight oob"
        """
        if n_assets == 2:
            min_cap, max_floor = FEEDER_MIN_WEIGHT_CAP, FEEDER_MAX_WEIGHT_FLOOR
        else:
            min_cap, max_floor = SCALE // (n_assets * 2), SCALE // (n_assets - 1)
        if min_weight > min_cap:
            raise ParameterOutOfBoundsError("Min weight oob")
        if max_weight < max_floor or max_weight > SCALE:
            raise ParameterOutOfBoundsError("Max weight oob")
        return cls(WeightLimits(min=min_weight, max=max_weight))

    @staticmethod
    def weights(x: list[int]) -> list[int]:
        """Weights rounded down; all zero for an empty basket."""
        total = sum(x)
        if total == 0:
            return [0] * len(x)
        return [(xi * SCALE) // total for xi in x]

    def in_bounds(self, x: list[int]) -> bool:
        # Cross-multiplied so the exact boundary is accepted
        total = sum(x)
        if total == 0:
            return True
        for xi in x:
            scaled = xi * SCALE
            if scaled > self.limits.max * total or scaled < self.limits.min * total:
                return False
        return True

    def enforce(self, x: list[int]) -> None:
        if not self.in_bounds(x):
            raise WeightLimitExceededError()

    @property
    def zone(self) -> int:
        return (self.limits.max - self.limits.min) // PENALTY_ZONE_DIVISOR

    def penalty(self, x_before: list[int], x_after: list[int]) -> int:
        """Soft-limit penalty for moving the basket from x_before to x_after.

        Only assets whose weight moved toward a bound count. The largest
        per-asset penalty is returned, as an 18-decimal fraction.
        """
        zone = self.zone
        if zone == 0:
            return 0

        upper = self.limits.max - zone
        lower = self.limits.min + zone
        before = self.weights(x_before)
        after = self.weights(x_after)

        worst = 0
        for w0, w1 in zip(before, after):
            if w1 > w0 and w1 > upper:
                depth = w1 - upper
            elif w1 < w0 and w1 < lower:
                depth = lower - w1
            else:
                continue
            depth = min(depth, zone)
            worst = max(worst, (MAX_WEIGHT_PENALTY * depth * depth) // (zone * zone))
        return worst
