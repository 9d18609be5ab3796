"""Mathematical utilities for basket pools.

This package provides the scaled-integer primitives used by the solver:
- Fixed: 18-decimal fixed-point with explicit rounding direction
- ratio helpers converting native asset units to accounting units
"""

from pegpool.math.fixed_point import (
    Fixed,
    from_scaled,
    ratio_for_decimals,
    to_scaled,
    to_scaled_up,
)

__all__ = [
    "Fixed",
    "ratio_for_decimals",
    "to_scaled",
    "to_scaled_up",
    "from_scaled",
]
