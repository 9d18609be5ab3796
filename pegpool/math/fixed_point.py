"""Scaled-integer arithmetic for basket accounting.

Two scales are in play:
- SCALE (1e18): fees, weights, prices and pool-token amounts
- RATIO_SCALE (1e8): per-asset ratios mapping native decimals to 18 decimals

Rounding contract: every helper names its direction. Amounts taken from a
caller are rounded up, amounts paid to a caller are rounded down, so that
rounding dust always stays with the basket.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import ClassVar

from pegpool.constants import RATIO_SCALE, SCALE

__all__ = [
    "Fixed",
    "ratio_for_decimals",
    "to_scaled",
    "to_scaled_up",
    "from_scaled",
]


class Fixed:
    """18-decimal fixed-point number stored as int.

    Example: 0.06% is stored as 600_000_000_000_000 (6e14).
    """

    ONE: ClassVar[int] = SCALE

    __slots__ = ("value",)
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, value: int) -> None:
        if value < 0:
            raise ValueError(f"Fixed requires a non-negative value, got {value}")
        self.value = value

    @classmethod
    def from_int(cls, i: int) -> Fixed:
        """Create from a whole number of units."""
        return cls(i * cls.ONE)

    @classmethod
    def from_decimal(cls, d: Decimal | str) -> Fixed:
        """Create from a decimal, rounding half up to the nearest unit."""
        d = Decimal(d)
        if d < 0:
            raise ValueError(f"Fixed.from_decimal requires non-negative input, got {d}")
        scaled = (d * cls.ONE).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return cls(int(scaled))

    def to_decimal(self) -> Decimal:
        return Decimal(self.value) / Decimal(self.ONE)

    def mul_down(self, other: Fixed | int) -> Fixed:
        """(a * b) / 1e18 rounded down."""
        return Fixed((self.value * _raw(other)) // self.ONE)

    def mul_up(self, other: Fixed | int) -> Fixed:
        """(a * b) / 1e18 rounded up."""
        product = self.value * _raw(other)
        if product == 0:
            return Fixed(0)
        return Fixed((product - 1) // self.ONE + 1)

    def div_down(self, other: Fixed | int) -> Fixed:
        """(a * 1e18) / b rounded down."""
        divisor = _raw(other)
        if divisor == 0:
            raise ZeroDivisionError("Fixed division by zero")
        return Fixed((self.value * self.ONE) // divisor)

    def div_up(self, other: Fixed | int) -> Fixed:
        """(a * 1e18) / b rounded up."""
        divisor = _raw(other)
        if divisor == 0:
            raise ZeroDivisionError("Fixed division by zero")
        numerator = self.value * self.ONE
        if numerator == 0:
            return Fixed(0)
        return Fixed((numerator - 1) // divisor + 1)

    def complement(self) -> Fixed:
        """1 - self, clamped at zero."""
        return Fixed(max(0, self.ONE - self.value))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Fixed):
            return NotImplemented
        return self.value == other.value

    def __lt__(self, other: Fixed) -> bool:
        return self.value < other.value

    def __le__(self, other: Fixed) -> bool:
        return self.value <= other.value

    def __gt__(self, other: Fixed) -> bool:
        return self.value > other.value

    def __ge__(self, other: Fixed) -> bool:
        return self.value >= other.value

    def __repr__(self) -> str:
        return f"Fixed({self.value})"

    def __str__(self) -> str:
        return str(self.to_decimal())


def _raw(x: Fixed | int) -> int:
    return x.value if isinstance(x, Fixed) else x


# =============================================================================
# Ratio helpers (native units <-> 18-decimal accounting units)
# =============================================================================


def ratio_for_decimals(decimals: int) -> int:
    """Ratio for an asset with the given native decimals.

    An 18-decimal asset has ratio 1e8, a 6-decimal asset 1e20, so that
    amount * ratio / RATIO_SCALE is always in 18-decimal units.
    """
    if not 0 <= decimals <= 26:
        raise ValueError(f"Unsupported token decimals: {decimals}")
    return 10 ** (26 - decimals)


def to_scaled(amount: int, ratio: int) -> int:
    """Native amount to accounting units, rounded down."""
    return (amount * ratio) // RATIO_SCALE


def to_scaled_up(amount: int, ratio: int) -> int:
    """Native amount to accounting units, rounded up."""
    product = amount * ratio
    if product == 0:
        return 0
    return (product - 1) // RATIO_SCALE + 1


def from_scaled(scaled: int, ratio: int) -> int:
    """Accounting units back to native amount, rounded down."""
    if ratio <= 0:
        raise ValueError(f"Ratio must be positive, got {ratio}")
    return (scaled * RATIO_SCALE) // ratio
