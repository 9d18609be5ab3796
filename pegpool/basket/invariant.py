"""StableSwap invariant math.

Core functions for the basket invariant D ("k"). Reserves are passed in
18-decimal accounting units; amplification is scaled by A_PRECISION.

Uses the Curve/Balancer parameterization where the Newton-Raphson formula
uses A*n (not A*n^n). The n^n factor is incorporated through the iterative
D^(n+1) / prod(x) product.

IMPORTANT: All intermediate values use SafeInt so a negative or undefined
quantity raises instead of silently wrapping.
"""

from __future__ import annotations

import structlog

from pegpool.constants import A_PRECISION, MAX_ITERATIONS, SCALE
from pegpool.safe_int import S, SafeInt

from .errors import InsufficientLiquidityError, InvariantDidNotConverge

logger = structlog.get_logger()


def _has_converged(current: SafeInt, previous: SafeInt) -> bool:
    return current.abs_diff(previous) <= 1


def compute_invariant(x: list[int], a: int) -> int:
    """Calculate the invariant D using Newton-Raphson iteration.

    Algorithm:
        1. Initial guess: D = sum(x)
        2. Iterate until |D_new - D_old| <= 1
        3. Max iterations: 255

    Args:
        x: Scaled reserves
        a: Amplification, scaled by A_PRECISION

    Returns:
        The invariant D (0 for an empty basket)

    Raises:
        InsufficientLiquidityError: If a reserve is zero in a non-empty basket
        InvariantDidNotConverge: If iteration doesn't converge
    """
    total = sum(x)
    if total == 0:
        return 0

    n_coins = len(x)
    for i, balance in enumerate(x):
        if balance <= 0:
            raise InsufficientLiquidityError(f"Reserve at index {i} must be positive")

    sum_x = S(total)
    n_a = S(a) * n_coins
    k = sum_x

    for _ in range(MAX_ITERATIONS):
        # k_p = D^(n+1) / (n^n * prod(x))
        k_p = k
        for balance in x:
            k_p = (k_p * k) // (S(balance) * n_coins)

        numerator = ((n_a * sum_x) // A_PRECISION + k_p * n_coins) * k
        denominator = ((n_a - A_PRECISION) * k) // A_PRECISION + k_p * (n_coins + 1)

        k_prev = k
        k = numerator // denominator
        if _has_converged(k, k_prev):
            return k.value

    raise InvariantDidNotConverge(f"Invariant did not converge after {MAX_ITERATIONS} iterations")


def solve_invariant(x: list[int], a: int, index: int, target_k: int) -> int:
    """Solve for x[index] such that the invariant equals target_k.

    The other reserves are held fixed; the current value of x[index] is
    ignored. Iterates y = (y^2 + c) / (2y + b - D) rounding up, so the
    solved reserve is never understated.

    Args:
        x: Scaled reserves
        a: Amplification, scaled by A_PRECISION
        index: Index of the unknown reserve
        target_k: Invariant to hold

    Returns:
        The reserve y

    Raises:
        InsufficientLiquidityError: If no positive y exists or iteration
            doesn't converge
        IndexError: If index is out of range
    """
    n_coins = len(x)
    if index < 0 or index >= n_coins:
        raise IndexError(f"index {index} out of range for {n_coins} assets")
    if target_k <= 0:
        raise InsufficientLiquidityError("Target invariant must be positive")

    d = S(target_k)
    n_a = S(a) * n_coins

    sum_others = S(0)
    c = d
    for j, balance in enumerate(x):
        if j == index:
            continue
        if balance <= 0:
            raise InsufficientLiquidityError(f"Reserve at index {j} must be positive")
        sum_others = sum_others + balance
        c = (c * d) // (S(balance) * n_coins)

    c = (c * d * A_PRECISION) // (n_a * n_coins)
    b = sum_others + (d * A_PRECISION) // n_a

    y = d
    for _ in range(MAX_ITERATIONS):
        y_prev = y
        denominator = y * 2 + b
        if denominator <= d:
            raise InsufficientLiquidityError("Denominator became non-positive")
        y = (y * y + c).ceil_div(denominator - d)
        if _has_converged(y, y_prev):
            return y.value

    logger.debug("solve_invariant_failed", index=index, target_k=target_k)
    raise InsufficientLiquidityError(
        f"Invariant solve did not converge after {MAX_ITERATIONS} iterations"
    )


def compute_price(x: list[int], a: int, supply: int) -> tuple[int, int]:
    """Price of one pool token in basket value.

    Returns:
        (price, k) where price = k * 1e18 / supply, or 1e18 while supply is 0
    """
    k = compute_invariant(x, a)
    if supply == 0:
        return SCALE, k
    return (S(k) * SCALE // supply).value, k
