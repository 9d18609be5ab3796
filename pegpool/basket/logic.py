"""Pure basket computations.

Each function takes the reserves and an InvariantConfig and returns the
amounts an operation would move, without mutating anything. Pools call
these for both the mutating operations and their get*Output mirrors.

Rounding: inputs taken from the caller round up, outputs paid round down.
Value withheld by the recol fee or the soft weight penalty ("retained")
stays in the basket as collateral and is never credited to surplus.
"""

from __future__ import annotations

import structlog

from pegpool.constants import MIN_SCALED_INPUT
from pegpool.math.fixed_point import from_scaled, to_scaled, to_scaled_up
from pegpool.safe_int import S

from .errors import InsufficientLiquidityError, ValidationError
from .fees import FeeEngine
from .invariant import compute_invariant, solve_invariant
from .models import AssetReserve, InvariantConfig
from .weights import WeightLimitGuard

logger = structlog.get_logger()


def _scaled(reserves: list[AssetReserve]) -> list[int]:
    return [r.scaled for r in reserves]


def _recol_rate(config: InvariantConfig, k: int) -> int:
    return config.recol_fee if config.supply > k else 0


def _mint_amount(supply: int, k0: int, k1: int) -> int:
    if k1 <= k0:
        return 0
    if supply == 0:
        return k1 - k0
    return (S(supply) * (S(k1) - k0) // k0).value


def _output_from(x_out: int, y: int) -> int:
    if y + 1 > x_out:
        raise InsufficientLiquidityError("Output exceeds reserve")
    return x_out - y - 1


# =============================================================================
# Mint
# =============================================================================


def compute_mint(
    reserves: list[AssetReserve], index: int, raw_input: int, config: InvariantConfig
) -> int:
    """Pool tokens minted for depositing raw_input of one asset.

    Raises:
        ValidationError: "Must add > 1e6 units" for dust
        WeightLimitExceededError: Post-mint basket out of bounds
    """
    scaled_input = to_scaled(raw_input, reserves[index].ratio)
    if scaled_input <= MIN_SCALED_INPUT:
        raise ValidationError("Must add > 1e6 units")

    x = _scaled(reserves)
    x_after = list(x)
    x_after[index] += scaled_input
    return _mint_from(x, x_after, config)


def compute_mint_multi(
    reserves: list[AssetReserve], indices: list[int], raw_inputs: list[int], config: InvariantConfig
) -> int:
    """Pool tokens minted for depositing several assets at once."""
    x = _scaled(reserves)
    x_after = list(x)
    for index, raw in zip(indices, raw_inputs):
        x_after[index] += to_scaled(raw, reserves[index].ratio)
    if sum(x_after) == sum(x):
        return 0
    return _mint_from(x, x_after, config)


def _mint_from(x: list[int], x_after: list[int], config: InvariantConfig) -> int:
    guard = WeightLimitGuard(config.limits)
    guard.enforce(x_after)

    k0 = compute_invariant(x, config.a)
    k1 = compute_invariant(x_after, config.a)
    minted = _mint_amount(config.supply, k0, k1)

    retained = FeeEngine.retained_rate(_recol_rate(config, k0), guard.penalty(x, x_after))
    if retained:
        minted = FeeEngine.apply_haircut(minted, retained)
    logger.debug("mint_computed", k0=k0, k1=k1, minted=minted, retained_rate=retained)
    return minted


# =============================================================================
# Swap
# =============================================================================


def compute_swap(
    reserves: list[AssetReserve],
    input_index: int,
    output_index: int,
    raw_input: int,
    swap_fee: int,
    config: InvariantConfig,
) -> tuple[int, int]:
    """Output of swapping raw_input of one asset for another.

    The fee is charged on the invariant growth the input causes; the output
    reserve is then solved so that the basket keeps k0 + fee + retained.

    Returns:
        (raw output, scaled fee)
    """
    scaled_input = to_scaled(raw_input, reserves[input_index].ratio)
    if scaled_input <= MIN_SCALED_INPUT:
        raise ValidationError("Must add > 1e6 units")

    guard = WeightLimitGuard(config.limits)
    x = _scaled(reserves)
    k0 = compute_invariant(x, config.a)

    x_in = list(x)
    x_in[input_index] += scaled_input
    k1 = compute_invariant(x_in, config.a)
    delta_k = k1 - k0
    fee = FeeEngine.fee_on(delta_k, swap_fee)
    recol = _recol_rate(config, k0)

    def solve(retained_rate: int) -> list[int]:
        target = k0 + fee + FeeEngine.fee_on(delta_k, retained_rate)
        y = solve_invariant(x_in, config.a, output_index, target)
        candidate = list(x_in)
        candidate[output_index] = x[output_index] - _output_from(x[output_index], y)
        return candidate

    x_final = solve(recol)
    penalty = guard.penalty(x, x_final)
    if penalty:
        x_final = solve(FeeEngine.retained_rate(recol, penalty))

    guard.enforce(x_final)
    scaled_output = x[output_index] - x_final[output_index]
    output = from_scaled(scaled_output, reserves[output_index].ratio)
    logger.debug("swap_computed", k0=k0, k1=k1, fee=fee, penalty=penalty, output=output)
    return output, fee


# =============================================================================
# Redeem
# =============================================================================


def compute_redeem(
    reserves: list[AssetReserve],
    output_index: int,
    pool_token_quantity: int,
    fee_rate: int,
    config: InvariantConfig,
) -> tuple[int, int]:
    """Output of burning pool tokens for a single asset.

    Returns:
        (raw output, scaled fee)
    """
    if config.supply == 0 or pool_token_quantity > config.supply:
        raise InsufficientLiquidityError("Redemption exceeds supply")

    guard = WeightLimitGuard(config.limits)
    x = _scaled(reserves)
    k0 = compute_invariant(x, config.a)
    fee = FeeEngine.fee_on(pool_token_quantity, fee_rate)
    net = pool_token_quantity - fee
    recol = _recol_rate(config, k0)

    def solve(retained_rate: int) -> list[int]:
        burned = FeeEngine.apply_haircut(net, retained_rate)
        target = (S(k0) * (S(config.supply) - burned) // config.supply).value + 1
        y = solve_invariant(x, config.a, output_index, target)
        candidate = list(x)
        candidate[output_index] = x[output_index] - _output_from(x[output_index], y)
        return candidate

    x_final = solve(recol)
    penalty = guard.penalty(x, x_final)
    if penalty:
        x_final = solve(FeeEngine.retained_rate(recol, penalty))

    guard.enforce(x_final)
    scaled_output = x[output_index] - x_final[output_index]
    output = from_scaled(scaled_output, reserves[output_index].ratio)
    logger.debug("redeem_computed", k0=k0, fee=fee, penalty=penalty, output=output)
    return output, fee


def compute_redeem_exact(
    reserves: list[AssetReserve],
    indices: list[int],
    raw_outputs: list[int],
    fee_rate: int,
    config: InvariantConfig,
) -> tuple[int, int]:
    """Pool tokens to burn for receiving exact asset amounts.

    Returns:
        (pool tokens to burn including fee, scaled fee)

    Raises:
        ValidationError: "Must redeem > 1e6 units" for dust
        WeightLimitExceededError: Post-redemption basket out of bounds
    """
    guard = WeightLimitGuard(config.limits)
    x = _scaled(reserves)
    k0 = compute_invariant(x, config.a)

    x_after = list(x)
    for index, raw in zip(indices, raw_outputs):
        scaled_output = to_scaled_up(raw, reserves[index].ratio)
        if scaled_output >= x_after[index]:
            raise InsufficientLiquidityError("Output exceeds reserve")
        x_after[index] -= scaled_output

    guard.enforce(x_after)
    k1 = compute_invariant(x_after, config.a)
    redeemed = (S(config.supply) * (S(k0) - k1)).ceil_div(k0).value
    if redeemed <= MIN_SCALED_INPUT:
        raise ValidationError("Must redeem > 1e6 units")

    retained = FeeEngine.retained_rate(_recol_rate(config, k0), guard.penalty(x, x_after))
    if retained:
        redeemed = FeeEngine.gross_up(redeemed, retained)

    total = FeeEngine.gross_up(redeemed, fee_rate)
    fee = total - redeemed
    logger.debug("redeem_exact_computed", k0=k0, k1=k1, burn=total, fee=fee)
    return total, fee


def compute_redeem_proportionately(
    reserves: list[AssetReserve],
    pool_token_quantity: int,
    fee_rate: int,
    config: InvariantConfig,
) -> tuple[list[int], int]:
    """Outputs of burning pool tokens for a share of every asset.

    No weight check applies since proportions are unchanged.

    Returns:
        (raw outputs per asset, pool-token fee)
    """
    if config.supply == 0 or pool_token_quantity > config.supply:
        raise InsufficientLiquidityError("Redemption exceeds supply")

    fee = FeeEngine.fee_on(pool_token_quantity, fee_rate)
    net = pool_token_quantity - fee
    k = compute_invariant(_scaled(reserves), config.a)
    recol = _recol_rate(config, k)
    if recol:
        net = FeeEngine.apply_haircut(net, recol)

    outputs = [(S(r.vault_balance) * net // config.supply).value for r in reserves]
    return outputs, fee
