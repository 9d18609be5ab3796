"""End-to-end scenarios on a four-asset primary pool."""

import pytest

from pegpool.basket.errors import SlippageError, WeightLimitExceededError
from pegpool.config import PoolSettings
from pegpool.constants import SCALE
from tests.helpers import (
    ALICE,
    BOB,
    DAI,
    DAY,
    GOVERNOR,
    T0,
    USDC,
    fund,
    make_pool,
    seed_pool,
    units,
)


class TestSeedMint:
    """Four assets of 25 mint 100 pool tokens."""

    def test_mint_multi_into_empty_pool(self, pool):
        result = seed_pool(pool, 25)
        assert result.minted == 100 * SCALE
        assert pool.total_supply == 100 * SCALE
        assert pool.balance_of(ALICE) == 100 * SCALE
        assert pool.get_price().k == 100 * SCALE

    def test_mint_multi_mirror(self, seeded_pool):
        assets = [DAI, USDC]
        quantities = [units(3, DAI), units(2, USDC)]
        quote = seeded_pool.get_mint_multi_output(assets, quantities)
        for asset, quantity in zip(assets, quantities):
            fund(seeded_pool, BOB, asset, quantity)
        result = seeded_pool.mint_multi(BOB, assets, quantities, quote, BOB)
        assert result.minted == quote
        assert result.quantities == tuple(quantities)


class TestBalancedSwap:
    """A=100 (10_000 scaled), balanced basket, swap of 10."""

    def test_output_within_tenth_of_percent(self, deep_pool):
        fund(deep_pool, BOB, DAI, units(10))
        result = deep_pool.swap(BOB, DAI, USDC, units(10), 0, BOB)
        swap_fee = deep_pool.get_config().swap_fee
        expected = units(10, USDC) * (SCALE - swap_fee) // SCALE
        assert abs(result.output - expected) * 1000 <= expected
        assert deep_pool.ledger.balance_of(USDC, BOB) == result.output
        assert result.scaled_fee > 0
        assert deep_pool.surplus == result.scaled_fee

    def test_swap_matches_mirror(self, deep_pool):
        quote = deep_pool.get_swap_output(USDC, DAI, units(7, USDC))
        fund(deep_pool, BOB, USDC, units(7, USDC))
        result = deep_pool.swap(BOB, USDC, DAI, units(7, USDC), quote, BOB)
        assert result.output == quote

    def test_swap_slippage(self, deep_pool):
        quote = deep_pool.get_swap_output(DAI, USDC, units(10))
        fund(deep_pool, BOB, DAI, units(10))
        with pytest.raises(SlippageError, match="Output qty < minimum qty"):
            deep_pool.swap(BOB, DAI, USDC, units(10), quote + 1, BOB)


class TestAmplificationRamp:
    """Ramp from 10_000 to 120 (12_000 scaled) over ten days."""

    def test_ramp_schedule(self, deep_pool, clock):
        deep_pool.start_ramp_a(GOVERNOR, 120, T0 + 10 * DAY)
        assert deep_pool.get_a() == 10_000
        clock.advance(DAY)
        assert deep_pool.get_a() == 10_200
        clock.set(T0 + 10 * DAY)
        assert deep_pool.get_a() == 12_000

    def test_higher_amplification_means_less_slippage(self, deep_pool, clock):
        before = deep_pool.get_swap_output(DAI, USDC, units(300))
        deep_pool.start_ramp_a(GOVERNOR, 1000, T0 + 2 * DAY)
        clock.advance(2 * DAY)
        assert deep_pool.get_swap_output(DAI, USDC, units(300)) > before


class TestRedeemExact:
    """Redeem exact above the computed burn fails; at it, it succeeds."""

    def test_max_burn_boundary(self, seeded_pool):
        outputs = [units(10, USDC)]
        burn = seeded_pool.get_redeem_exact_bassets_output([USDC], outputs)
        with pytest.raises(SlippageError, match="Redeem pool token qty > max quantity"):
            seeded_pool.redeem_exact_bassets(ALICE, [USDC], outputs, burn - 1, BOB)

        result = seeded_pool.redeem_exact_bassets(ALICE, [USDC], outputs, burn, BOB)
        assert result.burned == burn
        assert seeded_pool.ledger.balance_of(USDC, BOB) == units(10, USDC)
        assert seeded_pool.balance_of(ALICE) == 100 * SCALE - burn


class TestWeightBoundaries:
    """Exactly at a hard bound succeeds; one unit past it fails."""

    def test_mint_up_to_max_weight(self):
        pool = make_pool(settings=PoolSettings(max_weight=5 * 10**17))
        seed_pool(pool, 25)
        fund(pool, BOB, DAI, units(100))
        with pytest.raises(WeightLimitExceededError):
            pool.mint(BOB, DAI, units(50) + 1, 0, BOB)
        result = pool.mint(BOB, DAI, units(50), 0, BOB)
        assert result.minted > 0

    def test_redeem_down_to_min_weight(self):
        pool = make_pool(settings=PoolSettings(min_weight=625 * 10**14))
        seed_pool(pool, 25)
        with pytest.raises(WeightLimitExceededError):
            pool.redeem_exact_bassets(ALICE, [DAI], [units(20) + 1], units(100), ALICE)
        pool.redeem_exact_bassets(ALICE, [DAI], [units(20)], units(100), ALICE)
        assert pool.get_basset(DAI).reserve.vault_balance == units(5)
