"""Feeder pool routes through its primary pool."""

import pytest

from pegpool.basket.errors import InvalidAssetError, InvalidPairError, SlippageError
from pegpool.constants import SCALE
from tests.helpers import ALICE, BOB, DAI, FRAX, POOL, USDC, USDT, fund, units

UNKNOWN = "0x9999999999999999999999999999999999999999"


class TestCrossMint:
    """Minting the feeder token with a primary basket asset."""

    def test_mint_with_mp_asset(self, feeder):
        primary = feeder.primary
        quote = feeder.get_mint_output(DAI, units(10))
        fund(feeder, BOB, DAI, units(10))

        result = feeder.mint(BOB, DAI, units(10), quote, BOB)

        assert result.minted == quote
        assert feeder.balance_of(BOB) == quote
        assert primary.get_basset(DAI).reserve.vault_balance == units(1010)
        # The feeder holds the primary token it minted, never the DAI
        assert feeder.ledger.balance_of(DAI, feeder.address) == 0
        m_vault = feeder.get_basset(POOL).reserve.vault_balance
        assert feeder.ledger.balance_of(POOL, feeder.address) == m_vault

    def test_mint_with_local_assets(self, feeder):
        fund(feeder, BOB, FRAX, units(10))
        quote = feeder.get_mint_output(FRAX, units(10))
        assert feeder.mint(BOB, FRAX, units(10), 0, BOB).minted == quote

    def test_mint_multi_rejects_mp_asset(self, feeder):
        fund(feeder, BOB, DAI, units(10))
        with pytest.raises(InvalidAssetError):
            feeder.mint_multi(BOB, [DAI], [units(10)], 0, BOB)

    def test_unknown_asset(self, feeder):
        with pytest.raises(InvalidAssetError):
            feeder.get_mint_output(UNKNOWN, units(1))


class TestCrossSwap:
    def test_mp_asset_to_f_asset(self, feeder):
        quote = feeder.get_swap_output(DAI, FRAX, units(10))
        fund(feeder, BOB, DAI, units(10))

        result = feeder.swap(BOB, DAI, FRAX, units(10), quote, BOB)

        assert result.output == quote
        assert feeder.ledger.balance_of(FRAX, BOB) == quote
        assert quote == pytest.approx(units(10), rel=5e-3)

    def test_f_asset_to_mp_asset(self, feeder):
        quote = feeder.get_swap_output(FRAX, USDC, units(10))
        fund(feeder, BOB, FRAX, units(10))

        result = feeder.swap(BOB, FRAX, USDC, units(10), quote, BOB)

        assert result.output == quote
        assert feeder.ledger.balance_of(USDC, BOB) == quote
        assert quote == pytest.approx(units(10, USDC), rel=5e-3)

    def test_local_pair(self, feeder):
        quote = feeder.get_swap_output(POOL, FRAX, 10 * SCALE)
        result = feeder.swap(ALICE, POOL, FRAX, 10 * SCALE, quote, BOB)
        assert result.output == quote

    def test_mp_asset_to_m_asset(self, feeder):
        with pytest.raises(InvalidPairError):
            feeder.get_swap_output(DAI, POOL, units(1))

    def test_mp_asset_to_mp_asset(self, feeder):
        fund(feeder, BOB, DAI, units(1))
        with pytest.raises(InvalidPairError):
            feeder.swap(BOB, DAI, USDC, units(1), 0, BOB)

    def test_failure_rolls_back_both_pools(self, feeder):
        primary = feeder.primary
        feeder_before, primary_before = feeder.data, primary.data
        fund(feeder, BOB, FRAX, units(10))
        with pytest.raises(SlippageError):
            feeder.swap(BOB, FRAX, USDT, units(10), units(11, USDT), BOB)
        assert feeder.data == feeder_before
        assert primary.data == primary_before
        assert feeder.ledger.balance_of(FRAX, BOB) == units(10)
        assert feeder.ledger.balance_of(USDT, BOB) == 0


class TestCrossRedeem:
    def test_redeem_to_mp_asset(self, feeder):
        quote = feeder.get_redeem_output(USDC, 10 * SCALE)
        supply = feeder.total_supply

        result = feeder.redeem(ALICE, USDC, 10 * SCALE, quote, BOB)

        assert result.output == quote
        assert feeder.ledger.balance_of(USDC, BOB) == quote
        assert feeder.total_supply == supply - 10 * SCALE

    def test_redeem_to_local_asset(self, feeder):
        quote = feeder.get_redeem_output(FRAX, 10 * SCALE)
        assert feeder.redeem(ALICE, FRAX, 10 * SCALE, 0, BOB).output == quote

    def test_slippage(self, feeder):
        quote = feeder.get_redeem_output(USDC, 10 * SCALE)
        with pytest.raises(SlippageError):
            feeder.redeem(ALICE, USDC, 10 * SCALE, quote + 1, BOB)
        assert feeder.ledger.balance_of(USDC, BOB) == 0
