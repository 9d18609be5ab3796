"""Tests for FeeEngine and settlement amounts."""

import pytest

from pegpool.basket.errors import ParameterOutOfBoundsError, SettlementError
from pegpool.basket.fees import (
    FeeEngine,
    deficit_to_mint,
    surplus_to_burn,
    validate_cache_size,
)
from pegpool.constants import MAX_CACHE_SIZE, MAX_FEE, SCALE
from pegpool.math.fixed_point import Fixed


class TestFeeEngineValidation:
    """Tests for governance validation of fee rates."""

    def test_accepts_cap(self):
        fees = FeeEngine.validated(MAX_FEE, MAX_FEE, 5 * 10**13)
        assert fees.swap_fee == MAX_FEE

    def test_swap_fee_above_cap(self):
        with pytest.raises(ParameterOutOfBoundsError, match="Swap rate oob"):
            FeeEngine.validated(MAX_FEE + 1, 0, 0)

    def test_negative_redemption_fee(self):
        with pytest.raises(ParameterOutOfBoundsError, match="Redemption rate oob"):
            FeeEngine.validated(0, -1, 0)


class TestFeeArithmetic:
    """Tests for fee, haircut and gross-up helpers."""

    def test_fee_on(self):
        assert FeeEngine.fee_on(10 * SCALE, 6 * 10**14) == 6 * 10**15

    def test_fee_on_rounds_down(self):
        assert FeeEngine.fee_on(1, 6 * 10**14) == 0

    def test_retained_rate_adds_recol_and_penalty(self):
        assert FeeEngine.retained_rate(5 * 10**13, 10**16) == 10**16 + 5 * 10**13

    def test_retained_rate_is_capped_below_one(self):
        assert FeeEngine.retained_rate(SCALE, SCALE) == SCALE - 1

    def test_apply_haircut(self):
        assert FeeEngine.apply_haircut(100, 5 * 10**16) == 95

    def test_gross_up_inverts_haircut(self):
        assert FeeEngine.gross_up(95, 5 * 10**16) == 100

    def test_gross_up_rounds_up(self):
        assert FeeEngine.gross_up(1, 1) == 2

    def test_gross_up_covers_amount_after_haircut(self):
        amount = 123_456_789_123_456_789
        gross = FeeEngine.gross_up(amount, 6 * 10**14)
        assert FeeEngine.apply_haircut(gross, 6 * 10**14) >= amount

    def test_rounding_follows_fixed_point(self):
        """fee_on rounds down, gross_up rounds up, as Fixed does."""
        amount, rate = 10**18 + 7, 3 * 10**14
        assert FeeEngine.fee_on(amount, rate) == Fixed(amount).mul_down(rate).value
        assert FeeEngine.gross_up(amount, rate) == Fixed(amount).div_up(SCALE - rate).value
        assert FeeEngine.apply_haircut(amount, rate) == Fixed(amount).mul_down(SCALE - rate).value

    def test_negative_amount_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            FeeEngine.fee_on(-1, 6 * 10**14)


class TestCacheSize:
    def test_accepts_cap(self):
        assert validate_cache_size(MAX_CACHE_SIZE) == MAX_CACHE_SIZE

    def test_rejects_above_cap(self):
        with pytest.raises(ParameterOutOfBoundsError, match="Must be <= 20%"):
            validate_cache_size(MAX_CACHE_SIZE + 1)

    def test_rejects_negative(self):
        with pytest.raises(ParameterOutOfBoundsError):
            validate_cache_size(-1)


class TestSettlement:
    """Tests for deficit and surplus amounts."""

    def test_deficit(self):
        assert deficit_to_mint(100, 105) == 5

    def test_no_deficit(self):
        with pytest.raises(SettlementError, match="No deficit"):
            deficit_to_mint(100, 100)

    def test_surplus(self):
        assert surplus_to_burn(105, 100) == 5

    def test_no_surplus(self):
        with pytest.raises(SettlementError, match="No surplus"):
            surplus_to_burn(100, 100)
