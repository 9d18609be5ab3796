"""Tests for the SafeInt checked arithmetic wrapper."""

import pytest

from pegpool.safe_int import DivisionByZero, S, SafeInt, SafeIntError, Underflow


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        """SafeInt can wrap another SafeInt."""
        assert SafeInt(SafeInt(42)).value == 42

    def test_from_invalid_type_raises(self):
        with pytest.raises(TypeError):
            SafeInt("42")  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(3.14)  # type: ignore

    def test_alias_s(self):
        assert S is SafeInt


class TestSafeIntArithmetic:
    """Tests for checked operators."""

    def test_add_and_radd(self):
        assert (S(2) + 3).value == 5
        assert (3 + S(2)).value == 5

    def test_mul_and_rmul(self):
        assert (S(6) * 7).value == 42
        assert (7 * S(6)).value == 42

    def test_sub(self):
        assert (S(10) - 4).value == 6

    def test_sub_to_zero(self):
        assert (S(10) - S(10)).value == 0

    def test_sub_underflow_raises(self):
        with pytest.raises(Underflow, match="Underflow"):
            S(3) - 4

    def test_rsub_underflow_raises(self):
        with pytest.raises(Underflow):
            3 - S(4)

    def test_floordiv(self):
        assert (S(10) // 3).value == 3

    def test_floordiv_by_zero_raises(self):
        with pytest.raises(DivisionByZero):
            S(10) // 0

    def test_rfloordiv(self):
        assert (10 // S(3)).value == 3

    def test_ceil_div(self):
        assert S(10).ceil_div(3).value == 4
        assert S(9).ceil_div(3).value == 3
        assert S(0).ceil_div(3).value == 0

    def test_ceil_div_by_zero_raises(self):
        with pytest.raises(DivisionByZero):
            S(1).ceil_div(0)

    def test_errors_are_arithmetic_errors(self):
        """Checked-arithmetic failures share one base class."""
        assert issubclass(Underflow, SafeIntError)
        assert issubclass(DivisionByZero, SafeIntError)
        assert issubclass(SafeIntError, ArithmeticError)

    def test_abs_diff(self):
        assert S(5).abs_diff(8) == 3
        assert S(8).abs_diff(S(5)) == 3


class TestSafeIntComparison:
    """Tests for comparisons with int and SafeInt."""

    def test_equality(self):
        assert S(5) == 5
        assert S(5) == S(5)
        assert S(5) != S(6)

    def test_ordering(self):
        assert S(5) < 6
        assert S(5) <= S(5)
        assert S(7) > S(6)
        assert S(7) >= 7

    def test_bool_and_int(self):
        assert not S(0)
        assert S(1)
        assert int(S(9)) == 9
