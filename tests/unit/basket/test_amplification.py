"""Tests for the amplification ramp state machine."""

import pytest

from pegpool.basket.amplification import AmplificationRamp
from pegpool.basket.errors import (
    RampCooldownError,
    RampError,
    RampNotActiveError,
    RampTargetOutOfBoundsError,
    RampTooShortError,
)
from pegpool.basket.models import AmpData
from pegpool.constants import MAX_A
from tests.helpers import DAY, T0


@pytest.fixture
def ramp() -> AmplificationRamp:
    """Stable at A=100 (10_000 scaled)."""
    return AmplificationRamp(AmpData(initial_a=10_000, target_a=10_000))


class TestCurrentA:
    """Tests for A interpolation."""

    def test_stable(self, ramp):
        assert ramp.current_a(T0) == 10_000
        assert not ramp.is_ramping(T0)

    def test_ramp_up_over_ten_days(self, ramp):
        ramp.start_ramp(120, T0 + 10 * DAY, T0)
        assert ramp.current_a(T0) == 10_000
        assert ramp.current_a(T0 + DAY) == 10_200
        assert ramp.current_a(T0 + 10 * DAY) == 12_000
        assert ramp.current_a(T0 + 20 * DAY) == 12_000

    def test_ramp_is_monotonic(self, ramp):
        ramp.start_ramp(120, T0 + 10 * DAY, T0)
        values = [ramp.current_a(T0 + step * 3_601) for step in range(0, 250)]
        assert values == sorted(values)

    def test_ramp_down_truncates_toward_initial(self):
        ramp = AmplificationRamp(AmpData(initial_a=12_000, target_a=12_000))
        ramp.start_ramp(100, T0 + 3 * DAY, T0)
        # 12_000 - 2_000 / 3 = 11_333.3..., truncated toward 12_000
        assert ramp.current_a(T0 + DAY) == 11_334

    def test_is_ramping_until_end(self, ramp):
        ramp.start_ramp(120, T0 + 2 * DAY, T0)
        assert ramp.is_ramping(T0 + 2 * DAY - 1)
        assert not ramp.is_ramping(T0 + 2 * DAY)


class TestStartRamp:
    """Tests for start_ramp validation."""

    def test_records_state(self, ramp):
        data = ramp.start_ramp(120, T0 + 2 * DAY, T0)
        assert data == AmpData(
            initial_a=10_000, target_a=12_000, ramp_start_time=T0, ramp_end_time=T0 + 2 * DAY
        )

    def test_too_short(self, ramp):
        with pytest.raises(RampTooShortError, match="Ramp time too short"):
            ramp.start_ramp(120, T0 + DAY - 1, T0)

    @pytest.mark.parametrize("target", [0, MAX_A])
    def test_target_out_of_bounds(self, ramp, target):
        with pytest.raises(RampTargetOutOfBoundsError, match="A target out of bounds"):
            ramp.start_ramp(target, T0 + DAY, T0)

    def test_increase_too_big(self, ramp):
        with pytest.raises(RampTargetOutOfBoundsError, match="A target increase too big"):
            ramp.start_ramp(1_001, T0 + DAY, T0)

    def test_decrease_too_big(self, ramp):
        with pytest.raises(RampTargetOutOfBoundsError, match="A target decrease too big"):
            ramp.start_ramp(9, T0 + DAY, T0)

    def test_tenfold_change_allowed(self, ramp):
        ramp.start_ramp(1_000, T0 + DAY, T0)
        assert ramp.data.target_a == 100_000

    def test_cooldown_checked_first(self):
        ramp = AmplificationRamp(
            AmpData(initial_a=10_000, target_a=12_000, ramp_start_time=T0 - DAY, ramp_end_time=T0)
        )
        with pytest.raises(RampCooldownError, match="Sufficient period"):
            ramp.start_ramp(130, T0 + 1, T0 + 10)

    def test_cooldown_elapsed(self):
        ramp = AmplificationRamp(
            AmpData(initial_a=10_000, target_a=12_000, ramp_start_time=T0 - DAY, ramp_end_time=T0)
        )
        ramp.start_ramp(130, T0 + 3 * DAY, T0 + DAY)
        assert ramp.data.initial_a == 12_000

    def test_all_ramp_errors_share_base(self):
        for cls in (RampCooldownError, RampNotActiveError, RampTooShortError):
            assert issubclass(cls, RampError)


class TestStopRamp:
    """Tests for stop_ramp."""

    def test_not_ramping(self, ramp):
        with pytest.raises(RampNotActiveError, match="Amplification not changing"):
            ramp.stop_ramp(T0)

    def test_freezes_current_value(self, ramp):
        ramp.start_ramp(120, T0 + 10 * DAY, T0)
        data = ramp.stop_ramp(T0 + DAY)
        assert data.initial_a == data.target_a == 10_200
        assert data.ramp_start_time == data.ramp_end_time == T0 + DAY
        assert ramp.current_a(T0 + 5 * DAY) == 10_200
