"""Time-based linear ramp of the amplification coefficient.

A is stable when initial_a == target_a and ramping while
ramp_start_time <= now < ramp_end_time. All A values are scaled by
A_PRECISION; start_ramp takes an unscaled target (120 -> 12_000).
"""

from __future__ import annotations

import structlog

from pegpool.constants import A_PRECISION, MAX_A, MIN_RAMP_TIME

from .errors import (
    RampCooldownError,
    RampNotActiveError,
    RampTargetOutOfBoundsError,
    RampTooShortError,
)
from .models import AmpData

logger = structlog.get_logger()


class AmplificationRamp:
    """Ramp state machine over a pool's AmpData.

    The AmpData is mutated in place so that pool snapshots include it.
    """

    def __init__(self, data: AmpData) -> None:
        self.data = data

    def current_a(self, now: int) -> int:
        """A at time now, linearly interpolated while ramping.

        Interpolation truncates toward initial_a.
        """
        data = self.data
        if now >= data.ramp_end_time:
            return data.target_a

        elapsed = max(0, now - data.ramp_start_time)
        duration = data.ramp_end_time - data.ramp_start_time
        if data.target_a > data.initial_a:
            return data.initial_a + (data.target_a - data.initial_a) * elapsed // duration
        return data.initial_a - (data.initial_a - data.target_a) * elapsed // duration

    def is_ramping(self, now: int) -> bool:
        return now < self.data.ramp_end_time

    def start_ramp(self, target_a: int, ramp_end_time: int, now: int) -> AmpData:
        """Begin a ramp from the current A to target_a (unscaled).

        Raises:
            RampCooldownError: Less than a day since the previous ramp ended
            RampTooShortError: ramp_end_time is less than a day away
            RampTargetOutOfBoundsError: Target is 0, >= MAX_A, or more than a
                10x change from the current A
        """
        if now < self.data.ramp_end_time + MIN_RAMP_TIME:
            raise RampCooldownError()
        if ramp_end_time < now + MIN_RAMP_TIME:
            raise RampTooShortError()
        if target_a <= 0 or target_a >= MAX_A:
            raise RampTargetOutOfBoundsError("A target out of bounds")

        current = self.current_a(now)
        target = target_a * A_PRECISION
        if target > current:
            if target > current * 10:
                raise RampTargetOutOfBoundsError("A target increase too big")
        elif target * 10 < current:
            raise RampTargetOutOfBoundsError("A target decrease too big")

        self.data.initial_a = current
        self.data.target_a = target
        self.data.ramp_start_time = now
        self.data.ramp_end_time = ramp_end_time
        logger.info(
            "amplification_ramp_started",
            initial_a=current,
            target_a=target,
            ramp_start_time=now,
            ramp_end_time=ramp_end_time,
        )
        return self.data

    def stop_ramp(self, now: int) -> AmpData:
        """Freeze A at its current value.

        Raises:
            RampNotActiveError: No ramp in progress
        """
        if not self.is_ramping(now):
            raise RampNotActiveError()

        current = self.current_a(now)
        self.data.initial_a = current
        self.data.target_a = current
        self.data.ramp_start_time = now
        self.data.ramp_end_time = now
        logger.info("amplification_ramp_stopped", current_a=current, time=now)
        return self.data
