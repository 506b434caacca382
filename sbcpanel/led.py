"""LED driven in solid, blinking or PWM fashion."""

import time
from typing import Callable

from .gpio import GpioPin, PinMode
from .log import get_logger
from .states import LedPattern

SLOW_BLINK_PERIOD = 0.4
FAST_BLINK_PERIOD = 0.1
PWM_RANGE = 1024


class LedController:
    """Shows an ``LedPattern`` on a GPIO pin; call ``update`` regularly to blink."""

    def __init__(self, pin: GpioPin, clock: Callable[[], float] = time.monotonic):
        self._pin = pin
        self._clock = clock
        self._pattern = LedPattern.OFF
        self._led_on = False
        self._last_toggle = clock()
        if pin.mode is PinMode.OUT:
            pin.write(False)

    @property
    def pattern(self) -> LedPattern:
        return self._pattern

    def set_pattern(self, pattern: LedPattern) -> None:
        """Switch to ``pattern``; setting the current pattern again does nothing."""
        if pattern is self._pattern:
            return
        self._pattern = pattern
        self._last_toggle = self._clock()

        if pattern is LedPattern.OFF:
            self._pin.write(False)
            self._led_on = False
        elif pattern is LedPattern.SOLID:
            self._pin.write(True)
            self._led_on = True
        get_logger().debug("[Pattern] %s", pattern.name)

    def _blink_period(self) -> float:
        return FAST_BLINK_PERIOD if self._pattern is LedPattern.BLINK_FAST else SLOW_BLINK_PERIOD

    def update(self) -> None:
        """Toggle a blinking LED once its period has elapsed."""
        if not self._pattern.is_blinking:
            return
        now = self._clock()
        if now - self._last_toggle >= self._blink_period():
            self._led_on = not self._led_on
            self._pin.write(self._led_on)
            self._last_toggle = now

    def set_pwm(self, duty_cycle_percent: int) -> None:
        """Set brightness in percent on a PWM pin."""
        self._pin.write_pwm(int(duty_cycle_percent * PWM_RANGE / 100))