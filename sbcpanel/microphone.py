"""Microphone level monitor that drives a PWM LED from an ADC."""

import time
from typing import Callable, Iterator, Optional, Protocol

from .led import LedController
from .log import get_logger
from .states import LedPattern

READ_INTERVAL = 0.5
SAMPLE_COUNT = 50
SAMPLE_DELAY = 0.002
ADC_MAX_READING = 4095
ADC_FULL_SCALE_VOLTS = 2.048
ADC_FULL_SCALE_COUNTS = 2048
MIN_VOLTS = 0.01
MAX_VOLTS = 1.0


class Adc(Protocol):
    """An analogue-to-digital converter with single-ended channels."""

    def read_single_ended(self, channel: int) -> int:
        ...


def amplitude_to_pwm(amplitude_volts: float) -> int:
    """Map a peak-to-peak amplitude in volts to a duty cycle in percent."""
    clamped = min(max(amplitude_volts, MIN_VOLTS), MAX_VOLTS)
    return int(clamped / MAX_VOLTS * 100)


class MicrophoneMonitor:
    """Samples the microphone periodically and sets the LED brightness."""

    def __init__(
        self,
        led: LedController,
        adc: Optional[Adc],
        adc_channel: int = 0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._led = led
        self._adc = adc
        self._channel = adc_channel
        self._clock = clock
        self._sleep = sleep
        self._last_read = clock()

    def read_adc_raw(self) -> int:
        """Return one reading from the channel, or 0 without an ADC."""
        log = get_logger()
        if self._adc is None:
            log.error("[MicrophoneMonitor] ADC not initialized!")
            return 0
        value = self._adc.read_single_ended(self._channel)
        log.debug("[MicrophoneMonitor] Raw ADC value on channel %d: %d", self._channel, value)
        return value

    def update(self) -> None:
        """Measure and show the level once the read interval has passed."""
        now = self._clock()
        if now - self._last_read < READ_INTERVAL:
            return
        self._last_read = now

        log = get_logger()
        try:
            amplitude = self.calculate_amplitude()
            percent = amplitude_to_pwm(amplitude)
            log.debug(
                "[MicrophoneMonitor] Amplitude = %.3f V -> PWM = %d%%", amplitude, percent
            )
            self._led.set_pwm(percent)
        except Exception as exc:
            log.error("[MicrophoneMonitor] ADC read error: %s", exc)
            self._led.set_pattern(LedPattern.BLINK_FAST)

    def _samples(self) -> Iterator[int]:
        if self._adc is None:
            raise RuntimeError("ADC not initialized")
        for _ in range(SAMPLE_COUNT):
            yield self._adc.read_single_ended(self._channel)
            self._sleep(SAMPLE_DELAY)

    def calculate_amplitude(self) -> float:
        """Peak-to-peak amplitude in volts over a short burst of samples."""
        readings = list(self._samples())
        low = min([ADC_MAX_READING, *readings])
        high = max([0, *readings])
        return (high - low) * (ADC_FULL_SCALE_VOLTS / ADC_FULL_SCALE_COUNTS)