import itertools

import pytest

from sbcpanel.gpio import PinMode
from sbcpanel.led import PWM_RANGE, LedController
from sbcpanel.microphone import (
    ADC_FULL_SCALE_COUNTS,
    ADC_FULL_SCALE_VOLTS,
    SAMPLE_COUNT,
    SAMPLE_DELAY,
    MicrophoneMonitor,
    amplitude_to_pwm,
)
from sbcpanel.states import LedPattern


class _PwmPin:
    mode = PinMode.PWM_OUT

    def __init__(self):
        self.duties = []

    def write_pwm(self, duty):
        self.duties.append(duty)

    def write(self, value):
        raise AssertionError("PWM pin must not be written digitally")


class _Adc:
    def __init__(self, values):
        self._values = itertools.cycle(values)
        self.channels = []

    def read_single_ended(self, channel):
        self.channels.append(channel)
        return next(self._values)


class _BrokenAdc:
    def read_single_ended(self, channel):
        raise OSError("i2c bus error")


class _Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class _Sleeps:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def pin():
    return _PwmPin()


@pytest.fixture
def led(pin):
    return LedController(pin)


def test_pwm_is_clamped_at_both_ends():
    assert amplitude_to_pwm(0.0) == 1
    assert amplitude_to_pwm(5.0) == 100


def test_pwm_is_monotonic_and_in_range():
    duties = [amplitude_to_pwm(v / 100) for v in range(-20, 150)]
    assert duties == sorted(duties)
    assert all(1 <= d <= 100 for d in duties)


def test_constant_signal_has_no_amplitude(led):
    adc = _Adc([700])
    sleeps = _Sleeps()
    monitor = MicrophoneMonitor(led, adc, adc_channel=2, sleep=sleeps)
    assert monitor.calculate_amplitude() == 0.0
    assert adc.channels == [2] * SAMPLE_COUNT
    assert sleeps.calls == [SAMPLE_DELAY] * SAMPLE_COUNT


def test_full_scale_swing(led):
    monitor = MicrophoneMonitor(led, _Adc([0, ADC_FULL_SCALE_COUNTS]), sleep=_Sleeps())
    assert monitor.calculate_amplitude() == pytest.approx(ADC_FULL_SCALE_VOLTS)


def test_update_waits_for_read_interval(led, pin):
    clock = _Clock()
    adc = _Adc([500])
    monitor = MicrophoneMonitor(led, adc, clock=clock, sleep=_Sleeps())
    clock.now = 0.4
    monitor.update()
    assert adc.channels == []
    assert pin.duties == []

    clock.now = 0.5
    monitor.update()
    assert len(adc.channels) == SAMPLE_COUNT
    assert len(pin.duties) == 1
    assert 0 <= pin.duties[0] <= PWM_RANGE

    clock.now = 0.7
    monitor.update()
    assert len(adc.channels) == SAMPLE_COUNT


def test_loud_signal_drives_full_brightness(led, pin):
    clock = _Clock()
    monitor = MicrophoneMonitor(
        led, _Adc([0, ADC_FULL_SCALE_COUNTS]), clock=clock, sleep=_Sleeps()
    )
    clock.now = 1.0
    monitor.update()
    assert pin.duties == [PWM_RANGE]
    amplitude = monitor.calculate_amplitude()
    assert amplitude == pytest.approx(ADC_FULL_SCALE_VOLTS)
    assert amplitude_to_pwm(amplitude) == 100
    assert led.pattern is LedPattern.OFF


def test_adc_failure_blinks_fast(led, pin):
    clock = _Clock()
    monitor = MicrophoneMonitor(led, _BrokenAdc(), clock=clock, sleep=_Sleeps())
    clock.now = 1.0
    monitor.update()
    assert led.pattern is LedPattern.BLINK_FAST
    assert pin.duties == []


def test_missing_adc_blinks_fast(led):
    clock = _Clock()
    monitor = MicrophoneMonitor(led, None, clock=clock, sleep=_Sleeps())
    clock.now = 1.0
    monitor.update()
    assert led.pattern is LedPattern.BLINK_FAST


def test_read_raw_without_adc_is_zero(led):
    assert MicrophoneMonitor(led, None).read_adc_raw() == 0


def test_read_raw_returns_reading(led):
    adc = _Adc([321])
    monitor = MicrophoneMonitor(led, adc, adc_channel=3)
    assert monitor.read_adc_raw() == 321
    assert adc.channels == [3]