# sbcpanel

A small control-panel daemon for single-board computers. It drives status
LEDs through the Linux GPIO sysfs interface and watches a push button.

## Installation

```
pip install .
```

To run the test suite, install the test extra:

```
pip install ".[test]"
pytest
```

## Running

```
sbcpanel [--sysfs-root DIR] [--log-path FILE]
```

- `--sysfs-root`: the GPIO sysfs directory (default `/sys/class/gpio`).
- `--log-path`: the rotating log file (default `../logs/sbc.log`, relative to
  the working directory; its directory is created if missing). The log is
  also written to standard output. The file rotates at 5 MiB and keeps three
  backups.

The command exports and drives these pins:

- **System LED, GPIO 27**: solid while `/bin/systemctl is-system-running
  --quiet` succeeds, off otherwise. Checked once a second.
- **Network LED, GPIO 17**: blinks fast when `/proc/net/dev` lists no
  interface other than loopback, blinks slowly when there is an interface but
  a single ping to `8.8.8.8` fails, and stays solid when the ping succeeds.
  A check runs at most every two seconds.
- **Button, GPIO 5**: active low, with its edge trigger set to `falling`.
  After a 50 ms debounce, holding it down for more than three seconds runs
  `sudo /sbin/reboot`. It fires once per press.

Stop the panel with Ctrl+C: the system LED is switched off, the threads
finish and the pins are unexported. The command exits with status 1 if a
pin cannot be set up.

## What the command does not do

- It does not drive the microphone LED. The package ships no ADC driver and
  no PWM backend, so the command logs that the microphone monitor is disabled.
  `MicrophoneMonitor` can still be used from your own code with an ADC and a
  PWM writer you supply (see below).
- It does not send the shutdown request over ZeroMQ. `ButtonWatcher` can do
  so when given a `ZmqService`, but the command does not set one up.

## Using the pieces in your own code

```python
from sbcpanel.gpio import GpioPin, PinMode
from sbcpanel.led import LedController
from sbcpanel.network import NetworkMonitor

with GpioPin(17, PinMode.OUT) as pin:
    led = LedController(pin)
    monitor = NetworkMonitor(led)
    monitor.update()
    led.update()
    print(monitor.state, led.pattern)
```

- `sbcpanel.states`: the `ButtonState`, `LedPattern` and `NetworkStatus`
  enumerations.
- `sbcpanel.gpio`: `GpioPin` and `PinMode`. `IN` and `OUT` pins are exported
  under the sysfs root and offer `read`, `write`, `set_edge_trigger` and
  `poll`. `PWM_OUT` pins do not use sysfs and need a `pwm_writer` callable,
  called as `pwm_writer(pin_number, duty_10bit)` by `write_pwm`. Using an
  operation on a pin of the wrong mode raises `ValueError`; file errors
  raise `RuntimeError`. `close` (or leaving the `with` block) unexports the
  pin.
- `sbcpanel.led`: `LedController` with `set_pattern` (off, solid, slow blink
  every 0.4 s, fast blink every 0.1 s), `update` for blinking, `set_pwm` for
  brightness in percent and the `pattern` property.
- `sbcpanel.network`: `NetworkMonitor` with `update`, `has_network_interface`,
  `has_internet_connection` and the `state` property.
- `sbcpanel.microphone`: `MicrophoneMonitor` and `amplitude_to_pwm`. The ADC is
  any object with a `read_single_ended(channel)` method. Every half second,
  `update` takes 50 samples, turns their peak-to-peak range into volts and
  sets the LED brightness. If reading fails, it switches the LED to fast blink.
- `sbcpanel.messaging`: `ZmqService`, which holds PULL input and PUSH output
  sockets keyed by endpoint. `run` starts a background loop that hands each
  received message to the callback registered with `add_callback`. `send`
  sends to an output. `stop` and `close` shut it down.
- `sbcpanel.button`: `ButtonWatcher`, the debounced long-press detector, with
  `update`, `run` and the `state` property.
- `sbcpanel.log`: `init_logging` and `get_logger`.
- `sbcpanel.app`: `main`, the entry point of the `sbcpanel` command.

A PWM LED driven from a microphone:

```python
from sbcpanel.gpio import GpioPin, PinMode
from sbcpanel.led import LedController
from sbcpanel.microphone import MicrophoneMonitor

def pwm_writer(pin_number, duty_10bit):
    ...  # hand the value to your PWM hardware

class MyAdc:
    def read_single_ended(self, channel):
        ...  # return a raw reading

pin = GpioPin(18, PinMode.PWM_OUT, pwm_writer=pwm_writer)
monitor = MicrophoneMonitor(LedController(pin), MyAdc(), adc_channel=0)
monitor.update()
```