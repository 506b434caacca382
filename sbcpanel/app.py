"""Control-panel entry point: wires pins, LEDs and monitors and runs them."""

import argparse
import signal
import subprocess
import threading
import time
from contextlib import ExitStack
from typing import Callable, List

from .button import ButtonWatcher
from .gpio import DEFAULT_SYSFS_ROOT, GpioPin, PinMode
from .led import LedController
from .log import DEFAULT_LOG_PATH, get_logger, init_logging
from .microphone import MicrophoneMonitor
from .network import NetworkMonitor
from .states import LedPattern

SYSTEM_LED_PIN = 27
NETWORK_LED_PIN = 17
MIC_LED_PIN = 18
BUTTON_PIN = 5
SYSTEM_CHECK_COMMAND = ("/bin/systemctl", "is-system-running", "--quiet")
SYSTEM_LOOP_INTERVAL = 1.0
NETWORK_LOOP_INTERVAL = 1.0
MIC_LOOP_INTERVAL = 0.1
_JOIN_SLICE = 0.5


def _is_system_running() -> bool:
    try:
        result = subprocess.run(SYSTEM_CHECK_COMMAND, check=False)
    except OSError:
        return False
    return result.returncode == 0


def _system_led_loop(
    running: threading.Event,
    led: LedController,
    is_ready: Callable[[], bool] = _is_system_running,
    interval: float = SYSTEM_LOOP_INTERVAL,
) -> None:
    log = get_logger()
    log.info("System LED thread started")
    while running.is_set():
        led.set_pattern(LedPattern.SOLID if is_ready() else LedPattern.OFF)
        led.update()
        time.sleep(interval)
    log.info("System LED thread stopped")


def _network_loop(
    running: threading.Event,
    monitor: NetworkMonitor,
    led: LedController,
    interval: float = NETWORK_LOOP_INTERVAL,
) -> None:
    log = get_logger()
    log.info("Network monitor thread started")
    while running.is_set():
        monitor.update()
        led.update()
        time.sleep(interval)
    log.info("Network monitor thread stopped")


def _microphone_loop(
    running: threading.Event,
    monitor: MicrophoneMonitor,
    led: LedController,
    interval: float = MIC_LOOP_INTERVAL,
) -> None:
    log = get_logger()
    log.info("Microphone monitor thread started")
    while running.is_set():
        monitor.update()
        led.update()
        time.sleep(interval)
    log.info("Microphone monitor thread stopped")


def _button_loop(watcher: ButtonWatcher) -> None:
    log = get_logger()
    log.info("Button watcher thread started")
    watcher.run()
    log.info("Button watcher thread stopped")


def _parse_args(argv):
    parser = argparse.ArgumentParser(
        prog="sbcpanel", description="Drive the status LEDs and shutdown button of the board."
    )
    parser.add_argument("--sysfs-root", default=DEFAULT_SYSFS_ROOT, help="GPIO sysfs directory")
    parser.add_argument("--log-path", default=DEFAULT_LOG_PATH, help="rotating log file")
    return parser.parse_args(argv)


def _join_all(threads: List[threading.Thread]) -> None:
    for thread in threads:
        while thread.is_alive():
            thread.join(_JOIN_SLICE)


def main(argv=None) -> int:
    """Run the panel until interrupted; return the process exit status.

    The microphone monitor needs an ADC and PWM backend, which this entry
    point does not have, so it runs the system LED, network LED and button.
    """
    args = _parse_args(argv)
    init_logging(args.log_path)
    log = get_logger()
    log.info("Application started")

    running = threading.Event()
    running.set()

    with ExitStack() as stack:
        try:
            system_pin = stack.enter_context(GpioPin(SYSTEM_LED_PIN, PinMode.OUT, args.sysfs_root))
            network_pin = stack.enter_context(
                GpioPin(NETWORK_LED_PIN, PinMode.OUT, args.sysfs_root)
            )
            button_pin = stack.enter_context(GpioPin(BUTTON_PIN, PinMode.IN, args.sysfs_root))
            button_pin.set_edge_trigger("falling")
            system_led = LedController(system_pin)
            network_led = LedController(network_pin)
        except RuntimeError as exc:
            log.error("Hardware setup failed: %s", exc)
            return 1

        network_monitor = NetworkMonitor(network_led)
        button = ButtonWatcher(button_pin, running, system_led)
        log.info("No ADC backend available; microphone monitor on pin %d disabled", MIC_LED_PIN)

        def handle_signal(signum, _frame):
            running.clear()
            system_led.set_pattern(LedPattern.OFF)
            log.warning("Signal %d received. Shutting down...", signum)

        previous = signal.signal(signal.SIGINT, handle_signal)
        try:
            threads = [
                threading.Thread(target=_system_led_loop, args=(running, system_led), daemon=True),
                threading.Thread(
                    target=_network_loop, args=(running, network_monitor, network_led), daemon=True
                ),
                threading.Thread(target=_button_loop, args=(button,), daemon=True),
            ]
            for thread in threads:
                thread.start()
            _join_all(threads)
        finally:
            signal.signal(signal.SIGINT, previous)

    log.info("Application exited")
    return 0