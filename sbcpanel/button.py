"""Push-button watcher that requests a shutdown after a long press."""

import subprocess
import threading
import time
from typing import Callable, Optional

from .gpio import GpioPin
from .led import LedController
from .log import get_logger
from .messaging import ZmqService
from .states import ButtonState

DEBOUNCE_TIME = 0.05
HOLD_TIME = 3.0
POLL_INTERVAL = 0.05
SHUTDOWN_MESSAGE = "shutdown"
REBOOT_COMMAND = ("sudo", "/sbin/reboot")


class ButtonWatcher:
    """Debounces an active-low button and fires once it has been held.

    When held past ``HOLD_TIME`` a shutdown message goes to
    ``shutdown_endpoint`` through ``zmq_service``; without a service the
    board is rebooted locally.
    """

    def __init__(
        self,
        pin: GpioPin,
        running: threading.Event,
        led: LedController,
        zmq_service: Optional[ZmqService] = None,
        shutdown_endpoint: str = "",
        clock: Callable[[], float] = time.monotonic,
    ):
        self._pin = pin
        self._running = running
        self._led = led
        self._zmq = zmq_service
        self._shutdown_endpoint = shutdown_endpoint
        self._clock = clock
        self._state = ButtonState.IDLE
        self._pressed_at = 0.0
        self._shutdown_sent = False

    @property
    def state(self) -> ButtonState:
        return self._state

    def run(self) -> None:
        """Poll the button until ``running`` is cleared."""
        log = get_logger()
        log.info("[ButtonWatcher] Polling for button events...")
        while self._running.is_set():
            try:
                self.update()
            except Exception as exc:
                log.error("[ButtonWatcher] Error in update(): %s", exc)
            time.sleep(POLL_INTERVAL)

    def _fire(self) -> None:
        log = get_logger()
        self._shutdown_sent = True
        if self._zmq is not None:
            self._zmq.send(self._shutdown_endpoint, SHUTDOWN_MESSAGE)
            log.warning("[ButtonWatcher] Shutdown message sent via ZMQ")
            return
        log.warning("[ButtonWatcher] No ZMQ. Rebooting locally...")
        try:
            subprocess.run(REBOOT_COMMAND, check=False)
        except OSError as exc:
            log.error("[ButtonWatcher] Reboot could not be started: %s", exc)

    def update(self) -> None:
        """Advance the state machine by one reading of the pin."""
        log = get_logger()
        pressed = not self._pin.read()
        now = self._clock()
        state = self._state

        if state is ButtonState.IDLE:
            if pressed:
                self._pressed_at = now
                self._state = ButtonState.PRESSED
                log.info("[ButtonWatcher] -> Pressed")
        elif state is ButtonState.PRESSED:
            if not pressed:
                self._state = ButtonState.IDLE
                log.info("[ButtonWatcher] -> Idle (bounce)")
            elif now - self._pressed_at > DEBOUNCE_TIME:
                self._state = ButtonState.HOLDING
                log.info("[ButtonWatcher] -> Holding")
        elif state is ButtonState.HOLDING:
            if not pressed:
                self._state = ButtonState.IDLE
                log.info("[ButtonWatcher] -> Idle (released early)")
            elif now - self._pressed_at > HOLD_TIME and not self._shutdown_sent:
                self._fire()
                self._state = ButtonState.TRIGGERED
                log.info("[ButtonWatcher] -> Triggered")
        elif state is ButtonState.TRIGGERED:
            if not pressed:
                self._state = ButtonState.IDLE
                self._shutdown_sent = False
                log.info("[ButtonWatcher] -> Idle (after trigger)")