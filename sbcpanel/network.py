"""Network reachability monitor that reflects its findings on an LED."""

import subprocess
import time
from pathlib import Path
from typing import Callable

from .led import LedController
from .log import get_logger
from .states import LedPattern, NetworkStatus

CHECK_INTERVAL = 3.0
MIN_CHECK_SPACING = 2.0
DEFAULT_PROC_NET_DEV = "/proc/net/dev"
PING_COMMAND = ("ping", "-c", "1", "-W", "1", "8.8.8.8")


class NetworkMonitor:
    """Checks for interfaces and Internet access and sets the LED pattern.

    No external interface shows a fast blink, a local network without
    Internet a slow blink, and a working Internet connection a solid light.
    """

    def __init__(
        self,
        led: LedController,
        clock: Callable[[], float] = time.monotonic,
        proc_net_dev=DEFAULT_PROC_NET_DEV,
    ):
        self._led = led
        self._clock = clock
        self._proc_net_dev = Path(proc_net_dev)
        self._state = NetworkStatus.NO_NETWORK
        self._last_check = clock() - CHECK_INTERVAL

    @property
    def state(self) -> NetworkStatus:
        return self._state

    def update(self) -> None:
        """Run a check unless the previous one was too recent."""
        now = self._clock()
        if now - self._last_check < MIN_CHECK_SPACING:
            return
        self._last_check = now

        log = get_logger()
        if not self.has_network_interface():
            log.warning("[NetworkMonitor] No network interfaces detected")
            self._led.set_pattern(LedPattern.BLINK_FAST)
            self._state = NetworkStatus.NO_NETWORK
        elif not self.has_internet_connection():
            log.info("[NetworkMonitor] Local network available, no Internet")
            self._led.set_pattern(LedPattern.BLINK_SLOW)
            self._state = NetworkStatus.LOCAL_ONLY
        else:
            log.info("[NetworkMonitor] Internet connection available")
            self._led.set_pattern(LedPattern.SOLID)
            self._state = NetworkStatus.CONNECTED

    def has_internet_connection(self) -> bool:
        """True when a single ping to a public address succeeds."""
        log = get_logger()
        try:
            result = subprocess.run(
                PING_COMMAND,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        except OSError as exc:
            log.debug("[NetworkMonitor] Ping could not be started: %s", exc)
            return False
        log.debug("[NetworkMonitor] Ping result: %d", result.returncode)
        return result.returncode == 0

    def has_network_interface(self) -> bool:
        """True when an interface other than loopback is listed."""
        log = get_logger()
        try:
            with open(self._proc_net_dev, encoding="utf-8") as lines:
                for line in lines:
                    if "lo:" in line:
                        continue
                    if ":" in line:
                        log.debug("[NetworkMonitor] Found interface: %s", line.rstrip("\n"))
                        return True
        except OSError:
            pass
        log.debug("[NetworkMonitor] No external network interfaces found")
        return False