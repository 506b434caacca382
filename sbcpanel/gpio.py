"""GPIO pins driven through the sysfs interface, with PWM through a backend."""

import os
import select
import time
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from .log import TRACE, get_logger

DEFAULT_SYSFS_ROOT = "/sys/class/gpio"
_EXPORT_SETTLE_SECONDS = 0.1

PwmWriter = Callable[[int, int], None]


class PinMode(Enum):
    """Direction of a pin."""

    IN = "in"
    OUT = "out"
    PWM_OUT = "pwm_out"


class GpioPin:
    """A single GPIO line.

    Input and output pins are exported and configured under ``sysfs_root``.
    PWM pins do not touch sysfs; their duty values go to ``pwm_writer``,
    called as ``pwm_writer(pin_number, duty_10bit)``.
    """

    def __init__(
        self,
        pin_number: int,
        mode: PinMode,
        sysfs_root=DEFAULT_SYSFS_ROOT,
        pwm_writer: Optional[PwmWriter] = None,
    ):
        self._pin = pin_number
        self._mode = mode
        self._root = Path(sysfs_root)
        self._pin_dir = self._root / f"gpio{pin_number}"
        self._value_path = self._pin_dir / "value"
        self._pwm_writer = pwm_writer
        self._fd: Optional[int] = None
        self._closed = False

        log = get_logger()
        log.debug("Initializing GPIO pin %d", pin_number)

        if mode is PinMode.PWM_OUT:
            if pwm_writer is None:
                raise ValueError(f"GPIO {pin_number} in PWM mode needs a pwm_writer")
            log.debug("Set pin %d as PWM output", pin_number)
            return

        self._export()
        self._set_direction()

        if mode is PinMode.IN:
            flags = os.O_RDONLY | getattr(os, "O_NONBLOCK", 0)
            try:
                self._fd = os.open(self._value_path, flags)
            except OSError as exc:
                log.error("Failed to open %s for polling", self._value_path)
                raise RuntimeError(f"Failed to open {self._value_path} for polling") from exc

    @property
    def pin_number(self) -> int:
        return self._pin

    @property
    def mode(self) -> PinMode:
        return self._mode

    def _write_file(self, path: Path, text: str, purpose: str) -> None:
        try:
            with open(path, "w", encoding="ascii") as handle:
                handle.write(text)
        except OSError as exc:
            get_logger().error("Failed to open %s for %s", path, purpose)
            raise RuntimeError(f"Failed to open {path} for {purpose}") from exc

    def _export(self) -> None:
        self._write_file(self._root / "export", str(self._pin), "export")
        get_logger().debug("Exported GPIO pin %d", self._pin)
        time.sleep(_EXPORT_SETTLE_SECONDS)

    def _set_direction(self) -> None:
        direction = "out" if self._mode is PinMode.OUT else "in"
        self._write_file(self._pin_dir / "direction", direction, "direction")
        get_logger().debug("Set GPIO %d direction to %s", self._pin, direction)

    def _require_mode(self, mode: PinMode, operation: str) -> None:
        if self._mode is not mode:
            get_logger().error(
                "%s not allowed on GPIO %d (mode is %s)", operation, self._pin, self._mode.value
            )
            raise ValueError(f"Cannot call {operation} on a {self._mode.value} GPIO pin")

    def write(self, value: bool) -> None:
        """Drive an output pin high or low."""
        self._require_mode(PinMode.OUT, "write()")
        text = "1" if value else "0"
        self._write_file(self._value_path, text, "writing")
        get_logger().log(TRACE, "Wrote %s to GPIO %d", text, self._pin)

    def read(self) -> bool:
        """Return True when an input pin reads high."""
        self._require_mode(PinMode.IN, "read()")
        try:
            content = self._value_path.read_text(encoding="ascii")
        except OSError as exc:
            get_logger().error("Failed to open %s for reading", self._value_path)
            raise RuntimeError(f"Failed to open {self._value_path} for reading") from exc
        tokens = content.split()
        value = tokens[0] if tokens else ""
        get_logger().log(TRACE, "Read '%s' from GPIO %d", value, self._pin)
        return value == "1"

    def set_edge_trigger(self, edge: str) -> None:
        """Select the interrupt edge: "none", "rising", "falling" or "both"."""
        self._write_file(self._pin_dir / "edge", edge, "writing")
        get_logger().debug("Set GPIO %d edge to '%s'", self._pin, edge)

    def poll(self, timeout_ms: int) -> bool:
        """Wait up to ``timeout_ms`` for an edge; True if one arrived."""
        if self._fd is None:
            get_logger().error("GPIO %d not configured for polling", self._pin)
            raise RuntimeError("GPIO not configured for polling")
        os.lseek(self._fd, 0, os.SEEK_SET)
        os.read(self._fd, 1)
        poller = select.poll()
        poller.register(self._fd, select.POLLPRI | select.POLLERR)
        events = poller.poll(timeout_ms)
        get_logger().log(TRACE, "Polling GPIO %d returned %d", self._pin, len(events))
        return bool(events)

    def write_pwm(self, duty_10bit: int) -> None:
        """Set the duty cycle of a PWM pin on a 0..1024 scale."""
        if self._mode is not PinMode.PWM_OUT:
            get_logger().error("Attempt to use PWM on GPIO %d not set to PWM", self._pin)
            raise ValueError("write_pwm() called on non-PWM pin")
        self._pwm_writer(self._pin, duty_10bit)

    def close(self) -> None:
        """Release the pin; sysfs pins are unexported."""
        if self._closed:
            return
        self._closed = True
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None
        if self._mode is PinMode.PWM_OUT:
            return
        log = get_logger()
        try:
            with open(self._root / "unexport", "w", encoding="ascii") as handle:
                handle.write(str(self._pin))
            log.debug("Unexporting GPIO pin %d", self._pin)
        except OSError:
            log.warning("Failed to open %s for pin %d", self._root / "unexport", self._pin)

    def __enter__(self) -> "GpioPin":
        return self

    def __exit__(self, *args) -> None:
        self.close()