"""Sysfs GPIO pins, status LEDs, network and microphone monitors, a ZeroMQ message service and a long-press button watcher."""

__version__ = "0.1.0"