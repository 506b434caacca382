"""State enumerations shared by the panel's watchers and controllers."""

from enum import Enum


class ButtonState(Enum):
    """Phases of the push-button state machine."""

    IDLE = "idle"            # not pressed
    PRESSED = "pressed"      # has just been pressed
    HOLDING = "holding"      # pressed past the debounce time
    TRIGGERED = "triggered"  # held long enough to fire its action


class LedPattern(Enum):
    """What an LED should show."""

    OFF = "off"
    SOLID = "solid"
    BLINK_SLOW = "blink_slow"
    BLINK_FAST = "blink_fast"

    @property
    def is_blinking(self) -> bool:
        """True for the patterns that toggle the LED over time."""
        return self in (LedPattern.BLINK_SLOW, LedPattern.BLINK_FAST)


class NetworkStatus(Enum):
    """Reachability of the network as seen from the board."""

    NO_NETWORK = "no_network"
    LOCAL_ONLY = "local_only"
    CONNECTED = "connected"