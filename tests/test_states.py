import pytest

from sbcpanel.states import ButtonState, LedPattern, NetworkStatus


@pytest.mark.parametrize("enum_cls", [ButtonState, LedPattern, NetworkStatus])
def test_members_round_trip_through_their_values(enum_cls):
    for member in enum_cls:
        assert enum_cls(member.value) is member


@pytest.mark.parametrize("enum_cls", [ButtonState, LedPattern, NetworkStatus])
def test_values_are_unique(enum_cls):
    values = [member.value for member in enum_cls]
    assert len(values) == len(set(values))


def test_button_states_in_lifecycle_order():
    looked_up = [ButtonState(member.value) for member in ButtonState]
    assert looked_up == [
        ButtonState.IDLE,
        ButtonState.PRESSED,
        ButtonState.HOLDING,
        ButtonState.TRIGGERED,
    ]


@pytest.mark.parametrize(
    ("pattern", "expected"),
    [
        (LedPattern.OFF, False),
        (LedPattern.SOLID, False),
        (LedPattern.BLINK_SLOW, True),
        (LedPattern.BLINK_FAST, True),
    ],
)
def test_only_blink_patterns_are_blinking(pattern, expected):
    assert LedPattern(pattern.value).is_blinking is expected


def test_unknown_value_is_rejected():
    with pytest.raises(ValueError):
        NetworkStatus("offline")