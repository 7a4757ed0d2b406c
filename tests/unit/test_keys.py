"""Controller key mapping tests."""

from nescapture.emulator.keys import parse_key_sequence, to_keysym, to_keysyms


def test_controller_buttons_map_to_fceux_defaults() -> None:
    assert to_keysyms(["start", "select", "a", "b", "up"]) == ["Return", "Shift_L", "z", "x", "Up"]


def test_button_names_are_case_insensitive() -> None:
    assert to_keysym("START") == "Return"


def test_raw_keysyms_pass_through() -> None:
    assert to_keysym("space") == "space"
    assert to_keysym("ctrl+r") == "ctrl+r"


def test_parse_key_sequence_splits_on_whitespace() -> None:
    assert parse_key_sequence("  start right\tright a ") == ["start", "right", "right", "a"]
