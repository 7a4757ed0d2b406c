"""NES controller to X keysym mapping (FCEUX default bindings)."""

from typing import Iterable, List

# FCEUX defaults: arrows = D-pad, Z = A, X = B, Return = Start, Shift = Select
CONTROLLER_KEYS = {
    "up": "Up",
    "down": "Down",
    "left": "Left",
    "right": "Right",
    "a": "z",
    "b": "x",
    "start": "Return",
    "select": "Shift_L",
}

CONTROLLER_HELP = "Controller: Arrow keys, Z=A, X=B, Return=Start, Shift=Select"


def to_keysym(name: str) -> str:
    """Map a controller button name to its keysym; other names pass through."""
    return CONTROLLER_KEYS.get(name.lower(), name)


def parse_key_sequence(text: str) -> List[str]:
    """
    Split a whitespace-separated key list into names.

    Example:
        "start right right a" -> ["start", "right", "right", "a"]
    """
    return text.split()


def to_keysyms(names: Iterable[str]) -> List[str]:
    return [to_keysym(name) for name in names]
