"""Window geometry model and parser for xdotool output."""

import re
from dataclasses import dataclass

from ..utils.exceptions import GeometryParseError

_POSITION_RE = re.compile(r"^\s*Position:\s*(-?\d+),(-?\d+)\b", re.MULTILINE)
_SIZE_RE = re.compile(r"^\s*Geometry:\s*(\d+)x(\d+)\s*$", re.MULTILINE)


@dataclass(frozen=True)
class WindowGeometry:
    """Screen-relative rectangle of a window."""

    x: int
    y: int
    width: int
    height: int

    def is_plausible(self, floor: int) -> bool:
        """True when both dimensions reach the sanity floor."""
        return self.width >= floor and self.height >= floor

    def clamp(self, screen_width: int, screen_height: int) -> "WindowGeometry":
        """
        Intersect the rectangle with the screen.

        x11grab refuses regions that extend past the screen edge. A window
        entirely off-screen yields a zero-sized rectangle.
        """
        left = min(max(self.x, 0), screen_width)
        top = min(max(self.y, 0), screen_height)
        right = min(max(self.x + self.width, left), screen_width)
        bottom = min(max(self.y + self.height, top), screen_height)
        return WindowGeometry(left, top, right - left, bottom - top)

    @property
    def size(self) -> str:
        return f"{self.width}x{self.height}"


def parse_window_geometry(text: str) -> WindowGeometry:
    """
    Parse `xdotool getwindowgeometry` output.

    Expected form:

        Window 12345
          Position: 10,20 (screen: 0)
          Geometry: 512x502

    Args:
        text: Raw tool output.

    Returns:
        Parsed geometry.

    Raises:
        GeometryParseError: If either line is missing or malformed.
    """
    position = _POSITION_RE.search(text or "")
    size = _SIZE_RE.search(text or "")
    if position is None or size is None:
        raise GeometryParseError(f"Unrecognized window geometry output: {text!r}")

    return WindowGeometry(
        x=int(position.group(1)),
        y=int(position.group(2)),
        width=int(size.group(1)),
        height=int(size.group(2)),
    )
