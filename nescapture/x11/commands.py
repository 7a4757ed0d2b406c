"""xdotool command implementations for window interaction."""

import time
import logging
from typing import List, Optional

from .client import X11Client
from .geometry import WindowGeometry, parse_window_geometry
from ..utils.deadline import Deadline
from ..utils.exceptions import GeometryParseError, InputInjectionError, ToolError

logger = logging.getLogger(__name__)


class XdotoolCommands:
    """High-level xdotool commands against the session display."""

    def __init__(self, client: X11Client):
        """
        Initialize xdotool commands.

        Args:
            client: X11 client instance.
        """
        self.client = client
        self.binary = client.config.xdotool

    def search_window(self, title_pattern: str, timeout: Optional[float] = None) -> Optional[str]:
        """
        Find the first window whose name matches a regex.

        Args:
            title_pattern: Regex matched against window names.
            timeout: Seconds before xdotool is killed.

        Returns:
            Window id, or None if no window matches.
        """
        try:
            result = self.client.execute([self.binary, "search", "--name", title_pattern], timeout=timeout)
        except ToolError as e:
            logger.warning(f"Window search failed: {e}")
            return None

        if result.returncode != 0:
            return None

        for line in (result.stdout or "").splitlines():
            window_id = line.strip()
            if window_id.isdigit():
                return window_id
        return None

    def get_geometry(self, window_id: str, timeout: Optional[float] = None) -> WindowGeometry:
        """
        Query a window's position and size.

        Args:
            window_id: Window id from search_window.
            timeout: Seconds before xdotool is killed.

        Returns:
            Parsed window geometry.

        Raises:
            GeometryParseError: If the query fails or its output is unrecognized.
        """
        result = self.client.execute([self.binary, "getwindowgeometry", window_id], timeout=timeout)
        if result.returncode != 0:
            raise GeometryParseError(
                f"getwindowgeometry failed for window {window_id}: {(result.stderr or '').strip()}"
            )
        return parse_window_geometry(result.stdout)

    def activate(self, window_id: str, timeout: Optional[float] = None) -> bool:
        """
        Raise and focus a window, waiting until it is active.

        Returns:
            True if successful, False otherwise.
        """
        result = self.client.execute([self.binary, "windowactivate", "--sync", window_id], timeout=timeout)
        if result.returncode != 0:
            logger.warning(f"Could not activate window {window_id}")
            return False
        return True

    def key(self, keysym: str, timeout: Optional[float] = None) -> None:
        """
        Press and release one key on the focused window.

        Args:
            keysym: X keysym name, e.g. "Return".
            timeout: Seconds before xdotool is killed.

        Raises:
            InputInjectionError: If xdotool rejects the key.
        """
        result = self.client.execute([self.binary, "key", keysym], timeout=timeout)
        if result.returncode != 0:
            raise InputInjectionError(
                f"xdotool key {keysym} failed: {(result.stderr or '').strip()}"
            )

    def send_keys(self, keysyms: List[str], delay: float = 0.15, deadline: Optional[Deadline] = None) -> None:
        """
        Send a sequence of keys with delay after each.

        Args:
            keysyms: X keysym names in order.
            delay: Delay after each key in seconds.
            deadline: Outer deadline bounding each key and delay.

        Raises:
            InputInjectionError: If xdotool rejects a key.
            CaptureTimeoutError: If the deadline passes mid-sequence.
        """
        for keysym in keysyms:
            if deadline is not None:
                self.key(keysym, timeout=deadline.bound(self.client.timeout, "key injection"))
                deadline.sleep(delay, "key injection")
            else:
                self.key(keysym)
                if delay > 0:
                    time.sleep(delay)
