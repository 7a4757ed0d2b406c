"""Virtual X display (Xvfb) management."""

import logging
import os
from typing import Optional

from ..config.settings import DisplayConfig, ToolsConfig
from ..core.process import ManagedProcess
from ..utils.deadline import Deadline, poll
from ..utils.exceptions import DisplayError

logger = logging.getLogger(__name__)

READY_POLL_INTERVAL = 0.05


class VirtualDisplay:
    """Leases a free display number and runs Xvfb on it."""

    def __init__(self, config: DisplayConfig, tools: ToolsConfig):
        """
        Initialize virtual display.

        Args:
            config: Display configuration.
            tools: Tool binaries.
        """
        self.config = config
        self.tools = tools
        self.number: Optional[int] = None
        self.server: Optional[ManagedProcess] = None

    @property
    def name(self) -> Optional[str]:
        """Display name such as ":99", or None before start."""
        return f":{self.number}" if self.number is not None else None

    def is_free(self, number: int) -> bool:
        """True when no X server holds the lock or socket for a display number."""
        return not (
            self.config.get_lock_path(number).exists()
            or self.config.get_socket_path(number).exists()
        )

    def candidates(self):
        """Yield free display numbers starting at the configured base."""
        number = self.config.base_number
        tried = 0
        while tried < self.config.max_attempts:
            if self.is_free(number):
                tried += 1
                yield number
            number += 1

    def owns_lock(self, number: int, server: ManagedProcess) -> bool:
        """True when the display lock file names our Xvfb's pid."""
        try:
            content = self.config.get_lock_path(number).read_text().strip()
        except OSError:
            return False
        return content.isdigit() and int(content) == server.pid

    def _wait_ready(self, number: int, server: ManagedProcess, deadline: Optional[Deadline]) -> bool:
        socket_path = self.config.get_socket_path(number)
        attempts = max(1, int(self.config.startup_timeout / READY_POLL_INTERVAL))
        # Another run may have taken this number after the free check
        ready = poll(
            lambda: True if socket_path.exists() and self.owns_lock(number, server) else None,
            attempts=attempts,
            interval=READY_POLL_INTERVAL,
            deadline=deadline,
            step="display startup",
            abort=lambda: not server.is_running(),
        )
        return bool(ready) and server.is_running()

    def start(self, deadline: Optional[Deadline] = None) -> "VirtualDisplay":
        """
        Start Xvfb on the first free display number that comes up.

        Args:
            deadline: Outer deadline bounding the readiness wait.

        Returns:
            Self, with number and server set.

        Raises:
            DisplayError: If no display could be started.
        """
        for number in self.candidates():
            server = ManagedProcess(
                "Xvfb",
                [self.tools.xvfb, f":{number}", "-screen", "0", self.config.screen_spec, "-nolisten", "tcp"],
                env=dict(os.environ),
            )
            server.start()
            # Registered before the readiness wait so a timeout still stops it
            self.server = server
            self.number = number

            if self._wait_ready(number, server, deadline):
                logger.info(f"Virtual display {self.name} up ({self.config.screen_spec})")
                return self

            logger.debug(f"Xvfb did not come up on :{number}, trying next display")
            server.stop()
            self.server = None
            self.number = None

        raise DisplayError(
            f"Could not start Xvfb after {self.config.max_attempts} attempts "
            f"from :{self.config.base_number}"
        )

    def stop(self, timeout: float = 3.0) -> None:
        """Stop the display server if running."""
        if self.server is not None:
            self.server.stop(timeout)
            self.server = None
