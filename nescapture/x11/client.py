"""Runner for X11 command-line tools bound to one display."""

import os
import subprocess
import logging
from typing import Dict, List, Optional

from ..utils.exceptions import CaptureTimeoutError, ToolError
from ..config.settings import ToolsConfig

logger = logging.getLogger(__name__)


class X11Client:
    """Runs short-lived X tools (xdotool, import, ffmpeg) against a display."""

    def __init__(self, config: ToolsConfig, display: Optional[str] = None):
        """
        Initialize X11 client.

        Args:
            config: Tool configuration settings.
            display: X display name such as ":99". Set once the display is up.
        """
        self.config = config
        self.display = display
        self.timeout = config.command_timeout

    def environment(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """
        Build the child environment with DISPLAY pointing at this display.

        Args:
            extra: Additional variables to export.

        Returns:
            Environment mapping.
        """
        env = dict(os.environ)
        if self.display:
            env["DISPLAY"] = self.display
        if extra:
            env.update(extra)
        return env

    def execute(
        self,
        args: List[str],
        timeout: Optional[float] = None,
        env: Optional[Dict[str, str]] = None,
    ) -> subprocess.CompletedProcess:
        """
        Execute a tool command.

        Args:
            args: Full command including the binary.
            timeout: Seconds before the command is killed. Defaults to the
                configured command timeout.
            env: Extra environment variables.

        Returns:
            CompletedProcess with text stdout/stderr.

        Raises:
            CaptureTimeoutError: If the command outlives its timeout.
            ToolError: If the command cannot be executed.
        """
        timeout = self.timeout if timeout is None else timeout

        try:
            result = subprocess.run(
                args,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                timeout=timeout,
                env=self.environment(env),
            )
        except subprocess.TimeoutExpired as e:
            raise CaptureTimeoutError(f"Command timed out after {timeout:g}s: {' '.join(args)}") from e
        except OSError as e:
            raise ToolError(f"Failed to execute command: {' '.join(args)}: {e}") from e

        if result.returncode != 0:
            logger.debug(
                f"{args[0]} exited with {result.returncode}: {(result.stderr or '').strip()}"
            )
        return result
