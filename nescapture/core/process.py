"""Long-running child process handle."""

import logging
import subprocess
from typing import Dict, List, Optional

from ..utils.exceptions import ToolError

logger = logging.getLogger(__name__)


class ManagedProcess:
    """A spawned child process that can be stopped exactly once."""

    def __init__(self, name: str, cmd: List[str], env: Optional[Dict[str, str]] = None):
        """
        Initialize process handle.

        Args:
            name: Short label used in log messages.
            cmd: Command and arguments.
            env: Environment for the child, or None to inherit.
        """
        self.name = name
        self.cmd = cmd
        self.env = env
        self.process: Optional[subprocess.Popen] = None

    @property
    def pid(self) -> Optional[int]:
        return self.process.pid if self.process else None

    def start(self) -> "ManagedProcess":
        """
        Spawn the process with its output discarded.

        Raises:
            ToolError: If the binary cannot be executed.
        """
        try:
            self.process = subprocess.Popen(
                self.cmd,
                env=self.env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            raise ToolError(f"Failed to start {self.name}: {' '.join(self.cmd)}: {e}") from e

        logger.debug(f"Started {self.name} (pid {self.process.pid}): {' '.join(self.cmd)}")
        return self

    def is_running(self) -> bool:
        return self.process is not None and self.process.poll() is None

    def stop(self, timeout: float = 3.0) -> None:
        """
        Terminate the process, killing it if it ignores SIGTERM.

        Errors are logged and swallowed; the process may already be gone.
        """
        if self.process is None:
            return

        process = self.process
        self.process = None
        try:
            if process.poll() is None:
                process.terminate()
                try:
                    process.wait(timeout=timeout)
                except subprocess.TimeoutExpired:
                    logger.debug(f"{self.name} ignored SIGTERM, killing")
                    process.kill()
                    process.wait(timeout=timeout)
            logger.debug(f"Stopped {self.name} (pid {process.pid})")
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug(f"Error stopping {self.name}: {e}")
