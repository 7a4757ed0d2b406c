"""Input script execution during a capture."""

import logging
from pathlib import Path
from typing import Optional

from ..x11.client import X11Client
from ..utils.exceptions import InputInjectionError

logger = logging.getLogger(__name__)


def run_input_script(
    client: X11Client,
    script_path: Path,
    window_id: Optional[str],
    window_env_var: str,
    timeout: float,
) -> None:
    """
    Run a shell input script on the session display.

    The script sees DISPLAY and, when the emulator window was found, the
    window id under window_env_var so it can target it with xdotool.

    Args:
        client: X11 client bound to the session display.
        script_path: Script to run with the configured shell.
        window_id: Emulator window id, or None.
        window_env_var: Variable name the window id is exported as.
        timeout: Seconds before the script is killed.

    Raises:
        InputInjectionError: If the script exits non-zero.
    """
    env = {window_env_var: window_id or ""}
    logger.info(f"Running input script: {script_path}")
    result = client.execute([client.config.shell, str(script_path)], timeout=timeout, env=env)

    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        raise InputInjectionError(
            f"Input script {script_path} exited with {result.returncode}"
            + (f": {stderr}" if stderr else "")
        )
