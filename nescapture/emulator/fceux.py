"""FCEUX emulator launch."""

import logging
from pathlib import Path
from typing import Dict, List

from ..config.settings import EmulatorConfig
from ..core.process import ManagedProcess

logger = logging.getLogger(__name__)


def build_command(config: EmulatorConfig, rom_path: Path, scale: int) -> List[str]:
    """
    Build the emulator command line.

    Args:
        config: Emulator configuration.
        rom_path: ROM to run.
        scale: Integer window scale applied to both axes.

    Returns:
        Command and arguments.
    """
    cmd = [config.binary, "--xscale", str(scale), "--yscale", str(scale)]
    if config.disable_sound:
        cmd.extend(["--sound", "0"])
    cmd.append(str(rom_path))
    return cmd


def launch_emulator(config: EmulatorConfig, rom_path: Path, scale: int, env: Dict[str, str]) -> ManagedProcess:
    """
    Start the emulator on the session display.

    Args:
        config: Emulator configuration.
        rom_path: ROM to run.
        scale: Window scale factor.
        env: Environment with DISPLAY set.

    Returns:
        Running emulator process.
    """
    logger.info(f"Starting emulator: {rom_path.name} (scale {scale})")
    return ManagedProcess("emulator", build_command(config, rom_path, scale), env=env).start()
