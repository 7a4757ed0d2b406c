"""Input script runner tests."""

import subprocess
from pathlib import Path

import pytest

from nescapture.input.script import run_input_script
from nescapture.utils.exceptions import InputInjectionError


def test_script_sees_window_handle(client, tmp_path: Path) -> None:
    script = tmp_path / "start-game.sh"
    script.write_text("xdotool key Return\n")
    run_input_script(client, script, "4194311", "FCEUX_WINDOW", timeout=5)
    assert client.calls[-1] == ["bash", str(script)]
    assert client.envs[-1]["FCEUX_WINDOW"] == "4194311"


def test_script_without_window_exports_empty_handle(client, tmp_path: Path) -> None:
    script = tmp_path / "keys.sh"
    script.write_text("true\n")
    run_input_script(client, script, None, "FCEUX_WINDOW", timeout=5)
    assert client.envs[-1]["FCEUX_WINDOW"] == ""


def test_failing_script_raises(client, tmp_path: Path) -> None:
    script = tmp_path / "keys.sh"
    script.write_text("exit 3\n")
    client.handlers["bash"] = lambda args: subprocess.CompletedProcess(args, 3, "", "boom")
    with pytest.raises(InputInjectionError, match="exited with 3: boom"):
        run_input_script(client, script, "1", "FCEUX_WINDOW", timeout=5)
