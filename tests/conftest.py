"""Shared fixtures: fake child processes and a scripted X tool runner."""

from __future__ import annotations

import itertools
import logging
import subprocess
from pathlib import Path
from typing import Callable, Dict, List

import pytest
from PIL import Image

from nescapture.config.settings import (
    DisplayConfig,
    Settings,
    TimingConfig,
    ToolsConfig,
    WindowConfig,
)
from nescapture.x11.client import X11Client

WINDOW_ID = "4194311"
WINDOW_SIZE = (512, 480)
GEOMETRY_OUTPUT = "Window 4194311\n  Position: 10,20 (screen: 0)\n  Geometry: 512x480\n"


class FakePopen:
    """Stands in for subprocess.Popen; records every instance."""

    instances: List["FakePopen"] = []
    on_start: Dict[str, Callable[["FakePopen"], None]] = {}
    _pids = itertools.count(4000)

    def __init__(self, cmd, env=None, **kwargs):
        self.args = list(cmd)
        self.env = env
        self.pid = next(self._pids)
        self.returncode = None
        self.terminated = False
        self.killed = False
        FakePopen.instances.append(self)
        hook = FakePopen.on_start.get(Path(self.args[0]).name)
        if hook is not None:
            hook(self)

    def poll(self):
        return self.returncode

    def terminate(self):
        self.terminated = True
        if self.returncode is None:
            self.returncode = -15

    def kill(self):
        self.killed = True
        if self.returncode is None:
            self.returncode = -9

    def wait(self, timeout=None):
        return self.returncode

    @classmethod
    def running(cls) -> List["FakePopen"]:
        return [p for p in cls.instances if p.returncode is None]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    lock_dir = tmp_path / "xlocks"
    socket_dir = lock_dir / ".X11-unix"
    socket_dir.mkdir(parents=True)
    return Settings(
        display=DisplayConfig(
            base_number=99,
            max_attempts=3,
            startup_timeout=0.2,
            lock_dir=str(lock_dir),
            socket_dir=str(socket_dir),
        ),
        tools=ToolsConfig(command_timeout=5.0),
        window=WindowConfig(search_attempts=3, search_interval=0.0),
        timing=TimingConfig(
            default_warmup=0.0,
            settle_delay=0.0,
            window_manager_delay=0.0,
            input_settle_delay=0.0,
            timeout_margin=5.0,
            stop_timeout=0.1,
        ),
    )


@pytest.fixture
def fake_popen(monkeypatch, settings: Settings):
    """Patch Popen for ManagedProcess; Xvfb writes its lock and socket on start."""

    def start_xvfb(proc: FakePopen) -> None:
        number = int(proc.args[1].lstrip(":"))
        settings.display.get_lock_path(number).write_text(f"{proc.pid:>10}\n")
        settings.display.get_socket_path(number).touch()

    FakePopen.instances = []
    FakePopen.on_start = {"Xvfb": start_xvfb}
    monkeypatch.setattr("nescapture.core.process.subprocess.Popen", FakePopen)
    yield FakePopen
    FakePopen.instances = []
    FakePopen.on_start = {}


def _completed(args, returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args, returncode, stdout=stdout, stderr=stderr)


class ScriptedClient(X11Client):
    """X11Client double answering each tool from a handler table."""

    def __init__(self, config: ToolsConfig):
        super().__init__(config)
        self.calls: List[List[str]] = []
        self.envs: List[Dict[str, str]] = []
        self.window_found = True
        self.geometry_output = GEOMETRY_OUTPUT
        self.window_size = WINDOW_SIZE
        self.handlers: Dict[str, Callable] = {
            config.xdotool: self._xdotool,
            config.imagemagick_import: self._import,
            config.ffmpeg: self._ffmpeg,
            config.shell: self._shell,
        }

    def execute(self, args, timeout=None, env=None):
        self.calls.append(list(args))
        self.envs.append(dict(env or {}))
        return self.handlers[args[0]](list(args))

    def commands(self, binary: str) -> List[List[str]]:
        return [call for call in self.calls if call[0] == binary]

    def _xdotool(self, args):
        action = args[1]
        if action == "search":
            if self.window_found:
                return _completed(args, stdout=f"{WINDOW_ID}\n")
            return _completed(args, returncode=1)
        if action == "getwindowgeometry":
            return _completed(args, stdout=self.geometry_output)
        return _completed(args)

    def _import(self, args):
        size = self.window_size if args[2] != "root" else (1024, 768)
        img = Image.new("RGB", size, (0, 0, 0))
        img.putpixel((size[0] // 2, size[1] // 2), (255, 255, 255))
        img.save(args[-1], format="PNG")
        return _completed(args)

    def _ffmpeg(self, args):
        Path(args[-1]).write_bytes(b"\x00" * 2048)
        return _completed(args)

    def _shell(self, args):
        return _completed(args)


@pytest.fixture
def client(settings: Settings) -> ScriptedClient:
    return ScriptedClient(settings.tools)


@pytest.fixture
def rom(tmp_path: Path) -> Path:
    path = tmp_path / "game.nes"
    path.write_bytes(b"NES\x1a" + b"\x00" * 12)
    return path


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging replaces root handlers; put pytest's back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
