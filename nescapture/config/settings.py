"""Configuration settings dataclass."""

from dataclasses import dataclass
from typing import Optional
from pathlib import Path


@dataclass
class DisplayConfig:
    """Virtual display (Xvfb) settings."""
    base_number: int = 99
    max_attempts: int = 10
    width: int = 1024
    height: int = 768
    depth: int = 24
    startup_timeout: float = 5.0
    lock_dir: str = "/tmp"
    socket_dir: str = "/tmp/.X11-unix"

    @property
    def screen_spec(self) -> str:
        """Screen argument in Xvfb's WxHxD form."""
        return f"{self.width}x{self.height}x{self.depth}"

    def get_lock_path(self, number: int) -> Path:
        """Get the X server lock file for a display number."""
        return Path(self.lock_dir) / f".X{number}-lock"

    def get_socket_path(self, number: int) -> Path:
        """Get the X server socket for a display number."""
        return Path(self.socket_dir) / f"X{number}"


@dataclass
class ToolsConfig:
    """External tool binaries."""
    xvfb: str = "Xvfb"
    window_manager: str = "openbox"
    xdotool: str = "xdotool"
    imagemagick_import: str = "import"
    ffmpeg: str = "ffmpeg"
    shell: str = "bash"
    command_timeout: float = 10.0


@dataclass
class EmulatorConfig:
    """Emulator launch settings."""
    binary: str = "/usr/games/fceux"
    rom_extension: str = ".nes"
    disable_sound: bool = True
    default_scale: int = 2


@dataclass
class WindowConfig:
    """Emulator window discovery and geometry settings."""
    title_pattern: str = "FCEUX [0-9]"
    search_attempts: int = 20
    search_interval: float = 0.5
    min_geometry: int = 100
    handle_env_var: str = "FCEUX_WINDOW"


@dataclass
class TimingConfig:
    """Delays and the outer time bound."""
    default_warmup: float = 3.0
    settle_delay: float = 0.5
    window_manager_delay: float = 0.5
    input_settle_delay: float = 0.5
    timeout_margin: float = 10.0
    stop_timeout: float = 3.0


@dataclass
class VideoConfig:
    """Video capture defaults."""
    default_duration: float = 10.0
    default_fps: int = 60
    default_format: str = "mp4"


@dataclass
class ViewportConfig:
    """NES visible-area geometry used for viewport cropping."""
    nes_width: int = 256
    visible_height: int = 224
    menu_offset: int = 22


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    file: Optional[str] = None
    console: bool = True
    format: str = "[%(levelname)s] %(message)s"


@dataclass
class Settings:
    """Main settings container."""

    display: DisplayConfig = None
    tools: ToolsConfig = None
    emulator: EmulatorConfig = None
    window: WindowConfig = None
    timing: TimingConfig = None
    video: VideoConfig = None
    viewport: ViewportConfig = None
    logging: LoggingConfig = None

    def __post_init__(self):
        """Initialize default configs if not provided."""
        if self.display is None:
            self.display = DisplayConfig()
        if self.tools is None:
            self.tools = ToolsConfig()
        if self.emulator is None:
            self.emulator = EmulatorConfig()
        if self.window is None:
            self.window = WindowConfig()
        if self.timing is None:
            self.timing = TimingConfig()
        if self.video is None:
            self.video = VideoConfig()
        if self.viewport is None:
            self.viewport = ViewportConfig()
        if self.logging is None:
            self.logging = LoggingConfig()
