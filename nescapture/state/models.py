"""Capture request and result models."""

import enum
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from ..utils.exceptions import InvalidInputError

MIN_SCALE = 1
MAX_SCALE = 4
SCREENSHOT_EXTENSIONS = (".png",)


class OutputKind(enum.Enum):
    """What a capture run produces."""

    SCREENSHOT = "screenshot"
    VIDEO = "video"


class CaptureState(enum.Enum):
    """Stages a capture run passes through."""

    IDLE = "idle"
    VALIDATING = "validating"
    DISPLAY_UP = "display_up"
    EMULATOR_RUNNING = "emulator_running"
    WINDOW_DISCOVERED = "window_discovered"
    WINDOW_FALLBACK = "window_fallback"
    INPUT_INJECTED = "input_injected"
    CAPTURING = "capturing"
    POST_PROCESSING = "post_processing"
    TORN_DOWN = "torn_down"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class CaptureRequest:
    """Validated configuration for one capture run."""

    rom_path: Path
    output_path: Path
    warmup_seconds: float = 3.0
    duration_seconds: float = 10.0
    scale_factor: int = 2
    frame_rate: int = 60
    crop_to_viewport: bool = False
    input_script_path: Optional[Path] = None
    key_sequence: Tuple[str, ...] = ()
    key_delay: float = 0.15

    @property
    def output_extension(self) -> str:
        """Lowercased output extension without the dot."""
        return self.output_path.suffix.lower().lstrip(".")

    def validate(self, kind: OutputKind, rom_extension: str = ".nes") -> None:
        """
        Check the request before anything is spawned.

        Args:
            kind: Screenshot or video.
            rom_extension: Extension the emulator accepts.

        Raises:
            InvalidInputError: On the first violated constraint.
        """
        if not self.rom_path.is_file():
            raise InvalidInputError(f"Input file not found: {self.rom_path}")

        ext = self.rom_path.suffix.lower()
        if ext != rom_extension.lower():
            raise InvalidInputError(
                f"Expected {rom_extension} file, got: {ext.lstrip('.') or '(none)'}"
            )

        if not self.output_path.name:
            raise InvalidInputError("Output path is empty")
        if not self.output_path.parent.is_dir():
            raise InvalidInputError(f"Output directory not found: {self.output_path.parent}")
        if self.output_path.is_dir():
            raise InvalidInputError(f"Output path is a directory: {self.output_path}")

        if not math.isfinite(self.warmup_seconds) or self.warmup_seconds < 0:
            raise InvalidInputError(f"Wait must be a non-negative number, got: {self.warmup_seconds:g}")

        if not MIN_SCALE <= self.scale_factor <= MAX_SCALE:
            raise InvalidInputError(
                f"Scale must be between {MIN_SCALE} and {MAX_SCALE}, got: {self.scale_factor}"
            )

        if kind is OutputKind.SCREENSHOT:
            if self.output_path.suffix.lower() not in SCREENSHOT_EXTENSIONS:
                raise InvalidInputError(
                    f"Expected .png output, got: {self.output_extension or '(none)'}"
                )
            return

        if not math.isfinite(self.duration_seconds) or self.duration_seconds <= 0:
            raise InvalidInputError(f"Duration must be a positive number, got: {self.duration_seconds:g}")
        if self.frame_rate <= 0:
            raise InvalidInputError(f"Frame rate must be positive, got: {self.frame_rate}")
        if not math.isfinite(self.key_delay) or self.key_delay < 0:
            raise InvalidInputError(f"Key delay must be a non-negative number, got: {self.key_delay:g}")
        if self.input_script_path is not None and not self.input_script_path.is_file():
            raise InvalidInputError(f"Input script not found: {self.input_script_path}")


@dataclass
class CaptureResult:
    """Outcome of a successful capture run."""

    output_path: Path
    kind: OutputKind
    size_bytes: int
    width: Optional[int] = None
    height: Optional[int] = None
    states: List[CaptureState] = field(default_factory=list)

    @property
    def dimensions(self) -> Optional[str]:
        """Dimensions as WxH, or None when unknown."""
        if self.width is None or self.height is None:
            return None
        return f"{self.width}x{self.height}"
