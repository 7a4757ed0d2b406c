"""Screenshot capture functionality."""

import logging
from pathlib import Path
from typing import Optional, Tuple

import numpy as np
from PIL import Image

from ..x11.client import X11Client
from ..config.settings import ViewportConfig
from ..utils.exceptions import CaptureToolError

logger = logging.getLogger(__name__)

ROOT_WINDOW = "root"


def viewport_box(config: ViewportConfig, scale: int) -> Tuple[int, int, int, int]:
    """
    Compute the game-area crop box below the emulator menu bar.

    Args:
        config: NES viewport geometry.
        scale: Window scale factor.

    Returns:
        (left, upper, right, lower) box for PIL.
    """
    width = config.nes_width * scale
    height = config.visible_height * scale
    top = config.menu_offset
    return (0, top, width, top + height)


def _open(path: Path) -> Image.Image:
    try:
        return Image.open(path)
    except OSError as e:
        raise CaptureToolError(f"Unreadable image {path}: {e}") from e


def image_dimensions(path: Path) -> Tuple[int, int]:
    """Read (width, height) of an image file."""
    with _open(path) as img:
        return img.size


def is_blank(path: Path) -> bool:
    """True when every pixel of the image has the same value."""
    with _open(path) as img:
        pixels = np.asarray(img.convert("RGB"))
    return pixels.size == 0 or int(np.ptp(pixels)) == 0


class ScreenshotCapture:
    """Handles screenshot capture from the virtual display."""

    def __init__(self, client: X11Client, viewport: ViewportConfig):
        """
        Initialize screenshot capture.

        Args:
            client: X11 client instance.
            viewport: NES viewport geometry for cropping.
        """
        self.client = client
        self.viewport = viewport
        self.binary = client.config.imagemagick_import

    def capture_window(self, window_id: Optional[str], output_path: Path, timeout: Optional[float] = None) -> Path:
        """
        Capture a window (or the root window when window_id is None) to a file.

        Args:
            window_id: Window id, or None for the whole display.
            output_path: Destination image path.
            timeout: Seconds before the capture tool is killed.

        Returns:
            Path of the written image.

        Raises:
            CaptureToolError: If the tool fails or writes nothing.
        """
        target = window_id or ROOT_WINDOW
        result = self.client.execute(
            [self.binary, "-window", target, str(output_path)], timeout=timeout
        )

        if result.returncode != 0:
            stderr = (result.stderr or "").strip() or "Unknown error"
            raise CaptureToolError(f"Failed to capture window {target} (DISPLAY={self.client.display}): {stderr}")

        if not output_path.exists() or output_path.stat().st_size == 0:
            raise CaptureToolError(f"Empty screenshot received for window {target}")

        logger.debug(f"Captured window {target} to {output_path}")
        return output_path

    def crop_viewport(self, path: Path, scale: int) -> Tuple[int, int]:
        """
        Crop an image in place to the NES viewport.

        Args:
            path: Image to crop; overwritten.
            scale: Window scale factor.

        Returns:
            (width, height) after cropping.
        """
        box = viewport_box(self.viewport, scale)
        with _open(path) as img:
            if img.width < box[2] or img.height < box[3]:
                logger.warning(
                    f"Captured image {img.width}x{img.height} is smaller than the viewport; "
                    "cropped area is padded"
                )
            cropped = img.crop(box)
            cropped.load()
        cropped.save(path, format="PNG")
        return cropped.size
