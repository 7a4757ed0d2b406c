"""Screen-region video recording."""

import logging
from pathlib import Path
from typing import Optional, Tuple

import cv2

from .encoder import CodecProfile, build_record_command
from ..x11.client import X11Client
from ..x11.geometry import WindowGeometry
from ..utils.exceptions import CaptureToolError

logger = logging.getLogger(__name__)


def probe_video(path: Path) -> Optional[Tuple[int, int]]:
    """
    Read the frame size of a video file.

    Returns:
        (width, height), or None when the file cannot be decoded.
    """
    capture = cv2.VideoCapture(str(path))
    try:
        if not capture.isOpened():
            return None
        width = int(capture.get(cv2.CAP_PROP_FRAME_WIDTH))
        height = int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT))
    finally:
        capture.release()
    if width <= 0 or height <= 0:
        return None
    return width, height


def format_size(size_bytes: int) -> str:
    """Human-readable file size, du -h style."""
    size = float(size_bytes)
    for unit in ("B", "K", "M"):
        if size < 1024:
            return f"{size:.0f}{unit}" if unit == "B" else f"{size:.1f}{unit}"
        size /= 1024
    return f"{size:.1f}G"


class VideoRecorder:
    """Records a region of the virtual display with ffmpeg."""

    def __init__(self, client: X11Client):
        """
        Initialize video recorder.

        Args:
            client: X11 client bound to the session display.
        """
        self.client = client
        self.binary = client.config.ffmpeg

    def record(
        self,
        region: WindowGeometry,
        frame_rate: int,
        duration: float,
        profile: CodecProfile,
        output_path: Path,
        timeout: float,
    ) -> Path:
        """
        Record the region for a fixed duration.

        Args:
            region: Screen rectangle to record.
            frame_rate: Capture frame rate.
            duration: Recording length in seconds.
            profile: Codec profile.
            output_path: File to write.
            timeout: Seconds before ffmpeg is killed.

        Returns:
            Path of the written video.

        Raises:
            CaptureToolError: If ffmpeg fails or produces no output.
        """
        cmd = build_record_command(
            self.binary, self.client.display, region, frame_rate, duration, profile, output_path
        )
        logger.debug(f"Recording: {' '.join(cmd)}")

        result = self.client.execute(cmd, timeout=timeout)

        if result.returncode != 0:
            stderr = (result.stderr or "").strip() or "Unknown error"
            raise CaptureToolError(f"Failed to create video: {stderr}")

        if not output_path.exists() or output_path.stat().st_size == 0:
            raise CaptureToolError("Failed to create video: no output written")

        return output_path
