"""Output-format codec profiles and ffmpeg command construction."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple

from ..x11.geometry import WindowGeometry

logger = logging.getLogger(__name__)

# h264 and vp9 need even frame dimensions
EVEN_CROP = "crop=trunc(iw/2)*2:trunc(ih/2)*2"


@dataclass(frozen=True)
class CodecProfile:
    """Encoder settings for one output container."""

    extension: str
    muxer: str
    args: Tuple[str, ...]


PROFILES: Dict[str, CodecProfile] = {
    "mp4": CodecProfile(
        "mp4",
        "mp4",
        ("-vf", EVEN_CROP, "-c:v", "libx264", "-preset", "fast", "-crf", "18", "-pix_fmt", "yuv420p"),
    ),
    "webm": CodecProfile(
        "webm",
        "webm",
        ("-vf", EVEN_CROP, "-c:v", "libvpx-vp9", "-crf", "30", "-b:v", "0"),
    ),
    "gif": CodecProfile(
        "gif",
        "gif",
        ("-vf", "fps=30,scale=256:-2:flags=lanczos"),
    ),
}

DEFAULT_PROFILE = "mp4"


def select_profile(output_path: Path, default: str = DEFAULT_PROFILE) -> CodecProfile:
    """
    Pick the codec profile for an output file by extension.

    Unknown extensions fall back to the default profile with a warning.

    Args:
        output_path: Requested output file.
        default: Profile key used for unknown extensions.

    Returns:
        Matching codec profile.
    """
    ext = output_path.suffix.lower().lstrip(".")
    profile = PROFILES.get(ext)
    if profile is None:
        logger.warning(f"Unknown output format '{ext}', using {default} settings")
        profile = PROFILES[default]
    return profile


def build_record_command(
    ffmpeg: str,
    display: str,
    region: WindowGeometry,
    frame_rate: int,
    duration: float,
    profile: CodecProfile,
    output_path: Path,
) -> List[str]:
    """
    Build an ffmpeg x11grab command recording a screen region.

    Args:
        ffmpeg: ffmpeg binary.
        display: X display name such as ":99".
        region: Screen rectangle to record.
        frame_rate: Capture frame rate.
        duration: Recording length in seconds.
        profile: Codec profile for the output.
        output_path: File to write.

    Returns:
        Command and arguments.
    """
    return [
        ffmpeg,
        "-y",
        "-loglevel", "error",
        "-f", "x11grab",
        "-framerate", str(frame_rate),
        "-video_size", region.size,
        "-i", f"{display}+{region.x},{region.y}",
        "-t", f"{duration:g}",
        *profile.args,
        "-f", profile.muxer,
        str(output_path),
    ]
