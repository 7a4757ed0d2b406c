"""Command-line entry points: capture-screenshot and capture-video."""

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional

from .config.loader import load_config
from .config.settings import Settings
from .core.orchestrator import CaptureOrchestrator
from .emulator.keys import CONTROLLER_HELP, parse_key_sequence
from .state.models import CaptureRequest, CaptureResult, OutputKind
from .utils.exceptions import (
    CaptureTimeoutError,
    ConfigurationError,
    InvalidInputError,
    NESCaptureError,
)
from .utils.logging import setup_logging
from .video.recorder import format_size

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_FAILURE = 2
EXIT_TIMEOUT = 124

SCREENSHOT_EPILOG = """\
examples:
  capture-screenshot game.nes screenshot.png
  capture-screenshot game.nes screenshot.png --wait 5
  capture-screenshot game.nes screenshot.png --scale 3 --crop
"""

VIDEO_EPILOG = f"""\
input scripts are shell scripts run on the capture display; the emulator
window id is exported as $FCEUX_WINDOW. Use xdotool to send input:

  xdotool windowactivate --sync "$FCEUX_WINDOW"
  xdotool key Return

{CONTROLLER_HELP}

examples:
  capture-video game.nes gameplay.mp4
  capture-video game.nes demo.mp4 --wait 2 --duration 30
  capture-video game.nes demo.gif --keys "start right right a"
"""


class CaptureArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on bad arguments."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_INVALID, f"Error: {message}\n")


def build_parser(kind: OutputKind, prog: Optional[str] = None) -> argparse.ArgumentParser:
    """
    Build the argument parser for one capture mode.

    Args:
        kind: Screenshot or video.
        prog: Program name shown in usage.

    Returns:
        Configured parser. Numeric options default to None so config values apply.
    """
    if kind is OutputKind.SCREENSHOT:
        parser = CaptureArgumentParser(
            prog=prog or "capture-screenshot",
            description="Capture a screenshot from an NES ROM.",
            epilog=SCREENSHOT_EPILOG,
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        parser.add_argument("input", type=Path, help=".nes ROM file")
        parser.add_argument("output", type=Path, help="Output PNG file path")
    else:
        parser = CaptureArgumentParser(
            prog=prog or "capture-video",
            description="Capture video from an NES ROM with input injection.",
            epilog=VIDEO_EPILOG,
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        parser.add_argument("input", type=Path, help=".nes ROM file")
        parser.add_argument("output", type=Path, help="Output video file (mp4, webm, gif)")

    parser.add_argument("--wait", type=float, metavar="SECONDS", help="Wait before capture (default: 3)")
    parser.add_argument("--scale", type=int, metavar="N", help="Scale factor 1-4 (default: 2)")

    if kind is OutputKind.SCREENSHOT:
        parser.add_argument("--crop", action="store_true", help="Crop to game viewport (remove menu)")
    else:
        parser.add_argument("--duration", type=float, metavar="SECONDS", help="Recording length (default: 10)")
        parser.add_argument("--fps", type=int, metavar="N", help="Frame rate (default: 60)")
        parser.add_argument("--input", dest="input_script", type=Path, metavar="SCRIPT", help="Input script for key injection")
        parser.add_argument("--keys", metavar="KEYS", help="Space-separated keys or NES buttons to press after the wait")
        parser.add_argument("--key-delay", type=float, default=0.15, metavar="SECONDS", help="Delay between keys (default: 0.15)")

    parser.add_argument("--config", type=Path, metavar="PATH", help="YAML configuration file")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Warnings and errors only")
    return parser


def build_request(args: argparse.Namespace, settings: Settings, kind: OutputKind) -> CaptureRequest:
    """Combine parsed arguments with configured defaults into a request."""
    wait = settings.timing.default_warmup if args.wait is None else args.wait
    scale = settings.emulator.default_scale if args.scale is None else args.scale

    if kind is OutputKind.SCREENSHOT:
        return CaptureRequest(
            rom_path=args.input,
            output_path=args.output,
            warmup_seconds=wait,
            scale_factor=scale,
            crop_to_viewport=args.crop,
        )

    return CaptureRequest(
        rom_path=args.input,
        output_path=args.output,
        warmup_seconds=wait,
        duration_seconds=settings.video.default_duration if args.duration is None else args.duration,
        scale_factor=scale,
        frame_rate=settings.video.default_fps if args.fps is None else args.fps,
        input_script_path=args.input_script,
        key_sequence=tuple(parse_key_sequence(args.keys)) if args.keys else (),
        key_delay=args.key_delay,
    )


def report_line(result: CaptureResult) -> str:
    """Final success line: path plus dimensions or size."""
    if result.kind is OutputKind.SCREENSHOT:
        return f"Screenshot saved: {result.output_path} ({result.dimensions or 'unknown'})"
    details = format_size(result.size_bytes)
    if result.dimensions:
        details += f", {result.dimensions}"
    return f"Video saved: {result.output_path} ({details})"


def _raise_exit(signum, frame):
    raise SystemExit(128 + signum)


def run(kind: OutputKind, argv: Optional[List[str]] = None, prog: Optional[str] = None) -> int:
    """
    Parse arguments, run one capture and return the exit status.

    Args:
        kind: Screenshot or video.
        argv: Arguments without the program name; sys.argv[1:] when None.
        prog: Program name shown in usage.

    Returns:
        Process exit status.
    """
    args = build_parser(kind, prog).parse_args(argv)

    try:
        settings = load_config(args.config)
    except (FileNotFoundError, ConfigurationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INVALID

    level = "DEBUG" if args.verbose else "WARNING" if args.quiet else None
    setup_logging(settings.logging, level)

    request = build_request(args, settings, kind)
    orchestrator = CaptureOrchestrator(settings)

    # SIGINT/SIGTERM unwind through the session so every child is stopped
    previous = {sig: signal.signal(sig, _raise_exit) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        if kind is OutputKind.SCREENSHOT:
            result = orchestrator.capture_screenshot(request)
        else:
            result = orchestrator.capture_video(request)
    except InvalidInputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INVALID
    except CaptureTimeoutError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_TIMEOUT
    except NESCaptureError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)

    print(report_line(result))
    return EXIT_OK


def screenshot_main() -> None:
    """Console entry point for capture-screenshot."""
    sys.exit(run(OutputKind.SCREENSHOT))


def video_main() -> None:
    """Console entry point for capture-video."""
    sys.exit(run(OutputKind.VIDEO))
