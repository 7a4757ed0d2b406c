"""Headless capture orchestrator."""

import logging
import os
import time
from pathlib import Path
from typing import Callable, List, Optional

from .process import ManagedProcess
from .session import CaptureSession
from ..config.settings import Settings
from ..emulator.fceux import launch_emulator
from ..emulator.keys import to_keysyms
from ..image.screenshot import ScreenshotCapture, image_dimensions, is_blank
from ..input.script import run_input_script
from ..state.models import CaptureRequest, CaptureResult, CaptureState, OutputKind
from ..utils.deadline import Deadline, poll
from ..utils.exceptions import GeometryParseError, WindowNotFoundError
from ..video.encoder import select_profile
from ..video.recorder import VideoRecorder, probe_video
from ..x11.client import X11Client
from ..x11.commands import XdotoolCommands
from ..x11.display import VirtualDisplay
from ..x11.geometry import WindowGeometry

logger = logging.getLogger(__name__)


def partial_path(output_path: Path) -> Path:
    """Hidden per-process sibling of output_path that captures are written to first."""
    return output_path.with_name(f".{output_path.stem}.{os.getpid()}.partial{output_path.suffix}")


class CaptureOrchestrator:
    """Runs one screenshot or video capture from display start to teardown."""

    def __init__(self, settings: Settings, client: Optional[X11Client] = None):
        """
        Initialize orchestrator.

        Args:
            settings: Configuration settings.
            client: X11 client; one is built from settings when omitted.
        """
        self.settings = settings
        self.client = client or X11Client(settings.tools)
        self.xdotool = XdotoolCommands(self.client)
        self.screenshot = ScreenshotCapture(self.client, settings.viewport)
        self.recorder = VideoRecorder(self.client)
        self.states: List[CaptureState] = []

    def _enter(self, state: CaptureState) -> None:
        self.states.append(state)
        logger.debug(f"State: {state.value}")

    def capture_screenshot(self, request: CaptureRequest) -> CaptureResult:
        """
        Capture one PNG of the emulator window after the warm-up delay.

        Args:
            request: Capture request.

        Returns:
            Result with the output path and measured dimensions.

        Raises:
            NESCaptureError: Subclasses for each failure kind.
        """
        return self._run(request, OutputKind.SCREENSHOT, self._screenshot_steps)

    def capture_video(self, request: CaptureRequest) -> CaptureResult:
        """
        Record a fixed-duration video of the emulator window.

        Args:
            request: Capture request.

        Returns:
            Result with the output path, file size and probed dimensions.

        Raises:
            NESCaptureError: Subclasses for each failure kind.
        """
        return self._run(request, OutputKind.VIDEO, self._video_steps)

    def _run(
        self,
        request: CaptureRequest,
        kind: OutputKind,
        steps: Callable[[CaptureRequest, CaptureSession, Deadline, Path], CaptureResult],
    ) -> CaptureResult:
        self.states = [CaptureState.IDLE]
        session: Optional[CaptureSession] = None
        temp_path = partial_path(request.output_path)

        try:
            self._enter(CaptureState.VALIDATING)
            request.validate(kind, self.settings.emulator.rom_extension)

            session = CaptureSession(
                VirtualDisplay(self.settings.display, self.settings.tools),
                stop_timeout=self.settings.timing.stop_timeout,
            )
            with session:
                result = self._start(request, kind, session, steps, temp_path)
        except BaseException:
            if session is not None and session.closed:
                self._enter(CaptureState.TORN_DOWN)
            self._enter(CaptureState.FAILED)
            raise
        finally:
            if temp_path.exists():
                temp_path.unlink()

        self._enter(CaptureState.TORN_DOWN)
        self._enter(CaptureState.SUCCEEDED)
        result.states = list(self.states)
        return result

    def _start(self, request, kind, session, steps, temp_path) -> CaptureResult:
        display = session.display.start()
        self.client.display = display.name
        self._enter(CaptureState.DISPLAY_UP)

        env = self.client.environment()
        if kind is OutputKind.VIDEO:
            # Input injection needs a managed, focusable window
            session.window_manager = ManagedProcess(
                "window manager", [self.settings.tools.window_manager], env=env
            ).start()
            time.sleep(self.settings.timing.window_manager_delay)

        deadline = Deadline(self._time_limit(request, kind))

        session.emulator = launch_emulator(
            self.settings.emulator, request.rom_path, request.scale_factor, env
        )
        self._enter(CaptureState.EMULATOR_RUNNING)

        try:
            session.window_id = self._find_window(session, deadline)
            logger.info(f"Found emulator window: {session.window_id}")
            self._enter(CaptureState.WINDOW_DISCOVERED)
        except WindowNotFoundError as e:
            logger.warning(f"{e}, falling back to full display capture")
            self._enter(CaptureState.WINDOW_FALLBACK)

        logger.info(f"Waiting {request.warmup_seconds:g}s for boot...")
        deadline.sleep(request.warmup_seconds, "warm-up")

        return steps(request, session, deadline, temp_path)

    def _time_limit(self, request: CaptureRequest, kind: OutputKind) -> float:
        """Outer bound: warm-up + duration + margin (margin covers window search)."""
        duration = request.duration_seconds if kind is OutputKind.VIDEO else 0.0
        window = self.settings.window
        search_budget = window.search_attempts * window.search_interval
        return request.warmup_seconds + duration + self.settings.timing.timeout_margin + search_budget

    def _find_window(self, session: CaptureSession, deadline: Deadline) -> str:
        """
        Poll for the emulator window.

        Raises:
            WindowNotFoundError: If no window appears within the retry budget
                or the emulator exits first.
        """
        window = self.settings.window
        emulator = session.emulator
        window_id = poll(
            lambda: self.xdotool.search_window(
                window.title_pattern,
                timeout=deadline.bound(self.settings.tools.command_timeout, "window discovery"),
            ),
            attempts=window.search_attempts,
            interval=window.search_interval,
            deadline=deadline,
            step="window discovery",
            abort=lambda: not emulator.is_running(),
        )
        if window_id is None:
            if not emulator.is_running():
                raise WindowNotFoundError("Emulator exited before its window appeared")
            raise WindowNotFoundError(
                f"Could not find window matching '{window.title_pattern}'"
            )
        return window_id

    def _screenshot_steps(self, request, session, deadline, temp_path) -> CaptureResult:
        deadline.sleep(self.settings.timing.settle_delay, "settle")

        self._enter(CaptureState.CAPTURING)
        self.screenshot.capture_window(
            session.window_id,
            temp_path,
            timeout=deadline.bound(self.settings.tools.command_timeout, "screenshot"),
        )

        if request.crop_to_viewport:
            self._enter(CaptureState.POST_PROCESSING)
            self.screenshot.crop_viewport(temp_path, request.scale_factor)

        if is_blank(temp_path):
            logger.warning("Captured image is a single colour; the ROM may not have rendered yet")

        width, height = image_dimensions(temp_path)
        os.replace(temp_path, request.output_path)
        return CaptureResult(
            output_path=request.output_path,
            kind=OutputKind.SCREENSHOT,
            size_bytes=request.output_path.stat().st_size,
            width=width,
            height=height,
        )

    def _video_steps(self, request, session, deadline, temp_path) -> CaptureResult:
        profile = select_profile(request.output_path, self.settings.video.default_format)

        if request.input_script_path is not None or request.key_sequence:
            self._inject_input(request, session, deadline)
            self._enter(CaptureState.INPUT_INJECTED)

        region = self._capture_region(session.window_id, deadline)

        logger.info(f"Recording {request.duration_seconds:g}s of video...")
        self._enter(CaptureState.CAPTURING)
        self.recorder.record(
            region,
            request.frame_rate,
            request.duration_seconds,
            profile,
            temp_path,
            timeout=deadline.bound(
                request.duration_seconds + self.settings.timing.timeout_margin, "recording"
            ),
        )

        dimensions = probe_video(temp_path)
        os.replace(temp_path, request.output_path)
        return CaptureResult(
            output_path=request.output_path,
            kind=OutputKind.VIDEO,
            size_bytes=request.output_path.stat().st_size,
            width=dimensions[0] if dimensions else None,
            height=dimensions[1] if dimensions else None,
        )

    def _inject_input(self, request: CaptureRequest, session: CaptureSession, deadline: Deadline) -> None:
        window_id = session.window_id
        if window_id is None:
            logger.warning("Emulator window not found, input injection may not work")

        if request.input_script_path is not None:
            run_input_script(
                self.client,
                request.input_script_path,
                window_id,
                self.settings.window.handle_env_var,
                timeout=deadline.bound(deadline.remaining(), "input script"),
            )

        if request.key_sequence:
            if window_id is not None:
                self.xdotool.activate(
                    window_id,
                    timeout=deadline.bound(self.settings.tools.command_timeout, "key injection"),
                )
            logger.info(f"Injecting keys: {' '.join(request.key_sequence)}")
            self.xdotool.send_keys(to_keysyms(request.key_sequence), request.key_delay, deadline=deadline)

        deadline.sleep(self.settings.timing.input_settle_delay, "input settle")

    def _capture_region(self, window_id: Optional[str], deadline: Deadline) -> WindowGeometry:
        """
        Screen rectangle to record: the emulator window, or the whole display
        when the window is unknown or its geometry is unusable.
        """
        display = self.settings.display
        screen = WindowGeometry(0, 0, display.width, display.height)
        if window_id is None:
            return screen

        try:
            geometry = self.xdotool.get_geometry(
                window_id,
                timeout=deadline.bound(self.settings.tools.command_timeout, "window geometry"),
            )
        except GeometryParseError as e:
            logger.warning(f"{e}; using full screen capture")
            return screen

        logger.info(f"Window geometry: {geometry.size} at {geometry.x},{geometry.y}")
        region = geometry.clamp(display.width, display.height)
        if not region.is_plausible(self.settings.window.min_geometry):
            logger.warning(
                f"Invalid geometry detected (visible region {region.size}), using full screen capture"
            )
            return screen

        return region
