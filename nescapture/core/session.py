"""Scoped ownership of the child processes of one capture run."""

import logging
import signal
import threading
from contextlib import contextmanager
from typing import Optional

from .process import ManagedProcess
from ..x11.display import VirtualDisplay

logger = logging.getLogger(__name__)

TEARDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


@contextmanager
def signals_ignored():
    """Ignore SIGINT and SIGTERM for the duration of the block (main thread only)."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    previous = {sig: signal.signal(sig, signal.SIG_IGN) for sig in TEARDOWN_SIGNALS}
    try:
        yield
    finally:
        for sig, handler in previous.items():
            if handler is not None:
                signal.signal(sig, handler)


class CaptureSession:
    """
    Holds every process spawned for one run and stops them all on exit.

    Use as a context manager; close() runs on success, on any exception
    and on SystemExit from a signal handler.
    """

    def __init__(self, display: VirtualDisplay, stop_timeout: float = 3.0):
        """
        Initialize capture session.

        Args:
            display: Virtual display to own (not yet started).
            stop_timeout: Seconds to wait for each process after SIGTERM.
        """
        self.display = display
        self.stop_timeout = stop_timeout
        self.window_manager: Optional[ManagedProcess] = None
        self.emulator: Optional[ManagedProcess] = None
        self.window_id: Optional[str] = None
        self.closed = False

    def __enter__(self) -> "CaptureSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Stop emulator, window manager and display server, in that order."""
        if self.closed:
            return
        self.closed = True

        # A second Ctrl-C must not interrupt teardown halfway
        with signals_ignored():
            for process in (self.emulator, self.window_manager):
                if process is not None:
                    try:
                        process.stop(self.stop_timeout)
                    except Exception as e:
                        logger.debug(f"Teardown of {process.name} failed: {e}")
            try:
                self.display.stop(self.stop_timeout)
            except Exception as e:
                logger.debug(f"Teardown of display failed: {e}")

        self.emulator = None
        self.window_manager = None
        logger.debug("Capture session torn down")
