"""Outer time bound for a capture run and bounded polling helpers."""

import time
from typing import Callable, Optional, TypeVar

from .exceptions import CaptureTimeoutError

T = TypeVar("T")


class Deadline:
    """Tracks the time remaining before a capture run must be abandoned."""

    def __init__(self, seconds: float, clock: Callable[[], float] = time.monotonic):
        """
        Initialize deadline.

        Args:
            seconds: Total time budget from now.
            clock: Monotonic clock function.
        """
        self.seconds = seconds
        self.clock = clock
        self.expires_at = clock() + seconds

    def remaining(self) -> float:
        """Seconds left, never negative."""
        return max(0.0, self.expires_at - self.clock())

    def expired(self) -> bool:
        return self.remaining() <= 0

    def check(self, step: str) -> None:
        """
        Raise if the deadline has passed.

        Args:
            step: Name of the step about to run, used in the error message.

        Raises:
            CaptureTimeoutError: If no time remains.
        """
        if self.expired():
            raise CaptureTimeoutError(f"Capture exceeded {self.seconds:g}s limit during {step}")

    def bound(self, timeout: float, step: str) -> float:
        """
        Clamp a per-step timeout to the time remaining.

        Raises:
            CaptureTimeoutError: If no time remains.
        """
        self.check(step)
        return min(timeout, self.remaining())

    def sleep(self, duration: float, step: str) -> None:
        """
        Sleep for duration, raising if the deadline falls inside it.

        Raises:
            CaptureTimeoutError: If the sleep would outlast the deadline.
        """
        if duration <= 0:
            self.check(step)
            return
        remaining = self.remaining()
        if duration > remaining:
            time.sleep(remaining)
            raise CaptureTimeoutError(f"Capture exceeded {self.seconds:g}s limit during {step}")
        time.sleep(duration)


def poll(
    probe: Callable[[], Optional[T]],
    attempts: int,
    interval: float,
    deadline: Optional[Deadline] = None,
    step: str = "poll",
    abort: Optional[Callable[[], bool]] = None,
) -> Optional[T]:
    """
    Call probe until it returns a non-None value or attempts run out.

    Args:
        probe: Function returning a value when ready, None otherwise.
        attempts: Maximum number of probe calls.
        interval: Delay between calls in seconds.
        deadline: Outer deadline bounding the delays.
        step: Step name for timeout messages.
        abort: Function returning True when polling should stop early.

    Returns:
        The first non-None probe result, or None.
    """
    for attempt in range(attempts):
        result = probe()
        if result is not None:
            return result
        if abort is not None and abort():
            return None
        if attempt < attempts - 1:
            if deadline is not None:
                deadline.sleep(interval, step)
            else:
                time.sleep(interval)
    return None
