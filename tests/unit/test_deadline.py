"""Deadline and polling helper tests."""

import pytest

from nescapture.utils.deadline import Deadline, poll
from nescapture.utils.exceptions import CaptureTimeoutError


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def test_remaining_counts_down_and_never_goes_negative() -> None:
    clock = FakeClock()
    deadline = Deadline(10, clock=clock)
    assert deadline.remaining() == 10
    clock.now += 4
    assert deadline.remaining() == 6
    clock.now += 20
    assert deadline.remaining() == 0
    assert deadline.expired()


def test_check_raises_after_expiry() -> None:
    clock = FakeClock()
    deadline = Deadline(1, clock=clock)
    deadline.check("capture")
    clock.now += 2
    with pytest.raises(CaptureTimeoutError, match="during capture"):
        deadline.check("capture")


def test_bound_clamps_timeout_to_remaining() -> None:
    clock = FakeClock()
    deadline = Deadline(5, clock=clock)
    assert deadline.bound(10, "step") == 5
    assert deadline.bound(2, "step") == 2


def test_sleep_longer_than_remaining_raises(monkeypatch) -> None:
    slept = []
    monkeypatch.setattr("nescapture.utils.deadline.time.sleep", slept.append)
    clock = FakeClock()
    deadline = Deadline(1, clock=clock)
    with pytest.raises(CaptureTimeoutError):
        deadline.sleep(5, "warm-up")
    assert slept == [1]


def test_poll_returns_first_ready_value(monkeypatch) -> None:
    monkeypatch.setattr("nescapture.utils.deadline.time.sleep", lambda s: None)
    answers = iter([None, None, "42"])
    assert poll(lambda: next(answers), attempts=5, interval=0.1) == "42"


def test_poll_gives_up_after_attempts(monkeypatch) -> None:
    monkeypatch.setattr("nescapture.utils.deadline.time.sleep", lambda s: None)
    calls = []

    def probe():
        calls.append(1)
        return None

    assert poll(probe, attempts=3, interval=0.1) is None
    assert len(calls) == 3


def test_poll_stops_when_aborted() -> None:
    calls = []

    def probe():
        calls.append(1)
        return None

    assert poll(probe, attempts=10, interval=0.1, abort=lambda: True) is None
    assert len(calls) == 1
