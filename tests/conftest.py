"""Shared fixtures for minimaze tests."""

import pytest

from minimaze import MazeSession, default_grid


class FakeClock:
    """Controllable replacement for time.time()."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session(clock: FakeClock) -> MazeSession:
    return MazeSession(default_grid(), clock=clock)


@pytest.fixture(autouse=True)
def no_color(monkeypatch):
    monkeypatch.setenv("MINIMAZE_NO_COLOR", "1")
