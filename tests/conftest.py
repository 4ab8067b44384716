# tests/conftest.py

from __future__ import annotations

from typing import Iterator

import pytest

from pomotrack.app import PomodoroApp
from pomotrack.core.timer_engine import TimerEngine


class FakeClock:
    """Deterministic epoch-seconds source for repos."""

    def __init__(self, start: int = 1_767_225_600) -> None:
        self.current = start

    def now(self) -> int:
        return self.current

    def advance(self, seconds: int) -> None:
        self.current += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def engine() -> TimerEngine:
    return TimerEngine(work_minutes=25, break_minutes=5)


@pytest.fixture()
def app(clock: FakeClock) -> Iterator[PomodoroApp]:
    a = PomodoroApp(work_minutes=25, break_minutes=5, now_provider=clock.now)
    yield a
    a.close()


_ENV_VARS = (
    "POMOTRACK_WORK_MINUTES",
    "POMOTRACK_BREAK_MINUTES",
    "POMOTRACK_RECORD_INTERRUPTED",
    "POMOTRACK_LOG_LEVEL",
    "POMOTRACK_LOG_DIR",
    "POMOTRACK_TICK_SECONDS",
)


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _ENV_VARS:
        # setenv first so the original value (or absence) is restored afterwards
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch
