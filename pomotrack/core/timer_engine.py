# -*- coding: utf-8 -*-

from dataclasses import dataclass
from typing import Optional, Tuple

from pomotrack.domain.errors import InvalidConfig
from pomotrack.domain.models import BREAK_MINUTES_RANGE, WORK_MINUTES_RANGE


@dataclass(frozen=True)
class EngineSnapshot:
    mode: str  # "work" | "break"
    time_left: int
    is_running: bool
    completed_sessions: int
    work_minutes: int
    break_minutes: int


@dataclass(frozen=True)
class CompletedPeriod:
    """A period whose countdown reached zero on a tick."""

    mode: str
    duration: int  # minutes configured for the finished period
    completed_sessions: int  # counter value after the transition


def _check_minutes(label: str, value, bounds: Tuple[int, int]) -> int:
    lo, hi = bounds
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfig(f"{label} duration must be a whole number of minutes.")
    if value < lo or value > hi:
        raise InvalidConfig(f"{label} duration must be between {lo} and {hi} minutes.")
    return value


def validate_durations(work_minutes, break_minutes) -> Tuple[int, int]:
    return (
        _check_minutes("Work", work_minutes, WORK_MINUTES_RANGE),
        _check_minutes("Break", break_minutes, BREAK_MINUTES_RANGE),
    )


class TimerEngine:
    """
    Pure countdown engine (no UI, no clock).
    The owner calls tick() once per elapsed second.

    Every period boundary halts the engine; the next period waits for an
    explicit start().
    """

    def __init__(self, work_minutes: int = 25, break_minutes: int = 5):
        self.work_minutes, self.break_minutes = validate_durations(
            work_minutes, break_minutes
        )

        self.mode = "work"
        self.time_left = self.period_seconds()
        self.is_running = False
        self.completed_sessions = 0

    def snapshot(self) -> EngineSnapshot:
        return EngineSnapshot(
            mode=self.mode,
            time_left=self.time_left,
            is_running=self.is_running,
            completed_sessions=self.completed_sessions,
            work_minutes=self.work_minutes,
            break_minutes=self.break_minutes,
        )

    def period_minutes(self, mode: Optional[str] = None) -> int:
        mode = mode or self.mode
        return self.work_minutes if mode == "work" else self.break_minutes

    def period_seconds(self, mode: Optional[str] = None) -> int:
        return self.period_minutes(mode) * 60

    def elapsed_seconds(self) -> int:
        return self.period_seconds() - self.time_left

    def progress(self) -> float:
        total = self.period_seconds()
        return (total - self.time_left) / total

    def start(self) -> None:
        self.is_running = True

    def pause(self) -> None:
        self.is_running = False

    def toggle(self) -> None:
        self.is_running = not self.is_running

    def reset(self) -> None:
        # mode and counter survive a reset
        self.is_running = False
        self.time_left = self.period_seconds()

    def configure_durations(self, work_minutes: int, break_minutes: int) -> None:
        self.work_minutes, self.break_minutes = validate_durations(
            work_minutes, break_minutes
        )
        if not self.is_running:
            self.time_left = self.period_seconds()
        elif self.time_left > self.period_seconds():
            self.time_left = self.period_seconds()

    def tick(self) -> Optional[CompletedPeriod]:
        """
        Advance one second. Returns the finished period when the countdown
        hits zero on this tick, else None.
        """
        if not self.is_running:
            return None

        if self.time_left > 0:
            self.time_left -= 1

        if self.time_left > 0:
            return None

        finished_mode = self.mode
        finished_minutes = self.period_minutes()

        if finished_mode == "work":
            self.completed_sessions += 1
            self.mode = "break"
        else:
            self.mode = "work"
        self.time_left = self.period_seconds()
        self.is_running = False

        return CompletedPeriod(
            mode=finished_mode,
            duration=finished_minutes,
            completed_sessions=self.completed_sessions,
        )
