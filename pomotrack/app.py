#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from threading import RLock
from typing import Callable, List, Optional

from pomotrack.config import Settings, load_settings
from pomotrack.core.timer_engine import TimerEngine, validate_durations
from pomotrack.domain.errors import PomodoroError
from pomotrack.domain.models import AppSnapshot, SessionRecord, Task
from pomotrack.logging_setup import setup_logging
from pomotrack.services.clock import Ticker
from pomotrack.services.history_service import HistoryService
from pomotrack.services.stats_service import StatsService
from pomotrack.services.task_service import TaskService
from pomotrack.services.timer_service import TimerService
from pomotrack.services.tracking_service import TrackingService
from pomotrack.storage.repos import SessionRepo, TaskRepo

logger = logging.getLogger(__name__)


class PomodoroApp:
    """
    The one state object the UI talks to.

    Every operation and every clock tick runs under one lock, so a tick
    never interleaves with a task mutation.
    """

    def __init__(
        self,
        *,
        work_minutes: int = 25,
        break_minutes: int = 5,
        record_interrupted: bool = False,
        now_provider: Optional[Callable[[], int]] = None,
    ) -> None:
        self._lock = RLock()
        self._ticker: Optional[Ticker] = None

        self.task_repo = TaskRepo(now_provider)
        self.session_repo = SessionRepo(now_provider)

        self.tracking = TrackingService(self.task_repo)
        self.history = HistoryService(self.session_repo)
        self.tasks = TaskService(self.task_repo, self.tracking, self.history)
        self.stats = StatsService(self.task_repo, self.session_repo)

        self.engine = TimerEngine(work_minutes, break_minutes)
        self.timer = TimerService(
            self.engine,
            self.tasks,
            self.tracking,
            self.history,
            record_interrupted=record_interrupted,
        )

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "PomodoroApp":
        return cls(
            work_minutes=settings.work_minutes,
            break_minutes=settings.break_minutes,
            record_interrupted=settings.record_interrupted,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------
    def attach_clock(self, interval: float = 1.0) -> Ticker:
        with self._lock:
            if self._ticker is None:
                self._ticker = Ticker(self.tick, interval, lock=self._lock)
            if self.engine.is_running:
                self._ticker.start()
            return self._ticker

    def close(self) -> None:
        """Stop the background clock, if any."""
        with self._lock:
            if self._ticker is not None:
                self._ticker.stop()

    def _sync_clock(self) -> None:
        if self._ticker is None:
            return
        if self.engine.is_running:
            self._ticker.start()
        else:
            self._ticker.stop()

    # ------------------------------------------------------------------
    # Timer
    # ------------------------------------------------------------------
    def start(self) -> None:
        with self._lock:
            self.timer.start()
            self._sync_clock()

    def pause(self) -> None:
        with self._lock:
            self.timer.pause()
            self._sync_clock()

    def toggle(self) -> None:
        with self._lock:
            self.timer.toggle()
            self._sync_clock()

    def reset(self) -> Optional[SessionRecord]:
        with self._lock:
            rec = self.timer.reset()
            self._sync_clock()
            return rec

    def tick(self) -> Optional[SessionRecord]:
        with self._lock:
            rec = self.timer.tick()
            if rec is not None:
                self._sync_clock()
            return rec

    def configure_durations(self, work_minutes: int, break_minutes: int) -> None:
        with self._lock:
            self.timer.configure_durations(work_minutes, break_minutes)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------
    def add_task(self, text: str) -> Task:
        with self._lock:
            return self.tasks.add(text)

    def toggle_completed(self, task_id: str) -> Task:
        with self._lock:
            return self.tasks.toggle_completed(task_id)

    def toggle_tracking(self, task_id: str) -> Task:
        with self._lock:
            return self.tasks.toggle_tracking(task_id)

    def set_active_task(self, task_id: Optional[str]) -> None:
        with self._lock:
            self.tracking.set_active_task(task_id)

    def remove_task(self, task_id: str) -> None:
        with self._lock:
            self.tasks.remove(task_id)

    def list_tasks(self, filter: str = "all") -> List[Task]:
        with self._lock:
            return self.tasks.list_tasks(filter)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------
    def clear_history(self) -> int:
        with self._lock:
            return self.history.clear()

    def remove_history(self, session_id: str) -> None:
        with self._lock:
            self.history.remove(session_id)

    def list_history(
        self,
        status: Optional[str] = None,
        text: Optional[str] = None,
        order: str = "newest",
    ) -> List[SessionRecord]:
        with self._lock:
            return self.history.filter(status=status, text=text, order=order)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    def snapshot(self) -> AppSnapshot:
        with self._lock:
            snap = self.engine.snapshot()
            return AppSnapshot(
                mode=snap.mode,
                time_left=snap.time_left,
                is_running=snap.is_running,
                completed_sessions=snap.completed_sessions,
                work_minutes=snap.work_minutes,
                break_minutes=snap.break_minutes,
                active_task_id=self.tracking.active_task_id,
                tasks=tuple(self.tasks.list_tasks()),
                history=tuple(self.history.list("oldest")),
            )


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="pomotrack", description="Pomodoro timer with task time tracking.")
    p.add_argument("--work", type=int, default=None, help="work period in minutes")
    p.add_argument("--break", dest="brk", type=int, default=None, help="break period in minutes")
    p.add_argument("--log-dir", default=None, help="directory for pomotrack.log")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    from pomotrack.ui.console import ConsoleUI

    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
        work, brk = validate_durations(
            args.work if args.work is not None else settings.work_minutes,
            args.brk if args.brk is not None else settings.break_minutes,
        )
    except PomodoroError as e:
        parser.error(str(e))
    settings = replace(settings, work_minutes=work, break_minutes=brk)

    setup_logging(
        log_dir=args.log_dir or settings.log_dir,
        console_level=getattr(logging, settings.log_level, logging.INFO),
    )

    app = PomodoroApp.from_settings(settings)
    app.attach_clock(settings.tick_seconds)
    snap = app.snapshot()
    logger.info("pomotrack ready: work=%dmin break=%dmin", snap.work_minutes, snap.break_minutes)

    try:
        ConsoleUI(app).run()
    finally:
        app.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
