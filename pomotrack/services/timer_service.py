# -*- coding: utf-8 -*-

import logging
from typing import Callable, Optional

from pomotrack.core.timer_engine import EngineSnapshot, TimerEngine
from pomotrack.domain.models import SessionRecord
from pomotrack.services.history_service import HistoryService
from pomotrack.services.task_service import TaskService
from pomotrack.services.tracking_service import TrackingService

logger = logging.getLogger(__name__)


class TimerService:
    """
    Orchestrates:
    - TimerEngine state
    - per-second time accrual on the tracked task
    - history records at period boundaries
    - callbacks for UI
    """

    def __init__(
        self,
        engine: TimerEngine,
        task_service: TaskService,
        tracking: TrackingService,
        history: HistoryService,
        record_interrupted: bool = False,
    ):
        self.engine = engine
        self.task_service = task_service
        self.tracking = tracking
        self.history = history
        self.record_interrupted = record_interrupted

        self._on_tick: Optional[Callable[[EngineSnapshot], None]] = None
        self._on_phase_change: Optional[Callable[[EngineSnapshot], None]] = None
        self._on_state_change: Optional[Callable[[EngineSnapshot], None]] = None
        self._on_session_logged: Optional[Callable[[SessionRecord], None]] = None

    # ----- Callbacks -----
    def set_on_tick(self, fn: Callable[[EngineSnapshot], None]) -> None:
        self._on_tick = fn

    def set_on_phase_change(self, fn: Callable[[EngineSnapshot], None]) -> None:
        self._on_phase_change = fn

    def set_on_state_change(self, fn: Callable[[EngineSnapshot], None]) -> None:
        self._on_state_change = fn

    def set_on_session_logged(self, fn: Callable[[SessionRecord], None]) -> None:
        self._on_session_logged = fn

    def _emit_tick(self) -> None:
        if self._on_tick:
            self._on_tick(self.engine.snapshot())

    def _emit_phase_change(self) -> None:
        if self._on_phase_change:
            self._on_phase_change(self.engine.snapshot())

    def _emit_state_change(self) -> None:
        if self._on_state_change:
            self._on_state_change(self.engine.snapshot())

    def _emit_session_logged(self, rec: SessionRecord) -> None:
        if self._on_session_logged:
            self._on_session_logged(rec)

    # ----- Public API -----
    def get_snapshot(self) -> EngineSnapshot:
        return self.engine.snapshot()

    def start(self) -> None:
        if self.engine.is_running:
            return
        self.engine.start()
        logger.debug("timer started (%s, %ds left)", self.engine.mode, self.engine.time_left)
        self._emit_state_change()

    def pause(self) -> None:
        if not self.engine.is_running:
            return
        self.engine.pause()
        logger.debug("timer paused (%s, %ds left)", self.engine.mode, self.engine.time_left)
        self._emit_state_change()

    def toggle(self) -> None:
        if self.engine.is_running:
            self.pause()
        else:
            self.start()

    def reset(self) -> Optional[SessionRecord]:
        """
        Stop and re-seed the current period. Logs nothing unless
        record_interrupted is on and part of the period has elapsed.
        """
        rec = None
        elapsed = self.engine.elapsed_seconds()
        if self.record_interrupted and elapsed > 0:
            rec = self._log(
                mode=self.engine.mode,
                duration=elapsed // 60,
                pomodoros=self.engine.completed_sessions,
                status="interrupted",
            )

        self.engine.reset()
        self._emit_state_change()
        return rec

    def configure_durations(self, work_minutes: int, break_minutes: int) -> None:
        self.engine.configure_durations(work_minutes, break_minutes)
        logger.info("durations set: work=%dmin break=%dmin", work_minutes, break_minutes)
        self._emit_state_change()

    def tick(self) -> Optional[SessionRecord]:
        """
        Should be called once per second by the clock.
        Credits the tracked task, then advances the countdown.
        Returns the history record when a period finished on this tick.
        """
        snap_before = self.engine.snapshot()
        if not snap_before.is_running:
            return None

        self.tracking.on_tick(snap_before)
        finished = self.engine.tick()

        self._emit_tick()

        if finished is None:
            return None

        logger.info(
            "%s period finished (%dmin), now %s; sessions=%d",
            finished.mode,
            finished.duration,
            self.engine.mode,
            finished.completed_sessions,
        )
        rec = self._log(
            mode=finished.mode,
            duration=finished.duration,
            pomodoros=finished.completed_sessions,
            status="completed",
        )
        self._emit_phase_change()
        return rec

    # ----- internals -----
    def _log(self, mode: str, duration: int, pomodoros: int, status: str) -> SessionRecord:
        active = self.task_service.active_task()
        rec = self.history.append(
            mode=mode,
            duration=duration,
            task_name=active.text if active else None,
            pomodoros=pomodoros,
            status=status,
        )
        self._emit_session_logged(rec)
        return rec
