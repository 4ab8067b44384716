# -*- coding: utf-8 -*-

import logging
from typing import Optional

from pomotrack.core.timer_engine import EngineSnapshot
from pomotrack.domain.errors import NotFound
from pomotrack.storage.repos import TaskRepo

logger = logging.getLogger(__name__)


class TrackingService:
    """
    Holds the single active task reference and streams work seconds into it.

    The "is tracking" flag of a task is derived from active_task_id, so two
    tasks can never be tracked at once.
    """

    def __init__(self, task_repo: TaskRepo):
        self.task_repo = task_repo
        self.active_task_id: Optional[str] = None

    def is_tracking(self, task_id: str) -> bool:
        return task_id is not None and task_id == self.active_task_id

    def set_active_task(self, task_id: Optional[str]) -> None:
        if task_id is not None:
            row = self.task_repo.get(task_id)
            if row is None:
                raise NotFound("Task not found.")
            if row.completed:
                # a completed task never becomes the tracked one
                return
        if task_id != self.active_task_id:
            logger.debug("active task %s -> %s", self.active_task_id, task_id)
        self.active_task_id = task_id

    def clear_if_active(self, task_id: str) -> bool:
        if self.active_task_id == task_id:
            self.set_active_task(None)
            return True
        return False

    def on_tick(self, snap: EngineSnapshot) -> bool:
        """
        Credit one second to the active task. `snap` is the engine state
        the second elapsed in. Returns True when time was credited.
        """
        if snap.mode != "work" or not snap.is_running:
            return False
        if self.active_task_id is None:
            return False
        self.task_repo.add_time(self.active_task_id, 1)
        return True
