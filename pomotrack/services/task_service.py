# services/task_service.py
# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
from typing import List, Optional

from pomotrack.domain.errors import EmptyInput, NotFound
from pomotrack.domain.models import TASK_FILTERS, Task
from pomotrack.services.history_service import HistoryService
from pomotrack.services.tracking_service import TrackingService
from pomotrack.storage.repos import TaskRepo, TaskRow

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(
        self,
        task_repo: TaskRepo,
        tracking: TrackingService,
        history: Optional[HistoryService] = None,
    ):
        self.tasks = task_repo
        self.tracking = tracking
        self.history = history

    def _view(self, row: TaskRow) -> Task:
        return Task(
            id=row.id,
            text=row.text,
            completed=row.completed,
            time_spent=row.time_spent,
            is_tracking=self.tracking.is_tracking(row.id),
            created_at=row.created_at,
            completed_at=row.completed_at,
        )

    def _require(self, task_id: str) -> TaskRow:
        row = self.tasks.get(task_id)
        if row is None:
            raise NotFound("Task not found.")
        return row

    # ---- reads ----
    def get(self, task_id: str) -> Optional[Task]:
        row = self.tasks.get(task_id)
        return self._view(row) if row else None

    def list_tasks(self, filter: str = "all") -> List[Task]:
        if filter not in TASK_FILTERS:
            raise ValueError("Invalid filter. Use all/active/completed.")
        out = [self._view(r) for r in self.tasks.list()]
        if filter == "active":
            return [t for t in out if not t.completed]
        if filter == "completed":
            return [t for t in out if t.completed]
        return out

    def active_task(self) -> Optional[Task]:
        if self.tracking.active_task_id is None:
            return None
        return self.get(self.tracking.active_task_id)

    # ---- writes ----
    def add(self, text: str) -> Task:
        text = (text or "").strip()
        if not text:
            raise EmptyInput("Task text cannot be empty.")
        row = self.tasks.create(text)
        logger.debug("task added %s %r", row.id, row.text)
        return self._view(row)

    def toggle_completed(self, task_id: str) -> Task:
        """
        Flip the completed flag. Completing the tracked task stops tracking;
        completing a task with recorded time logs it to history.
        """
        row = self._require(task_id)
        completing = not row.completed

        self.tasks.set_completed(task_id, completing)
        if completing:
            self.tracking.clear_if_active(task_id)
            if row.time_spent > 0 and self.history is not None:
                self.history.append(
                    mode="work",
                    duration=row.time_spent // 60,
                    task_name=row.text,
                    status="completed",
                    time_spent=row.time_spent,
                )
        logger.debug("task %s completed=%s", task_id, completing)
        return self._view(self._require(task_id))

    def toggle_tracking(self, task_id: str) -> Task:
        row = self._require(task_id)
        if row.completed:
            # completed tasks cannot be tracked; silently ignored
            return self._view(row)

        if self.tracking.is_tracking(task_id):
            self.tracking.set_active_task(None)
        else:
            self.tracking.set_active_task(task_id)
        return self._view(row)

    def remove(self, task_id: str) -> None:
        self._require(task_id)
        self.tracking.clear_if_active(task_id)
        self.tasks.delete_task(task_id)
        logger.debug("task removed %s", task_id)
