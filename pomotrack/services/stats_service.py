# -*- coding: utf-8 -*-

import time
from typing import Any, Dict, Optional

from pomotrack.storage.repos import SessionRepo, TaskRepo


def _start_of_today_ts(now: Optional[float] = None) -> int:
    lt = time.localtime(time.time() if now is None else now)
    start = time.mktime(
        (
            lt.tm_year,
            lt.tm_mon,
            lt.tm_mday,
            0,
            0,
            0,
            lt.tm_wday,
            lt.tm_yday,
            lt.tm_isdst,
        )
    )
    return int(start)


class StatsService:
    def __init__(self, task_repo: TaskRepo, session_repo: SessionRepo):
        self.tasks = task_repo
        self.sessions = session_repo

    def total_time_spent(self) -> int:
        return sum(t.time_spent for t in self.tasks.list())

    def total_count(self) -> int:
        return self.tasks.count()

    def completed_count(self) -> int:
        return sum(1 for t in self.tasks.list() if t.completed)

    def tasks_with_time(self) -> int:
        return sum(1 for t in self.tasks.list() if t.time_spent > 0)

    def progress_percent(self) -> int:
        total = self.total_count()
        if total == 0:
            return 0
        return round(self.completed_count() * 100 / total)

    def work_seconds_since(self, since_ts: int) -> int:
        # finished work periods only; task-completion entries carry time_spent
        return sum(
            rec.duration * 60
            for rec in self.sessions.list()
            if rec.mode == "work"
            and rec.status == "completed"
            and rec.time_spent is None
            and rec.completed_at >= since_ts
        )

    def total_today_work_sec(self) -> int:
        return self.work_seconds_since(_start_of_today_ts(self.sessions.now()))

    def summary(self) -> Dict[str, Any]:
        return {
            "tasks_count": self.total_count(),
            "completed_count": self.completed_count(),
            "tasks_with_time": self.tasks_with_time(),
            "total_time_spent": self.total_time_spent(),
            "progress_percent": self.progress_percent(),
            "sessions_count": self.sessions.count(),
        }
