# storage/repos.py
# -*- coding: utf-8 -*-

import time
import uuid
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Tuple

from pomotrack.domain.models import SessionRecord

NowProvider = Callable[[], int]


def _now_ts() -> int:
    return int(time.time())


@dataclass
class TaskRow:
    id: str
    text: str
    completed: bool = False
    time_spent: int = 0
    created_at: int = 0
    completed_at: Optional[int] = None


class TaskRepo:
    """Ordered in-memory task table. Lives as long as the process."""

    def __init__(self, now_provider: Optional[NowProvider] = None):
        self.now = now_provider or _now_ts
        self._rows: Dict[str, TaskRow] = {}  # insertion ordered

    def create(self, text: str) -> TaskRow:
        row = TaskRow(id=str(uuid.uuid4()), text=text, created_at=self.now())
        self._rows[row.id] = row
        return replace(row)

    def list(self) -> List[TaskRow]:
        return [replace(r) for r in self._rows.values()]

    def get(self, task_id: str) -> Optional[TaskRow]:
        r = self._rows.get(task_id)
        return replace(r) if r else None

    def set_completed(self, task_id: str, completed: bool) -> None:
        r = self._rows[task_id]
        r.completed = completed
        r.completed_at = self.now() if completed else None

    def add_time(self, task_id: str, seconds: int) -> int:
        r = self._rows[task_id]
        r.time_spent += seconds
        return r.time_spent

    def delete_task(self, task_id: str) -> None:
        del self._rows[task_id]

    def count(self) -> int:
        return len(self._rows)


class SessionRepo:
    """Append-only session log; rows keep their insertion sequence."""

    def __init__(self, now_provider: Optional[NowProvider] = None):
        self.now = now_provider or _now_ts
        self._seq = 0
        self._rows: List[Tuple[int, SessionRecord]] = []

    def append(
        self,
        mode: str,
        duration: int,
        task_name: Optional[str] = None,
        pomodoros: Optional[int] = None,
        status: str = "completed",
        time_spent: Optional[int] = None,
    ) -> SessionRecord:
        rec = SessionRecord(
            id=str(uuid.uuid4()),
            mode=mode,
            duration=duration,
            completed_at=self.now(),
            task_name=task_name,
            pomodoros=pomodoros,
            status=status,
            time_spent=time_spent,
        )
        self._seq += 1
        self._rows.append((self._seq, rec))
        return rec

    def list_with_seq(self) -> List[Tuple[int, SessionRecord]]:
        return list(self._rows)

    def list(self) -> List[SessionRecord]:
        return [rec for _, rec in self._rows]

    def delete(self, session_id: str) -> bool:
        before = len(self._rows)
        self._rows = [(s, r) for s, r in self._rows if r.id != session_id]
        return len(self._rows) != before

    def clear(self) -> int:
        n = len(self._rows)
        self._rows = []
        return n

    def count(self) -> int:
        return len(self._rows)
