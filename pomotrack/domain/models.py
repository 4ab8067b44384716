# -*- coding: utf-8 -*-

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

MODES = ("work", "break")
SESSION_STATUSES = ("completed", "interrupted", "cancelled")
TASK_FILTERS = ("all", "active", "completed")
HISTORY_ORDERS = ("newest", "oldest")

WORK_MINUTES_RANGE = (1, 120)
BREAK_MINUTES_RANGE = (1, 30)


@dataclass(frozen=True)
class Task:
    id: str
    text: str
    completed: bool
    time_spent: int  # seconds
    is_tracking: bool
    created_at: int
    completed_at: Optional[int] = None


@dataclass(frozen=True)
class SessionRecord:
    id: str
    mode: str  # work | break
    duration: int  # minutes
    completed_at: int
    task_name: Optional[str] = None
    pomodoros: Optional[int] = None
    status: str = "completed"  # completed | interrupted | cancelled
    time_spent: Optional[int] = None  # seconds, task completions only


@dataclass(frozen=True)
class AppSnapshot:
    """Read-only view handed to the UI layer."""

    mode: str
    time_left: int
    is_running: bool
    completed_sessions: int
    work_minutes: int
    break_minutes: int
    active_task_id: Optional[str]
    tasks: Tuple[Task, ...] = field(default_factory=tuple)
    history: Tuple[SessionRecord, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        tasks: List[Dict[str, Any]] = [asdict(t) for t in self.tasks]
        history: List[Dict[str, Any]] = [asdict(r) for r in self.history]
        return {
            "mode": self.mode,
            "time_left": self.time_left,
            "is_running": self.is_running,
            "completed_sessions": self.completed_sessions,
            "work_minutes": self.work_minutes,
            "break_minutes": self.break_minutes,
            "active_task_id": self.active_task_id,
            "tasks": tasks,
            "history": history,
        }
