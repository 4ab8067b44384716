# -*- coding: utf-8 -*-

import logging
from typing import List, Optional

from pomotrack.domain.errors import NotFound
from pomotrack.domain.models import HISTORY_ORDERS, SESSION_STATUSES, SessionRecord
from pomotrack.storage.repos import SessionRepo

logger = logging.getLogger(__name__)


class HistoryService:
    """Append-only ledger of finished periods, plus read-side queries."""

    def __init__(self, session_repo: SessionRepo):
        self.sessions = session_repo

    # ---- writes ----
    def append(
        self,
        mode: str,
        duration: int,
        task_name: Optional[str] = None,
        pomodoros: Optional[int] = None,
        status: str = "completed",
        time_spent: Optional[int] = None,
    ) -> SessionRecord:
        if status not in SESSION_STATUSES:
            raise ValueError("Invalid session status.")
        rec = self.sessions.append(
            mode=mode,
            duration=duration,
            task_name=task_name,
            pomodoros=pomodoros,
            status=status,
            time_spent=time_spent,
        )
        logger.info(
            "session logged: %s %dmin status=%s task=%r",
            rec.mode,
            rec.duration,
            rec.status,
            rec.task_name,
        )
        return rec

    def remove(self, session_id: str) -> None:
        if not self.sessions.delete(session_id):
            raise NotFound("Session not found.")

    def clear(self) -> int:
        n = self.sessions.clear()
        logger.info("history cleared (%d records)", n)
        return n

    # ---- reads ----
    def count(self) -> int:
        return self.sessions.count()

    def list(self, order: str = "newest") -> List[SessionRecord]:
        if order not in HISTORY_ORDERS:
            raise ValueError("Invalid order. Use newest/oldest.")
        rows = sorted(
            self.sessions.list_with_seq(),
            key=lambda sr: (sr[1].completed_at, sr[0]),
            reverse=(order == "newest"),
        )
        return [rec for _, rec in rows]

    def filter(
        self,
        status: Optional[str] = None,
        text: Optional[str] = None,
        order: str = "newest",
    ) -> List[SessionRecord]:
        if status and status not in SESSION_STATUSES:
            raise ValueError("Invalid status. Use completed/interrupted/cancelled.")
        needle = (text or "").strip().lower()

        def matches(rec: SessionRecord) -> bool:
            if status and rec.status != status:
                return False
            if not needle:
                return True
            hay = " ".join(
                part for part in (rec.mode, rec.task_name or "", rec.status) if part
            ).lower()
            return needle in hay

        return [rec for rec in self.list(order) if matches(rec)]
