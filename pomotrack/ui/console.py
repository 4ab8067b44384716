# pomotrack/ui/console.py
# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from pomotrack.app import PomodoroApp
from pomotrack.core.formatting import format_task_time, format_time, format_total_time
from pomotrack.domain.errors import NotFound, PomodoroError
from pomotrack.domain.models import SessionRecord, Task

logger = logging.getLogger(__name__)

Handler = Callable[[List[str]], str]


def _fmt_task(n: int, t: Task) -> str:
    box = "[x]" if t.completed else "[ ]"
    mark = " *tracking*" if t.is_tracking else ""
    spent = f" ({format_task_time(t.time_spent)})" if t.time_spent > 0 else ""
    return f"{n:>2}. {box} {t.text}{spent}{mark}"


def _fmt_session(n: int, s: SessionRecord) -> str:
    label = "Work" if s.mode == "work" else "Break"
    task = f" - {s.task_name}" if s.task_name else ""
    status = "" if s.status == "completed" else f" [{s.status}]"
    return f"{n:>2}. {label} {s.duration} min{task}{status}"


class ConsoleUI:
    """Line-oriented front end. Renders state; every change goes through PomodoroApp."""

    def __init__(
        self,
        app: PomodoroApp,
        input_fn: Optional[Callable[[str], str]] = None,
        output: Callable[[str], None] = print,
    ):
        self.app = app
        self.input_fn = input_fn or input
        self.output = output

        # positions shown by the last listing -> ids
        self._task_ids: List[str] = []
        self._session_ids: List[str] = []

        self._handlers: Dict[str, Handler] = {}
        self._help: Dict[str, str] = {}
        self._register_all()

        self.app.timer.set_on_phase_change(self._on_phase_change)

    # ---------- registry ----------
    def register(self, name: str, handler: Handler, help_text: str) -> None:
        self._handlers[name] = handler
        self._help[name] = help_text

    def _register_all(self) -> None:
        self.register("add", self.cmd_add, "add <text> - new task")
        self.register("done", self.cmd_done, "done <n> - toggle task completed")
        self.register("track", self.cmd_track, "track <n> - toggle time tracking")
        self.register("rm", self.cmd_rm, "rm <n> - delete task")
        self.register("tasks", self.cmd_tasks, "tasks [all|active|completed]")
        self.register("start", self.cmd_start, "start timer")
        self.register("pause", self.cmd_pause, "pause timer")
        self.register("toggle", self.cmd_toggle, "start or pause")
        self.register("reset", self.cmd_reset, "reset current period")
        self.register("tick", self.cmd_tick, "tick [n] - advance n seconds by hand")
        self.register("config", self.cmd_config, "config <work> <break> - minutes")
        self.register("history", self.cmd_history, "history [search]")
        self.register("history-rm", self.cmd_history_rm, "history-rm <n>")
        self.register("history-clear", self.cmd_history_clear, "wipe history")
        self.register("status", self.cmd_status, "timer and task summary")
        self.register("help", self.cmd_help, "this list")

    def handle(self, line: str) -> Optional[str]:
        parts = line.strip().split()
        if not parts:
            return None
        name, args = parts[0].lower(), parts[1:]
        handler = self._handlers.get(name)
        if handler is None:
            return f"Unknown command: {name}. Use help to list commands."
        try:
            return handler(args)
        except PomodoroError as e:
            logger.warning("%s rejected: %s", name, e)
            return f"Error: {e}"

    def run(self) -> None:
        self.output("pomotrack - type help for commands, quit to exit.")
        while True:
            try:
                line = self.input_fn("> ")
            except (EOFError, KeyboardInterrupt):
                break
            if line.strip().lower() in ("quit", "exit", "q"):
                break
            reply = self.handle(line)
            if reply:
                self.output(reply)

    # ---------- helpers ----------
    def _task_at(self, args: List[str]) -> str:
        if not self._task_ids:
            self._task_ids = [t.id for t in self.app.list_tasks()]
        return self._pick(args, self._task_ids, "Task")

    def _session_at(self, args: List[str]) -> str:
        if not self._session_ids:
            self._session_ids = [s.id for s in self.app.list_history()]
        return self._pick(args, self._session_ids, "Session")

    @staticmethod
    def _pick(args: List[str], ids: List[str], label: str) -> str:
        try:
            n = int(args[0])
        except (IndexError, ValueError):
            raise NotFound(f"{label} number required.")
        if n < 1 or n > len(ids):
            raise NotFound(f"{label} #{n} not found.")
        return ids[n - 1]

    def _on_phase_change(self, snap) -> None:
        if snap.mode == "break":
            self.output("Work period done. Take a break! (start to begin)")
        else:
            self.output("Break over. Back to work! (start to begin)")

    # ---------- commands ----------
    def cmd_add(self, args: List[str]) -> str:
        t = self.app.add_task(" ".join(args))
        self._task_ids = []
        return f"Added: {t.text}"

    def cmd_done(self, args: List[str]) -> str:
        t = self.app.toggle_completed(self._task_at(args))
        return f"{'Completed' if t.completed else 'Reopened'}: {t.text}"

    def cmd_track(self, args: List[str]) -> str:
        t = self.app.toggle_tracking(self._task_at(args))
        if t.completed:
            return f"Cannot track completed task: {t.text}"
        return f"{'Tracking' if t.is_tracking else 'Stopped tracking'}: {t.text}"

    def cmd_rm(self, args: List[str]) -> str:
        task_id = self._task_at(args)
        self.app.remove_task(task_id)
        self._task_ids = []
        return "Task deleted."

    def cmd_tasks(self, args: List[str]) -> str:
        which = args[0].lower() if args else "all"
        try:
            tasks = self.app.list_tasks(which)
        except ValueError as e:
            return f"Error: {e}"
        self._task_ids = [t.id for t in tasks]
        if not tasks:
            return "No tasks."
        return "\n".join(_fmt_task(i, t) for i, t in enumerate(tasks, 1))

    def cmd_start(self, args: List[str]) -> str:
        self.app.start()
        return self.cmd_status([])

    def cmd_pause(self, args: List[str]) -> str:
        self.app.pause()
        return self.cmd_status([])

    def cmd_toggle(self, args: List[str]) -> str:
        self.app.toggle()
        return self.cmd_status([])

    def cmd_reset(self, args: List[str]) -> str:
        self.app.reset()
        return self.cmd_status([])

    def cmd_tick(self, args: List[str]) -> str:
        try:
            n = int(args[0]) if args else 1
        except ValueError:
            return "Error: tick count must be a number."
        for _ in range(max(0, n)):
            self.app.tick()
        return self.cmd_status([])

    def cmd_config(self, args: List[str]) -> str:
        try:
            work, brk = int(args[0]), int(args[1])
        except (IndexError, ValueError):
            return "Usage: config <work minutes> <break minutes>"
        self.app.configure_durations(work, brk)
        return f"Saved: work {work} min, break {brk} min."

    def cmd_history(self, args: List[str]) -> str:
        text = " ".join(args) or None
        records = self.app.list_history(text=text)
        self._session_ids = [s.id for s in records]
        total = self.app.history.count()
        if not records:
            return "No sessions yet." if total == 0 else "No sessions match."
        lines = [f"Showing {len(records)} of {total} sessions"]
        lines += [_fmt_session(i, s) for i, s in enumerate(records, 1)]
        return "\n".join(lines)

    def cmd_history_rm(self, args: List[str]) -> str:
        self.app.remove_history(self._session_at(args))
        self._session_ids = []
        return "Session deleted."

    def cmd_history_clear(self, args: List[str]) -> str:
        n = self.app.clear_history()
        self._session_ids = []
        return f"Cleared {n} sessions."

    def cmd_status(self, args: List[str]) -> str:
        snap = self.app.snapshot()
        label = "Work" if snap.mode == "work" else "Break"
        state = "running" if snap.is_running else "paused"
        lines = [
            f"{label} {format_time(snap.time_left)} ({state}) - sessions: {snap.completed_sessions}"
        ]
        active = self.app.tasks.active_task()
        if active is not None:
            lines.append(f"Tracking: {active.text} ({format_task_time(active.time_spent)})")
        stats = self.app.stats
        lines.append(
            f"Total time: {format_total_time(stats.total_time_spent())} - "
            f"done {stats.completed_count()}/{stats.total_count()}"
        )
        return "\n".join(lines)

    def cmd_help(self, args: List[str]) -> str:
        lines = ["Commands:"]
        for name, text in self._help.items():
            lines.append(f"  {name:<14} {text}")
        lines.append("  quit")
        return "\n".join(lines)
