# tests/test_tasks.py

from __future__ import annotations

import pytest

from pomotrack.app import PomodoroApp
from pomotrack.domain.errors import EmptyInput, NotFound


def _tracking(app: PomodoroApp) -> list[str]:
    return [t.id for t in app.list_tasks() if t.is_tracking]


def test_add_creates_fresh_task(app: PomodoroApp, clock) -> None:
    t = app.add_task("  Write report  ")
    assert t.text == "Write report"
    assert t.completed is False
    assert t.time_spent == 0
    assert t.is_tracking is False
    assert t.created_at == clock.now()
    assert t.completed_at is None


def test_add_preserves_insertion_order(app: PomodoroApp) -> None:
    for text in ("a", "b", "c"):
        app.add_task(text)
    assert [t.text for t in app.list_tasks()] == ["a", "b", "c"]


@pytest.mark.parametrize("text", ["", "   ", "\t\n", None])
def test_add_blank_text_rejected(app: PomodoroApp, text) -> None:
    app.add_task("keep")
    with pytest.raises(EmptyInput):
        app.add_task(text)
    assert len(app.list_tasks()) == 1


def test_tracked_task_accrues_only_while_working(app: PomodoroApp) -> None:
    report = app.add_task("Write report")
    other = app.add_task("Other")
    app.toggle_tracking(report.id)

    app.start()
    for _ in range(10):
        app.tick()

    assert app.tasks.get(report.id).time_spent == 10
    assert app.tasks.get(other.id).time_spent == 0


def test_no_accrual_when_paused_or_untracked(app: PomodoroApp) -> None:
    t = app.add_task("Idle")
    app.toggle_tracking(t.id)
    for _ in range(5):
        app.tick()
    assert app.tasks.get(t.id).time_spent == 0

    app.toggle_tracking(t.id)
    app.start()
    for _ in range(5):
        app.tick()
    assert app.tasks.get(t.id).time_spent == 0


def test_no_accrual_during_break(clock) -> None:
    app = PomodoroApp(work_minutes=1, break_minutes=1, now_provider=clock.now)
    t = app.add_task("Focus")
    app.toggle_tracking(t.id)
    app.start()
    for _ in range(60):
        app.tick()
    assert app.snapshot().mode == "break"
    assert app.tasks.get(t.id).time_spent == 60

    app.start()
    for _ in range(30):
        app.tick()
    assert app.tasks.get(t.id).time_spent == 60
    # tracking survives the break
    assert app.snapshot().active_task_id == t.id


def test_pause_stops_accrual_but_keeps_credit(app: PomodoroApp) -> None:
    t = app.add_task("Focus")
    app.toggle_tracking(t.id)
    app.start()
    for _ in range(7):
        app.tick()
    app.pause()
    app.pause()
    for _ in range(7):
        app.tick()
    assert app.tasks.get(t.id).time_spent == 7

    app.reset()
    assert app.tasks.get(t.id).time_spent == 7


def test_switching_tracked_task(app: PomodoroApp) -> None:
    a = app.add_task("A")
    b = app.add_task("B")
    app.toggle_tracking(a.id)
    app.toggle_tracking(b.id)

    assert app.tasks.get(a.id).is_tracking is False
    assert app.tasks.get(b.id).is_tracking is True
    assert app.snapshot().active_task_id == b.id
    assert _tracking(app) == [b.id]


def test_toggle_tracking_off(app: PomodoroApp) -> None:
    a = app.add_task("A")
    app.toggle_tracking(a.id)
    t = app.toggle_tracking(a.id)
    assert t.is_tracking is False
    assert app.snapshot().active_task_id is None


def test_completing_tracked_task_stops_tracking(app: PomodoroApp, clock) -> None:
    t = app.add_task("Ship it")
    app.toggle_tracking(t.id)
    clock.advance(30)

    done = app.toggle_completed(t.id)

    assert done.completed is True
    assert done.is_tracking is False
    assert done.completed_at == clock.now()
    assert app.snapshot().active_task_id is None
    assert _tracking(app) == []


def test_reopening_clears_completed_at(app: PomodoroApp) -> None:
    t = app.add_task("Ship it")
    app.toggle_completed(t.id)
    again = app.toggle_completed(t.id)
    assert again.completed is False
    assert again.completed_at is None


def test_completed_task_cannot_be_tracked(app: PomodoroApp) -> None:
    t = app.add_task("Old")
    app.toggle_completed(t.id)
    res = app.toggle_tracking(t.id)
    assert res.is_tracking is False
    assert app.snapshot().active_task_id is None

    app.set_active_task(t.id)
    assert app.snapshot().active_task_id is None


def test_completing_other_task_keeps_tracking(app: PomodoroApp) -> None:
    a = app.add_task("A")
    b = app.add_task("B")
    app.toggle_tracking(a.id)
    app.toggle_completed(b.id)
    assert app.snapshot().active_task_id == a.id


def test_remove_tracked_task_clears_tracking(app: PomodoroApp) -> None:
    a = app.add_task("A")
    app.toggle_tracking(a.id)
    app.start()
    app.remove_task(a.id)
    assert app.snapshot().active_task_id is None
    assert app.list_tasks() == []

    # the next tick has nothing to credit
    app.tick()
    assert app.snapshot().time_left == 25 * 60 - 1


@pytest.mark.parametrize("op", ["toggle_completed", "toggle_tracking", "remove_task"])
def test_unknown_id_raises_not_found(app: PomodoroApp, op: str) -> None:
    app.add_task("A")
    before = app.snapshot()
    with pytest.raises(NotFound):
        getattr(app, op)("missing")
    assert app.snapshot() == before


def test_set_active_task_unknown_id(app: PomodoroApp) -> None:
    with pytest.raises(NotFound):
        app.set_active_task("missing")
    app.set_active_task(None)
    assert app.snapshot().active_task_id is None


def test_list_filters(app: PomodoroApp) -> None:
    a = app.add_task("A")
    app.add_task("B")
    app.toggle_completed(a.id)
    assert [t.text for t in app.list_tasks("active")] == ["B"]
    assert [t.text for t in app.list_tasks("completed")] == ["A"]
    assert len(app.list_tasks("all")) == 2
    with pytest.raises(ValueError):
        app.list_tasks("someday")


def test_completing_task_with_time_logs_history(app: PomodoroApp) -> None:
    t = app.add_task("Write report")
    app.toggle_tracking(t.id)
    app.start()
    for _ in range(125):
        app.tick()

    app.toggle_completed(t.id)

    [rec] = app.list_history()
    assert rec.mode == "work"
    assert rec.task_name == "Write report"
    assert rec.duration == 2
    assert rec.time_spent == 125
    assert rec.status == "completed"


def test_completing_task_without_time_logs_nothing(app: PomodoroApp) -> None:
    t = app.add_task("Quick")
    app.toggle_completed(t.id)
    app.toggle_completed(t.id)
    app.toggle_completed(t.id)
    assert app.list_history() == []
