# tests/test_support.py

from __future__ import annotations

import logging
import threading
from pathlib import Path

import pytest

from pomotrack.config import load_settings
from pomotrack.core.formatting import format_task_time, format_time, format_total_time
from pomotrack.domain.errors import InvalidConfig
from pomotrack.logging_setup import setup_logging
from pomotrack.services.clock import Ticker


@pytest.mark.parametrize(
    "seconds,expected",
    [(0, "00:00"), (59, "00:59"), (1500, "25:00"), (7261, "121:01"), (-5, "00:00")],
)
def test_format_time(seconds: int, expected: str) -> None:
    assert format_time(seconds) == expected


@pytest.mark.parametrize(
    "seconds,expected",
    [(0, "0s"), (42, "42s"), (125, "2m 5s"), (3723, "1h 2m 3s")],
)
def test_format_task_time(seconds: int, expected: str) -> None:
    assert format_task_time(seconds) == expected


@pytest.mark.parametrize(
    "seconds,expected",
    [(42, "42s"), (125, "2m"), (3723, "1h 2m")],
)
def test_format_total_time(seconds: int, expected: str) -> None:
    assert format_total_time(seconds) == expected


# ---- config ----

def test_settings_defaults(clean_env) -> None:
    s = load_settings(dotenv=False)
    assert (s.work_minutes, s.break_minutes) == (25, 5)
    assert s.record_interrupted is False
    assert s.tick_seconds == 1.0
    assert s.log_level == "INFO"
    assert s.log_dir == Path(".local/pomotrack")


def test_settings_from_env(clean_env, tmp_path: Path) -> None:
    clean_env.setenv("POMOTRACK_WORK_MINUTES", "50")
    clean_env.setenv("POMOTRACK_BREAK_MINUTES", "10")
    clean_env.setenv("POMOTRACK_RECORD_INTERRUPTED", "yes")
    clean_env.setenv("POMOTRACK_LOG_LEVEL", "debug")
    clean_env.setenv("POMOTRACK_LOG_DIR", str(tmp_path))
    clean_env.setenv("POMOTRACK_TICK_SECONDS", "0.5")

    s = load_settings(dotenv=False)
    assert (s.work_minutes, s.break_minutes) == (50, 10)
    assert s.record_interrupted is True
    assert s.log_level == "DEBUG"
    assert s.log_dir == tmp_path
    assert s.tick_seconds == 0.5


def test_settings_malformed_numbers_fall_back(clean_env) -> None:
    clean_env.setenv("POMOTRACK_WORK_MINUTES", "lots")
    clean_env.setenv("POMOTRACK_TICK_SECONDS", "-1")
    s = load_settings(dotenv=False)
    assert s.work_minutes == 25
    assert s.tick_seconds == 1.0


def test_settings_out_of_range_rejected(clean_env) -> None:
    clean_env.setenv("POMOTRACK_BREAK_MINUTES", "45")
    with pytest.raises(InvalidConfig):
        load_settings(dotenv=False)


def test_settings_read_dotenv_file(clean_env, tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("POMOTRACK_WORK_MINUTES=45\n", encoding="utf-8")
    clean_env.chdir(tmp_path)
    s = load_settings()
    assert s.work_minutes == 45


# ---- logging ----

def test_setup_logging_writes_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs")
        logging.getLogger("pomotrack.test").debug("hello file")
        for h in root.handlers:
            h.flush()
        assert log_file == tmp_path / "logs" / "pomotrack.log"
        assert "hello file" in log_file.read_text(encoding="utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved[0]:
            root.addHandler(h)
        root.setLevel(saved[1])
        logging.captureWarnings(False)


# ---- clock ----

def test_ticker_fires_repeatedly_until_stopped() -> None:
    hits = []
    enough = threading.Event()

    def cb() -> None:
        hits.append(1)
        if len(hits) >= 3:
            enough.set()

    ticker = Ticker(cb, interval=0.01)
    ticker.start()
    assert enough.wait(5)
    ticker.stop()
    assert not ticker.is_running
    threading.Event().wait(0.05)
    n = len(hits)
    threading.Event().wait(0.05)
    assert len(hits) == n


def test_ticker_start_twice_arms_one_timer() -> None:
    ticker = Ticker(lambda: None, interval=30)
    ticker.start()
    first = ticker._timer
    ticker.start()
    assert ticker._timer is first
    ticker.stop()
    assert ticker._timer is None


def test_ticker_drops_fire_from_before_restart() -> None:
    hits = []
    ticker = Ticker(lambda: hits.append(1), interval=30)
    ticker.start()
    stale = ticker.generation

    ticker.stop()
    ticker.start()
    armed = ticker._timer
    # the old timer already fired and only now gets to run
    ticker._fire(stale)

    assert hits == []
    assert ticker._timer is armed
    assert ticker.is_running

    ticker._fire(ticker.generation)
    assert hits == [1]
    armed.cancel()
    ticker.stop()


def test_ticker_fire_holds_given_lock() -> None:
    outer = threading.Lock()
    seen = []
    ticker = Ticker(lambda: seen.append(outer.locked()), interval=30, lock=outer)
    ticker.start()
    ticker._fire(ticker.generation)
    ticker.stop()
    assert seen == [True]


def test_ticker_rejects_bad_interval() -> None:
    with pytest.raises(ValueError):
        Ticker(lambda: None, interval=0)
