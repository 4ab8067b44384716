# pomotrack/config.py

"""Settings loaded from environment variables (+ optional .env).

One frozen Settings object for the whole app, built by load_settings().
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from pomotrack.core.timer_engine import validate_durations

ENV_PREFIX = "POMOTRACK"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True)
class Settings:
    # ---- Timer ----
    work_minutes: int = 25
    break_minutes: int = 5
    record_interrupted: bool = False
    tick_seconds: float = 1.0

    # ---- Logging ----
    log_level: str = "INFO"
    log_dir: Path = Path(".local/pomotrack")


def load_settings(*, dotenv: bool = True) -> Settings:
    """
    Read settings from the environment. Durations are validated with the
    same bounds as a runtime reconfiguration (raises InvalidConfig).
    """
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True), override=False)

    work, brk = validate_durations(
        _env_int(_k("WORK_MINUTES"), 25),
        _env_int(_k("BREAK_MINUTES"), 5),
    )
    tick = _env_float(_k("TICK_SECONDS"), 1.0)
    if tick <= 0:
        tick = 1.0

    return Settings(
        work_minutes=work,
        break_minutes=brk,
        record_interrupted=_env_bool(_k("RECORD_INTERRUPTED"), False),
        tick_seconds=tick,
        log_level=_env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO",
        log_dir=_env_path(_k("LOG_DIR"), Path(".local/pomotrack")),
    )
