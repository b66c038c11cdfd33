########## Text Logging ##########
# Lightweight, human-readable log lines for shows and API runs.

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List

from . import config

DEBUG_LOG: List[str] = []  # recent verbose lines for a UI debug panel


def log_run_event(message: str) -> None:
    """Record one show event in the run log (and the debug buffer when verbose)."""

    # 1 Mirror into the bounded in-memory buffer when verbose.                 # steps
    # 2 Append a timestamped line to the text log and keep it short.           # steps
    if config.DEBUG_VERBOSE:
        _remember(message)
    if not config.LOG_TEXT_ENABLED:
        return
    log_path = run_log_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    with log_path.open("a", encoding="utf-8") as handle:
        handle.write(f"[{stamp}] {message}\n")
    _trim_log_file(log_path, config.LOG_TEXT_MAX_LINES)


def run_log_path() -> Path:
    """Where the run log lives; relative dirs hang off the project root."""

    log_dir = Path(config.LOG_TEXT_DIR)
    if not log_dir.is_absolute():
        log_dir = Path(__file__).resolve().parents[2] / log_dir
    return log_dir / config.LOG_TEXT_FILENAME


def _remember(message: str) -> None:
    DEBUG_LOG.append(message)
    overflow = len(DEBUG_LOG) - config.DEBUG_LOG_MAX_LINES
    if overflow > 0:
        del DEBUG_LOG[:overflow]


def _trim_log_file(log_path: Path, max_lines: int) -> None:
    """Drop the oldest lines once the file grows past max_lines."""

    if max_lines <= 0:
        return
    lines = log_path.read_text(encoding="utf-8").splitlines()
    if len(lines) > max_lines:
        log_path.write_text("\n".join(lines[-max_lines:]) + "\n", encoding="utf-8")
