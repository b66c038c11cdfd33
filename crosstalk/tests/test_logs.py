########## Run Log Tests ##########
# Text log trimming and the verbose in-memory buffer.

from __future__ import annotations

import asyncio

from crosstalk.core import config, logs


def test_run_log_is_trimmed_to_max_lines(monkeypatch) -> None:
    """Only the newest lines survive once the file passes its budget."""

    monkeypatch.setattr(config, "LOG_TEXT_MAX_LINES", 3)
    for number in range(5):
        logs.log_run_event(f"event {number}")
    lines = logs.run_log_path().read_text(encoding="utf-8").splitlines()
    assert len(lines) == 3
    assert lines[-1].endswith("event 4")
    assert lines[0].endswith("event 2")


def test_disabled_text_log_writes_nothing(monkeypatch) -> None:
    monkeypatch.setattr(config, "LOG_TEXT_ENABLED", False)
    logs.log_run_event("quiet")
    assert not logs.run_log_path().exists()


def test_debug_buffer_only_fills_when_verbose(monkeypatch) -> None:
    monkeypatch.setattr(logs, "DEBUG_LOG", [])
    logs.log_run_event("not kept")
    assert logs.DEBUG_LOG == []
    monkeypatch.setattr(config, "DEBUG_VERBOSE", True)
    logs.log_run_event("kept")
    assert logs.DEBUG_LOG == ["kept"]


def test_debug_buffer_keeps_only_the_newest_lines(monkeypatch) -> None:
    """The verbose buffer is bounded so a long-running server stays small."""

    monkeypatch.setattr(logs, "DEBUG_LOG", [])
    monkeypatch.setattr(config, "DEBUG_VERBOSE", True)
    monkeypatch.setattr(config, "DEBUG_LOG_MAX_LINES", 4)
    for number in range(10):
        logs.log_run_event(f"line {number}")
    assert logs.DEBUG_LOG == ["line 6", "line 7", "line 8", "line 9"]


def test_engine_events_reach_the_debug_buffer(make_engine, monkeypatch) -> None:
    """A UI reading the buffer sees the show's start line."""

    monkeypatch.setattr(logs, "DEBUG_LOG", [])
    monkeypatch.setattr(config, "DEBUG_VERBOSE", True)
    asyncio.run(make_engine().start_session(0))
    assert any("start" in line and "报菜名" in line for line in logs.DEBUG_LOG)
