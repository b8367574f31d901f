# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

from supatodo.logging_setup import _ConsoleNoiseFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_keeps_own_logs_and_only_third_party_errors() -> None:
    f = _ConsoleNoiseFilter()

    assert f.filter(_record("supatodo.core.todos", logging.DEBUG)) is True
    assert f.filter(_record("httpx", logging.WARNING)) is False
    assert f.filter(_record("postgrest", logging.ERROR)) is True
    assert f.filter(_record("py.warnings", logging.WARNING)) is False


def test_setup_logging_quiets_sdk_loggers_and_creates_log_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    log_file = tmp_path / "nested" / "supatodo.log"
    try:
        setup_logging(log_file=log_file)
        logging.getLogger("supatodo.test").info("hello")

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("supabase").level == logging.WARNING
        assert "hello" in log_file.read_text(encoding="utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
