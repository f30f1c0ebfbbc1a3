# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from todo_sync.logging_setup import _ConsoleNoiseFilter, setup_logging


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    quiet = {name: logging.getLogger(name).level for name in ("httpx", "httpcore", "noisy.lib")}
    yield
    for name, lvl in quiet.items():
        logging.getLogger(name).setLevel(lvl)
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter() -> None:
    f = _ConsoleNoiseFilter()
    assert f.filter(_record("todo_sync.tasks.task_store", logging.DEBUG))
    assert not f.filter(_record("httpx", logging.INFO))
    assert f.filter(_record("httpx", logging.ERROR))
    assert not f.filter(_record("py.warnings", logging.WARNING))
    assert not f.filter(_record("asyncio", logging.WARNING))


def test_setup_logging_writes_file(tmp_path: Path, restore_root_logging) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs", console_level=logging.WARNING)

    logging.getLogger("todo_sync.test").debug("hello file")
    for h in logging.getLogger().handlers:
        h.flush()

    assert log_file == tmp_path / "logs" / "todo_sync.log"
    assert "hello file" in log_file.read_text("utf-8")
    assert logging.getLogger("httpx").level == logging.WARNING


def test_setup_logging_quiets_given_loggers(tmp_path: Path, restore_root_logging) -> None:
    setup_logging(log_dir=tmp_path, quiet_loggers=["noisy.lib"])

    logging.getLogger("noisy.lib").info("per-request chatter")
    logging.getLogger("todo_sync.test").info("kept")
    for h in logging.getLogger().handlers:
        h.flush()

    text = (tmp_path / "todo_sync.log").read_text("utf-8")
    assert "kept" in text
    assert "per-request chatter" not in text
