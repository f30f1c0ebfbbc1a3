# src/todo_sync/logging_setup.py

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from pathlib import Path

APP_LOGGER = "todo_sync"

# Loggers that chat at INFO on every request.
HTTP_LOGGERS: tuple[str, ...] = ("httpx", "httpcore")

LOG_FILE_NAME = "todo_sync.log"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable while the REPL is waiting for input:
    app records pass at the handler's level, everything else only at ERROR+.
    """

    def __init__(self, app_logger: str = APP_LOGGER) -> None:
        super().__init__()
        self._app = app_logger

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == self._app or name.startswith(self._app + "."):
            return True
        # Third party, HTTP transport and captured py.warnings alike.
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/todo_sync",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    quiet_loggers: Iterable[str] = HTTP_LOGGERS,
) -> Path:
    """
    Route all logging to stderr (filtered) and to <log_dir>/todo_sync.log (full).

    quiet_loggers are capped at WARNING everywhere, so one request is not one
    INFO line in the file. Call once, before the first log record.
    Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Re-running setup must not duplicate output.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    for name in quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.captureWarnings(True)
    return log_file
