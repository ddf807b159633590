"""Logging setup for Ternbird.

Everything goes to a rotating ``app.log`` under the per-user log directory.
The console handler only carries warnings because the terminal belongs to
the UI while it runs.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import os
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"
LOG_FILE = "app.log"
MAX_BYTES = 2_000_000
BACKUP_COUNT = 5
LEVEL_ENV = "TERNBIRD_LOG_LEVEL"


def _default_log_dir() -> Path:
    local_appdata = os.getenv("LOCALAPPDATA")
    if local_appdata:
        return Path(local_appdata) / "Ternbird" / "logs"
    return Path.home() / ".ternbird" / "logs"


def _level_from_env(debug: bool) -> int:
    if debug:
        return logging.DEBUG
    level = logging.getLevelName(os.getenv(LEVEL_ENV, "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def _is_console(handler: logging.Handler) -> bool:
    return isinstance(handler, logging.StreamHandler) and not isinstance(
        handler, logging.FileHandler
    )


def _file_handler(log_path: Path, level: int) -> Optional[logging.Handler]:
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_path, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8"
        )
    except OSError:
        return None
    handler.setLevel(level)
    return handler


def init_logging(app_name: str = "ternbird", *, debug: bool = False) -> Path:
    """Attach the file and console handlers once and return the log path.

    ``debug`` wins over ``TERNBIRD_LOG_LEVEL``. When the log directory is
    not writable only the console handler is installed.
    """
    log_path = _default_log_dir() / LOG_FILE
    level = _level_from_env(debug)
    formatter = logging.Formatter(LOG_FORMAT)
    root = logging.getLogger()
    root.setLevel(level)

    if not any(isinstance(h, RotatingFileHandler) for h in root.handlers):
        file_handler = _file_handler(log_path, level)
        if file_handler is not None:
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
    if not any(_is_console(h) for h in root.handlers):
        console = logging.StreamHandler()
        console.setLevel(max(level, logging.WARNING))
        console.setFormatter(formatter)
        root.addHandler(console)

    logging.getLogger(app_name).info("Logging initialized at %s", log_path)
    return log_path


def set_console_level(level: int) -> None:
    """Adjust console (stderr) handler level."""
    for handler in logging.getLogger().handlers:
        if _is_console(handler):
            handler.setLevel(level)
