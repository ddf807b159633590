"""Faulthandler integration and a watchdog for stuck event dispatches."""

from __future__ import annotations

import faulthandler
import logging
import threading
import time
from pathlib import Path
from typing import Optional, TextIO

logger = logging.getLogger(__name__)

_HANG_FILE: Optional[TextIO] = None
_HANG_PATH: Optional[Path] = None
_LOCK = threading.Lock()


def enable_faulthandler(log_path: Path) -> Path:
    """Enable faulthandler next to ``log_path`` and return the hangdump path."""
    hang_path = log_path.parent / "hangdump.log"
    try:
        hang_path.parent.mkdir(parents=True, exist_ok=True)
        handle = open(hang_path, "a", encoding="utf-8")
    except OSError:
        logger.warning("Cannot open hang dump file %s", hang_path)
        return hang_path
    with _LOCK:
        global _HANG_FILE, _HANG_PATH
        _HANG_FILE = handle
        _HANG_PATH = hang_path
    try:
        faulthandler.enable(file=handle, all_threads=True)
    except (OSError, ValueError):
        logger.warning("faulthandler could not be enabled", exc_info=True)
    return hang_path


def _write_header(handle: TextIO, label: str) -> None:
    stamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
    handle.write(f"\n[{stamp}] {label}\n")
    handle.flush()


def dump_threads(label: str) -> None:
    """Write a labelled stack dump of every thread to the hang file."""
    handle = _HANG_FILE
    if not handle:
        return
    try:
        _write_header(handle, label)
        faulthandler.dump_traceback(file=handle, all_threads=True)
        handle.flush()
    except (OSError, ValueError):
        logger.debug("Hang dump failed", exc_info=True)


class DispatchWatchdog:
    """Dumps all threads when a single event dispatch runs too long.

    The event consumer calls :meth:`begin` before and :meth:`end` after each
    dispatch; a background thread polls the time since the last ``begin``.
    """

    def __init__(
        self,
        *,
        threshold_seconds: float = 5.0,
        repeat_seconds: float = 30.0,
        poll_seconds: float = 1.0,
    ) -> None:
        self._threshold_seconds = threshold_seconds
        self._repeat_seconds = repeat_seconds
        self._poll_seconds = poll_seconds
        self._started: Optional[float] = None
        self._label = ""
        self._last_dump = 0.0
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, name="DispatchWatchdog", daemon=True
        )

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()

    def begin(self, label: str) -> None:
        self._label = label
        self._started = time.monotonic()

    def end(self) -> None:
        self._started = None

    def check(self) -> bool:
        """Dump threads if the current dispatch is stalled; True when dumped."""
        started = self._started
        if started is None:
            return False
        now = time.monotonic()
        if now - started <= self._threshold_seconds:
            return False
        if now - self._last_dump <= self._repeat_seconds:
            return False
        self._last_dump = now
        logger.warning("Dispatch of %s stalled for %.1fs", self._label, now - started)
        dump_threads(f"dispatch stalled: {self._label}")
        return True

    def _run(self) -> None:
        while not self._stop_event.is_set():
            self.check()
            self._stop_event.wait(self._poll_seconds)
