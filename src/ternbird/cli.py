"""Command-line interface for Ternbird."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
import threading
from types import TracebackType
from typing import Iterable, Optional, Tuple

from ternbird import backend
from ternbird.commands import run_rc_script_async
from ternbird.config import (
    LAYOUT_FILE,
    RC_FILE,
    AppConfig,
    find_default_file,
    load_config,
)
from ternbird.hangwatch import DispatchWatchdog, dump_threads, enable_faulthandler
from ternbird.layout_config import load_layout_async
from ternbird.logging_setup import init_logging, set_console_level
from ternbird.router import EventRouter
from ternbird.styles import load_style_tree_async
from ternbird.tagger import Tagger

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="ternbird", description="Terminal client for the Music Player Daemon"
    )
    parser.add_argument(
        "genres",
        nargs="*",
        help="Tab-indented genre tree file",
    )
    parser.add_argument("--layout", default=None, help="Layout JSON file")
    parser.add_argument("--rc", default=None, help="Command script run at startup")
    parser.add_argument("--host", default=None, help="MPD host")
    parser.add_argument("--port", type=int, default=None, help="MPD port")
    parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Log every routed event",
    )
    return parser


def _install_excepthooks() -> None:
    def excepthook(
        exc_type: type[BaseException],
        exc: BaseException,
        tb: Optional[TracebackType],
    ) -> None:
        logger.exception("Uncaught exception", exc_info=(exc_type, exc, tb))
        dump_threads("uncaught exception")

    sys.excepthook = excepthook

    def thread_hook(args: threading.ExceptHookArgs) -> None:
        exc_value = args.exc_value or RuntimeError("unknown")
        exc_info: Tuple[
            type[BaseException], BaseException, Optional[TracebackType]
        ] = (
            args.exc_type,
            exc_value,
            args.exc_traceback,
        )
        thread_name = args.thread.name if args.thread else "thread"
        logger.exception("Thread exception in %s", thread_name, exc_info=exc_info)

    threading.excepthook = thread_hook


def _optional_path(raw: Optional[str]) -> Optional[Path]:
    return Path(raw).expanduser() if raw else None


def resolve_config(args: argparse.Namespace, base: AppConfig) -> AppConfig:
    """Apply command-line overrides, then fill file paths from defaults."""
    config = base.with_overrides(
        mpd_host=args.host,
        mpd_port=args.port,
        layout_path=args.layout,
        rc_path=args.rc,
        genres_path=args.genres[0] if args.genres else None,
        debug=args.debug,
    )
    if config.layout_path is None:
        found = find_default_file(LAYOUT_FILE, ".ternbird_layout.json")
        config = config.with_overrides(layout_path=str(found) if found else None)
    if config.rc_path is None:
        found = find_default_file(RC_FILE, ".ternbirdrc")
        config = config.with_overrides(rc_path=str(found) if found else None)
    return config


def start_services(router: EventRouter, config: AppConfig) -> None:
    """Attach the MPD and tagger workers and kick off the one-shot loaders."""
    sender = backend.MpdSender(config.mpd_host, config.mpd_port, router.emit)
    listener = backend.MpdListener(config.mpd_host, config.mpd_port, router.emit)
    tagger = Tagger(router.emit, config.music_dir)
    router.backend = sender.send
    router.tagger = tagger.send
    sender.start()
    listener.start()
    tagger.start()
    load_layout_async(_optional_path(config.layout_path), router.emit)
    load_style_tree_async(_optional_path(config.genres_path), router.emit)
    run_rc_script_async(_optional_path(config.rc_path), router.emit)


def _run_tui(router: EventRouter) -> int:
    try:
        from ternbird.ui.terminal import run_tui
    except RuntimeError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return run_tui(router, watchdog=DispatchWatchdog())


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if len(args.genres) != 1:
        parser.print_usage()
        return 0

    config = resolve_config(args, load_config())
    log_path = init_logging(debug=config.debug)
    enable_faulthandler(log_path)
    _install_excepthooks()
    logger.info("App start host=%s port=%s", config.mpd_host, config.mpd_port)

    try:
        backend.ensure_available()
    except RuntimeError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    router = EventRouter(debug=config.debug)
    start_services(router, config)
    set_console_level(logging.WARNING)
    exit_code = _run_tui(router)
    logger.info("App exit code=%s", exit_code)
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
