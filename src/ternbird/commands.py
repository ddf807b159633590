"""Command grammar shared by the command line, key bindings and the rc file."""

from __future__ import annotations

import logging
from pathlib import Path
import threading
from typing import Callable, Optional

from ternbird import events
from ternbird.events import Emit, Event

logger = logging.getLogger(__name__)

MACROS = {"<space>": " "}

RC_NOT_FOUND = "rc file not found. :q to quit."


def _simple(event: Event) -> Callable[[list[str]], Optional[Event]]:
    return lambda _args: event


def _rest(
    build: Callable[[str], Event],
) -> Callable[[list[str]], Optional[Event]]:
    def handler(args: list[str]) -> Optional[Event]:
        if not args:
            return None
        return build(" ".join(args))

    return handler


def _goto(args: list[str]) -> Optional[Event]:
    if len(args) != 1 or not args[0].isdigit():
        return None
    return events.ToFocus(events.GoTo(int(args[0])))


def _volume(args: list[str]) -> Optional[Event]:
    if len(args) != 1:
        return None
    raw = args[0]
    sign = raw[:1]
    digits = raw[1:] if sign in {"+", "-"} else raw
    if not digits.isdigit():
        return None
    amount = int(digits)
    if sign == "+":
        return events.ToCommandLine(events.VolumeMove(amount))
    if sign == "-":
        return events.ToCommandLine(events.VolumeMove(-amount))
    return events.ToBackend(events.SetVolume(min(100, amount)))


def _bind(args: list[str]) -> Optional[Event]:
    if len(args) < 2:
        return None
    keys = args[0]
    bound = parse_tokens(args[1:])
    if bound is None or isinstance(bound, events.BindKey):
        return None
    return events.BindKey(keys, bound)


_COMMANDS: dict[str, Callable[[list[str]], Optional[Event]]] = {}


def _register(names: str, handler: Callable[[list[str]], Optional[Event]]) -> None:
    for name in names.split():
        _COMMANDS[name] = handler


_register("echo", _rest(lambda text: events.ToCommandLine(events.Echo(text))))
_register("quit q exit", _simple(events.ToApp(events.Quit())))
_register(
    "switchscreen screen",
    _rest(lambda target: events.ToApp(events.SwitchScreen(target))),
)
_register("focusnext", _simple(events.ToScreen(events.FocusNext())))
_register("focusprev", _simple(events.ToScreen(events.FocusPrev())))
_register("next", _simple(events.ToFocus(events.Next())))
_register("prev", _simple(events.ToFocus(events.Prev())))
_register("select", _simple(events.ToFocus(events.Select())))
_register("start", _simple(events.ToFocus(events.Start())))
_register("tags", _simple(events.ToFocus(events.OpenTags())))
_register("delete", _simple(events.ToFocus(events.Delete())))
_register("top gotop gototop totop", _simple(events.ToFocus(events.GoToTop())))
_register(
    "bottom gobottom gotobottom tobottom bot gobot gotobot tobot",
    _simple(events.ToFocus(events.GoToBottom())),
)
_register("search s", _rest(lambda text: events.ToFocus(events.Search(text))))
_register("searchnext", _simple(events.ToCommandLine(events.NextSearch())))
_register("searchprev", _simple(events.ToCommandLine(events.PrevSearch())))
_register("goto go g to", _goto)
_register("togglepause pause toggle", _simple(events.ToBackend(events.TogglePause())))
_register("clear clearqueue", _simple(events.ToBackend(events.ClearQueue())))
_register("random", _simple(events.ToBackend(events.Random())))
_register("repeat", _simple(events.ToBackend(events.Repeat())))
_register("single", _simple(events.ToBackend(events.Single())))
_register("consume", _simple(events.ToBackend(events.Consume())))
_register("nexttrack", _simple(events.ToBackend(events.NextTrack())))
_register("prevtrack", _simple(events.ToBackend(events.PrevTrack())))
_register("update", _simple(events.ToBackend(events.Update())))
_register("volume vol", _volume)
_register("back", _simple(events.ToApp(events.Back())))
_register("command", _simple(events.ToApp(events.ChangeMode("command"))))
_register("searchmode", _simple(events.ToApp(events.ChangeMode("search"))))
_register(
    "musicdir", _rest(lambda path: events.ToTagger(events.SetMusicDir(path)))
)
_register("bind bindkey", _bind)


def tokenize(text: str) -> list[str]:
    """Split on spaces and expand macros such as ``<space>``."""
    return [MACROS.get(token, token) for token in text.split()]


def parse_tokens(tokens: list[str]) -> Optional[Event]:
    if not tokens:
        return None
    handler = _COMMANDS.get(tokens[0].lower())
    if handler is None:
        return None
    return handler(tokens[1:])


def parse(text: str) -> Optional[Event]:
    """Return the event a command line stands for, or ``None`` if invalid."""
    return parse_tokens(tokenize(text))


def run_script(lines: list[str], emit: Emit) -> int:
    """Run each non-blank line as a command and return the error count."""
    errors = 0
    for number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        event = parse(line)
        if event is None:
            errors += 1
            logger.warning("rc line %d is not a valid command: %s", number, line)
            emit(
                events.ToCommandLine(
                    events.Echo(f"rc: invalid command at line {number} '{line}'")
                )
            )
            continue
        emit(event)
    return errors


def run_rc_script_async(path: Optional[Path], emit: Emit) -> threading.Thread:
    """Load and run the rc file on a worker thread."""

    def worker() -> None:
        if path is None or not path.is_file():
            logger.info("No rc file at %s", path)
            emit(events.ToCommandLine(events.Echo(RC_NOT_FOUND)))
            return
        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError):
            logger.exception("Failed to read rc file %s", path)
            emit(events.notify(f"Could not read rc file {path}"))
            return
        run_script(lines, emit)

    thread = threading.Thread(target=worker, name="RcLoader", daemon=True)
    thread.start()
    return thread
