"""Modal command line drawn on the bottom terminal row."""

from __future__ import annotations

from enum import Enum
import logging
from typing import Any, Optional

from rich.cells import cell_len

from ternbird import commands, events
from ternbird.align import Align
from ternbird.draw import RESET, Canvas
from ternbird.events import Emit, Event
from ternbird.geometry import Region

logger = logging.getLogger(__name__)

ENTER = "<enter>"
ESCAPE = "<escape>"
BACKSPACE = "<backspace>"
CURSOR = "█"


class Mode(Enum):
    NORMAL = "normal"
    COMMAND = "command"
    SEARCH = "search"
    PROMPT = "prompt"
    CONFIRM = "confirm"


class CommandLine:
    """Key-binding dispatcher and text entry for commands, searches and prompts.

    In normal mode keys accumulate until they match a binding exactly, stop
    being a prefix of any binding, or Escape is pressed. Every mode change
    clears the buffer.
    """

    def __init__(self, *, color: str = RESET) -> None:
        self.mode = Mode.NORMAL
        self.buffer = ""
        self.binds: dict[str, Event] = {}
        self.message = ""
        self.prompt = ""
        self.color = color
        self.last_search: Optional[str] = None
        self.volume: Optional[int] = None
        self.statusline = "[----] Vol: %"
        self._confirm: Optional[events.Confirm] = None

    def set_mode(self, mode: Mode) -> None:
        self.mode = mode
        self.buffer = ""
        if mode is not Mode.CONFIRM:
            self._confirm = None

    def bind(self, keys: str, event: Event) -> None:
        self.binds[keys] = event
        logger.debug("Bound %r to %r", keys, event)

    def echo(self, text: str) -> None:
        self.message = text

    def confirm(self, request: events.Confirm) -> None:
        self.set_mode(Mode.CONFIRM)
        self._confirm = request

    def request_text(self, prompt: str, default: str = "") -> None:
        self.set_mode(Mode.PROMPT)
        self.prompt = prompt
        self.buffer = default

    def handle(self, event: Any, emit: Emit) -> None:
        if isinstance(event, events.KeyInput):
            self.input(event.key, emit)
        elif isinstance(event, events.Echo):
            self.echo(event.text)
        elif isinstance(event, events.BackendStatus):
            self.set_status(event)
        elif isinstance(event, events.RequestText):
            self.request_text(event.prompt, event.default)
        elif isinstance(event, events.NextSearch):
            if self.last_search:
                emit(events.ToFocus(events.Search(self.last_search)))
        elif isinstance(event, events.PrevSearch):
            if self.last_search:
                emit(events.ToFocus(events.SearchPrev(self.last_search)))
        elif isinstance(event, events.VolumeMove):
            self.move_volume(event.delta, emit)
        elif isinstance(event, events.SetColor):
            self.color = event.color

    def set_status(self, status: events.BackendStatus) -> None:
        flags = "".join(
            flag if enabled else "-"
            for flag, enabled in (
                ("r", status.repeat),
                ("z", status.random),
                ("s", status.single),
                ("c", status.consume),
            )
        )
        self.volume = status.volume
        self.statusline = f"[{flags}] Vol: {status.volume}%"

    def move_volume(self, delta: int, emit: Emit) -> None:
        if self.volume is None or self.volume < 0:
            emit(events.notify("Volume is not available"))
            return
        volume = max(0, min(100, self.volume + delta))
        emit(events.ToBackend(events.SetVolume(volume)))

    def input(self, key: str, emit: Emit) -> None:
        if self.mode is Mode.NORMAL:
            self._normal_input(key, emit)
        elif self.mode is Mode.CONFIRM:
            self._confirm_input(key, emit)
        else:
            self._text_input(key, emit)

    def _normal_input(self, key: str, emit: Emit) -> None:
        if key == ":":
            self.set_mode(Mode.COMMAND)
            return
        if key == "/":
            self.set_mode(Mode.SEARCH)
            return
        if key == ESCAPE:
            self.buffer = ""
            self.message = ""
            return
        self.message = ""
        self.buffer += key
        bound = self.binds.get(self.buffer)
        if bound is not None:
            self.buffer = ""
            emit(bound)
            return
        if any(keys.startswith(self.buffer) for keys in self.binds):
            return
        pending = self.buffer
        self.buffer = ""
        emit(events.notify(f"Invalid command '{pending}'"))

    def _text_input(self, key: str, emit: Emit) -> None:
        if key == ESCAPE:
            self.set_mode(Mode.NORMAL)
        elif key == ENTER:
            self.submit(emit)
        elif key == BACKSPACE:
            if self.buffer:
                self.buffer = self.buffer[:-1]
            else:
                self.set_mode(Mode.NORMAL)
        elif len(key) == 1:
            self.buffer += key

    def _confirm_input(self, key: str, emit: Emit) -> None:
        request = self._confirm
        if request is None:
            self.set_mode(Mode.NORMAL)
            return
        if key in {"y", "Y"}:
            chosen: Optional[Event] = request.on_yes
        elif key in {"n", "N"}:
            chosen = request.on_no
        elif key == ENTER:
            chosen = request.on_yes if request.default_yes else request.on_no
        elif key == ESCAPE:
            chosen = None
        else:
            return
        self.set_mode(Mode.NORMAL)
        if chosen is not None:
            emit(chosen)

    def submit(self, emit: Emit) -> None:
        """Act on the buffer of a text mode and return to normal mode."""
        mode, text = self.mode, self.buffer
        self.set_mode(Mode.NORMAL)
        if mode is Mode.COMMAND:
            event = commands.parse(text)
            if event is None:
                emit(events.notify(f"Invalid command '{text}'"))
            elif isinstance(event, events.ToCommandLine) and isinstance(
                event.event, events.Echo
            ):
                self.echo(event.event.text)
            else:
                emit(event)
                self.echo(f"Ran: {text}")
        elif mode is Mode.SEARCH:
            if text:
                self.last_search = text
                emit(events.ToFocus(events.Search(text)))
        elif mode is Mode.PROMPT:
            emit(events.ToFocus(events.ReturnText(text)))

    def left_text(self) -> str:
        if self.mode is Mode.COMMAND:
            return f":{self.buffer}{CURSOR}"
        if self.mode is Mode.SEARCH:
            return f"/{self.buffer}{CURSOR}"
        if self.mode is Mode.PROMPT:
            return f"{self.prompt}: {self.buffer}{CURSOR}"
        if self.mode is Mode.CONFIRM and self._confirm is not None:
            choice = "Y/n" if self._confirm.default_yes else "y/N"
            return f"{self._confirm.prompt} ({choice})"
        return self.buffer or self.message

    def draw(self, canvas: Canvas, region: Region) -> None:
        if region.is_empty:
            return
        status = self.statusline
        status_width = cell_len(status)
        if status_width >= region.w:
            canvas.text(region.x, region.y, Align.RIGHT.fit(status, region.w))
            return
        left_width = region.w - status_width - 1
        canvas.text(
            region.x,
            region.y,
            Align.LEFT.fit(self.left_text(), left_width) + " " + status,
            fg=self.color,
        )
