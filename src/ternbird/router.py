"""Single consumer of the event channel.

Producers (key input, the MPD listener, loader threads and widgets) push
destination-wrapped events onto one queue. The router drains it, delivers
each event to its destination and owns the screens, the command line and the
shared :class:`AppContext`.
"""

from __future__ import annotations

import logging
import queue
from typing import Any, Callable, Optional, Sequence

from ternbird import events
from ternbird.context import AppContext
from ternbird.draw import Canvas, Frame
from ternbird.events import Event
from ternbird.geometry import Region
from ternbird.layout_config import (
    TAG_EDITOR_SCREEN,
    default_screens,
    tag_editor_screen,
)
from ternbird.screen import Screen
from ternbird.ui.command_line import CommandLine, Mode

logger = logging.getLogger(__name__)

Sender = Callable[[Any], None]


def _drop(kind: str) -> Sender:
    def sender(request: Any) -> None:
        logger.debug("No %s attached, dropping %r", kind, request)

    return sender


class EventRouter:
    """Routes events to screens, widgets, the command line and worker threads."""

    def __init__(
        self,
        *,
        screens: Optional[Sequence[Screen]] = None,
        backend: Optional[Sender] = None,
        tagger: Optional[Sender] = None,
        context: Optional[AppContext] = None,
        command_line: Optional[CommandLine] = None,
        debug: bool = False,
    ) -> None:
        self.queue: queue.Queue[Event] = queue.Queue()
        self.ctx = context or AppContext()
        self.command_line = command_line or CommandLine()
        self.backend = backend or _drop("backend")
        self.tagger = tagger or _drop("tagger")
        self.tag_editor = tag_editor_screen()
        self.screens: list[Screen] = []
        self.active = 0
        self.last_screen: Optional[int] = None
        self.width = 80
        self.height = 24
        self.running = True
        self.debug = debug
        self._replay: dict[type, Any] = {}
        self.set_screens(default_screens() if screens is None else screens)

    def emit(self, event: Event) -> None:
        self.queue.put(event)

    # Screens

    def set_screens(self, screens: Sequence[Screen]) -> None:
        """Replace the user screens; the tag editor screen is always last."""
        kept = [screen for screen in screens if screen.name != TAG_EDITOR_SCREEN]
        self.screens = [*kept, self.tag_editor]
        self.active = 0
        self.last_screen = None

    @property
    def current(self) -> Screen:
        return self.screens[self.active]

    def screen_index(self, target: str) -> Optional[int]:
        for index, screen in enumerate(self.screens):
            if screen.name == target:
                return index
        if target.isdigit():
            index = int(target) - 1
            if 0 <= index < len(self.screens):
                return index
        return None

    def switch_screen(self, target: str) -> bool:
        index = self.screen_index(target)
        if index is None:
            self.notify(f"No screen named '{target}'")
            return False
        if index != self.active:
            self.last_screen = self.active
            self.active = index
        return True

    def back(self) -> None:
        if self.last_screen is None or self.last_screen >= len(self.screens):
            return
        self.active, self.last_screen = self.last_screen, self.active

    # Delivery

    def notify(self, message: str) -> None:
        logger.info("Notify: %s", message)
        self.command_line.echo(message)

    def broadcast(self, event: Any) -> None:
        if isinstance(event, (events.NowPlaying, events.Queue, events.Playlists)):
            self._replay[type(event)] = event
        for screen in self.screens:
            screen.broadcast(self.ctx, event, self.emit)

    def drain(self) -> bool:
        """Dispatch everything currently queued; False once Quit was seen."""
        while True:
            try:
                event = self.queue.get_nowait()
            except queue.Empty:
                return self.running
            if not self.dispatch(event):
                return False

    def dispatch(self, event: Event) -> bool:
        """Deliver one event. Returns False when the application should stop."""
        try:
            self._dispatch(event)
        except Exception as exc:
            logger.exception("Failed to handle %r", event)
            self.notify(f"Error: {exc}")
        return self.running

    def _dispatch(self, event: Event) -> None:
        if self.debug:
            logger.debug("Routing %r", event)
        if isinstance(event, events.ToApp):
            self.handle_app(event.event)
        elif isinstance(event, events.ToScreen):
            if isinstance(event.event, events.FocusNext):
                self.current.focus_next()
            elif isinstance(event.event, events.FocusPrev):
                self.current.focus_prev()
        elif isinstance(event, events.ToAll):
            self.broadcast(event.event)
        elif isinstance(event, events.ToFocus):
            self.current.send_focus(self.ctx, event.event, self.emit)
        elif isinstance(event, events.ToComponent):
            self.send_to_component(event.name, event.event)
        elif isinstance(event, events.ToBackend):
            self.backend(event.command)
        elif isinstance(event, events.ToCommandLine):
            self.command_line.handle(event.event, self.emit)
        elif isinstance(event, events.ToTagger):
            self.tagger(event.request)
        elif isinstance(event, events.BindKey):
            self.command_line.bind(event.keys, event.event)
        elif isinstance(event, events.Confirm):
            self.command_line.confirm(event)
        else:
            logger.warning("Dropping event with unknown destination: %r", event)

    def send_to_component(self, name: str, event: Any) -> None:
        for screen in self.screens:
            widget = screen.find(name)
            if widget is not None:
                widget.handle_focus(self.ctx, event, self.emit)
                return
        logger.warning("No component named %r for %r", name, event)

    def handle_app(self, event: Any) -> None:
        if isinstance(event, events.Quit):
            logger.info("Quit requested")
            self.running = False
        elif isinstance(event, events.Notify):
            self.notify(event.message)
        elif isinstance(event, events.SwitchScreen):
            self.switch_screen(event.target)
        elif isinstance(event, events.Back):
            self.back()
        elif isinstance(event, events.Resize):
            self.width, self.height = max(0, event.width), max(0, event.height)
        elif isinstance(event, events.Database):
            self.ctx.set_library(list(event.tracks))
            logger.info("Library holds %d tracks", len(self.ctx.library))
            self.broadcast(events.LibraryUpdated())
            self.command_line.echo("Updating database...")
        elif isinstance(event, events.ConnectionLost):
            self.ctx.set_library([])
            self._replay.clear()
            self.broadcast(event)
        elif isinstance(event, events.StyleTreeLoaded):
            self.ctx.set_style_tree(event.tree)
            self.broadcast(events.UpdateRootStyleMenu())
        elif isinstance(event, events.OpenTagEditor):
            self.send_to_component(TAG_EDITOR_SCREEN, events.LoadTags(event.tracks))
            self.switch_screen(TAG_EDITOR_SCREEN)
        elif isinstance(event, events.LayoutLoaded):
            self.load_screens(event.screens)
        elif isinstance(event, events.ChangeMode):
            self.change_mode(event.mode)
        else:
            logger.warning("Unhandled app event %r", event)

    def change_mode(self, mode: str) -> None:
        if mode == "command":
            self.command_line.set_mode(Mode.COMMAND)
        elif mode == "search":
            self.command_line.set_mode(Mode.SEARCH)
        else:
            self.notify(f"Unknown mode '{mode}'")

    def load_screens(self, screens: Sequence[Screen]) -> None:
        """Swap in layout screens and bring them up to date."""
        if not screens:
            logger.info("Layout gave no screens, keeping the current ones")
            return
        self.set_screens(screens)
        self.broadcast(events.LibraryUpdated())
        self.broadcast(events.UpdateRootStyleMenu())
        for event in list(self._replay.values()):
            self.broadcast(event)

    # Drawing

    def frame(self, width: Optional[int] = None, height: Optional[int] = None) -> Frame:
        """Draw the active screen above the command line row."""
        width = self.width if width is None else max(0, width)
        height = self.height if height is None else max(0, height)
        canvas = Canvas()
        if height > 1:
            self.current.draw(canvas, Region(0, 0, width, height - 1))
        if height > 0:
            self.command_line.draw(canvas, Region(0, height - 1, width, 1))
        return Frame(width, height, canvas.instructions)

    def run(self, timeout: Optional[float] = None) -> None:
        """Block on the channel until Quit; used without a terminal UI."""
        while self.running:
            try:
                event = self.queue.get(timeout=timeout)
            except queue.Empty:
                continue
            self.dispatch(event)
