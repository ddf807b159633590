"""Textual host for the router: keys in, rasterized frames out."""

from __future__ import annotations

import asyncio
import logging
import queue
from typing import Optional

try:
    from textual import events as textual_events
    from textual.app import App, ComposeResult
    from textual.widget import Widget
    from rich.text import Text
except Exception as exc:  # pragma: no cover - depends on environment
    raise RuntimeError(
        "Textual is required for the TUI. Install the 'textual' dependency."
    ) from exc

from ternbird import events
from ternbird.hangwatch import DispatchWatchdog
from ternbird.router import EventRouter

logger = logging.getLogger(__name__)

PUMP_TIMEOUT = 0.25


def normalize_key(key: str, character: Optional[str], printable: bool) -> str:
    """Printable keys are their character; anything else is ``<name>``."""
    if printable and character and len(character) == 1:
        return character
    return f"<{key}>"


class DrawSurface(Widget):
    """Full-screen widget rendering the router's latest frame."""

    DEFAULT_CSS = """
    DrawSurface {
        width: 1fr;
        height: 1fr;
    }
    """

    def __init__(self, router: EventRouter, *, id: Optional[str] = None) -> None:
        super().__init__(id=id)
        self._router = router

    def render(self) -> Text:
        return self._router.frame().to_text()


class TernbirdApp(App):
    """Forwards keys and resizes to the router and redraws after dispatch."""

    TITLE = "Ternbird"

    def __init__(
        self,
        router: EventRouter,
        *,
        watchdog: Optional[DispatchWatchdog] = None,
    ) -> None:
        super().__init__()
        self.router = router
        self._watchdog = watchdog
        self._surface = DrawSurface(router, id="surface")

    def compose(self) -> ComposeResult:
        yield self._surface

    def on_mount(self) -> None:
        size = self.size
        self.router.emit(events.ToApp(events.Resize(size.width, size.height)))
        if self._watchdog is not None:
            self._watchdog.start()
        self.run_worker(self._pump(), name="EventPump", exclusive=True)
        logger.info("TUI mounted at %sx%s", size.width, size.height)

    def on_shutdown(self) -> None:
        logger.info("TUI shutdown")
        if self._watchdog is not None:
            self._watchdog.stop()

    def on_key(self, event: textual_events.Key) -> None:
        event.stop()
        event.prevent_default()
        key = normalize_key(event.key, event.character, event.is_printable)
        self.router.emit(events.ToCommandLine(events.KeyInput(key)))

    def on_resize(self, event: textual_events.Resize) -> None:
        self.router.emit(
            events.ToApp(events.Resize(event.size.width, event.size.height))
        )

    def _dispatch_batch(self, first: events.Event) -> bool:
        if self._watchdog is not None:
            self._watchdog.begin(type(first).__name__)
        try:
            return self.router.dispatch(first) and self.router.drain()
        finally:
            if self._watchdog is not None:
                self._watchdog.end()

    async def _pump(self) -> None:
        """Wait on the channel off-thread and dispatch on the UI thread."""
        while True:
            try:
                event = await asyncio.to_thread(
                    self.router.queue.get, True, PUMP_TIMEOUT
                )
            except queue.Empty:
                continue
            running = self._dispatch_batch(event)
            self._surface.refresh()
            if not running:
                logger.info("Router stopped, exiting")
                self.exit()
                return


def run_tui(
    router: EventRouter, *, watchdog: Optional[DispatchWatchdog] = None
) -> int:
    """Run the TUI until the router quits and return an exit code."""
    app = TernbirdApp(router, watchdog=watchdog)
    app.run()
    logger.info("TUI exit")
    return 0
