"""Single-line now-playing displays and filler widgets."""

from __future__ import annotations

from typing import Any

from ternbird import events
from ternbird.align import Align
from ternbird.context import AppContext
from ternbird.draw import RESET, Canvas
from ternbird.events import Emit
from ternbird.geometry import Region
from ternbird.library import Track
from ternbird.ui.base import Widget

UNAVAILABLE = "<Unavailable>"
EMPTY = "<Empty>"


class TextDisplay(Widget):
    """Shows one line of text derived from the playing track."""

    def __init__(
        self, name: str, *, color: str = RESET, alignment: Align = Align.LEFT
    ) -> None:
        super().__init__(name)
        self.color = color
        self.alignment = alignment
        self.contents = UNAVAILABLE

    def describe(self, track: Track) -> str:
        raise NotImplementedError

    def handle_broadcast(self, ctx: AppContext, event: Any, emit: Emit) -> None:
        if isinstance(event, events.NowPlaying):
            if event.track is None:
                self.contents = UNAVAILABLE
            else:
                self.contents = self.describe(event.track)
        elif isinstance(event, events.ConnectionLost):
            self.contents = UNAVAILABLE

    def draw(self, canvas: Canvas, region: Region, focused: bool) -> None:
        canvas.text(
            region.x,
            region.y,
            self.alignment.fit(self.contents, region.w),
            fg=self.color,
        )


class TitleDisplay(TextDisplay):
    def __init__(self, name: str = "TitleDisplay", **kwargs: Any) -> None:
        super().__init__(name, **kwargs)

    def describe(self, track: Track) -> str:
        return track.tag("Title") or EMPTY


class TagDisplay(TextDisplay):
    def __init__(
        self, name: str = "TagDisplay", *, tag: str = "Artist", **kwargs: Any
    ) -> None:
        super().__init__(name, **kwargs)
        self.tag = tag

    def describe(self, track: Track) -> str:
        return track.tag(self.tag) or EMPTY


class EmptySpace(Widget):
    """Blank filler."""

    def __init__(self, name: str = "EmptySpace") -> None:
        super().__init__(name)

    def draw(self, canvas: Canvas, region: Region, focused: bool) -> None:
        canvas.clear(region)


class PlaceHolder(Widget):
    """Bordered box labelled with its name, handy while designing layouts."""

    def __init__(self, name: str = "PlaceHolder", *, color: str = RESET) -> None:
        super().__init__(name)
        self.color = color

    def draw(self, canvas: Canvas, region: Region, focused: bool) -> None:
        canvas.clear(region)
        canvas.box(region, fg=self.color)
        inner = region.inset()
        if not inner.is_empty:
            canvas.text(
                inner.x,
                inner.y + inner.h // 2,
                Align.CENTER.fit(self.name, inner.w),
                fg=self.color,
                invert=focused,
            )


class ErrorBox(PlaceHolder):
    """Stand-in for a component the layout file could not build."""

    def __init__(self, name: str = "Error") -> None:
        super().__init__(name, color="red")
