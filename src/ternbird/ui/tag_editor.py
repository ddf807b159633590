"""Form for editing the tags of one or more tracks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from rich.cells import cell_len

from ternbird import events
from ternbird.align import Align
from ternbird.context import AppContext
from ternbird.draw import Canvas
from ternbird.events import Emit
from ternbird.geometry import Region
from ternbird.library import Track
from ternbird.ui.base import Widget

EDITABLE_TAGS = (
    "Title",
    "Artist",
    "AlbumArtist",
    "Album",
    "Date",
    "Track",
    "Genre",
    "Composer",
    "Disc",
)

NONE_LABEL = "<None>"
VARIOUS_LABEL = "<Various>"
SAVE_LABEL = "Save"


@dataclass
class TagValue:
    """A tag shared by all edited tracks; ``various`` when they disagree."""

    value: Optional[str] = None
    various: bool = False

    @classmethod
    def from_tracks(cls, tag: str, tracks: Sequence[Track]) -> TagValue:
        if not tracks:
            return cls()
        first = tracks[0].tag(tag)
        if all(track.tag(tag) == first for track in tracks[1:]):
            return cls(first)
        return cls(various=True)

    def label(self) -> str:
        if self.various:
            return VARIOUS_LABEL
        if self.value is None:
            return NONE_LABEL
        return self.value


class TagEditor(Widget):
    """Rows of tag/value pairs followed by a Save button."""

    def __init__(self, name: str = "TagEditor", *, color: str = "cyan") -> None:
        super().__init__(name)
        self.color = color
        self.tracks: list[Track] = []
        self.tags: list[tuple[str, TagValue]] = []
        self.selection = 0
        self.load(())

    def load(self, tracks: Sequence[Track]) -> None:
        self.tracks = list(tracks)
        self.tags = [
            (tag, TagValue.from_tracks(tag, self.tracks)) for tag in EDITABLE_TAGS
        ]
        self.selection = 0

    @property
    def on_save(self) -> bool:
        return self.selection == len(self.tags)

    def next(self) -> None:
        self.selection = (self.selection + 1) % (len(self.tags) + 1)

    def prev(self) -> None:
        self.selection = (self.selection - 1) % (len(self.tags) + 1)

    def changes(self) -> tuple[tuple[str, Optional[str]], ...]:
        """Tag assignments to write; ``None`` removes a tag, various are kept."""
        return tuple(
            (tag, value.value) for tag, value in self.tags if not value.various
        )

    def select(self, emit: Emit) -> None:
        if self.on_save:
            if not self.tracks:
                emit(events.notify("No tracks to tag"))
                return
            emit(
                events.Confirm(
                    f"Write tags to {len(self.tracks)} file(s)?",
                    on_yes=events.ToTagger(
                        events.WriteTags(tuple(self.tracks), self.changes())
                    ),
                )
            )
            return
        tag, value = self.tags[self.selection]
        default = value.value if value.value is not None and not value.various else ""
        emit(events.ToCommandLine(events.RequestText(tag, default)))

    def set_current(self, text: str) -> None:
        if self.on_save:
            return
        tag, _ = self.tags[self.selection]
        self.tags[self.selection] = (tag, TagValue(text or None))

    def handle_focus(self, ctx: AppContext, event: Any, emit: Emit) -> None:
        if isinstance(event, events.Next):
            self.next()
        elif isinstance(event, events.Prev):
            self.prev()
        elif isinstance(event, events.GoToTop):
            self.selection = 0
        elif isinstance(event, events.GoToBottom):
            self.selection = len(self.tags)
        elif isinstance(event, (events.Select, events.Start)):
            self.select(emit)
        elif isinstance(event, events.ReturnText):
            self.set_current(event.text)
        elif isinstance(event, events.LoadTags):
            self.load(event.tracks)

    def _header(self, width: int) -> str:
        header = ", ".join(track.file for track in self.tracks)
        if cell_len(header) > width and width > 3:
            return Align.LEFT.crop(header, width - 3) + "..."
        return Align.LEFT.fit(header, width)

    def draw(self, canvas: Canvas, region: Region, focused: bool) -> None:
        if region.is_empty:
            return
        canvas.clear(region)
        x, y, w = region.x, region.y, region.w
        bottom = region.y + region.h
        canvas.text(x, y, self._header(w), fg=self.color)
        if y + 1 < bottom:
            canvas.hline(x, y + 1, w, fg=self.color)
        label_width = max(len(tag) for tag, _ in self.tags)
        value_widths = max(cell_len(value.label()) for _, value in self.tags)
        if label_width + 1 + value_widths > w:
            label_width = max(0, (w - 1) // 2)
        row = y + 2
        for index, (tag, value) in enumerate(self.tags):
            if row >= bottom:
                return
            selected = index == self.selection
            canvas.text(x, row, Align.LEFT.fit(tag, label_width) + "│", fg=self.color)
            fg = self.color
            if not selected and value.various:
                fg = "yellow"
            elif not selected and value.value is None:
                fg = "red"
            canvas.text(
                x + label_width + 1,
                row,
                Align.LEFT.fit(value.label(), max(0, w - label_width - 1)),
                fg=fg,
                invert=selected or value.various or value.value is None,
            )
            row += 1
        if row < bottom:
            canvas.hline(x, row, w, fg=self.color)
        if row + 1 < bottom:
            canvas.text(
                x,
                row + 1,
                Align.LEFT.fit(SAVE_LABEL, w),
                fg=self.color,
                invert=self.on_save,
            )
