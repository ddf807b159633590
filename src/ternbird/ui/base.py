"""Base widget shared by every drawable component."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterator, Optional

from ternbird.context import AppContext
from ternbird.draw import Canvas
from ternbird.events import Emit
from ternbird.geometry import Region

if TYPE_CHECKING:
    from ternbird.ui.splitter import Splitter


class Widget:
    """A named, drawable node of a screen's widget tree.

    Handlers default to no-ops so a widget only implements what it reacts
    to. ``handle_broadcast`` receives events sent to every widget;
    ``handle_focus`` receives events aimed at the focused leaf or at this
    widget by name.
    """

    def __init__(self, name: str) -> None:
        self.name = name

    @property
    def splitter(self) -> Optional[Splitter]:
        """Splitter capability, ``None`` for leaves."""
        return None

    def draw(self, canvas: Canvas, region: Region, focused: bool) -> None:
        del canvas, region, focused

    def handle_broadcast(self, ctx: AppContext, event: Any, emit: Emit) -> None:
        del ctx, event, emit

    def handle_focus(self, ctx: AppContext, event: Any, emit: Emit) -> None:
        del ctx, event, emit

    def walk(self) -> Iterator[Widget]:
        """Yield this widget and every descendant, depth first."""
        yield self

    def find(self, name: str) -> Optional[Widget]:
        for widget in self.walk():
            if widget.name == name:
                return widget
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"
