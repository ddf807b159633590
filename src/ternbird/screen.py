"""Named widget trees switched between by the application."""

from __future__ import annotations

from typing import Any, Optional

from ternbird.context import AppContext
from ternbird.draw import Canvas
from ternbird.events import Emit
from ternbird.geometry import Region
from ternbird.ui.base import Widget
from ternbird.ui.splitter import Splitter


class Screen:
    """A root widget under an immutable name."""

    def __init__(self, name: str, root: Widget) -> None:
        self._name = name
        self.root = root

    @property
    def name(self) -> str:
        return self._name

    def focus_chain(self) -> list[Splitter]:
        """Splitters from the root down to the focused leaf's parent."""
        chain: list[Splitter] = []
        widget: Optional[Widget] = self.root
        while widget is not None and widget.splitter is not None:
            splitter = widget.splitter
            chain.append(splitter)
            widget = splitter.selected()
        return chain

    def focused(self) -> Optional[Widget]:
        """The focused leaf, following each splitter's selection."""
        widget: Optional[Widget] = self.root
        while widget is not None and widget.splitter is not None:
            widget = widget.splitter.selected()
        return widget

    def focus_next(self) -> bool:
        """Advance focus in the deepest splitter that can still move."""
        for splitter in reversed(self.focus_chain()):
            if splitter.focus_next():
                return True
        return False

    def focus_prev(self) -> bool:
        for splitter in reversed(self.focus_chain()):
            if splitter.focus_prev():
                return True
        return False

    def broadcast(self, ctx: AppContext, event: Any, emit: Emit) -> None:
        self.root.handle_broadcast(ctx, event, emit)

    def send_focus(self, ctx: AppContext, event: Any, emit: Emit) -> None:
        self.root.handle_focus(ctx, event, emit)

    def find(self, name: str) -> Optional[Widget]:
        return self.root.find(name)

    def contains(self, name: str) -> bool:
        return self.find(name) is not None

    def draw(self, canvas: Canvas, region: Region) -> None:
        self.root.draw(canvas, region, True)

    def __repr__(self) -> str:
        return f"Screen({self._name!r})"
