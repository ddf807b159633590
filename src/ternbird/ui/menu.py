"""Scrollable selection list shared by every menu widget."""

from __future__ import annotations

from typing import Any, Container, Iterable, Optional

from ternbird import events
from ternbird.align import Align
from ternbird.context import AppContext
from ternbird.draw import RESET, Canvas
from ternbird.events import Emit
from ternbird.geometry import Region
from ternbird.ui.base import Widget


class Menu:
    """Ordered items with a clamped selection and a centring viewport."""

    def __init__(
        self,
        items: Iterable[str] = (),
        *,
        title: Optional[str] = None,
        title_alignment: Align = Align.LEFT,
        menu_alignment: Align = Align.LEFT,
        color: str = RESET,
        focus_color: str = RESET,
    ) -> None:
        self.items: list[str] = list(items)
        self.selection = 0
        self.title = title
        self.title_alignment = title_alignment
        self.menu_alignment = menu_alignment
        self.color = color
        self.focus_color = focus_color

    def set_items(self, items: Iterable[str], *, reset: bool = False) -> None:
        self.items = list(items)
        if reset:
            self.selection = 0
        self.clamp()

    def clamp(self) -> None:
        if not self.items:
            self.selection = 0
        else:
            self.selection = max(0, min(self.selection, len(self.items) - 1))

    def selected_item(self) -> Optional[str]:
        if 0 <= self.selection < len(self.items):
            return self.items[self.selection]
        return None

    def next(self) -> None:
        if self.selection + 1 >= len(self.items):
            self.selection = 0
        else:
            self.selection += 1

    def prev(self) -> None:
        if not self.items:
            self.selection = 0
        elif self.selection <= 0:
            self.selection = len(self.items) - 1
        else:
            self.selection -= 1

    def go_to(self, index: int) -> None:
        if 0 <= index < len(self.items):
            self.selection = index

    def go_to_top(self) -> None:
        self.selection = 0

    def go_to_bottom(self) -> None:
        self.selection = max(0, len(self.items) - 1)

    def search(self, text: str) -> None:
        """Select the next item containing ``text``, scanning forward only."""
        needle = text.lower()
        for index in range(self.selection + 1, len(self.items)):
            if needle in self.items[index].lower():
                self.selection = index
                return

    def search_prev(self, text: str) -> None:
        """Select the previous item containing ``text``, scanning backward only."""
        needle = text.lower()
        for index in range(min(self.selection, len(self.items)) - 1, -1, -1):
            if needle in self.items[index].lower():
                self.selection = index
                return

    def first_visible(self, height: int) -> int:
        """Index of the first row shown in a viewport of ``height`` rows.

        The selection is kept centred, pinning the viewport to the top or
        bottom of the list near its ends.
        """
        center = height // 2
        if height % 2 == 0:
            center -= 1
        if self.selection <= center:
            return 0
        bottom = max(0, len(self.items) - height)
        return min(self.selection - center, bottom)

    def style_color(self, focused: bool) -> str:
        return self.focus_color if focused else self.color

    def draw(
        self,
        canvas: Canvas,
        region: Region,
        focused: bool,
        *,
        bold_rows: Container[int] = (),
    ) -> None:
        if region.is_empty:
            return
        color = self.style_color(focused)
        y = region.y
        rows = region.h
        if self.title is not None:
            canvas.text(
                region.x, y, self.title_alignment.fit(self.title, region.w), fg=color
            )
            if rows > 1:
                canvas.hline(region.x, y + 1, region.w, fg=color)
            y += 2
            rows -= 2
        if rows <= 0:
            return
        first = self.first_visible(rows)
        for offset in range(rows):
            index = first + offset
            if index < len(self.items):
                canvas.text(
                    region.x,
                    y + offset,
                    self.menu_alignment.fit(self.items[index], region.w),
                    fg=color,
                    invert=index == self.selection,
                    bold=index in bold_rows,
                )
            else:
                canvas.text(region.x, y + offset, " " * region.w, fg=color)


class MenuWidget(Widget):
    """Widget wrapper routing navigation events into a :class:`Menu`.

    Subclasses react to selection changes through :meth:`selection_changed`
    and to activation through :meth:`select` and :meth:`start`.
    """

    def __init__(
        self,
        name: str,
        *,
        title: Optional[str] = None,
        title_alignment: Align = Align.LEFT,
        menu_alignment: Align = Align.LEFT,
        color: str = RESET,
        focus_color: str = RESET,
        parent: Optional[str] = None,
    ) -> None:
        super().__init__(name)
        self.parent = parent
        self.menu = Menu(
            title=title,
            title_alignment=title_alignment,
            menu_alignment=menu_alignment,
            color=color,
            focus_color=focus_color,
        )

    def is_child_of(self, name: str) -> bool:
        return self.parent is not None and self.parent == name

    def draw(self, canvas: Canvas, region: Region, focused: bool) -> None:
        self.menu.draw(canvas, region, focused)

    def handle_focus(self, ctx: AppContext, event: Any, emit: Emit) -> None:
        menu = self.menu
        if isinstance(event, events.Next):
            menu.next()
        elif isinstance(event, events.Prev):
            menu.prev()
        elif isinstance(event, events.GoTo):
            menu.go_to(event.index)
        elif isinstance(event, events.GoToTop):
            menu.go_to_top()
        elif isinstance(event, events.GoToBottom):
            menu.go_to_bottom()
        elif isinstance(event, events.Search):
            menu.search(event.text)
        elif isinstance(event, events.SearchPrev):
            menu.search_prev(event.text)
        elif isinstance(event, events.Select):
            self.select(ctx, emit)
            return
        elif isinstance(event, events.Start):
            self.start(ctx, emit)
            return
        elif isinstance(event, events.OpenTags):
            self.open_tags(ctx, emit)
            return
        elif isinstance(event, events.Delete):
            self.delete(ctx, emit)
            return
        else:
            return
        self.selection_changed(ctx, emit)

    def selection_changed(self, ctx: AppContext, emit: Emit) -> None:
        del ctx, emit

    def select(self, ctx: AppContext, emit: Emit) -> None:
        del ctx, emit

    def start(self, ctx: AppContext, emit: Emit) -> None:
        del ctx, emit

    def open_tags(self, ctx: AppContext, emit: Emit) -> None:
        del ctx, emit

    def delete(self, ctx: AppContext, emit: Emit) -> None:
        del ctx, emit
