"""Horizontal and vertical splitters dividing a region among panels."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional

from ternbird.context import AppContext
from ternbird.draw import RESET, Canvas
from ternbird.events import Emit
from ternbird.geometry import Region, Size, layout_offsets, resolve_sizes
from ternbird.ui.base import Widget


@dataclass
class Panel:
    size: Size
    widget: Widget


class Splitter(Widget):
    """Owns an ordered list of panels and a single focus index."""

    horizontal = True

    def __init__(
        self,
        name: str,
        panels: Iterable[Panel] = (),
        *,
        borders: bool = True,
        color: str = RESET,
    ) -> None:
        super().__init__(name)
        self.panels = list(panels)
        self.borders = borders
        self.color = color
        self.selection = 0

    @property
    def splitter(self) -> Splitter:
        return self

    def selected(self) -> Optional[Widget]:
        if 0 <= self.selection < len(self.panels):
            return self.panels[self.selection].widget
        return None

    def focus_next(self) -> bool:
        """Move focus to the next panel; ``False`` at the last one."""
        if self.selection + 1 < len(self.panels):
            self.selection += 1
            return True
        return False

    def focus_prev(self) -> bool:
        """Move focus to the previous panel; ``False`` at the first one."""
        if self.selection > 0:
            self.selection -= 1
            return True
        return False

    def extents(self, region: Region) -> list[int]:
        extent = region.w if self.horizontal else region.h
        return resolve_sizes(
            [panel.size for panel in self.panels], extent, borders=self.borders
        )

    def regions(self, region: Region) -> list[Region]:
        """Concrete region of every panel, clipped to the parent edge."""
        extents = self.extents(region)
        offsets = layout_offsets(extents, borders=self.borders)
        limit = region.w if self.horizontal else region.h
        regions: list[Region] = []
        for offset, extent in zip(offsets, extents):
            extent = max(0, min(extent, limit - offset))
            if self.horizontal:
                regions.append(Region(region.x + offset, region.y, extent, region.h))
            else:
                regions.append(Region(region.x, region.y + offset, region.w, extent))
        return regions

    def draw(self, canvas: Canvas, region: Region, focused: bool) -> None:
        if not self.panels or region.is_empty:
            return
        regions = self.regions(region)
        for index, (panel, child_region) in enumerate(zip(self.panels, regions)):
            if not child_region.is_empty:
                panel.widget.draw(
                    canvas, child_region, focused and index == self.selection
                )
            if self.borders and index < len(self.panels) - 1:
                self._draw_separator(canvas, region, child_region)

    def _draw_separator(self, canvas: Canvas, parent: Region, panel: Region) -> None:
        if self.horizontal:
            x = panel.x + max(0, panel.w)
            if parent.x <= x < parent.x + parent.w:
                canvas.vline(x, parent.y, parent.h, fg=self.color)
        else:
            y = panel.y + max(0, panel.h)
            if parent.y <= y < parent.y + parent.h:
                canvas.hline(parent.x, y, parent.w, fg=self.color)

    def handle_broadcast(self, ctx: AppContext, event: Any, emit: Emit) -> None:
        for panel in self.panels:
            panel.widget.handle_broadcast(ctx, event, emit)

    def handle_focus(self, ctx: AppContext, event: Any, emit: Emit) -> None:
        widget = self.selected()
        if widget is not None:
            widget.handle_focus(ctx, event, emit)

    def walk(self) -> Iterator[Widget]:
        yield self
        for panel in self.panels:
            yield from panel.widget.walk()


class HorizontalSplitter(Splitter):
    """Panels laid out left to right."""

    horizontal = True


class VerticalSplitter(Splitter):
    """Panels stacked top to bottom."""

    horizontal = False
