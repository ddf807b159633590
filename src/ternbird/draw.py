"""Abstract draw instructions and their rasterization to rich text."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from rich.cells import get_character_cell_size
from rich.style import Style
from rich.text import Text

from ternbird.geometry import Region

RESET = "default"

HORIZONTAL_RULE = "─"
VERTICAL_RULE = "│"
CORNERS = ("┌", "┐", "└", "┘")


@dataclass(frozen=True)
class DrawInstruction:
    """One run of text at an absolute cell position."""

    x: int
    y: int
    text: str
    fg: str = RESET
    invert: bool = False
    bold: bool = False

    def style(self) -> Style:
        return Style(
            color=None if self.fg == RESET else self.fg,
            reverse=self.invert or None,
            bold=self.bold or None,
        )


@dataclass
class Canvas:
    """Collects draw instructions for one redraw."""

    instructions: list[DrawInstruction] = field(default_factory=list)

    def text(
        self,
        x: int,
        y: int,
        text: str,
        *,
        fg: str = RESET,
        invert: bool = False,
        bold: bool = False,
    ) -> None:
        if not text:
            return
        self.instructions.append(DrawInstruction(x, y, text, fg, invert, bold))

    def clear(self, region: Region) -> None:
        if region.is_empty:
            return
        blank = " " * region.w
        for row in range(region.h):
            self.text(region.x, region.y + row, blank)

    def hline(self, x: int, y: int, width: int, *, fg: str = RESET) -> None:
        if width > 0:
            self.text(x, y, HORIZONTAL_RULE * width, fg=fg)

    def vline(self, x: int, y: int, height: int, *, fg: str = RESET) -> None:
        for row in range(max(0, height)):
            self.text(x, y + row, VERTICAL_RULE, fg=fg)

    def box(self, region: Region, *, fg: str = RESET) -> None:
        """Draw a single-line border around ``region``."""
        if region.w < 2 or region.h < 2:
            return
        left, right = region.x, region.x + region.w - 1
        top, bottom = region.y, region.y + region.h - 1
        top_left, top_right, bottom_left, bottom_right = CORNERS
        inner = HORIZONTAL_RULE * (region.w - 2)
        self.text(left, top, top_left + inner + top_right, fg=fg)
        self.text(left, bottom, bottom_left + inner + bottom_right, fg=fg)
        self.vline(left, top + 1, region.h - 2, fg=fg)
        self.vline(right, top + 1, region.h - 2, fg=fg)


class Frame:
    """Immutable snapshot of a redraw, rasterized on demand."""

    def __init__(
        self, width: int, height: int, instructions: Iterable[DrawInstruction]
    ) -> None:
        self.width = max(0, width)
        self.height = max(0, height)
        self.instructions = tuple(instructions)

    def _grid(self) -> list[list[Optional[tuple[str, Style]]]]:
        blank = (" ", Style())
        grid: list[list[Optional[tuple[str, Style]]]] = [
            [blank] * self.width for _ in range(self.height)
        ]
        for instruction in self.instructions:
            if not 0 <= instruction.y < self.height:
                continue
            row = grid[instruction.y]
            style = instruction.style()
            x = instruction.x
            for char in instruction.text:
                size = get_character_cell_size(char)
                if size == 0:
                    continue
                if x < 0:
                    x += size
                    continue
                if x + size > self.width:
                    break
                if row[x] is None and x > 0:
                    row[x - 1] = blank
                if x + size < self.width and row[x + size] is None:
                    row[x + size] = blank
                row[x] = (char, style)
                if size == 2:
                    row[x + 1] = None
                x += size
        return grid

    def to_text(self) -> Text:
        """Return the frame as a multi-line rich Text."""
        text = Text(no_wrap=True, overflow="crop", end="")
        for index, row in enumerate(self._grid()):
            if index:
                text.append("\n")
            for cell in row:
                if cell is None:
                    continue
                char, style = cell
                text.append(char, style)
        return text

    def lines(self) -> list[str]:
        """Plain text rows, mainly for tests."""
        return self.to_text().plain.split("\n") if self.height else []
