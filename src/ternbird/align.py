"""Text alignment helpers measured in terminal cells."""

from __future__ import annotations

from enum import Enum
import logging

from rich.cells import cell_len, get_character_cell_size

logger = logging.getLogger(__name__)


def _take_head(text: str, width: int) -> str:
    """Return the longest prefix of ``text`` fitting in ``width`` cells."""
    used = 0
    for index, char in enumerate(text):
        size = get_character_cell_size(char)
        if used + size > width:
            return text[:index]
        used += size
    return text


def _drop_head(text: str, cells: int) -> str:
    """Drop at least ``cells`` cells from the start of ``text``."""
    dropped = 0
    index = 0
    while index < len(text) and dropped < cells:
        dropped += get_character_cell_size(text[index])
        index += 1
    return text[index:]


class Align(Enum):
    LEFT = "Left"
    CENTER = "Center"
    RIGHT = "Right"

    @classmethod
    def parse(cls, raw: object) -> Align:
        if isinstance(raw, str):
            for member in cls:
                if member.value.lower() == raw.strip().lower():
                    return member
        if raw is not None:
            logger.warning("Invalid alignment %r, using Left", raw)
        return cls.LEFT

    def pad_left(self, content_width: int, target_width: int) -> int:
        """Number of fill cells placed before the content."""
        fill = max(0, target_width - content_width)
        if self is Align.LEFT:
            return 0
        if self is Align.RIGHT:
            return fill
        return fill // 2

    def pad_right(self, content_width: int, target_width: int) -> int:
        """Number of fill cells placed after the content."""
        fill = max(0, target_width - content_width)
        return fill - self.pad_left(content_width, target_width)

    def crop(self, text: str, max_width: int) -> str:
        """Trim ``text`` to at most ``max_width`` cells."""
        max_width = max(0, max_width)
        excess = cell_len(text) - max_width
        if excess <= 0:
            return text
        if self is Align.LEFT:
            return _take_head(text, max_width)
        if self is Align.RIGHT:
            return _drop_head(text, excess)
        return _take_head(_drop_head(text, excess // 2), max_width)

    def pad(self, text: str, width: int) -> str:
        content = cell_len(text)
        return (
            " " * self.pad_left(content, width)
            + text
            + " " * self.pad_right(content, width)
        )

    def fit(self, text: str, width: int) -> str:
        """Crop then pad so the result spans exactly ``width`` cells."""
        return self.pad(self.crop(text, width), max(0, width))
