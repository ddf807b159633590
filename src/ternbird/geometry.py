"""Regions and panel sizing for splitter layouts."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import Sequence, Union

from typing_extensions import TypeAlias

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Region:
    """Absolute rectangle in character cells."""

    x: int
    y: int
    w: int
    h: int

    @property
    def is_empty(self) -> bool:
        return self.w <= 0 or self.h <= 0

    def inset(self, amount: int = 1) -> Region:
        """Return the region shrunk by ``amount`` cells on every side."""
        return Region(
            self.x + amount,
            self.y + amount,
            max(0, self.w - 2 * amount),
            max(0, self.h - 2 * amount),
        )


@dataclass(frozen=True)
class Percent:
    value: int


@dataclass(frozen=True)
class Absolute:
    value: int


@dataclass(frozen=True)
class Remainder:
    pass


Size: TypeAlias = Union[Percent, Absolute, Remainder]

REMAINDER = Remainder()

_PERCENT_RE = re.compile(r"^\s*(\d+)\s*%\s*$")
_ABSOLUTE_RE = re.compile(r"^\s*(\d+)\s*$")


def parse_size(raw: object) -> Size:
    """Parse ``"40%"``, ``"12"`` or ``"Remainder"``; anything else is Remainder.

    Sizes must be strings; a bare JSON number is treated as malformed.
    """
    if not isinstance(raw, str):
        if raw is not None:
            logger.warning("Invalid panel size %r, using Remainder", raw)
        return REMAINDER
    if raw.strip().lower() == "remainder":
        return REMAINDER
    match = _PERCENT_RE.match(raw)
    if match:
        return Percent(min(100, int(match.group(1))))
    match = _ABSOLUTE_RE.match(raw)
    if match:
        return Absolute(int(match.group(1)))
    logger.warning("Invalid panel size %r, using Remainder", raw)
    return REMAINDER


def resolve_sizes(
    sizes: Sequence[Size], extent: int, *, borders: bool = False
) -> list[int]:
    """Resolve panel sizes against ``extent`` along one axis.

    Percent sizes are taken of the full extent. When ``borders`` is set one
    separator cell sits between adjacent panels and is taken out of the
    space left for Remainder panels. Leftover space is split evenly among
    Remainder panels, the earliest ones receiving the extra cells.
    Oversubscribed layouts are returned as-is.
    """
    if not sizes:
        return []
    resolved: list[int] = []
    remainder_slots: list[int] = []
    for index, size in enumerate(sizes):
        if isinstance(size, Percent):
            resolved.append(extent * size.value // 100)
        elif isinstance(size, Absolute):
            resolved.append(size.value)
        else:
            resolved.append(0)
            remainder_slots.append(index)
    separators = len(sizes) - 1 if borders else 0
    leftover = max(0, extent - separators - sum(resolved))
    if remainder_slots:
        share, extra = divmod(leftover, len(remainder_slots))
        for order, index in enumerate(remainder_slots):
            resolved[index] = share + (1 if order < extra else 0)
    return resolved


def layout_offsets(extents: Sequence[int], *, borders: bool = False) -> list[int]:
    """Return the starting offset of each panel relative to the parent origin."""
    offsets: list[int] = []
    cursor = 0
    gap = 1 if borders else 0
    for extent in extents:
        offsets.append(cursor)
        cursor += max(0, extent) + gap
    return offsets
