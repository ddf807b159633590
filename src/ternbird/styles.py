"""Genre hierarchy loaded from a tab-indented text file."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
import threading
from typing import Iterable, Optional

from ternbird import events
from ternbird.events import Emit
from ternbird.library import Track

logger = logging.getLogger(__name__)

ROOT = 0


@dataclass
class Style:
    name: str
    depth: int
    children: list[int] = field(default_factory=list)


class StyleTree:
    """Flat arena of styles; id 0 is the implicit ``Base`` root."""

    def __init__(self) -> None:
        self._styles: list[Style] = [Style("Base", 0)]
        self._tracks: dict[Optional[str], list[Track]] = {}

    def __len__(self) -> int:
        return len(self._styles)

    def add(self, name: str, parent: int = ROOT) -> int:
        style_id = len(self._styles)
        self._styles.append(Style(name, self._styles[parent].depth + 1))
        self._styles[parent].children.append(style_id)
        return style_id

    def name(self, style_id: int) -> str:
        return self._styles[style_id].name

    def depth(self, style_id: int) -> int:
        return self._styles[style_id].depth

    def children(self, style_id: int) -> list[int]:
        return list(self._styles[style_id].children)

    def leaf_names(self, style_id: int) -> list[str]:
        """Names of every leaf under ``style_id``, or its own name for a leaf."""
        children = self._styles[style_id].children
        if not children:
            return [self.name(style_id)]
        names: list[str] = []
        for child in children:
            names.extend(self.leaf_names(child))
        return names

    def names_under(self, style_id: int) -> set[str]:
        """Names of ``style_id`` and all of its descendants."""
        names = {self.name(style_id)}
        for child in self._styles[style_id].children:
            names |= self.names_under(child)
        return names

    def set_tracks(self, tracks: Iterable[Track]) -> None:
        """Bucket the library by Genre tag."""
        self._tracks = {}
        for track in tracks:
            self._tracks.setdefault(track.tag("Genre"), []).append(track)

    def tracks(self, genre: Optional[str]) -> list[Track]:
        return list(self._tracks.get(genre, ()))

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> StyleTree:
        """Build a tree where each leading tab nests one level deeper."""
        tree = cls()
        stack: list[int] = []
        for raw in lines:
            line = raw.rstrip("\r\n")
            name = line.lstrip("\t")
            if not name.strip():
                continue
            tabs = len(line) - len(name)
            del stack[tabs:]
            parent = stack[-1] if stack else ROOT
            stack.append(tree.add(name.strip(), parent))
        return tree


def load_style_tree(path: Path) -> StyleTree:
    with open(path, encoding="utf-8") as handle:
        return StyleTree.from_lines(handle)


def load_style_tree_async(path: Optional[Path], emit: Emit) -> threading.Thread:
    """Load the genre file on a worker thread and emit ``StyleTreeLoaded``."""

    def worker() -> None:
        tree: Optional[StyleTree] = None
        if path is None:
            emit(events.notify("No genre file given"))
        else:
            try:
                tree = load_style_tree(path)
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Failed to load genre file %s: %s", path, exc)
                emit(events.notify(f"Could not load genres from {path}"))
            else:
                logger.info("Loaded %d styles from %s", len(tree) - 1, path)
        emit(events.ToApp(events.StyleTreeLoaded(tree)))

    thread = threading.Thread(target=worker, name="StyleTreeLoader", daemon=True)
    thread.start()
    return thread
