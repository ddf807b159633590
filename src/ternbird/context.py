"""Shared read-only state handed to every widget handler."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ternbird.library import Track
from ternbird.styles import StyleTree


@dataclass
class AppContext:
    """Library and genre tree; only the event router mutates it."""

    library: list[Track] = field(default_factory=list)
    style_tree: Optional[StyleTree] = None

    def set_library(self, tracks: list[Track]) -> None:
        self.library = list(tracks)
        if self.style_tree is not None:
            self.style_tree.set_tracks(self.library)

    def set_style_tree(self, tree: Optional[StyleTree]) -> None:
        self.style_tree = tree
        if tree is not None:
            tree.set_tracks(self.library)
