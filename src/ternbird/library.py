"""Track and playlist models fed by the MPD listener."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any, Iterable, Mapping, Optional

# MPD tag names as they appear in the protocol, lower-cased by python-mpd2.
TAG_KEYS = {
    "title": "Title",
    "artist": "Artist",
    "albumartist": "AlbumArtist",
    "album": "Album",
    "date": "Date",
    "track": "Track",
    "genre": "Genre",
    "composer": "Composer",
    "disc": "Disc",
}


def _first(value: object) -> Optional[str]:
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _to_int(value: object) -> Optional[int]:
    try:
        return int(str(_first(value)))
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Track:
    """A song known to MPD."""

    file: str
    tags: Mapping[str, str] = field(default_factory=dict)
    pos: Optional[int] = None
    id: Optional[int] = None

    @classmethod
    def from_mpd(cls, raw: Mapping[str, Any]) -> Track:
        tags: dict[str, str] = {}
        for key, name in TAG_KEYS.items():
            value = _first(raw.get(key))
            if value is not None:
                tags[name] = value
        return cls(
            file=str(raw.get("file", "")),
            tags=tags,
            pos=_to_int(raw.get("pos")),
            id=_to_int(raw.get("id")),
        )

    def tag(self, name: str) -> Optional[str]:
        return self.tags.get(name)

    @property
    def title(self) -> str:
        """Title tag, or the file name when untagged."""
        title = self.tags.get("Title")
        if title:
            return title
        return PurePosixPath(self.file).name or self.file


@dataclass(frozen=True)
class PlaylistInfo:
    """A stored MPD playlist and its tracks."""

    name: str
    tracks: tuple[Track, ...] = ()


def tracks_from_mpd(rows: Iterable[Mapping[str, Any]]) -> list[Track]:
    """Build tracks from MPD rows, skipping directory and playlist entries."""
    return [Track.from_mpd(row) for row in rows if "file" in row]
