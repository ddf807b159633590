"""Background worker that writes tag edits to audio files with mutagen."""

from __future__ import annotations

import logging
from pathlib import Path
import queue
import threading
from typing import Any, Optional

from ternbird import events
from ternbird.events import Emit
from ternbird.library import Track

logger = logging.getLogger(__name__)

EASY_KEYS = {
    "Title": "title",
    "Artist": "artist",
    "AlbumArtist": "albumartist",
    "Album": "album",
    "Date": "date",
    "Track": "tracknumber",
    "Genre": "genre",
    "Composer": "composer",
    "Disc": "discnumber",
}


class TagWriteError(Exception):
    """A file could not be opened or saved."""


def write_file_tags(path: Path, changes: tuple[tuple[str, Optional[str]], ...]) -> None:
    """Apply ``changes`` to one file through mutagen's easy tag interface."""
    try:
        from mutagen import File as MutagenFile
    except ImportError as exc:
        raise TagWriteError("mutagen is not installed") from exc
    try:
        audio = MutagenFile(path, easy=True)
    except Exception as exc:
        raise TagWriteError(f"{path}: {exc}") from exc
    if audio is None:
        raise TagWriteError(f"{path}: unsupported file type")
    if audio.tags is None:
        audio.add_tags()
    for tag, value in changes:
        key = EASY_KEYS.get(tag)
        if key is None:
            logger.warning("Skipping unknown tag %r", tag)
            continue
        if value is None:
            if key in audio:
                del audio[key]
        else:
            audio[key] = [value]
    try:
        audio.save()
    except Exception as exc:
        raise TagWriteError(f"{path}: {exc}") from exc


class Tagger:
    """Owns the music directory and serializes tag writes on one thread."""

    def __init__(self, emit: Emit, music_dir: Optional[str] = None) -> None:
        self._emit = emit
        self.music_dir: Optional[Path] = None
        if music_dir:
            self.set_music_dir(music_dir)
        self._requests: queue.Queue[Any] = queue.Queue()
        self._thread = threading.Thread(target=self._run, name="Tagger", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def send(self, request: Any) -> None:
        self._requests.put(request)

    def _run(self) -> None:
        while True:
            self.process(self._requests.get())

    def process(self, request: Any) -> None:
        if isinstance(request, events.SetMusicDir):
            self.set_music_dir(request.path)
        elif isinstance(request, events.WriteTags):
            self.write_tags(request.tracks, request.changes)
        else:
            logger.warning("Ignoring unknown tagger request %r", request)

    def set_music_dir(self, raw: str) -> bool:
        path = Path(raw).expanduser()
        if not path.is_dir():
            self._emit(events.notify(f"Music directory '{raw}' does not exist"))
            return False
        self.music_dir = path
        logger.info("Music directory set to %s", path)
        self._emit(events.ToCommandLine(events.Echo(f"Music directory: {path}")))
        return True

    def write_tags(
        self,
        tracks: tuple[Track, ...],
        changes: tuple[tuple[str, Optional[str]], ...],
    ) -> int:
        """Write ``changes`` to every track and return the failure count."""
        if self.music_dir is None:
            self._emit(events.notify("Set a music directory first (:musicdir PATH)"))
            return len(tracks)
        failures = 0
        for track in tracks:
            try:
                write_file_tags(self.music_dir / track.file, changes)
            except TagWriteError as exc:
                failures += 1
                logger.warning("Tag write failed: %s", exc)
        if failures:
            self._emit(
                events.notify(f"Could not tag {failures} of {len(tracks)} file(s)")
            )
        else:
            self._emit(events.ToCommandLine(events.Echo("Saved tags!")))
        if failures < len(tracks):
            self._emit(events.ToBackend(events.Update()))
        return failures
