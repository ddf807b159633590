"""Tests for tag writing with a mocked mutagen."""

from __future__ import annotations

from pathlib import Path
import sys
from types import SimpleNamespace
from typing import Any, Optional

import pytest

from ternbird import events
from ternbird.library import Track
from ternbird.tagger import Tagger, TagWriteError, write_file_tags


class FakeEasyAudio:
    def __init__(self, tags: Optional[dict[str, list[str]]]) -> None:
        self.tags = tags
        self.saved = False

    def add_tags(self) -> None:
        self.tags = {}

    def __contains__(self, key: str) -> bool:
        return self.tags is not None and key in self.tags

    def __delitem__(self, key: str) -> None:
        assert self.tags is not None
        del self.tags[key]

    def __setitem__(self, key: str, value: list[str]) -> None:
        assert self.tags is not None
        self.tags[key] = value

    def save(self) -> None:
        self.saved = True


def _install(monkeypatch, opened: dict[str, Any]) -> None:
    def fake_file(path: Path, easy: bool = False) -> Any:
        assert easy
        return opened.get(Path(path).name)

    monkeypatch.setitem(sys.modules, "mutagen", SimpleNamespace(File=fake_file))


def test_write_file_tags_sets_and_removes(monkeypatch, tmp_path: Path) -> None:
    audio = FakeEasyAudio({"title": ["Old"], "genre": ["Rock"]})
    _install(monkeypatch, {"song.flac": audio})
    write_file_tags(
        tmp_path / "song.flac",
        (("Title", "New"), ("Genre", None), ("Track", "3"), ("Mood", "x")),
    )
    assert audio.tags == {"title": ["New"], "tracknumber": ["3"]}
    assert audio.saved


def test_write_file_tags_adds_missing_tag_block(monkeypatch, tmp_path: Path) -> None:
    audio = FakeEasyAudio(None)
    _install(monkeypatch, {"bare.mp3": audio})
    write_file_tags(tmp_path / "bare.mp3", (("Artist", "Someone"),))
    assert audio.tags == {"artist": ["Someone"]}


def test_write_file_tags_rejects_unsupported(monkeypatch, tmp_path: Path) -> None:
    _install(monkeypatch, {})
    with pytest.raises(TagWriteError, match="unsupported"):
        write_file_tags(tmp_path / "notes.txt", (("Title", "x"),))


def test_set_music_dir(tmp_path: Path) -> None:
    emitted: list[Any] = []
    tagger = Tagger(emitted.append)
    assert not tagger.set_music_dir(str(tmp_path / "missing"))
    assert tagger.music_dir is None
    assert tagger.set_music_dir(str(tmp_path))
    assert tagger.music_dir == tmp_path
    assert emitted == [
        events.notify(f"Music directory '{tmp_path / 'missing'}' does not exist"),
        events.ToCommandLine(events.Echo(f"Music directory: {tmp_path}")),
    ]


def test_write_tags_needs_music_dir() -> None:
    emitted: list[Any] = []
    tagger = Tagger(emitted.append)
    assert tagger.write_tags((Track("a.flac"),), (("Title", "A"),)) == 1
    assert emitted == [events.notify("Set a music directory first (:musicdir PATH)")]


def test_write_tags_reports_failures_and_updates(monkeypatch, tmp_path: Path) -> None:
    good = FakeEasyAudio({})
    _install(monkeypatch, {"good.flac": good})
    emitted: list[Any] = []
    tagger = Tagger(emitted.append, music_dir=str(tmp_path))
    emitted.clear()
    tagger.process(
        events.WriteTags(
            (Track("good.flac"), Track("bad.flac")), (("Album", "LP"),)
        )
    )
    assert good.tags == {"album": ["LP"]}
    assert emitted == [
        events.notify("Could not tag 1 of 2 file(s)"),
        events.ToBackend(events.Update()),
    ]


def test_write_tags_success_echoes(monkeypatch, tmp_path: Path) -> None:
    _install(monkeypatch, {"a.flac": FakeEasyAudio({})})
    emitted: list[Any] = []
    tagger = Tagger(emitted.append, music_dir=str(tmp_path))
    emitted.clear()
    assert tagger.write_tags((Track("a.flac"),), (("Date", "1999"),)) == 0
    assert emitted == [
        events.ToCommandLine(events.Echo("Saved tags!")),
        events.ToBackend(events.Update()),
    ]
