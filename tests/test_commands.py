"""Tests for the command grammar and rc scripts."""

from __future__ import annotations

from pathlib import Path

import pytest

from ternbird import commands, events


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("q", events.ToApp(events.Quit())),
        ("EXIT", events.ToApp(events.Quit())),
        ("screen Library", events.ToApp(events.SwitchScreen("Library"))),
        ("switchscreen 2", events.ToApp(events.SwitchScreen("2"))),
        ("focusnext", events.ToScreen(events.FocusNext())),
        ("focusprev", events.ToScreen(events.FocusPrev())),
        ("gototop", events.ToFocus(events.GoToTop())),
        ("bot", events.ToFocus(events.GoToBottom())),
        ("g 12", events.ToFocus(events.GoTo(12))),
        ("s two words", events.ToFocus(events.Search("two words"))),
        ("searchnext", events.ToCommandLine(events.NextSearch())),
        ("pause", events.ToBackend(events.TogglePause())),
        ("clearqueue", events.ToBackend(events.ClearQueue())),
        ("random", events.ToBackend(events.Random())),
        ("vol +5", events.ToCommandLine(events.VolumeMove(5))),
        ("volume -10", events.ToCommandLine(events.VolumeMove(-10))),
        ("volume 150", events.ToBackend(events.SetVolume(100))),
        ("tags", events.ToFocus(events.OpenTags())),
        ("back", events.ToApp(events.Back())),
        ("searchmode", events.ToApp(events.ChangeMode("search"))),
        ("musicdir ~/Music", events.ToTagger(events.SetMusicDir("~/Music"))),
        ("echo hello there", events.ToCommandLine(events.Echo("hello there"))),
    ],
)
def test_parse_valid_commands(text: str, expected: events.Event) -> None:
    assert commands.parse(text) == expected


@pytest.mark.parametrize(
    "text",
    ["", "   ", "nope", "goto", "goto x", "volume", "volume +x", "screen", "echo"],
)
def test_parse_invalid_commands(text: str) -> None:
    assert commands.parse(text) is None


def test_bind_wraps_the_rest_of_the_line() -> None:
    assert commands.parse("bind gg top") == events.BindKey(
        "gg", events.ToFocus(events.GoToTop())
    )
    assert commands.parse("bindkey <space> togglepause") == events.BindKey(
        " ", events.ToBackend(events.TogglePause())
    )


def test_bind_rejects_nested_binds_and_bad_commands() -> None:
    assert commands.parse("bind a bind b next") is None
    assert commands.parse("bind a") is None
    assert commands.parse("bind a nonsense") is None


def test_run_script_reports_invalid_lines() -> None:
    emitted: list[object] = []
    errors = commands.run_script(
        ["# comment", "", "bind j next", "frobnicate", "  q  "], emitted.append
    )
    assert errors == 1
    assert emitted == [
        events.BindKey("j", events.ToFocus(events.Next())),
        events.ToCommandLine(events.Echo("rc: invalid command at line 4 'frobnicate'")),
        events.ToApp(events.Quit()),
    ]


def test_rc_script_async_missing_file(tmp_path: Path) -> None:
    emitted: list[object] = []
    commands.run_rc_script_async(tmp_path / "missing", emitted.append).join()
    assert emitted == [events.ToCommandLine(events.Echo(commands.RC_NOT_FOUND))]


def test_rc_script_async_runs_file(tmp_path: Path) -> None:
    rc = tmp_path / "rc"
    rc.write_text("bind k prev\nscreen 1\n", encoding="utf-8")
    emitted: list[object] = []
    commands.run_rc_script_async(rc, emitted.append).join()
    assert emitted == [
        events.BindKey("k", events.ToFocus(events.Prev())),
        events.ToApp(events.SwitchScreen("1")),
    ]


def test_rc_script_async_without_path() -> None:
    emitted: list[object] = []
    commands.run_rc_script_async(None, emitted.append).join()
    assert emitted == [events.ToCommandLine(events.Echo(commands.RC_NOT_FOUND))]
