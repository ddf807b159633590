"""Tests for the modal command line."""

from __future__ import annotations

from ternbird import events
from ternbird.draw import Canvas, Frame
from ternbird.geometry import Region
from ternbird.ui.command_line import (
    BACKSPACE,
    ENTER,
    ESCAPE,
    CommandLine,
    Mode,
)


def _type(line: CommandLine, keys: list[str]) -> list[object]:
    emitted: list[object] = []
    for key in keys:
        line.input(key, emitted.append)
    return emitted


def test_bound_sequence_emits_once_and_clears() -> None:
    line = CommandLine()
    bound = events.ToFocus(events.GoToTop())
    line.bind("gg", bound)
    emitted = _type(line, ["g"])
    assert emitted == []
    assert line.buffer == "g"
    emitted = _type(line, ["g"])
    assert emitted == [bound]
    assert line.buffer == ""


def test_unbound_sequence_notifies_and_clears() -> None:
    line = CommandLine()
    line.bind("gg", events.ToFocus(events.GoToTop()))
    emitted = _type(line, ["g", "x"])
    assert emitted == [events.notify("Invalid command 'gx'")]
    assert line.buffer == ""


def test_escape_clears_pending_keys() -> None:
    line = CommandLine()
    line.bind("gg", events.ToFocus(events.GoToTop()))
    assert _type(line, ["g", ESCAPE, "g"]) == []
    assert line.buffer == "g"


def test_colon_enters_command_mode_and_runs_command() -> None:
    line = CommandLine()
    emitted = _type(line, [":", "n", "e", "x", "t", ENTER])
    assert emitted == [events.ToFocus(events.Next())]
    assert line.mode is Mode.NORMAL
    assert line.message == "Ran: next"


def test_invalid_command_is_reported() -> None:
    line = CommandLine()
    emitted = _type(line, [":", "b", "o", "g", "u", "s", ENTER])
    assert emitted == [events.notify("Invalid command 'bogus'")]


def test_echo_command_is_shown_directly() -> None:
    line = CommandLine()
    emitted = _type(line, [":", *"echo hi", ENTER])
    assert emitted == []
    assert line.message == "hi"


def test_backspace_and_escape_in_text_modes() -> None:
    line = CommandLine()
    _type(line, [":", "a", "b", BACKSPACE])
    assert line.buffer == "a"
    _type(line, [BACKSPACE, BACKSPACE])
    assert line.mode is Mode.NORMAL
    _type(line, ["/", "x", ESCAPE])
    assert line.mode is Mode.NORMAL
    assert line.buffer == ""


def test_search_mode_remembers_last_search() -> None:
    line = CommandLine()
    emitted = _type(line, ["/", "a", "b", ENTER])
    assert emitted == [events.ToFocus(events.Search("ab"))]
    again: list[object] = []
    line.handle(events.NextSearch(), again.append)
    line.handle(events.PrevSearch(), again.append)
    assert again == [
        events.ToFocus(events.Search("ab")),
        events.ToFocus(events.SearchPrev("ab")),
    ]


def test_search_repeat_without_history_does_nothing() -> None:
    line = CommandLine()
    emitted: list[object] = []
    line.handle(events.NextSearch(), emitted.append)
    assert emitted == []


def test_prompt_returns_text_to_focus() -> None:
    line = CommandLine()
    line.handle(events.RequestText("Title", "Old"), lambda _e: None)
    assert line.mode is Mode.PROMPT
    assert line.buffer == "Old"
    emitted = _type(line, [BACKSPACE, BACKSPACE, BACKSPACE, "N", "e", "w", ENTER])
    assert emitted == [events.ToFocus(events.ReturnText("New"))]


def test_confirm_yes_no_default_and_cancel() -> None:
    yes = events.ToBackend(events.ClearQueue())
    no = events.ToCommandLine(events.Echo("kept"))
    line = CommandLine()
    line.confirm(events.Confirm("Clear?", on_yes=yes, on_no=no))
    assert _type(line, ["q"]) == []
    assert line.mode is Mode.CONFIRM
    assert _type(line, ["y"]) == [yes]
    line.confirm(events.Confirm("Clear?", on_yes=yes, on_no=no))
    assert _type(line, ["N"]) == [no]
    line.confirm(events.Confirm("Clear?", on_yes=yes, on_no=no, default_yes=False))
    assert _type(line, [ENTER]) == [no]
    line.confirm(events.Confirm("Clear?", on_yes=yes))
    assert _type(line, [ESCAPE]) == []
    assert line.mode is Mode.NORMAL


def test_status_and_volume_moves() -> None:
    line = CommandLine()
    emitted: list[object] = []
    line.handle(events.VolumeMove(5), emitted.append)
    assert emitted == [events.notify("Volume is not available")]
    line.handle(events.BackendStatus(True, False, True, False, 98), emitted.append)
    assert line.statusline == "[r-s-] Vol: 98%"
    line.handle(events.VolumeMove(5), emitted.append)
    line.handle(events.VolumeMove(-200), emitted.append)
    assert emitted[1:] == [
        events.ToBackend(events.SetVolume(100)),
        events.ToBackend(events.SetVolume(0)),
    ]


def test_draw_puts_status_on_the_right() -> None:
    line = CommandLine()
    line.echo("hello")
    canvas = Canvas()
    line.draw(canvas, Region(0, 0, 24, 1))
    assert Frame(24, 1, canvas.instructions).lines() == ["hello      [----] Vol: %"]
    _type(line, [":", "q"])
    canvas = Canvas()
    line.draw(canvas, Region(0, 0, 24, 1))
    assert Frame(24, 1, canvas.instructions).lines()[0].startswith(":q█")


def test_confirm_prompt_text() -> None:
    line = CommandLine()
    line.confirm(events.Confirm("Save?", default_yes=False))
    assert line.left_text() == "Save? (y/N)"


def test_set_color() -> None:
    line = CommandLine()
    line.handle(events.SetColor("green"), lambda _e: None)
    assert line.color == "green"
