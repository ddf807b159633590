"""Tests for event routing, screen switching and frame composition."""

from __future__ import annotations

from typing import Any

from ternbird import events
from ternbird.context import AppContext
from ternbird.events import Emit
from ternbird.geometry import REMAINDER
from ternbird.layout_config import TAG_EDITOR_SCREEN
from ternbird.library import Track
from ternbird.router import EventRouter
from ternbird.screen import Screen
from ternbird.ui.base import Widget
from ternbird.ui.command_line import Mode
from ternbird.ui.displays import PlaceHolder
from ternbird.ui.splitter import HorizontalSplitter, Panel
from ternbird.ui.tag_editor import TagEditor

SONG = Track("song.flac", {"Title": "Song", "Genre": "Punk"}, pos=0, id=5)


class _Probe(Widget):
    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.broadcasts: list[Any] = []
        self.focus_events: list[Any] = []

    def handle_broadcast(self, ctx: AppContext, event: Any, emit: Emit) -> None:
        self.broadcasts.append(event)

    def handle_focus(self, ctx: AppContext, event: Any, emit: Emit) -> None:
        if isinstance(event, events.Select):
            raise RuntimeError("boom")
        self.focus_events.append(event)


def _router() -> tuple[EventRouter, _Probe, _Probe, list[Any]]:
    first, second = _Probe("first"), _Probe("second")
    root = HorizontalSplitter(
        "Row", [Panel(REMAINDER, first), Panel(REMAINDER, second)]
    )
    sent: list[Any] = []
    router = EventRouter(
        screens=[Screen("Main", root), Screen("Other", PlaceHolder("Other"))],
        backend=sent.append,
        tagger=sent.append,
    )
    return router, first, second, sent


def test_tag_editor_screen_is_always_last() -> None:
    router, *_ = _router()
    assert [screen.name for screen in router.screens] == [
        "Main",
        "Other",
        TAG_EDITOR_SCREEN,
    ]
    default = EventRouter()
    assert [screen.name for screen in default.screens] == [
        "Queue",
        "Library",
        "Playlists",
        TAG_EDITOR_SCREEN,
    ]


def test_focus_events_reach_only_the_focused_widget() -> None:
    router, first, second, _ = _router()
    router.dispatch(events.ToFocus(events.Next()))
    router.dispatch(events.ToScreen(events.FocusNext()))
    router.dispatch(events.ToFocus(events.Prev()))
    assert first.focus_events == [events.Next()]
    assert second.focus_events == [events.Prev()]
    router.dispatch(events.ToScreen(events.FocusPrev()))
    focused = router.current.focused()
    assert focused is first


def test_broadcast_reaches_every_screen() -> None:
    router, first, second, _ = _router()
    router.switch_screen("Other")
    router.dispatch(events.ToAll(events.NowPlaying(SONG)))
    assert first.broadcasts == [events.NowPlaying(SONG)]
    assert second.broadcasts == [events.NowPlaying(SONG)]


def test_component_backend_and_tagger_destinations() -> None:
    router, first, second, sent = _router()
    router.dispatch(events.ToComponent("second", events.GoToTop()))
    router.dispatch(events.ToBackend(events.NextTrack()))
    router.dispatch(events.ToTagger(events.SetMusicDir("/music")))
    router.dispatch(events.ToComponent("missing", events.GoToTop()))
    assert second.focus_events == [events.GoToTop()]
    assert first.focus_events == []
    assert sent == [events.NextTrack(), events.SetMusicDir("/music")]


def test_switch_screen_by_name_number_and_back() -> None:
    router, *_ = _router()
    router.dispatch(events.ToApp(events.SwitchScreen("2")))
    assert router.current.name == "Other"
    router.dispatch(events.ToApp(events.SwitchScreen("Main")))
    assert router.current.name == "Main"
    router.dispatch(events.ToApp(events.Back()))
    assert router.current.name == "Other"
    router.dispatch(events.ToApp(events.SwitchScreen("Nowhere")))
    assert router.current.name == "Other"
    assert router.command_line.message == "No screen named 'Nowhere'"


def test_quit_stops_drain() -> None:
    router, *_ = _router()
    router.emit(events.ToApp(events.Quit()))
    router.emit(events.ToFocus(events.Next()))
    assert router.drain() is False
    assert not router.running
    assert router.queue.qsize() == 1


def test_drain_runs_events_emitted_by_handlers() -> None:
    router, *_ = _router()
    router.emit(events.BindKey("q", events.ToApp(events.Quit())))
    router.emit(events.ToCommandLine(events.KeyInput("q")))
    assert router.drain() is False


def test_handler_errors_are_reported() -> None:
    router, *_ = _router()
    assert router.dispatch(events.ToFocus(events.Select()))
    assert router.command_line.message == "Error: boom"


def test_database_updates_context_and_echoes() -> None:
    router, first, _, _ = _router()
    router.dispatch(events.ToApp(events.Database((SONG,))))
    assert router.ctx.library == [SONG]
    assert first.broadcasts == [events.LibraryUpdated()]
    assert router.command_line.message == "Updating database..."
    router.dispatch(events.ToApp(events.ConnectionLost()))
    assert router.ctx.library == []
    assert first.broadcasts[-1] == events.ConnectionLost()


def test_open_tag_editor_loads_tracks_and_switches() -> None:
    router, *_ = _router()
    router.dispatch(events.ToApp(events.OpenTagEditor((SONG,))))
    assert router.current.name == TAG_EDITOR_SCREEN
    editor = router.current.root
    assert isinstance(editor, TagEditor)
    assert editor.tracks == [SONG]
    router.dispatch(events.ToApp(events.Back()))
    assert router.current.name == "Main"


def test_layout_loaded_replays_state_to_new_screens() -> None:
    router, *_ = _router()
    router.dispatch(events.ToAll(events.Queue((SONG,))))
    router.dispatch(events.ToAll(events.NowPlaying(SONG)))
    replacement = _Probe("replacement")
    screens = (Screen("New", replacement),)
    router.dispatch(events.ToApp(events.LayoutLoaded(screens)))
    assert [screen.name for screen in router.screens] == ["New", TAG_EDITOR_SCREEN]
    assert replacement.broadcasts == [
        events.LibraryUpdated(),
        events.UpdateRootStyleMenu(),
        events.Queue((SONG,)),
        events.NowPlaying(SONG),
    ]


def test_empty_layout_keeps_current_screens() -> None:
    router, *_ = _router()
    router.dispatch(events.ToApp(events.LayoutLoaded(())))
    assert router.screens[0].name == "Main"


def test_change_mode_and_confirm() -> None:
    router, *_ = _router()
    router.dispatch(events.ToApp(events.ChangeMode("search")))
    assert router.command_line.mode is Mode.SEARCH
    router.dispatch(events.ToApp(events.ChangeMode("shouting")))
    assert router.command_line.message == "Unknown mode 'shouting'"
    router.dispatch(events.Confirm("Sure?", on_yes=events.ToApp(events.Quit())))
    assert router.command_line.mode is Mode.CONFIRM
    router.dispatch(events.ToCommandLine(events.KeyInput("y")))
    assert router.drain() is False


def test_frame_reserves_last_row_for_command_line() -> None:
    router = EventRouter(screens=[Screen("Box", PlaceHolder("Hi"))])
    router.dispatch(events.ToApp(events.Resize(20, 4)))
    lines = router.frame().lines()
    assert len(lines) == 4
    assert lines[0].startswith("┌")
    assert lines[2].startswith("└")
    assert lines[3].endswith("[----] Vol: %")
    assert router.frame(10, 0).lines() == []
