"""Menus over the MPD queue, stored playlists, tags and genres."""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ternbird import events
from ternbird.context import AppContext
from ternbird.draw import Canvas
from ternbird.events import Emit
from ternbird.geometry import Region
from ternbird.library import PlaylistInfo, Track
from ternbird.styles import ROOT
from ternbird.ui.menu import MenuWidget

logger = logging.getLogger(__name__)

ALL_ITEM = "<All>"
EMPTY_ITEM = "<Empty>"


def _same_track(left: Optional[Track], right: Optional[Track]) -> bool:
    if left is None or right is None:
        return False
    if left.id is not None and right.id is not None:
        return left.id == right.id
    return left.file == right.file


def _tracks_for_styles(ctx: AppContext, styles: Sequence[int]) -> list[Track]:
    tree = ctx.style_tree
    if tree is None:
        return []
    genres: set[str] = set()
    for style in styles:
        genres |= tree.names_under(style)
    return [track for track in ctx.library if track.tag("Genre") in genres]


class QueueMenu(MenuWidget):
    """The play queue; the playing track is drawn bold."""

    def __init__(self, name: str = "Queue", **kwargs: Any) -> None:
        super().__init__(name, **kwargs)
        self.tracks: list[Track] = []
        self.now_playing: Optional[Track] = None

    def selected_track(self) -> Optional[Track]:
        if 0 <= self.menu.selection < len(self.tracks):
            return self.tracks[self.menu.selection]
        return None

    def handle_broadcast(self, ctx: AppContext, event: Any, emit: Emit) -> None:
        if isinstance(event, events.Queue):
            self.tracks = list(event.tracks)
            self.menu.set_items(track.title for track in self.tracks)
        elif isinstance(event, events.NowPlaying):
            self.now_playing = event.track
        elif isinstance(event, events.ConnectionLost):
            self.tracks = []
            self.now_playing = None
            self.menu.set_items((), reset=True)

    def select(self, ctx: AppContext, emit: Emit) -> None:
        track = self.selected_track()
        if track is not None:
            emit(events.ToBackend(events.PlayAt(track)))

    def open_tags(self, ctx: AppContext, emit: Emit) -> None:
        track = self.selected_track()
        if track is not None:
            emit(events.ToApp(events.OpenTagEditor((track,))))

    def delete(self, ctx: AppContext, emit: Emit) -> None:
        track = self.selected_track()
        if track is None:
            return
        emit(
            events.Confirm(
                f"Remove '{track.title}' from the queue?",
                on_yes=events.ToBackend(events.DeleteFromQueue(track)),
            )
        )

    def draw(self, canvas: Canvas, region: Region, focused: bool) -> None:
        playing = {
            index
            for index, track in enumerate(self.tracks)
            if _same_track(track, self.now_playing)
        }
        self.menu.draw(canvas, region, focused, bold_rows=playing)


class TrackMenu(MenuWidget):
    """Tracks picked by a parent menu, or the whole library without one."""

    def __init__(self, name: str = "TrackMenu", **kwargs: Any) -> None:
        super().__init__(name, **kwargs)
        self.tracks: list[Track] = []

    def set_tracks(self, tracks: Sequence[Track]) -> None:
        self.tracks = list(tracks)
        self.menu.set_items((track.title for track in self.tracks), reset=True)

    def selected_tracks(self) -> tuple[Track, ...]:
        if 0 <= self.menu.selection < len(self.tracks):
            return (self.tracks[self.menu.selection],)
        return ()

    def handle_broadcast(self, ctx: AppContext, event: Any, emit: Emit) -> None:
        if isinstance(event, events.LibraryUpdated) and self.parent is None:
            self.set_tracks(ctx.library)
        elif isinstance(event, events.PlaylistMenuUpdated):
            if self.is_child_of(event.name) and event.playlist is not None:
                self.set_tracks(event.playlist.tracks)
        elif isinstance(event, events.TagMenuUpdated):
            if self.is_child_of(event.name):
                self.set_tracks(event.tracks)
        elif isinstance(event, events.StyleMenuUpdated):
            if self.is_child_of(event.name):
                self.set_tracks(_tracks_for_styles(ctx, event.styles))
        elif isinstance(event, events.ConnectionLost):
            self.set_tracks(())

    def select(self, ctx: AppContext, emit: Emit) -> None:
        tracks = self.selected_tracks()
        if tracks:
            emit(events.ToBackend(events.AddToQueue(tracks)))

    def start(self, ctx: AppContext, emit: Emit) -> None:
        tracks = self.selected_tracks()
        if tracks:
            emit(events.ToBackend(events.PlayAt(tracks[0])))

    def open_tags(self, ctx: AppContext, emit: Emit) -> None:
        tracks = self.selected_tracks()
        if tracks:
            emit(events.ToApp(events.OpenTagEditor(tracks)))


class PlaylistMenu(MenuWidget):
    """Stored playlists; announces the selected one to child menus."""

    def __init__(self, name: str = "PlaylistMenu", **kwargs: Any) -> None:
        super().__init__(name, **kwargs)
        self.playlists: list[PlaylistInfo] = []

    def selected_playlist(self) -> Optional[PlaylistInfo]:
        if 0 <= self.menu.selection < len(self.playlists):
            return self.playlists[self.menu.selection]
        return None

    def _announce(self, emit: Emit) -> None:
        emit(
            events.ToAll(
                events.PlaylistMenuUpdated(self.name, self.selected_playlist())
            )
        )

    def handle_broadcast(self, ctx: AppContext, event: Any, emit: Emit) -> None:
        if isinstance(event, events.Playlists):
            self.playlists = list(event.playlists)
            self.menu.set_items(playlist.name for playlist in self.playlists)
            self._announce(emit)
        elif isinstance(event, events.ConnectionLost):
            self.playlists = []
            self.menu.set_items((), reset=True)
            self._announce(emit)

    def selection_changed(self, ctx: AppContext, emit: Emit) -> None:
        self._announce(emit)

    def select(self, ctx: AppContext, emit: Emit) -> None:
        playlist = self.selected_playlist()
        if playlist is not None and playlist.tracks:
            emit(events.ToBackend(events.AddToQueue(playlist.tracks)))

    def open_tags(self, ctx: AppContext, emit: Emit) -> None:
        playlist = self.selected_playlist()
        if playlist is not None and playlist.tracks:
            emit(events.ToApp(events.OpenTagEditor(playlist.tracks)))


class TagMenu(MenuWidget):
    """Distinct values of one tag among the tracks handed down by its parent."""

    def __init__(
        self,
        name: str = "TagMenu",
        *,
        tag: str = "Artist",
        multitag_separator: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(name, **kwargs)
        self.tag = tag
        self.multitag_separator = multitag_separator or None
        self.tracks: list[Track] = []
        self.menu.set_items([ALL_ITEM])

    def _values(self, raw: str) -> list[str]:
        if self.multitag_separator:
            return raw.split(self.multitag_separator)
        return [raw]

    def _matches(self, track: Track, item: str) -> bool:
        value = track.tag(self.tag)
        if item == EMPTY_ITEM:
            return value is None
        return value is not None and item in self._values(value)

    def set_tracks(self, tracks: Sequence[Track]) -> None:
        self.tracks = list(tracks)
        values: set[str] = set()
        for track in self.tracks:
            value = track.tag(self.tag)
            if value is None:
                values.add(EMPTY_ITEM)
            else:
                values.update(self._values(value))
        self.menu.set_items([ALL_ITEM, *sorted(values)], reset=True)

    def selection(self) -> tuple[Track, ...]:
        if self.menu.selection == 0:
            return tuple(self.tracks)
        item = self.menu.selected_item()
        if item is None:
            return ()
        return tuple(track for track in self.tracks if self._matches(track, item))

    def _announce(self, emit: Emit) -> None:
        emit(events.ToAll(events.TagMenuUpdated(self.name, self.selection())))

    def handle_broadcast(self, ctx: AppContext, event: Any, emit: Emit) -> None:
        if isinstance(event, events.LibraryUpdated) and self.parent is None:
            self.set_tracks(ctx.library)
        elif isinstance(event, events.TagMenuUpdated) and self.is_child_of(
            event.name
        ):
            self.set_tracks(event.tracks)
        elif isinstance(event, events.StyleMenuUpdated) and self.is_child_of(
            event.name
        ):
            self.set_tracks(_tracks_for_styles(ctx, event.styles))
        elif isinstance(event, events.ConnectionLost):
            self.set_tracks(())
        else:
            return
        self._announce(emit)

    def selection_changed(self, ctx: AppContext, emit: Emit) -> None:
        self._announce(emit)

    def select(self, ctx: AppContext, emit: Emit) -> None:
        tracks = self.selection()
        if tracks:
            emit(events.ToBackend(events.AddToQueue(tracks)))

    def open_tags(self, ctx: AppContext, emit: Emit) -> None:
        tracks = self.selection()
        if tracks:
            emit(events.ToApp(events.OpenTagEditor(tracks)))


class StyleMenu(MenuWidget):
    """One level of the genre tree below the styles chosen by its parent."""

    def __init__(self, name: str = "StyleMenu", **kwargs: Any) -> None:
        super().__init__(name, **kwargs)
        self.styles: list[int] = []
        self.menu.set_items([ALL_ITEM])

    def selection(self) -> tuple[int, ...]:
        if self.menu.selection == 0:
            return tuple(self.styles)
        index = self.menu.selection - 1
        if 0 <= index < len(self.styles):
            return (self.styles[index],)
        return ()

    def set_styles(self, ctx: AppContext, parents: Sequence[int]) -> None:
        tree = ctx.style_tree
        if tree is None:
            return
        self.styles = [child for parent in parents for child in tree.children(parent)]
        self.menu.set_items(
            [ALL_ITEM, *(tree.name(style) for style in self.styles)], reset=True
        )

    def _announce(self, emit: Emit) -> None:
        emit(events.ToAll(events.StyleMenuUpdated(self.name, self.selection())))

    def handle_broadcast(self, ctx: AppContext, event: Any, emit: Emit) -> None:
        if isinstance(event, events.UpdateRootStyleMenu) and self.parent is None:
            if ctx.style_tree is None:
                return
            self.set_styles(ctx, [ROOT])
        elif isinstance(event, events.StyleMenuUpdated) and self.is_child_of(
            event.name
        ):
            if ctx.style_tree is None:
                return
            self.set_styles(ctx, event.styles)
        elif not isinstance(event, events.LibraryUpdated):
            return
        self._announce(emit)

    def selection_changed(self, ctx: AppContext, emit: Emit) -> None:
        self._announce(emit)

    def select(self, ctx: AppContext, emit: Emit) -> None:
        tree = ctx.style_tree
        if tree is None:
            return
        genres = [name for style in self.selection() for name in tree.leaf_names(style)]
        if genres:
            logger.debug("%s queueing %d genres", self.name, len(genres))
            emit(events.ToBackend(events.AddByGenre(tuple(genres))))
