"""Event payloads and destination wrappers carried on the event channel.

Every producer pushes one of the destination wrappers at the bottom of this
module onto the shared queue. Payloads are frozen dataclasses so they can be
handed between threads without copying.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from typing_extensions import TypeAlias

from ternbird.library import PlaylistInfo, Track

if TYPE_CHECKING:
    from ternbird.styles import StyleTree


# App payloads


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class SwitchScreen:
    """Switch by screen name, or by 1-based position when numeric."""

    target: str


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class Back:
    pass


@dataclass(frozen=True)
class Notify:
    message: str


@dataclass(frozen=True)
class Database:
    tracks: tuple[Track, ...]


@dataclass(frozen=True)
class ConnectionLost:
    pass


@dataclass(frozen=True)
class StyleTreeLoaded:
    tree: Optional[StyleTree]


@dataclass(frozen=True)
class OpenTagEditor:
    tracks: tuple[Track, ...]


@dataclass(frozen=True)
class LayoutLoaded:
    screens: tuple[Any, ...]


@dataclass(frozen=True)
class ChangeMode:
    mode: str


# Screen payloads


@dataclass(frozen=True)
class FocusNext:
    pass


@dataclass(frozen=True)
class FocusPrev:
    pass


# Component payloads


@dataclass(frozen=True)
class Next:
    pass


@dataclass(frozen=True)
class Prev:
    pass


@dataclass(frozen=True)
class GoTo:
    index: int


@dataclass(frozen=True)
class GoToTop:
    pass


@dataclass(frozen=True)
class GoToBottom:
    pass


@dataclass(frozen=True)
class Search:
    text: str


@dataclass(frozen=True)
class SearchPrev:
    text: str


@dataclass(frozen=True)
class Select:
    pass


@dataclass(frozen=True)
class Start:
    pass


@dataclass(frozen=True)
class OpenTags:
    pass


@dataclass(frozen=True)
class Delete:
    pass


@dataclass(frozen=True)
class ReturnText:
    text: str


@dataclass(frozen=True)
class NowPlaying:
    track: Optional[Track]


@dataclass(frozen=True)
class Queue:
    tracks: tuple[Track, ...]


@dataclass(frozen=True)
class Playlists:
    playlists: tuple[PlaylistInfo, ...]


@dataclass(frozen=True)
class LibraryUpdated:
    pass


@dataclass(frozen=True)
class PlaylistMenuUpdated:
    name: str
    playlist: Optional[PlaylistInfo]


@dataclass(frozen=True)
class TagMenuUpdated:
    name: str
    tracks: tuple[Track, ...]


@dataclass(frozen=True)
class StyleMenuUpdated:
    name: str
    styles: tuple[int, ...]


@dataclass(frozen=True)
class UpdateRootStyleMenu:
    pass


@dataclass(frozen=True)
class LoadTags:
    tracks: tuple[Track, ...]


# Backend commands


@dataclass(frozen=True)
class TogglePause:
    pass


@dataclass(frozen=True)
class ClearQueue:
    pass


@dataclass(frozen=True)
class AddToQueue:
    tracks: tuple[Track, ...]


@dataclass(frozen=True)
class AddByGenre:
    genres: tuple[str, ...]


@dataclass(frozen=True)
class PlayAt:
    track: Track


@dataclass(frozen=True)
class DeleteFromQueue:
    track: Track


@dataclass(frozen=True)
class Random:
    pass


@dataclass(frozen=True)
class Repeat:
    pass


@dataclass(frozen=True)
class Single:
    pass


@dataclass(frozen=True)
class Consume:
    pass


@dataclass(frozen=True)
class NextTrack:
    pass


@dataclass(frozen=True)
class PrevTrack:
    pass


@dataclass(frozen=True)
class SetVolume:
    volume: int


@dataclass(frozen=True)
class Update:
    pass


# Command line payloads


@dataclass(frozen=True)
class KeyInput:
    """One key press; printable keys are the character, others ``<name>``."""

    key: str


@dataclass(frozen=True)
class Echo:
    text: str


@dataclass(frozen=True)
class BackendStatus:
    repeat: bool
    random: bool
    single: bool
    consume: bool
    volume: int


@dataclass(frozen=True)
class RequestText:
    prompt: str
    default: str = ""


@dataclass(frozen=True)
class NextSearch:
    pass


@dataclass(frozen=True)
class PrevSearch:
    pass


@dataclass(frozen=True)
class VolumeMove:
    delta: int


@dataclass(frozen=True)
class SetColor:
    color: str


# Tagger requests


@dataclass(frozen=True)
class SetMusicDir:
    path: str


@dataclass(frozen=True)
class WriteTags:
    tracks: tuple[Track, ...]
    changes: tuple[tuple[str, Optional[str]], ...]


# Destinations


@dataclass(frozen=True)
class ToApp:
    event: Any


@dataclass(frozen=True)
class ToScreen:
    event: Union[FocusNext, FocusPrev]


@dataclass(frozen=True)
class ToAll:
    event: Any


@dataclass(frozen=True)
class ToFocus:
    event: Any


@dataclass(frozen=True)
class ToComponent:
    name: str
    event: Any


@dataclass(frozen=True)
class ToBackend:
    command: Any


@dataclass(frozen=True)
class ToCommandLine:
    event: Any


@dataclass(frozen=True)
class ToTagger:
    request: Union[SetMusicDir, WriteTags]


@dataclass(frozen=True)
class BindKey:
    keys: str
    event: Event


@dataclass(frozen=True)
class Confirm:
    prompt: str
    on_yes: Optional[Event] = None
    on_no: Optional[Event] = None
    default_yes: bool = True


Event: TypeAlias = Union[
    ToApp,
    ToScreen,
    ToAll,
    ToFocus,
    ToComponent,
    ToBackend,
    ToCommandLine,
    ToTagger,
    BindKey,
    Confirm,
]

Emit: TypeAlias = Callable[[Event], None]


def notify(message: str) -> ToApp:
    """Shortcut for a user-visible notification."""
    return ToApp(Notify(message))
