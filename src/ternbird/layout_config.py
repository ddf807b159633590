"""Build screens from the JSON layout file.

The file holds a list of component records. Each top-level record becomes a
screen named after it; splitters nest further records under ``children``,
each carrying its own ``size``. Bad values are logged and replaced with
defaults so a broken layout still produces something on screen.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
import threading
from typing import Any, Callable, Mapping, Optional

from ternbird import events
from ternbird.align import Align
from ternbird.draw import RESET
from ternbird.events import Emit
from ternbird.geometry import REMAINDER, Absolute, Percent, parse_size
from ternbird.screen import Screen
from ternbird.ui.base import Widget
from ternbird.ui.displays import (
    EmptySpace,
    ErrorBox,
    PlaceHolder,
    TagDisplay,
    TitleDisplay,
)
from ternbird.ui.library_menus import (
    PlaylistMenu,
    QueueMenu,
    StyleMenu,
    TagMenu,
    TrackMenu,
)
from ternbird.ui.menu import MenuWidget
from ternbird.ui.splitter import (
    HorizontalSplitter,
    Panel,
    Splitter,
    VerticalSplitter,
)
from ternbird.ui.tag_editor import TagEditor

logger = logging.getLogger(__name__)

TAG_EDITOR_SCREEN = "TagEditor"

COLOR_NAMES = {
    "Black": "black",
    "Red": "red",
    "Green": "green",
    "Yellow": "yellow",
    "Blue": "blue",
    "Magenta": "magenta",
    "Cyan": "cyan",
    "White": "white",
    "BrightBlack": "bright_black",
    "BrightRed": "bright_red",
    "BrightGreen": "bright_green",
    "BrightYellow": "bright_yellow",
    "BrightBlue": "bright_blue",
    "BrightMagenta": "bright_magenta",
    "BrightCyan": "bright_cyan",
    "BrightWhite": "bright_white",
    "Reset": RESET,
}


class LayoutError(Exception):
    """The layout file could not be read or is not a list of records."""


def _rgb_part(raw: Mapping[str, Any], key: str) -> Optional[int]:
    value = raw.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return max(0, min(5, value))


def parse_color(raw: object) -> str:
    """Map a color name or ``{"r", "g", "b"}`` cube value to a rich color."""
    if raw is None:
        return RESET
    if isinstance(raw, str):
        color = COLOR_NAMES.get(raw)
        if color is not None:
            return color
    elif isinstance(raw, Mapping):
        parts = [_rgb_part(raw, key) for key in ("r", "g", "b")]
        if all(part is not None for part in parts):
            red, green, blue = (int(part or 0) for part in parts)
            return f"color({16 + 36 * red + 6 * green + blue})"
    logger.warning("Invalid color %r, using Reset", raw)
    return RESET


def _get_str(raw: Mapping[str, Any], key: str, default: str) -> str:
    value = raw.get(key, default)
    if not isinstance(value, str) or not value:
        return default
    return value


def _get_optional_str(raw: Mapping[str, Any], key: str) -> Optional[str]:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        logger.warning("Ignoring non-string %s %r", key, value)
        return None
    return value


def _get_bool(raw: Mapping[str, Any], key: str, default: bool) -> bool:
    value = raw.get(key, default)
    if isinstance(value, bool):
        return value
    logger.warning("Invalid %s %r, using %s", key, value, default)
    return default


def _menu_options(raw: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "title": _get_optional_str(raw, "title"),
        "title_alignment": Align.parse(raw.get("title_alignment")),
        "menu_alignment": Align.parse(raw.get("menu_alignment")),
        "color": parse_color(raw.get("color")),
        "focus_color": parse_color(raw.get("focus_color")),
    }


def _build_splitter(raw: Mapping[str, Any], cls: type[Splitter]) -> Widget:
    children = raw.get("children", [])
    panels: list[Panel] = []
    if not isinstance(children, list):
        logger.warning("Splitter children must be a list, got %r", children)
        children = []
    for child in children:
        if not isinstance(child, Mapping):
            logger.warning("Skipping splitter child that is not an object: %r", child)
            continue
        panels.append(Panel(parse_size(child.get("size")), build_widget(child)))
    return cls(
        _get_str(raw, "name", cls.__name__),
        panels,
        borders=_get_bool(raw, "borders", True),
        color=parse_color(raw.get("color")),
    )


def _build_queue(raw: Mapping[str, Any]) -> Widget:
    return QueueMenu(_get_str(raw, "name", "Queue"), **_menu_options(raw))


def _build_playlist_menu(raw: Mapping[str, Any]) -> Widget:
    return PlaylistMenu(_get_str(raw, "name", "PlaylistMenu"), **_menu_options(raw))


def _build_track_menu(raw: Mapping[str, Any]) -> Widget:
    return TrackMenu(
        _get_str(raw, "name", "TrackMenu"),
        parent=_get_optional_str(raw, "parent"),
        **_menu_options(raw),
    )


def _build_tag_menu(raw: Mapping[str, Any]) -> Widget:
    return TagMenu(
        _get_str(raw, "name", "TagMenu"),
        tag=_get_str(raw, "tag", "Artist"),
        multitag_separator=_get_optional_str(raw, "multitag_separator"),
        parent=_get_optional_str(raw, "parent"),
        **_menu_options(raw),
    )


def _build_style_menu(raw: Mapping[str, Any]) -> Widget:
    return StyleMenu(
        _get_str(raw, "name", "StyleMenu"),
        parent=_get_optional_str(raw, "parent"),
        **_menu_options(raw),
    )


def _build_title_display(raw: Mapping[str, Any]) -> Widget:
    return TitleDisplay(
        _get_str(raw, "name", "TitleDisplay"),
        color=parse_color(raw.get("color")),
        alignment=Align.parse(raw.get("alignment")),
    )


def _build_tag_display(raw: Mapping[str, Any]) -> Widget:
    return TagDisplay(
        _get_str(raw, "name", "TagDisplay"),
        tag=_get_str(raw, "tag", "Artist"),
        color=parse_color(raw.get("color")),
        alignment=Align.parse(raw.get("alignment")),
    )


BUILDERS: dict[str, Callable[[Mapping[str, Any]], Widget]] = {
    "HorizontalSplitter": lambda raw: _build_splitter(raw, HorizontalSplitter),
    "VerticalSplitter": lambda raw: _build_splitter(raw, VerticalSplitter),
    "EmptySpace": lambda raw: EmptySpace(_get_str(raw, "name", "EmptySpace")),
    "PlaceHolder": lambda raw: PlaceHolder(
        _get_str(raw, "name", "PlaceHolder"), color=parse_color(raw.get("color"))
    ),
    "TitleDisplay": _build_title_display,
    "TagDisplay": _build_tag_display,
    "Queue": _build_queue,
    "PlaylistMenu": _build_playlist_menu,
    "TrackMenu": _build_track_menu,
    "TagMenu": _build_tag_menu,
    "StyleMenu": _build_style_menu,
}


def build_widget(raw: Mapping[str, Any]) -> Widget:
    """Build one component record; unknown kinds become an ErrorBox."""
    kind = raw.get("component")
    builder = BUILDERS.get(kind) if isinstance(kind, str) else None
    if builder is None:
        logger.error("Unknown component %r, creating ErrorBox", kind)
        return ErrorBox()
    return builder(raw)


def screens_from_records(records: object) -> list[Screen]:
    if not isinstance(records, list):
        raise LayoutError("layout must be a list of component records")
    screens: list[Screen] = []
    names: set[str] = set()
    for record in records:
        if not isinstance(record, Mapping):
            logger.warning("Skipping top-level layout entry %r", record)
            continue
        root = build_widget(record)
        name = _get_str(record, "name", root.name)
        if name in names:
            logger.warning("Skipping screen %r, the name is already taken", name)
            continue
        names.add(name)
        screens.append(Screen(name, root))
    break_parent_cycles(screens)
    return screens


def break_parent_cycles(screens: list[Screen]) -> None:
    """Detach menus whose parent chain leads back to themselves.

    Menus re-announce whenever their parent does, so a loop would keep the
    event channel busy forever.
    """
    found = [
        widget
        for screen in screens
        for widget in screen.root.walk()
        if isinstance(widget, MenuWidget)
    ]
    menus: dict[str, MenuWidget] = {}
    for widget in found:
        menus.setdefault(widget.name, widget)
    for menu in found:
        seen = {menu.name}
        parent = menu.parent
        while parent is not None and parent not in seen:
            seen.add(parent)
            upstream = menus.get(parent)
            parent = upstream.parent if upstream is not None else None
        if parent == menu.name:
            logger.warning(
                "Menu %r is its own ancestor, dropping parent %r",
                menu.name,
                menu.parent,
            )
            menu.parent = None


def load_layout(path: Path) -> list[Screen]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise LayoutError(f"cannot read layout {path}: {exc}") from exc
    return screens_from_records(raw)


def load_layout_async(path: Optional[Path], emit: Emit) -> threading.Thread:
    """Parse the layout on a worker thread and emit ``LayoutLoaded``."""

    def worker() -> None:
        screens: list[Screen] = []
        if path is not None:
            try:
                screens = load_layout(path)
            except LayoutError as exc:
                logger.error("%s", exc)
                emit(events.notify(f"Layout error: {exc}"))
            else:
                logger.info("Loaded %d screens from %s", len(screens), path)
        emit(events.ToApp(events.LayoutLoaded(tuple(screens))))

    thread = threading.Thread(target=worker, name="LayoutLoader", daemon=True)
    thread.start()
    return thread


def default_screens() -> list[Screen]:
    """Screens shown before, or instead of, a layout file."""
    library = HorizontalSplitter(
        "Library",
        [
            Panel(Percent(30), TagMenu("Artists", tag="Artist", title="Artist")),
            Panel(
                Percent(30),
                TagMenu("Albums", tag="Album", title="Album", parent="Artists"),
            ),
            Panel(REMAINDER, TrackMenu("Tracks", title="Tracks", parent="Albums")),
        ],
    )
    now_playing = VerticalSplitter(
        "NowPlaying",
        [
            Panel(Absolute(1), TitleDisplay("Title", alignment=Align.CENTER)),
            Panel(
                Absolute(1),
                TagDisplay("Artist", tag="Artist", alignment=Align.CENTER),
            ),
            Panel(REMAINDER, QueueMenu("Queue", title="Queue")),
        ],
        borders=False,
    )
    playlists = HorizontalSplitter(
        "Playlists",
        [
            Panel(Percent(30), PlaylistMenu("PlaylistMenu", title="Playlists")),
            Panel(
                REMAINDER,
                TrackMenu("PlaylistTracks", title="Tracks", parent="PlaylistMenu"),
            ),
        ],
    )
    return [
        Screen("Queue", now_playing),
        Screen("Library", library),
        Screen("Playlists", playlists),
    ]


def tag_editor_screen() -> Screen:
    return Screen(TAG_EDITOR_SCREEN, TagEditor(TAG_EDITOR_SCREEN))
