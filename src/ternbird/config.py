"""Configuration loading for Ternbird."""

from __future__ import annotations

from dataclasses import dataclass, replace
import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

APP_NAME = "ternbird"
SYSTEM_CONFIG_DIR = Path("/etc") / APP_NAME

LAYOUT_FILE = "layout.json"
RC_FILE = "rc"


@dataclass(frozen=True)
class AppConfig:
    """Immutable user configuration loaded from disk."""

    mpd_host: str = "127.0.0.1"
    mpd_port: int = 6600
    layout_path: Optional[str] = None
    rc_path: Optional[str] = None
    genres_path: Optional[str] = None
    music_dir: Optional[str] = None
    debug: bool = False

    def with_overrides(self, **changes: Any) -> AppConfig:
        """Return a copy with every non-``None`` override applied."""
        return replace(
            self, **{key: value for key, value in changes.items() if value is not None}
        )


def get_config_dir(app_name: str = APP_NAME) -> Path:
    """Return the per-user config directory for the current platform."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            root = Path(base)
        else:
            root = Path.home() / "AppData" / "Roaming"
        return root / app_name
    if os.name == "posix" and _is_macos():
        return Path.home() / "Library" / "Application Support" / app_name
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / app_name


def get_config_path() -> Path:
    """Return the full config file path."""
    return get_config_dir() / "config.json"


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Load configuration from disk, falling back to defaults on error."""
    path = path or get_config_path()
    if not path.is_file():
        logger.info("No config file at %s, using defaults", path)
        return AppConfig()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        logger.exception("Failed to load config from %s", path)
        return AppConfig()
    if not isinstance(raw, dict):
        logger.warning("Config %s is not a JSON object, using defaults", path)
        return AppConfig()
    return _config_from_mapping(raw)


def find_default_file(name: str, dotfile: str) -> Optional[Path]:
    """Find ``name`` in the config dir, then ``~/<dotfile>``, then /etc."""
    candidates = (
        get_config_dir() / name,
        Path.home() / dotfile,
        SYSTEM_CONFIG_DIR / name,
    )
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def _is_macos() -> bool:
    """Return True when running on macOS."""
    return os.uname().sysname == "Darwin" if hasattr(os, "uname") else False


class _Fields:
    """Typed accessors over a raw JSON object; wrong types read as defaults."""

    def __init__(self, raw: dict[str, Any]) -> None:
        self._raw = raw

    def flag(self, key: str, default: bool) -> bool:
        value = self._raw.get(key, default)
        return value if isinstance(value, bool) else default

    def port(self, key: str, default: int) -> int:
        value = self._raw.get(key, default)
        if isinstance(value, bool) or not isinstance(value, int):
            return default
        return value if 0 < value < 65536 else default

    def text(self, key: str, default: str) -> str:
        value = self._raw.get(key)
        return value if isinstance(value, str) and value.strip() else default

    def path(self, key: str) -> Optional[str]:
        value = self._raw.get(key)
        if isinstance(value, str) and value.strip():
            return os.path.expanduser(value)
        return None


def _config_from_mapping(raw: dict[str, Any]) -> AppConfig:
    """Normalize raw JSON data into an AppConfig."""
    fields = _Fields(raw)
    defaults = AppConfig()
    return AppConfig(
        mpd_host=fields.text("mpd_host", defaults.mpd_host),
        mpd_port=fields.port("mpd_port", defaults.mpd_port),
        layout_path=fields.path("layout"),
        rc_path=fields.path("rc"),
        genres_path=fields.path("genres"),
        music_dir=fields.path("music_dir"),
        debug=fields.flag("debug", defaults.debug),
    )
