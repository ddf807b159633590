"""MPD listener and command sender threads built on python-mpd2."""

from __future__ import annotations

import logging
import queue
import threading
import time
from typing import Any, Callable, Optional, cast

from ternbird import events
from ternbird.events import Emit
from ternbird.library import PlaylistInfo, Track, tracks_from_mpd

logger = logging.getLogger(__name__)

mpd: Any | None = None
_MPD_IMPORT_ERROR: Optional[Exception] = None

IDLE_SUBSYSTEMS = (
    "player",
    "playlist",
    "stored_playlist",
    "database",
    "options",
    "mixer",
)

ClientFactory = Callable[[], Any]


def _load_mpd() -> None:
    global mpd
    global _MPD_IMPORT_ERROR
    if mpd is not None or _MPD_IMPORT_ERROR is not None:
        return
    try:
        import mpd as mpd_module
    except Exception as exc:  # pragma: no cover - depends on the environment
        mpd = None
        _MPD_IMPORT_ERROR = exc
    else:
        mpd = cast(Any, mpd_module)
        _MPD_IMPORT_ERROR = None


def ensure_available() -> None:
    """Raise RuntimeError when python-mpd2 cannot be imported."""
    _load_mpd()
    if mpd is None:
        raise RuntimeError(
            "MPD backend is unavailable. Install the python-mpd2 package."
        ) from _MPD_IMPORT_ERROR


def default_client_factory() -> Any:
    """Return a new ``mpd.MPDClient``."""
    ensure_available()
    client = cast(Any, mpd).MPDClient()
    client.timeout = 10
    client.idletimeout = None
    return client


def _flag(status: dict[str, Any], key: str) -> bool:
    return str(status.get(key, "0")) == "1"


def status_event(status: dict[str, Any]) -> events.BackendStatus:
    try:
        volume = int(status.get("volume", -1))
    except (TypeError, ValueError):
        volume = -1
    return events.BackendStatus(
        repeat=_flag(status, "repeat"),
        random=_flag(status, "random"),
        single=_flag(status, "single"),
        consume=_flag(status, "consume"),
        volume=volume,
    )


class _Connection:
    """Lazily (re)connected client shared by the listener and sender loops."""

    def __init__(self, host: str, port: int, factory: ClientFactory) -> None:
        self.host = host
        self.port = port
        self._factory = factory
        self.client: Any | None = None

    def connect(self) -> Any:
        if self.client is None:
            client = self._factory()
            client.connect(self.host, self.port)
            self.client = client
            logger.info("Connected to MPD at %s:%s", self.host, self.port)
        return self.client

    def drop(self) -> None:
        client, self.client = self.client, None
        if client is None:
            return
        try:
            client.disconnect()
        except Exception:
            logger.debug("Ignoring error while disconnecting", exc_info=True)


class MpdListener:
    """Reports MPD state changes to the event channel, reconnecting on loss."""

    def __init__(
        self,
        host: str,
        port: int,
        emit: Emit,
        *,
        client_factory: ClientFactory = default_client_factory,
        retry_seconds: float = 2.0,
    ) -> None:
        self._conn = _Connection(host, port, client_factory)
        self._emit = emit
        self._retry_seconds = retry_seconds
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, name="MpdListener", daemon=True
        )

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()

    def _run(self) -> None:
        connected_once = False
        while not self._stop_event.is_set():
            try:
                client = self._conn.connect()
            except RuntimeError as exc:
                self._emit(events.notify(str(exc)))
                return
            except Exception as exc:
                logger.warning("MPD connection failed: %s", exc)
                self._stop_event.wait(self._retry_seconds)
                continue
            self._emit(events.notify("MPD connection established"))
            connected_once = True
            try:
                self.send_everything(client)
                while not self._stop_event.is_set():
                    for subsystem in client.idle(*IDLE_SUBSYSTEMS):
                        self.send_subsystem(client, subsystem)
            except Exception as exc:
                logger.warning("MPD connection lost: %s", exc)
                self._conn.drop()
                if connected_once:
                    self._emit(events.ToApp(events.ConnectionLost()))
                    self._emit(
                        events.notify("MPD connection dropped. Reconnecting...")
                    )
                self._stop_event.wait(self._retry_seconds)

    def send_everything(self, client: Any) -> None:
        self.send_status(client)
        self.send_database(client)
        self.send_now_playing(client)
        self.send_queue(client)
        self.send_playlists(client)

    def send_subsystem(self, client: Any, subsystem: str) -> None:
        if subsystem == "player":
            self.send_now_playing(client)
            self.send_status(client)
        elif subsystem == "playlist":
            self.send_queue(client)
        elif subsystem == "stored_playlist":
            self.send_playlists(client)
        elif subsystem == "database":
            self.send_database(client)
        elif subsystem in {"options", "mixer"}:
            self.send_status(client)

    def send_status(self, client: Any) -> None:
        self._emit(events.ToCommandLine(status_event(client.status())))

    def send_now_playing(self, client: Any) -> None:
        current = client.currentsong()
        track = Track.from_mpd(current) if current and "file" in current else None
        self._emit(events.ToAll(events.NowPlaying(track)))

    def send_queue(self, client: Any) -> None:
        tracks = tracks_from_mpd(client.playlistinfo())
        self._emit(events.ToAll(events.Queue(tuple(tracks))))

    def send_playlists(self, client: Any) -> None:
        playlists = []
        for entry in client.listplaylists():
            name = entry.get("playlist")
            if not name:
                continue
            tracks = tracks_from_mpd(client.listplaylistinfo(name))
            playlists.append(PlaylistInfo(name, tuple(tracks)))
        self._emit(events.ToAll(events.Playlists(tuple(playlists))))

    def send_database(self, client: Any) -> None:
        tracks = tracks_from_mpd(client.listallinfo())
        self._emit(events.ToApp(events.Database(tuple(tracks))))


class MpdSender:
    """Executes backend commands in order on its own connection."""

    def __init__(
        self,
        host: str,
        port: int,
        emit: Emit,
        *,
        client_factory: ClientFactory = default_client_factory,
        retry_seconds: float = 1.0,
        max_attempts: int = 3,
    ) -> None:
        self._conn = _Connection(host, port, client_factory)
        self._emit = emit
        self._retry_seconds = retry_seconds
        self._max_attempts = max_attempts
        self._commands: queue.Queue[tuple[Any, int]] = queue.Queue()
        self._thread = threading.Thread(
            target=self._run, name="MpdSender", daemon=True
        )

    def start(self) -> None:
        self._thread.start()

    def send(self, command: Any) -> None:
        self._commands.put((command, 1))

    def _run(self) -> None:
        while True:
            command, attempt = self._commands.get()
            self.process(command, attempt)

    def process(self, command: Any, attempt: int = 1) -> bool:
        """Run one command, re-queueing it after a connection failure."""
        try:
            execute(self._conn.connect(), command)
        except RuntimeError as exc:
            self._emit(events.notify(str(exc)))
            return False
        except Exception as exc:
            logger.warning("MPD command %r failed: %s", command, exc)
            self._conn.drop()
            if attempt >= self._max_attempts:
                self._emit(events.notify(f"MPD command failed: {exc}"))
                return False
            name = type(command).__name__
            self._emit(events.notify(f"MPD connection dropped. Resending {name}"))
            time.sleep(self._retry_seconds)
            self._commands.put((command, attempt + 1))
            return False
        return True


def _toggle(client: Any, option: str) -> None:
    status = client.status()
    getattr(client, option)(0 if _flag(status, option) else 1)


def _add_all(client: Any, tracks: tuple[Track, ...]) -> None:
    for track in tracks:
        client.add(track.file)


def _play_at(client: Any, track: Track) -> None:
    if track.id is not None:
        client.playid(track.id)
    elif track.pos is not None:
        client.play(track.pos)
    else:
        client.playid(client.addid(track.file))


def _toggle_pause(client: Any) -> None:
    if client.status().get("state") == "play":
        client.pause(1)
    else:
        client.play()


def _delete(client: Any, track: Track) -> None:
    if track.id is not None:
        client.deleteid(track.id)
    elif track.pos is not None:
        client.delete(track.pos)


def execute(client: Any, command: Any) -> None:
    """Translate one backend command into MPD protocol calls."""
    if isinstance(command, events.TogglePause):
        _toggle_pause(client)
    elif isinstance(command, events.ClearQueue):
        client.clear()
    elif isinstance(command, events.AddToQueue):
        _add_all(client, command.tracks)
    elif isinstance(command, events.AddByGenre):
        for genre in command.genres:
            client.findadd("genre", genre)
    elif isinstance(command, events.PlayAt):
        _play_at(client, command.track)
    elif isinstance(command, events.DeleteFromQueue):
        _delete(client, command.track)
    elif isinstance(command, events.Random):
        _toggle(client, "random")
    elif isinstance(command, events.Repeat):
        _toggle(client, "repeat")
    elif isinstance(command, events.Single):
        _toggle(client, "single")
    elif isinstance(command, events.Consume):
        _toggle(client, "consume")
    elif isinstance(command, events.NextTrack):
        client.next()
    elif isinstance(command, events.PrevTrack):
        client.previous()
    elif isinstance(command, events.SetVolume):
        client.setvol(max(0, min(100, command.volume)))
    elif isinstance(command, events.Update):
        client.update()
    else:
        logger.warning("Ignoring unknown backend command %r", command)
