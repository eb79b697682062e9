"""Kodi session: connection, notifications and commands for one endpoint."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any, Self

import aiohttp

from .api import KodiClient
from .config import DIRECTION_SCHEMA, VOLUME_SCHEMA, KodiSessionConfig
from .connection import AvailabilityChange, KodiConnectionSupervisor, TransportFactory
from .events import EventCallback, EventType, KodiEvent, KodiEventDispatcher
from .exceptions import KodiNotConnectedError
from .library import KodiLibrary
from .log import KodiLoggerAdapter
from .models import Addon, Availability, Episode, Movie, MusicSearchType, Song
from .notifications import KodiNotificationInterpreter
from .websocket import KodiTransport, KodiWebSocket

_LOGGER = logging.getLogger(__name__)

type AvailabilityListener = Callable[[AvailabilityChange], None]


class KodiSession:
    """Long-lived session with one Kodi instance.

    Wires the connection supervisor to a notification interpreter, a library
    resolver and a command client. All three are rebuilt on every (re)connect
    and dropped when the connection is lost.

    Example:
        ```python
        config = KodiSessionConfig.from_dict({"host": "192.168.1.20"})
        async with KodiSession(config) as kodi:
            kodi.add_event_listener(print)
            await kodi.async_play_movie("interstelar")
        ```
    """

    def __init__(
        self,
        config: KodiSessionConfig,
        session: aiohttp.ClientSession | None = None,
        transport_factory: TransportFactory | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            config: Validated endpoint configuration.
            session: Optional aiohttp session to reuse. If not provided,
                a new session is created on first connect.
            transport_factory: Opens a transport for (host, port). Defaults
                to a WebSocket JSON-RPC transport.
        """
        self._config = config
        self._http_session = session
        self._owns_http_session = session is None
        self._logger = KodiLoggerAdapter(_LOGGER, config.host, config.port)
        self._events = KodiEventDispatcher(self._logger)
        self._availability_listeners: list[AvailabilityListener] = []
        self._interpreter: KodiNotificationInterpreter | None = None
        self._library: KodiLibrary | None = None
        self._client: KodiClient | None = None
        self._supervisor = KodiConnectionSupervisor(
            transport_factory or self._async_open_transport,
            on_connected=self._handle_connected,
            on_availability=self._handle_availability,
            reconnect_interval=config.reconnect_interval,
            logger=self._logger,
        )

    @classmethod
    def from_config(
        cls,
        data: Mapping[str, Any],
        session: aiohttp.ClientSession | None = None,
    ) -> Self:
        """Build a session from an unvalidated configuration mapping.

        Raises:
            vol.Invalid: If the configuration is invalid.
        """
        return cls(KodiSessionConfig.from_dict(data), session=session)

    async def __aenter__(self) -> Self:
        """Connect and enter async context manager."""
        await self.async_start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit async context manager."""
        await self.async_close()

    @property
    def host(self) -> str:
        """Return the Kodi host."""
        return self._config.host

    @property
    def port(self) -> int:
        """Return the Kodi port."""
        return self._config.port

    @property
    def availability(self) -> Availability:
        """Return the current availability."""
        return self._supervisor.availability

    @property
    def available(self) -> bool:
        """Return True if commands can be issued."""
        return self._supervisor.availability == Availability.AVAILABLE

    @property
    def reconnect_pending(self) -> bool:
        """Return True while a reconnect is scheduled."""
        return self._supervisor.reconnect_pending

    @property
    def library(self) -> KodiLibrary:
        """Return the library resolver of the live connection.

        Raises:
            KodiNotConnectedError: If Kodi is unavailable.
        """
        if self._library is None:
            raise KodiNotConnectedError()
        return self._library

    @property
    def client(self) -> KodiClient:
        """Return the command client of the live connection.

        Raises:
            KodiNotConnectedError: If Kodi is unavailable.
        """
        if self._client is None:
            raise KodiNotConnectedError()
        return self._client

    async def async_start(self) -> bool:
        """Connect to Kodi, scheduling reconnects if that fails.

        Returns:
            True if the first attempt succeeded.
        """
        return await self._supervisor.async_connect(self._config.host, self._config.port)

    async def async_close(self) -> None:
        """Disconnect and stop reconnecting."""
        await self._supervisor.async_teardown()
        self._discard_components()
        if self._owns_http_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    def add_event_listener(
        self,
        callback: EventCallback,
        event_types: Iterable[EventType] | None = None,
    ) -> Callable[[], None]:
        """Subscribe to domain events.

        Args:
            callback: Called with each matching KodiEvent.
            event_types: Restrict delivery to these types. All types if None.

        Returns:
            Function that removes the subscription.
        """
        return self._events.add_listener(callback, event_types)

    def add_availability_listener(self, callback: AvailabilityListener) -> Callable[[], None]:
        """Subscribe to availability transitions.

        Returns:
            Function that removes the subscription.
        """
        self._availability_listeners.append(callback)

        def remove_listener() -> None:
            if callback in self._availability_listeners:
                self._availability_listeners.remove(callback)

        return remove_listener

    async def _async_open_transport(self, host: str, port: int) -> KodiTransport:
        if self._http_session is None or self._http_session.closed:
            self._http_session = aiohttp.ClientSession()
            self._owns_http_session = True
        return await KodiWebSocket.async_open(
            self._http_session,
            host,
            port,
            timeout=self._config.timeout,
            logger=self._logger,
        )

    def _handle_connected(self, transport: KodiTransport) -> None:
        self._discard_components()
        self._interpreter = KodiNotificationInterpreter(transport, self._events.fire, self._logger)
        self._interpreter.attach()
        self._library = KodiLibrary(transport, self._logger)
        self._client = KodiClient(transport, self._logger)

    def _handle_availability(self, change: AvailabilityChange) -> None:
        if change == AvailabilityChange.UNAVAILABLE:
            self._discard_components()
        elif change == AvailabilityChange.RECONNECTED:
            self._events.fire(KodiEvent(EventType.RECONNECTED))

        for listener in list(self._availability_listeners):
            try:
                listener(change)
            except Exception:
                self._logger.exception("Error in availability listener")

    def _discard_components(self) -> None:
        if self._interpreter is not None:
            self._interpreter.detach()
        self._interpreter = None
        self._library = None
        self._client = None

    def _components(self) -> tuple[KodiLibrary, KodiClient]:
        if self._library is None or self._client is None:
            raise KodiNotConnectedError()
        return self._library, self._client

    # -------------------------------------------------------------------------
    # Library backed commands
    # -------------------------------------------------------------------------

    async def async_play_movie(self, title: str) -> Movie:
        """Play the movie best matching ``title``.

        Raises:
            KodiNotConnectedError: Kodi is unavailable.
            NoMoviesInLibraryError: The movie library is empty.
            MovieNotFoundError: No movie is similar enough.
        """
        library, client = self._components()
        movie = await library.async_search_movie(title)
        await client.async_play_movie(movie)
        return movie

    async def async_play_latest_unwatched_episode(self, show_title: str) -> Episode:
        """Play the first unwatched episode of the show best matching ``show_title``.

        Raises:
            KodiNotConnectedError: Kodi is unavailable.
            NoTvShowsInLibraryError: The TV show library is empty.
            SeriesNotFoundError: No show is similar enough.
            NoUnwatchedEpisodeError: Every episode has been watched.
        """
        library, client = self._components()
        episode = await library.async_get_latest_unwatched_episode(show_title)
        await client.async_play_episode(episode)
        return episode

    async def async_play_music(
        self,
        search_type: MusicSearchType | str,
        query: str,
        shuffle: bool = True,
    ) -> list[Song]:
        """Play the songs of the artist or album best matching ``query``.

        Raises:
            KodiNotConnectedError: Kodi is unavailable.
            NoMusicInLibraryError: No artists/albums in the library.
            ArtistNotFoundError: No artist is similar enough.
            AlbumNotFoundError: No album is similar enough.
        """
        library, client = self._components()
        songs = await library.async_search_music(MusicSearchType(search_type), query)
        await client.async_play_music(songs, shuffle=shuffle)
        return songs

    async def async_start_addon(self, name: str) -> Addon:
        """Start the addon best matching ``name``.

        Raises:
            KodiNotConnectedError: Kodi is unavailable.
            NoAddonsInstalledError: Kodi reports no addons.
            AddonNotFoundError: No addon is similar enough.
        """
        library, client = self._components()
        addon = await library.async_search_addon(name)
        await client.async_start_addon(addon)
        return addon

    # -------------------------------------------------------------------------
    # Direct commands
    # -------------------------------------------------------------------------

    async def async_next_or_previous(self, direction: str) -> None:
        """Skip to the ``next`` or ``previous`` item.

        Raises:
            vol.Invalid: If direction is not ``next`` or ``previous``.
        """
        direction = DIRECTION_SCHEMA(direction)
        await self.client.async_next_or_previous(direction)

    async def async_pause_resume(self) -> None:
        """Toggle pause."""
        await self.client.async_pause_resume()

    async def async_stop(self) -> None:
        """Stop playback."""
        await self.client.async_stop()

    async def async_set_party_mode(self) -> None:
        """Start music party mode."""
        await self.client.async_set_party_mode()

    async def async_set_mute(self, muted: bool) -> None:
        """Mute or unmute."""
        await self.client.async_set_mute(muted)

    async def async_set_subtitle(self, enabled: bool) -> None:
        """Turn subtitles on or off."""
        await self.client.async_set_subtitle(enabled)

    async def async_set_volume(self, volume: int) -> None:
        """Set the volume.

        Raises:
            vol.Invalid: If volume is outside 0-100.
        """
        await self.client.async_set_volume(VOLUME_SCHEMA(volume))

    async def async_is_playing(self, media_type: str | None = None) -> bool:
        """Return True if something (of ``media_type``) is playing."""
        return await self.client.async_is_playing(media_type)

    async def async_reboot(self) -> None:
        """Reboot the Kodi host."""
        await self.client.async_reboot()

    async def async_hibernate(self) -> None:
        """Hibernate the Kodi host."""
        await self.client.async_hibernate()

    async def async_shutdown(self) -> None:
        """Shut the Kodi host down."""
        await self.client.async_shutdown()


__all__ = ["AvailabilityListener", "KodiSession"]
