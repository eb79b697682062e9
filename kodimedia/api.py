"""Kodi command client."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from typing import Any

from .const import (
    DIRECTION_NEXT,
    DIRECTION_PREVIOUS,
    ITEM_TYPE_ALIASES,
    METHOD_EXECUTE_ADDON,
    METHOD_PLAYER_GET_ACTIVE,
    METHOD_PLAYER_GET_ITEM,
    METHOD_PLAYER_GOTO,
    METHOD_PLAYER_OPEN,
    METHOD_PLAYER_PLAY_PAUSE,
    METHOD_PLAYER_SET_SUBTITLE,
    METHOD_PLAYER_STOP,
    METHOD_PLAYLIST_ADD,
    METHOD_PLAYLIST_CLEAR,
    METHOD_SET_MUTE,
    METHOD_SET_VOLUME,
    METHOD_SYSTEM_HIBERNATE,
    METHOD_SYSTEM_REBOOT,
    METHOD_SYSTEM_SHUTDOWN,
    MUSIC_PLAYLIST_ID,
    KodiActivePlayer,
)
from .log import KodiLogger
from .models import Addon, Episode, Movie, Song
from .websocket import KodiTransport

_LOGGER = logging.getLogger(__name__)


class KodiClient:
    """Issue playback, application and system commands to Kodi.

    Playback controls that need a player (pause, stop, skip, subtitles)
    first look up the active player and do nothing when none is active.
    Any other failure of the underlying call propagates to the caller.

    Example:
        ```python
        client = KodiClient(transport)
        await client.async_play_movie(movie)
        await client.async_set_volume(40)
        ```
    """

    def __init__(self, transport: KodiTransport, logger: KodiLogger | None = None) -> None:
        """Initialize the client.

        Args:
            transport: Connected transport to issue commands on.
            logger: Logger to use instead of the module logger.
        """
        self._transport = transport
        self._logger = logger or _LOGGER

    async def _async_active_player_id(self) -> int | None:
        """Return the id of the first active player, or None if nothing plays."""
        players: list[KodiActivePlayer] = await self._transport.async_call(
            METHOD_PLAYER_GET_ACTIVE, {}
        )
        if not players:
            return None
        return players[0]["playerid"]

    # -------------------------------------------------------------------------
    # Playback
    # -------------------------------------------------------------------------

    async def async_play_movie(self, movie: Movie) -> Any:
        """Start playing a movie."""
        self._logger.debug("Playing movie %s", movie)
        return await self._transport.async_call(METHOD_PLAYER_OPEN, movie.param_id())

    async def async_play_episode(self, episode: Episode) -> Any:
        """Start playing an episode."""
        self._logger.debug("Playing episode %s", episode)
        return await self._transport.async_call(METHOD_PLAYER_OPEN, episode.param_id())

    async def async_play_music(self, songs: Sequence[Song], shuffle: bool = True) -> Any:
        """Replace the music playlist with ``songs`` and play it on repeat.

        Args:
            songs: Songs to queue.
            shuffle: Queue the songs in random order.
        """
        self._logger.debug("Playing %d songs (shuffle=%s)", len(songs), shuffle)
        await self._transport.async_call(METHOD_PLAYLIST_CLEAR, {"playlistid": MUSIC_PLAYLIST_ID})

        items = [song.param_id() for song in songs]
        if shuffle:
            random.shuffle(items)

        await self._transport.async_call(
            METHOD_PLAYLIST_ADD, {"playlistid": MUSIC_PLAYLIST_ID, "item": items}
        )
        return await self._transport.async_call(
            METHOD_PLAYER_OPEN,
            {"item": {"playlistid": MUSIC_PLAYLIST_ID}, "options": {"repeat": "all"}},
        )

    async def async_start_addon(self, addon: Addon) -> Any:
        """Execute an addon."""
        self._logger.debug("Starting addon %s", addon)
        return await self._transport.async_call(METHOD_EXECUTE_ADDON, addon.param_id())

    async def async_set_party_mode(self) -> Any:
        """Start music party mode."""
        self._logger.debug("Starting party mode")
        return await self._transport.async_call(
            METHOD_PLAYER_OPEN, {"item": {"partymode": "music"}}
        )

    async def async_next_or_previous(self, direction: str) -> Any:
        """Skip to the next or previous item of the active player.

        Args:
            direction: ``next`` or ``previous``.

        Raises:
            ValueError: If direction is not ``next`` or ``previous``.
        """
        if direction not in (DIRECTION_NEXT, DIRECTION_PREVIOUS):
            raise ValueError(f"Invalid direction: {direction}")
        self._logger.debug("Going to %s item", direction)
        player_id = await self._async_active_player_id()
        if player_id is None:
            return None
        return await self._transport.async_call(
            METHOD_PLAYER_GOTO, {"playerid": player_id, "to": direction}
        )

    async def async_pause_resume(self) -> Any:
        """Toggle pause on the active player."""
        self._logger.debug("Toggling pause")
        player_id = await self._async_active_player_id()
        if player_id is None:
            return None
        return await self._transport.async_call(METHOD_PLAYER_PLAY_PAUSE, {"playerid": player_id})

    async def async_stop(self) -> Any:
        """Stop the active player."""
        self._logger.debug("Stopping playback")
        player_id = await self._async_active_player_id()
        if player_id is None:
            return None
        return await self._transport.async_call(METHOD_PLAYER_STOP, {"playerid": player_id})

    async def async_set_subtitle(self, enabled: bool) -> Any:
        """Turn subtitles of the active player on or off."""
        self._logger.debug("Setting subtitles %s", "on" if enabled else "off")
        player_id = await self._async_active_player_id()
        if player_id is None:
            return None
        return await self._transport.async_call(
            METHOD_PLAYER_SET_SUBTITLE,
            {"playerid": player_id, "subtitle": "on" if enabled else "off"},
        )

    async def async_is_playing(self, media_type: str | None = None) -> bool:
        """Return True if a player is active.

        Args:
            media_type: Only count a player whose current item is of this
                type (``movie``, ``episode`` or ``song``).
        """
        player_id = await self._async_active_player_id()
        if player_id is None:
            return False
        if media_type is None:
            return True
        wanted = ITEM_TYPE_ALIASES.get(media_type.lower())
        if wanted is None:
            return False
        result = await self._transport.async_call(METHOD_PLAYER_GET_ITEM, {"playerid": player_id})
        item_type = str((result or {}).get("item", {}).get("type", "")).lower()
        return ITEM_TYPE_ALIASES.get(item_type) == wanted

    # -------------------------------------------------------------------------
    # Application
    # -------------------------------------------------------------------------

    async def async_set_mute(self, muted: bool) -> Any:
        """Mute or unmute Kodi."""
        self._logger.debug("Setting mute %s", muted)
        return await self._transport.async_call(METHOD_SET_MUTE, {"mute": muted})

    async def async_set_volume(self, volume: int) -> Any:
        """Set the volume (0-100)."""
        self._logger.debug("Setting volume %d", volume)
        return await self._transport.async_call(METHOD_SET_VOLUME, {"volume": volume})

    # -------------------------------------------------------------------------
    # System
    # -------------------------------------------------------------------------

    async def async_shutdown(self) -> Any:
        """Shut the Kodi host down."""
        self._logger.debug("Shutting down")
        return await self._transport.async_call(METHOD_SYSTEM_SHUTDOWN)

    async def async_reboot(self) -> Any:
        """Reboot the Kodi host."""
        self._logger.debug("Rebooting")
        return await self._transport.async_call(METHOD_SYSTEM_REBOOT)

    async def async_hibernate(self) -> Any:
        """Hibernate the Kodi host."""
        self._logger.debug("Hibernating")
        return await self._transport.async_call(METHOD_SYSTEM_HIBERNATE)


__all__ = ["KodiClient"]
