"""Translation of Kodi push notifications into domain events."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine, Mapping
from typing import Any

from .const import (
    ADDON_PLAYER_ID,
    DEFAULT_PLAYER_ID,
    EPISODE_PROPERTIES,
    ITEM_TYPE_ALIASES,
    ITEM_TYPE_EPISODE,
    ITEM_TYPE_MOVIE,
    ITEM_TYPE_SONG,
    METHOD_GET_EPISODE_DETAILS,
    METHOD_GET_MOVIE_DETAILS,
    METHOD_GET_SONG_DETAILS,
    METHOD_PLAYER_GET_ITEM,
    METHOD_PLAYER_GET_PROPERTIES,
    NOTIFY_GUI_SCREENSAVER_OFF,
    NOTIFY_GUI_SCREENSAVER_ON,
    NOTIFY_PLAYER_ON_PAUSE,
    NOTIFY_PLAYER_ON_PLAY,
    NOTIFY_PLAYER_ON_STOP,
    NOTIFY_SYSTEM_ON_QUIT,
    NOTIFY_SYSTEM_ON_RESTART,
    NOTIFY_SYSTEM_ON_SLEEP,
    NOTIFY_SYSTEM_ON_WAKE,
    SONG_PROPERTIES,
    SONG_RESUME_PERCENTAGE,
    VIDEO_RESUME_PERCENTAGE,
    KodiNotification,
)
from .events import EventType, KodiEvent
from .exceptions import KodiError
from .log import KodiLogger
from .models import merge_episode, merge_movie, merge_song
from .websocket import KodiTransport

_LOGGER = logging.getLogger(__name__)

# Failures of a follow-up lookup that suppress the fine-grained event
LOOKUP_ERRORS = (KodiError, KeyError, TypeError, ValueError, IndexError)

# Notifications that map one-to-one onto an event without any lookup
_DIRECT_EVENTS: dict[str, EventType] = {
    NOTIFY_PLAYER_ON_PAUSE: EventType.PAUSE,
    NOTIFY_SYSTEM_ON_QUIT: EventType.SHUTDOWN,
    NOTIFY_SYSTEM_ON_SLEEP: EventType.HIBERNATE,
    NOTIFY_SYSTEM_ON_RESTART: EventType.REBOOT,
    NOTIFY_SYSTEM_ON_WAKE: EventType.WAKE,
    NOTIFY_GUI_SCREENSAVER_ON: EventType.SCREENSAVER_ON,
    NOTIFY_GUI_SCREENSAVER_OFF: EventType.SCREENSAVER_OFF,
}


class KodiNotificationInterpreter:
    """Turn player and system notifications into domain events.

    Coarse events (``play``, ``pause``, ``stop``) are emitted as soon as the
    notification arrives. Fine-grained events (``movie_start``,
    ``episode_stop``, ...) need follow-up lookups and are emitted from a
    background task once those complete, so they always follow their coarse
    event. A lookup that fails or returns incomplete data suppresses the
    fine-grained event and nothing else.

    Separate notifications are processed concurrently; their events are not
    ordered relative to each other.
    """

    def __init__(
        self,
        transport: KodiTransport,
        emit: Callable[[KodiEvent], None],
        logger: KodiLogger | None = None,
    ) -> None:
        """Initialize the interpreter.

        Args:
            transport: Connected transport to subscribe to and query.
            emit: Called with every domain event.
            logger: Logger to use instead of the module logger.
        """
        self._transport = transport
        self._emit = emit
        self._logger = logger or _LOGGER
        self._unsubscribers: list[Callable[[], None]] = []
        self._tasks: set[asyncio.Task[None]] = set()

    def attach(self) -> None:
        """Subscribe to the transport's notifications."""
        if self._unsubscribers:
            return
        subscriptions: dict[str, Callable[[Any], None]] = {
            NOTIFY_PLAYER_ON_PLAY: self._on_play,
            NOTIFY_PLAYER_ON_STOP: self._on_stop,
        }
        for method, event_type in _DIRECT_EVENTS.items():
            subscriptions[method] = self._direct_handler(method, event_type)

        for method, handler in subscriptions.items():
            self._unsubscribers.append(self._transport.notification(method, handler))

    def detach(self) -> None:
        """Unsubscribe and cancel lookups still in flight."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        for task in self._tasks:
            task.cancel()
        self._tasks.clear()

    async def async_wait_idle(self) -> None:
        """Wait until every in-flight lookup has finished."""
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    # -------------------------------------------------------------------------
    # Transport handlers
    # -------------------------------------------------------------------------

    def _direct_handler(self, method: str, event_type: EventType) -> Callable[[Any], None]:
        def handle(payload: Any) -> None:
            self._logger.debug("%s received", method)
            self._fire(KodiEvent(event_type))

        return handle

    def _on_play(self, payload: KodiNotification) -> None:
        self._spawn(self.async_handle_play(payload))

    def _on_stop(self, payload: KodiNotification) -> None:
        self._spawn(self.async_handle_stop(payload))

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        err = task.exception()
        if err is not None:
            self._logger.error("Error handling notification", exc_info=err)

    def _fire(self, event: KodiEvent) -> None:
        self._emit(event)

    # -------------------------------------------------------------------------
    # Player.OnPlay
    # -------------------------------------------------------------------------

    async def async_handle_play(self, payload: KodiNotification) -> None:
        """Handle Player.OnPlay.

        Emits ``play``, then either ``resume`` or one of ``movie_start``,
        ``episode_start`` and ``song_start``.
        """
        data = _notification_data(payload)
        payload_item = _mapping(data.get("item"))
        player_id = _mapping(data.get("player")).get("playerid", DEFAULT_PLAYER_ID)
        if player_id == ADDON_PLAYER_ID:
            player_id = DEFAULT_PLAYER_ID

        self._logger.debug("Player.OnPlay received for player %s", player_id)
        self._fire(KodiEvent(EventType.PLAY))

        try:
            properties = await self._transport.async_call(
                METHOD_PLAYER_GET_PROPERTIES,
                {"playerid": player_id, "properties": ["percentage"]},
            )
            percentage = float(properties["percentage"])
        except LOOKUP_ERRORS as err:
            self._logger.debug("Could not read playback percentage: %s", err)
            return

        if _item_type(payload_item) == ITEM_TYPE_SONG:
            threshold = SONG_RESUME_PERCENTAGE
        else:
            threshold = VIDEO_RESUME_PERCENTAGE
        if percentage >= threshold:
            self._fire(KodiEvent(EventType.RESUME))
            return

        try:
            event = await self._async_lookup_started(player_id, payload_item)
        except LOOKUP_ERRORS as err:
            self._logger.debug("Could not look up started item: %s", err)
            return

        if event is None:
            self._logger.debug("Suppressed start event for %s", payload_item)
            return
        self._fire(event)

    async def _async_lookup_started(
        self, player_id: int, payload_item: Mapping[str, Any]
    ) -> KodiEvent | None:
        result = await self._transport.async_call(METHOD_PLAYER_GET_ITEM, {"playerid": player_id})
        item = _mapping(result["item"])
        fallback = _combine(payload_item, item)
        item_type = _item_type(item)
        item_id = _library_id(item.get("id"), payload_item.get("id"))
        if item_id is None:
            return None

        if item_type == ITEM_TYPE_MOVIE:
            details = await self._async_details(
                METHOD_GET_MOVIE_DETAILS, "movieid", item_id, ["title"], "moviedetails"
            )
            movie = merge_movie(item_id, details, fallback)
            return KodiEvent(EventType.MOVIE_START, movie) if movie else None

        if item_type == ITEM_TYPE_EPISODE:
            details = await self._async_details(
                METHOD_GET_EPISODE_DETAILS,
                "episodeid",
                item_id,
                EPISODE_PROPERTIES,
                "episodedetails",
            )
            episode = merge_episode(item_id, details, fallback)
            return KodiEvent(EventType.EPISODE_START, episode) if episode else None

        if item_type == ITEM_TYPE_SONG:
            details = await self._async_details(
                METHOD_GET_SONG_DETAILS, "songid", item_id, SONG_PROPERTIES, "songdetails"
            )
            song = merge_song(item_id, details, fallback)
            return KodiEvent(EventType.SONG_START, song) if song else None

        return None

    # -------------------------------------------------------------------------
    # Player.OnStop
    # -------------------------------------------------------------------------

    async def async_handle_stop(self, payload: KodiNotification) -> None:
        """Handle Player.OnStop.

        Emits ``stop``; when the item played to its end also ``movie_stop``
        or ``episode_stop``.
        """
        data = _notification_data(payload)
        self._logger.debug("Player.OnStop received (end=%s)", data.get("end"))
        self._fire(KodiEvent(EventType.STOP))

        if data.get("end") is not True:
            return

        payload_item = _mapping(data.get("item"))
        item_id = _library_id(payload_item.get("id"))
        if item_id is None:
            return

        try:
            event = await self._async_lookup_ended(_item_type(payload_item), item_id, payload_item)
        except LOOKUP_ERRORS as err:
            self._logger.debug("Could not look up ended item: %s", err)
            return

        if event is None:
            self._logger.debug("Suppressed stop event for %s", payload_item)
            return
        self._fire(event)

    async def _async_lookup_ended(
        self, item_type: str | None, item_id: int, payload_item: Mapping[str, Any]
    ) -> KodiEvent | None:
        if item_type == ITEM_TYPE_EPISODE:
            details = await self._async_details(
                METHOD_GET_EPISODE_DETAILS,
                "episodeid",
                item_id,
                EPISODE_PROPERTIES,
                "episodedetails",
            )
            episode = merge_episode(item_id, details, payload_item)
            return KodiEvent(EventType.EPISODE_STOP, episode) if episode else None

        if item_type == ITEM_TYPE_MOVIE:
            details = await self._async_details(
                METHOD_GET_MOVIE_DETAILS, "movieid", item_id, ["title"], "moviedetails"
            )
            movie = merge_movie(item_id, details, payload_item)
            return KodiEvent(EventType.MOVIE_STOP, movie) if movie else None

        return None

    async def _async_details(
        self,
        method: str,
        id_key: str,
        item_id: int,
        properties: list[str],
        result_key: str,
    ) -> Mapping[str, Any]:
        result = await self._transport.async_call(
            method, {id_key: item_id, "properties": properties}
        )
        return _mapping(result[result_key])


def _notification_data(payload: Any) -> Mapping[str, Any]:
    """Return the ``data`` member of a notification's params."""
    return _mapping(_mapping(payload).get("data"))


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _item_type(item: Mapping[str, Any]) -> str | None:
    return ITEM_TYPE_ALIASES.get(str(item.get("type", "")).lower())


def _library_id(*candidates: Any) -> int | None:
    """Return the first usable library id; negative ids mark non-library items."""
    for candidate in candidates:
        if isinstance(candidate, int) and not isinstance(candidate, bool) and candidate >= 0:
            return candidate
    return None


def _combine(payload_item: Mapping[str, Any], item: Mapping[str, Any]) -> dict[str, Any]:
    """Overlay non-empty Player.GetItem fields on the notification item."""
    combined = dict(payload_item)
    combined.update({key: value for key, value in item.items() if value not in (None, "")})
    return combined


__all__ = ["KodiNotificationInterpreter"]
