"""Domain events emitted by a Kodi session."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import StrEnum

from .models import Episode, MediaItem, Movie, Song

_LOGGER = logging.getLogger(__name__)


class EventType(StrEnum):
    """Domain events an automation layer can subscribe to."""

    PLAY = "play"
    PAUSE = "pause"
    RESUME = "resume"
    STOP = "stop"
    MOVIE_START = "movie_start"
    MOVIE_STOP = "movie_stop"
    EPISODE_START = "episode_start"
    EPISODE_STOP = "episode_stop"
    SONG_START = "song_start"
    SHUTDOWN = "shutdown"
    HIBERNATE = "hibernate"
    REBOOT = "reboot"
    WAKE = "wake"
    SCREENSAVER_ON = "screensaver_on"
    SCREENSAVER_OFF = "screensaver_off"
    RECONNECTED = "reconnected"


# Event types that always carry a media item, and the item class they carry
MEDIA_EVENT_TYPES: dict[EventType, type] = {
    EventType.MOVIE_START: Movie,
    EventType.MOVIE_STOP: Movie,
    EventType.EPISODE_START: Episode,
    EventType.EPISODE_STOP: Episode,
    EventType.SONG_START: Song,
}


@dataclass(frozen=True, slots=True)
class KodiEvent:
    """A single domain event.

    Attributes:
        type: What happened.
        item: The media item for movie/episode/song events, None otherwise.
    """

    type: EventType
    item: MediaItem | None = None

    def __post_init__(self) -> None:
        expected = MEDIA_EVENT_TYPES.get(self.type)
        if expected is None:
            if self.item is not None:
                raise ValueError(f"{self.type} events carry no media item")
        elif not isinstance(self.item, expected):
            raise ValueError(f"{self.type} events require a {expected.__name__}")

    def param_flow(self) -> dict[str, str]:
        """Return the trigger arguments for this event."""
        if self.item is None:
            return {}
        return self.item.param_flow()


type EventCallback = Callable[[KodiEvent], None]


class KodiEventDispatcher:
    """Fan domain events out to subscribed callbacks.

    Listeners may subscribe to every event or to a subset of event types.
    A failing listener is logged and does not affect the others.
    """

    def __init__(self, logger: logging.Logger | logging.LoggerAdapter | None = None) -> None:
        """Initialize the dispatcher.

        Args:
            logger: Logger to report listener failures on.
        """
        self._logger = logger or _LOGGER
        self._listeners: list[tuple[EventCallback, frozenset[EventType] | None]] = []

    def add_listener(
        self,
        callback: EventCallback,
        event_types: Iterable[EventType] | None = None,
    ) -> Callable[[], None]:
        """Subscribe to events.

        Args:
            callback: Called with every matching event.
            event_types: Restrict delivery to these types. All types if None.

        Returns:
            Function that removes the subscription.
        """
        entry = (callback, frozenset(event_types) if event_types is not None else None)
        self._listeners.append(entry)

        def remove_listener() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return remove_listener

    def fire(self, event: KodiEvent) -> None:
        """Deliver an event to every matching listener."""
        self._logger.debug("Firing %s event", event.type)
        for callback, event_types in list(self._listeners):
            if event_types is not None and event.type not in event_types:
                continue
            try:
                callback(event)
            except Exception:
                self._logger.exception("Error in listener for %s event", event.type)


__all__ = ["EventCallback", "EventType", "KodiEvent", "KodiEventDispatcher"]
