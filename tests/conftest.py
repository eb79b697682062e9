"""Fixtures for Kodi client tests."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from kodimedia.events import KodiEvent


class MockTransport:
    """Transport that records handlers and answers calls by method.

    ``responses`` maps a JSON-RPC method to its result. A value may be an
    exception instance (raised) or a callable taking the params.
    """

    def __init__(self, responses: Mapping[str, Any] | None = None) -> None:
        self.responses: dict[str, Any] = dict(responses or {})
        self.notification_handlers: dict[str, list[Callable[[Any], None]]] = {}
        self.event_handlers: dict[str, list[Callable[..., None]]] = {}
        self.async_call = AsyncMock(side_effect=self._respond)
        self.async_disconnect = AsyncMock()
        self.notification = MagicMock(side_effect=self._add_notification)
        self.on = MagicMock(side_effect=self._add_event)
        self.remove_all_listeners = MagicMock(side_effect=self._clear)

    async def _respond(self, method: str, params: Mapping[str, Any] | None = None) -> Any:
        if method not in self.responses:
            return None
        response = self.responses[method]
        if isinstance(response, BaseException):
            raise response
        if callable(response):
            return response(params)
        return response

    def _add_notification(self, method: str, handler: Callable[[Any], None]) -> Callable[[], None]:
        return _register(self.notification_handlers, method, handler)

    def _add_event(self, event: str, handler: Callable[..., None]) -> Callable[[], None]:
        return _register(self.event_handlers, event, handler)

    def _clear(self) -> None:
        self.notification_handlers.clear()
        self.event_handlers.clear()

    def notify(self, method: str, params: Any) -> None:
        """Deliver a push notification to the registered handlers."""
        for handler in list(self.notification_handlers.get(method, [])):
            handler(params)

    def emit(self, event: str, *args: Any) -> None:
        """Fire a connection event (``close``/``error``)."""
        for handler in list(self.event_handlers.get(event, [])):
            handler(*args)

    def methods_called(self) -> list[str]:
        """Return the JSON-RPC methods called, in order."""
        return [call.args[0] for call in self.async_call.call_args_list]


def _register(registry: dict[str, list[Any]], key: str, handler: Any) -> Callable[[], None]:
    registry.setdefault(key, []).append(handler)

    def remove() -> None:
        if handler in registry.get(key, []):
            registry[key].remove(handler)

    return remove


@pytest.fixture
def mock_transport() -> MockTransport:
    """Create a mock transport with no canned responses."""
    return MockTransport()


@pytest.fixture
def captured_events() -> list[KodiEvent]:
    """Return a list that an emit callback can append to."""
    return []


@pytest.fixture
def mock_movies() -> dict[str, Any]:
    """Return a VideoLibrary.GetMovies result."""
    return {
        "movies": [
            {"movieid": 3, "label": "Inception"},
            {"movieid": 12, "label": "Interstellar"},
            {"movieid": 20, "label": "The Prestige"},
        ],
        "limits": {"start": 0, "end": 3, "total": 3},
    }


@pytest.fixture
def mock_tvshows() -> dict[str, Any]:
    """Return a VideoLibrary.GetTVShows result."""
    return {
        "tvshows": [
            {"tvshowid": 43, "label": "Narcos"},
            {"tvshowid": 7, "label": "Breaking Bad"},
        ]
    }
