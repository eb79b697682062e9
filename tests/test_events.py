"""Tests for domain events and their dispatcher."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from kodimedia.events import EventType, KodiEvent, KodiEventDispatcher
from kodimedia.models import Episode, Movie, Song


class TestKodiEvent:
    """Tests for KodiEvent."""

    def test_media_event_flow(self) -> None:
        """Test media events expose their item's trigger arguments."""
        event = KodiEvent(EventType.SONG_START, Song(id=1, title="Airbag", artist="Radiohead"))

        assert event.param_flow() == {"artist": "Radiohead", "song_title": "Airbag"}

    def test_plain_event_flow(self) -> None:
        """Test events without an item have no trigger arguments."""
        assert KodiEvent(EventType.PAUSE).param_flow() == {}

    @pytest.mark.parametrize(
        ("event_type", "item"),
        [
            (EventType.MOVIE_START, None),
            (EventType.MOVIE_STOP, Song(id=1, title="Airbag")),
            (EventType.EPISODE_START, Movie(id=1, title="Up")),
            (EventType.PLAY, Movie(id=1, title="Up")),
        ],
    )
    def test_item_must_match_type(self, event_type: EventType, item: object) -> None:
        """Test events reject items of the wrong kind."""
        with pytest.raises(ValueError):
            KodiEvent(event_type, item)  # type: ignore[arg-type]

    def test_episode_event(self) -> None:
        """Test an episode event accepts an episode."""
        episode = Episode(id=2, title="Descenso", show_title="Narcos")

        assert KodiEvent(EventType.EPISODE_STOP, episode).item is episode


class TestKodiEventDispatcher:
    """Tests for KodiEventDispatcher."""

    def test_fire_reaches_all_listeners(self) -> None:
        """Test every listener receives the event."""
        dispatcher = KodiEventDispatcher()
        first = MagicMock()
        second = MagicMock()
        dispatcher.add_listener(first)
        dispatcher.add_listener(second)

        dispatcher.fire(KodiEvent(EventType.WAKE))

        first.assert_called_once_with(KodiEvent(EventType.WAKE))
        second.assert_called_once_with(KodiEvent(EventType.WAKE))

    def test_filtered_listener(self) -> None:
        """Test listeners can restrict the event types they receive."""
        dispatcher = KodiEventDispatcher()
        listener = MagicMock()
        dispatcher.add_listener(listener, [EventType.STOP])

        dispatcher.fire(KodiEvent(EventType.PLAY))
        dispatcher.fire(KodiEvent(EventType.STOP))

        listener.assert_called_once_with(KodiEvent(EventType.STOP))

    def test_remove_listener(self) -> None:
        """Test removed listeners are no longer called."""
        dispatcher = KodiEventDispatcher()
        listener = MagicMock()
        remove = dispatcher.add_listener(listener)

        remove()
        remove()
        dispatcher.fire(KodiEvent(EventType.PLAY))

        listener.assert_not_called()

    def test_failing_listener_isolated(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test a failing listener is logged and others still run."""
        dispatcher = KodiEventDispatcher()
        listener = MagicMock()
        dispatcher.add_listener(MagicMock(side_effect=RuntimeError("bug")))
        dispatcher.add_listener(listener)

        with caplog.at_level(logging.ERROR):
            dispatcher.fire(KodiEvent(EventType.REBOOT))

        listener.assert_called_once()
        assert "Error in listener for reboot event" in caplog.text
