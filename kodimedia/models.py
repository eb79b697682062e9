"""Data models for the Kodi JSON-RPC client."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class MusicSearchType(StrEnum):
    """What a music query is matched against."""

    ARTIST = "ARTIST"
    ALBUM = "ALBUM"


class Availability(StrEnum):
    """Availability of a Kodi session."""

    DISCONNECTED = "disconnected"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True, slots=True)
class Movie:
    """A movie from the video library.

    Attributes:
        id: Kodi movie id.
        title: Display title.
    """

    id: int
    title: str

    def param_id(self) -> dict[str, Any]:
        """Return the parameters that identify this movie to Player.Open."""
        return {"item": {"movieid": self.id}}

    def param_flow(self) -> dict[str, str]:
        """Return the arguments passed to automation triggers."""
        return {"movie_title": self.title}

    def __str__(self) -> str:
        return self.title or "Unknown movie"


@dataclass(frozen=True, slots=True)
class Episode:
    """An episode of a TV show.

    Attributes:
        id: Kodi episode id.
        title: Episode title.
        show_title: Title of the TV show.
        season_no: Season number, or None if unknown.
        episode_no: Episode number within the season, or None if unknown.
    """

    id: int
    title: str
    show_title: str
    season_no: int | None = None
    episode_no: int | None = None

    def param_id(self) -> dict[str, Any]:
        """Return the parameters that identify this episode to Player.Open."""
        return {"item": {"episodeid": self.id}}

    def param_flow(self) -> dict[str, str]:
        """Return the arguments passed to automation triggers."""
        return {
            "tvshow_title": self.show_title,
            "episode_title": self.title,
            "season": "" if self.season_no is None else str(self.season_no),
            "episode": "" if self.episode_no is None else str(self.episode_no),
        }

    def __str__(self) -> str:
        return f"{self.show_title} - S{self.season_no}E{self.episode_no} - {self.title}"


@dataclass(frozen=True, slots=True)
class Song:
    """A song from the audio library.

    Attributes:
        id: Kodi song id.
        title: Song title.
        artist: First credited artist, or None if unknown.
    """

    id: int
    title: str
    artist: str | None = None

    def param_id(self) -> dict[str, Any]:
        """Return the playlist item for this song."""
        return {"songid": self.id}

    def param_flow(self) -> dict[str, str]:
        """Return the arguments passed to automation triggers."""
        return {"artist": self.artist or "", "song_title": self.title}

    def __str__(self) -> str:
        return f"{self.artist or 'Unknown artist'} - {self.title or 'Unknown song'}"


@dataclass(frozen=True, slots=True)
class Addon:
    """An installed Kodi addon.

    Attributes:
        id: Addon id, e.g. ``plugin.video.netflix``.
        name: Display name.
    """

    id: str
    name: str

    def param_id(self) -> dict[str, Any]:
        """Return the parameters for Addons.ExecuteAddon."""
        return {"addonid": self.id}

    def __str__(self) -> str:
        return self.name or self.id


type MediaItem = Movie | Episode | Song


# =============================================================================
# Merge Functions
# =============================================================================
#
# Notifications carry a terse item description, follow-up lookups return the
# full library record. Every entity is built by preferring the detailed value
# and falling back to the notification value only when the detailed one is
# missing or empty. Zero is a valid season/episode number and is kept.


def _prefer(*values: Any) -> Any:
    """Return the first value that is neither None nor an empty string."""
    for value in values:
        if value is not None and value != "":
            return value
    return None


def _first_artist(value: Any) -> str | None:
    if isinstance(value, list | tuple):
        return _prefer(*value)
    return _prefer(value)


def merge_movie(
    item_id: int | None,
    details: Mapping[str, Any],
    payload: Mapping[str, Any] | None = None,
) -> Movie | None:
    """Build a Movie from library details and a notification item.

    Args:
        item_id: Library id of the movie.
        details: ``moviedetails`` from VideoLibrary.GetMovieDetails.
        payload: Item from the notification or Player.GetItem.

    Returns:
        The Movie, or None if the id or title cannot be resolved.
    """
    payload = payload or {}
    title = _prefer(
        details.get("title"),
        details.get("label"),
        payload.get("title"),
        payload.get("label"),
    )
    if item_id is None or not title:
        return None
    return Movie(id=item_id, title=str(title))


def merge_episode(
    item_id: int | None,
    details: Mapping[str, Any],
    payload: Mapping[str, Any] | None = None,
) -> Episode | None:
    """Build an Episode from library details and a notification item.

    Args:
        item_id: Library id of the episode.
        details: ``episodedetails`` from VideoLibrary.GetEpisodeDetails.
        payload: Item from the notification or Player.GetItem.

    Returns:
        The Episode, or None unless both show title and episode title resolve.
    """
    payload = payload or {}
    show_title = _prefer(details.get("showtitle"), payload.get("showtitle"))
    title = _prefer(
        details.get("title"),
        details.get("label"),
        payload.get("title"),
        payload.get("label"),
    )
    if item_id is None or not show_title or not title:
        return None
    season = _prefer(details.get("season"), payload.get("season"))
    episode = _prefer(details.get("episode"), payload.get("episode"))
    return Episode(
        id=item_id,
        title=str(title),
        show_title=str(show_title),
        season_no=int(season) if season is not None else None,
        episode_no=int(episode) if episode is not None else None,
    )


def merge_song(
    item_id: int | None,
    details: Mapping[str, Any],
    payload: Mapping[str, Any] | None = None,
) -> Song | None:
    """Build a Song from library details and a notification item.

    Args:
        item_id: Library id of the song.
        details: ``songdetails`` from AudioLibrary.GetSongDetails.
        payload: Item from the notification or Player.GetItem.

    Returns:
        The Song, or None if the id or title cannot be resolved.
    """
    payload = payload or {}
    title = _prefer(
        details.get("title"),
        details.get("label"),
        payload.get("title"),
        payload.get("label"),
    )
    if item_id is None or not title:
        return None
    artist = _prefer(_first_artist(details.get("artist")), _first_artist(payload.get("artist")))
    return Song(id=item_id, title=str(title), artist=artist)


__all__ = [
    "Addon",
    "Availability",
    "Episode",
    "MediaItem",
    "Movie",
    "MusicSearchType",
    "Song",
    "merge_episode",
    "merge_movie",
    "merge_song",
]
