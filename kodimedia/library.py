"""Resolution of free-text queries to Kodi library items."""

from __future__ import annotations

import logging
from typing import Any, cast

from .const import (
    METHOD_GET_ADDONS,
    METHOD_GET_ALBUMS,
    METHOD_GET_ARTISTS,
    METHOD_GET_EPISODES,
    METHOD_GET_MOVIES,
    METHOD_GET_SONGS,
    METHOD_GET_TVSHOWS,
    SONG_PROPERTIES,
    UNWATCHED_EPISODE_PROPERTIES,
    KodiAddon,
    KodiEpisode,
    KodiMovie,
    KodiSong,
    KodiTvShow,
)
from .exceptions import (
    AddonNotFoundError,
    AlbumNotFoundError,
    ArtistNotFoundError,
    MovieNotFoundError,
    NoAddonsInstalledError,
    NoMoviesInLibraryError,
    NoMusicInLibraryError,
    NoTvShowsInLibraryError,
    NoUnwatchedEpisodeError,
    SeriesNotFoundError,
)
from .log import KodiLogger
from .matching import fuzzy_resolve
from .models import Addon, Episode, Movie, MusicSearchType, Song, merge_song
from .websocket import KodiTransport

_LOGGER = logging.getLogger(__name__)

# Per search type: listing method, result key, label key, id key, not-found error
_MUSIC_SEARCH: dict[MusicSearchType, tuple[str, str, str, str, type[Exception]]] = {
    MusicSearchType.ARTIST: (
        METHOD_GET_ARTISTS,
        "artists",
        "artist",
        "artistid",
        ArtistNotFoundError,
    ),
    MusicSearchType.ALBUM: (
        METHOD_GET_ALBUMS,
        "albums",
        "label",
        "albumid",
        AlbumNotFoundError,
    ),
}


class KodiLibrary:
    """Look up movies, episodes, music and addons by approximate name.

    Every search lists the relevant part of the library afresh and keeps no
    state between calls, so searches may run concurrently.
    """

    def __init__(self, transport: KodiTransport, logger: KodiLogger | None = None) -> None:
        """Initialize the library resolver.

        Args:
            transport: Connected transport to issue listing calls on.
            logger: Logger to use instead of the module logger.
        """
        self._transport = transport
        self._logger = logger or _LOGGER

    async def async_search_movie(self, title: str) -> Movie:
        """Find the movie best matching ``title``.

        Raises:
            NoMoviesInLibraryError: The movie library is empty.
            MovieNotFoundError: No movie is similar enough.
        """
        self._logger.debug("Searching movie %r", title)
        result = await self._transport.async_call(METHOD_GET_MOVIES, {})
        movies = cast(list[KodiMovie], _listing(result, "movies"))
        if not movies:
            raise NoMoviesInLibraryError(title)

        match = fuzzy_resolve(title, movies, "label")
        if match is None:
            raise MovieNotFoundError(title)
        return Movie(id=match["movieid"], title=match["label"])

    async def async_search_music(self, search_type: MusicSearchType, query: str) -> list[Song]:
        """Return the songs of the artist or album best matching ``query``.

        Raises:
            NoMusicInLibraryError: No artists/albums in the library.
            ArtistNotFoundError: No artist is similar enough.
            AlbumNotFoundError: No album is similar enough.
        """
        search_type = MusicSearchType(search_type)
        method, result_key, label_key, id_key, not_found = _MUSIC_SEARCH[search_type]
        self._logger.debug("Searching music by %s %r", search_type, query)

        result = await self._transport.async_call(method, {})
        entries = _listing(result, result_key)
        if not entries:
            raise NoMusicInLibraryError(query)

        match = fuzzy_resolve(query, entries, label_key)
        if match is None:
            raise not_found(query)

        songs_result = await self._transport.async_call(
            METHOD_GET_SONGS,
            {"filter": {id_key: match[id_key]}, "properties": SONG_PROPERTIES},
        )
        songs: list[Song] = []
        for entry in cast(list[KodiSong], _listing(songs_result, "songs")):
            song = merge_song(entry.get("songid"), entry)
            if song is not None:
                songs.append(song)
        return songs

    async def async_get_latest_unwatched_episode(self, show_title: str) -> Episode:
        """Return the first unwatched episode of the show best matching ``show_title``.

        Episodes are requested in ascending episode order and re-sorted by
        season and episode locally before picking the first with a zero
        play count.

        Raises:
            NoTvShowsInLibraryError: The TV show library is empty.
            SeriesNotFoundError: No show is similar enough.
            NoUnwatchedEpisodeError: Every episode has been watched.
        """
        self._logger.debug("Searching latest unwatched episode of %r", show_title)
        result = await self._transport.async_call(METHOD_GET_TVSHOWS, {})
        shows = cast(list[KodiTvShow], _listing(result, "tvshows"))
        if not shows:
            raise NoTvShowsInLibraryError(show_title)

        show = fuzzy_resolve(show_title, shows, "label")
        if show is None:
            raise SeriesNotFoundError(show_title)

        episodes_result = await self._transport.async_call(
            METHOD_GET_EPISODES,
            {
                "tvshowid": show["tvshowid"],
                "properties": UNWATCHED_EPISODE_PROPERTIES,
                "sort": {"order": "ascending", "method": "episode", "ignorearticle": True},
            },
        )
        episodes = sorted(
            cast(list[KodiEpisode], _listing(episodes_result, "episodes")),
            key=lambda entry: (entry.get("season") or 0, entry.get("episode") or 0),
        )
        for entry in episodes:
            if entry.get("playcount") != 0 or entry.get("episodeid") is None:
                continue
            return Episode(
                id=entry["episodeid"],
                title=entry.get("title") or entry.get("label") or "",
                show_title=entry.get("showtitle") or show.get("label") or "",
                season_no=entry.get("season"),
                episode_no=entry.get("episode"),
            )
        raise NoUnwatchedEpisodeError(show_title)

    async def async_search_addon(self, name: str) -> Addon:
        """Find the installed addon best matching ``name``.

        Raises:
            NoAddonsInstalledError: Kodi reports no addons.
            AddonNotFoundError: No addon is similar enough.
        """
        self._logger.debug("Searching addon %r", name)
        result = await self._transport.async_call(METHOD_GET_ADDONS, {"properties": ["name"]})
        addons = cast(list[KodiAddon], _listing(result, "addons"))
        if not addons:
            raise NoAddonsInstalledError(name)

        match = fuzzy_resolve(name, addons, "name")
        if match is None:
            raise AddonNotFoundError(name)
        return Addon(id=match["addonid"], name=match.get("name") or match["addonid"])


def _listing(result: Any, key: str) -> list[dict[str, Any]]:
    """Return the list under ``key`` of a listing result, empty if absent."""
    if not isinstance(result, dict):
        return []
    entries = result.get(key)
    if not isinstance(entries, list):
        return []
    return [entry for entry in entries if isinstance(entry, dict)]


__all__ = ["KodiLibrary"]
