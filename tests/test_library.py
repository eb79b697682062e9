"""Tests for the Kodi library resolver."""

from __future__ import annotations

from typing import Any

import pytest

from kodimedia.exceptions import (
    AddonNotFoundError,
    AlbumNotFoundError,
    ArtistNotFoundError,
    KodiRpcError,
    MovieNotFoundError,
    NoAddonsInstalledError,
    NoMoviesInLibraryError,
    NoMusicInLibraryError,
    NoTvShowsInLibraryError,
    NoUnwatchedEpisodeError,
    SeriesNotFoundError,
)
from kodimedia.library import KodiLibrary
from kodimedia.models import Addon, Episode, Movie, MusicSearchType, Song

from .conftest import MockTransport


class TestSearchMovie:
    """Tests for movie search."""

    @pytest.mark.asyncio
    async def test_typo_resolves(
        self, mock_transport: MockTransport, mock_movies: dict[str, Any]
    ) -> None:
        """Test a one-letter typo resolves to the right movie."""
        mock_transport.responses["VideoLibrary.GetMovies"] = mock_movies
        library = KodiLibrary(mock_transport)

        movie = await library.async_search_movie("interstelar")

        assert movie == Movie(id=12, title="Interstellar")

    @pytest.mark.asyncio
    async def test_empty_library(self, mock_transport: MockTransport) -> None:
        """Test an empty library fails with NoMoviesInLibraryError."""
        mock_transport.responses["VideoLibrary.GetMovies"] = {"limits": {"total": 0}}
        library = KodiLibrary(mock_transport)

        with pytest.raises(NoMoviesInLibraryError) as exc_info:
            await library.async_search_movie("Interstellar")

        assert exc_info.value.translation_key == "no_movies_in_library"
        assert exc_info.value.query == "Interstellar"

    @pytest.mark.asyncio
    async def test_not_found(
        self, mock_transport: MockTransport, mock_movies: dict[str, Any]
    ) -> None:
        """Test an unrelated title fails with MovieNotFoundError."""
        mock_transport.responses["VideoLibrary.GetMovies"] = mock_movies
        library = KodiLibrary(mock_transport)

        with pytest.raises(MovieNotFoundError):
            await library.async_search_movie("Toy Story")

    @pytest.mark.asyncio
    async def test_punctuation_query_skips_unlabelled_entries(
        self, mock_transport: MockTransport
    ) -> None:
        """Test a punctuation-only query fails cleanly against unlabelled movies."""
        mock_transport.responses["VideoLibrary.GetMovies"] = {
            "movies": [{"movieid": 7}, {"movieid": 8, "label": "..."}]
        }
        library = KodiLibrary(mock_transport)

        with pytest.raises(MovieNotFoundError):
            await library.async_search_movie("???")

    @pytest.mark.asyncio
    async def test_rpc_error_propagates(self, mock_transport: MockTransport) -> None:
        """Test transport failures reach the caller unchanged."""
        mock_transport.responses["VideoLibrary.GetMovies"] = KodiRpcError(
            "VideoLibrary.GetMovies", -32602, "Invalid params"
        )
        library = KodiLibrary(mock_transport)

        with pytest.raises(KodiRpcError):
            await library.async_search_movie("Up")


class TestSearchMusic:
    """Tests for music search."""

    @pytest.mark.asyncio
    async def test_artist_songs(self, mock_transport: MockTransport) -> None:
        """Test an artist query returns the artist's songs."""
        mock_transport.responses.update(
            {
                "AudioLibrary.GetArtists": {
                    "artists": [
                        {"artistid": 4, "artist": "Radiohead"},
                        {"artistid": 9, "artist": "Portishead"},
                    ]
                },
                "AudioLibrary.GetSongs": {
                    "songs": [
                        {"songid": 31, "title": "Airbag", "artist": ["Radiohead"]},
                        {"songid": 32, "title": "Lucky", "artist": ["Radiohead"]},
                    ]
                },
            }
        )
        library = KodiLibrary(mock_transport)

        songs = await library.async_search_music(MusicSearchType.ARTIST, "radiohed")

        assert songs == [
            Song(id=31, title="Airbag", artist="Radiohead"),
            Song(id=32, title="Lucky", artist="Radiohead"),
        ]
        params = mock_transport.async_call.call_args_list[-1].args[1]
        assert params["filter"] == {"artistid": 4}

    @pytest.mark.asyncio
    async def test_album_filters_by_album_id(self, mock_transport: MockTransport) -> None:
        """Test an album query filters songs by the album id."""
        mock_transport.responses.update(
            {
                "AudioLibrary.GetAlbums": {
                    "albums": [
                        {"albumid": 17, "label": "OK Computer"},
                        {"albumid": 18, "label": "Kid A"},
                    ]
                },
                "AudioLibrary.GetSongs": {"songs": [{"songid": 31, "title": "Airbag"}]},
            }
        )
        library = KodiLibrary(mock_transport)

        songs = await library.async_search_music(MusicSearchType.ALBUM, "ok computer")

        assert songs == [Song(id=31, title="Airbag")]
        assert mock_transport.methods_called() == [
            "AudioLibrary.GetAlbums",
            "AudioLibrary.GetSongs",
        ]
        params = mock_transport.async_call.call_args_list[-1].args[1]
        assert params["filter"] == {"albumid": 17}

    @pytest.mark.asyncio
    async def test_accepts_plain_string_type(self, mock_transport: MockTransport) -> None:
        """Test the search type may be given by its wire name."""
        mock_transport.responses.update(
            {
                "AudioLibrary.GetAlbums": {"albums": [{"albumid": 18, "label": "Kid A"}]},
                "AudioLibrary.GetSongs": {"songs": []},
            }
        )
        library = KodiLibrary(mock_transport)

        assert await library.async_search_music("ALBUM", "kid a") == []  # type: ignore[arg-type]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("search_type", [MusicSearchType.ARTIST, MusicSearchType.ALBUM])
    async def test_empty_library(
        self, mock_transport: MockTransport, search_type: MusicSearchType
    ) -> None:
        """Test an empty music library fails with NoMusicInLibraryError."""
        library = KodiLibrary(mock_transport)

        with pytest.raises(NoMusicInLibraryError):
            await library.async_search_music(search_type, "anything")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("search_type", "method", "listing", "error"),
        [
            (
                MusicSearchType.ARTIST,
                "AudioLibrary.GetArtists",
                {"artists": [{"artistid": 4, "artist": "Radiohead"}]},
                ArtistNotFoundError,
            ),
            (
                MusicSearchType.ALBUM,
                "AudioLibrary.GetAlbums",
                {"albums": [{"albumid": 17, "label": "OK Computer"}]},
                AlbumNotFoundError,
            ),
        ],
    )
    async def test_not_found(
        self,
        mock_transport: MockTransport,
        search_type: MusicSearchType,
        method: str,
        listing: dict[str, Any],
        error: type[Exception],
    ) -> None:
        """Test a miss fails with the search type's not-found error."""
        mock_transport.responses[method] = listing
        library = KodiLibrary(mock_transport)

        with pytest.raises(error):
            await library.async_search_music(search_type, "Beethoven")

        assert "AudioLibrary.GetSongs" not in mock_transport.methods_called()


class TestLatestUnwatchedEpisode:
    """Tests for the first unwatched episode lookup."""

    @pytest.mark.asyncio
    async def test_first_unwatched(
        self, mock_transport: MockTransport, mock_tvshows: dict[str, Any]
    ) -> None:
        """Test the earliest episode with zero play count is chosen."""
        mock_transport.responses.update(
            {
                "VideoLibrary.GetTVShows": mock_tvshows,
                "VideoLibrary.GetEpisodes": {
                    "episodes": [
                        {"episodeid": 1, "episode": 1, "playcount": 1},
                        {"episodeid": 2, "episode": 2, "playcount": 0},
                        {"episodeid": 3, "episode": 3, "playcount": 0},
                    ]
                },
            }
        )
        library = KodiLibrary(mock_transport)

        episode = await library.async_get_latest_unwatched_episode("narcos")

        assert episode.id == 2
        assert episode.show_title == "Narcos"
        params = mock_transport.async_call.call_args_list[-1].args[1]
        assert params["tvshowid"] == 43
        assert params["sort"]["order"] == "ascending"
        assert params["sort"]["method"] == "episode"
        assert "playcount" in params["properties"]

    @pytest.mark.asyncio
    async def test_sorted_locally_by_season_and_episode(
        self, mock_transport: MockTransport, mock_tvshows: dict[str, Any]
    ) -> None:
        """Test an unsorted listing still yields the earliest unwatched episode."""
        mock_transport.responses.update(
            {
                "VideoLibrary.GetTVShows": mock_tvshows,
                "VideoLibrary.GetEpisodes": {
                    "episodes": [
                        {"episodeid": 21, "season": 2, "episode": 1, "playcount": 0,
                         "title": "Cambalache", "showtitle": "Narcos"},
                        {"episodeid": 13, "season": 1, "episode": 3, "playcount": 0,
                         "title": "The Men of Always", "showtitle": "Narcos"},
                        {"episodeid": 12, "season": 1, "episode": 2, "playcount": 2,
                         "title": "The Sword of Simón Bolívar", "showtitle": "Narcos"},
                    ]
                },
            }
        )
        library = KodiLibrary(mock_transport)

        episode = await library.async_get_latest_unwatched_episode("Narcos")

        assert episode == Episode(
            id=13, title="The Men of Always", show_title="Narcos", season_no=1, episode_no=3
        )

    @pytest.mark.asyncio
    async def test_all_watched(
        self, mock_transport: MockTransport, mock_tvshows: dict[str, Any]
    ) -> None:
        """Test a fully watched show fails with NoUnwatchedEpisodeError."""
        mock_transport.responses.update(
            {
                "VideoLibrary.GetTVShows": mock_tvshows,
                "VideoLibrary.GetEpisodes": {
                    "episodes": [{"episodeid": 1, "episode": 1, "playcount": 3}]
                },
            }
        )
        library = KodiLibrary(mock_transport)

        with pytest.raises(NoUnwatchedEpisodeError):
            await library.async_get_latest_unwatched_episode("Breaking Bad")

    @pytest.mark.asyncio
    async def test_no_episodes(
        self, mock_transport: MockTransport, mock_tvshows: dict[str, Any]
    ) -> None:
        """Test a show without episodes fails with NoUnwatchedEpisodeError."""
        mock_transport.responses.update(
            {
                "VideoLibrary.GetTVShows": mock_tvshows,
                "VideoLibrary.GetEpisodes": {"limits": {"total": 0}},
            }
        )
        library = KodiLibrary(mock_transport)

        with pytest.raises(NoUnwatchedEpisodeError):
            await library.async_get_latest_unwatched_episode("Breaking Bad")

    @pytest.mark.asyncio
    async def test_empty_library(self, mock_transport: MockTransport) -> None:
        """Test an empty TV library fails with NoTvShowsInLibraryError."""
        mock_transport.responses["VideoLibrary.GetTVShows"] = {"tvshows": []}
        library = KodiLibrary(mock_transport)

        with pytest.raises(NoTvShowsInLibraryError):
            await library.async_get_latest_unwatched_episode("Narcos")

    @pytest.mark.asyncio
    async def test_series_not_found(
        self, mock_transport: MockTransport, mock_tvshows: dict[str, Any]
    ) -> None:
        """Test an unknown show fails with SeriesNotFoundError."""
        mock_transport.responses["VideoLibrary.GetTVShows"] = mock_tvshows
        library = KodiLibrary(mock_transport)

        with pytest.raises(SeriesNotFoundError):
            await library.async_get_latest_unwatched_episode("Seinfeld")


class TestSearchAddon:
    """Tests for addon search."""

    @pytest.mark.asyncio
    async def test_match_by_name(self, mock_transport: MockTransport) -> None:
        """Test addons are matched by display name."""
        mock_transport.responses["Addons.GetAddons"] = {
            "addons": [
                {"addonid": "plugin.video.youtube", "name": "YouTube"},
                {"addonid": "plugin.video.netflix", "name": "Netflix"},
            ]
        }
        library = KodiLibrary(mock_transport)

        addon = await library.async_search_addon("netflix")

        assert addon == Addon(id="plugin.video.netflix", name="Netflix")
        mock_transport.async_call.assert_awaited_once_with(
            "Addons.GetAddons", {"properties": ["name"]}
        )

    @pytest.mark.asyncio
    async def test_empty_listing(self, mock_transport: MockTransport) -> None:
        """Test no installed addons fails with NoAddonsInstalledError."""
        mock_transport.responses["Addons.GetAddons"] = {"addons": []}
        library = KodiLibrary(mock_transport)

        with pytest.raises(NoAddonsInstalledError):
            await library.async_search_addon("netflix")

    @pytest.mark.asyncio
    async def test_not_found(self, mock_transport: MockTransport) -> None:
        """Test an unknown addon fails with AddonNotFoundError."""
        mock_transport.responses["Addons.GetAddons"] = {
            "addons": [{"addonid": "plugin.video.youtube", "name": "YouTube"}]
        }
        library = KodiLibrary(mock_transport)

        with pytest.raises(AddonNotFoundError):
            await library.async_search_addon("netflix")
