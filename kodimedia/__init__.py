"""Asyncio client for Kodi's JSON-RPC control protocol.

Keeps one supervised connection per Kodi instance, turns push notifications
into domain events and resolves spoken or typed queries to library items.
"""

from __future__ import annotations

from .config import KodiSessionConfig
from .connection import AvailabilityChange
from .events import EventType, KodiEvent
from .exceptions import (
    AddonNotFoundError,
    AlbumNotFoundError,
    ArtistNotFoundError,
    KodiConnectionError,
    KodiError,
    KodiNotConnectedError,
    KodiResolutionError,
    KodiRpcError,
    KodiTimeoutError,
    MovieNotFoundError,
    NoAddonsInstalledError,
    NoMoviesInLibraryError,
    NoMusicInLibraryError,
    NoTvShowsInLibraryError,
    NoUnwatchedEpisodeError,
    SeriesNotFoundError,
)
from .models import Addon, Availability, Episode, Movie, MusicSearchType, Song
from .session import KodiSession

__version__ = "0.1.0"

__all__ = [
    "Addon",
    "AddonNotFoundError",
    "AlbumNotFoundError",
    "ArtistNotFoundError",
    "Availability",
    "AvailabilityChange",
    "Episode",
    "EventType",
    "KodiConnectionError",
    "KodiError",
    "KodiEvent",
    "KodiNotConnectedError",
    "KodiResolutionError",
    "KodiRpcError",
    "KodiSession",
    "KodiSessionConfig",
    "KodiTimeoutError",
    "Movie",
    "MovieNotFoundError",
    "MusicSearchType",
    "NoAddonsInstalledError",
    "NoMoviesInLibraryError",
    "NoMusicInLibraryError",
    "NoTvShowsInLibraryError",
    "NoUnwatchedEpisodeError",
    "SeriesNotFoundError",
    "Song",
]
