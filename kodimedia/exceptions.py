"""Exceptions for the Kodi JSON-RPC client."""

from __future__ import annotations


class KodiError(Exception):
    """Base exception for the Kodi client.

    Every error carries a stable ``translation_key`` so that the automation
    layer can render a distinct user-facing message per failure.

    Attributes:
        translation_key: Key for looking up a translated message.
        translation_placeholders: Values to substitute in the translated message.
    """

    def __init__(
        self,
        message: str = "",
        translation_key: str | None = None,
        translation_placeholders: dict[str, str] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: The error message (English, for logs).
            translation_key: Optional translation key for the user interface.
            translation_placeholders: Optional placeholders for translation.
        """
        super().__init__(message)
        self.translation_key = translation_key
        self.translation_placeholders = translation_placeholders or {}


class KodiConnectionError(KodiError):
    """Exception raised when the connection to Kodi fails.

    This includes refused connections, DNS failures and dropped sockets.
    """

    def __init__(
        self,
        message: str,
        host: str = "",
        port: int = 0,
    ) -> None:
        """Initialize with connection details.

        Args:
            message: The error message.
            host: The Kodi host (for translation placeholder).
            port: The Kodi port (for translation placeholder).
        """
        super().__init__(
            message,
            translation_key="connection_failed",
            translation_placeholders={"host": host, "port": str(port)},
        )


class KodiTimeoutError(KodiConnectionError):
    """Exception raised when a JSON-RPC call times out."""

    def __init__(self, message: str, host: str = "", port: int = 0) -> None:
        """Initialize timeout error.

        Args:
            message: The error message.
            host: The Kodi host.
            port: The Kodi port.
        """
        super().__init__(message, host=host, port=port)
        self.translation_key = "timeout"


class KodiNotConnectedError(KodiError):
    """Exception raised when a command is issued while Kodi is unavailable."""

    def __init__(self, message: str = "Kodi is not connected") -> None:
        """Initialize not connected error.

        Args:
            message: The error message.
        """
        super().__init__(message, translation_key="not_connected")


class KodiRpcError(KodiError):
    """Exception raised when Kodi answers a call with a JSON-RPC error object.

    Attributes:
        code: JSON-RPC error code.
        method: The method that failed.
    """

    def __init__(self, method: str, code: int, message: str) -> None:
        """Initialize RPC error.

        Args:
            method: The JSON-RPC method that was called.
            code: Error code reported by Kodi.
            message: Error message reported by Kodi.
        """
        super().__init__(
            f"{method} failed: {message} ({code})",
            translation_key="rpc_error",
            translation_placeholders={"method": method, "code": str(code)},
        )
        self.code = code
        self.method = method


# =============================================================================
# Library resolution errors
# =============================================================================


class KodiResolutionError(KodiError):
    """Base exception for failed library lookups.

    Subclasses set ``reason``, which doubles as the translation key.
    """

    reason = "not_found"

    def __init__(self, query: str = "") -> None:
        """Initialize resolution error.

        Args:
            query: The search string supplied by the user.
        """
        super().__init__(
            f"{self.reason}: {query}" if query else self.reason,
            translation_key=self.reason,
            translation_placeholders={"query": query},
        )
        self.query = query


class NoMoviesInLibraryError(KodiResolutionError):
    """The movie library is empty."""

    reason = "no_movies_in_library"


class MovieNotFoundError(KodiResolutionError):
    """No movie matched the query."""

    reason = "movie_not_found"


class NoMusicInLibraryError(KodiResolutionError):
    """The music library has no artists or albums."""

    reason = "no_music_in_library"


class ArtistNotFoundError(KodiResolutionError):
    """No artist matched the query."""

    reason = "artist_not_found"


class AlbumNotFoundError(KodiResolutionError):
    """No album matched the query."""

    reason = "album_not_found"


class NoTvShowsInLibraryError(KodiResolutionError):
    """The TV show library is empty."""

    reason = "no_tvshows_in_library"


class SeriesNotFoundError(KodiResolutionError):
    """No TV show matched the query."""

    reason = "series_not_found"


class NoUnwatchedEpisodeError(KodiResolutionError):
    """Every episode of the resolved show has been watched."""

    reason = "no_unwatched_episode"


class NoAddonsInstalledError(KodiResolutionError):
    """Kodi reported no installed addons."""

    reason = "no_addons_installed"


class AddonNotFoundError(KodiResolutionError):
    """No addon matched the query."""

    reason = "addon_not_found"
