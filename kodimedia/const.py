"""Constants for the Kodi JSON-RPC client."""

from __future__ import annotations

from typing import Final, NotRequired, TypedDict

# Default values
DEFAULT_PORT: Final = 9090
DEFAULT_TIMEOUT: Final = 10.0  # seconds
DEFAULT_RECONNECT_INTERVAL: Final = 10.0  # seconds
DEFAULT_HEARTBEAT: Final = 30  # seconds

# WebSocket endpoint exposed by Kodi's JSON-RPC server
JSONRPC_PATH: Final = "/jsonrpc"
JSONRPC_VERSION: Final = "2.0"

# Transport events
EVENT_CLOSE: Final = "close"
EVENT_ERROR: Final = "error"

# Player id reported for non-library (addon based) players
ADDON_PLAYER_ID: Final = -1
DEFAULT_PLAYER_ID: Final = 1

# Audio playlist used for music playback
MUSIC_PLAYLIST_ID: Final = 0

# Playback percentage at which an OnPlay is treated as a resume
SONG_RESUME_PERCENTAGE: Final = 1.0
VIDEO_RESUME_PERCENTAGE: Final = 0.1

# Minimum similarity score (0-100) for a fuzzy match to be accepted
FUZZY_MATCH_THRESHOLD: Final = 60.0

# Item types as reported by Player.GetItem and notifications
ITEM_TYPE_MOVIE: Final = "movie"
ITEM_TYPE_EPISODE: Final = "episode"
ITEM_TYPE_SONG: Final = "song"

# Kodi sometimes reports the plural form
ITEM_TYPE_ALIASES: Final[dict[str, str]] = {
    "movie": ITEM_TYPE_MOVIE,
    "movies": ITEM_TYPE_MOVIE,
    "episode": ITEM_TYPE_EPISODE,
    "episodes": ITEM_TYPE_EPISODE,
    "song": ITEM_TYPE_SONG,
    "songs": ITEM_TYPE_SONG,
}

# Notification methods
NOTIFY_PLAYER_ON_PLAY: Final = "Player.OnPlay"
NOTIFY_PLAYER_ON_PAUSE: Final = "Player.OnPause"
NOTIFY_PLAYER_ON_STOP: Final = "Player.OnStop"
NOTIFY_SYSTEM_ON_QUIT: Final = "System.OnQuit"
NOTIFY_SYSTEM_ON_SLEEP: Final = "System.OnSleep"
NOTIFY_SYSTEM_ON_RESTART: Final = "System.OnRestart"
NOTIFY_SYSTEM_ON_WAKE: Final = "System.OnWake"
NOTIFY_GUI_SCREENSAVER_ON: Final = "GUI.OnScreensaverActivated"
NOTIFY_GUI_SCREENSAVER_OFF: Final = "GUI.OnScreensaverDeactivated"

# Library methods
METHOD_GET_MOVIES: Final = "VideoLibrary.GetMovies"
METHOD_GET_MOVIE_DETAILS: Final = "VideoLibrary.GetMovieDetails"
METHOD_GET_TVSHOWS: Final = "VideoLibrary.GetTVShows"
METHOD_GET_EPISODES: Final = "VideoLibrary.GetEpisodes"
METHOD_GET_EPISODE_DETAILS: Final = "VideoLibrary.GetEpisodeDetails"
METHOD_GET_ARTISTS: Final = "AudioLibrary.GetArtists"
METHOD_GET_ALBUMS: Final = "AudioLibrary.GetAlbums"
METHOD_GET_SONGS: Final = "AudioLibrary.GetSongs"
METHOD_GET_SONG_DETAILS: Final = "AudioLibrary.GetSongDetails"
METHOD_GET_ADDONS: Final = "Addons.GetAddons"

# Player methods
METHOD_PLAYER_OPEN: Final = "Player.Open"
METHOD_PLAYER_GET_ACTIVE: Final = "Player.GetActivePlayers"
METHOD_PLAYER_GET_PROPERTIES: Final = "Player.GetProperties"
METHOD_PLAYER_GET_ITEM: Final = "Player.GetItem"
METHOD_PLAYER_GOTO: Final = "Player.GoTo"
METHOD_PLAYER_PLAY_PAUSE: Final = "Player.PlayPause"
METHOD_PLAYER_STOP: Final = "Player.Stop"
METHOD_PLAYER_SET_SUBTITLE: Final = "Player.SetSubtitle"
METHOD_PLAYLIST_CLEAR: Final = "Playlist.Clear"
METHOD_PLAYLIST_ADD: Final = "Playlist.Add"
METHOD_EXECUTE_ADDON: Final = "Addons.ExecuteAddon"

# Application and system methods
METHOD_SET_MUTE: Final = "Application.SetMute"
METHOD_SET_VOLUME: Final = "Application.SetVolume"
METHOD_SYSTEM_SHUTDOWN: Final = "System.Shutdown"
METHOD_SYSTEM_REBOOT: Final = "System.Reboot"
METHOD_SYSTEM_HIBERNATE: Final = "System.Hibernate"

# Player.GoTo targets
DIRECTION_NEXT: Final = "next"
DIRECTION_PREVIOUS: Final = "previous"

# Properties requested from the library
EPISODE_PROPERTIES: Final[list[str]] = ["showtitle", "season", "episode", "title"]
UNWATCHED_EPISODE_PROPERTIES: Final[list[str]] = [
    "playcount",
    "showtitle",
    "season",
    "episode",
    "title",
]
SONG_PROPERTIES: Final[list[str]] = ["artist", "title"]


# =============================================================================
# TypedDicts for JSON-RPC payloads
# =============================================================================


class KodiNotificationItem(TypedDict):
    """Item section of a Player notification."""

    type: str
    id: NotRequired[int]
    title: NotRequired[str]
    showtitle: NotRequired[str]
    season: NotRequired[int]
    episode: NotRequired[int]


class KodiNotificationPlayer(TypedDict):
    """Player section of a Player notification."""

    playerid: int
    speed: NotRequired[int]


class KodiPlayerNotificationData(TypedDict):
    """Data section of Player.OnPlay / OnPause / OnStop."""

    item: KodiNotificationItem
    player: NotRequired[KodiNotificationPlayer]
    end: NotRequired[bool]


class KodiNotification(TypedDict):
    """Params object of a push notification."""

    data: KodiPlayerNotificationData
    sender: NotRequired[str]


class KodiActivePlayer(TypedDict):
    """Entry of Player.GetActivePlayers."""

    playerid: int
    type: str
    playertype: NotRequired[str]


class KodiMovie(TypedDict):
    """Movie entry of VideoLibrary.GetMovies."""

    movieid: int
    label: str
    title: NotRequired[str]


class KodiTvShow(TypedDict):
    """TV show entry of VideoLibrary.GetTVShows."""

    tvshowid: int
    label: str


class KodiEpisode(TypedDict):
    """Episode entry of VideoLibrary.GetEpisodes."""

    episodeid: int
    label: NotRequired[str]
    title: NotRequired[str]
    showtitle: NotRequired[str]
    season: NotRequired[int]
    episode: NotRequired[int]
    playcount: NotRequired[int]


class KodiSong(TypedDict):
    """Song entry of AudioLibrary.GetSongs."""

    songid: int
    label: NotRequired[str]
    title: NotRequired[str]
    artist: NotRequired[list[str]]


class KodiAddon(TypedDict):
    """Addon entry of Addons.GetAddons."""

    addonid: str
    type: NotRequired[str]
    name: NotRequired[str]
