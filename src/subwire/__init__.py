"""Subsonic API client library."""

__version__ = "0.1.0"

from .auth import create_auth_params, generate_token, verify_token
from .client import ALBUM_LIST_TYPES, SubsonicClient
from .exceptions import (
    ClientVersionTooOldError,
    ServerVersionTooOldError,
    SubsonicAuthenticationError,
    SubsonicAuthorizationError,
    SubsonicDecodeError,
    SubsonicError,
    SubsonicGenericError,
    SubsonicNotFoundError,
    SubsonicTrialError,
    SubsonicUrlError,
    SubsonicVersionError,
    TokenAuthenticationNotSupportedError,
    error_from_code,
)
from .jukebox import Jukebox
from .models import (
    USER_ROLES,
    Album,
    AlbumInfo,
    Artist,
    ArtistInfo,
    Genre,
    JukeboxPlaylist,
    JukeboxStatus,
    LegacyAuth,
    License,
    Lyrics,
    MusicFolder,
    NowPlaying,
    Playlist,
    PodcastChannel,
    PodcastEpisode,
    RadioStation,
    ScanStatus,
    SearchResult,
    Song,
    SubsonicAuthToken,
    SubsonicConfig,
    User,
)
from .query import Query
from .response import PAYLOAD_PRIORITY, Envelope, PayloadKind, decode
from .search import ALL, NONE, SearchPage
from .version import Version

__all__ = [
    # Client
    "SubsonicClient",
    "Jukebox",
    # Protocol core
    "Query",
    "Version",
    "Envelope",
    "PayloadKind",
    "PAYLOAD_PRIORITY",
    "decode",
    "SearchPage",
    "ALL",
    "NONE",
    # Models
    "SubsonicConfig",
    "SubsonicAuthToken",
    "LegacyAuth",
    "Song",
    "Artist",
    "ArtistInfo",
    "Album",
    "AlbumInfo",
    "ALBUM_LIST_TYPES",
    "Playlist",
    "User",
    "USER_ROLES",
    "RadioStation",
    "PodcastChannel",
    "PodcastEpisode",
    "MusicFolder",
    "Genre",
    "License",
    "ScanStatus",
    "Lyrics",
    "NowPlaying",
    "SearchResult",
    "JukeboxStatus",
    "JukeboxPlaylist",
    # Authentication
    "generate_token",
    "verify_token",
    "create_auth_params",
    # Exceptions
    "SubsonicError",
    "SubsonicGenericError",
    "SubsonicAuthenticationError",
    "TokenAuthenticationNotSupportedError",
    "ClientVersionTooOldError",
    "ServerVersionTooOldError",
    "SubsonicAuthorizationError",
    "SubsonicNotFoundError",
    "SubsonicTrialError",
    "SubsonicVersionError",
    "SubsonicUrlError",
    "SubsonicDecodeError",
    "error_from_code",
]
