"""Subsonic response envelope parsing.

Every JSON response is wrapped in a single envelope::

    {"subsonic-response": {
        "status": "ok",
        "version": "1.16.1",
        "album": {...}
    }}

The payload has no explicit tag: which of the known payload fields is
populated says what kind of result it is. Decoding scans those fields in the
fixed order of PAYLOAD_PRIORITY and returns the first one present. Servers
in the wild rely on that order, so it must not be changed or left to dict
iteration order.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .exceptions import (
    SubsonicDecodeError,
    SubsonicError,
    SubsonicGenericError,
    error_from_json,
)

logger = logging.getLogger(__name__)

ENVELOPE_KEY = "subsonic-response"

STATUS_OK = "ok"
STATUS_FAILED = "failed"


class PayloadKind(str, Enum):
    """Payload fields an envelope can carry, by wire name."""

    ALBUM = "album"
    ALBUM_INFO = "albumInfo"
    ALBUM_LIST = "albumList"
    ALBUM_LIST2 = "albumList2"
    ALBUMS = "albums"
    ARTIST = "artist"
    ARTIST_INFO = "artistInfo"
    ARTIST_INFO2 = "artistInfo2"
    ARTISTS = "artists"
    BOOKMARKS = "bookmarks"
    CHAT_MESSAGES = "chatMessages"
    DIRECTORY = "directory"
    GENRES = "genres"
    INDEXES = "indexes"
    INTERNET_RADIO_STATIONS = "internetRadioStations"
    JUKEBOX_PLAYLIST = "jukeboxPlaylist"
    JUKEBOX_STATUS = "jukeboxStatus"
    LICENSE = "license"
    LYRICS = "lyrics"
    MUSIC_FOLDERS = "musicFolders"
    NEWEST_PODCASTS = "newestPodcasts"
    NOW_PLAYING = "nowPlaying"
    PLAY_QUEUE = "playQueue"
    PLAYLIST = "playlist"
    PLAYLISTS = "playlists"
    PODCASTS = "podcasts"
    RANDOM_SONGS = "randomSongs"
    SCAN_STATUS = "scanStatus"
    SEARCH_RESULT = "searchResult"
    SEARCH_RESULT2 = "searchResult2"
    SEARCH_RESULT3 = "searchResult3"
    SHARES = "shares"
    SIMILAR_SONGS = "similarSongs"
    SIMILAR_SONGS2 = "similarSongs2"
    SONG = "song"
    SONGS_BY_GENRE = "songsByGenre"
    STARRED = "starred"
    STARRED2 = "starred2"
    TOP_SONGS = "topSongs"
    USER = "user"
    USERS = "users"
    VIDEO_INFO = "videoInfo"
    VIDEOS = "videos"


# Scan order for payload fields. Part of the wire contract.
PAYLOAD_PRIORITY: Tuple[PayloadKind, ...] = (
    PayloadKind.ALBUM,
    PayloadKind.ALBUM_INFO,
    PayloadKind.ALBUM_LIST,
    PayloadKind.ALBUM_LIST2,
    PayloadKind.ALBUMS,
    PayloadKind.ARTIST,
    PayloadKind.ARTIST_INFO,
    PayloadKind.ARTIST_INFO2,
    PayloadKind.ARTISTS,
    PayloadKind.BOOKMARKS,
    PayloadKind.CHAT_MESSAGES,
    PayloadKind.DIRECTORY,
    PayloadKind.GENRES,
    PayloadKind.INDEXES,
    PayloadKind.INTERNET_RADIO_STATIONS,
    PayloadKind.JUKEBOX_PLAYLIST,
    PayloadKind.JUKEBOX_STATUS,
    PayloadKind.LICENSE,
    PayloadKind.LYRICS,
    PayloadKind.MUSIC_FOLDERS,
    PayloadKind.NEWEST_PODCASTS,
    PayloadKind.NOW_PLAYING,
    PayloadKind.PLAY_QUEUE,
    PayloadKind.PLAYLIST,
    PayloadKind.PLAYLISTS,
    PayloadKind.PODCASTS,
    PayloadKind.RANDOM_SONGS,
    PayloadKind.SCAN_STATUS,
    PayloadKind.SEARCH_RESULT,
    PayloadKind.SEARCH_RESULT2,
    PayloadKind.SEARCH_RESULT3,
    PayloadKind.SHARES,
    PayloadKind.SIMILAR_SONGS,
    PayloadKind.SIMILAR_SONGS2,
    PayloadKind.SONG,
    PayloadKind.SONGS_BY_GENRE,
    PayloadKind.STARRED,
    PayloadKind.STARRED2,
    PayloadKind.TOP_SONGS,
    PayloadKind.USER,
    PayloadKind.USERS,
    PayloadKind.VIDEO_INFO,
    PayloadKind.VIDEOS,
)


@dataclass
class Envelope:
    """A decoded ``subsonic-response`` envelope.

    Attributes:
        status: "ok" or "failed"
        version: Protocol version reported by the server
        error: Mapped error, if the server reported one
        payloads: Populated payload fields, keyed by kind
        open_subsonic: Whether the server advertises OpenSubsonic
        server_type: OpenSubsonic server name (e.g. "navidrome")
        server_version: OpenSubsonic server version
    """

    status: str
    version: Optional[str] = None
    error: Optional[SubsonicError] = None
    payloads: Dict[PayloadKind, Any] = field(default_factory=dict)
    open_subsonic: bool = False
    server_type: Optional[str] = None
    server_version: Optional[str] = None

    @classmethod
    def from_json(cls, data: Any) -> "Envelope":
        """Parse a response document.

        Args:
            data: The parsed JSON body, ``{"subsonic-response": {...}}``

        Returns:
            Envelope

        Raises:
            SubsonicDecodeError: If the document is not a Subsonic envelope
        """
        if not isinstance(data, dict) or not isinstance(data.get(ENVELOPE_KEY), dict):
            raise SubsonicDecodeError(f"response has no '{ENVELOPE_KEY}' object")

        inner = data[ENVELOPE_KEY]
        status = inner.get("status")
        if not isinstance(status, str):
            raise SubsonicDecodeError("response envelope has no status")

        error = inner.get("error")
        payloads = {
            kind: inner[kind.value]
            for kind in PAYLOAD_PRIORITY
            if inner.get(kind.value) is not None
        }

        return cls(
            status=status,
            version=inner.get("version"),
            error=error_from_json(error) if error is not None else None,
            payloads=payloads,
            open_subsonic=inner.get("openSubsonic") is True,
            server_type=inner.get("type"),
            server_version=inner.get("serverVersion"),
        )

    def is_ok(self) -> bool:
        """Return True if the response carries no error."""
        return self.error is None and self.status != STATUS_FAILED

    def raise_for_error(self) -> None:
        """Raise the server's error, if any.

        Raises:
            SubsonicError: The mapped error; a "failed" status without an
                error object raises SubsonicGenericError
        """
        if self.error is not None:
            raise self.error
        if self.status == STATUS_FAILED:
            raise SubsonicGenericError(0, "unable to retrieve error")

    def payload(self) -> Optional[Tuple[PayloadKind, Any]]:
        """Return the first populated payload field in priority order.

        Returns:
            (kind, value), or None for an empty or failed response
        """
        if self.error is not None:
            return None
        for kind in PAYLOAD_PRIORITY:
            if kind in self.payloads:
                return kind, self.payloads[kind]
        return None

    def value(self) -> Optional[Any]:
        """Return the payload value, raising the server's error first."""
        self.raise_for_error()
        selected = self.payload()
        if selected is None:
            return None
        kind, value = selected
        if len(self.payloads) > 1:
            logger.warning(
                f"Response carries {len(self.payloads)} payload fields, using '{kind.value}'"
            )
        return value


def decode(data: Any) -> Optional[Any]:
    """Decode a response document to its payload value.

    A server error always wins over any payload fields. Responses that only
    acknowledge success (ping, startScan, star, ...) decode to None.

    Args:
        data: The parsed JSON body

    Returns:
        The payload value, or None if there is no payload

    Raises:
        SubsonicError: If the server reported an error
        SubsonicDecodeError: If the document is not a Subsonic envelope
    """
    return Envelope.from_json(data).value()
