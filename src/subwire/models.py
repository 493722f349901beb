"""Data models for Subsonic API integration."""

import os
import warnings
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .exceptions import SubsonicDecodeError
from .version import DEFAULT_API_VERSION, Version


@dataclass(frozen=True)
class SubsonicConfig:
    """Configuration for connecting to a Subsonic-compatible server.

    The config is frozen: a client's credentials and target version cannot
    change while its requests are in flight. Use ``dataclasses.replace`` to
    derive a config for a different version or user.

    Attributes:
        url: Base server URL (e.g., "https://music.example.com")
        username: Subsonic username
        password: Subsonic password (hashed before transmission on >= 1.13.0)
        client_name: Client identifier for API requests
        api_version: Subsonic API version to target
    """

    url: str
    username: str
    password: str = field(repr=False)
    client_name: str = "subwire"
    api_version: str = DEFAULT_API_VERSION

    def __post_init__(self):
        """Validate configuration on initialization."""
        if not self.url:
            raise ValueError("url is required")
        if not self.username:
            raise ValueError("username is required")
        if self.password is None:
            raise ValueError("password is required")
        if not self.client_name:
            raise ValueError("client_name is required")

        # Raises ValueError for unparsable versions
        Version.parse(self.api_version)

        if self.url.startswith("http://"):
            warnings.warn(
                "Using HTTP instead of HTTPS for Subsonic connection. "
                "Credentials will be transmitted insecurely.",
                UserWarning,
                stacklevel=3,
            )

    @property
    def version(self) -> Version:
        """Target protocol version."""
        return Version.parse(self.api_version)

    @classmethod
    def from_environment(cls) -> "SubsonicConfig":
        """Load configuration from environment variables.

        Reads SUBSONIC_URL, SUBSONIC_USER and SUBSONIC_PASSWORD (required),
        and SUBSONIC_CLIENT_NAME and SUBSONIC_API_VERSION (optional).

        Returns:
            SubsonicConfig: Loaded configuration object

        Raises:
            EnvironmentError: If required environment variables are missing
        """
        required = {
            "SUBSONIC_URL": os.getenv("SUBSONIC_URL"),
            "SUBSONIC_USER": os.getenv("SUBSONIC_USER"),
            "SUBSONIC_PASSWORD": os.getenv("SUBSONIC_PASSWORD"),
        }

        # An empty password is valid, same as in the constructor
        missing = [
            var
            for var, value in required.items()
            if value is None or (value == "" and var != "SUBSONIC_PASSWORD")
        ]
        if missing:
            raise EnvironmentError(
                f"Required environment variables missing: {', '.join(missing)}\n"
                f"Example: export SUBSONIC_URL='https://your-server.com'"
            )

        return cls(
            url=required["SUBSONIC_URL"],
            username=required["SUBSONIC_USER"],
            password=required["SUBSONIC_PASSWORD"],
            client_name=os.getenv("SUBSONIC_CLIENT_NAME", "subwire"),
            api_version=os.getenv("SUBSONIC_API_VERSION", DEFAULT_API_VERSION),
        )


@dataclass
class SubsonicAuthToken:
    """Authentication token for Subsonic API using MD5 salt+hash method.

    Attributes:
        token: MD5(password + salt)
        salt: Random salt string
        username: Username for this token
        created_at: Token creation timestamp
    """

    token: str
    salt: str
    username: str
    created_at: datetime

    def to_auth_params(self) -> Dict[str, str]:
        """Convert to authentication query parameters.

        Returns:
            Dict with u (username), t (token), s (salt)
        """
        return {"u": self.username, "t": self.token, "s": self.salt}


@dataclass
class LegacyAuth:
    """Plaintext credentials for servers older than protocol 1.13.0."""

    username: str
    password: str = field(repr=False)

    def to_auth_params(self) -> Dict[str, str]:
        """Convert to authentication query parameters.

        Returns:
            Dict with u (username), p (password)
        """
        return {"u": self.username, "p": self.password}


def _require(data: Any, *keys: str) -> Dict[str, Any]:
    """Check that data is an object holding every one of keys."""
    if not isinstance(data, dict):
        raise SubsonicDecodeError(f"expected an object, got {type(data).__name__}")
    missing = [key for key in keys if key not in data]
    if missing:
        raise SubsonicDecodeError(f"missing required field(s): {', '.join(missing)}")
    return data


def list_field(data: Any, key: str) -> List[Any]:
    """Extract a list from a container object such as ``{"genre": [...]}``.

    A missing key yields an empty list, and a lone object where a list was
    expected (some servers collapse one-element lists) is wrapped.
    """
    if data is None:
        return []
    if not isinstance(data, dict):
        raise SubsonicDecodeError(f"expected an object holding '{key}'")
    value = data.get(key, [])
    if isinstance(value, dict):
        return [value]
    if not isinstance(value, list):
        raise SubsonicDecodeError(f"expected '{key}' to be a list")
    return value


@dataclass
class Song:
    """Song (child) metadata from the Subsonic API.

    Attributes:
        id: Unique song identifier
        title: Song title
        artist: Artist name (optional)
        album: Album name (optional)
        duration: Duration in seconds (optional)
        parent: Parent directory/album ID (optional)
        albumId: Album ID for ID3 navigation (optional)
        artistId: Artist ID for ID3 navigation (optional)
        isDir: Whether this entry is a directory
        isVideo: Whether this entry is a video
        track: Track number (optional)
        year: Release year (optional)
        genre: Genre (optional)
        coverArt: Cover art ID (optional)
        size: File size in bytes (optional)
        suffix: File extension (optional)
        contentType: MIME type (optional)
        bitRate: Bitrate in kbps (optional)
        path: File path on server (optional)
        starred: ISO datetime if favorited (optional)
    """

    id: str
    title: str
    artist: Optional[str] = None
    album: Optional[str] = None
    duration: Optional[int] = None
    parent: Optional[str] = None
    albumId: Optional[str] = None
    artistId: Optional[str] = None
    isDir: bool = False
    isVideo: bool = False
    track: Optional[int] = None
    year: Optional[int] = None
    genre: Optional[str] = None
    coverArt: Optional[str] = None
    size: Optional[int] = None
    suffix: Optional[str] = None
    contentType: Optional[str] = None
    bitRate: Optional[int] = None
    path: Optional[str] = None
    starred: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Song":
        data = _require(data, "id")
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            artist=data.get("artist"),
            album=data.get("album"),
            duration=data.get("duration"),
            parent=_optional_id(data.get("parent")),
            albumId=_optional_id(data.get("albumId")),
            artistId=_optional_id(data.get("artistId")),
            isDir=data.get("isDir", False),
            isVideo=data.get("isVideo", False),
            track=data.get("track"),
            year=data.get("year"),
            genre=data.get("genre"),
            coverArt=_optional_id(data.get("coverArt")),
            size=data.get("size"),
            suffix=data.get("suffix"),
            contentType=data.get("contentType"),
            bitRate=data.get("bitRate"),
            path=data.get("path"),
            starred=data.get("starred"),
        )


@dataclass
class Artist:
    """Artist metadata from getArtist/getArtists/search3.

    Attributes:
        id: Unique artist identifier
        name: Artist name
        albumCount: Number of albums by this artist
        coverArt: Cover art ID (optional)
        artistImageUrl: Artist image URL (optional)
        starred: ISO datetime if favorited (optional)
        albums: Albums, when the response includes them (getArtist)
    """

    id: str
    name: str
    albumCount: int = 0
    coverArt: Optional[str] = None
    artistImageUrl: Optional[str] = None
    starred: Optional[str] = None
    albums: List["Album"] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "Artist":
        data = _require(data, "id", "name")
        return cls(
            id=str(data["id"]),
            name=data["name"],
            albumCount=data.get("albumCount", 0),
            coverArt=_optional_id(data.get("coverArt")),
            artistImageUrl=data.get("artistImageUrl"),
            starred=data.get("starred"),
            albums=[Album.from_dict(a) for a in list_field(data, "album")],
        )


@dataclass
class Album:
    """Album metadata from getAlbum/search3.

    Attributes:
        id: Unique album identifier
        name: Album name
        artist: Artist name (optional)
        artistId: Artist ID (optional)
        songCount: Number of songs in album
        duration: Total duration in seconds
        created: Creation timestamp (ISO format, optional)
        coverArt: Cover art ID (optional)
        playCount: Play count (optional)
        year: Release year (optional)
        genre: Genre (optional)
        starred: ISO datetime if favorited (optional)
        songs: Songs, when the response includes them
    """

    id: str
    name: str
    artist: Optional[str] = None
    artistId: Optional[str] = None
    songCount: int = 0
    duration: int = 0
    created: Optional[str] = None
    coverArt: Optional[str] = None
    playCount: Optional[int] = None
    year: Optional[int] = None
    genre: Optional[str] = None
    starred: Optional[str] = None
    songs: List[Song] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "Album":
        data = _require(data, "id", "name")
        return cls(
            id=str(data["id"]),
            name=data["name"],
            artist=data.get("artist"),
            artistId=_optional_id(data.get("artistId")),
            songCount=data.get("songCount", 0),
            duration=data.get("duration", 0),
            created=data.get("created"),
            coverArt=_optional_id(data.get("coverArt")),
            playCount=data.get("playCount"),
            year=data.get("year"),
            genre=data.get("genre"),
            starred=data.get("starred"),
            songs=[Song.from_dict(s) for s in list_field(data, "song")],
        )


@dataclass
class MusicFolder:
    """A top-level music folder configured on the server."""

    id: str
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "MusicFolder":
        data = _require(data, "id")
        return cls(id=str(data["id"]), name=data.get("name"))


@dataclass
class Genre:
    """A genre with its song and album counts."""

    name: str
    songCount: int = 0
    albumCount: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "Genre":
        # The genre name travels as the element's text value
        data = _require(data, "value")
        return cls(
            name=data["value"],
            songCount=data.get("songCount", 0),
            albumCount=data.get("albumCount", 0),
        )


@dataclass
class License:
    """Server license details.

    Subsonic forks always report a valid license.
    """

    valid: bool
    email: Optional[str] = None
    trialExpires: Optional[str] = None
    licenseExpires: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "License":
        data = _require(data, "valid")
        return cls(
            valid=bool(data["valid"]),
            email=data.get("email"),
            trialExpires=data.get("trialExpires"),
            licenseExpires=data.get("licenseExpires"),
        )


@dataclass
class ScanStatus:
    """Media library scan status."""

    scanning: bool
    count: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "ScanStatus":
        data = _require(data, "scanning")
        return cls(scanning=bool(data["scanning"]), count=data.get("count", 0))


@dataclass
class Lyrics:
    """Lyrics for a song."""

    value: str
    artist: Optional[str] = None
    title: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Lyrics":
        data = _require(data, "value")
        return cls(value=data["value"], artist=data.get("artist"), title=data.get("title"))


@dataclass
class NowPlaying:
    """A song currently being played by some user."""

    song: Song
    username: str
    minutesAgo: int = 0
    playerId: Optional[str] = None
    playerName: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "NowPlaying":
        # The entry is a song with the player fields mixed in
        data = _require(data, "username")
        return cls(
            song=Song.from_dict(data),
            username=data["username"],
            minutesAgo=data.get("minutesAgo", 0),
            playerId=_optional_id(data.get("playerId")),
            playerName=data.get("playerName"),
        )


@dataclass
class SearchResult:
    """Artists, albums and songs from search3 or getStarred2."""

    artists: List[Artist] = field(default_factory=list)
    albums: List[Album] = field(default_factory=list)
    songs: List[Song] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "SearchResult":
        # An empty result may come back as no payload at all
        if data is None:
            return cls()
        data = _require(data)
        return cls(
            artists=[Artist.from_dict(a) for a in list_field(data, "artist")],
            albums=[Album.from_dict(a) for a in list_field(data, "album")],
            songs=[Song.from_dict(s) for s in list_field(data, "song")],
        )


@dataclass
class JukeboxStatus:
    """Current jukebox state.

    Attributes:
        index: Current playlist index; -1 after the playlist is cleared
        playing: Whether the jukebox is playing
        volume: Gain between 0.0 and 1.0
        position: Position in the current song, in seconds
    """

    index: int
    playing: bool
    volume: float
    position: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "JukeboxStatus":
        data = _require(data, "currentIndex", "playing", "gain")
        return cls(
            index=data["currentIndex"],
            playing=bool(data["playing"]),
            volume=float(data["gain"]),
            position=data.get("position", 0),
        )


@dataclass
class JukeboxPlaylist:
    """Jukebox status together with its playlist."""

    status: JukeboxStatus
    songs: List[Song] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "JukeboxPlaylist":
        return cls(
            status=JukeboxStatus.from_dict(data),
            songs=[Song.from_dict(s) for s in list_field(data, "entry")],
        )

@dataclass
class AlbumInfo:
    """Notes and external links for an album (getAlbumInfo2)."""

    notes: Optional[str] = None
    musicBrainzId: Optional[str] = None
    lastFmUrl: Optional[str] = None
    smallImageUrl: Optional[str] = None
    mediumImageUrl: Optional[str] = None
    largeImageUrl: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "AlbumInfo":
        data = _require(data)
        return cls(
            notes=data.get("notes"),
            musicBrainzId=data.get("musicBrainzId"),
            lastFmUrl=data.get("lastFmUrl"),
            smallImageUrl=data.get("smallImageUrl"),
            mediumImageUrl=data.get("mediumImageUrl"),
            largeImageUrl=data.get("largeImageUrl"),
        )


@dataclass
class ArtistInfo:
    """Biography, external links and similar artists (getArtistInfo2).

    Attributes:
        biography: Artist biography, usually HTML (optional)
        musicBrainzId: MusicBrainz artist ID (optional)
        lastFmUrl: Last.fm page (optional)
        smallImageUrl: Small artist image (optional)
        mediumImageUrl: Medium artist image (optional)
        largeImageUrl: Large artist image (optional)
        similar_artists: Similar artists, in the server's order
    """

    biography: Optional[str] = None
    musicBrainzId: Optional[str] = None
    lastFmUrl: Optional[str] = None
    smallImageUrl: Optional[str] = None
    mediumImageUrl: Optional[str] = None
    largeImageUrl: Optional[str] = None
    similar_artists: List[Artist] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "ArtistInfo":
        data = _require(data)
        return cls(
            biography=data.get("biography"),
            musicBrainzId=data.get("musicBrainzId"),
            lastFmUrl=data.get("lastFmUrl"),
            smallImageUrl=data.get("smallImageUrl"),
            mediumImageUrl=data.get("mediumImageUrl"),
            largeImageUrl=data.get("largeImageUrl"),
            similar_artists=[Artist.from_dict(a) for a in list_field(data, "similarArtist")],
        )


@dataclass
class Playlist:
    """A saved playlist.

    getPlaylists returns playlists without their songs; getPlaylist and
    createPlaylist include them.

    Attributes:
        id: Unique playlist identifier
        name: Playlist name
        owner: Owning username (optional)
        public: Whether other users can see the playlist
        songCount: Number of songs
        duration: Total duration in seconds
        comment: Free-text comment (optional)
        coverArt: Cover art ID (optional)
        created: Creation timestamp (optional)
        changed: Last modification timestamp (optional)
        songs: Songs, when the response includes them
    """

    id: str
    name: str
    owner: Optional[str] = None
    public: bool = False
    songCount: int = 0
    duration: int = 0
    comment: Optional[str] = None
    coverArt: Optional[str] = None
    created: Optional[str] = None
    changed: Optional[str] = None
    songs: List[Song] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "Playlist":
        data = _require(data, "id", "name")
        return cls(
            id=str(data["id"]),
            name=data["name"],
            owner=data.get("owner"),
            public=bool(data.get("public", False)),
            songCount=data.get("songCount", 0),
            duration=data.get("duration", 0),
            comment=data.get("comment"),
            coverArt=_optional_id(data.get("coverArt")),
            created=data.get("created"),
            changed=data.get("changed"),
            songs=[Song.from_dict(s) for s in list_field(data, "entry")],
        )


# Permission flags of a user account, by wire name
USER_ROLES = (
    "adminRole",
    "settingsRole",
    "streamRole",
    "jukeboxRole",
    "downloadRole",
    "uploadRole",
    "playlistRole",
    "coverArtRole",
    "commentRole",
    "podcastRole",
    "shareRole",
    "videoConversionRole",
)


@dataclass
class User:
    """A user account and its permissions.

    Attributes:
        username: Login name
        email: Email address (optional)
        scrobblingEnabled: Whether plays are scrobbled to Last.fm
        maxBitRate: Streaming bitrate limit in kbps; 0 means unlimited
        roles: Role flags present in the response, keyed as in USER_ROLES
        folders: IDs of the music folders the user can access
    """

    username: str
    email: Optional[str] = None
    scrobblingEnabled: bool = False
    maxBitRate: int = 0
    roles: Dict[str, bool] = field(default_factory=dict)
    folders: List[str] = field(default_factory=list)

    def has_role(self, role: str) -> bool:
        return self.roles.get(role, False)

    @property
    def is_admin(self) -> bool:
        return self.has_role("adminRole")

    @classmethod
    def from_dict(cls, data: Any) -> "User":
        data = _require(data, "username")
        folders = data.get("folder", [])
        if not isinstance(folders, list):
            folders = [folders]
        return cls(
            username=data["username"],
            email=data.get("email"),
            scrobblingEnabled=bool(data.get("scrobblingEnabled", False)),
            maxBitRate=data.get("maxBitRate", 0),
            roles={role: bool(data[role]) for role in USER_ROLES if role in data},
            folders=[str(f) for f in folders],
        )


@dataclass
class RadioStation:
    """An internet radio station."""

    id: str
    name: str
    streamUrl: str
    homePageUrl: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "RadioStation":
        data = _require(data, "id", "name", "streamUrl")
        return cls(
            id=str(data["id"]),
            name=data["name"],
            streamUrl=data["streamUrl"],
            homePageUrl=data.get("homePageUrl"),
        )


@dataclass
class PodcastEpisode:
    """A podcast episode.

    Attributes:
        id: Unique episode identifier
        title: Episode title
        status: "new", "downloading", "completed", "error", "deleted" or "skipped"
        channelId: ID of the owning channel (optional)
        streamId: Media ID to stream once downloaded (optional)
        description: Episode description (optional)
        publishDate: Publication timestamp (optional)
        duration: Duration in seconds (optional)
    """

    id: str
    title: str
    status: Optional[str] = None
    channelId: Optional[str] = None
    streamId: Optional[str] = None
    description: Optional[str] = None
    publishDate: Optional[str] = None
    duration: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Any) -> "PodcastEpisode":
        data = _require(data, "id")
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            status=data.get("status"),
            channelId=_optional_id(data.get("channelId")),
            streamId=_optional_id(data.get("streamId")),
            description=data.get("description"),
            publishDate=data.get("publishDate"),
            duration=data.get("duration"),
        )


@dataclass
class PodcastChannel:
    """A podcast channel, with its episodes when requested.

    Attributes:
        id: Unique channel identifier
        url: Feed URL
        title: Channel title (optional)
        description: Channel description (optional)
        status: Channel status, "error" when the feed failed (optional)
        error: Server's error message for a failed feed (optional)
        episodes: Episodes, when the response includes them
    """

    id: str
    url: str
    title: Optional[str] = None
    description: Optional[str] = None
    coverArt: Optional[str] = None
    status: Optional[str] = None
    error: Optional[str] = None
    episodes: List[PodcastEpisode] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "PodcastChannel":
        data = _require(data, "id", "url")
        return cls(
            id=str(data["id"]),
            url=data["url"],
            title=data.get("title"),
            description=data.get("description"),
            coverArt=_optional_id(data.get("coverArt")),
            status=data.get("status"),
            # Servers send an empty errorMessage for healthy feeds
            error=data.get("errorMessage") or None,
            episodes=[PodcastEpisode.from_dict(e) for e in list_field(data, "episode")],
        )


def _optional_id(value: Any) -> Optional[str]:
    # Older servers send numeric IDs
    return None if value is None else str(value)
