"""HTTP client for the Subsonic REST API."""

import logging
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional, Union
from urllib.parse import urlsplit

import httpx

from .auth import create_auth_params
from .exceptions import SubsonicDecodeError, SubsonicUrlError
from .models import (
    USER_ROLES,
    Album,
    AlbumInfo,
    Artist,
    ArtistInfo,
    Genre,
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
    SubsonicConfig,
    User,
    list_field,
)
from .query import Query
from .response import Envelope
from .search import SearchPage
from .version import Version

logger = logging.getLogger(__name__)

# Argument naming the item for star/unstar, by item type
ITEM_ID_KEYS = {"song": "id", "album": "albumId", "artist": "artistId"}

MAX_RATING = 5

# Orderings accepted by getAlbumList2
ALBUM_LIST_TYPES = (
    "random",
    "newest",
    "highest",
    "frequent",
    "recent",
    "alphabeticalByName",
    "alphabeticalByArtist",
    "starred",
    "byYear",
    "byGenre",
)

DEFAULT_RANDOM_SIZE = 10


class SubsonicClient:
    """Synchronous HTTP client for the Subsonic REST API.

    This client implements:
    - Version-gated authentication (salted MD5 token, or plaintext for
      servers older than 1.13.0)
    - Envelope decoding with typed exceptions for server error codes
    - Connection pooling and timeout configuration

    The client's SubsonicConfig is frozen, so credentials and the target
    protocol version stay fixed for the client's lifetime. Build a new client
    (see with_version()) to talk to the server at another version.

    Attributes:
        config: SubsonicConfig with server connection details
        client: httpx.Client for HTTP requests

    Example:
        >>> config = SubsonicConfig(
        ...     url="https://music.example.com",
        ...     username="john",
        ...     password="secret"
        ... )
        >>> with SubsonicClient(config) as client:
        ...     client.ping()
        ...     genres = client.genres()
    """

    def __init__(self, config: SubsonicConfig, transport: Optional[httpx.BaseTransport] = None):
        """Initialize Subsonic API client.

        Args:
            config: SubsonicConfig with server URL and credentials
            transport: Optional httpx transport; defaults to a pooled
                HTTP/2-capable transport with connection retries
        """
        self.config = config
        self._base_url = config.url.rstrip("/")
        # Caller-supplied transport, handed on to derived clients
        self._transport = transport

        # OpenSubsonic detection attributes
        self.opensubsonic = False
        self.opensubsonic_version: Optional[str] = None
        self.server_type: Optional[str] = None

        if transport is None:
            transport = httpx.HTTPTransport(
                limits=httpx.Limits(
                    max_connections=100,  # Max total connections
                    max_keepalive_connections=20,  # Max persistent connections
                    keepalive_expiry=5.0,  # Keep connections alive for 5s
                ),
                http2=True,
                retries=3,  # Connection retries only, never on a response
            )

        self.client = httpx.Client(
            timeout=httpx.Timeout(
                connect=30.0,
                read=60.0,  # Large library listings are slow to render
                write=30.0,
                pool=5.0,
            ),
            transport=transport,
            follow_redirects=True,
        )

        logger.info(f"Initialized Subsonic client for {self._base_url} (API {config.api_version})")

    def with_version(self, version: Union[str, Version]) -> "SubsonicClient":
        """Create a new client targeting another protocol version.

        A client built on its own transport passes that transport on, so
        both clients share it and closing either one closes it. Otherwise
        the new client owns a fresh connection pool.
        """
        config = replace(self.config, api_version=str(Version.parse(version)))
        return SubsonicClient(config, transport=self._transport)

    def build_url(self, operation: str, query: Optional[Query] = None) -> str:
        """Build the full request URL for an API operation.

        Args:
            operation: API operation name (e.g., "ping", "getAlbum")
            query: Operation arguments

        Returns:
            ``{scheme}://{host}[:port]{path}/rest/{operation}?{auth}&{query}``

        Raises:
            SubsonicUrlError: If the configured URL has no http(s) scheme,
                no host, or an invalid port
        """
        parts = urlsplit(self.config.url)
        if parts.scheme not in ("http", "https"):
            raise SubsonicUrlError(f"Unable to determine scheme of {self.config.url!r}")

        host = parts.hostname
        if not host:
            raise SubsonicUrlError(f"Missing server address in {self.config.url!r}")

        try:
            port = parts.port
        except ValueError as e:
            raise SubsonicUrlError(f"Invalid port in {self.config.url!r}") from e

        if ":" in host:
            host = f"[{host}]"  # IPv6 literal
        netloc = host if port is None else f"{host}:{port}"
        path = parts.path.rstrip("/")

        url = f"{parts.scheme}://{netloc}{path}/rest/{operation}?"
        url += create_auth_params(self.config).encode()
        if query:
            url += "&" + query.encode()

        return url

    def _handle_response(self, response: httpx.Response) -> Envelope:
        """Parse and validate a Subsonic API response.

        Args:
            response: HTTP response from Subsonic server

        Returns:
            Parsed envelope

        Raises:
            SubsonicError: If API returned an error response
            SubsonicDecodeError: If the body is not a Subsonic JSON envelope
            httpx.HTTPStatusError: For HTTP-level errors
        """
        # Raise for HTTP errors (4xx, 5xx)
        response.raise_for_status()

        try:
            data = response.json()
        except ValueError as e:
            raise SubsonicDecodeError(f"Response is not valid JSON: {e}") from e

        envelope = Envelope.from_json(data)

        if envelope.error is not None:
            logger.error(
                f"Subsonic API error {envelope.error.code}: {envelope.error.message}"
            )
        envelope.raise_for_error()

        return envelope

    def _request(self, operation: str, query: Optional[Query] = None) -> httpx.Response:
        url = self.build_url(operation, query)
        logger.debug(f"Requesting {operation} from {self._base_url}")
        return self.client.get(url)

    def get(self, operation: str, query: Optional[Query] = None) -> Optional[Any]:
        """Issue an API operation and return its decoded payload.

        Args:
            operation: API operation name, as documented by Subsonic
            query: Operation arguments

        Returns:
            The payload value, or None for operations that only acknowledge
            success

        Raises:
            SubsonicError: If the server returned an API error
            SubsonicUrlError: If the configured URL is malformed
            SubsonicDecodeError: If the response is not a Subsonic envelope
            httpx.HTTPError: For network/HTTP errors
        """
        response = self._request(operation, query)
        return self._handle_response(response).value()

    send = get

    def get_raw(self, operation: str, query: Optional[Query] = None) -> str:
        """Issue an API operation and return the unparsed response body."""
        response = self._request(operation, query)
        response.raise_for_status()
        return response.text

    def get_bytes(self, operation: str, query: Optional[Query] = None) -> bytes:
        """Issue an API operation that answers with binary content.

        Servers report errors for binary endpoints as a JSON envelope, so a
        JSON body is decoded and its error raised.

        Raises:
            SubsonicError: If the server returned an API error
            SubsonicDecodeError: If a JSON body arrived without an error
            httpx.HTTPError: For network/HTTP errors
        """
        response = self._request(operation, query)

        content_type = response.headers.get("content-type", "")
        if content_type.startswith(("application/json", "text/json")):
            self._handle_response(response)
            raise SubsonicDecodeError(f"Expected binary content from {operation}, got JSON")

        response.raise_for_status()
        logger.debug(f"Received {len(response.content)} bytes from {operation}")
        return response.content

    def ping(self) -> bool:
        """Test server connectivity and authentication.

        Also records whether the server speaks OpenSubsonic.

        Returns:
            True if ping successful

        Raises:
            SubsonicAuthenticationError: If credentials are invalid
            SubsonicVersionError: If API version incompatible
            httpx.HTTPError: For network/HTTP errors
        """
        envelope = self._handle_response(self._request("ping"))

        self.opensubsonic = envelope.open_subsonic
        self.opensubsonic_version = envelope.server_version if envelope.open_subsonic else None
        self.server_type = envelope.server_type
        if self.opensubsonic:
            logger.info(
                f"OpenSubsonic server detected: {self.server_type} {self.opensubsonic_version}"
            )

        logger.info("Subsonic ping successful")
        return True

    def check_license(self) -> License:
        """Get details about the server's software license.

        Subsonic forks (Airsonic, Navidrome, ...) always report a valid
        license.
        """
        return License.from_dict(self.get("getLicense"))

    def scan_library(self) -> None:
        """Start a rescan of the media libraries (API 1.15.0+)."""
        self.get("startScan")
        logger.info("Library scan started")

    def scan_status(self) -> ScanStatus:
        """Get the status of the media library scan (API 1.15.0+)."""
        status = ScanStatus.from_dict(self.get("getScanStatus"))
        logger.info(f"Scan status: scanning={status.scanning}, count={status.count}")
        return status

    def music_folders(self) -> List[MusicFolder]:
        """Get all configured top-level music folders."""
        data = self.get("getMusicFolders")
        folders = [MusicFolder.from_dict(f) for f in list_field(data, "musicFolder")]
        logger.info(f"Retrieved {len(folders)} music folders")
        return folders

    def genres(self) -> List[Genre]:
        """Get all genres with their song and album counts."""
        genres = [Genre.from_dict(g) for g in list_field(self.get("getGenres"), "genre")]
        logger.info(f"Retrieved {len(genres)} genres")
        return genres

    def now_playing(self) -> List[NowPlaying]:
        """Get what every user is currently playing."""
        return [NowPlaying.from_dict(e) for e in list_field(self.get("getNowPlaying"), "entry")]

    def lyrics(self, artist: Optional[str] = None, title: Optional[str] = None) -> Optional[Lyrics]:
        """Search for lyrics by artist and title.

        Returns:
            Lyrics, or None if the server found none
        """
        query = Query().arg("artist", artist).arg("title", title)
        data = self.get("getLyrics", query)

        if not isinstance(data, dict) or data.get("value") is None:
            logger.debug(f"No lyrics found for {artist!r} - {title!r}")
            return None
        return Lyrics.from_dict(data)

    def search(
        self,
        query: str,
        artist_page: SearchPage = SearchPage(),
        album_page: SearchPage = SearchPage(),
        song_page: SearchPage = SearchPage(),
        music_folder_id: Optional[str] = None,
    ) -> SearchResult:
        """Search artists, albums and songs (search3 endpoint).

        Each result type pages independently; pass search.NONE to skip one.

        Args:
            query: Search query string
            artist_page: Paging for artists
            album_page: Paging for albums
            song_page: Paging for songs
            music_folder_id: Optional music folder to restrict the search to

        Returns:
            SearchResult with artists, albums and songs

        Example:
            >>> from subwire import search
            >>> result = client.search("smile", search.NONE, search.NONE, search.ALL)
            >>> print(f"Found {len(result.songs)} songs")
        """
        args = (
            Query.with_arg("query", query)
            .merge(artist_page.to_query("artistCount", "artistOffset"))
            .merge(album_page.to_query("albumCount", "albumOffset"))
            .merge(song_page.to_query("songCount", "songOffset"))
            .arg("musicFolderId", music_folder_id)
        )

        logger.debug(f"Searching for '{query}'")
        result = SearchResult.from_dict(self.get("search3", args))
        logger.info(
            f"Search for '{query}' found {len(result.artists)} artists, "
            f"{len(result.albums)} albums, {len(result.songs)} songs"
        )
        return result

    def starred(self, music_folder_id: Optional[str] = None) -> SearchResult:
        """Get all starred artists, albums and songs (getStarred2 endpoint)."""
        args = Query().arg("musicFolderId", music_folder_id)
        return SearchResult.from_dict(self.get("getStarred2", args))

    def cover_art_url(self, cover_art_id: str, size: Optional[int] = None) -> str:
        """Build a URL for an item's cover art without fetching it."""
        return self.build_url("getCoverArt", Query.with_arg("id", cover_art_id).arg("size", size))

    def get_cover_art(self, cover_art_id: str, size: Optional[int] = None) -> bytes:
        """Download an item's cover art image."""
        return self.get_bytes("getCoverArt", Query.with_arg("id", cover_art_id).arg("size", size))

    # Albums and artists (ID3 tags)

    def get_album(self, album_id: str) -> Album:
        """Get an album with its songs.

        Raises:
            SubsonicNotFoundError: If album_id does not exist
        """
        album = Album.from_dict(self.get("getAlbum", Query.with_arg("id", album_id)))
        logger.debug(f"Retrieved album {album.name!r} with {len(album.songs)} songs")
        return album

    def albums(
        self,
        list_type: str = "alphabeticalByArtist",
        page: SearchPage = SearchPage(),
        music_folder_id: Optional[str] = None,
        from_year: Optional[int] = None,
        to_year: Optional[int] = None,
        genre: Optional[str] = None,
    ) -> List[Album]:
        """List albums (getAlbumList2 endpoint).

        Args:
            list_type: One of ALBUM_LIST_TYPES
            page: Page size and offset
            music_folder_id: Optional music folder to list from
            from_year: First year, required for "byYear"
            to_year: Last year, required for "byYear"; may be before
                     from_year for reverse chronological order
            genre: Genre name, required for "byGenre"

        Returns:
            Albums without their songs

        Raises:
            ValueError: If list_type is unknown or its arguments are missing
        """
        if list_type not in ALBUM_LIST_TYPES:
            raise ValueError(
                f"list_type must be one of {', '.join(ALBUM_LIST_TYPES)}, got {list_type!r}"
            )
        if list_type == "byYear" and (from_year is None or to_year is None):
            raise ValueError("byYear listing needs from_year and to_year")
        if list_type == "byGenre" and not genre:
            raise ValueError("byGenre listing needs a genre")

        args = (
            Query.with_arg("type", list_type)
            .merge(page.to_query("size", "offset"))
            .arg("fromYear", from_year)
            .arg("toYear", to_year)
            .arg("genre", genre)
            .arg("musicFolderId", music_folder_id)
        )
        data = self.get("getAlbumList2", args)
        albums = [Album.from_dict(a) for a in list_field(data, "album")]
        logger.info(f"Retrieved {len(albums)} albums ({list_type})")
        return albums

    def album_info(self, album_id: str) -> AlbumInfo:
        """Get notes and external links for an album (getAlbumInfo2)."""
        return AlbumInfo.from_dict(self.get("getAlbumInfo2", Query.with_arg("id", album_id)))

    def get_artist(self, artist_id: str) -> Artist:
        """Get an artist with their albums."""
        return Artist.from_dict(self.get("getArtist", Query.with_arg("id", artist_id)))

    def artists(self, music_folder_id: Optional[str] = None) -> List[Artist]:
        """Get all artists (getArtists endpoint).

        The server groups artists under alphabetical indexes; this returns
        them as one flat list in index order.
        """
        data = self.get("getArtists", Query().arg("musicFolderId", music_folder_id))

        artists = []
        for index in list_field(data, "index"):
            artists.extend(Artist.from_dict(a) for a in list_field(index, "artist"))

        logger.info(f"Retrieved {len(artists)} artists")
        return artists

    def artist_info(
        self,
        artist_id: str,
        count: Optional[int] = None,
        include_not_present: Optional[bool] = None,
    ) -> ArtistInfo:
        """Get biography, links and similar artists (getArtistInfo2).

        Args:
            artist_id: Artist ID
            count: Maximum number of similar artists
            include_not_present: Include similar artists missing from the
                                 library
        """
        args = (
            Query.with_arg("id", artist_id)
            .arg("count", count)
            .arg("includeNotPresent", include_not_present)
        )
        return ArtistInfo.from_dict(self.get("getArtistInfo2", args))

    def similar_artists(
        self,
        artist_id: str,
        count: Optional[int] = None,
        include_not_present: Optional[bool] = None,
    ) -> List[Artist]:
        return self.artist_info(artist_id, count, include_not_present).similar_artists

    def top_songs(self, artist: str, count: Optional[int] = None) -> List[Song]:
        """Get an artist's top songs, by artist name (getTopSongs)."""
        data = self.get("getTopSongs", Query.with_arg("artist", artist).arg("count", count))
        return [Song.from_dict(s) for s in list_field(data, "song")]

    # Songs

    def get_song(self, song_id: str) -> Song:
        return Song.from_dict(self.get("getSong", Query.with_arg("id", song_id)))

    def similar_songs(self, song_id: str, count: Optional[int] = None) -> List[Song]:
        """Get songs similar to a song, album or artist (getSimilarSongs2)."""
        data = self.get("getSimilarSongs2", Query.with_arg("id", song_id).arg("count", count))
        return [Song.from_dict(s) for s in list_field(data, "song")]

    def random_songs(
        self,
        size: int = DEFAULT_RANDOM_SIZE,
        genre: Optional[str] = None,
        from_year: Optional[int] = None,
        to_year: Optional[int] = None,
        music_folder_id: Optional[str] = None,
    ) -> List[Song]:
        """Get random songs, optionally filtered.

        Args:
            size: Maximum number of songs (server caps this at 500)
            genre: Only songs in this genre
            from_year: Only songs released in or after this year
            to_year: Only songs released in or before this year
            music_folder_id: Only songs in this music folder

        Returns:
            List of Song objects
        """
        args = (
            Query.with_arg("size", size)
            .arg("genre", genre)
            .arg("fromYear", from_year)
            .arg("toYear", to_year)
            .arg("musicFolderId", music_folder_id)
        )
        songs = [Song.from_dict(s) for s in list_field(self.get("getRandomSongs", args), "song")]
        logger.info(f"Retrieved {len(songs)} random songs")
        return songs

    def songs_by_genre(
        self,
        genre: str,
        page: SearchPage = SearchPage(),
        music_folder_id: Optional[str] = None,
    ) -> List[Song]:
        """Get songs in a genre, a page at a time (getSongsByGenre)."""
        args = (
            Query.with_arg("genre", genre)
            .merge(page.to_query())
            .arg("musicFolderId", music_folder_id)
        )
        data = self.get("getSongsByGenre", args)
        return [Song.from_dict(s) for s in list_field(data, "song")]

    def _stream_query(
        self, song_id: str, max_bit_rate: Optional[int], audio_format: Optional[str]
    ) -> Query:
        return (
            Query.with_arg("id", song_id)
            .arg("maxBitRate", max_bit_rate)
            .arg("format", audio_format)
        )

    def stream_url(
        self,
        song_id: str,
        max_bit_rate: Optional[int] = None,
        audio_format: Optional[str] = None,
    ) -> str:
        """Build a streaming URL for a song without fetching it.

        The URL carries authentication, so players can use it directly.

        Args:
            song_id: Song ID
            max_bit_rate: Transcode to at most this bitrate in kbps
            audio_format: Transcode to this format (e.g. "mp3"); "raw" disables
                    transcoding
        """
        url = self.build_url("stream", self._stream_query(song_id, max_bit_rate, audio_format))
        logger.debug(f"Generated stream URL for song {song_id}")
        return url

    def stream(
        self,
        song_id: str,
        max_bit_rate: Optional[int] = None,
        audio_format: Optional[str] = None,
    ) -> bytes:
        """Download a song's audio, transcoded as requested."""
        return self.get_bytes("stream", self._stream_query(song_id, max_bit_rate, audio_format))

    def download_url(self, song_id: str) -> str:
        """Build a URL for the original, untranscoded file."""
        return self.build_url("download", Query.with_arg("id", song_id))

    def download(self, song_id: str) -> bytes:
        """Download the original, untranscoded file."""
        return self.get_bytes("download", Query.with_arg("id", song_id))

    # Playlists

    def playlists(self, username: Optional[str] = None) -> List[Playlist]:
        """Get playlists visible to the user, without their songs.

        Args:
            username: List this user's playlists instead (admins only)
        """
        data = self.get("getPlaylists", Query().arg("username", username))
        playlists = [Playlist.from_dict(p) for p in list_field(data, "playlist")]
        logger.info(f"Retrieved {len(playlists)} playlists")
        return playlists

    def get_playlist(self, playlist_id: str) -> Playlist:
        """Get a playlist with its songs."""
        return Playlist.from_dict(self.get("getPlaylist", Query.with_arg("id", playlist_id)))

    def create_playlist(self, name: str, song_ids: Iterable[str] = ()) -> Optional[Playlist]:
        """Create a playlist holding song_ids, in order.

        Returns:
            The new playlist, or None from servers older than API 1.14.0
            which do not return it
        """
        args = Query.with_arg("name", name).arg_list("songId", song_ids)
        data = self.get("createPlaylist", args)
        logger.info(f"Created playlist {name!r}")
        return None if data is None else Playlist.from_dict(data)

    def update_playlist(
        self,
        playlist_id: str,
        name: Optional[str] = None,
        comment: Optional[str] = None,
        public: Optional[bool] = None,
        song_ids_to_add: Optional[Iterable[str]] = None,
        song_indexes_to_remove: Optional[Iterable[int]] = None,
    ) -> None:
        """Update a playlist; only the given fields change.

        Args:
            playlist_id: Playlist ID
            name: New name
            comment: New comment
            public: Whether other users can see the playlist
            song_ids_to_add: Songs to append, in order
            song_indexes_to_remove: Zero-based positions of songs to remove
        """
        args = (
            Query.with_arg("playlistId", playlist_id)
            .arg("name", name)
            .arg("comment", comment)
            .arg("public", public)
            .arg_list("songIdToAdd", song_ids_to_add)
            .arg_list("songIndexToRemove", song_indexes_to_remove)
        )
        self.get("updatePlaylist", args)

    def delete_playlist(self, playlist_id: str) -> None:
        self.get("deletePlaylist", Query.with_arg("id", playlist_id))
        logger.info(f"Deleted playlist {playlist_id}")

    # Users

    def get_user(self, username: str) -> User:
        return User.from_dict(self.get("getUser", Query.with_arg("username", username)))

    def users(self) -> List[User]:
        """Get all user accounts (admins only)."""
        return [User.from_dict(u) for u in list_field(self.get("getUsers"), "user")]

    def _user_query(
        self,
        username: str,
        password: Optional[str],
        email: Optional[str],
        roles: Optional[Dict[str, bool]],
        music_folder_ids: Optional[Iterable[str]],
        max_bit_rate: Optional[int],
    ) -> Query:
        roles = roles or {}
        unknown = [role for role in roles if role not in USER_ROLES]
        if unknown:
            raise ValueError(f"Unknown user role(s): {', '.join(unknown)}")

        query = Query.with_arg("username", username).arg("password", password).arg("email", email)
        for role in USER_ROLES:
            query.arg(role, roles.get(role))
        return query.arg_list("musicFolderId", music_folder_ids).arg("maxBitRate", max_bit_rate)

    def create_user(
        self,
        username: str,
        password: str,
        email: str,
        roles: Optional[Dict[str, bool]] = None,
        music_folder_ids: Optional[Iterable[str]] = None,
        max_bit_rate: Optional[int] = None,
        ldap_authenticated: Optional[bool] = None,
    ) -> None:
        """Create a user account (admins only).

        Args:
            username: Login name
            password: Password
            email: Email address
            roles: Role flags keyed by USER_ROLES names, e.g.
                   {"adminRole": False, "jukeboxRole": True}; unset roles
                   take the server's defaults
            music_folder_ids: Folders the user may access (default: all)
            max_bit_rate: Streaming bitrate limit in kbps
            ldap_authenticated: Authenticate the user against LDAP

        Raises:
            ValueError: If roles names an unknown role
        """
        query = self._user_query(username, password, email, roles, music_folder_ids, max_bit_rate)
        self.get("createUser", query.arg("ldapAuthenticated", ldap_authenticated))
        logger.info(f"Created user {username}")

    def update_user(
        self,
        username: str,
        password: Optional[str] = None,
        email: Optional[str] = None,
        roles: Optional[Dict[str, bool]] = None,
        music_folder_ids: Optional[Iterable[str]] = None,
        max_bit_rate: Optional[int] = None,
    ) -> None:
        """Update a user account; only the given fields change."""
        query = self._user_query(username, password, email, roles, music_folder_ids, max_bit_rate)
        self.get("updateUser", query)

    def delete_user(self, username: str) -> None:
        self.get("deleteUser", Query.with_arg("username", username))
        logger.info(f"Deleted user {username}")

    def change_password(self, username: str, password: str) -> None:
        """Change a user's password.

        Users can change their own password; changing others' needs admin.
        The client's own config keeps the old password.
        """
        self.get("changePassword", Query.with_arg("username", username).arg("password", password))

    def get_avatar(self, username: str) -> bytes:
        return self.get_bytes("getAvatar", Query.with_arg("username", username))

    # Internet radio

    def radio_stations(self) -> List[RadioStation]:
        data = self.get("getInternetRadioStations")
        return [RadioStation.from_dict(s) for s in list_field(data, "internetRadioStation")]

    def create_radio_station(
        self, name: str, stream_url: str, homepage_url: Optional[str] = None
    ) -> None:
        args = (
            Query.with_arg("streamUrl", stream_url)
            .arg("name", name)
            .arg("homepageUrl", homepage_url)
        )
        self.get("createInternetRadioStation", args)

    def update_radio_station(
        self,
        station_id: str,
        name: str,
        stream_url: str,
        homepage_url: Optional[str] = None,
    ) -> None:
        """Replace a station's name, stream URL and homepage."""
        args = (
            Query.with_arg("id", station_id)
            .arg("streamUrl", stream_url)
            .arg("name", name)
            .arg("homepageUrl", homepage_url)
        )
        self.get("updateInternetRadioStation", args)

    def delete_radio_station(self, station_id: str) -> None:
        self.get("deleteInternetRadioStation", Query.with_arg("id", station_id))

    # Podcasts

    def podcasts(
        self,
        include_episodes: Optional[bool] = None,
        channel_id: Optional[str] = None,
    ) -> List[PodcastChannel]:
        """Get subscribed podcast channels.

        Args:
            include_episodes: Include episodes (server default: True)
            channel_id: Only this channel
        """
        args = Query().arg("includeEpisodes", include_episodes).arg("id", channel_id)
        data = self.get("getPodcasts", args)
        return [PodcastChannel.from_dict(c) for c in list_field(data, "channel")]

    def newest_podcasts(self, count: Optional[int] = None) -> List[PodcastEpisode]:
        """Get the most recently published episodes across all channels."""
        data = self.get("getNewestPodcasts", Query().arg("count", count))
        return [PodcastEpisode.from_dict(e) for e in list_field(data, "episode")]

    def refresh_podcasts(self) -> None:
        """Ask the server to check every channel for new episodes."""
        self.get("refreshPodcasts")

    def create_podcast_channel(self, url: str) -> None:
        self.get("createPodcastChannel", Query.with_arg("url", url))
        logger.info(f"Subscribed to podcast {url}")

    def delete_podcast_channel(self, channel_id: str) -> None:
        self.get("deletePodcastChannel", Query.with_arg("id", channel_id))

    def download_podcast_episode(self, episode_id: str) -> None:
        """Ask the server to download an episode to its library."""
        self.get("downloadPodcastEpisode", Query.with_arg("id", episode_id))

    def delete_podcast_episode(self, episode_id: str) -> None:
        self.get("deletePodcastEpisode", Query.with_arg("id", episode_id))

    # Annotation

    def _item_query(self, item_id: str, item_type: str) -> Query:
        try:
            key = ITEM_ID_KEYS[item_type]
        except KeyError:
            raise ValueError(
                f"item_type must be one of {', '.join(ITEM_ID_KEYS)}, got {item_type!r}"
            ) from None
        return Query.with_arg(key, item_id)

    def star(self, item_id: str, item_type: str = "song") -> bool:
        """Star (favorite) a song, album, or artist.

        Args:
            item_id: ID of the item to star
            item_type: "song", "album", or "artist" (default: "song")

        Returns:
            True if successfully starred

        Raises:
            ValueError: If item_type is unknown
            SubsonicNotFoundError: If item_id does not exist
        """
        logger.debug(f"Starring {item_type}: {item_id}")
        self.get("star", self._item_query(item_id, item_type))
        return True

    def unstar(self, item_id: str, item_type: str = "song") -> bool:
        """Remove the star from a song, album, or artist."""
        logger.debug(f"Unstarring {item_type}: {item_id}")
        self.get("unstar", self._item_query(item_id, item_type))
        return True

    def set_rating(self, item_id: str, rating: int) -> bool:
        """Rate an item from 1 to 5; 0 removes the rating.

        Raises:
            ValueError: If rating is outside 0..5
        """
        if not 0 <= rating <= MAX_RATING:
            raise ValueError("rating must be between 0 and 5 inclusive")

        self.get("setRating", Query.with_arg("id", item_id).arg("rating", rating))
        return True

    def scrobble(
        self,
        item_id: str,
        time: Optional[int] = None,
        now_playing: Optional[bool] = None,
    ) -> bool:
        """Register playback of a song.

        Args:
            item_id: ID of the song that was played
            time: When playback started, in milliseconds since the epoch.
                  The server uses the current time if omitted.
            now_playing: If True, only update "now playing" instead of
                  submitting a scrobble. Server default if omitted.

        Returns:
            True if the server accepted the scrobble
        """
        submission = None if now_playing is None else not now_playing
        args = Query.with_arg("id", item_id).arg("time", time).arg("submission", submission)

        self.get("scrobble", args)
        logger.info(f"Scrobbled {item_id}")
        return True

    def close(self):
        """Close HTTP client and release resources."""
        self.client.close()
        logger.info("Closed Subsonic client")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - automatically close client."""
        self.close()
