"""Integration tests for SubsonicClient.

These tests use pytest-mock to mock httpx.Client responses and validate the
SubsonicClient implementation against the Subsonic API. All HTTP calls are
mocked - no real server requests are made.

Test Coverage:
- URL assembly and malformed addresses
- Authentication arguments per protocol version
- Server operations (ping, license, scan, folders, genres, search, ...)
- Annotation operations (star, rating, scrobble)
"""

import json
from pathlib import Path
from typing import Any, Dict
from urllib.parse import parse_qsl, urlsplit

import httpx
import pytest
from pytest_mock import MockerFixture

from subwire import search
from subwire.auth import verify_token
from subwire.client import SubsonicClient
from subwire.exceptions import (
    SubsonicAuthenticationError,
    SubsonicDecodeError,
    SubsonicNotFoundError,
    SubsonicUrlError,
)
from subwire.models import SubsonicConfig
from subwire.query import Query
from subwire.search import SearchPage


@pytest.fixture
def fixtures() -> Dict[str, Any]:
    """Load Subsonic API response fixtures from JSON file."""
    fixtures_path = Path(__file__).parent / "fixtures" / "subsonic_responses.json"
    with open(fixtures_path, "r") as f:
        return json.load(f)


@pytest.fixture
def config() -> SubsonicConfig:
    return SubsonicConfig(
        url="https://music.example.com",
        username="testuser",
        password="testpass",
        client_name="subwire-test",
        api_version="1.16.1",
    )


@pytest.fixture
def client(config: SubsonicConfig, mocker: MockerFixture) -> SubsonicClient:
    """Create a SubsonicClient whose httpx.Client is mocked."""
    mock_client = mocker.MagicMock(spec=httpx.Client)
    mocker.patch("httpx.Client", return_value=mock_client)

    return SubsonicClient(config)


def mock_response(status_code: int, json_data: Dict[str, Any]) -> httpx.Response:
    """Create an httpx.Response carrying a JSON body."""
    return httpx.Response(
        status_code=status_code,
        json=json_data,
        request=httpx.Request("GET", "https://music.example.com/rest/ping"),
    )


def requested(client: SubsonicClient):
    """Return (path, argument pairs) of the last request."""
    url = client.client.get.call_args[0][0]
    parts = urlsplit(url)
    return parts.path, parse_qsl(parts.query, keep_blank_values=True)


def make_client(url: str) -> SubsonicClient:
    config = SubsonicConfig(url=url, username="u", password="p")
    return SubsonicClient(config, transport=httpx.MockTransport(lambda request: None))


class TestBuildUrl:
    """Test request URL assembly."""

    def test_url_layout(self, client: SubsonicClient):
        """Test operation path, auth arguments, then query arguments."""
        url = client.build_url("getAlbum", Query.with_arg("id", 64))
        parts = urlsplit(url)
        pairs = parse_qsl(parts.query)

        assert parts.scheme == "https"
        assert parts.netloc == "music.example.com"
        assert parts.path == "/rest/getAlbum"
        assert [key for key, _ in pairs] == ["u", "t", "s", "v", "c", "f", "id"]
        assert pairs[-1] == ("id", "64")

    def test_no_trailing_separator_without_query(self, client: SubsonicClient):
        """Test an empty query adds no trailing '&'."""
        assert not client.build_url("ping").endswith("&")
        assert not client.build_url("ping", Query()).endswith("&")

    def test_port_and_path_preserved(self):
        """Test base addresses with port and sub-path."""
        c = make_client("https://example.com:4533/music/")
        url = c.build_url("ping")
        assert url.startswith("https://example.com:4533/music/rest/ping?u=u&")

    def test_ipv6_host(self):
        """Test IPv6 literals keep their brackets."""
        c = make_client("https://[::1]:4040")
        assert c.build_url("ping").startswith("https://[::1]:4040/rest/ping?")

    @pytest.mark.parametrize(
        "url",
        ["music.example.com", "ftp://music.example.com", "https://", "localhost:4040"],
    )
    def test_malformed_url(self, url):
        """Test addresses without http(s) scheme or host are rejected."""
        c = make_client(url)
        with pytest.raises(SubsonicUrlError):
            c.build_url("ping")

    def test_invalid_port(self):
        """Test an unparsable port is a URL error."""
        c = make_client("https://example.com:notaport")
        with pytest.raises(SubsonicUrlError):
            c.build_url("ping")

    def test_malformed_url_before_io(self, mocker: MockerFixture):
        """Test no request is sent for a malformed address."""
        mock_client = mocker.MagicMock(spec=httpx.Client)
        mocker.patch("httpx.Client", return_value=mock_client)
        c = SubsonicClient(SubsonicConfig(url="example.com", username="u", password="p"))

        with pytest.raises(SubsonicUrlError):
            c.ping()
        mock_client.get.assert_not_called()

    def test_legacy_auth_for_old_servers(self, config: SubsonicConfig):
        """Test a pre-1.13.0 client sends u/p and no token."""
        c = SubsonicClient(
            SubsonicConfig(
                url=config.url, username="testuser", password="testpass", api_version="1.12.0"
            ),
            transport=httpx.MockTransport(lambda request: None),
        )
        url = c.build_url("ping")
        assert "?u=testuser&p=testpass&v=1.12.0&c=subwire&f=json" in url

    def test_token_auth_values(self, client: SubsonicClient, config: SubsonicConfig):
        """Test token arguments verify against the password."""
        pairs = dict(parse_qsl(urlsplit(client.build_url("ping")).query))
        assert "p" not in pairs
        assert pairs["c"] == "subwire-test"
        assert pairs["v"] == "1.16.1"
        assert pairs["f"] == "json"
        assert verify_token(config, pairs["t"], pairs["s"])

    def test_with_version(self, client: SubsonicClient):
        """Test with_version builds a client for another version."""
        old = client.with_version("1.12")
        assert old.config.api_version == "1.12.0"
        assert client.config.api_version == "1.16.1"
        assert "&p=testpass&" in old.build_url("ping")


class TestMockTransport:
    """End-to-end requests through a real httpx.Client."""

    def test_round_trip(self, config: SubsonicConfig, fixtures: Dict[str, Any]):
        """Test the request reaches the transport and the payload decodes."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=fixtures["getScanStatus"])

        with SubsonicClient(config, transport=httpx.MockTransport(handler)) as c:
            status = c.scan_status()

        assert status.scanning is False
        assert status.count == 521
        assert seen[0].url.path == "/rest/getScanStatus"
        assert seen[0].url.params["f"] == "json"

    def test_with_version_keeps_transport(self, config: SubsonicConfig, fixtures: Dict[str, Any]):
        """Test a derived client sends through the same transport."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=fixtures["ping_success"])

        client = SubsonicClient(config, transport=httpx.MockTransport(handler))
        older = client.with_version("1.12.0")

        assert older.ping() is True
        assert len(seen) == 1
        assert seen[0].url.params["v"] == "1.12.0"
        assert seen[0].url.params["p"] == "testpass"
        older.close()


class TestAuthentication:
    """Test cases for the ping endpoint."""

    def test_ping_success(self, client: SubsonicClient, fixtures: Dict[str, Any]):
        """Test successful ping with valid credentials."""
        client.client.get.return_value = mock_response(200, fixtures["ping_success"])

        assert client.ping() is True
        assert client.opensubsonic is False
        assert client.opensubsonic_version is None

        path, _ = requested(client)
        assert path == "/rest/ping"

    def test_ping_auth_failure(self, client: SubsonicClient, fixtures: Dict[str, Any]):
        """Test authentication failure with wrong credentials."""
        client.client.get.return_value = mock_response(200, fixtures["ping_auth_failure"])

        with pytest.raises(SubsonicAuthenticationError) as exc_info:
            client.ping()

        assert exc_info.value.code == 40
        assert "Wrong username or password" in exc_info.value.message

    def test_ping_opensubsonic_detection(self, client: SubsonicClient, fixtures: Dict[str, Any]):
        """Test OpenSubsonic server detection during ping."""
        client.client.get.return_value = mock_response(200, fixtures["ping_opensubsonic"])

        assert client.ping() is True
        assert client.opensubsonic is True
        assert client.opensubsonic_version == "0.53.3"
        assert client.server_type == "navidrome"


class TestSend:
    """Test the generic get/send operation."""

    def test_returns_payload(self, client: SubsonicClient, fixtures: Dict[str, Any]):
        """Test get returns the raw payload value."""
        client.client.get.return_value = mock_response(200, fixtures["getGenres"])

        payload = client.send("getGenres")
        assert payload["genre"][0]["value"] == "Rock"

    def test_no_payload(self, client: SubsonicClient, fixtures: Dict[str, Any]):
        """Test acknowledgement-only responses return None."""
        client.client.get.return_value = mock_response(200, fixtures["empty_ok"])
        assert client.get("startScan") is None

    def test_not_found(self, client: SubsonicClient, fixtures: Dict[str, Any]):
        """Test protocol errors are raised."""
        client.client.get.return_value = mock_response(200, fixtures["not_found"])
        with pytest.raises(SubsonicNotFoundError):
            client.get("getSong", Query.with_arg("id", "missing"))

    def test_get_raw(self, client: SubsonicClient):
        """Test get_raw returns the body text."""
        client.client.get.return_value = httpx.Response(
            200, text="<xml/>", request=httpx.Request("GET", "https://music.example.com")
        )
        assert client.get_raw("getPodcasts") == "<xml/>"


class TestServerOperations:
    """Test server-level operations."""

    def test_check_license(self, client: SubsonicClient, fixtures: Dict[str, Any]):
        client.client.get.return_value = mock_response(200, fixtures["getLicense"])

        license = client.check_license()
        assert license.valid is True
        assert license.email == "demo@subsonic.org"
        assert license.trialExpires is None

    def test_scan_library(self, client: SubsonicClient, fixtures: Dict[str, Any]):
        client.client.get.return_value = mock_response(200, fixtures["empty_ok"])

        assert client.scan_library() is None
        path, _ = requested(client)
        assert path == "/rest/startScan"

    def test_music_folders(self, client: SubsonicClient, fixtures: Dict[str, Any]):
        client.client.get.return_value = mock_response(200, fixtures["getMusicFolders"])

        folders = client.music_folders()
        assert [f.id for f in folders] == ["1", "2"]
        assert folders[0].name == "Music"

    def test_genres(self, client: SubsonicClient, fixtures: Dict[str, Any]):
        client.client.get.return_value = mock_response(200, fixtures["getGenres"])

        genres = client.genres()
        assert [g.name for g in genres] == ["Rock", "Jazz"]
        assert genres[0].songCount == 120

    def test_genres_single_object(self, client: SubsonicClient, fixtures: Dict[str, Any]):
        """Test a lone object where a list is expected."""
        client.client.get.return_value = mock_response(200, fixtures["getGenres_single"])
        assert [g.name for g in client.genres()] == ["Ambient"]

    def test_now_playing(self, client: SubsonicClient, fixtures: Dict[str, Any]):
        client.client.get.return_value = mock_response(200, fixtures["getNowPlaying"])

        entries = client.now_playing()
        assert len(entries) == 1
        assert entries[0].username == "john"
        assert entries[0].playerId == "7"
        assert entries[0].song.title == "Bohemian Rhapsody"

    def test_lyrics(self, client: SubsonicClient, fixtures: Dict[str, Any]):
        client.client.get.return_value = mock_response(200, fixtures["getLyrics"])

        lyrics = client.lyrics("Queen", "Bohemian Rhapsody")
        assert lyrics.value == "Is this the real life?"

        _, pairs = requested(client)
        assert pairs[-2:] == [("artist", "Queen"), ("title", "Bohemian Rhapsody")]

    def test_lyrics_not_found(self, client: SubsonicClient, fixtures: Dict[str, Any]):
        client.client.get.return_value = mock_response(200, fixtures["getLyrics_empty"])
        assert client.lyrics("Nobody", "Nothing") is None

    def test_lyrics_omits_absent_arguments(self, client: SubsonicClient, fixtures: Dict[str, Any]):
        client.client.get.return_value = mock_response(200, fixtures["getLyrics_empty"])

        client.lyrics(title="Only title")
        _, pairs = requested(client)
        keys = [key for key, _ in pairs]
        assert "artist" not in keys
        assert pairs[-1] == ("title", "Only title")

    def test_search(self, client: SubsonicClient, fixtures: Dict[str, Any]):
        client.client.get.return_value = mock_response(200, fixtures["search3"])

        page = SearchPage().with_size(1)
        result = client.search("dada", page, page, page)

        assert result.artists[0].id == "14"
        assert result.artists[0].name == "The Dada Weatherman"
        assert result.artists[0].albumCount == 4
        assert result.albums[0].name == "The Green Waltz"
        assert result.songs[0].id == "222"

        path, pairs = requested(client)
        assert path == "/rest/search3"
        assert pairs[6:] == [
            ("query", "dada"),
            ("artistCount", "1"),
            ("artistOffset", "0"),
            ("albumCount", "1"),
            ("albumOffset", "0"),
            ("songCount", "1"),
            ("songOffset", "0"),
        ]

    def test_search_ignoring_types(self, client: SubsonicClient, fixtures: Dict[str, Any]):
        client.client.get.return_value = mock_response(200, fixtures["search3_empty"])

        result = client.search("smile", search.NONE, search.NONE, search.ALL)
        assert result.artists == [] and result.albums == [] and result.songs == []

        _, pairs = requested(client)
        assert ("artistCount", "0") in pairs
        assert ("songCount", "500") in pairs

    def test_search_escapes_query(self, client: SubsonicClient, fixtures: Dict[str, Any]):
        """Test reserved characters in the search text survive."""
        client.client.get.return_value = mock_response(200, fixtures["search3_empty"])

        client.search("rock & roll")
        url = client.client.get.call_args[0][0]
        assert "query=rock%20%26%20roll" in url
        _, pairs = requested(client)
        assert ("query", "rock & roll") in pairs

    def test_starred(self, client: SubsonicClient, fixtures: Dict[str, Any]):
        client.client.get.return_value = mock_response(200, fixtures["getStarred2"])

        result = client.starred()
        assert result.songs[0].starred == "2024-01-01T00:00:00Z"
        path, _ = requested(client)
        assert path == "/rest/getStarred2"

    def test_cover_art_url(self, client: SubsonicClient):
        url = client.cover_art_url("al-23", size=300)
        assert "/rest/getCoverArt?" in url
        assert url.endswith("&id=al-23&size=300")
        client.client.get.assert_not_called()

    def test_get_cover_art(self, client: SubsonicClient):
        client.client.get.return_value = httpx.Response(
            200,
            content=b"\x89PNG",
            headers={"content-type": "image/png"},
            request=httpx.Request("GET", "https://music.example.com"),
        )
        assert client.get_cover_art("al-23") == b"\x89PNG"

    def test_get_cover_art_error(self, client: SubsonicClient, fixtures: Dict[str, Any]):
        """Test a JSON error body on a binary endpoint raises the error."""
        client.client.get.return_value = mock_response(200, fixtures["not_found"])
        with pytest.raises(SubsonicNotFoundError):
            client.get_cover_art("missing")

    def test_get_bytes_unexpected_json(self, client: SubsonicClient, fixtures: Dict[str, Any]):
        client.client.get.return_value = mock_response(200, fixtures["empty_ok"])
        with pytest.raises(SubsonicDecodeError):
            client.get_bytes("getAvatar", Query.with_arg("username", "john"))


class TestAnnotation:
    """Test star, rating and scrobble operations."""

    @pytest.mark.parametrize(
        "item_type,key", [("song", "id"), ("album", "albumId"), ("artist", "artistId")]
    )
    def test_star(self, client, fixtures, item_type, key):
        client.client.get.return_value = mock_response(200, fixtures["empty_ok"])

        assert client.star("42", item_type) is True
        path, pairs = requested(client)
        assert path == "/rest/star"
        assert pairs[-1] == (key, "42")

    def test_unstar(self, client, fixtures):
        client.client.get.return_value = mock_response(200, fixtures["empty_ok"])

        assert client.unstar("42", "album") is True
        path, pairs = requested(client)
        assert path == "/rest/unstar"
        assert pairs[-1] == ("albumId", "42")

    def test_star_unknown_type(self, client):
        with pytest.raises(ValueError):
            client.star("42", "playlist")
        client.client.get.assert_not_called()

    def test_set_rating(self, client, fixtures):
        client.client.get.return_value = mock_response(200, fixtures["empty_ok"])

        client.set_rating("42", 5)
        _, pairs = requested(client)
        assert pairs[-2:] == [("id", "42"), ("rating", "5")]

    @pytest.mark.parametrize("rating", [-1, 6])
    def test_set_rating_out_of_range(self, client, rating):
        with pytest.raises(ValueError):
            client.set_rating("42", rating)
        client.client.get.assert_not_called()

    def test_scrobble_defaults(self, client, fixtures):
        """Test omitted time and submission are not sent."""
        client.client.get.return_value = mock_response(200, fixtures["empty_ok"])

        client.scrobble("42")
        _, pairs = requested(client)
        assert pairs[-1] == ("id", "42")

    def test_scrobble_now_playing(self, client, fixtures):
        """Test now_playing=True sends submission=false."""
        client.client.get.return_value = mock_response(200, fixtures["empty_ok"])

        client.scrobble("42", time=1700000000000, now_playing=True)
        _, pairs = requested(client)
        assert pairs[-3:] == [("id", "42"), ("time", "1700000000000"), ("submission", "false")]


class TestLifecycle:
    """Test client resource management."""

    def test_context_manager_closes(self, client):
        with client as c:
            assert c is client
        client.client.close.assert_called_once()
