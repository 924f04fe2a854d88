"""Tests for the shared HTTP client."""

from unittest.mock import Mock

import pytest
import requests

from album_mirror.config import Config
from album_mirror.core.http import FetchErrorKind, HttpClient
from album_mirror.exceptions import ArtworkFetchFailure


@pytest.fixture
def session():
    """Create a mock requests session."""
    session = Mock()
    session.headers = {}
    return session


@pytest.fixture
def client(session):
    """Create an HttpClient around the mock session."""
    return HttpClient(session=session, timeout=12.0, user_agent="album-mirror/test")


def make_response(json_data=None, content=b""):
    """Create a mock response."""
    response = Mock()
    response.json.return_value = json_data
    response.content = content
    return response


class TestHttpClient:
    """Test HttpClient request handling."""

    def test_default_headers(self, client, session):
        """Test default headers are set on the session."""
        assert session.headers["Accept"] == "application/json"
        assert session.headers["User-Agent"] == "album-mirror/test"

    def test_from_config(self, monkeypatch):
        """Test client is configured from Config."""
        monkeypatch.delenv("ALBUM_MIRROR_HTTP_TIMEOUT", raising=False)
        client = HttpClient.from_config(Config({"http_timeout": 3}))
        try:
            assert client.timeout == 3.0
            assert client.session.headers["User-Agent"].startswith("album-mirror/")
        finally:
            client.close()

    def test_get_json(self, client, session):
        """Test JSON GET passes timeout, params and headers."""
        session.request.return_value = make_response({"id": 1})

        data = client.get_json(
            "https://api.example/x",
            params={"a": "b"},
            headers={"Authorization": "Bearer t"},
        )

        assert data == {"id": 1}
        session.request.assert_called_once_with(
            "GET",
            "https://api.example/x",
            timeout=12.0,
            params={"a": "b"},
            headers={"Authorization": "Bearer t"},
        )

    def test_get_bytes(self, client, session):
        """Test raw body download."""
        session.request.return_value = make_response(content=b"\xff\xd8")

        assert client.get_bytes("https://img.example/a.jpg") == b"\xff\xd8"

    def test_post_form(self, client, session):
        """Test form POST sends data."""
        session.request.return_value = make_response({"ok": True})

        assert client.post_form("https://auth.example", data={"k": "v"}) == {
            "ok": True
        }
        session.request.assert_called_once_with(
            "POST", "https://auth.example", timeout=12.0, data={"k": "v"}
        )

    def test_transport_failure(self, client, session):
        """Test connection errors become transport failures."""
        session.request.side_effect = requests.exceptions.ConnectionError("down")

        with pytest.raises(ArtworkFetchFailure) as exc_info:
            client.get_json("https://api.example/x")

        assert exc_info.value.kind == FetchErrorKind.TRANSPORT.value

    def test_timeout_is_transport_failure(self, client, session):
        """Test timeouts become transport failures."""
        session.request.side_effect = requests.exceptions.Timeout("slow")

        with pytest.raises(ArtworkFetchFailure) as exc_info:
            client.get_bytes("https://img.example/a.jpg")

        assert exc_info.value.kind == FetchErrorKind.TRANSPORT.value

    def test_http_error_status(self, client, session):
        """Test error status codes become http_status failures."""
        response = make_response()
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("404")
        session.request.return_value = response

        with pytest.raises(ArtworkFetchFailure) as exc_info:
            client.get_json("https://api.example/x")

        assert exc_info.value.kind == FetchErrorKind.HTTP_STATUS.value

    def test_invalid_json(self, client, session):
        """Test undecodable bodies become deserialization failures."""
        response = make_response()
        response.json.side_effect = ValueError("Expecting value")
        session.request.return_value = response

        with pytest.raises(ArtworkFetchFailure) as exc_info:
            client.get_json("https://api.example/x")

        assert exc_info.value.kind == FetchErrorKind.DESERIALIZATION.value

    def test_context_manager_closes_session(self, session):
        """Test leaving the context closes the session."""
        with HttpClient(session=session):
            pass
        session.close.assert_called_once()
