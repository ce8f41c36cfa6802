"""Unit tests for the CHIM API client."""

import json
from urllib.parse import parse_qs

import httpx
import pytest

from chim_mcp.core.config.user_config import ChimConfig
from chim_mcp.core.mcp.exceptions import (
    ChimApiError,
    ChimTransportError,
    ConfigurationError,
)
from chim_mcp.servers.chim.client import ApiResponse, ChimClient, RequestOptions
from tests.utils.chim_test_helpers import RecordingTransport


class TestClientConfiguration:
    """Test client construction."""

    @pytest.mark.unit
    def test_trailing_slash_is_stripped(self):
        # Arrange
        config = ChimConfig(base_url="https://api.chim.test/", user_agent="ua")

        # Act
        client = ChimClient(config)

        # Assert
        assert client.base_url == "https://api.chim.test"
        assert client.config is config

    @pytest.mark.unit
    def test_base_url_without_trailing_slash_is_kept(self):
        client = ChimClient(ChimConfig(base_url="https://api.chim.test/v", user_agent="ua"))

        assert client.base_url == "https://api.chim.test/v"


class TestUrlBuilding:
    """Test path normalization and query handling."""

    @pytest.mark.unit
    @pytest.mark.parametrize("path", ["/api/status/", "api/status/"])
    def test_path_gets_single_leading_slash(self, chim_client, path):
        # Act
        url = chim_client.build_url(path)

        # Assert
        assert str(url) == "https://api.chim.test/api/status/"

    @pytest.mark.unit
    def test_none_query_values_are_omitted(self, chim_client):
        # Act
        url = chim_client.build_url(
            "/api/v1/changes/", {"page": 2, "page_size": None, "search": None}
        )

        # Assert
        assert parse_qs(url.query.decode()) == {"page": ["2"]}

    @pytest.mark.unit
    def test_query_values_are_stringified(self, chim_client):
        # Act
        url = chim_client.build_url(
            "/x", {"page": 1, "active": True, "archived": False, "q": "db outage"}
        )

        # Assert
        params = parse_qs(url.query.decode())
        assert params == {
            "page": ["1"],
            "active": ["true"],
            "archived": ["false"],
            "q": ["db outage"],
        }

    @pytest.mark.unit
    def test_query_set_overwrites_existing_key(self, chim_client):
        # Arrange: the path already carries page=1
        path = "/api/v1/changes/?page=1"

        # Act
        url = chim_client.build_url(path, {"page": 3})

        # Assert
        assert parse_qs(url.query.decode()) == {"page": ["3"]}

    @pytest.mark.unit
    def test_relative_base_url_is_rejected(self):
        client = ChimClient(ChimConfig(base_url="not-a-url", user_agent="ua"))

        with pytest.raises(ConfigurationError, match="must be absolute"):
            client.build_url("/api/status/")


class TestRequestHeaders:
    """Test headers sent with each request."""

    @pytest.mark.unit
    async def test_authenticated_request_sends_api_key(self, chim_client, ok_transport):
        # Act
        await chim_client.request(RequestOptions(path="/api/v1/changes/"))

        # Assert
        headers = ok_transport.last_request.headers
        assert headers["Authorization"] == "Api-Key test-key"
        assert headers["User-Agent"] == "test-agent/1.0"
        assert headers["Accept"] == "application/json"
        assert "Content-Type" not in headers

    @pytest.mark.unit
    async def test_unauthenticated_request_never_sends_authorization(
        self, chim_client, ok_transport
    ):
        # Act
        await chim_client.request(
            RequestOptions(path="/api/status/", requires_auth=False)
        )

        # Assert
        assert "Authorization" not in ok_transport.last_request.headers
        assert str(ok_transport.last_request.url) == "https://api.chim.test/api/status/"

    @pytest.mark.unit
    async def test_missing_api_key_fails_before_network(self, anonymous_config):
        # Arrange
        transport = RecordingTransport(json_body={"status": "ok"})
        client = ChimClient(anonymous_config, transport=transport)

        # Act / Assert
        with pytest.raises(ConfigurationError, match="CHIM_API_KEY"):
            await client.request(RequestOptions(path="/api/v1/changes/"))
        assert transport.requests == []

    @pytest.mark.unit
    async def test_missing_api_key_is_fine_for_public_endpoints(self, anonymous_config):
        # Arrange
        transport = RecordingTransport(json_body={"frozen": False})
        client = ChimClient(anonymous_config, transport=transport)

        # Act
        result = await client.request(
            RequestOptions(path="/api/status/", requires_auth=False)
        )

        # Assert
        assert result is not None
        assert result.content == {"frozen": False}
        assert len(transport.requests) == 1


class TestRequestBody:
    """Test request body encoding."""

    @pytest.mark.unit
    async def test_object_body_is_json_encoded(self, chim_client, ok_transport):
        # Arrange
        payload = {"title": "Test Change", "summary": "Ünïcode summary"}

        # Act
        await chim_client.request(
            RequestOptions(path="/api/v1/changes/", method="POST", body=payload)
        )

        # Assert
        request = ok_transport.last_request
        assert request.method == "POST"
        assert request.headers["Content-Type"] == "application/json"
        assert ok_transport.last_json_body() == payload

    @pytest.mark.unit
    async def test_string_body_is_sent_verbatim(self, chim_client, ok_transport):
        # Arrange
        body = '{"title": "pre-encoded"}'

        # Act
        await chim_client.request(
            RequestOptions(path="/api/v1/changes/", method="POST", body=body)
        )

        # Assert
        assert ok_transport.last_request.content == body.encode("utf-8")
        assert ok_transport.last_request.headers["Content-Type"] == "application/json"

    @pytest.mark.unit
    async def test_explicit_none_body_is_sent_as_json_null(self, chim_client, ok_transport):
        # Act
        await chim_client.request(
            RequestOptions(path="/api/v1/changes/", method="POST", body=None)
        )

        # Assert
        request = ok_transport.last_request
        assert request.content == b"null"
        assert request.headers["Content-Type"] == "application/json"

    @pytest.mark.unit
    def test_unset_body_is_absent(self):
        assert RequestOptions(path="/x").has_body is False
        assert RequestOptions(path="/x", body=None).has_body is True


class TestResponseHandling:
    """Test how response bodies and statuses are surfaced."""

    @pytest.mark.unit
    async def test_json_body_is_parsed(self, chim_client):
        # Act
        result = await chim_client.request(RequestOptions(path="/api/v1/changes/"))

        # Assert
        assert isinstance(result, ApiResponse)
        assert result.is_json is True
        assert result.content == {"status": "ok"}

    @pytest.mark.unit
    async def test_empty_body_yields_none(self, chim_config):
        client = ChimClient(chim_config, transport=RecordingTransport(status_code=204))

        result = await client.request(RequestOptions(path="/api/v1/changes/"))

        assert result is None

    @pytest.mark.unit
    async def test_non_json_body_falls_back_to_text(self, chim_config):
        # Arrange
        transport = RecordingTransport(text="<html>maintenance</html>")
        client = ChimClient(chim_config, transport=transport)

        # Act
        result = await client.request(RequestOptions(path="/api/v1/changes/"))

        # Assert
        assert result is not None
        assert result.is_json is False
        assert result.content == "<html>maintenance</html>"
        assert result.raw == "<html>maintenance</html>"

    @pytest.mark.unit
    async def test_error_status_includes_code_reason_and_body(self, chim_config):
        # Arrange
        client = ChimClient(
            chim_config, transport=RecordingTransport(status_code=404, text="not found")
        )

        # Act
        with pytest.raises(ChimApiError) as exc_info:
            await client.request(RequestOptions(path="/api/v1/changes/"))

        # Assert
        error = exc_info.value
        assert "404" in str(error)
        assert "not found" in str(error)
        assert str(error) == "CHIM API request failed (404 Not Found): not found"
        assert error.status_code == 404
        assert error.reason == "Not Found"
        assert error.body == "not found"

    @pytest.mark.unit
    async def test_error_status_without_body(self, chim_config):
        client = ChimClient(chim_config, transport=RecordingTransport(status_code=500))

        with pytest.raises(ChimApiError) as exc_info:
            await client.request(RequestOptions(path="/api/v1/changes/"))

        assert str(exc_info.value) == (
            "CHIM API request failed (500 Internal Server Error)"
        )

    @pytest.mark.unit
    async def test_redirect_is_followed(self, chim_config):
        # Arrange
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/api/v1/changes":
                return httpx.Response(
                    301, headers={"Location": "https://api.chim.test/api/v1/changes/"}
                )
            return httpx.Response(200, json={"results": []})

        transport = RecordingTransport(handler=handler)
        client = ChimClient(chim_config, transport=transport)

        # Act
        result = await client.request(RequestOptions(path="/api/v1/changes"))

        # Assert
        assert result is not None
        assert result.content == {"results": []}
        assert len(transport.requests) == 2

    @pytest.mark.unit
    async def test_transport_failure_is_wrapped(self, chim_config):
        # Arrange
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = ChimClient(chim_config, transport=RecordingTransport(handler=handler))

        # Act / Assert
        with pytest.raises(ChimTransportError, match="connection refused"):
            await client.request(RequestOptions(path="/api/v1/changes/"))

    @pytest.mark.unit
    async def test_one_network_call_per_request(self, chim_client, ok_transport):
        await chim_client.request(RequestOptions(path="/api/v1/outages/"))
        await chim_client.request(RequestOptions(path="/api/v1/retros/"))

        assert [r.url.path for r in ok_transport.requests] == [
            "/api/v1/outages/",
            "/api/v1/retros/",
        ]


class TestApiResponse:
    """Test the two-armed response value."""

    @pytest.mark.unit
    def test_from_text_json(self):
        response = ApiResponse.from_text(json.dumps([1, 2]))

        assert response.is_json is True
        assert response.content == [1, 2]

    @pytest.mark.unit
    def test_from_text_plain(self):
        response = ApiResponse.from_text("plain")

        assert response.is_json is False
        assert response.data is None
        assert response.content == "plain"

    @pytest.mark.unit
    def test_json_null_is_still_json(self):
        response = ApiResponse.from_text("null")

        assert response.is_json is True
        assert response.content is None
