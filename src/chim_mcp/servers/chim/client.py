"""Async HTTP client for the CHIM REST API."""

import json
import logging
from dataclasses import dataclass
from typing import Any, Literal

import httpx
from pydantic import BaseModel, Field

from chim_mcp.core.config.user_config import ChimConfig, ensure_api_key
from chim_mcp.core.mcp.exceptions import (
    ChimApiError,
    ChimTransportError,
    ConfigurationError,
)

logger = logging.getLogger(__name__)

QueryValue = str | int | float | bool | None


class RequestOptions(BaseModel):
    """A single CHIM API call."""

    path: str = Field(description="API path, with or without a leading slash")
    method: Literal["GET", "POST", "PATCH", "PUT", "DELETE"] = "GET"
    query: dict[str, QueryValue] | None = None
    # Strings are sent verbatim, anything else is JSON-encoded. An explicit
    # None is a JSON null body; leaving the field unset sends no body.
    body: Any = None
    # Informational endpoints such as /api/status/ are public
    requires_auth: bool = True

    @property
    def has_body(self) -> bool:
        return "body" in self.model_fields_set


@dataclass(frozen=True)
class ApiResponse:
    """A non-empty, successful CHIM API response body.

    ``is_json`` tells whether the body parsed as JSON. When it did not, the
    raw text is kept as the result instead of raising.
    """

    raw: str
    data: Any = None
    is_json: bool = False

    @classmethod
    def from_text(cls, raw: str) -> "ApiResponse":
        try:
            return cls(raw=raw, data=json.loads(raw), is_json=True)
        except json.JSONDecodeError:
            return cls(raw=raw)

    @property
    def content(self) -> Any:
        """Parsed JSON when available, otherwise the raw text."""
        return self.data if self.is_json else self.raw


def _stringify(value: str | int | float | bool) -> str:
    """Render a query value the way the CHIM API expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ChimClient:
    """Client for the CHIM API bound to one resolved configuration.

    Every call to :meth:`request` issues exactly one HTTP request. There are
    no retries and no timeouts beyond httpx's defaults.
    """

    def __init__(
        self,
        config: ChimConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            config: Resolved CHIM configuration
            transport: Custom httpx transport (optional, used by tests)
        """
        self._config = config
        self._base_url = config.base_url.removesuffix("/")
        self._transport = transport

    @property
    def config(self) -> ChimConfig:
        """Access to the configuration the client was built with."""
        return self._config

    @property
    def base_url(self) -> str:
        """Base URL without a trailing slash."""
        return self._base_url

    def build_url(
        self, path: str, query: dict[str, QueryValue] | None = None
    ) -> httpx.URL:
        """Join ``path`` onto the base URL and attach query parameters.

        Parameters whose value is None are left out. Each remaining key is
        set rather than appended, so a key appears at most once.

        Raises:
            ConfigurationError: If the base URL does not yield an absolute URL
        """
        normalized_path = path if path.startswith("/") else f"/{path}"
        try:
            url = httpx.URL(f"{self._base_url}{normalized_path}")
        except httpx.InvalidURL as e:
            raise ConfigurationError(
                f"Invalid CHIM API URL '{self._base_url}{normalized_path}': {e}"
            ) from e
        if not url.is_absolute_url:
            raise ConfigurationError(
                f"CHIM API base URL must be absolute, got '{self._base_url}'"
            )

        for key, value in (query or {}).items():
            if value is None:
                continue
            url = url.copy_set_param(key, _stringify(value))
        return url

    def build_headers(self, options: RequestOptions) -> dict[str, str]:
        """Headers for a request, including auth when the request needs it.

        Raises:
            ConfigurationError: If auth is required and no API key is set
        """
        headers = {
            "User-Agent": self._config.user_agent,
            "Accept": "application/json",
        }
        if options.requires_auth:
            headers["Authorization"] = f"Api-Key {ensure_api_key(self._config)}"
        if options.has_body:
            headers["Content-Type"] = "application/json"
        return headers

    async def request(self, options: RequestOptions) -> ApiResponse | None:
        """Send a request to the CHIM API.

        Args:
            options: What to call and with which query, body and auth

        Returns:
            The response body, or None when the server sent an empty body

        Raises:
            ConfigurationError: If auth is required but no API key is
                configured (no request is sent)
            ChimApiError: If the server answers with a non-2xx status
            ChimTransportError: If no response was received
        """
        url = self.build_url(options.path, options.query)
        headers = self.build_headers(options)

        content: str | None = None
        if options.has_body:
            content = (
                options.body
                if isinstance(options.body, str)
                else json.dumps(options.body)
            )

        client_config: dict[str, Any] = {"follow_redirects": True}
        if self._transport is not None:
            client_config["transport"] = self._transport

        logger.debug(f"CHIM API request: {options.method} {url}")
        try:
            async with httpx.AsyncClient(**client_config) as client:
                response = await client.request(
                    options.method,
                    url,
                    headers=headers,
                    content=content.encode("utf-8") if content is not None else None,
                )
                raw = response.text
        except httpx.HTTPError as e:
            logger.warning(f"CHIM API request {options.method} {url} failed: {e}")
            raise ChimTransportError(
                f"CHIM API request {options.method} {url} failed: {e}"
            ) from e

        logger.debug(
            f"CHIM API response: {response.status_code} for {options.method} {url}"
        )

        if not response.is_success:
            logger.warning(
                f"CHIM API returned {response.status_code} for {options.method} {url}"
            )
            raise ChimApiError(response.status_code, response.reason_phrase, raw)

        if not raw:
            return None

        return ApiResponse.from_text(raw)
