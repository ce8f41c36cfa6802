"""CHIM API tools: change notifications, outages, retrospectives and status."""

import json
import logging
from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, Field, ValidationError, field_validator

from chim_mcp.core.config.user_config import StoredConfig, save_user_config
from chim_mcp.core.mcp.exceptions import ChimError, PayloadError, ToolError
from chim_mcp.core.mcp.validation import (
    coerce_bool,
    coerce_int,
    format_validation_errors,
)

from .client import ApiResponse, ChimClient, RequestOptions

logger = logging.getLogger(__name__)

STATUS_PATH = "/api/status/"
CHANGES_PATH = "/api/v1/changes/"
OUTAGES_PATH = "/api/v1/outages/"
RETROS_PATH = "/api/v1/retros/"


def parse_payload(payload: str | dict[str, Any]) -> Any:
    """Normalize a tool payload to a JSON-compatible value.

    Strings must contain JSON; mappings are used as they are.

    Raises:
        PayloadError: If a string payload is not valid JSON
    """
    if isinstance(payload, str):
        try:
            return json.loads(payload)
        except json.JSONDecodeError as e:
            raise PayloadError(f"Unable to parse payload JSON: {e}") from e
    return payload


def render_text(result: Any) -> str:
    """Render a tool result as a single text block.

    Strings pass through unchanged, None becomes an empty block and anything
    else is pretty-printed as JSON.
    """
    if result is None:
        return ""
    if isinstance(result, str):
        return result
    return json.dumps(result, indent=2, ensure_ascii=False)


def render_response(response: ApiResponse | None) -> str:
    """Render a CHIM API response as text content.

    An empty body renders as an empty block, a JSON null body as ``null``.
    """
    if response is None:
        return ""
    if response.is_json and response.data is None:
        return json.dumps(None)
    return render_text(response.content)


class SaveApiKeyParams(BaseModel):
    """Parameters for storing CHIM credentials locally."""

    API_KEY_DESC: ClassVar[str] = "CHIM API key to store locally."
    BASE_URL_DESC: ClassVar[str] = "Optional override for the CHIM API base URL."
    USER_AGENT_DESC: ClassVar[str] = "Optional override for the User-Agent header."

    api_key: str = Field(min_length=1, description=API_KEY_DESC)
    base_url: str | None = Field(None, min_length=1, description=BASE_URL_DESC)
    user_agent: str | None = Field(None, min_length=1, description=USER_AGENT_DESC)


class PaginationParams(BaseModel):
    """Query parameters shared by the CHIM list endpoints."""

    PAGE_DESC: ClassVar[str] = "Page number to fetch (1-based)."
    PAGE_SIZE_DESC: ClassVar[str] = "Number of records to fetch per page (1-100)."
    SEARCH_DESC: ClassVar[str] = "Search keyword supported by the CHIM API."

    page: int | None = Field(None, ge=1, description=PAGE_DESC)
    page_size: int | None = Field(None, ge=1, le=100, description=PAGE_SIZE_DESC)
    search: str | None = Field(None, min_length=1, description=SEARCH_DESC)

    @field_validator("page", "page_size", mode="before")
    @classmethod
    def coerce_numbers(cls, v: Any) -> Any:
        return coerce_int(v)

    def to_query(self) -> dict[str, int | str | None]:
        return {"page": self.page, "page_size": self.page_size, "search": self.search}


class PayloadParams(BaseModel):
    """Parameters for the CHIM create endpoints."""

    PAYLOAD_DESC: ClassVar[str] = (
        "Payload you want to send to CHIM: a JSON string or an object that "
        "matches the CHIM API schema for the relevant endpoint."
    )
    DRY_RUN_DESC: ClassVar[str] = (
        "Skip sending the request and only validate that the payload is valid JSON."
    )

    payload: str | dict[str, Any] = Field(description=PAYLOAD_DESC)
    dry_run: bool = Field(False, description=DRY_RUN_DESC)

    @field_validator("dry_run", mode="before")
    @classmethod
    def coerce_dry_run(cls, v: Any) -> Any:
        if v is None:
            return False
        return coerce_bool(v)


class ChimTool:
    """Shared plumbing for tools backed by a CHIM API call."""

    def __init__(self, client: ChimClient, name: str, description: str):
        """Initialize the tool.

        Args:
            client: CHIM API client shared by all tools
            name: Tool name exposed over MCP
            description: Tool description exposed over MCP
        """
        self._client = client
        self.name = name
        self.description = description

    def _invalid(self, error: ValidationError) -> ToolError:
        return ToolError(
            self.name, format_validation_errors(error, f"{self.name} parameters")
        )

    async def _call(self, options: RequestOptions) -> str:
        try:
            response = await self._client.request(options)
        except ChimError as e:
            raise ToolError(self.name, str(e)) from e
        return render_response(response)


class SaveApiKeyTool:
    """Persist CHIM credentials to the user config file."""

    name: ClassVar[str] = "save_api_key"
    description: ClassVar[str] = (
        "Stores the CHIM API key in the user config file "
        "(~/.config/chim-mcp/config.json). Takes effect the next time the "
        "server starts."
    )

    async def execute(
        self,
        api_key: Annotated[
            str, Field(min_length=1, description=SaveApiKeyParams.API_KEY_DESC)
        ],
        base_url: Annotated[
            str | None, Field(description=SaveApiKeyParams.BASE_URL_DESC)
        ] = None,
        user_agent: Annotated[
            str | None, Field(description=SaveApiKeyParams.USER_AGENT_DESC)
        ] = None,
    ) -> str:
        """Store the API key and optional overrides locally.

        Args:
            api_key: CHIM API key to store
            base_url: Optional override for the CHIM API base URL
            user_agent: Optional override for the User-Agent header

        Returns:
            JSON text with the saved flag and the config file path

        Raises:
            ToolError: If the parameters are invalid or the file cannot be written
        """
        try:
            params = SaveApiKeyParams(
                api_key=api_key,
                base_url=base_url or None,
                user_agent=user_agent or None,
            )
        except ValidationError as e:
            raise ToolError(
                self.name, format_validation_errors(e, f"{self.name} parameters")
            ) from e

        try:
            path = save_user_config(
                StoredConfig(
                    api_key=params.api_key,
                    base_url=params.base_url,
                    user_agent=params.user_agent,
                )
            )
        except ChimError as e:
            raise ToolError(self.name, str(e)) from e

        return render_text({"saved": True, "path": str(path)})


class ChangeFreezeStatusTool(ChimTool):
    """Read the public change-freeze status."""

    NAME: ClassVar[str] = "get_change_freeze_status"
    DESCRIPTION: ClassVar[str] = (
        "Returns the change-freeze status for CHIM and each product suite "
        "(GET /api/status/)."
    )

    def __init__(self, client: ChimClient):
        super().__init__(client, self.NAME, self.DESCRIPTION)

    async def execute(self) -> str:
        """Fetch the change-freeze status. No API key is needed."""
        return await self._call(
            RequestOptions(path=STATUS_PATH, method="GET", requires_auth=False)
        )


class ListRecordsTool(ChimTool):
    """List one kind of CHIM record with optional paging and search."""

    def __init__(self, client: ChimClient, name: str, path: str, description: str):
        super().__init__(client, name, description)
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    async def execute(
        self,
        page: Annotated[
            int | None, Field(ge=1, description=PaginationParams.PAGE_DESC)
        ] = None,
        page_size: Annotated[
            int | None,
            Field(ge=1, le=100, description=PaginationParams.PAGE_SIZE_DESC),
        ] = None,
        search: Annotated[
            str | None, Field(description=PaginationParams.SEARCH_DESC)
        ] = None,
    ) -> str:
        """List records from the CHIM API.

        Args:
            page: Page number to fetch (1-based)
            page_size: Number of records per page (1-100)
            search: Search keyword

        Returns:
            The API response rendered as text

        Raises:
            ToolError: If the parameters are invalid or the API call fails
        """
        try:
            params = PaginationParams(page=page, page_size=page_size, search=search)
        except ValidationError as e:
            raise self._invalid(e) from e

        return await self._call(
            RequestOptions(path=self._path, method="GET", query=params.to_query())
        )


class CreateRecordTool(ChimTool):
    """Create one kind of CHIM record, or validate its payload in dry-run mode."""

    def __init__(self, client: ChimClient, name: str, path: str, description: str):
        super().__init__(client, name, description)
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    async def execute(
        self,
        payload: Annotated[
            str | dict[str, Any], Field(description=PayloadParams.PAYLOAD_DESC)
        ],
        dry_run: Annotated[
            bool | None, Field(description=PayloadParams.DRY_RUN_DESC)
        ] = None,
    ) -> str:
        """Create a record, or echo the parsed payload when ``dry_run`` is set.

        Args:
            payload: JSON string or object matching the CHIM API schema
            dry_run: Only validate the payload, do not call the API

        Returns:
            The API response, or the dry-run echo, rendered as text

        Raises:
            ToolError: If the payload is invalid or the API call fails
        """
        try:
            params = PayloadParams(payload=payload, dry_run=dry_run)
        except ValidationError as e:
            raise self._invalid(e) from e

        try:
            parsed_payload = parse_payload(params.payload)
        except PayloadError as e:
            raise ToolError(self.name, str(e)) from e

        if params.dry_run:
            logger.info(f"{self.name}: dry run, payload not sent")
            return render_text({"dryRun": True, "payload": parsed_payload})

        return await self._call(
            RequestOptions(path=self._path, method="POST", body=parsed_payload)
        )
