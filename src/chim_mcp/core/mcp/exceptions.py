"""MCP-related and CHIM API exceptions."""

from typing import Any


class McpError(Exception):
    """Base exception for MCP-related errors."""

    pass


class ToolError(McpError):
    """Exception raised when tool execution fails."""

    def __init__(
        self, tool_name: str, message: str, details: dict[str, Any] | None = None
    ):
        self.tool_name = tool_name
        self.details = details or {}
        super().__init__(f"Tool '{tool_name}' failed: {message}")


class ChimError(Exception):
    """Base exception for errors raised by the config resolver and API client."""

    pass


class ConfigurationError(ChimError):
    """Raised when credentials are missing or the user config file is unusable."""

    pass


class PayloadError(ChimError):
    """Raised when a tool payload string is not valid JSON."""

    pass


class ChimApiError(ChimError):
    """Raised when the CHIM API answers with a non-success status."""

    def __init__(self, status_code: int, reason: str, body: str = ""):
        self.status_code = status_code
        self.reason = reason
        self.body = body
        message = f"CHIM API request failed ({status_code} {reason})"
        if body:
            message = f"{message}: {body}"
        super().__init__(message)


class ChimTransportError(ChimError):
    """Raised when the request never produced an HTTP response."""

    pass
