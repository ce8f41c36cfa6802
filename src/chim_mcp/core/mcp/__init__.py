"""MCP-facing core utilities."""

from .exceptions import (
    ChimApiError,
    ChimError,
    ChimTransportError,
    ConfigurationError,
    McpError,
    PayloadError,
    ToolError,
)

__all__ = [
    "McpError",
    "ToolError",
    "ChimError",
    "ConfigurationError",
    "PayloadError",
    "ChimApiError",
    "ChimTransportError",
]
