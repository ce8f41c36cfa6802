"""FastMCP server adapter implementation."""

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Protocol

from fastmcp import FastMCP

logger = logging.getLogger(__name__)


class ToolLike(Protocol):
    """A tool exposing an async ``execute`` plus its MCP name and description."""

    name: str
    description: str
    execute: Callable[..., Awaitable[Any]]


class ToolProviderLike(Protocol):
    """Protocol for objects that hand their tools to the server."""

    @property
    def tools(self) -> Sequence[ToolLike]: ...


class FastMcpServerAdapter:
    """Adapter that registers provider tools with FastMCP."""

    def __init__(self, name: str = "chim-mcp", version: str | None = None):
        """Initialize the FastMCP server adapter.

        Args:
            name: Server name for MCP identification
            version: Server version reported to MCP clients (optional)
        """
        self._mcp = FastMCP(name, version=version)
        self._tool_providers: list[ToolProviderLike] = []

    def add_tool_provider(self, provider: ToolProviderLike) -> None:
        """Add a tool provider to the server.

        Args:
            provider: Object exposing a ``tools`` sequence
        """
        self._tool_providers.append(provider)
        self._register_tools(provider)

    def _register_tools(self, provider: ToolProviderLike) -> None:
        """Register each tool's ``execute`` method directly with FastMCP."""
        for tool in provider.tools:
            self._mcp.tool(
                tool.execute,
                name=tool.name,
                description=tool.description,
            )
            logger.debug(f"Registered tool {tool.name}")

    def start(self, transport: str = "stdio", **kwargs: Any) -> None:
        """Start the MCP server.

        Args:
            transport: Transport type (stdio, http, sse)
            **kwargs: Additional server configuration (host, port, path for HTTP)
        """
        if transport == "stdio":
            self._mcp.run(transport="stdio")
        elif transport == "http":
            host = kwargs.get("host", "127.0.0.1")
            port = kwargs.get("port", 8000)
            path = kwargs.get("path", "/mcp")
            logger.info(f"Starting HTTP MCP server at http://{host}:{port}{path}")
            self._mcp.run(transport="http", host=host, port=port, path=path)
        elif transport == "sse":
            host = kwargs.get("host", "127.0.0.1")
            port = kwargs.get("port", 8000)
            logger.info(f"Starting SSE MCP server at http://{host}:{port}")
            self._mcp.run(transport="sse", host=host, port=port)
        else:
            raise ValueError(f"Unsupported transport: {transport}")

    @property
    def mcp(self) -> FastMCP:
        """Access to underlying FastMCP instance."""
        return self._mcp
