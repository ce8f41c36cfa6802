"""MCP tools for the CHIM change, outage and retrospective API."""

__version__ = "0.1.0"
