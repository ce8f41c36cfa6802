"""Core configuration and MCP plumbing for chim-mcp."""
