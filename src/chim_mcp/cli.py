"""Command-line interface for chim-mcp."""

import logging
import sys

import click

from chim_mcp import __version__
from chim_mcp.api.mcp.server import FastMcpServerAdapter
from chim_mcp.core.config.settings import Settings, load_settings
from chim_mcp.core.config.user_config import (
    ChimConfig,
    StoredConfig,
    get_user_config_path,
    load_config,
    save_user_config,
)
from chim_mcp.core.mcp.exceptions import ChimError
from chim_mcp.servers.chim.client import ChimClient
from chim_mcp.servers.chim.providers import ChimToolProvider


def configure_logging(settings: Settings) -> None:
    """Send logs to stderr; stdout belongs to the stdio MCP transport."""
    logging.basicConfig(
        level=settings.application.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # httpx logs every request at INFO, including full URLs
    logging.getLogger("httpx").setLevel(logging.WARNING)


def resolve_config(settings: Settings) -> ChimConfig:
    """Resolve the CHIM config, turning config errors into CLI errors."""
    try:
        return load_config(settings.chim_api)
    except ChimError as e:
        raise click.ClickException(str(e)) from e


def echo_config(config: ChimConfig) -> None:
    click.echo(f"   Base URL:   {config.base_url}")
    click.echo(f"   User-Agent: {config.user_agent}")
    click.echo(f"   API key:    {config.masked_api_key or 'not configured'}")
    click.echo(f"   Config file: {get_user_config_path()}")


@click.group()
@click.version_option(version=__version__, prog_name="chim-mcp")
def cli() -> None:
    """chim-mcp - MCP tools for CHIM change and outage notifications"""
    pass


@cli.command()
def info() -> None:
    """Show project information and the resolved configuration."""
    settings = load_settings()
    config = resolve_config(settings)
    click.echo(f"chim-mcp v{__version__}")
    click.echo("MCP tools for CHIM change and outage notifications")
    echo_config(config)


@cli.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--transport",
    "-t",
    help="Transport type: stdio, http, sse (overrides CHIM_MCP_TRANSPORT)",
)
@click.option("--host", help="Server host (overrides CHIM_MCP_HOST)")
@click.option("--port", type=int, help="Server port (overrides CHIM_MCP_PORT)")
@click.option(
    "--path", help="Server path for HTTP transport (overrides CHIM_MCP_PATH)"
)
def serve(
    transport: str | None,
    host: str | None,
    port: int | None,
    path: str | None,
) -> None:
    """Start the CHIM MCP server.

    The configuration is resolved once at start-up from CHIM_API_KEY,
    CHIM_API_BASE_URL and CHIM_API_USER_AGENT, then the user config file,
    then built-in defaults. Keys saved with the save_api_key tool apply on
    the next start.

    Examples:
        chim-mcp serve
        CHIM_API_KEY=... chim-mcp serve --transport http --port 8000
    """
    settings = load_settings()
    configure_logging(settings)
    server_settings = settings.server

    actual_transport = transport if transport is not None else server_settings.transport
    actual_host = host if host is not None else server_settings.host
    actual_port = port if port is not None else server_settings.port
    actual_path = path if path is not None else server_settings.path

    if actual_transport not in {"stdio", "http", "sse"}:
        raise click.BadParameter(
            f"must be one of stdio, http, sse (got '{actual_transport}')",
            param_hint="--transport",
        )

    config = resolve_config(settings)
    client = ChimClient(config)
    provider = ChimToolProvider(client)

    server = FastMcpServerAdapter(server_settings.server_name, version=__version__)
    server.add_tool_provider(provider)

    click.echo(f"🚀 Starting {server_settings.server_name} MCP Server", err=True)
    click.echo(f"   Transport: {actual_transport}", err=True)
    click.echo(f"   CHIM API: {config.base_url}", err=True)
    if not config.has_api_key:
        click.echo(
            "   ⚠️  No API key configured: only get_change_freeze_status and "
            "save_api_key will work",
            err=True,
        )
    click.echo("\n📦 Available Tools:", err=True)
    for tool in provider.tools:
        click.echo(f"   • {tool.name}", err=True)

    click.echo("\nCHIM MCP server is ready.", err=True)
    server.start(
        transport=actual_transport,
        host=actual_host,
        port=actual_port,
        path=actual_path,
    )


@cli.group()
def config() -> None:
    """User configuration commands."""
    pass


@config.command(name="path")
def config_path() -> None:
    """Print the user config file location."""
    click.echo(str(get_user_config_path()))


@config.command(name="show")
def config_show() -> None:
    """Show the resolved configuration with the API key masked."""
    settings = load_settings()
    echo_config(resolve_config(settings))


@config.command(name="set")
@click.option("--api-key", help="CHIM API key to store")
@click.option("--base-url", help="Override for the CHIM API base URL")
@click.option("--user-agent", help="Override for the User-Agent header")
def config_set(
    api_key: str | None, base_url: str | None, user_agent: str | None
) -> None:
    """Store values in the user config file.

    Values not given are left as they are in the file.
    """
    update = StoredConfig(
        api_key=api_key or None,
        base_url=base_url or None,
        user_agent=user_agent or None,
    )
    if not update.to_json_dict():
        raise click.UsageError(
            "Nothing to save. Pass --api-key, --base-url or --user-agent."
        )

    try:
        path = save_user_config(update)
    except ChimError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"✅ Saved {', '.join(sorted(update.to_json_dict()))} to {path}")


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
