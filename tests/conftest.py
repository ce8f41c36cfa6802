"""Shared test fixtures and configuration."""

import pytest

from chim_mcp.core.config.user_config import ChimConfig
from chim_mcp.servers.chim.client import ChimClient
from tests.utils.chim_test_helpers import RecordingTransport

CHIM_ENV_VARS = (
    "CHIM_API_KEY",
    "CHIM_API_BASE_URL",
    "CHIM_API_USER_AGENT",
    "CHIM_MCP_LOG_LEVEL",
    "CHIM_MCP_SERVER_NAME",
    "CHIM_MCP_TRANSPORT",
    "CHIM_MCP_HOST",
    "CHIM_MCP_PORT",
    "CHIM_MCP_PATH",
    "XDG_CONFIG_HOME",
)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Point HOME at a temp dir and clear every variable chim-mcp reads.

    The working directory is moved too, so a developer's .env file is never
    picked up by the settings classes.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for name in CHIM_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return home


@pytest.fixture
def chim_config():
    """Configuration with an API key against a test host."""
    return ChimConfig(
        base_url="https://api.chim.test",
        user_agent="test-agent/1.0",
        api_key="test-key",
    )


@pytest.fixture
def anonymous_config():
    """Configuration without an API key."""
    return ChimConfig(base_url="https://api.chim.test", user_agent="test-agent/1.0")


@pytest.fixture
def ok_transport():
    """Transport answering every request with {"status": "ok"}."""
    return RecordingTransport(json_body={"status": "ok"})


@pytest.fixture
def chim_client(chim_config, ok_transport):
    """Authenticated client wired to the recording transport."""
    return ChimClient(chim_config, transport=ok_transport)
