"""Configuration for the CHIM API and the MCP server process."""

from .settings import (
    ApplicationSettings,
    ChimApiSettings,
    ServerSettings,
    Settings,
    load_settings,
)
from .user_config import (
    DEFAULT_BASE_URL,
    DEFAULT_USER_AGENT,
    ChimConfig,
    StoredConfig,
    ensure_api_key,
    get_user_config_path,
    load_config,
    read_user_config,
    save_user_config,
)

__all__ = [
    "ApplicationSettings",
    "ChimApiSettings",
    "ServerSettings",
    "Settings",
    "load_settings",
    "DEFAULT_BASE_URL",
    "DEFAULT_USER_AGENT",
    "ChimConfig",
    "StoredConfig",
    "ensure_api_key",
    "get_user_config_path",
    "load_config",
    "read_user_config",
    "save_user_config",
]
