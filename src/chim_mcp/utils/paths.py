"""Filesystem locations used by chim-mcp.

The persisted user config always lives at ~/.config/chim-mcp/config.json,
derived from the home directory alone. XDG_CONFIG_HOME is not consulted.
"""

import os
from pathlib import Path

APP_DIR_NAME = "chim-mcp"
CONFIG_FILE_NAME = "config.json"

# Owner-only: the config file holds the API key
CONFIG_DIR_MODE = 0o700
CONFIG_FILE_MODE = 0o600


def get_config_home() -> Path:
    """Get the per-user configuration root.

    Returns:
        Path to ~/.config
    """
    return Path.home() / ".config"


def get_config_dir() -> Path:
    """Get the chim-mcp configuration directory without creating it.

    Returns:
        Path to ~/.config/chim-mcp
    """
    return get_config_home() / APP_DIR_NAME


def ensure_config_dir() -> Path:
    """Create the chim-mcp configuration directory with owner-only permissions.

    The mode is re-applied when the directory already exists, since mkdir's
    mode argument is filtered by the umask and ignored for existing paths.

    Returns:
        Path to ~/.config/chim-mcp
    """
    config_dir = get_config_dir()
    config_dir.mkdir(mode=CONFIG_DIR_MODE, parents=True, exist_ok=True)
    os.chmod(config_dir, CONFIG_DIR_MODE)
    return config_dir


def get_user_config_path() -> Path:
    """Get the path of the persisted user configuration file.

    Returns:
        Path to ~/.config/chim-mcp/config.json
    """
    return get_config_dir() / CONFIG_FILE_NAME
