"""CHIM API configuration resolution and persistence.

The effective configuration is layered, highest priority first:

1. ``CHIM_API_*`` environment variables (blank values ignored)
2. the persisted user config file (see :func:`get_user_config_path`)
3. built-in defaults

The user config file is the only thing chim-mcp ever writes. It holds the
API key, so both the file and its directory are kept owner-only.
"""

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from chim_mcp import __version__
from chim_mcp.core.mcp.exceptions import ConfigurationError
from chim_mcp.utils.paths import (
    CONFIG_FILE_MODE,
    ensure_config_dir,
    get_user_config_path,
)

from .settings import ChimApiSettings

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.chim.umbrella.com"
DEFAULT_USER_AGENT = f"chim-mcp/{__version__}"

API_KEY_ENV_VAR = "CHIM_API_KEY"


@dataclass(frozen=True)
class ChimConfig:
    """Resolved, immutable configuration for talking to the CHIM API."""

    base_url: str
    user_agent: str
    api_key: str | None = field(default=None, repr=False)

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    @property
    def masked_api_key(self) -> str | None:
        """API key with everything but the first four characters hidden."""
        if not self.api_key:
            return None
        if len(self.api_key) <= 8:
            return "*" * len(self.api_key)
        return f"{self.api_key[:4]}{'*' * (len(self.api_key) - 4)}"


class StoredConfig(BaseModel):
    """The persisted user config record.

    Keys are camelCase on disk. Values that are not strings are ignored
    rather than rejected, so a hand-edited file never blocks start-up.
    """

    base_url: str | None = Field(None, alias="baseUrl")
    user_agent: str | None = Field(None, alias="userAgent")
    api_key: str | None = Field(None, alias="apiKey")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("base_url", "user_agent", "api_key", mode="before")
    @classmethod
    def ignore_non_strings(cls, v: Any) -> str | None:
        return v if isinstance(v, str) else None

    def to_json_dict(self) -> dict[str, str]:
        """On-disk representation with unset fields left out."""
        return self.model_dump(by_alias=True, exclude_none=True)


def read_user_config() -> StoredConfig | None:
    """Read the persisted user config.

    Returns:
        The stored record, or None when the file does not exist or its top
        level is not a JSON object

    Raises:
        ConfigurationError: If the file exists but cannot be read or parsed
    """
    path = get_user_config_path()
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as e:
        raise ConfigurationError(f"Unable to read user config {path}: {e}") from e

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"User config {path} is not valid JSON: {e}") from e

    if not isinstance(parsed, dict):
        logger.warning(f"Ignoring user config {path}: top level is not an object")
        return None
    return StoredConfig.model_validate(parsed)


def load_config(env: ChimApiSettings | None = None) -> ChimConfig:
    """Resolve the effective CHIM configuration.

    Args:
        env: Environment overrides; read from the process environment when
            omitted

    Returns:
        The merged configuration

    Raises:
        ConfigurationError: If the persisted config file is unreadable
    """
    if env is None:
        env = ChimApiSettings()  # type: ignore[call-arg]
    stored = read_user_config() or StoredConfig()

    return ChimConfig(
        base_url=env.base_url or stored.base_url or DEFAULT_BASE_URL,
        user_agent=env.user_agent or stored.user_agent or DEFAULT_USER_AGENT,
        api_key=env.api_key or stored.api_key or None,
    )


def ensure_api_key(config: ChimConfig) -> str:
    """Return the configured API key.

    Raises:
        ConfigurationError: If no API key is configured
    """
    if not config.api_key:
        raise ConfigurationError(
            f"Missing {API_KEY_ENV_VAR} environment variable. Create an API key "
            "in CHIM and export it (or save it with the save_api_key tool) "
            "before calling authenticated tools."
        )
    return config.api_key


def save_user_config(update: StoredConfig) -> Path:
    """Merge an update into the persisted user config.

    Fields left unset on ``update`` keep their stored value. The merged
    record is written to a temporary file in the config directory and then
    moved over the old file, so readers never see a partial write.

    Args:
        update: Fields to store

    Returns:
        Path of the written config file

    Raises:
        ConfigurationError: If the existing file is unreadable or the new one
            cannot be written
    """
    current = read_user_config() or StoredConfig()
    merged = StoredConfig.model_validate(
        {**current.to_json_dict(), **update.to_json_dict()}
    )

    path = get_user_config_path()
    try:
        config_dir = ensure_config_dir()
        fd, tmp_name = tempfile.mkstemp(
            dir=config_dir, prefix=".config-", suffix=".json.tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(merged.to_json_dict(), tmp, indent=2)
            os.chmod(tmp_name, CONFIG_FILE_MODE)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise ConfigurationError(f"Unable to write user config {path}: {e}") from e

    logger.info(
        f"Saved user config to {path} (fields: {sorted(update.to_json_dict())})"
    )
    return path


__all__ = [
    "API_KEY_ENV_VAR",
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
