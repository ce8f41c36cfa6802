"""
Process configuration management.

Handles loading configuration from environment variables and a .env file.
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from chim_mcp.core.mcp.validation import coerce_optional_str


class ChimApiSettings(BaseSettings):
    """CHIM API overrides read from the environment.

    Blank values (after trimming) are treated as unset so they fall through
    to the persisted user config and then to the built-in defaults.
    """

    api_key: str | None = Field(
        None, alias="CHIM_API_KEY", description="API key for authenticated calls"
    )
    base_url: str | None = Field(None, alias="CHIM_API_BASE_URL")
    user_agent: str | None = Field(None, alias="CHIM_API_USER_AGENT")

    @field_validator("api_key", "base_url", "user_agent", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> str | None:
        return coerce_optional_str(v)  # type: ignore[no-any-return]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


class ApplicationSettings(BaseSettings):
    """Application configuration."""

    log_level: str = Field(default="INFO", alias="CHIM_MCP_LOG_LEVEL")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: Any) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v = str(v).upper()
        if v not in allowed:
            raise ValueError(f"CHIM_MCP_LOG_LEVEL must be one of {allowed}")
        return str(v)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


class ServerSettings(BaseSettings):
    """MCP server transport configuration."""

    server_name: str = Field(default="chim-mcp", alias="CHIM_MCP_SERVER_NAME")

    # stdio is what desktop MCP hosts launch; http/sse are for remote use
    transport: str = Field(default="stdio", alias="CHIM_MCP_TRANSPORT")
    host: str = Field(default="127.0.0.1", alias="CHIM_MCP_HOST")
    port: int = Field(default=8000, alias="CHIM_MCP_PORT")
    path: str = Field(default="/mcp", alias="CHIM_MCP_PATH")

    @field_validator("transport")
    @classmethod
    def validate_transport(cls, v: Any) -> str:
        allowed = {"http", "stdio", "sse"}
        if str(v) not in allowed:
            raise ValueError(f"CHIM_MCP_TRANSPORT must be one of {allowed}")
        return str(v)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


class Settings(BaseSettings):
    """Main settings class that combines all configuration sections."""

    chim_api: ChimApiSettings = Field(default_factory=ChimApiSettings)  # type: ignore[arg-type]
    application: ApplicationSettings = Field(default_factory=ApplicationSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


def load_settings() -> Settings:
    """
    Load settings from environment variables and .env file.

    Returns:
        Settings: Freshly loaded settings instance
    """
    return Settings()
