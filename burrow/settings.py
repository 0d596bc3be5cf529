"""
Burrow Settings - Configuration management using Pydantic Settings.

Loads configuration from environment variables and .env files.
"""

from pathlib import Path

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Find project root (where .env file is located)
PROJECT_ROOT = Path(__file__).parent.parent


class BurrowSettings(BaseSettings):
    """
    Burrow configuration settings.

    Settings are loaded from:
    1. Environment variables (highest priority)
    2. .env file in current directory
    3. Default values (lowest priority)

    Connection settings also accept the RABBITMQ_* names used by other
    RabbitMQ tooling, so existing environments work unchanged.
    """

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="BURROW_",  # All Burrow env vars must start with BURROW_
        populate_by_name=True,
    )

    # Management API connection
    endpoint: str = Field(
        default="http://localhost:15672",
        description="Base URL of the RabbitMQ management API (env: BURROW_ENDPOINT or RABBITMQ_ENDPOINT)",
        validation_alias=AliasChoices("BURROW_ENDPOINT", "RABBITMQ_ENDPOINT"),
    )

    username: str = Field(
        default="guest",
        description="Management API user (env: BURROW_USERNAME or RABBITMQ_USERNAME)",
        validation_alias=AliasChoices("BURROW_USERNAME", "RABBITMQ_USERNAME"),
    )

    password: SecretStr = Field(
        default=SecretStr("guest"),
        description="Management API password (env: BURROW_PASSWORD or RABBITMQ_PASSWORD)",
        validation_alias=AliasChoices("BURROW_PASSWORD", "RABBITMQ_PASSWORD"),
    )

    insecure: bool = Field(
        default=False,
        description="Skip TLS certificate verification (env: BURROW_INSECURE or RABBITMQ_INSECURE)",
        validation_alias=AliasChoices("BURROW_INSECURE", "RABBITMQ_INSECURE"),
    )

    cacert_file: str | None = Field(
        default=None,
        description="CA bundle used to verify the endpoint (env: BURROW_CACERT_FILE or RABBITMQ_CACERT)",
        validation_alias=AliasChoices("BURROW_CACERT_FILE", "RABBITMQ_CACERT"),
    )

    request_timeout: float = Field(
        default=30.0,
        description="Per-request HTTP timeout in seconds (env: BURROW_REQUEST_TIMEOUT)",
    )

    # Reconciliation
    create_timeout: float = Field(
        default=1200.0,
        description="How long user creation keeps retrying, in seconds (env: BURROW_CREATE_TIMEOUT)",
    )

    retry_interval: float = Field(
        default=2.0,
        description="Pause between user creation attempts, in seconds (env: BURROW_RETRY_INTERVAL)",
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR) (env: BURROW_LOG_LEVEL)",
    )


# Global settings instance
_settings: BurrowSettings | None = None


def get_settings() -> BurrowSettings:
    """
    Get the global settings instance.

    Creates the settings instance on first call, then returns cached instance.

    Returns:
        BurrowSettings instance
    """
    global _settings
    if _settings is None:
        _settings = BurrowSettings()
    return _settings


def reload_settings() -> BurrowSettings:
    """
    Reload settings from environment/files.

    Useful for testing or when .env file changes.

    Returns:
        Fresh BurrowSettings instance
    """
    global _settings
    _settings = BurrowSettings()
    return _settings
