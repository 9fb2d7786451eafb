"""
Configuration loading utilities for rgb-link clients

The connection manager itself never reads the environment; this module turns
environment variables and dotenv files into validated settings and builds a
manager from them.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Any

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .connection import ConnectionManager, DEFAULT_TIMEOUT_MS


logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 6742
ENV_FILE_VARIABLE = "RGB_LINK_ENV_FILE"


class ConnectionSettings(BaseSettings):
    """Server connection configuration."""

    host: str = Field(default=DEFAULT_HOST, description="Server host")
    port: int = Field(default=DEFAULT_PORT, description="Server port")
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, description="Connect timeout in milliseconds")
    log_level: str = Field(default="INFO", description="Logging level")

    model_config = SettingsConfigDict(env_prefix="RGB_LINK_")

    @field_validator('host')
    @classmethod
    def validate_host(cls, v):
        """Ensure host is not empty."""
        v = v.strip()
        if not v:
            raise ValueError("Host must not be empty")
        return v

    @field_validator('port')
    @classmethod
    def validate_port(cls, v):
        """Ensure port is valid."""
        if not (1 <= v <= 65535):
            raise ValueError(f"Invalid port: {v}")
        return v

    @field_validator('timeout_ms')
    @classmethod
    def validate_timeout(cls, v):
        """Ensure timeout is not negative, 0 meaning no deadline."""
        if v < 0:
            raise ValueError(f"Timeout must not be negative, got: {v}")
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


def load_environment_file(env_file_path: str, override_existing: bool = False) -> bool:
    """
    Load environment variables from a .env file

    Args:
        env_file_path: Path to the environment file
        override_existing: If True, override existing env vars; if False, only set unset vars

    Returns:
        True if the file existed and was loaded
    """
    env_path = Path(env_file_path)
    if not env_path.exists():
        logger.debug("Environment file not found: %s", env_path)
        return False

    logger.debug("Loading environment file: %s", env_path)
    load_dotenv(dotenv_path=env_path, override=override_existing)
    return True


def load_settings(env_file: Optional[str] = None, **overrides: Any) -> ConnectionSettings:
    """
    Load connection settings from the environment

    Priority (highest to lowest):
    1. Explicit overrides (None values are ignored)
    2. Environment variables (RGB_LINK_HOST, RGB_LINK_PORT, ...)
    3. The env file (env_file, else $RGB_LINK_ENV_FILE, else ./.env)
    4. Defaults

    Args:
        env_file: Optional dotenv file to load first
        **overrides: Field values taking precedence over the environment

    Returns:
        Validated ConnectionSettings
    """
    if env_file is None:
        env_file = os.getenv(ENV_FILE_VARIABLE, ".env")
    load_environment_file(env_file, override_existing=False)

    values = {key: value for key, value in overrides.items() if value is not None}
    return ConnectionSettings(**values)


def create_manager(settings: Optional[ConnectionSettings] = None) -> ConnectionManager:
    """
    Create a connection manager from settings

    Args:
        settings: Settings to use, loaded from the environment if None

    Returns:
        ConnectionManager: Configured but not yet connected instance
    """
    if settings is None:
        settings = load_settings()
    return ConnectionManager(settings.host, settings.port, timeout=settings.timeout_ms)
