"""
rgb-link - Connection lifecycle management for TCP protocol clients

This package provides:
- A connection manager guarding connect/disconnect of a single TCP client
- Environment configuration loading
- Connection error handling and logging
"""

from .connection import ConnectionManager, ConnectionState, Endpoint, DEFAULT_TIMEOUT_MS
from .error_handler import (
    ClientConnectionError, get_error_description, is_timeout_error, is_refused_error,
    handle_connection_error
)
from .config_loader import ConnectionSettings, load_environment_file, load_settings, create_manager
from .logging_config import configure_logging, configure_cli_logging, get_logger

__all__ = [
    'ConnectionManager',
    'ConnectionState',
    'Endpoint',
    'DEFAULT_TIMEOUT_MS',
    'ClientConnectionError',
    'get_error_description',
    'is_timeout_error',
    'is_refused_error',
    'handle_connection_error',
    'ConnectionSettings',
    'load_environment_file',
    'load_settings',
    'create_manager',
    'configure_logging',
    'configure_cli_logging',
    'get_logger',
]
