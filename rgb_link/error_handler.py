"""
Standardized connection error handling for rgb-link clients

This module defines the single error kind raised by the connection manager and
centralizes interpretation and logging of the socket errors it wraps.
"""

import errno
import logging
import socket
from typing import Optional, Callable, Any, Tuple


class ClientConnectionError(ConnectionError):
    """
    Raised when a connection cannot be established or closed cleanly

    The underlying socket error is chained as ``__cause__`` and also kept in
    ``cause`` for callers that prefer an explicit attribute.
    """

    def __init__(self, message: str, endpoint: Optional[Tuple[str, int]] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message)
        self.endpoint = endpoint
        self.cause = cause

    def __str__(self) -> str:
        message = super().__str__()
        if self.cause is not None:
            return f"{message} ({get_error_description(self.cause)})"
        return message


_ERRNO_DESCRIPTIONS = {
    errno.ECONNREFUSED: "Connection refused - is the server running?",
    errno.ETIMEDOUT: "Connection timed out",
    errno.EHOSTUNREACH: "Host is unreachable",
    errno.ENETUNREACH: "Network is unreachable",
    errno.ECONNRESET: "Connection reset by peer",
    errno.ECONNABORTED: "Connection aborted",
    errno.EADDRNOTAVAIL: "Address not available",
    errno.EBADF: "Socket already closed",
    errno.EPIPE: "Broken pipe",
}


def get_error_description(exc: BaseException) -> str:
    """
    Get human-readable description of a socket error

    Args:
        exc: Exception raised by a socket operation

    Returns:
        Description of the error
    """
    if isinstance(exc, ClientConnectionError) and exc.cause is not None:
        return get_error_description(exc.cause)

    if isinstance(exc, socket.gaierror):
        return f"Could not resolve host: {exc.strerror or exc}"

    if is_timeout_error(exc):
        return "Connection timed out"

    code = getattr(exc, "errno", None)
    if code in _ERRNO_DESCRIPTIONS:
        return _ERRNO_DESCRIPTIONS[code]

    if isinstance(exc, OSError) and exc.strerror:
        return exc.strerror

    return str(exc) or type(exc).__name__


def is_timeout_error(exc: BaseException) -> bool:
    """
    Check if an exception indicates a timeout

    Args:
        exc: Exception to inspect (a ClientConnectionError is unwrapped)

    Returns:
        True if the connect attempt ran out of time
    """
    if isinstance(exc, ClientConnectionError):
        return exc.cause is not None and is_timeout_error(exc.cause)
    # socket.timeout is an alias of TimeoutError since 3.10
    if isinstance(exc, (socket.timeout, TimeoutError)):
        return True
    return getattr(exc, "errno", None) == errno.ETIMEDOUT


def is_refused_error(exc: BaseException) -> bool:
    """
    Check if an exception indicates the server refused the connection

    Args:
        exc: Exception to inspect (a ClientConnectionError is unwrapped)

    Returns:
        True if nothing is listening on the endpoint
    """
    if isinstance(exc, ClientConnectionError):
        return exc.cause is not None and is_refused_error(exc.cause)
    if isinstance(exc, ConnectionRefusedError):
        return True
    return getattr(exc, "errno", None) == errno.ECONNREFUSED


def handle_connection_error(
    exc: BaseException,
    logger: logging.Logger,
    error_callback: Optional[Callable[[Optional[Tuple[str, int]], str], Any]] = None
) -> str:
    """
    Standardized connection error handling

    Args:
        exc: Error raised by connect or disconnect
        logger: Logger instance to use for logging
        error_callback: Optional callback receiving (endpoint, description)

    Returns:
        The description that was logged
    """
    endpoint = getattr(exc, "endpoint", None)
    description = get_error_description(exc)
    target = f"{endpoint[0]}:{endpoint[1]}" if endpoint else "server"

    if is_refused_error(exc) or is_timeout_error(exc):
        # Expected while the server is down or still starting up
        logger.warning("Could not reach %s: %s", target, description)
    else:
        logger.error("Connection error for %s: %s", target, description)

    if error_callback:
        error_callback(endpoint, description)

    return description
