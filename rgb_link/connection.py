"""
Reliable TCP connection handling

This module provides the connection manager used by protocol clients: it owns
a single socket, guards connect/disconnect against duplicate transitions and
hands out the byte streams of the live connection.
"""

import logging
import socket
import threading
from enum import Enum
from typing import Optional, Callable, List, NamedTuple, BinaryIO

from .error_handler import ClientConnectionError


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 5000


class Endpoint(NamedTuple):
    """Host and port of the server to connect to"""
    host: str
    port: int

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


class ConnectionState(str, Enum):
    """Connection state enumeration."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


def _default_socket_factory() -> socket.socket:
    return socket.socket(socket.AF_INET, socket.SOCK_STREAM)


def _validate_endpoint(host: str, port: int) -> Endpoint:
    if not isinstance(host, str) or not host.strip():
        raise ValueError(f"Host must be a non-empty string, got: {host!r}")
    if isinstance(port, bool) or not isinstance(port, int) or not (0 <= port <= 65535):
        raise ValueError(f"Port must be an integer between 0 and 65535, got: {port!r}")
    return Endpoint(host, port)


class ConnectionManager:
    """
    Connection lifecycle manager for a single TCP client

    connect() and disconnect() are serialized by one lock, so any number of
    threads may share a manager without external locking. Endpoint and
    timeout live behind a separate lock and can be read or changed while a
    connect is in flight.
    """

    def __init__(
        self,
        host: str,
        port: int,
        timeout: int = DEFAULT_TIMEOUT_MS,
        socket_factory: Optional[Callable[[], socket.socket]] = None,
    ):
        """
        Create a new connection manager

        Args:
            host: Hostname of the server
            port: Port of the server
            timeout: Connect timeout in milliseconds
            socket_factory: Callable returning a new unconnected socket
        """
        self._lifecycle_lock = threading.Lock()
        self._config_lock = threading.Lock()

        self._endpoint = _validate_endpoint(host, port)
        self._timeout_ms = DEFAULT_TIMEOUT_MS
        self.set_timeout(timeout)
        self._socket_factory = socket_factory or _default_socket_factory

        self._state = ConnectionState.DISCONNECTED
        self._socket: Optional[socket.socket] = None
        self._in_stream: Optional[BinaryIO] = None
        self._out_stream: Optional[BinaryIO] = None
        self._entered: List[bool] = []

    def set_endpoint(self, host: str, port: int) -> bool:
        """
        Set the server to connect to

        Returns:
            bool: True if the endpoint was changed, False if the manager is
            connected (or connecting) and the endpoint was left untouched

        Raises:
            ValueError: If host is empty or port is out of range
        """
        endpoint = _validate_endpoint(host, port)
        with self._config_lock:
            if self._state is not ConnectionState.DISCONNECTED:
                return False
            self._endpoint = endpoint
        logger.debug("Endpoint set to %s", self._endpoint)
        return True

    def get_endpoint(self) -> Endpoint:
        """Get the server this manager connects to"""
        with self._config_lock:
            return self._endpoint

    def set_timeout(self, timeout: int) -> None:
        """
        Set the connect timeout (default: 5000)

        Args:
            timeout: Timeout in milliseconds for the next connect attempt,
                0 waits without a deadline
        """
        if isinstance(timeout, bool) or not isinstance(timeout, int):
            raise ValueError(f"Timeout must be an integer number of milliseconds, got: {timeout!r}")
        if timeout < 0:
            raise ValueError(f"Timeout must not be negative, got: {timeout}")
        with self._config_lock:
            self._timeout_ms = timeout

    def get_timeout(self) -> int:
        """Get the connect timeout in milliseconds"""
        with self._config_lock:
            return self._timeout_ms

    def is_connected(self) -> bool:
        """Return whether the manager holds an established connection"""
        return self._state is ConnectionState.CONNECTED

    def connect(self) -> bool:
        """
        Connect to the configured endpoint

        Returns:
            bool: True if the manager was disconnected and is now connected,
            False if it was already connected

        Raises:
            ClientConnectionError: If the connection could not be established
        """
        with self._lifecycle_lock:
            if self._state is not ConnectionState.DISCONNECTED:
                return False

            with self._config_lock:
                # Mark before the attempt so the endpoint can't change under it
                self._state = ConnectionState.CONNECTING
                endpoint = self._endpoint
                timeout_ms = self._timeout_ms

            logger.debug("Connecting to %s (timeout %d ms)", endpoint, timeout_ms)
            sock = None
            streams = []
            try:
                sock = self._socket_factory()
                sock.settimeout(timeout_ms / 1000.0 if timeout_ms else None)
                sock.connect((endpoint.host, endpoint.port))
                # The timeout bounds connecting only; streams block
                sock.settimeout(None)
                streams.append(sock.makefile("rb"))
                streams.append(sock.makefile("wb"))
            except OSError as e:
                self._reset_after_failure(sock, streams)
                logger.warning("Failed to connect to %s: %s", endpoint, e)
                raise ClientConnectionError(
                    f"Could not connect to {endpoint}", endpoint=endpoint, cause=e
                ) from e
            except BaseException:
                self._reset_after_failure(sock, streams)
                raise

            with self._config_lock:
                # Handles and state change together
                self._socket = sock
                self._in_stream, self._out_stream = streams
                self._state = ConnectionState.CONNECTED

        logger.info("Connected to %s", endpoint)
        return True

    def _reset_after_failure(self, sock: Optional[socket.socket], streams: List[BinaryIO]) -> None:
        with self._config_lock:
            self._state = ConnectionState.DISCONNECTED
            self._socket = None
            self._in_stream = None
            self._out_stream = None

        # A socket that never connected is closed as well to release its descriptor
        for resource in streams + ([sock] if sock is not None else []):
            try:
                resource.close()
            except OSError as e:
                logger.warning("Error releasing socket after failed connect: %s", e)

    def disconnect(self) -> bool:
        """
        Disconnect from the server

        Returns:
            bool: True if the manager was connected and is now disconnected,
            False if there was nothing to disconnect

        Raises:
            ClientConnectionError: If closing the socket fails; the manager is
            disconnected regardless
        """
        with self._lifecycle_lock:
            if self._state is not ConnectionState.CONNECTED or self._socket is None:
                return False

            endpoint = self.get_endpoint()
            sock = self._socket
            streams = (self._out_stream, self._in_stream)

            with self._config_lock:
                self._state = ConnectionState.DISCONNECTED
                self._socket = None
                self._in_stream = None
                self._out_stream = None

            error: Optional[OSError] = None
            for stream in streams:
                try:
                    stream.close()
                except OSError as e:
                    # Unflushed output to a dead peer; the socket must still close
                    error = error or e
            try:
                sock.close()
            except OSError as e:
                error = error or e

        if error is not None:
            logger.warning("Error while closing connection to %s: %s", endpoint, error)
            raise ClientConnectionError(
                f"Error while closing connection to {endpoint}", endpoint=endpoint, cause=error
            ) from error

        logger.info("Disconnected from %s", endpoint)
        return True

    def get_in_stream(self) -> Optional[BinaryIO]:
        """
        Get the input stream of the current connection

        Returns:
            Readable binary stream, or None if not connected
        """
        with self._config_lock:
            return self._in_stream

    def get_out_stream(self) -> Optional[BinaryIO]:
        """
        Get the output stream of the current connection

        Returns:
            Writable binary stream, or None if not connected
        """
        with self._config_lock:
            return self._out_stream

    def __enter__(self) -> "ConnectionManager":
        # Only a block that opened the connection closes it on exit
        self._entered.append(self.connect())
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._entered.pop():
            self.disconnect()

    def __repr__(self) -> str:
        return f"ConnectionManager(endpoint={self.get_endpoint()}, state={self._state.value})"
