"""
Pytest configuration and fixtures for rgb-link tests.
"""

import logging
import os
import socket
import threading

import pytest

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


class LoopbackServer:
    """TCP listener on 127.0.0.1 that echoes what clients send"""

    def __init__(self):
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.listen(16)
        self.host, self.port = self.sock.getsockname()
        self.accepted = 0
        self._clients = []
        self._running = True
        self._thread = threading.Thread(target=self._accept_loop, daemon=True)
        self._thread.start()

    def _accept_loop(self):
        while self._running:
            try:
                client, _ = self.sock.accept()
            except OSError:
                break
            self.accepted += 1
            self._clients.append(client)
            threading.Thread(target=self._echo, args=(client,), daemon=True).start()

    def _echo(self, client):
        try:
            while True:
                data = client.recv(4096)
                if not data:
                    break
                client.sendall(data)
        except OSError:
            pass
        finally:
            client.close()

    def close(self):
        self._running = False
        self.sock.close()
        for client in self._clients:
            try:
                client.close()
            except OSError:
                pass
        self._thread.join(timeout=2)


@pytest.fixture
def server():
    """Fixture providing a running loopback echo server"""
    srv = LoopbackServer()
    logger.debug("Loopback server listening on %s:%d", srv.host, srv.port)
    yield srv
    srv.close()


@pytest.fixture
def closed_port():
    """Fixture providing a local port with nothing listening on it"""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


@pytest.fixture
def clean_env(monkeypatch):
    """Fixture removing RGB_LINK_* variables from the environment"""
    for key in list(os.environ):
        if key.startswith("RGB_LINK_"):
            monkeypatch.delenv(key)
    yield monkeypatch
    # Values loaded from dotenv files bypass monkeypatch
    for key in list(os.environ):
        if key.startswith("RGB_LINK_"):
            del os.environ[key]
