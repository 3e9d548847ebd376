"""
Shared fixtures: a scripted loopback server speaking the line protocol.

The server accepts connections on 127.0.0.1 (ephemeral port), reads CRLF-terminated
commands, records them, and answers each with `responses[command]` (or a callable's result).
Unknown commands get "ERROR unknown command". A response of None sends nothing (timeout tests).
"""

import socket
import sys
import threading
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from client import ClientConfig


class ScriptedServer:
    def __init__(self):
        self.responses = {}
        self.received = []
        self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._listener.bind(("127.0.0.1", 0))
        self._listener.listen(8)
        self._listener.settimeout(0.2)
        self.port = self._listener.getsockname()[1]
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self) -> None:
        while not self._stop.is_set():
            try:
                conn, _ = self._listener.accept()
            except OSError:
                continue
            threading.Thread(target=self._handle, args=(conn,), daemon=True).start()

    def _handle(self, conn: socket.socket) -> None:
        buf = b""
        conn.settimeout(0.2)
        with conn:
            while not self._stop.is_set():
                try:
                    chunk = conn.recv(4096)
                except socket.timeout:
                    continue
                except OSError:
                    return
                if not chunk:
                    return
                buf += chunk
                while b"\r\n" in buf:
                    line, buf = buf.split(b"\r\n", 1)
                    command = line.decode("utf-8")
                    self.received.append(command)
                    reply = self.responses.get(command, "ERROR unknown command")
                    if callable(reply):
                        reply = reply(command)
                    if reply is None:
                        continue
                    if isinstance(reply, str):
                        reply = reply.encode("utf-8") + b"\r\n"
                    try:
                        conn.sendall(reply)
                    except OSError:
                        return

    def config(self, **kwargs) -> ClientConfig:
        kwargs.setdefault("timeout_ms", 2000)
        return ClientConfig(host="127.0.0.1", port=self.port, **kwargs)

    def close(self) -> None:
        self._stop.set()
        self._listener.close()
        self._thread.join(timeout=2)


@pytest.fixture
def server():
    srv = ScriptedServer()
    yield srv
    srv.close()


@pytest.fixture
def closed_port() -> int:
    """A port on 127.0.0.1 with nothing listening."""
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()
    return port
