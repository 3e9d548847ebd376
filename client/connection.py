"""
Blocking TCP connection carrying one command at a time.

- DISCONNECTED: no socket held. CONNECTED: exactly one socket, owned by this object.
- One timeout (ClientConfig.timeout_ms) applies to connect, send and receive.
- Each command is one CRLF-terminated line; the reply is read with a single recv into a
  recv_buffer_size buffer. A reply that fills the buffer without a line terminator is rejected.
- Any transport failure closes the socket: the stream can no longer be paired with requests.
"""

import logging
import socket
from enum import Enum
from typing import Optional

from protocol.errors import (
    CommandTimeoutError,
    EncodingError,
    FrameTooLargeError,
    MygramConnectionError,
)

from .config import ClientConfig

logger = logging.getLogger(__name__)

LINE_TERMINATOR = b"\r\n"


class ConnectionState(str, Enum):
    DISCONNECTED = "DISCONNECTED"
    CONNECTED = "CONNECTED"


def _os_error_text(e: OSError) -> str:
    return e.strerror or str(e)


class Connection:
    """One socket to the server; not thread-safe."""

    def __init__(self, config: ClientConfig):
        self._config = config
        self._state = ConnectionState.DISCONNECTED
        self._sock: Optional[socket.socket] = None

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def state(self) -> ConnectionState:
        return self._state

    def is_connected(self) -> bool:
        return self._state == ConnectionState.CONNECTED and self._sock is not None

    def connect(self) -> None:
        """
        Open the socket. Host must be an IPv4 literal; no name resolution is done.
        On failure the socket is closed before the error is raised.
        """
        if self.is_connected():
            raise MygramConnectionError("already connected")
        host, port = self._config.host, self._config.port
        try:
            socket.inet_pton(socket.AF_INET, host)
        except OSError:
            raise MygramConnectionError(f"Invalid address: {host}") from None

        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as e:
            raise MygramConnectionError(f"Failed to create socket: {_os_error_text(e)}") from e
        try:
            sock.settimeout(self._config.timeout_seconds)
            sock.connect((host, port))
        except socket.timeout as e:
            sock.close()
            raise CommandTimeoutError(f"Connection timed out after {self._config.timeout_ms} ms") from e
        except OSError as e:
            sock.close()
            raise MygramConnectionError(f"Connection failed: {_os_error_text(e)}") from e

        self._sock = sock
        self._state = ConnectionState.CONNECTED
        logger.debug("Connected to %s:%d", host, port)

    def disconnect(self) -> None:
        """Close the socket if open. Safe to call any number of times."""
        sock, self._sock = self._sock, None
        self._state = ConnectionState.DISCONNECTED
        if sock is None:
            return
        try:
            sock.close()
        except OSError as e:
            logger.debug("Error closing socket: %s", e)
        logger.debug("Disconnected from %s:%d", self._config.host, self._config.port)

    def _fail(self, error: MygramConnectionError) -> MygramConnectionError:
        logger.warning("%s; closing connection to %s:%d", error, self._config.host, self._config.port)
        self.disconnect()
        return error

    def send_command(self, line: str) -> str:
        """Send one command line and return the reply with trailing CR/LF removed."""
        if not self.is_connected():
            raise MygramConnectionError("not connected")
        sock = self._sock
        buffer_size = self._config.recv_buffer_size

        try:
            payload = line.encode("utf-8") + LINE_TERMINATOR
        except UnicodeEncodeError as e:
            raise EncodingError(f"Command is not encodable as UTF-8: {e.reason}") from e

        logger.debug("Sending command: %s", line)
        try:
            sock.sendall(payload)
        except socket.timeout as e:
            raise self._fail(CommandTimeoutError("Command timeout while sending")) from e
        except OSError as e:
            raise self._fail(MygramConnectionError(f"Failed to send command: {_os_error_text(e)}")) from e

        try:
            data = sock.recv(buffer_size)
        except socket.timeout as e:
            raise self._fail(CommandTimeoutError("Command timeout while waiting for response")) from e
        except OSError as e:
            raise self._fail(MygramConnectionError(f"Failed to receive response: {_os_error_text(e)}")) from e
        if not data:
            raise self._fail(MygramConnectionError("connection closed by server"))
        if len(data) >= buffer_size and not data.endswith(b"\n"):
            self.disconnect()
            raise FrameTooLargeError(
                f"Response exceeds receive buffer of {buffer_size} bytes; increase recv_buffer_size"
            )
        logger.debug("Received %d bytes", len(data))

        try:
            response = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise EncodingError(f"Response is not valid UTF-8: {e.reason}") from e
        return response.rstrip("\r\n")

    def __enter__(self) -> "Connection":
        self.connect()
        return self

    def __exit__(self, *args) -> None:
        self.disconnect()
