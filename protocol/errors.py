"""
Client error taxonomy.

Every error carries a `kind` naming its category:
ConnectionError (transport), ProtocolError (response shape), ServerError (server said ERROR),
EncodingError (invalid UTF-8 / codepoints).
"""


class MygramError(Exception):
    """Base class for all client errors."""

    kind = "MygramError"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class MygramConnectionError(MygramError):
    """Transport failure, or the connection is in the wrong state for the call."""

    kind = "ConnectionError"


class CommandTimeoutError(MygramConnectionError):
    """The configured timeout elapsed during connect, send or receive."""


class ProtocolError(MygramError):
    """The server's response does not have the expected shape."""

    kind = "ProtocolError"


class FrameTooLargeError(ProtocolError):
    """The response filled the receive buffer without a line terminator."""


class ServerError(MygramError):
    """The server answered `ERROR <message>`; message is the server's literal text."""

    kind = "ServerError"


class EncodingError(MygramError):
    kind = "EncodingError"


class InputValidationError(MygramError):
    """Caller input cannot be encoded on the line protocol."""

    kind = "InputValidationError"
