"""Blocking socket client for MygramDB."""

from .config import ClientConfig
from .connection import Connection, ConnectionState
from .client import MygramClient

__all__ = [
    "ClientConfig",
    "Connection",
    "ConnectionState",
    "MygramClient",
]
