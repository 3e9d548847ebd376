"""
MygramDB client: one method per server command.

Each call validates its input, builds the command line, sends it over the connection,
and decodes the reply into a typed result. Failures raise a MygramError subclass; the
same message is kept in `last_error` until the next failure overwrites it.
Not safe for concurrent use: serialize calls to one client externally.
"""

import logging
from typing import Any, Callable, Optional, Sequence

from ngram.normalize import normalize_text
from protocol.commands import (
    Command,
    ConfigCommand,
    CountCommand,
    DebugCommand,
    Filters,
    GetCommand,
    InfoCommand,
    LoadCommand,
    RawCommand,
    ReplicationAction,
    ReplicationCommand,
    SaveCommand,
    SearchCommand,
    expected_verb,
)
from protocol.errors import InputValidationError, MygramError
from protocol.expression import simplify_search_expression
from protocol.responses import check_acknowledgement, decode_response
from protocol.types import CountResponse, Document, ReplicationStatus, SearchResponse, ServerInfo
from protocol.validation import (
    ensure_query_length_within_limit,
    ensure_safe_command_value,
    ensure_safe_filters,
    ensure_safe_terms,
)

from .config import ClientConfig
from .connection import Connection

logger = logging.getLogger(__name__)


class MygramClient:
    """
    Synchronous client for a MygramDB server.

    Usage::

        with MygramClient(host="127.0.0.1", port=11016) as client:
            resp = client.search("articles", "hello", limit=10)
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        host: Optional[str] = None,
        port: Optional[int] = None,
        timeout_ms: Optional[int] = None,
        recv_buffer_size: Optional[int] = None,
    ):
        overrides = {
            "host": host,
            "port": port,
            "timeout_ms": timeout_ms,
            "recv_buffer_size": recv_buffer_size,
        }
        overrides = {k: v for k, v in overrides.items() if v is not None}
        if config is None:
            config = ClientConfig(**overrides)
        elif overrides:
            # Keyword arguments override fields of config
            config = ClientConfig(**{**config.model_dump(), **overrides})
        self._config = config
        self._connection = Connection(config)
        self._last_error = ""

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def last_error(self) -> str:
        """Message of the most recent failed call ("" if none has failed)."""
        return self._last_error

    def get_last_error(self) -> str:
        return self._last_error

    def _record(self, fn: Callable[[], Any]) -> Any:
        try:
            return fn()
        except MygramError as e:
            self._last_error = str(e)
            logger.debug("%s: %s", e.kind, e)
            raise

    # -------------------------------------------------------------------------
    # Connection lifecycle
    # -------------------------------------------------------------------------

    def connect(self) -> None:
        self._record(self._connection.connect)

    def disconnect(self) -> None:
        self._connection.disconnect()

    def is_connected(self) -> bool:
        return self._connection.is_connected()

    def close(self) -> None:
        self.disconnect()

    def __enter__(self) -> "MygramClient":
        self.connect()
        return self

    def __exit__(self, *args) -> None:
        self.disconnect()

    # -------------------------------------------------------------------------
    # Command execution
    # -------------------------------------------------------------------------

    def _execute(self, command: Command) -> Any:
        response = self._connection.send_command(command.to_line())
        verb = expected_verb(command)
        if verb is None:
            check_acknowledgement(response)
            return None
        return decode_response(response, verb)

    def _run(self, command: Command) -> Any:
        return self._record(lambda: self._execute(command))

    def _prepare_terms(
        self,
        query: str,
        and_terms: Sequence[str],
        not_terms: Sequence[str],
        filters: Filters,
        sort_column: str = "",
    ):
        query = ensure_safe_command_value(query, "query")
        and_terms = ensure_safe_terms(and_terms, "and_terms")
        not_terms = ensure_safe_terms(not_terms, "not_terms")
        filters = ensure_safe_filters(filters)
        for key, _ in filters:
            self._ensure_name(key, f"filters.{key}.key")
        if sort_column:
            self._ensure_name(sort_column, "sort_column")
        if self._config.normalize_queries:
            query = normalize_text(query)
            and_terms = [normalize_text(t) for t in and_terms]
            not_terms = [normalize_text(t) for t in not_terms]
        ensure_query_length_within_limit(
            self._config.max_query_length, query, and_terms, not_terms, filters, sort_column
        )
        return query, and_terms, not_terms, filters

    @staticmethod
    def _ensure_name(value: str, field_name: str) -> str:
        ensure_safe_command_value(value, field_name)
        if not value or any(c.isspace() for c in value):
            raise InputValidationError(f"{field_name} must be a single non-empty token")
        return value

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def search(
        self,
        table: str,
        query: str,
        limit: int = 0,
        offset: int = 0,
        and_terms: Sequence[str] = (),
        not_terms: Sequence[str] = (),
        filters: Filters = (),
        sort_column: str = "",
        sort_desc: bool = True,
    ) -> SearchResponse:
        """
        SEARCH table for query. limit=0 sends no LIMIT clause (server default), and then
        offset is ignored. Without sort_column the primary key orders results,
        descending unless sort_desc is False.
        """
        def build() -> SearchCommand:
            self._ensure_name(table, "table")
            q, ands, nots, flt = self._prepare_terms(query, and_terms, not_terms, filters, sort_column)
            return SearchCommand(table, q, limit, offset, ands, nots, flt, sort_column, sort_desc)

        command = self._record(build)
        return self._run(command)

    def search_expression(
        self,
        table: str,
        expression: str,
        limit: int = 0,
        offset: int = 0,
        filters: Filters = (),
        sort_column: str = "",
        sort_desc: bool = True,
    ) -> SearchResponse:
        """SEARCH with a web-style expression such as `+golang tutorial -old`."""
        def parse():
            try:
                return simplify_search_expression(expression)
            except ValueError as e:
                raise InputValidationError(str(e)) from e

        main_term, and_terms, not_terms = self._record(parse)
        return self.search(table, main_term, limit, offset, and_terms, not_terms, filters, sort_column, sort_desc)

    def count(
        self,
        table: str,
        query: str,
        and_terms: Sequence[str] = (),
        not_terms: Sequence[str] = (),
        filters: Filters = (),
    ) -> CountResponse:
        def build() -> CountCommand:
            self._ensure_name(table, "table")
            q, ands, nots, flt = self._prepare_terms(query, and_terms, not_terms, filters)
            return CountCommand(table, q, ands, nots, flt)

        command = self._record(build)
        return self._run(command)

    def get(self, table: str, primary_key: str) -> Document:
        def build() -> GetCommand:
            return GetCommand(self._ensure_name(table, "table"), self._ensure_name(primary_key, "primary_key"))

        command = self._record(build)
        return self._run(command)

    # -------------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------------

    def info(self) -> ServerInfo:
        return self._run(InfoCommand())

    def get_config(self) -> str:
        """Server configuration text as returned by CONFIG (header line removed)."""
        return self._run(ConfigCommand())

    def save(self, path: str = "") -> str:
        """Snapshot the index on the server; returns the path the server wrote."""
        if path:
            self._record(lambda: self._ensure_name(path, "path"))
        return self._run(SaveCommand(path))

    def load(self, path: str) -> str:
        """Load a snapshot on the server; returns the path the server read."""
        self._record(lambda: self._ensure_name(path, "path"))
        return self._run(LoadCommand(path))

    def get_replication_status(self) -> ReplicationStatus:
        return self._run(ReplicationCommand(ReplicationAction.STATUS))

    def start_replication(self) -> None:
        self._run(ReplicationCommand(ReplicationAction.START))

    def stop_replication(self) -> None:
        self._run(ReplicationCommand(ReplicationAction.STOP))

    def enable_debug(self) -> None:
        """Ask the server to append DEBUG metrics to SEARCH/COUNT replies on this connection."""
        self._run(DebugCommand(True))

    def disable_debug(self) -> None:
        self._run(DebugCommand(False))

    def send_command(self, command: str) -> str:
        """Send a raw command line and return the raw reply (ERROR replies are returned, not raised)."""
        self._record(lambda: ensure_safe_command_value(command, "command"))
        return self._record(lambda: self._connection.send_command(RawCommand(command).to_line()))
