"""
Request lines for the text protocol. Pure string building, no I/O.

- One NamedTuple per command; `to_line()` renders the line without the CRLF terminator.
- Query text, AND/NOT terms and filter values are escaped; table, filter key, sort column
  and primary key are emitted as given.
- SORT/LIMIT rendering follows the server's defaults exactly (see SearchCommand.to_line).
"""

from enum import Enum
from typing import Dict, Iterable, List, Mapping, NamedTuple, Sequence, Tuple, Union

# A token must be quoted when it contains any of these.
_QUOTE_TRIGGERS = frozenset(" \t\n\r\"'")

Filters = Union[Mapping[str, str], Sequence[Tuple[str, str]]]


def escape_query_string(value: str) -> str:
    """
    Return value bare when it is a single safe token, else wrap it in double quotes
    with internal `"` and `\\` backslash-escaped.
    """
    if not any(c in _QUOTE_TRIGGERS for c in value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def filter_items(filters: Filters) -> List[Tuple[str, str]]:
    """Filters as ordered (key, value) pairs; accepts a mapping or a pair sequence."""
    if hasattr(filters, "items"):
        return list(filters.items())
    return [(k, v) for k, v in filters]


def _query_clauses(query: str, and_terms: Iterable[str], not_terms: Iterable[str], filters: Filters) -> List[str]:
    parts = [escape_query_string(query)]
    for term in and_terms:
        parts += ["AND", escape_query_string(term)]
    for term in not_terms:
        parts += ["NOT", escape_query_string(term)]
    for key, value in filter_items(filters):
        parts += ["FILTER", key, "=", escape_query_string(value)]
    return parts


class SearchCommand(NamedTuple):
    table: str
    query: str
    limit: int = 0
    offset: int = 0
    and_terms: Sequence[str] = ()
    not_terms: Sequence[str] = ()
    filters: Filters = ()
    sort_column: str = ""
    sort_desc: bool = True

    def to_line(self) -> str:
        parts = ["SEARCH", self.table] + _query_clauses(self.query, self.and_terms, self.not_terms, self.filters)
        if self.sort_column:
            parts += ["SORT", self.sort_column, "DESC" if self.sort_desc else "ASC"]
        elif not self.sort_desc:
            # Primary key descending is the server default, so only ascending is spelled out.
            parts += ["SORT", "ASC"]
        if self.limit > 0 and self.offset > 0:
            parts += ["LIMIT", f"{self.offset},{self.limit}"]
        elif self.limit > 0:
            parts += ["LIMIT", str(self.limit)]
        return " ".join(parts)


class CountCommand(NamedTuple):
    table: str
    query: str
    and_terms: Sequence[str] = ()
    not_terms: Sequence[str] = ()
    filters: Filters = ()

    def to_line(self) -> str:
        return " ".join(["COUNT", self.table] + _query_clauses(self.query, self.and_terms, self.not_terms, self.filters))


class GetCommand(NamedTuple):
    table: str
    primary_key: str

    def to_line(self) -> str:
        return f"GET {self.table} {self.primary_key}"


class InfoCommand(NamedTuple):
    def to_line(self) -> str:
        return "INFO"


class ConfigCommand(NamedTuple):
    def to_line(self) -> str:
        return "CONFIG"


class SaveCommand(NamedTuple):
    """SAVE with an optional server-side path; empty path uses the server default."""
    path: str = ""

    def to_line(self) -> str:
        return f"SAVE {self.path}" if self.path else "SAVE"


class LoadCommand(NamedTuple):
    path: str

    def to_line(self) -> str:
        return f"LOAD {self.path}"


class ReplicationAction(str, Enum):
    STATUS = "STATUS"
    START = "START"
    STOP = "STOP"


class ReplicationCommand(NamedTuple):
    action: ReplicationAction = ReplicationAction.STATUS

    def to_line(self) -> str:
        return f"REPLICATION {ReplicationAction(self.action).value}"


class DebugCommand(NamedTuple):
    enabled: bool

    def to_line(self) -> str:
        return "DEBUG ON" if self.enabled else "DEBUG OFF"


class RawCommand(NamedTuple):
    text: str

    def to_line(self) -> str:
        return self.text


Command = Union[
    SearchCommand,
    CountCommand,
    GetCommand,
    InfoCommand,
    ConfigCommand,
    SaveCommand,
    LoadCommand,
    ReplicationCommand,
    DebugCommand,
    RawCommand,
]

# Response verb each command expects after "OK"; None accepts any OK reply.
EXPECTED_VERBS: Dict[type, Union[str, None]] = {
    SearchCommand: "RESULTS",
    CountCommand: "COUNT",
    GetCommand: "DOC",
    InfoCommand: "INFO",
    ConfigCommand: "CONFIG",
    SaveCommand: "SAVED",
    LoadCommand: "LOADED",
    DebugCommand: None,
    RawCommand: None,
}


def expected_verb(command: Command) -> Union[str, None]:
    """Verb the server answers this command with; None when any OK reply is acceptable."""
    if isinstance(command, ReplicationCommand):
        return "REPLICATION" if ReplicationAction(command.action) is ReplicationAction.STATUS else None
    return EXPECTED_VERBS[type(command)]
