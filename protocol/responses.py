"""
Response decoding: one parser per response verb, dispatched on the token after "OK".

- `ERROR <message>` raises ServerError with the server's literal message.
- `OK <VERB> ...` is routed through DECODERS; unknown verbs or a verb other than the
  expected one raise ProtocolError("unexpected response format").
- key=value micro-format (inline DEBUG tail, DOC fields, REPLICATION) and `key: value` lines
  (INFO, `# DEBUG` block) are parsed to a dict first, then known keys are projected onto typed fields.
- Numeric fields that do not parse raise ProtocolError; they never default to zero.
"""

import math
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from .errors import ProtocolError, ServerError
from .types import CountResponse, DebugInfo, Document, ReplicationStatus, SearchResponse, ServerInfo

UNEXPECTED_FORMAT = "unexpected response format"
DEBUG_MARKER = "DEBUG"
# Multi-line form: "# DEBUG" on its own line, then "key: value" lines
DEBUG_BLOCK_HEADER = "# DEBUG"

_DECIMAL = re.compile(r"[0-9]+(\.[0-9]*)?([eE][+-]?[0-9]+)?|\.[0-9]+([eE][+-]?[0-9]+)?")

# DEBUG key -> (DebugInfo field, value type)
_DEBUG_FIELDS: Dict[str, Tuple[str, type]] = {
    "query_time": ("query_time_ms", float),
    "index_time": ("index_time_ms", float),
    "filter_time": ("filter_time_ms", float),
    "terms": ("terms", int),
    "ngrams": ("ngrams", int),
    "candidates": ("candidates", int),
    "after_intersection": ("after_intersection", int),
    "after_not": ("after_not", int),
    "after_filters": ("after_filters", int),
    "final": ("final", int),
    "optimization": ("optimization", str),
    "order_by": ("order_by", str),
    "limit": ("limit", int),
    "offset": ("offset", int),
}

# INFO key -> ServerInfo field; older servers use the aliases.
_INFO_NUMERIC_FIELDS: Dict[str, str] = {
    "uptime_seconds": "uptime_seconds",
    "total_requests": "total_requests",
    "active_connections": "active_connections",
    "connected_clients": "active_connections",
    "index_size_bytes": "index_size_bytes",
    "used_memory_bytes": "index_size_bytes",
    "doc_count": "doc_count",
    "total_documents": "doc_count",
}


def _parse_int(value: str, what: str) -> int:
    """Unsigned ASCII decimal digits only (no sign, underscore or padding)."""
    if not (value.isascii() and value.isdigit()):
        raise ProtocolError(f"Invalid integer for {what}: {value!r}")
    return int(value)


def _parse_float(value: str, what: str) -> float:
    if not _DECIMAL.fullmatch(value):
        raise ProtocolError(f"Invalid number for {what}: {value!r}")
    n = float(value)
    if not math.isfinite(n):
        raise ProtocolError(f"Invalid number for {what}: {value!r}")
    return n


def parse_key_value_pairs(tokens: List[str]) -> Dict[str, str]:
    """key=value tokens to an ordered dict (split at the first '='); other tokens are skipped."""
    pairs: Dict[str, str] = {}
    for token in tokens:
        key, sep, value = token.partition("=")
        if sep:
            pairs[key] = value
    return pairs


def parse_debug_info(pairs: Dict[str, str]) -> DebugInfo:
    """Project DEBUG key=value pairs onto DebugInfo. Unknown keys stay only in `raw`."""
    values: Dict[str, Any] = {}
    for key, value in pairs.items():
        if key not in _DEBUG_FIELDS:
            continue
        field, kind = _DEBUG_FIELDS[key]
        if kind is float:
            values[field] = _parse_float(value, key)
        elif kind is int:
            # limit/offset may be reported as "100(default)"
            values[field] = _parse_int(value.replace("(default)", "").strip(), key)
        else:
            values[field] = value
    return DebugInfo(raw=dict(pairs), **values)


def parse_debug_lines(lines: List[str]) -> Dict[str, str]:
    """`key: value` lines to an ordered dict (split at the first ':'); blank or keyless lines are skipped."""
    pairs: Dict[str, str] = {}
    for line in lines:
        key, sep, value = line.strip().partition(":")
        key, value = key.strip(), value.strip()
        if sep and key and value:
            pairs[key] = value
    return pairs


def _split_debug(tokens: List[str]) -> Tuple[List[str], Optional[DebugInfo]]:
    """Split tokens at the first DEBUG marker: (tokens before, parsed debug block or None)."""
    if DEBUG_MARKER not in tokens:
        return tokens, None
    i = tokens.index(DEBUG_MARKER)
    return tokens[:i], parse_debug_info(parse_key_value_pairs(tokens[i + 1 :]))


def _split_first_line(text: str, verb: str) -> Tuple[List[str], Optional[DebugInfo]]:
    """
    Tokens of the first line after "OK <verb>", and the debug metrics from either the
    inline `DEBUG k=v` tail or a `# DEBUG` block on the following lines.
    """
    lines = text.split("\n")
    tokens = lines[0].split()[2:]
    if not tokens:
        raise ProtocolError(f"Missing count in {verb} response")
    rest, debug = _split_debug(tokens[1:])
    if debug is None:
        stripped = [line.strip() for line in lines[1:]]
        if DEBUG_BLOCK_HEADER in stripped:
            block = lines[1 + stripped.index(DEBUG_BLOCK_HEADER) + 1 :]
            debug = parse_debug_info(parse_debug_lines(block))
    return [tokens[0]] + rest, debug


def _parse_results(text: str) -> SearchResponse:
    # OK RESULTS <total> [<id>...] [DEBUG k=v...]  or  ...\n# DEBUG\nkey: value...
    tokens, debug = _split_first_line(text, "RESULTS")
    return SearchResponse(total_count=_parse_int(tokens[0], "total_count"), results=tokens[1:], debug=debug)


def _parse_count(text: str) -> CountResponse:
    # OK COUNT <n> [DEBUG k=v...]  or  ...\n# DEBUG\nkey: value...
    tokens, debug = _split_first_line(text, "COUNT")
    return CountResponse(count=_parse_int(tokens[0], "count"), debug=debug)


def _parse_doc(text: str) -> Document:
    # OK DOC <pk> [k=v...]
    tokens = text.split()[2:]
    if not tokens:
        raise ProtocolError("Missing primary key in DOC response")
    return Document(primary_key=tokens[0], fields=parse_key_value_pairs(tokens[1:]))


def _parse_info(text: str) -> ServerInfo:
    # "OK INFO" header line, then Redis-style "key: value" lines
    raw: Dict[str, str] = {}
    for line in text.split("\n")[1:]:
        if not line or line[0] in "#\r":
            continue
        key, sep, value = line.partition(":")
        if sep:
            raw[key] = value.strip(" \t\r\n")
    numbers = {field: 0 for field in _INFO_NUMERIC_FIELDS.values()}
    for key, field in _INFO_NUMERIC_FIELDS.items():
        if key in raw:
            numbers[field] = _parse_int(raw[key], key)
    tables = [t.strip() for t in raw.get("tables", "").split(",") if t.strip()]
    return ServerInfo(version=raw.get("version", ""), tables=tables, raw=raw, **numbers)


def _parse_config(text: str) -> str:
    # "OK CONFIG" header line, then the configuration body
    _, _, body = text.partition("\n")
    return body


def _suffix_after(prefix: str) -> Callable[[str], str]:
    def parse(text: str) -> str:
        return text[len(prefix) :]
    return parse


def _parse_replication(text: str) -> ReplicationStatus:
    pairs = parse_key_value_pairs(text.split()[2:])
    return ReplicationStatus(
        running=pairs.get("status") == "running",
        gtid=pairs.get("gtid", ""),
        status_str=text,
    )


DECODERS: Dict[str, Callable[[str], Any]] = {
    "RESULTS": _parse_results,
    "COUNT": _parse_count,
    "DOC": _parse_doc,
    "INFO": _parse_info,
    "CONFIG": _parse_config,
    "SAVED": _suffix_after("OK SAVED "),
    "LOADED": _suffix_after("OK LOADED "),
    "REPLICATION": _parse_replication,
}


def raise_for_error(text: str) -> None:
    """Raise ServerError if text is an `ERROR <message>` response."""
    if text == "ERROR" or text.startswith("ERROR "):
        raise ServerError(text[len("ERROR ") :])


def response_verb(text: str) -> Optional[str]:
    """Verb token following "OK" on the first line, or None for a bare OK."""
    first_line = text.split("\n", 1)[0].split()
    if not first_line or first_line[0] != "OK":
        raise ProtocolError(UNEXPECTED_FORMAT)
    return first_line[1] if len(first_line) > 1 else None


def decode_response(text: str, expected_verb: Optional[str] = None) -> Any:
    """
    Decode one response line (or block) into its typed result.
    With expected_verb set, any other verb raises ProtocolError.
    """
    raise_for_error(text)
    verb = response_verb(text)
    if expected_verb is not None and verb != expected_verb:
        raise ProtocolError(UNEXPECTED_FORMAT)
    if verb not in DECODERS:
        raise ProtocolError(UNEXPECTED_FORMAT)
    return DECODERS[verb](text)


def check_acknowledgement(text: str) -> None:
    """Accept any OK reply (DEBUG ON/OFF, REPLICATION START/STOP)."""
    raise_for_error(text)
    response_verb(text)
