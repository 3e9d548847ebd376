"""MygramDB text protocol: command lines, response decoding, error taxonomy."""

from .errors import (
    CommandTimeoutError,
    EncodingError,
    FrameTooLargeError,
    InputValidationError,
    MygramConnectionError,
    MygramError,
    ProtocolError,
    ServerError,
)
from .types import (
    CountResponse,
    DebugInfo,
    Document,
    ReplicationStatus,
    SearchResponse,
    ServerInfo,
)
from .commands import (
    Command,
    ConfigCommand,
    CountCommand,
    DebugCommand,
    GetCommand,
    InfoCommand,
    LoadCommand,
    RawCommand,
    ReplicationAction,
    ReplicationCommand,
    SaveCommand,
    SearchCommand,
    escape_query_string,
    expected_verb,
)
from .responses import (
    check_acknowledgement,
    decode_response,
    parse_debug_info,
    parse_debug_lines,
    parse_key_value_pairs,
)
from .validation import (
    DEFAULT_MAX_QUERY_LENGTH,
    ensure_query_length_within_limit,
    ensure_safe_command_value,
    ensure_safe_filters,
    ensure_safe_terms,
    query_expression_length,
)
from .expression import (
    SearchExpression,
    convert_search_expression,
    has_complex_expression,
    parse_search_expression,
    simplify_search_expression,
    to_query_string,
)

__all__ = [
    "CommandTimeoutError",
    "EncodingError",
    "FrameTooLargeError",
    "InputValidationError",
    "MygramConnectionError",
    "MygramError",
    "ProtocolError",
    "ServerError",
    "CountResponse",
    "DebugInfo",
    "Document",
    "ReplicationStatus",
    "SearchResponse",
    "ServerInfo",
    "Command",
    "ConfigCommand",
    "CountCommand",
    "DebugCommand",
    "GetCommand",
    "InfoCommand",
    "LoadCommand",
    "RawCommand",
    "ReplicationAction",
    "ReplicationCommand",
    "SaveCommand",
    "SearchCommand",
    "escape_query_string",
    "expected_verb",
    "check_acknowledgement",
    "decode_response",
    "parse_debug_info",
    "parse_debug_lines",
    "parse_key_value_pairs",
    "DEFAULT_MAX_QUERY_LENGTH",
    "ensure_query_length_within_limit",
    "ensure_safe_command_value",
    "ensure_safe_filters",
    "ensure_safe_terms",
    "query_expression_length",
    "SearchExpression",
    "convert_search_expression",
    "has_complex_expression",
    "parse_search_expression",
    "simplify_search_expression",
    "to_query_string",
]
