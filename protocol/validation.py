"""
Input checks run before a command line is built.

- CR/LF terminate a command and NUL truncates it server-side; none may appear in any field.
- Optional cap on the query expression length, counted the same way the server counts it.
"""

from typing import Iterable, List, Tuple

from .commands import Filters, filter_items
from .errors import InputValidationError

DEFAULT_MAX_QUERY_LENGTH = 128

_UNSAFE_CHARACTERS = (
    ("\r", "carriage return (\\r)"),
    ("\n", "line feed (\\n)"),
    ("\0", "null byte (\\0)"),
)


def ensure_safe_command_value(value: str, field_name: str) -> str:
    """Return value unchanged, or raise InputValidationError if it would break the line protocol."""
    for char, description in _UNSAFE_CHARACTERS:
        if char in value:
            raise InputValidationError(f"Invalid character {description} found in {field_name}")
    return value


def ensure_safe_terms(values: Iterable[str], field_name: str) -> List[str]:
    return [ensure_safe_command_value(v, f"{field_name}[{i}]") for i, v in enumerate(values)]


def ensure_safe_filters(filters: Filters) -> List[Tuple[str, str]]:
    items = filter_items(filters)
    for key, value in items:
        ensure_safe_command_value(key, f"filters.{key}.key")
        ensure_safe_command_value(value, f"filters.{key}.value")
    return items


def query_expression_length(
    query: str,
    and_terms: Iterable[str] = (),
    not_terms: Iterable[str] = (),
    filters: Filters = (),
    sort_column: str = "",
) -> int:
    """Sum of the lengths of every user-supplied part of the expression (keywords excluded)."""
    length = len(query) + sum(len(t) for t in and_terms) + sum(len(t) for t in not_terms)
    length += sum(len(k) + len(v) for k, v in filter_items(filters))
    return length + len(sort_column)


def ensure_query_length_within_limit(
    max_length: int,
    query: str,
    and_terms: Iterable[str] = (),
    not_terms: Iterable[str] = (),
    filters: Filters = (),
    sort_column: str = "",
) -> None:
    """Raise InputValidationError if the expression is longer than max_length. 0 disables the check."""
    if max_length <= 0:
        return
    length = query_expression_length(query, and_terms, not_terms, filters, sort_column)
    if length > max_length:
        raise InputValidationError(
            f"Query expression length ({length}) exceeds maximum allowed length of {max_length} characters."
        )
