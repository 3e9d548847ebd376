"""
Typed results decoded from server responses.

- Plain NamedTuples: primitive fields, lists and dicts only, so results marshal as-is (`_asdict()`).
- DebugInfo keeps None for metrics the server did not report; zero means reported as zero.
"""

from typing import Dict, List, NamedTuple, Optional


class DebugInfo(NamedTuple):
    """Per-query metrics sent when debug mode is on."""
    query_time_ms: Optional[float] = None
    index_time_ms: Optional[float] = None
    filter_time_ms: Optional[float] = None
    terms: Optional[int] = None
    ngrams: Optional[int] = None
    candidates: Optional[int] = None
    after_intersection: Optional[int] = None
    after_not: Optional[int] = None
    after_filters: Optional[int] = None
    final: Optional[int] = None
    optimization: Optional[str] = None
    order_by: Optional[str] = None
    limit: Optional[int] = None
    offset: Optional[int] = None
    raw: Optional[Dict[str, str]] = None


class SearchResponse(NamedTuple):
    total_count: int
    results: List[str]
    debug: Optional[DebugInfo] = None


class CountResponse(NamedTuple):
    count: int
    debug: Optional[DebugInfo] = None


class Document(NamedTuple):
    """Document fetched by primary key. fields keeps server order; repeated keys keep the last value."""
    primary_key: str
    fields: Dict[str, str]


class ServerInfo(NamedTuple):
    version: str
    uptime_seconds: int
    total_requests: int
    active_connections: int
    index_size_bytes: int
    doc_count: int
    tables: List[str]
    raw: Dict[str, str]


class ReplicationStatus(NamedTuple):
    running: bool
    gtid: str
    status_str: str
