"""
Command line building: escaping, clause order, SORT/LIMIT defaults.
"""

import pytest

from protocol import (
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


@pytest.mark.parametrize("value", ["hello", "東京", "a-b", "x=1", "(a)"])
def test_safe_token_is_bare(value):
    assert escape_query_string(value) == value


@pytest.mark.parametrize(
    "value, expected",
    [
        ("hello world", '"hello world"'),
        ('say "hi"', '"say \\"hi\\""'),
        ("it's", '"it\'s"'),
        ("tab\there", '"tab\there"'),
        ("back\\slash x", '"back\\\\slash x"'),
        ("", ""),
    ],
)
def test_escape_quotes_when_needed(value, expected):
    assert escape_query_string(value) == expected


def test_escape_backslash_alone_stays_bare():
    assert escape_query_string("a\\b") == "a\\b"


def test_search_limit_and_offset():
    cmd = SearchCommand("docs", "hello", limit=10, offset=20, sort_column="", sort_desc=True)
    assert cmd.to_line() == "SEARCH docs hello LIMIT 20,10"


def test_search_ascending_primary_key():
    cmd = SearchCommand("docs", "hello", limit=10, offset=20, sort_column="", sort_desc=False)
    assert cmd.to_line() == "SEARCH docs hello SORT ASC LIMIT 20,10"


def test_search_defaults_emit_no_sort_or_limit():
    assert SearchCommand("docs", "hello").to_line() == "SEARCH docs hello"


def test_search_sort_column():
    assert SearchCommand("docs", "x", sort_column="created_at").to_line() == "SEARCH docs x SORT created_at DESC"
    assert (
        SearchCommand("docs", "x", sort_column="score", sort_desc=False, limit=5).to_line()
        == "SEARCH docs x SORT score ASC LIMIT 5"
    )


def test_search_offset_ignored_without_limit():
    assert SearchCommand("docs", "x", offset=30).to_line() == "SEARCH docs x"


def test_search_clause_order():
    cmd = SearchCommand(
        "docs",
        "main",
        limit=3,
        and_terms=["two words", "b"],
        not_terms=["old"],
        filters=[("status", "1"), ("lang", "en us")],
    )
    assert cmd.to_line() == (
        'SEARCH docs main AND "two words" AND b NOT old '
        'FILTER status = 1 FILTER lang = "en us" LIMIT 3'
    )


def test_filters_accept_mapping():
    cmd = CountCommand("docs", "q", filters={"a": "1", "b": "2"})
    assert cmd.to_line() == "COUNT docs q FILTER a = 1 FILTER b = 2"


def test_search_query_is_escaped():
    assert SearchCommand("docs", "hello world").to_line() == 'SEARCH docs "hello world"'


def test_count_line():
    assert CountCommand("docs", "q", and_terms=["a"], not_terms=["b"]).to_line() == "COUNT docs q AND a NOT b"


@pytest.mark.parametrize(
    "command, line",
    [
        (GetCommand("docs", "42"), "GET docs 42"),
        (InfoCommand(), "INFO"),
        (ConfigCommand(), "CONFIG"),
        (SaveCommand(), "SAVE"),
        (SaveCommand("/tmp/snap.dmp"), "SAVE /tmp/snap.dmp"),
        (LoadCommand("/tmp/snap.dmp"), "LOAD /tmp/snap.dmp"),
        (ReplicationCommand(), "REPLICATION STATUS"),
        (ReplicationCommand(ReplicationAction.START), "REPLICATION START"),
        (ReplicationCommand("STOP"), "REPLICATION STOP"),
        (DebugCommand(True), "DEBUG ON"),
        (DebugCommand(False), "DEBUG OFF"),
        (RawCommand("PING extra"), "PING extra"),
    ],
)
def test_simple_command_lines(command, line):
    assert command.to_line() == line


def test_expected_verbs():
    assert expected_verb(SearchCommand("t", "q")) == "RESULTS"
    assert expected_verb(CountCommand("t", "q")) == "COUNT"
    assert expected_verb(GetCommand("t", "1")) == "DOC"
    assert expected_verb(InfoCommand()) == "INFO"
    assert expected_verb(SaveCommand()) == "SAVED"
    assert expected_verb(LoadCommand("p")) == "LOADED"
    assert expected_verb(ReplicationCommand()) == "REPLICATION"
    assert expected_verb(ReplicationCommand(ReplicationAction.STOP)) is None
    assert expected_verb(DebugCommand(True)) is None
