"""
CLI: local n-gram preview and server commands through main().
"""

import pytest

import cli


@pytest.fixture
def no_env(monkeypatch, tmp_path):
    for name in ("MYGRAM_HOST", "MYGRAM_PORT", "MYGRAM_TIMEOUT_MS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_ngrams_command(capsys):
    assert cli.main(["ngrams", "東京ＡＢＣ", "--lower"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "Normalized: 東京abc"
    assert out[1:] == [" - 東", " - 京", " - ab", " - bc"]


def test_search_command(server, capsys, no_env):
    server.responses["SEARCH articles hello LIMIT 2"] = "OK RESULTS 3 11 12"
    code = cli.main(["--host", "127.0.0.1", "--port", str(server.port), "search", "articles", "hello", "--limit", "2"])
    assert code == 0
    out = capsys.readouterr().out
    assert "Total: 3" in out
    assert " - 11" in out
    assert " - 12" in out


def test_debug_flag_enables_debug_first(server, capsys, no_env):
    server.responses["DEBUG ON"] = "OK DEBUG_ON"
    server.responses["COUNT articles hello FILTER lang = ja"] = "OK COUNT 4 DEBUG query_time=0.5"
    code = cli.main(
        ["--port", str(server.port), "--debug", "count", "articles", "hello", "--filter", "lang=ja"]
    )
    assert code == 0
    assert server.received == ["DEBUG ON", "COUNT articles hello FILTER lang = ja"]
    out = capsys.readouterr().out
    assert "Count: 4" in out
    assert "query_time_ms: 0.5" in out


def test_server_error_exit_code(server, capsys, no_env):
    server.responses["GET missing 1"] = "ERROR no such table"
    code = cli.main(["--port", str(server.port), "get", "missing", "1"])
    assert code == 1
    assert "ServerError: no such table" in capsys.readouterr().err


def test_bad_filter_syntax_exits():
    with pytest.raises(SystemExit):
        cli.main(["search", "t", "q", "--filter", "novalue"])
