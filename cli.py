#!/usr/bin/env python3
"""
Command-line client for a MygramDB server.

Commands:
  search <table> <query>     Search a table; print total and matching primary keys
  count <table> <query>      Count matching documents
  get <table> <pk>           Print a document's fields
  info                       Print server information
  config                     Print server configuration
  save [path] / load <path>  Snapshot or restore the index on the server
  replication status|start|stop
  ngrams <text>              Show the n-grams a query produces (local, no server)

Connection settings come from --host/--port/--timeout-ms, else MYGRAM_* variables / .env.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent))

from client import ClientConfig, MygramClient
from ngram import normalize_text, generate_hybrid_ngrams
from protocol import DebugInfo, MygramError


def make_client(args: argparse.Namespace) -> MygramClient:
    overrides = {
        "host": args.host,
        "port": args.port,
        "timeout_ms": args.timeout_ms,
    }
    values = ClientConfig.from_env().model_dump()
    values.update({k: v for k, v in overrides.items() if v is not None})
    return MygramClient(ClientConfig(**values))


def print_debug(debug: DebugInfo) -> None:
    print("Debug:")
    for key, value in debug._asdict().items():
        if value is not None and key != "raw":
            print(f"  {key}: {value}")


def cmd_search(client: MygramClient, args: argparse.Namespace) -> None:
    if args.expression:
        resp = client.search_expression(args.table, args.query, limit=args.limit, offset=args.offset)
    else:
        resp = client.search(
            args.table,
            args.query,
            limit=args.limit,
            offset=args.offset,
            and_terms=args.and_terms,
            not_terms=args.not_terms,
            filters=args.filters,
            sort_column=args.sort or "",
            sort_desc=not args.asc,
        )
    print("Total:", resp.total_count)
    for pk in resp.results:
        print(" -", pk)
    if resp.debug:
        print_debug(resp.debug)


def cmd_count(client: MygramClient, args: argparse.Namespace) -> None:
    resp = client.count(
        args.table, args.query, and_terms=args.and_terms, not_terms=args.not_terms, filters=args.filters
    )
    print("Count:", resp.count)
    if resp.debug:
        print_debug(resp.debug)


def cmd_get(client: MygramClient, args: argparse.Namespace) -> None:
    doc = client.get(args.table, args.primary_key)
    print("Primary key:", doc.primary_key)
    for key, value in doc.fields.items():
        print(f"  {key} = {value}")


def cmd_info(client: MygramClient, _: argparse.Namespace) -> None:
    info = client.info()
    print("Version:", info.version)
    print("Uptime (s):", info.uptime_seconds)
    print("Total requests:", info.total_requests)
    print("Active connections:", info.active_connections)
    print("Index size (bytes):", info.index_size_bytes)
    print("Documents:", info.doc_count)
    print("Tables:", ", ".join(info.tables))


def cmd_config(client: MygramClient, _: argparse.Namespace) -> None:
    print(client.get_config())


def cmd_save(client: MygramClient, args: argparse.Namespace) -> None:
    print("Saved:", client.save(args.path or ""))


def cmd_load(client: MygramClient, args: argparse.Namespace) -> None:
    print("Loaded:", client.load(args.path))


def cmd_replication(client: MygramClient, args: argparse.Namespace) -> None:
    if args.action == "status":
        status = client.get_replication_status()
        print("Running:", "yes" if status.running else "no")
        print("GTID:", status.gtid)
    elif args.action == "start":
        client.start_replication()
        print("Replication started")
    else:
        client.stop_replication()
        print("Replication stopped")


def cmd_ngrams(args: argparse.Namespace) -> None:
    """Local only: normalize text and print its hybrid n-grams."""
    text = normalize_text(args.text, width=args.width, lower=args.lower)
    print("Normalized:", text)
    for ng in generate_hybrid_ngrams(text, args.ascii_size, args.kanji_size):
        print(" -", ng)


def parse_filter(value: str):
    key, sep, val = value.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"Filter must be key=value: {value!r}")
    return key, val


def add_term_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("table", help="Table name")
    p.add_argument("query", help="Search text")
    p.add_argument("--and", dest="and_terms", action="append", default=[], help="Additional required term")
    p.add_argument("--not", dest="not_terms", action="append", default=[], help="Excluded term")
    p.add_argument("--filter", dest="filters", action="append", type=parse_filter, default=[], help="key=value")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="MygramDB command-line client")
    parser.add_argument("--host", help="Server IPv4 address")
    parser.add_argument("--port", type=int, help="Server port")
    parser.add_argument("--timeout-ms", type=int, help="Connect/send/receive timeout")
    parser.add_argument("--debug", action="store_true", help="Request DEBUG metrics from the server")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log protocol traffic to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    p_search = sub.add_parser("search", help="Search a table")
    add_term_options(p_search)
    p_search.add_argument("--limit", type=int, default=0)
    p_search.add_argument("--offset", type=int, default=0)
    p_search.add_argument("--sort", help="Sort column (default: primary key)")
    p_search.add_argument("--asc", action="store_true", help="Sort ascending")
    p_search.add_argument("-e", "--expression", action="store_true", help="Treat query as +/- expression")

    add_term_options(sub.add_parser("count", help="Count matching documents"))

    p_get = sub.add_parser("get", help="Get a document by primary key")
    p_get.add_argument("table")
    p_get.add_argument("primary_key")

    sub.add_parser("info", help="Server information")
    sub.add_parser("config", help="Server configuration")
    p_save = sub.add_parser("save", help="Save a snapshot on the server")
    p_save.add_argument("path", nargs="?")
    p_load = sub.add_parser("load", help="Load a snapshot on the server")
    p_load.add_argument("path")
    p_repl = sub.add_parser("replication", help="Replication control")
    p_repl.add_argument("action", choices=["status", "start", "stop"])

    p_ngrams = sub.add_parser("ngrams", help="Show query n-grams (no server needed)")
    p_ngrams.add_argument("text")
    p_ngrams.add_argument("--ascii-size", type=int, default=2)
    p_ngrams.add_argument("--kanji-size", type=int, default=1)
    p_ngrams.add_argument("--width", choices=["narrow", "wide", "keep"], default="narrow")
    p_ngrams.add_argument("--lower", action="store_true")
    return parser


COMMANDS = {
    "search": cmd_search,
    "count": cmd_count,
    "get": cmd_get,
    "info": cmd_info,
    "config": cmd_config,
    "save": cmd_save,
    "load": cmd_load,
    "replication": cmd_replication,
}


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    if args.command == "ngrams":
        cmd_ngrams(args)
        return 0
    try:
        with make_client(args) as client:
            if args.debug:
                client.enable_debug()
            COMMANDS[args.command](client, args)
    except MygramError as e:
        print(f"{e.kind}: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print("Invalid configuration:", e, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
