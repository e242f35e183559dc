"""CLI interface for judgepad."""

from __future__ import annotations

import argparse
import json
import os
import sys

from judgepad.config import Config
from judgepad.formatting import format_result, format_verdict
from judgepad.history import HistoryStore, export_snippet
from judgepad.models import TestCase
from judgepad.sequencer import Sequencer


def load_test_cases(path: str) -> list[TestCase]:
    """Load test cases from a JSON file (a list, or an object with "test_cases")."""
    with open(path) as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("test_cases", [])
    if not isinstance(data, list):
        return []
    return [TestCase.from_dict(tc) for tc in data if isinstance(tc, dict)]


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path) as f:
        return f.read()


def _add_executor_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--executor", choices=["rapidapi", "judge0"], default=None, help="Execution backend"
    )
    parser.add_argument("--judge0-url", type=str, default=None, help="Judge0 API base URL")
    parser.add_argument("--judge0-api-key", type=str, default=None, help="Judge0 API key")
    parser.add_argument("--language-id", type=int, default=None, help="Judge0 language id")
    parser.add_argument("-q", "--quiet", action="store_true", default=False, help="No progress output")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="judgepad",
        description="judgepad: run code and test cases on a remote Judge0 service",
    )
    parser.add_argument("--history-db", type=str, default=None, help="Path to the history database")
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Run a source file once")
    run_parser.add_argument("source", help="Path to source file ('-' for stdin)")
    _add_executor_args(run_parser)

    test_parser = subparsers.add_parser("test", help="Run a source file against test cases")
    test_parser.add_argument("source", help="Path to source file ('-' for stdin)")
    test_parser.add_argument("cases", help="Path to test cases JSON file")
    _add_executor_args(test_parser)

    subparsers.add_parser("history", help="List saved snippets")

    export_parser = subparsers.add_parser("export", help="Write a saved snippet to a file")
    export_parser.add_argument("id", type=int, help="Snippet id (see 'history')")
    export_parser.add_argument("-o", "--output-dir", type=str, default=".", help="Target directory")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command in ("history", "export"):
        history_path = args.history_db or os.environ.get("JUDGEPAD_HISTORY_DB", Config.history_db)
        store = HistoryStore(history_path)
        try:
            _history_command(args, store)
        finally:
            store.close()
        return

    # Build config from env + CLI overrides
    overrides = {
        "executor_type": args.executor,
        "judge0_url": args.judge0_url,
        "judge0_api_key": args.judge0_api_key,
        "language_id": args.language_id,
        "history_db": args.history_db,
    }
    if args.quiet:
        overrides["verbose"] = False

    try:
        config = Config.from_env(**overrides)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    source = _read_source(args.source)
    if not source.strip():
        print("Error: No code provided", file=sys.stderr)
        sys.exit(1)

    store = HistoryStore(config.history_db)
    try:
        sequencer = Sequencer(config, history=store)
        if args.command == "run":
            result = sequencer.run_once(source)
            print(format_result(result))
            if not result.ok:
                sys.exit(1)
        else:
            test_cases = load_test_cases(args.cases)
            run = sequencer.run(
                source, test_cases, on_verdict=lambda v: print(format_verdict(v), flush=True)
            )
            print(run.summary)
            if not run.all_passed:
                sys.exit(1)
    finally:
        store.close()


def _history_command(args: argparse.Namespace, store: HistoryStore) -> None:
    if args.command == "history":
        for snippet in store.list_all():
            first_line = snippet.code.strip().splitlines()[0] if snippet.code.strip() else ""
            print(f"{snippet.id}\t{snippet.created_at:%Y-%m-%d %H:%M}\t{snippet.language}\t{first_line[:60]}")
        return

    snippet = store.get(args.id)
    if snippet is None:
        print(f"Error: no snippet with id {args.id}", file=sys.stderr)
        sys.exit(1)
    path = export_snippet(snippet, args.output_dir)
    print(f"Exported to {path}", file=sys.stderr)
