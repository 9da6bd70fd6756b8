"""Command-line entry point: ``python -m pgnormalize [--per-statement] [QUERY ...]``.

Normalizes every QUERY argument, or the whole of standard input when none is given, and prints one result per
line.
"""

from __future__ import annotations

import argparse
import logging
import sys

from pgnormalize.errors import PgQueryError
from pgnormalize.normalize import normalize, normalize_statements


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pgnormalize",
        description="Replace the literal constants of PostgreSQL queries with $n placeholders.",
    )
    parser.add_argument("queries", nargs="*", metavar="QUERY", help="SQL text to normalize (default: read stdin)")
    parser.add_argument(
        "--per-statement",
        action="store_true",
        help="normalize each statement separately and print one line per statement",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(name)s: %(message)s")

    queries = args.queries or [sys.stdin.read().rstrip("\n")]
    try:
        for query in queries:
            if args.per_statement:
                for statement in normalize_statements(query):
                    print(statement)
            else:
                print(normalize(query))
    except PgQueryError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
