"""SQL scanning/tokenization via libpg_query."""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from pglast.parser import scan as _pg_scan

from pgnormalize.errors import check_error

if TYPE_CHECKING:
    from collections.abc import Iterator

COMMENT_TOKENS = frozenset({"SQL_COMMENT", "C_COMMENT"})


class ScanToken(NamedTuple):
    """A single lexical token.

    Attributes:
        start: UTF-8 byte offset of the token's first byte.
        end: UTF-8 byte offset one past the token's last byte.
        name: Token name as known to the PostgreSQL grammar (``"ICONST"``, ``"SCONST"``, ``"ASCII_45"``, ...).
        kind: Keyword classification (``"NO_KEYWORD"``, ``"RESERVED_KEYWORD"``, ...).
    """

    start: int
    end: int
    name: str
    kind: str


def scan(sql: str) -> list[ScanToken]:
    """Tokenize a SQL string into a sequence of scan tokens.

    Runs libpg_query's core scanner, the same lexer the parser uses.  Token positions are UTF-8 byte offsets,
    so they line up exactly with the ``location`` fields of the parse tree.

    Args:
        sql: A SQL string to tokenize.

    Returns:
        The tokens in source order, comments included.

    Raises:
        PgQueryError: If the input contains a scan error (e.g., unterminated
            string literal).

    Example:
        >>> [(t.start, t.end, t.name) for t in scan("SELECT 1")]
        [(0, 6, 'SELECT'), (7, 8, 'ICONST')]
    """
    with check_error():
        raw = _pg_scan(sql)
    # pglast reports character indices with an inclusive end.
    if sql.isascii():
        return [ScanToken(tok.start, tok.end + 1, tok.name, tok.kind) for tok in raw]
    offsets = _byte_offsets(sql)
    return [ScanToken(offsets[tok.start], offsets[tok.end + 1], tok.name, tok.kind) for tok in raw]


def _byte_offsets(sql: str) -> list[int]:
    offsets = [0]
    for char in sql:
        offsets.append(offsets[-1] + len(char.encode("utf-8")))
    return offsets


class Scanner:
    """A tokenizer session over one SQL string.

    Each session lexes its input from scratch and holds no state shared with other sessions, so several can run
    side by side.  Tokens are handed out one at a time by :meth:`next_token`; iteration and ``with`` blocks are
    supported as well::

        with Scanner(sql) as scanner:
            for token in scanner:
                ...

    Raises:
        PgQueryError: From the constructor, if *sql* cannot be tokenized at all.
    """

    def __init__(self, sql: str) -> None:
        self._tokens = scan(sql)
        self._pos = 0
        self.closed = False

    def next_token(self) -> ScanToken | None:
        """Return the next token, or ``None`` once the input is exhausted or the session closed."""
        if self.closed or self._pos >= len(self._tokens):
            return None
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def close(self) -> None:
        self.closed = True
        self._tokens = []

    def __iter__(self) -> Iterator[ScanToken]:
        return self

    def __next__(self) -> ScanToken:
        token = self.next_token()
        if token is None:
            raise StopIteration
        return token

    def __enter__(self) -> Scanner:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
