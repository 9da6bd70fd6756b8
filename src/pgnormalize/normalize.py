"""SQL query normalization: replace literal constants with ``$n`` placeholders."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pgnormalize.lengths import fill_in_constant_lengths
from pgnormalize.locations import ConstLocations
from pgnormalize.parse import parse
from pgnormalize.walker import MAX_DEPTH, const_record_walker

if TYPE_CHECKING:
    from pgnormalize.walk import Node

logger = logging.getLogger(__name__)

PLACEHOLDER_WIDTH = 10
"""Room reserved per constant for the placeholder replacing it.

A constant takes at least one byte, so the output never exceeds ``len(query) + count * PLACEHOLDER_WIDTH`` bytes.
"""


def build_normalized_query(jstate: ConstLocations, query: str, query_loc: int = 0) -> str:
    """Generate the normalized text of *query* from the constants recorded in *jstate*.

    Resolves constant lengths first (see :func:`~pgnormalize.lengths.fill_in_constant_lengths`), which also sorts
    the spans.  Every resolved span is then replaced by ``$n``, where ``n`` counts the replaced spans from left to
    right starting after ``jstate.highest_extern_param_id``.  All other text is copied unchanged.

    Span locations and *query_loc* are UTF-8 byte offsets, as reported by the parser.

    Args:
        jstate: Constants recorded by the tree walker.
        query: The query text.
        query_loc: Byte offset of *query* within the text the locations were recorded against.

    Returns:
        The normalized query.

    Raises:
        PgQueryError: If *query* cannot be tokenized.
    """
    return _rebuild(jstate, query.encode("utf-8"), query_loc)


def _rebuild(jstate: ConstLocations, query: bytes, query_loc: int) -> str:
    fill_in_constant_lengths(jstate, query, query_loc)

    max_len = len(query) + len(jstate.clocations) * PLACEHOLDER_WIDTH
    parts: list[bytes] = []
    quer_loc = 0  # source position copied up to
    param_id = jstate.highest_extern_param_id

    for span in jstate.clocations:
        if span.length < 0:
            continue  # duplicate or unresolved
        off = span.location - query_loc
        parts.append(query[quer_loc:off])
        param_id += 1
        parts.append(b"$%d" % param_id)
        quer_loc = off + span.length

    parts.append(query[quer_loc:])
    norm_query = b"".join(parts)

    if len(norm_query) > max_len:
        logger.warning("normalized query is %d bytes, over the expected bound of %d", len(norm_query), max_len)
    return norm_query.decode("utf-8")


def normalize(query: str, *, max_depth: int = MAX_DEPTH) -> str:
    """Normalize a SQL query by replacing literal constants with placeholders.

    Parses *query* with libpg_query, records where each literal constant (strings, numbers, bit strings, ...)
    starts, and rewrites those spans as positional placeholders (``$1``, ``$2``, ...).  Placeholders are numbered
    left to right, continuing after the highest ``$n`` the query already uses.  This is useful for grouping
    structurally equivalent queries.

    Args:
        query: A SQL query string, possibly holding several statements.
        max_depth: Deepest parse tree nesting accepted.

    Returns:
        The normalized query with constants replaced by positional placeholders.

    Raises:
        PgQueryError: If the query cannot be parsed.
        StackDepthError: If the parse tree is nested deeper than *max_depth*.

    Example:
        >>> normalize("SELECT * FROM users WHERE id = 42 AND name = 'Alice'")
        'SELECT * FROM users WHERE id = $1 AND name = $2'
    """
    tree = parse(query)
    jstate = ConstLocations()
    const_record_walker(tree, jstate, max_depth=max_depth)
    logger.debug("found %d constant location(s) in query", len(jstate))
    return build_normalized_query(jstate, query)


def normalize_statements(sql: str, *, max_depth: int = MAX_DEPTH) -> list[str]:
    """Normalize each statement of a multi-statement string separately.

    Each statement is cut out of *sql* using the position the parser reports for it, and gets its own placeholder
    numbering starting at ``$1`` (or after its own highest ``$n``).  Surrounding whitespace and the separating
    semicolons are not part of the results.

    Args:
        sql: A SQL string potentially containing multiple statements.
        max_depth: Deepest parse tree nesting accepted.

    Returns:
        One normalized string per statement.

    Raises:
        PgQueryError: If the SQL cannot be parsed.
        StackDepthError: If a parse tree is nested deeper than *max_depth*.

    Example:
        >>> normalize_statements("SELECT 1; UPDATE t SET a = 'x' WHERE id = 7")
        ['SELECT $1', 'UPDATE t SET a = $1 WHERE id = $2']
    """
    tree = parse(sql)
    encoded = sql.encode("utf-8")
    return [_normalize_statement(encoded, raw_stmt, max_depth) for raw_stmt in tree]


def _normalize_statement(encoded: bytes, raw_stmt: Node, max_depth: int) -> str:
    start = raw_stmt.get("stmt_location", 0)
    # A zero length means "up to the end of the string".
    stmt_len = raw_stmt.get("stmt_len", 0)
    end = start + stmt_len if stmt_len else len(encoded)
    jstate = ConstLocations()
    const_record_walker(raw_stmt, jstate, max_depth=max_depth)
    return _rebuild(jstate, encoded[start:end], start).strip()
