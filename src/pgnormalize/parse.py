"""SQL query parsing via libpg_query."""

from __future__ import annotations

import json

from pglast.parser import parse_sql_json

from pgnormalize.errors import check_error
from pgnormalize.walk import Node


def parse(query: str) -> tuple[Node, ...]:
    """Parse a SQL query into a raw parse tree.

    Calls libpg_query's raw parser (through pglast) and decodes its JSON parse tree.  One ``RawStmt``
    :class:`~pgnormalize.walk.Node` is returned per statement.  Every ``A_Const`` and ``ParamRef`` node in the
    tree carries a ``location``: the **UTF-8 byte offset** in *query* where it starts, or ``-1`` when the parser
    could not attribute one.  ``stmt_location`` and ``stmt_len`` are byte offsets too.

    Args:
        query: A SQL query string.

    Returns:
        A tuple of ``RawStmt`` nodes, each with ``stmt``, ``stmt_location`` and ``stmt_len`` fields.

    Raises:
        PgQueryError: If the query contains a syntax error.

    Example:
        >>> stmts = parse("SELECT id, name FROM users WHERE active = true")
        >>> len(stmts)
        1
        >>> stmts[0].get("stmt").tag
        'SelectStmt'
    """
    with check_error():
        tree = json.loads(parse_sql_json(query))
    return tuple(Node("RawStmt", raw_stmt) for raw_stmt in tree.get("stmts", []))
