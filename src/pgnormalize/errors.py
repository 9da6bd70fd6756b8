"""Error handling for pgnormalize.

Provides the public PgQueryError exception and an internal helper to raise it in place of the ``ParseError`` that
pglast raises when libpg_query rejects its input.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

from pglast.parser import ParseError

if TYPE_CHECKING:
    from collections.abc import Generator


class PgQueryError(Exception):
    """Structured error raised when libpg_query rejects a SQL statement.

    Every pgnormalize function that calls into libpg_query (:func:`~pgnormalize.parse`,
    :func:`~pgnormalize.scan`, :func:`~pgnormalize.normalize` and
    :func:`~pgnormalize.normalize_statements`) may raise this exception.  A failure here
    always means no normalized text was produced.

    ``cursorpos`` is a **1-based offset** into the original SQL string pointing to the
    token where the error was detected.  When it is ``0`` the position is unknown.
    Convert it to a 0-based Python index with ``e.cursorpos - 1`` when slicing.

    Attributes:
        message: Human-readable error description from the PostgreSQL parser.
        cursorpos: 1-based offset in the SQL string where the error was detected
            (``0`` when the position is unavailable).
        context: Additional context from the parser, or ``None``.
        funcname: Internal C function name where the error originated, or ``None``.
        filename: Internal C source file where the error originated, or ``None``.
        lineno: Line number in the internal C source file (``0`` when unavailable).

    Examples:
        Catch a syntax error and highlight its location:

        >>> from pgnormalize import normalize, PgQueryError
        >>> sql = "SELECT * FORM users"
        >>> try:
        ...     normalize(sql)
        ... except PgQueryError as e:
        ...     print(e.message)
        syntax error at or near "FORM"
    """

    def __init__(
        self,
        message: str,
        *,
        cursorpos: int = 0,
        context: str | None = None,
        funcname: str | None = None,
        filename: str | None = None,
        lineno: int = 0,
    ) -> None:
        """Create a PgQueryError.

        Args:
            message: Human-readable error description.
            cursorpos: 1-based position in the SQL string where the error was detected.
            context: Additional parser context.
            funcname: Internal C function name where the error originated.
            filename: Internal C source file.
            lineno: Line number in the C source file.
        """
        super().__init__(message)
        self.message = message
        self.cursorpos = cursorpos
        self.context = context
        self.funcname = funcname
        self.filename = filename
        self.lineno = lineno


class StackDepthError(PgQueryError):
    """Raised when a parse tree is nested deeper than the walker allows.

    Attributes:
        max_depth: The limit that was exceeded.
    """

    def __init__(self, max_depth: int) -> None:
        super().__init__(f"stack depth limit exceeded (max_depth={max_depth})")
        self.max_depth = max_depth


@contextmanager
def check_error() -> Generator[None, None, None]:
    """Re-raise any pglast ``ParseError`` raised inside the block as :class:`PgQueryError`.

    pglast stores the message as the first exception argument and, when libpg_query reported one, the 0-based
    error position as the second; it becomes the 1-based ``cursorpos``.  The original exception is chained as
    ``__cause__``.
    """
    try:
        yield
    except ParseError as exc:
        message = str(exc.args[0]) if exc.args and exc.args[0] else "unknown error"
        cursorpos = exc.args[1] + 1 if len(exc.args) > 1 and isinstance(exc.args[1], int) else 0
        raise PgQueryError(message, cursorpos=cursorpos) from exc
