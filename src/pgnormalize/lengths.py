"""Measure how much of the query text each recorded constant occupies."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pgnormalize.scan import COMMENT_TOKENS, Scanner

if TYPE_CHECKING:
    from pgnormalize.locations import ConstLocations
    from pgnormalize.scan import ScanToken

logger = logging.getLogger(__name__)

# scanner_isspace() in PostgreSQL's scansup.c
_SCANNER_SPACE = b" \t\n\r\f\v"


def _is_unicode_escaped_string(query: bytes, loc: int) -> bool:
    return query.startswith((b"U&'", b"u&'"), loc)


def fill_in_constant_lengths(
    jstate: ConstLocations,
    query: bytes,
    query_loc: int = 0,
    scanner: Scanner | None = None,
) -> None:
    """Fill in the textual length of every constant recorded in *jstate*.

    Constants can take any lexical form the scanner accepts: integer and float literals, bit strings, quoted,
    dollar-quoted and Unicode-escaped strings.  Rather than recognizing those forms here, the query is re-lexed
    with the parser's own scanner and each constant is measured up to the end of the token found at its location.

    ``jstate.clocations`` is sorted by location as a side effect.  Spans sharing a location with an earlier one are
    duplicates and keep :data:`~pgnormalize.locations.UNKNOWN_LENGTH`.  If the scanner runs out of tokens before a
    location is reached, that span and all later ones also stay unknown.

    A ``-`` at a constant's location starts a negative number: the span then covers the sign token and the value
    token after it, so ``x = 1`` and ``x = -2`` normalize the same way.

    If the scanner overshoots a location instead of landing on it, the overshooting token is used.  This is a
    best-effort approximation kept for compatibility.

    Args:
        jstate: Recorded constants; updated in place.
        query: The UTF-8 encoded text the locations refer to; all offsets are byte offsets.
        query_loc: Offset of *query* within the text the locations were recorded against, for when *query* is one
            statement cut out of a longer string.
        scanner: Tokenizer session over *query*. A fresh :class:`~pgnormalize.scan.Scanner` is opened when omitted.

    Raises:
        PgQueryError: If *query* cannot be tokenized.
    """
    locs = jstate.clocations
    locs.sort(key=lambda loc: loc.location)
    if not locs and scanner is None:
        return

    if scanner is None:
        scanner = Scanner(query.decode("utf-8"))

    last_loc = -1
    with scanner:
        for index, span in enumerate(locs):
            if span.location <= last_loc:
                continue  # duplicate

            loc = span.location - query_loc
            token = _advance_to(scanner, loc)
            if token is not None and query[loc : loc + 1] == b"-":
                token = _next_significant(scanner)
            if token is None:
                logger.debug("scanner hit end of input; %d constant(s) left unresolved", len(locs) - index)
                break

            length = token.end - loc
            if length > 4 and _is_unicode_escaped_string(query, loc):
                # The scanner may have swallowed whitespace looking for UESCAPE.
                length = len(query[loc : loc + length].rstrip(_SCANNER_SPACE))

            span.length = length
            last_loc = span.location


def _advance_to(scanner: Scanner, loc: int) -> ScanToken | None:
    for token in scanner:
        if token.start >= loc:
            return token
    return None


def _next_significant(scanner: Scanner) -> ScanToken | None:
    for token in scanner:
        if token.name not in COMMENT_TOKENS:
            return token
    return None
