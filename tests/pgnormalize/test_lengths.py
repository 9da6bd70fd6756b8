from __future__ import annotations

import pytest

from pgnormalize import ConstLocations, LocationLen, PgQueryError, Scanner, ScanToken, fill_in_constant_lengths

SQL = b"SELECT 1, 'abc', -2.5"


class _TokenScanner(Scanner):
    """Scanner session replaying a fixed token list."""

    def __init__(self, tokens: list[ScanToken]) -> None:
        self._tokens = list(tokens)
        self._pos = 0
        self.closed = False


def _jstate(*locations: int) -> ConstLocations:
    return ConstLocations(clocations=[LocationLen(location) for location in locations])


def _resolved(jstate: ConstLocations) -> list[tuple[int, int]]:
    return [(loc.location, loc.length) for loc in jstate.clocations]


class TestFillInConstantLengths:
    def test_lengths(self):
        jstate = _jstate(7, 10, 17)
        fill_in_constant_lengths(jstate, SQL)
        assert _resolved(jstate) == [(7, 1), (10, 5), (17, 4)]

    def test_sorts_by_location(self):
        jstate = _jstate(17, 7)
        fill_in_constant_lengths(jstate, SQL)
        assert _resolved(jstate) == [(7, 1), (17, 4)]

    def test_duplicates_ignored(self):
        jstate = _jstate(10, 7, 10)
        fill_in_constant_lengths(jstate, SQL)
        assert _resolved(jstate) == [(7, 1), (10, 5), (10, -1)]

    def test_end_of_input_leaves_rest_unknown(self):
        jstate = _jstate(7, 100, 200)
        fill_in_constant_lengths(jstate, SQL)
        assert _resolved(jstate) == [(7, 1), (100, -1), (200, -1)]

    def test_overshoot_uses_next_token(self):
        # Offset 9 is the blank before 'abc'.
        jstate = _jstate(9)
        fill_in_constant_lengths(jstate, SQL)
        assert _resolved(jstate) == [(9, 6)]

    def test_dollar_quoted(self):
        sql = b"SELECT $x$ a 'b' $x$"
        jstate = _jstate(7)
        fill_in_constant_lengths(jstate, sql)
        assert _resolved(jstate) == [(7, len(sql) - 7)]

    def test_query_loc_offset(self):
        jstate = _jstate(27)
        fill_in_constant_lengths(jstate, b"SELECT 'x'", query_loc=20)
        assert _resolved(jstate) == [(27, 3)]

    def test_multibyte_offsets(self):
        jstate = _jstate(7, 13)
        fill_in_constant_lengths(jstate, "SELECT 'é', 1".encode())
        assert _resolved(jstate) == [(7, 4), (13, 1)]

    def test_no_locations(self):
        jstate = ConstLocations()
        fill_in_constant_lengths(jstate, SQL)
        assert jstate.clocations == []

    def test_scan_error_propagates(self):
        with pytest.raises(PgQueryError):
            fill_in_constant_lengths(_jstate(7), b"SELECT 'unterminated")


class TestWithScannerSession:
    def test_session_is_closed(self):
        scanner = Scanner(SQL.decode())
        fill_in_constant_lengths(_jstate(7), SQL, scanner=scanner)
        assert scanner.closed

    def test_sign_consumes_value_token(self):
        sql = b"SELECT -  42"
        tokens = [
            ScanToken(0, 6, "SELECT", "RESERVED_KEYWORD"),
            ScanToken(7, 8, "ASCII_45", "NO_KEYWORD"),
            ScanToken(10, 12, "ICONST", "NO_KEYWORD"),
        ]
        jstate = _jstate(7)
        fill_in_constant_lengths(jstate, sql, scanner=_TokenScanner(tokens))
        assert _resolved(jstate) == [(7, 5)]

    def test_sign_at_end_of_input(self):
        tokens = [ScanToken(0, 6, "SELECT", "RESERVED_KEYWORD"), ScanToken(7, 8, "ASCII_45", "NO_KEYWORD")]
        jstate = _jstate(7)
        fill_in_constant_lengths(jstate, b"SELECT -", scanner=_TokenScanner(tokens))
        assert _resolved(jstate) == [(7, -1)]

    def test_unicode_string_trailing_whitespace_trimmed(self):
        sql = b"SELECT U&'abc'   FROM t"
        tokens = [
            ScanToken(0, 6, "SELECT", "RESERVED_KEYWORD"),
            ScanToken(7, 17, "USCONST", "NO_KEYWORD"),
            ScanToken(17, 21, "FROM", "RESERVED_KEYWORD"),
        ]
        jstate = _jstate(7)
        fill_in_constant_lengths(jstate, sql, scanner=_TokenScanner(tokens))
        assert _resolved(jstate) == [(7, 7)]

    def test_lowercase_unicode_prefix(self):
        sql = b"SELECT u&'abc'\n"
        tokens = [ScanToken(0, 6, "SELECT", "RESERVED_KEYWORD"), ScanToken(7, 15, "USCONST", "NO_KEYWORD")]
        jstate = _jstate(7)
        fill_in_constant_lengths(jstate, sql, scanner=_TokenScanner(tokens))
        assert _resolved(jstate) == [(7, 7)]

    def test_plain_string_not_trimmed(self):
        sql = b"SELECT 'abc'  "
        tokens = [ScanToken(0, 6, "SELECT", "RESERVED_KEYWORD"), ScanToken(7, 14, "SCONST", "NO_KEYWORD")]
        jstate = _jstate(7)
        fill_in_constant_lengths(jstate, sql, scanner=_TokenScanner(tokens))
        assert _resolved(jstate) == [(7, 7)]
