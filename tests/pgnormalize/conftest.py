from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

import pytest

from pgnormalize import ConstLocations, PgQueryError, parse, record_const_locations

if TYPE_CHECKING:
    from collections.abc import Callable

    from pgnormalize import Node

_PLACEHOLDER = re.compile(r"\$(\d+)")

# -- Parse-result fixtures -----------------------------------------------------


@pytest.fixture
def select1_tree() -> tuple[Node, ...]:
    return parse("SELECT 1")


@pytest.fixture
def where_tree() -> tuple[Node, ...]:
    return parse("SELECT * FROM t WHERE a = 1 AND b = 'two'")


@pytest.fixture
def where_jstate(where_tree: tuple[Node, ...]) -> ConstLocations:
    return record_const_locations(where_tree)


# -- Assertion helpers ---------------------------------------------------------


def placeholder_ids(sql: str) -> list[int]:
    """Return the numbers of all ``$n`` markers in *sql*, in order of appearance."""
    return [int(m) for m in _PLACEHOLDER.findall(sql)]


def assert_is_subsequence(original: str, normalized: str) -> None:
    """Assert that, once placeholders are removed, *normalized* keeps the characters of *original* in order."""
    stripped = _PLACEHOLDER.sub("", normalized)
    it = iter(original)
    assert all(ch in it for ch in stripped), f"{normalized!r} is not derived from {original!r}"


def assert_pg_query_error(fn: Callable[..., Any], sql: str, *, check_cursorpos: bool = False) -> None:
    """Assert that calling fn(sql) raises PgQueryError with a truthy message."""
    with pytest.raises(PgQueryError) as exc_info:
        fn(sql)
    assert exc_info.value.message
    if check_cursorpos:
        assert exc_info.value.cursorpos > 0
