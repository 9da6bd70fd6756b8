"""Collect constant locations from a raw parse tree."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pgnormalize.errors import StackDepthError
from pgnormalize.locations import ConstLocations
from pgnormalize.walk import Node, iter_children, iter_field

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

MAX_DEPTH = 10_000
"""Default nesting limit for :func:`const_record_walker`."""

# Nodes whose constants, for normalization purposes, all live below one field.
PASS_THROUGH_FIELDS: dict[str, str] = {
    "DefElem": "arg",
    "RawStmt": "stmt",
    "VariableSetStmt": "args",
    "CopyStmt": "query",
    "ExplainStmt": "query",
    "AlterRoleStmt": "options",
    "DeclareCursorStmt": "query",
}


def _children(node: Node | Iterable[Node]) -> Iterable[Node]:
    if not isinstance(node, Node):
        return (child for _field_name, child in iter_children(node))
    if node.tag == "A_Const":
        return ()
    pass_through = PASS_THROUGH_FIELDS.get(node.tag)
    if pass_through is not None:
        return iter_field(node, pass_through)
    return (child for _field_name, child in iter_children(node))


def const_record_walker(
    node: Node | Iterable[Node] | None,
    jstate: ConstLocations,
    *,
    max_depth: int = MAX_DEPTH,
) -> bool:
    """Walk *node* and record every constant and parameter reference into *jstate*.

    ``A_Const`` byte locations go to :meth:`ConstLocations.record`, ``ParamRef`` numbers to
    :meth:`ConstLocations.note_param`.  The container nodes listed in :data:`PASS_THROUGH_FIELDS` are only
    descended through their designated field; every other node has all of its children visited.

    The walk keeps its own work stack, so deep trees never grow the interpreter stack.

    Args:
        node: A parse tree node, a sequence of them (e.g. the result of :func:`~pgnormalize.parse`), or ``None``.
        jstate: State receiving the findings.
        max_depth: Deepest nesting level accepted; the root is level 1.

    Returns:
        ``False`` if *node* was ``None`` or empty, ``True`` otherwise.

    Raises:
        StackDepthError: If the tree is nested deeper than *max_depth*.
    """
    if node is None or (isinstance(node, (list, tuple)) and not node):
        return False

    stack: list[tuple[Node, int]] = [(node, 1)]  # type: ignore[list-item]
    while stack:
        current, depth = stack.pop()
        if depth > max_depth:
            logger.debug("aborting constant walk at depth %d", depth)
            raise StackDepthError(max_depth)

        if isinstance(current, Node):
            # The serializer omits zero-valued fields.
            if current.tag == "A_Const":
                jstate.record(current.fields.get("location", 0))
            elif current.tag == "ParamRef":
                jstate.note_param(current.fields.get("number", 0))

        stack.extend((child, depth + 1) for child in _children(current))
    return True


def record_const_locations(
    tree: Node | Iterable[Node] | None,
    jstate: ConstLocations | None = None,
    *,
    max_depth: int = MAX_DEPTH,
) -> ConstLocations:
    """Return the :class:`ConstLocations` of *tree*, creating a fresh state unless *jstate* is given.

    Example:
        >>> from pgnormalize import parse
        >>> jstate = record_const_locations(parse("SELECT $2 WHERE a = 'x'"))
        >>> [loc.location for loc in jstate.clocations], jstate.highest_extern_param_id
        ([20], 2)
    """
    if jstate is None:
        jstate = ConstLocations()
    const_record_walker(tree, jstate, max_depth=max_depth)
    return jstate
