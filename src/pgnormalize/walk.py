"""Tree walking for libpg_query JSON parse trees."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Generator


class Node:
    """One node of a libpg_query parse tree.

    libpg_query serializes a node as a single-key object, ``{"A_Const": {...fields...}}``.  :func:`unwrap_node`
    turns that wrapper into a ``Node`` whose :attr:`tag` is the node type name and whose :attr:`fields` are the
    inner object.  Fields typed as one specific struct (a ``RangeVar`` relation, a ``TypeName``) are serialized
    without the wrapper; those become nodes with an empty tag.

    Fields holding their zero value are omitted by the serializer, so a missing ``location`` means ``0``.

    Attributes:
        tag: Node type name, or ``""`` for an untagged struct.
        fields: The node's fields as decoded from JSON.
    """

    __slots__ = ("fields", "tag")

    def __init__(self, tag: str, fields: dict[str, Any] | None = None) -> None:
        self.tag = tag
        self.fields = fields if fields is not None else {}

    def get(self, name: str, default: Any = None) -> Any:
        """Return field *name*, with node-valued content wrapped as :class:`Node` (lists stay lists)."""
        value = self.fields.get(name)
        if value is None:
            return default
        return _wrap(value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.tag == other.tag and self.fields == other.fields

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Node({self.tag!r}, {self.fields!r})"


def unwrap_node(obj: dict[str, Any]) -> Node:
    """Turn a decoded JSON object into a :class:`Node`, peeling the ``{"TypeName": {...}}`` wrapper if present."""
    if len(obj) == 1:
        ((key, inner),) = obj.items()
        if key[:1].isupper() and isinstance(inner, dict):
            return Node(key, inner)
    return Node("", obj)


def _wrap(value: Any) -> Any:
    if isinstance(value, dict):
        return unwrap_node(value)
    if isinstance(value, list):
        return [_wrap(item) for item in value]
    return value


def _iter_values(field_name: str, value: object) -> Generator[tuple[str, Node], None, None]:
    if isinstance(value, Node):
        yield field_name, value
    elif isinstance(value, dict):
        yield field_name, unwrap_node(value)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _iter_values(field_name, item)


def iter_children(node: object) -> Generator[tuple[str, Node], None, None]:
    """Yield ``(field_name, child)`` for every node directly below *node*.

    This is the "visit every child field" traversal: every field holding an object becomes a child, tagged or
    not, and list fields (which may themselves contain ``List`` nodes, as in ``VALUES`` rows) are flattened so
    every yielded child is a :class:`Node`.  Scalars, enum strings and missing fields are skipped.

    *node* may also be a plain list or tuple of nodes, such as the result of :func:`~pgnormalize.parse`; its items
    are yielded with an empty field name.

    Args:
        node: A :class:`Node` or a sequence of them.

    Yields:
        ``(field_name, child)`` tuples in serialization order.
    """
    if isinstance(node, Node):
        for field_name, value in node.fields.items():
            yield from _iter_values(field_name, value)
    else:
        yield from _iter_values("", node)


def iter_field(node: Node, field_name: str) -> Generator[Node, None, None]:
    """Yield the nodes held by a single field of *node*, flattening list values."""
    for _name, child in _iter_values(field_name, node.fields.get(field_name)):
        yield child


def walk(node: Node) -> Generator[tuple[str, Node], None, None]:
    """Depth-first pre-order traversal of a parse tree.

    Yields ``(field_name, node)`` tuples for every node encountered. The *field_name* is the field that led to
    the node (e.g. ``"whereClause"``, ``"targetList"``), or an empty string for the root.

    Args:
        node: Any :class:`Node` (``RawStmt``, ``SelectStmt``, etc.).

    Yields:
        ``(field_name, node)`` tuples in depth-first pre-order.

    Example:
        >>> from pgnormalize import parse, walk
        >>> for field_name, node in walk(parse("SELECT 1")[0]):
        ...     if node.tag:
        ...         print(f"{field_name or '-'}: {node.tag}")
        -: RawStmt
        stmt: SelectStmt
        targetList: ResTarget
        val: A_Const
    """
    yield "", node
    stack: list[tuple[str, Node]] = list(reversed(list(iter_children(node))))
    while stack:
        field_name, child = stack.pop()
        yield field_name, child
        stack.extend(reversed(list(iter_children(child))))
