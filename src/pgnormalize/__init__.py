"""Normalize PostgreSQL queries by replacing literal constants with ``$n`` placeholders."""

from pgnormalize.errors import PgQueryError, StackDepthError
from pgnormalize.lengths import fill_in_constant_lengths
from pgnormalize.locations import UNKNOWN_LENGTH, ConstLocations, LocationLen
from pgnormalize.normalize import PLACEHOLDER_WIDTH, build_normalized_query, normalize, normalize_statements
from pgnormalize.parse import parse
from pgnormalize.scan import Scanner, ScanToken, scan
from pgnormalize.walk import Node, iter_children, iter_field, walk
from pgnormalize.walker import MAX_DEPTH, const_record_walker, record_const_locations

__all__ = [
    "build_normalized_query",
    "const_record_walker",
    "ConstLocations",
    "fill_in_constant_lengths",
    "iter_children",
    "iter_field",
    "LocationLen",
    "MAX_DEPTH",
    "Node",
    "normalize_statements",
    "normalize",
    "parse",
    "PgQueryError",
    "PLACEHOLDER_WIDTH",
    "record_const_locations",
    "scan",
    "Scanner",
    "ScanToken",
    "StackDepthError",
    "UNKNOWN_LENGTH",
    "walk",
]
