"""Bookkeeping for the constants found in a parse tree."""

from __future__ import annotations

from dataclasses import dataclass, field

UNKNOWN_LENGTH = -1
"""Length of a span that is unresolved, or a duplicate to be ignored."""


@dataclass
class LocationLen:
    """Where one constant starts in the query text and how long it is there.

    Attributes:
        location: Start offset in the query text.
        length: Length of the constant's text, or :data:`UNKNOWN_LENGTH` until resolved. Spans still unknown after
            resolution are duplicates or could not be found and are skipped during rebuild.
    """

    location: int
    length: int = UNKNOWN_LENGTH


@dataclass
class ConstLocations:
    """Working state of one normalization call.

    Attributes:
        clocations: Recorded constant spans, in discovery order until resolution sorts them.
        highest_extern_param_id: Largest ``$n`` already written in the query, so new placeholders start after it.
    """

    clocations: list[LocationLen] = field(default_factory=list)
    highest_extern_param_id: int = 0

    def record(self, location: int | None) -> None:
        """Remember a constant starting at *location*; ``None`` and negative values mean unknown and are dropped."""
        if location is None or location < 0:
            return
        self.clocations.append(LocationLen(location))

    def note_param(self, number: int | None) -> None:
        """Track an explicit ``$n`` parameter reference."""
        if number is not None and number > self.highest_extern_param_id:
            self.highest_extern_param_id = number

    def __len__(self) -> int:
        return len(self.clocations)
