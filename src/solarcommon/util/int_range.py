"""Immutable inclusive integer range."""

from __future__ import annotations

import re
from collections.abc import Iterator
from functools import total_ordering

_RANGE_PATTERN = re.compile(r"^\[?\s*(-?\d+)\s*(?:(?:\.\.|-)\s*(-?\d+)\s*)?\]?$")


@total_ordering
class IntRange:
    """An inclusive range of integers, ``min <= v <= max``.

    The bounds given to the constructor are compared before being stored, so
    ``IntRange(5, 1)`` is the same range as ``IntRange(1, 5)``.

    Ordering compares ``min`` only; equality compares both bounds.
    """

    __slots__ = ("_min", "_max")

    def __init__(self, min: int, max: int) -> None:  # noqa: A002
        self._min = min if min < max else max
        self._max = max if max > min else min

    @classmethod
    def range_of(cls, min: int, max: int | None = None) -> IntRange:  # noqa: A002
        """Create a range, or a singleton range when ``max`` is omitted."""
        return cls(min, min if max is None else max)

    @classmethod
    def parse(cls, text: str) -> IntRange:
        """Parse ``[1..5]``, ``1..5``, ``1-5`` or ``7`` into a range.

        Raises:
            ValueError: If the text is not a range.
        """
        m = _RANGE_PATTERN.match(text.strip()) if text is not None else None
        if m is None:
            raise ValueError(f"Invalid IntRange: {text!r}")
        a = int(m.group(1))
        b = int(m.group(2)) if m.group(2) is not None else a
        return cls(a, b)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def start(self) -> int:
        return self._min

    @property
    def end(self) -> int:
        return self._max

    def min(self) -> int:
        return self._min

    def max(self) -> int:
        return self._max

    def ranges(self) -> tuple[IntRange, ...]:
        return (self,)

    @property
    def length(self) -> int:
        """The number of integers between ``min`` and ``max``, inclusive."""
        return self._max - self._min + 1

    @property
    def is_singleton(self) -> bool:
        return self._min == self._max

    # ------------------------------------------------------------------
    # Set relations
    # ------------------------------------------------------------------

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, int) or isinstance(value, bool):
            return False
        return self._min <= value <= self._max

    def contains_all(self, min: int | IntRange, max: int | None = None) -> bool:  # noqa: A002
        """Test if another range lies completely within this one.

        Accepts either another ``IntRange`` or a ``(min, max)`` pair. A pair
        with ``min > max`` is never contained.
        """
        if isinstance(min, IntRange):
            min, max = min._min, min._max  # noqa: A001
        if max is None:
            max = min  # noqa: A001
        return min <= max and min >= self._min and max <= self._max

    def intersects(self, other: IntRange) -> bool:
        return (other._min <= self._min <= other._max) or (self._min <= other._min <= self._max)

    def adjacent_to(self, other: IntRange) -> bool:
        """Test if this range touches (but does not overlap) ``other``."""
        return self._max + 1 == other._min or other._max + 1 == self._min

    def can_merge_with(self, other: IntRange | None) -> bool:
        return other is not None and (self.intersects(other) or self.adjacent_to(other))

    def merge_with(self, other: IntRange) -> IntRange:
        """Return the range covering both this range and ``other``.

        Returns ``self`` or ``other`` unchanged when one already covers the
        result.

        Raises:
            ValueError: If the ranges neither overlap nor touch.
        """
        if not self.can_merge_with(other):
            raise ValueError(f"IntRange {self} cannot be merged with {other}")
        a = min(self._min, other._min)
        b = max(self._max, other._max)
        if a == self._min and b == self._max:
            return self
        if a == other._min and b == other._max:
            return other
        return IntRange(a, b)

    # ------------------------------------------------------------------
    # Dunder protocol
    # ------------------------------------------------------------------

    def __iter__(self) -> Iterator[int]:
        return iter(range(self._min, self._max + 1))

    def __len__(self) -> int:
        return self.length

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, IntRange):
            return NotImplemented
        return self._min == other._min and self._max == other._max

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, IntRange):
            return NotImplemented
        return self._min < other._min

    def __hash__(self) -> int:
        return hash((self._max, self._min))

    def __str__(self) -> str:
        return f"[{self._min}..{self._max}]"

    def __repr__(self) -> str:
        return f"IntRange({self._min}, {self._max})"

    def __reduce__(self):
        return (IntRange, (self._min, self._max))
