"""Ordered integer set stored as disjoint ranges."""

from __future__ import annotations

import operator
from bisect import bisect_left, bisect_right
from collections.abc import Callable, Iterable, Iterator, MutableSet, Sequence
from typing import overload

from solarcommon.exceptions import ImmutableSetError
from solarcommon.protocols.ranges import IntRangeContainer
from solarcommon.util.int_range import IntRange


def _range_min(r: IntRange) -> int:
    return r.start


def _range_max(r: IntRange) -> int:
    return r.end


def _as_member(value: object) -> int:
    if isinstance(value, bool):
        raise TypeError("Booleans are not integer members")
    return operator.index(value)


class _RangesView(Sequence[IntRange]):
    """Read-only, live view of a set's ranges."""

    __slots__ = ("_ranges",)

    def __init__(self, ranges: list[IntRange]) -> None:
        self._ranges = ranges

    @overload
    def __getitem__(self, index: int) -> IntRange: ...

    @overload
    def __getitem__(self, index: slice) -> list[IntRange]: ...

    def __getitem__(self, index):
        return self._ranges[index]

    def __len__(self) -> int:
        return len(self._ranges)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, _RangesView):
            return self._ranges == other._ranges
        if isinstance(other, (list, tuple)):
            return self._ranges == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return repr(self._ranges)


class IntRangeSet(MutableSet[int]):
    """A mutable set of integers kept as ordered, disjoint ranges.

    Ranges never overlap or touch: adding a value next to an existing range
    extends that range, and adding a value between two ranges that are one
    apart merges them. This keeps memory proportional to the number of gaps,
    which suits things like register addresses or sequence numbers.

    Membership tests and navigation use binary search; mutations may shift
    the range list.
    """

    __slots__ = ("_ranges", "_immutable")

    def __init__(self, values: Iterable[int] | None = None) -> None:
        self._ranges: list[IntRange] = []
        self._immutable = False
        if values is not None:
            if isinstance(values, IntRangeContainer) and not isinstance(values, IntRangeSet):
                for r in values.ranges():
                    self.add_range(r)
            elif isinstance(values, IntRangeSet):
                self._ranges.extend(values._ranges)
            else:
                self.add_all(values)

    @classmethod
    def of_ranges(cls, *ranges: IntRange) -> IntRangeSet:
        """Create a set from ranges, which may overlap or come in any order."""
        s = cls()
        for r in ranges:
            s.add_range(r)
        return s

    @classmethod
    def _from_iterable(cls, it: Iterable[int]) -> IntRangeSet:
        return cls(it)

    # ------------------------------------------------------------------
    # Copies
    # ------------------------------------------------------------------

    def copy(self) -> IntRangeSet:
        """Return a shallow copy with the same mutability."""
        c = IntRangeSet()
        c._ranges.extend(self._ranges)
        c._immutable = self._immutable
        return c

    __copy__ = copy

    def immutable_copy(self) -> IntRangeSet:
        """Return an immutable copy of this set, or this set if already immutable."""
        if self._immutable:
            return self
        c = self.copy()
        c._immutable = True
        return c

    @property
    def immutable(self) -> bool:
        return self._immutable

    def _check_mutable(self) -> None:
        if self._immutable:
            raise ImmutableSetError("Set is immutable.")

    # ------------------------------------------------------------------
    # Set protocol
    # ------------------------------------------------------------------

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, int) or isinstance(value, bool):
            return False
        i = bisect_right(self._ranges, value, key=_range_min) - 1
        return i >= 0 and value <= self._ranges[i].end

    def __iter__(self) -> Iterator[int]:
        for r in self._ranges:
            yield from range(r.start, r.end + 1)

    def __reversed__(self) -> Iterator[int]:
        for r in reversed(self._ranges):
            yield from range(r.end, r.start - 1, -1)

    def __len__(self) -> int:
        return sum(r.length for r in self._ranges)

    def __bool__(self) -> bool:
        return bool(self._ranges)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, IntRangeSet):
            return self._ranges == other._ranges
        return super().__eq__(other)

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return "[" + ", ".join(str(r) for r in self._ranges) + "]"

    def __repr__(self) -> str:
        return f"IntRangeSet({self})"

    def __reduce__(self):
        return (IntRangeSet.of_ranges, tuple(self._ranges))

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add(self, value: int) -> bool:
        """Add a single integer.

        Returns:
            True if the set changed.

        Raises:
            ValueError: If ``value`` is None.
            TypeError: If ``value`` is a bool or not an integer.
            ImmutableSetError: If the set is immutable.
        """
        self._check_mutable()
        if value is None:
            raise ValueError("Integer cannot be None")
        v = _as_member(value)
        return self._merge_in(v, v)

    def add_all(self, values: Iterable[int]) -> bool:
        """Add many integers, coalescing consecutive runs before merging.

        Returns:
            True if the set changed.
        """
        self._check_mutable()
        if values is None:
            return False
        ordered = sorted(_as_member(v) for v in values)
        if not ordered:
            return False
        changed = False
        a = b = ordered[0]
        for c in ordered[1:]:
            if c - b > 1:
                changed |= self._merge_in(a, b)
                a = c
            b = c
        changed |= self._merge_in(a, b)
        return changed

    @overload
    def add_range(self, min: IntRange) -> bool: ...  # noqa: A002

    @overload
    def add_range(self, min: int, max: int) -> bool: ...  # noqa: A002

    def add_range(self, min, max=None) -> bool:  # noqa: A002
        """Add a range of integers, inclusive.

        Accepts an ``IntRange`` or a ``(min, max)`` pair. Existing ranges the
        new one overlaps or touches are merged together.

        Returns:
            True if any change resulted.
        """
        self._check_mutable()
        if isinstance(min, IntRange):
            r = min
        else:
            r = IntRange(min, min if max is None else max)
        return self._merge_in(r.start, r.end, r)

    def _merge_in(self, lo: int, hi: int, candidate: IntRange | None = None) -> bool:
        ranges = self._ranges
        # first range ending at or after lo - 1 (may touch lo)
        i = bisect_left(ranges, lo - 1, key=_range_max)
        j = i
        while j < len(ranges) and ranges[j].start <= hi + 1:
            j += 1
        if i == j:
            ranges.insert(i, candidate or IntRange(lo, hi))
            return True
        first = ranges[i]
        if j == i + 1 and first.contains_all(lo, hi):
            return False
        # the new range bridges every existing range it touches
        merged = candidate or IntRange(lo, hi)
        for r in ranges[i:j]:
            merged = r.merge_with(merged)
        ranges[i:j] = [merged]
        return True

    def discard(self, value: int) -> None:
        self._remove_value(value)

    def remove(self, value: int) -> None:
        """Remove ``value``, raising KeyError when absent."""
        self._check_mutable()
        if not self._remove_value(value):
            raise KeyError(value)

    def pop(self) -> int:
        """Remove and return the smallest member, raising KeyError when empty."""
        self._check_mutable()
        if not self._ranges:
            raise KeyError("pop from an empty set")
        return self.poll_first()

    def __ior__(self, it):
        self._check_mutable()
        return super().__ior__(it)

    def __iand__(self, it):
        self._check_mutable()
        return super().__iand__(it)

    def __ixor__(self, it):
        self._check_mutable()
        return super().__ixor__(it)

    def __isub__(self, it):
        self._check_mutable()
        return super().__isub__(it)

    def remove_all(self, values: Iterable[object]) -> bool:
        """Remove every value in ``values`` that is present.

        Returns:
            True if the set changed.
        """
        self._check_mutable()
        if values is None:
            return False
        modified = False
        for v in values:
            modified |= self._remove_value(v)
        return modified

    def _remove_value(self, value: object) -> bool:
        self._check_mutable()
        if not isinstance(value, int) or isinstance(value, bool):
            return False
        i = bisect_right(self._ranges, value, key=_range_min) - 1
        if i < 0:
            return False
        r = self._ranges[i]
        if value > r.end:
            return False
        if r.is_singleton:
            del self._ranges[i]
        elif value == r.start:
            # contract from left
            self._ranges[i] = IntRange(value + 1, r.end)
        elif value == r.end:
            # contract from right
            self._ranges[i] = IntRange(r.start, value - 1)
        else:
            # split around the hole
            self._ranges[i : i + 1] = [IntRange(r.start, value - 1), IntRange(value + 1, r.end)]
        return True

    def clear(self) -> None:
        self._check_mutable()
        self._ranges.clear()

    def poll_first(self) -> int | None:
        """Remove and return the smallest member, or None when empty."""
        self._check_mutable()
        if not self._ranges:
            return None
        old = self._ranges[0]
        if old.is_singleton:
            del self._ranges[0]
        else:
            self._ranges[0] = IntRange(old.start + 1, old.end)
        return old.start

    def poll_last(self) -> int | None:
        """Remove and return the largest member, or None when empty."""
        self._check_mutable()
        if not self._ranges:
            return None
        old = self._ranges[-1]
        if old.is_singleton:
            del self._ranges[-1]
        else:
            self._ranges[-1] = IntRange(old.start, old.end - 1)
        return old.end

    # ------------------------------------------------------------------
    # Range container
    # ------------------------------------------------------------------

    def ranges(self) -> Sequence[IntRange]:
        """Return a live, read-only view of the ranges, ordered least to greatest."""
        return _RangesView(self._ranges)

    def first(self) -> int | None:
        return self._ranges[0].start if self._ranges else None

    def last(self) -> int | None:
        return self._ranges[-1].end if self._ranges else None

    min = first
    max = last

    def for_each_ordered(
        self,
        action: Callable[[int], object],
        start: int | None = None,
        stop: int | None = None,
    ) -> None:
        """Call ``action`` for each member ``start <= v < stop`` in ascending order."""
        if action is None:
            raise ValueError("action is required")
        for r in self._ranges:
            lo, hi = r.start, r.end
            if start is not None:
                if start > hi:
                    continue
                if start > lo:
                    lo = start
            if stop is not None:
                if stop <= lo:
                    break
                if stop <= hi:
                    hi = stop - 1
            for v in range(lo, hi + 1):
                action(v)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def floor(self, value: int) -> int | None:
        """Return the greatest member ``<= value``, or None."""
        i = bisect_right(self._ranges, value, key=_range_min) - 1
        if i < 0:
            return None
        r = self._ranges[i]
        return value if value <= r.end else r.end

    def lower(self, value: int) -> int | None:
        """Return the greatest member ``< value``, or None."""
        return self.floor(value - 1)

    def ceiling(self, value: int) -> int | None:
        """Return the least member ``>= value``, or None."""
        i = bisect_left(self._ranges, value, key=_range_max)
        if i >= len(self._ranges):
            return None
        r = self._ranges[i]
        return value if value >= r.start else r.start

    def higher(self, value: int) -> int | None:
        """Return the least member ``> value``, or None."""
        return self.ceiling(value + 1)

    def descending_set(self) -> DescendingIntRangeSet:
        """Return a live reverse-order view backed by this set."""
        return DescendingIntRangeSet(self)


class DescendingIntRangeSet(MutableSet[int]):
    """Reverse-ordered view of an IntRangeSet; mutations write through."""

    __slots__ = ("_delegate",)

    def __init__(self, delegate: IntRangeSet) -> None:
        self._delegate = delegate

    @classmethod
    def _from_iterable(cls, it: Iterable[int]) -> IntRangeSet:
        return IntRangeSet(it)

    def __contains__(self, value: object) -> bool:
        return value in self._delegate

    def __iter__(self) -> Iterator[int]:
        return reversed(self._delegate)

    def __reversed__(self) -> Iterator[int]:
        return iter(self._delegate)

    def __len__(self) -> int:
        return len(self._delegate)

    def add(self, value: int) -> bool:
        return self._delegate.add(value)

    def add_all(self, values: Iterable[int]) -> bool:
        return self._delegate.add_all(values)

    def discard(self, value: int) -> None:
        self._delegate.discard(value)

    def remove(self, value: int) -> None:
        self._delegate.remove(value)

    def pop(self) -> int:
        self._delegate._check_mutable()
        if not self._delegate:
            raise KeyError("pop from an empty set")
        return self._delegate.poll_last()

    def clear(self) -> None:
        self._delegate.clear()

    def first(self) -> int | None:
        return self._delegate.last()

    def last(self) -> int | None:
        return self._delegate.first()

    def lower(self, value: int) -> int | None:
        return self._delegate.higher(value)

    def floor(self, value: int) -> int | None:
        return self._delegate.ceiling(value)

    def ceiling(self, value: int) -> int | None:
        return self._delegate.floor(value)

    def higher(self, value: int) -> int | None:
        return self._delegate.lower(value)

    def poll_first(self) -> int | None:
        return self._delegate.poll_last()

    def poll_last(self) -> int | None:
        return self._delegate.poll_first()

    def descending_set(self) -> IntRangeSet:
        return self._delegate

    def __repr__(self) -> str:
        return f"DescendingIntRangeSet({self._delegate})"
