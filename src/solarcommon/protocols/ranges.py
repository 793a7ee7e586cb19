"""Integer range container protocols."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from solarcommon.util.int_range import IntRange


@runtime_checkable
class IntRangeContainer(Protocol):
    """Integer membership that can also be listed as contiguous ranges.

    The ranges returned by ``ranges()`` are disjoint, ordered from least to
    greatest, and together contain exactly the members ``__contains__``
    reports.

    Implementations: IntRange, IntRangeSet (util).
    """

    def __contains__(self, value: object) -> bool: ...

    def ranges(self) -> Iterable[IntRange]:
        """Return the disjoint ranges of this container, ordered least to greatest."""
        ...

    def min(self) -> int | None:
        """Return the smallest member, or None when empty."""
        ...

    def max(self) -> int | None:
        """Return the largest member, or None when empty."""
        ...


@runtime_checkable
class IntOrderedIterable(Protocol):
    """Ordered iteration over primitive ints without building a list."""

    def for_each_ordered(
        self,
        action: Callable[[int], object],
        start: int | None = None,
        stop: int | None = None,
    ) -> None:
        """Call ``action`` for each member in ascending order.

        Args:
            action: Callback receiving each member.
            start: Lowest member to visit (inclusive), or None for no bound.
            stop: Member to stop at (exclusive), or None for no bound.
        """
        ...
