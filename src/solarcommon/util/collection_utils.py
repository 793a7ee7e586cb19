"""Collection helpers for integer ranges."""

from __future__ import annotations

from collections.abc import Iterable

from solarcommon.protocols.ranges import IntOrderedIterable
from solarcommon.util.int_range import IntRange


def covering_int_ranges(values: Iterable[int] | None, max_range_length: int) -> list[IntRange] | None:
    """Reduce a sorted set of integers into fewer, larger covering ranges.

    Useful when reading device registers: fewer large requests beat many
    small ones. For example the members of ``0-1, 3-5, 20-28, 404-406,
    412-418`` with ``max_range_length=32`` become ``0-28, 404-418``.

    Args:
        values: Integers, or None. Plain iterables are sorted first.
        max_range_length: No resulting range spans this many values or more
            from its start.

    Returns:
        The covering ranges, ``[]`` for empty input, or None for None input.

    Raises:
        ValueError: If ``max_range_length`` is less than 1.
    """
    if max_range_length < 1:
        raise ValueError("Max range length must be greater than 0.")
    if values is None:
        return None

    result: list[IntRange] = []
    bounds: list[int] = []

    def visit(v: int) -> None:
        if not bounds:
            bounds.extend((v, v))
        elif v - bounds[0] >= max_range_length:
            result.append(IntRange(bounds[0], bounds[1]))
            bounds[0] = bounds[1] = v
        else:
            bounds[1] = v

    if isinstance(values, IntOrderedIterable):
        values.for_each_ordered(visit)
    else:
        for v in sorted(values):
            visit(v)

    if not bounds:
        return []
    last = IntRange(bounds[0], bounds[1])
    if not result or result[-1] != last:
        result.append(last)
    return result
