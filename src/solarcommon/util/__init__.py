"""Utility types: integer ranges and closeable iteration."""

from solarcommon.util.closeable import ClosingIterator, closing_iterator
from solarcommon.util.collection_utils import covering_int_ranges
from solarcommon.util.int_range import IntRange
from solarcommon.util.int_range_set import DescendingIntRangeSet, IntRangeSet

__all__ = [
    "ClosingIterator",
    "DescendingIntRangeSet",
    "IntRange",
    "IntRangeSet",
    "closing_iterator",
    "covering_int_ranges",
]
