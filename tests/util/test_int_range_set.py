"""Tests for IntRangeSet."""

import copy
import pickle

import pytest

from solarcommon.exceptions import ImmutableSetError
from solarcommon.protocols import IntOrderedIterable, IntRangeContainer
from solarcommon.util.int_range import IntRange
from solarcommon.util.int_range_set import IntRangeSet

r = IntRange.range_of


@pytest.fixture()
def three_ranges() -> IntRangeSet:
    """Set with members 1-5, 10-12 and 20."""
    s = IntRangeSet()
    s.add_range(1, 5)
    s.add_range(10, 12)
    s.add(20)
    return s


class TestAdd:
    """Test suite for adding single values."""

    def test_add_one(self):
        """Test the first value creates a singleton range."""
        s = IntRangeSet()
        assert s.add(1) is True
        assert list(s.ranges()) == [r(1)]

    def test_add_two_disjoint(self):
        """Test separated values stay in separate ranges."""
        s = IntRangeSet()
        assert s.add(1)
        assert s.add(10)
        assert list(s.ranges()) == [r(1), r(10)]

    def test_add_two_disjoint_before(self):
        """Test a smaller value is inserted first."""
        s = IntRangeSet()
        assert s.add(10)
        assert s.add(1)
        assert list(s.ranges()) == [r(1), r(10)]

    def test_add_three_disjoint_middle(self):
        """Test a value between ranges is inserted in order."""
        s = IntRangeSet()
        s.add(1)
        s.add(20)
        assert s.add(10)
        assert list(s.ranges()) == [r(1), r(10), r(20)]

    def test_add_merge_two_ranges(self):
        """Test filling a one-value gap bridges two ranges."""
        s = IntRangeSet()
        for v in (1, 2, 4, 5):
            assert s.add(v)
        assert list(s.ranges()) == [r(1, 2), r(4, 5)]
        assert s.add(3)
        assert list(s.ranges()) == [r(1, 5)]

    def test_add_expand_left(self):
        """Test a value just below a range extends it."""
        s = IntRangeSet()
        for v in (1, 2, 9, 10):
            s.add(v)
        assert s.add(8)
        assert list(s.ranges()) == [r(1, 2), r(8, 10)]

    def test_add_expand_left_first(self):
        """Test a value just below the first range extends it."""
        s = IntRangeSet()
        for v in (1, 2, 9, 10):
            s.add(v)
        assert s.add(0)
        assert list(s.ranges()) == [r(0, 2), r(9, 10)]

    def test_add_expand_right(self):
        """Test a value just above a range extends it."""
        s = IntRangeSet()
        for v in (1, 2, 9, 10):
            s.add(v)
        assert s.add(3)
        assert list(s.ranges()) == [r(1, 3), r(9, 10)]

    def test_add_expand_right_last(self):
        """Test a value just above the last range extends it."""
        s = IntRangeSet()
        for v in (1, 2, 9, 10):
            s.add(v)
        assert s.add(11)
        assert list(s.ranges()) == [r(1, 2), r(9, 11)]

    def test_add_singleton_middle(self):
        """Test a separated value becomes its own range."""
        s = IntRangeSet()
        for v in (1, 2, 9, 10):
            s.add(v)
        assert s.add(5)
        assert list(s.ranges()) == [r(1, 2), r(5), r(9, 10)]

    def test_add_existing_unchanged(self):
        """Test adding a member reports no change."""
        s = IntRangeSet()
        s.add(1)
        assert s.add(1) is False
        assert list(s.ranges()) == [r(1)]

    def test_add_adjacent(self):
        """Test values on both sides join a singleton."""
        s = IntRangeSet()
        s.add(1)
        s.add(0)
        s.add(2)
        assert list(s.ranges()) == [r(0, 2)]

    def test_add_none(self):
        """Test adding None raises ValueError."""
        with pytest.raises(ValueError):
            IntRangeSet().add(None)

    def test_add_bool_rejected(self):
        """Test booleans are rejected so add and membership agree."""
        s = IntRangeSet()
        with pytest.raises(TypeError):
            s.add(True)
        with pytest.raises(TypeError):
            s.add_all([2, False])
        assert not s
        assert True not in IntRangeSet([1])


class TestAddAll:
    """Test suite for adding many values."""

    def test_singleton(self):
        """Test a single value."""
        s = IntRangeSet()
        assert s.add_all([1])
        assert list(s.ranges()) == [r(1)]

    def test_one_range(self):
        """Test consecutive values form one range."""
        s = IntRangeSet()
        assert s.add_all([1, 2, 3, 4, 5])
        assert list(s.ranges()) == [r(1, 5)]

    def test_two_ranges_random_input_order(self):
        """Test unordered input is coalesced into runs."""
        s = IntRangeSet()
        assert s.add_all([9, 2, 4, 1, 7, 3, 8, 5])
        assert list(s.ranges()) == [r(1, 5), r(7, 9)]

    def test_constructor_from_values(self):
        """Test the constructor adds every value."""
        assert list(IntRangeSet([3, 1, 2]).ranges()) == [r(1, 3)]

    def test_empty(self):
        """Test empty input reports no change."""
        s = IntRangeSet()
        assert s.add_all([]) is False


class TestAddRange:
    """Test suite for adding ranges."""

    def test_merge_spanning_many(self, three_ranges):
        """Test a wide range absorbs every range it touches."""
        assert three_ranges.add_range(4, 19)
        assert list(three_ranges.ranges()) == [r(1, 20)]

    def test_contained_unchanged(self, three_ranges):
        """Test a covered range reports no change."""
        assert three_ranges.add_range(2, 4) is False
        assert list(three_ranges.ranges()) == [r(1, 5), r(10, 12), r(20)]

    def test_insert_between(self, three_ranges):
        """Test a separated range is inserted in order."""
        assert three_ranges.add_range(IntRange(15, 16))
        assert list(three_ranges.ranges()) == [r(1, 5), r(10, 12), r(15, 16), r(20)]

    def test_bridge_adjacent(self, three_ranges):
        """Test a range filling a gap joins its neighbours."""
        assert three_ranges.add_range(6, 9)
        assert list(three_ranges.ranges()) == [r(1, 12), r(20)]

    def test_of_ranges_overlapping(self):
        """Test overlapping ranges given out of order are merged."""
        s = IntRangeSet.of_ranges(r(5, 8), r(1, 3), r(2, 6))
        assert list(s.ranges()) == [r(1, 8)]


class TestRemove:
    """Test suite for removing values."""

    def test_remove_splits(self, three_ranges):
        """Test removing an inner value splits its range."""
        three_ranges.remove(3)
        assert list(three_ranges.ranges()) == [r(1, 2), r(4, 5), r(10, 12), r(20)]

    def test_remove_contracts_left_and_right(self, three_ranges):
        """Test removing a bound shrinks the range."""
        three_ranges.discard(10)
        three_ranges.discard(12)
        assert list(three_ranges.ranges()) == [r(1, 5), r(11), r(20)]

    def test_remove_singleton(self, three_ranges):
        """Test removing a singleton drops its range."""
        three_ranges.remove(20)
        assert three_ranges.last() == 12

    def test_remove_missing_raises(self, three_ranges):
        """Test removing an absent value raises KeyError."""
        with pytest.raises(KeyError):
            three_ranges.remove(7)

    def test_discard_missing(self, three_ranges):
        """Test discarding absent or non-integer values is a no-op."""
        three_ranges.discard(7)
        three_ranges.discard("x")
        assert len(three_ranges) == 9

    def test_pop_smallest(self, three_ranges):
        """Test pop removes the smallest member."""
        assert three_ranges.pop() == 1
        assert three_ranges.first() == 2

    def test_pop_empty_raises(self):
        """Test pop on an empty set raises KeyError."""
        with pytest.raises(KeyError):
            IntRangeSet().pop()

    def test_remove_all(self, three_ranges):
        """Test remove_all reports whether anything was removed."""
        assert three_ranges.remove_all([1, 2, 99])
        assert three_ranges.remove_all([99]) is False
        assert three_ranges.first() == 3

    def test_clear(self, three_ranges):
        """Test clear empties the set."""
        three_ranges.clear()
        assert not three_ranges
        assert three_ranges.first() is None


class TestSize:
    """Test suite for len()."""

    def test_empty(self):
        """Test an empty set has no members."""
        assert len(IntRangeSet()) == 0

    def test_singleton(self):
        """Test a single member."""
        assert len(IntRangeSet([1])) == 1

    def test_ranges(self, three_ranges):
        """Test len counts members, not ranges."""
        assert len(three_ranges) == 9


class TestIteration:
    """Test suite for iteration."""

    def test_ascending(self, three_ranges):
        """Test iteration is ascending."""
        assert list(three_ranges) == [1, 2, 3, 4, 5, 10, 11, 12, 20]

    def test_descending(self, three_ranges):
        """Test reversed iteration is descending."""
        assert list(reversed(three_ranges)) == [20, 12, 11, 10, 5, 4, 3, 2, 1]

    def test_ranges_reconstruct_membership(self, three_ranges):
        """Test the ranges hold exactly the members."""
        members = {v for rng in three_ranges.ranges() for v in rng}
        assert members == set(three_ranges)
        assert all(v in three_ranges for v in members)
        assert 6 not in three_ranges

    def test_for_each_ordered(self, three_ranges):
        """Test every member is visited in order."""
        seen = []
        three_ranges.for_each_ordered(seen.append)
        assert seen == list(three_ranges)

    def test_for_each_ordered_bounded(self, three_ranges):
        """Test the start bound is inclusive and the stop bound exclusive."""
        seen = []
        three_ranges.for_each_ordered(seen.append, 4, 11)
        assert seen == [4, 5, 10]

    def test_for_each_ordered_stop_before_range(self, three_ranges):
        """Test nothing is visited when the bounds miss every range."""
        seen = []
        three_ranges.for_each_ordered(seen.append, 0, 1)
        assert seen == []

    def test_protocols(self, three_ranges):
        """Test the set satisfies the range protocols."""
        assert isinstance(three_ranges, IntRangeContainer)
        assert isinstance(three_ranges, IntOrderedIterable)


class TestNavigation:
    """Test suite for navigation methods."""

    def test_first_last(self, three_ranges):
        """Test first, last and their min and max aliases."""
        assert three_ranges.first() == 1
        assert three_ranges.last() == 20
        assert three_ranges.min() == 1
        assert three_ranges.max() == 20

    @pytest.mark.parametrize(
        "value,lower,floor,ceiling,higher",
        [
            (0, None, None, 1, 1),
            (1, None, 1, 1, 2),
            (3, 2, 3, 3, 4),
            (5, 4, 5, 5, 10),
            (7, 5, 5, 10, 10),
            (10, 5, 10, 10, 11),
            (20, 12, 20, 20, None),
            (25, 20, 20, None, None),
        ],
    )
    def test_navigation(self, three_ranges, value, lower, floor, ceiling, higher):
        """Test lower, floor, ceiling and higher around the ranges."""
        assert three_ranges.lower(value) == lower
        assert three_ranges.floor(value) == floor
        assert three_ranges.ceiling(value) == ceiling
        assert three_ranges.higher(value) == higher

    def test_empty_navigation(self):
        """Test navigation on an empty set returns None."""
        s = IntRangeSet()
        assert s.lower(1) is None
        assert s.higher(1) is None

    def test_poll_first(self, three_ranges):
        """Test poll_first removes the smallest member."""
        assert three_ranges.poll_first() == 1
        assert three_ranges.first() == 2

    def test_poll_last(self, three_ranges):
        """Test poll_last removes the largest member."""
        assert three_ranges.poll_last() == 20
        assert three_ranges.poll_last() == 12
        assert three_ranges.last() == 11

    def test_poll_empty(self):
        """Test polling an empty set returns None."""
        s = IntRangeSet()
        assert s.poll_first() is None
        assert s.poll_last() is None


class TestDescendingSet:
    """Test suite for the descending view."""

    def test_view(self, three_ranges):
        """Test the view reverses order and navigation."""
        d = three_ranges.descending_set()
        assert d.first() == 20
        assert d.last() == 1
        assert list(d)[:3] == [20, 12, 11]
        assert d.higher(10) == 5
        assert d.lower(10) == 11
        assert d.descending_set() is three_ranges

    def test_mutations_write_through(self, three_ranges):
        """Test changes through the view reach the backing set."""
        d = three_ranges.descending_set()
        d.add(6)
        assert 6 in three_ranges
        assert d.poll_first() == 20
        assert three_ranges.last() == 12
        assert d.pop() == 12
        d.remove(1)
        assert three_ranges.first() == 2


class TestCopies:
    """Test suite for copies."""

    def test_immutable_copy(self, three_ranges):
        """Test every mutator of an immutable copy raises ImmutableSetError."""
        frozen = three_ranges.immutable_copy()
        assert frozen == three_ranges
        assert frozen.immutable_copy() is frozen
        for mutate in (
            lambda: frozen.add(30),
            lambda: frozen.add_range(30, 40),
            lambda: frozen.add_all([30]),
            lambda: frozen.discard(1),
            lambda: frozen.clear(),
            lambda: frozen.poll_first(),
            lambda: frozen.poll_last(),
            lambda: frozen.remove(1),
            lambda: frozen.remove(99),
            lambda: frozen.pop(),
            lambda: frozen.__ior__({30}),
            lambda: frozen.__isub__({99}),
            lambda: frozen.descending_set().remove(99),
        ):
            with pytest.raises(ImmutableSetError):
                mutate()

    def test_empty_immutable_refuses_before_key_error(self):
        """Test immutability is checked before membership."""
        frozen = IntRangeSet().immutable_copy()
        with pytest.raises(ImmutableSetError):
            frozen.pop()
        with pytest.raises(ImmutableSetError):
            frozen.remove(1)

    def test_immutable_copy_independent(self, three_ranges):
        """Test the immutable copy does not follow the original."""
        frozen = three_ranges.immutable_copy()
        three_ranges.add(30)
        assert 30 not in frozen

    def test_copy(self, three_ranges):
        """Test a shallow copy is independent."""
        c = copy.copy(three_ranges)
        c.add(30)
        assert 30 not in three_ranges

    def test_pickle(self, three_ranges):
        """Test sets survive pickling."""
        assert pickle.loads(pickle.dumps(three_ranges)) == three_ranges

    def test_ranges_view_is_read_only(self, three_ranges):
        """Test the ranges view is live and read-only."""
        view = three_ranges.ranges()
        three_ranges.add(30)
        assert view[-1] == r(30)
        assert not hasattr(view, "append")


class TestSetOperations:
    """Test suite for set behaviour."""

    def test_str(self, three_ranges):
        """Test the string form lists the ranges."""
        assert str(three_ranges) == "[[1..5], [10..12], [20..20]]"

    def test_equals_plain_set(self):
        """Test equality with a plain set."""
        assert IntRangeSet([1, 2, 3]) == {1, 2, 3}

    def test_union_returns_range_set(self):
        """Test set operators return an IntRangeSet."""
        u = IntRangeSet([1, 2]) | IntRangeSet([3, 4])
        assert isinstance(u, IntRangeSet)
        assert list(u.ranges()) == [r(1, 4)]

    def test_from_int_range(self):
        """Test a set built from a range."""
        assert list(IntRangeSet(IntRange(3, 6)).ranges()) == [r(3, 6)]
