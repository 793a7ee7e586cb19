"""Tests for ClosingIterator."""

from unittest.mock import Mock

import pytest

from solarcommon.protocols import CloseableIterator
from solarcommon.util.closeable import ClosingIterator, closing_iterator


class TestClosingIterator:
    """Test suite for ClosingIterator."""

    def test_iterates(self):
        """Test values pass through unchanged."""
        it = ClosingIterator([1, 2, 3])
        assert list(it) == [1, 2, 3]

    def test_implements_protocol(self):
        """Test the wrapper satisfies CloseableIterator."""
        assert isinstance(ClosingIterator([]), CloseableIterator)

    def test_close_runs_callback_once(self):
        """Test repeated close calls run the callback once."""
        on_close = Mock()
        it = ClosingIterator([1, 2], on_close)
        it.close()
        it.close()
        on_close.assert_called_once_with()
        assert it.closed

    def test_close_after_exhaustion(self):
        """Test close after exhaustion still releases the resource."""
        on_close = Mock()
        it = closing_iterator(iter([1]), on_close)
        assert list(it) == [1]
        it.close()
        on_close.assert_called_once_with()

    def test_next_after_close_stops(self):
        """Test iteration stops once closed."""
        it = ClosingIterator([1, 2, 3])
        assert next(it) == 1
        it.close()
        with pytest.raises(StopIteration):
            next(it)

    def test_closes_generator(self):
        """Test a wrapped generator is closed."""
        released = []

        def rows():
            try:
                yield 1
                yield 2
            finally:
                released.append(True)

        it = ClosingIterator(rows())
        assert next(it) == 1
        it.close()
        assert released == [True]

    def test_context_manager_closes_on_error(self):
        """Test the context manager closes when the body raises."""
        on_close = Mock()
        with pytest.raises(RuntimeError):
            with ClosingIterator([1, 2], on_close) as it:
                next(it)
                raise RuntimeError("boom")
        on_close.assert_called_once_with()

    def test_close_on_exhaustion(self):
        """Test automatic close when the iterator runs out."""
        on_close = Mock()
        it = ClosingIterator([1], on_close, close_on_exhaustion=True)
        assert list(it) == [1]
        on_close.assert_called_once_with()
        assert it.closed

    def test_callback_error_propagates(self, log_messages):
        """Test a failing callback is logged and re-raised."""
        it = ClosingIterator([], Mock(side_effect=OSError("handle gone")))
        with pytest.raises(OSError):
            it.close()
        assert it.closed
        assert any(level == "ERROR" for level, _ in log_messages)
