"""Iterator wrapper that owns a releasable resource."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from types import TracebackType
from typing import Generic, TypeVar

from loguru import logger

E = TypeVar("E")


class ClosingIterator(Generic[E]):
    """A ``CloseableIterator`` over any iterable.

    ``close()`` releases the resource exactly once: the wrapped iterator is
    closed when it supports it (generators do), then ``on_close`` runs.
    Later calls do nothing. Use it as a context manager to close on every
    exit path::

        with ClosingIterator(cursor, on_close=conn.close) as rows:
            for row in rows:
                ...
    """

    def __init__(
        self,
        iterable: Iterable[E],
        on_close: Callable[[], object] | None = None,
        *,
        close_on_exhaustion: bool = False,
    ) -> None:
        self._iterator: Iterator[E] = iter(iterable)
        self._on_close = on_close
        self._close_on_exhaustion = close_on_exhaustion
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> ClosingIterator[E]:
        return self

    def __next__(self) -> E:
        if self._closed:
            raise StopIteration
        try:
            return next(self._iterator)
        except StopIteration:
            if self._close_on_exhaustion:
                self.close()
            raise

    def close(self) -> None:
        """Release the underlying resource; safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        close = getattr(self._iterator, "close", None)
        try:
            if callable(close):
                close()
        finally:
            if self._on_close is not None:
                try:
                    self._on_close()
                except Exception:
                    logger.exception("Error releasing iterator resource")
                    raise

    def __enter__(self) -> ClosingIterator[E]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def closing_iterator(
    iterable: Iterable[E], on_close: Callable[[], object] | None = None
) -> ClosingIterator[E]:
    """Wrap ``iterable`` so it can be closed, running ``on_close`` once on close."""
    return ClosingIterator(iterable, on_close)
