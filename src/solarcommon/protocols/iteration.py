"""Closeable iterator protocol."""

from __future__ import annotations

from typing import Protocol, TypeVar, runtime_checkable

E_co = TypeVar("E_co", covariant=True)


@runtime_checkable
class CloseableIterator(Protocol[E_co]):
    """An iterator that holds a resource until closed.

    Whoever obtains the iterator owns the underlying resource (a file
    handle, a cursor, ...) and must call ``close()`` once iteration is
    finished or abandoned. ``close()`` after exhaustion must not raise and
    further calls are no-ops.

    Implementations: ClosingIterator (util.closeable).
    """

    def __iter__(self) -> CloseableIterator[E_co]: ...

    def __next__(self) -> E_co: ...

    def close(self) -> None:
        """Release the underlying resource."""
        ...
