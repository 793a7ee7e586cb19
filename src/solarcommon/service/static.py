"""Fixed-value optional services, handy for wiring and tests."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Generic, TypeVar

from solarcommon.service.filters import PropertyFilterSupport

T = TypeVar("T")


class StaticOptionalService(PropertyFilterSupport, Generic[T]):
    """An optional service that always resolves to the same value.

    Property filters are stored but do not affect the result.
    """

    def __init__(self, value: T | None, property_filters: Mapping[str, Any] | None = None):
        super().__init__(property_filters)
        self._value = value

    def service(self) -> T | None:
        return self._value

    def __repr__(self) -> str:
        return f"StaticOptionalService({self._value!r})"


class StaticOptionalServiceCollection(PropertyFilterSupport, Generic[T]):
    """An optional service collection over a fixed list of values."""

    def __init__(
        self, values: Iterable[T] | None = None, property_filters: Mapping[str, Any] | None = None
    ):
        super().__init__(property_filters)
        self._values: list[T] = list(values) if values is not None else []

    def services(self) -> list[T]:
        return list(self._values)

    def service(self) -> T | None:
        return self._values[0] if self._values else None

    def __repr__(self) -> str:
        return f"StaticOptionalServiceCollection({self._values!r})"
