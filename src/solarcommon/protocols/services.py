"""Optional service protocols."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Protocol, TypeVar, runtime_checkable

T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class OptionalService(Protocol[T_co]):
    """A service that may or may not be available right now.

    Implementations: DynamicServiceTracker, StaticOptionalService.
    """

    def service(self) -> T_co | None:
        """Return the first available service, or None."""
        ...


@runtime_checkable
class OptionalServiceCollection(Protocol[T_co]):
    """Zero or more instances of a tracked service type.

    No selection policy is implied; see ``service.optional.first_available``.

    Implementations: DynamicServiceTracker, StaticOptionalServiceCollection.
    """

    def services(self) -> Iterable[T_co]:
        """Return all currently available services (possibly empty)."""
        ...


@runtime_checkable
class FilterableService(Protocol):
    """A service lookup narrowed by property filters."""

    @property
    def property_filters(self) -> Mapping[str, Any] | None: ...

    def set_property_filter(self, key: str, value: Any) -> None: ...

    def remove_property_filter(self, key: str) -> Any: ...

    def get_property_value(self, key: str) -> Any: ...
