"""Helpers for resolving optional services."""

from __future__ import annotations

from typing import Any, TypeVar

from solarcommon.exceptions import OptionalServiceNotAvailableError
from solarcommon.protocols.services import (
    FilterableService,
    OptionalService,
    OptionalServiceCollection,
)

T = TypeVar("T")


def service(optional: OptionalService[T] | None, fallback: T | None = None) -> T | None:
    """Resolve a possibly-None optional service.

    Returns:
        The resolved service, else ``fallback`` when ``optional`` is None or
        resolves to None.
    """
    resolved = optional.service() if optional is not None else None
    return resolved if resolved is not None else fallback


def required_service(optional: OptionalService[T] | None, description: str | None = None) -> T:
    """Resolve an optional service, raising if it is not available.

    Args:
        optional: The optional service, or None.
        description: Included in the error message when resolution fails.

    Raises:
        OptionalServiceNotAvailableError: If the service cannot be resolved.
            An exception raised while resolving is chained as the cause.
    """
    cause: Exception | None = None
    try:
        resolved = service(optional)
        if resolved is not None:
            return resolved
    except Exception as e:
        cause = e

    msg = "Service"
    if description is not None:
        msg += f" [{description}]"
    if isinstance(optional, FilterableService):
        filters = optional.property_filters
        if filters:
            msg += f" matching filter {dict(filters)}"
    msg += " not configured." if optional is None else " not available."
    raise OptionalServiceNotAvailableError(msg) from cause


def services(collection: OptionalServiceCollection[T] | None) -> list[T]:
    """Return the services of a possibly-None collection as a list."""
    if collection is None:
        return []
    return list(collection.services())


def first_available(
    collection: OptionalServiceCollection[T] | None, fallback: T | None = None
) -> T | None:
    """Select the first service a collection offers, else ``fallback``.

    This is the "first available" policy: it trusts the collection's own
    ordering (``DynamicServiceTracker`` orders by rank).
    """
    if collection is None:
        return fallback
    for s in collection.services():
        if s is not None:
            return s
    return fallback


def filter_prop_value(filterable: object, key: str) -> Any:
    """Return a property filter value, or None when ``filterable`` has no filters."""
    if not isinstance(filterable, FilterableService):
        return None
    props = filterable.property_filters
    return props.get(key) if props is not None else None


def set_filter_prop(filterable: object, key: str, value: Any) -> None:
    """Set a property filter when ``filterable`` supports filters; otherwise do nothing."""
    if isinstance(filterable, FilterableService):
        filterable.set_property_filter(key, value)
