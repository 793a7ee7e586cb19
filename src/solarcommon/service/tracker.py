"""Dynamic optional service backed by a ServiceRegistry."""

from __future__ import annotations

import threading
import weakref
from collections.abc import Callable, Mapping
from typing import Any, Generic, TypeVar

from loguru import logger

from solarcommon.config import get_settings
from solarcommon.service.filters import PropertyFilterSupport
from solarcommon.service.registry import ServiceRegistration, ServiceRegistry, interface_name

T = TypeVar("T")

_MISSING = object()


def _read_property(reg: ServiceRegistration, key: str) -> Any:
    """Read a filter property from the service, falling back to registration properties."""
    value = getattr(reg.service, key, _MISSING)
    if value is not _MISSING and not callable(value):
        return value
    return reg.properties.get(key, _MISSING)


def _sticky_ref(service: Any) -> Callable[[], Any]:
    try:
        return weakref.ref(service)
    except TypeError:
        # builtins like int or dict can't be weakly referenced
        return lambda: service


class DynamicServiceTracker(PropertyFilterSupport, Generic[T]):
    """Resolve services of one type from a registry, narrowed by property filters.

    Implements ``OptionalService``, ``OptionalServiceCollection`` and
    ``FilterableService``. Matches are ordered highest rank first; when
    nothing matches the ``fallback_service`` (if any) is used.

    A service matches when every filter key is readable on it (as a plain
    attribute, else as a registration property) and equals the filter
    value. Collection values match when they contain the filter value.
    With ``ignore_empty_property_filter_values`` (the default) None or empty
    string filter values match anything readable.

    With ``sticky`` the first match is cached by weak reference until the
    filters change or the service is collected.
    """

    def __init__(
        self,
        registry: ServiceRegistry,
        service_class: type[T] | str,
        *,
        property_filters: Mapping[str, Any] | None = None,
        fallback_service: T | None = None,
        ignore_empty_property_filter_values: bool | None = None,
        sticky: bool | None = None,
    ) -> None:
        super().__init__(property_filters)
        settings = get_settings()
        self.registry = registry
        self.service_class = service_class
        self.fallback_service = fallback_service
        self.ignore_empty_property_filter_values = (
            settings.tracker_ignore_empty_property_filter_values
            if ignore_empty_property_filter_values is None
            else ignore_empty_property_filter_values
        )
        self._lock = threading.Lock()
        self._sticky = settings.tracker_sticky if sticky is None else sticky
        self._sticky_service: Callable[[], Any] | None = None

    @property
    def service_class_name(self) -> str:
        return interface_name(self.service_class)

    @property
    def sticky(self) -> bool:
        with self._lock:
            return self._sticky

    @sticky.setter
    def sticky(self, value: bool) -> None:
        with self._lock:
            self._sticky = value
            if not value:
                self._sticky_service = None

    def _filters_changed(self) -> None:
        # _lock may not exist yet while the base initialiser runs
        lock = getattr(self, "_lock", None)
        if lock is None:
            return
        with lock:
            self._sticky_service = None

    # ------------------------------------------------------------------
    # OptionalService / OptionalServiceCollection
    # ------------------------------------------------------------------

    def service(self) -> T | None:
        """Return the highest ranked matching service, else the fallback."""
        sticky = self.sticky
        if sticky:
            with self._lock:
                cached = self._sticky_service() if self._sticky_service is not None else None
            if cached is not None:
                return cached

        refs = self._references()
        for reg in refs:
            if self._matches(reg):
                logger.debug(
                    "Found {} service matching properties {}: {}",
                    self.service_class_name,
                    self.property_filters,
                    reg.service,
                )
                if sticky:
                    with self._lock:
                        self._sticky_service = _sticky_ref(reg.service)
                return reg.service

        if self.fallback_service is not None:
            logger.debug(
                "Using fallback {} service {}, no service found matching properties {}",
                self.service_class_name,
                type(self.fallback_service).__name__,
                self.property_filters,
            )
        return self.fallback_service

    def services(self) -> list[T]:
        """Return all matching services highest rank first, else ``[fallback]``, else ``[]``."""
        results = [reg.service for reg in self._references() if self._matches(reg)]
        if not results and self.fallback_service is not None:
            logger.debug(
                "Using fallback {} service {}, no service found matching properties {}",
                self.service_class_name,
                type(self.fallback_service).__name__,
                self.property_filters,
            )
            results.append(self.fallback_service)
        return results

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def _references(self) -> list[ServiceRegistration]:
        refs = self.registry.references(self.service_class)
        logger.debug(
            "Found {} possible services of type {}", len(refs), self.service_class_name
        )
        return refs

    def _matches(self, reg: ServiceRegistration) -> bool:
        filters = self.property_filters
        if not filters:
            return True
        logger.trace("Examining service {} for property match {}", reg.service, filters)
        for key, required in filters.items():
            actual = _read_property(reg, key)
            if actual is _MISSING:
                return False
            if self.ignore_empty_property_filter_values and (required is None or required == ""):
                continue
            if required is None:
                if actual is None:
                    continue
                return False
            if isinstance(actual, (list, tuple, set, frozenset)):
                if required not in actual:
                    return False
            elif required != actual:
                return False
        return True
