"""In-process service registry.

Services are registered under one or more interface names with a rank and
an optional property map. Lookups return registrations highest rank first,
then in registration order, which is the order ``DynamicServiceTracker``
resolves them in.
"""

from __future__ import annotations

import itertools
import threading
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from loguru import logger


def interface_name(interface: type | str) -> str:
    """Return the qualified name a type is registered under."""
    if isinstance(interface, str):
        return interface
    return f"{interface.__module__}.{interface.__qualname__}"


@dataclass(frozen=True, eq=False)
class ServiceRegistration:
    """A single registered service."""

    id: int
    service: Any
    interfaces: frozenset[str]
    rank: int = 0
    properties: Mapping[str, Any] = field(default_factory=dict)
    registry: ServiceRegistry | None = field(default=None, repr=False)

    def unregister(self) -> None:
        if self.registry is None:
            raise ValueError(f"Registration {self.id} is not bound to a registry")
        self.registry.unregister(self)


class ServiceRegistry:
    """Thread-safe registry of services keyed by interface name."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._ids = itertools.count(1)
        self._registrations: dict[int, ServiceRegistration] = {}

    def register(
        self,
        service: Any,
        *,
        interfaces: Iterable[type | str] | None = None,
        rank: int = 0,
        properties: Mapping[str, Any] | None = None,
    ) -> ServiceRegistration:
        """Register a service.

        Args:
            service: The service instance.
            interfaces: Types or qualified names to register under. Defaults
                to every class in the service's MRO except ``object``.
            rank: Higher ranks are returned first.
            properties: Extra properties used by filters.

        Returns:
            The registration handle.
        """
        if service is None:
            raise ValueError("Service cannot be None")
        if interfaces is None:
            names = frozenset(interface_name(c) for c in type(service).__mro__ if c is not object)
        else:
            names = frozenset(interface_name(i) for i in interfaces)
        if not names:
            raise ValueError("At least one interface is required")
        with self._lock:
            reg = ServiceRegistration(
                id=next(self._ids),
                service=service,
                interfaces=names,
                rank=rank,
                properties=MappingProxyType(dict(properties or {})),
                registry=self,
            )
            self._registrations[reg.id] = reg
        logger.debug("Registered service {} as {} (rank {})", reg.id, sorted(names), rank)
        return reg

    def unregister(self, registration: ServiceRegistration) -> None:
        """Remove a registration.

        Raises:
            ValueError: If the registration is not present in this registry.
        """
        with self._lock:
            if self._registrations.pop(registration.id, None) is None:
                raise ValueError(f"Registration {registration.id} is not registered")
        logger.debug("Unregistered service {}", registration.id)

    def references(
        self,
        interface: type | str,
        predicate: Callable[[ServiceRegistration], bool] | None = None,
    ) -> list[ServiceRegistration]:
        """Return registrations offering ``interface``, highest rank first."""
        name = interface_name(interface)
        with self._lock:
            regs = [r for r in self._registrations.values() if name in r.interfaces]
        if predicate is not None:
            regs = [r for r in regs if predicate(r)]
        regs.sort(key=lambda r: (-r.rank, r.id))
        return regs

    def __len__(self) -> int:
        with self._lock:
            return len(self._registrations)
