"""Optional service resolution: helpers, static services, registry and tracker."""

from solarcommon.service.optional import (
    filter_prop_value,
    first_available,
    required_service,
    service,
    services,
    set_filter_prop,
)
from solarcommon.service.registry import ServiceRegistration, ServiceRegistry
from solarcommon.service.static import StaticOptionalService, StaticOptionalServiceCollection
from solarcommon.service.tracker import DynamicServiceTracker

__all__ = [
    "DynamicServiceTracker",
    "ServiceRegistration",
    "ServiceRegistry",
    "StaticOptionalService",
    "StaticOptionalServiceCollection",
    "filter_prop_value",
    "first_available",
    "required_service",
    "service",
    "services",
    "set_filter_prop",
]
