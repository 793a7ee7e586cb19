"""Capability protocols (interfaces) for dependency inversion.

All consumers should type-hint against these protocols,
not the concrete implementations.
"""

from solarcommon.protocols.codec import KeyDeserializer, ObjectMapperService, TypedKeyDeserializer
from solarcommon.protocols.iteration import CloseableIterator
from solarcommon.protocols.ranges import IntOrderedIterable, IntRangeContainer
from solarcommon.protocols.services import (
    FilterableService,
    OptionalService,
    OptionalServiceCollection,
)

__all__ = [
    "CloseableIterator",
    "FilterableService",
    "IntOrderedIterable",
    "IntRangeContainer",
    "KeyDeserializer",
    "ObjectMapperService",
    "OptionalService",
    "OptionalServiceCollection",
    "TypedKeyDeserializer",
]
