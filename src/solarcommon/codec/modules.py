"""Stock ObjectMapper modules."""

from __future__ import annotations

from typing import Any

from solarcommon.codec.key_deserializers import INT_RANGE_KEY_DESERIALIZER
from solarcommon.codec.object_mapper import ModuleVersion, ObjectMapperModule
from solarcommon.util.int_range import IntRange
from solarcommon.util.int_range_set import IntRangeSet

INT_RANGE_MODULE_NAME = "SolarCommonIntRangeModule"


def serialize_int_range(r: IntRange) -> list[int]:
    return [r.start, r.end]


def deserialize_int_range(data: Any) -> IntRange:
    """Read an IntRange from ``[min, max]``, ``[value]``, ``value`` or ``"[min..max]"``."""
    if isinstance(data, str):
        return IntRange.parse(data)
    if isinstance(data, int) and not isinstance(data, bool):
        return IntRange(data, data)
    if isinstance(data, list) and 1 <= len(data) <= 2 and all(
        isinstance(v, int) and not isinstance(v, bool) for v in data
    ):
        return IntRange(data[0], data[-1])
    raise ValueError(f"Invalid IntRange JSON: {data!r}")


def serialize_int_range_set(s: IntRangeSet) -> list[list[int]]:
    return [serialize_int_range(r) for r in s.ranges()]


def deserialize_int_range_set(data: Any) -> IntRangeSet:
    """Read an IntRangeSet from a list of ranges (each as accepted by ``deserialize_int_range``)."""
    if not isinstance(data, list):
        raise ValueError(f"Invalid IntRangeSet JSON: {data!r}")
    return IntRangeSet.of_ranges(*(deserialize_int_range(v) for v in data))


def int_range_module() -> ObjectMapperModule:
    """Module handling IntRange (as value and key) and IntRangeSet."""
    return (
        ObjectMapperModule(INT_RANGE_MODULE_NAME, ModuleVersion(1, 0, 0))
        .add_serializer(IntRange, serialize_int_range)
        .add_deserializer(IntRange, deserialize_int_range)
        .add_serializer(IntRangeSet, serialize_int_range_set)
        .add_deserializer(IntRangeSet, deserialize_int_range_set)
        .add_key_serializer(IntRange, str)
        .add_key_deserializer(IntRange, INT_RANGE_KEY_DESERIALIZER.key_deserializer)
    )
