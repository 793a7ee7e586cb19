"""Typed key deserializer registrations."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from solarcommon.protocols.codec import KeyDeserializer
from solarcommon.util.int_range import IntRange


@dataclass(frozen=True)
class FunctionKeyDeserializer:
    """Adapt a ``str -> value`` callable to the KeyDeserializer protocol."""

    fn: Callable[[str], Any]

    def deserialize_key(self, key: str) -> Any:
        return self.fn(key)


@dataclass(frozen=True)
class BasicTypedKeyDeserializer:
    """Immutable pairing of a key type and the deserializer producing it."""

    key_type: type
    key_deserializer: KeyDeserializer


def typed_key_deserializer(key_type: type, fn: Callable[[str], Any]) -> BasicTypedKeyDeserializer:
    """Create a typed key deserializer from a plain function."""
    return BasicTypedKeyDeserializer(key_type, FunctionKeyDeserializer(fn))


def _parse_int(key: str) -> int:
    return int(key.strip())


INT_KEY_DESERIALIZER = typed_key_deserializer(int, _parse_int)
UUID_KEY_DESERIALIZER = typed_key_deserializer(uuid.UUID, uuid.UUID)
INT_RANGE_KEY_DESERIALIZER = typed_key_deserializer(IntRange, IntRange.parse)
