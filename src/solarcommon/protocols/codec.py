"""JSON codec protocols."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from solarcommon.codec.object_mapper import ObjectMapper


@runtime_checkable
class KeyDeserializer(Protocol):
    """Parse a JSON object key into a typed value."""

    def deserialize_key(self, key: str) -> Any: ...


@runtime_checkable
class TypedKeyDeserializer(Protocol):
    """A key deserializer paired with the type it produces.

    Used as a registration unit: ``ObjectMapperFactory`` installs each one
    under its ``key_type``. Implementations are immutable descriptors.

    Implementations: BasicTypedKeyDeserializer (codec.key_deserializers).
    """

    @property
    def key_type(self) -> type: ...

    @property
    def key_deserializer(self) -> KeyDeserializer: ...


@runtime_checkable
class ObjectMapperService(Protocol):
    """Access to a shared ObjectMapper.

    Implementations: SimpleObjectMapperService (codec.object_mapper_service).
    """

    @property
    def object_mapper(self) -> ObjectMapper: ...
