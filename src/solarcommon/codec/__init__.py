"""JSON codec: object mapper, mapper services and key deserializers."""

from solarcommon.codec.key_deserializers import (
    BasicTypedKeyDeserializer,
    FunctionKeyDeserializer,
    typed_key_deserializer,
)
from solarcommon.codec.modules import int_range_module
from solarcommon.codec.object_mapper import (
    Inclusion,
    ModuleVersion,
    ObjectMapper,
    ObjectMapperModule,
    TypedDeserializer,
    TypedSerializer,
)
from solarcommon.codec.object_mapper_service import (
    ObjectMapperFactory,
    ObjectMapperModuleSupport,
    SimpleObjectMapperService,
)

__all__ = [
    "BasicTypedKeyDeserializer",
    "FunctionKeyDeserializer",
    "Inclusion",
    "ModuleVersion",
    "ObjectMapper",
    "ObjectMapperFactory",
    "ObjectMapperModule",
    "ObjectMapperModuleSupport",
    "SimpleObjectMapperService",
    "TypedDeserializer",
    "TypedSerializer",
    "int_range_module",
    "typed_key_deserializer",
]
