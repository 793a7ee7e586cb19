"""Services that own and configure a shared ObjectMapper."""

from __future__ import annotations

import threading
from collections.abc import Iterable

from loguru import logger

from solarcommon.codec.object_mapper import (
    Inclusion,
    ModuleVersion,
    ObjectMapper,
    ObjectMapperModule,
    TypedDeserializer,
    TypedSerializer,
)
from solarcommon.protocols.codec import TypedKeyDeserializer

DEFAULT_MODULE_NAME = "SolarCommonModule"


class SimpleObjectMapperService:
    """Holds one ObjectMapper, creating a default one when none is given.

    The reference is replaced only through the ``object_mapper`` setter, and
    the getter always returns the most recently set instance. Both sides
    take a lock so readers on other threads never see a partially
    configured holder. The mapper itself should be fully configured before
    it is shared.
    """

    def __init__(self, object_mapper: ObjectMapper | None = None) -> None:
        self._mapper_lock = threading.RLock()
        self._object_mapper = object_mapper if object_mapper is not None else ObjectMapper()

    @property
    def object_mapper(self) -> ObjectMapper:
        with self._mapper_lock:
            return self._object_mapper

    @object_mapper.setter
    def object_mapper(self, mapper: ObjectMapper) -> None:
        if mapper is None:
            raise ValueError("ObjectMapper cannot be None")
        with self._mapper_lock:
            self._object_mapper = mapper


class ObjectMapperModuleSupport(SimpleObjectMapperService):
    """Collects serializer configuration into a named, versioned module."""

    def __init__(
        self,
        object_mapper: ObjectMapper | None = None,
        *,
        module_name: str = DEFAULT_MODULE_NAME,
        module_version: ModuleVersion | None = None,
        serializers: Iterable[TypedSerializer] | None = None,
        deserializers: Iterable[TypedDeserializer] | None = None,
        key_serializers: Iterable[TypedSerializer] | None = None,
        key_deserializers: Iterable[TypedKeyDeserializer] | None = None,
        modules: Iterable[ObjectMapperModule] | None = None,
    ) -> None:
        super().__init__(object_mapper)
        self.module_name = module_name
        self.module_version = module_version or ModuleVersion()
        self.serializers = list(serializers) if serializers is not None else None
        self.deserializers = list(deserializers) if deserializers is not None else None
        self.key_serializers = list(key_serializers) if key_serializers is not None else None
        self.key_deserializers = list(key_deserializers) if key_deserializers is not None else None
        self.modules = list(modules) if modules is not None else None

    def set_version(self, version: str) -> None:
        """Set ``module_version`` from ``major.minor.patch[.snapshot[.group[.artifact]]]``."""
        self.module_version = ModuleVersion.parse(version)

    def build_module(self) -> ObjectMapperModule:
        """Create a module from the configured serializers and deserializers."""
        module = ObjectMapperModule(self.module_name, self.module_version)
        for s in self.serializers or ():
            module.add_serializer(s.handled_type, s.serialize)
        for d in self.deserializers or ():
            module.add_deserializer(d.handled_type, d.deserialize)
        for s in self.key_serializers or ():
            module.add_key_serializer(s.handled_type, s.serialize)
        for kd in self.key_deserializers or ():
            module.add_key_deserializer(kd.key_type, kd.key_deserializer)
        return module


class ObjectMapperFactory(ObjectMapperModuleSupport):
    """Configure the held ObjectMapper from module support settings.

    Args:
        serialization_inclusion: Applied to the mapper when not None
            (``Inclusion.NON_NULL`` by default).
        indent: Applied to the mapper when not None.
    """

    def __init__(
        self,
        object_mapper: ObjectMapper | None = None,
        *,
        serialization_inclusion: Inclusion | None = Inclusion.NON_NULL,
        indent: int | None = None,
        **kwargs,
    ) -> None:
        super().__init__(object_mapper, **kwargs)
        self.serialization_inclusion = serialization_inclusion
        self.indent = indent

    def get_object(self) -> ObjectMapper:
        """Return the held mapper with this factory's module and extra modules registered."""
        mapper = self.object_mapper
        if self.serialization_inclusion is not None:
            mapper.serialization_inclusion = Inclusion(self.serialization_inclusion)
        if self.indent is not None:
            mapper.indent = self.indent
        mapper.register_module(self.build_module())
        for m in self.modules or ():
            mapper.register_module(m)
        logger.debug("Configured ObjectMapper with modules {}", mapper.registered_modules)
        return mapper
