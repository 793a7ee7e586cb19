"""JSON object mapper built on pydantic.

``ObjectMapper`` turns Python objects into JSON and back. Plain values,
pydantic models, dataclasses and anything pydantic-core understands work
out of the box; other types are handled by registering serializers and
deserializers, either one at a time or bundled in an ``ObjectMapperModule``.

Mapping keys are always strings in JSON. Register a key serializer to write
a custom key type and a key deserializer to read it back when the target
type is ``dict[K, V]``.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import threading
import types
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar, Union, get_args, get_origin

import pydantic_core
from loguru import logger
from pydantic import BaseModel, TypeAdapter, ValidationError

from solarcommon.config import get_settings
from solarcommon.exceptions import JsonMappingError
from solarcommon.protocols.codec import KeyDeserializer

T = TypeVar("T")

_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)
_SEQUENCE_ORIGINS = {
    list: list,
    set: set,
    frozenset: frozenset,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    collections.abc.Set: set,
    collections.abc.MutableSet: set,
    collections.abc.Iterable: list,
    collections.abc.Collection: list,
}


class Inclusion(str, Enum):
    """Which mapping entries and model fields are written."""

    ALWAYS = "always"
    NON_NULL = "non_null"


@dataclass(frozen=True)
class ModuleVersion:
    """Version of an ObjectMapperModule."""

    major: int = 1
    minor: int = 0
    patch: int = 0
    snapshot_info: str | None = None
    group_id: str | None = None
    artifact_id: str | None = None

    @classmethod
    def parse(cls, text: str | None) -> ModuleVersion:
        """Parse ``major.minor.patch[.snapshot[.group[.artifact]]]``.

        Missing numeric parts default to ``1``, ``0`` and ``0``.

        Raises:
            ValueError: If a numeric part is not an integer.
        """
        parts = [p for p in (text or "").split(".") if p]
        nums = [1, 0, 0]
        for i, p in enumerate(parts[:3]):
            nums[i] = int(p)
        extra: list[str | None] = list(parts[3:6]) + [None] * (3 - len(parts[3:6]))
        return cls(nums[0], nums[1], nums[2], extra[0], extra[1], extra[2])

    def __str__(self) -> str:
        s = f"{self.major}.{self.minor}.{self.patch}"
        if self.snapshot_info:
            s += f"-{self.snapshot_info}"
        return s


@dataclass(frozen=True)
class TypedSerializer:
    """A value (or key) serializer bound to the type it handles."""

    handled_type: type
    serialize: Callable[[Any], Any]


@dataclass(frozen=True)
class TypedDeserializer:
    """A value deserializer bound to the type it produces."""

    handled_type: type
    deserialize: Callable[[Any], Any]


@dataclass
class ObjectMapperModule:
    """A named bundle of serializers and deserializers."""

    name: str
    version: ModuleVersion = field(default_factory=ModuleVersion)
    serializers: dict[type, Callable[[Any], Any]] = field(default_factory=dict)
    deserializers: dict[type, Callable[[Any], Any]] = field(default_factory=dict)
    key_serializers: dict[type, Callable[[Any], Any]] = field(default_factory=dict)
    key_deserializers: dict[type, KeyDeserializer] = field(default_factory=dict)

    def add_serializer(self, type_: type, fn: Callable[[Any], Any]) -> ObjectMapperModule:
        self.serializers[type_] = fn
        return self

    def add_deserializer(self, type_: type, fn: Callable[[Any], Any]) -> ObjectMapperModule:
        self.deserializers[type_] = fn
        return self

    def add_key_serializer(self, type_: type, fn: Callable[[Any], Any]) -> ObjectMapperModule:
        self.key_serializers[type_] = fn
        return self

    def add_key_deserializer(self, type_: type, kd: KeyDeserializer) -> ObjectMapperModule:
        self.key_deserializers[type_] = kd
        return self


def _find_by_mro(registry: Mapping[type, T], type_: type) -> T | None:
    if not registry:
        return None
    for c in type_.__mro__:
        fn = registry.get(c)
        if fn is not None:
            return fn
    return None


class ObjectMapper:
    """Read and write JSON with pluggable per-type conversion.

    Args:
        serialization_inclusion: ``Inclusion.NON_NULL`` drops None-valued
            mapping entries and model fields. Defaults to
            ``Settings.json_serialization_inclusion``.
        indent: Indent output by this many spaces. Defaults to
            ``Settings.json_indent``.
    """

    def __init__(
        self,
        *,
        serialization_inclusion: Inclusion | str | None = None,
        indent: int | None = None,
    ) -> None:
        settings = get_settings()
        self.serialization_inclusion = Inclusion(
            serialization_inclusion or settings.json_serialization_inclusion
        )
        self.indent = settings.json_indent if indent is None else indent
        self._serializers: dict[type, Callable[[Any], Any]] = {}
        self._deserializers: dict[type, Callable[[Any], Any]] = {}
        self._key_serializers: dict[type, Callable[[Any], Any]] = {}
        self._key_deserializers: dict[type, KeyDeserializer] = {}
        self._modules: dict[str, ModuleVersion] = {}
        self._adapters: dict[Any, TypeAdapter] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_module(self, module: ObjectMapperModule) -> ObjectMapper:
        """Install a module's registrations; a module name is only registered once."""
        with self._lock:
            if module.name in self._modules:
                logger.debug("Module {} already registered, skipping", module.name)
                return self
            self._serializers.update(module.serializers)
            self._deserializers.update(module.deserializers)
            self._key_serializers.update(module.key_serializers)
            self._key_deserializers.update(module.key_deserializers)
            self._modules[module.name] = module.version
        logger.debug("Registered JSON module {} {}", module.name, module.version)
        return self

    @property
    def registered_modules(self) -> list[str]:
        return list(self._modules)

    def add_serializer(self, type_: type, fn: Callable[[Any], Any]) -> ObjectMapper:
        self._serializers[type_] = fn
        return self

    def add_deserializer(self, type_: type, fn: Callable[[Any], Any]) -> ObjectMapper:
        self._deserializers[type_] = fn
        return self

    def add_key_serializer(self, type_: type, fn: Callable[[Any], Any]) -> ObjectMapper:
        self._key_serializers[type_] = fn
        return self

    def add_key_deserializer(self, type_: type, kd: KeyDeserializer) -> ObjectMapper:
        self._key_deserializers[type_] = kd
        return self

    def key_deserializer_for(self, type_: type) -> KeyDeserializer | None:
        return self._key_deserializers.get(type_)

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def to_jsonable(self, obj: Any) -> Any:
        """Convert ``obj`` into plain JSON-compatible Python values.

        Raises:
            JsonMappingError: If some value cannot be converted.
        """
        if obj is None:
            return None
        fn = _find_by_mro(self._serializers, type(obj))
        if fn is not None:
            try:
                return self.to_jsonable(fn(obj))
            except (TypeError, ValueError) as e:
                if isinstance(e, JsonMappingError):
                    raise
                raise JsonMappingError(f"Error serializing {type(obj).__name__}: {e}") from e
        if isinstance(obj, (str, bool, int, float)) and not isinstance(obj, Enum):
            return obj
        if isinstance(obj, Mapping):
            return self._mapping_to_jsonable(obj.items())
        if isinstance(obj, BaseModel):
            return self._mapping_to_jsonable(obj.model_dump(by_alias=True).items())
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return self._mapping_to_jsonable(
                (f.name, getattr(obj, f.name)) for f in dataclasses.fields(obj)
            )
        if isinstance(obj, (list, tuple, collections.abc.Set)):
            return [self.to_jsonable(v) for v in obj]
        try:
            return pydantic_core.to_jsonable_python(obj)
        except pydantic_core.PydanticSerializationError as e:
            raise JsonMappingError(f"Unable to serialize {type(obj).__name__}: {e}") from e

    def _mapping_to_jsonable(self, items) -> dict[str, Any]:
        non_null = self.serialization_inclusion is Inclusion.NON_NULL
        result: dict[str, Any] = {}
        for k, v in items:
            if v is None and non_null:
                continue
            result[self._key_to_str(k)] = self.to_jsonable(v)
        return result

    def _key_to_str(self, key: Any) -> str:
        if isinstance(key, str):
            return key
        fn = _find_by_mro(self._key_serializers, type(key))
        if fn is not None:
            return str(fn(key))
        if key is None:
            return "null"
        if isinstance(key, bool):
            return "true" if key else "false"
        if isinstance(key, Enum):
            return str(key.value)
        if isinstance(key, (int, float)):
            return str(key)
        value = self.to_jsonable(key)
        return value if isinstance(value, str) else str(key)

    def write_value_as_bytes(self, obj: Any) -> bytes:
        """Serialize ``obj`` to UTF-8 JSON; NaN and infinities are written as strings."""
        return pydantic_core.to_json(
            self.to_jsonable(obj), indent=self.indent, inf_nan_mode="strings"
        )

    def write_value_as_string(self, obj: Any) -> str:
        """Serialize ``obj`` to a JSON string.

        Raises:
            JsonMappingError: If some value cannot be converted.
        """
        return self.write_value_as_bytes(obj).decode("utf-8")

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def read_tree(self, text: str | bytes) -> Any:
        """Parse JSON into plain Python values (dict, list, str, ...)."""
        try:
            return pydantic_core.from_json(text)
        except ValueError as e:
            raise JsonMappingError(f"Invalid JSON: {e}") from e

    def read_value(self, text: str | bytes, type_: type[T] | Any) -> T:
        """Parse JSON and convert it into ``type_``.

        Raises:
            JsonMappingError: If the text is not valid JSON or does not
                match ``type_``.
        """
        return self.convert_value(self.read_tree(text), type_)

    def convert_value(self, data: Any, type_: type[T] | Any) -> T:
        """Convert already-parsed JSON data into ``type_``."""
        if type_ is Any or type_ is object:
            return data
        fn = self._deserializers.get(type_) if isinstance(type_, type) else None
        if fn is not None:
            try:
                return fn(data)
            except (TypeError, ValueError, KeyError) as e:
                if isinstance(e, JsonMappingError):
                    raise
                raise JsonMappingError(f"Error deserializing {type_.__name__}: {e}") from e
        if self._needs_custom(type_):
            return self._convert_generic(data, type_)
        try:
            return self._adapter(type_).validate_python(data)
        except ValidationError as e:
            raise JsonMappingError(f"Error converting JSON to {type_!r}: {e}") from e

    def _needs_custom(self, type_: Any) -> bool:
        if isinstance(type_, type) and type_ in self._deserializers:
            return True
        origin = get_origin(type_)
        if origin is None:
            return False
        args = get_args(type_)
        if origin in _MAPPING_ORIGINS and args and args[0] in self._key_deserializers:
            return True
        return any(a is not Ellipsis and self._needs_custom(a) for a in args)

    def _convert_generic(self, data: Any, type_: Any) -> Any:
        origin = get_origin(type_)
        args = get_args(type_)

        if origin is Union or origin is types.UnionType:
            if data is None and type(None) in args:
                return None
            errors = []
            for arg in args:
                if arg is type(None):
                    continue
                try:
                    return self.convert_value(data, arg)
                except JsonMappingError as e:
                    errors.append(str(e))
            raise JsonMappingError(f"No member of {type_!r} accepts the value: {errors}")

        if origin in _MAPPING_ORIGINS:
            if not isinstance(data, dict):
                raise JsonMappingError(f"Expected JSON object for {type_!r}, got {type(data).__name__}")
            key_type, value_type = args if len(args) == 2 else (Any, Any)
            kd = self._key_deserializers.get(key_type)
            result = {}
            for k, v in data.items():
                if kd is not None:
                    try:
                        key = kd.deserialize_key(k)
                    except (TypeError, ValueError) as e:
                        raise JsonMappingError(f"Invalid {key_type!r} key {k!r}: {e}") from e
                else:
                    key = self.convert_value(k, key_type)
                result[key] = self.convert_value(v, value_type)
            return result

        if origin is tuple:
            if not isinstance(data, list):
                raise JsonMappingError(f"Expected JSON array for {type_!r}")
            if len(args) == 2 and args[1] is Ellipsis:
                return tuple(self.convert_value(v, args[0]) for v in data)
            if len(args) != len(data):
                raise JsonMappingError(f"Expected {len(args)} items for {type_!r}, got {len(data)}")
            return tuple(self.convert_value(v, a) for v, a in zip(data, args))

        factory = _SEQUENCE_ORIGINS.get(origin)
        if factory is not None:
            if not isinstance(data, list):
                raise JsonMappingError(f"Expected JSON array for {type_!r}")
            elem = args[0] if args else Any
            return factory(self.convert_value(v, elem) for v in data)

        raise JsonMappingError(f"Unsupported target type {type_!r}")

    def _adapter(self, type_: Any) -> TypeAdapter:
        try:
            adapter = self._adapters.get(type_)
        except TypeError:
            # unhashable type expression
            return TypeAdapter(type_)
        if adapter is None:
            adapter = TypeAdapter(type_)
            self._adapters[type_] = adapter
        return adapter
