"""Convenience JSON helpers over a shared default ObjectMapper.

These helpers never raise for bad input: a conversion failure is logged at
warning level and the default is returned. The ``parse_*_attribute``
helpers read one attribute of an already parsed JSON object and log
unparseable values at debug level.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from typing import Any, TypeVar

from loguru import logger

from solarcommon.codec.modules import int_range_module
from solarcommon.codec.object_mapper import ObjectMapper
from solarcommon.exceptions import JsonMappingError

T = TypeVar("T")


def new_object_mapper() -> ObjectMapper:
    """Create a new mapper with the stock modules registered."""
    return ObjectMapper().register_module(int_range_module())


@lru_cache
def default_object_mapper() -> ObjectMapper:
    """Return the shared mapper used by the helpers in this module."""
    return new_object_mapper()


def get_json_string(obj: Any, default: str | None = None) -> str | None:
    """Serialize ``obj`` to JSON, or return ``default`` if it is None or fails."""
    if obj is None:
        return default
    try:
        return default_object_mapper().write_value_as_string(obj)
    except JsonMappingError as e:
        logger.warning("Exception marshalling {} to JSON: {}", obj, e)
    return default


def get_object_from_json(json: str | bytes | None, type_: type[T] | Any) -> T | None:
    """Deserialize JSON into ``type_``, or return None if it is None or fails."""
    if json is None:
        return None
    try:
        return default_object_mapper().read_value(json, type_)
    except JsonMappingError as e:
        logger.warning("Exception deserializing JSON {}: {}", json, e)
    return None


def get_string_map(json: str | bytes | None) -> dict[str, Any] | None:
    """Parse a JSON object into a dict, or return None if empty, not an object, or invalid."""
    if not json:
        return None
    try:
        return default_object_mapper().read_value(json, dict[str, Any])
    except JsonMappingError as e:
        logger.warning("Exception deserializing JSON {} to dict: {}", json, e)
    return None


def get_tree_from_object(obj: Any) -> Any:
    """Convert an object to its JSON tree (dicts, lists and scalars), or None on failure."""
    if obj is None:
        return None
    try:
        return default_object_mapper().to_jsonable(obj)
    except JsonMappingError as e:
        logger.warning("Exception serializing object {} to JSON tree: {}", obj, e)
    return None


def get_string_map_from_tree(tree: Any) -> dict[str, Any] | None:
    """Return a JSON object tree as a dict, or None if it is not an object."""
    if not isinstance(tree, Mapping):
        return None
    try:
        return default_object_mapper().convert_value(tree, dict[str, Any])
    except JsonMappingError as e:
        logger.warning("Exception converting JSON tree {} to dict: {}", tree, e)
    return None


def get_string_map_from_object(obj: Any) -> dict[str, Any] | None:
    """Convert an object to its JSON object form as a dict, or None if it isn't one."""
    return get_string_map_from_tree(get_tree_from_object(obj))


# ----------------------------------------------------------------------
# Attribute parsing
# ----------------------------------------------------------------------


def _attribute(node: Mapping[str, Any] | None, key: str) -> Any:
    if not isinstance(node, Mapping):
        return None
    return node.get(key)


def _attribute_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def parse_int_attribute(node: Mapping[str, Any] | None, key: str) -> int | None:
    """Parse an integer attribute of a JSON object.

    Integral numbers are returned as is; anything else is parsed from its
    text form. Returns None when the attribute is missing, null or not an
    integer.
    """
    value = _attribute(node, key)
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    text = _attribute_text(value).strip()
    try:
        return int(text)
    except ValueError as e:
        logger.debug("Error parsing integer attribute [{}] value [{}]: {}", key, value, e)
    return None


def parse_decimal_attribute(node: Mapping[str, Any] | None, key: str) -> Decimal | None:
    """Parse a decimal attribute of a JSON object.

    Whole numbers gain a ``.0`` so the result keeps decimal notation.
    Returns None when the attribute is missing, null or not a number.
    """
    value = _attribute(node, key)
    if value is None:
        return None
    text = _attribute_text(value)
    if "." not in text:
        text += ".0"
    try:
        return Decimal(text)
    except InvalidOperation as e:
        logger.debug("Error parsing decimal attribute [{}] value [{}]: {}", key, value, e)
    return None


def parse_string_attribute(node: Mapping[str, Any] | None, key: str) -> str | None:
    """Return the text of a scalar attribute, or None when missing, null or a container."""
    value = _attribute(node, key)
    if value is None or isinstance(value, (Mapping, list)):
        return None
    return _attribute_text(value)


def parse_non_empty_string_attribute(node: Mapping[str, Any] | None, key: str) -> str | None:
    """Like ``parse_string_attribute`` but an empty string is returned as None."""
    return parse_string_attribute(node, key) or None
