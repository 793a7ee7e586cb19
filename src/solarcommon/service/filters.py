"""Property filter storage shared by the filterable service implementations."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class PropertyFilterSupport:
    """Holds an insertion-ordered map of property filters.

    Subclasses override ``_filters_changed`` to react to edits.
    """

    def __init__(self, property_filters: Mapping[str, Any] | None = None) -> None:
        self._property_filters: dict[str, Any] | None = (
            dict(property_filters) if property_filters is not None else None
        )

    @property
    def property_filters(self) -> dict[str, Any] | None:
        return self._property_filters

    @property_filters.setter
    def property_filters(self, filters: Mapping[str, Any] | None) -> None:
        self._property_filters = dict(filters) if filters is not None else None
        self._filters_changed()

    def set_property_filter(self, key: str, value: Any) -> None:
        if self._property_filters is None:
            self._property_filters = {}
        self._property_filters[key] = value
        self._filters_changed()

    def remove_property_filter(self, key: str) -> Any:
        result = None
        if self._property_filters is not None:
            result = self._property_filters.pop(key, None)
        self._filters_changed()
        return result

    def get_property_value(self, key: str) -> Any:
        props = self._property_filters
        return props.get(key) if props is not None else None

    def _filters_changed(self) -> None:
        pass
