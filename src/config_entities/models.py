"""Data models for config-entities."""

from collections.abc import Callable
from collections.abc import Iterator
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True, eq=False)
class PropertySnapshot(Mapping[str, Any]):
    """Immutable properties visible to fragments during a single build.

    A snapshot is created once per build from an optional properties file and
    an optional mapping of direct properties, then passed to every fragment
    evaluation. It is never shared between builds.

    Attributes:
        _values: Read-only view of the property values. Use the mapping
            interface rather than this field.
    """

    _values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Copy so later changes to the caller's dict cannot leak into the build
        object.__setattr__(self, "_values", MappingProxyType(dict(self._values)))

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    @classmethod
    def layered(cls, base: Mapping[str, Any] | None, overrides: Mapping[str, Any] | None) -> "PropertySnapshot":
        """Create a snapshot from a base mapping with overrides applied on top.

        Args:
            base: Properties loaded from a properties file, if any
            overrides: Directly supplied properties (take precedence)

        Returns:
            New snapshot containing the union of both mappings
        """
        merged: dict[str, Any] = dict(base or {})
        merged.update(overrides or {})
        return cls(merged)


FragmentEvaluator = Callable[[Path, PropertySnapshot], Any]
"""Turns a fragment file into a value.

Called with the fragment's path and the build's property snapshot. Returns a
mapping (merged into the tree) or any other value (stored as a leaf).
"""
