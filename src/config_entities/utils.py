"""Utility functions for config-entities."""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any


def split_coordinate(coordinate: str) -> list[str]:
    """Split a dotted coordinate into its segments.

    Examples:
        >>> split_coordinate("a.b.c")
        ['a', 'b', 'c']

        >>> split_coordinate("")
        []
    """
    if not coordinate:
        return []
    return coordinate.split(".")


def shallow_merge(target: dict[str, Any], overlay: Mapping[str, Any]) -> dict[str, Any]:
    """Copy the top-level keys of overlay into target.

    Unlike a deep merge, nested mappings are not merged recursively: a key
    present in overlay replaces the value in target wholesale. Keys only in
    target are preserved. Target is modified in place.

    Args:
        target: Mapping being merged into
        overlay: Mapping whose top-level keys take precedence

    Returns:
        The target mapping

    Examples:
        >>> shallow_merge({"x": 0, "w": 9}, {"x": 1, "z": 3})
        {'x': 1, 'w': 9, 'z': 3}

        >>> shallow_merge({"n": {"a": 1}}, {"n": {"b": 2}})
        {'n': {'b': 2}}
    """
    for key, value in overlay.items():
        target[key] = value
    return target


def freeze(node: Any) -> Any:
    """Return a read-only view of node, recursing through mappings.

    Mappings become ``MappingProxyType`` views over fresh dicts. Leaf values
    are returned as-is.
    """
    if isinstance(node, Mapping):
        return MappingProxyType({key: freeze(value) for key, value in node.items()})
    return node


def thaw(node: Any) -> Any:
    """Return a plain mutable copy of node, converting mappings back to dicts."""
    if isinstance(node, Mapping):
        return {key: thaw(value) for key, value in node.items()}
    return node
