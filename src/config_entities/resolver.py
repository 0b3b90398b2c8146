"""Dotted-path lookup over entity trees.

Coordinates such as ``"a.b.c"`` index into nested mappings one segment at a
time. A coordinate that cannot be followed is not an error: lookups return
``None`` and ``fill`` leaves its defaults in place.
"""

from collections.abc import Mapping
from collections.abc import MutableMapping
from typing import Any

from .utils import split_coordinate


def resolve(tree: Mapping[str, Any], coordinate: str) -> tuple[Any, list[Any]] | None:
    """Find the node at coordinate along with its ancestry.

    Args:
        tree: Root mapping of the entity tree
        coordinate: Dotted path, the empty string denotes the root

    Returns:
        Tuple of (target, ancestry) where ancestry lists the target first and
        the root last, or None if any segment is missing
    """
    chain: list[Any] = [tree]
    for segment in split_coordinate(coordinate):
        current = chain[0]
        if not isinstance(current, Mapping) or segment not in current:
            return None
        chain.insert(0, current[segment])
    return chain[0], chain


def get_entity(tree: Mapping[str, Any], coordinate: str, ancestry: bool = False) -> Any:
    """Look up the entity at coordinate.

    Examples:
        >>> tree = {"a": {"b": {"e": "f"}}}
        >>> get_entity(tree, "a.b.e")
        'f'

        >>> get_entity(tree, "a.b", ancestry=True)
        [{'e': 'f'}, {'b': {'e': 'f'}}, {'a': {'b': {'e': 'f'}}}]

        >>> get_entity(tree, "a.x") is None
        True

    Args:
        tree: Root mapping of the entity tree
        coordinate: Dotted path to the entity
        ancestry: Return the whole ancestry (target first) instead of the target

    Returns:
        The entity, its ancestry list, or None if not found
    """
    resolved = resolve(tree, coordinate)
    if resolved is None:
        return None
    target, chain = resolved
    return chain if ancestry else target


def fill(
    tree: Mapping[str, Any],
    coordinate: str,
    output: MutableMapping[str, Any],
    ancestry: bool = False,
) -> MutableMapping[str, Any]:
    """Overwrite the defaults in output with values found at coordinate.

    Only keys already present in output are considered. Each one takes the
    value defined by the target entity. When ancestry is enabled, a key the
    target does not define is looked up in the target's ancestors, nearest
    first. Keys found nowhere keep their default.

    Examples:
        >>> tree = {"a": {"k": "v", "b": {}}}
        >>> fill(tree, "a.b", {"k": "default"}, ancestry=True)
        {'k': 'v'}

        >>> fill(tree, "a.b", {"k": "default"})
        {'k': 'default'}

    Args:
        tree: Root mapping of the entity tree
        coordinate: Dotted path to the entity
        output: Mapping of defaults, updated in place
        ancestry: Fall back to ancestor entities for missing keys

    Returns:
        The output mapping
    """
    resolved = resolve(tree, coordinate)
    if resolved is None:
        return output

    target, chain = resolved
    for key in list(output):
        if isinstance(target, Mapping) and key in target:
            output[key] = target[key]
        elif ancestry:
            for ancestor in chain[1:]:
                if key in ancestor:
                    output[key] = ancestor[key]
                    break

    return output
