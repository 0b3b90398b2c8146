"""Read-only entity tree produced by a build."""

from collections.abc import Iterator
from collections.abc import Mapping
from collections.abc import MutableMapping
from typing import Any

from . import resolver
from .models import PropertySnapshot
from .utils import freeze
from .utils import thaw


class EntityTree(Mapping[str, Any]):
    """Merged entities from one or more root directories.

    The tree behaves as a read-only mapping: ``tree["a"]["b"]`` indexes the
    same way as ``tree.get_entity("a.b")``. Nested mappings are exposed as
    read-only views, so the tree can be shared freely between readers.

    Args:
        entities: Root mapping of merged entities
        properties: Snapshot the fragments were evaluated with
    """

    def __init__(self, entities: Mapping[str, Any], properties: PropertySnapshot | None = None):
        self._entities = freeze(entities)
        self.properties = properties if properties is not None else PropertySnapshot()

    def __getitem__(self, key: str) -> Any:
        return self._entities[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entities)

    def __len__(self) -> int:
        return len(self._entities)

    def __repr__(self) -> str:
        return f"EntityTree({self.to_dict()!r})"

    def get_entity(self, coordinate: str, ancestry: bool = False) -> Any:
        """Look up the entity at a dotted coordinate.

        See ``resolver.get_entity``. The tree itself is the last element of
        the ancestry list.
        """
        return resolver.get_entity(self, coordinate, ancestry=ancestry)

    def fill(self, coordinate: str, output: MutableMapping[str, Any], ancestry: bool = False) -> MutableMapping[str, Any]:
        """Fill defaults in output from the entity at coordinate.

        See ``resolver.fill``.
        """
        return resolver.fill(self, coordinate, output, ancestry=ancestry)

    def to_dict(self) -> dict[str, Any]:
        """Return the entities as nested plain dicts."""
        return thaw(self._entities)
