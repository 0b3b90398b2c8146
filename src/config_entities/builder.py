"""Build entity trees from directories of config fragments.

Each root directory is walked recursively. A fragment file ``p/K.<ext>`` is
evaluated and its value stored at coordinate ``p.K``, where ``p`` is the
fragment's directory relative to the root:

- A mapping value is merged into the mapping at ``p.K``. Only its top-level
  keys are written, replacing existing keys of the same name.
- Any other value replaces whatever ``p.K`` held.

A mapping fragment landing on a leaf replaces it, but a fragment nested below
a leaf (``K.<ext>`` is a scalar and ``K/`` holds fragments) raises LoadError.

A file ``K.<ext>`` is always loaded before a sibling directory ``K/``, so the
directory's fragments override the file's keys. Entries are visited in sorted
order (files, then directories) and roots in the order given, so a build is
reproducible and later roots override earlier ones.
"""

import logging
from collections.abc import Iterable
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .evaluators import DEFAULT_EVALUATORS
from .exceptions import LoadError
from .models import FragmentEvaluator
from .models import PropertySnapshot
from .tree import EntityTree
from .utils import shallow_merge
from .utils import thaw

logger = logging.getLogger(__name__)


class EntityTreeBuilder:
    """Merges fragment directories into an EntityTree.

    Args:
        evaluators: Mapping of file extension (e.g. ".yaml") to evaluator.
            Files with other extensions are ignored. Defaults to
            DEFAULT_EVALUATORS.
    """

    def __init__(self, evaluators: Mapping[str, FragmentEvaluator] | None = None):
        self.evaluators = dict(DEFAULT_EVALUATORS if evaluators is None else evaluators)

    def load_properties(
        self,
        properties_file: str | Path | None = None,
        properties: Mapping[str, Any] | None = None,
    ) -> PropertySnapshot:
        """Create the property snapshot for a build.

        Properties from the file are loaded first, then direct properties are
        applied on top.

        Args:
            properties_file: Fragment-style file that must evaluate to a mapping
            properties: Direct properties (take precedence)

        Returns:
            New PropertySnapshot

        Raises:
            LoadError: If the file is missing, cannot be evaluated, or does not
                yield a mapping
        """
        file_values: Mapping[str, Any] | None = None
        if properties_file is not None:
            path = Path(properties_file)
            if not path.is_file():
                raise LoadError(f"Properties file not found: {path}", path=path)
            file_values = self._evaluate(path, PropertySnapshot())
            if not isinstance(file_values, Mapping):
                raise LoadError(
                    f"Properties file {path} must yield a mapping, got {type(file_values).__name__}",
                    path=path,
                )
            logger.debug(f"Loaded {len(file_values)} properties from {path}")

        return PropertySnapshot.layered(file_values, properties)

    def build(self, roots: Iterable[str | Path], properties: PropertySnapshot | None = None) -> EntityTree:
        """Walk roots in order and merge their fragments into a new tree.

        Args:
            roots: Root directories, later roots override earlier ones
            properties: Snapshot passed to every fragment evaluation

        Returns:
            Read-only EntityTree

        Raises:
            LoadError: If a root is not a directory, a fragment fails to
                evaluate, or fragments conflict structurally
        """
        if properties is None:
            properties = PropertySnapshot()

        entities: dict[str, Any] = {}
        root_count = 0
        fragment_count = 0
        for root in roots:
            root_path = Path(root).resolve()
            if not root_path.is_dir():
                raise LoadError(f"Entities root is not a directory: {root_path}", path=root_path)
            fragment_count += self._walk(root_path, [], entities, properties)
            root_count += 1

        logger.info(f"Built entity tree from {fragment_count} fragments in {root_count} roots")
        return EntityTree(entities, properties)

    # ===== Private Helpers =====

    def _walk(self, directory: Path, keys: list[str], entities: dict[str, Any], properties: PropertySnapshot) -> int:
        """Load every fragment below directory, returning how many were loaded.

        Files are handled before subdirectories so that ``K/`` overrides ``K.<ext>``.
        """
        entries = sorted(directory.iterdir(), key=lambda entry: entry.name)
        count = 0

        for entry in entries:
            if not entry.is_file():
                continue
            if entry.suffix not in self.evaluators:
                logger.debug(f"Skipping {entry}: no evaluator for '{entry.suffix}'")
                continue
            self._load_fragment(entry, keys, entities, properties)
            count += 1

        for entry in entries:
            # Symlinked directories are not followed
            if entry.is_dir() and not entry.is_symlink():
                count += self._walk(entry, keys + [entry.name], entities, properties)

        return count

    def _load_fragment(self, path: Path, keys: list[str], entities: dict[str, Any], properties: PropertySnapshot) -> None:
        """Evaluate one fragment and merge its value at keys + [stem]."""
        key = path.stem
        coordinate = ".".join(keys + [key])
        parent = self._container(entities, keys, path)

        value = self._evaluate(path, properties)
        if isinstance(value, Mapping):
            target = parent.get(key)
            if not isinstance(target, dict):
                target = parent[key] = {}
            # Copy nested mappings so later fragments never write into evaluator-owned objects
            shallow_merge(target, thaw(value))
        else:
            parent[key] = value

        logger.debug(f"Loaded fragment {path} at '{coordinate}'")

    def _container(self, entities: dict[str, Any], keys: list[str], path: Path) -> dict[str, Any]:
        """Return the mapping at keys, creating intermediate mappings as needed.

        Raises:
            LoadError: If a non-mapping value sits on the path
        """
        node = entities
        for depth, key in enumerate(keys):
            if key not in node:
                node[key] = {}
            child = node[key]
            if not isinstance(child, Mapping):
                coordinate = ".".join(keys[: depth + 1])
                raise LoadError(
                    f"Cannot load {path}: '{coordinate}' holds a {type(child).__name__}, not a mapping",
                    path=path,
                )
            node = child
        return node

    def _evaluate(self, path: Path, properties: PropertySnapshot) -> Any:
        """Run the evaluator registered for path's extension.

        Raises:
            LoadError: If no evaluator is registered or evaluation fails
        """
        evaluator = self.evaluators.get(path.suffix)
        if evaluator is None:
            raise LoadError(f"No evaluator registered for {path}", path=path)
        try:
            return evaluator(path, properties)
        except LoadError:
            raise
        except Exception as e:
            raise LoadError(f"Failed to evaluate {path}: {e}", path=path) from e


def build_entities(
    *roots: str | Path,
    properties: Mapping[str, Any] | None = None,
    properties_file: str | Path | None = None,
    evaluators: Mapping[str, FragmentEvaluator] | None = None,
) -> EntityTree:
    """Build an entity tree from one or more root directories.

    Examples:
        Given ``entities/a/b.yaml`` containing ``e: f``:

        >>> tree = build_entities("entities")  # doctest: +SKIP
        >>> tree.get_entity("a.b.e")  # doctest: +SKIP
        'f'

    Args:
        *roots: Root directories, later roots override earlier ones
        properties: Properties available to fragments, override the file's
        properties_file: File evaluated to a mapping of base properties
        evaluators: Extension to evaluator registry (default: DEFAULT_EVALUATORS)

    Returns:
        Read-only EntityTree

    Raises:
        LoadError: If any properties file or fragment fails to load
    """
    builder = EntityTreeBuilder(evaluators)
    snapshot = builder.load_properties(properties_file, properties)
    return builder.build(roots, snapshot)
