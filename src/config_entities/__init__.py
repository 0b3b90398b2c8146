"""config-entities: Layered configuration trees built from fragment directories.

This library builds a single nested configuration tree from one or more
directories of config fragments. The directory layout becomes the key
hierarchy: ``a/b.yaml`` is loaded at coordinate ``a.b``. When both a file
``c.yaml`` and a directory ``c/`` exist, the file is loaded first and the
directory's fragments are merged over it. Later roots override earlier ones.

Fragments can read properties supplied by the application, either directly or
from a properties file. The resulting tree is read-only and supports dotted
lookups with optional fallback to ancestor entities.

Public API:
    build_entities: Build an EntityTree from root directories
    EntityTreeBuilder: Builder class with a pluggable evaluator registry
    EntityTree: Read-only mapping with get_entity/fill helpers
    PropertySnapshot: Immutable properties passed to fragments
    get_entity, fill, resolve: Dotted-path lookup functions
    DEFAULT_EVALUATORS: Default extension to evaluator registry
    EntitiesError, LoadError: Exception types

Example:
    ```python
    from config_entities import build_entities

    # entities/
    #   web.yaml          -> {port: 8080, host: "${domain}"}
    #   web/
    #     staging.yaml    -> {host: "staging.${domain}"}
    entities = build_entities("entities", properties={"domain": "example.com"})

    entities.get_entity("web.port")  # 8080

    # Fill defaults from the nearest entity that defines them
    settings = entities.fill("web.staging", {"host": None, "port": 80}, ancestry=True)
    # {"host": "staging.example.com", "port": 8080}
    ```
"""

from .builder import EntityTreeBuilder
from .builder import build_entities
from .evaluators import DEFAULT_EVALUATORS
from .exceptions import EntitiesError
from .exceptions import LoadError
from .models import FragmentEvaluator
from .models import PropertySnapshot
from .resolver import fill
from .resolver import get_entity
from .resolver import resolve
from .tree import EntityTree

__version__ = "0.1.0"

__all__ = [
    "build_entities",
    "EntityTreeBuilder",
    "EntityTree",
    "PropertySnapshot",
    "FragmentEvaluator",
    "get_entity",
    "fill",
    "resolve",
    "DEFAULT_EVALUATORS",
    "EntitiesError",
    "LoadError",
]
