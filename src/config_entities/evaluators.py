"""Default fragment evaluators.

An evaluator turns one fragment file into a value, given the property snapshot
of the current build. The builder picks an evaluator by file extension using a
registry such as ``DEFAULT_EVALUATORS``. Applications can pass their own
registry to support other formats.

Supported by default:
    .yaml / .yml: YAML documents, with ``${name}`` property references in strings
    .py: Python scripts that assign the fragment value to ``entity``
"""

import re
import runpy
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .models import FragmentEvaluator
from .models import PropertySnapshot

PYTHON_ENTITY_NAME = "entity"

_PLACEHOLDER = re.compile(r"\$\{(?P<name>[_a-zA-Z][_a-zA-Z0-9]*)\}")


def evaluate_yaml(path: Path, properties: PropertySnapshot) -> Any:
    """Load a YAML fragment and substitute property references.

    String scalars may contain ``${name}`` placeholders. A string consisting of
    a single placeholder is replaced by the property value itself, so
    non-string properties keep their type. Any other ``$`` text, such as
    ``$5`` or ``$$``, is kept as written.

    Args:
        path: Path to YAML file
        properties: Properties of the current build

    Returns:
        Parsed value, an empty dict for an empty document

    Raises:
        yaml.YAMLError: If the file is not valid YAML
        KeyError: If a placeholder names an undefined property
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    return _substitute(data, properties)


def evaluate_python(path: Path, properties: PropertySnapshot) -> Any:
    """Execute a Python fragment and return its ``entity`` variable.

    The script runs with the snapshot bound to the global ``properties``.

    Args:
        path: Path to Python file
        properties: Properties of the current build

    Returns:
        Value of the script's module-level ``entity`` name

    Raises:
        NameError: If the script does not define ``entity``
    """
    namespace = runpy.run_path(str(path), init_globals={"properties": properties})
    if PYTHON_ENTITY_NAME not in namespace:
        raise NameError(f"fragment {path} does not define '{PYTHON_ENTITY_NAME}'")
    return namespace[PYTHON_ENTITY_NAME]


DEFAULT_EVALUATORS: dict[str, FragmentEvaluator] = {
    ".yaml": evaluate_yaml,
    ".yml": evaluate_yaml,
    ".py": evaluate_python,
}


def _substitute(value: Any, properties: PropertySnapshot) -> Any:
    """Replace ``${name}`` references in every string inside value."""
    if isinstance(value, str):
        # Whole-string placeholder keeps the property's own type
        match = _PLACEHOLDER.fullmatch(value)
        if match:
            return properties[match.group("name")]
        return _PLACEHOLDER.sub(lambda m: str(properties[m.group("name")]), value)
    if isinstance(value, Mapping):
        return {key: _substitute(item, properties) for key, item in value.items()}
    if isinstance(value, list):
        return [_substitute(item, properties) for item in value]
    return value
