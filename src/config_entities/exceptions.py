"""Exceptions for config-entities."""

from pathlib import Path


class EntitiesError(Exception):
    """Base exception for entity tree errors."""

    pass


class LoadError(EntitiesError):
    """Error building an entity tree.

    Raised when a fragment or properties file cannot be evaluated, when a
    properties file does not yield a mapping, or when fragments conflict
    structurally. The underlying exception, if any, is chained as ``__cause__``.

    Attributes:
        path: File or directory that caused the failure
    """

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path
