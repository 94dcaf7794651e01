"""
Default class catalogue for the knowledge base.

Declares the vertex, edge and embedded classes of the knowledge base as
plain data and builds them into a registry.

Invariants:
    - Class names are unique across all definition groups
    - The catalogue is built once per process by get_default_schema()

How to change safely:
    - Add new classes to the group module they belong to
    - Run the schema CLI 'levels' command to check the new class orders cleanly
    - Watch the registry fingerprint in deployment logs for unexpected drift

Example:
    >>> from kbschema.definitions import get_default_schema
    >>> schema = get_default_schema()
    >>> schema.get_from_route("/therapies").name
    'Therapy'
"""

from __future__ import annotations

import threading
from typing import Optional

from ..config import Settings
from ..schema.builder import initialize_schema, merge_definitions
from ..schema.registry import SchemaRegistry
from ..schema.types import ClassDef
from . import base, edges, ontology, position, statement, user, variant
from .statement import REVIEW_STATUS

_default_schema: Optional[SchemaRegistry] = None
_schema_lock = threading.Lock()


def build_definitions() -> dict[str, ClassDef]:
    """Build every class definition of the default catalogue.

    Raises:
        DuplicateClassError: If two groups declare the same class
    """
    return initialize_schema(
        merge_definitions(
            base.MODELS,
            edges.MODELS,
            position.MODELS,
            statement.MODELS,
            variant.MODELS,
            user.MODELS,
            ontology.MODELS,
        )
    )


def load_default_schema(settings: Optional[Settings] = None) -> SchemaRegistry:
    """Build a new registry holding the default catalogue."""
    settings = settings or Settings()
    return SchemaRegistry(build_definitions(), bootstrap_classes=settings.bootstrap_classes)


def get_default_schema() -> SchemaRegistry:
    """Get the process-wide default schema registry.

    The registry is built on first use and shared afterwards.
    """
    global _default_schema
    with _schema_lock:
        if _default_schema is None:
            _default_schema = load_default_schema()
        return _default_schema


__all__ = [
    "REVIEW_STATUS",
    "build_definitions",
    "get_default_schema",
    "load_default_schema",
]
