"""
kbschema - schema registry and record validation for a graph knowledge base.

The package is split into:
- kbschema.schema: the engine (properties, classes, registry, levels)
- kbschema.definitions: the default class catalogue
- kbschema.tools: the command line tool

Invariants:
    - Schemas are declared as data and built once into an immutable registry
    - Records are never mutated; formatting returns a new dict
    - Registration problems are fatal, record problems are recoverable errors

Example:
    >>> from kbschema import get_default_schema
    >>> schema = get_default_schema()
    >>> schema.get("disease").route_name
    '/diseases'
"""

from ._version import __version__
from .definitions import get_default_schema, load_default_schema
from .errors import KbSchemaError
from .schema import SchemaRegistry

__all__ = [
    "__version__",
    "KbSchemaError",
    "SchemaRegistry",
    "get_default_schema",
    "load_default_schema",
]
