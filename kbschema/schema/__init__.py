"""
Schema module for kbschema.

This module provides the schema engine, including:
- Property definitions, casting and validation
- Class definitions and the declarative builder
- The schema registry (lookup, hierarchy, record formatting)
- Dependency-ordered class levels

Invariants:
    - The engine performs no I/O
    - A registry never changes after construction
    - The engine does not depend on any particular class catalogue

How to change safely:
    - Build a new registry for every schema change
    - Compare registry fingerprints to detect schema drift
"""

from .builder import (
    build_class_definition,
    default_permissions,
    get_route_name,
    initialize_schema,
    merge_definitions,
)
from .casts import RecordId, looks_like_rid
from .levels import class_dependencies, split_class_levels
from .property import PropertyDef, create_property, validate_property
from .registry import DEFAULT_BOOTSTRAP_CLASSES, SchemaRegistry
from .types import (
    EXPOSE_ALL,
    EXPOSE_EDGE,
    EXPOSE_NONE,
    EXPOSE_READ,
    ClassDef,
    DefaultFactory,
    Expose,
    IndexDef,
    IndexType,
    Permission,
    PropertyType,
    RecordDefault,
    StaticDefault,
)

__all__ = [
    # Types
    "PropertyType",
    "Permission",
    "Expose",
    "EXPOSE_ALL",
    "EXPOSE_EDGE",
    "EXPOSE_NONE",
    "EXPOSE_READ",
    "IndexDef",
    "IndexType",
    "StaticDefault",
    "DefaultFactory",
    "RecordDefault",
    "ClassDef",
    "RecordId",
    "looks_like_rid",
    # Properties
    "PropertyDef",
    "create_property",
    "validate_property",
    # Builder
    "build_class_definition",
    "default_permissions",
    "get_route_name",
    "initialize_schema",
    "merge_definitions",
    # Registry
    "SchemaRegistry",
    "DEFAULT_BOOTSTRAP_CLASSES",
    # Levels
    "class_dependencies",
    "split_class_levels",
]
