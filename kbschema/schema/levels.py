"""
Topological leveling of schema classes.

Splits every class of a registry into levels so that each class only
depends on classes of earlier levels. External systems create classes
level by level.

A class depends on:
    - the linked class of each of its (merged) properties
    - all of its ancestors
    - its edge endpoint classes

Invariants:
    - Concatenated levels contain every class exactly once
    - Pinned classes form level 0 regardless of their own dependencies
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from ..errors import CyclicDependencyError

if TYPE_CHECKING:
    from .registry import SchemaRegistry

logger = logging.getLogger(__name__)


def class_dependencies(registry: SchemaRegistry) -> dict[str, set[str]]:
    """Map each class name to the names of the classes it depends on."""
    dependencies: dict[str, set[str]] = {}
    for model in registry.get_models():
        deps: set[str] = set()
        for prop in registry.get_properties(model.name).values():
            if prop.linked_class:
                deps.add(registry.get(prop.linked_class).name)
        deps.update(registry.ancestors(model.name))
        for endpoint in (model.target_model, model.source_model):
            if endpoint:
                deps.add(registry.get(endpoint).name)
        dependencies[model.name] = deps
    return dependencies


def split_class_levels(registry: SchemaRegistry, pinned: Iterable[str]) -> list[list[str]]:
    """Group class names into dependency-ordered levels.

    Args:
        registry: The schema registry
        pinned: Classes forced into the first level (unknown names are ignored)

    Returns:
        List of levels, each a sorted list of class names

    Raises:
        CyclicDependencyError: If the remaining classes depend on each other
    """
    remaining = class_dependencies(registry)
    first = sorted({registry.get(name).name for name in pinned if registry.has(name)})
    levels: list[list[str]] = []

    def strip(level: list[str]) -> None:
        levels.append(level)
        for name in level:
            del remaining[name]
        for deps in remaining.values():
            deps.difference_update(level)

    if first:
        strip(first)
    while remaining:
        level = sorted(name for name, deps in remaining.items() if not deps)
        if not level:
            raise CyclicDependencyError({name: sorted(deps) for name, deps in remaining.items()})
        strip(level)
    logger.debug(f"Split {len(registry)} classes into {len(levels)} levels")
    return levels
