"""
Class definition builder.

Turns declarative class descriptions (plain dicts) into frozen ClassDef
instances and assembles whole schemas from groups of descriptions.

Invariants:
    - A description never has to state derived fields (routes, permissions,
      route name, edge flag, index flags)
    - Explicitly stated fields always win over the derived ones
    - merge_definitions never silently overwrites a class

How to change safely:
    - Add new declarative keys to _CLASS_KEYS so typos are still rejected
    - Keep get_route_name stable, routes are part of the public API surface

Example:
    >>> from kbschema.schema.builder import build_class_definition
    >>> cls = build_class_definition("AliasOf", {"source_model": "Ontology", "target_model": "Ontology"})
    >>> cls.is_edge, cls.route_name, int(cls.permissions["default"])
    (True, '/aliasof', 13)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Optional, Union

from ..errors import DuplicateClassError, SchemaDefinitionError
from .property import PropertyDef, create_property
from .types import (
    EXPOSE_ALL,
    EXPOSE_EDGE,
    EXPOSE_NONE,
    ClassDef,
    Expose,
    IndexDef,
    IndexType,
    Permission,
)

logger = logging.getLogger(__name__)

PERMISSIONS_CLASS = "Permissions"

_CONSONANT_Y = re.compile(r".*[^aeiou]y$")

_CLASS_KEYS = frozenset(
    {
        "description",
        "inherits",
        "is_abstract",
        "is_edge",
        "embedded",
        "permissions",
        "routes",
        "source_model",
        "target_model",
        "reverse_name",
        "properties",
        "indices",
    }
)

_ROUTE_KEYS = {"query": "query", "get": "get", "post": "post", "patch": "patch", "delete": "delete"}

ClassDescription = Mapping[str, Any]


def get_route_name(name: str, is_edge: bool = False) -> str:
    """Derive the collection route of a class.

    Example:
        >>> get_route_name("Therapy")
        '/therapies'
        >>> get_route_name("Vocabulary")
        '/vocabulary'
        >>> get_route_name("AliasOf", is_edge=True)
        '/aliasof'
    """
    if len(name) == 1:
        return f"/{name.lower()}"
    if not is_edge and not name.endswith("ary") and name.lower() != "evidence":
        if _CONSONANT_Y.match(name):
            return f"/{name[:-1]}ies".lower()
        return f"/{name}s".lower()
    return f"/{name.lower()}"


def default_permissions(routes: Expose) -> dict[str, Permission]:
    """Derive the default and readonly permission groups from exposed routes."""
    default = Permission.NONE
    if routes.query or routes.get:
        default |= Permission.READ
    if routes.post:
        default |= Permission.CREATE
    if routes.patch:
        default |= Permission.UPDATE
    if routes.delete:
        default |= Permission.DELETE
    return {"default": default, "readonly": Permission.READ}


def _resolve_routes(
    override: Union[Expose, Mapping[str, bool], None], default: Expose
) -> Expose:
    if override is None:
        return default
    if isinstance(override, Expose):
        return override
    flags = default.to_dict()
    for key, value in override.items():
        attr = _ROUTE_KEYS.get(key.lower())
        if attr is None:
            raise SchemaDefinitionError(f"Unknown route operation ({key})")
        flags[attr.upper()] = bool(value)
    return Expose(**{key.lower(): value for key, value in flags.items()})


def _index_flags(indices: tuple[IndexDef, ...]) -> tuple[set[str], set[str]]:
    indexed: set[str] = set()
    fulltext: set[str] = set()
    for index in indices:
        if len(index.properties) != 1:
            continue
        (prop_name,) = index.properties
        if IndexType.is_exact(index.type):
            indexed.add(prop_name)
        elif IndexType.is_fulltext(index.type):
            fulltext.add(prop_name)
    return indexed, fulltext


def _build_property(
    raw: Union[PropertyDef, Mapping[str, Any]], indexed: set[str], fulltext: set[str]
) -> PropertyDef:
    if isinstance(raw, PropertyDef):
        return raw
    opts = dict(raw)
    name = opts.pop("name")
    if name in indexed:
        opts["indexed"] = True
    if name in fulltext:
        opts["fulltext_indexed"] = True
    return create_property(name, **opts)


def build_class_definition(name: str, description: Optional[ClassDescription] = None) -> ClassDef:
    """Build a complete class definition from a partial description.

    Args:
        name: Class name
        description: Declarative description (see module docstring for keys)

    Returns:
        Frozen ClassDef

    Raises:
        SchemaDefinitionError: If the description has unknown keys
    """
    description = description or {}
    unknown = set(description) - _CLASS_KEYS
    if unknown:
        raise SchemaDefinitionError(
            f"[{name}] unknown class definition keys: {', '.join(sorted(unknown))}",
            details={"class_name": name, "keys": sorted(unknown)},
        )

    is_abstract = bool(description.get("is_abstract", False))
    embedded = bool(description.get("embedded", False))
    source_model = description.get("source_model")
    target_model = description.get("target_model")
    is_edge = bool(description.get("is_edge", False)) or bool(source_model or target_model)

    if is_abstract or embedded:
        default_routes = EXPOSE_NONE
    elif is_edge:
        default_routes = EXPOSE_EDGE
    else:
        default_routes = EXPOSE_ALL
    routes = _resolve_routes(description.get("routes"), default_routes)

    permissions: dict[str, Any] = dict(default_permissions(routes))
    for group, mask in (description.get("permissions") or {}).items():
        permissions[group] = Permission(mask)

    indices = tuple(
        index if isinstance(index, IndexDef) else IndexDef.from_dict({"class": name, **index})
        for index in description.get("indices") or ()
    )
    indexed, fulltext = _index_flags(indices)

    properties: dict[str, PropertyDef] = {}
    for raw in description.get("properties") or ():
        prop = _build_property(raw, indexed, fulltext)
        properties[prop.name] = prop

    class_def = ClassDef(
        name=name,
        description=description.get("description") or "",
        inherits=tuple(description.get("inherits") or ()),
        is_abstract=is_abstract,
        embedded=embedded,
        is_edge=is_edge,
        permissions=MappingProxyType(permissions),
        routes=routes,
        indices=indices,
        reverse_name=description.get("reverse_name"),
        properties=MappingProxyType(properties),
        route_name=get_route_name(name, is_edge),
        source_model=source_model,
        target_model=target_model,
    )
    logger.debug(
        f"Built class definition: {name} (properties={len(properties)}, "
        f"edge={is_edge}, route={class_def.route_name})"
    )
    return class_def


def merge_definitions(*groups: Mapping[str, ClassDescription]) -> dict[str, ClassDescription]:
    """Merge groups of class descriptions into a single mapping.

    Raises:
        DuplicateClassError: If a class name appears in more than one group
    """
    merged: dict[str, ClassDescription] = {}
    for group in groups:
        for name, description in group.items():
            if name in merged:
                raise DuplicateClassError(name)
            merged[name] = description
    return merged


def initialize_schema(descriptions: Mapping[str, ClassDescription]) -> dict[str, ClassDef]:
    """Build every class of a schema, adding the embedded Permissions class.

    The Permissions class holds one permission bitmask property per
    non-embedded class and is used to store per-group access rights.
    """
    permission_props = [
        {
            "name": name,
            "type": "integer",
            "min": int(Permission.NONE),
            "max": int(Permission.ALL),
            "nullable": False,
            "read_only": False,
        }
        for name, description in descriptions.items()
        if name != PERMISSIONS_CLASS and not description.get("embedded")
    ]
    models: dict[str, ClassDef] = {
        PERMISSIONS_CLASS: build_class_definition(
            PERMISSIONS_CLASS,
            {"routes": EXPOSE_NONE, "embedded": True, "properties": permission_props},
        )
    }
    for name, description in descriptions.items():
        if name == PERMISSIONS_CLASS:
            continue
        models[name] = build_class_definition(name, description)
    logger.debug(f"Initialized schema with {len(models)} classes")
    return models
