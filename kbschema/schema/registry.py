"""
Schema Registry for kbschema.

The SchemaRegistry owns the complete class graph. It provides:
- Case-insensitive lookup by class name, reverse edge name or route
- Hierarchy queries (ancestors, children, descendants)
- Merged property sets (most specific declaration wins)
- Record formatting against a class

Invariants:
    - Every parent, linked class and edge endpoint resolves to a registered class
    - The inheritance graph is acyclic
    - The registry is immutable once constructed
    - Fingerprint changes when the schema changes

How to change safely:
    - Build the class mapping with kbschema.schema.builder.initialize_schema
    - Construct a new registry instead of mutating an existing one
    - Compare fingerprints before and after schema edits

Example:
    >>> from kbschema.schema import SchemaRegistry, build_class_definition
    >>> registry = SchemaRegistry({
    ...     "V": build_class_definition("V", {"is_abstract": True}),
    ...     "Disease": build_class_definition("Disease", {"inherits": ["V"]}),
    ... })
    >>> registry.ancestors("disease")
    ['V']
    >>> registry.get_from_route("/diseases").name
    'Disease'
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections import deque
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any, Optional, Union

from ..errors import (
    EmbeddedTypeMismatchError,
    InheritanceCycleError,
    MissingEndpointError,
    MissingPropertyError,
    ModelNotFoundError,
    PropertyValidationError,
    RecordShapeError,
    SchemaDefinitionError,
    UnexpectedPropertyError,
    UnresolvedReferenceError,
)
from .property import PropertyDef
from .types import ClassDef, RecordDefault

logger = logging.getLogger(__name__)

DEFAULT_BOOTSTRAP_CLASSES = ("V", "E", "User", "UserGroup")

_EDGE_ENDPOINTS = ("out", "in")


class SchemaRegistry:
    """Immutable registry of class definitions.

    Attributes:
        models: Read-only mapping of class name to definition
        fingerprint: SHA-256 hash of the canonical schema representation
        bootstrap_classes: Classes pinned to the first initialization level

    Example:
        >>> from kbschema.definitions import load_default_schema
        >>> registry = load_default_schema()
        >>> registry.children("Publication")
        ['Abstract']
    """

    def __init__(
        self,
        models: Mapping[str, ClassDef],
        bootstrap_classes: Iterable[str] = DEFAULT_BOOTSTRAP_CLASSES,
    ) -> None:
        """Link and validate a complete set of class definitions.

        Raises:
            SchemaDefinitionError: If a reverse name collides with another class
            UnresolvedReferenceError: If a class refers to an unknown class
            InheritanceCycleError: If a class inherits from itself
        """
        models_by_name: dict[str, ClassDef] = {}
        normalized: dict[str, ClassDef] = {}
        for model in models.values():
            models_by_name[model.name] = model
            normalized[model.name.lower()] = model
        for model in models.values():
            if model.reverse_name:
                existing = normalized.setdefault(model.reverse_name.lower(), model)
                if existing is not model:
                    raise SchemaDefinitionError(
                        f"[{model.name}] reverse name {model.reverse_name} is already used by {existing.name}",
                        details={"class_name": model.name, "reverse_name": model.reverse_name},
                    )

        self._models = MappingProxyType(models_by_name)
        self._normalized = MappingProxyType(normalized)
        self._link()

        subclasses: dict[str, list[str]] = {}
        for model in self._models.values():
            for parent in model.inherits:
                subclasses.setdefault(self._normalized[parent.lower()].name, []).append(model.name)
        self._subclasses = MappingProxyType({k: tuple(v) for k, v in subclasses.items()})

        self._merged_properties: dict[str, Mapping[str, PropertyDef]] = {}
        for name in self._models:
            self._merged_properties[name] = MappingProxyType(self._merge_properties(name))

        self.bootstrap_classes = tuple(
            self._normalized[name.lower()].name
            for name in bootstrap_classes
            if name.lower() in self._normalized
        )
        self._fingerprint = self._compute_fingerprint()
        logger.info(
            f"Schema registry built with {len(self._models)} classes "
            f"({len(self.get_edge_models())} edges), fingerprint={self._fingerprint}"
        )

    def _resolve(self, owner: str, reference: str, kind: str) -> None:
        if reference.lower() not in self._normalized:
            raise UnresolvedReferenceError(owner, reference, kind)

    def _link(self) -> None:
        """Check every cross-class reference and the inheritance graph."""
        for model in self._models.values():
            for parent in model.inherits:
                self._resolve(model.name, parent, "parent")
            for prop in model.properties.values():
                if prop.linked_class:
                    self._resolve(model.name, prop.linked_class, f"property {prop.name}")
            if model.source_model:
                self._resolve(model.name, model.source_model, "source model")
            if model.target_model:
                self._resolve(model.name, model.target_model, "target model")

        visited: set[str] = set()

        def visit(name: str, path: list[str]) -> None:
            if name in path:
                raise InheritanceCycleError(path[path.index(name):] + [name])
            if name in visited:
                return
            model = self._normalized[name.lower()]
            for parent in model.inherits:
                visit(self._normalized[parent.lower()].name, path + [name])
            visited.add(name)

        for name in self._models:
            visit(name, [])
        logger.debug(f"Linked {len(self._models)} class definitions")

    # --- Lookup ---

    @property
    def models(self) -> Mapping[str, ClassDef]:
        return self._models

    @property
    def fingerprint(self) -> str:
        """Schema fingerprint ('sha256:<hex>')."""
        return self._fingerprint

    def get(self, name_or_record: Any, strict: bool = True) -> Optional[ClassDef]:
        """Get a class by name, reverse name or record.

        Args:
            name_or_record: Class name (any case) or a record carrying '@class'
            strict: Raise instead of returning None when nothing matches

        Raises:
            ModelNotFoundError: In strict mode, when no class matches
        """
        class_name = name_or_record
        if isinstance(name_or_record, Mapping) and name_or_record.get("@class"):
            class_name = name_or_record["@class"]
        model = None
        if isinstance(class_name, str):
            class_name = class_name.lower()
            model = self._normalized.get(class_name)
        if model is None and strict:
            raise ModelNotFoundError(
                f"Unable to retrieve model: {class_name or name_or_record}", lookup=name_or_record
            )
        return model

    def has(self, name_or_record: Any) -> bool:
        return self.get(name_or_record, strict=False) is not None

    def get_from_route(self, route: str) -> ClassDef:
        """Get the class served at a route path.

        Raises:
            ModelNotFoundError: If no class uses this route
        """
        for model in self._models.values():
            if model.route_name == route:
                return model
        raise ModelNotFoundError(f"Missing model corresponding to route ({route})", lookup=route)

    def get_models(self) -> list[ClassDef]:
        return list(self._models.values())

    def get_edge_models(self) -> list[ClassDef]:
        return [model for model in self._models.values() if model.is_edge]

    # --- Hierarchy ---

    def ancestors(self, name: str) -> list[str]:
        """Parent class names, depth first in declaration order.

        A class reachable by more than one path appears once per path.
        """
        model = self.get(name)
        parents: list[str] = []
        for parent in model.inherits:
            parent_name = self.get(parent).name
            parents.append(parent_name)
            parents.extend(self.ancestors(parent_name))
        return parents

    def children(self, name: str) -> list[str]:
        model = self.get(name)
        return list(self._subclasses.get(model.name, ()))

    def descendants(
        self, name: str, exclude_abstract: bool = False, include_self: bool = False
    ) -> list[str]:
        """All subclass names, breadth first and without duplicates.

        Args:
            name: Class name
            exclude_abstract: Drop abstract classes from the result
            include_self: Start the result with the class itself
        """
        model = self.get(name)
        result: list[str] = [model.name] if include_self else []
        queue = deque(self.children(model.name))
        while queue:
            child = queue.popleft()
            if child in result:
                continue
            result.append(child)
            queue.extend(self.children(child))
        return [
            child for child in result
            if not exclude_abstract or not self._models[child].is_abstract
        ]

    def inherits_from(self, name: str, parent: str) -> bool:
        parent_model = self.get(parent, strict=False)
        if parent_model is None:
            return False
        return parent_model.name in self.ancestors(name)

    def inherits_property(self, name: str, prop_name: str) -> bool:
        """Check whether any ancestor declares the property."""
        model = self.get(name)
        for parent in model.inherits:
            parent_model = self.get(parent)
            if prop_name in parent_model.properties:
                return True
            if self.inherits_property(parent_model.name, prop_name):
                return True
        return False

    # --- Properties ---

    def _linearize(self, name: str) -> list[str]:
        """The class and its ancestors, every class after all of its own ancestors.

        Parents are visited last to first so that, between unrelated
        parents, the one declared first is applied last.
        """
        order: list[str] = []

        def visit(current: str) -> None:
            model = self._normalized[current.lower()]
            if model.name in order:
                return
            for parent in reversed(model.inherits):
                visit(parent)
            order.append(model.name)

        visit(name)
        return order

    def _merge_properties(self, name: str) -> dict[str, PropertyDef]:
        properties: dict[str, PropertyDef] = {}
        for class_name in self._linearize(name):
            properties.update(self._models[class_name].properties)
        return properties

    def get_properties(self, name: str) -> dict[str, PropertyDef]:
        """Own and inherited properties of a class.

        A declaration always overrides those of its own ancestors, even when
        the ancestor is also reached through another parent. Between
        unrelated parents, the parent declared first wins.
        """
        model = self.get(name)
        return dict(self._merged_properties[model.name])

    def get_property(self, name: str, prop_name: str) -> Optional[PropertyDef]:
        return self.get_properties(name).get(prop_name)

    def has_property(self, name: str, prop_name: str) -> bool:
        return self.get_property(name, prop_name) is not None

    def required_properties(self, name: str) -> list[str]:
        return [prop.name for prop in self.get_properties(name).values() if prop.mandatory]

    def optional_properties(self, name: str) -> list[str]:
        return [prop.name for prop in self.get_properties(name).values() if not prop.mandatory]

    def queryable_properties(self, name: str) -> dict[str, PropertyDef]:
        """Properties of a class and of all its subclasses.

        Subclasses are visited breadth first; the first class to declare a
        property provides its definition.
        """
        model = self.get(name)
        result = self.get_properties(model.name)
        queue = deque(self.children(model.name))
        while queue:
            current = queue.popleft()
            for prop_name, prop in self._merged_properties[current].items():
                result.setdefault(prop_name, prop)
            queue.extend(self.children(current))
        return result

    def active_properties(self, name: str) -> Optional[list[str]]:
        """Properties of the '<Class>.active' index, or None if there is none."""
        model = self.get(name)
        for index in model.indices:
            if index.name == f"{model.name}.active":
                return list(index.properties)
        return None

    # --- Records ---

    def format_record(
        self,
        name: Union[str, Mapping[str, Any]],
        record: Mapping[str, Any],
        drop_extra: bool = True,
        add_defaults: bool = True,
        ignore_missing: bool = False,
        ignore_extra: bool = False,
    ) -> dict[str, Any]:
        """Check a record against a class and return a cast copy.

        Args:
            name: Class name or a record carrying '@class'
            record: The record to format
            drop_extra: Drop attributes the class does not declare
            add_defaults: Fill defaults and generate dependent values
            ignore_missing: Do not fail on missing mandatory attributes
            ignore_extra: Do not fail on undeclared attributes

        Returns:
            A new dict holding the formatted record

        Raises:
            ModelNotFoundError: If the class does not exist
            PropertyValidationError: If a value violates its property (message prefixed by the class)
            RecordShapeError: If attributes are missing, unexpected or of the wrong embedded class
        """
        model = self.get(name)
        formatted: dict[str, Any] = {} if drop_extra else dict(record)
        properties = self._merged_properties[model.name]

        if not ignore_extra and not drop_extra:
            for attr in record:
                if model.is_edge and attr in _EDGE_ENDPOINTS:
                    continue
                if attr not in properties:
                    raise UnexpectedPropertyError(model.name, attr)

        if model.is_edge:
            for endpoint in _EDGE_ENDPOINTS:
                if record.get(endpoint):
                    formatted[endpoint] = record[endpoint]
                elif not ignore_missing:
                    raise MissingEndpointError(model.name, endpoint)

        for prop in properties.values():
            present = prop.name in record
            if add_defaults and not present and not prop.generation_dependencies and prop.has_default:
                formatted[prop.name] = prop.independent_default()
            if prop.mandatory:
                if not present and ignore_missing:
                    continue
                if present:
                    formatted[prop.name] = record[prop.name]
                if prop.name not in formatted:
                    raise MissingPropertyError(model.name, prop.name)
            elif present:
                formatted[prop.name] = record[prop.name]
            if prop.name in formatted:
                try:
                    formatted[prop.name] = prop.validate(formatted[prop.name])
                except PropertyValidationError as err:
                    raise err.in_class(model.name)

        for attr, value in list(formatted.items()):
            prop = properties.get(attr)
            if prop is None or not prop.type.is_embedded or not prop.linked_class or not value:
                continue
            if prop.iterable:
                formatted[attr] = [self._format_embedded(prop, item) for item in value]
            else:
                formatted[attr] = self._format_embedded(prop, value)

        if add_defaults:
            for prop in properties.values():
                if (
                    prop.generation_dependencies
                    and isinstance(prop.default, RecordDefault)
                    and (prop.generated or prop.name not in formatted)
                ):
                    formatted[prop.name] = prop.default(formatted)
        return formatted

    def _format_embedded(self, prop: PropertyDef, value: Any) -> dict[str, Any]:
        """Format an embedded record against the linked class or one of its descendants."""
        if not isinstance(value, Mapping):
            raise RecordShapeError(
                f"The {prop.name} property expects an embedded record but was given {value!r}",
                field_name=prop.name,
            )
        linked = self.get(prop.linked_class).name
        target = linked
        actual = value.get("@class")
        if actual and actual != linked:
            actual_model = self.get(actual, strict=False)
            if actual_model is None or linked not in self.ancestors(actual_model.name):
                raise EmbeddedTypeMismatchError(linked, actual, field_name=prop.name)
            target = actual_model.name
        return self.format_record(target, value)

    # --- Leveling ---

    def split_class_levels(self, pinned: Optional[Iterable[str]] = None) -> list[list[str]]:
        """Group class names into dependency-ordered initialization levels.

        See kbschema.schema.levels.split_class_levels.
        """
        from .levels import split_class_levels

        return split_class_levels(self, self.bootstrap_classes if pinned is None else pinned)

    # --- Serialization ---

    def _compute_fingerprint(self) -> str:
        """Compute SHA-256 fingerprint of the schema.

        Returns:
            Fingerprint string in format 'sha256:<hash>'
        """
        canonical = json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"), default=str)
        return f"sha256:{hashlib.sha256(canonical.encode('utf-8')).hexdigest()}"

    def to_dict(self) -> dict[str, Any]:
        """Convert registry to dictionary representation, classes sorted by name."""
        return {"classes": [self._models[name].to_dict() for name in sorted(self._models)]}

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Convert registry to JSON string.

        Args:
            indent: JSON indentation (None for compact)
        """
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True, default=str)

    def __contains__(self, name: object) -> bool:
        return self.has(name)

    def __len__(self) -> int:
        return len(self._models)

    def __repr__(self) -> str:
        return f"SchemaRegistry(classes={len(self._models)}, fingerprint={self._fingerprint!r})"
