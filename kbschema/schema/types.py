"""
Core type definitions for the kbschema schema system.

This module defines the foundational types for the class graph:
- PropertyType: Storage type of a single property
- Permission: Access bitmask values
- Expose: Which conventional routes a class offers
- IndexDef: Index descriptor attached to a class
- StaticDefault / DefaultFactory / RecordDefault: the three default forms
- ClassDef: A complete (built) class definition

Invariants:
    - Class names are unique case-insensitively
    - Every ClassDef has 'default' and 'readonly' permission groups
    - is_edge is true whenever source_model or target_model is set
    - Definitions are frozen once built

Example:
    >>> from kbschema.schema.builder import build_class_definition
    >>> Disease = build_class_definition("Disease", {"inherits": ["Ontology"]})
    >>> Disease.route_name
    '/diseases'
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from enum import Enum, IntFlag
from typing import TYPE_CHECKING, Any, Optional, Union

if TYPE_CHECKING:
    from .property import PropertyDef

_ITERABLE_TYPE = re.compile(r"(set|list|bag|map)", re.IGNORECASE)


class PropertyType(Enum):
    """Supported property types.

    These mirror the storage types of the backing graph database.
    """

    STRING = "string"
    LONG = "long"
    LINK = "link"
    LINKSET = "linkset"
    INTEGER = "integer"
    EMBEDDEDLIST = "embeddedlist"
    EMBEDDEDSET = "embeddedset"
    BOOLEAN = "boolean"
    EMBEDDED = "embedded"

    @classmethod
    def from_str(cls, value: str) -> PropertyType:
        """Convert string representation to PropertyType.

        Raises:
            ValueError: If value is not a valid property type
        """
        for kind in cls:
            if kind.value == value.lower():
                return kind
        valid = [k.value for k in cls]
        raise ValueError(f"Invalid property type '{value}'. Valid types: {valid}")

    @property
    def iterable(self) -> bool:
        """Whether values of this type are multi-valued containers."""
        return bool(_ITERABLE_TYPE.search(self.value))

    @property
    def is_link(self) -> bool:
        return "link" in self.value

    @property
    def is_embedded(self) -> bool:
        return self.value.startswith("embedded")


class Permission(IntFlag):
    """Permission bits for access groups.

    Example:
        >>> Permission.READ | Permission.CREATE
        <Permission.CREATE|READ: 12>
        >>> bool(Permission.READ & Permission.ALL)
        True
    """

    NONE = 0b0000
    DELETE = 0b0001
    UPDATE = 0b0010
    READ = 0b0100
    CREATE = 0b1000
    ALL = 0b1111


@dataclass(frozen=True)
class Expose:
    """Route exposure flags.

    Attributes:
        query: list/search route (GET on the collection)
        get: read route (GET by record id)
        post: create route
        patch: update route
        delete: delete route
    """

    query: bool = False
    get: bool = False
    post: bool = False
    patch: bool = False
    delete: bool = False

    def to_dict(self) -> dict[str, bool]:
        return {
            "QUERY": self.query,
            "GET": self.get,
            "POST": self.post,
            "PATCH": self.patch,
            "DELETE": self.delete,
        }


EXPOSE_ALL = Expose(query=True, get=True, post=True, patch=True, delete=True)
EXPOSE_NONE = Expose()
EXPOSE_EDGE = Expose(query=True, get=True, post=True, patch=False, delete=True)
EXPOSE_READ = Expose(query=True, get=True)


class IndexType:
    """Index type names understood by the builder."""

    UNIQUE = "UNIQUE"
    NOTUNIQUE = "NOTUNIQUE"
    NOTUNIQUE_HASH_INDEX = "NOTUNIQUE_HASH_INDEX"
    FULLTEXT = "FULLTEXT"
    FULLTEXT_HASH_INDEX = "FULLTEXT_HASH_INDEX"

    @staticmethod
    def is_exact(index_type: str) -> bool:
        return index_type == IndexType.NOTUNIQUE_HASH_INDEX

    @staticmethod
    def is_fulltext(index_type: str) -> bool:
        return index_type in (IndexType.FULLTEXT, IndexType.FULLTEXT_HASH_INDEX) or (
            "LUCENE" in index_type
        )


@dataclass(frozen=True)
class IndexDef:
    """Index descriptor.

    Attributes:
        name: Index name (by convention '<Class>.<purpose>')
        type: Uniqueness/index kind (see IndexType)
        properties: Participating property names, in order
        class_name: The class owning the index
        ignore_null_values: Null-handling metadata, None when unspecified
    """

    name: str
    type: str
    properties: tuple[str, ...]
    class_name: str
    ignore_null_values: Optional[bool] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "name": self.name,
            "type": self.type,
            "properties": list(self.properties),
            "class": self.class_name,
        }
        if self.ignore_null_values is not None:
            result["metadata"] = {"ignoreNullValues": self.ignore_null_values}
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IndexDef:
        """Create from a declarative index description."""
        ignore_nulls = data.get("ignore_null_values")
        if ignore_nulls is None and "metadata" in data:
            ignore_nulls = data["metadata"].get("ignoreNullValues")
        return cls(
            name=data["name"],
            type=data["type"],
            properties=tuple(data["properties"]),
            class_name=data.get("class_name", data.get("class", "")),
            ignore_null_values=ignore_nulls,
        )


# --- Default value forms ---


@dataclass(frozen=True)
class StaticDefault:
    """A literal default value (None is a valid literal)."""

    value: Any


@dataclass(frozen=True)
class DefaultFactory:
    """A zero-argument default generator, e.g. a timestamp or uuid factory."""

    func: Callable[[], Any]

    def __call__(self) -> Any:
        return self.func()


@dataclass(frozen=True)
class RecordDefault:
    """A default computed from the rest of the (formatted) record."""

    func: Callable[[Mapping[str, Any]], Any]

    def __call__(self, record: Mapping[str, Any]) -> Any:
        return self.func(record)


DefaultSpec = Union[StaticDefault, DefaultFactory, RecordDefault, None]


@dataclass(frozen=True, eq=False)
class ClassDef:
    """A complete class definition in the schema graph.

    Attributes:
        name: Class name (unique, case-insensitive)
        description: Human-readable description
        inherits: Ordered parent class names
        is_abstract: Abstract classes cannot have records of their own
        embedded: Embedded classes are stored inline in an owning record
        is_edge: Edge classes connect two vertices ('out' -> 'in')
        permissions: Permission bitmask per access group
        routes: Which conventional routes are exposed
        indices: Index descriptors declared on this class
        reverse_name: Alias naming the edge in the reverse direction
        properties: Own properties (inherited properties excluded)
        route_name: Derived route path
        source_model: Allowed 'out' vertex class (edges only)
        target_model: Allowed 'in' vertex class (edges only)

    Invariants:
        - properties holds only declarations made on this class
        - equality and hashing use the lowercased name
    """

    name: str
    description: str = ""
    inherits: tuple[str, ...] = ()
    is_abstract: bool = False
    embedded: bool = False
    is_edge: bool = False
    permissions: Mapping[str, int] = dataclass_field(default_factory=dict)
    routes: Expose = EXPOSE_NONE
    indices: tuple[IndexDef, ...] = ()
    reverse_name: Optional[str] = None
    properties: Mapping[str, PropertyDef] = dataclass_field(default_factory=dict)
    route_name: str = ""
    source_model: Optional[str] = None
    target_model: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation for serialization."""
        result: dict[str, Any] = {
            "name": self.name,
            "inherits": list(self.inherits),
            "isAbstract": self.is_abstract,
            "embedded": self.embedded,
            "isEdge": self.is_edge,
            "properties": {name: prop.to_dict() for name, prop in self.properties.items()},
            "permissions": {group: int(mask) for group, mask in self.permissions.items()},
            "routes": self.routes.to_dict(),
            "routeName": self.route_name,
            "indices": [index.to_dict() for index in self.indices],
        }
        if self.description:
            result["description"] = self.description
        if self.reverse_name:
            result["reverseName"] = self.reverse_name
        if self.source_model:
            result["sourceModel"] = self.source_model
        if self.target_model:
            result["targetModel"] = self.target_model
        return result

    def __hash__(self) -> int:
        """Hash based on the case-insensitive name."""
        return hash(self.name.lower())

    def __eq__(self, other: object) -> bool:
        """Equality based on the case-insensitive name."""
        if not isinstance(other, ClassDef):
            return NotImplemented
        return self.name.lower() == other.name.lower()
