"""
Shared building blocks for the default class catalogue.

Holds the base property declarations reused across classes, index helpers,
display-name generators and the breakpoint representation helpers used by
positional variants.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Optional

from ..errors import IncompleteRangeError, MissingClassAttributeError
from ..schema import casts
from .notation import break_repr

_DIGITS = re.compile(r"^\d+$")
_ACCESSION = re.compile(r"^((N[MPGR]_)|(ENS[GTP]))?\d+$", re.IGNORECASE)
_PREFIXED_REPR = re.compile(r"^[cpg]\.")


def generate_break_repr(
    start: Optional[Mapping[str, Any]], end: Optional[Mapping[str, Any]]
) -> Optional[str]:
    """Build the breakpoint representation of a start/end position pair.

    Raises:
        IncompleteRangeError: If an end is given without a start
        MissingClassAttributeError: If a position has no '@class'
    """
    if start is None:
        if end is None:
            return None
        raise IncompleteRangeError()
    if not start.get("@class") or (end is not None and not end.get("@class")):
        raise MissingClassAttributeError()
    return break_repr(start, end)


def cast_break_repr(repr_: Any) -> str:
    """Normalize case: the position part of c., p. and g. notation is uppercase."""
    text = str(repr_)
    if _PREFIXED_REPR.match(text):
        return f"{text[:2]}{text[2:].upper()}"
    return text.lower()


def define_simple_index(model: str, prop: str, name: Optional[str] = None) -> dict[str, Any]:
    return {
        "name": name or f"{model}.{prop}",
        "type": "NOTUNIQUE",
        "properties": [prop],
        "class": model,
    }


def active_uuid(class_name: str) -> dict[str, Any]:
    return {
        "name": f"Active{class_name}UUID",
        "type": "UNIQUE",
        "metadata": {"ignoreNullValues": False},
        "properties": ["uuid", "deletedAt"],
        "class": class_name,
    }


def _source_name(source: Any) -> str:
    if isinstance(source, Mapping):
        return str(source.get("displayName") or source.get("@rid") or "")
    return str(source or "")


def display_ontology(record: Mapping[str, Any]) -> str:
    """Display name of an ontology term.

    Example:
        >>> display_ontology({"name": "kras", "sourceId": "hgnc:6407"})
        'kras [HGNC:6407]'
    """
    name = record.get("name") or ""
    source_id = record.get("sourceId") or ""
    if not source_id:
        return name
    if not name and _DIGITS.match(source_id):
        return f"{_source_name(record.get('source'))}:{source_id}"
    if source_id == name:
        return source_id
    return f"{name} [{source_id.upper()}]"


def display_feature(record: Mapping[str, Any]) -> str:
    """Display name of a feature (gene, transcript, ...).

    Example:
        >>> display_feature({"name": "kras", "sourceId": "hgnc:6407"})
        'KRAS'
        >>> display_feature({"sourceId": "enst00000311936", "sourceIdVersion": "8"})
        'ENST00000311936.8'
    """
    name = record.get("name") or ""
    source_id = record.get("sourceId") or ""
    version = record.get("sourceIdVersion") or ""
    if source_id.startswith("hgnc:"):
        return name.upper()
    if _DIGITS.match(source_id):
        return name
    if version and _DIGITS.match(str(version)):
        return f"{source_id.upper()}.{version}"
    if _ACCESSION.match(source_id):
        return source_id.upper()
    return source_id or name


def display_name_from_record(record: Mapping[str, Any]) -> Optional[str]:
    return record.get("name") or None


BASE_PROPERTIES: dict[str, dict[str, Any]] = {
    "@rid": {
        "name": "@rid",
        "pattern": r"^#\d+:\d+$",
        "description": "The record identifier",
        "cast": casts.cast_to_rid,
        "generated": True,
    },
    "@class": {
        "name": "@class",
        "description": "The database class this record belongs to",
        "cast": casts.trim_string,
        "generated": False,
    },
    "uuid": {
        "name": "uuid",
        "type": "string",
        "mandatory": True,
        "nullable": False,
        "read_only": True,
        "description": "Internal identifier for tracking record history",
        "cast": casts.cast_uuid,
        "default": casts.new_uuid,
        "generated": True,
        "examples": ["4198e211-e761-4771-b6f8-dadbcc44e9b9"],
    },
    "createdAt": {
        "name": "createdAt",
        "type": "long",
        "mandatory": True,
        "nullable": False,
        "description": "The timestamp at which the record was created",
        "default": casts.time_stamp_now,
        "generated": True,
        "examples": [1547245339649],
    },
    "updatedAt": {
        "name": "updatedAt",
        "type": "long",
        "mandatory": True,
        "nullable": False,
        "description": "The timestamp at which the record was last updated",
        "default": casts.time_stamp_now,
        "generated": True,
        "examples": [1547245339649],
    },
    "updatedBy": {
        "name": "updatedBy",
        "type": "link",
        "mandatory": True,
        "nullable": False,
        "linked_class": "User",
        "description": "The user who last updated the record",
        "generated": True,
        "examples": ["#31:1"],
    },
    "deletedAt": {
        "name": "deletedAt",
        "type": "long",
        "description": "The timestamp at which the record was deleted",
        "nullable": False,
        "generated": True,
        "examples": [1547245339649],
    },
    "createdBy": {
        "name": "createdBy",
        "type": "link",
        "mandatory": True,
        "nullable": False,
        "linked_class": "User",
        "description": "The user who created the record",
        "generated": True,
        "examples": ["#31:1"],
    },
    "deletedBy": {
        "name": "deletedBy",
        "type": "link",
        "linked_class": "User",
        "nullable": False,
        "description": "The user who deleted the record",
        "generated": True,
        "examples": ["#31:1"],
    },
    "history": {
        "name": "history",
        "type": "link",
        "nullable": False,
        "description": "Link to the previous version of this record",
        "generated": True,
        "examples": ["#31:1"],
    },
    "groupRestrictions": {
        "name": "groupRestrictions",
        "type": "linkset",
        "linked_class": "UserGroup",
        "description": "user groups allowed to interact with this record",
        "examples": [["#33:1", "#33:2"]],
    },
    "in": {
        "name": "in",
        "type": "link",
        "description": "The record ID of the vertex the edge goes into, the target/destination vertex",
        "mandatory": True,
        "nullable": False,
    },
    "out": {
        "name": "out",
        "type": "link",
        "description": "The record ID of the vertex the edge comes from, the source vertex",
        "mandatory": True,
        "nullable": False,
    },
    "displayName": {
        "name": "displayName",
        "type": "string",
        "description": "Optional string used for display in the web application. Can be overwritten w/o tracking",
        "default": display_name_from_record,
        "generation_dependencies": True,
        "cast": casts.cast_string,
    },
}


def base_property(name: str, **overrides: Any) -> dict[str, Any]:
    """Copy of a base property declaration with some options replaced."""
    return {**BASE_PROPERTIES[name], **overrides}
