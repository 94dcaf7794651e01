"""
Edge classes.

Every concrete edge inherits from E, connects two Ontology records unless
stated otherwise, and may cite the Source it was imported from.
"""

from __future__ import annotations

from typing import Any

from ..schema.types import EXPOSE_READ
from .util import active_uuid, base_property, define_simple_index

EDGE_NAMES = (
    "AliasOf",
    "Cites",
    "CrossReferenceOf",
    "DeprecatedBy",
    "ElementOf",
    "GeneralizationOf",
    "Infers",
    "OppositeOf",
    "SubClassOf",
    "TargetOf",
)

_OVERRIDES: dict[str, dict[str, Any]] = {
    "AliasOf": {
        "reverse_name": "HasAlias",
        "description": (
            "The source record is an equivalent representation of the target record, "
            "both of which are from the same source"
        ),
    },
    "Cites": {
        "reverse_name": "CitedBy",
        "description": "Generally refers to relationships between publications. For example, some article cites another",
    },
    "CrossReferenceOf": {
        "reverse_name": "HasCrossReference",
        "description": "The source record is an equivalent representation of the target record from a different source",
    },
    "DeprecatedBy": {
        "reverse_name": "Deprecates",
        "description": "The target record is a newer version of the source record",
    },
    "ElementOf": {
        "reverse_name": "HasElement",
        "description": "The source record is part of (or contained within) the target record",
    },
    "GeneralizationOf": {
        "reverse_name": "HasGeneralization",
        "description": "The source record is a less specific (or more general) instance of the target record",
    },
    "Infers": {
        "description": (
            "Given the source record, the target record is also expected. For example given "
            "some genomic variant we infer the protein change equivalent"
        ),
        "source_model": "Variant",
        "target_model": "Variant",
        "reverse_name": "InferredBy",
    },
    "SubClassOf": {
        "reverse_name": "HasSubclass",
        "description": "The source record is a subset of the target record",
    },
    "TargetOf": {
        "reverse_name": "HasTarget",
        "description": (
            "The source record is a target of the target record. For example some gene is "
            "the target of a particular drug"
        ),
        "properties": [
            base_property("in"),
            base_property("out"),
            {"name": "source", "type": "link", "linked_class": "Source"},
            {
                "name": "actionType",
                "description": "The type of action between the gene and drug",
                "examples": ["inhibitor"],
            },
        ],
    },
}


def _edge(name: str) -> dict[str, Any]:
    return {
        "is_edge": True,
        "inherits": ["E"],
        "source_model": "Ontology",
        "target_model": "Ontology",
        "properties": [
            base_property("in"),
            base_property("out"),
            {"name": "source", "type": "link", "linked_class": "Source"},
        ],
        # scoped to the class so the uniqueness does not apply across edge classes
        "indices": [
            {
                "name": f"{name}.restrictMultiplicity",
                "type": "UNIQUE",
                "metadata": {"ignoreNullValues": False},
                "properties": ["deletedAt", "in", "out", "source"],
                "class": name,
            }
        ],
        **_OVERRIDES.get(name, {}),
    }


MODELS: dict[str, dict[str, Any]] = {
    "E": {
        "description": "Edges",
        "routes": EXPOSE_READ,
        "is_abstract": True,
        "is_edge": True,
        "properties": [
            base_property("@rid"),
            base_property("@class"),
            base_property("uuid"),
            base_property("createdAt"),
            base_property("createdBy"),
            base_property("deletedAt"),
            base_property("deletedBy"),
            base_property("history"),
            {"name": "comment", "type": "string"},
        ],
        "indices": [active_uuid("E"), define_simple_index("E", "createdAt")],
    },
}
MODELS.update({name: _edge(name) for name in EDGE_NAMES})
