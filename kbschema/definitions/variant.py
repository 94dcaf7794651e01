"""Variant classes: positional, category and catalogue variants."""

from __future__ import annotations

from typing import Any

from ..schema.casts import uppercase
from ..schema.types import EXPOSE_READ
from .util import base_property, cast_break_repr, generate_break_repr


def break1_repr(record: dict[str, Any]) -> Any:
    return generate_break_repr(record.get("break1Start"), record.get("break1End"))


def break2_repr(record: dict[str, Any]) -> Any:
    return generate_break_repr(record.get("break2Start"), record.get("break2End"))


def _reference_index(class_name: str, prop: str) -> dict[str, Any]:
    return {
        "name": f"{class_name}.{prop}",
        "type": "NOTUNIQUE_HASH_INDEX",
        "metadata": {"ignoreNullValues": True},
        "properties": [prop],
        "class": class_name,
    }


def _breakpoint(name: str, description: str, **extra: Any) -> dict[str, Any]:
    return {
        "name": name,
        "type": "embedded",
        "linked_class": "Position",
        "description": description,
        **extra,
    }


def _break_repr(name: str, generator: Any) -> dict[str, Any]:
    return {
        "name": name,
        "type": "string",
        "generation_dependencies": True,
        "generated": True,
        "default": generator,
        "cast": cast_break_repr,
    }


MODELS: dict[str, dict[str, Any]] = {
    "Variant": {
        "description": (
            "Any deviation from the norm (ex. high expression) with respect to some "
            "reference object (ex. a gene)"
        ),
        "routes": EXPOSE_READ,
        "inherits": ["V", "Biomarker"],
        "properties": [
            {
                "name": "type",
                "type": "link",
                "mandatory": True,
                "nullable": False,
                "linked_class": "Vocabulary",
                "description": "The variant classification",
            },
            {"name": "zygosity", "choices": ["heterozygous", "homozygous"]},
            {
                "name": "germline",
                "type": "boolean",
                "description": "Flag to indicate if the variant is germline (vs somatic)",
            },
        ],
        "is_abstract": True,
        "indices": [
            {
                "name": "Variant.type",
                "type": "NOTUNIQUE_HASH_INDEX",
                "properties": ["type"],
                "class": "Variant",
            },
        ],
    },
    "PositionalVariant": {
        "description": "Variants which can be described by there position on some reference sequence",
        "inherits": ["Variant"],
        "properties": [
            {
                "name": "reference1",
                "mandatory": True,
                "type": "link",
                "linked_class": "Feature",
                "nullable": False,
                "description": "Generally this is the gene which a mutation or variant is defined with respect to",
            },
            {
                "name": "reference2",
                "type": "link",
                "linked_class": "Feature",
                "description": "This is only used for variants involving more than one feature (ex. fusions)",
            },
            _breakpoint(
                "break1Start", "position of the first breakpoint", nullable=False, mandatory=True
            ),
            base_property("displayName"),
            _breakpoint(
                "break1End",
                "used in combination with break1Start to indicate the position of the first "
                "breakpoint is uncertain and must be represented with a range",
            ),
            _break_repr("break1Repr", break1_repr),
            _breakpoint("break2Start", "position of the second breakpoint"),
            _breakpoint(
                "break2End",
                "used in combination with break2Start to indicate the position of the second "
                "breakpoint is uncertain and must be represented with a range",
            ),
            _break_repr("break2Repr", break2_repr),
            {
                "name": "refSeq",
                "type": "string",
                "cast": uppercase,
                "description": "the variants reference sequence",
                "examples": ["ATGC"],
            },
            {
                "name": "untemplatedSeq",
                "type": "string",
                "cast": uppercase,
                "description": "Untemplated or alternative sequence",
            },
            {
                "name": "untemplatedSeqSize",
                "type": "integer",
                "description": (
                    "The length of the untemplated sequence. Useful when we know the number "
                    "of bases inserted but not what they are"
                ),
            },
            {
                "name": "truncation",
                "type": "integer",
                "description": "Used with frameshift mutations to indicate the position of the new stop codon",
            },
            {
                "name": "assembly",
                "type": "string",
                "pattern": r"^(hg\d+)|(grch\d+)$",
                "description": (
                    "Flag which is optionally used for genomic variants that are not linked "
                    "to a fixed assembly reference"
                ),
            },
            {
                "name": "hgvsType",
                "type": "string",
                "examples": ["delins"],
                "description": "the short form of this type to use in building an HGVS-like representation",
            },
        ],
        "indices": [
            {
                "name": "PositionalVariant.active",
                "type": "UNIQUE",
                "metadata": {"ignoreNullValues": False},
                "properties": [
                    "break1Repr",
                    "break2Repr",
                    "deletedAt",
                    "germline",
                    "refSeq",
                    "reference1",
                    "reference2",
                    "type",
                    "untemplatedSeq",
                    "untemplatedSeqSize",
                    "zygosity",
                    "truncation",
                    "assembly",
                ],
                "class": "PositionalVariant",
            },
            _reference_index("PositionalVariant", "reference1"),
            _reference_index("PositionalVariant", "reference2"),
        ],
    },
    "CategoryVariant": {
        "description": "Variants which cannot be described by a particular position and use common terms instead",
        "inherits": ["Variant"],
        "properties": [
            {
                "name": "reference1",
                "mandatory": True,
                "type": "link",
                "linked_class": "Ontology",
                "nullable": False,
                "description": "Generally this is the gene which a mutation or variant is defined with respect to",
            },
            {
                "name": "reference2",
                "type": "link",
                "linked_class": "Ontology",
                "description": "This is only used for variants involving more than one feature (ex. fusions)",
            },
            base_property("displayName"),
        ],
        "indices": [
            {
                "name": "CategoryVariant.active",
                "type": "UNIQUE",
                "metadata": {"ignoreNullValues": False},
                "properties": ["deletedAt", "germline", "reference1", "reference2", "type", "zygosity"],
                "class": "CategoryVariant",
            },
            _reference_index("CategoryVariant", "reference1"),
            _reference_index("CategoryVariant", "reference2"),
        ],
    },
    "CatalogueVariant": {
        "description": "Variant as described by an identifier in an external database/source",
        "inherits": ["Ontology"],
    },
}
