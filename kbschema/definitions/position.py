"""
Embedded position classes used to describe variant breakpoints.

Positions are never stored on their own; they live inside the
break1Start/break1End/break2Start/break2End properties of positional
variants and are discriminated by their '@class'.
"""

from __future__ import annotations

from typing import Any

from ..schema.casts import uppercase
from ..schema.types import EXPOSE_NONE
from .util import base_property


def _position(properties: list[dict[str, Any]], description: str = "") -> dict[str, Any]:
    result: dict[str, Any] = {
        "routes": EXPOSE_NONE,
        "inherits": ["Position"],
        "embedded": True,
        "properties": properties,
    }
    if description:
        result["description"] = description
    return result


def _pos(description: str = "", min_value: Any = 1, **extra: Any) -> dict[str, Any]:
    prop: dict[str, Any] = {
        "name": "pos",
        "type": "integer",
        "mandatory": True,
        "nullable": True,
        **extra,
    }
    if min_value is not None:
        prop["min"] = min_value
    if description:
        prop["description"] = description
    return prop


def _offset(description: str = "") -> dict[str, Any]:
    prop: dict[str, Any] = {"name": "offset", "type": "integer", "examples": [-11]}
    if description:
        prop["description"] = description
    return prop


MODELS: dict[str, dict[str, Any]] = {
    "Position": {
        "routes": EXPOSE_NONE,
        "properties": [base_property("@class")],
        "embedded": True,
        "is_abstract": True,
    },
    "ProteinPosition": _position(
        [
            _pos("The Amino Acid number", examples=[12]),
            {
                "name": "refAA",
                "type": "string",
                "cast": uppercase,
                "examples": ["G"],
                "pattern": r"^[A-Z*?]$",
                "description": "The reference Amino Acid (single letter notation)",
            },
        ],
        description=(
            "position on a protein reference sequence. amino acid numbering is p.1, p.2, p.3, "
            "etc. from the first to the last amino acid of the reference sequence"
        ),
    ),
    "CytobandPosition": _position(
        [
            {"name": "arm", "mandatory": True, "nullable": False, "choices": ["p", "q"]},
            {"name": "majorBand", "type": "integer", "min": 1, "examples": [11]},
            {"name": "minorBand", "type": "integer", "min": 1, "examples": [1]},
        ]
    ),
    "GenomicPosition": _position([_pos("The genomic/nucleotide number")]),
    "ExonicPosition": _position([_pos("The exon number")]),
    "IntronicPosition": _position([_pos()]),
    "CdsPosition": _position(
        [_pos(min_value=None, examples=[55]), _offset()],
        description=(
            "position on a coding DNA reference sequences. nucleotide numbering is based on "
            "the annotated protein isoform, the major translation product"
        ),
    ),
    "NonCdsPosition": _position(
        [_pos(examples=[55]), _offset("distance from the nearest exon boundary (pos)")],
        description="position on a non-coding DNA reference sequence",
    ),
    "RnaPosition": _position(
        [_pos(examples=[55]), _offset("distance from the nearest cds exon boundary")],
        description=(
            "position on a RNA reference sequence. nucleotide numbering for a RNA reference "
            "sequence follows that of the associated coding or non-coding DNA reference sequence"
        ),
    ),
}
