"""
Position and breakpoint notation.

Builds the HGVS-like strings used to index variant breakpoints, for
example 'p.A1' for a single protein position or 'e.(1_3)' for an exon
range.

Invariants:
    - The notation prefix is chosen by the start position's '@class'
    - A range is always written as '<prefix>.(<start>_<end>)'
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from ..errors import RecordShapeError

PREFIX_CLASS = {
    "g": "GenomicPosition",
    "i": "IntronicPosition",
    "e": "ExonicPosition",
    "p": "ProteinPosition",
    "y": "CytobandPosition",
    "c": "CdsPosition",
    "r": "RnaPosition",
    "n": "NonCdsPosition",
}

CLASS_PREFIX = {class_name: prefix for prefix, class_name in PREFIX_CLASS.items()}

_OFFSET_CLASSES = frozenset({"CdsPosition", "RnaPosition", "NonCdsPosition"})


def _pos(position: Mapping[str, Any]) -> str:
    pos = position.get("pos")
    return "?" if pos is None else str(pos)


def position_string(position: Mapping[str, Any]) -> str:
    """Notation of a single position, without the prefix.

    Example:
        >>> position_string({"@class": "ProteinPosition", "pos": 12, "refAA": "G"})
        'G12'
        >>> position_string({"@class": "CdsPosition", "pos": 55, "offset": -11})
        '55-11'
        >>> position_string({"@class": "CytobandPosition", "arm": "p", "majorBand": 11, "minorBand": 2})
        'p11.2'
    """
    class_name = position.get("@class")
    if class_name == "ProteinPosition":
        return f"{position.get('refAA') or ''}{_pos(position)}"
    if class_name in _OFFSET_CLASSES:
        offset = position.get("offset")
        if offset:
            return f"{_pos(position)}{'+' if offset > 0 else '-'}{abs(offset)}"
        return _pos(position)
    if class_name == "CytobandPosition":
        result = f"{position.get('arm', '')}"
        if position.get("majorBand") is not None:
            result += str(position["majorBand"])
            if position.get("minorBand") is not None:
                result += f".{position['minorBand']}"
        return result
    return _pos(position)


def break_repr(start: Mapping[str, Any], end: Optional[Mapping[str, Any]] = None) -> str:
    """Notation of a breakpoint, either a single position or a range.

    Raises:
        RecordShapeError: If the position class has no notation prefix
    """
    prefix = CLASS_PREFIX.get(start.get("@class"))
    if prefix is None:
        raise RecordShapeError(f"unsupported position type ({start.get('@class')})")
    if end is None:
        return f"{prefix}.{position_string(start)}"
    return f"{prefix}.({position_string(start)}_{position_string(end)})"
