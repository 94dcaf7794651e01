"""
Cast functions for property values.

Each cast takes a raw input value and returns its canonical form, raising
AttributeCastError when the value cannot be converted. Property validation
wraps these failures into a CastError naming the property.

Invariants:
    - Casts are pure functions of their input
    - Record identifiers are always returned as RecordId('#<cluster>:<position>')
    - String casts never return None for non-None input
"""

from __future__ import annotations

import re
import time
import uuid
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..errors import AttributeCastError

MAX_CLUSTER_ID = 32767

_RID_PATTERN = re.compile(r"^#?-?\d{1,5}:-?\d+$")
_RID_PATTERN_HASH = re.compile(r"^#-?\d{1,5}:-?\d+$")
_INTEGER_PATTERN = re.compile(r"^-?\d+$")
_WHITESPACE = re.compile(r"\s+")

_email_adapter: TypeAdapter[str] = TypeAdapter(EmailStr)


class RecordId(str):
    """Canonical record identifier ('#<cluster>:<position>')."""

    __slots__ = ()

    @property
    def cluster(self) -> int:
        return int(self[1:].split(":")[0])

    @property
    def position(self) -> int:
        return int(self.split(":")[1])

    def __repr__(self) -> str:
        return f"RecordId({str.__repr__(self)})"


def time_stamp_now() -> int:
    """Current unix epoch time in milliseconds."""
    return int(time.time() * 1000)


def looks_like_rid(rid: Any, require_hash: bool = False) -> bool:
    """Check whether a value has the shape of a record identifier.

    Example:
        >>> looks_like_rid("#4:10", require_hash=True)
        True
        >>> looks_like_rid("4:0", require_hash=True)
        False
        >>> looks_like_rid("4:0")
        True
    """
    if not isinstance(rid, str):
        return False
    pattern = _RID_PATTERN_HASH if require_hash else _RID_PATTERN
    text = rid.strip()
    if not pattern.match(text):
        return False
    return RecordId("#" + text.lstrip("#")).cluster <= MAX_CLUSTER_ID


def cast_to_rid(value: Any) -> RecordId:
    """Cast an identifier, a record carrying '@rid', or an identifier string."""
    if value is None:
        raise AttributeCastError("cannot cast null/undefined to RID", value)
    if isinstance(value, RecordId):
        return value
    if isinstance(value, Mapping) and "@rid" in value:
        return cast_to_rid(value["@rid"])
    text = str(value).strip()
    if looks_like_rid(text):
        return RecordId("#" + text.lstrip("#"))
    raise AttributeCastError(f"not a valid RID ({value})", value)


def cast_nullable_link(value: Any) -> Optional[RecordId]:
    if value is None or (isinstance(value, str) and value.strip().lower() == "null"):
        return None
    return cast_to_rid(value)


def cast_integer(value: Any) -> int:
    if isinstance(value, bool) or not _INTEGER_PATTERN.match(str(value).strip()):
        raise AttributeCastError(f"{value} is not a valid integer", value)
    return int(str(value).strip())


def cast_string(value: Any) -> str:
    """Collapse runs of whitespace and trim the ends."""
    return _WHITESPACE.sub(" ", str(value)).strip()


def cast_nullable_string(value: Any) -> Optional[str]:
    return None if value is None else cast_string(value)


def cast_lowercase_string(value: Any) -> str:
    if value is None:
        raise AttributeCastError("cannot cast null to string", value)
    return cast_string(value).lower()


def cast_lowercase_nullable_string(value: Any) -> Optional[str]:
    return None if value is None else cast_lowercase_string(value)


def cast_lowercase_non_empty_string(value: Any) -> str:
    result = cast_lowercase_string(value)
    if not result:
        raise AttributeCastError("Cannot be an empty string", value)
    return result


def cast_lowercase_non_empty_nullable_string(value: Any) -> Optional[str]:
    return None if value is None else cast_lowercase_non_empty_string(value)


def trim_string(value: Any) -> str:
    return str(value).strip()


def uppercase(value: Any) -> str:
    return str(value).strip().upper()


def identity(value: Any) -> Any:
    return value


def cast_uuid(value: Any) -> str:
    """Accept only version 4 UUID strings."""
    try:
        parsed = uuid.UUID(str(value))
    except ValueError:
        raise AttributeCastError(f"not a valid version 4 uuid {value}", value) from None
    if parsed.version != 4 or str(parsed) != str(value).lower():
        raise AttributeCastError(f"not a valid version 4 uuid {value}", value)
    return str(value)


def cast_email(value: Any) -> str:
    if not isinstance(value, str):
        raise AttributeCastError(f"Email ({value}) does not look like a valid email address", value)
    try:
        _email_adapter.validate_python(value)
    except PydanticValidationError:
        raise AttributeCastError(
            f"Email ({value}) does not look like a valid email address", value
        ) from None
    return value


def new_uuid() -> str:
    return str(uuid.uuid4())
