"""Users and user groups."""

from __future__ import annotations

from typing import Any

from ..schema.casts import cast_email, cast_lowercase_string
from ..schema.types import Permission
from .util import active_uuid, base_property


def cast_group_name(value: Any) -> Any:
    return cast_lowercase_string(value) if isinstance(value, str) else value


def _active_name(class_name: str, prop: str, ignore_nulls: bool = False) -> dict[str, Any]:
    return {
        "name": f"Active{class_name}{prop.capitalize()}",
        "type": "UNIQUE",
        "metadata": {"ignoreNullValues": ignore_nulls},
        "properties": [prop, "deletedAt"],
        "class": class_name,
    }


_ADMIN_ONLY = {"default": Permission.READ, "admin": Permission.ALL}

MODELS: dict[str, dict[str, Any]] = {
    "User": {
        "permissions": dict(_ADMIN_ONLY),
        "properties": [
            base_property("@rid"),
            base_property("@class"),
            {"name": "name", "mandatory": True, "nullable": False, "description": "The username"},
            {
                "name": "email",
                "description": "the email address to contact this user at",
                "cast": cast_email,
            },
            {
                "name": "groups",
                "type": "linkset",
                "linked_class": "UserGroup",
                "description": "Groups this user belongs to. Defines permissions for the user",
            },
            base_property("uuid"),
            base_property("createdAt"),
            base_property("createdBy", mandatory=False),
            base_property("deletedAt"),
            base_property("deletedBy"),
            base_property("history"),
            base_property("groupRestrictions"),
            {
                "name": "signedLicenseAt",
                "type": "long",
                "default": None,
                "description": "This user has read and acknowledged the terms of use as of this date",
            },
            {
                "name": "lastLoginAt",
                "type": "long",
                "description": "The timestamp at which the user last logged in",
                "nullable": True,
                "examples": [1547245339649],
            },
            {
                "name": "firstLoginAt",
                "type": "long",
                "description": "The timestamp at which the user first logged in",
                "nullable": True,
                "examples": [1547245339649],
            },
            {
                "name": "loginCount",
                "type": "integer",
                "description": "The number of times this user has logged in",
                "examples": [10],
                "nullable": True,
            },
        ],
        "indices": [
            _active_name("User", "name"),
            active_uuid("User"),
            _active_name("User", "email", ignore_nulls=True),
        ],
    },
    "UserGroup": {
        "permissions": dict(_ADMIN_ONLY),
        "description": "The role or group which users can belong to. Defines permissions",
        "properties": [
            base_property("@rid"),
            base_property("@class"),
            {"name": "name", "mandatory": True, "nullable": False, "cast": cast_group_name},
            base_property("uuid"),
            base_property("createdAt"),
            base_property("createdBy", mandatory=False),
            base_property("deletedAt"),
            base_property("deletedBy"),
            base_property("history"),
            {"name": "permissions", "type": "embedded", "linked_class": "Permissions"},
            {"name": "description"},
        ],
        "indices": [
            _active_name("UserGroup", "name"),
            active_uuid("UserGroup"),
        ],
    },
}
