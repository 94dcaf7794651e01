"""Root vertex classes and sources."""

from __future__ import annotations

from ..schema.casts import time_stamp_now
from ..schema.types import EXPOSE_READ, Permission
from .util import BASE_PROPERTIES, active_uuid, base_property, define_simple_index

_READ_WRITE = Permission.CREATE | Permission.UPDATE | Permission.READ

MODELS = {
    "V": {
        "description": "Vertices",
        "routes": EXPOSE_READ,
        "is_abstract": True,
        "properties": [
            base_property("@rid"),
            base_property("@class"),
            base_property("uuid"),
            base_property("createdAt"),
            base_property("createdBy"),
            base_property("updatedAt"),
            base_property("updatedBy"),
            base_property("deletedAt"),
            base_property("deletedBy"),
            base_property("history"),
            {"name": "comment", "type": "string"},
            base_property("groupRestrictions"),
        ],
        "indices": [
            active_uuid("V"),
            define_simple_index("V", "createdAt"),
            define_simple_index("V", "updatedAt"),
        ],
    },
    "Evidence": {
        "routes": EXPOSE_READ,
        "description": "Classes which can be used as support for statements",
        "is_abstract": True,
    },
    "Biomarker": {
        "routes": EXPOSE_READ,
        "is_abstract": True,
    },
    "Source": {
        "permissions": {
            "default": Permission.READ,
            "admin": Permission.ALL,
            "regular": _READ_WRITE,
            "manager": _READ_WRITE,
        },
        "description": (
            "External database, collection, or other authority which is used as "
            "reference for other entries"
        ),
        "inherits": ["V", "Evidence"],
        "properties": [
            {
                "name": "name",
                "mandatory": True,
                "nullable": False,
                "description": "Name of the source",
            },
            {
                "name": "longName",
                "description": "More descriptive name if applicable. May be the expansion of the name acronym",
                "examples": ["Disease Ontology (DO)"],
            },
            {"name": "version", "description": "The source version"},
            {"name": "url", "type": "string"},
            {"name": "description", "type": "string"},
            {
                "name": "usage",
                "description": "Link to the usage/licensing information associated with this source",
            },
            {"name": "license", "description": "content of the license agreement (if non-standard)"},
            {"name": "licenseType", "description": "standard license type", "examples": ["MIT"]},
            {"name": "citation", "description": "link or information about how to cite this source"},
            {
                "name": "sort",
                "description": (
                    "Used in ordering the sources for auto-complete on the front end. "
                    "Lower numbers indicate the source should be higher in the sorting"
                ),
                "examples": [1],
                "type": "integer",
                "default": 99999,
            },
            dict(BASE_PROPERTIES["displayName"]),
        ],
        "indices": [
            {
                "name": "Source.active",
                "type": "UNIQUE",
                "metadata": {"ignoreNullValues": False},
                "properties": ["name", "version", "deletedAt"],
                "class": "Source",
            },
            {
                "name": "Source.name",
                "type": "NOTUNIQUE",
                "properties": ["name"],
                "class": "Source",
            },
        ],
    },
    "LicenseAgreement": {
        "permissions": {
            "default": Permission.READ,
            "admin": Permission.ALL,
            "regular": Permission.READ,
            "manager": Permission.READ,
        },
        "properties": [
            {
                "name": "enactedAt",
                "type": "long",
                "mandatory": True,
                "nullable": False,
                "description": "The timestamp at which this terms of use was put into action",
                "default": time_stamp_now,
                "generated": True,
                "examples": [1547245339649],
            },
            {
                "name": "content",
                "type": "embeddedlist",
                "nullable": False,
                "mandatory": True,
            },
        ],
    },
}
