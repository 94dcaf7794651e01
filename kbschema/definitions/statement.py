"""Statements and their embedded reviews."""

from __future__ import annotations

from typing import Any

from ..schema.casts import identity
from ..schema.types import EXPOSE_NONE
from .util import base_property, define_simple_index

REVIEW_STATUS = ("pending", "not required", "passed", "failed", "initial")

TEMPLATE_PLACEHOLDERS = ("{subject}", "{relevance}", "{conditions}", "{evidence}")

DEFAULT_DISPLAY_NAME_TEMPLATE = "Given {conditions} {relevance} applies to {subject} ({evidence})"


def has_template_placeholders(template: Any) -> bool:
    return isinstance(template, str) and all(p in template for p in TEMPLATE_PLACEHOLDERS)


MODELS: dict[str, dict[str, Any]] = {
    "StatementReview": {
        "description": "Review of a statement",
        "routes": EXPOSE_NONE,
        "embedded": True,
        "properties": [
            base_property("createdBy", generated=False),
            {
                "name": "status",
                "type": "string",
                "choices": REVIEW_STATUS,
                "mandatory": True,
                "nullable": False,
            },
            base_property("createdAt", generated=False),
            {"name": "comment", "type": "string"},
        ],
    },
    "Statement": {
        "description": "Decomposed sentences linking variants and ontological terms to implications and evidence",
        "inherits": ["V"],
        "properties": [
            {
                "name": "relevance",
                "type": "link",
                "linked_class": "Vocabulary",
                "mandatory": True,
                "nullable": False,
                "description": 'Adds meaning to a statement and applies to the "subject" element',
            },
            {
                "name": "subject",
                "type": "link",
                "linked_class": "Biomarker",
                "mandatory": True,
                "nullable": True,
                "description": (
                    "The subject of the statement. For example in a therapeutic efficacy "
                    "statement this would be a drug"
                ),
            },
            {
                "name": "conditions",
                "type": "linkset",
                "linked_class": "Biomarker",
                "mandatory": True,
                "nullable": False,
                "min_items": 1,
                "description": (
                    "This is the statement context. Formally it is a set of conditions which "
                    "when true result in the overall assertion of the statement"
                ),
            },
            {
                "name": "evidence",
                "type": "linkset",
                "linked_class": "Evidence",
                "mandatory": True,
                "nullable": False,
                "min_items": 1,
                "description": (
                    "One or more pieces of evidence (Literature, DB, etc) which support the "
                    "overall assertion"
                ),
            },
            {"name": "description", "type": "string"},
            {"name": "reviews", "type": "embeddedlist", "linked_class": "StatementReview"},
            {
                "name": "reviewStatus",
                "type": "string",
                "choices": REVIEW_STATUS,
                "description": (
                    "The review status of the overall statement. The amalgemated status of "
                    "all (or no) reviews"
                ),
            },
            {
                "name": "sourceId",
                "description": (
                    "If the statement is imported from an external source, this is used to "
                    "track the statement. This is not used for manually entered statements"
                ),
            },
            {
                "name": "source",
                "description": "If the statement is imported from an external source, it is linked here",
                "linked_class": "Source",
                "type": "link",
            },
            {
                "name": "evidenceLevel",
                "description": "A summarization of the supporting evidence for this statment as a category",
                "linked_class": "EvidenceLevel",
                "type": "link",
            },
            {
                "name": "displayNameTemplate",
                "description": "The template used in building the display name",
                "type": "string",
                "check": has_template_placeholders,
                "default": DEFAULT_DISPLAY_NAME_TEMPLATE,
                # keeps the placeholder case
                "cast": identity,
            },
        ],
        "indices": [
            define_simple_index("Statement", "subject", name="Statement.appliesTo"),
            define_simple_index("Statement", "relevance"),
            define_simple_index("Statement", "source"),
            define_simple_index("Statement", "evidenceLevel"),
            define_simple_index("Statement", "conditions", name="Statement.impliedBy"),
            define_simple_index("Statement", "evidence", name="Statement.supportedBy"),
            {
                "name": "Statement.active",
                "type": "UNIQUE",
                "metadata": {"ignoreNullValues": False},
                "properties": [
                    "deletedAt",
                    "subject",
                    "relevance",
                    "source",
                    "sourceId",
                    "conditions",
                    "evidence",
                ],
                "class": "Statement",
            },
        ],
    },
}
