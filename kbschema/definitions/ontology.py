"""Ontology terms: diseases, therapies, features, publications and other curated vocabularies."""

from __future__ import annotations

from typing import Any

from ..schema.casts import cast_nullable_string
from ..schema.types import EXPOSE_READ, Permission
from .util import base_property, display_feature, display_ontology

_DATE_PATTERN = r"^\d{4}(-\d{2}(-\d{2})?)?$"

RECRUITMENT_STATUS = (
    "not yet recruiting",
    "recruiting",
    "enrolling by invitation",
    "active, not recruiting",
    "suspended",
    "terminated",
    "completed",
    "withdrawn",
    "unknown",
)


def cast_subset(item: Any) -> str:
    return str(item).strip().lower()


def name_from_source_id(record: dict[str, Any]) -> Any:
    return record.get("sourceId")


def _ontology_index(suffix: str, index_type: str, properties: list[str]) -> dict[str, Any]:
    return {
        "name": f"Ontology.{suffix}",
        "type": index_type,
        "properties": properties,
        "class": "Ontology",
    }


MODELS: dict[str, dict[str, Any]] = {
    "Ontology": {
        "routes": EXPOSE_READ,
        "inherits": ["V", "Biomarker"],
        "indices": [
            {
                "name": "Ontology.active",
                "type": "UNIQUE",
                "metadata": {"ignoreNullValues": False},
                "properties": ["source", "sourceId", "name", "deletedAt", "sourceIdVersion"],
                "class": "Ontology",
            },
            _ontology_index("source", "NOTUNIQUE_HASH_INDEX", ["source"]),
            _ontology_index("name", "NOTUNIQUE_HASH_INDEX", ["name"]),
            _ontology_index("sourceId", "NOTUNIQUE_HASH_INDEX", ["sourceId"]),
            _ontology_index("name_fulltext", "FULLTEXT", ["name"]),
            _ontology_index("sourceId_fulltext", "FULLTEXT", ["sourceId"]),
        ],
        "properties": [
            {
                "name": "source",
                "type": "link",
                "mandatory": True,
                "nullable": False,
                "linked_class": "Source",
                "description": (
                    "Link to the source (database, archive, institute, etc) from which "
                    "this record is defined"
                ),
            },
            {
                "name": "sourceId",
                "mandatory": True,
                "nullable": False,
                "non_empty": True,
                "description": "The identifier of the record/term in the external source database/system",
            },
            {
                "name": "dependency",
                "type": "link",
                "description": (
                    "Mainly for alias records. If this term is defined as a part of another "
                    "term, this should link to the original term"
                ),
            },
            {
                "name": "name",
                "nullable": False,
                "generate_default": name_from_source_id,
                "description": "Name of the term",
                "non_empty": True,
                "generation_dependencies": True,
            },
            {
                "name": "sourceIdVersion",
                "description": "The version of the identifier based on the external database/system",
            },
            {"name": "description", "type": "string", "cast": cast_nullable_string},
            {"name": "longName", "type": "string", "cast": cast_nullable_string},
            {
                "name": "subsets",
                "type": "embeddedset",
                "linked_type": "string",
                "description": "A list of names of subsets this term belongs to",
                "cast": cast_subset,
            },
            {
                "name": "deprecated",
                "type": "boolean",
                "default": False,
                "nullable": False,
                "mandatory": True,
                "description": "True when the term was deprecated by the external source",
            },
            {
                "name": "alias",
                "type": "boolean",
                "default": False,
                "nullable": False,
                "mandatory": True,
                "description": (
                    "True when the term is defined as an alias or synonym of the sourceId "
                    "attributed to it (does not have its own sourceId)"
                ),
            },
            {"name": "url", "type": "string"},
            base_property("displayName", generate_default=display_ontology),
        ],
        "is_abstract": True,
    },
    "EvidenceLevel": {
        "inherits": ["Evidence", "Ontology"],
        "description": "Evidence Classification Term",
        "properties": [
            {
                "name": "preclinical",
                "type": "boolean",
                "nullable": True,
                "mandatory": False,
                "description": "True when intended for studies on preclinical models, otherwise false or null",
            },
        ],
    },
    "ClinicalTrial": {
        "inherits": ["Evidence", "Ontology"],
        "properties": [
            {"name": "phase", "type": "string", "examples": ["1B"]},
            {"name": "size", "type": "integer", "description": "The number of participants in the trial"},
            {"name": "startDate", "type": "string", "format": "date", "pattern": _DATE_PATTERN},
            {"name": "completionDate", "type": "string", "format": "date", "pattern": _DATE_PATTERN},
            {"name": "country", "type": "string", "description": "The country the trial is held in"},
            {"name": "city", "type": "string", "description": "The city the trial is held in"},
            {
                "name": "recruitmentStatus",
                "type": "string",
                "description": "The recruitment status of the trial",
                "choices": RECRUITMENT_STATUS,
            },
            {
                "name": "location",
                "type": "string",
                "description": "Free text representation of the location of where the trial is being held",
                "cast": cast_nullable_string,
            },
        ],
        "indices": [
            {
                "name": "ClinicalTrial.active",
                "type": "UNIQUE",
                "metadata": {"ignoreNullValues": False},
                "properties": ["source", "sourceId", "sourceIdVersion", "deletedAt"],
                "class": "ClinicalTrial",
            },
        ],
    },
    "Abstract": {
        "inherits": ["Publication"],
        "description": "Abstract from a publication or conference proceeding",
        "properties": [
            {
                "name": "meeting",
                "type": "string",
                "mandatory": True,
                "nullable": False,
                "examples": ["2011 ASCO Annual Meeting"],
            },
            {
                "name": "abstractNumber",
                "type": "string",
                "mandatory": True,
                "nullable": False,
                "examples": ["10009"],
            },
        ],
        "indices": [
            {
                "name": "Abstract.activeMeetingAbstractNumber",
                "type": "UNIQUE",
                "metadata": {"ignoreNullValues": False},
                "properties": ["meeting", "abstractNumber", "deletedAt"],
                "class": "Abstract",
            },
        ],
    },
    "Publication": {
        "description": "a book, journal, manuscript, or article",
        "inherits": ["Evidence", "Ontology"],
        "properties": [
            {
                "name": "journalName",
                "description": "Name of the journal where the article was published",
                "examples": ["Bioinformatics"],
            },
            {
                "name": "year",
                "type": "integer",
                "examples": [2018],
                "description": "The year the article was published",
            },
            {"name": "doi", "type": "string", "examples": ["doi:10.1037/rmh0000008"]},
            {"name": "content", "description": "content of the publication", "type": "string"},
            {"name": "authors", "type": "string", "description": "list of authors involved in the publication"},
            {
                "name": "citation",
                "type": "string",
                "description": "citation provided by the source entity",
                "examples": ["J Clin Oncol 29: 2011 (suppl; abstr 10006)"],
            },
            {"name": "issue", "examples": ["3"]},
            {"name": "volume", "examples": ["35"]},
            {"name": "pages", "examples": ["515-517"]},
        ],
    },
    "CuratedContent": {
        "description": "Evidence which has been summarized, amalgemated, or curated by some external database/society",
        "inherits": ["Evidence", "Ontology"],
        "properties": [
            {
                "name": "year",
                "type": "integer",
                "examples": [2018],
                "description": "The year the article was published",
            },
            {"name": "doi", "type": "string", "examples": ["doi:10.1037/rmh0000008"]},
            {
                "name": "content",
                "description": "text content being referred to, stored for posterity if required",
                "type": "string",
            },
            {"name": "citation", "type": "string", "description": "citation provided by the source entity"},
        ],
    },
    "Therapy": {
        "description": "Therapy or Drug",
        "inherits": ["Ontology"],
        "properties": [
            {"name": "mechanismOfAction", "type": "string"},
            {"name": "molecularFormula", "type": "string"},
            {"name": "iupacName", "type": "string"},
            {"name": "combinationType", "type": "string", "choices": ["sequential", "combination"]},
        ],
    },
    "Feature": {
        "description": "Biological Feature. Can be a gene, protein, etc.",
        "inherits": ["Ontology"],
        "properties": [
            {"name": "start", "type": "integer"},
            {"name": "end", "type": "integer"},
            {
                "name": "biotype",
                "mandatory": True,
                "nullable": False,
                "description": "The biological type of the feature",
                "choices": ["gene", "protein", "transcript", "exon", "chromosome"],
                "examples": ["gene"],
            },
            base_property("displayName", generate_default=display_feature),
        ],
    },
    "AnatomicalEntity": {
        "description": "Physiological structures such as body parts or tissues",
        "inherits": ["Ontology"],
    },
    "Disease": {
        "description": (
            "a disorder of structure or function in an organism that produces specific signs "
            "or symptoms or that affects a specific location"
        ),
        "inherits": ["Ontology"],
    },
    "Pathway": {
        "description": "Primarily describes biological pathways",
        "inherits": ["Ontology"],
    },
    "Signature": {
        "description": "Characteristic pattern of mutations or changes",
        "inherits": ["Ontology"],
        "properties": [
            {"name": "aetiology", "type": "string", "cast": cast_nullable_string},
        ],
    },
    "Vocabulary": {
        "permissions": {
            "default": Permission.READ,
            "admin": Permission.ALL,
            "manager": Permission.ALL,
        },
        "description": (
            "Curated list of terms used in classifying variants or assigning relevance "
            "to statements"
        ),
        "inherits": ["Ontology"],
        "properties": [
            {
                "name": "shortName",
                "type": "string",
                "description": (
                    "a shortened form of the vocabulary term. Generally this is used for "
                    "variantClass type records line del for deletion"
                ),
            },
        ],
    },
}
