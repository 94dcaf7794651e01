"""
Unit tests for dependency-ordered class levels.

Tests cover:
- The levels of the default catalogue
- Dependency ordering across levels
- Pinned classes and cyclic dependencies
"""

import pytest

from kbschema.errors import CyclicDependencyError
from kbschema.schema import SchemaRegistry, class_dependencies, initialize_schema, split_class_levels

DEFAULT_LEVELS = [
    ["E", "User", "UserGroup", "V"],
    ["Biomarker", "Evidence", "LicenseAgreement", "Permissions", "Position", "StatementReview"],
    [
        "CdsPosition",
        "CytobandPosition",
        "ExonicPosition",
        "GenomicPosition",
        "IntronicPosition",
        "NonCdsPosition",
        "ProteinPosition",
        "RnaPosition",
        "Source",
    ],
    ["Ontology"],
    [
        "AliasOf",
        "AnatomicalEntity",
        "CatalogueVariant",
        "Cites",
        "ClinicalTrial",
        "CrossReferenceOf",
        "CuratedContent",
        "DeprecatedBy",
        "Disease",
        "ElementOf",
        "EvidenceLevel",
        "Feature",
        "GeneralizationOf",
        "OppositeOf",
        "Pathway",
        "Publication",
        "Signature",
        "SubClassOf",
        "TargetOf",
        "Therapy",
        "Vocabulary",
    ],
    ["Abstract", "Statement", "Variant"],
    ["CategoryVariant", "Infers", "PositionalVariant"],
]


def make_registry(descriptions):
    return SchemaRegistry(initialize_schema(descriptions))


class TestDefaultLevels:
    """Tests for the levels of the default catalogue."""

    def test_levels(self, schema):
        """The default catalogue splits into fixed levels."""
        assert schema.split_class_levels() == DEFAULT_LEVELS

    def test_every_class_once(self, schema):
        """Concatenated levels hold every class exactly once."""
        flat = [name for level in schema.split_class_levels() for name in level]
        assert len(flat) == len(set(flat))
        assert set(flat) == set(schema.models)

    def test_dependencies_in_earlier_levels(self, schema):
        """Classes outside the first level depend only on earlier levels."""
        levels = schema.split_class_levels()
        dependencies = class_dependencies(schema)
        seen = set(levels[0])
        for level in levels[1:]:
            for name in level:
                assert dependencies[name] <= seen, name
            seen.update(level)

    def test_levels_sorted(self, schema):
        """Each level is sorted by name."""
        for level in schema.split_class_levels():
            assert level == sorted(level)

    def test_statement_dependencies(self, schema):
        """Dependencies cover links, parents and embedded classes."""
        deps = class_dependencies(schema)["Statement"]
        assert {"V", "Vocabulary", "Biomarker", "Evidence", "StatementReview", "EvidenceLevel"} <= deps

    def test_edge_dependencies(self, schema):
        """Edges depend on their endpoint classes."""
        assert "Variant" in class_dependencies(schema)["Infers"]
        assert "Ontology" in class_dependencies(schema)["AliasOf"]


class TestCustomLevels:
    """Tests for levels of small schemas."""

    def test_cycle(self):
        """Mutually linked classes cannot be ordered."""
        registry = make_registry({
            "A": {"properties": [{"name": "b", "type": "link", "linked_class": "B"}]},
            "B": {"properties": [{"name": "a", "type": "link", "linked_class": "A"}]},
        })
        with pytest.raises(CyclicDependencyError, match="A, B") as exc_info:
            registry.split_class_levels(pinned=[])
        assert exc_info.value.remaining == {"A": ["B"], "B": ["A"]}

    def test_pinned_breaks_cycle(self):
        """Pinned classes are placed first regardless of dependencies."""
        registry = make_registry({
            "A": {"properties": [{"name": "b", "type": "link", "linked_class": "B"}]},
            "B": {"properties": [{"name": "a", "type": "link", "linked_class": "A"}]},
        })
        assert registry.split_class_levels(pinned=["a"]) == [["A"], ["B", "Permissions"]]

    def test_no_pinned_classes(self):
        """Without pinned classes the first level is computed."""
        registry = make_registry({"V": {"is_abstract": True}, "Disease": {"inherits": ["V"]}})
        assert split_class_levels(registry, []) == [["Permissions", "V"], ["Disease"]]

    def test_unknown_pinned_ignored(self):
        """Pinned names that are not classes are skipped."""
        registry = make_registry({"V": {"is_abstract": True}, "Disease": {"inherits": ["V"]}})
        assert split_class_levels(registry, ["Missing"]) == [["Permissions", "V"], ["Disease"]]
