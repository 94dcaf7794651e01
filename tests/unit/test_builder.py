"""
Unit tests for the class definition builder.

Tests cover:
- Route names and default routes
- Default and overridden permissions
- Index flags on properties
- Merging and initializing whole schemas
"""

import pytest

from kbschema.errors import DuplicateClassError, SchemaDefinitionError
from kbschema.schema.builder import (
    build_class_definition,
    default_permissions,
    get_route_name,
    initialize_schema,
    merge_definitions,
)
from kbschema.schema.types import (
    EXPOSE_ALL,
    EXPOSE_EDGE,
    EXPOSE_NONE,
    EXPOSE_READ,
    Expose,
    Permission,
)


class TestRouteName:
    """Tests for get_route_name."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("V", "/v"),
            ("Ontology", "/ontologies"),
            ("Therapy", "/therapies"),
            ("Vocabulary", "/vocabulary"),
            ("Evidence", "/evidence"),
            ("EvidenceLevel", "/evidencelevels"),
            ("Disease", "/diseases"),
            ("Pathway", "/pathways"),
        ],
    )
    def test_vertex_routes(self, name, expected):
        """Vertex routes are pluralized with a closed set of exceptions."""
        assert get_route_name(name) == expected

    def test_edge_routes_not_pluralized(self):
        """Edge routes are the lowercased name."""
        assert get_route_name("AliasOf", is_edge=True) == "/aliasof"
        assert get_route_name("SubClassOf", is_edge=True) == "/subclassof"


class TestDefaultPermissions:
    """Tests for default_permissions."""

    def test_all_routes(self):
        """All routes grant every permission."""
        assert default_permissions(EXPOSE_ALL) == {"default": Permission.ALL, "readonly": Permission.READ}

    def test_edge_routes(self):
        """Edges cannot be updated."""
        assert int(default_permissions(EXPOSE_EDGE)["default"]) == 13

    def test_read_routes(self):
        """Query or get routes grant read."""
        assert default_permissions(EXPOSE_READ)["default"] == Permission.READ
        assert default_permissions(Expose(get=True))["default"] == Permission.READ

    def test_no_routes(self):
        """Unexposed classes grant nothing by default."""
        perms = default_permissions(EXPOSE_NONE)
        assert perms["default"] == Permission.NONE
        assert perms["readonly"] == Permission.READ


class TestBuildClassDefinition:
    """Tests for build_class_definition."""

    def test_minimal_vertex(self):
        """A bare description gives a concrete, fully exposed vertex."""
        cls = build_class_definition("Disease")
        assert cls.inherits == ()
        assert cls.description == ""
        assert not cls.is_abstract
        assert not cls.is_edge
        assert cls.routes == EXPOSE_ALL
        assert cls.permissions["default"] == Permission.ALL
        assert cls.route_name == "/diseases"

    def test_abstract_not_exposed(self):
        """Abstract and embedded classes have no routes."""
        assert build_class_definition("A", {"is_abstract": True}).routes == EXPOSE_NONE
        assert build_class_definition("B", {"embedded": True}).routes == EXPOSE_NONE

    def test_edge_inferred_from_endpoints(self):
        """Setting an endpoint class makes the class an edge."""
        cls = build_class_definition("AliasOf", {"source_model": "Ontology", "target_model": "Ontology"})
        assert cls.is_edge
        assert cls.routes == EXPOSE_EDGE
        assert cls.route_name == "/aliasof"
        assert int(cls.permissions["default"]) == 13

    def test_explicit_routes(self):
        """Explicit routes replace the defaults and drive permissions."""
        cls = build_class_definition("V", {"is_abstract": True, "routes": EXPOSE_READ})
        assert cls.routes == EXPOSE_READ
        assert cls.permissions["default"] == Permission.READ

    def test_partial_route_override(self):
        """A mapping overrides only the stated operations."""
        cls = build_class_definition("Statement", {"routes": {"patch": False}})
        assert cls.routes == Expose(query=True, get=True, post=True, patch=False, delete=True)
        assert int(cls.permissions["default"]) == 13

    def test_unknown_route_operation(self):
        """Unknown route operations are rejected."""
        with pytest.raises(SchemaDefinitionError, match="Unknown route operation"):
            build_class_definition("A", {"routes": {"list": True}})

    def test_permission_override_merges(self):
        """Explicit groups replace only those groups."""
        cls = build_class_definition("Source", {"permissions": {"admin": 15, "default": 4}})
        assert cls.permissions == {"default": 4, "readonly": 4, "admin": 15}

    def test_properties_built(self):
        """Property declarations become PropertyDef instances."""
        cls = build_class_definition("Feature", {"properties": [{"name": "start", "type": "integer"}]})
        assert cls.properties["start"].validate("4") == 4

    def test_index_flags(self):
        """Single-property indices mark their property."""
        cls = build_class_definition(
            "Ontology",
            {
                "properties": [{"name": "name"}, {"name": "sourceId"}, {"name": "source", "type": "link"}],
                "indices": [
                    {"name": "Ontology.name", "type": "NOTUNIQUE_HASH_INDEX", "properties": ["name"]},
                    {"name": "Ontology.name_fulltext", "type": "FULLTEXT", "properties": ["name"]},
                    {"name": "Ontology.sourceId_ft", "type": "FULLTEXT_HASH_INDEX", "properties": ["sourceId"]},
                    {"name": "Ontology.active", "type": "NOTUNIQUE_HASH_INDEX", "properties": ["source", "name"]},
                ],
            },
        )
        assert cls.properties["name"].indexed
        assert cls.properties["name"].fulltext_indexed
        assert cls.properties["sourceId"].fulltext_indexed
        assert not cls.properties["sourceId"].indexed
        assert not cls.properties["source"].indexed

    def test_lucene_index_is_fulltext(self):
        """Lucene indices count as full text."""
        cls = build_class_definition(
            "A",
            {
                "properties": [{"name": "name"}],
                "indices": [{"name": "A.name", "type": "FULLTEXT_HASH_INDEX LUCENE", "properties": ["name"]}],
            },
        )
        assert cls.properties["name"].fulltext_indexed

    def test_indices_default_class(self):
        """Indices without a class belong to the class declaring them."""
        cls = build_class_definition(
            "A", {"indices": [{"name": "A.x", "type": "UNIQUE", "properties": ["x"]}]}
        )
        assert cls.indices[0].class_name == "A"

    def test_unknown_keys_rejected(self):
        """Typos in class descriptions are errors."""
        with pytest.raises(SchemaDefinitionError, match="unknown class definition keys: isAbstract"):
            build_class_definition("A", {"isAbstract": True})

    def test_definition_is_immutable(self):
        """Built definitions cannot be changed."""
        cls = build_class_definition("A")
        with pytest.raises(TypeError):
            cls.permissions["default"] = 0

    def test_equality_case_insensitive(self):
        """Class definitions compare by lowercased name."""
        assert build_class_definition("Disease") == build_class_definition("disease")
        assert hash(build_class_definition("Disease")) == hash(build_class_definition("DISEASE"))

    def test_to_dict(self):
        """Serialization uses camelCase keys and plain values."""
        data = build_class_definition("AliasOf", {"target_model": "Ontology", "reverse_name": "HasAlias"}).to_dict()
        assert data["isEdge"] is True
        assert data["reverseName"] == "HasAlias"
        assert data["permissions"]["default"] == 13
        assert data["routes"]["PATCH"] is False


class TestMergeAndInitialize:
    """Tests for merge_definitions and initialize_schema."""

    def test_merge(self):
        """Groups are merged into one mapping."""
        merged = merge_definitions({"A": {}}, {"B": {"inherits": ["A"]}})
        assert list(merged) == ["A", "B"]

    def test_merge_duplicate(self):
        """A class declared twice is an error."""
        with pytest.raises(DuplicateClassError, match=r"Invalid schema definitions. Duplicate key \(A\)"):
            merge_definitions({"A": {}}, {"B": {}}, {"A": {}})

    def test_initialize_adds_permissions_class(self):
        """Permissions holds one bitmask per non-embedded class."""
        models = initialize_schema({"V": {"is_abstract": True}, "Part": {"embedded": True}, "Disease": {}})
        permissions = models["Permissions"]
        assert permissions.embedded
        assert permissions.routes == EXPOSE_NONE
        assert set(permissions.properties) == {"V", "Disease"}
        prop = permissions.properties["Disease"]
        assert prop.min == 0
        assert prop.max == 15
        assert prop.nullable is False
        assert int(permissions.permissions["default"]) == 0

    def test_initialize_builds_every_class(self):
        """Every description is built under its own name."""
        models = initialize_schema({"V": {"is_abstract": True}, "Disease": {"inherits": ["V"]}})
        assert set(models) == {"Permissions", "V", "Disease"}
        assert models["Disease"].inherits == ("V",)
