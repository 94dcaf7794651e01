"""
Unit tests for formatting records against the default catalogue.

Tests cover:
- Positional variants and generated breakpoint notation
- Ontology terms with generated names and display names
- Users, groups and embedded permissions
- Statements, reviews and edges
"""

import pytest

from kbschema.errors import (
    BoundError,
    CardinalityError,
    CastError,
    CheckError,
    ChoiceError,
    EmbeddedTypeMismatchError,
    IncompleteRangeError,
    MissingClassAttributeError,
    MissingEndpointError,
    MissingPropertyError,
    PatternError,
)


@pytest.fixture
def variant(audit):
    return {
        "@class": "PositionalVariant",
        "type": "#40:1",
        "reference1": "#41:1",
        "break1Start": {"@class": "ProteinPosition", "pos": "1", "refAA": "a"},
        **audit,
    }


@pytest.fixture
def disease(audit):
    return {"sourceId": "DOID:1612", "name": "Breast  Cancer", "source": "#5:1", **audit}


@pytest.fixture
def statement(audit):
    return {
        "relevance": "#10:1",
        "subject": "#11:1",
        "conditions": ["#11:1", "#12:1"],
        "evidence": ["#13:1"],
        **audit,
    }


class TestPositionalVariant:
    """Tests for positional variant records."""

    def test_single_position(self, schema, variant):
        """A single start position gives the plain notation."""
        result = schema.format_record("PositionalVariant", variant)
        assert result["break1Start"] == {"@class": "ProteinPosition", "pos": 1, "refAA": "A"}
        assert result["break1Repr"] == "p.A1"
        assert result["break2Repr"] is None

    def test_defaults_added(self, schema, variant):
        """Record-independent defaults are generated."""
        result = schema.format_record("PositionalVariant", variant)
        assert len(result["uuid"]) == 36
        assert result["updatedAt"] >= result["createdAt"]
        assert result["type"] == "#40:1"

    def test_range(self, schema, variant):
        """A start and end give the range notation."""
        variant["break1Start"] = {"@class": "ExonicPosition", "pos": 1}
        variant["break1End"] = {"@class": "ExonicPosition", "pos": 3}
        assert schema.format_record("PositionalVariant", variant)["break1Repr"] == "e.(1_3)"

    def test_second_breakpoint(self, schema, variant):
        """The second breakpoint has its own notation."""
        variant["break1Start"] = {"@class": "CytobandPosition", "arm": "P", "majorBand": 11, "minorBand": 2}
        variant["break2Start"] = {"@class": "CdsPosition", "pos": 55, "offset": -11}
        result = schema.format_record("PositionalVariant", variant)
        assert result["break1Repr"] == "y.p11.2"
        assert result["break2Repr"] == "c.55-11"

    def test_second_breakpoint_range(self, schema, variant):
        """Both breakpoints are generated independently."""
        variant["break2Start"] = {"@class": "ExonicPosition", "pos": 1}
        variant["break2End"] = {"@class": "ExonicPosition", "pos": 3}
        result = schema.format_record("PositionalVariant", variant)
        assert result["break1Repr"] == "p.A1"
        assert result["break2Repr"] == "e.(1_3)"

    def test_stale_notation_replaced(self, schema, variant):
        """Given notations are always regenerated."""
        variant["break1Repr"] = "p.G12"
        assert schema.format_record("PositionalVariant", variant)["break1Repr"] == "p.A1"

    def test_missing_reference(self, schema, variant):
        """The reference feature is mandatory."""
        del variant["reference1"]
        with pytest.raises(MissingPropertyError, match=r"\[PositionalVariant\] missing required attribute reference1"):
            schema.format_record("PositionalVariant", variant)

    def test_missing_reference_ignored(self, schema, variant):
        """Missing attributes can be tolerated for partial records."""
        del variant["reference1"]
        result = schema.format_record("PositionalVariant", variant, ignore_missing=True)
        assert "reference1" not in result
        assert result["break1Repr"] == "p.A1"

    def test_position_without_class(self, schema, variant):
        """Positions must state their class."""
        variant["break1Start"] = {"pos": 1}
        with pytest.raises(MissingClassAttributeError, match="positions must include the @class attribute"):
            schema.format_record("PositionalVariant", variant)

    def test_end_without_start(self, schema, variant):
        """A range end needs a range start."""
        variant["break2End"] = {"@class": "ExonicPosition", "pos": 3}
        with pytest.raises(IncompleteRangeError, match="both start and end are required"):
            schema.format_record("PositionalVariant", variant)

    def test_wrong_position_class(self, schema, variant):
        """Breakpoints must hold positions."""
        variant["break1Start"] = {"@class": "Disease", "pos": 1}
        with pytest.raises(EmbeddedTypeMismatchError) as exc_info:
            schema.format_record("PositionalVariant", variant)
        assert exc_info.value.linked_class == "Position"
        assert exc_info.value.actual_class == "Disease"

    def test_position_bound(self, schema, variant):
        """Position errors name the position class."""
        variant["break1Start"] = {"@class": "ProteinPosition", "pos": 0}
        with pytest.raises(
            BoundError, match=r"^\[ProteinPosition\] Violated the minimum value constraint of pos \(0 < 1\)$"
        ):
            schema.format_record("PositionalVariant", variant)

    def test_reference_amino_acid_pattern(self, schema, variant):
        """Reference amino acids are single letters."""
        variant["break1Start"] = {"@class": "ProteinPosition", "pos": 1, "refAA": "gly"}
        with pytest.raises(PatternError):
            schema.format_record("PositionalVariant", variant)

    def test_sequences_uppercased(self, schema, variant):
        """Sequences are stored uppercase."""
        variant["refSeq"] = "atgc"
        variant["untemplatedSeq"] = " ttt "
        result = schema.format_record("PositionalVariant", variant)
        assert result["refSeq"] == "ATGC"
        assert result["untemplatedSeq"] == "TTT"


class TestOntology:
    """Tests for ontology term records."""

    def test_disease(self, schema, disease):
        """Strings are normalized and display names generated."""
        result = schema.format_record("Disease", disease)
        assert result["name"] == "breast cancer"
        assert result["sourceId"] == "doid:1612"
        assert result["displayName"] == "breast cancer [DOID:1612]"
        assert result["deprecated"] is False
        assert result["alias"] is False

    def test_name_from_source_id(self, schema, disease):
        """Names default to the source identifier."""
        del disease["name"]
        result = schema.format_record("Disease", disease)
        assert result["name"] == "doid:1612"
        assert result["displayName"] == "doid:1612"

    def test_subsets_lowercased(self, schema, disease):
        """Subset names are trimmed and lowercased."""
        disease["subsets"] = ["Onco", " B "]
        assert schema.format_record("Disease", disease)["subsets"] == ["onco", "b"]

    def test_missing_source(self, schema, disease):
        """Terms need a source."""
        del disease["source"]
        with pytest.raises(MissingPropertyError, match="missing required attribute source"):
            schema.format_record("Disease", disease)

    def test_blank_source_id(self, schema, disease):
        """Blank identifiers are rejected."""
        disease["sourceId"] = "   "
        with pytest.raises(CastError, match=r"^\[Disease\] Failed casting sourceId: Cannot be an empty string"):
            schema.format_record("Disease", disease)

    def test_feature_display_name(self, schema, audit):
        """Gene display names are the uppercase symbol."""
        record = {"name": "KRAS", "sourceId": "HGNC:6407", "biotype": "Gene", "source": "#5:1", **audit}
        result = schema.format_record("Feature", record)
        assert result["name"] == "kras"
        assert result["biotype"] == "gene"
        assert result["displayName"] == "KRAS"

    def test_feature_biotype(self, schema, audit):
        """Biotypes are restricted."""
        record = {"name": "kras", "sourceId": "kras", "biotype": "thing", "source": "#5:1", **audit}
        with pytest.raises(ChoiceError, match=r"\[Feature\] Violated the choices constraint of biotype"):
            schema.format_record("Feature", record)

    def test_clinical_trial_dates(self, schema, audit):
        """Trial dates follow the year-month-day pattern."""
        record = {"sourceId": "nct1", "source": "#5:1", "startDate": "2018-01", **audit}
        assert schema.format_record("ClinicalTrial", record)["startDate"] == "2018-01"
        record["startDate"] = "Jan 2018"
        with pytest.raises(PatternError):
            schema.format_record("ClinicalTrial", record)

    def test_source_sort_default(self, schema, audit):
        """Sources sort last unless stated otherwise."""
        result = schema.format_record("Source", {"name": "Disease Ontology", **audit})
        assert result["sort"] == 99999
        assert result["displayName"] == "disease ontology"


class TestUsers:
    """Tests for users and groups."""

    def test_user(self, schema):
        """Users need only a name."""
        result = schema.format_record("User", {"name": "Someone", "email": "someone@gmail.com"})
        assert result["name"] == "someone"
        assert result["email"] == "someone@gmail.com"
        assert result["signedLicenseAt"] is None
        assert "createdBy" not in result

    def test_user_bad_email(self, schema):
        """Email addresses are checked."""
        with pytest.raises(CastError, match=r"^\[User\] Failed casting email: .*does not look like a valid email"):
            schema.format_record("User", {"name": "someone", "email": "bad"})

    def test_group_permissions(self, schema):
        """Group permissions are embedded bitmasks."""
        result = schema.format_record("UserGroup", {"name": "Admin", "permissions": {"V": 15, "Disease": "4"}})
        assert result["name"] == "admin"
        assert result["permissions"] == {"V": 15, "Disease": 4}

    def test_group_permission_bound(self, schema):
        """Permission masks cannot exceed all bits."""
        with pytest.raises(BoundError, match=r"^\[Permissions\] Violated the maximum value constraint of V \(16 > 15\)$"):
            schema.format_record("UserGroup", {"name": "admin", "permissions": {"V": 16}})


class TestStatement:
    """Tests for statements and reviews."""

    def test_default_template(self, schema, statement):
        """The display name template defaults to the standard sentence."""
        result = schema.format_record("Statement", statement)
        assert result["displayNameTemplate"] == "Given {conditions} {relevance} applies to {subject} ({evidence})"
        assert result["conditions"] == ["#11:1", "#12:1"]

    def test_null_subject(self, schema, statement):
        """The subject must be given but may be null."""
        statement["subject"] = None
        assert schema.format_record("Statement", statement)["subject"] is None
        del statement["subject"]
        with pytest.raises(MissingPropertyError):
            schema.format_record("Statement", statement)

    def test_template_placeholders(self, schema, statement):
        """Templates must use every placeholder."""
        statement["displayNameTemplate"] = "{subject} only"
        with pytest.raises(
            CheckError,
            match=r"^\[Statement\] Violated check constraint of displayNameTemplate \(has_template_placeholders\)$",
        ):
            schema.format_record("Statement", statement)

    def test_conditions_required(self, schema, statement):
        """Statements need at least one condition."""
        statement["conditions"] = []
        with pytest.raises(CardinalityError, match=r"\[Statement\] Violated the minItems constraint of conditions"):
            schema.format_record("Statement", statement)

    def test_reviews(self, schema, statement):
        """Reviews are embedded records with their own defaults."""
        statement["reviews"] = [{"status": "Passed", "createdBy": "#31:1"}]
        (review,) = schema.format_record("Statement", statement)["reviews"]
        assert review["status"] == "passed"
        assert review["createdBy"] == "#31:1"
        assert isinstance(review["createdAt"], int)

    def test_review_status(self, schema, statement):
        """Review status errors name the review class."""
        statement["reviews"] = [{"status": "maybe", "createdBy": "#31:1"}]
        with pytest.raises(ChoiceError, match=r"^\[StatementReview\]"):
            schema.format_record("Statement", statement)


class TestEdges:
    """Tests for edge records."""

    def test_alias(self, schema):
        """Edges keep their endpoints as record ids."""
        result = schema.format_record("AliasOf", {"out": "1:1", "in": "#1:2", "createdBy": "#31:1"})
        assert result["out"] == "#1:1"
        assert result["in"] == "#1:2"
        assert "uuid" in result

    def test_reverse_name(self, schema):
        """Edges can be formatted by their reverse name."""
        result = schema.format_record("HasAlias", {"out": "#1:1", "in": "#1:2", "createdBy": "#31:1"})
        assert result["in"] == "#1:2"

    def test_missing_endpoint(self, schema):
        """Edges need both endpoints."""
        with pytest.raises(MissingEndpointError, match=r"\[AliasOf\] missing required attribute out"):
            schema.format_record("AliasOf", {"in": "#1:2", "createdBy": "#31:1"})

    def test_target_of_action(self, schema):
        """TargetOf edges describe the action."""
        result = schema.format_record(
            "TargetOf", {"out": "#1:1", "in": "#1:2", "createdBy": "#31:1", "actionType": "Inhibitor"}
        )
        assert result["actionType"] == "inhibitor"
