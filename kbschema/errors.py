"""
Error types for kbschema.

This module defines all exception types raised by the schema engine:
- KbSchemaError: Base exception
- SchemaDefinitionError: Fatal problems in the declarative schema
- ModelNotFoundError: Unknown class name or route
- PropertyValidationError: A single property value violated its constraints
- RecordShapeError: A record is structurally wrong for its class

Invariants:
    - All errors inherit from KbSchemaError
    - Errors include the property/class context needed for form-style reporting
    - Registration errors are never caught inside the package
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class KbSchemaError(Exception):
    """Base exception for all kbschema errors.

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "KBSCHEMA_ERROR"
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class AttributeCastError(ValueError):
    """A cast function could not convert its input.

    Raised by the helpers in kbschema.schema.casts. Property validation
    wraps it into a CastError naming the property.
    """

    def __init__(self, message: str, value: Any = None) -> None:
        super().__init__(message)
        self.value = value


# --- Registration errors (fatal at startup) ---


class SchemaDefinitionError(KbSchemaError):
    """The declarative schema is inconsistent.

    Raised when:
    - A class name is declared twice across merged groups
    - A parent, linked class or edge endpoint does not resolve
    - The inheritance graph has a cycle
    - Class dependencies cannot be ordered
    """

    def __init__(
        self,
        message: str,
        code: str = "SCHEMA_DEFINITION_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code, details=details)


class DuplicateClassError(SchemaDefinitionError):
    """The same class name appears in more than one definition group."""

    def __init__(self, class_name: str) -> None:
        super().__init__(
            f"Invalid schema definitions. Duplicate key ({class_name})",
            code="DUPLICATE_CLASS",
            details={"class_name": class_name},
        )
        self.class_name = class_name


class UnresolvedReferenceError(SchemaDefinitionError):
    """A class refers to a class name that is not registered.

    Attributes:
        class_name: The class holding the reference
        reference: The unresolved name
        kind: What the reference is used for (parent, linked class, ...)
    """

    def __init__(self, class_name: str, reference: str, kind: str) -> None:
        super().__init__(
            f"[{class_name}] {kind} references unknown class ({reference})",
            code="UNRESOLVED_REFERENCE",
            details={"class_name": class_name, "reference": reference, "kind": kind},
        )
        self.class_name = class_name
        self.reference = reference
        self.kind = kind


class InheritanceCycleError(SchemaDefinitionError):
    """A class (indirectly) inherits from itself."""

    def __init__(self, cycle: list[str]) -> None:
        super().__init__(
            f"Inheritance cycle detected: {' -> '.join(cycle)}",
            code="INHERITANCE_CYCLE",
            details={"cycle": cycle},
        )
        self.cycle = cycle


class CyclicDependencyError(SchemaDefinitionError):
    """Class dependencies cannot be split into initialization levels."""

    def __init__(self, remaining: Dict[str, list[str]]) -> None:
        names = sorted(remaining)
        super().__init__(
            f"Unable to order classes with cyclic dependencies: {', '.join(names)}",
            code="CYCLIC_DEPENDENCY",
            details={"remaining": remaining},
        )
        self.remaining = remaining


# --- Lookup errors ---


class ModelNotFoundError(KbSchemaError):
    """No class matches the given name, record or route."""

    def __init__(self, message: str, lookup: Any = None) -> None:
        super().__init__(message, code="MODEL_NOT_FOUND", details={"lookup": lookup})
        self.lookup = lookup


# --- Validation errors (recoverable) ---


class PropertyValidationError(KbSchemaError):
    """A property value violated one of its constraints.

    Attributes:
        field_name: The property being validated
        value: The offending value (if applicable)
        constraint: The violated constraint value (bound, pattern, choices, ...)
        class_name: The class being formatted, set by the record formatter
    """

    code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        value: Any = None,
        constraint: Any = None,
    ) -> None:
        super().__init__(
            message,
            code=type(self).code,
            details={"field": field_name, "value": value, "constraint": constraint},
        )
        self.field_name = field_name
        self.value = value
        self.constraint = constraint
        self.class_name: Optional[str] = None

    def in_class(self, class_name: str) -> PropertyValidationError:
        """Tag the error with the class whose record failed.

        Only the innermost class is recorded so that errors raised while
        formatting an embedded record keep pointing at the embedded class.
        """
        if self.class_name is None:
            self.class_name = class_name
            self.details["class_name"] = class_name
            self.message = f"[{class_name}] {self.message}"
            self.args = (self.message,)
        return self


class CardinalityError(PropertyValidationError):
    """Wrong number of values (non-iterable given many, min/max items)."""

    code = "CARDINALITY_ERROR"


class NullValueError(PropertyValidationError):
    """Null given for a non-nullable property."""

    code = "NULL_VALUE"


class CastError(PropertyValidationError):
    """The property's cast function rejected the value."""

    code = "CAST_ERROR"


class EmptyValueError(PropertyValidationError):
    """Empty string given for a non-empty property."""

    code = "EMPTY_VALUE"


class BoundError(PropertyValidationError):
    """Value below the minimum or above the maximum."""

    code = "BOUND_ERROR"


class PatternError(PropertyValidationError):
    """Value does not match the property pattern."""

    code = "PATTERN_ERROR"


class ChoiceError(PropertyValidationError):
    """Value is not one of the enumerated choices."""

    code = "CHOICE_ERROR"


class CheckError(PropertyValidationError):
    """The custom check predicate returned false."""

    code = "CHECK_ERROR"


# --- Record shape errors (recoverable) ---


class RecordShapeError(KbSchemaError):
    """A record is structurally invalid for its class.

    Attributes:
        class_name: The class being formatted
        field_name: The attribute involved (if applicable)
    """

    code = "RECORD_SHAPE_ERROR"

    def __init__(
        self,
        message: str,
        class_name: Optional[str] = None,
        field_name: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            code=type(self).code,
            details={"class_name": class_name, "field": field_name},
        )
        self.class_name = class_name
        self.field_name = field_name


class UnexpectedPropertyError(RecordShapeError):
    """The record has an attribute its class does not declare."""

    code = "UNEXPECTED_PROPERTY"

    def __init__(self, class_name: str, field_name: str) -> None:
        super().__init__(
            f"[{class_name}] unexpected attribute: {field_name}",
            class_name=class_name,
            field_name=field_name,
        )


class MissingPropertyError(RecordShapeError):
    """A mandatory attribute is absent after defaults were applied."""

    code = "MISSING_PROPERTY"

    def __init__(self, class_name: str, field_name: str) -> None:
        super().__init__(
            f"[{class_name}] missing required attribute {field_name}",
            class_name=class_name,
            field_name=field_name,
        )


class MissingEndpointError(MissingPropertyError):
    """An edge record is missing its in/out vertex."""

    code = "MISSING_ENDPOINT"


class EmbeddedTypeMismatchError(RecordShapeError):
    """An embedded record's @class is not the linked class or a descendant."""

    code = "EMBEDDED_TYPE_MISMATCH"

    def __init__(self, linked_class: str, actual_class: str, field_name: Optional[str] = None) -> None:
        super().__init__(
            f"A linked class was defined ({linked_class}) but the record is not "
            f"of that class or its descendants: {actual_class}",
            class_name=actual_class,
            field_name=field_name,
        )
        self.linked_class = linked_class
        self.actual_class = actual_class


class IncompleteRangeError(RecordShapeError):
    """Only the end of a start/end pair was given."""

    code = "INCOMPLETE_RANGE"

    def __init__(self, message: str = "both start and end are required to define a range") -> None:
        super().__init__(message)


class MissingClassAttributeError(RecordShapeError):
    """A structured sub-value does not carry its @class discriminator."""

    code = "MISSING_CLASS_ATTRIBUTE"

    def __init__(
        self,
        message: str = "positions must include the @class attribute to specify the position type",
    ) -> None:
        super().__init__(message)
