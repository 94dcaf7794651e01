"""
Property constraints for kbschema classes.

A PropertyDef describes one attribute of a class: its storage type, how raw
input is cast, and which constraints the cast value must satisfy.

Invariants:
    - iterable is derived from the type, never declared
    - a cast function is always present for string, integer, long and link types
    - choices are stored in their cast (canonical) form
    - validate() is a pure function of (property, value)

Example:
    >>> from kbschema.schema.property import create_property
    >>> pos = create_property("pos", type="integer", min=1)
    >>> pos.validate("12")
    12
    >>> pos.validate(["3"])
    [3]
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union

from ..errors import (
    BoundError,
    CardinalityError,
    CastError,
    CheckError,
    ChoiceError,
    EmptyValueError,
    NullValueError,
    PatternError,
)
from . import casts
from .types import DefaultFactory, DefaultSpec, PropertyType, RecordDefault, StaticDefault

_UNSET: Any = object()

# Input containers treated as multi-valued by validate()
_LIST_SHAPES = (list, tuple, set, frozenset)


@dataclass(frozen=True)
class PropertyDef:
    """Definition of a single property of a class.

    Attributes:
        name: Property name as it appears in records
        type: Storage type
        cast: Function normalizing one (element) value
        nullable: Whether None is an acceptable value
        mandatory: Whether the property must be present after defaulting
        non_empty: Whether the empty string is rejected
        min: Minimum value (inclusive)
        max: Maximum value (inclusive)
        min_items: Minimum number of values
        max_items: Maximum number of values
        pattern: Regular expression the value's string form must contain
        choices: Allowed values (already cast)
        linked_class: Class linked or embedded by link/embedded types
        linked_type: Element type for embedded collections of scalars
        iterable: Derived from type; true for collection types
        generated: Produced by the engine; always regenerated when record-dependent
        generation_dependencies: Default needs the rest of the record
        default: Static value, zero-argument factory or record-dependent generator
        check: Extra predicate run on each cast value
        indexed: Has an exact-match single property index
        fulltext_indexed: Has a full-text single property index
    """

    name: str
    type: PropertyType = PropertyType.STRING
    cast: Optional[Callable[[Any], Any]] = None
    description: str = ""
    nullable: bool = True
    mandatory: bool = False
    non_empty: bool = False
    min: Optional[Union[int, float]] = None
    max: Optional[Union[int, float]] = None
    min_items: Optional[int] = None
    max_items: Optional[int] = None
    pattern: Optional[str] = None
    choices: Optional[tuple[Any, ...]] = None
    linked_class: Optional[str] = None
    linked_type: Optional[str] = None
    iterable: bool = False
    generated: bool = False
    generation_dependencies: bool = False
    default: DefaultSpec = None
    check: Optional[Callable[[Any], bool]] = None
    indexed: bool = False
    fulltext_indexed: bool = False
    read_only: bool = False
    format: Optional[str] = None
    examples: tuple[Any, ...] = ()
    example: Any = None

    @property
    def has_default(self) -> bool:
        """Whether a static value or zero-argument factory is available."""
        return isinstance(self.default, (StaticDefault, DefaultFactory))

    @property
    def generate_default(self) -> Optional[Union[DefaultFactory, RecordDefault]]:
        if isinstance(self.default, (DefaultFactory, RecordDefault)):
            return self.default
        return None

    def independent_default(self) -> Any:
        """Resolve a static or zero-argument default.

        Raises:
            ValueError: If the property has no such default
        """
        if isinstance(self.default, StaticDefault):
            return self.default.value
        if isinstance(self.default, DefaultFactory):
            return self.default()
        raise ValueError(f"Property '{self.name}' has no record-independent default")

    def validate(self, value: Any) -> Any:
        """Cast and check a value against this property.

        Raises:
            PropertyValidationError: subclass describing the violated constraint

        Returns:
            The cast value, a list when the input was list-shaped
        """
        return validate_property(self, value)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation (functions are omitted)."""
        result: dict[str, Any] = {
            "name": self.name,
            "type": self.type.value,
            "nullable": self.nullable,
            "mandatory": self.mandatory,
            "iterable": self.iterable,
        }
        optional = {
            "description": self.description,
            "linkedClass": self.linked_class,
            "linkedType": self.linked_type,
            "min": self.min,
            "max": self.max,
            "minItems": self.min_items,
            "maxItems": self.max_items,
            "pattern": self.pattern,
            "format": self.format,
        }
        for key, value in optional.items():
            if value is not None and value != "":
                result[key] = value
        if self.choices is not None:
            result["choices"] = list(self.choices)
        if isinstance(self.default, StaticDefault):
            result["default"] = self.default.value
        for flag in ("non_empty", "generated", "generation_dependencies", "indexed",
                     "fulltext_indexed", "read_only"):
            if getattr(self, flag):
                result[_camel(flag)] = True
        if self.examples:
            result["examples"] = list(self.examples)
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PropertyDef:
        """Create from a declarative property description."""
        return create_property(**data)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _default_cast(
    prop_type: PropertyType, nullable: bool, non_empty: bool
) -> Optional[Callable[[Any], Any]]:
    if prop_type in (PropertyType.INTEGER, PropertyType.LONG):
        return casts.cast_integer
    if prop_type == PropertyType.STRING:
        if not nullable:
            return casts.cast_lowercase_non_empty_string if non_empty else casts.cast_lowercase_string
        if non_empty:
            return casts.cast_lowercase_non_empty_nullable_string
        return casts.cast_lowercase_nullable_string
    if prop_type.is_link:
        return casts.cast_nullable_link if nullable else casts.cast_to_rid
    return None


def create_property(
    name: str,
    *,
    type: Union[str, PropertyType, None] = None,
    cast: Optional[Callable[[Any], Any]] = None,
    default: Any = _UNSET,
    generate_default: Optional[Callable[..., Any]] = None,
    description: str = "",
    nullable: Optional[bool] = None,
    mandatory: bool = False,
    non_empty: bool = False,
    min: Optional[Union[int, float]] = None,
    max: Optional[Union[int, float]] = None,
    min_items: Optional[int] = None,
    max_items: Optional[int] = None,
    pattern: Optional[str] = None,
    choices: Optional[Any] = None,
    linked_class: Optional[str] = None,
    linked_type: Optional[str] = None,
    generated: bool = False,
    generation_dependencies: bool = False,
    check: Optional[Callable[[Any], bool]] = None,
    indexed: bool = False,
    fulltext_indexed: bool = False,
    read_only: bool = False,
    format: Optional[str] = None,
    examples: Optional[Any] = None,
    example: Any = None,
) -> PropertyDef:
    """Build a PropertyDef, filling every unset option with its default.

    This is the preferred way to define properties. A callable default (or
    generate_default) receives the partially formatted record when
    generation_dependencies is set and no arguments otherwise.

    Args:
        name: Property name
        type: Storage type; 'integer' when only bounds are given, else 'string'
        cast: Cast function; chosen from the type when omitted
        default: Literal default value or a default generator
        generate_default: Default generator (takes precedence over default)
        nullable: Whether None is accepted (default True)
        choices: Allowed values, cast at construction

    Returns:
        PropertyDef instance

    Example:
        >>> arm = create_property("arm", mandatory=True, nullable=False, choices=["P", "q"])
        >>> arm.choices
        ('p', 'q')
    """
    if type is None:
        prop_type = PropertyType.INTEGER if (min is not None or max is not None) else PropertyType.STRING
    elif isinstance(type, PropertyType):
        prop_type = type
    else:
        prop_type = PropertyType.from_str(type)

    nullable = True if nullable is None else nullable

    generator = generate_default
    if generator is None and default is not _UNSET and callable(default):
        generator = default
    default_spec: DefaultSpec = None
    if generator is not None:
        default_spec = RecordDefault(generator) if generation_dependencies else DefaultFactory(generator)
    elif default is not _UNSET:
        default_spec = StaticDefault(default)

    if cast is None:
        cast = _default_cast(prop_type, nullable, non_empty)

    cast_choices: Optional[tuple[Any, ...]] = None
    if choices is not None:
        cast_choices = tuple(cast(choice) if cast else choice for choice in choices)

    examples_tuple = tuple(examples) if examples else ()
    if example is None:
        if examples_tuple:
            example = examples_tuple[0]
        elif cast_choices:
            example = cast_choices[0]

    return PropertyDef(
        name=name,
        type=prop_type,
        cast=cast,
        description=description or "",
        nullable=nullable,
        mandatory=bool(mandatory),
        non_empty=bool(non_empty),
        min=min,
        max=max,
        min_items=min_items,
        max_items=max_items,
        pattern=pattern,
        choices=cast_choices,
        linked_class=linked_class,
        linked_type=linked_type,
        iterable=prop_type.iterable,
        generated=bool(generated),
        generation_dependencies=bool(generation_dependencies),
        default=default_spec,
        check=check,
        indexed=bool(indexed),
        fulltext_indexed=bool(fulltext_indexed),
        read_only=bool(read_only),
        format=format,
        examples=examples_tuple,
        example=example,
    )


def validate_property(prop: PropertyDef, input_value: Any) -> Any:
    """Validate a value against a property, returning the cast value.

    Scalars are treated as a single element list; the shape of the input is
    preserved in the result.
    """
    list_shaped = isinstance(input_value, _LIST_SHAPES)
    values = list(input_value) if list_shaped else [input_value]

    if len(values) > 1 and not prop.iterable:
        raise CardinalityError(
            f"The {prop.name} property is not iterable but has been given multiple values",
            field_name=prop.name,
            value=input_value,
        )

    result: list[Any] = []
    for value in values:
        if value is None and not prop.nullable:
            raise NullValueError(
                f"The {prop.name} property cannot be null", field_name=prop.name
            )
        cast_value = value
        if prop.cast is not None and (not prop.nullable or value is not None):
            try:
                cast_value = prop.cast(value)
            except (ValueError, TypeError, AttributeError) as err:
                raise CastError(
                    f"Failed casting {prop.name}: {err}", field_name=prop.name, value=value
                ) from err
        result.append(cast_value)

        if prop.non_empty and cast_value == "":
            raise EmptyValueError(
                f"The {prop.name} property cannot be an empty string",
                field_name=prop.name,
                value=cast_value,
            )
        if cast_value is not None:
            _check_bounds(prop, cast_value)
            if prop.pattern and not re.search(prop.pattern, str(cast_value)):
                raise PatternError(
                    f"Violated the pattern constraint of {prop.name}. {cast_value} does "
                    f"not match the expected pattern {prop.pattern}",
                    field_name=prop.name,
                    value=cast_value,
                    constraint=prop.pattern,
                )
            if prop.choices is not None and cast_value not in prop.choices:
                raise ChoiceError(
                    f"Violated the choices constraint of {prop.name}. {cast_value} is not "
                    f"one of the expected values [{', '.join(str(c) for c in prop.choices)}]",
                    field_name=prop.name,
                    value=cast_value,
                    constraint=list(prop.choices),
                )
        if prop.check is not None and not prop.check(cast_value):
            check_name = getattr(prop.check, "__name__", "")
            suffix = f" ({check_name})" if check_name and check_name != "<lambda>" else ""
            raise CheckError(
                f"Violated check constraint of {prop.name}{suffix}",
                field_name=prop.name,
                value=cast_value,
                constraint=check_name or None,
            )

    if prop.min_items and len(result) < prop.min_items:
        raise CardinalityError(
            f"Violated the minItems constraint of {prop.name}. Less than the required "
            f"number of elements ({len(result)} < {prop.min_items})",
            field_name=prop.name,
            value=input_value,
            constraint=prop.min_items,
        )
    if prop.max_items is not None and len(result) > prop.max_items:
        raise CardinalityError(
            f"Violated the maxItems constraint of {prop.name}. More than the allowed "
            f"number of elements ({len(result)} > {prop.max_items})",
            field_name=prop.name,
            value=input_value,
            constraint=prop.max_items,
        )
    return result if list_shaped else result[0]


def _check_bounds(prop: PropertyDef, value: Any) -> None:
    try:
        if prop.min is not None and value < prop.min:
            raise BoundError(
                f"Violated the minimum value constraint of {prop.name} ({value} < {prop.min})",
                field_name=prop.name,
                value=value,
                constraint=prop.min,
            )
        if prop.max is not None and value > prop.max:
            raise BoundError(
                f"Violated the maximum value constraint of {prop.name} ({value} > {prop.max})",
                field_name=prop.name,
                value=value,
                constraint=prop.max,
            )
    except TypeError:
        raise BoundError(
            f"Unable to compare {prop.name} value ({value}) with its bounds",
            field_name=prop.name,
            value=value,
            constraint=(prop.min, prop.max),
        ) from None
