"""Component definition validation.

This module provides a pure validation pass over a ComponentDefinition,
detecting schema problems before a definition is registered or compiled.
Every check runs independently so one call reports every problem at once.
"""

from dataclasses import dataclass
from enum import Enum

from src.definition import BindingType, ComponentDefinition, PropertyGroup


class ValidationErrorType(str, Enum):
    """Part of the definition an error refers to."""

    FIELD = "field"
    PROPERTY = "property"
    OUTPUT = "output"


@dataclass
class ValidationError:
    """Represents a validation error in a component definition.

    Attributes:
        type: Part of the definition the error refers to.
        name: Field, property or output name (empty when unnamed).
        message: Human-readable error description.
    """

    type: ValidationErrorType
    name: str
    message: str

    def __str__(self) -> str:
        label = f' "{self.name}"' if self.name else ""
        return f"{self.type.value}{label}: {self.message}"


def validate_definition(definition: ComponentDefinition) -> list[ValidationError]:
    """Validate a ComponentDefinition for schema issues.

    Performs the following checks:
        - A title is present
        - Variants have a named variant-binding property whose menu data
          covers every declared variant
        - A tag name can be resolved (direct, through every variant, or
          through a tag-binding property with menu data)
        - Bound properties are named; tag bindings carry menu data; no
          property declares empty menu data
        - Outputs have a binding

    Args:
        definition: The definition to validate.

    Returns:
        list[ValidationError]: List of validation errors (empty if valid).

    Example:
        >>> errors = validate_definition(ComponentDefinition(id="x", tag_name="div"))
        >>> [e.name for e in errors]
        ['title']
    """
    errors: list[ValidationError] = []

    if not definition.title:
        errors.append(
            ValidationError(
                type=ValidationErrorType.FIELD,
                name="title",
                message="Missing title",
            )
        )

    errors.extend(_validate_variants(definition))
    errors.extend(_validate_tag_name(definition))

    for prop in definition.all_properties:
        errors.extend(_validate_property(prop))

    for output in definition.outputs:
        if not output.binding:
            errors.append(
                ValidationError(
                    type=ValidationErrorType.OUTPUT,
                    name=output.resolved_event_name,
                    message="Output is missing a binding",
                )
            )

    return errors


def is_valid(definition: ComponentDefinition) -> bool:
    """Check if a definition is valid.

    Convenience function that returns True if no validation errors exist.

    Args:
        definition: The definition to validate.

    Returns:
        bool: True if valid, False otherwise.
    """
    return len(validate_definition(definition)) == 0


def _validate_variants(definition: ComponentDefinition) -> list[ValidationError]:
    """Check the variant-binding property against the declared variants."""
    if not definition.has_variants:
        return []

    variant_prop = definition.variant_property()
    if variant_prop is None:
        return [
            ValidationError(
                type=ValidationErrorType.FIELD,
                name="variants",
                message="Variants require a property with a variant binding",
            )
        ]

    if not variant_prop.name:
        return [
            ValidationError(
                type=ValidationErrorType.PROPERTY,
                name="",
                message="Variant binding property is missing a name",
            )
        ]

    menu_values = [item.value for item in variant_prop.menu_data or ()]
    missing = [key for key in definition.variants if key not in menu_values]
    if not missing:
        return []

    return [
        ValidationError(
            type=ValidationErrorType.PROPERTY,
            name=variant_prop.name,
            message=f"menuData is missing entries for variants: {', '.join(missing)}",
        )
    ]


def _validate_tag_name(definition: ComponentDefinition) -> list[ValidationError]:
    """Check that a tag name can be resolved."""
    if definition.tag_name:
        return []

    if definition.has_variants and all(
        variant.tag_name for variant in definition.variants.values()
    ):
        return []

    for prop in definition.all_properties:
        if prop.binding_type == BindingType.TAG and prop.menu_data:
            return []

    return [
        ValidationError(
            type=ValidationErrorType.FIELD,
            name="tagName",
            message="Missing tag name",
        )
    ]


def _validate_property(prop: PropertyGroup) -> list[ValidationError]:
    errors: list[ValidationError] = []
    name = prop.name or ""
    is_bound = prop.binding_type not in (None, BindingType.NONE)

    if is_bound and not name:
        errors.append(
            ValidationError(
                type=ValidationErrorType.PROPERTY,
                name=name,
                message=f"Property with '{prop.binding_type}' binding is missing a name",
            )
        )

    if prop.binding_type == BindingType.TAG and prop.menu_data is None:
        errors.append(
            ValidationError(
                type=ValidationErrorType.PROPERTY,
                name=name,
                message="Tag name binding requires menuData",
            )
        )

    if prop.menu_data is not None and len(prop.menu_data) == 0:
        errors.append(
            ValidationError(
                type=ValidationErrorType.PROPERTY,
                name=name,
                message="menuData must not be empty",
            )
        )

    return errors
