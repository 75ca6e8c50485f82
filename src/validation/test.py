"""Tests for component definition validation."""

import pytest

from src.definition import (
    BindingType,
    ComponentDefinition,
    ComponentVariant,
    MenuItem,
    OutputProperty,
    PropertyGroup,
)

from .lib import ValidationError, ValidationErrorType, is_valid, validate_definition


def definition(**fields) -> ComponentDefinition:
    values = {"id": "chip", "title": "Chip", "tag_name": "span", **fields}
    return ComponentDefinition(**values)


def variant_prop(*values: str, name: str | None = "variant") -> PropertyGroup:
    return PropertyGroup(
        name=name,
        binding_type=BindingType.VARIANT,
        menu_data=tuple(MenuItem(value=value) for value in values),
    )


class TestValidDefinitions:
    """Tests for definitions that pass validation."""

    @pytest.mark.unit
    def test_minimal(self):
        assert validate_definition(definition()) == []
        assert is_valid(definition())

    @pytest.mark.unit
    def test_tag_from_variants(self):
        valid = definition(
            tag_name=None,
            properties=(variant_prop("a", "b"),),
            variants={"a": ComponentVariant(tag_name="b"), "b": ComponentVariant(tag_name="i")},
        )
        assert validate_definition(valid) == []

    @pytest.mark.unit
    def test_tag_from_binding(self):
        tag = PropertyGroup(
            name="level",
            binding_type=BindingType.TAG,
            menu_data=(MenuItem(value="h1"), MenuItem(value="h2")),
        )
        assert validate_definition(definition(tag_name=None, properties=(tag,))) == []


class TestFieldErrors:
    """Tests for missing definition fields."""

    @pytest.mark.unit
    def test_missing_title(self):
        errors = validate_definition(definition(title=None))
        assert errors == [
            ValidationError(type=ValidationErrorType.FIELD, name="title", message="Missing title")
        ]

    @pytest.mark.unit
    def test_missing_tag_name(self):
        errors = validate_definition(definition(tag_name=None))
        assert [e.name for e in errors] == ["tagName"]

    @pytest.mark.unit
    def test_variant_without_tag(self):
        invalid = definition(
            tag_name=None,
            properties=(variant_prop("a", "b"),),
            variants={"a": ComponentVariant(tag_name="b"), "b": ComponentVariant()},
        )
        assert [e.name for e in validate_definition(invalid)] == ["tagName"]

    @pytest.mark.unit
    def test_all_errors_reported(self):
        errors = validate_definition(ComponentDefinition(id="empty"))
        assert {e.name for e in errors} == {"title", "tagName"}


class TestVariantErrors:
    """Tests for variant declarations."""

    @pytest.mark.unit
    def test_missing_variant_binding(self):
        errors = validate_definition(definition(variants={"a": ComponentVariant()}))
        assert errors[0].name == "variants"

    @pytest.mark.unit
    def test_unnamed_variant_binding(self):
        invalid = definition(
            properties=(variant_prop("a", name=None),),
            variants={"a": ComponentVariant()},
        )
        messages = [e.message for e in validate_definition(invalid)]
        assert "Variant binding property is missing a name" in messages

    @pytest.mark.unit
    def test_menu_data_missing_variant(self):
        invalid = definition(
            properties=(variant_prop("a"),),
            variants={"a": ComponentVariant(), "b": ComponentVariant()},
        )
        errors = validate_definition(invalid)
        assert len(errors) == 1
        assert errors[0].name == "variant"
        assert "menuData" in errors[0].message
        assert errors[0].message.endswith(": b")


class TestPropertyErrors:
    """Tests for property and output checks."""

    @pytest.mark.unit
    def test_bound_property_without_name(self):
        prop = PropertyGroup(binding_type=BindingType.ATTRIBUTE)
        errors = validate_definition(definition(properties=(PropertyGroup(children=(prop,)),)))
        assert errors[0].type == ValidationErrorType.PROPERTY
        assert "attribute" in errors[0].message

    @pytest.mark.unit
    def test_tag_binding_without_menu_data(self):
        prop = PropertyGroup(name="level", binding_type=BindingType.TAG)
        errors = validate_definition(definition(properties=(prop,)))
        assert [e.message for e in errors] == ["Tag name binding requires menuData"]

    @pytest.mark.unit
    def test_empty_menu_data(self):
        prop = PropertyGroup(name="size", menu_data=())
        errors = validate_definition(definition(properties=(prop,)))
        assert [e.message for e in errors] == ["menuData must not be empty"]

    @pytest.mark.unit
    def test_output_without_binding(self):
        errors = validate_definition(definition(outputs=(OutputProperty(event_name="click"),)))
        assert errors[0].type == ValidationErrorType.OUTPUT
        assert errors[0].name == "click"
        assert str(errors[0]) == 'output "click": Output is missing a binding'
