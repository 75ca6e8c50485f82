"""Tests for the component definition schema."""

import pytest
from pydantic import ValidationError

from src.instance import InstanceData

from .lib import (
    BindingType,
    BuildMode,
    ComponentDefinition,
    ComponentVariant,
    MenuItem,
    PropertyGroup,
    PropertyInput,
    get_props_recursive,
    is_definition_class,
    is_export_mode,
    props_contain_portal_slot,
)


def switch_definition() -> ComponentDefinition:
    return ComponentDefinition(
        id="switch",
        title="Switch",
        tag_name="div",
        properties=(
            PropertyGroup(
                name="variant",
                binding_type=BindingType.VARIANT,
                menu_data=(MenuItem(value="on"), MenuItem(value="off")),
            ),
        ),
        variants={
            "on": ComponentVariant(tag_name="b", inputs={"checked": True}),
            "off": ComponentVariant(tag_name="i"),
        },
        inputs={"checked": False},
    )


class TestBuildMode:
    """Tests for build mode helpers."""

    @pytest.mark.unit
    def test_export_modes(self):
        assert not is_export_mode(BuildMode.INTERNAL)
        assert is_export_mode("simple")
        assert is_export_mode(BuildMode.APPLICATION)

    @pytest.mark.unit
    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            is_export_mode("preview")


class TestPropertyGroup:
    """Tests for property models."""

    @pytest.mark.unit
    def test_enum_values_stored(self):
        prop = PropertyGroup(name="label", binding_type=BindingType.TEXT)
        assert prop.binding_type == "text"
        assert prop.binding_type == BindingType.TEXT

    @pytest.mark.unit
    def test_resolved_input_name(self):
        assert PropertyGroup(name="value").resolved_input_name == "value"
        assert PropertyGroup(name="value", input_name="text").resolved_input_name == "text"

    @pytest.mark.unit
    def test_frozen(self):
        prop = PropertyGroup(name="label")
        with pytest.raises(ValidationError):
            prop.name = "other"


class TestPropsRecursive:
    """Tests for property flattening."""

    @pytest.mark.unit
    def test_groups_before_children(self):
        inner = PropertyGroup(name="b")
        group = PropertyGroup(label="group", children=(inner, PropertyGroup(name="c")))
        flat = get_props_recursive((PropertyGroup(name="a"), group))
        assert [p.name or p.label for p in flat] == ["a", "group", "b", "c"]

    @pytest.mark.unit
    def test_portal_slot_detection(self):
        slot = PropertyGroup(name="body", input_type=PropertyInput.PORTAL_SLOT)
        assert props_contain_portal_slot((PropertyGroup(children=(slot,)),))

        dynamic = PropertyGroup(
            name="tabs", input_type=PropertyInput.DYNAMIC_LIST, item_schema=(slot,)
        )
        assert props_contain_portal_slot((dynamic,))
        assert not props_contain_portal_slot((PropertyGroup(name="label"),))


class TestVariants:
    """Tests for variant synthesis."""

    @pytest.mark.unit
    def test_variant_property(self):
        assert switch_definition().variant_property().name == "variant"
        assert ComponentDefinition(id="x").variant_property() is None

    @pytest.mark.unit
    def test_with_variant_overrides_shallowly(self):
        base = switch_definition()
        on = base.with_variant("on")
        assert on.tag_name == "b"
        assert on.inputs == {"checked": True}
        assert not on.has_variants
        assert base.tag_name == "div"

    @pytest.mark.unit
    def test_unset_fields_keep_base_values(self):
        off = switch_definition().with_variant("off")
        assert off.inputs == {"checked": False}

    @pytest.mark.unit
    def test_unknown_variant(self):
        with pytest.raises(KeyError, match="Available: on, off"):
            switch_definition().with_variant("maybe")


class TestTemplate:
    """Tests for the attached template function."""

    @pytest.mark.unit
    def test_compiled_template(self):
        definition = ComponentDefinition(id="rule", tag_name="hr")
        assert definition.render(BuildMode.SIMPLE) == "<hr>"

    @pytest.mark.unit
    def test_custom_template_wins(self):
        def template(mode, instance=None, content=None):
            return f"<custom>{mode.value}:{content}</custom>"

        definition = ComponentDefinition(id="c", tag_name="div", template_fn=template)
        assert definition.render("simple", None, "x") == "<custom>simple:x</custom>"

    @pytest.mark.unit
    def test_template_fn_not_serialized(self):
        definition = ComponentDefinition(id="c", template_fn=lambda *args: "")
        assert "template_fn" not in definition.model_dump()

    @pytest.mark.unit
    def test_create_instance(self):
        instance = ComponentDefinition(id="chip", title="Chip").create_instance("c1", "p1")
        assert isinstance(instance, InstanceData)
        assert (instance.id, instance.element_type, instance.project_id) == ("c1", "chip", "p1")

    @pytest.mark.unit
    def test_is_definition_class(self):
        class Chip(ComponentDefinition):
            pass

        assert is_definition_class(Chip)
        assert not is_definition_class(Chip())
        assert not is_definition_class(dict)
