"""Tests for instance data and the instance factory."""

import pytest

from src.definition import ComponentDefinition, MenuItem, PropertyGroup, ResizeType

from .lib import (
    DEFAULT_STATE,
    A11yInputs,
    InstanceData,
    InstanceFactory,
    KeyValue,
    create_instance,
    get_descendant_ids,
    is_valid_attr,
    is_valid_attribute_value,
)


class TestAttributeValidity:
    """Tests for attribute filters."""

    @pytest.mark.unit
    def test_attribute_values(self):
        assert is_valid_attribute_value("")
        assert is_valid_attribute_value(0)
        assert is_valid_attribute_value(True)
        assert not is_valid_attribute_value(False)
        assert not is_valid_attribute_value(None)

    @pytest.mark.unit
    def test_entered_attributes(self):
        assert is_valid_attr(KeyValue(name="title", value="x"))
        assert not is_valid_attr(KeyValue(name="", value="x"))
        assert not is_valid_attr(KeyValue(name="title", value="x", disabled=True))
        assert not is_valid_attr(KeyValue(name="title", value="x", invalid=True))


class TestInstanceData:
    """Tests for the instance record."""

    @pytest.mark.unit
    def test_reference_id(self):
        assert InstanceData(inputs={"referenceId": "b1"}).reference_id == "b1"
        assert InstanceData(inputs={"referenceId": ""}).reference_id is None
        assert InstanceData().reference_id is None

    @pytest.mark.unit
    def test_aria_attrs(self):
        aria = (KeyValue(name="aria-label", value="Close"),)
        assert InstanceData(a11y_inputs=A11yInputs(aria_attrs=aria)).aria_attrs == aria
        assert InstanceData().aria_attrs == ()


class TestCreateInstance:
    """Tests for creating instances from definitions."""

    @pytest.mark.unit
    def test_defaults_from_definition(self):
        definition = ComponentDefinition(
            id="chip",
            title="Chip",
            width=80,
            height=24,
            inputs={"size": "s"},
            attrs={"role": "note", "hidden": False},
            properties=(
                PropertyGroup(
                    children=(
                        PropertyGroup(name="label", default_value="New chip"),
                        PropertyGroup(name="tone", menu_data=(MenuItem(value="a"),)),
                    )
                ),
            ),
        )
        instance = create_instance(definition, "c1", "p1")

        assert instance.name == "Chip"
        assert instance.element_type == "chip"
        assert instance.inputs == {"hidden": False, "size": "s", "label": "New chip"}
        assert [(a.name, a.value) for a in instance.attrs] == [("role", "note")]

        base = instance.styles[DEFAULT_STATE].style
        assert base["display"] == "block"
        assert base["position"] == "relative"
        assert base["opacity"] == 1
        assert base["width"] == {"value": 80, "units": "px"}

    @pytest.mark.unit
    def test_definition_inputs_not_shared(self):
        definition = ComponentDefinition(id="list", inputs={"items": [1, 2]})
        instance = create_instance(definition, "l1")
        instance.inputs["items"].append(3)
        assert definition.inputs["items"] == [1, 2]

    @pytest.mark.unit
    def test_symbol_instance_not_block(self):
        instance = create_instance(ComponentDefinition(id="symbol-instance"), "s1")
        assert "display" not in instance.styles[DEFAULT_STATE].style

    @pytest.mark.unit
    def test_uniform_resize_locks_frame(self):
        definition = ComponentDefinition(id="icon", resize_type=ResizeType.UNIFORM)
        assert create_instance(definition, "i1").frame.locked


class TestInstanceFactory:
    """Tests for the fluent builder."""

    @pytest.mark.unit
    def test_builder(self):
        instance = (
            InstanceFactory("p1", "e1")
            .assign_name("Card")
            .assign_child_ids(["a", "b"])
            .assign_parent_id("root")
            .assign_frame(200, 100, x=10)
            .add_state_style(":hover", {"opacity": 0.5})
            .build()
        )
        assert instance.name == "Card"
        assert instance.child_ids == ("a", "b")
        assert instance.parent_id == "root"
        assert (instance.frame.width, instance.frame.x) == (200, 10)
        assert list(instance.styles) == [DEFAULT_STATE, ":hover"]


class TestDescendants:
    """Tests for subtree traversal."""

    @pytest.mark.unit
    def test_children_and_references(self):
        elements = {
            "root": InstanceData(id="root", child_ids=("a", "p")),
            "a": InstanceData(id="a", child_ids=("a1",)),
            "a1": InstanceData(id="a1"),
            "p": InstanceData(id="p", inputs={"referenceId": "other"}),
            "other": InstanceData(id="other", child_ids=("root",)),
        }
        assert get_descendant_ids("root", elements) == ["root", "a", "a1", "p", "other"]

    @pytest.mark.unit
    def test_missing_start(self):
        assert get_descendant_ids("ghost", {}) == ["ghost"]
