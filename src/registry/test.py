"""Tests for the component registry."""

import logging

import pytest

from src.definition import (
    BindingType,
    ComponentDefinition,
    ComponentVariant,
    MenuItem,
    PropertyGroup,
    PropertyInput,
    PropertyType,
    ResizeType,
)
from src.instance import Frame, InstanceData
from src.validation import ValidationErrorType

from .lib import (
    LayerIcons,
    RegistrationError,
    Registry,
    process_properties,
    register_component,
)


def chip(**fields) -> ComponentDefinition:
    values = {"id": "chip", "title": "Chip", "tag_name": "span", **fields}
    return ComponentDefinition(**values)


@pytest.fixture
def registry() -> Registry:
    return Registry()


# =============================================================================
# Property Processing
# =============================================================================


class TestProcessProperties:
    """Tests for default property injection."""

    @pytest.mark.unit
    def test_default_groups_order(self):
        """Size, position and opacity lead; advanced and hidden trail."""
        label = PropertyGroup(name="label", binding_type=BindingType.TEXT)
        props = process_properties(chip(properties=(label,)))
        assert [p.type for p in props] == [
            PropertyType.STYLE_SIZE,
            PropertyType.STYLE_POSITION,
            None,
            None,
            PropertyType.STYLE_ADVANCED,
            PropertyType.HIDDEN,
        ]
        assert props[2].children[0].type == PropertyType.STYLE_OPACITY
        assert props[3].name == "label"

    @pytest.mark.unit
    def test_prevent_resize(self):
        props = process_properties(chip(prevent_resize=True))
        assert PropertyType.STYLE_SIZE not in [p.type for p in props]

    @pytest.mark.unit
    def test_constrained_resize_type(self):
        """Only freely resizable definitions get the size group."""
        props = process_properties(chip(resize_type=ResizeType.UNIFORM))
        assert PropertyType.STYLE_SIZE not in [p.type for p in props]
        props = process_properties(chip(resize_type=ResizeType.ANY))
        assert props[0].type == PropertyType.STYLE_SIZE

    @pytest.mark.unit
    def test_disabled_injection(self):
        assert process_properties(chip(auto_add_default_properties=False)) == ()

    @pytest.mark.unit
    def test_present_groups_not_duplicated(self):
        """Nested existing groups are detected."""
        nested = PropertyGroup(children=(PropertyGroup(type=PropertyType.STYLE_POSITION),))
        props = process_properties(chip(properties=(nested,)))
        assert PropertyType.STYLE_POSITION not in [p.type for p in props]

    @pytest.mark.unit
    def test_input_type_defaults_to_generic(self):
        prop = PropertyGroup(name="label", input_type=PropertyInput.TEXT)
        props = process_properties(chip(properties=(prop,), auto_add_default_properties=False))
        assert props[0].type == PropertyType.ATTRIBUTE_GENERIC

    @pytest.mark.unit
    def test_variant_conditions(self):
        """Variant-scoped properties become conditional on the variant input."""
        definition = chip(
            properties=(
                PropertyGroup(
                    name="variant",
                    binding_type=BindingType.VARIANT,
                    menu_data=(MenuItem(value="a"),),
                ),
                PropertyGroup(children=(PropertyGroup(name="rows", variant="a"),)),
            ),
            variants={"a": ComponentVariant(tag_name="b")},
            auto_add_default_properties=False,
        )
        rows = process_properties(definition)[1].children[0]
        assert len(rows.conditions) == 1
        condition = rows.conditions[0]
        assert (condition.name, condition.type, condition.value) == ("variant", "equals", "a")


# =============================================================================
# Registration
# =============================================================================


class TestRegister:
    """Tests for Registry.register."""

    @pytest.mark.unit
    def test_register_and_lookup(self, registry):
        assert registry.register(chip()) is None
        stored = registry.get_component("chip")
        assert stored.tag_name == "span"
        assert stored.properties[0].type == PropertyType.STYLE_SIZE
        assert "chip" in registry

    @pytest.mark.unit
    def test_invalid_definition_not_stored(self, registry, caplog):
        """Validation errors are returned, logged and nothing is stored."""
        with caplog.at_level(logging.ERROR):
            errors = registry.register(chip(title=None))
        assert [e.name for e in errors] == ["title"]
        assert errors[0].type == ValidationErrorType.FIELD
        assert registry.list_components() == []
        assert "Missing title" in caplog.text

    @pytest.mark.unit
    def test_builtin_reregistration_raises(self, registry):
        board = ComponentDefinition(id="board", title="Board", tag_name="div")
        registry.register(board)
        with pytest.raises(RegistrationError) as exc_info:
            registry.register(board)
        assert exc_info.value.component_id == "board"

    @pytest.mark.unit
    def test_custom_reregistration_replaces(self, registry):
        registry.register(chip())
        registry.register(chip(tag_name="b"))
        assert registry.get_component("chip").tag_name == "b"
        assert len(registry) == 1

    @pytest.mark.unit
    def test_aliases(self, registry):
        registry.register(chip(aliases=("old-chip",)))
        assert registry.get_component("old-chip") is registry.get_component("chip")
        assert registry.get_alias_ids() == ["old-chip"]

    @pytest.mark.unit
    def test_replacement_drops_stale_aliases(self, registry):
        """Aliases missing from the replacement no longer resolve."""
        registry.register(chip(aliases=("old-chip",)))
        registry.register(chip(tag_name="b"))
        assert registry.get_alias_ids() == []
        assert "old-chip" not in registry
        assert registry.get_component("old-chip") is None

    @pytest.mark.unit
    def test_replacement_aliases_point_at_new_definition(self, registry):
        registry.register(chip(aliases=("old-chip",)))
        registry.register(chip(tag_name="b", aliases=("old-chip",)))
        assert registry.get_component("old-chip").tag_name == "b"

    @pytest.mark.unit
    def test_missing_component_warns(self, registry, caplog):
        with caplog.at_level(logging.WARNING):
            assert registry.get_component("nope") is None
        assert "nope" in caplog.text
        assert registry.get_component(None) is None

    @pytest.mark.unit
    def test_portal_slot_index(self, registry):
        """Only successfully registered definitions enter the portal index."""
        slot = PropertyGroup(name="content", input_type=PropertyInput.PORTAL_SLOT)
        registry.register(chip(properties=(slot,)))
        assert registry.has_portal_slot("chip")

        registry.register(chip(id="broken", title=None, properties=(slot,)))
        assert not registry.has_portal_slot("broken")

    @pytest.mark.unit
    def test_dynamic_list_portal_slot(self, registry):
        tabs = PropertyGroup(
            name="tabs",
            input_type=PropertyInput.DYNAMIC_LIST,
            item_schema=(PropertyGroup(name="body", input_type=PropertyInput.PORTAL_SLOT),),
        )
        registry.register(chip(properties=(tabs,)))
        assert registry.has_portal_slot("chip")

    @pytest.mark.unit
    def test_stored_definition_is_read_only(self, registry):
        """Mappings of a stored definition cannot be changed in place."""
        variant = PropertyGroup(
            name="size",
            binding_type=BindingType.VARIANT,
            menu_data=(MenuItem(value="s"), MenuItem(value="l")),
        )
        registry.register(
            chip(
                attrs={"role": "note"},
                inputs={"items": [1, 2]},
                styles={"color": {"value": "red"}},
                properties=(variant,),
                variants={
                    "s": ComponentVariant(attrs={"data-size": "s"}),
                    "l": ComponentVariant(tag_name="b"),
                },
            )
        )
        stored = registry.get_component("chip")

        with pytest.raises(TypeError):
            stored.attrs["role"] = "alert"
        with pytest.raises(TypeError):
            stored.inputs["extra"] = True
        with pytest.raises(TypeError):
            stored.styles["color"]["value"] = "blue"
        with pytest.raises(TypeError):
            stored.variants["m"] = ComponentVariant(tag_name="i")
        with pytest.raises(TypeError):
            stored.variants["s"].attrs["data-size"] = "xl"
        with pytest.raises(AttributeError):
            stored.inputs["items"].append(3)

        assert stored.attrs == {"role": "note"}
        assert stored.inputs["items"] == (1, 2)
        assert registry.get_component("chip").styles["color"] == {"value": "red"}

    @pytest.mark.unit
    def test_instances_of_stored_definition_are_mutable(self, registry):
        registry.register(chip(inputs={"items": [1, 2]}, styles={"color": "red"}))
        instance = registry.get_component("chip").create_instance("c1")
        instance.inputs["items"].append(3)
        assert instance.inputs["items"] == [1, 2, 3]
        assert instance.styles["base"].style["color"] == "red"
        assert registry.get_component("chip").inputs["items"] == (1, 2)

    @pytest.mark.unit
    def test_clear(self, registry):
        registry.register(chip(aliases=("old",)))
        registry.clear()
        assert registry.list_components() == []
        assert registry.get_alias_ids() == []
        assert registry.get_components() == ()


class TestGetComponents:
    """Tests for cached library queries."""

    @pytest.mark.unit
    def test_filters(self, registry):
        registry.register(chip())
        registry.register(chip(id="old", deprecated=True))
        registry.register(chip(id="mat", library="material"))

        assert [d.id for d in registry.get_components()] == ["chip", "old", "mat"]
        assert [d.id for d in registry.get_components(ignore_deprecated=True)] == ["chip", "mat"]
        assert [d.id for d in registry.get_components("material")] == ["mat"]

    @pytest.mark.unit
    def test_cache_invalidated_on_register(self, registry):
        registry.register(chip())
        first = registry.get_components()
        assert registry.get_components() is first
        assert isinstance(first, tuple)

        registry.register(chip(id="other"))
        assert [d.id for d in registry.get_components()] == ["chip", "other"]


# =============================================================================
# Code Components
# =============================================================================


class TestCodeComponents:
    """Tests for code component registration."""

    @pytest.mark.unit
    def test_register_code_component(self, registry):
        definition = ComponentDefinition(
            id="MyWidget",
            title="My Widget",
            tag_name="my-widget",
            properties=(
                PropertyGroup(name="label"),
                PropertyGroup(name="--accent", binding_type=BindingType.CSS_VAR),
                PropertyGroup(label="unbound"),
            ),
        )
        assert registry.register_code_component(definition, Frame(width=120, height=40)) is None

        stored = registry.get_component("MyWidget")
        assert stored.is_code_component
        assert stored.tag_name == "my-widget-mywidget"
        assert stored.export_tag_name == "my-widget"
        assert (stored.width, stored.height) == (120, 40)

        group = next(p for p in stored.properties if p.children and p.children[0].name)
        assert [p.name for p in group.children] == ["label", "--accent"]
        assert [p.data_bindable for p in group.children] == [True, False]

    @pytest.mark.unit
    def test_reregister_code_component(self, registry):
        definition = ComponentDefinition(id="w", title="W", tag_name="x-w")
        registry.register_code_component(definition)
        registry.register_code_component(definition.model_copy(update={"title": "W2"}))
        assert registry.get_component("w").title == "W2"

    @pytest.mark.unit
    def test_failed_reregistration_keeps_previous(self, registry):
        """An invalid replacement leaves the registered definition in place."""
        slot = PropertyGroup(name="content", input_type=PropertyInput.PORTAL_SLOT)
        definition = ComponentDefinition(
            id="w", title="W", tag_name="x-w", aliases=("legacy-w",), properties=(slot,)
        )
        registry.register_code_component(definition)

        errors = registry.register_code_component(definition.model_copy(update={"title": None}))
        assert [e.name for e in errors] == ["title"]
        assert registry.get_component("w").title == "W"
        assert registry.get_component("legacy-w").title == "W"
        assert registry.has_portal_slot("w")
        assert [d.id for d in registry.get_components()] == ["w"]

    @pytest.mark.unit
    def test_unregister(self, registry):
        """Unregistering removes the definition and its aliases."""
        registry.register_code_component(
            ComponentDefinition(id="w", title="W", tag_name="x-w", aliases=("legacy-w",))
        )
        assert registry.get_component("legacy-w") is not None
        assert registry.unregister_code_component("w")
        assert not registry.unregister_code_component("w")
        assert registry.list_components() == []
        assert registry.get_alias_ids() == []
        assert registry.get_component("legacy-w") is None


# =============================================================================
# Decorator and Icons
# =============================================================================


class TestRegisterComponent:
    """Tests for the register_component decorator."""

    @pytest.mark.unit
    def test_decorator_registers_class(self, registry):
        @register_component("badge", registry)
        class Badge(ComponentDefinition):
            title: str | None = "Badge"
            tag_name: str | None = "span"

        assert registry.get_component("badge").tag_name == "span"
        assert Badge().tag_name == "span"


class TestIconForComponent:
    """Tests for layer icon resolution."""

    @pytest.mark.unit
    def test_fixed_icons(self, registry):
        board = InstanceData(id="b1", element_type="board")
        assert registry.icon_for_component(board, "b1") == LayerIcons.HOME
        assert registry.icon_for_component(board) == LayerIcons.BOARD
        assert registry.icon_for_component(InstanceData(element_type="icon")) == LayerIcons.ICON
        symbol = InstanceData(element_type="symbol")
        assert registry.icon_for_component(symbol) == LayerIcons.COMPONENT

    @pytest.mark.unit
    def test_definition_icon(self, registry):
        registry.register(chip(icon="label"))
        assert registry.icon_for_component(InstanceData(element_type="chip")) == "label"

    @pytest.mark.unit
    def test_generic_fallbacks(self, registry):
        group = InstanceData(element_type="generic", child_ids=("a",))
        assert registry.icon_for_component(group) == LayerIcons.FOLDER
        leaf = InstanceData(element_type="unknown")
        assert registry.icon_for_component(leaf) == LayerIcons.GENERIC_ELEMENT
