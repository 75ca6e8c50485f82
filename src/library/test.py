"""Tests for the built-in component definitions."""

import pytest

from src.definition import BuildMode, ElementEntitySubType
from src.instance import InstanceData
from src.validation import validate_definition

from .lib import (
    BUILTIN_DEFINITIONS,
    BoardPortal,
    Icon,
    Text,
    TextInput,
    register_builtin_definitions,
)


class TestRegistration:
    """Tests for built-in registration."""

    @pytest.mark.unit
    def test_all_builtins_registered(self, builtin_registry):
        """Every built-in definition validates and registers."""
        assert builtin_registry.list_components() == list(BUILTIN_DEFINITIONS)

    @pytest.mark.unit
    def test_builtins_validate(self):
        for component_id, definition_cls in BUILTIN_DEFINITIONS.items():
            assert validate_definition(definition_cls(id=component_id)) == []

    @pytest.mark.unit
    def test_registration_is_idempotent(self, builtin_registry):
        """Registering twice keeps the existing entries."""
        register_builtin_definitions(builtin_registry)
        assert len(builtin_registry) == len(BUILTIN_DEFINITIONS)

    @pytest.mark.unit
    def test_core_library(self, builtin_registry):
        core = [d.id for d in builtin_registry.get_components("core")]
        assert core == ["board", "symbol", "symbol-instance", "board-portal"]


class TestPrimitives:
    """Tests for primitive templates."""

    @pytest.mark.unit
    def test_text_export(self):
        text = Text(id="text")
        instance = text.create_instance("t1")
        assert text.render(BuildMode.APPLICATION, instance) == "<div>Text</div>"

    @pytest.mark.unit
    def test_text_internal_injects_text(self):
        html = Text(id="text").render(BuildMode.INTERNAL)
        assert "[cdTextInject]=\"props?.inputs?.innerHTML" in html
        assert "cd-fit-content" in html

    @pytest.mark.unit
    def test_icon_export(self):
        icon = Icon(id="icon")
        instance = InstanceData(id="i1", name="Icon", inputs={"iconName": "home"})
        assert icon.render(BuildMode.SIMPLE, instance) == (
            '<i class="icon__i1 material-icons">home</i>'
        )

    @pytest.mark.unit
    def test_text_input_variants(self):
        field = TextInput(id="text-input")
        instance = field.create_instance("f1")
        assert field.render(BuildMode.APPLICATION, instance) == (
            '<input class="co-input-primitive" type="text" value placeholder>'
        )
        textarea = InstanceData(inputs={"variant": "textarea", "value": "Hi"})
        assert field.render(BuildMode.APPLICATION, textarea) == (
            '<textarea class="co-input-primitive">Hi</textarea>'
        )


class TestPortal:
    """Tests for the board portal template."""

    @pytest.mark.unit
    def test_internal_portal(self):
        html = BoardPortal(id="board-portal").render(BuildMode.INTERNAL)
        assert '[renderId]="props?.inputs?.referenceId"' in html
        assert "else portalErrorRef" in html
        assert html.count("<ng-template #portalErrorRef>") == 1
        assert html.count('[attr.data-id]="elementId"') == 2

    @pytest.mark.unit
    def test_export_portal_wraps_content(self):
        portal = BoardPortal(id="board-portal")
        assert portal.render(BuildMode.APPLICATION, None, "<p>x</p>") == "<div><p>x</p></div>"

    @pytest.mark.unit
    def test_symbol_instance_identity(self):
        assert ElementEntitySubType.SYMBOL_INSTANCE.value in BUILTIN_DEFINITIONS
