"""Tests for portal slot markup."""

import pytest

from src.definition import BuildMode, PropertyGroup, PropertyInput
from src.factory import TemplateFactory

from .lib import (
    add_portal_slots,
    build_child_portal,
    generate_portal,
    generate_portal_zero_state,
)

OUTLET = (
    '<cd-outlet [instanceId]="elementId" [renderId]="ref" '
    '[elementClassPrefix]="elementId | classPrefixPipe : elementClassPrefix" '
    '[propertiesMap]="propertiesMap" [styleMap]="styleMap" [assets]="assets" '
    '[addMarkerToInnerRoot]="false" [designSystem]="designSystem" outletType="portal" '
    '[ancestors]="ancestors" [datasets]="datasets" [loadedData]="loadedData"></cd-outlet>'
)


class TestGeneratePortal:
    """Tests for the outlet wrapper."""

    @pytest.mark.unit
    def test_outlet_inputs(self):
        """The outlet receives every render-context input in order."""
        html = generate_portal(False, "ref").build()
        assert html == f'<div class="cd-portal-wrapper">{OUTLET}</div>'

    @pytest.mark.unit
    def test_named_slot(self):
        html = generate_portal(False, "ref", "header").build()
        assert html.startswith('<div class="cd-portal-wrapper" slot="header">')

    @pytest.mark.unit
    def test_indexed_slot(self):
        """Slots inside a loop are suffixed with the index."""
        html = generate_portal(True, "ref", "tab", True).build()
        assert "[slot]=\"'tab' + i\"" in html
        assert "elementId + i + '-tab'" in html


class TestZeroState:
    """Tests for the zero-state template."""

    @pytest.mark.unit
    def test_child_zero_state(self):
        html = generate_portal_zero_state("ref", "errRef", is_child=True)
        assert html == (
            "<ng-template #errRef>"
            '<div class="cd-portal-zero-state"'
            ' [class.cd-portal-error-state]="ref | hasValuePipe:propertiesMap"></div>'
            "</ng-template>"
        )

    @pytest.mark.unit
    def test_top_level_zero_state_has_scaffolding(self):
        """Top-level zero states carry the default attributes and fit-content class."""
        html = generate_portal_zero_state("ref")
        assert "#portalErrorRef" in html
        assert '[attr.data-id]="elementId"' in html
        assert 'class="cd-portal-zero-state cd-rendered-element cd-fit-content"' in html

    @pytest.mark.unit
    def test_message_css_var(self):
        html = generate_portal_zero_state("ref", is_child=True, zero_state_message="Empty")
        assert "[style.--cd-portal-zero-state-message]=\"&quot;'Empty'&quot;\"" in html


class TestChildPortal:
    """Tests for guarded child portals."""

    @pytest.mark.unit
    def test_guard_and_error_ref(self):
        """The portal is guarded and falls back to a slot-specific template."""
        html = build_child_portal("props?.inputs?.side-nav", False, "side-nav")
        assert 'class="cd-portal-wrapper cd-child-content-portal"' in html
        assert "else portalErrorRefsidenav" in html
        assert "<ng-template #portalErrorRefsidenav>" in html
        assert "circularGuardPipe:ancestors:renderId" in html

    @pytest.mark.unit
    def test_unnamed_uses_default_ref(self):
        html = build_child_portal("ref")
        assert "<ng-template #portalErrorRef>" in html


class TestAddPortalSlots:
    """Tests for adding portal slots from properties."""

    @pytest.mark.unit
    def test_portal_slot_yields_portal_and_zero_state(self):
        """A portal slot adds exactly one guarded portal and one zero state."""
        props = (PropertyGroup(name="content", input_type=PropertyInput.PORTAL_SLOT),)
        factory = add_portal_slots(props, TemplateFactory(BuildMode.INTERNAL, "div"))
        html = factory.build()
        assert html.count("<cd-outlet") == 1
        assert html.count("<ng-template #portalErrorRefcontent>") == 1
        assert 'slot="content"' in html

    @pytest.mark.unit
    def test_export_mode_adds_nothing(self):
        props = (PropertyGroup(name="content", input_type=PropertyInput.PORTAL_SLOT),)
        factory = add_portal_slots(props, TemplateFactory(BuildMode.SIMPLE, "div"))
        assert factory.build() == "<div></div>"

    @pytest.mark.unit
    def test_dynamic_list_slots(self):
        """Dynamic lists loop over items with one portal per nested slot."""
        props = (
            PropertyGroup(
                name="tabs",
                input_type=PropertyInput.DYNAMIC_LIST,
                item_schema=(
                    PropertyGroup(name="label", input_type=PropertyInput.TEXT),
                    PropertyGroup(name="body", input_type=PropertyInput.PORTAL_SLOT),
                ),
            ),
        )
        html = add_portal_slots(props, TemplateFactory(BuildMode.INTERNAL, "div")).build()
        assert '*ngFor="let slot of props?.inputs?.tabs; let i = index"' in html
        assert '[renderId]="props?.inputs?.tabs[i]?.body"' in html
        assert html.count("<cd-outlet") == 1

    @pytest.mark.unit
    def test_dynamic_list_then_plain_slot(self):
        """Properties after a dynamic list are still visited."""
        props = (
            PropertyGroup(
                name="tabs",
                input_type=PropertyInput.DYNAMIC_LIST,
                item_schema=(PropertyGroup(name="body", input_type=PropertyInput.PORTAL_SLOT),),
            ),
            PropertyGroup(name="footer", input_type=PropertyInput.PORTAL_SLOT),
        )
        html = add_portal_slots(props, TemplateFactory(BuildMode.INTERNAL, "div")).build()
        assert html.count("<cd-outlet") == 2
