"""Tests for the template factory and binding expressions."""

import pytest

from src.definition import BuildMode, CoerceValue
from src.instance import A11yInputs, InstanceData, KeyValue

from .expressions import (
    CHILD_ITERATOR,
    circular_outlet_guard,
    input_props_binding,
    lookup_prop_at_path,
    merge_key_value,
    remove_special_characters,
)
from .lib import TemplateFactory

# =============================================================================
# Expressions
# =============================================================================


class TestExpressions:
    """Tests for the pure binding helpers."""

    @pytest.mark.unit
    def test_lookup_identifier(self):
        """Identifiers use optional chaining."""
        assert lookup_prop_at_path("props?.inputs", "label") == "props?.inputs?.label"

    @pytest.mark.unit
    def test_lookup_non_identifier(self):
        """Names that are not identifiers use bracket access."""
        assert lookup_prop_at_path("props?.inputs", "--color") == "props?.inputs['--color']"

    @pytest.mark.unit
    def test_input_binding_with_pipes(self):
        """Data binding lookup precedes coercion."""
        assert input_props_binding("hidden", True, CoerceValue.BOOLEAN) == (
            "props?.inputs?.hidden | dataBindingLookupPipe:dataBindingRefreshTrigger"
            " | coerceBooleanPipe"
        )

    @pytest.mark.unit
    def test_coerce_accepts_plain_string(self):
        """Coercion type may be given as its string value."""
        assert input_props_binding("count", coerce_type="number").endswith("| coerceNumberPipe")

    @pytest.mark.unit
    def test_merge_key_value(self):
        """Empty values render bare keys; quotes are escaped."""
        assert merge_key_value("disabled", "") == "disabled"
        assert merge_key_value("disabled", None) == "disabled"
        assert merge_key_value("title", 'say "hi"') == 'title="say &quot;hi&quot;"'
        assert merge_key_value("checked", True) == 'checked="true"'

    @pytest.mark.unit
    def test_circular_outlet_guard(self):
        """Guard checks for reference cycles and existence."""
        assert circular_outlet_guard("ref") == (
            "(ref | circularGuardPipe:ancestors:renderId) && ref | hasValuePipe:propertiesMap"
        )

    @pytest.mark.unit
    def test_remove_special_characters(self):
        assert remove_special_characters("side-nav.slot 1") == "sidenavslot1"


# =============================================================================
# TemplateFactory
# =============================================================================


class TestTemplateFactoryBasics:
    """Tests for tag serialization."""

    @pytest.mark.unit
    def test_attribute_and_child(self):
        """Attributes and children serialize in order."""
        factory = TemplateFactory(BuildMode.SIMPLE, "button")
        factory.add_attribute("type", "submit").add_child("Save")
        assert factory.build() == '<button type="submit">Save</button>'

    @pytest.mark.unit
    def test_void_element(self):
        """Void elements have no closing tag."""
        factory = TemplateFactory(BuildMode.SIMPLE, "img").add_attribute("src", "a.png")
        assert factory.build() == '<img src="a.png">'

    @pytest.mark.unit
    def test_bare_attribute(self):
        """Empty attribute values render as bare keys."""
        factory = TemplateFactory(BuildMode.SIMPLE, "input").add_attribute("disabled", "")
        assert factory.build() == "<input disabled>"

    @pytest.mark.unit
    def test_add_if_undefined(self):
        """Falsy values are skipped when add_if_undefined is False."""
        factory = TemplateFactory(BuildMode.SIMPLE, "a")
        factory.add_attribute("href", None, add_if_undefined=False)
        assert factory.build() == "<a></a>"

    @pytest.mark.unit
    def test_directives_precede_attributes(self):
        """Directives are emitted as bare words after the tag name."""
        factory = TemplateFactory(BuildMode.INTERNAL, "div")
        factory.add_directive("cdDrag").add_directive("cdDrop").add_attribute("id", "x")
        assert factory.build() == '<div cdDrag cdDrop id="x"></div>'

    @pytest.mark.unit
    def test_build_is_repeatable(self):
        """Building twice yields the same markup."""
        factory = TemplateFactory(BuildMode.INTERNAL, "span").add_child("x")
        factory.add_wrapper(TemplateFactory(BuildMode.INTERNAL, "div"))
        assert factory.build() == factory.build() == "<div><span>x</span></div>"

    @pytest.mark.unit
    def test_empty_child_ignored(self):
        factory = TemplateFactory(BuildMode.SIMPLE, "p").add_child("").add_child(None)
        assert factory.build() == "<p></p>"


class TestTemplateFactoryClasses:
    """Tests for class and style helpers."""

    @pytest.mark.unit
    def test_css_class_keeps_position(self):
        """Appending a class keeps the attribute's first position."""
        factory = TemplateFactory(BuildMode.SIMPLE, "div")
        factory.add_css_class("a").add_attribute("id", "x").add_css_class("b")
        assert factory.build() == '<div class="a b" id="x"></div>'

    @pytest.mark.unit
    def test_class_props_binding(self):
        factory = TemplateFactory(BuildMode.INTERNAL, "div")
        factory.add_class_props_binding("active", "isActive", is_input=True)
        assert factory.build() == '<div [class.active]="props?.inputs?.isActive"></div>'

    @pytest.mark.unit
    def test_css_var_quoted_for_content(self):
        """Quoted css vars keep their inner quotes once resolved."""
        factory = TemplateFactory(BuildMode.INTERNAL, "div")
        factory.add_css_var("--msg", "Drop here", True)
        assert factory.build() == "<div [style.--msg]=\"&quot;'Drop here'&quot;\"></div>"

    @pytest.mark.unit
    def test_css_var_input_binding(self):
        factory = TemplateFactory(BuildMode.INTERNAL, "div")
        factory.add_css_var_input_binding("--gap")
        assert factory.build() == (
            "<div [style.--gap]=\"props?.inputs['--gap'] | cssVarPipe\"></div>"
        )


class TestTemplateFactoryBindings:
    """Tests for bound attributes and events."""

    @pytest.mark.unit
    def test_bound_attribute_defaults_to_name(self):
        factory = TemplateFactory(BuildMode.INTERNAL, "div").add_bound_attribute("disabled")
        assert factory.build() == '<div [disabled]="disabled"></div>'

    @pytest.mark.unit
    def test_attr_bound_input_attribute(self):
        """Attribute bindings go through the conditional attribute pipe."""
        factory = TemplateFactory(BuildMode.INTERNAL, "a")
        factory.add_attr_bound_input_attribute("href", "url")
        assert factory.build() == (
            '<a [attr.href]="props?.inputs?.url | conditionalAttrPipe"></a>'
        )

    @pytest.mark.unit
    def test_dataset_lookup(self):
        factory = TemplateFactory(BuildMode.INTERNAL, "cd-table")
        factory.add_props_bound_dataset_lookup("data", "dataset")
        assert factory.build() == (
            '<cd-table [data]="props?.inputs?.dataset'
            ' | datasetLookupPipe:dataBindingRefreshTrigger"></cd-table>'
        )

    @pytest.mark.unit
    def test_safe_resource_attribute(self):
        factory = TemplateFactory(BuildMode.INTERNAL, "iframe")
        factory.add_safe_props_bound_resource_attribute("src")
        assert factory.build() == (
            '<iframe [src]="props?.inputs?.src | safeResourceURL"></iframe>'
        )

    @pytest.mark.unit
    def test_output_binding_with_key(self):
        """Output bindings extract the event key and write the input."""
        factory = TemplateFactory(BuildMode.INTERNAL, "cd-checkbox")
        factory.add_output_binding("change", "checked", "checked")
        assert factory.build() == (
            "<cd-checkbox (change)=\"onOutputChange($event.checked,elementId,'checked')\">"
            "</cd-checkbox>"
        )

    @pytest.mark.unit
    def test_output_binding_without_write(self):
        factory = TemplateFactory(BuildMode.INTERNAL, "cd-button")
        factory.add_output_binding("clicked", "clicked", write_value=False)
        assert factory.build() == (
            "<cd-button (clicked)=\"onOutputChange($event,elementId,'clicked',false)\">"
            "</cd-button>"
        )

    @pytest.mark.unit
    def test_element_class_prefix_binding(self):
        factory = TemplateFactory(BuildMode.INTERNAL, "cd-outlet")
        factory.add_element_class_prefix_binding(True, "slot")
        assert factory.build() == (
            "<cd-outlet [elementClassPrefix]=\"elementId + i + '-slot'"
            ' | classPrefixPipe : elementClassPrefix"></cd-outlet>'
        )

    @pytest.mark.unit
    def test_inner_text_binding(self):
        factory = TemplateFactory(BuildMode.INTERNAL, "span").add_inner_text_binding("label")
        assert factory.build() == "<span>{{ props?.inputs?.label }}</span>"


class TestTemplateFactoryStructural:
    """Tests for structural directives."""

    @pytest.mark.unit
    def test_last_if_wins(self):
        """A later ngIf replaces the earlier one."""
        factory = TemplateFactory(BuildMode.INTERNAL, "div").add_if("a").add_if("b")
        assert factory.build() == '<div *ngIf="b"></div>'

    @pytest.mark.unit
    def test_if_else(self):
        factory = TemplateFactory(BuildMode.INTERNAL, "div").add_if_else("ok", "errRef")
        assert factory.build() == '<div *ngIf="ok; else errRef"></div>'

    @pytest.mark.unit
    def test_for_with_index(self):
        factory = TemplateFactory(BuildMode.INTERNAL, "ng-container")
        factory.add_for("item", "items", True)
        assert factory.build() == (
            '<ng-container *ngFor="let item of props?.inputs?.items; let i = index">'
            "</ng-container>"
        )

    @pytest.mark.unit
    def test_last_for_wins(self):
        factory = TemplateFactory(BuildMode.INTERNAL, "li")
        factory.add_for("a", "first").add_for("b", "second")
        assert factory.build() == '<li *ngFor="let b of props?.inputs?.second;"></li>'

    @pytest.mark.unit
    def test_tag_switch(self):
        """Tag switches render one case per tag sharing the same attributes."""
        factory = TemplateFactory(BuildMode.INTERNAL, "h1").add_css_class("t")
        factory.add_tag_bound_input_switch("level", ["h1", "h2"])
        assert factory.build() == (
            '<ng-container [ngSwitch]="props?.inputs?.level">'
            "<h1 class=\"t\" *ngSwitchCase=\"'h1'\"></h1>"
            "<h2 class=\"t\" *ngSwitchCase=\"'h2'\"></h2>"
            "</ng-container>"
        )


class TestTemplateFactoryModes:
    """Tests for mode-dependent behaviour."""

    @pytest.mark.unit
    def test_export_tag_name(self):
        """Export modes use the export tag name."""
        simple = TemplateFactory(BuildMode.SIMPLE, "cd-button").set_export_tag_name("button")
        internal = TemplateFactory(BuildMode.INTERNAL, "cd-button").set_export_tag_name("button")
        assert simple.build() == "<button></button>"
        assert internal.build() == "<cd-button></cd-button>"

    @pytest.mark.unit
    def test_allow_children_internal_only(self):
        """The child iterator is only added in Internal mode."""
        internal = TemplateFactory(BuildMode.INTERNAL, "div").allow_children()
        simple = TemplateFactory(BuildMode.SIMPLE, "div").allow_children()
        assert internal.build() == f"<div>{CHILD_ITERATOR}</div>"
        assert simple.build() == "<div></div>"

    @pytest.mark.unit
    def test_if_internal_and_if_export(self):
        """Mode callbacks only run in their mode."""
        factory = TemplateFactory(BuildMode.APPLICATION, "div")
        factory.if_internal(lambda f: f.add_attribute("a", "1"))
        factory.if_export(lambda f: f.add_attribute("b", "2"))
        assert factory.build() == '<div b="2"></div>'

    @pytest.mark.unit
    def test_simple_mode_seeds_instance_attributes(self):
        """Simple mode adds valid instance attributes and the element class."""
        instance = InstanceData(
            id="el1",
            name="Title",
            attrs=(
                KeyValue(name="title", value="Hi"),
                KeyValue(name="hidden", value=True),
                KeyValue(name="skip", value="x", disabled=True),
                KeyValue(name="gone", value=False),
            ),
            a11y_inputs=A11yInputs(aria_attrs=(KeyValue(name="aria-label", value="T"),)),
        )
        factory = TemplateFactory(BuildMode.SIMPLE, "h1", instance)
        assert factory.build() == (
            '<h1 title="Hi" hidden aria-label="T" class="title__el1"></h1>'
        )

    @pytest.mark.unit
    def test_application_mode_ignores_instance(self):
        instance = InstanceData(id="el1", attrs=(KeyValue(name="title", value="Hi"),))
        assert TemplateFactory(BuildMode.APPLICATION, "p", instance).build() == "<p></p>"

    @pytest.mark.unit
    def test_default_attributes(self):
        """Default attributes are emitted in a fixed order."""
        factory = TemplateFactory(BuildMode.INTERNAL, "div").add_default_attributes()
        assert factory.build() == (
            "<div "
            '[class.cd-render-rect-marker]="!instanceId" '
            'class="cd-rendered-element" '
            '[attr.data-id]="elementId" '
            '[attr.data-full-id-path]="elementId | fullIdPathPipe : ancestors" '
            '[cdStyle]="styleMap[elementId]" '
            '[classPrefix]="elementClassPrefix" '
            '[class.cd-preview-styles]="props?.showPreviewStyles" '
            '[cdHidden]="props?.inputs?.hidden'
            ' | dataBindingLookupPipe:dataBindingRefreshTrigger | coerceBooleanPipe" '
            '[cdCoTooltip]="props?.inputs?.tooltipLabel" '
            '[cdCoTooltipPosition]="props?.inputs?.tooltipPosition" '
            '[cdAttrs]="props?.attrs" '
            '[cdA11yAttrs]="props?.a11yInputs"'
            "></div>"
        )
