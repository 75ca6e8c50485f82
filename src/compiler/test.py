"""Tests for the component definition compiler."""

import pytest

from src.definition import (
    BindingType,
    BuildMode,
    ComponentDefinition,
    ComponentVariant,
    CssClassBinding,
    MenuItem,
    OptionsConfig,
    OutputProperty,
    OutputPropertyType,
    PropertyGroup,
    PropertyInput,
)
from src.instance import A11yInputs, InstanceData, KeyValue

from .lib import ChildTypeError, CompilationError, compile_definition, get_template_function


def inner(**fields) -> ComponentDefinition:
    """Definition compiled without the default scaffolding attributes."""
    return ComponentDefinition(is_inner_child=True, **fields)


def inputs(**values) -> InstanceData:
    return InstanceData(inputs=values)


class Divider(ComponentDefinition):
    id: str = "divider"
    title: str | None = "Divider"
    tag_name: str | None = "hr"


LABEL = PropertyGroup(name="label", binding_type=BindingType.TEXT)

TEXT_INPUT = ComponentDefinition(
    id="field",
    title="Field",
    export_props_as_attrs=True,
    properties=(
        PropertyGroup(
            name="variant",
            binding_type=BindingType.VARIANT,
            menu_data=(MenuItem(value="input"), MenuItem(value="textarea")),
        ),
        PropertyGroup(name="rows", variant="textarea"),
    ),
    variants={
        "input": ComponentVariant(tag_name="input"),
        "textarea": ComponentVariant(tag_name="textarea"),
    },
)

# =============================================================================
# Template Function
# =============================================================================


class TestTemplateFunction:
    """Tests for the compiled template function."""

    @pytest.mark.unit
    def test_export_text(self):
        """Export modes render literal input values."""
        button = ComponentDefinition(id="button", tag_name="button", properties=(LABEL,))
        render = get_template_function(button)
        assert render(BuildMode.APPLICATION, inputs(label="Save")) == "<button>Save</button>"

    @pytest.mark.unit
    def test_simple_mode_adds_class_name(self):
        """Simple mode tags elements with their deterministic class name."""
        button = ComponentDefinition(id="button", tag_name="button", properties=(LABEL,))
        instance = InstanceData(id="b1", name="Button", inputs={"label": "Save"})
        assert button.render(BuildMode.SIMPLE, instance) == (
            '<button class="button__b1">Save</button>'
        )

    @pytest.mark.unit
    def test_mode_accepts_string(self):
        assert compile_definition(Divider(), "simple") == "<hr>"

    @pytest.mark.unit
    def test_custom_template_function(self):
        """A template function on the definition replaces compilation."""
        custom = ComponentDefinition(
            id="custom", template_fn=lambda mode, instance=None, content=None: "<x-custom>"
        )
        assert custom.render(BuildMode.INTERNAL) == "<x-custom>"

    @pytest.mark.unit
    def test_repeated_calls_identical(self):
        """Compiling twice with the same arguments yields identical markup."""
        render = get_template_function(TEXT_INPUT)
        instance = InstanceData(id="f1", name="Field", inputs={"variant": "textarea", "rows": 2})
        for mode in BuildMode:
            assert render(mode, instance, "<b>x</b>") == render(mode, instance, "<b>x</b>")

    @pytest.mark.unit
    def test_internal_output_has_no_instance_values(self):
        """Internal markup binds inputs instead of embedding their values."""
        href = PropertyGroup(name="href", binding_type=BindingType.ATTRIBUTE)
        link = ComponentDefinition(id="link", tag_name="a", properties=(LABEL, href))
        instance = InstanceData(id="l1", name="Link", inputs={"label": "Pricing", "href": "/plans"})
        html = link.render(BuildMode.INTERNAL, instance)
        assert "Pricing" not in html
        assert "/plans" not in html
        assert "props?.inputs?.label" in html

    @pytest.mark.unit
    def test_simple_output_has_no_binding_syntax(self):
        """Simple markup holds literal values only."""
        href = PropertyGroup(name="href", binding_type=BindingType.ATTRIBUTE)
        link = ComponentDefinition(id="link", tag_name="a", properties=(LABEL, href))
        instance = InstanceData(id="l1", name="Link", inputs={"label": "Pricing", "href": "/plans"})
        html = link.render(BuildMode.SIMPLE, instance)
        assert 'href="/plans"' in html
        assert ">Pricing</a>" in html
        for token in ("[", "(", "{{"):
            assert token not in html


# =============================================================================
# Scaffolding
# =============================================================================


class TestScaffolding:
    """Tests for internal-only scaffolding."""

    @pytest.mark.unit
    def test_internal_top_level_has_default_attributes(self):
        html = ComponentDefinition(id="g", tag_name="div").render(BuildMode.INTERNAL)
        assert '[attr.data-id]="elementId"' in html
        assert '[cdStyle]="styleMap[elementId]"' in html

    @pytest.mark.unit
    def test_exports_have_no_scaffolding(self):
        """Exported markup never references internal render state."""
        definition = ComponentDefinition(id="g", tag_name="div", fit_content=True)
        html = definition.render(BuildMode.APPLICATION, inputs())
        assert html == "<div></div>"

    @pytest.mark.unit
    def test_inner_child_skips_default_attributes(self):
        html = inner(id="b", tag_name="button", properties=(LABEL,)).render(BuildMode.INTERNAL)
        assert html == "<button>{{ props?.inputs?.label }}</button>"

    @pytest.mark.unit
    def test_fit_content(self):
        definition = ComponentDefinition(id="g", tag_name="div", fit_content=True)
        assert 'class="cd-rendered-element cd-fit-content"' in definition.render(
            BuildMode.INTERNAL
        )

    @pytest.mark.unit
    def test_wrapper_receives_scaffolding(self):
        """Default attributes go on the wrapper; the tag is nested inside it."""
        definition = ComponentDefinition(
            id="b", tag_name="button", wrapper_tag="div", properties=(LABEL,)
        )
        html = definition.render(BuildMode.INTERNAL)
        assert html.startswith("<div [class.cd-render-rect-marker]")
        assert html.endswith("<button>{{ props?.inputs?.label }}</button></div>")

    @pytest.mark.unit
    def test_wrapper_ignored_in_export(self):
        definition = ComponentDefinition(id="b", tag_name="button", wrapper_tag="div")
        assert definition.render(BuildMode.APPLICATION) == "<button></button>"

    @pytest.mark.unit
    def test_directives_internal_only(self):
        definition = inner(id="d", tag_name="div", directives=("cdDrag",))
        assert definition.render(BuildMode.INTERNAL) == "<div cdDrag></div>"
        assert definition.render(BuildMode.APPLICATION) == "<div></div>"

    @pytest.mark.unit
    def test_bind_if(self):
        definition = inner(id="d", tag_name="div", bind_if="visible")
        assert definition.render(BuildMode.INTERNAL) == (
            '<div *ngIf="props?.inputs?.visible"></div>'
        )

    @pytest.mark.unit
    def test_children_allowed(self):
        definition = inner(id="d", tag_name="div", children_allowed=True)
        assert "[ngTemplateOutlet]=\"children\"" in definition.render(BuildMode.INTERNAL)
        assert definition.render(BuildMode.APPLICATION) == "<div></div>"

    @pytest.mark.unit
    def test_content_export_only(self):
        """Content is appended in export modes and ignored internally."""
        definition = inner(id="d", tag_name="section")
        assert definition.render(BuildMode.APPLICATION, None, "<p>x</p>") == (
            "<section><p>x</p></section>"
        )
        assert definition.render(BuildMode.INTERNAL, None, "<p>x</p>") == "<section></section>"

    @pytest.mark.unit
    def test_export_tag_name(self):
        definition = inner(id="b", tag_name="cd-button", export_tag_name="button")
        assert definition.render(BuildMode.INTERNAL) == "<cd-button></cd-button>"
        assert definition.render(BuildMode.APPLICATION) == "<button></button>"


# =============================================================================
# Classes and Attributes
# =============================================================================


class TestClassesAndAttributes:
    """Tests for static classes and attributes."""

    @pytest.mark.unit
    def test_bound_class(self):
        """Bound classes are live internally and static when truthy in export."""
        definition = inner(
            id="d",
            tag_name="div",
            css=("a", CssClassBinding(class_name="active", binding="isActive")),
        )
        assert definition.render(BuildMode.INTERNAL) == (
            '<div class="a" [class.active]="props?.inputs?.isActive"></div>'
        )
        assert definition.render(BuildMode.APPLICATION, inputs(isActive=True)) == (
            '<div class="a active"></div>'
        )
        assert definition.render(BuildMode.APPLICATION, inputs(isActive=False)) == (
            '<div class="a"></div>'
        )

    @pytest.mark.unit
    def test_static_attributes(self):
        """False and None are skipped, True is bare, zero is kept."""
        definition = inner(
            id="b",
            tag_name="button",
            attrs={"type": "button", "disabled": True, "hidden": False, "tabindex": 0},
        )
        assert definition.render(BuildMode.APPLICATION) == (
            '<button type="button" disabled tabindex="0"></button>'
        )

    @pytest.mark.unit
    def test_aria_attributes(self):
        definition = inner(id="b", tag_name="button")
        instance = InstanceData(
            a11y_inputs=A11yInputs(aria_attrs=(KeyValue(name="aria-label", value="Close"),))
        )
        assert definition.render(BuildMode.APPLICATION, instance) == (
            '<button aria-label="Close"></button>'
        )


# =============================================================================
# Property Bindings
# =============================================================================


class TestPropertyBindings:
    """Tests for property binding kinds."""

    @pytest.mark.unit
    def test_attribute_binding(self):
        href = PropertyGroup(name="href", binding_type=BindingType.ATTRIBUTE)
        definition = inner(id="a", tag_name="a", properties=(href,))
        assert definition.render(BuildMode.INTERNAL) == (
            '<a [attr.href]="props?.inputs?.href | conditionalAttrPipe"></a>'
        )
        assert definition.render(BuildMode.APPLICATION, inputs(href="/x")) == '<a href="/x"></a>'
        assert definition.render(BuildMode.APPLICATION, inputs(href=False)) == "<a></a>"

    @pytest.mark.unit
    def test_attribute_binding_true_and_none(self):
        """True renders a bare attribute; None omits it."""
        hidden = PropertyGroup(name="hidden", binding_type=BindingType.ATTRIBUTE)
        definition = inner(id="d", tag_name="div", properties=(hidden,))
        assert definition.render(BuildMode.APPLICATION, inputs(hidden=True)) == "<div hidden></div>"
        assert definition.render(BuildMode.APPLICATION, inputs(hidden=None)) == "<div></div>"

    @pytest.mark.unit
    def test_input_name_override(self):
        prop = PropertyGroup(name="src", input_name="url", binding_type=BindingType.ATTRIBUTE)
        definition = inner(id="i", tag_name="img", properties=(prop,))
        assert "props?.inputs?.url" in definition.render(BuildMode.INTERNAL)
        assert definition.render(BuildMode.APPLICATION, inputs(url="a.png")) == '<img src="a.png">'

    @pytest.mark.unit
    def test_data_bindable_text(self):
        prop = PropertyGroup(
            name="label", binding_type=BindingType.TEXT, data_bindable=True, coerce_type="string"
        )
        definition = inner(id="s", tag_name="span", properties=(prop,))
        assert definition.render(BuildMode.INTERNAL) == (
            "<span>{{ props?.inputs?.label"
            " | dataBindingLookupPipe:dataBindingRefreshTrigger | coerceStringPipe }}</span>"
        )

    @pytest.mark.unit
    def test_property_binding(self):
        """Plain properties are exported only with export_props_as_attrs."""
        prop = PropertyGroup(name="disabled")
        definition = inner(id="b", tag_name="button", properties=(prop,))
        assert definition.render(BuildMode.INTERNAL) == (
            '<button [disabled]="props?.inputs?.disabled"></button>'
        )
        assert definition.render(BuildMode.APPLICATION, inputs(disabled=True)) == (
            "<button></button>"
        )
        exported = definition.model_copy(update={"export_props_as_attrs": True})
        assert exported.render(BuildMode.APPLICATION, inputs(disabled=True)) == (
            "<button disabled></button>"
        )

    @pytest.mark.unit
    def test_html_binding(self):
        prop = PropertyGroup(name="content", binding_type=BindingType.HTML)
        definition = inner(id="t", tag_name="div", properties=(prop,))
        assert definition.render(BuildMode.INTERNAL) == (
            '<div [cdTextInject]="props?.inputs?.content"'
            ' [richText]="props?.inputs?.richText"></div>'
        )
        assert definition.render(BuildMode.APPLICATION, inputs(content="<b>x</b>")) == (
            "<div><b>x</b></div>"
        )

    @pytest.mark.unit
    def test_css_var_binding(self):
        """Css var bindings are internal only."""
        prop = PropertyGroup(name="--gap", binding_type=BindingType.CSS_VAR)
        definition = inner(id="d", tag_name="div", properties=(prop,))
        assert definition.render(BuildMode.INTERNAL) == (
            "<div [style.--gap]=\"props?.inputs['--gap'] | cssVarPipe\"></div>"
        )
        assert definition.render(BuildMode.APPLICATION, inputs(**{"--gap": "4px"})) == (
            "<div></div>"
        )

    @pytest.mark.unit
    def test_dataset_select(self):
        prop = PropertyGroup(name="data", input_type=PropertyInput.DATASET_SELECT)
        definition = inner(id="t", tag_name="cd-table", properties=(prop,))
        assert definition.render(BuildMode.INTERNAL) == (
            '<cd-table [data]="props?.inputs?.data'
            ' | datasetLookupPipe:dataBindingRefreshTrigger"></cd-table>'
        )

    @pytest.mark.unit
    def test_none_binding(self):
        prop = PropertyGroup(name="notes", binding_type=BindingType.NONE)
        definition = inner(id="d", tag_name="div", properties=(prop,))
        assert definition.render(BuildMode.INTERNAL) == "<div></div>"

    @pytest.mark.unit
    def test_portal_slot_has_no_property_binding(self):
        prop = PropertyGroup(name="content", input_type=PropertyInput.PORTAL_SLOT)
        html = inner(id="d", tag_name="div", properties=(prop,)).render(BuildMode.INTERNAL)
        assert "[content]" not in html
        assert html.count("<cd-outlet") == 1

    @pytest.mark.unit
    def test_unique_selection(self):
        """Unique selection lists bind the selectedIndex companion input."""
        prop = PropertyGroup(
            name="items",
            input_type=PropertyInput.LIST,
            options_config=OptionsConfig(supports_selection=True, supports_unique_selection=True),
        )
        definition = inner(id="l", tag_name="cd-list", properties=(prop,))
        assert definition.render(BuildMode.INTERNAL) == (
            '<cd-list [selectedIndex]="props?.inputs?.selectedIndex"'
            ' [items]="props?.inputs?.items"></cd-list>'
        )
        assert definition.render(BuildMode.APPLICATION, inputs(selectedIndex=0)) == (
            '<cd-list selectedIndex="0"></cd-list>'
        )


class TestTagBinding:
    """Tests for tag-name bound properties."""

    LEVEL = PropertyGroup(
        name="level",
        binding_type=BindingType.TAG,
        menu_data=(MenuItem(value="h1"), MenuItem(value="h2")),
    )

    @pytest.mark.unit
    def test_internal_switch(self):
        definition = inner(id="h", properties=(self.LEVEL,))
        assert definition.render(BuildMode.INTERNAL) == (
            '<ng-container [ngSwitch]="props?.inputs?.level">'
            "<h1 *ngSwitchCase=\"'h1'\"></h1>"
            "<h2 *ngSwitchCase=\"'h2'\"></h2>"
            "</ng-container>"
        )

    @pytest.mark.unit
    def test_export_selected_tag(self):
        definition = inner(id="h", tag_name="h1", properties=(self.LEVEL,))
        assert definition.render(BuildMode.APPLICATION, inputs(level="h2")) == "<h2></h2>"

    @pytest.mark.unit
    def test_export_defaults_to_first_tag(self):
        definition = inner(id="h", properties=(self.LEVEL,))
        assert definition.render(BuildMode.APPLICATION) == "<h1></h1>"

    @pytest.mark.unit
    def test_missing_menu_data(self):
        prop = PropertyGroup(name="level", binding_type=BindingType.TAG)
        definition = inner(id="h", tag_name="h1", properties=(prop,))
        with pytest.raises(CompilationError, match="Missing menu data"):
            definition.render(BuildMode.INTERNAL)


# =============================================================================
# Outputs
# =============================================================================


class TestOutputs:
    """Tests for output bindings."""

    @pytest.mark.unit
    def test_output_binding(self):
        definition = inner(
            id="c",
            tag_name="cd-checkbox",
            outputs=(
                OutputProperty(binding="checked", event_name="change", event_key="checked"),
                OutputProperty(binding="clicked", type=OutputPropertyType.NONE),
            ),
        )
        html = definition.render(BuildMode.INTERNAL)
        assert "(change)=\"onOutputChange($event.checked,elementId,'checked')\"" in html
        assert "(clicked)=\"onOutputChange($event,elementId,'clicked',false)\"" in html
        assert definition.render(BuildMode.APPLICATION) == "<cd-checkbox></cd-checkbox>"


# =============================================================================
# Children
# =============================================================================


class TestChildren:
    """Tests for recursively compiled children."""

    @pytest.mark.unit
    def test_child_kinds(self):
        """Strings, definitions, mappings, classes and functions are supported."""
        title = ComponentDefinition(id="t", tag_name="span", properties=(
            PropertyGroup(name="title", binding_type=BindingType.TEXT),
        ))
        definition = inner(
            id="card",
            tag_name="div",
            children=(
                "<br>",
                title,
                {"id": "i", "tag_name": "img"},
                Divider,
                lambda mode, instance: f"<!--{mode.value}-->",
            ),
        )
        assert definition.render(BuildMode.APPLICATION, inputs(title="Hi")) == (
            "<div><br><span>Hi</span><img><hr><!--application--></div>"
        )

    @pytest.mark.unit
    def test_children_have_no_scaffolding(self):
        definition = ComponentDefinition(id="card", tag_name="div", children=(Divider,))
        html = definition.render(BuildMode.INTERNAL)
        assert html.count("[attr.data-id]") == 1
        assert html.endswith("<hr></div>")

    @pytest.mark.unit
    def test_children_inherit_export_props_as_attrs(self):
        child = ComponentDefinition(id="c", tag_name="input", properties=(
            PropertyGroup(name="value"),
        ))
        definition = inner(
            id="p", tag_name="label", children=(child,), export_props_as_attrs=True
        )
        assert definition.render(BuildMode.APPLICATION, inputs(value="x")) == (
            '<label><input value="x"></label>'
        )

    @pytest.mark.unit
    def test_non_definition_class_rejected(self):
        definition = inner(id="p", tag_name="div", children=(dict,))
        with pytest.raises(ChildTypeError, match="must extend ComponentDefinition"):
            definition.render(BuildMode.INTERNAL)

    @pytest.mark.unit
    def test_unsupported_child_rejected(self):
        definition = inner(id="p", tag_name="div", children=(42,))
        with pytest.raises(ChildTypeError, match="Incorrect component child type"):
            definition.render(BuildMode.INTERNAL)


# =============================================================================
# Variants
# =============================================================================


class TestVariants:
    """Tests for variant resolution."""

    @pytest.mark.unit
    def test_internal_switch(self):
        """Internal builds render every variant as a switch case."""
        html = TEXT_INPUT.render(BuildMode.INTERNAL)
        assert html.startswith('<ng-container [ngSwitch]="props?.inputs?.variant">')
        assert "*ngSwitchCase=\"'input'\"" in html
        assert "*ngSwitchCase=\"'textarea'\"" in html
        assert html.count("[attr.data-id]") == 2
        assert html.count('[rows]="props?.inputs?.rows"') == 1

    @pytest.mark.unit
    def test_export_selected_variant(self):
        """Variant-scoped properties apply to the selected variant."""
        instance = inputs(variant="textarea", rows=3)
        assert TEXT_INPUT.render(BuildMode.APPLICATION, instance) == (
            '<textarea rows="3"></textarea>'
        )

    @pytest.mark.unit
    def test_export_defaults_to_first_variant(self):
        assert TEXT_INPUT.render(BuildMode.APPLICATION) == "<input>"
        assert TEXT_INPUT.render(BuildMode.APPLICATION, inputs(variant="unknown")) == "<input>"

    @pytest.mark.unit
    def test_variant_input_name(self):
        """The variant is read from the property's input name."""
        kind = PropertyGroup(
            name="variant",
            input_name="kind",
            binding_type=BindingType.VARIANT,
            menu_data=(MenuItem(value="input"), MenuItem(value="textarea")),
        )
        definition = TEXT_INPUT.model_copy(update={"properties": (kind,)})
        html = definition.render(BuildMode.INTERNAL)
        assert html.startswith('<ng-container [ngSwitch]="props?.inputs?.kind">')
        assert definition.render(BuildMode.APPLICATION, inputs(kind="textarea")) == (
            "<textarea></textarea>"
        )
        assert definition.render(BuildMode.APPLICATION, inputs(variant="textarea")) == "<input>"

    @pytest.mark.unit
    def test_missing_variant_property(self):
        definition = ComponentDefinition(
            id="v", tag_name="div", variants={"a": ComponentVariant(tag_name="span")}
        )
        with pytest.raises(CompilationError, match="Missing variant bound property"):
            definition.render(BuildMode.INTERNAL)
