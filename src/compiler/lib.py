"""Component definition compiler.

Turns a ComponentDefinition into a template function producing markup for
a build mode. Compilation resolves variants, the optional wrapper tag,
static classes and attributes, recursively compiled children, portal
slots, property bindings and output bindings.
"""

from typing import Any, Iterable, Mapping

from src.core.log import get_logger
from src.definition import (
    BindingType,
    BuildMode,
    ComponentDefinition,
    CssClassBinding,
    MenuItem,
    OutputProperty,
    OutputPropertyType,
    PropertyGroup,
    PropertyInput,
    TemplateFunction,
    is_definition_class,
)
from src.factory import TemplateFactory
from src.factory.expressions import (
    CD_TEXT_INJECT_DIRECTIVE,
    NG_CONTAINER,
    RICH_TEXT_ATTR,
    SELECTED_INDEX_ATTR,
    wrap_in_single_quotes,
)
from src.instance import InstanceData, KeyValue, is_valid_attribute_value
from src.portal import add_portal_slots

logger = get_logger("compiler")

LIST_INPUTS = (PropertyInput.LIST, PropertyInput.DYNAMIC_LIST)


class CompilationError(Exception):
    """Raised when a definition cannot be compiled to markup.

    Attributes:
        component_id: Id of the definition being compiled.
    """

    def __init__(self, message: str, component_id: str | None = None):
        super().__init__(message)
        self.component_id = component_id


class ChildTypeError(CompilationError):
    """Raised when a definition declares a child of an unsupported kind."""


# =============================================================================
# Template Function
# =============================================================================


def get_template_function(definition: ComponentDefinition) -> TemplateFunction:
    """Return the compiled template function of a definition.

    The returned function has the signature
    ``(mode, instance=None, content=None) -> str``.

    Example:
        >>> render = get_template_function(ComponentDefinition(id="x", tag_name="hr"))
        >>> render(BuildMode.SIMPLE)
        '<hr>'
    """

    def template(
        mode: BuildMode | str,
        instance: InstanceData | None = None,
        content: str | None = None,
    ) -> str:
        return compile_definition(definition, mode, instance, content)

    return template


def compile_definition(
    definition: ComponentDefinition,
    mode: BuildMode | str,
    instance: InstanceData | None = None,
    content: str | None = None,
) -> str:
    """Compile a definition to markup.

    Args:
        definition: Definition to compile.
        mode: Build mode.
        instance: Instance data supplying input values in export modes.
        content: Child markup appended in export modes.

    Returns:
        Markup text.

    Raises:
        CompilationError: If the definition is malformed.
    """
    mode = BuildMode(mode)
    if definition.has_variants:
        factory = _create_variant_factory(definition, mode, instance, content)
    else:
        factory = create_template_factory(definition, mode, instance, content)
    return factory.build()


def _create_variant_factory(
    definition: ComponentDefinition,
    mode: BuildMode,
    instance: InstanceData | None,
    content: str | None,
) -> TemplateFactory:
    variant_prop = definition.variant_property()
    if variant_prop is None:
        raise CompilationError("Missing variant bound property", definition.id)
    if not variant_prop.name:
        raise CompilationError("Missing property name", definition.id)

    variant_name = variant_prop.resolved_input_name
    variants = [(name, definition.with_variant(name)) for name in definition.variants]

    if mode is BuildMode.INTERNAL:
        return build_variant_switch(variant_name, variants, instance, content)

    # Export renders only the selected variant, or the first one
    selected = instance.inputs.get(variant_name) if instance else None
    name, variant = variants[0]
    for candidate_name, candidate in variants:
        if selected and candidate_name == selected:
            name, variant = candidate_name, candidate
            break

    logger.debug(f"Exporting '{definition.id}' as variant '{name}'")
    return create_template_factory(variant, mode, instance, content, name)


def build_variant_switch(
    property_name: str,
    variants: Iterable[tuple[str, ComponentDefinition]],
    instance: InstanceData | None = None,
    content: str | None = None,
) -> TemplateFactory:
    """Render every variant as one case of a switch on the variant input."""
    container = TemplateFactory(BuildMode.INTERNAL, NG_CONTAINER)
    container.add_props_bound_input_switch(property_name)
    for name, variant in variants:
        factory = create_template_factory(variant, BuildMode.INTERNAL, instance, content, name)
        factory.add_switch_case(wrap_in_single_quotes(name))
        container.add_child(factory.build())
    return container


# =============================================================================
# Single Definition
# =============================================================================


def create_template_factory(
    definition: ComponentDefinition,
    mode: BuildMode,
    instance: InstanceData | None = None,
    content: str | None = None,
    current_variant: str | None = None,
) -> TemplateFactory:
    """Build the factory of a single (variant-free) definition."""
    factory = TemplateFactory(mode, definition.tag_name or "", instance)
    is_internal = factory.is_internal
    wrapper = build_wrapper_factory(factory, definition)

    # Scaffolding goes on the outermost tag and is skipped for nested children
    if is_internal and not definition.is_inner_child:
        top_level = wrapper if wrapper is not None else factory
        top_level.add_default_attributes()
        if definition.fit_content:
            top_level.add_fit_content_class()

    add_css_classes(definition.css, factory, instance)
    add_attributes(definition.attrs, factory, instance.aria_attrs if instance else ())
    add_directives(definition.directives, factory)
    factory.allow_children(definition.children_allowed)

    for child in definition.children:
        factory.add_child(render_child(definition, child, mode, instance))

    add_portal_slots(definition.properties, factory)

    if not is_internal and content:
        factory.add_child(content)

    if definition.export_tag_name:
        factory.set_export_tag_name(definition.export_tag_name)

    if is_internal and definition.bind_if:
        factory.add_if_condition_props(definition.bind_if, True)

    add_property_bindings(definition, factory, instance, current_variant)
    add_output_bindings(definition.outputs, factory, current_variant)
    return factory


def build_wrapper_factory(
    factory: TemplateFactory,
    definition: ComponentDefinition,
) -> TemplateFactory | None:
    """Create and link the wrapper factory (Internal only)."""
    if not factory.is_internal or not definition.wrapper_tag:
        return None
    wrapper = TemplateFactory(factory.mode, definition.wrapper_tag)
    factory.add_wrapper(wrapper)
    return wrapper


def add_css_classes(
    classes: Iterable[str | CssClassBinding],
    factory: TemplateFactory,
    instance: InstanceData | None = None,
) -> None:
    """Add static classes and input-bound classes.

    Bound classes are live bindings internally; exports add the class
    statically when the instance input is truthy.
    """
    for css in classes:
        if isinstance(css, str):
            factory.add_css_class(css)
        elif factory.is_internal:
            factory.add_class_props_binding(css.class_name, css.binding, True)
        elif instance is not None and instance.inputs.get(css.binding):
            factory.add_css_class(css.class_name)


def _add_attribute(key: str, value: Any, factory: TemplateFactory) -> None:
    """Add a plain attribute, skipping False and None; True renders a bare key."""
    if not key or not is_valid_attribute_value(value):
        return
    factory.add_attribute(key, "" if value is True else value)


def add_attributes(
    attrs: Mapping[str, Any],
    factory: TemplateFactory,
    aria_attrs: Iterable[KeyValue] = (),
) -> None:
    for key, value in attrs.items():
        _add_attribute(key, value, factory)
    for attr in aria_attrs:
        _add_attribute(attr.name, attr.value, factory)


def add_directives(directives: Iterable[str], factory: TemplateFactory) -> None:
    """Add structural directives (Internal only)."""
    if not factory.is_internal:
        return
    for directive in directives:
        factory.add_directive(directive)


# =============================================================================
# Children
# =============================================================================


def render_child(
    parent: ComponentDefinition,
    child: Any,
    mode: BuildMode,
    instance: InstanceData | None = None,
) -> str:
    """Render one declared child of a definition.

    Supported children:
        - markup strings, emitted verbatim
        - template functions, called with ``(mode, instance)``
        - ComponentDefinition instances and subclasses
        - mappings of ComponentDefinition fields

    Definitions are compiled as inner children (no scaffolding attributes)
    inheriting the parent's ``export_props_as_attrs``.

    Raises:
        ChildTypeError: If the child is of an unsupported kind.
    """
    if isinstance(child, str):
        return child

    if isinstance(child, ComponentDefinition):
        definition = child
    elif is_definition_class(child):
        definition = child()
    elif isinstance(child, type):
        raise ChildTypeError("Child classes must extend ComponentDefinition", parent.id)
    elif callable(child):
        return child(mode, instance)
    elif isinstance(child, Mapping):
        definition = ComponentDefinition(**child)
    else:
        raise ChildTypeError(
            f"Incorrect component child type: {type(child).__name__}", parent.id
        )

    inner = definition.model_copy(
        update={
            "is_inner_child": True,
            "export_props_as_attrs": parent.export_props_as_attrs,
        }
    )
    return inner.template(mode, instance)


# =============================================================================
# Bindings
# =============================================================================


def add_property_bindings(
    definition: ComponentDefinition,
    factory: TemplateFactory,
    instance: InstanceData | None = None,
    current_variant: str | None = None,
) -> None:
    """Bind every named property according to its binding type.

    Internal builds emit live bindings; export builds emit the instance's
    current values as attributes, text or the selected tag name.
    """
    inputs = instance.inputs if instance is not None else {}
    is_internal = factory.is_internal

    for prop in definition.all_properties:
        if not prop.name:
            continue
        if prop.variant and prop.variant != current_variant:
            continue
        if prop.input_type == PropertyInput.PORTAL_SLOT:
            continue

        input_name = prop.resolved_input_name
        value = inputs.get(input_name)

        if _has_unique_selection(prop):
            if is_internal:
                factory.add_props_bound_input_attribute(SELECTED_INDEX_ATTR)
            else:
                _add_attribute(SELECTED_INDEX_ATTR, inputs.get(SELECTED_INDEX_ATTR), factory)

        _bind_property(definition, prop, input_name, value, factory, instance)


def _has_unique_selection(prop: PropertyGroup) -> bool:
    config = prop.options_config
    return (
        prop.input_type in LIST_INPUTS
        and config is not None
        and config.supports_selection
        and config.supports_unique_selection
    )


def _bind_property(
    definition: ComponentDefinition,
    prop: PropertyGroup,
    input_name: str,
    value: Any,
    factory: TemplateFactory,
    instance: InstanceData | None,
) -> None:
    binding = prop.binding_type
    name = prop.name
    bindable = prop.data_bindable
    coerce = prop.coerce_type
    is_internal = factory.is_internal

    if binding in (BindingType.NONE, BindingType.VARIANT):
        return

    if binding == BindingType.ATTRIBUTE:
        if is_internal:
            factory.add_attr_bound_input_attribute(name, input_name, bindable, coerce)
        else:
            _add_attribute(name, value, factory)

    elif binding == BindingType.TEXT:
        if is_internal:
            factory.add_inner_text_binding(input_name, True, bindable, coerce)
        elif value is not None:
            factory.add_child(value)

    elif binding == BindingType.HTML:
        if is_internal:
            factory.add_props_bound_input_attribute(
                CD_TEXT_INJECT_DIRECTIVE, input_name, bindable, coerce
            )
            factory.add_props_bound_input_attribute(RICH_TEXT_ATTR, RICH_TEXT_ATTR)
        elif value is not None:
            factory.add_child(value)

    elif binding == BindingType.TAG:
        _bind_tag_name(definition, input_name, prop.menu_data, factory, instance)

    elif binding == BindingType.CSS_VAR:
        # Exports do not carry css var values
        if is_internal:
            factory.add_css_var_input_binding(name, input_name)

    elif is_internal:
        if prop.input_type == PropertyInput.DATASET_SELECT:
            factory.add_props_bound_dataset_lookup(name, input_name)
        else:
            factory.add_props_bound_input_attribute(name, input_name, bindable, coerce)

    elif definition.export_props_as_attrs:
        _add_attribute(name, value, factory)


def _bind_tag_name(
    definition: ComponentDefinition,
    input_name: str,
    menu_data: tuple[MenuItem, ...] | None,
    factory: TemplateFactory,
    instance: InstanceData | None,
) -> None:
    if not menu_data:
        raise CompilationError("Missing menu data", definition.id)

    if factory.is_internal:
        factory.add_tag_bound_input_switch(input_name, [item.value for item in menu_data])
    else:
        selected = instance.inputs.get(input_name) if instance is not None else None
        factory.tag_name = selected or menu_data[0].value


def add_output_bindings(
    outputs: Iterable[OutputProperty],
    factory: TemplateFactory,
    current_variant: str | None = None,
) -> None:
    """Route output events back to inputs (Internal only)."""
    if not factory.is_internal:
        return
    for output in outputs:
        if output.variant and output.variant != current_variant:
            continue
        write_value = output.type != OutputPropertyType.NONE
        factory.add_output_binding(
            output.resolved_event_name, output.binding, output.event_key, write_value
        )
