"""Built-in component definitions.

Core definitions (board, symbol, symbol instance, board portal) host other
elements; primitives (generic, text, image, icon, embed, input) are the
basic building blocks offered in the editor.
"""

from typing import Any

from pydantic import Field

from src.definition import (
    BindingType,
    BuildMode,
    CoerceValue,
    ComponentDefinition,
    ComponentVariant,
    CssClassBinding,
    ElementEntitySubType,
    MenuItem,
    PropertyGroup,
    PropertyInput,
    ResizeType,
    TemplateFunction,
)
from src.factory import TemplateFactory, input_props_binding
from src.factory.expressions import DIV_TAG, circular_outlet_guard
from src.instance import InstanceData
from src.portal import PORTAL_ERROR_TEMPLATE_REF, generate_portal, generate_portal_zero_state
from src.registry import Registry, default_registry, register_component

CORE_LIBRARY = "core"
PRIMITIVE_LIBRARY = "primitive"
REFERENCE_ID = "referenceId"
VARIANT_ATTR = "variant"
VALUE_ATTR = "value"
PLACEHOLDER_ATTR = "placeholder"

# =============================================================================
# Template Functions
# =============================================================================


def _export_container(
    mode: BuildMode,
    instance: InstanceData | None,
    content: str | None,
) -> str:
    """Exports render referenced content inside a plain container."""
    return TemplateFactory(mode, DIV_TAG, instance).add_child(content).build()


def portal_template(
    mode: BuildMode | str,
    instance: InstanceData | None = None,
    content: str | None = None,
) -> str:
    """Render a board portal: an outlet for the referenced board, or a zero state."""
    mode = BuildMode(mode)
    if mode is not BuildMode.INTERNAL:
        return _export_container(mode, instance, content)

    reference = input_props_binding(REFERENCE_ID)
    portal = generate_portal(False, reference)
    portal.add_default_attributes()
    portal.add_if_else(circular_outlet_guard(reference), PORTAL_ERROR_TEMPLATE_REF)
    return portal.build() + generate_portal_zero_state(reference)


def symbol_instance_template(
    mode: BuildMode | str,
    instance: InstanceData | None = None,
    content: str | None = None,
) -> str:
    """Render a symbol instance through an outlet for its symbol."""
    mode = BuildMode(mode)
    if mode is not BuildMode.INTERNAL:
        return _export_container(mode, instance, content)

    reference = input_props_binding(REFERENCE_ID)
    outlet = generate_portal(False, reference)
    outlet.add_default_attributes().add_fit_content_class()
    outlet.add_if(circular_outlet_guard(reference))
    return outlet.build()


# =============================================================================
# Core
# =============================================================================

REFERENCE_PROPERTY = PropertyGroup(
    label="Board",
    name=REFERENCE_ID,
    input_type=PropertyInput.PORTAL_SELECT,
    binding_type=BindingType.NONE,
)


class Board(ComponentDefinition):
    title: str | None = "Board"
    library: str = CORE_LIBRARY
    tag_name: str | None = DIV_TAG
    css: tuple[str | CssClassBinding, ...] = ("cd-board",)
    children_allowed: bool = True
    auto_add_default_properties: bool = False
    width: int | None = 360
    height: int | None = 640
    styles: dict[str, Any] = Field(default_factory=lambda: {"overflow": "hidden"})


class Symbol(ComponentDefinition):
    title: str | None = "Component"
    library: str = CORE_LIBRARY
    tag_name: str | None = DIV_TAG
    children_allowed: bool = True
    auto_add_default_properties: bool = False


class SymbolInstance(ComponentDefinition):
    title: str | None = "Component instance"
    library: str = CORE_LIBRARY
    tag_name: str | None = DIV_TAG
    properties: tuple[PropertyGroup, ...] = (REFERENCE_PROPERTY,)
    template_fn: TemplateFunction | None = Field(default=symbol_instance_template, exclude=True)


class BoardPortal(ComponentDefinition):
    title: str | None = "Board portal"
    library: str = CORE_LIBRARY
    icon: str | None = "picture_in_picture"
    tag_name: str | None = DIV_TAG
    properties: tuple[PropertyGroup, ...] = (REFERENCE_PROPERTY,)
    width: int | None = 300
    height: int | None = 200
    template_fn: TemplateFunction | None = Field(default=portal_template, exclude=True)


# =============================================================================
# Primitives
# =============================================================================


class Generic(ComponentDefinition):
    title: str | None = "Rectangle"
    tag_name: str | None = DIV_TAG
    children_allowed: bool = True
    width: int | None = 100
    height: int | None = 100


class Text(ComponentDefinition):
    title: str | None = "Text"
    icon: str | None = "title"
    tag_name: str | None = DIV_TAG
    fit_content: bool = True
    properties: tuple[PropertyGroup, ...] = (
        PropertyGroup(
            label="Text",
            name="innerHTML",
            binding_type=BindingType.HTML,
            input_type=PropertyInput.RICH_TEXT,
            default_value="Text",
            data_bindable=True,
            coerce_type=CoerceValue.STRING,
        ),
    )
    inputs: dict[str, Any] = Field(default_factory=lambda: {"richText": False})


class Image(ComponentDefinition):
    title: str | None = "Image"
    icon: str | None = "image"
    tag_name: str | None = "img"
    width: int | None = 200
    height: int | None = 150
    properties: tuple[PropertyGroup, ...] = (
        PropertyGroup(
            label="Source",
            name="src",
            binding_type=BindingType.ATTRIBUTE,
            input_type=PropertyInput.TEXT,
            data_bindable=True,
        ),
        PropertyGroup(
            label="Alt text",
            name="alt",
            binding_type=BindingType.ATTRIBUTE,
            input_type=PropertyInput.TEXT,
            default_value="",
        ),
    )


class Icon(ComponentDefinition):
    title: str | None = "Icon"
    icon: str | None = "emoji_emotions"
    tag_name: str | None = "i"
    css: tuple[str | CssClassBinding, ...] = ("material-icons",)
    fit_content: bool = True
    resize_type: ResizeType | None = ResizeType.UNIFORM
    properties: tuple[PropertyGroup, ...] = (
        PropertyGroup(
            label="Icon",
            name="iconName",
            binding_type=BindingType.TEXT,
            input_type=PropertyInput.ICON,
            default_value="star",
        ),
    )


class Embed(ComponentDefinition):
    title: str | None = "Embed"
    icon: str | None = "web_asset"
    tag_name: str | None = "iframe"
    width: int | None = 400
    height: int | None = 300
    attrs: dict[str, Any] = Field(default_factory=lambda: {"frameborder": "0"})
    properties: tuple[PropertyGroup, ...] = (
        PropertyGroup(
            label="URL",
            name="src",
            input_name="url",
            binding_type=BindingType.ATTRIBUTE,
            input_type=PropertyInput.TEXT,
            default_value="",
        ),
    )


INPUT_TYPE_MENU = tuple(
    MenuItem(title=title, value=value)
    for value, title in (
        ("text", "Text"),
        ("number", "Number"),
        ("email", "Email"),
        ("date", "Date"),
        ("password", "Password"),
        ("search", "Search"),
        ("tel", "Telephone"),
        ("url", "URL"),
    )
)


class TextInput(ComponentDefinition):
    title: str | None = "Input"
    icon: str | None = "input"
    css: tuple[str | CssClassBinding, ...] = ("co-input-primitive",)
    export_props_as_attrs: bool = True
    width: int | None = 180
    height: int | None = 28
    variants: dict[str, ComponentVariant] = Field(
        default_factory=lambda: {
            "input": ComponentVariant(tag_name="input"),
            "textarea": ComponentVariant(tag_name="textarea"),
        }
    )
    properties: tuple[PropertyGroup, ...] = (
        PropertyGroup(
            label="Kind",
            name=VARIANT_ATTR,
            binding_type=BindingType.VARIANT,
            input_type=PropertyInput.TOGGLE,
            default_value="input",
            menu_data=(
                MenuItem(title="Input", value="input"),
                MenuItem(title="Textarea", value="textarea"),
            ),
        ),
        PropertyGroup(
            children=(
                PropertyGroup(
                    label="Type",
                    name="type",
                    binding_type=BindingType.ATTRIBUTE,
                    input_type=PropertyInput.SELECT,
                    default_value="text",
                    menu_data=INPUT_TYPE_MENU,
                    variant="input",
                ),
                PropertyGroup(
                    label="Value",
                    name=VALUE_ATTR,
                    binding_type=BindingType.PROPERTY,
                    input_type=PropertyInput.TEXT,
                    default_value="",
                    variant="input",
                    data_bindable=True,
                    coerce_type=CoerceValue.STRING,
                ),
                PropertyGroup(
                    label="Placeholder",
                    name=PLACEHOLDER_ATTR,
                    binding_type=BindingType.ATTRIBUTE,
                    input_type=PropertyInput.TEXT,
                    default_value="",
                    variant="input",
                ),
            ),
        ),
        PropertyGroup(
            label="Value",
            children=(
                PropertyGroup(
                    name=VALUE_ATTR,
                    binding_type=BindingType.TEXT,
                    input_type=PropertyInput.TEXTAREA,
                    default_value="",
                    variant="textarea",
                    data_bindable=True,
                    coerce_type=CoerceValue.STRING,
                ),
                PropertyGroup(
                    name=PLACEHOLDER_ATTR,
                    binding_type=BindingType.ATTRIBUTE,
                    input_type=PropertyInput.TEXTAREA,
                    default_value="",
                    variant="textarea",
                ),
            ),
        ),
    )


BUILTIN_DEFINITIONS: dict[str, type[ComponentDefinition]] = {
    ElementEntitySubType.BOARD.value: Board,
    ElementEntitySubType.SYMBOL.value: Symbol,
    ElementEntitySubType.SYMBOL_INSTANCE.value: SymbolInstance,
    ElementEntitySubType.BOARD_PORTAL.value: BoardPortal,
    ElementEntitySubType.GENERIC.value: Generic,
    ElementEntitySubType.TEXT.value: Text,
    ElementEntitySubType.IMAGE.value: Image,
    ElementEntitySubType.ICON.value: Icon,
    ElementEntitySubType.IFRAME.value: Embed,
    ElementEntitySubType.TEXT_INPUT.value: TextInput,
}


def register_builtin_definitions(registry: Registry | None = None) -> Registry:
    """Register every built-in definition.

    Args:
        registry: Target registry. Defaults to the shared default registry.

    Returns:
        The registry the definitions were added to.
    """
    target = registry if registry is not None else default_registry
    for component_id, definition_cls in BUILTIN_DEFINITIONS.items():
        if component_id not in target:
            register_component(component_id, target)(definition_cls)
    return target
