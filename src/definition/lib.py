"""Component definition schema.

A component definition is the declarative description of one kind of
placeable element: its tag, its bindable properties, its variants, its
outputs and its static children. Definitions are immutable pydantic models;
derived definitions (variants, registry-processed copies) are produced with
``model_copy(update=...)`` and never by mutation.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from src.instance import InstanceData

# =============================================================================
# Enums
# =============================================================================


class BuildMode(str, Enum):
    """Markup flavour produced by a template function.

    - INTERNAL: live markup with bindings, consumed by the reactive renderer
    - SIMPLE: static markup with literal values, for copy/paste export
    - APPLICATION: static markup accompanied by a generated stylesheet
    """

    INTERNAL = "internal"
    SIMPLE = "simple"
    APPLICATION = "application"


class BindingType(str, Enum):
    """How a property value reaches the rendered element."""

    PROPERTY = "property"
    ATTRIBUTE = "attribute"
    STYLE = "style"
    TEXT = "text"
    HTML = "html"
    IMAGE = "image"
    URL = "url"
    TAG = "tag"
    VARIANT = "variant"
    NONE = "none"
    CSS_VAR = "cssvar"


class PropertyInput(str, Enum):
    """Editor control used for a property."""

    AUTO_COMPLETE = "auto-complete"
    CHECKBOX = "checkbox"
    COLOR = "color"
    DATE = "date"
    DYNAMIC_LIST = "dynamic-list"
    ELEMENT_PICKER = "element-picker"
    GROUP = "group"
    ICON = "icon"
    INTEGER = "integer"
    LIST = "list"
    NUMBER = "number"
    PERCENT = "percent"
    RANGE = "range"
    SELECT = "select"
    SELECT_GRID = "select-grid"
    TEXT = "text"
    TEXTAREA = "textarea"
    TOGGLE = "toggle"
    RICH_TEXT = "rich-text"
    DATASET_SELECT = "dataset-select"
    PORTAL_SLOT = "portal-slot"
    UNITS = "units"
    PORTAL_SELECT = "portal-select"


class PropertyType(str, Enum):
    """Built-in property panels, some of which the registry injects."""

    STYLE_SIZE = "style-size"
    STYLE_POSITION = "style-position"
    STYLE_OPACITY = "style-opacity"
    STYLE_ADVANCED = "style-advanced"
    ATTRIBUTE_GENERIC = "attribute-generic"
    HIDDEN = "hidden"


class OutputPropertyType(str, Enum):
    """Value type written back by an output event."""

    NONE = "none"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"
    LIST_ITEM_VALUE = "list-item-value"


class CoerceValue(str, Enum):
    """Coercion pipe applied to data-bound inputs."""

    BOOLEAN = "boolean"
    STRING = "string"
    NUMBER = "number"


class ConditionType(str, Enum):
    """Comparison used by a property visibility condition."""

    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    EXISTS = "exists"
    NOT_EXISTS = "notExists"


class ResizeType(str, Enum):
    """Resize handles offered for an element."""

    ANY = "any"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    UNIFORM = "uniform"
    NONE = "none"


class ElementEntitySubType(str, Enum):
    """Identities of the built-in component definitions."""

    BOARD = "board"
    SYMBOL = "symbol"
    SYMBOL_INSTANCE = "symbol-instance"
    BOARD_PORTAL = "board-portal"
    GENERIC = "generic"
    TEXT = "text"
    IMAGE = "image"
    ICON = "icon"
    IFRAME = "iframe"
    TEXT_INPUT = "text-input"
    MEDIA = "media"


BUILT_IN_IDS: frozenset[str] = frozenset(member.value for member in ElementEntitySubType)

ALL_LIBRARIES = "all"


def is_export_mode(mode: BuildMode | str) -> bool:
    """Return True for the Simple and Application modes."""
    return BuildMode(mode) is not BuildMode.INTERNAL


# Signature of a template function: (mode, instance, content) -> markup
TemplateFunction = Callable[..., str]


# =============================================================================
# Property Models
# =============================================================================


class MenuItem(BaseModel):
    """A selectable option for menu-backed properties."""

    title: str = ""
    value: Any = None

    model_config = {"frozen": True}


class OptionsConfig(BaseModel):
    """Selection behaviour of list and dynamic-list inputs."""

    supports_selection: bool = False
    supports_unique_selection: bool = False

    model_config = {"frozen": True}


class PropertyCondition(BaseModel):
    """Visibility rule for a property in the editor panel."""

    name: str
    type: ConditionType = ConditionType.EQUALS
    value: Any = None

    model_config = {"frozen": True, "use_enum_values": True}


class PropertyGroup(BaseModel):
    """A leaf property or a nested group of properties.

    Leaf properties carry a ``name`` and a ``binding_type``; groups carry
    ``children``. Both shapes share one model, as groups are allowed to
    declare conditions and labels of their own.

    Attributes:
        name: Property name, used as the default input name.
        label: Label shown in the editor.
        type: Built-in panel kind.
        binding_type: How the value is bound to the element. Unset means a
            plain property binding.
        input_type: Editor control kind.
        input_name: Input key to read when it differs from ``name``.
        default_value: Initial input value for new instances.
        menu_data: Options for select, toggle, tag and variant properties.
        variant: Restricts the property to a single variant.
        data_bindable: Whether the input may reference a dataset.
        coerce_type: Coercion pipe appended to data-bound values.
        options_config: Selection behaviour for list inputs.
        item_schema: Per-item schema of a dynamic list.
        children: Nested properties of a group.
        conditions: Editor visibility rules.
        portal_zero_state_message: Text shown by an empty portal slot.
    """

    name: str | None = None
    label: str | None = None
    type: PropertyType | None = None
    binding_type: BindingType | None = None
    input_type: PropertyInput | None = None
    input_name: str | None = None
    default_value: Any = None
    placeholder: str | None = None
    menu_data: tuple[MenuItem, ...] | None = None
    variant: str | None = None
    data_bindable: bool = False
    coerce_type: CoerceValue | None = None
    options_config: OptionsConfig | None = None
    item_schema: tuple[PropertyGroup, ...] | None = None
    children: tuple[PropertyGroup, ...] | None = None
    conditions: tuple[PropertyCondition, ...] = ()
    portal_zero_state_message: str | None = None

    model_config = {"frozen": True, "use_enum_values": True}

    @property
    def resolved_input_name(self) -> str | None:
        """Input key read for this property."""
        return self.input_name or self.name


class OutputProperty(BaseModel):
    """An event emitted by the element and routed back to an input.

    Attributes:
        binding: Input updated by the event.
        event_name: DOM/component event name when it differs from ``binding``.
        event_key: Path extracted from the event payload.
        type: Value type written back; NONE dispatches without writing.
        label: Label shown in the interactions panel.
        variant: Restricts the output to a single variant.
    """

    binding: str = ""
    event_name: str | None = None
    event_key: str | None = None
    type: OutputPropertyType = OutputPropertyType.STRING
    label: str | None = None
    icon: str | None = None
    variant: str | None = None

    model_config = {"frozen": True, "use_enum_values": True}

    @property
    def resolved_event_name(self) -> str:
        return self.event_name or self.binding


class CssClassBinding(BaseModel):
    """A class toggled by the truthiness of an input."""

    class_name: str
    binding: str

    model_config = {"frozen": True}


class ComponentVariant(BaseModel):
    """Partial overrides applied to a definition for one variant."""

    tag_name: str | None = None
    wrapper_tag: str | None = None
    inputs: dict[str, Any] | None = None
    children: tuple[Any, ...] | None = None
    width: int | None = None
    height: int | None = None
    css: tuple[str | CssClassBinding, ...] | None = None
    attrs: dict[str, Any] | None = None
    styles: dict[str, Any] | None = None
    fit_content: bool | None = None

    model_config = {"frozen": True}

    def overrides(self) -> dict[str, Any]:
        """Fields explicitly set on this variant."""
        return {name: getattr(self, name) for name in self.model_fields_set}


# =============================================================================
# Component Definition
# =============================================================================


class ComponentDefinition(BaseModel):
    """Declarative schema for one kind of placeable element.

    Definitions can be built inline or declared as subclasses that override
    field defaults:

    Example:
        >>> class Chip(ComponentDefinition):
        ...     id: str = "chip"
        ...     title: str | None = "Chip"
        ...     tag_name: str | None = "span"
        >>> Chip().template(BuildMode.SIMPLE)
        '<span></span>'
    """

    # Identity
    id: str = ""
    aliases: tuple[str, ...] = ()
    title: str | None = None
    library: str = "primitive"
    icon: str | None = None

    # Rendering shape
    tag_name: str | None = None
    wrapper_tag: str | None = None
    export_tag_name: str | None = None

    # Schema
    properties: tuple[PropertyGroup, ...] = ()
    variants: dict[str, ComponentVariant] = Field(default_factory=dict)
    outputs: tuple[OutputProperty, ...] = ()
    children: tuple[Any, ...] = ()

    # Static markup contributions
    css: tuple[str | CssClassBinding, ...] = ()
    attrs: dict[str, Any] = Field(default_factory=dict)
    directives: tuple[str, ...] = ()

    # Instance defaults
    inputs: dict[str, Any] = Field(default_factory=dict)
    styles: dict[str, Any] = Field(default_factory=dict)
    width: int | None = None
    height: int | None = None
    resize_type: ResizeType | None = None

    # Flags
    children_allowed: bool = False
    prevent_resize: bool = False
    export_props_as_attrs: bool = False
    auto_add_default_properties: bool = True
    deprecated: bool = False
    fit_content: bool = False
    bind_if: str | None = None
    is_inner_child: bool = False
    is_code_component: bool = False

    # Custom template function, used instead of the compiled one
    template_fn: TemplateFunction | None = Field(default=None, exclude=True)

    model_config = {"frozen": True, "use_enum_values": True}

    @property
    def all_properties(self) -> list[PropertyGroup]:
        """Flattened properties, groups included, depth first."""
        return get_props_recursive(self.properties)

    @property
    def has_variants(self) -> bool:
        return bool(self.variants)

    def variant_property(self) -> PropertyGroup | None:
        """Return the property bound with ``BindingType.VARIANT``, if any."""
        for prop in self.all_properties:
            if prop.binding_type == BindingType.VARIANT:
                return prop
        return None

    def with_variant(self, name: str) -> ComponentDefinition:
        """Synthesize the sub-definition for one variant.

        The variant's overrides replace base fields shallowly; variants are
        dropped from the result so it compiles as a single definition.

        Raises:
            KeyError: If the variant is not declared.
        """
        if name not in self.variants:
            available = ", ".join(self.variants) or "none"
            raise KeyError(f"Unknown variant '{name}'. Available: {available}")
        update = self.variants[name].overrides()
        update["variants"] = {}
        return self.model_copy(update=update)

    @property
    def template(self) -> TemplateFunction:
        """Template function attached to this definition."""
        if self.template_fn is not None:
            return self.template_fn

        from src.compiler import get_template_function

        return get_template_function(self)

    def render(
        self,
        mode: BuildMode | str,
        instance: InstanceData | None = None,
        content: str | None = None,
    ) -> str:
        """Compile this definition to markup."""
        return self.template(BuildMode(mode), instance, content)

    def create_instance(self, element_id: str, project_id: str | None = None) -> InstanceData:
        """Create the instance data of a newly placed element."""
        from src.instance import create_instance

        return create_instance(self, element_id, project_id=project_id)


# =============================================================================
# Helpers
# =============================================================================


def get_props_recursive(properties: Iterable[PropertyGroup]) -> list[PropertyGroup]:
    """Flatten property groups depth first.

    Each group is listed before its children, so the result contains groups
    and leaves alike.

    Args:
        properties: Top-level property groups.

    Returns:
        Flattened list in declaration order.
    """
    flattened: list[PropertyGroup] = []
    for prop in properties:
        flattened.append(prop)
        if prop.children:
            flattened.extend(get_props_recursive(prop.children))
    return flattened


def props_contain_portal_slot(properties: Iterable[PropertyGroup]) -> bool:
    """Check whether any property, or any dynamic-list item schema, is a portal slot."""
    for prop in get_props_recursive(properties):
        if prop.input_type == PropertyInput.PORTAL_SLOT:
            return True
        if prop.input_type == PropertyInput.DYNAMIC_LIST and prop.item_schema:
            if props_contain_portal_slot(prop.item_schema):
                return True
    return False


def is_definition_class(value: Any) -> bool:
    """True if ``value`` is ComponentDefinition or one of its subclasses."""
    return isinstance(value, type) and issubclass(value, ComponentDefinition)


def freeze_value(value: Any) -> Any:
    """Read-only copy of nested mappings and lists.

    Mappings become ``MappingProxyType`` views over fresh dicts and lists
    become tuples, recursively.
    """
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze_value(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze_value(item) for item in value)
    return value


def thaw_value(value: Any) -> Any:
    """Mutable deep copy of a value produced by ``freeze_value``."""
    if isinstance(value, Mapping):
        return {key: thaw_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw_value(item) for item in value]
    return value


def freeze_definition(definition: ComponentDefinition) -> ComponentDefinition:
    """Copy of a definition whose mapping fields are read-only.

    ``attrs``, ``inputs``, ``styles`` and ``variants`` (with each variant's
    own mappings) become ``MappingProxyType`` views, so a shared definition
    cannot be changed through them.
    """
    variants = {
        name: variant.model_copy(
            update={
                field: freeze_value(getattr(variant, field))
                for field in ("inputs", "attrs", "styles")
                if getattr(variant, field) is not None
            }
        )
        for name, variant in definition.variants.items()
    }
    return definition.model_copy(
        update={
            "attrs": freeze_value(definition.attrs),
            "inputs": freeze_value(definition.inputs),
            "styles": freeze_value(definition.styles),
            "variants": MappingProxyType(variants),
        }
    )


__all__ = [
    # Enums
    "BuildMode",
    "BindingType",
    "PropertyInput",
    "PropertyType",
    "OutputPropertyType",
    "CoerceValue",
    "ConditionType",
    "ResizeType",
    "ElementEntitySubType",
    "BUILT_IN_IDS",
    "ALL_LIBRARIES",
    "is_export_mode",
    "TemplateFunction",
    # Models
    "MenuItem",
    "OptionsConfig",
    "PropertyCondition",
    "PropertyGroup",
    "OutputProperty",
    "CssClassBinding",
    "ComponentVariant",
    "ComponentDefinition",
    # Helpers
    "get_props_recursive",
    "props_contain_portal_slot",
    "is_definition_class",
    "freeze_value",
    "thaw_value",
    "freeze_definition",
]
