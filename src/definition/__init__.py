"""Component definition schema: build modes, property models and definitions."""

from src.definition.lib import (
    ALL_LIBRARIES,
    BUILT_IN_IDS,
    BindingType,
    BuildMode,
    CoerceValue,
    ComponentDefinition,
    ComponentVariant,
    ConditionType,
    CssClassBinding,
    ElementEntitySubType,
    MenuItem,
    OptionsConfig,
    OutputProperty,
    OutputPropertyType,
    PropertyCondition,
    PropertyGroup,
    PropertyInput,
    PropertyType,
    ResizeType,
    TemplateFunction,
    freeze_definition,
    freeze_value,
    get_props_recursive,
    is_definition_class,
    is_export_mode,
    props_contain_portal_slot,
    thaw_value,
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
