"""Binding expressions and attribute serialization used by TemplateFactory.

Everything here is a pure string helper: input lookups such as
``props?.inputs?.label``, pipe suffixes, structural directive values and
the serialization of an attribute map into tag text.
"""

import re
from typing import Any, Mapping

from src.definition import CoerceValue

# =============================================================================
# Constants
# =============================================================================

ELEMENT_ID = "elementId"
PROPS = "props"
INPUTS = "inputs"
INDEX_VAR = "i"

NG_IF = "*ngIf"
NG_FOR = "*ngFor"
NG_SWITCH = "ngSwitch"
NG_SWITCH_CASE = "*ngSwitchCase"
NG_SWITCH_DEFAULT = "*ngSwitchDefault"
NG_CONTAINER = "ng-container"
NG_TEMPLATE = "ng-template"
NG_EVENT = "$event"

ATTR_PREFIX = "attr"
CLASS_ATTR = "class"
STYLE_ATTR = "style"
SLOT_ATTR = "slot"
DIV_TAG = "div"
STYLE_MAP = "styleMap"
STYLE_DIRECTIVE_ID = "styleId"

# Outlet component inputs
CD_OUTLET_TAGNAME = "cd-outlet"
OUTLET_INSTANCE_ID = "instanceId"
OUTLET_RENDER_ID = "renderId"
OUTLET_PROPERTIES_MAP = "propertiesMap"
OUTLET_STYLES_MAP = "styleMap"
OUTLET_ASSETS = "assets"
OUTLET_DESIGN_SYSTEM = "designSystem"
OUTLET_ADD_MARKER = "addMarkerToInnerRoot"
OUTLET_TYPE = "outletType"
OUTLET_ANCESTORS = "ancestors"
OUTLET_DATASETS = "datasets"
OUTLET_LOADED_DATA = "loadedData"
OUTLET_ELEMENT_CLASS_PREFIX = "elementClassPrefix"
OUTLET_TYPE_PORTAL = "portal"

# Renderer directives and classes
CD_STYLE_DIRECTIVE = "cdStyle"
CD_STYLE_CLASS_PREFIX_ATTR = "classPrefix"
CD_HIDDEN_DIRECTIVE = "cdHidden"
CD_CO_TOOLTIP = "cdCoTooltip"
CD_CO_TOOLTIP_POSITION = "cdCoTooltipPosition"
CD_TEXT_INJECT_DIRECTIVE = "cdTextInject"
CD_ATTRS_DIRECTIVE = "cdAttrs"
CD_A11Y_ATTRS_DIRECTIVE = "cdA11yAttrs"
RENDER_RECT_MARKER_CLASS = "cd-render-rect-marker"
RENDERED_ELEMENT_CLASS = "cd-rendered-element"
FIT_CONTENT_CLASS = "cd-fit-content"
PREVIEW_STYLES_CLASS = "cd-preview-styles"
PORTAL_WRAPPER_CLASS = "cd-portal-wrapper"
TEMPLATE_ID_ATTR = "data-id"
TEMPLATE_FULL_ID_PATH_ATTR = "data-full-id-path"

# Instance inputs referenced by the default scaffolding
HIDDEN_ATTR = "hidden"
TOOLTIP_LABEL_ATTR = "tooltipLabel"
TOOLTIP_POSITION_ATTR = "tooltipPosition"
SHOW_PREVIEW_STYLES = "showPreviewStyles"
ATTRS = "attrs"
A11Y_INPUTS = "a11yInputs"
SELECTED_INDEX_ATTR = "selectedIndex"
RICH_TEXT_ATTR = "richText"

# Pipes
CLASS_PREFIX_PIPE = "classPrefixPipe"
CSS_VAR_PIPE = "cssVarPipe"
CONDITIONAL_ATTR_PIPE = "conditionalAttrPipe"
DATASET_LOOKUP_PIPE = "datasetLookupPipe"
DATA_BINDING_LOOKUP_PIPE = "dataBindingLookupPipe"
DATA_REFRESH_TRIGGER = "dataBindingRefreshTrigger"
CIRCULAR_GUARD_PIPE = "circularGuardPipe"
FULL_ID_PATH_PIPE = "fullIdPathPipe"
RESOURCE_URL_SAFE_PIPE = "safeResourceURL"
HAS_VALUE_PIPE = f"| hasValuePipe:{OUTLET_PROPERTIES_MAP}"
DATA_BINDING_LOOKUP = f"| {DATA_BINDING_LOOKUP_PIPE}:{DATA_REFRESH_TRIGGER}"

COERCE_TYPE_PIPES: dict[str, str] = {
    CoerceValue.STRING.value: "coerceStringPipe",
    CoerceValue.BOOLEAN.value: "coerceBooleanPipe",
    CoerceValue.NUMBER.value: "coerceNumberPipe",
}

OUTPUT_CHANGE_CALLBACK = "onOutputChange"
DEFAULT_MARKER_CONDITION = f"!{OUTLET_INSTANCE_ID}"

CHILD_ITERATOR = (
    f'<ng-container *ngIf="{PROPS}?.childIds; let childIds" '
    '[ngTemplateOutlet]="children" '
    '[ngTemplateOutletContext]="{ $implicit:childIds }"></ng-container>'
)

# https://html.spec.whatwg.org/multipage/syntax.html#void-elements
VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "command",
        "embed",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

_VALID_PROP = re.compile(r"^[_$a-zA-Z][_$\w]*$")
_SPECIAL_CHARS = re.compile(r"\W")

# =============================================================================
# Wrapping
# =============================================================================


def wrap_in_brackets(value: str) -> str:
    return f"[{value}]"


def wrap_in_parenthesis(value: str) -> str:
    return f"({value})"


def wrap_in_curly_braces(value: str) -> str:
    return f"{{{{ {value} }}}}"


def wrap_in_single_quotes(value: str) -> str:
    return f"'{value}'"


def remove_special_characters(text: str) -> str:
    return _SPECIAL_CHARS.sub("", text)


# =============================================================================
# Property Paths
# =============================================================================


def lookup_prop_at_path(path: str, value: str) -> str:
    """Return ``path?.value``, or ``path['value']`` when value is not an identifier."""
    if _VALID_PROP.match(value):
        return f"{path}?.{value}"
    return path + wrap_in_brackets(wrap_in_single_quotes(value))


def props_binding(value: str) -> str:
    """``props?.value``"""
    return lookup_prop_at_path(PROPS, value)


def input_props_binding(
    value: str,
    data_binding_lookup: bool = False,
    coerce_type: CoerceValue | str | None = None,
) -> str:
    """Return ``props?.inputs?.value`` with optional data-binding and coercion pipes.

    Args:
        value: Input name.
        data_binding_lookup: Append the dataset lookup pipe.
        coerce_type: Append the matching coercion pipe.

    Example:
        >>> input_props_binding("hidden", True, CoerceValue.BOOLEAN)
        'props?.inputs?.hidden | dataBindingLookupPipe:dataBindingRefreshTrigger | coerceBooleanPipe'
    """
    lookup = lookup_prop_at_path(f"{PROPS}?.{INPUTS}", value)
    if data_binding_lookup:
        lookup = f"{lookup} {DATA_BINDING_LOOKUP}"
    if coerce_type:
        key = coerce_type.value if isinstance(coerce_type, CoerceValue) else coerce_type
        lookup = f"{lookup} | {COERCE_TYPE_PIPES[key]}"
    return lookup


def input_props_binding_with_pipe(
    value: str,
    pipe: str | None,
    data_binding_lookup: bool = False,
    coerce_type: CoerceValue | str | None = None,
) -> str:
    """``props?.inputs?.value | pipe``"""
    lookup = input_props_binding(value, data_binding_lookup, coerce_type)
    return f"{lookup} | {pipe}" if pipe else lookup


def circular_outlet_guard(ref: str) -> str:
    """Guard rendering a referenced element: no reference cycle, and the element exists."""
    exists = f"{ref} {HAS_VALUE_PIPE}"
    cycle_free = f"{ref} | {CIRCULAR_GUARD_PIPE}:{OUTLET_ANCESTORS}:{OUTLET_RENDER_ID}"
    return f"({cycle_free}) && {exists}"


def build_ng_for(item_name: str, items: str, index: bool = False) -> str:
    suffix = f" let {INDEX_VAR} = index" if index else ""
    return f"let {item_name} of {items};{suffix}"


def generate_callback(function_name: str) -> str:
    return f"{function_name}({NG_EVENT})"


def generate_output_callback(value: str, input_binding: str, write_value: bool) -> str:
    """``onOutputChange($event.value,elementId,'binding')``

    A trailing ``false`` argument marks events that do not write back to
    the element's inputs.
    """
    args = [value, ELEMENT_ID, wrap_in_single_quotes(input_binding)]
    if not write_value:
        args.append("false")
    return OUTPUT_CHANGE_CALLBACK + wrap_in_parenthesis(",".join(args))


# =============================================================================
# Serialization
# =============================================================================


def html_escape_double_quotes(text: str) -> str:
    return text.replace('"', "&quot;")


def stringify(value: Any) -> str:
    """Attribute text of a value; booleans are lower-cased."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def merge_key_value(key: str, value: Any) -> str:
    """``key="value"``, or a bare ``key`` when the value is empty."""
    if value is None or value == "":
        return key
    return f'{key}="{html_escape_double_quotes(stringify(value))}"'


def convert_attrs_to_string(attrs: Mapping[str, Any]) -> str:
    return " ".join(merge_key_value(key, value) for key, value in attrs.items())


def is_void_tag(tag_name: str) -> bool:
    return tag_name.lower() in VOID_ELEMENTS


def generate_closing_tag(tag_name: str) -> str:
    return "" if is_void_tag(tag_name) else f"</{tag_name}>"
