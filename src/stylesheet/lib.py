"""Stylesheet generation for exported markup.

Turns instance style groups into flat CSS declarations, derives the
deterministic class name every exported element carries, and builds the
rules and font link that accompany Application exports.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from pydantic import BaseModel, Field

from src.config import get_font_base_url
from src.instance import DEFAULT_STATE, InstanceData, StyleGroup, is_valid_attr

UNDERSCORE = "_"
ICON_FONT_FAMILY_VAR = "--cd-icon-font-family"
DEFAULT_FONT_FAMILY = "Roboto"
DEFAULT_ICON_FONT_FAMILY = "Material Icons"
CSS_RESET = "*, *::before, *::after { box-sizing: border-box; }"

_VALID_CSS_CHAR = re.compile(r"[_a-zA-Z0-9-]")
_ALPHANUMERIC = re.compile(r"[a-zA-Z0-9]+")
_CASE_CHANGE = re.compile(r"(\d*[A-Z][a-z\d]+)")
_LOWER_TO_UPPER = re.compile(r"([a-z0-9])([A-Z])")
_CAPS_TO_DASH = re.compile(r"([A-Z])([A-Z])(?=[a-z])")
_WHITESPACE = re.compile(r"\s+")

# Numeric values of these properties are emitted without units
UNITLESS_PROPERTIES = frozenset(
    {"opacity", "zIndex", "fontWeight", "lineHeight", "flexGrow", "flexShrink", "order"}
)

# =============================================================================
# Models
# =============================================================================


class ProjectAsset(BaseModel):
    """An uploaded image or media file referenced from styles."""

    id: str
    name: str = ""
    url: str

    model_config = {"frozen": True}


class DesignSystem(BaseModel):
    """Project-level design tokens used when resolving styles.

    Attributes:
        colors: Color token id to CSS color.
        variables: Other token ids (spacing, radii, ...) to CSS values.
        fonts: Font families loaded by the exported page.
        icon_font_family: Font family used by icon elements.
    """

    colors: dict[str, str] = Field(default_factory=dict)
    variables: dict[str, Any] = Field(default_factory=dict)
    fonts: tuple[str, ...] = (DEFAULT_FONT_FAMILY,)
    icon_font_family: str = DEFAULT_ICON_FONT_FAMILY

    model_config = {"frozen": True}

    def lookup(self, token_id: str) -> Any | None:
        if token_id in self.colors:
            return self.colors[token_id]
        return self.variables.get(token_id)


# =============================================================================
# Case Helpers
# =============================================================================


def split_terms(text: str) -> list[str]:
    """Split text into lower-cased words on punctuation and case changes.

    Example:
        >>> split_terms("HTMLDivElement 2")
        ['html', 'div', 'element', '2']
    """
    terms: list[str] = []
    for fragment in _ALPHANUMERIC.findall(text):
        for term in _CASE_CHANGE.split(fragment):
            if term:
                terms.append(term.lower())
    return terms


def to_snake_case(text: str) -> str:
    return UNDERSCORE.join(split_terms(text))


def to_pascal_case(text: str) -> str:
    return "".join(term[0].upper() + term[1:] for term in split_terms(text))


def to_kebab_case(text: str) -> str:
    text = _LOWER_TO_UPPER.sub(r"\1-\2", text)
    text = _CAPS_TO_DASH.sub(r"\1-\2", text)
    return _WHITESPACE.sub("-", text).lower()


# =============================================================================
# Class Names and Rules
# =============================================================================


def class_name_from_props(instance: InstanceData) -> str:
    """Deterministic CSS class name of an exported element.

    The class is ``snake_case(name) + "__" + id`` with every character that
    is not valid in a class name replaced by ``_``, as is a leading digit.

    Example:
        >>> class_name_from_props(InstanceData(id="a1", name="My Button"))
        'my_button__a1'
    """
    raw = to_snake_case(instance.name) + UNDERSCORE * 2 + instance.id
    chars = []
    for index, char in enumerate(raw):
        if index == 0 and char.isdigit():
            chars.append(UNDERSCORE)
        elif _VALID_CSS_CHAR.fullmatch(char):
            chars.append(char)
        else:
            chars.append(UNDERSCORE)
    return "".join(chars)


def make_selector(class_name: str, state: str = DEFAULT_STATE) -> str:
    """``.class`` for the base state, ``.class`` + suffix (e.g. ``:hover``) otherwise."""
    suffix = "" if state == DEFAULT_STATE else state
    return f".{class_name}{suffix}"


def build_css(style: Mapping[str, str] | None) -> str:
    """Serialize declarations as ``kebab-name:value;`` pairs."""
    if not style:
        return ""
    return "".join(f"{to_kebab_case(name)}:{value};" for name, value in style.items())


def build_rule(selector: str, css_text: str) -> str:
    return f"{selector}{{{css_text}}}"


# =============================================================================
# Style Generation
# =============================================================================


def _format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def css_value(
    name: str,
    value: Any,
    design_system: DesignSystem | None = None,
    assets: Mapping[str, ProjectAsset] | None = None,
) -> str | None:
    """Convert one style value to CSS text.

    Supported shapes:
        - strings, emitted as-is
        - numbers, in px unless the property is unitless
        - ``{"value", "units"}`` dimension values
        - ``{"id", "value"}`` design-token references, resolved against the
          design system with ``value`` as the fallback
        - ``{"asset": id}`` asset references, emitted as ``url(...)``
        - lists of the above, joined with commas

    Returns:
        CSS text, or None when the value renders nothing.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        number = _format_number(value)
        return number if name in UNITLESS_PROPERTIES else f"{number}px"
    if isinstance(value, (list, tuple)):
        parts = [css_value(name, item, design_system, assets) for item in value]
        joined = ", ".join(part for part in parts if part)
        return joined or None
    if isinstance(value, Mapping):
        if "asset" in value:
            asset = (assets or {}).get(value["asset"])
            return f'url("{asset.url}")' if asset else None
        if "id" in value and design_system is not None:
            resolved = design_system.lookup(value["id"])
            if resolved is not None:
                return css_value(name, resolved, design_system, assets)
        inner = value.get("value")
        if inner is None:
            return None
        units = value.get("units")
        if units and isinstance(inner, (int, float)):
            return f"{_format_number(inner)}{units}"
        return css_value(name, inner, design_system, assets)
    return str(value)


def transform_props_to_style(
    group: StyleGroup,
    design_system: DesignSystem | None = None,
    assets: Mapping[str, ProjectAsset] | None = None,
) -> dict[str, str]:
    """Flatten a style group into CSS declarations; overrides apply last."""
    declarations: dict[str, str] = {}
    for name, value in group.style.items():
        text = css_value(name, value, design_system, assets)
        if text is not None:
            declarations[name] = text
    for override in group.overrides:
        if not is_valid_attr(override):
            continue
        text = css_value(override.name, override.value, design_system, assets)
        if text is not None:
            declarations[override.name] = text
    return declarations


def generate_style(
    styles: Mapping[str, StyleGroup],
    design_system: DesignSystem | None = None,
    assets: Mapping[str, ProjectAsset] | None = None,
) -> dict[str, dict[str, str]]:
    """Generate CSS declarations per state for an element's style groups."""
    return {
        state: transform_props_to_style(group, design_system, assets)
        for state, group in styles.items()
        if group is not None
    }


# =============================================================================
# Fonts
# =============================================================================


def font_url(design_system: DesignSystem, base_url: str | None = None) -> str:
    """URL of the stylesheet loading every design-system font."""
    families = design_system.fonts or (DEFAULT_FONT_FAMILY,)
    family_param = "|".join(family.replace(" ", "+") for family in families)
    return f"{get_font_base_url(base_url)}?family={family_param}&display=swap"


def font_link(design_system: DesignSystem, base_url: str | None = None) -> str:
    return f'<link href="{font_url(design_system, base_url)}" rel="stylesheet"/>'


def icon_font_css_var(design_system: DesignSystem) -> str:
    """``:root`` rule exposing the icon font family as a custom property."""
    return f":root{{{ICON_FONT_FAMILY_VAR}:{design_system.icon_font_family}}}"


__all__ = [
    "ProjectAsset",
    "DesignSystem",
    "CSS_RESET",
    "split_terms",
    "to_snake_case",
    "to_pascal_case",
    "to_kebab_case",
    "class_name_from_props",
    "make_selector",
    "build_css",
    "build_rule",
    "css_value",
    "transform_props_to_style",
    "generate_style",
    "font_url",
    "font_link",
    "icon_font_css_var",
]
