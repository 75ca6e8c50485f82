"""CSS class names, rules and style generation for exported markup."""

from src.stylesheet.lib import (
    CSS_RESET,
    DesignSystem,
    ProjectAsset,
    build_css,
    build_rule,
    class_name_from_props,
    css_value,
    font_link,
    font_url,
    generate_style,
    icon_font_css_var,
    make_selector,
    split_terms,
    to_kebab_case,
    to_pascal_case,
    to_snake_case,
    transform_props_to_style,
)

__all__ = [
    # Models
    "ProjectAsset",
    "DesignSystem",
    # Case helpers
    "split_terms",
    "to_snake_case",
    "to_pascal_case",
    "to_kebab_case",
    # Rules
    "CSS_RESET",
    "class_name_from_props",
    "make_selector",
    "build_css",
    "build_rule",
    # Styles
    "css_value",
    "transform_props_to_style",
    "generate_style",
    # Fonts
    "font_url",
    "font_link",
    "icon_font_css_var",
]
