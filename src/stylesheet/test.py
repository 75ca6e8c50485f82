"""Tests for stylesheet generation."""

import pytest

from src.instance import InstanceData, KeyValue, StyleGroup

from .lib import (
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


class TestCaseHelpers:
    """Tests for case conversion."""

    @pytest.mark.unit
    def test_split_terms(self):
        assert split_terms("HTMLDivElement 2") == ["html", "div", "element", "2"]
        assert split_terms("my-button_label") == ["my", "button", "label"]

    @pytest.mark.unit
    def test_conversions(self):
        assert to_snake_case("Primary Button") == "primary_button"
        assert to_pascal_case("text-input") == "TextInput"
        assert to_kebab_case("backgroundColor") == "background-color"


class TestClassNames:
    """Tests for exported class names and selectors."""

    @pytest.mark.unit
    def test_class_name(self):
        assert class_name_from_props(InstanceData(id="a1", name="My Button")) == "my_button__a1"

    @pytest.mark.unit
    def test_invalid_characters_replaced(self):
        instance = InstanceData(id="x.y", name="Header")
        assert class_name_from_props(instance) == "header__x_y"

    @pytest.mark.unit
    def test_leading_digit_replaced(self):
        assert class_name_from_props(InstanceData(id="e1", name="2 Column")) == "__column__e1"

    @pytest.mark.unit
    def test_selectors(self):
        assert make_selector("box__1") == ".box__1"
        assert make_selector("box__1", ":hover") == ".box__1:hover"

    @pytest.mark.unit
    def test_rules(self):
        css = build_css({"backgroundColor": "red", "zIndex": "2"})
        assert css == "background-color:red;z-index:2;"
        assert build_rule(".a", css) == ".a{background-color:red;z-index:2;}"
        assert build_css(None) == ""


class TestCssValue:
    """Tests for style value conversion."""

    @pytest.mark.unit
    def test_numbers(self):
        assert css_value("width", 10) == "10px"
        assert css_value("width", 10.0) == "10px"
        assert css_value("opacity", 0.5) == "0.5"

    @pytest.mark.unit
    def test_units(self):
        assert css_value("width", {"value": 50, "units": "%"}) == "50%"
        assert css_value("width", {"value": None}) is None

    @pytest.mark.unit
    def test_design_tokens(self):
        design_system = DesignSystem(colors={"primary": "#0af"})
        value = {"id": "primary", "value": "#000"}
        assert css_value("color", value, design_system) == "#0af"
        assert css_value("color", {"id": "missing", "value": "#000"}, design_system) == "#000"

    @pytest.mark.unit
    def test_assets_and_lists(self):
        assets = {"bg": ProjectAsset(id="bg", url="https://example.com/bg.png")}
        value = [{"asset": "bg"}, "linear-gradient(red, blue)"]
        assert css_value("backgroundImage", value, None, assets) == (
            'url("https://example.com/bg.png"), linear-gradient(red, blue)'
        )
        assert css_value("backgroundImage", {"asset": "gone"}, None, assets) is None

    @pytest.mark.unit
    def test_ignored_values(self):
        assert css_value("display", None) is None
        assert css_value("display", True) is None


class TestGenerateStyle:
    """Tests for style group flattening."""

    @pytest.mark.unit
    def test_overrides_apply_last(self):
        group = StyleGroup(
            style={"color": "red", "width": 10},
            overrides=(
                KeyValue(name="color", value="blue"),
                KeyValue(name="margin", value="4px", disabled=True),
            ),
        )
        assert transform_props_to_style(group) == {"color": "blue", "width": "10px"}

    @pytest.mark.unit
    def test_per_state(self):
        styles = {"base": StyleGroup(style={"opacity": 1}), ":hover": StyleGroup()}
        assert generate_style(styles) == {"base": {"opacity": "1"}, ":hover": {}}


class TestFonts:
    """Tests for font links."""

    @pytest.mark.unit
    def test_font_url(self):
        design_system = DesignSystem(fonts=("Open Sans", "Roboto"))
        url = font_url(design_system, "https://fonts.example.com/css/")
        assert url == "https://fonts.example.com/css?family=Open+Sans|Roboto&display=swap"

    @pytest.mark.unit
    def test_font_base_url_from_environment(self, monkeypatch):
        monkeypatch.setenv("COMPONENT_FONT_BASE_URL", "https://cdn.example.com/fonts")
        assert font_link(DesignSystem()).startswith(
            '<link href="https://cdn.example.com/fonts?family=Roboto'
        )

    @pytest.mark.unit
    def test_icon_font_var(self):
        assert icon_font_css_var(DesignSystem()) == ":root{--cd-icon-font-family:Material Icons}"
