"""Tests for the template manager."""

import logging

import pytest

from src.instance import Frame, InstanceData, StyleGroup
from src.library import Text
from src.stylesheet import CSS_RESET, DesignSystem

from .lib import ROOT_REF, ExportContext, TemplateManager, entry_template, template_ref


def element(element_id: str, element_type: str, **fields) -> InstanceData:
    return InstanceData(id=element_id, element_type=element_type, **fields)


@pytest.fixture
def context() -> ExportContext:
    elements = {
        "b1": element(
            "b1",
            "board",
            name="Board",
            child_ids=("g1",),
            frame=Frame(width=360, height=640),
        ),
        "g1": element(
            "g1",
            "generic",
            name="Box",
            parent_id="b1",
            child_ids=("t1",),
            styles={"base": StyleGroup(style={"opacity": 0.5})},
        ),
        "t1": element("t1", "text", name="Title", parent_id="g1", inputs={"innerHTML": "Hi"}),
        "b2": element("b2", "board", name="Other"),
    }
    return ExportContext(elements=elements)


# =============================================================================
# Catalog
# =============================================================================


class TestTemplateRef:
    """Tests for template reference names."""

    @pytest.mark.unit
    def test_root_types_share_root_ref(self):
        assert template_ref("board") == ROOT_REF
        assert template_ref("symbol") == ROOT_REF

    @pytest.mark.unit
    def test_pascal_case_ref(self):
        assert template_ref("text") == "cdTextRef"
        assert template_ref("board-portal") == "cdBoardPortalRef"


class TestCatalog:
    """Tests for catalog assembly."""

    @pytest.mark.unit
    def test_child_iterator(self, template_manager):
        html = template_manager.generate_child_iterator(["text", "board"])
        assert html.startswith("<ng-template #children let-childIds cdRenderSwitch")
        assert "[cases]=\"['text','board']\"" in html
        assert '[templateRefs]="[cdTextRef,cdRootRef]"' in html
        assert "trackBy:trackByFn" in html

    @pytest.mark.unit
    def test_generate_templates(self, template_manager):
        html = template_manager.generate_templates(["text"])
        assert html.startswith("<ng-template #cdTextRef let-elementId>")
        assert '<ng-container *ngIf="propertiesMap[elementId]; let props">' in html
        assert html.endswith("</ng-container></ng-template>")

    @pytest.mark.unit
    def test_symbol_skipped(self, template_manager):
        assert template_manager.generate_templates(["symbol"]) == ""

    @pytest.mark.unit
    def test_unknown_type_skipped(self, template_manager, caplog):
        with caplog.at_level(logging.WARNING):
            html = template_manager.generate_templates(["missing", "text"])
        assert "missing" in caplog.text
        assert html.count("<ng-template #") == 1

    @pytest.mark.unit
    def test_assemble_all_templates(self, template_manager):
        html = template_manager.assemble_all_templates()
        assert html.startswith(entry_template())
        assert "#children" in html
        assert html.count(f"<ng-template #{ROOT_REF} ") == 1
        assert "#cdTextInputRef" in html
        assert "#cdSymbolInstanceRef" in html

    @pytest.mark.unit
    def test_aliases_get_templates(self, builtin_registry):
        builtin_registry.register(Text(id="label", aliases=("caption",)))
        html = TemplateManager(builtin_registry).assemble_all_templates()
        assert "#cdCaptionRef" in html
        assert "'caption'" in html


# =============================================================================
# Export
# =============================================================================


class TestGenerateContent:
    """Tests for subtree export."""

    @pytest.mark.unit
    def test_nested_content(self, template_manager, context, normalize):
        html = template_manager.assemble_templates_for_export(["b1"], context)
        expected = """
            <div class="board__b1 cd-board">
                <div class="box__g1">
                    <div class="title__t1">Hi</div>
                </div>
            </div>
        """
        assert html == normalize(expected)

    @pytest.mark.unit
    def test_multiple_roots_in_order(self, template_manager, context):
        html = template_manager.generate_content(["b2", "t1"], context)
        assert html == '<div class="other__b2 cd-board"></div><div class="title__t1">Hi</div>'

    @pytest.mark.unit
    def test_missing_element_skipped(self, template_manager, context, caplog):
        with caplog.at_level(logging.WARNING):
            assert template_manager.generate_content(["nope"], context) == ""
        assert "nope" in caplog.text

    @pytest.mark.unit
    def test_portal_includes_referenced_content(self, template_manager):
        elements = {
            "p1": element("p1", "board-portal", name="Portal", inputs={"referenceId": "b1"}),
            "b1": element("b1", "board", name="Board"),
        }
        html = template_manager.generate_content(["p1"], ExportContext(elements=elements))
        assert html == '<div class="portal__p1"><div class="board__b1 cd-board"></div></div>'

    @pytest.mark.unit
    def test_reference_cycle_terminates(self, template_manager):
        elements = {
            "b1": element("b1", "board", name="Board", child_ids=("p1",)),
            "p1": element("p1", "board-portal", name="Portal", inputs={"referenceId": "b1"}),
        }
        html = template_manager.generate_content(["b1"], ExportContext(elements=elements))
        assert html == '<div class="board__b1 cd-board"><div class="portal__p1"></div></div>'


class TestCssExport:
    """Tests for markup-with-stylesheet export."""

    @pytest.mark.unit
    def test_stylesheet_rules(self, template_manager, context):
        css = template_manager.generate_stylesheet(["b1"], context)
        assert ".board__b1{width:360px;height:640px;}\n" in css
        assert ".box__g1{opacity:0.5;}\n" in css
        assert "other__b2" not in css

    @pytest.mark.unit
    def test_empty_style_rule_still_emitted(self, template_manager):
        elements = {"g1": element("g1", "generic", name="Box", styles={"base": StyleGroup()})}
        css = template_manager.generate_stylesheet(["g1"], ExportContext(elements=elements))
        assert css == ".box__g1{}\n"

    @pytest.mark.unit
    def test_state_selectors(self, template_manager):
        styles = {
            "base": StyleGroup(style={"color": "red"}),
            ":hover": StyleGroup(style={"color": "blue"}),
        }
        elements = {"g1": element("g1", "generic", name="Box", styles=styles)}
        css = template_manager.generate_stylesheet(["g1"], ExportContext(elements=elements))
        assert css == ".box__g1{color:red;}\n.box__g1:hover{color:blue;}\n"

    @pytest.mark.unit
    def test_full_export(self, template_manager, context):
        output = template_manager.assemble_templates_with_css_for_export(
            ["b1"], context, css_reset=True
        )
        link, rest = output.split("\n", 1)
        assert link.startswith('<link href="') and link.endswith('rel="stylesheet"/>')
        assert rest.startswith("<style>" + CSS_RESET + "\n:root{--cd-icon-font-family:")
        assert "</style>\n<div class=\"board__b1 cd-board\">" in output

    @pytest.mark.unit
    def test_css_reset_disabled(self, template_manager, context, monkeypatch):
        monkeypatch.setenv("COMPONENT_EXPORT_CSS_RESET", "false")
        output = template_manager.assemble_templates_with_css_for_export(["b1"], context)
        assert CSS_RESET not in output

    @pytest.mark.unit
    def test_design_system_icon_font(self, template_manager, context):
        themed = ExportContext(
            elements=context.elements,
            design_system=DesignSystem(icon_font_family="Material Symbols"),
        )
        output = template_manager.assemble_templates_with_css_for_export(["b2"], themed)
        assert ":root{--cd-icon-font-family:Material Symbols}" in output
