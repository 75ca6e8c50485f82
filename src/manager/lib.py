"""Template manager: catalog assembly and subtree export.

The catalog is the set of named templates the live renderer uses: one
template per registered element type, a child iterator dispatching child
ids to those templates by type, and an entry point rendering the root.
Export walks a project's element tree and compiles static markup, with an
optional stylesheet for every reachable element.
"""

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from src.config import EnvVar, get_environment
from src.core.log import get_logger
from src.definition import BuildMode, ElementEntitySubType
from src.factory.expressions import ELEMENT_ID, OUTLET_RENDER_ID
from src.instance import DEFAULT_STATE, InstanceData, StyleGroup, get_descendant_ids, pixel_value
from src.registry import Registry, default_registry
from src.stylesheet import (
    CSS_RESET,
    DesignSystem,
    ProjectAsset,
    build_css,
    build_rule,
    class_name_from_props,
    font_link,
    generate_style,
    icon_font_css_var,
    make_selector,
    to_pascal_case,
)

logger = get_logger("manager")

ROOT_REF = "cdRootRef"
INTERNAL_PROJECT_ID = "_internalProjectId"
INTERNAL_ID = "_internalId"
ROOT_TYPES = (ElementEntitySubType.SYMBOL.value, ElementEntitySubType.BOARD.value)


@dataclass(frozen=True)
class ExportContext:
    """Project data read while exporting a subtree.

    Attributes:
        elements: Every element of the project, by id.
        assets: Project assets referenced from styles, by id.
        design_system: Design tokens and fonts of the project.
    """

    elements: Mapping[str, InstanceData]
    assets: Mapping[str, ProjectAsset] = field(default_factory=dict)
    design_system: DesignSystem = field(default_factory=DesignSystem)


def template_ref(key: str) -> str:
    """Name of the catalog template of an element type.

    Boards and symbols share the root template.

    Example:
        >>> template_ref("text-input")
        'cdTextInputRef'
    """
    if key in ROOT_TYPES:
        return ROOT_REF
    return f"cd{to_pascal_case(key)}Ref"


def entry_template() -> str:
    return (
        f'<ng-container [ngTemplateOutlet]="{ROOT_REF}" '
        f'[ngTemplateOutletContext]="{{ $implicit: {OUTLET_RENDER_ID} }}"></ng-container>'
    )


def build_ng_template(ref: str, variable_name: str, contents: str) -> str:
    return f"<ng-template #{ref} let-{variable_name}>{contents}</ng-template>"


class TemplateManager:
    """Assembles catalog templates and exports from a registry.

    The manager reads the registry at the start of every call; the
    registry must not change while a call is in progress.

    Attributes:
        registry: Registry definitions are looked up in.
    """

    def __init__(self, registry: Registry | None = None):
        self.registry = registry if registry is not None else default_registry

    # =========================================================================
    # Catalog
    # =========================================================================

    def generate_child_iterator(self, entity_ids: Iterable[str]) -> str:
        """Template dispatching each child id to the template of its type."""
        entity_ids = list(entity_ids)
        cases = ",".join(f"'{entity}'" for entity in entity_ids)
        refs = ",".join(template_ref(entity) for entity in entity_ids)
        return (
            f'<ng-template #children let-childIds cdRenderSwitch [cases]="[{cases}]" '
            f'[templateRefs]="[{refs}]">'
            '<ng-container *ngFor="let childId of childIds; trackBy:trackByFn" '
            'cdRenderChild [childId]="childId" [props]="propertiesMap"></ng-container>'
            "</ng-template>"
        )

    def generate_templates(self, entity_ids: Iterable[str]) -> str:
        """Compile one named Internal template per element type.

        Symbols are skipped as they share the board template. Unknown
        types are logged and skipped.
        """
        templates: list[str] = []
        for entity in entity_ids:
            if entity == ElementEntitySubType.SYMBOL:
                continue
            definition = self.registry.get_component(entity)
            if definition is None:
                logger.warning(f"Skipping template for unknown component '{entity}'")
                continue

            instance = definition.create_instance(INTERNAL_ID, INTERNAL_PROJECT_ID)
            content = definition.render(BuildMode.INTERNAL, instance)
            container = (
                f'<ng-container *ngIf="propertiesMap[{ELEMENT_ID}]; let props">'
                f"{content}</ng-container>"
            )
            templates.append(build_ng_template(template_ref(entity), ELEMENT_ID, container))
        return "".join(templates)

    def assemble_all_templates(self) -> str:
        """Entry point, child iterator and templates for every registered type and alias."""
        entity_ids = [d.id for d in self.registry.get_components()]
        entity_ids.extend(self.registry.get_alias_ids())
        logger.info(f"Assembling templates for {len(entity_ids)} component types")
        return (
            entry_template()
            + self.generate_child_iterator(entity_ids)
            + self.generate_templates(entity_ids)
        )

    # =========================================================================
    # Export
    # =========================================================================

    def generate_content(
        self,
        root_ids: Iterable[str],
        context: ExportContext,
        mode: BuildMode = BuildMode.SIMPLE,
        ancestors: tuple[str, ...] = (),
    ) -> str:
        """Compile the markup of each root element and its subtree.

        Children are compiled first and passed to the parent as content.
        Portals and symbol instances also receive the content of the
        element they reference; a reference back to an ancestor renders
        nothing.

        Args:
            root_ids: Elements to compile, in order.
            context: Project data.
            mode: Export build mode.
            ancestors: Ids of the elements enclosing ``root_ids``.

        Returns:
            Concatenated markup.
        """
        html: list[str] = []
        for element_id in root_ids:
            if element_id in ancestors:
                logger.warning(f"Skipping circular reference to '{element_id}'")
                continue

            element = context.elements.get(element_id)
            if element is None:
                logger.warning(f"Element '{element_id}' not found")
                continue

            path = (*ancestors, element_id)
            content = self.generate_content(element.child_ids, context, mode, path)
            if element.reference_id:
                content += self.generate_content([element.reference_id], context, mode, path)

            definition = self.registry.get_component(element.element_type)
            if definition is None:
                continue

            html.append(definition.render(mode, element, content))
        return "".join(html)

    def assemble_templates_for_export(
        self,
        root_ids: Iterable[str],
        context: ExportContext,
    ) -> str:
        """Simple-mode markup of the given subtrees."""
        return self.generate_content(root_ids, context)

    def generate_stylesheet(self, start_ids: Iterable[str], context: ExportContext) -> str:
        """CSS rules, one per state, for every element reachable from ``start_ids``.

        Boards take their frame size as width and height.
        """
        valid_ids: set[str] = set()
        for start_id in start_ids:
            valid_ids.update(get_descendant_ids(start_id, context.elements))

        rules: list[str] = []
        for element_id, element in context.elements.items():
            if element_id not in valid_ids:
                continue
            class_name = class_name_from_props(element)
            styles = self._export_styles(element)
            generated = generate_style(styles, context.design_system, context.assets)
            for state, style in generated.items():
                rule = build_rule(make_selector(class_name, state), build_css(style))
                rules.append(rule + "\n")
        return "".join(rules)

    def assemble_templates_with_css_for_export(
        self,
        start_ids: Iterable[str],
        context: ExportContext,
        css_reset: bool | None = None,
    ) -> str:
        """Font link, stylesheet and markup of the given subtrees.

        Args:
            start_ids: Root elements to export.
            context: Project data.
            css_reset: Include the box-sizing reset. Defaults to the
                ``COMPONENT_EXPORT_CSS_RESET`` setting.

        Returns:
            Font link, ``<style>`` block and markup joined by newlines.
        """
        start_ids = list(start_ids)
        design_system = context.design_system
        include_reset = get_environment(EnvVar.EXPORT_CSS_RESET, override=css_reset)

        sheet_parts = [CSS_RESET] if include_reset else []
        sheet_parts.append(icon_font_css_var(design_system))
        sheet_parts.append(self.generate_stylesheet(start_ids, context))
        stylesheet = "<style>" + "\n".join(sheet_parts) + "</style>"

        html = self.generate_content(start_ids, context)
        return "\n".join([font_link(design_system), stylesheet, html])

    @staticmethod
    def _export_styles(element: InstanceData) -> dict[str, StyleGroup]:
        styles = dict(element.styles)
        if element.element_type == ElementEntitySubType.BOARD:
            base = styles.get(DEFAULT_STATE) or StyleGroup()
            size = {
                "width": pixel_value(element.frame.width),
                "height": pixel_value(element.frame.height),
            }
            styles[DEFAULT_STATE] = base.model_copy(update={"style": {**base.style, **size}})
        return styles
