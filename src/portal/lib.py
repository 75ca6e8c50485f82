"""Portal slot markup.

A portal renders another element's subtree by reference through an outlet
element. Child portals are guarded against reference cycles and missing
elements; when the guard fails a zero-state block is shown instead.
"""

from typing import Iterable

from src.core.log import get_logger
from src.definition import BuildMode, PropertyGroup, PropertyInput, get_props_recursive
from src.factory import TemplateFactory
from src.factory.expressions import (
    CD_OUTLET_TAGNAME,
    DIV_TAG,
    ELEMENT_ID,
    HAS_VALUE_PIPE,
    INDEX_VAR,
    NG_CONTAINER,
    OUTLET_ADD_MARKER,
    OUTLET_ANCESTORS,
    OUTLET_ASSETS,
    OUTLET_DATASETS,
    OUTLET_DESIGN_SYSTEM,
    OUTLET_INSTANCE_ID,
    OUTLET_LOADED_DATA,
    OUTLET_PROPERTIES_MAP,
    OUTLET_RENDER_ID,
    OUTLET_STYLES_MAP,
    OUTLET_TYPE,
    OUTLET_TYPE_PORTAL,
    PORTAL_WRAPPER_CLASS,
    SLOT_ATTR,
    circular_outlet_guard,
    input_props_binding,
    lookup_prop_at_path,
    remove_special_characters,
    wrap_in_brackets,
)

logger = get_logger("portal")

PORTAL_ERROR_TEMPLATE_REF = "portalErrorRef"
PORTAL_ZERO_STATE_MESSAGE_VAR = "--cd-portal-zero-state-message"
CHILD_PORTAL_CLASS = "cd-child-content-portal"
PORTAL_ZERO_STATE_CLASS = "cd-portal-zero-state"
PORTAL_ERROR_STATE_CLASS = "cd-portal-error-state"


def _slot_attribute(slot_name: str, add_index_to_slot: bool = False) -> tuple[str, str]:
    """``slot="name"``, or ``[slot]="'name' + i"`` inside a loop."""
    if add_index_to_slot:
        return wrap_in_brackets(SLOT_ATTR), f"'{slot_name}' + {INDEX_VAR}"
    return SLOT_ATTR, slot_name


def generate_portal(
    add_index_to_id: bool = False,
    root_id_binding: str = "",
    slot_name: str | None = None,
    add_index_to_slot: bool = False,
) -> TemplateFactory:
    """Build the outlet wrapper rendering the element bound by ``root_id_binding``.

    Returns the unbuilt wrapper factory so callers can add guards and
    classes before serializing it.

    Args:
        add_index_to_id: Suffix the class prefix with the loop index.
        root_id_binding: Expression resolving to the referenced element id.
        slot_name: Named slot the portal fills in its host element.
        add_index_to_slot: Suffix the slot name with the loop index.
    """
    outlet = (
        TemplateFactory(BuildMode.INTERNAL, CD_OUTLET_TAGNAME)
        .add_bound_attribute(OUTLET_INSTANCE_ID, ELEMENT_ID)
        .add_bound_attribute(OUTLET_RENDER_ID, root_id_binding)
        .add_element_class_prefix_binding(add_index_to_id, slot_name)
        .add_bound_attribute(OUTLET_PROPERTIES_MAP)
        .add_bound_attribute(OUTLET_STYLES_MAP)
        .add_bound_attribute(OUTLET_ASSETS)
        .add_bound_attribute(OUTLET_ADD_MARKER, "false")
        .add_bound_attribute(OUTLET_DESIGN_SYSTEM)
        .add_attribute(OUTLET_TYPE, OUTLET_TYPE_PORTAL)
        .add_bound_attribute(OUTLET_ANCESTORS)
        .add_bound_attribute(OUTLET_DATASETS)
        .add_bound_attribute(OUTLET_LOADED_DATA)
        .build()
    )

    wrapper = TemplateFactory(BuildMode.INTERNAL, DIV_TAG)
    wrapper.add_css_class(PORTAL_WRAPPER_CLASS).add_child(outlet)

    if slot_name:
        wrapper.add_attribute(*_slot_attribute(slot_name, add_index_to_slot))

    return wrapper


def generate_portal_zero_state(
    reference_lookup: str,
    error_ref: str = PORTAL_ERROR_TEMPLATE_REF,
    is_child: bool = False,
    slot_name: str | None = None,
    add_index_to_slot: bool = False,
    zero_state_message: str | None = None,
) -> str:
    """Build the ``<ng-template>`` shown when a portal has nothing to render.

    The error-state class is applied when the reference exists but the
    cycle guard rejected it. Top-level portals also carry the default
    renderer scaffolding.
    """
    zero_state = TemplateFactory(BuildMode.INTERNAL, DIV_TAG)
    zero_state.add_css_class(PORTAL_ZERO_STATE_CLASS)
    zero_state.add_conditional_css_class(
        PORTAL_ERROR_STATE_CLASS, f"{reference_lookup} {HAS_VALUE_PIPE}"
    )

    if not is_child:
        zero_state.add_default_attributes().add_fit_content_class()
    if slot_name:
        zero_state.add_attribute(*_slot_attribute(slot_name, add_index_to_slot))
    if zero_state_message:
        zero_state.add_css_var(PORTAL_ZERO_STATE_MESSAGE_VAR, zero_state_message, True)

    return f"<ng-template #{error_ref}>{zero_state.build()}</ng-template>"


def build_child_portal(
    portal_ref_binding: str,
    add_index_to_id: bool = True,
    slot_name: str | None = None,
    add_index_to_slot: bool = False,
    zero_state_message: str | None = None,
) -> str:
    """Build a guarded child portal followed by its zero-state template.

    Example:
        >>> html = build_child_portal("props?.inputs?.content", False, "content")
        >>> html.count("<ng-template #portalErrorRefcontent>")
        1
    """
    error_ref = PORTAL_ERROR_TEMPLATE_REF
    if slot_name:
        error_ref += remove_special_characters(slot_name)

    portal = generate_portal(add_index_to_id, portal_ref_binding, slot_name, add_index_to_slot)
    portal.add_css_class(CHILD_PORTAL_CLASS)
    portal.add_if_else(circular_outlet_guard(portal_ref_binding), error_ref)

    zero_state = generate_portal_zero_state(
        portal_ref_binding,
        error_ref,
        True,
        slot_name,
        add_index_to_slot,
        zero_state_message,
    )
    return portal.build() + zero_state


def add_dynamic_portal_slots(prop: PropertyGroup, factory: TemplateFactory) -> TemplateFactory:
    """Add one looped child portal per portal slot in a dynamic list's item schema."""
    if not prop.name or prop.input_type != PropertyInput.DYNAMIC_LIST or not prop.item_schema:
        return factory

    for slot_prop in get_props_recursive(prop.item_schema):
        if slot_prop.input_type != PropertyInput.PORTAL_SLOT or not slot_prop.name:
            continue
        item_path = input_props_binding(prop.name) + wrap_in_brackets(INDEX_VAR)
        portal = build_child_portal(
            lookup_prop_at_path(item_path, slot_prop.name),
            True,
            slot_prop.name,
            True,
            slot_prop.portal_zero_state_message,
        )
        loop = TemplateFactory(BuildMode.INTERNAL, NG_CONTAINER)
        loop.add_for(SLOT_ATTR, prop.name, True).add_child(portal)
        factory.add_child(loop.build())

    return factory


def add_portal_slots(
    properties: Iterable[PropertyGroup],
    factory: TemplateFactory,
) -> TemplateFactory:
    """Add child portals for every portal-slot property (Internal only).

    Dynamic lists contribute one looped portal per nested slot; every
    property is visited, so a definition may combine list slots and
    plain slots.
    """
    if not factory.is_internal:
        return factory

    for prop in get_props_recursive(properties):
        if not prop.name:
            continue
        if prop.input_type == PropertyInput.DYNAMIC_LIST:
            add_dynamic_portal_slots(prop, factory)
            continue
        if prop.input_type != PropertyInput.PORTAL_SLOT:
            continue
        logger.debug(f"Adding portal slot '{prop.name}'")
        factory.add_child(
            build_child_portal(
                input_props_binding(prop.name),
                False,
                prop.name,
                False,
                prop.portal_zero_state_message,
            )
        )

    return factory
