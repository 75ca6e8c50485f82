"""Portal slot markup: outlets, child portals and zero states."""

from src.portal.lib import (
    PORTAL_ERROR_TEMPLATE_REF,
    add_dynamic_portal_slots,
    add_portal_slots,
    build_child_portal,
    generate_portal,
    generate_portal_zero_state,
)

__all__ = [
    "PORTAL_ERROR_TEMPLATE_REF",
    "generate_portal",
    "generate_portal_zero_state",
    "build_child_portal",
    "add_dynamic_portal_slots",
    "add_portal_slots",
]
