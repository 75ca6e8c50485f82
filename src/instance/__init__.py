"""Instance data records and the instance factory."""

from src.instance.lib import (
    BASE_ELEMENT_INPUTS,
    DEFAULT_STATE,
    A11yInputs,
    Frame,
    InstanceData,
    InstanceFactory,
    KeyValue,
    StyleGroup,
    create_instance,
    get_descendant_ids,
    is_valid_attr,
    is_valid_attribute_value,
    pixel_value,
)

__all__ = [
    # Models
    "KeyValue",
    "A11yInputs",
    "Frame",
    "StyleGroup",
    "InstanceData",
    # Factory
    "InstanceFactory",
    "create_instance",
    "BASE_ELEMENT_INPUTS",
    "DEFAULT_STATE",
    # Helpers
    "is_valid_attr",
    "is_valid_attribute_value",
    "pixel_value",
    "get_descendant_ids",
]
