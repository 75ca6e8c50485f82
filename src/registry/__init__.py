"""Component registry: registration, aliases, cached queries and layer icons."""

from src.registry.lib import (
    LayerIcons,
    RegistrationError,
    Registry,
    code_component_tag_name,
    default_registry,
    process_properties,
    register_component,
)

__all__ = [
    # Registry
    "Registry",
    "RegistrationError",
    "default_registry",
    "register_component",
    # Helpers
    "process_properties",
    "code_component_tag_name",
    "LayerIcons",
]
