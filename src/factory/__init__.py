"""Template factory: fluent single-tag markup builder and binding expressions."""

from src.factory.expressions import (
    CHILD_ITERATOR,
    input_props_binding,
    props_binding,
    remove_special_characters,
)
from src.factory.lib import TemplateFactory

__all__ = [
    # Factory
    "TemplateFactory",
    # Expressions
    "CHILD_ITERATOR",
    "input_props_binding",
    "props_binding",
    "remove_special_characters",
]
