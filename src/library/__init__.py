"""Built-in component definitions and their registration."""

from src.library.lib import (
    BUILTIN_DEFINITIONS,
    Board,
    BoardPortal,
    Embed,
    Generic,
    Icon,
    Image,
    Symbol,
    SymbolInstance,
    Text,
    TextInput,
    portal_template,
    register_builtin_definitions,
    symbol_instance_template,
)

__all__ = [
    # Core
    "Board",
    "Symbol",
    "SymbolInstance",
    "BoardPortal",
    # Primitives
    "Generic",
    "Text",
    "Image",
    "Icon",
    "Embed",
    "TextInput",
    # Templates
    "portal_template",
    "symbol_instance_template",
    # Registration
    "BUILTIN_DEFINITIONS",
    "register_builtin_definitions",
]
