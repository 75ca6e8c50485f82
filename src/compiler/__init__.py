"""Compiles component definitions into mode-specific markup."""

from src.compiler.lib import (
    ChildTypeError,
    CompilationError,
    build_variant_switch,
    compile_definition,
    create_template_factory,
    get_template_function,
    render_child,
)

__all__ = [
    # Errors
    "CompilationError",
    "ChildTypeError",
    # Compilation
    "get_template_function",
    "compile_definition",
    "create_template_factory",
    "build_variant_switch",
    "render_child",
]
