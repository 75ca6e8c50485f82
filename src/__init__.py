"""component-templates: compile component definitions into renderer templates."""

from src.compiler import CompilationError, compile_definition
from src.definition import BuildMode, ComponentDefinition, PropertyGroup
from src.library import register_builtin_definitions
from src.manager import ExportContext, TemplateManager
from src.registry import Registry, default_registry, register_component
from src.validation import ValidationError, validate_definition

__all__ = [
    # Definitions
    "ComponentDefinition",
    "PropertyGroup",
    "BuildMode",
    # Registry
    "Registry",
    "default_registry",
    "register_component",
    "register_builtin_definitions",
    # Compilation
    "compile_definition",
    "CompilationError",
    # Export
    "TemplateManager",
    "ExportContext",
    # Validation
    "validate_definition",
    "ValidationError",
]
