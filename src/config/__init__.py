"""Centralized configuration management for component-templates.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from src.config import EnvVar, get_environment
    >>>
    >>> # Get any environment variable with automatic type conversion
    >>> reset = get_environment(EnvVar.EXPORT_CSS_RESET)  # Returns bool: True
    >>>
    >>> # List available variables by category
    >>> for var in list_environment_variables("export"):
    ...     info = get_environment_info(var)
    ...     print(f"{info.name}: {info.description}")

Environment Variable Categories:
    general: Logging
    registry: Component catalog configuration
    export: Font link and stylesheet reset for application export
"""

from .lib import (
    # Core types
    EnvConfig,
    EnvVar,
    get_definitions_path,
    # Main interface
    get_environment,
    get_environment_info,
    get_font_base_url,
    get_log_level,
    # Introspection
    list_environment_variables,
)

__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_log_level",
    "get_font_base_url",
    "get_definitions_path",
    # Introspection
    "list_environment_variables",
]
