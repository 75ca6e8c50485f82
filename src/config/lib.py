"""Centralized environment configuration management for component-templates.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Example:
    >>> from src.config import EnvVar, get_environment
    >>>
    >>> # Get values with automatic type conversion
    >>> reset = get_environment(EnvVar.EXPORT_CSS_RESET)  # Returns bool
    >>> level = get_environment(EnvVar.LOG_LEVEL)  # Returns str
    >>>
    >>> # Override at runtime
    >>> level = get_environment(EnvVar.LOG_LEVEL, override="DEBUG")
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "COMPONENT_LOG_LEVEL").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, bool, Path).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by component-templates.

    Each member contains an EnvConfig with name, default, type, and description.
    Use with `get_environment()` for type-safe access.

    Categories:
        - general: Logging and process-wide behaviour
        - registry: Component catalog configuration
        - export: Simple/Application export output
    """

    # -------------------------------------------------------------------------
    # General
    # -------------------------------------------------------------------------
    LOG_LEVEL = EnvConfig(
        name="COMPONENT_LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Logging level for the CLI (DEBUG, INFO, WARNING, ERROR)",
        category="general",
    )

    # -------------------------------------------------------------------------
    # Registry
    # -------------------------------------------------------------------------
    DEFAULT_LIBRARY = EnvConfig(
        name="COMPONENT_DEFAULT_LIBRARY",
        default="all",
        var_type=str,
        description="Library filter used when listing components",
        category="registry",
    )
    DEFINITIONS_PATH = EnvConfig(
        name="COMPONENT_DEFINITIONS_PATH",
        default=None,
        var_type=Path,
        description="JSON file with extra component definitions to register",
        category="registry",
    )

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------
    FONT_BASE_URL = EnvConfig(
        name="COMPONENT_FONT_BASE_URL",
        default="https://fonts.googleapis.com/css",
        var_type=str,
        description="Base URL of the font stylesheet linked in application export",
        category="export",
    )
    EXPORT_CSS_RESET = EnvConfig(
        name="COMPONENT_EXPORT_CSS_RESET",
        default=True,
        var_type=bool,
        description="Prepend the box-sizing reset to exported stylesheets",
        category="export",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _parse_bool(value: str) -> bool | None:
    """Parse string to boolean.

    Recognizes: true/false, 1/0, yes/no (case-insensitive).
    Returns None for unrecognized values.
    """
    normalized = value.lower().strip()
    if normalized in ("true", "1", "yes"):
        return True
    if normalized in ("false", "0", "no"):
        return False
    return None


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type.
        default: Default value if conversion fails or value is None.

    Returns:
        Converted value or default.
    """
    if value is None:
        return default

    if var_type is str:
        return value

    if var_type is int:
        try:
            return int(value)
        except ValueError:
            return default

    if var_type is bool:
        result = _parse_bool(value)
        return result if result is not None else default

    if var_type is Path:
        return Path(value)

    # Unknown type, return as-is
    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: bool) -> bool: ...
@overload
def get_environment(env_var: EnvVar, override: Path) -> Path: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type (str, int, bool, or Path).

    Example:
        >>> get_environment(EnvVar.EXPORT_CSS_RESET)
        True
        >>> get_environment(EnvVar.LOG_LEVEL, override="DEBUG")
        'DEBUG'
    """
    config: EnvConfig = env_var.value

    # Override takes highest priority
    if override is not None:
        return override

    raw_value = os.environ.get(config.name)
    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable.

    Args:
        env_var: Environment variable enum member.

    Returns:
        EnvConfig with name, default, type, and description.
    """
    return env_var.value


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (general, registry, export).
                 None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


# =============================================================================
# Convenience Functions
# =============================================================================


def get_log_level(override: str | None = None) -> str:
    """Get the configured log level name, upper-cased."""
    return str(get_environment(EnvVar.LOG_LEVEL, override=override)).upper()


def get_font_base_url(override: str | None = None) -> str:
    """Get the font stylesheet base URL without a trailing slash."""
    return str(get_environment(EnvVar.FONT_BASE_URL, override=override)).rstrip("/")


def get_definitions_path(override: Path | str | None = None) -> Path | None:
    """Get the optional path of a definitions JSON file.

    Resolution: override > COMPONENT_DEFINITIONS_PATH > None
    """
    if override:
        return Path(override)
    return get_environment(EnvVar.DEFINITIONS_PATH)


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
