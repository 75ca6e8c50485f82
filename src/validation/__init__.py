"""Component definition validation utilities."""

from src.validation.lib import (
    ValidationError,
    ValidationErrorType,
    is_valid,
    validate_definition,
)

__all__ = [
    "ValidationError",
    "ValidationErrorType",
    "validate_definition",
    "is_valid",
]
