"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Registry fixtures isolated from the process-wide default registry
- Markup normalization for comparing compiled templates
"""

from __future__ import annotations

import re
from pathlib import Path

import pytest
from dotenv import load_dotenv

from src.library import register_builtin_definitions
from src.manager import TemplateManager
from src.registry import Registry

# Load environment variables from .env file
load_dotenv()

ROOT_DIR = Path(__file__).parent

_BETWEEN_TAGS = re.compile(r">\s+<")
_WHITESPACE = re.compile(r"\s+")


def normalize_markup(html: str) -> str:
    """Collapse whitespace runs and drop whitespace between tags."""
    return _BETWEEN_TAGS.sub("><", _WHITESPACE.sub(" ", html)).strip()


# =============================================================================
# Pytest Hooks
# =============================================================================


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear project variables a local .env may set."""
    for name in (
        "COMPONENT_EXPORT_CSS_RESET",
        "COMPONENT_FONT_BASE_URL",
        "COMPONENT_DEFAULT_LIBRARY",
        "COMPONENT_DEFINITIONS_PATH",
    ):
        monkeypatch.delenv(name, raising=False)


# =============================================================================
# Common Test Fixtures
# =============================================================================


@pytest.fixture
def builtin_registry() -> Registry:
    """A registry holding the built-in component library."""
    return register_builtin_definitions(Registry())


@pytest.fixture
def template_manager(builtin_registry: Registry) -> TemplateManager:
    """A template manager over the built-in library."""
    return TemplateManager(builtin_registry)


@pytest.fixture
def normalize():
    """The markup normalizer, for tests that compare formatted templates."""
    return normalize_markup


@pytest.fixture
def root_dir() -> Path:
    return ROOT_DIR
