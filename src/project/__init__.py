"""Definitions and project documents read from JSON files."""

from src.project.lib import (
    Project,
    ProjectFileError,
    load_definitions,
    load_project,
    parse_definitions,
    parse_project,
    register_definitions,
)

__all__ = [
    "Project",
    "ProjectFileError",
    "load_definitions",
    "parse_definitions",
    "register_definitions",
    "load_project",
    "parse_project",
]
