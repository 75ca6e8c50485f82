"""JSON loading of component definitions and project documents.

Definitions file:
    A list of ComponentDefinition objects, or ``{"definitions": [...]}``.

Project file:
    ``{"elements": ..., "assets": ..., "design_system": ..., "roots": [...]}``
    where elements and assets are either keyed by id or listed with an
    ``id`` field. ``roots`` defaults to every element without a parent.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError as ModelValidationError

from src.core.log import get_logger
from src.definition import ComponentDefinition
from src.instance import InstanceData
from src.manager import ExportContext
from src.registry import Registry
from src.stylesheet import DesignSystem, ProjectAsset
from src.validation import ValidationError

logger = get_logger("project")


class ProjectFileError(Exception):
    """Raised when a definitions or project file cannot be read.

    Attributes:
        path: File that failed to load.
    """

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


@dataclass(frozen=True)
class Project:
    """A loaded project document.

    Attributes:
        context: Elements, assets and design system.
        roots: Elements exported when no start ids are given.
    """

    context: ExportContext
    roots: tuple[str, ...]


def _read_json(path: Path | str) -> Any:
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise ProjectFileError(f"File not found: {path}", path) from e
    except json.JSONDecodeError as e:
        raise ProjectFileError(f"Invalid JSON in {path}: {e}", path) from e


def _keyed(entries: Any) -> dict[str, dict[str, Any]]:
    """Normalize a list of records with ids, or an id-keyed map, to a map."""
    if entries is None:
        return {}
    if isinstance(entries, dict):
        return {key: {"id": key, **value} for key, value in entries.items()}
    return {entry["id"]: entry for entry in entries}


def parse_definitions(data: Any, path: Path | None = None) -> list[ComponentDefinition]:
    """Build definitions from decoded JSON.

    Raises:
        ProjectFileError: If an entry is not a valid definition.
    """
    if isinstance(data, dict):
        data = data.get("definitions", [])
    try:
        return [ComponentDefinition.model_validate(entry) for entry in data]
    except ModelValidationError as e:
        raise ProjectFileError(f"Invalid component definition: {e}", path) from e


def load_definitions(path: Path | str) -> list[ComponentDefinition]:
    """Read component definitions from a JSON file.

    Raises:
        ProjectFileError: If the file is missing or malformed.
    """
    definitions = parse_definitions(_read_json(path), Path(path))
    logger.debug(f"Loaded {len(definitions)} definitions from {path}")
    return definitions


def register_definitions(
    registry: Registry,
    definitions: list[ComponentDefinition],
) -> dict[str, list[ValidationError]]:
    """Register definitions, collecting validation errors by id."""
    failures: dict[str, list[ValidationError]] = {}
    for definition in definitions:
        errors = registry.register(definition)
        if errors:
            failures[definition.id] = errors
    return failures


def parse_project(data: dict[str, Any], path: Path | None = None) -> Project:
    """Build a project from decoded JSON.

    Raises:
        ProjectFileError: If an element or asset record is malformed.
    """
    try:
        elements = {
            key: InstanceData.model_validate(value)
            for key, value in _keyed(data.get("elements")).items()
        }
        assets = {
            key: ProjectAsset.model_validate(value)
            for key, value in _keyed(data.get("assets")).items()
        }
        design_system = DesignSystem.model_validate(data.get("design_system") or {})
    except (KeyError, ModelValidationError) as e:
        raise ProjectFileError(f"Invalid project data: {e}", path) from e

    roots = data.get("roots")
    if roots is None:
        roots = [key for key, element in elements.items() if not element.parent_id]

    context = ExportContext(elements=elements, assets=assets, design_system=design_system)
    return Project(context=context, roots=tuple(roots))


def load_project(path: Path | str) -> Project:
    """Read a project document from a JSON file.

    Raises:
        ProjectFileError: If the file is missing or malformed.
    """
    data = _read_json(path)
    if not isinstance(data, dict):
        raise ProjectFileError(f"Project file must hold an object: {path}", Path(path))
    project = parse_project(data, Path(path))
    logger.debug(f"Loaded {len(project.context.elements)} elements from {path}")
    return project
