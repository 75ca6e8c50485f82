"""CLI entry point for component-templates.

This module acts as the central entry point for the project's CLI tools.
Each command builds a registry from the built-in library plus an optional
definitions file, then compiles, validates, lists or exports.
"""

import argparse
import json
import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError as ModelValidationError

from src.config import EnvVar, get_definitions_path, get_environment, get_log_level
from src.core.log import get_logger, setup_logging
from src.definition import BuildMode
from src.instance import InstanceData
from src.library import register_builtin_definitions
from src.manager import TemplateManager
from src.project import (
    ProjectFileError,
    load_definitions,
    load_project,
    register_definitions,
)
from src.registry import Registry
from src.validation import validate_definition

# Load environment variables from .env file
load_dotenv()

logger = get_logger("cli")


# =============================================================================
# Helpers
# =============================================================================


def _build_registry(definitions_path: Path | None = None) -> Registry:
    """Registry holding the built-in library plus definitions from a file."""
    registry = register_builtin_definitions(Registry())
    path = get_definitions_path(definitions_path)
    if path is None:
        return registry

    failures = register_definitions(registry, load_definitions(path))
    for component_id, errors in failures.items():
        logger.warning(f"Skipped '{component_id}': {len(errors)} validation error(s)")
    logger.info(f"Registered definitions from {path}")
    return registry


def _write_output(text: str, output: Path | None) -> None:
    if output:
        output.write_text(text, encoding="utf-8")
        logger.info(f"Saved to {output}")
    else:
        print(text)


def _add_definitions_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--definitions",
        "-d",
        type=Path,
        default=None,
        help="JSON file with extra definitions (default: COMPONENT_DEFINITIONS_PATH)",
    )


def _add_output_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Write the result to a file instead of stdout",
    )


# =============================================================================
# Compile Command
# =============================================================================


def cmd_compile(args: argparse.Namespace) -> int:
    """Compile one registered component to markup."""
    try:
        registry = _build_registry(args.definitions)
        definition = registry.get_component(args.component)
        if definition is None:
            logger.error(f"Unknown component: {args.component}")
            return 1

        mode = BuildMode(args.mode)
        instance = None
        if args.instance:
            instance = InstanceData.model_validate_json(args.instance.read_text(encoding="utf-8"))
        elif mode is not BuildMode.INTERNAL:
            instance = definition.create_instance(args.component)

        _write_output(definition.render(mode, instance), args.output)
        return 0

    except (ProjectFileError, ModelValidationError) as e:
        logger.error(str(e))
        return 1


def handle_compile_command(argv: list[str]) -> int:
    """Handle compile command."""
    parser = argparse.ArgumentParser(
        prog="python . compile",
        description="Compile a component definition to markup",
    )
    parser.add_argument("component", type=str, help="Component id")
    parser.add_argument(
        "--mode",
        "-m",
        type=str,
        default=BuildMode.INTERNAL.value,
        choices=[mode.value for mode in BuildMode],
        help="Build mode (default: internal)",
    )
    parser.add_argument(
        "--instance",
        "-i",
        type=Path,
        default=None,
        help="Instance data JSON used in export modes",
    )
    _add_definitions_argument(parser)
    _add_output_argument(parser)

    args = parser.parse_args(argv)
    return cmd_compile(args)


# =============================================================================
# Validate Command
# =============================================================================


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate every definition in a file; non-zero exit on any error."""
    try:
        definitions = load_definitions(args.path)
    except ProjectFileError as e:
        logger.error(str(e))
        return 1

    invalid = 0
    for definition in definitions:
        errors = validate_definition(definition)
        if not errors:
            print(f"  OK    {definition.id}")
            continue
        invalid += 1
        print(f"  FAIL  {definition.id}")
        for error in errors:
            print(f"        {error}")

    logger.info(f"Validated {len(definitions)} definition(s), {invalid} invalid")
    return 1 if invalid else 0


def handle_validate_command(argv: list[str]) -> int:
    """Handle validate command."""
    parser = argparse.ArgumentParser(
        prog="python . validate",
        description="Validate component definitions",
    )
    parser.add_argument("path", type=Path, help="Definitions JSON file")

    args = parser.parse_args(argv)
    return cmd_validate(args)


# =============================================================================
# Catalog Command
# =============================================================================


def cmd_catalog(args: argparse.Namespace) -> int:
    """Assemble the renderer template catalog."""
    try:
        registry = _build_registry(args.definitions)
    except ProjectFileError as e:
        logger.error(str(e))
        return 1

    _write_output(TemplateManager(registry).assemble_all_templates(), args.output)
    return 0


def handle_catalog_command(argv: list[str]) -> int:
    """Handle catalog command."""
    parser = argparse.ArgumentParser(
        prog="python . catalog",
        description="Assemble templates for every registered component",
    )
    _add_definitions_argument(parser)
    _add_output_argument(parser)

    args = parser.parse_args(argv)
    return cmd_catalog(args)


# =============================================================================
# Export Command
# =============================================================================


def cmd_export(args: argparse.Namespace) -> int:
    """Export a project subtree as markup, optionally with a stylesheet."""
    try:
        registry = _build_registry(args.definitions)
        project = load_project(args.project)
    except ProjectFileError as e:
        logger.error(str(e))
        return 1

    roots = args.roots or list(project.roots)
    if not roots:
        logger.error("Nothing to export: project has no root elements")
        return 1

    manager = TemplateManager(registry)
    logger.info(f"Exporting {len(roots)} root(s) in {args.mode} mode")
    if args.mode == BuildMode.APPLICATION.value:
        reset = False if args.no_css_reset else None
        html = manager.assemble_templates_with_css_for_export(roots, project.context, reset)
    else:
        html = manager.assemble_templates_for_export(roots, project.context)

    _write_output(html, args.output)
    return 0


def handle_export_command(argv: list[str]) -> int:
    """Handle export command."""
    parser = argparse.ArgumentParser(
        prog="python . export",
        description="Export project elements to static markup",
    )
    parser.add_argument("project", type=Path, help="Project JSON file")
    parser.add_argument(
        "--root",
        "-r",
        dest="roots",
        action="append",
        default=None,
        help="Element id to export (repeatable; default: project roots)",
    )
    parser.add_argument(
        "--mode",
        "-m",
        type=str,
        default=BuildMode.SIMPLE.value,
        choices=[BuildMode.SIMPLE.value, BuildMode.APPLICATION.value],
        help="Export mode (default: simple)",
    )
    parser.add_argument(
        "--no-css-reset",
        action="store_true",
        help="Omit the box-sizing reset from application exports",
    )
    _add_definitions_argument(parser)
    _add_output_argument(parser)

    args = parser.parse_args(argv)
    return cmd_export(args)


# =============================================================================
# List Command
# =============================================================================


def cmd_list(args: argparse.Namespace) -> int:
    """List registered components."""
    try:
        registry = _build_registry(args.definitions)
    except ProjectFileError as e:
        logger.error(str(e))
        return 1

    library = args.library or get_environment(EnvVar.DEFAULT_LIBRARY)
    definitions = registry.get_components(library, args.ignore_deprecated)

    if args.json:
        rows = [
            {"id": d.id, "title": d.title, "library": d.library, "tag_name": d.tag_name}
            for d in definitions
        ]
        print(json.dumps(rows, indent=2))
        return 0

    print(f"Components ({library}):")
    for definition in definitions:
        flags = " (deprecated)" if definition.deprecated else ""
        print(f"  {definition.id:<20} {definition.title or '':<24} {definition.library}{flags}")
    return 0


def handle_list_command(argv: list[str]) -> int:
    """Handle list command."""
    parser = argparse.ArgumentParser(
        prog="python . list",
        description="List registered components",
    )
    parser.add_argument(
        "--library",
        "-l",
        type=str,
        default=None,
        help="Library filter (default: COMPONENT_DEFAULT_LIBRARY)",
    )
    parser.add_argument(
        "--ignore-deprecated",
        action="store_true",
        help="Hide deprecated components",
    )
    parser.add_argument("--json", action="store_true", help="Print JSON")
    _add_definitions_argument(parser)

    args = parser.parse_args(argv)
    return cmd_list(args)


# =============================================================================
# Test Command
# =============================================================================


def cmd_test(extra_args: list[str]) -> int:
    """Run pytest with provided arguments and test tier options.

    Usage:
        python . test                # Run all tests
        python . test --unit         # Run only unit tests
        python . test --integration  # Run file system and CLI tests
        python . test -k "portal"    # Run tests matching pattern
    """
    tier_markers = {
        "--unit": ["-m", "unit"],
        "--integration": ["-m", "integration"],
        "--all": [],
    }

    pytest_args: list[str] = []
    remaining_args: list[str] = []

    for arg in extra_args:
        if arg in tier_markers:
            pytest_args.extend(tier_markers[arg])
        else:
            remaining_args.append(arg)

    cmd = [sys.executable, "-m", "pytest", *pytest_args, *remaining_args]
    logger.info(f"Running: {' '.join(cmd)}")

    try:
        return subprocess.call(cmd)
    except KeyboardInterrupt:
        return 130


# =============================================================================
# Main
# =============================================================================


def show_help() -> None:
    """Display CLI help message."""
    print("Usage: python . {command} [args]")
    print("\n=== Templates ===")
    print("  compile    Compile a component to markup")
    print("  catalog    Assemble the renderer template catalog")
    print("  export     Export project elements to static markup")
    print("\n=== Definitions ===")
    print("  validate   Validate a definitions file")
    print("  list       List registered components")
    print("\n=== Development ===")
    print("  test       Run pytest with tier options")
    print("\nExamples:")
    print("  python . compile text --mode simple")
    print("  python . catalog -d definitions.json -o catalog.html")
    print("  python . export project.json --mode application")
    print("  python . validate definitions.json")
    print("  python . list --library core")
    print("  python . test --unit")


def main() -> int:
    """Main entry point for the CLI."""
    if len(sys.argv) < 2:
        show_help()
        return 1

    command = sys.argv[1]
    rest_args = sys.argv[2:]

    if command in ("-h", "--help"):
        show_help()
        return 0

    commands = {
        "compile": lambda: handle_compile_command(rest_args),
        "validate": lambda: handle_validate_command(rest_args),
        "catalog": lambda: handle_catalog_command(rest_args),
        "export": lambda: handle_export_command(rest_args),
        "list": lambda: handle_list_command(rest_args),
        "test": lambda: cmd_test(rest_args),
    }

    if command in commands:
        setup_logging(get_log_level())
        return commands[command]()

    logger.error(f"Unknown command: {command}")
    show_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
