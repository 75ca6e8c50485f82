"""Tests for the CLI commands."""

import json
import subprocess
import sys

import pytest


def run_cli(root_dir, *args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, ".", *args],
        capture_output=True,
        text=True,
        cwd=root_dir,
        timeout=60,
    )


@pytest.fixture
def project_file(tmp_path):
    path = tmp_path / "project.json"
    path.write_text(
        json.dumps(
            {
                "elements": {
                    "b1": {"element_type": "board", "name": "Home", "child_ids": ["t1"]},
                    "t1": {
                        "element_type": "text",
                        "name": "Title",
                        "parent_id": "b1",
                        "inputs": {"innerHTML": "Hello"},
                    },
                }
            }
        )
    )
    return path


@pytest.mark.integration
def test_help_lists_commands(root_dir):
    result = run_cli(root_dir, "--help")
    assert result.returncode == 0
    for command in ("compile", "catalog", "export", "validate", "list"):
        assert command in result.stdout


@pytest.mark.integration
def test_unknown_command_fails(root_dir):
    assert run_cli(root_dir, "nope").returncode == 1


@pytest.mark.integration
def test_compile_simple(root_dir):
    result = run_cli(root_dir, "compile", "text", "--mode", "simple")
    assert result.returncode == 0
    assert result.stdout.strip() == '<div class="text__text">Text</div>'


@pytest.mark.integration
def test_compile_unknown_component(root_dir):
    assert run_cli(root_dir, "compile", "missing").returncode == 1


@pytest.mark.integration
def test_catalog(root_dir, tmp_path):
    output = tmp_path / "catalog.html"
    result = run_cli(root_dir, "catalog", "-o", str(output))
    assert result.returncode == 0
    assert "#cdRootRef" in output.read_text()


@pytest.mark.integration
def test_validate_reports_errors(root_dir, tmp_path):
    path = tmp_path / "definitions.json"
    path.write_text(json.dumps([{"id": "ok", "title": "Ok", "tag_name": "b"}, {"id": "bad"}]))
    result = run_cli(root_dir, "validate", str(path))
    assert result.returncode == 1
    assert "OK    ok" in result.stdout
    assert "FAIL  bad" in result.stdout


@pytest.mark.integration
def test_export_simple(root_dir, project_file):
    result = run_cli(root_dir, "export", str(project_file))
    assert result.returncode == 0
    assert result.stdout.strip() == (
        '<div class="home__b1 cd-board"><div class="title__t1">Hello</div></div>'
    )


@pytest.mark.integration
def test_export_application(root_dir, project_file):
    result = run_cli(root_dir, "export", str(project_file), "--mode", "application")
    assert result.returncode == 0
    assert "<style>" in result.stdout
    assert ".home__b1{" in result.stdout


@pytest.mark.integration
def test_list_json(root_dir):
    result = run_cli(root_dir, "list", "--library", "core", "--json")
    assert result.returncode == 0
    ids = [row["id"] for row in json.loads(result.stdout)]
    assert ids == ["board", "symbol", "symbol-instance", "board-portal"]
