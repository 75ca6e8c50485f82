"""Tests for definition and project file loading."""

import json

import pytest

from src.registry import Registry

from .lib import (
    ProjectFileError,
    load_definitions,
    load_project,
    parse_definitions,
    parse_project,
    register_definitions,
)


@pytest.fixture
def definitions_file(tmp_path):
    path = tmp_path / "definitions.json"
    path.write_text(
        json.dumps(
            {
                "definitions": [
                    {"id": "chip", "title": "Chip", "tag_name": "span"},
                    {"id": "broken", "tag_name": "b"},
                ]
            }
        )
    )
    return path


class TestDefinitions:
    """Tests for definition loading."""

    @pytest.mark.unit
    def test_parse_list(self):
        definitions = parse_definitions([{"id": "a", "title": "A", "tag_name": "hr"}])
        assert [d.tag_name for d in definitions] == ["hr"]

    @pytest.mark.unit
    def test_invalid_entry(self):
        with pytest.raises(ProjectFileError):
            parse_definitions([{"id": "a", "properties": "nope"}])

    @pytest.mark.integration
    def test_load_and_register(self, definitions_file):
        registry = Registry()
        failures = register_definitions(registry, load_definitions(definitions_file))
        assert registry.list_components() == ["chip"]
        assert list(failures) == ["broken"]
        assert failures["broken"][0].name == "title"

    @pytest.mark.integration
    def test_missing_file(self, tmp_path):
        with pytest.raises(ProjectFileError) as exc_info:
            load_definitions(tmp_path / "nope.json")
        assert exc_info.value.path == tmp_path / "nope.json"

    @pytest.mark.integration
    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{")
        with pytest.raises(ProjectFileError, match="Invalid JSON"):
            load_definitions(path)


class TestProject:
    """Tests for project loading."""

    @pytest.mark.unit
    def test_keyed_elements_and_default_roots(self):
        project = parse_project(
            {
                "elements": {
                    "b1": {"element_type": "board", "child_ids": ["t1"]},
                    "t1": {"element_type": "text", "parent_id": "b1"},
                },
                "assets": [{"id": "a1", "url": "https://example.com/a.png"}],
                "design_system": {"fonts": ["Inter"]},
            }
        )
        assert project.roots == ("b1",)
        assert project.context.elements["t1"].id == "t1"
        assert project.context.assets["a1"].url == "https://example.com/a.png"
        assert project.context.design_system.fonts == ("Inter",)

    @pytest.mark.unit
    def test_explicit_roots(self):
        project = parse_project({"elements": [{"id": "x"}, {"id": "y"}], "roots": ["y"]})
        assert project.roots == ("y",)

    @pytest.mark.unit
    def test_listed_element_without_id(self):
        with pytest.raises(ProjectFileError):
            parse_project({"elements": [{"element_type": "text"}]})

    @pytest.mark.integration
    def test_non_object_file(self, tmp_path):
        path = tmp_path / "project.json"
        path.write_text("[]")
        with pytest.raises(ProjectFileError, match="must hold an object"):
            load_project(path)
