"""Unit tests for configuration management module."""

import json
from pathlib import Path
from typing import Any

import pytest
import yaml
from pydantic import ValidationError

from depgraph.config import GraphDefinition, GraphSettings, NodeDefinition
from depgraph.graph.errors import NodeNotFoundError


@pytest.fixture
def valid_definition_dict() -> dict[str, Any]:
    """Fixture providing a valid graph definition dictionary."""
    return {
        "circular": False,
        "nodes": [
            {"name": "app", "depends_on": ["lib", "config"]},
            {"name": "lib", "data": {"version": "1.2"}, "depends_on": ["config"]},
            {"name": "config"},
        ],
    }


@pytest.fixture
def temp_definition_file(tmp_path: Path, valid_definition_dict: dict[str, Any]) -> Path:
    """Fixture providing temporary YAML definition file."""
    path = tmp_path / "deps.yaml"
    with path.open("w") as f:
        yaml.dump(valid_definition_dict, f)
    return path


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Make sure environment overrides from the shell do not leak in."""
    for var in ("DEPGRAPH_CIRCULAR", "DEPGRAPH_LOGGING_LEVEL", "DEPGRAPH_JSON_LOGS"):
        monkeypatch.delenv(var, raising=False)


class TestNodeDefinition:
    """Test NodeDefinition model."""

    def test_minimal_node(self):
        """Test a node with only a name."""
        node = NodeDefinition(name="app")

        assert node.depends_on == []
        assert node.data is None

    def test_empty_name_rejected(self):
        """Test that node names must not be empty."""
        with pytest.raises(ValidationError):
            NodeDefinition(name="  ")

    def test_duplicate_dependencies_collapsed(self):
        """Test that repeated dependencies are kept once, in order."""
        node = NodeDefinition(name="app", depends_on=["b", "a", "b"])

        assert node.depends_on == ["b", "a"]


class TestGraphDefinition:
    """Test GraphDefinition model."""

    def test_valid_definition(self, valid_definition_dict):
        """Test parsing a valid definition."""
        definition = GraphDefinition.from_dict(valid_definition_dict)

        assert not definition.circular
        assert [node.name for node in definition.nodes] == ["app", "lib", "config"]

    def test_short_form(self):
        """Test the mapping short form."""
        definition = GraphDefinition.from_dict({"nodes": {"app": ["lib"], "lib": None}})

        assert definition.nodes[0].depends_on == ["lib"]
        assert definition.nodes[1].depends_on == []

    def test_short_form_numeric_names(self, tmp_path):
        """Test that numeric YAML keys and dependencies become string names."""
        path = tmp_path / "deps.yaml"
        path.write_text("nodes:\n  1: [2]\n  2: []\n")

        graph = GraphDefinition.from_yaml(path).to_graph()

        assert graph.dependencies_of("1") == ["2"]
        assert graph.overall_order() == ["2", "1"]

    def test_duplicate_node_names(self):
        """Test that duplicate node names are rejected."""
        with pytest.raises(ValidationError, match="Duplicate node name: app"):
            GraphDefinition.from_dict({"nodes": [{"name": "app"}, {"name": "app"}]})

    def test_to_graph(self, valid_definition_dict):
        """Test building a graph from a definition."""
        graph = GraphDefinition.from_dict(valid_definition_dict).to_graph()

        assert graph.overall_order() == ["config", "lib", "app"]
        assert graph.get_node_data("lib") == {"version": "1.2"}
        assert graph.get_node_data("app") == "app"

    def test_to_graph_explicit_null_data(self):
        """Test that an explicit null payload is kept."""
        graph = GraphDefinition.from_dict({"nodes": [{"name": "a", "data": None}]}).to_graph()

        assert graph.get_node_data("a") is None

    def test_to_graph_forward_references(self):
        """Test that nodes may depend on nodes defined later."""
        graph = GraphDefinition.from_dict({"nodes": {"app": ["lib"], "lib": []}}).to_graph()

        assert graph.dependencies_of("app") == ["lib"]

    def test_to_graph_undefined_dependency(self):
        """Test that depending on an undefined node fails."""
        definition = GraphDefinition.from_dict({"nodes": {"app": ["missing"]}})

        with pytest.raises(NodeNotFoundError, match="Node does not exist: missing"):
            definition.to_graph()

    def test_to_graph_circular(self):
        """Test that the circular flag reaches the graph."""
        definition = GraphDefinition.from_dict(
            {"circular": True, "nodes": {"a": ["b"], "b": ["a"]}},
        )

        graph = definition.to_graph()

        assert graph.circular
        assert graph.overall_order() == ["b", "a"]


class TestLoadDefinition:
    """Test loading definitions from files."""

    def test_load_yaml(self, temp_definition_file):
        """Test loading a YAML definition."""
        definition = GraphDefinition.from_yaml(temp_definition_file)

        assert len(definition.nodes) == 3

    def test_load_json(self, tmp_path, valid_definition_dict):
        """Test loading a JSON definition."""
        path = tmp_path / "deps.json"
        path.write_text(json.dumps(valid_definition_dict))

        definition = GraphDefinition.from_yaml(path)

        assert definition.nodes[1].data == {"version": "1.2"}

    def test_load_not_found(self, tmp_path):
        """Test loading a file that does not exist."""
        with pytest.raises(FileNotFoundError, match="Graph definition file not found"):
            GraphDefinition.from_yaml(tmp_path / "missing.yaml")

    def test_load_invalid_yaml(self, tmp_path):
        """Test loading a file that is not valid YAML."""
        path = tmp_path / "deps.yaml"
        path.write_text("nodes: [unclosed")

        with pytest.raises(ValueError, match="Invalid YAML"):
            GraphDefinition.from_yaml(path)

    def test_load_empty_file(self, tmp_path):
        """Test loading an empty file."""
        path = tmp_path / "deps.yaml"
        path.write_text("")

        with pytest.raises(ValueError, match="empty"):
            GraphDefinition.from_yaml(path)

    def test_load_non_mapping(self, tmp_path):
        """Test loading a file whose top level is a list."""
        path = tmp_path / "deps.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ValueError, match="mapping"):
            GraphDefinition.from_yaml(path)

    def test_load_validation_error(self, tmp_path):
        """Test that schema violations surface as ValueError."""
        path = tmp_path / "deps.yaml"
        path.write_text("nodes:\n  - depends_on: [a]\n")

        with pytest.raises(ValueError):
            GraphDefinition.from_yaml(path)


class TestEnvironmentVariableOverrides:
    """Test environment variable overrides."""

    def test_circular_override(self, temp_definition_file, monkeypatch):
        """Test forcing circular mode from the environment."""
        monkeypatch.setenv("DEPGRAPH_CIRCULAR", "true")

        definition = GraphDefinition.from_yaml(temp_definition_file)

        assert definition.circular

    def test_circular_override_off(self, monkeypatch):
        """Test turning circular mode off from the environment."""
        monkeypatch.setenv("DEPGRAPH_CIRCULAR", "0")

        definition = GraphDefinition.from_dict({"circular": True, "nodes": []})

        assert not definition.circular


class TestGraphSettings:
    """Test GraphSettings model."""

    def test_defaults(self):
        """Test default settings."""
        settings = GraphSettings()

        assert settings.logging_level == "WARNING"
        assert not settings.json_logs

    def test_logging_level_validation(self):
        """Test that unknown logging levels are rejected."""
        with pytest.raises(ValidationError):
            GraphSettings(logging_level="VERBOSE")

    def test_logging_level_case_insensitive(self):
        """Test that logging levels are normalized to upper case."""
        assert GraphSettings(logging_level="debug").logging_level == "DEBUG"

    def test_from_env(self, monkeypatch):
        """Test reading settings from the environment."""
        monkeypatch.setenv("DEPGRAPH_LOGGING_LEVEL", "info")
        monkeypatch.setenv("DEPGRAPH_JSON_LOGS", "yes")

        settings = GraphSettings.from_env()

        assert settings.logging_level == "INFO"
        assert settings.json_logs

    def test_from_env_overrides_take_precedence(self, monkeypatch):
        """Test that explicit values beat the environment."""
        monkeypatch.setenv("DEPGRAPH_LOGGING_LEVEL", "INFO")

        settings = GraphSettings.from_env(logging_level="ERROR", json_logs=None)

        assert settings.logging_level == "ERROR"
        assert not settings.json_logs
