"""Configuration Management with Pydantic.

This module implements the graph definition file format and the runtime
settings of the command line interface. Definition files are YAML or JSON and
are validated with Pydantic; environment variables override selected values.

A definition file looks like::

    circular: false
    nodes:
      - name: app
        depends_on: [lib, config]
      - name: lib
        data: {version: "1.2"}
      - name: config

or, in the short form, maps each node name to its dependencies::

    nodes:
      app: [lib, config]
      lib: []
      config: []
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from depgraph.graph.dependency_graph import DependencyGraph
from depgraph.log_config import get_logger

logger = get_logger(__name__)

TRUE_VALUES = ("true", "1", "yes")


def _env_flag(value: str) -> bool:
    return value.strip().lower() in TRUE_VALUES


class NodeDefinition(BaseModel):
    """A single node of a graph definition file.

    Attributes:
        name: Unique node identity
        data: Optional payload; the node's name is used when omitted
        depends_on: Names of the nodes this node depends on, in order
    """

    name: str = Field(
        description="Unique node name",
        min_length=1,
    )
    data: Any = Field(
        default=None,
        description="Payload attached to the node",
    )
    depends_on: list[str] = Field(
        default_factory=list,
        description="Names of direct dependencies",
    )

    @field_validator("depends_on")
    @classmethod
    def collapse_duplicates(cls, v: list[str]) -> list[str]:
        """Drop repeated dependency names, keeping the first occurrence."""
        return list(dict.fromkeys(v))

    model_config = {"str_strip_whitespace": True}


class GraphDefinition(BaseModel):
    """A dependency graph as described by a definition file.

    Attributes:
        circular: Whether the graph tolerates dependency cycles
        nodes: Node definitions in registration order
    """

    circular: bool = Field(
        default=False,
        description="Tolerate dependency cycles",
    )
    nodes: list[NodeDefinition] = Field(
        default_factory=list,
        description="Nodes in registration order",
    )

    @field_validator("nodes", mode="before")
    @classmethod
    def expand_short_form(cls, v: Any) -> Any:
        """Accept a mapping of node name to dependency list.

        Args:
            v: Raw ``nodes`` value

        Returns:
            A list of node definition mappings
        """
        if isinstance(v, dict):
            return [
                {"name": str(name), "depends_on": [str(dep) for dep in deps or []]}
                for name, deps in v.items()
            ]
        return v

    @field_validator("nodes")
    @classmethod
    def validate_unique_names(cls, v: list[NodeDefinition]) -> list[NodeDefinition]:
        """Validate that no node name is defined twice.

        Raises:
            ValueError: If a node name appears more than once
        """
        seen: set[str] = set()
        for node in v:
            if node.name in seen:
                msg = f"Duplicate node name: {node.name}"
                raise ValueError(msg)
            seen.add(node.name)
        return v

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GraphDefinition":
        """Build a definition from parsed file contents.

        Environment variable overrides are applied before validation.
        """
        return cls(**cls._apply_env_overrides(dict(data)))

    @classmethod
    def from_yaml(cls, path: str | Path) -> "GraphDefinition":
        """Load a graph definition from a YAML or JSON file.

        Args:
            path: Path to the definition file

        Returns:
            Parsed and validated GraphDefinition instance

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file is empty or its contents are invalid
        """
        definition_path = Path(path)

        if not definition_path.exists():
            msg = f"Graph definition file not found: {definition_path}"
            raise FileNotFoundError(msg)

        logger.info("loading_graph_definition", path=str(definition_path))

        try:
            with definition_path.open() as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.exception("yaml_parse_error", error=str(e), path=str(definition_path))
            msg = f"Invalid YAML in graph definition file: {e}"
            raise ValueError(msg) from e

        if not data:
            msg = "Graph definition file is empty"
            raise ValueError(msg)
        if not isinstance(data, dict):
            msg = "Graph definition must be a mapping with a 'nodes' key"
            raise ValueError(msg)

        definition = cls.from_dict(data)

        logger.info(
            "graph_definition_loaded",
            node_count=len(definition.nodes),
            circular=definition.circular,
        )

        return definition

    @classmethod
    def _apply_env_overrides(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Apply environment variable overrides to the definition.

        DEPGRAPH_CIRCULAR forces circular mode on or off.
        """
        value = os.environ.get("DEPGRAPH_CIRCULAR")
        if value is not None:
            data["circular"] = _env_flag(value)
            logger.debug("env_override_applied", env_var="DEPGRAPH_CIRCULAR")
        return data

    def to_graph(self) -> DependencyGraph:
        """Build a DependencyGraph from this definition.

        All nodes are registered first, in file order, and edges are added
        afterwards, so nodes may depend on nodes defined further down.

        Raises:
            NodeNotFoundError: If a node depends on a name that is not defined
        """
        graph = DependencyGraph(circular=self.circular)

        for node in self.nodes:
            if "data" in node.model_fields_set:
                graph.add_node(node.name, node.data)
            else:
                graph.add_node(node.name)

        for node in self.nodes:
            for dependency in node.depends_on:
                graph.add_dependency(node.name, dependency)

        logger.info(
            "dependency_graph_built",
            node_count=graph.size(),
            entry_node_count=len(graph.entry_nodes()),
        )

        return graph


class GraphSettings(BaseModel):
    """Runtime settings for the command line interface.

    Attributes:
        logging_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render logs as JSON instead of console output
    """

    logging_level: str = Field(
        default="WARNING",
        description="Logging level",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
    json_logs: bool = Field(
        default=False,
        description="Render logs as JSON",
    )

    @field_validator("logging_level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        """Accept logging levels in any case."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @classmethod
    def from_env(cls, **overrides: Any) -> "GraphSettings":
        """Build settings from DEPGRAPH_* environment variables.

        Keyword arguments that are not None take precedence over the
        environment.
        """
        values: dict[str, Any] = {}

        level = os.environ.get("DEPGRAPH_LOGGING_LEVEL")
        if level is not None:
            values["logging_level"] = level

        json_logs = os.environ.get("DEPGRAPH_JSON_LOGS")
        if json_logs is not None:
            values["json_logs"] = _env_flag(json_logs)

        values.update({key: value for key, value in overrides.items() if value is not None})

        return cls(**values)


__all__ = [
    "GraphDefinition",
    "GraphSettings",
    "NodeDefinition",
]
