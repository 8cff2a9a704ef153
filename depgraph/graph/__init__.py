"""Graph module for dependency management and topological ordering.

This module provides the DependencyGraph structure, the iterative depth-first
search it is built on, and validation and visualization helpers.
"""

from depgraph.graph.dependency_graph import DependencyGraph
from depgraph.graph.errors import CycleDetectedError, DependencyGraphError, NodeNotFoundError
from depgraph.graph.traversal import DepthFirstSearch
from depgraph.graph.validator import GraphValidator, ValidationReport

__all__ = [
    "CycleDetectedError",
    "DependencyGraph",
    "DependencyGraphError",
    "DepthFirstSearch",
    "GraphValidator",
    "NodeNotFoundError",
    "ValidationReport",
]
