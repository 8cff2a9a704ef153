"""depgraph: dependency graphs with transitive queries and processing order."""

import logging

from depgraph.graph import (
    CycleDetectedError,
    DependencyGraph,
    DependencyGraphError,
    NodeNotFoundError,
)

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "CycleDetectedError",
    "DependencyGraph",
    "DependencyGraphError",
    "NodeNotFoundError",
]
