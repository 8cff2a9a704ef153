"""Exceptions raised by the dependency graph.

Two failure kinds exist: a referenced node is not registered, or a traversal
ran into a dependency cycle. Both derive from DependencyGraphError so callers
can catch everything the graph raises in one place.
"""

from collections.abc import Hashable, Sequence


class DependencyGraphError(Exception):
    """Base class for all dependency graph errors."""


class NodeNotFoundError(DependencyGraphError):
    """Exception raised when an operation references an unregistered node.

    Attributes:
        node: The identity that was looked up
    """

    def __init__(self, node: Hashable):
        """Initialize the exception for the missing node.

        Args:
            node: Identity of the node that does not exist
        """
        self.node = node
        self.message = f"Node does not exist: {node}"
        super().__init__(self.message)


class CycleDetectedError(DependencyGraphError):
    """Exception raised when a cycle is detected in the dependency graph.

    The cycle path starts at the node the traversal began from and ends with
    the node that was revisited, so the first occurrence of the last element
    marks where the loop closes. For a graph with ``a -> b -> c -> a`` queried
    from ``b`` the path is ``["b", "c", "a", "b"]``.

    Attributes:
        cycle_path: Ordered node identities forming the discovered cycle
    """

    def __init__(self, cycle_path: Sequence[Hashable]):
        """Initialize the exception with the discovered cycle path.

        Args:
            cycle_path: Node identities in traversal order, ending with the
                repeated node
        """
        self.cycle_path = list(cycle_path)
        self.message = "Dependency Cycle Found: " + " -> ".join(
            str(node) for node in self.cycle_path
        )
        super().__init__(self.message)

    @property
    def cycle(self) -> list[Hashable]:
        """Only the looping part of the path, e.g. ``[a, b, c, a]``."""
        if not self.cycle_path:
            return []
        start = self.cycle_path.index(self.cycle_path[-1])
        return self.cycle_path[start:]
