"""Iterative depth-first search over one half of the edge index.

The same search drives dependency queries (walking outgoing edges), dependant
queries (walking incoming edges) and the overall processing order. It never
recurses, so graphs deeper than the interpreter's recursion limit are fine.
"""

from collections.abc import Hashable, Mapping, Sequence

from depgraph.graph.errors import CycleDetectedError
from depgraph.log_config import get_logger

logger = get_logger(__name__)


class DepthFirstSearch:
    """Depth-first search that appends nodes in dependency-first order.

    One instance covers one logical query. Calling ``search`` repeatedly with
    different start nodes shares the set of fully visited nodes, so sweeping
    every node of a graph stays linear in its size and each node lands in
    ``result`` at most once.

    Attributes:
        edges: Mapping of node identity to its related identities (either the
            outgoing or the incoming index of a graph)
        leaves_only: Only append nodes whose relation list is empty
        result: List the search appends to
        circular: Skip over cycles instead of raising CycleDetectedError

    Example:
        >>> edges = {"a": ["b"], "b": ["c"], "c": []}
        >>> order = []
        >>> DepthFirstSearch(edges, result=order).search("a")
        >>> order
        ['c', 'b', 'a']
    """

    def __init__(
        self,
        edges: Mapping[Hashable, Sequence[Hashable]],
        leaves_only: bool = False,
        result: list[Hashable] | None = None,
        circular: bool = False,
    ):
        """Initialize the search state.

        Args:
            edges: Edge index to walk
            leaves_only: Whether to only collect nodes without relations
            result: Accumulator for the output; a new list when omitted
            circular: Whether cycles are tolerated
        """
        self.edges = edges
        self.leaves_only = leaves_only
        self.result: list[Hashable] = [] if result is None else result
        self.circular = circular
        self._visited: set[Hashable] = set()

    def search(self, start: Hashable) -> list[Hashable]:
        """Walk the graph from ``start`` and append what it reaches.

        Args:
            start: Node identity to begin from

        Returns:
            The shared result list

        Raises:
            CycleDetectedError: If a cycle is reachable and ``circular`` is off
        """
        if start in self._visited:
            return self.result

        in_current_path: set[Hashable] = set()
        current_path: list[Hashable] = []
        # Frames are [node, processed]; processed flips once children are pushed
        todo: list[list] = [[start, False]]

        while todo:
            frame = todo[-1]
            node, processed = frame

            if not processed:
                if node in self._visited:
                    todo.pop()
                    continue

                if node in in_current_path:
                    if self.circular:
                        todo.pop()
                        continue
                    current_path.append(node)
                    logger.debug("dependency_cycle_detected", cycle_path=current_path)
                    raise CycleDetectedError(current_path)

                in_current_path.add(node)
                current_path.append(node)
                todo.extend([child, False] for child in reversed(self.edges[node]))
                frame[1] = True
            else:
                todo.pop()
                current_path.pop()
                in_current_path.discard(node)
                self._visited.add(node)
                if not self.leaves_only or not self.edges[node]:
                    self.result.append(node)

        return self.result

    def visited(self, node: Hashable) -> bool:
        """Check whether ``node`` has been fully processed by this search."""
        return node in self._visited
