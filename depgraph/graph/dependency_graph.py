"""Dependency graph with transitive queries and topological ordering.

This module provides the DependencyGraph class, which stores named nodes with
arbitrary payloads and directed "depends on" edges between them, and answers
what a node depends on, what depends on it, and in which order the whole graph
has to be processed.
"""

from collections.abc import Hashable, Iterator
from typing import Any

from depgraph.graph.errors import NodeNotFoundError
from depgraph.graph.traversal import DepthFirstSearch
from depgraph.log_config import get_logger

logger = get_logger(__name__)

_MISSING = object()


class DependencyGraph:
    """Directed graph of nodes and the dependencies between them.

    An edge ``from_node -> to_node`` means *from_node depends on to_node*.
    Every edge is recorded twice, in ``outgoing_edges[from_node]`` and in
    ``incoming_edges[to_node]``, and both halves are always updated together.

    Thread-safety:
        This class is NOT thread-safe. Serialize access externally or hand
        each consumer its own ``clone()``.

    Example:
        >>> graph = DependencyGraph()
        >>> graph.add_node("app")
        >>> graph.add_node("lib")
        >>> graph.add_dependency("app", "lib")
        >>> graph.overall_order()
        ['lib', 'app']
    """

    def __init__(self, circular: bool = False):
        """Initialize an empty dependency graph.

        Args:
            circular: Tolerate dependency cycles instead of raising
                CycleDetectedError from traversals
        """
        # Registration order is preserved by dict and drives overall_order()
        self._nodes: dict[Hashable, Any] = {}
        self.outgoing_edges: dict[Hashable, list[Hashable]] = {}
        self.incoming_edges: dict[Hashable, list[Hashable]] = {}
        self._circular = circular

        logger.debug("dependency_graph_initialized", circular=circular)

    @property
    def circular(self) -> bool:
        """Whether this graph tolerates dependency cycles."""
        return self._circular

    def size(self) -> int:
        """Return the number of nodes in the graph."""
        return len(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def __iter__(self) -> Iterator[Hashable]:
        return iter(list(self._nodes))

    def add_node(self, name: Hashable, data: Any = _MISSING) -> None:
        """Add a node to the graph.

        If a node with the same name already exists this does nothing; its
        data and edges are kept as they are.

        Args:
            name: Unique identity of the node
            data: Payload for the node. Defaults to ``name`` itself.
        """
        if name in self._nodes:
            return

        self._nodes[name] = name if data is _MISSING else data
        self.outgoing_edges[name] = []
        self.incoming_edges[name] = []

        logger.debug("node_added", node=name)

    def remove_node(self, name: Hashable) -> None:
        """Remove a node and every edge touching it.

        Removing a node that does not exist does nothing.

        Args:
            name: Identity of the node to remove
        """
        if name not in self._nodes:
            return

        del self._nodes[name]
        dependencies = self.outgoing_edges.pop(name)
        dependants = self.incoming_edges.pop(name)

        for dependency in dependencies:
            if dependency != name:
                self.incoming_edges[dependency].remove(name)
        for dependant in dependants:
            if dependant != name:
                self.outgoing_edges[dependant].remove(name)

        logger.debug(
            "node_removed",
            node=name,
            dependency_count=len(dependencies),
            dependant_count=len(dependants),
        )

    def has_node(self, name: Hashable) -> bool:
        """Check if a node exists in the graph."""
        return name in self._nodes

    def get_node_data(self, name: Hashable) -> Any:
        """Get the data associated with a node.

        Raises:
            NodeNotFoundError: If the node does not exist
        """
        self._require(name)
        return self._nodes[name]

    def set_node_data(self, name: Hashable, data: Any) -> None:
        """Replace the data associated with an existing node.

        Raises:
            NodeNotFoundError: If the node does not exist
        """
        self._require(name)
        self._nodes[name] = data

    def add_dependency(self, from_node: Hashable, to_node: Hashable) -> None:
        """Record that ``from_node`` depends on ``to_node``.

        Adding an edge that already exists changes nothing.

        Args:
            from_node: The dependant node
            to_node: The node it depends on

        Raises:
            NodeNotFoundError: If either node does not exist
        """
        self._require(from_node)
        self._require(to_node)

        if to_node in self.outgoing_edges[from_node]:
            return

        self.outgoing_edges[from_node].append(to_node)
        self.incoming_edges[to_node].append(from_node)

        logger.debug("dependency_added", from_node=from_node, to_node=to_node)

    def remove_dependency(self, from_node: Hashable, to_node: Hashable) -> None:
        """Remove the edge ``from_node -> to_node`` if present."""
        if from_node not in self._nodes or to_node not in self._nodes:
            return
        if to_node not in self.outgoing_edges[from_node]:
            return

        self.outgoing_edges[from_node].remove(to_node)
        self.incoming_edges[to_node].remove(from_node)

        logger.debug("dependency_removed", from_node=from_node, to_node=to_node)

    def clone(self) -> "DependencyGraph":
        """Create a copy of the graph with independent edge indices.

        Node data is shared by reference between the copy and this graph, it
        is not deep-copied. Adding or removing nodes and edges on one graph
        never affects the other.

        Returns:
            A new DependencyGraph with the same nodes, edges and circular flag
        """
        new_graph = DependencyGraph(circular=self._circular)
        new_graph._nodes = dict(self._nodes)
        new_graph.outgoing_edges = {
            name: list(edges) for name, edges in self.outgoing_edges.items()
        }
        new_graph.incoming_edges = {
            name: list(edges) for name, edges in self.incoming_edges.items()
        }

        logger.debug("dependency_graph_cloned", node_count=len(self._nodes))

        return new_graph

    def direct_dependencies_of(self, name: Hashable) -> list[Hashable]:
        """Get the nodes ``name`` directly depends on.

        Raises:
            NodeNotFoundError: If the node does not exist
        """
        self._require(name)
        return list(self.outgoing_edges[name])

    def direct_dependants_of(self, name: Hashable) -> list[Hashable]:
        """Get the nodes that directly depend on ``name``.

        Raises:
            NodeNotFoundError: If the node does not exist
        """
        self._require(name)
        return list(self.incoming_edges[name])

    direct_dependents_of = direct_dependants_of

    def dependencies_of(self, name: Hashable, leaves_only: bool = False) -> list[Hashable]:
        """Get every node ``name`` depends on, transitively.

        Dependencies come first: each node in the result appears after all of
        its own dependencies. The queried node itself is never included.

        Args:
            name: Node to query
            leaves_only: Only return nodes that depend on nothing

        Returns:
            List of node identities in dependency-first order

        Raises:
            NodeNotFoundError: If the node does not exist
            CycleDetectedError: If a cycle is reachable and the graph is not
                circular

        Example:
            >>> graph = DependencyGraph()
            >>> for name in "abc":
            ...     graph.add_node(name)
            >>> graph.add_dependency("a", "b")
            >>> graph.add_dependency("b", "c")
            >>> graph.dependencies_of("a")
            ['c', 'b']
        """
        return self._transitive(self.outgoing_edges, name, leaves_only)

    def dependants_of(self, name: Hashable, leaves_only: bool = False) -> list[Hashable]:
        """Get every node that depends on ``name``, transitively.

        Args:
            name: Node to query
            leaves_only: Only return nodes nothing else depends on

        Returns:
            List of node identities, each after all of its own dependants

        Raises:
            NodeNotFoundError: If the node does not exist
            CycleDetectedError: If a cycle is reachable and the graph is not
                circular
        """
        return self._transitive(self.incoming_edges, name, leaves_only)

    dependents_of = dependants_of

    def entry_nodes(self) -> list[Hashable]:
        """Get the nodes nothing depends on, in registration order."""
        return [name for name in self._nodes if not self.incoming_edges[name]]

    def overall_order(self, leaves_only: bool = False) -> list[Hashable]:
        """Construct the processing order for the whole graph.

        Every node appears after all of its dependencies. Disconnected
        subgraphs are covered; an empty graph yields an empty list.

        Args:
            leaves_only: Only return nodes that depend on nothing

        Returns:
            List of node identities in processing order

        Raises:
            CycleDetectedError: If the graph contains a cycle and is not
                circular
        """
        result: list[Hashable] = []
        if not self._nodes:
            return result

        entry_nodes = self.entry_nodes()

        if not self._circular:
            # Also start from every node so pure cycles without an entry node
            # are reported
            cycle_search = DepthFirstSearch(self.outgoing_edges)
            for name in [*entry_nodes, *self._nodes]:
                cycle_search.search(name)

        search = DepthFirstSearch(
            self.outgoing_edges,
            leaves_only=leaves_only,
            result=result,
            circular=self._circular,
        )
        for name in entry_nodes:
            search.search(name)

        if self._circular:
            # Cyclic subgraphs that have no entry node
            seen = set(result)
            for name in list(self._nodes):
                if name not in seen:
                    search.search(name)

        logger.debug(
            "overall_order_computed",
            node_count=len(self._nodes),
            result_count=len(result),
            leaves_only=leaves_only,
        )

        return result

    def _transitive(
        self,
        edges: dict[Hashable, list[Hashable]],
        name: Hashable,
        leaves_only: bool,
    ) -> list[Hashable]:
        self._require(name)

        search = DepthFirstSearch(edges, leaves_only=leaves_only, circular=self._circular)
        result = search.search(name)
        if name in result:
            result.remove(name)
        return result

    def _require(self, name: Hashable) -> None:
        if name not in self._nodes:
            logger.debug("node_not_found", node=name)
            raise NodeNotFoundError(name)
