"""Graph validation with cycle enumeration and reporting.

This module provides whole-graph validation for dependency graphs, listing
every independent cycle with its path, isolated nodes and entry nodes, plus
Mermaid and Graphviz renderings of the graph.
"""

from collections.abc import Hashable
from dataclasses import dataclass, field

from depgraph.graph.dependency_graph import DependencyGraph
from depgraph.graph.errors import CycleDetectedError
from depgraph.log_config import get_logger

logger = get_logger(__name__)


@dataclass
class ValidationReport:
    """Report containing validation results for a dependency graph.

    Attributes:
        is_valid: Whether the graph passed all validation checks
        errors: List of error messages (critical issues)
        warnings: List of warning messages (potential issues)
        cycles: List of detected cycles, each a list of node identities whose
            first and last element are the same
        isolated_nodes: Nodes with neither dependencies nor dependants
        entry_nodes: Nodes nothing depends on
    """

    is_valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    cycles: list[list[Hashable]] = field(default_factory=list)
    isolated_nodes: list[Hashable] = field(default_factory=list)
    entry_nodes: list[Hashable] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add an error message and mark validation as failed."""
        self.errors.append(message)
        self.is_valid = False
        logger.error("validation_error", message=message)

    def add_warning(self, message: str) -> None:
        """Add a warning message without failing validation."""
        self.warnings.append(message)
        logger.warning("validation_warning", message=message)

    def summary(self) -> str:
        """Generate a human-readable summary of the validation report."""
        lines = []
        lines.append(f"Validation Status: {'PASS' if self.is_valid else 'FAIL'}")
        lines.append(f"Errors: {len(self.errors)}")
        lines.append(f"Warnings: {len(self.warnings)}")
        lines.append(f"Cycles: {len(self.cycles)}")
        lines.append(f"Entry Nodes: {len(self.entry_nodes)}")
        lines.append(f"Isolated Nodes: {len(self.isolated_nodes)}")

        if self.errors:
            lines.append("\nErrors:")
            lines.extend(f"  - {error}" for error in self.errors)

        if self.warnings:
            lines.append("\nWarnings:")
            lines.extend(f"  - {warning}" for warning in self.warnings)

        if self.cycles:
            lines.append("\nCycles Detected:")
            for i, cycle in enumerate(self.cycles, 1):
                lines.append(f"  {i}. {_join_path(cycle)}")

        if self.isolated_nodes:
            lines.append(f"\nIsolated Nodes: {', '.join(str(n) for n in self.isolated_nodes)}")

        return "\n".join(lines)


def _join_path(path: list[Hashable]) -> str:
    return " -> ".join(str(node) for node in path)


class GraphValidator:
    """Validator for dependency graphs with detailed error reporting.

    This class provides:
    - Enumeration of independent cycles with their complete paths
    - Isolated node detection
    - Graph visualization generation
    """

    def validate(self, graph: DependencyGraph) -> ValidationReport:
        """Validate a dependency graph and generate a detailed report.

        The graph is validated as if it were not circular, so cycles are
        reported even for graphs that tolerate them. The graph itself is not
        modified.

        Args:
            graph: The DependencyGraph to validate

        Returns:
            ValidationReport containing all validation results
        """
        logger.info("starting_graph_validation", node_count=graph.size())

        report = ValidationReport()
        report.entry_nodes = graph.entry_nodes()

        cycles = self._detect_cycles(graph)
        if cycles:
            report.cycles = cycles
            for cycle in cycles:
                report.add_error(f"Cycle detected: {_join_path(cycle)}")

        isolated = [
            name
            for name in graph
            if not graph.direct_dependencies_of(name) and not graph.direct_dependants_of(name)
        ]
        # Single-node graphs are not reported
        if isolated and graph.size() > 1:
            report.isolated_nodes = isolated
            report.add_warning(
                f"Nodes without any dependencies or dependants: "
                f"{', '.join(str(n) for n in isolated)}",
            )

        logger.info(
            "graph_validation_complete",
            is_valid=report.is_valid,
            error_count=len(report.errors),
            warning_count=len(report.warnings),
        )

        return report

    def _detect_cycles(self, graph: DependencyGraph) -> list[list[Hashable]]:
        """Find independent cycles by cutting each one open until none is left.

        Args:
            graph: The dependency graph

        Returns:
            List of cycles, each starting and ending with the same node
        """
        working = self._strict_copy(graph)
        cycles = []

        while True:
            try:
                working.overall_order()
            except CycleDetectedError as e:
                cycle = e.cycle
                cycles.append(cycle)
                # The closing edge is always last in the path
                working.remove_dependency(cycle[-2], cycle[-1])
                logger.debug("cycle_recorded", cycle=cycle)
            else:
                return cycles

    def _strict_copy(self, graph: DependencyGraph) -> DependencyGraph:
        """Copy ``graph`` into a new graph that raises on cycles."""
        working = DependencyGraph(circular=False)
        for name in graph:
            working.add_node(name, graph.get_node_data(name))
        for name in graph:
            for dependency in graph.direct_dependencies_of(name):
                working.add_dependency(name, dependency)
        return working

    def generate_visualization(
        self,
        graph: DependencyGraph,
        output_format: str = "mermaid",
    ) -> str:
        """Generate a visual representation of the dependency graph.

        Args:
            graph: The DependencyGraph to visualize
            output_format: Output format ('mermaid' or 'dot')

        Returns:
            String representation of the graph in the requested format

        Raises:
            ValueError: If an unsupported format is requested
        """
        output_format = output_format.lower().strip()

        if output_format == "mermaid":
            return self._generate_mermaid(graph)
        if output_format == "dot":
            return self._generate_graphviz(graph)
        error_msg = f"Unsupported format: {output_format}. Use 'mermaid' or 'dot'."
        raise ValueError(error_msg)

    def _generate_mermaid(self, graph: DependencyGraph) -> str:
        """Generate a Mermaid flowchart representation.

        Args:
            graph: The dependency graph

        Returns:
            Mermaid flowchart syntax
        """
        lines = ["graph TD"]

        if not graph.size():
            lines.append("    Empty[Empty Graph]")
            return "\n".join(lines)

        # Ids follow registration order; names only appear as quoted labels
        ids: dict[Hashable, str] = {}
        for position, name in enumerate(graph):
            ids[name] = f"n{position}"
            label = str(name).replace('"', "#quot;")
            lines.append(f'    {ids[name]}["{label}"]')

        # Arrow points from dependency to dependant
        for name in graph:
            lines.extend(
                f"    {ids[dependency]} --> {ids[name]}"
                for dependency in graph.direct_dependencies_of(name)
            )

        return "\n".join(lines)

    def _generate_graphviz(self, graph: DependencyGraph) -> str:
        """Generate a Graphviz DOT representation.

        Args:
            graph: The dependency graph

        Returns:
            Graphviz DOT syntax
        """
        def escape_dot_string(name: Hashable) -> str:
            """Escape double quotes for DOT format."""
            return str(name).replace('"', '\\"')

        lines = ["digraph DependencyGraph {"]
        lines.append("    rankdir=LR;")
        lines.append("    node [shape=box, style=rounded];")

        if not graph.size():
            lines.append('    Empty [label="Empty Graph"];')
        else:
            lines.extend(f'    "{escape_dot_string(name)}";' for name in graph)

            for name in graph:
                escaped = escape_dot_string(name)
                lines.extend(
                    f'    "{escape_dot_string(dependency)}" -> "{escaped}";'
                    for dependency in graph.direct_dependencies_of(name)
                )

        lines.append("}")
        return "\n".join(lines)
