"""Command line interface for dependency graph definition files.

Loads a YAML or JSON graph definition, then prints the processing order, the
transitive dependencies or dependants of a node, the entry nodes, a validation
report, or a Mermaid/Graphviz rendering of the graph.
"""

import argparse
import sys
from collections.abc import Hashable, Sequence

from pydantic import ValidationError

from depgraph.config import GraphDefinition, GraphSettings
from depgraph.graph.dependency_graph import DependencyGraph
from depgraph.graph.errors import CycleDetectedError, DependencyGraphError
from depgraph.graph.validator import GraphValidator
from depgraph.log_config import bind_context, clear_context, configure_logging, get_logger

logger = get_logger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def load_graph(path: str, force_circular: bool = False) -> DependencyGraph:
    """Load a graph definition file and build the graph.

    Args:
        path: Path to the definition file
        force_circular: Build a circular graph regardless of the file setting

    Returns:
        The constructed DependencyGraph
    """
    definition = GraphDefinition.from_yaml(path)
    if force_circular:
        definition.circular = True
    return definition.to_graph()


def print_nodes(nodes: Sequence[Hashable]) -> None:
    """Print node identities, one per line."""
    for node in nodes:
        print(node)


def cmd_order(graph: DependencyGraph, args: argparse.Namespace) -> int:
    print_nodes(graph.overall_order(leaves_only=args.leaves_only))
    return 0


def cmd_dependencies(graph: DependencyGraph, args: argparse.Namespace) -> int:
    if args.direct:
        print_nodes(graph.direct_dependencies_of(args.node))
    else:
        print_nodes(graph.dependencies_of(args.node, leaves_only=args.leaves_only))
    return 0


def cmd_dependants(graph: DependencyGraph, args: argparse.Namespace) -> int:
    if args.direct:
        print_nodes(graph.direct_dependants_of(args.node))
    else:
        print_nodes(graph.dependants_of(args.node, leaves_only=args.leaves_only))
    return 0


def cmd_entry_nodes(graph: DependencyGraph, _args: argparse.Namespace) -> int:
    print_nodes(graph.entry_nodes())
    return 0


def cmd_validate(graph: DependencyGraph, _args: argparse.Namespace) -> int:
    report = GraphValidator().validate(graph)
    print(report.summary())
    return 0 if report.is_valid else 1


def cmd_visualize(graph: DependencyGraph, args: argparse.Namespace) -> int:
    print(GraphValidator().generate_visualization(graph, output_format=args.format))
    return 0


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Argument list; defaults to ``sys.argv[1:]``

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="depgraph",
        description="Resolve dependency order and relationships from a graph definition file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Processing order of the whole graph
  depgraph order deps.yaml

  # Only the nodes that depend on nothing
  depgraph order deps.yaml --leaves-only

  # Everything that has to be rebuilt when 'lib' changes
  depgraph dependants deps.yaml lib

  # Render the graph for documentation
  depgraph visualize deps.yaml --format dot
        """,
    )

    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Set logging level (default: WARNING, or DEPGRAPH_LOGGING_LEVEL)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        default=None,
        help="Render logs as JSON",
    )
    parser.add_argument(
        "--circular",
        action="store_true",
        help="Tolerate dependency cycles even if the file does not allow them",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    order = subparsers.add_parser("order", help="Print the overall processing order")
    order.add_argument("file", help="Graph definition file (YAML or JSON)")
    order.add_argument("--leaves-only", action="store_true", help="Only nodes without dependencies")
    order.set_defaults(handler=cmd_order)

    for name, handler, help_text in (
        ("dependencies", cmd_dependencies, "Print what a node depends on"),
        ("dependants", cmd_dependants, "Print what depends on a node"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("file", help="Graph definition file (YAML or JSON)")
        sub.add_argument("node", help="Node name")
        sub.add_argument("--leaves-only", action="store_true", help="Only leaf nodes")
        sub.add_argument("--direct", action="store_true", help="Only direct relations")
        sub.set_defaults(handler=handler)

    entry = subparsers.add_parser("entry-nodes", help="Print nodes nothing depends on")
    entry.add_argument("file", help="Graph definition file (YAML or JSON)")
    entry.set_defaults(handler=cmd_entry_nodes)

    validate = subparsers.add_parser("validate", help="Report cycles and isolated nodes")
    validate.add_argument("file", help="Graph definition file (YAML or JSON)")
    validate.set_defaults(handler=cmd_validate)

    visualize = subparsers.add_parser("visualize", help="Render the graph")
    visualize.add_argument("file", help="Graph definition file (YAML or JSON)")
    visualize.add_argument(
        "--format",
        choices=["mermaid", "dot"],
        default="mermaid",
        help="Output format (default: mermaid)",
    )
    visualize.set_defaults(handler=cmd_visualize)

    return parser.parse_args(argv)


def run(argv: Sequence[str] | None = None) -> int:
    """Run the command line interface.

    Args:
        argv: Argument list; defaults to ``sys.argv[1:]``

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = parse_args(argv)

    try:
        settings = GraphSettings.from_env(
            logging_level=args.log_level,
            json_logs=args.json_logs,
        )
    except ValidationError as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        return 1

    configure_logging(settings.logging_level, json_logs=settings.json_logs)
    bind_context(command=args.command, graph_file=args.file)

    exit_code = 0
    try:
        graph = load_graph(args.file, force_circular=args.circular)
        exit_code = args.handler(graph, args)

    except CycleDetectedError as e:
        logger.error("dependency_cycle_detected", cycle_path=[str(n) for n in e.cycle_path])
        print(e.message, file=sys.stderr)
        exit_code = 1

    except DependencyGraphError as e:
        logger.error("dependency_graph_error", error=str(e))
        print(str(e), file=sys.stderr)
        exit_code = 1

    except FileNotFoundError as e:
        logger.error("graph_file_not_found", error=str(e))
        print(str(e), file=sys.stderr)
        exit_code = 1

    except ValueError as e:
        logger.exception("graph_definition_invalid", error=str(e))
        print(str(e), file=sys.stderr)
        exit_code = 1

    finally:
        clear_context()

    return exit_code


def main() -> None:
    """Main entry point for the depgraph command."""
    try:
        sys.exit(run())
    except KeyboardInterrupt:
        sys.exit(1)


if __name__ == "__main__":
    main()
