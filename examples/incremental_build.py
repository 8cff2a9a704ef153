"""Demonstration of incremental rebuild planning with a dependency graph.

Loads examples/deps.yaml, prints the full build order, then works out which
targets have to be rebuilt after a change to one of them.
"""

from pathlib import Path

from depgraph.config import GraphDefinition
from depgraph.graph import CycleDetectedError
from depgraph.log_config import bind_correlation_id, configure_logging, get_logger

logger = get_logger(__name__)


def plan_rebuild(changed: str) -> list[str]:
    """Return the targets to rebuild, in build order, after ``changed`` changed."""
    definition = GraphDefinition.from_yaml(Path(__file__).parent / "deps.yaml")
    graph = definition.to_graph()

    stale = {changed, *graph.dependants_of(changed)}
    return [target for target in graph.overall_order() if target in stale]


def main() -> None:
    configure_logging(level="INFO", json_logs=False)
    bind_correlation_id("example-run")

    try:
        plan = plan_rebuild("logging")
    except CycleDetectedError as e:
        logger.error("cannot_plan_rebuild", cycle_path=e.cycle_path)
        return

    logger.info("rebuild_planned", changed="logging", targets=plan)
    for target in plan:
        print(target)


if __name__ == "__main__":
    main()
