# src/pipeline/dag_builder.py — v2
"""DAG builder — build execution graph from tool dependencies.

Produces a topologically sorted execution plan. Detects cycles
and validates that all dependencies are resolvable.

Ordering is deterministic for a given registration sequence: the
initial queue holds zero-in-degree tools in registration order and
candidates are dequeued FIFO in the order they became eligible.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field

from txflow.pipeline.errors import CycleError, DAGError, MissingDependencyError

__all__ = [
    "DAGError",
    "DependencyGraph",
    "ExecutionPlan",
    "build_dag",
    "build_graph",
    "topological_order",
]

logger = logging.getLogger(__name__)


@dataclass
class DependencyGraph:
    """Adjacency (dependency -> dependents) and in-degree per tool.

    Node order follows the insertion order of the dependency map.
    """

    dependents: dict[str, list[str]] = field(default_factory=dict)
    in_degree: dict[str, int] = field(default_factory=dict)

    @property
    def nodes(self) -> list[str]:
        return list(self.in_degree)


@dataclass
class ExecutionPlan:
    """Ordered execution plan for pipeline tools."""

    order: list[str] = field(default_factory=list)
    dependencies: dict[str, list[str]] = field(default_factory=dict)

    @property
    def total_tools(self) -> int:
        return len(self.order)

    def position(self, name: str) -> int:
        """Return the zero-based position of a tool in the order."""
        return self.order.index(name)


def build_graph(dependency_map: dict[str, list[str]]) -> DependencyGraph:
    """Convert tool dependency declarations into a directed graph.

    Args:
        dependency_map: tool_name -> list of dependency tool names,
            in registration order.

    Returns:
        DependencyGraph with one node per tool.

    Raises:
        MissingDependencyError: If a dependency names an unknown tool.
    """
    graph = DependencyGraph(
        dependents={name: [] for name in dependency_map},
        in_degree={name: 0 for name in dependency_map},
    )
    for tool, deps in dependency_map.items():
        for dep in deps:
            if dep not in graph.in_degree:
                raise MissingDependencyError(tool, dep)
            graph.dependents[dep].append(tool)
            graph.in_degree[tool] += 1
    return graph


def topological_order(graph: DependencyGraph) -> list[str]:
    """Linearize a dependency graph with Kahn's algorithm.

    Raises:
        CycleError: If some tools can never reach in-degree zero.
    """
    in_degree = dict(graph.in_degree)
    queue: deque[str] = deque(name for name, d in in_degree.items() if d == 0)
    order: list[str] = []

    while queue:
        current = queue.popleft()
        order.append(current)
        for dependent in graph.dependents[current]:
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                queue.append(dependent)

    if len(order) != len(in_degree):
        remaining = sorted(name for name, d in in_degree.items() if d > 0)
        raise CycleError(remaining)

    return order


def build_dag(dependency_map: dict[str, list[str]]) -> ExecutionPlan:
    """Build an execution DAG from tool dependency declarations.

    Args:
        dependency_map: tool_name -> list of dependency tool names.

    Returns:
        ExecutionPlan with a flat execution order.

    Raises:
        MissingDependencyError: If a dependency is not registered.
        CycleError: If a cycle is detected.
    """
    if not dependency_map:
        return ExecutionPlan()

    graph = build_graph(dependency_map)
    order = topological_order(graph)

    plan = ExecutionPlan(
        order=order,
        dependencies={name: list(dependency_map[name]) for name in order},
    )
    logger.debug("DAG built: %d tools → %s", plan.total_tools, plan.order)
    return plan
