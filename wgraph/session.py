"""Session facade: the operations a user interface calls.

A ``GraphSession`` owns one ``GraphStore`` and one ``Reporter``. Mutations
and solver runs publish a ``ReportEvent`` on success. Failures publish an
``"error"`` event and then raise the ``GraphError`` to the caller.

Example:
    session = GraphSession()
    session.add_node("a")
    session.add_node("b")
    session.add_edge("a", "b", 3)
    route = session.run_shortest_path("A", "B")
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Optional, Tuple, TypeVar

from wgraph.algorithms import calc_max_flow, prim_mst, shortest_path
from wgraph.algorithms.types import FlowSummary, MSTResult, PathResult
from wgraph.config import DEFAULT_CONFIG, SessionConfig
from wgraph.errors import GraphError
from wgraph.graph import Edge, GraphStore, NodeID, normalize_node_id
from wgraph.logging import get_logger
from wgraph.report import (
    Reporter,
    report_edge_added,
    report_error,
    report_max_flow,
    report_mst,
    report_node_added,
    report_path,
    report_reset,
)

logger = get_logger(__name__)

T = TypeVar("T")


class GraphSession:
    """Validated graph editing plus algorithm runs for a single caller.

    The engine holds no locks; operations are expected one at a time.

    Attributes:
        graph: The owned graph store. Read it freely; mutate it through the
            session so observers are notified.
        reporter: Event fan-out for presentation layers.
        config: Session configuration; a private copy of ``DEFAULT_CONFIG``
            when none is given.
    """

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        reporter: Optional[Reporter] = None,
    ) -> None:
        self.config = config if config is not None else replace(DEFAULT_CONFIG)
        self.reporter = reporter or Reporter()
        self.graph = GraphStore()
        if self.config.seed_demo:
            self.load_demo()

    def _guard(self, operation: Callable[[], T]) -> T:
        """Run ``operation``; on ``GraphError`` publish an error event and re-raise."""
        try:
            return operation()
        except GraphError as exc:
            self.reporter.publish(report_error(exc))
            raise

    #
    # Mutation
    #
    def add_node(self, name: str) -> NodeID:
        """Add a node and return its normalized id."""
        node_id = self._guard(lambda: self.graph.add_node(name))
        self.reporter.publish(report_node_added(node_id))
        return node_id

    def add_edge(self, source: str, target: str, weight: int) -> Edge:
        """Add an edge, or overwrite the weight of an existing one."""

        def upsert() -> Tuple[Edge, bool]:
            existed = self.graph.has_edge(
                normalize_node_id(source), normalize_node_id(target)
            )
            return self.graph.add_edge(source, target, weight), existed

        edge, existed = self._guard(upsert)
        self.reporter.publish(report_edge_added(edge, updated=existed))
        return edge

    def clear(self) -> None:
        """Remove every node and edge. Never fails."""
        self.graph.clear()
        self.reporter.publish(report_reset())

    def load_demo(self) -> None:
        """Clear the graph and load the configured demo nodes and edges."""
        if self.graph.node_count:
            self.clear()
        for name in self.config.demo_nodes:
            self.add_node(name)
        for source, target, weight in self.config.demo_edges:
            self.add_edge(source, target, weight)

    #
    # Algorithms
    #
    def run_mst(self) -> MSTResult:
        """Minimum spanning tree from the first node; empty graph gives an empty result."""
        logger.debug("Running MST on %d node(s)", self.graph.node_count)
        result = prim_mst(self.graph)
        self.reporter.publish(report_mst(result, self.graph.node_count))
        return result

    def run_shortest_path(self, start: str, end: str) -> PathResult:
        """Least-cost directed path from ``start`` to ``end``."""
        result = self._guard(lambda: shortest_path(self.graph, start, end))
        self.reporter.publish(report_path(result))
        return result

    def run_max_flow(self, source: str, sink: str) -> FlowSummary:
        """Maximum flow from ``source`` to ``sink`` using edge weights as capacities."""
        result = self._guard(lambda: calc_max_flow(self.graph, source, sink))
        self.reporter.publish(
            report_max_flow(result, normalize_node_id(source), normalize_node_id(sink))
        )
        return result
