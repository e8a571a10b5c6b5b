"""Result reporting for presentation layers.

Solvers return plain result objects. This module turns them into
``ReportEvent`` records: a log message plus ``EdgeHighlight`` entries that a
renderer maps onto its own styling (tree edges, route edges, flow intensity).
``Reporter`` delivers events to subscribed consumers in order.

Events expose ``to_dict()`` returning JSON-safe primitives.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Literal, Optional, Tuple

from wgraph.algorithms.types import FlowSummary, MSTResult, PathResult
from wgraph.errors import GraphError
from wgraph.graph import Edge, NodeID
from wgraph.logging import get_logger

logger = get_logger(__name__)

#: What a highlighted edge represents.
HighlightRole = Literal["mst", "route", "flow"]

#: Event kinds published by a session.
EventKind = Literal["node", "edge", "reset", "mst", "path", "max_flow", "error"]

Subscriber = Callable[["ReportEvent"], None]


@dataclass(frozen=True)
class EdgeHighlight:
    """Marks one directed edge as part of an algorithm outcome.

    Attributes:
        source: Source node id.
        target: Target node id.
        role: ``"mst"`` for tree edges, ``"route"`` for shortest-path edges,
            ``"flow"`` for edges carrying flow.
        intensity: Share of the edge in use, in ``[0, 1]``. Flow highlights use
            flow / capacity; other roles use 1.0.
    """

    source: NodeID
    target: NodeID
    role: HighlightRole
    intensity: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "role": self.role,
            "intensity": self.intensity,
        }


@dataclass(frozen=True)
class ReportEvent:
    """A single message for observers of a session.

    Attributes:
        kind: What happened.
        level: Logging level of the message (``logging.INFO`` etc.).
        message: Human-readable summary.
        highlights: Edges to style; empty for non-algorithm events.
        data: JSON-safe payload (usually the result's ``to_dict()``).
    """

    kind: EventKind
    level: int
    message: str
    highlights: Tuple[EdgeHighlight, ...] = ()
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary representation."""
        return {
            "kind": self.kind,
            "level": logging.getLevelName(self.level),
            "message": self.message,
            "highlights": [h.to_dict() for h in self.highlights],
            "data": self.data,
        }


#
# Event builders
#
def report_mst(result: MSTResult, node_count: int) -> ReportEvent:
    """Describe an MST result; notes when the tree misses part of the graph."""
    if not result.visited:
        message = "MST: graph is empty"
    else:
        message = (
            f"MST from {result.visited[0]}: total cost {result.total_cost} "
            f"({len(result.edges)} edge(s))"
        )
        if not result.covers(node_count):
            message += f", covers {len(result.visited)} of {node_count} node(s)"
    highlights = tuple(EdgeHighlight(e.source, e.target, "mst") for e in result.edges)
    return ReportEvent("mst", logging.INFO, message, highlights, result.to_dict())


def report_path(result: PathResult) -> ReportEvent:
    message = f"Shortest path: {' -> '.join(result.nodes)} (cost {result.cost})"
    highlights = tuple(EdgeHighlight(u, v, "route") for u, v in result.hops)
    return ReportEvent("path", logging.INFO, message, highlights, result.to_dict())


def report_max_flow(result: FlowSummary, source: NodeID, sink: NodeID) -> ReportEvent:
    """Describe a max-flow result; only edges carrying flow are highlighted."""
    highlights: List[EdgeHighlight] = []
    for (u, v), flow in result.edge_flows.items():
        if flow <= 0:
            continue
        capacity = flow + result.residual_cap[(u, v)]
        highlights.append(EdgeHighlight(u, v, "flow", flow / capacity))
    message = f"Max flow {source} -> {sink}: {result.value}"
    data = result.to_dict()
    data.update({"source": source, "sink": sink})
    return ReportEvent("max_flow", logging.INFO, message, tuple(highlights), data)


def report_node_added(node_id: NodeID) -> ReportEvent:
    message = f"Node [{node_id}] created"
    return ReportEvent("node", logging.INFO, message, data={"id": node_id})


def report_edge_added(edge: Edge, updated: bool = False) -> ReportEvent:
    verb = "updated" if updated else "created"
    message = f"Edge [{edge.source}] -> [{edge.target}] (weight {edge.weight}) {verb}"
    data = {"source": edge.source, "target": edge.target, "weight": edge.weight}
    return ReportEvent("edge", logging.INFO, message, data=data)


def report_reset() -> ReportEvent:
    """Tell consumers to drop every node, edge and highlight they hold."""
    return ReportEvent("reset", logging.WARNING, "Graph cleared")


#: Message prefix per error kind, so each kind reads distinctly.
_ERROR_TITLES: Dict[str, str] = {
    "validation": "Invalid input",
    "duplicate": "Duplicate node",
    "not_found": "Unknown node",
    "no_path": "No route",
}


def report_error(exc: GraphError) -> ReportEvent:
    title = _ERROR_TITLES.get(exc.kind, "Error")
    return ReportEvent(
        "error", logging.ERROR, f"{title}: {exc}", data={"error": exc.kind}
    )


class Reporter:
    """Fan-out of report events to subscribers.

    Subscribers are called in subscription order. Each published event is
    also written to the debug log.
    """

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._subscribers: List[Subscriber] = []
        self._log = log or logger

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register ``callback`` for all future events.

        Returns:
            A callable that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: ReportEvent) -> ReportEvent:
        self._log.debug("%s event: %s", event.kind, event.message)
        for callback in list(self._subscribers):
            callback(event)
        return event
