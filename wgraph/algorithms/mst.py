from __future__ import annotations

from heapq import heappop, heappush
from typing import List, Set, Tuple

from wgraph.algorithms.types import MSTResult
from wgraph.graph import Edge, GraphStore, NodeID
from wgraph.logging import get_logger

logger = get_logger(__name__)


def prim_mst(graph: GraphStore) -> MSTResult:
    """
    Compute a minimum spanning tree with Prim's algorithm.

    The tree grows from the first node in insertion order. Edge direction is
    ignored: an edge crosses the cut when exactly one of its endpoints is
    visited. Among crossing edges the smallest weight wins, and ties go to the
    edge added to the graph first.

    Candidates sit in a heap keyed by ``(weight, edge position)``; entries whose
    far endpoint was visited in the meantime are discarded when popped. This
    selects the same edges, in the same order, as scanning every edge on each
    step.

    Args:
        graph: The graph to span. Not modified.

    Returns:
        MSTResult: Selected edges, their total weight and the visited nodes.
        If the graph is disconnected, only the start component is covered.
        An empty graph yields an empty result.
    """
    if graph.node_count == 0:
        logger.debug("MST requested on an empty graph")
        return MSTResult()

    start: NodeID = next(iter(graph))
    positions = graph.edge_positions()
    visited: Set[NodeID] = {start}
    order: List[NodeID] = [start]
    selected: List[Edge] = []
    # (weight, position, far endpoint, edge); positions are unique
    candidates: List[Tuple[int, int, NodeID, Edge]] = []

    def push_incident(node_id: NodeID) -> None:
        for edge in graph.out_edges_of(node_id):
            if edge.target not in visited:
                heappush(
                    candidates, (edge.weight, positions[edge.key], edge.target, edge)
                )
        for edge in graph.in_edges_of(node_id):
            if edge.source not in visited:
                heappush(
                    candidates, (edge.weight, positions[edge.key], edge.source, edge)
                )

    push_incident(start)
    while candidates and len(visited) < graph.node_count:
        _, _, far, edge = heappop(candidates)
        if far in visited:
            continue
        selected.append(edge)
        visited.add(far)
        order.append(far)
        push_incident(far)

    total = sum(edge.weight for edge in selected)
    logger.debug(
        "MST from %s: %d edge(s), cost %d, covers %d/%d node(s)",
        start,
        len(selected),
        total,
        len(visited),
        graph.node_count,
    )
    return MSTResult(edges=tuple(selected), total_cost=total, visited=tuple(order))
