from __future__ import annotations

from heapq import heappop, heappush
from typing import Dict, List, Optional, Tuple

from wgraph.algorithms.types import Cost, PathResult
from wgraph.errors import NoPathError
from wgraph.graph import GraphStore, NodeID
from wgraph.logging import get_logger

logger = get_logger(__name__)


def spf(
    graph: GraphStore,
    src_node: NodeID,
    dst_node: Optional[NodeID] = None,
) -> Tuple[Dict[NodeID, Cost], Dict[NodeID, Optional[NodeID]]]:
    """
    Dijkstra's shortest path first from ``src_node`` along edge direction.

    Only outgoing edges of a settled node are relaxed, and a neighbor is
    updated only on a strictly lower cost. If ``dst_node`` is given, the
    search stops as soon as it is settled.

    Args:
        graph: The graph to search. Not modified.
        src_node: Normalized id of the start node.
        dst_node: Optional normalized id of a node at which to stop.

    Returns:
        A tuple of (costs, pred):
          - costs: Maps each reached node to its cost from ``src_node``.
            Unreached nodes are absent rather than mapped to infinity.
          - pred: Maps each reached node to its predecessor on the
            least-cost path (``None`` for ``src_node``).

    Raises:
        KeyError: If ``src_node`` is not in the graph.
    """
    if src_node not in graph:
        raise KeyError(f"Source node '{src_node}' is not in the graph.")

    costs: Dict[NodeID, Cost] = {src_node: 0}
    pred: Dict[NodeID, Optional[NodeID]] = {src_node: None}
    settled = set()
    min_pq: List[Tuple[Cost, NodeID]] = [(0, src_node)]

    while min_pq:
        current_cost, node_id = heappop(min_pq)
        if node_id in settled or current_cost > costs[node_id]:
            continue
        settled.add(node_id)
        if node_id == dst_node:
            break

        for edge in graph.out_edges_of(node_id):
            neighbor_id = edge.target
            new_cost = current_cost + edge.weight
            if neighbor_id not in costs or new_cost < costs[neighbor_id]:
                costs[neighbor_id] = new_cost
                pred[neighbor_id] = node_id
                heappush(min_pq, (new_cost, neighbor_id))

    return costs, pred


def resolve_path(
    src_node: NodeID, dst_node: NodeID, pred: Dict[NodeID, Optional[NodeID]]
) -> List[NodeID]:
    """Follow predecessor links from ``dst_node`` back to ``src_node``."""
    path: List[NodeID] = [dst_node]
    while path[-1] != src_node:
        prev = pred[path[-1]]
        if prev is None:
            break
        path.append(prev)
    path.reverse()
    return path


def shortest_path(graph: GraphStore, src: str, dst: str) -> PathResult:
    """
    Compute the least-cost directed path from ``src`` to ``dst``.

    When several paths share the minimum cost, which one is returned depends
    on heap order; callers must not rely on a particular one.

    Args:
        graph: The graph to search. Not modified.
        src: Start node name (normalized here).
        dst: End node name (normalized here).

    Returns:
        PathResult: Node ids from start to end and the total cost.

    Raises:
        ValidationError: If a name is empty.
        NotFoundError: If either node does not exist.
        NoPathError: If ``dst`` cannot be reached from ``src``.
    """
    src_node = graph.get_node(src).id
    dst_node = graph.get_node(dst).id

    costs, pred = spf(graph, src_node, dst_node)
    if dst_node not in costs:
        raise NoPathError(f"No path from '{src_node}' to '{dst_node}'.")

    nodes = resolve_path(src_node, dst_node, pred)
    logger.debug(
        "Shortest path %s: cost %d", " -> ".join(nodes), costs[dst_node]
    )
    return PathResult(nodes=tuple(nodes), cost=costs[dst_node])
