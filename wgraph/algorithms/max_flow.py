from __future__ import annotations

from collections import deque
from typing import Dict, List, Optional, Set, Tuple

from wgraph.algorithms.types import FlowSummary
from wgraph.errors import ValidationError
from wgraph.graph import EdgeKey, GraphStore, NodeID
from wgraph.logging import get_logger

logger = get_logger(__name__)

#: Residual capacities: residual[u][v] is what can still be pushed from u to v.
Residual = Dict[NodeID, Dict[NodeID, int]]


def build_residual(graph: GraphStore) -> Residual:
    """
    Build the residual graph for a flow of zero.

    Each original edge u->v contributes its weight to ``residual[u][v]`` and
    creates ``residual[v][u]`` at 0 if nothing else did. An antiparallel edge
    v->u adds its own capacity to that same arc. Self-loops carry no flow and
    are skipped.
    """
    residual: Residual = {node.id: {} for node in graph.get_nodes()}
    for edge in graph.get_edges():
        u, v = edge.key
        if u == v:
            continue
        residual[u][v] = residual[u].get(v, 0) + edge.weight
        residual[v].setdefault(u, 0)
    return residual


def _bfs_augmenting_path(
    residual: Residual, src_node: NodeID, dst_node: NodeID
) -> Optional[Dict[NodeID, NodeID]]:
    """
    Breadth-first search for a shortest-hop path with positive residual capacity.

    Returns:
        The BFS parent map if ``dst_node`` was reached, otherwise None.
    """
    parent: Dict[NodeID, NodeID] = {}
    seen = {src_node}
    queue = deque([src_node])
    while queue:
        node_id = queue.popleft()
        for nbr, cap in residual[node_id].items():
            if cap > 0 and nbr not in seen:
                seen.add(nbr)
                parent[nbr] = node_id
                if nbr == dst_node:
                    return parent
                queue.append(nbr)
    return None


def _reachable(residual: Residual, src_node: NodeID) -> Set[NodeID]:
    """Nodes reachable from ``src_node`` over arcs with residual capacity."""
    reachable = set()
    stack = [src_node]
    while stack:
        n = stack.pop()
        if n in reachable:
            continue
        reachable.add(n)
        for nbr, cap in residual[n].items():
            if cap > 0 and nbr not in reachable:
                stack.append(nbr)
    return reachable


def calc_max_flow(graph: GraphStore, src: str, dst: str) -> FlowSummary:
    """Compute the maximum flow from ``src`` to ``dst`` with Edmonds-Karp.

    Edge weights are capacities. The algorithm:
      1. Builds a residual graph (``build_residual``).
      2. Repeatedly finds the shortest-hop augmenting path with BFS.
      3. Pushes the path's bottleneck capacity: forward residuals shrink,
         reverse residuals grow, and the total increases.
      4. Stops when the sink is no longer reachable.

    The flow on each original edge is its capacity minus its final forward
    residual, clamped at 0. With antiparallel edges this reports the net flow
    on the edge that carries it and 0 on the other.

    Args:
        graph: The network. Not modified.
        src: Source node name (normalized here).
        dst: Sink node name (normalized here).

    Returns:
        FlowSummary: The flow value, per-edge flows, residual capacities,
        the residual-reachable set and the min-cut edges.

    Raises:
        ValidationError: If a name is empty or source equals sink.
        NotFoundError: If either node does not exist.

    Examples:
        >>> g = GraphStore(["A", "B", "C"], [("A", "B", 10), ("B", "C", 5)])
        >>> calc_max_flow(g, "A", "C").value
        5
    """
    src_node = graph.get_node(src).id
    dst_node = graph.get_node(dst).id
    if src_node == dst_node:
        raise ValidationError(f"Source and sink must differ, both are '{src_node}'.")

    residual = build_residual(graph)
    total_flow = 0
    iterations = 0

    while True:
        parent = _bfs_augmenting_path(residual, src_node, dst_node)
        if parent is None:
            break

        path: List[Tuple[NodeID, NodeID]] = []
        v = dst_node
        while v != src_node:
            u = parent[v]
            path.append((u, v))
            v = u

        bottleneck = min(residual[u][v] for u, v in path)
        for u, v in path:
            residual[u][v] -= bottleneck
            residual[v][u] += bottleneck
        total_flow += bottleneck
        iterations += 1
        logger.debug(
            "Augmenting path %s pushes %d",
            " -> ".join([src_node] + [v for _, v in reversed(path)]),
            bottleneck,
        )

    edge_flows: Dict[EdgeKey, int] = {}
    residual_cap: Dict[EdgeKey, int] = {}
    edges = graph.get_edges()
    for edge in edges:
        u, v = edge.key
        flow = 0 if u == v else max(0, edge.weight - residual[u][v])
        edge_flows[edge.key] = flow
        residual_cap[edge.key] = edge.weight - flow

    reachable = _reachable(residual, src_node)
    min_cut = tuple(
        edge.key
        for edge in edges
        if edge.source in reachable and edge.target not in reachable
    )

    logger.debug(
        "Max flow %s -> %s: %d after %d augmentation(s)",
        src_node,
        dst_node,
        total_flow,
        iterations,
    )
    return FlowSummary(
        value=total_flow,
        edge_flows=edge_flows,
        residual_cap=residual_cap,
        reachable=reachable,
        min_cut=min_cut,
    )
