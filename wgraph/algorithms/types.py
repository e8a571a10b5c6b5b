"""Types and data structures for algorithm results.

Results are immutable and hold only ids and numbers, so callers may keep
them after the graph changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Set, Tuple

from wgraph.graph import Edge, EdgeKey, NodeID

#: Numeric cost of a path or tree. Weights are integers, so costs are too.
Cost = int


@dataclass(frozen=True)
class MSTResult:
    """Minimum spanning tree of the component containing the start node.

    Attributes:
        edges: Selected edges in selection order.
        total_cost: Sum of the selected edge weights.
        visited: Node ids covered by the tree, in the order they joined it.
    """

    edges: Tuple[Edge, ...] = ()
    total_cost: Cost = 0
    visited: Tuple[NodeID, ...] = ()

    def covers(self, node_count: int) -> bool:
        """Return True if the tree reaches ``node_count`` nodes."""
        return len(self.visited) == node_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "edges": [
                {"source": e.source, "target": e.target, "weight": e.weight}
                for e in self.edges
            ],
            "total_cost": self.total_cost,
            "visited": list(self.visited),
        }


@dataclass(frozen=True)
class PathResult:
    """Least-cost directed path.

    Attributes:
        nodes: Node ids from start to end, inclusive.
        cost: Total weight of the path.
    """

    nodes: Tuple[NodeID, ...]
    cost: Cost

    @property
    def hops(self) -> List[EdgeKey]:
        """Consecutive ``(source, target)`` pairs along the path."""
        return list(zip(self.nodes, self.nodes[1:]))

    def to_dict(self) -> Dict[str, Any]:
        return {"nodes": list(self.nodes), "cost": self.cost}


@dataclass(frozen=True)
class FlowSummary:
    """Summary of a max-flow computation.

    Attributes:
        value: The maximum flow value.
        edge_flows: Flow on each original edge, keyed by (source, target).
        residual_cap: Capacity left on each original edge after flow placement.
        reachable: Node ids reachable from the source in the final residual graph.
        min_cut: Original edges leaving ``reachable``; their capacities sum to ``value``.
    """

    value: int
    edge_flows: Dict[EdgeKey, int] = field(default_factory=dict)
    residual_cap: Dict[EdgeKey, int] = field(default_factory=dict)
    reachable: Set[NodeID] = field(default_factory=set)
    min_cut: Tuple[EdgeKey, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "edge_flows": [
                {"source": u, "target": v, "flow": f}
                for (u, v), f in self.edge_flows.items()
            ],
            "min_cut": [{"source": u, "target": v} for u, v in self.min_cut],
            "reachable": sorted(self.reachable),
        }
