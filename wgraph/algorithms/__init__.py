"""Graph algorithms over a ``GraphStore``: Prim MST, Dijkstra and Edmonds-Karp."""

from wgraph.algorithms.max_flow import calc_max_flow
from wgraph.algorithms.mst import prim_mst
from wgraph.algorithms.spf import shortest_path, spf
from wgraph.algorithms.types import FlowSummary, MSTResult, PathResult

__all__ = [
    "calc_max_flow",
    "prim_mst",
    "shortest_path",
    "spf",
    "FlowSummary",
    "MSTResult",
    "PathResult",
]
