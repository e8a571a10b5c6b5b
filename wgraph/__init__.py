"""wgraph: build a small weighted graph and run classical algorithms on it.

Primary API:
    GraphSession - Validated editing plus MST, shortest path and max flow
    GraphStore - The directed weighted graph (a networkx.DiGraph)
    Reporter, ReportEvent, EdgeHighlight - Results for presentation layers

Example:
    from wgraph import GraphSession

    session = GraphSession()
    for name in ("s", "a", "t"):
        session.add_node(name)
    session.add_edge("s", "a", 3)
    session.add_edge("a", "t", 2)

    session.run_shortest_path("S", "T").nodes   # ('S', 'A', 'T')
    session.run_max_flow("S", "T").value         # 2
"""

from __future__ import annotations

from wgraph import cli, logging
from wgraph._version import __version__
from wgraph.algorithms import (
    FlowSummary,
    MSTResult,
    PathResult,
    calc_max_flow,
    prim_mst,
    shortest_path,
)
from wgraph.config import SessionConfig
from wgraph.errors import (
    DuplicateError,
    GraphError,
    NoPathError,
    NotFoundError,
    ValidationError,
)
from wgraph.graph import Edge, GraphStore, Node
from wgraph.report import EdgeHighlight, Reporter, ReportEvent
from wgraph.session import GraphSession

__all__ = [
    # Version
    "__version__",
    # Model
    "GraphStore",
    "Node",
    "Edge",
    # Session (primary API)
    "GraphSession",
    "SessionConfig",
    # Algorithms
    "prim_mst",
    "shortest_path",
    "calc_max_flow",
    "MSTResult",
    "PathResult",
    "FlowSummary",
    # Reporting
    "Reporter",
    "ReportEvent",
    "EdgeHighlight",
    # Errors
    "GraphError",
    "ValidationError",
    "DuplicateError",
    "NotFoundError",
    "NoPathError",
    # Utilities
    "cli",
    "logging",
]
