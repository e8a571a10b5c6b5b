"""Directed weighted graph store with validated mutation.

``GraphStore`` extends ``networkx.DiGraph`` with strict rules:

  - Node ids are trimmed, upper-cased strings; empty or duplicate ids are rejected.
  - Edges never create missing nodes.
  - At most one edge per ordered pair; re-adding a pair overwrites its weight.
  - Weights are non-negative integers.
  - Edges are enumerated in insertion order, independent of adjacency order.

Every rejected operation raises before the graph is touched.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from pickle import dumps, loads
from typing import Any, Dict, Iterable, List, Optional, Tuple

import networkx as nx

from wgraph.errors import DuplicateError, NotFoundError, ValidationError
from wgraph.logging import get_logger

logger = get_logger(__name__)

NodeID = str
EdgeKey = Tuple[NodeID, NodeID]
AttrDict = Dict[str, Any]

#: Name of the edge attribute holding the weight in the networkx adjacency.
WEIGHT_ATTR = "weight"


@dataclass(frozen=True)
class Node:
    """Snapshot of a node record."""

    id: NodeID


@dataclass(frozen=True)
class Edge:
    """Snapshot of a directed edge record.

    Attributes:
        source: Source node id.
        target: Target node id.
        weight: Non-negative integer weight (cost for paths, capacity for flow).
    """

    source: NodeID
    target: NodeID
    weight: int

    @property
    def key(self) -> EdgeKey:
        return (self.source, self.target)


def normalize_node_id(name: Any) -> NodeID:
    """Return the canonical node id for a user-supplied name.

    Args:
        name: Raw name as typed by the user.

    Returns:
        The trimmed, upper-cased id.

    Raises:
        ValidationError: If ``name`` is not a string or is empty after trimming.
    """
    if not isinstance(name, str):
        raise ValidationError(f"Node name must be a string, got {type(name).__name__}.")
    node_id = name.strip().upper()
    if not node_id:
        raise ValidationError("Node name must not be empty.")
    return node_id


def validate_weight(weight: Any) -> int:
    """Check that ``weight`` is a non-negative integer and return it as ``int``.

    Raises:
        ValidationError: For booleans, non-integral numbers and negative values.
    """
    if isinstance(weight, bool) or not isinstance(weight, numbers.Integral):
        raise ValidationError(f"Edge weight must be an integer, got {weight!r}.")
    if weight < 0:
        raise ValidationError(f"Edge weight must be non-negative, got {weight}.")
    return int(weight)


class GraphStore(nx.DiGraph):
    """
    A directed graph of named nodes and integer-weighted edges.

    Mutation goes through ``add_node``, ``add_edge`` and ``clear``; each
    validates its input in full before changing anything. The networkx bulk
    methods (``add_nodes_from``, ``add_edges_from``, ``add_weighted_edges_from``
    and ``update``) validate the whole batch, then call the single-item methods.
    Removing individual nodes or edges raises ``NotImplementedError``.

    Node enumeration follows insertion order (as in any networkx graph); edge enumeration
    follows edge insertion order, which is tracked separately because
    networkx enumerates edges grouped by source node.

    Inherits from:
        networkx.DiGraph
    """

    def __init__(
        self,
        nodes: Optional[Iterable[str]] = None,
        edges: Optional[Iterable[Tuple[str, str, int]]] = None,
    ) -> None:
        """
        Initialize a GraphStore, optionally with an initial set of nodes and edges.

        Args:
            nodes: Node names to insert, in order.
            edges: ``(source, target, weight)`` triples to insert, in order.

        Attributes:
            _edges (Dict[EdgeKey, AttrDict]): Maps ``(source, target)`` to the
                edge attribute dict shared with the networkx adjacency.
        """
        super().__init__()
        self._edges: Dict[EdgeKey, AttrDict] = {}
        for name in nodes or ():
            self.add_node(name)
        for source, target, weight in edges or ():
            self.add_edge(source, target, weight)

    def copy(self) -> GraphStore:
        """
        Create an independent deep copy of this graph.

        The copy is pickle-based so the edge index and its insertion order
        come along with the adjacency.

        Returns:
            GraphStore: A new instance with the same nodes and edges.
        """
        return loads(dumps(self))

    #
    # Node management
    #
    def add_node(self, name: str, **attr: Any) -> NodeID:
        """
        Add a single node, disallowing duplicates.

        Args:
            name: The node name; normalized with ``normalize_node_id``.
            **attr: Arbitrary attributes for this node.

        Returns:
            NodeID: The id of the new node.

        Raises:
            ValidationError: If the name is empty.
            DuplicateError: If the node already exists in the graph.
        """
        node_id = normalize_node_id(name)
        if node_id in self:
            raise DuplicateError(f"Node '{node_id}' already exists.")
        super().add_node(node_id, **attr)
        logger.debug("Added node %s", node_id)
        return node_id

    def add_nodes_from(
        self, nodes_for_adding: Iterable[Any], **attr: Any
    ) -> List[NodeID]:
        """
        Add several nodes. Each item is a name or a ``(name, attr_dict)`` pair.

        The batch is validated as a whole first: if any name is empty or
        already taken (in the graph or earlier in the batch), nothing is added.

        Returns:
            List[NodeID]: Ids of the new nodes, in order.
        """
        pending: Dict[NodeID, AttrDict] = {}
        for item in nodes_for_adding:
            name, node_attr = item if isinstance(item, tuple) else (item, {})
            node_id = normalize_node_id(name)
            if node_id in self or node_id in pending:
                raise DuplicateError(f"Node '{node_id}' already exists.")
            pending[node_id] = {**attr, **node_attr}
        for node_id, node_attr in pending.items():
            self.add_node(node_id, **node_attr)
        return list(pending)

    def has_node(self, name: Any) -> bool:
        """Return True if a node with the normalized ``name`` exists."""
        try:
            return normalize_node_id(name) in self._node
        except ValidationError:
            return False

    #
    # Edge management
    #
    def _check_edge(
        self, source: Any, target: Any, weight: Any
    ) -> Tuple[NodeID, NodeID, int]:
        """Normalize and validate one edge without touching the graph."""
        src = normalize_node_id(source)
        dst = normalize_node_id(target)
        weight = validate_weight(weight)
        if src not in self:
            raise NotFoundError(f"Source node '{src}' does not exist.")
        if dst not in self:
            raise NotFoundError(f"Target node '{dst}' does not exist.")
        return src, dst, weight

    def add_edge(self, source: str, target: str, weight: int, **attr: Any) -> Edge:
        """
        Add or update the directed edge from ``source`` to ``target``.

        Both endpoints must already exist. If the ordered pair already has an
        edge, only its weight (and any extra attributes) is updated and the
        edge keeps its enumeration position.

        Args:
            source: Source node name. Must exist in the graph.
            target: Target node name. Must exist in the graph.
            weight: Non-negative integer weight.
            **attr: Arbitrary edge attributes.

        Returns:
            Edge: Snapshot of the resulting edge.

        Raises:
            ValidationError: If an endpoint name is empty or the weight is invalid.
            NotFoundError: If either endpoint does not exist.
        """
        src, dst, weight = self._check_edge(source, target, weight)
        key = (src, dst)
        if key in self._edges:
            self._edges[key].update(attr)
            self._edges[key][WEIGHT_ATTR] = weight
            logger.debug("Updated edge %s->%s weight=%d", src, dst, weight)
        else:
            super().add_edge(src, dst, **attr, **{WEIGHT_ATTR: weight})
            self._edges[key] = self._succ[src][dst]
            logger.debug("Added edge %s->%s weight=%d", src, dst, weight)
        return Edge(src, dst, weight)

    def add_edges_from(
        self, ebunch_to_add: Iterable[Tuple[Any, ...]], **attr: Any
    ) -> List[Edge]:
        """
        Add or update several edges.

        Each item is ``(source, target, weight)`` or ``(source, target,
        attr_dict)`` with the weight under ``"weight"``. Keyword attributes
        apply to every item; a ``weight`` keyword fills in for items without
        one. Every item is checked before any edge is written.

        Returns:
            List[Edge]: Snapshots of the resulting edges, in order.

        Raises:
            ValidationError: If an item is malformed, lacks a weight, or has an
                invalid name or weight.
            NotFoundError: If an endpoint does not exist.
        """
        pending: List[Tuple[NodeID, NodeID, int, AttrDict]] = []
        for item in ebunch_to_add:
            if len(item) != 3:
                raise ValidationError(
                    f"Edge {tuple(item)!r} must be (source, target, weight)."
                )
            source, target, data = item
            edge_attr = dict(attr)
            if isinstance(data, dict):
                edge_attr.update(data)
            else:
                edge_attr[WEIGHT_ATTR] = data
            if WEIGHT_ATTR not in edge_attr:
                raise ValidationError(f"Edge {source!r} -> {target!r} has no weight.")
            src, dst, weight = self._check_edge(
                source, target, edge_attr.pop(WEIGHT_ATTR)
            )
            pending.append((src, dst, weight, edge_attr))
        return [self.add_edge(u, v, w, **a) for u, v, w, a in pending]

    def add_weighted_edges_from(
        self,
        ebunch_to_add: Iterable[Tuple[Any, Any, Any]],
        weight: str = WEIGHT_ATTR,
        **attr: Any,
    ) -> List[Edge]:
        """Add ``(source, target, weight)`` triples; see ``add_edges_from``."""
        return self.add_edges_from(
            ((u, v, {weight: w}) for u, v, w in ebunch_to_add), **attr
        )

    def update(self, edges: Any = None, nodes: Any = None) -> None:
        """
        Add nodes, then edges, through the validated bulk methods.

        ``edges`` may also be another networkx graph whose nodes and weighted
        edges are added; its nodes must not exist here yet.
        """
        if isinstance(edges, nx.Graph) and nodes is None:
            nodes, edges = list(edges.nodes), list(edges.edges(data=True))
        if nodes is not None:
            self.add_nodes_from(nodes)
        if edges is not None:
            self.add_edges_from(edges)

    #
    # Removal is limited to ``clear``
    #
    def _removal_unsupported(self, *args: Any, **kwargs: Any) -> None:
        raise NotImplementedError(
            "GraphStore does not remove single nodes or edges; use clear()."
        )

    remove_node = _removal_unsupported
    remove_nodes_from = _removal_unsupported
    remove_edge = _removal_unsupported
    remove_edges_from = _removal_unsupported
    clear_edges = _removal_unsupported

    def clear(self) -> None:
        """Remove all nodes and edges."""
        super().clear()
        self._edges.clear()

    #
    # Read accessors
    #
    @property
    def node_count(self) -> int:
        return len(self._node)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def get_nodes(self) -> List[Node]:
        """
        Retrieve all nodes in insertion order.

        Returns:
            List[Node]: Node snapshots.
        """
        return [Node(node_id) for node_id in self._node]

    def get_node(self, name: str) -> Node:
        """
        Look up a node by name.

        Raises:
            NotFoundError: If the node does not exist.
        """
        node_id = normalize_node_id(name)
        if node_id not in self._node:
            raise NotFoundError(f"Node '{node_id}' does not exist.")
        return Node(node_id)

    def get_edges(self) -> List[Edge]:
        """
        Retrieve all edges in insertion order.

        Returns:
            List[Edge]: Edge snapshots.
        """
        return [Edge(u, v, d[WEIGHT_ATTR]) for (u, v), d in self._edges.items()]

    def get_edge(self, source: str, target: str) -> Edge:
        """
        Retrieve the edge from ``source`` to ``target``.

        Raises:
            NotFoundError: If no such edge exists.
        """
        key = (normalize_node_id(source), normalize_node_id(target))
        if key not in self._edges:
            raise NotFoundError(f"No edge from '{key[0]}' to '{key[1]}'.")
        return Edge(key[0], key[1], self._edges[key][WEIGHT_ATTR])

    def out_edges_of(self, name: str) -> List[Edge]:
        """
        List the edges whose source is ``name``, in insertion order.

        Raises:
            NotFoundError: If the node does not exist.
        """
        node_id = self.get_node(name).id
        return [
            Edge(node_id, nbr, d[WEIGHT_ATTR]) for nbr, d in self._succ[node_id].items()
        ]

    def in_edges_of(self, name: str) -> List[Edge]:
        """
        List the edges whose target is ``name``, in insertion order.

        Raises:
            NotFoundError: If the node does not exist.
        """
        node_id = self.get_node(name).id
        return [
            Edge(nbr, node_id, d[WEIGHT_ATTR]) for nbr, d in self._pred[node_id].items()
        ]

    def edge_positions(self) -> Dict[EdgeKey, int]:
        """Map each ``(source, target)`` pair to its enumeration position."""
        return {key: pos for pos, key in enumerate(self._edges)}
