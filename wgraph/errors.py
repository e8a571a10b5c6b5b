"""Error kinds raised by the graph store, the solvers and the session.

All errors derive from ``GraphError`` (itself a ``ValueError``) so hosts can
catch every engine failure with a single ``except`` clause.
"""

from __future__ import annotations


class GraphError(ValueError):
    """Base class for all wgraph errors."""

    #: Short machine-friendly name used in reports.
    kind: str = "error"


class ValidationError(GraphError):
    """Malformed or empty input, or degenerate parameters."""

    kind = "validation"


class DuplicateError(GraphError):
    """A node with the given id already exists."""

    kind = "duplicate"


class NotFoundError(GraphError):
    """A referenced node id does not exist."""

    kind = "not_found"


class NoPathError(GraphError):
    """The target node is unreachable from the start node."""

    kind = "no_path"
