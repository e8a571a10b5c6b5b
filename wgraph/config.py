"""Configuration classes for wgraph sessions."""

from dataclasses import dataclass, field
from typing import Tuple


@dataclass
class SessionConfig:
    """Configuration for an interactive graph session."""

    # Start the session with the demo graph loaded
    seed_demo: bool = False

    # Prompt shown by the interactive shell
    prompt: str = "wgraph> "

    # Demo graph: node names and (source, target, weight) edges
    demo_nodes: Tuple[str, ...] = ("A", "B", "C")
    demo_edges: Tuple[Tuple[str, str, int], ...] = field(
        default_factory=lambda: (("A", "B", 10), ("B", "C", 5))
    )


# Global configuration instance
DEFAULT_CONFIG = SessionConfig()
