"""Command-line interface for wgraph."""

from __future__ import annotations

import argparse
import cmd
import json
import sys
from typing import Any, Callable, List, Optional, TextIO

from wgraph.config import SessionConfig
from wgraph.errors import GraphError
from wgraph.logging import get_logger, level_for_flags, set_global_log_level
from wgraph.report import ReportEvent
from wgraph.session import GraphSession

logger = get_logger(__name__)


def _format_table(
    headers: List[str],
    rows: List[List[Any]],
    min_width: int = 6,
) -> str:
    """Format data as a simple ASCII table.

    Args:
        headers: Column headers
        rows: Data rows
        min_width: Minimum column width

    Returns:
        Formatted table string
    """
    if not rows:
        return ""

    all_data = [headers] + rows
    col_widths = []
    for col_idx in range(len(headers)):
        max_width = max(len(str(row[col_idx])) for row in all_data)
        col_widths.append(max(max_width, min_width))

    def format_row(row_data: List[Any]) -> str:
        return "   " + " | ".join(
            f"{str(item):<{col_widths[i]}}" for i, item in enumerate(row_data)
        )

    lines = [format_row(headers)]
    lines.append("   " + "-+-".join("-" * width for width in col_widths))
    for row in rows:
        lines.append(format_row(row))
    return "\n".join(lines)


def _format_event(event: ReportEvent) -> str:
    """Render a report event as console text."""
    if event.kind == "error":
        return f"error: {event.message}"

    lines = [event.message]
    if event.kind == "mst" and event.data.get("edges"):
        rows = [[e["source"], e["target"], e["weight"]] for e in event.data["edges"]]
        lines.append(_format_table(["Source", "Target", "Weight"], rows))
    elif event.kind == "max_flow":
        rows = [
            [h.source, h.target, f"{h.intensity:.0%}"]
            for h in event.highlights
        ]
        if rows:
            lines.append(_format_table(["Source", "Target", "Used"], rows))
        cut = event.data.get("min_cut", [])
        if cut:
            lines.append(
                "   Min cut: " + ", ".join(f"{c['source']}->{c['target']}" for c in cut)
            )
    return "\n".join(lines)


class EventPrinter:
    """Session subscriber that writes each event to a stream."""

    def __init__(self, stream: TextIO, as_json: bool = False) -> None:
        self.stream = stream
        self.as_json = as_json

    def __call__(self, event: ReportEvent) -> None:
        if self.as_json:
            print(json.dumps(event.to_dict()), file=self.stream)
        else:
            print(_format_event(event), file=self.stream)


class GraphShell(cmd.Cmd):
    """Line-oriented command loop over a ``GraphSession``.

    Each command runs to completion before the next line is read. Engine
    errors are already reported through the session's event stream, so the
    shell only logs them and moves on.
    """

    intro = "Type 'help' for commands, 'quit' to leave."

    def __init__(
        self,
        session: GraphSession,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ) -> None:
        super().__init__(stdin=stdin, stdout=stdout)
        self.session = session
        self.prompt = session.config.prompt
        if not self.stdin.isatty():
            # Piped input: read lines directly, no prompt echo.
            self.use_rawinput = False
            self.prompt = ""
            self.intro = None

    def _run(
        self, command: str, args: List[str], arity: int, action: Callable[..., Any]
    ) -> None:
        if len(args) != arity:
            print(f"error: '{command}' takes {arity} argument(s)", file=self.stdout)
            return
        try:
            action(*args)
        except GraphError as exc:
            logger.warning("Command '%s' failed: %s", command, exc)

    def emptyline(self) -> bool:
        return False

    def default(self, line: str) -> None:
        print(f"error: unknown command '{line.split()[0]}'", file=self.stdout)

    def do_node(self, arg: str) -> None:
        """node NAME: add a node."""
        self._run("node", arg.split(), 1, self.session.add_node)

    def do_edge(self, arg: str) -> None:
        """edge SOURCE TARGET WEIGHT: add an edge or update its weight."""

        def add(source: str, target: str, weight: str) -> None:
            try:
                value: Any = int(weight)
            except ValueError:
                value = weight
            self.session.add_edge(source, target, value)

        self._run("edge", arg.split(), 3, add)

    def do_clear(self, arg: str) -> None:
        """clear: remove every node and edge."""
        self.session.clear()

    def do_show(self, arg: str) -> None:
        """show: list nodes and edges."""
        graph = self.session.graph
        print(
            f"{graph.node_count} node(s): "
            + ", ".join(n.id for n in graph.get_nodes()),
            file=self.stdout,
        )
        rows = [[e.source, e.target, e.weight] for e in graph.get_edges()]
        if rows:
            print(_format_table(["Source", "Target", "Weight"], rows), file=self.stdout)

    def do_mst(self, arg: str) -> None:
        """mst: minimum spanning tree (Prim) from the first node."""
        self.session.run_mst()

    def do_path(self, arg: str) -> None:
        """path START END: shortest directed path (Dijkstra)."""
        self._run("path", arg.split(), 2, self.session.run_shortest_path)

    def do_flow(self, arg: str) -> None:
        """flow SOURCE SINK: maximum flow (Edmonds-Karp)."""
        self._run("flow", arg.split(), 2, self.session.run_max_flow)

    def do_quit(self, arg: str) -> bool:
        """quit: leave the shell."""
        return True

    do_exit = do_quit

    def do_EOF(self, arg: str) -> bool:
        return True


def _run_shell(demo: bool, as_json: bool) -> None:
    session = GraphSession(SessionConfig())
    session.reporter.subscribe(EventPrinter(sys.stdout, as_json))
    if demo:
        session.load_demo()
    GraphShell(session).cmdloop()


def _run_demo(as_json: bool) -> None:
    """Load the demo graph and run every algorithm once."""
    config = SessionConfig()
    session = GraphSession(config)
    session.reporter.subscribe(EventPrinter(sys.stdout, as_json))
    session.load_demo()

    first, last = config.demo_nodes[0], config.demo_nodes[-1]
    session.run_mst()
    session.run_shortest_path(first, last)
    session.run_max_flow(first, last)


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``wgraph`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="wgraph",
        description="Build a weighted graph and run MST, shortest path and max flow.",
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{shell,demo}",
        help="Available commands",
    )

    shell_parser = subparsers.add_parser(
        "shell", help="Interactive command shell (reads stdin)"
    )
    shell_parser.add_argument(
        "--demo", action="store_true", help="Start with the demo graph loaded"
    )

    demo_parser = subparsers.add_parser(
        "demo", help="Run all algorithms on the demo graph"
    )

    for p in (shell_parser, demo_parser):
        p.add_argument(
            "--json",
            action="store_true",
            help="Print each event as a JSON line instead of text",
        )

    effective_args = sys.argv[1:] if argv is None else argv

    # If no arguments are provided, show help and exit cleanly
    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    set_global_log_level(level_for_flags(args.verbose, args.quiet))
    logger.debug("Debug logging enabled")

    if args.command == "shell":
        _run_shell(args.demo, args.json)
    elif args.command == "demo":
        _run_demo(args.json)


if __name__ == "__main__":
    main()
