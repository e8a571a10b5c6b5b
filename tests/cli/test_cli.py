import io
import json
import logging

import pytest

from wgraph import cli
from wgraph.logging import set_global_log_level


@pytest.fixture(autouse=True)
def _restore_log_level():
    yield
    set_global_log_level(logging.INFO)


def run_shell(monkeypatch, capsys, script: str, *extra: str) -> str:
    monkeypatch.setattr("sys.stdin", io.StringIO(script))
    cli.main(["shell", *extra])
    return capsys.readouterr().out


# Demo command


def test_demo_text(capsys) -> None:
    cli.main(["demo"])
    out = capsys.readouterr().out
    assert "MST from A: total cost 15 (2 edge(s))" in out
    assert "Shortest path: A -> B -> C (cost 15)" in out
    assert "Max flow A -> C: 5" in out
    assert "Min cut: B->C" in out


def test_demo_json(capsys) -> None:
    cli.main(["--quiet", "demo", "--json"])
    lines = [ln for ln in capsys.readouterr().out.splitlines() if ln.startswith("{")]
    events = [json.loads(ln) for ln in lines]
    kinds = [e["kind"] for e in events]
    assert kinds == ["node", "node", "node", "edge", "edge", "mst", "path", "max_flow"]
    assert events[-1]["data"]["value"] == 5
    assert events[-2]["highlights"] == [
        {"source": "A", "target": "B", "role": "route", "intensity": 1.0},
        {"source": "B", "target": "C", "role": "route", "intensity": 1.0},
    ]


# Shell command


def test_shell_builds_graph_and_runs_algorithms(monkeypatch, capsys) -> None:
    script = "\n".join(
        [
            "node s",
            "node a",
            "node b",
            "node t",
            "edge s a 3",
            "edge s b 2",
            "edge a t 2",
            "edge b t 3",
            "edge a b 1",
            "path s t",
            "flow s t",
            "mst",
            "quit",
        ]
    )
    out = run_shell(monkeypatch, capsys, script)
    assert "Node [S] created" in out
    assert "Edge [A] -> [B] (weight 1) created" in out
    assert "Shortest path: S -> " in out
    assert "-> T (cost 5)" in out
    assert "Max flow S -> T: 5" in out
    assert "MST from S: total cost 5 (3 edge(s))" in out


def test_shell_errors_do_not_stop_the_loop(monkeypatch, capsys) -> None:
    script = "\n".join(
        [
            "node a",
            "node A",
            "edge a b 1",
            "node b",
            "edge a b heavy",
            "edge a b -2",
            "path b a",
            "flow a a",
            "bogus",
            "path a",
            "show",
        ]
    )
    out = run_shell(monkeypatch, capsys, script)
    assert "error: Duplicate node: Node 'A' already exists." in out
    assert "error: Unknown node: Target node 'B' does not exist." in out
    assert "error: Invalid input: Edge weight must be an integer, got 'heavy'." in out
    assert "error: Invalid input: Edge weight must be non-negative, got -2." in out
    assert "error: No route: No path from 'B' to 'A'." in out
    assert "error: Invalid input: Source and sink must differ" in out
    assert "error: unknown command 'bogus'" in out
    assert "error: 'path' takes 2 argument(s)" in out
    # the loop reached the last command
    assert "2 node(s): A, B" in out


def test_shell_upsert_and_show(monkeypatch, capsys) -> None:
    out = run_shell(
        monkeypatch, capsys, "node a\nnode b\nedge a b 4\nedge a b 9\nshow\n"
    )
    assert "Edge [A] -> [B] (weight 9) updated" in out
    assert "Source | Target | Weight" in out
    assert "A      | B      | 9" in out


def test_shell_demo_and_clear(monkeypatch, capsys) -> None:
    out = run_shell(monkeypatch, capsys, "clear\nmst\nshow\n", "--demo")
    assert "Graph cleared" in out
    assert "MST: graph is empty" in out
    assert "0 node(s)" in out


def test_shell_json(monkeypatch, capsys) -> None:
    out = run_shell(monkeypatch, capsys, "node x\n", "--json")
    events = [json.loads(ln) for ln in out.splitlines() if ln.startswith("{")]
    assert events == [
        {
            "kind": "node",
            "level": "INFO",
            "message": "Node [X] created",
            "highlights": [],
            "data": {"id": "X"},
        }
    ]


def test_verbose_json_shell_keeps_stdout_parseable(monkeypatch, capsys) -> None:
    """Debug logging goes to stderr, so every stdout line is an event."""
    script = "node a\nnode b\nedge a b 2\nflow a b\n"
    monkeypatch.setattr("sys.stdin", io.StringIO(script))
    cli.main(["--verbose", "shell", "--json"])
    lines = [ln for ln in capsys.readouterr().out.splitlines() if ln.strip()]
    kinds = [json.loads(ln)["kind"] for ln in lines]
    assert kinds == ["node", "node", "edge", "max_flow"]


# Global options


def test_no_args_prints_help(capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])
    assert exc_info.value.code == 0
    assert "usage: wgraph" in capsys.readouterr().out


def test_verbose_enables_debug(capsys) -> None:
    cli.main(["--verbose", "demo"])
    assert logging.getLogger("wgraph").level == logging.DEBUG


def test_quiet_sets_warning(capsys) -> None:
    cli.main(["--quiet", "demo"])
    assert logging.getLogger("wgraph").level == logging.WARNING


def test_unknown_command_exits_nonzero(capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["explode"])
    assert exc_info.value.code == 2


def test_format_table() -> None:
    table = cli._format_table(["Source", "Target"], [["A", "B"]])
    assert table.splitlines() == [
        "   Source | Target",
        "   -------+-------",
        "   A      | B     ",
    ]
    assert cli._format_table(["X"], []) == ""
