from collections import defaultdict

import networkx as nx
import pytest

from wgraph.algorithms.max_flow import build_residual, calc_max_flow
from wgraph.algorithms.types import FlowSummary
from wgraph.errors import NotFoundError, ValidationError
from wgraph.graph import GraphStore
from tests.algorithms.sample_graphs import to_reference_digraph


def assert_valid_flow(g: GraphStore, summary: FlowSummary, src: str, dst: str) -> None:
    """Capacity limits, conservation, and value == net out of source == net into sink."""
    inflow = defaultdict(int)
    outflow = defaultdict(int)
    for e in g.get_edges():
        flow = summary.edge_flows[(e.source, e.target)]
        assert 0 <= flow <= e.weight
        assert summary.residual_cap[(e.source, e.target)] == e.weight - flow
        outflow[e.source] += flow
        inflow[e.target] += flow

    for n in g.get_nodes():
        if n.id not in (src, dst):
            assert inflow[n.id] == outflow[n.id], n.id
    assert summary.value == outflow[src] - inflow[src]
    assert summary.value == inflow[dst] - outflow[dst]


class TestMaxFlowBasic:
    def test_line_abc(self, line_abc):
        summary = calc_max_flow(line_abc, "A", "C")
        assert summary.value == 5
        assert summary.edge_flows == {("A", "B"): 5, ("B", "C"): 5}
        assert summary.residual_cap == {("A", "B"): 5, ("B", "C"): 0}

    def test_diamond(self, diamond_st):
        """Source cut {S} has capacity 3 + 2 = 5, and every unit gets through."""
        summary = calc_max_flow(diamond_st, "S", "T")
        assert summary.value == 5
        assert summary.edge_flows == {
            ("S", "A"): 3,
            ("S", "B"): 2,
            ("A", "T"): 2,
            ("B", "T"): 3,
            ("A", "B"): 1,
        }
        assert_valid_flow(diamond_st, summary, "S", "T")

    def test_diamond_with_narrower_source_edge(self, diamond_st):
        diamond_st.add_edge("S", "A", 2)
        summary = calc_max_flow(diamond_st, "S", "T")
        assert summary.value == 4
        assert_valid_flow(diamond_st, summary, "S", "T")

    def test_clrs_network(self, clrs_network):
        summary = calc_max_flow(clrs_network, "S", "T")
        assert summary.value == 23
        assert_valid_flow(clrs_network, summary, "S", "T")

    def test_no_path(self, two_islands):
        summary = calc_max_flow(two_islands, "A", "Y")
        assert summary.value == 0
        assert all(f == 0 for f in summary.edge_flows.values())
        assert summary.reachable == {"A", "B"}
        assert summary.min_cut == ()

    def test_reverse_direction_carries_nothing(self, line_abc):
        summary = calc_max_flow(line_abc, "C", "A")
        assert summary.value == 0

    def test_inputs_are_normalized(self, line_abc):
        assert calc_max_flow(line_abc, " a", "c ").value == 5

    def test_antiparallel_edges(self):
        g = GraphStore(["A", "B"], [("A", "B", 5), ("B", "A", 3)])
        summary = calc_max_flow(g, "A", "B")
        assert summary.value == 5
        assert summary.edge_flows == {("A", "B"): 5, ("B", "A"): 0}

    def test_self_loop_carries_no_flow(self):
        g = GraphStore(["A", "B"], [("A", "A", 9), ("A", "B", 2)])
        summary = calc_max_flow(g, "A", "B")
        assert summary.value == 2
        assert summary.edge_flows[("A", "A")] == 0
        assert summary.residual_cap[("A", "A")] == 9

    def test_zero_capacity_edge(self):
        g = GraphStore(["A", "B"], [("A", "B", 0)])
        assert calc_max_flow(g, "A", "B").value == 0

    def test_graph_is_not_modified(self, clrs_network):
        before = clrs_network.get_edges()
        calc_max_flow(clrs_network, "S", "T")
        assert clrs_network.get_edges() == before


class TestMaxFlowValidation:
    def test_source_equals_sink(self, line_abc):
        with pytest.raises(ValidationError, match="must differ"):
            calc_max_flow(line_abc, "A", "a")

    @pytest.mark.parametrize("src,dst", [("A", "Z"), ("Z", "C")])
    def test_missing_node(self, line_abc, src, dst):
        with pytest.raises(NotFoundError):
            calc_max_flow(line_abc, src, dst)

    def test_missing_node_on_empty_graph(self):
        with pytest.raises(NotFoundError):
            calc_max_flow(GraphStore(), "A", "B")


class TestMinCut:
    def test_min_cut_capacity_equals_value(self, clrs_network):
        summary = calc_max_flow(clrs_network, "S", "T")
        cut_capacity = sum(
            clrs_network.get_edge(u, v).weight for u, v in summary.min_cut
        )
        assert cut_capacity == summary.value
        assert "S" in summary.reachable
        assert "T" not in summary.reachable

    def test_min_cut_edges_are_saturated(self, diamond_st):
        summary = calc_max_flow(diamond_st, "S", "T")
        assert summary.min_cut == (("S", "A"), ("S", "B"))
        for edge in summary.min_cut:
            assert summary.residual_cap[edge] == 0

    def test_to_dict(self, line_abc):
        data = calc_max_flow(line_abc, "A", "C").to_dict()
        assert data["value"] == 5
        assert data["min_cut"] == [{"source": "B", "target": "C"}]
        assert data["reachable"] == ["A", "B"]
        assert {"source": "A", "target": "B", "flow": 5} in data["edge_flows"]


class TestResidual:
    def test_build_residual_antiparallel(self):
        g = GraphStore(["A", "B", "C"], [("A", "B", 5), ("B", "A", 3), ("B", "C", 1)])
        assert build_residual(g) == {
            "A": {"B": 5},
            "B": {"A": 3, "C": 1},
            "C": {"B": 0},
        }


class TestMaxFlowAgainstNetworkx:
    @pytest.mark.parametrize(
        "fixture,src,dst",
        [
            ("clrs_network", "S", "T"),
            ("diamond_st", "S", "T"),
            ("mesh5", "A", "E"),
            ("mesh5", "C", "B"),
            ("two_islands", "A", "B"),
        ],
    )
    def test_value_matches_networkx(self, fixture, src, dst, request):
        g = request.getfixturevalue(fixture)
        expected = nx.maximum_flow_value(
            to_reference_digraph(g), src, dst, capacity="weight"
        )
        summary = calc_max_flow(g, src, dst)
        assert summary.value == expected
        assert_valid_flow(g, summary, src, dst)
