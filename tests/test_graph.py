"""Tests for graph construction helpers and the example graphs."""

from __future__ import annotations

import networkx as nx
import pytest

from sugiyama_trace.examples import EXAMPLES, complex_graph, get_example
from sugiyama_trace.graph import new_graph, set_edge, set_node, simple_digraph


class TestGraphHelpers:
    def test_new_graph_attributes(self):
        g = new_graph(rankdir="LR", nodesep=10)
        assert isinstance(g, nx.MultiDiGraph)
        assert g.graph == {"rankdir": "LR", "nodesep": 10}

    def test_set_node_label_defaults_to_id(self):
        g = set_node(new_graph(), "A", width=5, height=6)
        assert g.nodes["A"] == {"label": "A", "width": 5, "height": 6}

    def test_set_edge_creates_missing_endpoints(self):
        g = set_edge(new_graph(), "A", "B", label="go")
        assert g.nodes["B"]["label"] == "B"
        assert g.edges["A", "B", 0] == {"label": "go"}

    def test_set_edge_keeps_existing_node(self):
        g = new_graph()
        set_node(g, "A", label="Input", width=50, height=30)
        set_edge(g, "A", "B")
        assert g.nodes["A"]["label"] == "Input"

    def test_simple_digraph_counts_parallel_edges(self):
        g = new_graph()
        set_edge(g, "A", "B")
        set_edge(g, "A", "B")
        set_edge(g, "B", "C")
        simple = simple_digraph(g)
        assert simple["A"]["B"]["weight"] == 2
        assert simple["B"]["C"]["weight"] == 1
        assert list(simple.nodes) == ["A", "B", "C"]


class TestExamples:
    def test_complex_graph_shape(self):
        g = complex_graph()
        assert list(g.nodes) == list("ABCDEFGHI")
        assert g.number_of_edges() == 11
        assert g.graph["rankdir"] == "TB"

    def test_complex_graph_labels_and_sizes(self):
        g = complex_graph()
        assert g.nodes["D"]["label"] == "Error Handler"
        assert g.nodes["E"]["label"] == "More Data?"
        assert all(attrs["width"] == 50 and attrs["height"] == 30 for _, attrs in g.nodes(data=True))

    def test_complex_graph_edge_labels(self):
        g = complex_graph()
        labels = {(u, v): d.get("label") for u, v, d in g.edges(data=True)}
        assert labels[("B", "C")] == "valid"
        assert labels[("B", "D")] == "invalid"
        assert labels[("E", "A")] == "yes"
        assert labels[("E", "F")] == "no"
        assert labels[("A", "B")] is None

    def test_registry(self):
        assert set(EXAMPLES) == {"complex", "simple", "diamond"}
        assert get_example("diamond", rankdir="BT").graph["rankdir"] == "BT"

    def test_unknown_example(self):
        with pytest.raises(KeyError, match="available: complex"):
            get_example("nope")
