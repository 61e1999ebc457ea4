"""Tests for the text and JSON reports."""

from __future__ import annotations

import json

from sugiyama_trace.graph import new_graph, set_node
from sugiyama_trace.renderers import JsonRenderer, TextRenderer, format_value, nodes_by_rank


def laid_out_graph():
    """A hand-annotated graph, as if layout() had run on it (except node C)."""
    g = new_graph()
    set_node(g, "A", label="Input", width=50, height=30, x=25.0, y=15.0, rank=0, order=0)
    set_node(g, "B", label="Validate", width=50, height=30, x=25.5, y=95.0, rank=1, order=2)
    set_node(g, "D", label="Error Handler", width=50, height=30, x=125.0, y=95.0, rank=1, order=0)
    set_node(g, "C", label="Process", width=50, height=30)
    return g


class TestFormatValue:
    def test_integral_float(self):
        assert format_value(75.0) == "75"

    def test_fractional_float(self):
        assert format_value(75.5) == "75.5"

    def test_int(self):
        assert format_value(3) == "3"

    def test_missing(self):
        assert format_value(None) == "undefined"


class TestNodesByRank:
    def test_groups_sorted_by_order_and_skips_unranked(self):
        assert nodes_by_rank(laid_out_graph()) == {0: ["A"], 1: ["D", "B"]}

    def test_ranks_ascending(self):
        g = new_graph()
        set_node(g, "Z", rank=2, order=0)
        set_node(g, "Y", rank=0, order=0)
        assert list(nodes_by_rank(g)) == [0, 2]


class TestTextRenderer:
    def test_full_report(self):
        expected = "\n".join(
            [
                "",
                "=== Final node positions ===",
                "  A (Input): x=25, y=15, rank=0, order=0",
                "  B (Validate): x=25.5, y=95, rank=1, order=2",
                "  D (Error Handler): x=125, y=95, rank=1, order=0",
                "  C (Process): x=undefined, y=undefined, rank=undefined, order=undefined",
                "",
                "=== Nodes by rank (sorted by order) ===",
                "  rank 0: [A(Input)=0]",
                "  rank 1: [D(Error Handler)=0, B(Validate)=2]",
            ]
        )
        assert TextRenderer().render(laid_out_graph()) == expected

    def test_empty_graph(self):
        assert TextRenderer().render(new_graph()) == (
            "\n=== Final node positions ===\n\n=== Nodes by rank (sorted by order) ==="
        )


class TestJsonRenderer:
    def test_payload(self):
        payload = json.loads(JsonRenderer().render(laid_out_graph()))
        assert payload["rankdir"] == "TB"
        assert payload["ranks"] == {"0": ["A"], "1": ["D", "B"]}
        assert payload["nodes"][0] == {"id": "A", "label": "Input", "x": 25.0, "y": 15.0, "rank": 0, "order": 0}
        assert payload["nodes"][3]["rank"] is None

    def test_compact(self):
        assert "\n" not in JsonRenderer(indent=None).render(laid_out_graph())
