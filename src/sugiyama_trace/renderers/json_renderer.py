"""JSON report, for diffing layouts with a script instead of by eye."""

from __future__ import annotations

import json

import networkx as nx

from sugiyama_trace.renderers.base import nodes_by_rank


class JsonRenderer:
    def __init__(self, indent: int | None = 2) -> None:
        self.indent = indent

    def render(self, graph: nx.MultiDiGraph) -> str:
        nodes = [
            {
                "id": node_id,
                "label": attrs.get("label", node_id),
                "x": attrs.get("x"),
                "y": attrs.get("y"),
                "rank": attrs.get("rank"),
                "order": attrs.get("order"),
            }
            for node_id, attrs in graph.nodes(data=True)
        ]
        ranks = {str(rank): node_ids for rank, node_ids in nodes_by_rank(graph).items()}
        payload = {
            "rankdir": graph.graph.get("rankdir"),
            "width": graph.graph.get("width"),
            "height": graph.graph.get("height"),
            "nodes": nodes,
            "ranks": ranks,
        }
        return json.dumps(payload, indent=self.indent)
