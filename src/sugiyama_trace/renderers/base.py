"""Base renderer protocol."""

from __future__ import annotations

from typing import Protocol

import networkx as nx


class Renderer(Protocol):
    """Protocol that all report renderers must implement."""

    def render(self, graph: nx.MultiDiGraph) -> str:
        """Render a laid-out graph to an output string."""
        ...


def nodes_by_rank(graph: nx.MultiDiGraph) -> dict[int, list[str]]:
    """Group node ids by rank, each group sorted by order.

    Nodes with no rank (not laid out) are skipped. Keys are in ascending rank.
    """
    groups: dict[int, list[str]] = {}
    for node_id, attrs in graph.nodes(data=True):
        rank = attrs.get("rank")
        if rank is None:
            continue
        groups.setdefault(rank, []).append(node_id)
    return {
        rank: sorted(groups[rank], key=lambda nid: graph.nodes[nid].get("order", 0))
        for rank in sorted(groups)
    }
