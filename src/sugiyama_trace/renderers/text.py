"""Plain-text report in the same shape as the comparison tool's trace output."""

from __future__ import annotations

import networkx as nx

from sugiyama_trace.renderers.base import nodes_by_rank

POSITIONS_HEADER = "=== Final node positions ==="
BY_RANK_HEADER = "=== Nodes by rank (sorted by order) ==="


def format_value(value: object) -> str:
    """Format a number the way the comparison tool prints it.

    Integral floats drop their ``.0`` and a missing value prints ``undefined``.
    """
    if value is None:
        return "undefined"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class TextRenderer:
    """Two sections: every node's final position, then nodes grouped by rank."""

    def render(self, graph: nx.MultiDiGraph) -> str:
        lines = ["", POSITIONS_HEADER]
        lines.extend(self.position_lines(graph))
        lines.extend(["", BY_RANK_HEADER])
        lines.extend(self.rank_lines(graph))
        return "\n".join(lines)

    def position_lines(self, graph: nx.MultiDiGraph) -> list[str]:
        lines = []
        for node_id, attrs in graph.nodes(data=True):
            fields = ", ".join(f"{key}={format_value(attrs.get(key))}" for key in ("x", "y", "rank", "order"))
            lines.append(f"  {node_id} ({attrs.get('label', node_id)}): {fields}")
        return lines

    def rank_lines(self, graph: nx.MultiDiGraph) -> list[str]:
        lines = []
        for rank, node_ids in nodes_by_rank(graph).items():
            names = ", ".join(
                f"{nid}({graph.nodes[nid].get('label', nid)})={format_value(graph.nodes[nid].get('order'))}"
                for nid in node_ids
            )
            lines.append(f"  rank {rank}: [{names}]")
        return lines
