"""Fixed example graphs for the trace harness."""

from __future__ import annotations

from typing import Callable

import networkx as nx

from sugiyama_trace.graph import new_graph, set_edge, set_node

NODE_WIDTH = 50
NODE_HEIGHT = 30


def complex_graph(rankdir: str = "TB") -> nx.MultiDiGraph:
    """Input/validate/process loop with an error-handling branch.

    Nine nodes, eleven edges, one cycle (A → B → C → E → A).
    """
    g = new_graph(rankdir=rankdir)

    for node_id, label in [
        ("A", "Input"),
        ("B", "Validate"),
        ("C", "Process"),
        ("D", "Error Handler"),
        ("E", "More Data?"),
        ("F", "Output"),
        ("G", "Log Error"),
        ("H", "Notify Admin"),
        ("I", "Cleanup"),
    ]:
        set_node(g, node_id, label=label, width=NODE_WIDTH, height=NODE_HEIGHT)

    set_edge(g, "A", "B")
    set_edge(g, "B", "C", label="valid")
    set_edge(g, "B", "D", label="invalid")
    set_edge(g, "C", "E")
    set_edge(g, "E", "A", label="yes")
    set_edge(g, "E", "F", label="no")
    set_edge(g, "D", "G")
    set_edge(g, "D", "H")
    set_edge(g, "G", "I")
    set_edge(g, "H", "I")
    set_edge(g, "I", "F")
    return g


def simple_graph(rankdir: str = "TB") -> nx.MultiDiGraph:
    """Three-node chain A → B → C."""
    g = new_graph(rankdir=rankdir)
    for node_id, label in [("A", "Start"), ("B", "Middle"), ("C", "End")]:
        set_node(g, node_id, label=label, width=NODE_WIDTH, height=NODE_HEIGHT)
    set_edge(g, "A", "B")
    set_edge(g, "B", "C")
    return g


def diamond_graph(rankdir: str = "TB") -> nx.MultiDiGraph:
    """A fans out to B and C, which join again at D."""
    g = new_graph(rankdir=rankdir)
    for node_id, label in [("A", "Top"), ("B", "Left"), ("C", "Right"), ("D", "Bottom")]:
        set_node(g, node_id, label=label, width=NODE_WIDTH, height=NODE_HEIGHT)
    set_edge(g, "A", "B")
    set_edge(g, "A", "C")
    set_edge(g, "B", "D")
    set_edge(g, "C", "D")
    return g


EXAMPLES: dict[str, Callable[..., nx.MultiDiGraph]] = {
    "complex": complex_graph,
    "simple": simple_graph,
    "diamond": diamond_graph,
}


def get_example(name: str, rankdir: str = "TB") -> nx.MultiDiGraph:
    """Build the named example graph."""
    try:
        builder = EXAMPLES[name]
    except KeyError:
        raise KeyError(f"Unknown example {name!r}; available: {', '.join(EXAMPLES)}") from None
    return builder(rankdir=rankdir)
