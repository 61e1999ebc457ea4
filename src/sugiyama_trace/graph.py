"""Graph construction helpers over ``networkx.MultiDiGraph``.

Graph-level settings live in ``graph.graph`` (``rankdir``, ``ranksep``, ...),
node settings in the node attribute dict (``label``, ``width``, ``height``).
Layout results are written back into those same dicts.
"""

from __future__ import annotations

import networkx as nx


def new_graph(rankdir: str = "TB", **attrs: object) -> nx.MultiDiGraph:
    """Create an empty multigraph carrying graph-level layout attributes."""
    graph: nx.MultiDiGraph = nx.MultiDiGraph()
    graph.graph["rankdir"] = rankdir
    graph.graph.update(attrs)
    return graph


def set_node(
    graph: nx.MultiDiGraph,
    node_id: str,
    label: str | None = None,
    width: float = 0,
    height: float = 0,
    **attrs: object,
) -> nx.MultiDiGraph:
    """Add or update a node. The label defaults to the node id."""
    graph.add_node(node_id, label=node_id if label is None else label, width=width, height=height, **attrs)
    return graph


def set_edge(
    graph: nx.MultiDiGraph,
    src: str,
    tgt: str,
    label: str | None = None,
    **attrs: object,
) -> nx.MultiDiGraph:
    """Add an edge ``src -> tgt``. Missing endpoints get default attributes."""
    for node_id in (src, tgt):
        if node_id not in graph:
            set_node(graph, node_id)
    if label is not None:
        attrs["label"] = label
    graph.add_edge(src, tgt, **attrs)
    return graph


def simple_digraph(graph: nx.MultiDiGraph) -> nx.DiGraph:
    """Collapse parallel edges into one, counting them in ``weight``.

    Node attributes are not copied; the layout phases only need topology.
    """
    g: nx.DiGraph = nx.DiGraph()
    g.add_nodes_from(graph.nodes)
    for src, tgt in graph.edges():
        if g.has_edge(src, tgt):
            g[src][tgt]["weight"] += 1
        else:
            g.add_edge(src, tgt, weight=1)
    return g
