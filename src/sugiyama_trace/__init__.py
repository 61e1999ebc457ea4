"""Layered graph layout with a rank/order trace harness."""

from sugiyama_trace.graph import new_graph, set_edge, set_node
from sugiyama_trace.layout import LayoutError, LayoutResult, layout

__version__ = "0.1.0"

__all__ = ["LayoutError", "LayoutResult", "layout", "new_graph", "set_edge", "set_node"]
