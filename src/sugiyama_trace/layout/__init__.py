"""Layered directed-graph layout.

``layout(graph)`` annotates every node of a ``networkx`` graph with ``x``,
``y``, ``rank`` and ``order``.
"""

from sugiyama_trace.layout.order_trace import OrderStep, OrderTrace
from sugiyama_trace.layout.sugiyama import layout
from sugiyama_trace.layout.types import (
    DUMMY_PREFIX,
    Direction,
    LayoutConfig,
    LayoutError,
    LayoutNode,
    LayoutResult,
)

__all__ = [
    "DUMMY_PREFIX",
    "Direction",
    "LayoutConfig",
    "LayoutError",
    "LayoutNode",
    "LayoutResult",
    "OrderStep",
    "OrderTrace",
    "layout",
]
