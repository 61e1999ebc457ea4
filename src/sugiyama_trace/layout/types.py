"""Layout types shared across the layout engine and renderers."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

import networkx as nx

if TYPE_CHECKING:
    from sugiyama_trace.layout.order_trace import OrderTrace


class LayoutError(ValueError):
    """Raised when a graph cannot be laid out (bad rankdir, bad node size)."""


class Direction(str, Enum):
    TB = "TB"
    BT = "BT"
    LR = "LR"
    RL = "RL"

    @classmethod
    def parse(cls, value: object) -> Direction:
        if isinstance(value, Direction):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            choices = ", ".join(d.value for d in cls)
            raise LayoutError(f"Unknown rankdir {value!r}; expected one of: {choices}") from None


# Defaults match the comparison tool so coordinates line up.
DEFAULT_RANKSEP: float = 50.0
DEFAULT_NODESEP: float = 50.0
DEFAULT_EDGESEP: float = 20.0


@dataclass
class LayoutConfig:
    """Graph-level layout settings, normally read from ``graph.graph``."""

    rankdir: Direction = Direction.TB
    ranksep: float = DEFAULT_RANKSEP
    nodesep: float = DEFAULT_NODESEP
    edgesep: float = DEFAULT_EDGESEP

    @classmethod
    def from_graph(cls, graph: nx.MultiDiGraph) -> LayoutConfig:
        attrs = graph.graph
        return cls(
            rankdir=Direction.parse(attrs.get("rankdir", Direction.TB)),
            ranksep=_separation(attrs, "ranksep", DEFAULT_RANKSEP),
            nodesep=_separation(attrs, "nodesep", DEFAULT_NODESEP),
            edgesep=_separation(attrs, "edgesep", DEFAULT_EDGESEP),
        )

    @property
    def is_horizontal(self) -> bool:
        return self.rankdir in (Direction.LR, Direction.RL)


def _separation(attrs: dict, key: str, default: float) -> float:
    value = attrs.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value) or value < 0:
        raise LayoutError(f"Graph attribute {key!r} must be a finite non-negative number, got {value!r}")
    return float(value)


@dataclass
class LayoutNode:
    """A positioned node (real or dummy) in the layout.

    ``x``/``y`` are the node centre, matching what is written back onto the
    caller's graph.
    """

    id: str
    rank: int
    order: int
    x: float
    y: float
    width: float
    height: float
    dummy: bool = False


@dataclass
class LayoutResult:
    """Everything the engine computed, beyond what it writes onto the graph."""

    nodes: list[LayoutNode]
    ordering: list[list[str]]
    reversed_edges: set[tuple[str, str]] = field(default_factory=set)
    width: float = 0.0
    height: float = 0.0
    trace: OrderTrace | None = None

    def node(self, node_id: str) -> LayoutNode:
        for n in self.nodes:
            if n.id == node_id:
                return n
        raise KeyError(node_id)


# Prefix for synthetic nodes inserted on long edges.
DUMMY_PREFIX = "__dummy_"
