"""Sugiyama-style layered graph layout.

Phases:
  1. Cycle removal (greedy-FAS)
  2. Rank assignment (longest path)
  3. Dummy node insertion
  4. Initial order (depth-first)
  5. Crossing minimisation (barycenter sweeps)
  6. Coordinate assignment
  7. Write-back onto the caller's graph

``layout(graph)`` is the entry point; the phase functions are public so the
tests (and the ordering trace) can drive them one at a time.
"""

from __future__ import annotations

import copy
import logging
import math
from dataclasses import dataclass

import networkx as nx

from sugiyama_trace.graph import simple_digraph
from sugiyama_trace.layout.order_trace import OrderTrace
from sugiyama_trace.layout.types import (
    DUMMY_PREFIX,
    Direction,
    LayoutConfig,
    LayoutError,
    LayoutNode,
    LayoutResult,
)

logger = logging.getLogger(__name__)

# Barycenter sweeps: hard cap, and how many sweeps without improvement to allow.
MAX_SWEEPS: int = 24
MAX_STALE_SWEEPS: int = 4

# ─── Cycle Removal (Greedy-FAS) ───────────────────────────────────────────────


def greedy_fas_ordering(graph: nx.DiGraph) -> list[str]:
    """Compute a node ordering using the greedy-FAS heuristic.

    Returns a list of node ids in an ordering that minimizes back-edges.
    Nodes earlier in the ordering should have outgoing edges going forward.

    Algorithm (Eades, Lin, Smyth 1993):
    - Maintain dynamic in/out degree counters updated as nodes are removed.
    - Repeatedly:
        1. Move all sinks (out_deg == 0) to s2.
        2. Move all sources (in_deg == 0) to s1.
        3. Of remaining nodes in cycles, pick max (out - in) and add to s1.
    - Final ordering: s1 + reversed(s2).

    Candidates are always scanned in node insertion order and ties go to the
    earliest node, so the ordering does not depend on string hashing.
    Self-loops are ignored.
    """
    active: set[str] = set(graph.nodes)

    out_deg: dict[str, int] = {}
    in_deg: dict[str, int] = {}
    for node in graph.nodes:
        out_deg[node] = sum(1 for succ in graph.successors(node) if succ != node)
        in_deg[node] = sum(1 for pred in graph.predecessors(node) if pred != node)

    def in_insertion_order() -> list[str]:
        return [n for n in graph.nodes if n in active]

    s1: list[str] = []
    s2: list[str] = []

    while active:
        changed = True
        while changed:
            changed = False
            sinks = [n for n in in_insertion_order() if out_deg[n] == 0]
            if sinks:
                changed = True
                for sink in sinks:
                    active.remove(sink)
                    s2.append(sink)
                    for pred in graph.predecessors(sink):
                        if pred in active:
                            out_deg[pred] -= 1

        changed = True
        while changed:
            changed = False
            sources = [n for n in in_insertion_order() if in_deg[n] == 0]
            if sources:
                changed = True
                for source in sources:
                    active.remove(source)
                    s1.append(source)
                    for succ in graph.successors(source):
                        if succ in active:
                            in_deg[succ] -= 1

        if active:
            best = max(in_insertion_order(), key=lambda n: out_deg[n] - in_deg[n])
            active.remove(best)
            s1.append(best)
            for succ in graph.successors(best):
                if succ in active:
                    in_deg[succ] -= 1
            for pred in graph.predecessors(best):
                if pred in active:
                    out_deg[pred] -= 1

    s2.reverse()
    s1.extend(s2)
    return s1


def remove_cycles(graph: nx.DiGraph) -> tuple[nx.DiGraph, set[tuple[str, str]]]:
    """Remove cycles from a copy of the DiGraph using the greedy-FAS heuristic.

    Returns a tuple of:
    - new_graph: copy of graph with back-edges reversed (self-loops removed)
    - reversed_edges: set of (src_id, tgt_id) tuples that were reversed
      (identified relative to the ORIGINAL graph's edge directions)

    A reversed edge that lands on an existing edge is merged into it and its
    ``weight`` added.
    """
    if graph.number_of_nodes() == 0:
        return graph.copy(), set()

    ordering = greedy_fas_ordering(graph)
    position: dict[str, int] = {node: pos for pos, node in enumerate(ordering)}

    reversed_edges: set[tuple[str, str]] = set()
    for src, tgt in graph.edges():
        if src == tgt or position[src] > position[tgt]:
            reversed_edges.add((src, tgt))

    new_graph: nx.DiGraph = nx.DiGraph()
    for node_id in graph.nodes:
        new_graph.add_node(node_id, **graph.nodes[node_id])

    for src, tgt, edge_attrs in graph.edges(data=True):
        if src == tgt:
            continue
        if (src, tgt) in reversed_edges:
            src, tgt = tgt, src
        weight = edge_attrs.get("weight", 1)
        if new_graph.has_edge(src, tgt):
            new_graph[src][tgt]["weight"] += weight
        else:
            new_graph.add_edge(src, tgt, weight=weight)

    return new_graph, reversed_edges


# ─── Rank Assignment ──────────────────────────────────────────────────────────


class RankAssignment:
    """Result of rank assignment: each node is assigned a rank.

    Rank 0 is the first rank (top for TB, left for LR). Ranks are computed on
    the cycle-free copy of the graph produced by ``remove_cycles``.

    Attributes:
        ranks: Maps node id → rank.
        rank_count: Total number of ranks.
        dag: The cycle-free graph the ranks were computed on.
        reversed_edges: Edges reversed during cycle removal (as (src, tgt) pairs).
    """

    def __init__(
        self,
        ranks: dict[str, int],
        rank_count: int,
        dag: nx.DiGraph,
        reversed_edges: set[tuple[str, str]],
    ) -> None:
        self.ranks = ranks
        self.rank_count = rank_count
        self.dag = dag
        self.reversed_edges = reversed_edges

    @classmethod
    def assign(cls, graph: nx.DiGraph) -> RankAssignment:
        """Assign ranks using fixed-point iteration.

        For each edge u→v in the DAG, rank[v] = max(rank[v], rank[u]+1).
        Repeat until stable. Runs in O(V * E) worst case, fast in practice.
        """
        dag, reversed_edges = remove_cycles(graph)

        ranks: dict[str, int] = {node_id: 0 for node_id in graph.nodes}

        changed = True
        while changed:
            changed = False
            for src, tgt in dag.edges():
                if ranks[tgt] < ranks[src] + 1:
                    ranks[tgt] = ranks[src] + 1
                    changed = True

        rank_count = (max(ranks.values()) + 1) if ranks else 0
        return cls(ranks=ranks, rank_count=rank_count, dag=dag, reversed_edges=reversed_edges)


# ─── Dummy Node Insertion ──────────────────────────────────────────────────────


@dataclass
class DummyChain:
    """The dummy nodes standing in for one long DAG edge, top to bottom."""

    original_src: str
    original_tgt: str
    dummy_ids: list[str]


@dataclass
class AugmentedGraph:
    """A DAG in which every edge connects adjacent ranks.

    This is a pre-condition for crossing minimisation and coordinate
    assignment.
    """

    graph: nx.DiGraph
    ranks: dict[str, int]
    rank_count: int
    dummy_chains: list[DummyChain]

    def __post_init__(self) -> None:
        self._dummies: set[str] = {d for chain in self.dummy_chains for d in chain.dummy_ids}

    def is_dummy(self, node_id: object) -> bool:
        # Membership, not the id prefix: caller ids may look like dummies.
        return node_id in self._dummies


def insert_dummy_nodes(ra: RankAssignment) -> AugmentedGraph:
    """Insert dummy nodes into the cycle-free, ranked graph.

    For each edge (u → v) where rank[v] - rank[u] > 1, the edge is replaced by
    the chain ``u → d₁ → … → dₖ → v`` where each dᵢ lives in rank
    ``rank[u] + i``. Chain segments inherit the original edge's weight.
    Dummy ids never reuse an id already present in the DAG.
    """
    dag = ra.dag
    g: nx.DiGraph = nx.DiGraph()
    g.add_nodes_from(dag.nodes)

    ranks: dict[str, int] = copy.copy(ra.ranks)
    chains: list[DummyChain] = []

    for src_id, tgt_id, attrs in list(dag.edges(data=True)):
        weight = attrs.get("weight", 1)
        span = ranks[tgt_id] - ranks[src_id]

        if span <= 1:
            g.add_edge(src_id, tgt_id, weight=weight)
            continue

        this_edge = len(chains)
        dummy_ids: list[str] = []
        chain_prev = src_id
        for i in range(span - 1):
            dummy_id = f"{DUMMY_PREFIX}{this_edge}_{i}"
            while dummy_id in g:
                dummy_id += "_"
            g.add_node(dummy_id)
            ranks[dummy_id] = ranks[src_id] + i + 1
            dummy_ids.append(dummy_id)
            g.add_edge(chain_prev, dummy_id, weight=weight)
            chain_prev = dummy_id
        g.add_edge(chain_prev, tgt_id, weight=weight)

        chains.append(DummyChain(original_src=src_id, original_tgt=tgt_id, dummy_ids=dummy_ids))

    rank_count = (max(ranks.values()) + 1) if ranks else 0
    return AugmentedGraph(graph=g, ranks=ranks, rank_count=rank_count, dummy_chains=chains)


# ─── Ordering ─────────────────────────────────────────────────────────────────


def init_order(aug: AugmentedGraph) -> list[list[str]]:
    """Initial per-rank order by depth-first traversal.

    Start nodes are taken in rank order (insertion order within a rank); each
    node is appended to its rank the first time it is visited.
    """
    ordering: list[list[str]] = [[] for _ in range(aug.rank_count)]
    visited: set[str] = set()

    starts = sorted(aug.graph.nodes, key=lambda n: aug.ranks[n])
    for start in starts:
        stack = [start]
        while stack:
            node_id = stack.pop()
            if node_id in visited:
                continue
            visited.add(node_id)
            ordering[aug.ranks[node_id]].append(node_id)
            # Reversed so the first successor is visited first.
            stack.extend(reversed(list(aug.graph.successors(node_id))))

    return ordering


def _barycenter(
    node_id: str,
    graph: nx.DiGraph,
    neighbor_pos: dict[str, float],
    direction: str,
) -> float | None:
    """Weighted average position of a node's neighbours in the adjacent rank.

    direction: "incoming" to look at predecessors, "outgoing" for successors.
    Returns None if the node has no neighbours in the adjacent rank.
    """
    if direction == "incoming":
        edges = [(nb, graph[nb][node_id].get("weight", 1)) for nb in graph.predecessors(node_id)]
    else:
        edges = [(nb, graph[node_id][nb].get("weight", 1)) for nb in graph.successors(node_id)]

    total = 0.0
    weight_sum = 0
    for nb, weight in edges:
        if nb in neighbor_pos:
            total += neighbor_pos[nb] * weight
            weight_sum += weight
    if weight_sum == 0:
        return None
    return total / weight_sum


def _sort_rank(nodes: list[str], graph: nx.DiGraph, fixed: list[str], direction: str) -> list[str]:
    """Reorder one rank by barycenter against the fixed adjacent rank.

    Nodes without neighbours in the fixed rank keep their current index as
    their sort key, so they stay roughly in place.
    """
    fixed_pos: dict[str, float] = {nid: float(i) for i, nid in enumerate(fixed)}
    keyed = []
    for idx, nid in enumerate(nodes):
        bc = _barycenter(nid, graph, fixed_pos, direction)
        keyed.append((float(idx) if bc is None else bc, idx, nid))
    keyed.sort()
    return [nid for _, _, nid in keyed]


def count_crossings(ordering: list[list[str]], graph: nx.DiGraph) -> int:
    """Count weighted edge crossings between consecutive ranks."""
    total = 0
    for r in range(len(ordering) - 1):
        tgt_pos: dict[str, int] = {nid: i for i, nid in enumerate(ordering[r + 1])}
        edges: list[tuple[int, int, int]] = []
        for sp, src_id in enumerate(ordering[r]):
            if src_id in graph:
                for nb in graph.successors(src_id):
                    if nb in tgt_pos:
                        edges.append((sp, tgt_pos[nb], graph[src_id][nb].get("weight", 1)))
        for i in range(len(edges)):
            for j in range(i + 1, len(edges)):
                ei, ej = edges[i], edges[j]
                if (ei[0] < ej[0] and ei[1] > ej[1]) or (ei[0] > ej[0] and ei[1] < ej[1]):
                    total += ei[2] * ej[2]
    return total


def minimise_crossings(aug: AugmentedGraph, trace: OrderTrace | None = None) -> list[list[str]]:
    """Minimise edge crossings with alternating barycenter sweeps.

    Even sweeps go down (each rank sorted against the rank above), odd sweeps
    go up. The ordering with the fewest crossings seen is returned; sweeping
    stops after ``MAX_STALE_SWEEPS`` sweeps without improvement.
    """
    ordering = init_order(aug)
    best = copy.deepcopy(ordering)
    best_cc = count_crossings(ordering, aug.graph)
    if trace is not None:
        trace.record("init", ordering, best_cc)

    stale = 0
    for sweep in range(MAX_SWEEPS):
        if stale >= MAX_STALE_SWEEPS:
            break
        if sweep % 2 == 0:
            label = f"sweep {sweep} (down)"
            for r in range(1, aug.rank_count):
                ordering[r] = _sort_rank(ordering[r], aug.graph, ordering[r - 1], "incoming")
        else:
            label = f"sweep {sweep} (up)"
            for r in range(aug.rank_count - 2, -1, -1):
                ordering[r] = _sort_rank(ordering[r], aug.graph, ordering[r + 1], "outgoing")

        cc = count_crossings(ordering, aug.graph)
        if trace is not None:
            trace.record(label, ordering, cc)

        if cc < best_cc:
            best = copy.deepcopy(ordering)
            best_cc = cc
            stale = 0
        else:
            stale += 1

    if trace is not None:
        trace.record("best", best, best_cc)
    return best


# ─── Coordinate Assignment ────────────────────────────────────────────────────


def assign_coordinates(
    ordering: list[list[str]],
    aug: AugmentedGraph,
    sizes: dict[str, tuple[float, float]],
    config: LayoutConfig,
) -> list[LayoutNode]:
    """Assign centre coordinates to every node in the augmented graph.

    Placement is always done top-down; for LR/RL width and height are swapped
    going in and the axes swapped coming out. Dummy nodes (absent from
    ``sizes``) are zero-sized.
    """
    horizontal = config.is_horizontal

    def dims(node_id: str) -> tuple[float, float]:
        w, h = sizes.get(node_id, (0.0, 0.0))
        return (h, w) if horizontal else (w, h)

    def sep(node_id: str) -> float:
        return config.edgesep if aug.is_dummy(node_id) else config.nodesep

    rank_height: list[float] = [max((dims(nid)[1] for nid in rank), default=0.0) for rank in ordering]
    rank_top: list[float] = []
    y = 0.0
    for h in rank_height:
        rank_top.append(y)
        y += h + config.ranksep
    total_height = y - config.ranksep if ordering else 0.0

    # Widths of each rank, for centring on the widest one.
    rank_width: list[float] = []
    for rank in ordering:
        w_sum = sum(dims(nid)[0] for nid in rank)
        gaps = sum((sep(a) + sep(b)) / 2 for a, b in zip(rank, rank[1:]))
        rank_width.append(w_sum + gaps)
    centre = max(rank_width, default=0.0) / 2

    # x holds the left edge until the final pass.
    nodes: list[LayoutNode] = []
    for r, rank in enumerate(ordering):
        x = centre - rank_width[r] / 2
        for order, node_id in enumerate(rank):
            width, height = dims(node_id)
            if order > 0:
                x += (sep(rank[order - 1]) + sep(node_id)) / 2
            nodes.append(
                LayoutNode(
                    id=node_id,
                    rank=r,
                    order=order,
                    x=x,
                    y=rank_top[r] + (rank_height[r] - height) / 2,
                    width=width,
                    height=height,
                    dummy=aug.is_dummy(node_id),
                )
            )
            x += width

    by_id: dict[str, LayoutNode] = {n.id: n for n in nodes}

    def mid(n: LayoutNode) -> float:
        return n.x + n.width / 2

    def shift_rank(r: int, neighbours: str) -> None:
        sum_self = 0.0
        sum_other = 0.0
        count = 0
        for node_id in ordering[r]:
            others = aug.graph.predecessors(node_id) if neighbours == "up" else aug.graph.successors(node_id)
            for other in others:
                if aug.is_dummy(other):
                    continue
                sum_self += mid(by_id[node_id])
                sum_other += mid(by_id[other])
                count += 1
        if count == 0:
            return
        shift = (sum_other - sum_self) / count
        if abs(shift) > config.nodesep:
            return
        for node_id in ordering[r]:
            by_id[node_id].x += shift

    # Align each rank under its parents, then over its children.
    for r in range(1, len(ordering)):
        shift_rank(r, "up")
    for r in range(len(ordering) - 2, -1, -1):
        shift_rank(r, "down")

    min_x = min((n.x for n in nodes), default=0.0)
    for n in nodes:
        n.x = n.x - min_x + n.width / 2
        n.y = n.y + n.height / 2

    if config.rankdir in (Direction.BT, Direction.RL):
        for n in nodes:
            n.y = total_height - n.y
    if horizontal:
        for n in nodes:
            n.x, n.y = n.y, n.x
            n.width, n.height = n.height, n.width

    return nodes


# ─── Full Layout ──────────────────────────────────────────────────────────────


def _node_sizes(graph: nx.MultiDiGraph) -> dict[str, tuple[float, float]]:
    sizes: dict[str, tuple[float, float]] = {}
    for node_id, attrs in graph.nodes(data=True):
        dims = []
        for key in ("width", "height"):
            value = attrs.get(key, 0)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value) or value < 0:
                raise LayoutError(f"Node {node_id!r} has invalid {key} {value!r}; expected a finite non-negative number")
            dims.append(float(value))
        sizes[node_id] = (dims[0], dims[1])
    return sizes


def _edge_points(
    graph: nx.MultiDiGraph,
    nodes: dict[str, LayoutNode],
    aug: AugmentedGraph,
    reversed_edges: set[tuple[str, str]],
) -> None:
    """Set ``points`` on every caller edge: source centre, dummies, target centre."""
    chains: dict[tuple[str, str], list[str]] = {(c.original_src, c.original_tgt): c.dummy_ids for c in aug.dummy_chains}

    for src, tgt, attrs in graph.edges(data=True):
        if src == tgt:
            attrs["points"] = []
            continue
        if (src, tgt) in reversed_edges:
            path = [tgt, *chains.get((tgt, src), []), src]
            path.reverse()
        else:
            path = [src, *chains.get((src, tgt), []), tgt]
        attrs["points"] = [(nodes[nid].x, nodes[nid].y) for nid in path]


def layout(
    graph: nx.MultiDiGraph,
    config: LayoutConfig | None = None,
    trace: OrderTrace | None = None,
) -> LayoutResult:
    """Lay out ``graph`` in place.

    Every node gets ``x``, ``y`` (centre), ``rank`` and ``order``; every edge
    gets ``points``; the graph gets ``width`` and ``height``. ``config``
    defaults to the graph's own attributes. Raises ``LayoutError`` for a bad
    rankdir or node size.
    """
    if config is None:
        config = LayoutConfig.from_graph(graph)
    if trace is None:
        trace = OrderTrace()
    sizes = _node_sizes(graph)

    if graph.number_of_nodes() == 0:
        graph.graph.update(width=0.0, height=0.0)
        return LayoutResult(nodes=[], ordering=[], trace=trace)

    ra = RankAssignment.assign(simple_digraph(graph))
    aug = insert_dummy_nodes(ra)
    ordering = minimise_crossings(aug, trace)
    nodes = assign_coordinates(ordering, aug, sizes, config)

    width = max(n.x + n.width / 2 for n in nodes)
    height = max(n.y + n.height / 2 for n in nodes)

    by_id = {n.id: n for n in nodes}
    for node_id, attrs in graph.nodes(data=True):
        ln = by_id[node_id]
        attrs.update(x=ln.x, y=ln.y, rank=ln.rank, order=ln.order)
    _edge_points(graph, by_id, aug, ra.reversed_edges)
    graph.graph.update(width=width, height=height)

    logger.debug(
        "laid out %d nodes in %d ranks (%d dummy nodes, %d reversed edges, rankdir=%s)",
        graph.number_of_nodes(),
        ra.rank_count,
        len(nodes) - graph.number_of_nodes(),
        len(ra.reversed_edges),
        config.rankdir.value,
    )

    return LayoutResult(
        nodes=nodes,
        ordering=ordering,
        reversed_edges=ra.reversed_edges,
        width=width,
        height=height,
        trace=trace,
    )
