"""Layered (left-to-right) graph layout engine.

Phases:
  1. Cycle detection (greedy-FAS, only to keep relaxation finite)
  2. Layer assignment (longest path from roots, tier fallback)
  3. Crossing minimization (single-pass barycenter)
  4. Coordinate assignment (columns by layer rank, rows centred)

Every phase allocates its own maps; nothing is cached between calls.
"""

from __future__ import annotations

import logging
from collections import deque
from itertools import combinations
from dataclasses import dataclass, field

import networkx as nx

from infraflow_layout.config import DEFAULT_CONFIG, LayoutConfig
from infraflow_layout.engine.tiers import tier_of
from infraflow_layout.engine.types import Point
from infraflow_layout.ir.graph import SpecGraph
from infraflow_layout.ir.spec import ConnectionSpec, NodeSpec
from infraflow_layout.types import Tier

logger = logging.getLogger(__name__)


# ─── Cycle Detection (Greedy-FAS) ────────────────────────────────────────────


def greedy_fas_ordering(graph: nx.DiGraph) -> list[str]:
    """Compute a node ordering using the greedy-FAS heuristic.

    Sinks are peeled to the back and sources to the front; when only cycles
    remain the node with the largest out-in degree difference goes to the
    front. Ties resolve by insertion order, so the ordering is reproducible.
    """
    active: dict[str, None] = dict.fromkeys(graph.nodes)
    out_deg: dict[str, int] = {}
    in_deg: dict[str, int] = {}
    for node in graph.nodes:
        out_deg[node] = graph.out_degree(node)
        in_deg[node] = graph.in_degree(node)

    s1: list[str] = []
    s2: list[str] = []

    def detach(node: str) -> None:
        del active[node]
        for succ in graph.successors(node):
            if succ in active:
                in_deg[succ] -= 1
        for pred in graph.predecessors(node):
            if pred in active:
                out_deg[pred] -= 1

    while active:
        changed = True
        while changed:
            changed = False
            sinks = [n for n in active if out_deg[n] == 0]
            if sinks:
                changed = True
                for sink in sinks:
                    detach(sink)
                    s2.append(sink)

        changed = True
        while changed:
            changed = False
            sources = [n for n in active if in_deg[n] == 0]
            if sources:
                changed = True
                for source in sources:
                    detach(source)
                    s1.append(source)

        if active:
            best = max(active, key=lambda n: out_deg[n] - in_deg[n])
            detach(best)
            s1.append(best)

    s2.reverse()
    s1.extend(s2)
    return s1


def remove_cycles(graph: nx.DiGraph) -> tuple[nx.DiGraph, set[tuple[str, str]]]:
    """Drop cycle-closing edges. Returns (dag, dropped_edges).

    An edge is dropped when it points backwards in the greedy-FAS ordering;
    self-loops are always dropped. A graph that is already a DAG comes back
    with the same edges.
    """
    if graph.number_of_nodes() == 0:
        return graph.copy(), set()

    ordering = greedy_fas_ordering(graph)
    position: dict[str, int] = {node: pos for pos, node in enumerate(ordering)}

    dropped: set[tuple[str, str]] = set()
    for src, tgt in graph.edges():
        if src == tgt or position[src] > position[tgt]:
            dropped.add((src, tgt))

    dag: nx.DiGraph = nx.DiGraph()
    for node_id in graph.nodes:
        dag.add_node(node_id, **graph.nodes[node_id])
    for src, tgt, edge_attrs in graph.edges(data=True):
        if (src, tgt) not in dropped:
            dag.add_edge(src, tgt, **edge_attrs)

    return dag, dropped


# ─── Layer Assignment ────────────────────────────────────────────────────────


def tier_fallback_layer(tier: Tier) -> int:
    return tier.rank


class LayerAssignment:
    """Node id -> layer, plus which nodes were placed by the tier fallback."""

    def __init__(
        self,
        layers: dict[str, int],
        fallback: set[str],
        dropped_edges: set[tuple[str, str]],
    ) -> None:
        self.layers = layers
        self.fallback = fallback
        self.dropped_edges = dropped_edges

    @property
    def layer_count(self) -> int:
        return (max(self.layers.values()) + 1) if self.layers else 0

    @classmethod
    def assign(cls, graph: SpecGraph) -> LayerAssignment:
        tiers: dict[str, Tier] = {}
        for nid in graph.node_ids():
            node = graph.node(nid)
            tiers[nid] = tier_of(node.type, node.zone)

        if graph.connection_count == 0:
            layers = {nid: tier_fallback_layer(tier) for nid, tier in tiers.items()}
            return cls(layers=layers, fallback=set(layers), dropped_edges=set())

        dag, dropped = remove_cycles(graph.digraph)
        for src, tgt in sorted(dropped):
            logger.debug("edge %s -> %s closes a cycle; ignored for layering", src, tgt)

        layers: dict[str, int] = {}
        queue: deque[str] = deque()
        for root in graph.roots():
            layers[root] = 0
            queue.append(root)

        while queue:
            current = queue.popleft()
            offered = layers[current] + 1
            for target in dag.successors(current):
                if layers.get(target, -1) < offered:
                    layers[target] = offered
                    queue.append(target)

        fallback: set[str] = set()
        for nid in graph.node_ids():
            if nid not in layers:
                layers[nid] = tier_fallback_layer(tiers[nid])
                fallback.add(nid)
                logger.debug("node %s unreachable from any root; tier %s", nid, tiers[nid].value)

        return cls(layers=layers, fallback=fallback, dropped_edges=dropped)


def assign_layers(nodes: list[NodeSpec], connections: list[ConnectionSpec]) -> dict[str, int]:
    """Map every node id to its layer (column) index."""
    return LayerAssignment.assign(SpecGraph.build(nodes, connections)).layers


# ─── Crossing Minimization ───────────────────────────────────────────────────


def group_layers(node_ids: list[str], layers: dict[str, int]) -> tuple[list[int], list[list[str]]]:
    """Group ids by layer, keeping input order inside each layer.

    Returns the sorted occupied layer keys and one id list per key.
    """
    grouped: dict[int, list[str]] = {}
    for nid in node_ids:
        grouped.setdefault(layers[nid], []).append(nid)
    keys = sorted(grouped)
    return keys, [grouped[k] for k in keys]


def reorder_layers(ordering: list[list[str]], graph: nx.DiGraph) -> list[list[str]]:
    """Sort each layer by the barycenter of its predecessors in the previous one.

    A predecessor joined by several parallel connections is weighted by
    their count. The first layer anchors the pass and keeps its order. Nodes with no
    predecessor in the previous layer sink to the bottom. The sort is stable,
    so ties keep their current relative order. Sorts in place and returns
    ``ordering``.
    """
    for idx in range(1, len(ordering)):
        prev: dict[str, float] = {nid: float(i) for i, nid in enumerate(ordering[idx - 1])}
        ordering[idx].sort(key=lambda n, p=prev: _barycenter(n, graph, p))
    return ordering


def _barycenter(node_id: str, graph: nx.DiGraph, prev_pos: dict[str, float]) -> float:
    if node_id not in graph:
        return float("inf")
    total = 0.0
    weight = 0
    # a parent counts once per connection to this node
    for parent, _, indices in graph.in_edges(node_id, data="indices"):
        if parent in prev_pos:
            count = len(indices) if indices else 1
            total += prev_pos[parent] * count
            weight += count
    if weight == 0:
        return float("inf")
    return total / weight


def count_crossings(ordering: list[list[str]], graph: nx.DiGraph) -> int:
    """Number of edge pairs that cross between adjacent layers."""
    total = 0
    for upper, lower in zip(ordering, ordering[1:]):
        lower_pos = {nid: row for row, nid in enumerate(lower)}
        segments = [
            (row, lower_pos[succ])
            for row, nid in enumerate(upper)
            if nid in graph
            for succ in graph.successors(nid)
            if succ in lower_pos
        ]
        total += sum(1 for (a1, b1), (a2, b2) in combinations(segments, 2) if (a1 - a2) * (b1 - b2) < 0)
    return total


# ─── Coordinate Assignment ───────────────────────────────────────────────────


def place(ordering: list[list[str]], config: LayoutConfig = DEFAULT_CONFIG) -> dict[str, Point]:
    """Assign (x, y) to every node.

    ``ordering`` holds occupied layers only, so the column index is the
    layer's rank and empty layer keys leave no blank column. Each layer is
    centred vertically on the axis of the tallest one.
    """
    max_in_layer = max((len(layer) for layer in ordering), default=1)
    center_y = config.start_y + (max(max_in_layer, 1) - 1) * config.vertical_gap / 2

    positions: dict[str, Point] = {}
    for col, layer_nodes in enumerate(ordering):
        x = config.start_x + col * config.horizontal_gap
        layer_height = (len(layer_nodes) - 1) * config.vertical_gap
        top = center_y - layer_height / 2
        for row, nid in enumerate(layer_nodes):
            positions[nid] = Point(x=x, y=top + row * config.vertical_gap)
    return positions


# ─── LayeredLayout Engine ────────────────────────────────────────────────────


@dataclass
class LayeredPlacement:
    """Everything the layered pipeline computed for one graph."""

    assignment: LayerAssignment
    layer_keys: list[int]
    ordering: list[list[str]]
    positions: dict[str, Point]
    order_index: dict[str, int] = field(default_factory=dict)

    def column_of(self, node_id: str) -> int:
        return self.layer_keys.index(self.assignment.layers[node_id])


class LayeredLayout:
    """Layered left-to-right layout engine."""

    def layout(self, graph: SpecGraph, config: LayoutConfig = DEFAULT_CONFIG) -> LayeredPlacement:
        assignment = LayerAssignment.assign(graph)
        keys, ordering = group_layers(graph.node_ids(), assignment.layers)
        reorder_layers(ordering, graph.digraph)
        if logger.isEnabledFor(logging.DEBUG):
            crossings = count_crossings(ordering, graph.digraph)
            logger.debug("%d columns, %d crossings after ordering", len(ordering), crossings)
        positions = place(ordering, config)
        order_index = {nid: row for layer_nodes in ordering for row, nid in enumerate(layer_nodes)}
        return LayeredPlacement(
            assignment=assignment,
            layer_keys=keys,
            ordering=ordering,
            positions=positions,
            order_index=order_index,
        )
