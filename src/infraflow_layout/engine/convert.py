"""Conversion between abstract Specs and positioned nodes/edges.

``spec_to_positioned`` is the forward direction used for every layout call.
``positioned_to_spec`` turns rendered (possibly hand-edited) state back into
a Spec and never raises on malformed node data. ``relayout_nodes``
recomputes positions for nodes a host already holds.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import Any

from infraflow_layout.config import DEFAULT_CONFIG, LayoutConfig
from infraflow_layout.engine.layered import LayeredLayout
from infraflow_layout.engine.tiers import category_of, render_kind, tier_of
from infraflow_layout.engine.types import EdgeData, LayoutEdge, LayoutResult, NodeData, Point, PositionedNode
from infraflow_layout.ir.graph import SpecGraph
from infraflow_layout.ir.spec import ConnectionSpec, NodeSpec, Spec
from infraflow_layout.types import FlowType, NodeType

PLACEHOLDER_TYPE: NodeType = NodeType.User


def edge_id(source: str, target: str, index: int) -> str:
    return f"e-{source}-{target}-{index}"


def spec_to_positioned(spec: Spec, config: LayoutConfig = DEFAULT_CONFIG) -> LayoutResult:
    """Lay out ``spec`` and build one record per node and per connection.

    Nodes come back in input order. A repeated node id keeps its first
    declaration for layout; every record is still emitted. A spec without
    nodes yields no edges either.
    """
    if not spec.nodes:
        return LayoutResult(nodes=[], edges=[])

    graph = SpecGraph.from_spec(spec)
    placement = LayeredLayout().layout(graph, config)

    nodes: list[PositionedNode] = []
    for node in spec.nodes:
        position = placement.positions.get(node.id, Point(x=config.start_x, y=config.start_y))
        nodes.append(
            PositionedNode(
                id=node.id,
                kind=render_kind(node.type),
                position=position,
                data=NodeData(
                    label=node.label,
                    node_type=node.type,
                    category=category_of(node.type),
                    tier=tier_of(node.type, node.zone),
                    zone=node.zone,
                    description=node.description,
                ),
                width=config.node_width,
                height=config.node_height,
                layer=placement.assignment.layers.get(node.id, 0),
                order=placement.order_index.get(node.id, 0),
            )
        )

    edges = [_edge_record(conn, index) for index, conn in enumerate(spec.connections)]
    return LayoutResult(nodes=nodes, edges=edges)


def _edge_record(conn: ConnectionSpec, index: int) -> LayoutEdge:
    return LayoutEdge(
        id=edge_id(conn.source, conn.target, index),
        source=conn.source,
        target=conn.target,
        data=EdgeData(
            flow_type=conn.flow_type or FlowType.default(),
            label=conn.label,
            bidirectional=conn.bidirectional,
        ),
    )


# ─── Reverse conversion ──────────────────────────────────────────────────────


def _as_node(raw: PositionedNode | Mapping[str, Any]) -> PositionedNode:
    if isinstance(raw, PositionedNode):
        return raw
    return PositionedNode.from_mapping(raw if isinstance(raw, Mapping) else {})


def _as_edge(raw: LayoutEdge | Mapping[str, Any]) -> LayoutEdge:
    if isinstance(raw, LayoutEdge):
        return raw
    return LayoutEdge.from_mapping(raw if isinstance(raw, Mapping) else {})


def node_spec_of(node: PositionedNode) -> NodeSpec:
    """Semantic fields of a positioned node; coordinates are discarded."""
    data = node.data if isinstance(node.data, NodeData) else NodeData.from_mapping(node.data)
    if data is not None:
        return NodeSpec(
            id=node.id,
            type=data.node_type,
            label=data.label,
            tier=data.tier,
            zone=data.zone,
            description=data.description,
        )
    return NodeSpec(id=node.id, type=NodeType.parse(node.kind) or node.kind or PLACEHOLDER_TYPE, label=node.id)


def positioned_to_spec(
    nodes: Iterable[PositionedNode | Mapping[str, Any]],
    edges: Iterable[LayoutEdge | Mapping[str, Any]],
) -> Spec:
    """Rebuild a Spec from positioned nodes and edges."""
    node_specs = [node_spec_of(_as_node(n)) for n in nodes]
    connections: list[ConnectionSpec] = []
    for raw in edges:
        edge = _as_edge(raw)
        data = edge.data
        connections.append(
            ConnectionSpec(
                source=edge.source,
                target=edge.target,
                flow_type=data.flow_type if data is not None else None,
                label=data.label if data is not None else None,
                bidirectional=data.bidirectional if data is not None else False,
            )
        )
    return Spec(nodes=node_specs, connections=connections)


def relayout_nodes(
    nodes: Iterable[PositionedNode | Mapping[str, Any]],
    edges: Iterable[LayoutEdge | Mapping[str, Any]],
    config: LayoutConfig = DEFAULT_CONFIG,
) -> list[PositionedNode]:
    """Recompute positions for existing nodes, keeping everything else."""
    current = [_as_node(n) for n in nodes]
    spec = Spec(
        nodes=[node_spec_of(n) for n in current],
        connections=[ConnectionSpec(source=e.source, target=e.target) for e in map(_as_edge, edges)],
    )
    laid_out = {n.id: n for n in spec_to_positioned(spec, config).nodes}
    result: list[PositionedNode] = []
    for node in current:
        fresh = laid_out.get(node.id)
        if fresh is None:
            result.append(node)
            continue
        result.append(replace(node, position=fresh.position, layer=fresh.layer, order=fresh.order))
    return result
