"""Layout engine and public API."""

from __future__ import annotations

from infraflow_layout.engine.convert import (
    PLACEHOLDER_TYPE,
    edge_id,
    node_spec_of,
    positioned_to_spec,
    relayout_nodes,
    spec_to_positioned,
)
from infraflow_layout.engine.layered import (
    LayerAssignment,
    LayeredLayout,
    LayeredPlacement,
    assign_layers,
    count_crossings,
    greedy_fas_ordering,
    group_layers,
    place,
    remove_cycles,
    reorder_layers,
    tier_fallback_layer,
)
from infraflow_layout.engine.pipeline import full_layout, full_layout_with_config
from infraflow_layout.engine.tiers import (
    category_of,
    render_kind,
    tier_label,
    tier_of,
    tier_rank,
)
from infraflow_layout.engine.types import EdgeData, LayoutEdge, LayoutResult, NodeData, Point, PositionedNode

__all__ = [
    "PLACEHOLDER_TYPE",
    "EdgeData",
    "LayerAssignment",
    "LayeredLayout",
    "LayeredPlacement",
    "LayoutEdge",
    "LayoutResult",
    "NodeData",
    "Point",
    "PositionedNode",
    "assign_layers",
    "category_of",
    "count_crossings",
    "edge_id",
    "full_layout",
    "full_layout_with_config",
    "greedy_fas_ordering",
    "group_layers",
    "node_spec_of",
    "place",
    "positioned_to_spec",
    "relayout_nodes",
    "remove_cycles",
    "render_kind",
    "reorder_layers",
    "spec_to_positioned",
    "tier_fallback_layer",
    "tier_label",
    "tier_of",
    "tier_rank",
]
