"""infraflow-layout: automatic layered layout for infrastructure diagrams."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from infraflow_layout.config import DEFAULT_CONFIG, LayoutConfig
from infraflow_layout.engine.convert import positioned_to_spec, relayout_nodes, spec_to_positioned
from infraflow_layout.engine.tiers import tier_of
from infraflow_layout.engine.types import LayoutEdge, LayoutResult, NodeData, Point, PositionedNode
from infraflow_layout.ir.spec import ConnectionSpec, NodeSpec, Spec
from infraflow_layout.types import FlowType, NodeCategory, NodeType, Tier

__all__ = [
    "ConnectionSpec",
    "FlowType",
    "LayoutConfig",
    "LayoutEdge",
    "LayoutResult",
    "NodeCategory",
    "NodeData",
    "NodeSpec",
    "NodeType",
    "Point",
    "PositionedNode",
    "Spec",
    "Tier",
    "layout",
    "relayout",
    "tier_of",
    "unlayout",
]


def layout(spec: Spec | Mapping[str, Any], config: LayoutConfig | None = None) -> LayoutResult:
    """Lay out a spec left to right.

    Args:
        spec: A Spec, or its JSON object form.
        config: Spacing overrides; None uses the defaults.

    Returns:
        One positioned node per spec node (input order) and one edge per
        connection.

    Raises:
        ValueError: If ``spec`` is a mapping that is not a usable spec.
    """
    if not isinstance(spec, Spec):
        spec = Spec.from_dict(spec)
    return spec_to_positioned(spec, config or DEFAULT_CONFIG)


def unlayout(
    nodes: Iterable[PositionedNode | Mapping[str, Any]],
    edges: Iterable[LayoutEdge | Mapping[str, Any]],
) -> Spec:
    """Convert positioned nodes and edges back to a Spec, dropping coordinates."""
    return positioned_to_spec(nodes, edges)


def relayout(
    nodes: Iterable[PositionedNode | Mapping[str, Any]],
    edges: Iterable[LayoutEdge | Mapping[str, Any]],
    config: LayoutConfig | None = None,
) -> list[PositionedNode]:
    """Recompute positions of existing nodes, keeping their data."""
    return relayout_nodes(nodes, edges, config or DEFAULT_CONFIG)
