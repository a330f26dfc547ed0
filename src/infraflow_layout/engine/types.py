"""Layout types shared by the layout phases, the converters, and the CLI."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from infraflow_layout.types import FlowType, NodeCategory, NodeType, Tier


@dataclass(frozen=True)
class Point:
    """A 2D point in rendering coordinates."""

    x: float
    y: float


@dataclass
class NodeData:
    """Semantic payload attached to a positioned node.

    ``metadata`` is opaque to the layout engine and passed through unchanged.
    """

    label: str
    node_type: NodeType | str
    category: NodeCategory
    tier: Tier | None = None
    zone: str | None = None
    description: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, raw: object) -> NodeData | None:
        """Recover NodeData from a loosely typed mapping.

        Returns None unless ``label``, ``nodeType`` (or ``node_type``) and
        ``category`` are all strings.
        """
        if not isinstance(raw, Mapping):
            return None
        label = raw.get("label")
        node_type = raw.get("nodeType", raw.get("node_type"))
        category = raw.get("category")
        if not (isinstance(label, str) and isinstance(node_type, str) and isinstance(category, str)):
            return None
        zone = raw.get("zone")
        description = raw.get("description")
        metadata = raw.get("metadata")
        return cls(
            label=label,
            node_type=NodeType.parse(node_type) or node_type,
            category=_parse_category(category),
            tier=Tier.parse(raw.get("tier")),
            zone=zone if isinstance(zone, str) else None,
            description=description if isinstance(description, str) else None,
            metadata=dict(metadata) if isinstance(metadata, Mapping) else {},
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "label": self.label,
            "nodeType": self.node_type.value if isinstance(self.node_type, NodeType) else self.node_type,
            "category": self.category.value,
        }
        if self.tier is not None:
            out["tier"] = self.tier.value
        if self.zone is not None:
            out["zone"] = self.zone
        if self.description is not None:
            out["description"] = self.description
        if self.metadata:
            out["metadata"] = dict(self.metadata)
        return out


@dataclass
class PositionedNode:
    """A node placed by the layout engine."""

    id: str
    kind: str
    position: Point
    data: NodeData | None
    width: float = 0
    height: float = 0
    layer: int = 0
    order: int = 0

    @property
    def x(self) -> float:
        return self.position.x

    @property
    def y(self) -> float:
        return self.position.y

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> PositionedNode:
        """Build a node from its JSON form; semantic data may come back None."""
        position = raw.get("position")
        if isinstance(position, Mapping):
            point = Point(x=_num(position.get("x")), y=_num(position.get("y")))
        else:
            point = Point(x=0, y=0)
        kind = raw.get("type")
        return cls(
            id=str(raw.get("id", "")),
            kind=kind if isinstance(kind, str) else "",
            position=point,
            data=NodeData.from_mapping(raw.get("data")),
            width=_num(raw.get("width")),
            height=_num(raw.get("height")),
            layer=int(_num(raw.get("layer"))),
            order=int(_num(raw.get("order"))),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "type": self.kind,
            "position": {"x": self.position.x, "y": self.position.y},
            "width": self.width,
            "height": self.height,
            "layer": self.layer,
            "order": self.order,
        }
        if self.data is not None:
            out["data"] = self.data.to_dict()
        return out


@dataclass
class EdgeData:
    flow_type: FlowType = FlowType.Request
    label: str | None = None
    animated: bool = True
    bidirectional: bool = False

    @classmethod
    def from_mapping(cls, raw: object) -> EdgeData | None:
        if not isinstance(raw, Mapping):
            return None
        label = raw.get("label")
        return cls(
            flow_type=FlowType.parse(raw.get("flowType", raw.get("flow_type"))) or FlowType.default(),
            label=label if isinstance(label, str) else None,
            animated=bool(raw.get("animated", True)),
            bidirectional=bool(raw.get("bidirectional", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"flowType": self.flow_type.value, "animated": self.animated}
        if self.label is not None:
            out["label"] = self.label
        if self.bidirectional:
            out["bidirectional"] = True
        return out


@dataclass
class LayoutEdge:
    """A render edge; one per input connection, dangling ones included."""

    id: str
    source: str
    target: str
    kind: str = "animated"
    data: EdgeData | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> LayoutEdge:
        kind = raw.get("type")
        return cls(
            id=str(raw.get("id", "")),
            source=str(raw.get("source", "")),
            target=str(raw.get("target", "")),
            kind=kind if isinstance(kind, str) else "animated",
            data=EdgeData.from_mapping(raw.get("data")),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "source": self.source, "target": self.target, "type": self.kind}
        if self.data is not None:
            out["data"] = self.data.to_dict()
        return out


@dataclass
class LayoutResult:
    """Self-contained layout output — everything renderers need."""

    nodes: list[PositionedNode] = field(default_factory=list)
    edges: list[LayoutEdge] = field(default_factory=list)

    def __iter__(self):
        # Allows ``nodes, edges = layout(spec)``.
        return iter((self.nodes, self.edges))

    def node(self, node_id: str) -> PositionedNode | None:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> LayoutResult:
        if not isinstance(raw, Mapping):
            raise ValueError(f"layout must be an object, got {type(raw).__name__}")
        nodes = [PositionedNode.from_mapping(n) for n in _entries(raw, "nodes") if isinstance(n, Mapping)]
        edges = [LayoutEdge.from_mapping(e) for e in _entries(raw, "edges") if isinstance(e, Mapping)]
        return cls(nodes=nodes, edges=edges)


def _entries(raw: Mapping[str, Any], key: str) -> list[Any]:
    value = raw.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list, got {type(value).__name__}")
    return value


def _parse_category(value: str) -> NodeCategory:
    try:
        return NodeCategory(value)
    except ValueError:
        return NodeCategory.External


def _num(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    return value
