"""Abstract diagram spec: nodes, directed connections, and their JSON form.

These types are rendering-agnostic. A host builds a Spec (usually from JSON
through ``Spec.from_dict``) and hands it to the layout engine.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from infraflow_layout.types import FlowType, NodeType, Tier


@dataclass
class NodeSpec:
    id: str
    type: NodeType | str
    label: str
    tier: Tier | None = None
    zone: str | None = None
    description: str | None = None

    @property
    def type_name(self) -> str:
        """The wire string of ``type``, whether or not it is a known NodeType."""
        return self.type.value if isinstance(self.type, NodeType) else str(self.type)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> NodeSpec:
        if not isinstance(raw, Mapping):
            raise ValueError(f"node must be an object, got {type(raw).__name__}")
        node_id = raw.get("id")
        if not isinstance(node_id, str) or not node_id:
            raise ValueError(f"node is missing a string 'id': {dict(raw)!r}")
        raw_type = raw.get("type")
        node_type = NodeType.parse(raw_type) or (raw_type if isinstance(raw_type, str) else NodeType.default())
        label = raw.get("label")
        return cls(
            id=node_id,
            type=node_type,
            label=label if isinstance(label, str) else node_id,
            tier=Tier.parse(raw.get("tier")),
            zone=_opt_str(raw.get("zone")),
            description=_opt_str(raw.get("description")),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "type": self.type_name, "label": self.label}
        if self.tier is not None:
            out["tier"] = self.tier.value
        if self.zone is not None:
            out["zone"] = self.zone
        if self.description is not None:
            out["description"] = self.description
        return out


@dataclass
class ConnectionSpec:
    source: str
    target: str
    flow_type: FlowType | None = None
    label: str | None = None
    bidirectional: bool = False

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> ConnectionSpec:
        if not isinstance(raw, Mapping):
            raise ValueError(f"connection must be an object, got {type(raw).__name__}")
        source = raw.get("source")
        target = raw.get("target")
        if not isinstance(source, str) or not isinstance(target, str):
            raise ValueError(f"connection needs string 'source' and 'target': {dict(raw)!r}")
        return cls(
            source=source,
            target=target,
            flow_type=FlowType.parse(raw.get("flowType", raw.get("flow_type"))),
            label=_opt_str(raw.get("label")),
            bidirectional=bool(raw.get("bidirectional", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"source": self.source, "target": self.target}
        if self.flow_type is not None:
            out["flowType"] = self.flow_type.value
        if self.label is not None:
            out["label"] = self.label
        if self.bidirectional:
            out["bidirectional"] = True
        return out


@dataclass
class Spec:
    nodes: list[NodeSpec] = field(default_factory=list)
    connections: list[ConnectionSpec] = field(default_factory=list)
    name: str | None = None
    description: str | None = None

    def node_ids(self) -> list[str]:
        return [n.id for n in self.nodes]

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Spec:
        """Build a Spec from its JSON object form.

        Raises:
            ValueError: If the top level is not an object, ``nodes`` or
                ``connections`` is not a list, or a node or connection lacks
                its identifying fields.
        """
        if not isinstance(raw, Mapping):
            raise ValueError(f"spec must be an object, got {type(raw).__name__}")
        nodes = [NodeSpec.from_dict(n) for n in _list_field(raw, "nodes")]
        connections = [ConnectionSpec.from_dict(c) for c in _list_field(raw, "connections")]
        return cls(
            nodes=nodes,
            connections=connections,
            name=_opt_str(raw.get("name")),
            description=_opt_str(raw.get("description")),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.name is not None:
            out["name"] = self.name
        if self.description is not None:
            out["description"] = self.description
        out["nodes"] = [n.to_dict() for n in self.nodes]
        out["connections"] = [c.to_dict() for c in self.connections]
        return out


def _opt_str(value: object) -> str | None:
    return value if isinstance(value, str) else None


def _list_field(raw: Mapping[str, Any], key: str) -> list[Any]:
    value = raw.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list, got {type(value).__name__}")
    return value
