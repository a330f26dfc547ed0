"""Tests for the public API and engine/convert.py — layout, unlayout, relayout.

Covers the reference scenarios (chain, fan-out, tier fallback, dangling edge)
and the round-trip, stability and no-loss properties.
"""

from __future__ import annotations

import math
from collections import Counter

import pytest

from infraflow_layout import LayoutConfig, layout, relayout, unlayout
from infraflow_layout.engine.convert import edge_id, node_spec_of
from infraflow_layout.engine.pipeline import full_layout, full_layout_with_config
from infraflow_layout.engine.types import LayoutEdge, LayoutResult, NodeData, Point, PositionedNode
from infraflow_layout.ir.spec import ConnectionSpec, NodeSpec, Spec
from infraflow_layout.types import FlowType, NodeCategory, NodeType, Tier

# ─── Helpers ──────────────────────────────────────────────────────────────────


def _node(id: str, type: NodeType | str = NodeType.WebServer, **kwargs) -> NodeSpec:
    return NodeSpec(id=id, type=type, label=kwargs.pop("label", id.upper()), **kwargs)


def make_spec(nodes: list[NodeSpec], *edges: tuple[str, str]) -> Spec:
    return Spec(nodes=nodes, connections=[ConnectionSpec(source=s, target=t) for s, t in edges])


def three_tier() -> Spec:
    return Spec(
        nodes=[
            _node("user", NodeType.User),
            _node("fw", NodeType.Firewall, zone="dmz"),
            _node("lb", NodeType.LoadBalancer),
            _node("web1", NodeType.WebServer),
            _node("web2", NodeType.WebServer),
            _node("db", NodeType.DbServer, description="primary"),
        ],
        connections=[
            ConnectionSpec(source="user", target="fw", flow_type=FlowType.Encrypted, label="https"),
            ConnectionSpec(source="fw", target="lb"),
            ConnectionSpec(source="lb", target="web1"),
            ConnectionSpec(source="lb", target="web2"),
            ConnectionSpec(source="web1", target="db"),
            ConnectionSpec(source="web2", target="db"),
            ConnectionSpec(source="web1", target="db", flow_type=FlowType.Sync),
        ],
    )


def pairs(spec: Spec) -> Counter:
    return Counter((c.source, c.target) for c in spec.connections)


# ─── Scenarios ────────────────────────────────────────────────────────────────


class TestScenarios:
    def test_chain(self):
        result = layout(make_spec([_node("a"), _node("b"), _node("c")], ("a", "b"), ("b", "c")))
        a, b, c = (result.node(n) for n in "abc")
        assert [a.layer, b.layer, c.layer] == [0, 1, 2]
        assert a.x < b.x < c.x
        assert a.y == b.y == c.y

    def test_fan_out(self):
        result = layout(make_spec([_node("a"), _node("b"), _node("c")], ("a", "b"), ("a", "c")))
        a, b, c = (result.node(n) for n in "abc")
        assert b.layer == c.layer == 1
        assert b.x == c.x
        assert b.y != c.y
        assert a.y - b.y == c.y - a.y

    def test_no_connections_orders_by_tier(self):
        result = layout(
            Spec(nodes=[_node("ext", NodeType.User), _node("data", NodeType.DbServer), _node("dmz", NodeType.Firewall)])
        )
        ext, data, dmz = (result.node(n) for n in ("ext", "data", "dmz"))
        assert ext.x < dmz.x < data.x

    def test_dangling_edge(self):
        spec = make_spec([_node("a"), _node("b")], ("a", "b"), ("a", "ghost"))
        result = layout(spec)
        assert [n.id for n in result.nodes] == ["a", "b"]
        assert result.node("a").layer == 0
        assert result.node("b").layer == 1
        assert [e.id for e in result.edges] == ["e-a-b-0", "e-a-ghost-1"]


# ─── Forward conversion ───────────────────────────────────────────────────────


class TestSpecToPositioned:
    def test_empty_spec(self):
        result = layout(Spec())
        assert result.nodes == []
        assert result.edges == []

    def test_one_node_per_input_in_order(self):
        spec = three_tier()
        result = layout(spec)
        assert [n.id for n in result.nodes] == spec.node_ids()

    def test_duplicate_id_not_dropped(self):
        spec = Spec(nodes=[_node("a"), _node("a", NodeType.DbServer)])
        result = layout(spec)
        assert len(result.nodes) == 2
        assert result.nodes[0].position == result.nodes[1].position

    def test_node_data(self):
        result = layout(Spec(nodes=[_node("fw", NodeType.Firewall, label="My Firewall", zone="edge")]))
        node = result.nodes[0]
        assert node.kind == "firewall"
        assert node.data == NodeData(
            label="My Firewall",
            node_type=NodeType.Firewall,
            category=NodeCategory.Security,
            tier=Tier.Dmz,
            zone="edge",
        )

    def test_tier_metadata_ignores_explicit_tier(self):
        result = layout(Spec(nodes=[_node("w", NodeType.WebServer, zone="dmz", tier=Tier.Data)]))
        assert result.node("w").data.tier == Tier.Dmz

    def test_zone_sets_tier_metadata(self):
        result = layout(
            Spec(nodes=[_node("s1", NodeType.WebServer, zone="dmz"), _node("s2", NodeType.WebServer, zone="internal")])
        )
        assert result.node("s1").data.tier == Tier.Dmz
        assert result.node("s2").data.tier == Tier.Internal

    def test_render_kind(self):
        result = layout(Spec(nodes=[_node("w", NodeType.WebServer), _node("s", NodeType.ObjectStorage)]))
        assert result.node("w").kind == "webServer"
        assert result.node("s").kind == "storage"

    def test_node_size_from_config(self):
        result = layout(Spec(nodes=[_node("a")]), LayoutConfig(node_width=50, node_height=20))
        assert (result.nodes[0].width, result.nodes[0].height) == (50, 20)

    def test_custom_start(self):
        result = layout(Spec(nodes=[_node("u", NodeType.User)]), LayoutConfig(start_x=500, start_y=500))
        assert result.nodes[0].position == Point(x=500, y=500)

    def test_edge_records(self):
        result = layout(three_tier())
        first = result.edges[0]
        assert first.id == "e-user-fw-0"
        assert first.kind == "animated"
        assert first.data.flow_type == FlowType.Encrypted
        assert first.data.label == "https"
        assert first.data.animated is True
        assert result.edges[1].data.flow_type == FlowType.Request

    def test_parallel_edges_get_distinct_ids(self):
        ids = [e.id for e in layout(three_tier()).edges]
        assert len(set(ids)) == len(ids)
        assert "e-web1-db-4" in ids
        assert "e-web1-db-6" in ids

    def test_edge_id_format(self):
        assert edge_id("a", "b", 3) == "e-a-b-3"

    def test_accepts_mapping(self):
        result = layout({"nodes": [{"id": "a", "type": "user", "label": "A"}], "connections": []})
        assert result.nodes[0].data.label == "A"

    def test_result_unpacks(self):
        nodes, edges = layout(three_tier())
        assert len(nodes) == 6
        assert len(edges) == 7

    def test_unknown_type_laid_out_as_internal(self):
        result = layout(Spec(nodes=[_node("q", "quantum-router"), _node("u", NodeType.User)]))
        assert result.node("q").data.tier == Tier.Internal
        assert result.node("q").kind == "quantum-router"
        assert result.node("u").x < result.node("q").x


# ─── Properties ───────────────────────────────────────────────────────────────


class TestProperties:
    def test_layer_monotonicity(self):
        result = layout(three_tier())
        layers = {n.id: n.layer for n in result.nodes}
        for edge in result.edges:
            assert layers[edge.target] > layers[edge.source]

    def test_stability(self):
        assert layout(three_tier()).to_dict() == layout(three_tier()).to_dict()

    def test_round_trip(self):
        spec = three_tier()
        result = layout(spec)
        back = unlayout(result.nodes, result.edges)
        assert set(back.node_ids()) == set(spec.node_ids())
        assert pairs(back) == pairs(spec)

    def test_round_trip_with_dangling_edge(self):
        spec = make_spec([_node("a")], ("a", "ghost"))
        back = unlayout(*layout(spec))
        assert pairs(back) == pairs(spec)

    def test_round_trip_through_json(self):
        spec = three_tier()
        raw = layout(spec).to_dict()
        back = unlayout(raw["nodes"], raw["edges"])
        assert set(back.node_ids()) == set(spec.node_ids())
        assert pairs(back) == pairs(spec)
        assert back.nodes[5].description == "primary"

    def test_no_node_loss(self):
        for spec in (Spec(), three_tier(), make_spec([_node("a")], ("a", "a"))):
            assert len(layout(spec).nodes) == len(spec.nodes)


# ─── Reverse conversion ───────────────────────────────────────────────────────


class TestPositionedToSpec:
    def test_semantic_fields_recovered(self):
        spec = unlayout(*layout(three_tier()))
        fw = spec.nodes[1]
        assert fw.type == NodeType.Firewall
        assert fw.label == "FW"
        assert fw.zone == "dmz"
        assert fw.tier == Tier.Dmz
        assert spec.connections[0].flow_type == FlowType.Encrypted
        assert spec.connections[0].label == "https"

    def test_missing_data_uses_kind(self):
        node = PositionedNode(id="r1", kind="router", position=Point(x=5, y=5), data=None)
        assert node_spec_of(node) == NodeSpec(id="r1", type=NodeType.Router, label="r1")

    def test_missing_data_and_kind_uses_placeholder(self):
        node = PositionedNode(id="x", kind="", position=Point(x=0, y=0), data=None)
        assert node_spec_of(node).type == NodeType.User

    def test_malformed_mapping_data(self):
        spec = unlayout(
            [
                {"id": "a", "type": "firewall", "position": {"x": 1, "y": 2}, "data": {"label": 3}},
                {"id": "b", "data": "garbage"},
                {"id": "c", "type": "cache", "data": {"label": "C", "nodeType": "cache", "category": "storage"}},
            ],
            [{"id": "e", "source": "a", "target": "b"}],
        )
        assert [n.type for n in spec.nodes] == [NodeType.Firewall, NodeType.User, NodeType.Cache]
        assert [n.label for n in spec.nodes] == ["a", "b", "C"]
        assert spec.connections == [ConnectionSpec(source="a", target="b")]

    def test_duck_typed_data_on_node(self):
        node = PositionedNode(
            id="d",
            kind="dbServer",
            position=Point(x=0, y=0),
            data={"label": "DB", "nodeType": "db-server", "category": "compute", "zone": "data"},  # type: ignore[arg-type]
        )
        spec = node_spec_of(node)
        assert spec.type == NodeType.DbServer
        assert spec.zone == "data"

    def test_non_mapping_entries_tolerated(self):
        spec = unlayout([None], [None])  # type: ignore[list-item]
        assert len(spec.nodes) == 1
        assert len(spec.connections) == 1

    def test_non_finite_numbers_tolerated(self):
        nodes = [
            {"id": "a", "type": "firewall", "layer": math.inf, "order": math.nan},
            {"id": "b", "type": "x", "position": {"x": -math.inf, "y": math.nan}, "width": math.inf},
        ]
        spec = unlayout(nodes, [])
        assert spec.node_ids() == ["a", "b"]
        node = LayoutResult.from_dict({"nodes": nodes, "edges": []}).nodes[1]
        assert node.position == Point(x=0, y=0)
        assert node.width == 0

    def test_layout_document_with_scalar_sections_rejected(self):
        with pytest.raises(ValueError, match="nodes"):
            LayoutResult.from_dict({"nodes": 5, "edges": []})

    def test_edited_zone_wins_on_next_layout(self):
        spec = unlayout(*layout(make_spec([_node("u", NodeType.User), _node("s", NodeType.WebServer)])))
        assert spec.nodes[1].tier == Tier.Internal
        spec.nodes[1].zone = "data"
        result = layout(spec)
        assert result.node("s").data.tier == Tier.Data
        assert result.node("s").layer == 3

    def test_coordinates_discarded(self):
        spec = unlayout(*layout(three_tier()))
        assert "position" not in spec.to_dict()["nodes"][0]


# ─── Relayout ─────────────────────────────────────────────────────────────────


class TestRelayout:
    def _nodes(self) -> list[PositionedNode]:
        return [
            PositionedNode(
                id="user",
                kind="user",
                position=Point(x=0, y=0),
                data=NodeData(
                    label="Custom Label",
                    node_type=NodeType.User,
                    category=NodeCategory.External,
                    metadata={"customProp": "value"},
                ),
            ),
            PositionedNode(
                id="db",
                kind="dbServer",
                position=Point(x=0, y=0),
                data=NodeData(label="DB", node_type=NodeType.DbServer, category=NodeCategory.Compute),
            ),
        ]

    def test_positions_updated(self):
        result = relayout(self._nodes(), [LayoutEdge(id="e1", source="user", target="db")])
        assert result[0].position == Point(x=100, y=100)
        assert result[1].position == Point(x=360, y=100)

    def test_data_and_metadata_kept(self):
        nodes = self._nodes()
        result = relayout(nodes, [])
        assert result[0].data is nodes[0].data
        assert result[0].data.metadata == {"customProp": "value"}
        assert result[0].kind == "user"

    def test_inputs_not_mutated(self):
        nodes = self._nodes()
        relayout(nodes, [LayoutEdge(id="e1", source="user", target="db")])
        assert nodes[1].position == Point(x=0, y=0)

    def test_accepts_mappings(self):
        raw = LayoutResult(nodes=self._nodes(), edges=[LayoutEdge(id="e1", source="user", target="db")]).to_dict()
        result = relayout(raw["nodes"], raw["edges"])
        assert [n.x for n in result] == [100, 360]


# ─── Pipeline helpers ─────────────────────────────────────────────────────────


class TestPipeline:
    def test_full_layout_uses_defaults(self):
        result = full_layout(make_spec([_node("a"), _node("b")], ("a", "b")))
        assert [n.x for n in result.nodes] == [100, 360]

    def test_full_layout_with_overrides(self):
        spec = make_spec([_node("a"), _node("b")], ("a", "b"))
        result = full_layout_with_config(spec, LayoutConfig(start_x=0), horizontal_gap=10)
        assert [n.x for n in result.nodes] == [0, 10]

    def test_full_layout_with_none_override_keeps_config(self):
        spec = make_spec([_node("a"), _node("b")], ("a", "b"))
        result = full_layout_with_config(spec, horizontal_gap=None)
        assert [n.x for n in result.nodes] == [100, 360]
