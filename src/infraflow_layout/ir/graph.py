"""Graph IR — converts a Spec into a networkx DiGraph for layout.

This module owns the adjacency used by the layering and ordering phases.
Connections whose endpoints are not both declared nodes are dropped here,
so no later phase ever sees a dangling edge. Parallel connections between
the same pair collapse into one graph edge whose ``indices``
attribute lists every connection it stands for; the ordering phase weights
by that count.
"""

from __future__ import annotations

import logging

import networkx as nx

from infraflow_layout.ir.spec import ConnectionSpec, NodeSpec, Spec

logger = logging.getLogger(__name__)


class SpecGraph:
    """Wraps a networkx DiGraph built from a Spec's nodes and connections."""

    def __init__(self, digraph: nx.DiGraph, connection_count: int) -> None:
        self.digraph = digraph
        self.connection_count = connection_count

    @classmethod
    def from_spec(cls, spec: Spec) -> SpecGraph:
        return cls.build(spec.nodes, spec.connections)

    @classmethod
    def build(cls, nodes: list[NodeSpec], connections: list[ConnectionSpec]) -> SpecGraph:
        digraph: nx.DiGraph = nx.DiGraph()
        for node in nodes:
            if node.id not in digraph:
                digraph.add_node(node.id, data=node)

        for index, conn in enumerate(connections):
            if conn.source not in digraph or conn.target not in digraph:
                logger.debug("dropping dangling connection %d: %s -> %s", index, conn.source, conn.target)
                continue
            if digraph.has_edge(conn.source, conn.target):
                digraph.edges[conn.source, conn.target]["indices"].append(index)
            else:
                digraph.add_edge(conn.source, conn.target, indices=[index])

        return cls(digraph=digraph, connection_count=len(connections))

    def node(self, node_id: str) -> NodeSpec:
        return self.digraph.nodes[node_id]["data"]

    def node_ids(self) -> list[str]:
        return list(self.digraph.nodes)

    def roots(self) -> list[str]:
        """Nodes with no incoming edge, in insertion order."""
        return [n for n in self.digraph.nodes if self.digraph.in_degree(n) == 0]
