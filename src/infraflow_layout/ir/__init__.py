"""Intermediate representation: abstract Spec and SpecGraph."""

from infraflow_layout.ir.graph import SpecGraph
from infraflow_layout.ir.spec import ConnectionSpec, NodeSpec, Spec

__all__ = [
    "ConnectionSpec",
    "NodeSpec",
    "Spec",
    "SpecGraph",
]
