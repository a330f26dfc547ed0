"""Layout pipeline convenience functions."""

from __future__ import annotations

from infraflow_layout.config import DEFAULT_CONFIG, LayoutConfig
from infraflow_layout.engine.convert import spec_to_positioned
from infraflow_layout.engine.types import LayoutResult
from infraflow_layout.ir.spec import Spec


def full_layout(spec: Spec) -> LayoutResult:
    """Run the full layout pipeline with the default spacing."""
    return spec_to_positioned(spec, DEFAULT_CONFIG)


def full_layout_with_config(spec: Spec, config: LayoutConfig | None = None, **overrides: float | None) -> LayoutResult:
    """Run the layout pipeline with ``config`` and any per-call overrides."""
    base = config if config is not None else DEFAULT_CONFIG
    return spec_to_positioned(spec, base.merged(**overrides) if overrides else base)
