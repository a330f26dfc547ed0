"""Centralized configuration for infraflow-layout."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace


@dataclass(frozen=True)
class LayoutConfig:
    """Spacing for the coordinate placement phase.

    Layers are columns ``horizontal_gap`` apart starting at ``start_x``; nodes
    in a layer are ``vertical_gap`` apart. ``node_width`` and ``node_height``
    are attached to every positioned node for the renderer.
    """

    node_width: float = 180
    node_height: float = 90
    horizontal_gap: float = 260
    vertical_gap: float = 140
    start_x: float = 100
    start_y: float = 100

    def __post_init__(self) -> None:
        for name in ("node_width", "node_height", "horizontal_gap", "vertical_gap"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ValueError(f"{name} must be a positive number, got {value!r}")
        for name in ("start_x", "start_y"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} must be a number, got {value!r}")

    def merged(self, **overrides: float | None) -> LayoutConfig:
        """Return a copy with the non-None overrides applied."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown layout option(s): {', '.join(sorted(unknown))}")
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


DEFAULT_CONFIG = LayoutConfig()
