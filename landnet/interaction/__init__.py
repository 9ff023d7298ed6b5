"""Interaction layer: emphasis, view models and the per-graph context."""

from __future__ import annotations

from landnet.interaction.context import NetworkViewContext
from landnet.interaction.emphasis import Emphasis, EmphasisMode, compute_emphasis

__all__ = [
    "Emphasis",
    "EmphasisMode",
    "NetworkViewContext",
    "compute_emphasis",
]
