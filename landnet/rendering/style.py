"""Visual encodings shared by the layout, interaction and rendering layers."""

from __future__ import annotations

from typing import Literal

from landnet.analysis.classification import DEFAULT_SCORE
from landnet.models.schemas import Edge, LearningRoutePotential, Node

LineStyle = Literal["solid", "dashed", "dotted"]

NODE_BASE_RADIUS = 8.0
NODE_RADIUS_PER_POINT = 3.0

CLASSIFICATION_COLOURS = {
    "High": "#E74C3C",
    "Medium": "#F39C12",
    "Low": "#2078B4",
}

EDGE_COLOURS = {
    "thematic": "#2078B4",
    "geographic": "#27AE60",
    "methodological": "#F39C12",
    "temporal": "#8E44AD",
    "institutional": "#E74C3C",
}
DEFAULT_EDGE_COLOUR = "#999999"

LEARNING_ROUTE_COLOURS = {
    "HIGH": "#27AE60",
    "MEDIUM": "#F39C12",
    "LOW": "#E74C3C",
}

CLUSTER_PALETTE = (
    "#2078B4",
    "#27AE60",
    "#F39C12",
    "#8E44AD",
    "#E74C3C",
    "#3498DB",
    "#E67E22",
    "#1ABC9C",
)

# Dash patterns in the "on off" form SVG and canvas renderers expect.
DASH_PATTERNS: dict[LineStyle, str | None] = {
    "solid": None,
    "dashed": "6 4",
    "dotted": "3 3",
}


def node_radius(node: Node) -> float:
    score = node.land_intensity_score or DEFAULT_SCORE
    return NODE_BASE_RADIUS + score * NODE_RADIUS_PER_POINT


def node_colour(node: Node) -> str:
    return CLASSIFICATION_COLOURS[node.land_classification]


def edge_colour(edge: Edge) -> str:
    return EDGE_COLOURS.get(edge.type, DEFAULT_EDGE_COLOUR)


def edge_width(edge: Edge) -> float:
    return 0.5 + edge.strength * 0.4


def edge_line_style(edge: Edge) -> LineStyle:
    if edge.strength >= 7:
        return "solid"
    if edge.strength >= 4:
        return "dashed"
    return "dotted"


def cluster_colour(index: int) -> str:
    return CLUSTER_PALETTE[index % len(CLUSTER_PALETTE)]


def edge_dash_pattern(edge: Edge) -> str | None:
    return DASH_PATTERNS[edge_line_style(edge)]


def learning_route_colour(potential: LearningRoutePotential | None) -> str | None:
    return LEARNING_ROUTE_COLOURS.get(potential) if potential else None
