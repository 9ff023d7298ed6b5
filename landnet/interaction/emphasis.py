"""Emphasis modes and the pure emphasis function.

Emphasis is recomputed from ``(graph, mode)`` on every change, so repeated or
interleaved calls can never accumulate visual state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, Field

from landnet.analysis.classification import classify_text
from landnet.models.schemas import Graph, LandClassification

EmphasisKind = Literal["none", "filter", "cluster"]

# Opacities. Dimmed values stay above zero so dimmed elements keep their place.
NODE_OPACITY = 1.0
LABEL_OPACITY = 1.0
EDGE_OPACITY = 0.6

FILTER_NODE_DIM = 0.12
FILTER_LABEL_DIM = 0.08
FILTER_EDGE_DIM = 0.05

CLUSTER_NODE_DIM = 0.3
CLUSTER_LABEL_DIM = 0.2
CLUSTER_EDGE_MATCH = 0.8
CLUSTER_EDGE_DIM = 0.1

DEFAULT_STROKE = "#ffffff"
DEFAULT_STROKE_WIDTH = 2.0
OUTLINE_STROKE = "#1a1a1a"
OUTLINE_STROKE_WIDTH = 3.0


@dataclass(frozen=True)
class EmphasisMode:
    kind: EmphasisKind = "none"
    category: LandClassification | None = None
    cluster_index: int | None = None

    @classmethod
    def none(cls) -> EmphasisMode:
        return cls()

    @classmethod
    def filter(cls, category: LandClassification) -> EmphasisMode:
        return cls(kind="filter", category=category)

    @classmethod
    def cluster(cls, index: int) -> EmphasisMode:
        return cls(kind="cluster", cluster_index=index)


class NodeEmphasis(BaseModel):
    opacity: float = NODE_OPACITY
    label_opacity: float = LABEL_OPACITY
    outlined: bool = False
    stroke: str = DEFAULT_STROKE
    stroke_width: float = DEFAULT_STROKE_WIDTH


class EdgeEmphasis(BaseModel):
    opacity: float = EDGE_OPACITY


class Emphasis(BaseModel):
    mode: EmphasisKind = "none"
    nodes: dict[str, NodeEmphasis] = Field(default_factory=dict)
    edges: dict[str, EdgeEmphasis] = Field(default_factory=dict)


def resolve_category(value: str) -> LandClassification:
    """Map "High"/"Alta"/"medium"... onto a category; raise ``ValueError`` otherwise."""
    category = classify_text(value)
    if category is None:
        raise ValueError(f"Unknown land intensity category: {value!r}")
    return category


def _default(graph: Graph) -> Emphasis:
    return Emphasis(
        mode="none",
        nodes={n.id: NodeEmphasis() for n in graph.nodes},
        edges={e.id: EdgeEmphasis() for e in graph.edges},
    )


def _highlight(
    graph: Graph,
    members: set[str],
    *,
    mode: EmphasisKind,
    node_dim: float,
    label_dim: float,
    edge_match: float,
    edge_dim: float,
    outline: bool,
) -> Emphasis:
    nodes: dict[str, NodeEmphasis] = {}
    for node in graph.nodes:
        hit = node.id in members
        nodes[node.id] = NodeEmphasis(
            opacity=NODE_OPACITY if hit else node_dim,
            label_opacity=LABEL_OPACITY if hit else label_dim,
            outlined=outline and hit,
            stroke=OUTLINE_STROKE if outline and hit else DEFAULT_STROKE,
            stroke_width=OUTLINE_STROKE_WIDTH if outline and hit else DEFAULT_STROKE_WIDTH,
        )
    edges = {
        e.id: EdgeEmphasis(opacity=edge_match if e.source in members and e.target in members else edge_dim)
        for e in graph.edges
    }
    return Emphasis(mode=mode, nodes=nodes, edges=edges)


def compute_emphasis(graph: Graph, mode: EmphasisMode) -> Emphasis:
    """Per-node and per-edge emphasis for ``mode``.

    An edge matches only when both endpoints match. Cluster members are also
    outlined.
    """
    if mode.kind == "filter" and mode.category is not None:
        members = {n.id for n in graph.nodes if n.land_classification == mode.category}
        return _highlight(
            graph,
            members,
            mode="filter",
            node_dim=FILTER_NODE_DIM,
            label_dim=FILTER_LABEL_DIM,
            edge_match=EDGE_OPACITY,
            edge_dim=FILTER_EDGE_DIM,
            outline=False,
        )
    if mode.kind == "cluster" and mode.cluster_index is not None:
        cluster = graph.clusters[mode.cluster_index]
        return _highlight(
            graph,
            set(cluster.projects),
            mode="cluster",
            node_dim=CLUSTER_NODE_DIM,
            label_dim=CLUSTER_LABEL_DIM,
            edge_match=CLUSTER_EDGE_MATCH,
            edge_dim=CLUSTER_EDGE_DIM,
            outline=True,
        )
    return _default(graph)
