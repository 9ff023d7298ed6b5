"""Read-only view models for the detail panel, tooltip and cluster bar."""

from __future__ import annotations

from pydantic import BaseModel, Field

from landnet.models.schemas import Cluster, Edge, Graph, Node
from landnet.rendering.style import (
    LineStyle,
    cluster_colour,
    edge_dash_pattern,
    edge_line_style,
    learning_route_colour,
    node_colour,
)


class Tooltip(BaseModel):
    title: str
    country: str
    score: int | None
    classification: str
    colour: str


class Connection(BaseModel):
    edge_id: str
    other_id: str
    other_label: str
    type: str
    strength: int
    description: str = ""
    line_style: LineStyle = "solid"
    dash_pattern: str | None = None


class NodeDetail(BaseModel):
    node: Node
    colour: str
    connections: list[Connection] = Field(default_factory=list)
    clusters: list[Cluster] = Field(default_factory=list)


class ClusterMember(BaseModel):
    id: str
    label: str
    country: str = ""
    resolved: bool = True

    @property
    def display(self) -> str:
        return f"{self.label} ({self.country})" if self.resolved else self.id


class ClusterDetail(BaseModel):
    index: int
    cluster: Cluster
    members: list[ClusterMember] = Field(default_factory=list)
    route_colour: str | None = None


class ClusterBadge(BaseModel):
    index: int
    name: str
    member_count: int
    colour: str
    route_colour: str | None = None


class Overview(BaseModel):
    findings: list[str] = Field(default_factory=list)
    clusters: list[Cluster] = Field(default_factory=list)


def tooltip_for(node: Node) -> Tooltip:
    return Tooltip(
        title=node.display_label,
        country=node.country,
        score=node.land_intensity_score,
        classification=node.land_classification,
        colour=node_colour(node),
    )


def _connection(edge: Edge, node_id: str, graph: Graph) -> Connection:
    other_id = edge.other_end(node_id)
    other = graph.get_node(other_id)
    return Connection(
        edge_id=edge.id,
        other_id=other_id,
        other_label=other.display_label if other else other_id,
        type=edge.type,
        strength=edge.strength,
        description=edge.description,
        line_style=edge_line_style(edge),
        dash_pattern=edge_dash_pattern(edge),
    )


def node_detail(graph: Graph, node: Node) -> NodeDetail:
    """Incident edges in either direction plus every cluster listing the node."""
    return NodeDetail(
        node=node,
        colour=node_colour(node),
        connections=[_connection(e, node.id, graph) for e in graph.edges if e.touches(node.id)],
        clusters=[c for c in graph.clusters if node.id in c.projects],
    )


def cluster_detail(graph: Graph, index: int) -> ClusterDetail:
    cluster = graph.clusters[index]
    members: list[ClusterMember] = []
    for member_id in cluster.projects:
        node = graph.get_node(member_id)
        if node is None:
            members.append(ClusterMember(id=member_id, label=member_id, resolved=False))
        else:
            members.append(ClusterMember(id=node.id, label=node.display_label, country=node.country))
    return ClusterDetail(
        index=index,
        cluster=cluster,
        members=members,
        route_colour=learning_route_colour(cluster.learning_route_potential),
    )


def cluster_badges(graph: Graph) -> list[ClusterBadge]:
    return [
        ClusterBadge(
            index=i,
            name=c.name,
            member_count=len(c.projects),
            colour=cluster_colour(i),
            route_colour=learning_route_colour(c.learning_route_potential),
        )
        for i, c in enumerate(graph.clusters)
    ]


def overview(graph: Graph) -> Overview:
    return Overview(findings=list(graph.cross_cutting_findings), clusters=list(graph.clusters))
