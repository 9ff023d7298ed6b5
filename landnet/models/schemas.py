"""Pydantic models for data flowing through the network pipeline."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

LandClassification = Literal["High", "Medium", "Low"]
LearningRoutePotential = Literal["HIGH", "MEDIUM", "LOW"]

EDGE_TYPES: tuple[str, ...] = (
    "thematic",
    "geographic",
    "methodological",
    "temporal",
    "institutional",
)


class _CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire (``model_dump(by_alias=True)``)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _FrozenCamelModel(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# ── Project snapshot (input to the generation service) ───────────────


class ProjectRecord(_CamelModel):
    """One flat record from the project store. Unknown columns are kept."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,
    )

    id: str
    pais: str = ""
    proyecto: str = ""
    acronimo: str = ""
    ifad_id: str = ""
    status: str = ""
    anio_inicio: int | None = None
    anio_cierre: int | None = None
    monto_total: float = 0.0
    monto_fida: float = 0.0
    cofinanciadores: str = ""
    sector: str = ""
    land_component: str = ""
    land_description: str = ""
    resumen: str = ""
    lat: float | None = None
    lng: float | None = None


# ── Validated graph ──────────────────────────────────────────────────


class Node(_FrozenCamelModel):
    id: str
    label: str = ""
    country: str = ""
    status: str = ""
    sector: str = ""
    land_intensity_score: int | None = Field(default=None, description="1 to 10")
    land_classification: LandClassification = "Low"
    justification: str = ""

    @property
    def display_label(self) -> str:
        return self.label or self.id


class Edge(_FrozenCamelModel):
    id: str
    source: str
    target: str
    strength: int = Field(default=5, description="1 to 10")
    type: str = ""
    description: str = ""

    def touches(self, node_id: str) -> bool:
        return self.source == node_id or self.target == node_id

    def other_end(self, node_id: str) -> str:
        return self.target if self.source == node_id else self.source


class Cluster(_FrozenCamelModel):
    name: str = ""
    description: str = ""
    projects: list[str] = Field(default_factory=list)
    learning_route_potential: LearningRoutePotential | None = None
    learning_route_description: str = ""
    proposed_route: str | None = None


class GraphDiagnostics(_FrozenCamelModel):
    """Counters for lossy-but-expected degradations absorbed during validation."""

    dropped_nodes: int = 0
    duplicate_nodes: int = 0
    dropped_edges: int = 0
    unresolved_cluster_members: int = 0
    reclassified_nodes: int = 0


class Graph(_FrozenCamelModel):
    nodes: list[Node] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)
    clusters: list[Cluster] = Field(default_factory=list)
    cross_cutting_findings: list[str] = Field(default_factory=list)
    diagnostics: GraphDiagnostics = Field(default_factory=GraphDiagnostics)

    def node_ids(self) -> set[str]:
        return {n.id for n in self.nodes}

    def get_node(self, node_id: str) -> Node | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None


# ── Layout output ────────────────────────────────────────────────────


class Position(BaseModel):
    x: float
    y: float


class PositionFrame(BaseModel):
    """One entry of the live position stream, emitted after every tick."""

    tick: int
    alpha: float
    settled: bool
    positions: dict[str, Position] = Field(default_factory=dict)
