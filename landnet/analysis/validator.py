"""Graph validator: referential integrity and normalisation of a parsed payload."""

from __future__ import annotations

from typing import Any

from landnet.analysis.classification import classify_text, normalize_classification
from landnet.models.schemas import Cluster, Edge, Graph, GraphDiagnostics, Node
from landnet.utils.exceptions import InvalidGraphShape
from landnet.utils.logging import get_logger
from landnet.utils.text_processing import clamp, coerce_identifier, coerce_int, coerce_text

logger = get_logger(__name__)

SCORE_MIN, SCORE_MAX = 1, 10
DEFAULT_EDGE_STRENGTH = 5


def resolve_endpoint(value: Any) -> str | None:
    """Edge endpoint as a plain id; accepts a bare id or an inline node object."""
    if isinstance(value, dict):
        return coerce_identifier(value.get("id"))
    return coerce_identifier(value)


def _score(value: Any) -> int | None:
    score = coerce_int(value)
    return None if score is None else clamp(score, SCORE_MIN, SCORE_MAX)


def _build_node(raw: dict[str, Any]) -> tuple[Node, bool] | None:
    node_id = coerce_identifier(raw.get("id"))
    if node_id is None:
        return None
    score = _score(raw.get("landIntensityScore"))
    stated = coerce_text(raw.get("landClassification"))
    classification = normalize_classification(stated, score)
    node = Node(
        id=node_id,
        label=coerce_text(raw.get("label")),
        country=coerce_text(raw.get("country")),
        status=coerce_text(raw.get("status")),
        sector=coerce_text(raw.get("sector")),
        land_intensity_score=score,
        land_classification=classification,
        justification=coerce_text(raw.get("justification")),
    )
    return node, bool(stated) and classify_text(stated) != classification


def _build_cluster(raw: dict[str, Any]) -> Cluster:
    members = raw.get("projects")
    projects: list[str] = []
    if isinstance(members, list):
        for member in members:
            ident = resolve_endpoint(member)
            if ident is not None:
                projects.append(ident)

    potential = classify_text(coerce_text(raw.get("learningRoutePotential")))
    return Cluster(
        name=coerce_text(raw.get("name")),
        description=coerce_text(raw.get("description")),
        projects=projects,
        learning_route_potential=potential.upper() if potential else None,
        learning_route_description=coerce_text(raw.get("learningRouteDescription")),
        proposed_route=coerce_text(raw.get("proposedRoute")) or None,
    )


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def validate_graph(payload: Any) -> Graph:
    """Build a consistent :class:`Graph` from a parsed payload.

    Edges whose endpoints do not resolve are dropped, never repaired. Missing
    optional fields default to empty values.

    Raises:
        InvalidGraphShape: the payload is not an object with a ``nodes`` list.
    """
    if not isinstance(payload, dict):
        raise InvalidGraphShape(f"Expected a JSON object, got {type(payload).__name__}")
    raw_nodes = payload.get("nodes")
    if not isinstance(raw_nodes, list):
        raise InvalidGraphShape("Payload has no 'nodes' list")

    nodes: list[Node] = []
    seen: set[str] = set()
    dropped_nodes = duplicate_nodes = reclassified = 0
    for raw in raw_nodes:
        built = _build_node(raw) if isinstance(raw, dict) else None
        if built is None:
            dropped_nodes += 1
            continue
        node, was_reclassified = built
        if node.id in seen:
            duplicate_nodes += 1
            continue
        seen.add(node.id)
        nodes.append(node)
        reclassified += was_reclassified

    edges: list[Edge] = []
    dropped_edges = 0
    for raw in _as_list(payload.get("edges")):
        if not isinstance(raw, dict):
            dropped_edges += 1
            continue
        source = resolve_endpoint(raw.get("source"))
        target = resolve_endpoint(raw.get("target"))
        if source not in seen or target not in seen:
            dropped_edges += 1
            continue
        strength = coerce_int(raw.get("strength"))
        edges.append(
            Edge(
                id=f"e{len(edges)}",
                source=source,
                target=target,
                strength=clamp(strength, SCORE_MIN, SCORE_MAX) if strength is not None else DEFAULT_EDGE_STRENGTH,
                type=coerce_text(raw.get("type")).lower(),
                description=coerce_text(raw.get("description")),
            )
        )

    clusters = [_build_cluster(raw) for raw in _as_list(payload.get("clusters")) if isinstance(raw, dict)]
    unresolved = sum(1 for c in clusters for member in c.projects if member not in seen)

    findings = [text for text in (coerce_text(f) for f in _as_list(payload.get("crossCuttingFindings"))) if text]

    diagnostics = GraphDiagnostics(
        dropped_nodes=dropped_nodes,
        duplicate_nodes=duplicate_nodes,
        dropped_edges=dropped_edges,
        unresolved_cluster_members=unresolved,
        reclassified_nodes=reclassified,
    )
    if dropped_edges or dropped_nodes or duplicate_nodes or unresolved:
        logger.info("graph_input_degraded", **diagnostics.model_dump())

    logger.info(
        "graph_validated",
        nodes=len(nodes),
        edges=len(edges),
        clusters=len(clusters),
        findings=len(findings),
    )
    return Graph(
        nodes=nodes,
        edges=edges,
        clusters=clusters,
        cross_cutting_findings=findings,
        diagnostics=diagnostics,
    )
