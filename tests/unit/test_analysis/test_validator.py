"""Unit tests for the graph validator."""

from __future__ import annotations

import pytest

from landnet.analysis.validator import resolve_endpoint, validate_graph
from landnet.utils.exceptions import InvalidGraphShape


def test_well_formed_payload_round_trips(graph_payload):
    graph = validate_graph(graph_payload)

    assert [n.id for n in graph.nodes] == ["1", "2", "3", "4"]
    assert [(e.source, e.target) for e in graph.edges] == [("1", "4"), ("1", "2"), ("2", "3")]
    assert [e.id for e in graph.edges] == ["e0", "e1", "e2"]
    assert graph.edges[0].strength == 9
    assert graph.edges[0].type == "thematic"
    assert graph.nodes[0].land_classification == "High"
    assert graph.clusters[0].projects == ["1", "4"]
    assert graph.clusters[0].learning_route_potential == "HIGH"
    assert graph.clusters[0].proposed_route == "Bolivia -> Chile"
    assert graph.cross_cutting_findings == ["Finding 1", "Finding 2", "Finding 3"]
    assert graph.diagnostics.dropped_edges == 0


def test_edges_with_unknown_endpoints_are_dropped():
    graph = validate_graph(
        {
            "nodes": [{"id": "1"}, {"id": "2"}],
            "edges": [
                {"source": "1", "target": "2"},
                {"source": "1", "target": "99"},
                {"source": "42", "target": "2"},
                "not an edge",
            ],
        }
    )
    assert len(graph.edges) == 1
    assert graph.diagnostics.dropped_edges == 3
    node_ids = graph.node_ids()
    assert all(e.source in node_ids and e.target in node_ids for e in graph.edges)


def test_inline_endpoint_objects_and_numeric_ids():
    graph = validate_graph(
        {
            "nodes": [{"id": 1}, {"id": 2.0}],
            "edges": [{"source": {"id": 1, "label": "A"}, "target": {"id": "2"}, "strength": "8"}],
        }
    )
    assert [n.id for n in graph.nodes] == ["1", "2"]
    assert graph.edges[0].source == "1"
    assert graph.edges[0].target == "2"
    assert graph.edges[0].strength == 8


def test_missing_optional_fields_default():
    graph = validate_graph({"nodes": [{"id": "1"}, {"id": "2"}]})
    node = graph.nodes[0]
    assert node.label == ""
    assert node.land_intensity_score is None
    assert node.land_classification == "Low"
    assert graph.edges == []
    assert graph.clusters == []
    assert graph.cross_cutting_findings == []


def test_edge_strength_is_clamped_and_defaulted():
    graph = validate_graph(
        {
            "nodes": [{"id": "1"}, {"id": "2"}],
            "edges": [
                {"source": "1", "target": "2", "strength": 15},
                {"source": "1", "target": "2", "strength": -3},
                {"source": "1", "target": "2"},
            ],
        }
    )
    assert [e.strength for e in graph.edges] == [10, 1, 5]


def test_duplicate_and_invalid_nodes_are_skipped():
    graph = validate_graph(
        {"nodes": [{"id": "1", "label": "first"}, {"id": "1", "label": "second"}, {"label": "no id"}, None]}
    )
    assert [n.label for n in graph.nodes] == ["first"]
    assert graph.diagnostics.duplicate_nodes == 1
    assert graph.diagnostics.dropped_nodes == 2


def test_unresolved_cluster_members_are_kept_and_counted():
    graph = validate_graph(
        {
            "nodes": [{"id": "1"}],
            "clusters": [{"name": "C", "projects": ["1", "77"], "learningRoutePotential": "Alta"}],
        }
    )
    assert graph.clusters[0].projects == ["1", "77"]
    assert graph.clusters[0].learning_route_potential == "HIGH"
    assert graph.diagnostics.unresolved_cluster_members == 1


def test_classification_is_made_consistent_with_score():
    graph = validate_graph(
        {
            "nodes": [
                {"id": "1", "landIntensityScore": 9, "landClassification": "Low"},
                {"id": "2", "landClassification": "Alta"},
                {"id": "3", "landIntensityScore": "6/10"},
            ]
        }
    )
    assert [n.land_classification for n in graph.nodes] == ["High", "High", "Medium"]
    assert graph.nodes[2].land_intensity_score == 6
    assert graph.diagnostics.reclassified_nodes == 1


@pytest.mark.parametrize("payload", [[], "nodes", {"edges": []}, {"nodes": {"id": "1"}}])
def test_non_graph_payload_raises(payload):
    with pytest.raises(InvalidGraphShape):
        validate_graph(payload)


def test_resolve_endpoint():
    assert resolve_endpoint("3") == "3"
    assert resolve_endpoint(3) == "3"
    assert resolve_endpoint({"id": 3}) == "3"
    assert resolve_endpoint({"label": "x"}) is None
    assert resolve_endpoint(None) is None
