"""Unit tests for snapshot rendering and export."""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET

import pytest

from landnet.interaction.emphasis import EmphasisMode, compute_emphasis
from landnet.layout.simulation import ForceSimulation
from landnet.models.schemas import Edge, Graph, Node
from landnet.rendering.export import to_graphml, to_json
from landnet.rendering.graph_image import render_network_image
from landnet.rendering.style import (
    DEFAULT_EDGE_COLOUR,
    cluster_colour,
    edge_colour,
    edge_dash_pattern,
    edge_line_style,
    edge_width,
    learning_route_colour,
    node_colour,
    node_radius,
)

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


@pytest.fixture
def positions(graph):
    sim = ForceSimulation()
    sim.load(graph)
    for _ in range(50):
        sim.tick()
    return sim.positions()


def test_render_png(graph, positions):
    data = render_network_image(graph, positions, dpi=50, figsize=(4, 3))
    assert data.startswith(PNG_MAGIC)


def test_render_with_cluster_emphasis_as_jpeg(graph, positions):
    emphasis = compute_emphasis(graph, EmphasisMode.cluster(0))
    data = render_network_image(graph, positions, emphasis, format="jpeg", dpi=50, figsize=(4, 3))
    assert data[:2] == b"\xff\xd8"


def test_render_empty_graph_returns_placeholder():
    data = render_network_image(Graph(), {}, dpi=50)
    assert data.startswith(PNG_MAGIC)


def test_graphml_export_contains_positions_and_edges(graph, positions):
    root = ET.fromstring(to_graphml(graph, positions))
    ns = {"g": "http://graphml.graphdrawing.org/xmlns"}

    nodes = root.findall(".//g:node", ns)
    edges = root.findall(".//g:edge", ns)
    assert [n.get("id") for n in nodes] == ["1", "2", "3", "4"]
    assert [(e.get("source"), e.get("target")) for e in edges] == [("1", "4"), ("1", "2"), ("2", "3")]
    first = {d.get("key"): d.text for d in nodes[0].findall("g:data", ns)}
    assert first["label"] == "ACCESOS"
    assert first["classification"] == "High"
    assert float(first["x"]) == pytest.approx(positions["1"].x, abs=0.01)


def test_graphml_escapes_markup():
    graph = Graph(nodes=[Node(id="1", label='A & B <"x">')])
    assert "A &amp; B &lt;&quot;x&quot;&gt;" in to_graphml(graph)


def test_json_export_uses_wire_names(graph, positions):
    data = json.loads(to_json(graph, positions))
    assert data["nodes"][0]["landIntensityScore"] == 9
    assert "x" in data["nodes"][0] and "y" in data["nodes"][0]
    assert data["crossCuttingFindings"] == ["Finding 1", "Finding 2", "Finding 3"]

    bare = json.loads(to_json(graph))
    assert "x" not in bare["nodes"][0]


def test_visual_encodings():
    high = Node(id="1", land_intensity_score=9, land_classification="High")
    unscored = Node(id="2")
    assert node_radius(high) == 35
    assert node_radius(unscored) == 17
    assert node_colour(high) != node_colour(unscored)

    strong = Edge(id="e0", source="1", target="2", strength=8, type="thematic")
    weak = Edge(id="e1", source="1", target="2", strength=2, type="mystery")
    assert edge_line_style(strong) == "solid"
    assert edge_line_style(Edge(id="e2", source="1", target="2", strength=5)) == "dashed"
    assert edge_line_style(weak) == "dotted"
    assert edge_width(strong) > edge_width(weak)
    assert edge_colour(weak) == DEFAULT_EDGE_COLOUR
    assert cluster_colour(0) == cluster_colour(8)


def test_dash_patterns_follow_line_style():
    assert edge_dash_pattern(Edge(id="e0", source="1", target="2", strength=9)) is None
    assert edge_dash_pattern(Edge(id="e1", source="1", target="2", strength=4)) == "6 4"
    assert edge_dash_pattern(Edge(id="e2", source="1", target="2", strength=1)) == "3 3"


@pytest.mark.parametrize(
    ("potential", "expected"),
    [("HIGH", "#27AE60"), ("MEDIUM", "#F39C12"), ("LOW", "#E74C3C"), (None, None)],
)
def test_learning_route_colour(potential, expected):
    assert learning_route_colour(potential) == expected
