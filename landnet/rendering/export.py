"""JSON and GraphML export of a laid-out network."""

from __future__ import annotations

import json
from typing import Any

from landnet.models.schemas import Graph, Position


def to_json_dict(graph: Graph, positions: dict[str, Position] | None = None) -> dict[str, Any]:
    """Graph in camelCase wire form; nodes carry ``x``/``y`` when positions are given."""
    data = graph.model_dump(by_alias=True)
    if positions:
        for node in data["nodes"]:
            pos = positions.get(node["id"])
            if pos is not None:
                node["x"] = round(pos.x, 2)
                node["y"] = round(pos.y, 2)
    return data


def to_json(graph: Graph, positions: dict[str, Position] | None = None, indent: int | None = 2) -> str:
    return json.dumps(to_json_dict(graph, positions), ensure_ascii=False, indent=indent)


def to_graphml(graph: Graph, positions: dict[str, Position] | None = None) -> str:
    """Convert the graph to GraphML XML format."""
    positions = positions or {}
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<graphml xmlns="http://graphml.graphdrawing.org/xmlns">',
        '  <key id="label" for="node" attr.name="label" attr.type="string"/>',
        '  <key id="country" for="node" attr.name="country" attr.type="string"/>',
        '  <key id="classification" for="node" attr.name="classification" attr.type="string"/>',
        '  <key id="score" for="node" attr.name="score" attr.type="int"/>',
        '  <key id="x" for="node" attr.name="x" attr.type="double"/>',
        '  <key id="y" for="node" attr.name="y" attr.type="double"/>',
        '  <key id="type" for="edge" attr.name="type" attr.type="string"/>',
        '  <key id="strength" for="edge" attr.name="strength" attr.type="int"/>',
        '  <graph id="G" edgedefault="undirected">',
    ]

    for node in graph.nodes:
        lines.append(f'    <node id="{_xml_escape(node.id)}">')
        lines.append(f'      <data key="label">{_xml_escape(node.display_label)}</data>')
        if node.country:
            lines.append(f'      <data key="country">{_xml_escape(node.country)}</data>')
        lines.append(f'      <data key="classification">{node.land_classification}</data>')
        if node.land_intensity_score is not None:
            lines.append(f'      <data key="score">{node.land_intensity_score}</data>')
        pos = positions.get(node.id)
        if pos is not None:
            lines.append(f'      <data key="x">{pos.x:.2f}</data>')
            lines.append(f'      <data key="y">{pos.y:.2f}</data>')
        lines.append("    </node>")

    for edge in graph.edges:
        lines.append(
            f'    <edge id="{_xml_escape(edge.id)}" source="{_xml_escape(edge.source)}" '
            f'target="{_xml_escape(edge.target)}">'
        )
        lines.append(f'      <data key="type">{_xml_escape(edge.type)}</data>')
        lines.append(f'      <data key="strength">{edge.strength}</data>')
        lines.append("    </edge>")

    lines.append("  </graph>")
    lines.append("</graphml>")
    return "\n".join(lines)


def _xml_escape(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")
