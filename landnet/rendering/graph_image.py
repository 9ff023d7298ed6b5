"""Render a laid-out network (nodes, edges, emphasis) to PNG/JPEG image bytes."""

from __future__ import annotations

import io
from typing import Literal

from landnet.interaction.emphasis import Emphasis, EmphasisMode, compute_emphasis
from landnet.models.schemas import Graph, Position
from landnet.rendering.style import edge_colour, edge_line_style, edge_width, node_colour, node_radius


def render_network_image(
    graph: Graph,
    positions: dict[str, Position],
    emphasis: Emphasis | None = None,
    format: Literal["png", "jpeg", "jpg"] = "png",
    dpi: int = 100,
    figsize: tuple[float, float] = (12, 8),
) -> bytes:
    """Render the graph at the given positions using NetworkX + Matplotlib.

    Args:
        graph: Validated graph.
        positions: Node id -> position, usually ``simulation.positions()``.
        emphasis: Opacity/outline state; defaults to no emphasis.
        format: Output format: "png", "jpeg", or "jpg".
        dpi: Dots per inch for the image.
        figsize: Figure size (width, height) in inches.

    Returns:
        Image bytes (PNG or JPEG).
    """
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    import networkx as nx

    placed = [n for n in graph.nodes if n.id in positions]
    if not placed:
        return _empty_image_bytes(format, dpi)

    emphasis = emphasis or compute_emphasis(graph, EmphasisMode.none())

    G = nx.Graph()
    for node in placed:
        G.add_node(node.id)
    for edge in graph.edges:
        if G.has_node(edge.source) and G.has_node(edge.target):
            G.add_edge(edge.source, edge.target)
    pos = {node.id: (positions[node.id].x, positions[node.id].y) for node in placed}

    fig, ax = plt.subplots(figsize=figsize, dpi=dpi)
    fig.patch.set_facecolor("white")
    ax.set_facecolor("white")

    for edge in graph.edges:
        if edge.source not in pos or edge.target not in pos:
            continue
        nx.draw_networkx_edges(
            G,
            pos,
            edgelist=[(edge.source, edge.target)],
            edge_color=edge_colour(edge),
            width=edge_width(edge),
            style=edge_line_style(edge),
            alpha=emphasis.edges[edge.id].opacity,
            ax=ax,
        )

    # Marker area is in points^2; radius is in layout pixels.
    sizes = [(node_radius(n) * 72 / dpi * 2) ** 2 for n in placed]
    nx.draw_networkx_nodes(
        G,
        pos,
        nodelist=[n.id for n in placed],
        node_color=[node_colour(n) for n in placed],
        node_size=sizes,
        alpha=[emphasis.nodes[n.id].opacity for n in placed],
        edgecolors=[emphasis.nodes[n.id].stroke for n in placed],
        linewidths=[emphasis.nodes[n.id].stroke_width for n in placed],
        ax=ax,
    )

    for node in placed:
        label = node.display_label
        if len(label) > 20:
            label = label[:17] + "..."
        x, y = pos[node.id]
        ax.text(
            x,
            y + node_radius(node) + 14,
            label,
            fontsize=8,
            fontweight="bold",
            ha="center",
            va="center",
            color="#1a1a1a",
            alpha=emphasis.nodes[node.id].label_opacity,
        )

    # Layout coordinates grow downward like a screen.
    ax.invert_yaxis()
    ax.set_aspect("equal")
    ax.axis("off")
    plt.tight_layout(pad=0.5)

    buf = io.BytesIO()
    save_fmt = "jpg" if format in ("jpeg", "jpg") else "png"
    plt.savefig(buf, format=save_fmt, bbox_inches="tight", facecolor="white", dpi=dpi)
    plt.close(fig)
    buf.seek(0)
    return buf.read()


def _empty_image_bytes(format: Literal["png", "jpeg", "jpg"], dpi: int) -> bytes:
    """Return a small placeholder image when the graph has no nodes."""
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=(4, 2), dpi=dpi)
    fig.patch.set_facecolor("white")
    ax.set_facecolor("white")
    ax.text(0.5, 0.5, "No projects in network", ha="center", va="center", fontsize=12)
    ax.axis("off")
    buf = io.BytesIO()
    save_fmt = "jpg" if format in ("jpeg", "jpg") else "png"
    plt.savefig(buf, format=save_fmt, bbox_inches="tight", facecolor="white", dpi=dpi)
    plt.close(fig)
    buf.seek(0)
    return buf.read()
