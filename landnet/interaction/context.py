"""Interaction layer: one context object per loaded graph.

The context owns the validated graph, the simulation holding its positions,
and the single active emphasis mode. Handlers read positions and write only
emphasis and pin signals; the simulation stays the sole writer of positions.
"""

from __future__ import annotations

from landnet.interaction.emphasis import Emphasis, EmphasisMode, compute_emphasis, resolve_category
from landnet.interaction.views import (
    ClusterBadge,
    ClusterDetail,
    NodeDetail,
    Overview,
    Tooltip,
    cluster_badges,
    cluster_detail,
    node_detail,
    overview,
    tooltip_for,
)
from landnet.layout.simulation import ForceSimulation
from landnet.models.schemas import Graph, Node
from landnet.utils.exceptions import UnknownNodeError
from landnet.utils.logging import get_logger

logger = get_logger(__name__)


class NetworkViewContext:
    """Graph + positions + emphasis mode, passed to every interaction handler.

    With ``autostart`` the simulation loop is rescheduled on the running event
    loop whenever a drag reheats a settled layout; without it the caller
    drives ``simulation.tick()`` itself.
    """

    def __init__(self, graph: Graph, simulation: ForceSimulation, *, autostart: bool = False) -> None:
        self.graph = graph
        self.simulation = simulation
        self._autostart = autostart
        self._mode = EmphasisMode.none()
        self._nodes = {n.id: n for n in graph.nodes}

    @property
    def mode(self) -> EmphasisMode:
        return self._mode

    @property
    def emphasis(self) -> Emphasis:
        return compute_emphasis(self.graph, self._mode)

    def _node(self, node_id: str) -> Node:
        node = self._nodes.get(node_id)
        if node is None:
            raise UnknownNodeError(f"Unknown node '{node_id}'")
        return node

    # ── read-only handlers ──

    def hover(self, node_id: str) -> Tooltip:
        return tooltip_for(self._node(node_id))

    def select_node(self, node_id: str) -> NodeDetail:
        """Detail view for a clicked node; emphasis is left untouched."""
        return node_detail(self.graph, self._node(node_id))

    def overview(self) -> Overview:
        return overview(self.graph)

    def cluster_badges(self) -> list[ClusterBadge]:
        return cluster_badges(self.graph)

    # ── emphasis handlers ──

    def filter_by_category(self, category: str | None) -> Emphasis:
        """Emphasise nodes of one intensity category; an empty selection resets."""
        if not category:
            return self.reset()
        self._mode = EmphasisMode.filter(resolve_category(category))
        logger.debug("emphasis_filter", category=self._mode.category)
        return self.emphasis

    def select_cluster(self, index: int) -> ClusterDetail | None:
        """Emphasise one cluster's members and describe it.

        Unknown indexes and clusters without members leave the current mode as is.
        """
        if not 0 <= index < len(self.graph.clusters):
            logger.warning("cluster_index_out_of_range", index=index, clusters=len(self.graph.clusters))
            return None
        if not self.graph.clusters[index].projects:
            return None
        self._mode = EmphasisMode.cluster(index)
        logger.debug("emphasis_cluster", index=index)
        return cluster_detail(self.graph, index)

    def reset(self) -> Emphasis:
        self._mode = EmphasisMode.none()
        return self.emphasis

    # ── drag (pin/release signals into the layout) ──

    def begin_drag(self, node_id: str) -> None:
        self._node(node_id)
        self.simulation.pin(node_id)
        self.simulation.reheat(self.simulation.settings.drag_alpha_target)
        if self._autostart:
            self.simulation.start()

    def drag(self, node_id: str, x: float, y: float) -> None:
        self._node(node_id)
        self.simulation.pin(node_id, x, y)

    def end_drag(self, node_id: str) -> None:
        self._node(node_id)
        self.simulation.reheat(0.0)
        self.simulation.release(node_id)
