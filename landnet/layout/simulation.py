"""Layout engine: force simulation with an explicit idle/running/settled state machine.

Transitions:

- ``load(graph)``: any state -> RUNNING (SETTLED for an empty graph); prior
  positions and velocities are discarded.
- ``tick()``: RUNNING -> SETTLED once alpha drops below ``alpha_min``.
- ``reheat(target)``: SETTLED -> RUNNING.
- ``clear()``: any state -> IDLE.

Pinning and releasing a node never change the state.
"""

from __future__ import annotations

import asyncio
import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from landnet.config import Settings
from landnet.layout.forces import CenterForce, CollideForce, Force, Link, LinkForce, ManyBodyForce, SimNode
from landnet.models.schemas import Graph, Position, PositionFrame
from landnet.rendering.style import node_radius
from landnet.utils.exceptions import UnknownNodeError
from landnet.utils.logging import get_logger

logger = get_logger(__name__)

FrameListener = Callable[[PositionFrame], None]

_INITIAL_RADIUS = 10.0
_INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))


class SimulationState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SETTLED = "settled"


@dataclass(frozen=True)
class ForceSettings:
    viewport_width: float = 960.0
    viewport_height: float = 700.0
    link_base_distance: float = 200.0
    link_strength_step: float = 15.0
    link_min_distance: float = 20.0
    charge_strength: float = -300.0
    collision_margin: float = 5.0
    alpha_min: float = 0.001
    alpha_decay: float = 1 - 0.001 ** (1 / 300)
    velocity_decay: float = 0.4
    drag_alpha_target: float = 0.3
    frame_interval: float = 1 / 60
    seed: int = 42

    @classmethod
    def from_settings(cls, settings: Settings) -> ForceSettings:
        return cls(
            viewport_width=settings.VIEWPORT_WIDTH,
            viewport_height=settings.VIEWPORT_HEIGHT,
            link_base_distance=settings.LINK_BASE_DISTANCE,
            link_strength_step=settings.LINK_STRENGTH_STEP,
            link_min_distance=settings.LINK_MIN_DISTANCE,
            charge_strength=settings.CHARGE_STRENGTH,
            collision_margin=settings.COLLISION_MARGIN,
            alpha_min=settings.ALPHA_MIN,
            alpha_decay=settings.ALPHA_DECAY,
            velocity_decay=settings.VELOCITY_DECAY,
            drag_alpha_target=settings.DRAG_ALPHA_TARGET,
            frame_interval=settings.FRAME_INTERVAL_SECONDS,
            seed=settings.LAYOUT_SEED,
        )

    @property
    def center(self) -> tuple[float, float]:
        return self.viewport_width / 2, self.viewport_height / 2

    def link_distance(self, strength: int) -> float:
        """Stronger relationships sit closer together."""
        return max(self.link_base_distance - strength * self.link_strength_step, self.link_min_distance)


class ForceSimulation:
    """Owns node positions for one graph and advances them one tick at a time."""

    def __init__(self, settings: ForceSettings | None = None) -> None:
        self._settings = settings or ForceSettings()
        self._nodes: list[SimNode] = []
        self._index: dict[str, int] = {}
        self._forces: list[Force] = []
        self._listeners: list[FrameListener] = []
        self._task: asyncio.Task | None = None
        self.state = SimulationState.IDLE
        self.alpha = 0.0
        self.alpha_target = 0.0
        self.tick_count = 0

    @property
    def settings(self) -> ForceSettings:
        return self._settings

    # ── lifecycle ──

    def load(self, graph: Graph) -> None:
        """Install a new graph, discarding every prior position and velocity."""
        rng = random.Random(self._settings.seed)
        cx, cy = self._settings.center

        nodes: list[SimNode] = []
        for i, node in enumerate(graph.nodes):
            radius = _INITIAL_RADIUS * math.sqrt(0.5 + i)
            angle = i * _INITIAL_ANGLE
            nodes.append(
                SimNode(
                    id=node.id,
                    x=cx + radius * math.cos(angle),
                    y=cy + radius * math.sin(angle),
                    radius=node_radius(node),
                )
            )
        index = {n.id: i for i, n in enumerate(nodes)}
        links = [
            Link(
                source=index[edge.source],
                target=index[edge.target],
                distance=self._settings.link_distance(edge.strength),
            )
            for edge in graph.edges
        ]

        self._nodes = nodes
        self._index = index
        self._forces = [
            LinkForce(nodes, links, rng),
            ManyBodyForce(nodes, self._settings.charge_strength, rng),
            CenterForce(nodes, cx, cy),
            CollideForce(nodes, rng, self._settings.collision_margin),
        ]
        self.tick_count = 0
        self.alpha_target = 0.0
        if nodes:
            self.alpha = 1.0
            self.state = SimulationState.RUNNING
        else:
            self.alpha = 0.0
            self.state = SimulationState.SETTLED
        logger.info("simulation_loaded", nodes=len(nodes), links=len(links), state=self.state.value)

    def clear(self) -> None:
        self._nodes = []
        self._index = {}
        self._forces = []
        self.alpha = 0.0
        self.alpha_target = 0.0
        self.tick_count = 0
        self.state = SimulationState.IDLE

    def reheat(self, alpha_target: float) -> None:
        """Set the temperature floor; a settled layout starts moving again."""
        self.alpha_target = alpha_target
        if self.state is SimulationState.SETTLED and self._nodes and alpha_target >= self._settings.alpha_min:
            self.alpha = max(self.alpha, alpha_target)
            self.state = SimulationState.RUNNING

    # ── stepping ──

    def tick(self) -> PositionFrame:
        """Advance one step: decay alpha, apply forces, integrate velocities."""
        if self.state is SimulationState.IDLE:
            raise RuntimeError("No graph loaded")

        self.alpha += (self.alpha_target - self.alpha) * self._settings.alpha_decay
        for force in self._forces:
            force.apply(self.alpha)

        keep = 1 - self._settings.velocity_decay
        for node in self._nodes:
            if node.fx is None:
                node.vx *= keep
                node.x += node.vx
            else:
                node.x = node.fx
                node.vx = 0.0
            if node.fy is None:
                node.vy *= keep
                node.y += node.vy
            else:
                node.y = node.fy
                node.vy = 0.0

        self.tick_count += 1
        if self.alpha < self._settings.alpha_min:
            if self.state is SimulationState.RUNNING:
                logger.info("simulation_settled", ticks=self.tick_count, alpha=round(self.alpha, 6))
            self.state = SimulationState.SETTLED
        else:
            self.state = SimulationState.RUNNING

        frame = self.frame()
        self._notify(frame)
        return frame

    async def run(self) -> int:
        """Tick until settled, yielding to the event loop between ticks."""
        ticks = 0
        while self.state is SimulationState.RUNNING:
            self.tick()
            ticks += 1
            await asyncio.sleep(self._settings.frame_interval)
        return ticks

    def start(self) -> asyncio.Task | None:
        """Schedule :meth:`run` on the running loop unless it is already scheduled."""
        if self._task is not None and not self._task.done():
            return self._task
        if self.state is not SimulationState.RUNNING:
            return None
        self._task = asyncio.get_running_loop().create_task(self.run())
        return self._task

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise

    # ── pinning ──

    def _node(self, node_id: str) -> SimNode:
        try:
            return self._nodes[self._index[node_id]]
        except KeyError:
            raise UnknownNodeError(f"Unknown node '{node_id}'") from None

    def pin(self, node_id: str, x: float | None = None, y: float | None = None) -> None:
        """Fix a node in place; forces stop moving it until released."""
        node = self._node(node_id)
        node.fx = node.x if x is None else x
        node.fy = node.y if y is None else y
        node.x, node.y = node.fx, node.fy

    def release(self, node_id: str) -> None:
        node = self._node(node_id)
        node.fx = None
        node.fy = None

    def is_pinned(self, node_id: str) -> bool:
        return self._node(node_id).pinned

    # ── position stream ──

    def position(self, node_id: str) -> Position:
        node = self._node(node_id)
        return Position(x=node.x, y=node.y)

    def positions(self) -> dict[str, Position]:
        return {node.id: Position(x=node.x, y=node.y) for node in self._nodes}

    def frame(self) -> PositionFrame:
        return PositionFrame(
            tick=self.tick_count,
            alpha=self.alpha,
            settled=self.state is SimulationState.SETTLED,
            positions=self.positions(),
        )

    def add_listener(self, listener: FrameListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: FrameListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, frame: PositionFrame) -> None:
        for listener in list(self._listeners):
            try:
                listener(frame)
            except Exception as exc:
                logger.error("position_listener_failed", listener=repr(listener), error=str(exc))
