"""Forces for the layout simulation.

Each force nudges node velocities once per tick, scaled by the current alpha.
Pair forces are exact O(n^2) loops; graphs here have tens of nodes.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Protocol


@dataclass
class SimNode:
    """Mutable simulation state for one node. Owned by the simulation."""

    id: str
    x: float
    y: float
    radius: float
    vx: float = 0.0
    vy: float = 0.0
    fx: float | None = None
    fy: float | None = None

    @property
    def pinned(self) -> bool:
        return self.fx is not None


@dataclass(frozen=True)
class Link:
    source: int
    target: int
    distance: float


class Force(Protocol):
    def apply(self, alpha: float) -> None: ...


def _jiggle(rng: random.Random) -> float:
    return (rng.random() - 0.5) * 1e-6


class LinkForce:
    """Springs pulling linked pairs toward their target distance.

    Endpoints with fewer links move more, so hubs stay put.
    """

    def __init__(self, nodes: list[SimNode], links: list[Link], rng: random.Random) -> None:
        self._nodes = nodes
        self._rng = rng
        self._links = [link for link in links if link.source != link.target]
        degree = [0] * len(nodes)
        for link in self._links:
            degree[link.source] += 1
            degree[link.target] += 1
        self._strengths = [1 / min(degree[link.source], degree[link.target]) for link in self._links]
        self._bias = [degree[link.source] / (degree[link.source] + degree[link.target]) for link in self._links]

    def apply(self, alpha: float) -> None:
        for link, strength, bias in zip(self._links, self._strengths, self._bias):
            source = self._nodes[link.source]
            target = self._nodes[link.target]
            x = target.x + target.vx - source.x - source.vx or _jiggle(self._rng)
            y = target.y + target.vy - source.y - source.vy or _jiggle(self._rng)
            length = math.sqrt(x * x + y * y)
            scale = (length - link.distance) / length * alpha * strength
            x *= scale
            y *= scale
            target.vx -= x * bias
            target.vy -= y * bias
            source.vx += x * (1 - bias)
            source.vy += y * (1 - bias)


class ManyBodyForce:
    """Every pair repels (negative strength) with inverse-distance falloff."""

    def __init__(
        self,
        nodes: list[SimNode],
        strength: float,
        rng: random.Random,
        distance_min: float = 1.0,
    ) -> None:
        self._nodes = nodes
        self._strength = strength
        self._rng = rng
        self._distance_min2 = distance_min * distance_min

    def apply(self, alpha: float) -> None:
        nodes = self._nodes
        for i in range(len(nodes)):
            a = nodes[i]
            for j in range(i + 1, len(nodes)):
                b = nodes[j]
                x = b.x - a.x or _jiggle(self._rng)
                y = b.y - a.y or _jiggle(self._rng)
                dist2 = x * x + y * y
                if dist2 < self._distance_min2:
                    dist2 = math.sqrt(self._distance_min2 * dist2)
                weight = self._strength * alpha / dist2
                a.vx += x * weight
                a.vy += y * weight
                b.vx -= x * weight
                b.vy -= y * weight


class CenterForce:
    """Translates the layout so its centroid sits on the viewport centre."""

    def __init__(self, nodes: list[SimNode], cx: float, cy: float, strength: float = 1.0) -> None:
        self._nodes = nodes
        self._cx = cx
        self._cy = cy
        self._strength = strength

    def apply(self, alpha: float) -> None:
        if not self._nodes:
            return
        n = len(self._nodes)
        sx = (sum(node.x for node in self._nodes) / n - self._cx) * self._strength
        sy = (sum(node.y for node in self._nodes) / n - self._cy) * self._strength
        for node in self._nodes:
            node.x -= sx
            node.y -= sy


class CollideForce:
    """Pushes apart nodes whose exclusion circles overlap (by predicted position)."""

    def __init__(self, nodes: list[SimNode], rng: random.Random, margin: float, strength: float = 1.0) -> None:
        self._nodes = nodes
        self._rng = rng
        self._margin = margin
        self._strength = strength

    def apply(self, alpha: float) -> None:
        nodes = self._nodes
        for i in range(len(nodes)):
            a = nodes[i]
            ra = a.radius + self._margin
            for j in range(i + 1, len(nodes)):
                b = nodes[j]
                rb = b.radius + self._margin
                reach = ra + rb
                x = a.x + a.vx - b.x - b.vx
                y = a.y + a.vy - b.y - b.vy
                dist2 = x * x + y * y
                if dist2 >= reach * reach:
                    continue
                if x == 0:
                    x = _jiggle(self._rng)
                    dist2 += x * x
                if y == 0:
                    y = _jiggle(self._rng)
                    dist2 += y * y
                dist = math.sqrt(dist2)
                scale = (reach - dist) / dist * self._strength
                x *= scale
                y *= scale
                share = rb * rb / (ra * ra + rb * rb)
                a.vx += x * share
                a.vy += y * share
                b.vx -= x * (1 - share)
                b.vy -= y * (1 - share)
