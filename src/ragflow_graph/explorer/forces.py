"""
Force strategies for the layout simulation.

Each force reads the shared NodeArena and adds to node velocities (the centre
force shifts positions instead). Forces are independent: the simulation calls
``initialize`` once per graph and ``apply(alpha)`` once per tick, in
registration order.

- LinkForce:      springs along edges toward a target length
- ManyBodyForce:  pairwise repulsion between all nodes
- CenterForce:    keeps the centroid on the canvas centre
- CollisionForce: keeps node circles from overlapping
"""

import logging
from typing import List, Optional, Sequence

import networkx as nx
import numpy as np

from ragflow_graph.explorer.arena import NodeArena, ResolvedLink

logger = logging.getLogger(__name__)

# Magnitude of the random nudge applied to exactly coincident points
JIGGLE_SCALE = 1e-6


def jiggle(rng: np.random.Generator, size: Optional[int] = None):
    """Tiny random offset used to separate coincident nodes deterministically."""
    return (rng.random(size) - 0.5) * JIGGLE_SCALE


class Force:
    """Base class for a force applied once per simulation tick."""

    def initialize(
        self,
        arena: NodeArena,
        links: Sequence[ResolvedLink],
        rng: np.random.Generator,
    ) -> None:
        self.arena = arena
        self.rng = rng

    def apply(self, alpha: float) -> None:
        raise NotImplementedError


class LinkForce(Force):
    """Pulls linked nodes toward ``distance`` apart.

    Each link's stiffness is ``1 / min(degree(source), degree(target))`` so
    hubs are not torn apart, and the correction is split between the two ends
    in proportion to their degrees.
    """

    def __init__(self, distance: float = 100.0, iterations: int = 1):
        self.distance = distance
        self.iterations = iterations
        self.links: List[ResolvedLink] = []

    def initialize(self, arena, links, rng) -> None:
        super().initialize(arena, links, rng)
        self.links = list(links)

        G = nx.MultiGraph()
        G.add_nodes_from(range(len(arena)))
        G.add_edges_from((link.source, link.target) for link in self.links)
        degree = dict(G.degree())

        self.strengths = [
            1.0 / max(1, min(degree[l.source], degree[l.target])) for l in self.links
        ]
        self.biases = [
            degree[l.source] / (degree[l.source] + degree[l.target]) for l in self.links
        ]

    def apply(self, alpha: float) -> None:
        a = self.arena
        for _ in range(self.iterations):
            for link, strength, bias in zip(self.links, self.strengths, self.biases):
                s, t = link.source, link.target
                dx = a.x[t] + a.vx[t] - a.x[s] - a.vx[s]
                dy = a.y[t] + a.vy[t] - a.y[s] - a.vy[s]
                if dx == 0:
                    dx = jiggle(self.rng)
                if dy == 0:
                    dy = jiggle(self.rng)
                length = np.hypot(dx, dy)
                factor = (length - self.distance) / length * alpha * strength
                dx *= factor
                dy *= factor
                a.vx[t] -= dx * bias
                a.vy[t] -= dy * bias
                a.vx[s] += dx * (1 - bias)
                a.vy[s] += dy * (1 - bias)


class ManyBodyForce(Force):
    """Exact all-pairs charge between nodes; negative strength repels."""

    def __init__(self, strength: float = -300.0, distance_min: float = 1.0):
        self.strength = strength
        self.distance_min2 = distance_min * distance_min

    def apply(self, alpha: float) -> None:
        a = self.arena
        n = len(a)
        if n < 2:
            return

        # Row i holds offsets from node i to every other node
        dx = a.x[None, :] - a.x[:, None]
        dy = a.y[None, :] - a.y[:, None]
        off_diagonal = ~np.eye(n, dtype=bool)

        zero_x = (dx == 0) & off_diagonal
        if zero_x.any():
            dx[zero_x] = jiggle(self.rng, int(zero_x.sum()))
        zero_y = (dy == 0) & off_diagonal
        if zero_y.any():
            dy[zero_y] = jiggle(self.rng, int(zero_y.sum()))

        dist2 = dx * dx + dy * dy
        close = dist2 < self.distance_min2
        dist2 = np.where(close, np.sqrt(self.distance_min2 * dist2), dist2)
        np.fill_diagonal(dist2, np.inf)

        weight = self.strength * alpha / dist2
        a.vx += (dx * weight).sum(axis=1)
        a.vy += (dy * weight).sum(axis=1)


class CenterForce(Force):
    """Translates every node so the centroid sits at (cx, cy)."""

    def __init__(self, cx: float = 0.0, cy: float = 0.0, strength: float = 1.0):
        self.cx = cx
        self.cy = cy
        self.strength = strength

    def apply(self, alpha: float) -> None:
        a = self.arena
        if len(a) == 0:
            return
        shift_x = (a.x.mean() - self.cx) * self.strength
        shift_y = (a.y.mean() - self.cy) * self.strength
        a.x -= shift_x
        a.y -= shift_y


class CollisionForce(Force):
    """Pushes apart nodes whose collision circles overlap.

    Overlaps are measured on predicted positions (x + vx) and resolved by
    velocity changes, split by relative radius.
    """

    def __init__(self, radius: float = 30.0, strength: float = 1.0, iterations: int = 1):
        self.radius = radius
        self.strength = strength
        self.iterations = iterations

    def initialize(self, arena, links, rng) -> None:
        super().initialize(arena, links, rng)
        self.radii = np.full(len(arena), float(self.radius))

    def apply(self, alpha: float) -> None:
        a = self.arena
        n = len(a)
        radii = self.radii
        for _ in range(self.iterations):
            for i in range(n - 1):
                xi = a.x[i] + a.vx[i]
                yi = a.y[i] + a.vy[i]
                ri2 = radii[i] * radii[i]

                j = np.arange(i + 1, n)
                dx = xi - a.x[j] - a.vx[j]
                dy = yi - a.y[j] - a.vy[j]
                reach = radii[i] + radii[j]
                dist2 = dx * dx + dy * dy
                overlap = dist2 < reach * reach
                if not overlap.any():
                    continue

                j, dx, dy, reach, dist2 = (
                    j[overlap], dx[overlap], dy[overlap], reach[overlap], dist2[overlap]
                )
                zero_x = dx == 0
                if zero_x.any():
                    dx[zero_x] = jiggle(self.rng, int(zero_x.sum()))
                    dist2[zero_x] += dx[zero_x] ** 2
                zero_y = dy == 0
                if zero_y.any():
                    dy[zero_y] = jiggle(self.rng, int(zero_y.sum()))
                    dist2[zero_y] += dy[zero_y] ** 2

                dist = np.sqrt(dist2)
                factor = (reach - dist) / dist * self.strength
                dx = dx * factor
                dy = dy * factor

                rj2 = radii[j] * radii[j]
                share = rj2 / (ri2 + rj2)
                a.vx[i] += (dx * share).sum()
                a.vy[i] += (dy * share).sum()
                a.vx[j] -= dx * (1 - share)
                a.vy[j] -= dy * (1 - share)
