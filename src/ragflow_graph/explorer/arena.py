"""
Node state storage for the layout engine.

Positions, velocities and pins are kept in flat numpy arrays indexed by an
integer handle per node. Caller-supplied GraphNode objects are never touched.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ragflow_graph.models.graph import GraphEdge, GraphNode

logger = logging.getLogger(__name__)

# Phyllotaxis seeding used for first placement
INITIAL_RADIUS = 10.0
INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))


class NodeArena:
    """Position, velocity and pin arrays for one graph instance."""

    def __init__(self, nodes: Sequence[GraphNode]):
        self.nodes: Tuple[GraphNode, ...] = tuple(nodes)
        self.ids: List[str] = [n.id for n in self.nodes]
        self.index: Dict[str, int] = {node_id: i for i, node_id in enumerate(self.ids)}

        n = len(self.nodes)
        self.x = np.zeros(n)
        self.y = np.zeros(n)
        self.vx = np.zeros(n)
        self.vy = np.zeros(n)
        # NaN means the axis is free
        self.fx = np.full(n, np.nan)
        self.fy = np.full(n, np.nan)

    def __len__(self) -> int:
        return len(self.ids)

    def handle(self, node_id: str) -> Optional[int]:
        return self.index.get(node_id)

    def place_initial(self) -> None:
        """Seed positions on a phyllotaxis spiral around the origin."""
        i = np.arange(len(self))
        radius = INITIAL_RADIUS * np.sqrt(0.5 + i)
        angle = i * INITIAL_ANGLE
        self.x = radius * np.cos(angle)
        self.y = radius * np.sin(angle)
        self.vx = np.zeros(len(self))
        self.vy = np.zeros(len(self))

        pinned_x = ~np.isnan(self.fx)
        pinned_y = ~np.isnan(self.fy)
        self.x[pinned_x] = self.fx[pinned_x]
        self.y[pinned_y] = self.fy[pinned_y]

    def pin(self, handle: int, x: float, y: float) -> None:
        self.fx[handle] = x
        self.fy[handle] = y

    def unpin(self, handle: int) -> None:
        self.fx[handle] = np.nan
        self.fy[handle] = np.nan

    def is_pinned(self, handle: int) -> bool:
        return not (np.isnan(self.fx[handle]) and np.isnan(self.fy[handle]))

    def position(self, handle: int) -> Tuple[float, float]:
        return float(self.x[handle]), float(self.y[handle])


@dataclass(frozen=True)
class ResolvedLink:
    """An edge whose endpoints were found in the arena."""

    index: int
    source: int
    target: int
    edge: GraphEdge


def resolve_links(
    edges: Sequence[GraphEdge], arena: NodeArena
) -> Tuple[List[ResolvedLink], List[GraphEdge]]:
    """Map edge endpoints to arena handles.

    Returns:
        links:    edges with both endpoints present
        dangling: edges referencing an unknown node id
    """
    links: List[ResolvedLink] = []
    dangling: List[GraphEdge] = []
    for edge in edges:
        source = arena.handle(edge.source)
        target = arena.handle(edge.target)
        if source is None or target is None:
            dangling.append(edge)
            continue
        links.append(ResolvedLink(index=len(links), source=source, target=target, edge=edge))

    for edge in dangling:
        missing = edge.source if arena.handle(edge.source) is None else edge.target
        logger.warning(
            f"Dropping edge {edge.source!r} -> {edge.target!r}: unknown node id {missing!r}"
        )
    return links, dangling
