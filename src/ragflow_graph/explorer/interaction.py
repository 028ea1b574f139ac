"""
Pointer interaction for the knowledge graph: drag, zoom/pan and hover.

None of these write node positions or velocities. Dragging only sets pins and
the simulation's alpha target; zoom only changes the paint-time transform;
hover only changes the tooltip.
"""

import html
import logging
import time
from dataclasses import dataclass, replace
from typing import Callable, Optional, Set, Tuple

from ragflow_graph.explorer.simulation import Simulation
from ragflow_graph.models.graph import GraphNode

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


# ---------------------------------------------------------------------------
# Drag
# ---------------------------------------------------------------------------


class DragController:
    """Pins dragged nodes and keeps the simulation warm while dragging.

    Several pointers may drag at once; only the first start reheats and only
    the last end lets the layout cool down.
    """

    def __init__(self, simulation: Simulation, alpha_target: float = 0.3):
        self.simulation = simulation
        self.alpha_target = alpha_target
        self._dragging: Set[str] = set()

    @property
    def dragging(self) -> Set[str]:
        return set(self._dragging)

    def drag_start(self, node_id: str) -> Point:
        """Pin the node where it is. Returns the pin position."""
        sim = self.simulation
        x, y = sim.position(node_id)
        if not self._dragging:
            sim.set_alpha_target(self.alpha_target)
            sim.restart()
        self._dragging.add(node_id)
        sim.pin(node_id, x, y)
        return x, y

    def drag_move(self, node_id: str, x: float, y: float) -> bool:
        """Move the pin to the pointer. Ignored unless a drag is in progress."""
        if node_id not in self._dragging:
            logger.debug(f"drag_move for '{node_id}' without drag_start, ignoring")
            return False
        self.simulation.pin(node_id, x, y)
        return True

    def drag_end(self, node_id: str) -> bool:
        """Release the pin so the node moves freely again."""
        if node_id not in self._dragging:
            return False
        self._dragging.discard(node_id)
        if not self._dragging:
            self.simulation.set_alpha_target(0.0)
        self.simulation.unpin(node_id)
        return True


# ---------------------------------------------------------------------------
# Zoom / pan
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ZoomTransform:
    """Uniform scale ``k`` followed by translation ``(x, y)``."""

    k: float = 1.0
    x: float = 0.0
    y: float = 0.0

    def apply(self, point: Point) -> Point:
        return point[0] * self.k + self.x, point[1] * self.k + self.y

    def invert(self, point: Point) -> Point:
        return (point[0] - self.x) / self.k, (point[1] - self.y) / self.k

    def __str__(self) -> str:
        return f"translate({self.x:g},{self.y:g}) scale({self.k:g})"


IDENTITY = ZoomTransform()


class ZoomBehavior:
    """Holds the scene transform and clamps its scale to ``scale_extent``."""

    def __init__(
        self,
        width: float,
        height: float,
        scale_extent: Tuple[float, float] = (0.5, 5.0),
    ):
        if scale_extent[0] <= 0 or scale_extent[0] > scale_extent[1]:
            raise ValueError(f"Invalid scale extent {scale_extent}")
        self.width = width
        self.height = height
        self.scale_extent = scale_extent
        self.transform = IDENTITY

    def clamp(self, k: float) -> float:
        lo, hi = self.scale_extent
        return max(lo, min(hi, k))

    def scale_to(self, k: float, point: Optional[Point] = None) -> ZoomTransform:
        """Set the scale, keeping the layout point under ``point`` fixed.

        ``point`` is in screen coordinates and defaults to the canvas centre.
        """
        if point is None:
            point = (self.width / 2, self.height / 2)
        k = self.clamp(k)
        anchor = self.transform.invert(point)
        self.transform = ZoomTransform(
            k=k,
            x=point[0] - anchor[0] * k,
            y=point[1] - anchor[1] * k,
        )
        return self.transform

    def scale_by(self, factor: float, point: Optional[Point] = None) -> ZoomTransform:
        return self.scale_to(self.transform.k * factor, point)

    def wheel(self, delta_y: float, point: Optional[Point] = None) -> ZoomTransform:
        """Zoom for a mouse wheel delta (pixels; negative zooms in)."""
        return self.scale_by(2 ** (-delta_y * 0.002), point)

    def translate_by(self, dx: float, dy: float) -> ZoomTransform:
        """Pan by a screen-space offset."""
        self.transform = replace(
            self.transform, x=self.transform.x + dx, y=self.transform.y + dy
        )
        return self.transform

    def reset(self) -> ZoomTransform:
        self.transform = IDENTITY
        return self.transform


# ---------------------------------------------------------------------------
# Tooltip
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Fade:
    start: float
    end: float
    started_at: float
    duration: float

    def at(self, now: float) -> float:
        if self.duration <= 0 or now >= self.started_at + self.duration:
            return self.end
        t = max(0.0, (now - self.started_at) / self.duration)
        return self.start + (self.end - self.start) * t


def tooltip_html(node: GraphNode) -> str:
    content = f"<strong>{html.escape(node.label)}</strong>"
    if node.type:
        content += f"<br>Type: {html.escape(node.type)}"
    return content


class Tooltip:
    """Hover tooltip with timed fade in and out.

    Tracks content, position and opacity for hosts that draw their own
    overlay. The Gradio shell does not use it; its Plotly figure shows the
    same content through native hover text.
    """

    OPACITY = 0.9
    FADE_IN = 0.2
    FADE_OUT = 0.5
    OFFSET = (10, -28)

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._fade = _Fade(0.0, 0.0, 0.0, 0.0)
        self.node_id: Optional[str] = None
        self.html = ""
        self.left = 0.0
        self.top = 0.0

    def _fade_to(self, target: float, duration: float) -> None:
        now = self._clock()
        self._fade = _Fade(self._fade.at(now), target, now, duration)

    def show(self, node: GraphNode, page_x: float, page_y: float) -> None:
        self.node_id = node.id
        self.html = tooltip_html(node)
        self.left = page_x + self.OFFSET[0]
        self.top = page_y + self.OFFSET[1]
        self._fade_to(self.OPACITY, self.FADE_IN)

    def hide(self) -> None:
        self._fade_to(0.0, self.FADE_OUT)

    def opacity_at(self, now: Optional[float] = None) -> float:
        return self._fade.at(self._clock() if now is None else now)

    @property
    def visible(self) -> bool:
        return self.opacity_at() > 0
