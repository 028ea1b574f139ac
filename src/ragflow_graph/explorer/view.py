"""
Knowledge graph panel.

KnowledgeGraphView is the component the chat shell talks to. It owns at most
one running simulation and its scene, and rebuilds both from scratch for
every payload it is given:

    update(data, loading)  ->  validator  ->  teardown old graph
                                          ->  new Simulation + scene, started

Tick events repaint the scene; interaction calls (drag, zoom, hover) are
routed to the matching controller without restarting the layout.
"""

import logging
import time
from typing import Callable, Dict, Optional, Tuple

import plotly.graph_objects as go

from ragflow_graph.explorer.interaction import (
    DragController,
    Point,
    Tooltip,
    ZoomBehavior,
    ZoomTransform,
)
from ragflow_graph.explorer.renderer import SceneRenderer
from ragflow_graph.explorer.scheduler import FrameScheduler, ManualFrameScheduler
from ragflow_graph.explorer.simulation import Simulation
from ragflow_graph.explorer.validator import GraphStateTracker, RenderMode, RenderState
from ragflow_graph.models.graph import KnowledgeGraphData
from ragflow_graph.utils.config import GraphSettings
from ragflow_graph.utils.observability import new_render_id, timed

logger = logging.getLogger(__name__)


class GraphRenderError(RuntimeError):
    """The graph could not be drawn; the panel is left empty and idle."""


class KnowledgeGraphView:
    """Lifecycle owner for one knowledge graph panel."""

    def __init__(
        self,
        width: Optional[float] = None,
        height: Optional[float] = None,
        scheduler: Optional[FrameScheduler] = None,
        settings: Optional[GraphSettings] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.settings = settings or GraphSettings()
        self.width = width if width is not None else self.settings.width
        self.height = height if height is not None else self.settings.height
        self.scheduler = scheduler or ManualFrameScheduler()

        self.tracker = GraphStateTracker()
        self.renderer = SceneRenderer(self.width, self.height)
        self.zoom = ZoomBehavior(
            self.width,
            self.height,
            scale_extent=(self.settings.zoom_min, self.settings.zoom_max),
        )
        self.tooltip = Tooltip(clock=clock)

        self.simulation: Optional[Simulation] = None
        self.drag: Optional[DragController] = None
        self.state: RenderState = self.tracker.evaluate(None)

    # ── Lifecycle ────────────────────────────────────────────

    @property
    def caption(self) -> str:
        return self.state.caption

    @timed
    def update(
        self, data: Optional[KnowledgeGraphData], loading: bool = False
    ) -> RenderState:
        """Show a new payload, replacing whatever was displayed before."""
        rid = new_render_id()
        had_rendered = self.tracker.has_rendered
        state = self.tracker.evaluate(data, loading)
        self.teardown()
        self.state = state
        logger.debug(f"[{rid}] Graph panel state: {state.mode.value}")

        if state.mode is not RenderMode.READY:
            return state

        if self.width <= 0 or self.height <= 0:
            self._fail(had_rendered)
            raise GraphRenderError(
                f"Drawing surface unavailable ({self.width}x{self.height})"
            )

        try:
            simulation = Simulation(
                state.data, settings=self.settings, width=self.width, height=self.height
            )
            self.simulation = simulation
            self.drag = DragController(simulation, self.settings.drag_alpha_target)
            self.zoom.reset()
            self.renderer.draw(simulation)
            simulation.on("tick", self._on_tick)
            simulation.start(self.scheduler)
        except Exception as e:
            logger.exception(f"[{rid}] Failed to start knowledge graph")
            self._fail(had_rendered)
            raise GraphRenderError(f"Failed to start knowledge graph: {e}") from e

        logger.info(
            f"[{rid}] Rendering graph: {len(simulation.arena)} nodes, "
            f"{len(simulation.links)} edges ({len(simulation.dangling)} skipped)"
        )
        return state

    def _fail(self, had_rendered: bool) -> None:
        """Leave the panel empty, as if the failed payload never arrived."""
        self.teardown()
        self.tracker.has_rendered = had_rendered
        self.state = self.tracker.evaluate(None)

    def _on_tick(self, simulation: Simulation) -> None:
        if simulation is not self.simulation:
            return
        self.renderer.update(simulation)

    def teardown(self) -> None:
        """Stop the simulation and remove everything drawn."""
        if self.simulation is not None:
            self.simulation.dispose()
            logger.debug(f"Stopped simulation after {self.simulation.tick_count} ticks")
        self.simulation = None
        self.drag = None
        self.renderer.clear()
        self.tooltip.hide()

    @timed
    def settle(self, max_frames: Optional[int] = None) -> int:
        """Pump a manual scheduler until the layout converges.

        Returns the number of frames run.
        """
        if not isinstance(self.scheduler, ManualFrameScheduler):
            raise TypeError("settle() needs a ManualFrameScheduler")
        limit = max_frames if max_frames is not None else self.settings.max_settle_frames
        return self.scheduler.run_until_idle(limit)

    # ── Reading state ────────────────────────────────────────

    def positions(self) -> Dict[str, Tuple[float, float]]:
        return {g.node_id: (g.x, g.y) for g in self.renderer.nodes}

    def figure(self, title: str = "") -> Optional[go.Figure]:
        """Plotly figure of the current scene, or None when nothing is shown."""
        if self.state.mode is not RenderMode.READY or self.simulation is None:
            return None
        return self.renderer.to_figure(self.zoom.transform, title=title)

    # ── Interaction ──────────────────────────────────────────

    def _require_drag(self) -> DragController:
        if self.drag is None:
            raise RuntimeError("No knowledge graph is displayed")
        return self.drag

    def node_at(self, point: Point) -> Optional[str]:
        """Node under a screen-space point, if any."""
        if self.simulation is None or not self.renderer.nodes:
            return None
        x, y = self.zoom.transform.invert(point)
        reach = max(g.radius for g in self.renderer.nodes)
        return self.simulation.find(x, y, radius=reach)

    def drag_start(self, node_id: str) -> Point:
        return self._require_drag().drag_start(node_id)

    def drag_move(self, node_id: str, x: float, y: float) -> bool:
        """Move a dragged node to layout coordinates (x, y)."""
        return self._require_drag().drag_move(node_id, x, y)

    def drag_end(self, node_id: str) -> bool:
        return self._require_drag().drag_end(node_id)

    def zoom_to(self, scale: float, point: Optional[Point] = None) -> ZoomTransform:
        return self.zoom.scale_to(scale, point)

    def zoom_by(self, factor: float, point: Optional[Point] = None) -> ZoomTransform:
        return self.zoom.scale_by(factor, point)

    def pan_by(self, dx: float, dy: float) -> ZoomTransform:
        return self.zoom.translate_by(dx, dy)

    def hover(self, node_id: str, page_x: float, page_y: float) -> None:
        """Show the tooltip for a node; for hosts that draw their own overlay."""
        if self.simulation is None:
            return
        handle = self.simulation.arena.handle(node_id)
        if handle is None:
            return
        self.tooltip.show(self.simulation.arena.nodes[handle], page_x, page_y)

    def unhover(self) -> None:
        self.tooltip.hide()
