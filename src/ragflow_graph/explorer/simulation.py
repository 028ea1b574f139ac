"""
Force-directed layout simulation.

The simulation owns a NodeArena and a set of named forces. Each tick:

1. alpha moves toward alpha_target by alpha_decay
2. every force is applied in registration order
3. free axes integrate velocity (damped by velocity_decay); pinned axes
   snap to their pin with zero velocity
4. tick listeners are notified with the fully-updated state

Ticks are driven one per frame by a SimulationTask, which stops itself once
alpha drops below alpha_min and can be cancelled at any time.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from ragflow_graph.explorer.arena import NodeArena, ResolvedLink, resolve_links
from ragflow_graph.explorer.forces import (
    CenterForce,
    CollisionForce,
    Force,
    LinkForce,
    ManyBodyForce,
)
from ragflow_graph.explorer.scheduler import FrameHandle, FrameScheduler
from ragflow_graph.models.graph import KnowledgeGraphData
from ragflow_graph.utils.config import GraphSettings

logger = logging.getLogger(__name__)

Listener = Callable[["Simulation"], None]


def default_forces(settings: GraphSettings, width: float, height: float) -> Dict[str, Force]:
    """The standard force set for a canvas of the given size."""
    return {
        "link": LinkForce(distance=settings.link_distance),
        "charge": ManyBodyForce(strength=settings.charge_strength),
        "center": CenterForce(width / 2, height / 2),
        "collision": CollisionForce(radius=settings.collision_radius),
    }


class SimulationTask:
    """Cancellable per-frame driver for a Simulation."""

    def __init__(self, simulation: "Simulation", scheduler: FrameScheduler):
        self.simulation = simulation
        self.scheduler = scheduler
        self.active = False
        self._handle: Optional[FrameHandle] = None

    def start(self) -> None:
        if self.active:
            return
        self.active = True
        self._schedule()

    def stop(self) -> None:
        """Cancel the pending frame; no further ticks will run."""
        self.active = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self) -> None:
        self._handle = self.scheduler.request_frame(self._on_frame)

    def _on_frame(self) -> None:
        self._handle = None
        if not self.active:
            return
        sim = self.simulation
        sim.tick()
        if not self.active:
            # A tick listener stopped us
            return
        if sim.alpha < sim.alpha_min:
            self.active = False
            logger.debug(f"Simulation converged after {sim.tick_count} ticks")
            sim._emit("end")
        else:
            self._schedule()


class Simulation:
    """Force-directed layout for one KnowledgeGraphData instance."""

    EVENTS = ("tick", "end")

    def __init__(
        self,
        data: KnowledgeGraphData,
        settings: Optional[GraphSettings] = None,
        width: Optional[float] = None,
        height: Optional[float] = None,
        forces: Optional[Dict[str, Force]] = None,
    ):
        self.settings = settings or GraphSettings()
        self.width = float(width if width is not None else self.settings.width)
        self.height = float(height if height is not None else self.settings.height)
        self.data = data

        self.arena = NodeArena(data.nodes)
        self.links: List[ResolvedLink]
        self.links, self.dangling = resolve_links(data.edges, self.arena)
        self.rng = np.random.default_rng(self.settings.seed)

        self.alpha = 1.0
        self.alpha_min = self.settings.alpha_min
        self.alpha_decay = self.settings.alpha_decay
        self.alpha_target = 0.0
        self.velocity_decay = self.settings.velocity_decay
        self.tick_count = 0

        self._forces: Dict[str, Force] = {}
        self._listeners: Dict[str, List[Listener]] = {name: [] for name in self.EVENTS}
        self._task: Optional[SimulationTask] = None
        self._disposed = False

        self.arena.place_initial()
        if forces is None:
            forces = default_forces(self.settings, self.width, self.height)
        for name, force in forces.items():
            self.add_force(name, force)

    # ── Forces ───────────────────────────────────────────────

    def add_force(self, name: str, force: Force) -> None:
        force.initialize(self.arena, self.links, self.rng)
        self._forces[name] = force

    def remove_force(self, name: str) -> Optional[Force]:
        return self._forces.pop(name, None)

    def force(self, name: str) -> Optional[Force]:
        return self._forces.get(name)

    @property
    def force_names(self) -> Tuple[str, ...]:
        return tuple(self._forces)

    # ── Events ───────────────────────────────────────────────

    def on(self, event: str, listener: Listener) -> None:
        if event not in self._listeners:
            raise ValueError(f"Unknown simulation event '{event}'")
        self._listeners[event].append(listener)

    def off(self, event: str, listener: Listener) -> None:
        if event in self._listeners and listener in self._listeners[event]:
            self._listeners[event].remove(listener)

    def _emit(self, event: str) -> None:
        for listener in list(self._listeners[event]):
            listener(self)

    # ── Stepping ─────────────────────────────────────────────

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def converged(self) -> bool:
        return self.alpha < self.alpha_min

    @property
    def running(self) -> bool:
        return self._task is not None and self._task.active

    def tick(self, iterations: int = 1) -> bool:
        """Advance the layout. Returns False (and does nothing) once disposed."""
        if self._disposed:
            logger.debug("Ignoring tick on a disposed simulation")
            return False

        a = self.arena
        for _ in range(iterations):
            self.alpha += (self.alpha_target - self.alpha) * self.alpha_decay

            for force in self._forces.values():
                force.apply(self.alpha)

            free_x = np.isnan(a.fx)
            free_y = np.isnan(a.fy)
            a.vx[free_x] *= 1 - self.velocity_decay
            a.vy[free_y] *= 1 - self.velocity_decay
            a.x[free_x] += a.vx[free_x]
            a.y[free_y] += a.vy[free_y]
            a.x[~free_x] = a.fx[~free_x]
            a.y[~free_y] = a.fy[~free_y]
            a.vx[~free_x] = 0.0
            a.vy[~free_y] = 0.0
            self.tick_count += 1

        self._emit("tick")
        return True

    def start(self, scheduler: FrameScheduler) -> SimulationTask:
        """Begin ticking once per frame on the given scheduler."""
        if self._disposed:
            raise RuntimeError("Cannot start a disposed simulation")
        if self._task is not None:
            self._task.stop()
        self._task = SimulationTask(self, scheduler)
        self._task.start()
        return self._task

    def restart(self) -> None:
        """Resume frame scheduling after convergence or stop()."""
        if self._disposed or self._task is None:
            return
        self._task.start()

    def stop(self) -> None:
        if self._task is not None:
            self._task.stop()

    def dispose(self) -> None:
        """Stop for good: cancel frames, drop listeners, ignore later ticks."""
        self.stop()
        self._disposed = True
        for listeners in self._listeners.values():
            listeners.clear()

    def set_alpha_target(self, target: float) -> None:
        self.alpha_target = target

    # ── Node access ──────────────────────────────────────────

    def _handle(self, node_id: str) -> int:
        handle = self.arena.handle(node_id)
        if handle is None:
            raise KeyError(f"Unknown node id '{node_id}'")
        return handle

    def position(self, node_id: str) -> Tuple[float, float]:
        return self.arena.position(self._handle(node_id))

    def velocity(self, node_id: str) -> Tuple[float, float]:
        h = self._handle(node_id)
        return float(self.arena.vx[h]), float(self.arena.vy[h])

    def pin(self, node_id: str, x: float, y: float) -> None:
        self.arena.pin(self._handle(node_id), x, y)

    def unpin(self, node_id: str) -> None:
        self.arena.unpin(self._handle(node_id))

    def is_pinned(self, node_id: str) -> bool:
        return self.arena.is_pinned(self._handle(node_id))

    def find(self, x: float, y: float, radius: Optional[float] = None) -> Optional[str]:
        """Id of the node closest to (x, y), optionally within radius."""
        a = self.arena
        if len(a) == 0:
            return None
        dist2 = (a.x - x) ** 2 + (a.y - y) ** 2
        best = int(np.argmin(dist2))
        if radius is not None and dist2[best] > radius * radius:
            return None
        return a.ids[best]
