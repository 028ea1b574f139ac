"""
Scene renderer for the knowledge graph.

Keeps a retained scene (edge lines, node glyphs, one shared arrow marker)
that mirrors the simulation arena, and paints it into a Plotly figure. The
zoom transform is applied at paint time only; scene coordinates are always
layout coordinates.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np
import plotly.graph_objects as go

from ragflow_graph.explorer.interaction import IDENTITY, ZoomTransform, tooltip_html
from ragflow_graph.explorer.simulation import Simulation

logger = logging.getLogger(__name__)

NODE_COLORS = {
    "concept": "#ff7f0e",
    "default": "#7f7f7f",
    "document": "#2ca02c",
    "entity": "#1f77b4",
    "event": "#e377c2",
    "location": "#8c564b",
    "organization": "#9467bd",
    "person": "#d62728",
}


def node_color(node_type: Optional[str]) -> str:
    """Fill color for a node type; unknown or missing types are gray."""
    if node_type and node_type in NODE_COLORS:
        return NODE_COLORS[node_type]
    return NODE_COLORS["default"]


@dataclass(frozen=True)
class MarkerDef:
    """Arrowhead definition shared by every edge that references it."""

    id: str = "end"
    view_box: str = "0 -5 10 10"
    ref_x: float = 25
    ref_y: float = 0
    width: float = 6
    height: float = 6
    orient: str = "auto"
    path: str = "M0,-5L10,0L0,5"
    fill: str = "#999"


ARROW_MARKER = MarkerDef()


@dataclass
class EdgeLine:
    link_index: int
    source_id: str
    target_id: str
    label: Optional[str]
    marker: str = ARROW_MARKER.id
    stroke: str = "#999"
    stroke_opacity: float = 0.6
    stroke_width: float = 1.0
    x1: float = 0.0
    y1: float = 0.0
    x2: float = 0.0
    y2: float = 0.0


@dataclass
class NodeGlyph:
    node_id: str
    label: str
    type: Optional[str]
    radius: float
    fill: str
    hover_html: str
    stroke: str = "#fff"
    stroke_width: float = 1.5
    label_dx: float = 12
    label_dy: float = 3
    font_size: float = 10
    x: float = 0.0
    y: float = 0.0

    @property
    def transform(self) -> str:
        return f"translate({self.x:g},{self.y:g})"


class SceneRenderer:
    """Retained scene mirroring a running Simulation."""

    def __init__(self, width: float, height: float):
        self.width = width
        self.height = height
        self.markers: Dict[str, MarkerDef] = {}
        self.edges: List[EdgeLine] = []
        self.nodes: List[NodeGlyph] = []
        self.updates = 0

    @property
    def is_empty(self) -> bool:
        return not (self.nodes or self.edges or self.markers)

    def clear(self) -> None:
        """Remove every drawn element."""
        self.markers.clear()
        self.edges.clear()
        self.nodes.clear()
        self.updates = 0

    def draw(self, simulation: Simulation) -> None:
        """Build the scene for a freshly started simulation."""
        self.clear()

        # One marker definition, shared by all edges
        self.markers[ARROW_MARKER.id] = ARROW_MARKER

        arena = simulation.arena
        for link in simulation.links:
            self.edges.append(
                EdgeLine(
                    link_index=link.index,
                    source_id=arena.ids[link.source],
                    target_id=arena.ids[link.target],
                    label=link.edge.label,
                )
            )
        if simulation.dangling:
            logger.debug(f"Not drawing {len(simulation.dangling)} dangling edge(s)")

        degree = dict(simulation.data.to_networkx().degree())
        for node in arena.nodes:
            self.nodes.append(
                NodeGlyph(
                    node_id=node.id,
                    label=node.label,
                    type=node.type,
                    radius=node.radius,
                    fill=node_color(node.type),
                    hover_html=f"{tooltip_html(node)}<br>Connections: {degree.get(node.id, 0)}",
                )
            )
        self.update(simulation)

    def update(self, simulation: Simulation) -> None:
        """Copy current arena positions into the scene."""
        arena = simulation.arena
        for handle, glyph in enumerate(self.nodes):
            glyph.x = float(arena.x[handle])
            glyph.y = float(arena.y[handle])
        for line, link in zip(self.edges, simulation.links):
            line.x1 = float(arena.x[link.source])
            line.y1 = float(arena.y[link.source])
            line.x2 = float(arena.x[link.target])
            line.y2 = float(arena.y[link.target])
        self.updates += 1

    def to_figure(self, transform: ZoomTransform = IDENTITY, title: str = "") -> go.Figure:
        """Paint the scene with the zoom transform applied."""
        k = transform.k

        edge_x: List[Optional[float]] = []
        edge_y: List[Optional[float]] = []
        annotations = []
        glyphs = {g.node_id: g for g in self.nodes}
        for line in self.edges:
            x0, y0 = transform.apply((line.x1, line.y1))
            x1, y1 = transform.apply((line.x2, line.y2))
            edge_x += [x0, x1, None]
            edge_y += [y0, y1, None]

            marker = self.markers.get(line.marker)
            if marker is None:
                continue
            target = glyphs.get(line.target_id)
            annotations.append(
                dict(
                    x=x1,
                    y=y1,
                    ax=x0,
                    ay=y0,
                    xref="x",
                    yref="y",
                    axref="x",
                    ayref="y",
                    text="",
                    showarrow=True,
                    arrowhead=2,
                    arrowsize=marker.width / 6,
                    arrowwidth=line.stroke_width,
                    arrowcolor=marker.fill,
                    opacity=line.stroke_opacity,
                    standoff=(target.radius if target else 0) * k,
                )
            )

        edge_trace = go.Scatter(
            x=edge_x,
            y=edge_y,
            mode="lines",
            line=dict(width=1, color="rgba(153,153,153,0.6)"),
            hoverinfo="none",
            showlegend=False,
        )

        points = np.array([transform.apply((g.x, g.y)) for g in self.nodes]).reshape(-1, 2)
        node_trace = go.Scatter(
            x=points[:, 0].tolist(),
            y=points[:, 1].tolist(),
            mode="markers+text",
            text=[g.label for g in self.nodes],
            textposition="middle right",
            textfont=dict(size=10 * k, color="#333333"),
            hovertext=[g.hover_html for g in self.nodes],
            hoverinfo="text",
            marker=dict(
                size=[2 * g.radius * k for g in self.nodes],
                color=[g.fill for g in self.nodes],
                line=dict(width=1.5, color="#ffffff"),
            ),
            customdata=[g.node_id for g in self.nodes],
            showlegend=False,
        )

        fig = go.Figure(data=[edge_trace, node_trace])
        fig.update_layout(
            title=dict(text=title, x=0.5, xanchor="center"),
            xaxis=dict(
                range=[0, self.width],
                showgrid=False,
                zeroline=False,
                showticklabels=False,
            ),
            yaxis=dict(
                range=[self.height, 0],
                showgrid=False,
                zeroline=False,
                showticklabels=False,
            ),
            annotations=annotations,
            hovermode="closest",
            margin=dict(l=10, r=10, t=40 if title else 10, b=10),
            width=self.width,
            height=self.height,
            plot_bgcolor="#ffffff",
            paper_bgcolor="#ffffff",
        )
        return fig
