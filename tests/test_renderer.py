"""Tests for the retained scene and its Plotly painting."""

import plotly.graph_objects as go
import pytest

from ragflow_graph.explorer.interaction import ZoomTransform
from ragflow_graph.explorer.renderer import (
    ARROW_MARKER,
    NODE_COLORS,
    SceneRenderer,
    node_color,
)
from ragflow_graph.explorer.simulation import Simulation
from ragflow_graph.models.graph import NODE_TYPES


class TestNodeColor:
    @pytest.mark.parametrize("node_type", sorted(NODE_COLORS))
    def test_known_types(self, node_type):
        assert node_color(node_type) == NODE_COLORS[node_type]

    def test_every_payload_type_has_a_color(self):
        assert set(NODE_TYPES) <= set(NODE_COLORS)

    def test_unknown_type_is_gray(self):
        assert node_color("galaxy") == "#7f7f7f"

    def test_missing_type_is_gray(self):
        assert node_color(None) == "#7f7f7f"


class TestDraw:
    def test_dangling_edge_not_drawn(self, dangling_graph):
        renderer = SceneRenderer(800, 500)
        renderer.draw(Simulation(dangling_graph))
        assert len(renderer.edges) == 1
        assert (renderer.edges[0].source_id, renderer.edges[0].target_id) == ("1", "2")

    def test_single_shared_marker(self, triangle_graph):
        renderer = SceneRenderer(800, 500)
        renderer.draw(Simulation(triangle_graph))
        assert list(renderer.markers) == ["end"]
        assert all(e.marker == ARROW_MARKER.id for e in renderer.edges)

    def test_node_glyph_styles(self, triangle_graph):
        renderer = SceneRenderer(800, 500)
        renderer.draw(Simulation(triangle_graph))
        a, b, _ = renderer.nodes
        assert a.radius == 12 and a.fill == NODE_COLORS["person"]
        assert b.radius == 8 and b.fill == NODE_COLORS["organization"]
        assert (a.label_dx, a.label_dy) == (12, 3)

    def test_hover_text_has_connections(self, triangle_graph):
        renderer = SceneRenderer(800, 500)
        renderer.draw(Simulation(triangle_graph))
        assert renderer.nodes[0].hover_html.endswith("Connections: 2")

    def test_redraw_replaces_previous_scene(self, triangle_graph, two_node_graph):
        renderer = SceneRenderer(800, 500)
        renderer.draw(Simulation(triangle_graph))
        renderer.draw(Simulation(two_node_graph))
        assert [g.node_id for g in renderer.nodes] == ["1", "2"]
        assert len(renderer.edges) == 1


class TestUpdate:
    def test_positions_follow_arena(self, two_node_graph):
        sim = Simulation(two_node_graph)
        renderer = SceneRenderer(800, 500)
        renderer.draw(sim)
        sim.tick(5)
        renderer.update(sim)

        assert (renderer.nodes[0].x, renderer.nodes[0].y) == sim.position("1")
        edge = renderer.edges[0]
        assert (edge.x1, edge.y1) == sim.position("1")
        assert (edge.x2, edge.y2) == sim.position("2")
        assert renderer.nodes[1].transform.startswith("translate(")

    def test_clear(self, two_node_graph):
        renderer = SceneRenderer(800, 500)
        renderer.draw(Simulation(two_node_graph))
        renderer.clear()
        assert renderer.is_empty


class TestToFigure:
    def test_traces_and_arrows(self, triangle_graph):
        renderer = SceneRenderer(800, 500)
        renderer.draw(Simulation(triangle_graph))
        fig = renderer.to_figure()

        assert isinstance(fig, go.Figure)
        assert len(fig.data) == 2
        assert len(fig.layout.annotations) == 3
        assert list(fig.data[1].text) == ["A", "B", "C"]

    def test_zoom_applied_at_paint_time(self, two_node_graph):
        sim = Simulation(two_node_graph)
        renderer = SceneRenderer(800, 500)
        renderer.draw(sim)
        x_before = sim.arena.x.copy()

        fig = renderer.to_figure(ZoomTransform(k=2, x=10, y=20))

        x, y = sim.position("1")
        assert fig.data[1].x[0] == pytest.approx(2 * x + 10)
        assert fig.data[1].y[0] == pytest.approx(2 * y + 20)
        assert fig.data[1].marker.size[0] == pytest.approx(32)
        assert (sim.arena.x == x_before).all()

    def test_empty_scene(self):
        fig = SceneRenderer(800, 500).to_figure()
        assert len(fig.data[1].x) == 0

    def test_y_axis_points_down(self, two_node_graph):
        renderer = SceneRenderer(800, 500)
        renderer.draw(Simulation(two_node_graph))
        fig = renderer.to_figure()
        assert tuple(fig.layout.yaxis.range) == (500, 0)
