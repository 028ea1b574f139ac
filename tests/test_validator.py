"""Tests for the graph panel state decisions."""

from ragflow_graph.explorer.validator import (
    AWAITING_INPUT_CAPTION,
    LOADING_CAPTION,
    NO_GRAPH_DATA_CAPTION,
    GraphStateTracker,
    RenderMode,
)
from ragflow_graph.models.graph import GraphEdge, KnowledgeGraphData


class TestGraphStateTracker:
    def test_loading_wins_over_data(self, two_node_graph):
        state = GraphStateTracker().evaluate(two_node_graph, loading=True)
        assert state.mode is RenderMode.LOADING
        assert state.caption == LOADING_CAPTION

    def test_none_before_any_render(self):
        state = GraphStateTracker().evaluate(None)
        assert state.mode is RenderMode.EMPTY
        assert state.caption == AWAITING_INPUT_CAPTION

    def test_ready_carries_data(self, two_node_graph):
        state = GraphStateTracker().evaluate(two_node_graph)
        assert state.mode is RenderMode.READY
        assert state.data is two_node_graph
        assert state.caption == ""

    def test_empty_after_render_says_no_data(self, two_node_graph):
        tracker = GraphStateTracker()
        tracker.evaluate(two_node_graph)
        state = tracker.evaluate(KnowledgeGraphData())
        assert state.mode is RenderMode.EMPTY
        assert state.caption == NO_GRAPH_DATA_CAPTION

    def test_loading_does_not_count_as_rendered(self, two_node_graph):
        tracker = GraphStateTracker()
        tracker.evaluate(two_node_graph, loading=True)
        assert not tracker.has_rendered
        assert tracker.evaluate(None).caption == AWAITING_INPUT_CAPTION

    def test_edges_without_nodes_are_empty(self):
        data = KnowledgeGraphData(edges=(GraphEdge("a", "b"),))
        assert GraphStateTracker().evaluate(data).mode is RenderMode.EMPTY

    def test_dangling_edges_still_ready(self, dangling_graph):
        assert GraphStateTracker().evaluate(dangling_graph).mode is RenderMode.READY
