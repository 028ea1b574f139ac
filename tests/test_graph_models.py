"""Tests for graph payload parsing and search result models."""

import logging

import pytest

from ragflow_graph.models.graph import (
    DEFAULT_NODE_SIZE,
    GraphEdge,
    GraphNode,
    KnowledgeGraphData,
)
from ragflow_graph.models.result import (
    API_MODE_KNOWLEDGE_GRAPH,
    API_MODE_SUMMARY,
    SearchResult,
)


class TestGraphNode:
    def test_radius_defaults_when_size_missing(self):
        assert GraphNode("1", "One").radius == DEFAULT_NODE_SIZE

    def test_radius_defaults_when_size_not_positive(self):
        assert GraphNode("1", "One", size=0).radius == DEFAULT_NODE_SIZE
        assert GraphNode("1", "One", size=-3).radius == DEFAULT_NODE_SIZE

    def test_radius_uses_size(self):
        assert GraphNode("1", "One", size=14).radius == 14.0

    def test_nodes_are_immutable(self):
        node = GraphNode("1", "One")
        with pytest.raises(AttributeError):
            node.label = "changed"


class TestKnowledgeGraphDataFromDict:
    def test_parses_nodes_and_edges(self):
        data = KnowledgeGraphData.from_dict({
            "nodes": [
                {"id": "1", "label": "Node 1", "type": "concept"},
                {"id": "2", "label": "Node 2", "type": "entity", "size": 12},
            ],
            "edges": [{"source": "1", "target": "2", "label": "relates to"}],
        })

        assert [n.id for n in data.nodes] == ["1", "2"]
        assert data.nodes[1].size == 12.0
        assert data.edges == (GraphEdge("1", "2", "relates to"),)

    def test_none_payload_is_empty(self):
        assert KnowledgeGraphData.from_dict(None).is_empty

    def test_skips_nodes_without_id(self, caplog):
        with caplog.at_level(logging.WARNING):
            data = KnowledgeGraphData.from_dict({"nodes": [{"label": "orphan"}, {"id": "a"}]})
        assert [n.id for n in data.nodes] == ["a"]
        assert "without id" in caplog.text

    def test_skips_duplicate_ids(self):
        data = KnowledgeGraphData.from_dict({
            "nodes": [{"id": "a", "label": "first"}, {"id": "a", "label": "second"}],
        })
        assert len(data.nodes) == 1
        assert data.nodes[0].label == "first"

    def test_label_falls_back_to_id(self):
        data = KnowledgeGraphData.from_dict({"nodes": [{"id": 7}]})
        assert data.nodes[0].id == "7"
        assert data.nodes[0].label == "7"

    def test_keeps_dangling_edges(self):
        data = KnowledgeGraphData.from_dict({
            "nodes": [{"id": "1"}, {"id": "2"}],
            "edges": [{"source": "1", "target": "2"}, {"source": "1", "target": "99"}],
        })
        assert len(data.edges) == 2
        assert data.dangling_edges() == [GraphEdge("1", "99")]

    def test_skips_edges_without_endpoints(self):
        data = KnowledgeGraphData.from_dict({
            "nodes": [{"id": "1"}],
            "edges": [{"source": "1"}],
        })
        assert data.edges == ()

    def test_ignores_non_numeric_size(self):
        data = KnowledgeGraphData.from_dict({"nodes": [{"id": "1", "size": "big"}]})
        assert data.nodes[0].size is None

    def test_to_dict_round_trips_fields(self, two_node_graph):
        payload = two_node_graph.to_dict()
        assert payload["nodes"][0] == {"id": "1", "label": "Node 1", "type": "concept"}
        assert payload["edges"][0] == {"source": "1", "target": "2", "label": "relates to"}


class TestToNetworkx:
    def test_excludes_dangling_edges(self, dangling_graph):
        G = dangling_graph.to_networkx()
        assert set(G.nodes) == {"1", "2"}
        assert G.number_of_edges() == 1

    def test_keeps_parallel_edges(self):
        data = KnowledgeGraphData(
            nodes=(GraphNode("a", "A"), GraphNode("b", "B")),
            edges=(GraphEdge("a", "b", "x"), GraphEdge("a", "b", "y")),
        )
        G = data.to_networkx()
        assert G.degree("a") == 2


class TestSearchResult:
    def test_knowledge_graph_mode_when_graph_present(self):
        result = SearchResult.from_dict({
            "answer": "ok",
            "graphData": {"nodes": [{"id": "1"}], "edges": []},
        })
        assert result.api_mode == API_MODE_KNOWLEDGE_GRAPH

    def test_summary_mode_without_graph(self):
        result = SearchResult.from_dict({"answer": "ok", "sources": []})
        assert result.api_mode == API_MODE_SUMMARY
        assert result.graph_data.is_empty

    def test_accepts_snake_case_keys(self):
        result = SearchResult.from_dict({
            "answer": "failed",
            "graph_data": {"nodes": [], "edges": [{"source": "a", "target": "b"}]},
            "is_error": True,
            "error_type": "timeout",
        })
        assert result.is_error
        assert result.error_type == "timeout"
        # An edge alone is enough to count as graph output
        assert result.api_mode == API_MODE_KNOWLEDGE_GRAPH

    def test_parses_sources(self):
        result = SearchResult.from_dict({
            "answer": "ok",
            "sources": [{"content": "passage", "metadata": {"doc": "a.pdf"}}, "junk"],
        })
        assert len(result.sources) == 1
        assert result.sources[0].metadata == {"doc": "a.pdf"}
