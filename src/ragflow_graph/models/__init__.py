"""Data models for graph payloads and search results."""

from ragflow_graph.models.graph import (
    DEFAULT_NODE_SIZE,
    NODE_TYPES,
    GraphEdge,
    GraphNode,
    KnowledgeGraphData,
)
from ragflow_graph.models.result import (
    API_MODE_KNOWLEDGE_GRAPH,
    API_MODE_SUMMARY,
    SearchResult,
    SearchSource,
)

__all__ = [
    "DEFAULT_NODE_SIZE",
    "NODE_TYPES",
    "GraphEdge",
    "GraphNode",
    "KnowledgeGraphData",
    "API_MODE_KNOWLEDGE_GRAPH",
    "API_MODE_SUMMARY",
    "SearchResult",
    "SearchSource",
]
