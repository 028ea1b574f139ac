"""Search result returned by the RAG backend.

The backend is opaque to this package: ``search(query)`` yields an answer,
the source passages it was grounded on, and optional graph data.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ragflow_graph.models.graph import KnowledgeGraphData

API_MODE_SUMMARY = "summary"
API_MODE_KNOWLEDGE_GRAPH = "knowledge_graph"


@dataclass
class SearchSource:
    """A retrieved passage backing the answer."""

    content: str
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SearchResult:
    """Answer, sources and graph data for one query."""

    answer: str
    sources: List[SearchSource] = field(default_factory=list)
    graph_data: KnowledgeGraphData = field(default_factory=KnowledgeGraphData)
    is_error: bool = False
    error_type: Optional[str] = None

    @property
    def api_mode(self) -> str:
        """``knowledge_graph`` when the result carries any node or edge."""
        if self.graph_data.nodes or self.graph_data.edges:
            return API_MODE_KNOWLEDGE_GRAPH
        return API_MODE_SUMMARY

    @classmethod
    def from_dict(cls, payload: dict) -> "SearchResult":
        graph_payload = payload.get("graphData") or payload.get("graph_data")
        sources = [
            SearchSource(
                content=str(s.get("content", "")),
                metadata=dict(s.get("metadata") or {}),
            )
            for s in payload.get("sources") or []
            if isinstance(s, dict)
        ]
        return cls(
            answer=str(payload.get("answer") or ""),
            sources=sources,
            graph_data=KnowledgeGraphData.from_dict(graph_payload),
            is_error=bool(payload.get("isError") or payload.get("is_error")),
            error_type=payload.get("errorType") or payload.get("error_type"),
        )
