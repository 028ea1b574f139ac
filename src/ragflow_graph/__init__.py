"""RAGFlow knowledge graph explorer.

This module avoids importing the Gradio UI stack at import time. Symbols
are loaded lazily via ``__getattr__`` so the models and the layout engine can
be used headlessly.
"""

from importlib import import_module
from typing import Any

__all__ = [
    "GraphNode",
    "GraphEdge",
    "KnowledgeGraphData",
    "SearchResult",
    "Simulation",
    "KnowledgeGraphView",
    "GraphSettings",
    "create_app",
]

_EXPORT_MAP = {
    "GraphNode": ("ragflow_graph.models", "GraphNode"),
    "GraphEdge": ("ragflow_graph.models", "GraphEdge"),
    "KnowledgeGraphData": ("ragflow_graph.models", "KnowledgeGraphData"),
    "SearchResult": ("ragflow_graph.models", "SearchResult"),
    "Simulation": ("ragflow_graph.explorer.simulation", "Simulation"),
    "KnowledgeGraphView": ("ragflow_graph.explorer.view", "KnowledgeGraphView"),
    "GraphSettings": ("ragflow_graph.utils.config", "GraphSettings"),
    "create_app": ("ragflow_graph.ui", "create_app"),
}


def __getattr__(name: str) -> Any:
    """Lazy-load exported package symbols on first access."""
    if name not in _EXPORT_MAP:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_name, attr_name = _EXPORT_MAP[name]
    module = import_module(module_name)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value
