"""Utility modules for the knowledge-graph explorer."""

from ragflow_graph.utils.config import (
    GraphSettings,
    clear_config_cache,
    load_config,
    load_graph_settings,
)
from ragflow_graph.utils.observability import get_render_id, new_render_id, timed
from ragflow_graph.utils.plugin_settings import RAGFlowSettings, canonicalize_settings

__all__ = [
    "GraphSettings",
    "clear_config_cache",
    "load_config",
    "load_graph_settings",
    "get_render_id",
    "new_render_id",
    "timed",
    "RAGFlowSettings",
    "canonicalize_settings",
]
