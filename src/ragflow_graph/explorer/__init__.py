"""Knowledge graph explorer - force-directed layout, interaction and rendering."""

from ragflow_graph.explorer.mock_data import get_mock_graph_data, mock_search
from ragflow_graph.explorer.renderer import SceneRenderer, node_color
from ragflow_graph.explorer.scheduler import AsyncioFrameScheduler, ManualFrameScheduler
from ragflow_graph.explorer.simulation import Simulation, SimulationTask
from ragflow_graph.explorer.validator import GraphStateTracker, RenderMode, RenderState
from ragflow_graph.explorer.view import GraphRenderError, KnowledgeGraphView

__all__ = [
    "get_mock_graph_data",
    "mock_search",
    "SceneRenderer",
    "node_color",
    "AsyncioFrameScheduler",
    "ManualFrameScheduler",
    "Simulation",
    "SimulationTask",
    "GraphStateTracker",
    "RenderMode",
    "RenderState",
    "GraphRenderError",
    "KnowledgeGraphView",
]
