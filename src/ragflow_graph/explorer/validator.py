"""Decides what the graph panel should show for a given payload."""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from ragflow_graph.models.graph import KnowledgeGraphData

logger = logging.getLogger(__name__)

LOADING_CAPTION = "Loading knowledge graph..."
AWAITING_INPUT_CAPTION = "Enter a query to load the knowledge graph"
NO_GRAPH_DATA_CAPTION = "No knowledge graph data for this query"


class RenderMode(enum.Enum):
    LOADING = "loading"
    EMPTY = "empty"
    READY = "ready"


@dataclass(frozen=True)
class RenderState:
    mode: RenderMode
    caption: str = ""
    data: Optional[KnowledgeGraphData] = None


class GraphStateTracker:
    """Maps (data, loading) to a RenderState.

    Remembers whether a non-empty graph was ever shown, so an empty result
    after a successful query reads differently from the initial empty panel.
    """

    def __init__(self):
        self.has_rendered = False

    def evaluate(
        self, data: Optional[KnowledgeGraphData], loading: bool = False
    ) -> RenderState:
        if loading:
            return RenderState(RenderMode.LOADING, LOADING_CAPTION)

        if data is None or data.is_empty:
            caption = NO_GRAPH_DATA_CAPTION if self.has_rendered else AWAITING_INPUT_CAPTION
            return RenderState(RenderMode.EMPTY, caption)

        dangling = data.dangling_edges()
        if dangling:
            logger.debug(f"Graph has {len(dangling)} edge(s) with unknown endpoints")
        self.has_rendered = True
        return RenderState(RenderMode.READY, data=data)
