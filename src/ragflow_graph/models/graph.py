"""Knowledge graph payload types.

The RAG backend delivers graph data as plain JSON:
``{"nodes": [{"id", "label", "type", "size"}], "edges": [{"source", "target", "label"}]}``.
These dataclasses are the immutable, caller-facing view of that payload. The
simulation engine never writes to them; layout state lives in its own arena.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

logger = logging.getLogger(__name__)

NODE_TYPES = (
    "concept",
    "entity",
    "document",
    "event",
    "location",
    "organization",
    "person",
)

DEFAULT_NODE_SIZE = 8.0


@dataclass(frozen=True)
class GraphNode:
    """A single entity in the knowledge graph."""

    id: str
    label: str
    type: Optional[str] = None
    size: Optional[float] = None

    @property
    def radius(self) -> float:
        """Visual radius, falling back to the default when unset or non-positive."""
        if self.size is None or self.size <= 0:
            return DEFAULT_NODE_SIZE
        return float(self.size)

    def to_dict(self) -> dict:
        data: Dict[str, Any] = {"id": self.id, "label": self.label}
        if self.type is not None:
            data["type"] = self.type
        if self.size is not None:
            data["size"] = self.size
        return data


@dataclass(frozen=True)
class GraphEdge:
    """A directed relation between two node ids."""

    source: str
    target: str
    label: Optional[str] = None

    def to_dict(self) -> dict:
        data: Dict[str, Any] = {"source": self.source, "target": self.target}
        if self.label is not None:
            data["label"] = self.label
        return data


@dataclass(frozen=True)
class KnowledgeGraphData:
    """Nodes and edges as returned by a knowledge-graph query."""

    nodes: Tuple[GraphNode, ...] = field(default_factory=tuple)
    edges: Tuple[GraphEdge, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Accept lists from callers but store tuples.
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "edges", tuple(self.edges))

    @property
    def is_empty(self) -> bool:
        return len(self.nodes) == 0

    def node_ids(self) -> Set[str]:
        return {n.id for n in self.nodes}

    def dangling_edges(self) -> List[GraphEdge]:
        """Edges whose source or target does not name a node in this graph."""
        ids = self.node_ids()
        return [e for e in self.edges if e.source not in ids or e.target not in ids]

    def to_networkx(self):
        """Build a MultiDiGraph of the nodes and every resolvable edge.

        Parallel edges are preserved so node degrees match the number of
        links touching each node.
        """
        import networkx as nx

        G = nx.MultiDiGraph()
        for node in self.nodes:
            G.add_node(node.id, label=node.label, type=node.type, size=node.size)
        ids = self.node_ids()
        for edge in self.edges:
            if edge.source in ids and edge.target in ids:
                G.add_edge(edge.source, edge.target, label=edge.label)
        return G

    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }

    @classmethod
    def from_dict(cls, payload: Optional[dict]) -> "KnowledgeGraphData":
        """Parse a ``{"nodes": [...], "edges": [...]}`` payload.

        Nodes without an id and repeated ids are skipped. Edges are kept even
        when an endpoint is unknown; the renderer decides what to draw.
        """
        if not payload:
            return cls()

        nodes: List[GraphNode] = []
        seen: Set[str] = set()
        for raw in payload.get("nodes") or []:
            if not isinstance(raw, dict):
                logger.warning(f"Skipping malformed graph node: {raw!r}")
                continue
            node_id = raw.get("id")
            if node_id is None or node_id == "":
                logger.warning(f"Skipping graph node without id: {raw!r}")
                continue
            node_id = str(node_id)
            if node_id in seen:
                logger.warning(f"Skipping duplicate graph node id '{node_id}'")
                continue
            seen.add(node_id)
            nodes.append(
                GraphNode(
                    id=node_id,
                    label=str(raw.get("label") or node_id),
                    type=raw.get("type") or None,
                    size=_as_size(raw.get("size")),
                )
            )

        edges: List[GraphEdge] = []
        for raw in payload.get("edges") or []:
            if not isinstance(raw, dict):
                logger.warning(f"Skipping malformed graph edge: {raw!r}")
                continue
            source, target = raw.get("source"), raw.get("target")
            if source is None or target is None:
                logger.warning(f"Skipping graph edge without endpoints: {raw!r}")
                continue
            edges.append(
                GraphEdge(source=str(source), target=str(target), label=raw.get("label"))
            )

        return cls(nodes=tuple(nodes), edges=tuple(edges))


def _as_size(value) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring non-numeric node size {value!r}")
        return None
