"""
Sample knowledge graph for running the explorer without a RAG backend.

Covers every node type color, varied node sizes, labelled and unlabelled
edges, and one edge pointing at a node the backend did not return.
"""

from ragflow_graph.models.graph import GraphEdge, GraphNode, KnowledgeGraphData
from ragflow_graph.models.result import SearchResult, SearchSource


def get_mock_graph_data() -> KnowledgeGraphData:
    """Return a small urban-studies knowledge graph."""
    nodes = [
        # ── People ──────────────────────────────────────────
        GraphNode("harvey", "David Harvey", "person", 12),
        GraphNode("lefebvre", "Henri Lefebvre", "person", 12),
        GraphNode("massey", "Doreen Massey", "person", 10),
        # ── Concepts ────────────────────────────────────────
        GraphNode("right_to_city", "Right to the City", "concept", 14),
        GraphNode("production_of_space", "Production of Space", "concept", 11),
        GraphNode("neoliberalism", "Neoliberalism", "concept"),
        # ── Documents ───────────────────────────────────────
        GraphNode("rebel_cities", "Rebel Cities (2012)", "document"),
        GraphNode("for_space", "For Space (2005)", "document"),
        # ── Context ─────────────────────────────────────────
        GraphNode("paris", "Paris", "location"),
        GraphNode("may_68", "May 1968", "event"),
        GraphNode("cuny", "CUNY Graduate Center", "organization"),
        GraphNode("urbanization", "Planetary urbanization", "entity"),
        GraphNode("commons", "Urban commons"),
    ]
    edges = [
        GraphEdge("lefebvre", "right_to_city", "coined"),
        GraphEdge("lefebvre", "production_of_space", "wrote about"),
        GraphEdge("harvey", "right_to_city", "extended"),
        GraphEdge("harvey", "neoliberalism", "critiqued"),
        GraphEdge("harvey", "rebel_cities", "authored"),
        GraphEdge("harvey", "cuny", "affiliated with"),
        GraphEdge("massey", "for_space", "authored"),
        GraphEdge("massey", "production_of_space", "critiqued"),
        GraphEdge("rebel_cities", "right_to_city"),
        GraphEdge("rebel_cities", "commons", "discusses"),
        GraphEdge("right_to_city", "may_68", "inspired"),
        GraphEdge("may_68", "paris", "took place in"),
        GraphEdge("lefebvre", "urbanization", "anticipated"),
        # Endpoint missing from the payload; rendered graph skips it
        GraphEdge("for_space", "doreen_massey_archive", "cites"),
    ]
    return KnowledgeGraphData(nodes=tuple(nodes), edges=tuple(edges))


def mock_search(query: str) -> SearchResult:
    """Answer any query with the sample graph."""
    return SearchResult(
        answer=(
            f"Sample answer for: {query}\n"
            "Henri Lefebvre coined the right to the city in 1968.\n"
            "David Harvey extended it as a collective right to reshape urbanization."
        ),
        sources=[
            SearchSource(
                content="The right to the city is far more than the individual liberty to access urban resources.",
                metadata={"title": "The Right to the City", "author": "David Harvey", "year": 2008},
            ),
            SearchSource(
                content="The right to the city manifests itself as a superior form of rights.",
                metadata={"title": "Le Droit a la ville", "author": "Henri Lefebvre"},
            ),
        ],
        graph_data=get_mock_graph_data(),
    )
