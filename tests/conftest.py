"""
Pytest configuration and fixtures for knowledge graph explorer tests.
"""

import pytest

from ragflow_graph.explorer.scheduler import ManualFrameScheduler
from ragflow_graph.explorer.view import KnowledgeGraphView
from ragflow_graph.models.graph import GraphEdge, GraphNode, KnowledgeGraphData
from ragflow_graph.utils.config import GraphSettings


# ============================================
# Graph payloads
# ============================================


@pytest.fixture
def two_node_graph():
    """Two linked nodes."""
    return KnowledgeGraphData(
        nodes=(
            GraphNode("1", "Node 1", "concept"),
            GraphNode("2", "Node 2", "entity"),
        ),
        edges=(GraphEdge("1", "2", "relates to"),),
    )


@pytest.fixture
def dangling_graph():
    """Two nodes, one good edge and one pointing at a missing node."""
    return KnowledgeGraphData(
        nodes=(GraphNode("1", "Node 1"), GraphNode("2", "Node 2")),
        edges=(GraphEdge("1", "2"), GraphEdge("1", "99")),
    )


@pytest.fixture
def single_node_graph():
    return KnowledgeGraphData(nodes=(GraphNode("solo", "Solo", "person"),))


@pytest.fixture
def triangle_graph():
    return KnowledgeGraphData(
        nodes=(
            GraphNode("a", "A", "person", 12),
            GraphNode("b", "B", "organization"),
            GraphNode("c", "C", "location"),
        ),
        edges=(GraphEdge("a", "b"), GraphEdge("b", "c"), GraphEdge("c", "a")),
    )


# ============================================
# Engine fixtures
# ============================================


@pytest.fixture
def settings():
    return GraphSettings()


@pytest.fixture
def scheduler():
    return ManualFrameScheduler()


@pytest.fixture
def view(scheduler, settings):
    """A graph panel driven by a manual scheduler."""
    v = KnowledgeGraphView(scheduler=scheduler, settings=settings)
    yield v
    v.teardown()


class FakeClock:
    """Settable clock for fade timing tests."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


# ============================================
# Markers
# ============================================


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )
    config.addinivalue_line(
        "markers", "ui: mark test as UI component test"
    )
