"""
RAGFlow Knowledge Graph UI

Gradio shell that plays the chat-plugin host: it sends a query to the
search backend, shows the answer and sources, and hosts the knowledge
graph panel.
"""

import logging
from typing import Any, Callable, Optional, Tuple, Union

import gradio as gr

from ragflow_graph.explorer.mock_data import mock_search
from ragflow_graph.explorer.validator import AWAITING_INPUT_CAPTION, RenderMode
from ragflow_graph.explorer.view import GraphRenderError, KnowledgeGraphView
from ragflow_graph.models.result import API_MODE_KNOWLEDGE_GRAPH, SearchResult
from ragflow_graph.ui.result_view import format_answer, format_sources
from ragflow_graph.utils.config import GraphSettings, load_graph_settings

logger = logging.getLogger(__name__)

SearchFn = Callable[[str], Union[SearchResult, dict]]

# Frames to run after a pin change; a held pin keeps the layout warm forever
PIN_FRAMES = 120


def _caption_md(view: KnowledgeGraphView) -> str:
    return f"*{view.caption}*" if view.caption else ""


def _node_choices(view: KnowledgeGraphView):
    if view.simulation is None:
        return []
    return [(node.label, node.id) for node in view.simulation.arena.nodes]


def _has_node(view: KnowledgeGraphView, node_id: str) -> bool:
    return view.simulation is not None and view.simulation.arena.handle(node_id) is not None


def _search(search: SearchFn, query: str) -> SearchResult:
    try:
        raw = search(query)
    except Exception as e:
        logger.exception(f"Search failed for query '{query[:60]}'")
        return SearchResult(answer=str(e), is_error=True, error_type="unknown")
    if isinstance(raw, dict):
        return SearchResult.from_dict(raw)
    return raw


def run_query(
    view: KnowledgeGraphView, search: SearchFn, query: str
) -> Tuple[str, Any, str, str, Any]:
    """Query the backend and refresh every panel.

    Returns:
        answer markdown, graph figure, caption markdown, sources markdown,
        node dropdown update
    """
    query = (query or "").strip()
    if not query:
        return "", view.figure(), _caption_md(view), "", gr.update()

    result = _search(search, query)
    graph = result.graph_data if result.api_mode == API_MODE_KNOWLEDGE_GRAPH else None

    try:
        view.update(graph, loading=False)
        if view.state.mode is RenderMode.READY:
            view.settle()
        caption = _caption_md(view)
    except GraphRenderError as e:
        caption = f"**Graph unavailable:** {e}"

    return (
        format_answer(result, query),
        view.figure(),
        caption,
        format_sources(result.sources),
        gr.update(choices=_node_choices(view), value=None),
    )


def apply_zoom(view: KnowledgeGraphView, scale: float) -> Tuple[Any, str]:
    transform = view.zoom_to(float(scale))
    return view.figure(), f"Zoom {transform.k:.2f}x"


def pin_node(
    view: KnowledgeGraphView, node_id: Optional[str], x: float, y: float
) -> Tuple[Any, str]:
    """Drag a node to (x, y) and hold it there."""
    if view.drag is None or not node_id:
        return view.figure(), "Select a node first"
    if not _has_node(view, node_id):
        return view.figure(), f"Unknown node {node_id}"
    if node_id not in view.drag.dragging:
        view.drag_start(node_id)
    view.drag_move(node_id, float(x), float(y))
    view.settle(max_frames=PIN_FRAMES)
    return view.figure(), f"Pinned {node_id} at ({x:.0f}, {y:.0f})"


def release_node(view: KnowledgeGraphView, node_id: Optional[str]) -> Tuple[Any, str]:
    if view.drag is None or not node_id:
        return view.figure(), "Select a node first"
    if not _has_node(view, node_id):
        return view.figure(), f"Unknown node {node_id}"
    if not view.drag_end(node_id):
        return view.figure(), f"{node_id} is not pinned"
    view.settle()
    return view.figure(), f"Released {node_id}"


def create_app(search: Optional[SearchFn] = None, settings: Optional[GraphSettings] = None):
    """
    Create the Gradio application.

    Args:
        search: Backend search callable; the bundled sample graph is used if None
        settings: Graph settings; read from configs/config.yaml if None

    Returns:
        Gradio Blocks app
    """
    search = search or mock_search
    settings = settings or load_graph_settings()

    def session_view(view: Optional[KnowledgeGraphView]) -> KnowledgeGraphView:
        # One panel per browser session, created on its first event
        return view if view is not None else KnowledgeGraphView(settings=settings)

    def on_query(view, query):
        view = session_view(view)
        return (*run_query(view, search, query), view)

    def on_zoom(view, scale):
        view = session_view(view)
        return (*apply_zoom(view, scale), view)

    def on_pin(view, node_id, x, y):
        view = session_view(view)
        return (*pin_node(view, node_id, x, y), view)

    def on_release(view, node_id):
        view = session_view(view)
        return (*release_node(view, node_id), view)

    with gr.Blocks(title="RAGFlow Knowledge Graph") as app:
        view_state = gr.State(None)

        gr.Markdown("""
        # RAGFlow Knowledge Graph

        Ask the knowledge base a question. Answers that carry entities and
        relations are shown as an interactive force-directed graph.
        """)

        with gr.Row():
            query_box = gr.Textbox(
                placeholder="What is the right to the city?",
                label="Your question",
                scale=4,
            )
            submit = gr.Button("Search", variant="primary", scale=1)

        answer_md = gr.Markdown()

        with gr.Tab("Knowledge Graph"):
            caption_md = gr.Markdown(f"*{AWAITING_INPUT_CAPTION}*")
            graph_plot = gr.Plot(label="Knowledge graph")

            with gr.Row():
                zoom_slider = gr.Slider(
                    minimum=settings.zoom_min,
                    maximum=settings.zoom_max,
                    value=1.0,
                    step=0.1,
                    label="Zoom",
                    scale=3,
                )
                zoom_status = gr.Textbox(label="View", interactive=False, scale=1)

            with gr.Accordion("Pin a node", open=False):
                with gr.Row():
                    node_select = gr.Dropdown(choices=[], label="Node", scale=2)
                    pin_x = gr.Number(value=settings.width / 2, label="x", scale=1)
                    pin_y = gr.Number(value=settings.height / 2, label="y", scale=1)
                with gr.Row():
                    pin_btn = gr.Button("Pin")
                    release_btn = gr.Button("Release")
                pin_status = gr.Textbox(label="Status", interactive=False)

        with gr.Tab("Sources"):
            sources_md = gr.Markdown()

        query_outputs = [answer_md, graph_plot, caption_md, sources_md, node_select, view_state]
        submit.click(
            on_query,
            inputs=[view_state, query_box],
            outputs=query_outputs,
        )
        query_box.submit(
            on_query,
            inputs=[view_state, query_box],
            outputs=query_outputs,
        )
        zoom_slider.release(
            on_zoom,
            inputs=[view_state, zoom_slider],
            outputs=[graph_plot, zoom_status, view_state],
        )
        pin_btn.click(
            on_pin,
            inputs=[view_state, node_select, pin_x, pin_y],
            outputs=[graph_plot, pin_status, view_state],
        )
        release_btn.click(
            on_release,
            inputs=[view_state, node_select],
            outputs=[graph_plot, pin_status, view_state],
        )

    return app


def launch_app(
    search: Optional[SearchFn] = None,
    settings: Optional[GraphSettings] = None,
    port: int = 7860,
    share: bool = False,
):
    """Build and launch the UI."""
    app = create_app(search=search, settings=settings)
    app.launch(server_name="0.0.0.0", server_port=port, share=share)
