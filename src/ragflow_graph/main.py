"""
RAGFlow Knowledge Graph - Main Entry Point

Run with: python -m ragflow_graph.main
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from ragflow_graph.utils.config import load_config, load_graph_settings
from ragflow_graph.utils.plugin_settings import canonicalize_settings

logger = logging.getLogger(__name__)


def main(argv=None):
    load_dotenv()

    parser = argparse.ArgumentParser(description="RAGFlow knowledge graph explorer")

    parser.add_argument(
        "--config", type=str, default=None, help="Path to config file"
    )
    parser.add_argument(
        "--mode",
        choices=["ui", "render"],
        default="ui",
        help="Run mode: ui (Gradio), render (graph JSON to HTML)",
    )
    parser.add_argument("--port", type=int, default=7860, help="Port for UI mode")
    parser.add_argument(
        "--share", action="store_true", help="Create public Gradio link"
    )
    parser.add_argument("--input", type=str, help="Graph JSON file for render mode")
    parser.add_argument(
        "--output", type=str, default="graph.html", help="HTML output for render mode"
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    settings = load_graph_settings(config)

    if args.mode == "render":
        if not args.input:
            parser.error("--input is required in render mode")
        return run_render(Path(args.input), Path(args.output), settings)

    check_plugin_settings(config)
    run_ui(settings, args.port, args.share)
    return 0


def check_plugin_settings(config: dict) -> bool:
    """Log whether a RAGFlow backend is configured. Returns True if usable."""
    plugin = canonicalize_settings(config.get("ragflow"))
    problems = plugin.validate()
    if problems:
        logger.info(
            f"RAGFlow backend not configured ({'; '.join(problems)}); "
            "queries are answered from the sample graph"
        )
        return False
    logger.info(
        f"RAGFlow backend settings: {plugin.safe_summary()}; this package bundles no "
        "backend client, so queries are answered from the sample graph unless a "
        "search callable is passed to create_app"
    )
    return True


def run_render(input_path: Path, output_path: Path, settings) -> int:
    """Lay out a graph JSON file headlessly and write it as Plotly HTML."""
    from ragflow_graph.explorer.view import GraphRenderError, KnowledgeGraphView
    from ragflow_graph.models.graph import KnowledgeGraphData

    try:
        payload = json.loads(input_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read graph JSON from {input_path}: {e}")
        return 1

    if not isinstance(payload, dict):
        logger.error(f"Expected a JSON object in {input_path}")
        return 1

    # Accept either a bare graph or a full search result
    if "graphData" in payload or "graph_data" in payload:
        payload = payload.get("graphData") or payload.get("graph_data")

    view = KnowledgeGraphView(settings=settings)
    try:
        view.update(KnowledgeGraphData.from_dict(payload))
    except GraphRenderError as e:
        logger.error(str(e))
        return 1

    if view.simulation is None:
        logger.warning(view.caption)
        return 1

    frames = view.settle()
    figure = view.figure(title=input_path.stem)
    figure.write_html(str(output_path), include_plotlyjs="cdn")
    logger.info(f"Wrote {output_path} after {frames} frames")
    return 0


def run_ui(settings, port: int, share: bool):
    """Launch the Gradio interface."""
    from ragflow_graph.ui.app import launch_app

    logger.info(f"Starting UI on port {port}")
    launch_app(settings=settings, port=port, share=share)


if __name__ == "__main__":
    sys.exit(main())
