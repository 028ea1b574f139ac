"""Markdown formatting for search answers, sources and errors."""

from dataclasses import dataclass
from typing import List, Optional

from ragflow_graph.models.result import API_MODE_SUMMARY, SearchResult, SearchSource


@dataclass(frozen=True)
class ErrorInfo:
    title: str
    description: str
    severity: str  # "error" | "warning" | "info"


_ERRORS = {
    "timeout": ErrorInfo(
        "Connection timed out",
        "The RAGFlow service took too long to respond. It may be overloaded or "
        "the network is unreliable. Please try again later.",
        "warning",
    ),
    "connection": ErrorInfo(
        "Connection failed",
        "The RAGFlow service is unavailable. Check that it is running and that "
        "the configured service address is correct.",
        "error",
    ),
    "config": ErrorInfo(
        "Configuration error",
        "The plugin is not configured correctly. Set the RAGFlow service address "
        "and an agent or chat ID in the plugin settings.",
        "info",
    ),
}

_GENERIC_ERROR = ErrorInfo(
    "Query failed",
    "Something went wrong while processing your query. Please try again later.",
    "error",
)


def describe_error(error_type: Optional[str]) -> ErrorInfo:
    return _ERRORS.get(error_type or "", _GENERIC_ERROR)


def format_answer(result: SearchResult, query: Optional[str] = None) -> str:
    """Answer card as markdown.

    Summary answers are shown one bullet per line; answers that come with a
    knowledge graph are shown as a single paragraph.
    """
    heading = f"### Result: {query}" if query else "### Result"

    if result.is_error:
        info = describe_error(result.error_type)
        return f"### {info.title}\n\n{info.description}\n\n> {result.answer}"

    if result.api_mode == API_MODE_SUMMARY:
        lines = [line.strip() for line in result.answer.splitlines() if line.strip()]
        body = "\n".join(f"- {line}" for line in lines)
    else:
        body = result.answer

    return f"{heading}\n\n{body}"


def _format_source(index: int, source: SearchSource) -> str:
    block = f"**Source {index}**\n\n{source.content}"
    if source.metadata:
        meta = " | ".join(f"{k}: {v}" for k, v in source.metadata.items())
        block += f"\n\n_{meta}_"
    return block


def format_sources(sources: List[SearchSource]) -> str:
    if not sources:
        return ""
    blocks = [_format_source(i, s) for i, s in enumerate(sources, start=1)]
    return "### Sources\n\n" + "\n\n---\n\n".join(blocks)
