"""Report renderers for laid-out graphs."""

from sugiyama_trace.renderers.base import Renderer, nodes_by_rank
from sugiyama_trace.renderers.json_renderer import JsonRenderer
from sugiyama_trace.renderers.text import TextRenderer, format_value

RENDERERS: dict[str, type] = {
    "text": TextRenderer,
    "json": JsonRenderer,
}

__all__ = ["RENDERERS", "JsonRenderer", "Renderer", "TextRenderer", "format_value", "nodes_by_rank"]
