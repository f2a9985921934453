"""
Canvas Module.

Owns the node map and flow definition import/export.
"""

from .definition import build_render_nodes, get_current_definition, load_definition
from .graph import GraphModel

__all__ = ["GraphModel", "build_render_nodes", "get_current_definition", "load_definition"]
