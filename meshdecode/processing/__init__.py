"""File loading and mesh summaries for meshdecode."""

from meshdecode.processing.loader import MeshLoader, load_mesh
from meshdecode.processing.summary import MeshSummary, summarize

__all__ = [
    "MeshLoader",
    "load_mesh",
    "MeshSummary",
    "summarize",
]
