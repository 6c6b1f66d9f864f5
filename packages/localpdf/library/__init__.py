"""Document and render collaborators used by the operations."""

from __future__ import annotations

from .documents import DocumentLibrary, LoadedDocument
from .render import RasterDocument, RenderEngine

__all__ = ["DocumentLibrary", "LoadedDocument", "RasterDocument", "RenderEngine"]
