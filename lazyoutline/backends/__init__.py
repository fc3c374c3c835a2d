"""Symbol backends and the per-buffer backend registry."""

from __future__ import annotations

from .base import Backend, BackendSet
from .lsp import LspBackend, convert_document_symbols

__all__ = ["Backend", "BackendSet", "LspBackend", "convert_document_symbols"]
