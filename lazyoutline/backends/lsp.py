"""Language-server backend.

Availability follows ``LspAttach``/``LspDetach``: the backend supports a
buffer while at least one attached client can answer document-symbol
requests. Symbols arrive as raw ``textDocument/documentSymbol`` results and
are converted into ``SymbolNode`` trees here.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from ..config import Configuration
from ..host import LspClient
from ..symbols import Range, SymbolNode, kind_from_lsp
from .base import Backend, BackendSet

LOGGER = logging.getLogger(__name__)

NO_CLIENT = "No LSP client found that supports symbols"


def lsp_range(raw: Mapping[str, object]) -> Range:
    """Convert an LSP range (0-based lines) to a ``Range`` (1-based lines)."""
    start = raw["start"]
    end = raw["end"]
    return Range(
        lnum=int(start["line"]) + 1,
        col=int(start["character"]),
        end_lnum=int(end["line"]) + 1,
        end_col=int(end["character"]),
    )


def convert_document_symbols(
    result: Sequence[Mapping[str, object]],
    include_kind=lambda _kind: True,
) -> list[SymbolNode]:
    """Build symbol trees from ``DocumentSymbol`` or ``SymbolInformation`` items.

    Symbols whose kind is filtered out are dropped but their children are
    kept and attached to the nearest included ancestor.
    """

    def convert(items: Sequence[Mapping[str, object]]) -> list[SymbolNode]:
        nodes: list[SymbolNode] = []
        for item in items:
            children = convert(item.get("children") or [])
            kind = kind_from_lsp(item.get("kind"))
            if not include_kind(kind):
                nodes.extend(children)
                continue
            if "range" in item:
                symbol_range = lsp_range(item["range"])
                raw_selection = item.get("selectionRange")
                selection = lsp_range(raw_selection) if raw_selection else None
            else:
                symbol_range = lsp_range(item["location"]["range"])
                selection = None
            nodes.append(
                SymbolNode(
                    name=str(item.get("name", "")),
                    kind=kind,
                    range=symbol_range,
                    selection_range=selection,
                    children=children,
                )
            )
        nodes.sort(key=lambda node: node.range.start)
        return nodes

    return convert(result)


class LspBackend(Backend):
    """Backend fed by language-server clients attached to each buffer."""

    name = "lsp"

    def __init__(self, backends: BackendSet, config: Configuration) -> None:
        self._backends = backends
        self._config = config
        self._clients: dict[int, set[int]] = {}

    def is_supported(self, bufnr: int) -> tuple[bool, str | None]:
        if self._clients.get(bufnr):
            return True, None
        return False, NO_CLIENT

    def on_attach(self, client: LspClient | None, bufnr: int) -> None:
        """Record a newly attached client and re-pick the buffer's backend."""
        if client is None:
            return
        if not client.supports_document_symbols:
            LOGGER.debug("LSP client %s has no document symbols", client.name)
            return
        self._clients.setdefault(bufnr, set()).add(client.id)
        self._backends.attach(bufnr, refresh=True)

    def on_detach(self, client_id: int, bufnr: int) -> None:
        """Forget a client; the buffer falls back when none remain."""
        clients = self._clients.get(bufnr)
        if not clients or client_id not in clients:
            return
        clients.discard(client_id)
        if not clients:
            del self._clients[bufnr]
        self._backends.attach(bufnr, refresh=True)

    def detach(self, bufnr: int) -> None:
        LOGGER.debug("LSP backend released buffer %s", bufnr)

    def handle_document_symbols(self, bufnr: int, result: Sequence[Mapping[str, object]] | None) -> bool:
        """Convert a document-symbol response and store it for ``bufnr``."""
        roots = convert_document_symbols(
            result or [],
            include_kind=lambda kind: self._config.is_kind_visible(bufnr, kind),
        )
        return self._backends.set_symbols(bufnr, roots, self.name)


__all__ = ["LspBackend", "NO_CLIENT", "convert_document_symbols", "lsp_range"]
