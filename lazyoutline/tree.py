"""Expand/collapse operations on a buffer's symbol tree.

Indices are 1-based positions in the visible (collapsed-aware) listing.
Without an index the symbol closest to the cursor is used.
"""

from __future__ import annotations

from .data import BufferData, SymbolStore
from .host import Host
from .symbols import SymbolNode, walk
from .window import OutlineWindows

OPEN_ALL_LEVEL = 99


class TreeOps:
    """Collapse-state commands over ``SymbolStore`` buffers."""

    def __init__(self, host: Host, store: SymbolStore, windows: OutlineWindows) -> None:
        self._host = host
        self._store = store
        self._windows = windows

    def _bufdata(self, bufnr: int | None) -> BufferData | None:
        bufdata = self._store.get(bufnr)
        if bufdata is None or not bufdata.has_symbols:
            return None
        return bufdata

    def _target(self, bufdata: BufferData, index: int | None, bubble: bool) -> SymbolNode | None:
        if index is not None:
            node = bufdata.item(index)
        else:
            if bufdata.bufnr != self._host.current_buffer():
                return None
            lnum, col = self._host.get_cursor(self._host.current_window())
            position = self._windows.get_symbol_position(bufdata, lnum, col)
            node = position.closest_symbol if position is not None else None
        if node is not None and bubble and not node.children:
            node = node.parent
        return node

    def _set(self, bufdata: BufferData, node: SymbolNode, collapsed: bool, recurse: bool) -> None:
        targets = walk([node]) if recurse else [node]
        for target in targets:
            bufdata.set_collapsed(target, collapsed)

    def open(self, index: int | None = None, recurse: bool = False, bubble: bool = True, bufnr: int | None = 0) -> None:
        bufdata = self._bufdata(bufnr)
        if bufdata is None:
            return
        node = self._target(bufdata, index, bubble)
        if node is not None:
            self._set(bufdata, node, False, recurse)

    def close(self, index: int | None = None, recurse: bool = False, bubble: bool = True, bufnr: int | None = 0) -> None:
        bufdata = self._bufdata(bufnr)
        if bufdata is None:
            return
        node = self._target(bufdata, index, bubble)
        if node is not None:
            self._set(bufdata, node, True, recurse)

    def toggle(self, index: int | None = None, recurse: bool = False, bubble: bool = True, bufnr: int | None = 0) -> bool | None:
        """Flip the target's collapsed state; return ``True`` when now expanded."""
        bufdata = self._bufdata(bufnr)
        if bufdata is None:
            return None
        node = self._target(bufdata, index, bubble)
        if node is None:
            return None
        expand = bufdata.is_collapsed(node)
        self._set(bufdata, node, not expand, recurse)
        return expand

    def open_all(self, bufnr: int | None = 0) -> None:
        self.set_collapse_level(bufnr, OPEN_ALL_LEVEL)

    def close_all(self, bufnr: int | None = 0) -> None:
        self.set_collapse_level(bufnr, 0)

    def set_collapse_level(self, bufnr: int | None, level: int) -> None:
        """Show symbols down to ``level``: deeper parents are collapsed.

        ``0`` collapses every root, ``99`` expands everything.
        """
        bufdata = self._bufdata(bufnr)
        if bufdata is None:
            return
        level = max(0, level)
        for node in walk(bufdata.roots):
            bufdata.set_collapsed(node, node.level >= level)

    def collapse_level(self, bufnr: int | None = 0) -> int:
        """Current effective level: the shallowest collapsed symbol's level."""
        bufdata = self._bufdata(bufnr)
        if bufdata is None:
            return 0
        levels = [node.level for node in walk(bufdata.roots) if bufdata.is_collapsed(node)]
        if not levels:
            return bufdata.max_level + 1
        return min(levels)

    def increase_fold_level(self, bufnr: int | None = 0, count: int = 1) -> None:
        self.set_collapse_level(bufnr, self.collapse_level(bufnr) + max(1, count))

    def decrease_fold_level(self, bufnr: int | None = 0, count: int = 1) -> None:
        self.set_collapse_level(bufnr, self.collapse_level(bufnr) - max(1, count))


__all__ = ["OPEN_ALL_LEVEL", "TreeOps"]
