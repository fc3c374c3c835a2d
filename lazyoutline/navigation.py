"""Cursor jumps between symbols of the current buffer."""

from __future__ import annotations

import logging

from .config import Configuration
from .data import BufferData, SymbolStore
from .host import Host
from .symbols import SymbolNode
from .window import OutlineWindows

LOGGER = logging.getLogger(__name__)

SPLIT_COMMANDS = {"v": "vertical split", "h": "split"}


def split_command(split: str) -> str:
    """Translate ``"v"``/``"h"`` shorthands; anything else is a raw command."""
    return SPLIT_COMMANDS.get(split, split)


class Navigator:
    """Implements next/prev/up/select over the visible symbol listing."""

    def __init__(
        self,
        host: Host,
        store: SymbolStore,
        config: Configuration,
        windows: OutlineWindows,
    ) -> None:
        self._host = host
        self._store = store
        self._config = config
        self._windows = windows

    def _bufdata(self) -> BufferData | None:
        bufdata = self._store.get(0)
        if bufdata is None or not bufdata.has_symbols or not bufdata.roots:
            return None
        return bufdata

    def _cursor(self) -> tuple[int, int]:
        return self._host.get_cursor(self._host.current_window())

    def _jump(self, node: SymbolNode) -> SymbolNode:
        anchor = node.effective_range
        self._host.set_cursor(self._host.current_window(), (anchor.lnum, anchor.col))
        post_jump_cmd = self._config.current.post_jump_cmd
        if post_jump_cmd:
            self._host.execute(post_jump_cmd)
        LOGGER.debug("Jumped to %s %s at %d:%d", node.kind, node.name, anchor.lnum, anchor.col)
        return node

    def _current_index(self, items: list[SymbolNode]) -> int:
        """Number of listed symbols starting at or before the cursor."""
        cursor = self._cursor()
        return sum(1 for node in items if node.effective_range.start <= cursor)

    def next(self, step: int = 1) -> SymbolNode | None:
        """Jump ``step`` symbols forward (negative moves backward), clamped."""
        bufdata = self._bufdata()
        if bufdata is None:
            return None
        items = bufdata.flat(skip_hidden=True)
        index = self._current_index(items)
        if index == 0 and step < 0:
            return None
        target = min(max(index + step, 1), len(items))
        return self._jump(items[target - 1])

    def prev(self, step: int = 1) -> SymbolNode | None:
        return self.next(-step)

    def up(self, direction: int, count: int = 1) -> SymbolNode | None:
        """Jump to an ancestor ``count`` levels up.

        Moving backward lands on the ancestor itself; moving forward lands on
        the first symbol after the ancestor's subtree at the same or a
        shallower level.
        """
        bufdata = self._bufdata()
        if bufdata is None:
            return None
        lnum, col = self._cursor()
        position = self._windows.get_symbol_position(bufdata, lnum, col)
        if position is None or position.closest_symbol is None:
            return None
        ancestor = position.closest_symbol
        for _step in range(max(1, count)):
            if ancestor.parent is None:
                break
            ancestor = ancestor.parent
        if direction < 0:
            return self._jump(ancestor)
        items = bufdata.flat(skip_hidden=True)
        start = bufdata.indexof(ancestor, skip_hidden=True)
        if start is None:
            return None
        for node in items[start:]:
            if node.level <= ancestor.level:
                return self._jump(node)
        return None

    def select(self, index: int | None = None, split: str | None = None, jump: bool = True) -> SymbolNode | None:
        """Jump to symbol ``index`` (1-based) or the one under the cursor."""
        bufdata = self._bufdata()
        if bufdata is None:
            return None
        if index is not None:
            node = bufdata.item(index)
        else:
            lnum, col = self._cursor()
            position = self._windows.get_symbol_position(bufdata, lnum, col)
            node = position.closest_symbol if position is not None else None
        if node is None:
            return None
        if split:
            self._host.execute(split_command(split))
        if jump:
            self._jump(node)
        if self._config.current.close_on_select:
            self._windows.close()
        return node


__all__ = ["Navigator", "split_command"]
