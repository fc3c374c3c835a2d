"""Outline window bookkeeping.

Rendering belongs to the host; this module only tracks which source windows
have an outline attached, on which side, and whether it has focus.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import DIRECTIONS, Configuration
from .data import BufferData, SymbolStore
from .host import Host
from .location import SymbolPosition, get_symbol_position

LOGGER = logging.getLogger(__name__)


@dataclass
class OutlineWindow:
    """Outline panel attached to one source window."""

    source_winid: int
    direction: str
    focused: bool = False


def resolve_direction(direction: str) -> str:
    """Collapse ``prefer_*`` layouts to the concrete side."""
    if direction == "prefer_right":
        return "right"
    if direction == "prefer_left":
        return "left"
    return direction


class OutlineWindows:
    """Open/close state for outline windows across source windows."""

    def __init__(self, host: Host, store: SymbolStore, config: Configuration) -> None:
        self._host = host
        self._store = store
        self._config = config
        self.windows: dict[int, OutlineWindow] = {}

    def is_open(self, bufnr: int | None = None, winid: int | None = None) -> bool:
        """Return whether an outline is attached to ``winid`` or shows ``bufnr``.

        With neither argument the current window is checked.
        """
        if bufnr is not None:
            resolved = self._store.resolve(bufnr)
            return any(
                self._host.window_buffer(source) == resolved
                for source in self.windows
                if source in self._host.visible_windows()
            )
        if winid is None:
            winid = self._host.current_window()
        return winid in self.windows

    def open(self, focus: bool = True, direction: str | None = None) -> None:
        winid = self._host.current_window()
        self._open_for(winid, focus, direction)

    def _open_for(self, winid: int, focus: bool, direction: str | None) -> OutlineWindow:
        side = direction or self._config.current.default_direction
        if side not in DIRECTIONS:
            raise ValueError(f"unknown outline direction: {side!r}")
        side = resolve_direction(side)
        existing = self.windows.get(winid)
        if existing is not None:
            existing.focused = existing.focused or focus
            return existing
        outline = OutlineWindow(source_winid=winid, direction=side, focused=focus)
        self.windows[winid] = outline
        LOGGER.debug("Opened outline for window %s on the %s", winid, side)
        return outline

    def close(self) -> None:
        self._close_for(self._host.current_window())

    def _close_for(self, winid: int) -> bool:
        outline = self.windows.pop(winid, None)
        if outline is None:
            return False
        LOGGER.debug("Closed outline for window %s", winid)
        return True

    def toggle(self, focus: bool = True, direction: str | None = None) -> bool:
        """Open or close the current window's outline; return whether it is now open."""
        if self.is_open():
            self.close()
            return False
        self.open(focus, direction)
        return True

    def open_all(self) -> None:
        for winid in self._host.visible_windows():
            ignored, _message = self._host.is_ignored_window(winid)
            if not ignored:
                self._open_for(winid, focus=False, direction=None)

    def close_all(self) -> None:
        for winid in list(self.windows):
            self._close_for(winid)

    def close_all_but_current(self) -> None:
        current = self._host.current_window()
        for winid in list(self.windows):
            if winid != current:
                self._close_for(winid)

    def focus(self) -> None:
        """Move focus into the current window's outline, if one is open."""
        outline = self.windows.get(self._host.current_window())
        if outline is not None:
            outline.focused = True

    def get_symbol_position(self, bufdata: BufferData | None, lnum: int, col: int) -> SymbolPosition | None:
        return get_symbol_position(bufdata, lnum, col)

    def refresh(self, bufnr: int) -> None:
        """Apply automatic open/close rules to windows showing ``bufnr``."""
        current = self._host.current_window()
        if self._host.window_buffer(current) != bufnr:
            return
        ignored, _message = self._host.is_ignored_window(current)
        if ignored:
            return
        has_symbols = self._store.has_symbols(bufnr) and self._store.get_or_create(bufnr).count(skip_hidden=False) > 0
        if current in self.windows:
            if self._config.current.close_automatic and not has_symbols:
                self._close_for(current)
        elif has_symbols and self._config.should_open_automatic(bufnr):
            self._open_for(current, focus=False, direction=None)


__all__ = ["OutlineWindow", "OutlineWindows", "resolve_direction"]
