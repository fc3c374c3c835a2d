"""Floating navigation panel state.

The panel shows the symbol under the cursor together with its siblings and
children; the host draws it from ``NavPanel.state``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .data import SymbolStore
from .host import WARN, Host
from .symbols import SymbolNode
from .window import OutlineWindows


@dataclass
class NavState:
    """Snapshot of what the navigation panel displays."""

    source_winid: int
    focus: SymbolNode | None
    siblings: list[SymbolNode] = field(default_factory=list)
    children: list[SymbolNode] = field(default_factory=list)


class NavPanel:
    def __init__(self, host: Host, store: SymbolStore, windows: OutlineWindows) -> None:
        self._host = host
        self._store = store
        self._windows = windows
        self.state: NavState | None = None

    def is_open(self) -> bool:
        return self.state is not None

    def open(self) -> bool:
        """Open the panel around the cursor; warns and stays closed without symbols."""
        bufdata = self._store.get(0)
        if bufdata is None or not bufdata.has_symbols or not bufdata.roots:
            self._host.notify("Could not find symbols for the current buffer", WARN)
            return False
        winid = self._host.current_window()
        lnum, col = self._host.get_cursor(winid)
        position = self._windows.get_symbol_position(bufdata, lnum, col)
        focus = position.closest_symbol if position is not None else bufdata.roots[0]
        parent = focus.parent if focus is not None else None
        siblings = list(parent.children) if parent is not None else list(bufdata.roots)
        self.state = NavState(
            source_winid=winid,
            focus=focus,
            siblings=siblings,
            children=list(focus.children) if focus is not None else [],
        )
        return True

    def close(self) -> None:
        self.state = None

    def toggle(self) -> bool:
        """Flip the panel; return whether it ended up open."""
        if self.is_open():
            self.close()
            return False
        return self.open()


__all__ = ["NavPanel", "NavState"]
