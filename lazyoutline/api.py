"""Public outline operations composed over the host.

``Outline`` wires the collaborators together and exposes the operation set
an editor integration calls. Operations that need an initialized outline
either go through ``lazy`` or call ``sync_load`` first.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping

from .backends import BackendSet, LspBackend
from .commands import CommandHandlers, create_commands, get_all_commands
from .config import Configuration
from .data import SymbolStore
from .events import EventTriggers
from .highlight import create_highlight_groups
from .host import HeadlessHost, Host
from .lifecycle import SetupCoordinator, SetupDeps, lazy
from .location import LocationItem, iter_location
from .log import configure_logging
from .nav_view import NavPanel
from .navigation import Navigator
from .tree import TreeOps
from .visibility import VisibilityTracker
from .window import OutlineWindows


class Outline:
    """One outline instance bound to one host."""

    def __init__(self, host: Host | None = None) -> None:
        self.host = host if host is not None else HeadlessHost()
        self.store = SymbolStore(current_buffer=self.host.current_buffer)
        self.config = Configuration(filetype_of=lambda bufnr: self.host.filetype(self.store.resolve(bufnr)))
        self.backends = BackendSet(self.store, self.config, self.store.resolve)
        self.lsp = self.backends.register(LspBackend(self.backends, self.config))
        self.windows = OutlineWindows(self.host, self.store, self.config)
        self.navigator = Navigator(self.host, self.store, self.config, self.windows)
        self.tree = TreeOps(self.host, self.store, self.windows)
        self.nav = NavPanel(self.host, self.store, self.windows)
        self.visibility = VisibilityTracker()
        self.triggers = EventTriggers(self.host, self.sync_load, self.on_enter_buffer, self.lsp)
        self.command_handlers = CommandHandlers(self, self.host)
        self.setup_state = SetupCoordinator(
            SetupDeps(
                host_version=lambda: self.host.version,
                notify_once=self.host.notify_once,
                register_commands=self._register_commands,
                register_observers=self.triggers.register,
                apply_config=self._apply_config,
                create_highlights=lambda: create_highlight_groups(
                    self.host, self.config.current.highlight_style
                ),
                on_enter_buffer=self.on_enter_buffer,
            )
        )
        self.backends.add_listener(self.windows.refresh)

        wrap = self._lazy
        self.close_all: Callable[[], None] = wrap(self.windows.close_all)
        self.close_all_but_current: Callable[[], None] = wrap(self.windows.close_all_but_current)
        self.open_all: Callable[[], None] = wrap(self.windows.open_all)
        self.focus: Callable[[], None] = wrap(self.windows.focus)
        self.select = wrap(self.navigator.select)
        self.next = wrap(self.navigator.next)
        self.prev = wrap(self.navigator.prev)
        self.tree_open = wrap(self.tree.open)
        self.tree_close = wrap(self.tree.close)
        self.tree_toggle = wrap(self.tree.toggle)
        self.tree_open_all = wrap(self.tree.open_all)
        self.tree_close_all = wrap(self.tree.close_all)
        self.tree_set_collapse_level = wrap(self.tree.set_collapse_level)
        self.tree_increase_fold_level = wrap(self.tree.increase_fold_level)
        self.tree_decrease_fold_level = wrap(self.tree.decrease_fold_level)
        self.nav_is_open: Callable[[], bool] = wrap(self.nav.is_open)
        self.nav_open: Callable[[], bool] = wrap(self.nav.open)
        self.nav_close: Callable[[], None] = wrap(self.nav.close)
        self.nav_toggle: Callable[[], bool] = wrap(self.nav.toggle)

    def _lazy(self, target):
        return lazy(self.setup_state, target)

    def _register_commands(self) -> None:
        create_commands(self.host, self.command_handlers, self._lazy)

    def _apply_config(self, options: Mapping[str, object]) -> None:
        current = self.config.apply(options)
        configure_logging(current.log_level, current.log_file)

    # -- lifecycle -----------------------------------------------------------

    def setup(self, options: Mapping[str, object] | None = None) -> bool:
        """Record options; returns ``False`` when the host is unsupported."""
        return self.setup_state.configure(options)

    def sync_load(self) -> None:
        """Synchronously complete setup if it was deferred."""
        self.setup_state.ensure_ready()

    def on_enter_buffer(self) -> None:
        """Attach backends and refresh outline windows for the focused buffer."""
        ignored, _message = self.host.is_ignored_window(self.host.current_window())
        if ignored:
            return
        bufnr = self.host.current_buffer()
        self.backends.attach(bufnr)
        self.windows.refresh(bufnr)

    # -- windows ---------------------------------------------------------------

    def is_open(self, bufnr: int | None = None, winid: int | None = None) -> bool:
        self.sync_load()
        return self.windows.is_open(bufnr=bufnr, winid=winid)

    def close(self) -> None:
        self.sync_load()
        self.visibility.record_closed()
        self.windows.close()

    def open(self, focus: bool = True, direction: str | None = None) -> None:
        self.sync_load()
        self.visibility.record_opened()
        self.windows.open(focus, direction)

    def toggle(self, focus: bool = True, direction: str | None = None) -> bool:
        """Open or close the outline; returns whether it is open afterwards."""
        self.sync_load()
        opened = self.windows.toggle(focus, direction)
        self.visibility.record_toggled(opened)
        return opened

    def was_closed(self, default: bool | None = None) -> bool | None:
        """Whether the user closed the outline last; ``default`` if never touched."""
        return self.visibility.was_closed(default)

    # -- navigation -------------------------------------------------------------

    def next_up(self, count: int = 1) -> None:
        self.sync_load()
        self.navigator.up(1, count)

    def prev_up(self, count: int = 1) -> None:
        self.sync_load()
        self.navigator.up(-1, count)

    # -- queries -----------------------------------------------------------------

    def get_location(self, exact: bool | None = True) -> list[LocationItem]:
        """Symbol path from the root to the symbol at the cursor.

        With ``exact`` false the closest symbol is used when the cursor is
        between symbols. Returns an empty list without symbols or a match.
        """
        self.sync_load()
        if exact is None:
            exact = True
        if not self.store.has_symbols(0):
            return []
        bufnr = self.store.resolve(0)
        lnum, col = self.host.get_cursor(self.host.current_window())
        position = self.windows.get_symbol_position(self.store.get_or_create(bufnr), lnum, col)
        if position is None:
            return []
        symbol = position.exact_symbol if exact else position.closest_symbol
        return list(iter_location(symbol, lambda kind: self.config.get_icon(bufnr, kind)))

    def num_symbols(self, bufnr: int | None = 0) -> int:
        """Total symbols for ``bufnr``, collapsed ones included."""
        self.sync_load()
        if not self.store.has_symbols(bufnr):
            return 0
        return self.store.get_or_create(bufnr).count(skip_hidden=False)

    def info(self) -> dict[str, object]:
        """Debug information about the current buffer."""
        self.sync_load()
        bufnr = self.host.current_buffer()
        ignored, message = self.host.is_ignored_window(self.host.current_window())
        return {
            "ignore": {"ignored": ignored, "message": message},
            "filetype": self.host.filetype(bufnr),
            "filter_kind_map": self.config.get_filter_kind_map(bufnr),
            "backends": self.backends.get_status(bufnr),
        }

    @staticmethod
    def get_all_commands() -> list[dict[str, object]]:
        return get_all_commands()


__all__ = ["Outline"]
