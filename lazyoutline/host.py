"""Editor capabilities the outline core relies on.

``Host`` lists what an embedding editor must provide: buffers, windows,
cursor access, user commands, event observers, highlight groups, and
notices. ``HeadlessHost`` is a complete in-memory implementation used for
scripting and tests; events are fired by calling :meth:`HeadlessHost.fire`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

ERROR = "error"
WARN = "warn"
INFO = "info"


@dataclass(frozen=True)
class HostEvent:
    """Payload delivered to observer callbacks."""

    event: str
    buf: int
    data: dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class LspClient:
    """Language-server client as seen by the LSP backend."""

    id: int
    name: str
    supports_document_symbols: bool = True


Observer = Callable[[HostEvent], None]


class Host(Protocol):
    version: tuple[int, int]

    def notify(self, message: str, level: str = INFO) -> None: ...

    def notify_once(self, message: str, level: str = INFO) -> None: ...

    def create_user_command(self, name: str, callback: Callable[..., object], defn: dict[str, object]) -> None: ...

    def clear_observer_group(self, group: str) -> None: ...

    def add_observer(self, group: str, events: tuple[str, ...], callback: Observer, desc: str = "") -> None: ...

    def get_lsp_client(self, client_id: int) -> LspClient | None: ...

    def current_buffer(self) -> int: ...

    def current_window(self) -> int: ...

    def window_buffer(self, winid: int) -> int: ...

    def visible_windows(self) -> list[int]: ...

    def get_cursor(self, winid: int) -> tuple[int, int]: ...

    def set_cursor(self, winid: int, position: tuple[int, int]) -> None: ...

    def filetype(self, bufnr: int) -> str: ...

    def is_ignored_window(self, winid: int) -> tuple[bool, str | None]: ...

    def set_highlight(self, name: str, spec: dict[str, object]) -> None: ...

    def execute(self, command: str) -> None: ...


class HeadlessHost:
    """In-memory editor: buffers, windows, cursors, and an event bus."""

    def __init__(self, version: tuple[int, int] = (0, 10)) -> None:
        self.version = version
        self.buffers: dict[int, str] = {1: ""}
        self.windows: dict[int, int] = {1000: 1}
        self.cursors: dict[int, tuple[int, int]] = {1000: (1, 0)}
        self.current_win = 1000
        self.ignored_filetypes: set[str] = set()
        self.commands: dict[str, tuple[Callable[..., object], dict[str, object]]] = {}
        self.observers: dict[str, list[tuple[tuple[str, ...], Observer, str]]] = {}
        self.lsp_clients: dict[int, LspClient] = {}
        self.highlights: dict[str, dict[str, object]] = {}
        self.notices: list[tuple[str, str]] = []
        self.executed: list[str] = []
        self._notified: set[str] = set()

    # -- buffers and windows -------------------------------------------------

    def add_buffer(self, bufnr: int, filetype: str = "") -> int:
        self.buffers[bufnr] = filetype
        return bufnr

    def add_window(self, winid: int, bufnr: int, cursor: tuple[int, int] = (1, 0)) -> int:
        self.buffers.setdefault(bufnr, "")
        self.windows[winid] = bufnr
        self.cursors[winid] = cursor
        return winid

    def enter_window(self, winid: int, fire_events: bool = True) -> None:
        """Focus ``winid`` and fire ``WinEnter``/``BufEnter`` like an editor would."""
        self.current_win = winid
        if fire_events:
            bufnr = self.windows[winid]
            self.fire("WinEnter", bufnr)
            self.fire("BufEnter", bufnr)

    def current_buffer(self) -> int:
        return self.windows[self.current_win]

    def current_window(self) -> int:
        return self.current_win

    def window_buffer(self, winid: int) -> int:
        return self.windows[winid]

    def visible_windows(self) -> list[int]:
        return sorted(self.windows)

    def get_cursor(self, winid: int) -> tuple[int, int]:
        return self.cursors.get(winid, (1, 0))

    def set_cursor(self, winid: int, position: tuple[int, int]) -> None:
        self.cursors[winid] = position

    def filetype(self, bufnr: int) -> str:
        return self.buffers.get(bufnr, "")

    def is_ignored_window(self, winid: int) -> tuple[bool, str | None]:
        filetype = self.filetype(self.windows.get(winid, 0))
        if filetype in self.ignored_filetypes:
            return True, f"Filetype '{filetype}' is ignored"
        return False, None

    # -- commands, observers, notices ----------------------------------------

    def create_user_command(self, name: str, callback: Callable[..., object], defn: dict[str, object]) -> None:
        self.commands[name] = (callback, dict(defn))

    def run_user_command(self, name: str, args: str = "", bang: bool = False, count: int = 0) -> object:
        """Invoke a registered user command the way the editor command line would."""
        from .commands import CommandArgs

        callback, _defn = self.commands[name]
        return callback(CommandArgs(args=args, bang=bang, count=count))

    def clear_observer_group(self, group: str) -> None:
        self.observers[group] = []

    def add_observer(self, group: str, events: tuple[str, ...], callback: Observer, desc: str = "") -> None:
        self.observers.setdefault(group, []).append((tuple(events), callback, desc))

    def observer_count(self, event: str) -> int:
        return sum(
            1
            for registered in self.observers.values()
            for events, _callback, _desc in registered
            if event in events
        )

    def fire(self, event: str, buf: int | None = None, **data: object) -> None:
        """Deliver ``event`` to every observer registered for it, in order."""
        payload = HostEvent(event=event, buf=self.current_buffer() if buf is None else buf, data=dict(data))
        for registered in list(self.observers.values()):
            for events, callback, _desc in list(registered):
                if event in events:
                    callback(payload)

    def notify(self, message: str, level: str = INFO) -> None:
        self.notices.append((level, message))

    def notify_once(self, message: str, level: str = INFO) -> None:
        if message in self._notified:
            return
        self._notified.add(message)
        self.notices.append((level, message))

    def get_lsp_client(self, client_id: int) -> LspClient | None:
        return self.lsp_clients.get(client_id)

    def set_highlight(self, name: str, spec: dict[str, object]) -> None:
        self.highlights[name] = dict(spec)

    def execute(self, command: str) -> None:
        self.executed.append(command)


__all__ = ["ERROR", "HeadlessHost", "Host", "HostEvent", "INFO", "LspClient", "Observer", "WARN"]
