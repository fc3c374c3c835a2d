"""Host event observers that drive the outline.

Each observer completes pending setup before doing its own work, so
whichever event fires first performs initialization and the rest see the
outline already initialized.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .backends.lsp import LspBackend
from .host import Host, HostEvent

LOGGER = logging.getLogger(__name__)

GROUP = "LazyOutlineSetup"
FOCUS_EVENTS = ("WinEnter", "BufEnter")
LSP_ATTACH_EVENTS = ("LspAttach",)
LSP_DETACH_EVENTS = ("LspDetach",)


class EventTriggers:
    """Registers focus and language-server observers under one group."""

    def __init__(
        self,
        host: Host,
        ensure_ready: Callable[[], None],
        on_enter_buffer: Callable[[], None],
        lsp: LspBackend,
    ) -> None:
        self._host = host
        self._ensure_ready = ensure_ready
        self._on_enter_buffer = on_enter_buffer
        self._lsp = lsp

    def register(self) -> None:
        """(Re)create the observer group; repeated calls never duplicate observers."""
        self._host.clear_observer_group(GROUP)
        self._host.add_observer(
            GROUP,
            FOCUS_EVENTS,
            self.on_focus,
            "Update outline windows and attach backends",
        )
        self._host.add_observer(
            GROUP,
            LSP_ATTACH_EVENTS,
            self.on_lsp_attach,
            "Mark LSP backend as available",
        )
        self._host.add_observer(
            GROUP,
            LSP_DETACH_EVENTS,
            self.on_lsp_detach,
            "Mark LSP backend as unavailable",
        )
        LOGGER.debug("Registered outline observers")

    def on_focus(self, _event: HostEvent) -> None:
        self._ensure_ready()
        self._on_enter_buffer()

    def on_lsp_attach(self, event: HostEvent) -> None:
        self._ensure_ready()
        client = self._host.get_lsp_client(int(event.data["client_id"]))
        self._lsp.on_attach(client, event.buf)

    def on_lsp_detach(self, event: HostEvent) -> None:
        self._ensure_ready()
        self._lsp.on_detach(int(event.data["client_id"]), event.buf)


__all__ = ["EventTriggers", "FOCUS_EVENTS", "GROUP", "LSP_ATTACH_EVENTS", "LSP_DETACH_EVENTS"]
