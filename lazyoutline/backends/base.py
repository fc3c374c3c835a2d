"""Backend registry: which symbol source feeds each buffer.

Backends are pluggable collaborators that push symbol trees for a buffer.
``BackendSet`` picks the first supported backend in configured priority
order and falls back to the next one (or to an empty outline) when the
attached backend stops being available.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..config import Configuration
from ..data import SymbolStore
from ..symbols import SymbolNode

LOGGER = logging.getLogger(__name__)

NOT_REGISTERED = "Backend not registered"


class Backend:
    """Base class for symbol sources. Subclasses set ``name``."""

    name = ""

    def is_supported(self, bufnr: int) -> tuple[bool, str | None]:
        """Return ``(supported, reason_if_not)`` for ``bufnr``."""
        return False, "Not implemented"

    def attach(self, bufnr: int) -> None:
        """Called when this backend becomes the symbol source for ``bufnr``."""

    def detach(self, bufnr: int) -> None:
        """Called when another backend (or none) takes over ``bufnr``."""


class BackendSet:
    """Tracks registered backends and the one attached to each buffer."""

    def __init__(
        self,
        store: SymbolStore,
        config: Configuration,
        resolve_buffer: Callable[[int | None], int],
    ) -> None:
        self._store = store
        self._config = config
        self._resolve_buffer = resolve_buffer
        self._backends: dict[str, Backend] = {}
        self._attached: dict[int, str] = {}
        self._seen: set[int] = set()
        self._listeners: list[Callable[[int], None]] = []

    def register(self, backend: Backend) -> Backend:
        self._backends[backend.name] = backend
        return backend

    def get(self, name: str) -> Backend | None:
        return self._backends.get(name)

    def add_listener(self, listener: Callable[[int], None]) -> None:
        """Call ``listener(bufnr)`` whenever a buffer's symbols change."""
        self._listeners.append(listener)

    def attached_name(self, bufnr: int | None = 0) -> str | None:
        return self._attached.get(self._resolve_buffer(bufnr))

    def get_best_backend(self, bufnr: int | None = 0) -> Backend | None:
        """First supported backend in ``config.backends`` priority order."""
        resolved = self._resolve_buffer(bufnr)
        for name in self._config.current.backends:
            backend = self._backends.get(name)
            if backend is None:
                continue
            supported, _reason = backend.is_supported(resolved)
            if supported:
                return backend
        return None

    def attach(self, bufnr: int | None = 0, refresh: bool = False) -> Backend | None:
        """Attach the best backend to ``bufnr``.

        With ``refresh`` the choice is re-evaluated even when a backend is
        already attached; a buffer left with no backend loses its symbols.
        """
        resolved = self._resolve_buffer(bufnr)
        current_name = self._attached.get(resolved)
        if current_name is not None and not refresh:
            return self._backends.get(current_name)

        best = self.get_best_backend(resolved)
        best_name = best.name if best is not None else None
        if best_name == current_name:
            return best

        if current_name is not None:
            previous = self._backends.get(current_name)
            if previous is not None:
                previous.detach(resolved)
            del self._attached[resolved]
            LOGGER.debug("Detached backend %s from buffer %s", current_name, resolved)

        if best is None:
            if self._store.get(resolved) is not None:
                self._store.delete(resolved)
                self._notify(resolved)
            return None

        self._attached[resolved] = best.name
        # A different source owns the buffer now; drop symbols from the old one.
        self._store.delete(resolved)
        best.attach(resolved)
        LOGGER.debug("Attached backend %s to buffer %s", best.name, resolved)
        if resolved not in self._seen:
            self._seen.add(resolved)
            on_attach = self._config.current.on_attach
            if on_attach is not None:
                on_attach(resolved)
        self._notify(resolved)
        return best

    def set_symbols(self, bufnr: int | None, roots: list[SymbolNode], backend_name: str) -> bool:
        """Store symbols pushed by ``backend_name``; ignored unless it is attached."""
        resolved = self._resolve_buffer(bufnr)
        if self._attached.get(resolved) != backend_name:
            LOGGER.debug(
                "Dropping symbols from %s for buffer %s (attached: %s)",
                backend_name,
                resolved,
                self._attached.get(resolved),
            )
            return False
        self._store.set_symbols(resolved, roots)
        self._notify(resolved)
        return True

    def get_status(self, bufnr: int | None = 0) -> list[dict[str, object]]:
        """Per-backend support report, in configured priority order."""
        resolved = self._resolve_buffer(bufnr)
        attached = self._attached.get(resolved)
        status: list[dict[str, object]] = []
        for name in self._config.current.backends:
            backend = self._backends.get(name)
            if backend is None:
                supported, reason = False, NOT_REGISTERED
            else:
                supported, reason = backend.is_supported(resolved)
            status.append(
                {
                    "name": name,
                    "supported": supported,
                    "error": reason,
                    "current": name == attached,
                }
            )
        return status

    def _notify(self, bufnr: int) -> None:
        for listener in list(self._listeners):
            listener(bufnr)


__all__ = ["Backend", "BackendSet", "NOT_REGISTERED"]
