"""Deferred one-time setup for the outline.

``configure`` only records options and registers cheap entry points. The
expensive part (applying configuration, registering observers, building
highlight groups, initializing the current buffer) runs in ``ensure_ready``
the first time any entry point needs it, and exactly once per configuration.

State moves ``uninitialized -> pending -> initialized``; a later
``configure`` moves ``initialized -> pending`` and is applied right away.
"""

from __future__ import annotations

import functools
import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TypeVar

from .config import derive_lazy_load
from .host import ERROR

LOGGER = logging.getLogger(__name__)

UNINITIALIZED = "uninitialized"
PENDING = "pending"
INITIALIZED = "initialized"

MIN_HOST_VERSION = (0, 8)
UNSUPPORTED_MESSAGE = (
    "lazyoutline requires editor version {required} or newer (found {found}); "
    "the outline is disabled"
)

F = TypeVar("F", bound=Callable[..., object])


@dataclass(frozen=True)
class SetupDeps:
    """Side effects ``SetupCoordinator`` triggers, injected by the composer."""

    host_version: Callable[[], tuple[int, int]]
    notify_once: Callable[[str, str], None]
    register_commands: Callable[[], None]
    register_observers: Callable[[], None]
    apply_config: Callable[[Mapping[str, object]], object]
    create_highlights: Callable[[], object]
    on_enter_buffer: Callable[[], None]


class SetupCoordinator:
    """Owns the initialization state and the pending options."""

    def __init__(self, deps: SetupDeps, min_version: tuple[int, int] = MIN_HOST_VERSION) -> None:
        self._deps = deps
        self._min_version = min_version
        self._lock = threading.RLock()
        self.reset()

    def reset(self) -> None:
        """Forget every configuration; used by tests and host reloads."""
        with self._lock:
            self._state = UNINITIALIZED
            self._pending: dict[str, object] | None = None
            self._ever_initialized = False
            self._applying = False
            self.apply_count = 0

    @property
    def state(self) -> str:
        return self._state

    @property
    def pending_options(self) -> dict[str, object] | None:
        return None if self._pending is None else dict(self._pending)

    def configure(self, options: Mapping[str, object] | None = None) -> bool:
        """Record ``options`` for the next ``ensure_ready``.

        Returns ``False`` (and notifies once) when the host is too old, in
        which case nothing is recorded or registered.
        """
        found = tuple(self._deps.host_version())
        if found < self._min_version:
            message = UNSUPPORTED_MESSAGE.format(
                required=".".join(map(str, self._min_version)),
                found=".".join(map(str, found)),
            )
            LOGGER.error(message)
            self._deps.notify_once(message, ERROR)
            return False

        pending = dict(options or {})
        is_lazy = derive_lazy_load(pending)
        pending["lazy_load"] = is_lazy
        with self._lock:
            self._pending = pending
            self._state = PENDING
        self._deps.register_commands()

        LOGGER.debug("Configured outline (lazy_load=%s)", is_lazy)
        if not is_lazy:
            self._deps.register_observers()

        if self._ever_initialized:
            self.ensure_ready()
        return True

    def ensure_ready(self) -> None:
        """Apply pending options once; no-op when nothing is pending.

        Nested calls made while applying return immediately. If applying
        raises, the options stay pending and the next call retries.
        """
        with self._lock:
            if self._state != PENDING or self._applying:
                return
            options = self._pending or {}
            self._applying = True
            try:
                self._deps.apply_config(options)
                self._deps.register_observers()
                self._deps.create_highlights()
                self._deps.on_enter_buffer()
            finally:
                self._applying = False
            self._pending = None
            self._state = INITIALIZED
            self._ever_initialized = True
            self.apply_count += 1
            LOGGER.debug("Outline initialized (apply #%d)", self.apply_count)


def lazy(coordinator: SetupCoordinator, target: F) -> F:
    """Wrap ``target`` so every call first completes pending setup."""

    @functools.wraps(target)
    def wrapper(*args, **kwargs):
        coordinator.ensure_ready()
        return target(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


__all__ = [
    "INITIALIZED",
    "MIN_HOST_VERSION",
    "PENDING",
    "SetupCoordinator",
    "SetupDeps",
    "UNINITIALIZED",
    "lazy",
]
