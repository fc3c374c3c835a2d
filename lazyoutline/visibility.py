"""Remembers whether the user last closed or opened the outline.

Status-line integrations read this to decide whether to reopen the outline.
"""

from __future__ import annotations

UNKNOWN = "unknown"
CLOSED = "closed"
OPEN = "open"


class VisibilityTracker:
    """Tri-state flag: never touched, explicitly closed, or open."""

    def __init__(self) -> None:
        self.state = UNKNOWN

    def record_opened(self) -> None:
        self.state = OPEN

    def record_closed(self) -> None:
        self.state = CLOSED

    def record_toggled(self, is_open: bool) -> None:
        """Record the outcome of a toggle."""
        self.state = OPEN if is_open else CLOSED

    def was_closed(self, default: bool | None = None) -> bool | None:
        """Return ``True`` after a close, ``False`` after an open, else ``default``."""
        if self.state == UNKNOWN:
            return default
        return self.state == CLOSED

    def reset(self) -> None:
        self.state = UNKNOWN


__all__ = ["CLOSED", "OPEN", "UNKNOWN", "VisibilityTracker"]
