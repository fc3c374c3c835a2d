"""Public package surface for lazyoutline.

Module-level operations act on one shared ``Outline``. Call
``attach_host`` once with the editor integration, then ``setup``; every
other operation completes deferred setup on first use. The implementation
modules are imported on first access to keep ``import lazyoutline`` cheap.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .api import Outline
    from .host import Host

PUBLIC_OPERATIONS = frozenset(
    {
        "sync_load",
        "is_open",
        "open",
        "close",
        "toggle",
        "open_all",
        "close_all",
        "close_all_but_current",
        "focus",
        "select",
        "next",
        "prev",
        "next_up",
        "prev_up",
        "get_location",
        "tree_open",
        "tree_close",
        "tree_toggle",
        "tree_open_all",
        "tree_close_all",
        "tree_set_collapse_level",
        "tree_increase_fold_level",
        "tree_decrease_fold_level",
        "nav_is_open",
        "nav_open",
        "nav_close",
        "nav_toggle",
        "info",
        "num_symbols",
        "was_closed",
        "get_all_commands",
    }
)

_OUTLINE: Outline | None = None


def attach_host(host: Host) -> Outline:
    """Bind the shared outline to ``host``, replacing any previous instance."""
    global _OUTLINE
    from .api import Outline

    _OUTLINE = Outline(host)
    return _OUTLINE


def get_outline() -> Outline:
    """Return the shared outline, creating a headless one if none is attached."""
    global _OUTLINE
    if _OUTLINE is None:
        from .api import Outline

        _OUTLINE = Outline()
    return _OUTLINE


def setup(options=None) -> bool:
    """Configure the shared outline; see ``Outline.setup``."""
    return get_outline().setup(options)


def __getattr__(name: str):
    if name in PUBLIC_OPERATIONS:
        return getattr(get_outline(), name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["PUBLIC_OPERATIONS", "attach_host", "get_outline", "setup"]
