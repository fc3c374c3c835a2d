"""User command table and the handlers behind it.

The table is static data; ``create_commands`` registers one host command per
entry, each wrapped so that invoking it completes pending setup first.
"""

from __future__ import annotations

import copy
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .host import INFO, Host

if TYPE_CHECKING:
    from .api import Outline


def list_complete(choices: list[str]) -> Callable[[str], list[str]]:
    """Completion callback offering ``choices`` that start with the typed text."""

    def complete(arg: str) -> list[str]:
        return [choice for choice in choices if choice.startswith(arg)]

    return complete


DIRECTION_ARGS = "`left/right/float`"

COMMANDS: list[dict[str, object]] = [
    {
        "cmd": "LazyOutlineToggle",
        "args": DIRECTION_ARGS,
        "func": "toggle",
        "defn": {
            "desc": "Open or close the outline window. With `!` cursor stays in current window",
            "nargs": "?",
            "bang": True,
            "complete": list_complete(["left", "right", "float"]),
        },
    },
    {
        "cmd": "LazyOutlineOpen",
        "args": DIRECTION_ARGS,
        "func": "open",
        "defn": {
            "desc": "Open the outline window. With `!` cursor stays in current window",
            "nargs": "?",
            "bang": True,
            "complete": list_complete(["left", "right", "float"]),
        },
    },
    {
        "cmd": "LazyOutlineOpenAll",
        "func": "open_all",
        "defn": {"desc": "Open an outline window for each visible window."},
    },
    {
        "cmd": "LazyOutlineClose",
        "func": "close",
        "defn": {"desc": "Close the outline window."},
    },
    {
        "cmd": "LazyOutlineCloseAll",
        "func": "close_all",
        "defn": {"desc": "Close all visible outline windows."},
    },
    {
        "cmd": "LazyOutlineNext",
        "func": "next",
        "defn": {"desc": "Jump forwards {count} symbols (default 1).", "count": 1},
    },
    {
        "cmd": "LazyOutlinePrev",
        "func": "prev",
        "defn": {"desc": "Jump backwards [count] symbols (default 1).", "count": 1},
    },
    {
        "cmd": "LazyOutlineGo",
        "func": "go",
        "defn": {
            "desc": "Jump to the [count] symbol (default 1).",
            "count": 1,
            "bang": True,
            "nargs": "?",
        },
        "long_desc": (
            "If with [!] and inside the outline window, the cursor will stay in the outline "
            'window. [split] can be "v" to open a new vertical split, or "h" to open a '
            'horizontal split. [split] can also be a raw command, such as "belowright split".'
        ),
    },
    {
        "cmd": "LazyOutlineInfo",
        "func": "info",
        "defn": {"desc": "Print out debug info related to the outline."},
    },
    {
        "cmd": "LazyOutlineNavToggle",
        "func": "nav_toggle",
        "defn": {"desc": "Open or close the outline nav window."},
    },
    {
        "cmd": "LazyOutlineNavOpen",
        "func": "nav_open",
        "defn": {"desc": "Open the outline nav window."},
    },
    {
        "cmd": "LazyOutlineNavClose",
        "func": "nav_close",
        "defn": {"desc": "Close the outline nav window."},
    },
]


@dataclass(frozen=True)
class CommandArgs:
    """What the host passes to a user command callback."""

    args: str = ""
    bang: bool = False
    count: int = 0


class CommandHandlers:
    """Maps command invocations onto ``Outline`` operations."""

    def __init__(self, outline: Outline, host: Host) -> None:
        self._outline = outline
        self._host = host

    def toggle(self, params: CommandArgs) -> bool:
        return self._outline.toggle(focus=not params.bang, direction=params.args or None)

    def open(self, params: CommandArgs) -> None:
        self._outline.open(focus=not params.bang, direction=params.args or None)

    def open_all(self, _params: CommandArgs) -> None:
        self._outline.open_all()

    def close(self, _params: CommandArgs) -> None:
        self._outline.close()

    def close_all(self, _params: CommandArgs) -> None:
        self._outline.close_all()

    def next(self, params: CommandArgs) -> None:
        self._outline.next(params.count or 1)

    def prev(self, params: CommandArgs) -> None:
        self._outline.prev(params.count or 1)

    def go(self, params: CommandArgs) -> None:
        self._outline.select(
            index=params.count or None,
            split=params.args or None,
            jump=not params.bang,
        )

    def info(self, _params: CommandArgs) -> dict[str, object]:
        data = self._outline.info()
        self._host.notify(format_info(data), INFO)
        return data

    def nav_toggle(self, _params: CommandArgs) -> bool:
        return self._outline.nav_toggle()

    def nav_open(self, _params: CommandArgs) -> None:
        self._outline.nav_open()

    def nav_close(self, _params: CommandArgs) -> None:
        self._outline.nav_close()


def format_info(data: dict[str, object]) -> str:
    """Render ``Outline.info()`` as the text shown by the info command."""
    ignore = data["ignore"]
    lines = [f"Filetype: {data['filetype'] or '<none>'}"]
    if ignore["ignored"]:
        lines.append(f"Ignored: {ignore['message']}")
    kinds = sorted(kind for kind, shown in data["filter_kind_map"].items() if shown)
    lines.append("Symbols: " + (", ".join(kinds) or "<none>"))
    lines.append("Backends:")
    for status in data["backends"]:
        marker = "(attached)" if status["current"] else ""
        if status["supported"]:
            lines.append(f"  {status['name']} OK {marker}".rstrip())
        else:
            lines.append(f"  {status['name']} not supported ({status['error']})")
    return "\n".join(lines)


def create_commands(
    host: Host,
    handlers: CommandHandlers,
    wrap: Callable[[Callable[..., object]], Callable[..., object]],
) -> None:
    for entry in COMMANDS:
        callback = wrap(getattr(handlers, str(entry["func"])))
        host.create_user_command(str(entry["cmd"]), callback, dict(entry["defn"]))


def get_all_commands() -> list[dict[str, object]]:
    """Command table without callable fields, for documentation generation."""
    commands = copy.deepcopy(COMMANDS)
    for entry in commands:
        defn = entry["defn"]
        for key in [key for key, value in defn.items() if callable(value)]:
            del defn[key]
    return commands


__all__ = [
    "COMMANDS",
    "CommandArgs",
    "CommandHandlers",
    "create_commands",
    "format_info",
    "get_all_commands",
    "list_complete",
]
