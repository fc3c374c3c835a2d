"""Cursor-to-symbol resolution over a buffer's symbol tree.

The descent follows range containment from the roots down. Each symbol is
tested against its effective range (selection range when present). Among
siblings that contain the cursor the later one wins, so nested or equal
ranges resolve to the most specific declaration.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass

from .data import BufferData
from .symbols import SymbolNode


@dataclass(frozen=True)
class SymbolPosition:
    """Result of locating a cursor inside a symbol tree."""

    exact_symbol: SymbolNode | None
    closest_symbol: SymbolNode | None


@dataclass(frozen=True)
class LocationItem:
    """One step of the root-to-symbol path returned by ``get_location``."""

    name: str
    kind: str
    icon: str
    lnum: int
    col: int


def _containing_child(nodes: Sequence[SymbolNode], lnum: int, col: int) -> SymbolNode | None:
    found = None
    for node in nodes:
        if node.effective_range.contains(lnum, col):
            found = node
    return found


def _last_preceding(nodes: Sequence[SymbolNode], lnum: int, col: int) -> SymbolNode | None:
    found = None
    for node in nodes:
        if node.effective_range.start <= (lnum, col):
            found = node
    return found


def find_symbol_position(roots: Sequence[SymbolNode], lnum: int, col: int) -> SymbolPosition | None:
    """Locate ``(lnum, col)`` among ``roots``.

    The exact symbol is the deepest containing node, or ``None`` when no
    root contains the cursor. The closest symbol starts at the exact symbol
    (or the last root starting at or before the cursor) and is refined to
    the nearest child declared before the cursor. Returns ``None`` only when
    no root starts at or before the cursor.
    """
    exact = _containing_child(roots, lnum, col)
    while exact is not None:
        child = _containing_child(exact.children, lnum, col)
        if child is None:
            break
        exact = child

    closest = exact if exact is not None else _last_preceding(roots, lnum, col)
    if closest is None:
        return None
    while True:
        preceding = _last_preceding(closest.children, lnum, col)
        if preceding is None:
            break
        closest = preceding

    return SymbolPosition(exact_symbol=exact, closest_symbol=closest)


def get_symbol_position(bufdata: BufferData | None, lnum: int, col: int) -> SymbolPosition | None:
    """``find_symbol_position`` over a buffer; ``None`` when it has no symbols."""
    if bufdata is None or not bufdata.has_symbols or not bufdata.roots:
        return None
    return find_symbol_position(bufdata.roots, lnum, col)


def iter_location(
    symbol: SymbolNode | None,
    get_icon: Callable[[str], str],
) -> Iterator[LocationItem]:
    """Yield the path from the root ancestor down to ``symbol``."""
    if symbol is None:
        return
    chain = [symbol, *symbol.ancestors()]
    for node in reversed(chain):
        anchor = node.effective_range
        yield LocationItem(
            name=node.name,
            kind=node.kind,
            icon=get_icon(node.kind),
            lnum=anchor.lnum,
            col=anchor.col,
        )


def resolve_location(
    bufdata: BufferData | None,
    lnum: int,
    col: int,
    exact: bool = True,
    get_icon: Callable[[str], str] = lambda _kind: "",
) -> list[LocationItem]:
    """Return the root-first path to the symbol under the cursor.

    ``exact`` picks the exact symbol (default) or the closest one. An empty
    list means there were no symbols, or nothing contained the cursor for
    ``exact``, or no symbol starts before the cursor.
    """
    position = get_symbol_position(bufdata, lnum, col)
    if position is None:
        return []
    symbol = position.exact_symbol if exact else position.closest_symbol
    return list(iter_location(symbol, get_icon))


__all__ = [
    "LocationItem",
    "SymbolPosition",
    "find_symbol_position",
    "get_symbol_position",
    "iter_location",
    "resolve_location",
]
