"""Per-buffer symbol storage and collapse state.

``SymbolStore`` maps buffer numbers to ``BufferData``. Buffer ``0`` always
means "the current buffer" and is resolved through an injected callback.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from .symbols import SymbolNode, walk

SymbolKey = tuple[tuple[str, str], ...]


def symbol_key(node: SymbolNode) -> SymbolKey:
    """Stable identity for a symbol across re-fetches: its name/kind path."""
    path = [(node.name, node.kind)]
    path.extend((ancestor.name, ancestor.kind) for ancestor in node.ancestors())
    return tuple(reversed(path))


@dataclass
class BufferData:
    """Symbol roots for one buffer plus the outline's collapsed nodes."""

    bufnr: int
    roots: list[SymbolNode] = field(default_factory=list)
    collapsed: set[SymbolKey] = field(default_factory=set)
    has_symbols: bool = False

    def set_symbols(self, roots: list[SymbolNode]) -> None:
        """Replace symbols, keeping collapse state for symbols that survived."""
        self.roots = list(roots)
        self.has_symbols = True
        alive = {symbol_key(node) for node in walk(self.roots)}
        self.collapsed &= alive

    def is_collapsed(self, node: SymbolNode) -> bool:
        return symbol_key(node) in self.collapsed

    def set_collapsed(self, node: SymbolNode, collapsed: bool) -> None:
        """Collapse or expand ``node``; leaves are never recorded as collapsed."""
        key = symbol_key(node)
        if collapsed and node.children:
            self.collapsed.add(key)
        else:
            self.collapsed.discard(key)

    def is_visible(self, node: SymbolNode) -> bool:
        """A symbol is hidden when any of its ancestors is collapsed."""
        return not any(self.is_collapsed(ancestor) for ancestor in node.ancestors())

    def iter(self, skip_hidden: bool = True) -> Iterator[SymbolNode]:
        """Yield symbols in pre-order, optionally skipping collapsed subtrees."""
        stack = list(reversed(self.roots))
        while stack:
            node = stack.pop()
            yield node
            if skip_hidden and self.is_collapsed(node):
                continue
            stack.extend(reversed(node.children))

    def flat(self, skip_hidden: bool = True) -> list[SymbolNode]:
        return list(self.iter(skip_hidden=skip_hidden))

    def count(self, skip_hidden: bool = True) -> int:
        """Number of symbols; hidden ones included when ``skip_hidden`` is false."""
        return sum(1 for _node in self.iter(skip_hidden=skip_hidden))

    def item(self, index: int, skip_hidden: bool = True) -> SymbolNode:
        """Return the symbol at 1-based ``index`` in the visible listing."""
        items = self.flat(skip_hidden=skip_hidden)
        if not 1 <= index <= len(items):
            raise ValueError(f"symbol index out of range: {index} (have {len(items)})")
        return items[index - 1]

    def indexof(self, node: SymbolNode, skip_hidden: bool = True) -> int | None:
        """1-based position of ``node`` in the listing, ``None`` when not listed."""
        for index, candidate in enumerate(self.iter(skip_hidden=skip_hidden), start=1):
            if candidate is node:
                return index
        return None

    @property
    def max_level(self) -> int:
        """Deepest level present in the tree (roots are level 0)."""
        return max((node.level for node in walk(self.roots)), default=0)


class SymbolStore:
    """Owns ``BufferData`` instances keyed by buffer number."""

    def __init__(self, current_buffer: Callable[[], int]) -> None:
        self._current_buffer = current_buffer
        self._buffers: dict[int, BufferData] = {}

    def resolve(self, bufnr: int | None) -> int:
        """Turn ``None``/``0`` into the current buffer number."""
        if not bufnr:
            return self._current_buffer()
        return bufnr

    def has_symbols(self, bufnr: int | None = 0) -> bool:
        data = self._buffers.get(self.resolve(bufnr))
        return data is not None and data.has_symbols

    def get(self, bufnr: int | None = 0) -> BufferData | None:
        return self._buffers.get(self.resolve(bufnr))

    def get_or_create(self, bufnr: int | None = 0) -> BufferData:
        resolved = self.resolve(bufnr)
        data = self._buffers.get(resolved)
        if data is None:
            data = BufferData(bufnr=resolved)
            self._buffers[resolved] = data
        return data

    def set_symbols(self, bufnr: int | None, roots: list[SymbolNode]) -> BufferData:
        data = self.get_or_create(bufnr)
        data.set_symbols(roots)
        return data

    def delete(self, bufnr: int | None) -> None:
        self._buffers.pop(self.resolve(bufnr), None)

    def buffers(self) -> list[int]:
        return sorted(self._buffers)


__all__ = ["BufferData", "SymbolKey", "SymbolStore", "symbol_key"]
