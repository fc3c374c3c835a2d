"""Symbol tree records consumed by the outline core.

Backends build these trees; the core only reads them.
Children are owned by their parent, the parent link is a weak back-reference.
"""

from __future__ import annotations

import weakref
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

# Index matches the LSP ``SymbolKind`` numbering (1-based).
SYMBOL_KINDS: tuple[str, ...] = (
    "File",
    "Module",
    "Namespace",
    "Package",
    "Class",
    "Method",
    "Property",
    "Field",
    "Constructor",
    "Enum",
    "Interface",
    "Function",
    "Variable",
    "Constant",
    "String",
    "Number",
    "Boolean",
    "Array",
    "Object",
    "Key",
    "Null",
    "EnumMember",
    "Struct",
    "Event",
    "Operator",
    "TypeParameter",
)


def kind_from_lsp(value: int) -> str:
    """Map an LSP numeric symbol kind to its name, ``"Null"`` when unknown."""
    if isinstance(value, bool) or not isinstance(value, int):
        return "Null"
    if 1 <= value <= len(SYMBOL_KINDS):
        return SYMBOL_KINDS[value - 1]
    return "Null"


@dataclass(frozen=True, order=True)
class Range:
    """Inclusive source span; lines are 1-based, columns 0-based."""

    lnum: int
    col: int
    end_lnum: int
    end_col: int

    @property
    def start(self) -> tuple[int, int]:
        return (self.lnum, self.col)

    @property
    def end(self) -> tuple[int, int]:
        return (self.end_lnum, self.end_col)

    def contains(self, lnum: int, col: int) -> bool:
        """Return whether ``(lnum, col)`` falls inside the span, ends included."""
        return self.start <= (lnum, col) <= self.end


@dataclass(eq=False)
class SymbolNode:
    """One named code construct inside a buffer's symbol tree."""

    name: str
    kind: str
    range: Range
    selection_range: Range | None = None
    children: list[SymbolNode] = field(default_factory=list)
    level: int = 0
    _parent_ref: weakref.ReferenceType[SymbolNode] | None = field(
        default=None, init=False, repr=False
    )

    def __post_init__(self) -> None:
        for child in self.children:
            child._adopt(self)

    def _adopt(self, parent: SymbolNode) -> None:
        self._parent_ref = weakref.ref(parent)
        self.level = parent.level + 1
        for child in self.children:
            child._adopt(self)

    @property
    def parent(self) -> SymbolNode | None:
        """Enclosing symbol, or ``None`` for roots and detached nodes."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def effective_range(self) -> Range:
        """Range used for cursor containment: selection range when present."""
        return self.selection_range if self.selection_range is not None else self.range

    @property
    def lnum(self) -> int:
        return self.range.lnum

    @property
    def col(self) -> int:
        return self.range.col

    def add_child(self, child: SymbolNode) -> SymbolNode:
        """Append ``child`` and point its back-reference at this node."""
        self.children.append(child)
        child._adopt(self)
        return child

    def ancestors(self) -> Iterator[SymbolNode]:
        """Yield enclosing symbols from the direct parent up to the root."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent


def walk(roots: Iterable[SymbolNode]) -> Iterator[SymbolNode]:
    """Depth-first pre-order traversal in declared order."""
    stack = list(reversed(list(roots)))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


__all__ = ["Range", "SYMBOL_KINDS", "SymbolNode", "kind_from_lsp", "walk"]
