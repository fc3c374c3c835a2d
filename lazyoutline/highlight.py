"""Highlight groups for the outline, derived from a Pygments style.

Every symbol kind gets a ``LazyOutline<Kind>`` group colored like the
matching Pygments token. Pygments is imported on first use so that hosts
which never open the outline do not pay for it.
"""

from __future__ import annotations

import logging

from .symbols import SYMBOL_KINDS

LOGGER = logging.getLogger(__name__)

GROUP_PREFIX = "LazyOutline"
FALLBACK_STYLE = "default"

# Dotted Pygments token names; resolved lazily with ``string_to_tokentype``.
KIND_TOKENS: dict[str, str] = {
    "File": "Generic.Heading",
    "Module": "Name.Namespace",
    "Namespace": "Name.Namespace",
    "Package": "Name.Namespace",
    "Class": "Name.Class",
    "Method": "Name.Function",
    "Property": "Name.Attribute",
    "Field": "Name.Attribute",
    "Constructor": "Name.Function",
    "Enum": "Keyword.Type",
    "Interface": "Keyword.Type",
    "Function": "Name.Function",
    "Variable": "Name.Variable",
    "Constant": "Name.Constant",
    "String": "Literal.String",
    "Number": "Literal.Number",
    "Boolean": "Keyword.Constant",
    "Array": "Name.Variable",
    "Object": "Name.Variable",
    "Key": "Name.Attribute",
    "Null": "Keyword.Constant",
    "EnumMember": "Name.Constant",
    "Struct": "Keyword.Type",
    "Event": "Name.Decorator",
    "Operator": "Operator",
    "TypeParameter": "Keyword.Type",
}


def _spec_from_style(style_def: dict[str, object]) -> dict[str, object]:
    spec: dict[str, object] = {}
    if style_def.get("color"):
        spec["fg"] = f"#{style_def['color']}"
    if style_def.get("bgcolor"):
        spec["bg"] = f"#{style_def['bgcolor']}"
    for attr in ("bold", "italic", "underline"):
        if style_def.get(attr):
            spec[attr] = True
    return spec


def build_highlight_groups(style_name: str) -> dict[str, dict[str, object]]:
    """Compute ``{group_name: spec}`` for ``style_name``.

    Unknown styles fall back to Pygments' ``default`` style.
    """
    from pygments.styles import get_style_by_name
    from pygments.token import string_to_tokentype
    from pygments.util import ClassNotFound

    try:
        style = get_style_by_name(style_name)
    except ClassNotFound:
        LOGGER.warning("Unknown highlight style %r; using %r", style_name, FALLBACK_STYLE)
        style = get_style_by_name(FALLBACK_STYLE)

    groups: dict[str, dict[str, object]] = {}
    for kind in SYMBOL_KINDS:
        token = string_to_tokentype(KIND_TOKENS.get(kind, "Text"))
        groups[f"{GROUP_PREFIX}{kind}"] = _spec_from_style(style.style_for_token(token))

    groups[f"{GROUP_PREFIX}Guide"] = _spec_from_style(
        style.style_for_token(string_to_tokentype("Comment"))
    )
    line_spec: dict[str, object] = {"bg": style.highlight_color}
    if style.background_color:
        line_spec["default_bg"] = style.background_color
    groups[f"{GROUP_PREFIX}Line"] = line_spec
    return groups


def create_highlight_groups(host, style_name: str) -> dict[str, dict[str, object]]:
    """Define every outline highlight group on ``host``."""
    groups = build_highlight_groups(style_name)
    for name, spec in groups.items():
        host.set_highlight(name, spec)
    LOGGER.debug("Created %d highlight groups from style %s", len(groups), style_name)
    return groups


__all__ = ["GROUP_PREFIX", "KIND_TOKENS", "build_highlight_groups", "create_highlight_groups"]
