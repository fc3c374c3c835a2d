"""Outline configuration: defaults, option coercion, and icon/filter lookups.

Options arrive as a plain dict from the host. ``OutlineConfig.from_options``
normalizes them defensively: invalid values are logged and replaced by the
default so a typo never disables the outline.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from .symbols import SYMBOL_KINDS

LOGGER = logging.getLogger(__name__)

DIRECTIONS = ("left", "right", "float", "prefer_left", "prefer_right")
HIGHLIGHT_MODES = ("split_width", "full_width", "last", "none")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_BACKENDS: tuple[str, ...] = ("lsp", "treesitter", "markdown", "man")
DEFAULT_FILTER_KIND: tuple[str, ...] = (
    "Class",
    "Constructor",
    "Enum",
    "Function",
    "Interface",
    "Module",
    "Method",
    "Struct",
)
DEFAULT_ICONS: dict[str, str] = {
    "Array": "[a]",
    "Boolean": "[b]",
    "Class": "[C]",
    "Constant": "[const]",
    "Constructor": "[Co]",
    "Enum": "[E]",
    "EnumMember": "[m]",
    "Event": "[Ev]",
    "Field": "[Fld]",
    "File": "[File]",
    "Function": "[F]",
    "Interface": "[I]",
    "Key": "[K]",
    "Method": "[M]",
    "Module": "[Mod]",
    "Namespace": "[NS]",
    "Null": "[-]",
    "Number": "[n]",
    "Object": "[o]",
    "Operator": "[+]",
    "Package": "[Pkg]",
    "Property": "[P]",
    "String": "[s]",
    "Struct": "[S]",
    "TypeParameter": "[T]",
    "Variable": "[V]",
    "Collapsed": ">",
}
# Key in per-filetype tables that applies to every filetype.
ANY_FILETYPE = "_"

KNOWN_OPTIONS = frozenset(
    {
        "backends",
        "layout",
        "filter_kind",
        "icons",
        "open_automatic",
        "close_automatic",
        "on_attach",
        "lazy_load",
        "highlight_style",
        "highlight_on_hover",
        "highlight_mode",
        "post_jump_cmd",
        "close_on_select",
        "log_level",
        "log_file",
    }
)


def derive_lazy_load(options: Mapping[str, object]) -> bool:
    """Decide whether observer registration may wait until first use.

    Explicit ``lazy_load=True`` wins. Otherwise loading is lazy only when the
    host neither passed ``lazy_load`` nor wired an ``on_attach`` callback nor
    asked for automatic opening, all of which need observers from startup.
    """
    if options.get("lazy_load") is True:
        return True
    return (
        options.get("lazy_load") is None
        and options.get("on_attach") is None
        and not options.get("open_automatic")
    )


def _warn_invalid(key: str, value: object, default: object) -> None:
    LOGGER.warning("Ignoring invalid value %r for option %r; using %r", value, key, default)


def _coerce_bool(options: Mapping[str, object], key: str, default: bool) -> bool:
    value = options.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    _warn_invalid(key, value, default)
    return default


def _coerce_choice(value: object, key: str, choices: tuple[str, ...], default: str) -> str:
    if isinstance(value, str) and value in choices:
        return value
    _warn_invalid(key, value, default)
    return default


def _coerce_kind_list(value: object, key: str) -> tuple[str, ...] | None:
    """Normalize a list of kind names; ``False`` means every kind."""
    if value is False:
        return None
    if isinstance(value, (list, tuple)) and all(isinstance(kind, str) for kind in value):
        unknown = [kind for kind in value if kind not in SYMBOL_KINDS]
        if unknown:
            LOGGER.warning("Unknown symbol kinds in %r: %s", key, ", ".join(unknown))
        return tuple(kind for kind in value if kind in SYMBOL_KINDS)
    _warn_invalid(key, value, list(DEFAULT_FILTER_KIND))
    return DEFAULT_FILTER_KIND


def _coerce_filter_kind(value: object) -> dict[str, tuple[str, ...] | None]:
    """Accept a flat kind list, ``False``, or a per-filetype table."""
    if isinstance(value, Mapping):
        table: dict[str, tuple[str, ...] | None] = {}
        for filetype, kinds in value.items():
            table[str(filetype)] = _coerce_kind_list(kinds, f"filter_kind.{filetype}")
        table.setdefault(ANY_FILETYPE, DEFAULT_FILTER_KIND)
        return table
    return {ANY_FILETYPE: _coerce_kind_list(value, "filter_kind")}


def _coerce_icons(value: object) -> dict[str, dict[str, str]]:
    """Accept ``{kind: icon}`` or ``{filetype: {kind: icon}}`` overrides."""
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        _warn_invalid("icons", value, {})
        return {}
    table: dict[str, dict[str, str]] = {}
    for key, icon in value.items():
        if isinstance(icon, str):
            table.setdefault(ANY_FILETYPE, {})[str(key)] = icon
        elif isinstance(icon, Mapping):
            table.setdefault(str(key), {}).update(
                {str(kind): str(text) for kind, text in icon.items() if isinstance(text, str)}
            )
        else:
            _warn_invalid(f"icons.{key}", icon, DEFAULT_ICONS.get(str(key), ""))
    return table


def _coerce_callable(options: Mapping[str, object], key: str) -> Callable[..., object] | None:
    value = options.get(key)
    if value is None or callable(value):
        return value
    _warn_invalid(key, value, None)
    return None


def _coerce_backends(value: object) -> tuple[str, ...]:
    if isinstance(value, (list, tuple)) and all(isinstance(name, str) for name in value):
        return tuple(value)
    _warn_invalid("backends", value, list(DEFAULT_BACKENDS))
    return DEFAULT_BACKENDS


def _coerce_style(value: object) -> str:
    from pygments.styles import get_all_styles

    if isinstance(value, str) and value in set(get_all_styles()):
        return value
    _warn_invalid("highlight_style", value, "default")
    return "default"


@dataclass(frozen=True)
class OutlineConfig:
    """Normalized outline settings derived from host options."""

    backends: tuple[str, ...] = DEFAULT_BACKENDS
    default_direction: str = "prefer_right"
    filter_kind: dict[str, tuple[str, ...] | None] = field(
        default_factory=lambda: {ANY_FILETYPE: DEFAULT_FILTER_KIND}
    )
    icons: dict[str, dict[str, str]] = field(default_factory=dict)
    open_automatic: bool | Callable[[int], bool] = False
    close_automatic: bool = False
    on_attach: Callable[[int], object] | None = None
    lazy_load: bool = True
    highlight_style: str = "default"
    highlight_on_hover: bool = False
    highlight_mode: str = "split_width"
    post_jump_cmd: str | None = "normal! zz"
    close_on_select: bool = False
    log_level: str = "WARNING"
    log_file: bool = False

    @classmethod
    def from_options(cls, options: Mapping[str, object] | None) -> OutlineConfig:
        """Build a config from host options, falling back per key on bad input."""
        options = options or {}
        unknown = sorted(str(key) for key in options if key not in KNOWN_OPTIONS)
        if unknown:
            LOGGER.warning("Unknown outline options: %s", ", ".join(unknown))

        layout = options.get("layout") or {}
        if not isinstance(layout, Mapping):
            _warn_invalid("layout", layout, {})
            layout = {}

        open_automatic = options.get("open_automatic", False)
        if not isinstance(open_automatic, bool) and not callable(open_automatic):
            _warn_invalid("open_automatic", open_automatic, False)
            open_automatic = False

        post_jump_cmd = options.get("post_jump_cmd", "normal! zz")
        if post_jump_cmd is not None and not isinstance(post_jump_cmd, str):
            _warn_invalid("post_jump_cmd", post_jump_cmd, "normal! zz")
            post_jump_cmd = "normal! zz"

        log_level = options.get("log_level", "WARNING")
        if isinstance(log_level, str):
            log_level = log_level.upper()

        return cls(
            backends=_coerce_backends(options.get("backends", list(DEFAULT_BACKENDS))),
            default_direction=_coerce_choice(
                layout.get("default_direction", "prefer_right"),
                "layout.default_direction",
                DIRECTIONS,
                "prefer_right",
            ),
            filter_kind=_coerce_filter_kind(options.get("filter_kind", list(DEFAULT_FILTER_KIND))),
            icons=_coerce_icons(options.get("icons")),
            open_automatic=open_automatic,
            close_automatic=_coerce_bool(options, "close_automatic", False),
            on_attach=_coerce_callable(options, "on_attach"),
            lazy_load=_coerce_bool(options, "lazy_load", derive_lazy_load(options)),
            highlight_style=_coerce_style(options.get("highlight_style", "default")),
            highlight_on_hover=_coerce_bool(options, "highlight_on_hover", False),
            highlight_mode=_coerce_choice(
                options.get("highlight_mode", "split_width"),
                "highlight_mode",
                HIGHLIGHT_MODES,
                "split_width",
            ),
            post_jump_cmd=post_jump_cmd,
            close_on_select=_coerce_bool(options, "close_on_select", False),
            log_level=_coerce_choice(log_level, "log_level", LOG_LEVELS, "WARNING"),
            log_file=_coerce_bool(options, "log_file", False),
        )


class Configuration:
    """Holds the applied ``OutlineConfig`` and answers per-buffer lookups."""

    def __init__(self, filetype_of: Callable[[int], str]) -> None:
        self._filetype_of = filetype_of
        self.options: dict[str, object] = {}
        self.current = OutlineConfig()

    def apply(self, options: Mapping[str, object] | None) -> OutlineConfig:
        """Make ``options`` the active configuration."""
        self.options = dict(options or {})
        self.current = OutlineConfig.from_options(self.options)
        LOGGER.debug("Applied outline configuration: %s", sorted(self.options))
        return self.current

    def _filter_kinds(self, bufnr: int) -> tuple[str, ...] | None:
        table = self.current.filter_kind
        filetype = self._filetype_of(bufnr)
        if filetype in table:
            return table[filetype]
        return table.get(ANY_FILETYPE, DEFAULT_FILTER_KIND)

    def get_filter_kind_map(self, bufnr: int = 0) -> dict[str, bool]:
        """Map every symbol kind to whether the outline shows it for ``bufnr``."""
        kinds = self._filter_kinds(bufnr)
        if kinds is None:
            return {kind: True for kind in SYMBOL_KINDS}
        allowed = set(kinds)
        return {kind: kind in allowed for kind in SYMBOL_KINDS}

    def is_kind_visible(self, bufnr: int, kind: str) -> bool:
        kinds = self._filter_kinds(bufnr)
        return kinds is None or kind in kinds

    def get_icon(self, bufnr: int, kind: str, collapsed: bool = False) -> str:
        """Icon for ``kind``: filetype override, then global override, then default."""
        if collapsed:
            kind = "Collapsed"
        filetype = self._filetype_of(bufnr)
        for table_key in (filetype, ANY_FILETYPE):
            overrides = self.current.icons.get(table_key)
            if overrides and kind in overrides:
                return overrides[kind]
        return DEFAULT_ICONS.get(kind, DEFAULT_ICONS["Null"])

    def should_open_automatic(self, bufnr: int) -> bool:
        value = self.current.open_automatic
        if callable(value):
            return bool(value(bufnr))
        return bool(value)


__all__ = [
    "ANY_FILETYPE",
    "Configuration",
    "DEFAULT_BACKENDS",
    "DEFAULT_FILTER_KIND",
    "DEFAULT_ICONS",
    "DIRECTIONS",
    "OutlineConfig",
    "derive_lazy_load",
]
