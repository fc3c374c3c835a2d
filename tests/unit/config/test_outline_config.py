from __future__ import annotations

import logging
import tempfile
import unittest
from pathlib import Path

from lazyoutline.config import (
    ANY_FILETYPE,
    DEFAULT_BACKENDS,
    DEFAULT_FILTER_KIND,
    DEFAULT_ICONS,
    Configuration,
    OutlineConfig,
)
from lazyoutline.highlight import GROUP_PREFIX, build_highlight_groups, create_highlight_groups
from lazyoutline.host import HeadlessHost
from lazyoutline.log import configure_logging, default_log_path
from lazyoutline.symbols import SYMBOL_KINDS


class OutlineConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        config = OutlineConfig.from_options(None)
        self.assertEqual(config.backends, DEFAULT_BACKENDS)
        self.assertEqual(config.default_direction, "prefer_right")
        self.assertEqual(config.filter_kind, {ANY_FILETYPE: DEFAULT_FILTER_KIND})
        self.assertTrue(config.lazy_load)
        self.assertEqual(config.post_jump_cmd, "normal! zz")
        self.assertFalse(config.log_file)

    def test_invalid_values_fall_back_with_warning(self) -> None:
        with self.assertLogs("lazyoutline.config", level="WARNING") as logs:
            config = OutlineConfig.from_options(
                {
                    "layout": {"default_direction": "up"},
                    "close_automatic": "yes",
                    "highlight_mode": "rainbow",
                    "highlight_style": "no-such-style",
                    "log_level": "loud",
                }
            )
        self.assertEqual(config.default_direction, "prefer_right")
        self.assertFalse(config.close_automatic)
        self.assertEqual(config.highlight_mode, "split_width")
        self.assertEqual(config.highlight_style, "default")
        self.assertEqual(config.log_level, "WARNING")
        self.assertEqual(len(logs.records), 5)

    def test_unknown_option_is_logged(self) -> None:
        with self.assertLogs("lazyoutline.config", level="WARNING") as logs:
            OutlineConfig.from_options({"nerd_fonts": True})
        self.assertIn("nerd_fonts", logs.output[0])

    def test_log_level_is_case_insensitive(self) -> None:
        self.assertEqual(OutlineConfig.from_options({"log_level": "debug"}).log_level, "DEBUG")

    def test_lazy_load_is_derived(self) -> None:
        self.assertFalse(OutlineConfig.from_options({"open_automatic": True}).lazy_load)
        self.assertTrue(OutlineConfig.from_options({"lazy_load": True, "open_automatic": True}).lazy_load)

    def test_filter_kind_false_shows_everything(self) -> None:
        self.assertEqual(OutlineConfig.from_options({"filter_kind": False}).filter_kind, {ANY_FILETYPE: None})


class ConfigurationLookupTests(unittest.TestCase):
    def setUp(self) -> None:
        self.filetypes = {1: "python", 2: "lua"}
        self.configuration = Configuration(filetype_of=lambda bufnr: self.filetypes.get(bufnr, ""))

    def test_filter_kind_map_per_filetype(self) -> None:
        self.configuration.apply({"filter_kind": {"python": ["Class"], "lua": False}})

        python_map = self.configuration.get_filter_kind_map(1)
        self.assertEqual(set(python_map), set(SYMBOL_KINDS))
        self.assertEqual([kind for kind, shown in python_map.items() if shown], ["Class"])
        self.assertTrue(all(self.configuration.get_filter_kind_map(2).values()))
        self.assertTrue(self.configuration.is_kind_visible(3, "Function"))
        self.assertFalse(self.configuration.is_kind_visible(3, "Variable"))

    def test_icon_lookup_order(self) -> None:
        self.configuration.apply({"icons": {"Class": "K", "python": {"Class": "PyK"}}})

        self.assertEqual(self.configuration.get_icon(1, "Class"), "PyK")
        self.assertEqual(self.configuration.get_icon(2, "Class"), "K")
        self.assertEqual(self.configuration.get_icon(2, "Method"), DEFAULT_ICONS["Method"])
        self.assertEqual(self.configuration.get_icon(2, "Mystery"), DEFAULT_ICONS["Null"])
        self.assertEqual(self.configuration.get_icon(2, "Class", collapsed=True), DEFAULT_ICONS["Collapsed"])

    def test_open_automatic_accepts_callable(self) -> None:
        self.configuration.apply({"open_automatic": lambda bufnr: bufnr == 1})
        self.assertTrue(self.configuration.should_open_automatic(1))
        self.assertFalse(self.configuration.should_open_automatic(2))

    def test_apply_replaces_previous_options(self) -> None:
        self.configuration.apply({"close_on_select": True})
        self.configuration.apply({})
        self.assertFalse(self.configuration.current.close_on_select)
        self.assertEqual(self.configuration.options, {})


class ConfigureLoggingTests(unittest.TestCase):
    def tearDown(self) -> None:
        configure_logging("WARNING", log_file=False)

    def test_file_handler_installed_once_and_removed(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "logs" / "outline.log"
            logger = configure_logging("DEBUG", log_file=True, path=path)
            configure_logging("INFO", log_file=True, path=path)

            file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
            self.assertEqual(len(file_handlers), 1)
            self.assertEqual(logger.level, logging.INFO)

            logging.getLogger("lazyoutline.config").info("applied")
            file_handlers[0].flush()
            self.assertIn("applied", path.read_text(encoding="utf-8"))

            configure_logging("WARNING", log_file=False)
            self.assertFalse(any(isinstance(h, logging.FileHandler) for h in logger.handlers))

    def test_default_log_path_uses_app_name(self) -> None:
        self.assertEqual(default_log_path().name, "lazyoutline.log")


class HighlightGroupTests(unittest.TestCase):
    def test_groups_cover_every_kind(self) -> None:
        groups = build_highlight_groups("monokai")
        for kind in SYMBOL_KINDS:
            self.assertIn(f"{GROUP_PREFIX}{kind}", groups)
        self.assertIn(f"{GROUP_PREFIX}Guide", groups)
        self.assertTrue(groups[f"{GROUP_PREFIX}Line"]["bg"].startswith("#"))
        self.assertTrue(groups[f"{GROUP_PREFIX}Function"]["fg"].startswith("#"))

    def test_unknown_style_falls_back_to_default(self) -> None:
        with self.assertLogs("lazyoutline.highlight", level="WARNING"):
            groups = build_highlight_groups("no-such-style")
        self.assertEqual(groups, build_highlight_groups("default"))

    def test_create_highlight_groups_defines_on_host(self) -> None:
        host = HeadlessHost()
        groups = create_highlight_groups(host, "default")
        self.assertEqual(host.highlights, groups)


if __name__ == "__main__":
    unittest.main()
