"""Tests for deferred one-time setup and the lazy dispatch wrapper.

Side effects are recorded through injected callbacks so each test can
count exactly how often configuration was applied.
"""

from __future__ import annotations

import unittest

from lazyoutline.config import derive_lazy_load
from lazyoutline.host import ERROR
from lazyoutline.lifecycle import (
    INITIALIZED,
    PENDING,
    UNINITIALIZED,
    SetupCoordinator,
    SetupDeps,
    lazy,
)


class Recorder:
    def __init__(self, version: tuple[int, int] = (0, 10)) -> None:
        self.version = version
        self.calls: list[str] = []
        self.applied: list[dict[str, object]] = []
        self.notices: list[tuple[str, str]] = []
        self.fail_apply = False
        self.on_enter = None

    def deps(self) -> SetupDeps:
        def apply_config(options):
            self.calls.append("apply")
            if self.fail_apply:
                raise RuntimeError("apply failed")
            self.applied.append(dict(options))

        def on_enter_buffer():
            self.calls.append("enter")
            if self.on_enter is not None:
                self.on_enter()

        return SetupDeps(
            host_version=lambda: self.version,
            notify_once=lambda message, level: self.notices.append((level, message)),
            register_commands=lambda: self.calls.append("commands"),
            register_observers=lambda: self.calls.append("observers"),
            apply_config=apply_config,
            create_highlights=lambda: self.calls.append("highlights"),
            on_enter_buffer=on_enter_buffer,
        )

    def count(self, name: str) -> int:
        return self.calls.count(name)


class LazyLoadDerivationTests(unittest.TestCase):
    def test_truth_table(self) -> None:
        cases = [
            ({"lazy_load": True}, True),
            ({"lazy_load": False}, False),
            ({}, True),
            ({"on_attach": lambda bufnr: None}, False),
            ({"open_automatic": True}, False),
            ({"lazy_load": None, "on_attach": None, "open_automatic": False}, True),
        ]
        for options, expected in cases:
            with self.subTest(options=options):
                self.assertIs(derive_lazy_load(options), expected)

    def test_explicit_lazy_load_wins_over_open_automatic(self) -> None:
        self.assertTrue(derive_lazy_load({"lazy_load": True, "open_automatic": True}))


class SetupCoordinatorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.recorder = Recorder()
        self.coordinator = SetupCoordinator(self.recorder.deps())

    def test_ensure_ready_without_configure_is_noop(self) -> None:
        self.coordinator.ensure_ready()
        self.assertEqual(self.coordinator.state, UNINITIALIZED)
        self.assertEqual(self.recorder.calls, [])

    def test_configure_defers_apply_until_ensure_ready(self) -> None:
        self.assertTrue(self.coordinator.configure({"icons": {"Class": "C"}}))

        self.assertEqual(self.coordinator.state, PENDING)
        self.assertEqual(self.recorder.calls, ["commands"])
        self.assertEqual(
            self.coordinator.pending_options,
            {"icons": {"Class": "C"}, "lazy_load": True},
        )

    def test_ensure_ready_applies_exactly_once(self) -> None:
        self.coordinator.configure({})
        for _ in range(5):
            self.coordinator.ensure_ready()

        self.assertEqual(self.coordinator.state, INITIALIZED)
        self.assertEqual(self.coordinator.apply_count, 1)
        self.assertEqual(self.recorder.count("apply"), 1)
        self.assertEqual(self.recorder.count("highlights"), 1)
        self.assertEqual(self.recorder.count("enter"), 1)
        self.assertIsNone(self.coordinator.pending_options)

    def test_apply_order_matches_setup_sequence(self) -> None:
        self.coordinator.configure(None)
        self.coordinator.ensure_ready()
        self.assertEqual(
            self.recorder.calls,
            ["commands", "apply", "observers", "highlights", "enter"],
        )

    def test_eager_options_register_observers_at_configure(self) -> None:
        self.coordinator.configure({"open_automatic": True})
        self.assertEqual(self.recorder.calls, ["commands", "observers"])
        self.assertIs(self.coordinator.pending_options["lazy_load"], False)

    def test_pending_options_carry_lazy_load_once_published(self) -> None:
        seen: list[dict[str, object] | None] = []
        deps = self.recorder.deps()
        coordinator = SetupCoordinator(
            SetupDeps(
                host_version=deps.host_version,
                notify_once=deps.notify_once,
                register_commands=lambda: seen.append(coordinator.pending_options),
                register_observers=deps.register_observers,
                apply_config=deps.apply_config,
                create_highlights=deps.create_highlights,
                on_enter_buffer=deps.on_enter_buffer,
            )
        )

        coordinator.configure({"on_attach": print})

        self.assertEqual(len(seen), 1)
        self.assertIs(seen[0]["lazy_load"], False)

    def test_configure_copies_options(self) -> None:
        options: dict[str, object] = {}
        self.coordinator.configure(options)
        self.assertEqual(options, {})

    def test_first_trigger_wins(self) -> None:
        self.coordinator.configure({})
        observed: list[int] = []

        def trigger() -> None:
            self.coordinator.ensure_ready()
            observed.append(self.coordinator.apply_count)

        for _ in range(3):
            trigger()

        self.assertEqual(observed, [1, 1, 1])
        self.assertEqual(self.recorder.count("apply"), 1)

    def test_reconfigure_after_initialized_applies_immediately(self) -> None:
        self.coordinator.configure({"highlight_style": "monokai"})
        self.coordinator.ensure_ready()
        self.coordinator.configure({"highlight_style": "emacs"})
        self.coordinator.ensure_ready()

        self.assertEqual(self.coordinator.apply_count, 2)
        self.assertEqual(self.recorder.count("apply"), 2)
        self.assertEqual(self.recorder.applied[-1]["highlight_style"], "emacs")
        self.assertEqual(self.coordinator.state, INITIALIZED)

    def test_reconfigure_before_first_use_keeps_latest_options(self) -> None:
        self.coordinator.configure({"highlight_style": "monokai"})
        self.coordinator.configure({"highlight_style": "emacs"})
        self.coordinator.ensure_ready()

        self.assertEqual(self.recorder.applied, [{"highlight_style": "emacs", "lazy_load": True}])

    def test_nested_ensure_ready_during_apply_is_noop(self) -> None:
        self.recorder.on_enter = self.coordinator.ensure_ready
        self.coordinator.configure({})
        self.coordinator.ensure_ready()

        self.assertEqual(self.recorder.count("apply"), 1)
        self.assertEqual(self.recorder.count("enter"), 1)
        self.assertEqual(self.coordinator.state, INITIALIZED)

    def test_failed_apply_stays_pending_and_retries(self) -> None:
        self.coordinator.configure({})
        self.recorder.fail_apply = True
        with self.assertRaises(RuntimeError):
            self.coordinator.ensure_ready()
        self.assertEqual(self.coordinator.state, PENDING)

        self.recorder.fail_apply = False
        self.coordinator.ensure_ready()
        self.assertEqual(self.coordinator.state, INITIALIZED)
        self.assertEqual(self.coordinator.apply_count, 1)

    def test_unsupported_host_disables_setup(self) -> None:
        recorder = Recorder(version=(0, 7))
        coordinator = SetupCoordinator(recorder.deps())

        with self.assertLogs("lazyoutline.lifecycle", level="ERROR"):
            self.assertFalse(coordinator.configure({}))
        coordinator.ensure_ready()

        self.assertEqual(coordinator.state, UNINITIALIZED)
        self.assertEqual(recorder.calls, [])
        self.assertEqual(len(recorder.notices), 1)
        self.assertEqual(recorder.notices[0][0], ERROR)
        self.assertIn("0.8", recorder.notices[0][1])

    def test_reset_returns_to_uninitialized(self) -> None:
        self.coordinator.configure({})
        self.coordinator.ensure_ready()
        self.coordinator.reset()

        self.assertEqual(self.coordinator.state, UNINITIALIZED)
        self.assertEqual(self.coordinator.apply_count, 0)


class LazyWrapperTests(unittest.TestCase):
    def setUp(self) -> None:
        self.recorder = Recorder()
        self.coordinator = SetupCoordinator(self.recorder.deps())

    def test_wrapper_completes_setup_before_forwarding(self) -> None:
        seen_states: list[str] = []

        def target(a, b=0):
            seen_states.append(self.coordinator.state)
            return a + b

        wrapped = lazy(self.coordinator, target)
        self.coordinator.configure({})

        self.assertEqual(wrapped(2, b=3), 5)
        self.assertEqual(seen_states, [INITIALIZED])
        self.assertEqual(wrapped.__name__, "target")

    def test_wrapper_propagates_target_errors_unchanged(self) -> None:
        error = KeyError("missing")

        def target():
            raise error

        wrapped = lazy(self.coordinator, target)
        with self.assertRaises(KeyError) as ctx:
            wrapped()
        self.assertIs(ctx.exception, error)

    def test_wrapper_works_before_configure(self) -> None:
        wrapped = lazy(self.coordinator, lambda: "ok")
        self.assertEqual(wrapped(), "ok")
        self.assertEqual(self.coordinator.state, UNINITIALIZED)


if __name__ == "__main__":
    unittest.main()
