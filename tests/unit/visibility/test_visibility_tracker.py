from __future__ import annotations

import unittest

from lazyoutline.visibility import CLOSED, OPEN, UNKNOWN, VisibilityTracker


class VisibilityTrackerTests(unittest.TestCase):
    def test_untouched_returns_default(self) -> None:
        tracker = VisibilityTracker()
        self.assertEqual(tracker.state, UNKNOWN)
        self.assertIsNone(tracker.was_closed())
        self.assertTrue(tracker.was_closed(True))
        self.assertFalse(tracker.was_closed(False))

    def test_last_action_wins(self) -> None:
        tracker = VisibilityTracker()
        tracker.record_closed()
        self.assertTrue(tracker.was_closed(False))
        tracker.record_opened()
        self.assertFalse(tracker.was_closed(True))
        self.assertEqual(tracker.state, OPEN)

    def test_toggle_outcome(self) -> None:
        tracker = VisibilityTracker()
        tracker.record_toggled(False)
        self.assertEqual(tracker.state, CLOSED)
        tracker.record_toggled(True)
        self.assertFalse(tracker.was_closed())

    def test_reset(self) -> None:
        tracker = VisibilityTracker()
        tracker.record_closed()
        tracker.reset()
        self.assertEqual(tracker.was_closed("fallback"), "fallback")


if __name__ == "__main__":
    unittest.main()
