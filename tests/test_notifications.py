import unittest

from huematch.notifications import ToastManager

from tests.helpers import FakeClock


class TestToastManager(unittest.TestCase):

    def setUp(self):
        self.now = FakeClock()
        self.toasts = ToastManager(self.now, in_sec=0.5, hold_sec=1.0, out_sec=0.5)

    def test_phases(self):
        t = self.toasts.push("Color Selected!", "You earned 150 points!")
        self.now.advance(0.25)
        phase, k = self.toasts.phase(t)
        self.assertEqual(phase, "in")
        self.assertAlmostEqual(k, 0.5)
        self.now.advance(0.75)
        self.assertEqual(self.toasts.phase(t), ("hold", 1.0))
        self.now.advance(0.75)
        self.assertEqual(self.toasts.phase(t)[0], "out")

    def test_expired_toasts_are_pruned(self):
        self.toasts.push("a")
        self.now.advance(1.0)
        self.toasts.push("b")
        self.now.advance(1.5)
        self.assertEqual([t.title for t in self.toasts.active()], ["b"])

    def test_active_is_capped(self):
        for title in "abcde":
            self.toasts.push(title)
        self.assertEqual([t.title for t in self.toasts.active()], ["c", "d", "e"])

    def test_latest_by_kind(self):
        self.toasts.push("Error", "boom", kind="error")
        self.toasts.push("Perfect!", kind="feedback")
        self.assertEqual(self.toasts.latest().title, "Perfect!")
        self.assertEqual(self.toasts.latest("error").description, "boom")
        self.assertIsNone(self.toasts.latest("success"))
        self.toasts.clear()
        self.assertIsNone(self.toasts.latest())


if __name__ == "__main__":
    unittest.main()
