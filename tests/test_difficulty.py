import unittest

from huematch.difficulty import (
    close_match_limit,
    difficulty,
    option_count,
    selection_time,
    similarity_threshold,
)


class TestOptionCount(unittest.TestCase):

    def test_range_and_monotonic(self):
        prev = 0
        for level in range(1, 301):
            n = option_count(level)
            self.assertGreaterEqual(n, 3)
            self.assertLessEqual(n, 10)
            self.assertGreaterEqual(n, prev)
            prev = n

    def test_steps_every_ten_levels(self):
        self.assertEqual(option_count(1), 3)
        self.assertEqual(option_count(9), 3)
        self.assertEqual(option_count(10), 4)
        self.assertEqual(option_count(45), 7)
        self.assertEqual(option_count(70), 10)
        self.assertEqual(option_count(500), 10)


class TestSimilarity(unittest.TestCase):

    def test_monotonic_and_capped(self):
        prev = 0.0
        for level in range(1, 401):
            s = similarity_threshold(level)
            self.assertGreaterEqual(s, prev)
            self.assertLessEqual(s, 0.99)
            prev = s

    def test_band_values(self):
        self.assertAlmostEqual(similarity_threshold(1), 0.71)
        self.assertAlmostEqual(similarity_threshold(10), 0.80)
        self.assertAlmostEqual(similarity_threshold(20), 0.85)
        self.assertAlmostEqual(similarity_threshold(30), 0.90)
        self.assertAlmostEqual(similarity_threshold(40), 0.93)
        self.assertAlmostEqual(similarity_threshold(50), 0.96)
        self.assertAlmostEqual(similarity_threshold(60), 0.965)
        self.assertAlmostEqual(similarity_threshold(1000), 0.99)


class TestSelectionTime(unittest.TestCase):

    def test_schedule(self):
        self.assertEqual(selection_time(1), 15)
        self.assertEqual(selection_time(10), 15)
        self.assertEqual(selection_time(14), 15)
        self.assertEqual(selection_time(15), 14)
        self.assertEqual(selection_time(40), 9)
        self.assertEqual(selection_time(75), 2)
        self.assertEqual(selection_time(80), 2)
        self.assertEqual(selection_time(81), 2)
        self.assertEqual(selection_time(999), 2)

    def test_never_increases(self):
        prev = 99
        for level in range(1, 200):
            t = selection_time(level)
            self.assertLessEqual(t, prev)
            self.assertGreaterEqual(t, 2)
            prev = t


class TestDifficulty(unittest.TestCase):

    def test_bundle(self):
        d = difficulty(12)
        self.assertEqual(d.option_count, 4)
        self.assertAlmostEqual(d.similarity_threshold, 0.81)
        self.assertEqual(d.view_time, 3)
        self.assertEqual(d.selection_time, 15)

    def test_close_match_limit(self):
        self.assertEqual(close_match_limit(1), 3)
        self.assertEqual(close_match_limit(50), 3)
        self.assertEqual(close_match_limit(51), 1)

    def test_rejects_non_positive_level(self):
        with self.assertRaises(ValueError):
            difficulty(0)
        with self.assertRaises(ValueError):
            option_count(-3)


if __name__ == "__main__":
    unittest.main()
