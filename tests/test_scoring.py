import unittest

from huematch.models import EndReason
from huematch.scoring import (
    close_tolerance,
    evaluate_pick,
    next_combo,
    next_performance_rating,
    points_for,
    points_summary,
    round_half_up,
)


def const_distance(value):
    return lambda a, b: value


def pick(difference, *, level=1, close_matches=0, combo=1.0, time_left=15, selection_time=15):
    return evaluate_pick(
        "#112233",
        "#445566",
        time_left=time_left,
        selection_time=selection_time,
        level=level,
        close_matches=close_matches,
        combo_multiplier=combo,
        distance=const_distance(difference),
    )


class TestExactPick(unittest.TestCase):

    def test_level_one_full_time(self):
        v = evaluate_pick(
            "#112233", "#112233",
            time_left=15, selection_time=15, level=1,
            close_matches=0, combo_multiplier=1.0,
        )
        self.assertTrue(v.is_exact_match)
        self.assertFalse(v.terminal)
        self.assertEqual(v.accuracy_points, 100)
        self.assertEqual(v.speed_points, 50)
        self.assertEqual(v.total_points, 150)
        self.assertEqual(v.new_combo_multiplier, 1.5)
        self.assertEqual(v.message, "Perfect! 1.5x Combo!")

    def test_combo_grows_and_caps(self):
        combo = 1.0
        for _ in range(20):
            v = pick(0.0, combo=combo)
            self.assertLessEqual(v.new_combo_multiplier, 5.0)
            combo = v.new_combo_multiplier
        self.assertEqual(combo, 5.0)

    def test_exact_leaves_close_matches(self):
        v = pick(0.0, close_matches=2)
        self.assertEqual(v.new_close_matches, 2)

    def test_points_use_combo_in_effect(self):
        v = pick(0.0, combo=2.0, time_left=0)
        self.assertEqual(v.total_points, 200)
        self.assertEqual(v.new_combo_multiplier, 2.5)


class TestClosePick(unittest.TestCase):

    def test_within_tolerance_is_close(self):
        tol = close_tolerance(1)
        self.assertAlmostEqual(tol, 7.25)
        v = pick(tol - 0.1)
        self.assertTrue(v.is_close_match)
        self.assertFalse(v.is_exact_match)
        self.assertFalse(v.terminal)
        self.assertEqual(v.new_close_matches, 1)
        self.assertEqual(v.new_combo_multiplier, 1.0)
        self.assertEqual(v.message, "Close enough!")

    def test_tolerance_shrinks_with_level(self):
        prev = float("inf")
        for level in range(1, 120):
            tol = close_tolerance(level)
            self.assertLessEqual(tol, prev)
            prev = tol

    def test_limit_three_early(self):
        self.assertFalse(pick(3.0, close_matches=2).terminal)
        v = pick(3.0, close_matches=3)
        self.assertTrue(v.terminal)
        self.assertEqual(v.reason, EndReason.CLOSE_MATCHES.value)
        self.assertEqual(v.new_close_matches, 4)

    def test_limit_one_late(self):
        self.assertFalse(pick(0.7, level=51, close_matches=0).terminal)
        self.assertTrue(pick(0.7, level=51, close_matches=1).terminal)

    def test_block_start_resets_counter(self):
        v = pick(3.0, level=10, close_matches=3)
        self.assertFalse(v.terminal)
        self.assertEqual(v.new_close_matches, 1)
        self.assertEqual(pick(0.0, level=20, close_matches=3).new_close_matches, 0)

    def test_no_reset_mid_block(self):
        self.assertTrue(pick(2.0, level=11, close_matches=3).terminal)


class TestWrongPick(unittest.TestCase):

    def test_outside_tolerance_ends_run(self):
        v = pick(40.0, combo=3.0)
        self.assertTrue(v.terminal)
        self.assertEqual(v.reason, EndReason.MISMATCH.value)
        self.assertEqual(v.message, "Game Over! Color mismatch.")
        self.assertEqual(v.new_combo_multiplier, 1.0)
        self.assertEqual(v.accuracy_points, 0)

    def test_wrong_does_not_count_as_close(self):
        v = pick(40.0, close_matches=1)
        self.assertFalse(v.is_close_match)
        self.assertEqual(v.new_close_matches, 1)


class TestPoints(unittest.TestCase):

    def test_half_up(self):
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(0.5), 1)
        self.assertEqual(round_half_up(1.49), 1)

    def test_accuracy_and_speed(self):
        self.assertEqual(points_for(0.05, 7, 14, 1.0), (50, 25, 75))
        self.assertEqual(points_for(0.2, 0, 15, 1.0), (0, 0, 0))
        self.assertEqual(points_for(0.0, 3, 15, 1.5), (100, 10, 165))

    def test_exact_but_not_identical_earns_no_accuracy(self):
        v = pick(0.3)
        self.assertTrue(v.is_exact_match)
        self.assertEqual(v.accuracy_points, 0)
        self.assertEqual(v.speed_points, 50)
        self.assertEqual(v.total_points, 50)
        self.assertEqual(v.new_combo_multiplier, 1.5)

    def test_summary(self):
        v = pick(0.0, combo=1.5)
        self.assertEqual(
            points_summary(v),
            "You earned 225 points! (Accuracy: 100, Speed: 50, Combo: 2.0x)",
        )
        plain = pick(3.0)
        self.assertNotIn("Combo", points_summary(plain))


class TestHelpers(unittest.TestCase):

    def test_next_combo(self):
        self.assertEqual(next_combo(4.5, True), 5.0)
        self.assertEqual(next_combo(5.0, True), 5.0)
        self.assertEqual(next_combo(3.5, False), 1.0)

    def test_performance_rating_bounds(self):
        r = 1.0
        for _ in range(50):
            r = next_performance_rating(r, True)
        self.assertEqual(r, 1.1)
        for _ in range(50):
            r = next_performance_rating(r, False)
        self.assertEqual(r, 0.9)


if __name__ == "__main__":
    unittest.main()
