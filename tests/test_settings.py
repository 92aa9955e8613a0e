import unittest

from huematch.input_queue import InputQueue
from huematch.settings import clamp_settings, make_runtime_settings


class TestRuntimeSettings(unittest.TestCase):

    def test_snapshot_flattens_config(self):
        cfg = {
            "display": {"fullscreen": True, "fps": 75, "windowed_size": [800, 600]},
            "storage": {"leaderboard": "/tmp/board.json"},
            "logging": {"level": "DEBUG"},
        }
        s = make_runtime_settings(cfg)
        self.assertEqual(s["windowed_size"], (800, 600))
        self.assertEqual(s["leaderboard_path"], "/tmp/board.json")
        self.assertEqual(s["log_level"], "DEBUG")
        self.assertTrue(s["fullscreen"])

    def test_clamp(self):
        s = make_runtime_settings({"display": {"fps": 1000, "windowed_size": [10, 20000]}})
        clamp_settings(s)
        self.assertEqual(s["fps"], 240)
        self.assertEqual(s["windowed_size"], (200, 10000))
        self.assertFalse(s["fullscreen"])


class TestInputQueue(unittest.TestCase):

    def test_pop_all_drains_in_order(self):
        iq = InputQueue()
        iq.push("#112233")
        iq.push("#445566")
        self.assertEqual(len(iq), 2)
        self.assertEqual(iq.pop_all(), ["#112233", "#445566"])
        self.assertEqual(len(iq), 0)

    def test_clear(self):
        iq = InputQueue()
        iq.push("#112233")
        iq.clear()
        self.assertEqual(iq.pop_all(), [])


if __name__ == "__main__":
    unittest.main()
