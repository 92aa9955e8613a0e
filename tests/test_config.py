import json
import os
import tempfile
import unittest
from unittest import mock

from huematch import config


class TestMergeAndSanitize(unittest.TestCase):

    def test_merge_is_deep(self):
        dst = {"display": {"fps": 60, "fullscreen": False}, "x": 1}
        config._merge(dst, {"display": {"fps": 120}, "y": 2})
        self.assertEqual(dst, {"display": {"fps": 120, "fullscreen": False}, "x": 1, "y": 2})

    def test_sanitize_clamps_values(self):
        cfg = {
            "display": {"fps": 5, "windowed_size": [50, 99999], "fullscreen": 1},
            "profile": {"username": "  ada ", "highest_score": "oops"},
            "logging": {"level": "chatty"},
            "storage": {"leaderboard": ""},
        }
        out = config._sanitize_cfg(cfg)
        self.assertEqual(out["display"]["fps"], 30)
        self.assertEqual(out["display"]["windowed_size"], [200, 10000])
        self.assertIs(out["display"]["fullscreen"], True)
        self.assertEqual(out["profile"], {"username": "ada", "highest_score": 0})
        self.assertEqual(out["logging"]["level"], "INFO")
        self.assertTrue(os.path.isabs(out["storage"]["leaderboard"]))
        self.assertTrue(out["storage"]["leaderboard"].endswith("leaderboard.json"))

    def test_leaderboard_defaults_to_user_data_dir(self):
        out = config._sanitize_cfg({"storage": {"leaderboard": "scores/board.json"}})
        path = out["storage"]["leaderboard"]
        self.assertEqual(path, str((config.DATA_DIR / "scores" / "board.json").resolve()))
        self.assertFalse(path.startswith(str(config.PKG_DIR)))

    def test_absolute_leaderboard_path_kept(self):
        target = os.path.join(tempfile.gettempdir(), "board.json")
        out = config._sanitize_cfg({"storage": {"leaderboard": target}})
        self.assertEqual(out["storage"]["leaderboard"], target)

    def test_sanitize_rejects_bad_window_size(self):
        out = config._sanitize_cfg({"display": {"windowed_size": "big"}})
        self.assertEqual(out["display"]["windowed_size"], [720, 1280])


class TestLoadSave(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.mkdtemp(prefix="huematch-cfg-")
        self.path = os.path.join(self.tmp, "config.json")
        patcher = mock.patch.object(config, "CONFIG_PATH", self.path)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_missing_file_writes_defaults(self):
        cfg = config.load_config()
        self.assertEqual(cfg["display"]["fps"], 60)
        self.assertTrue(os.path.exists(self.path))
        with open(self.path, encoding="utf-8") as f:
            on_disk = json.load(f)
        self.assertNotIn("config_path", on_disk)
        self.assertEqual(on_disk["profile"]["username"], "")

    def test_save_merges_partial(self):
        config.save_config({"display": {"fps": 90}})
        config.save_config({"profile": {"username": "ada", "highest_score": 300}})
        cfg = config.load_config()
        self.assertEqual(cfg["display"]["fps"], 90)
        self.assertEqual(cfg["profile"]["highest_score"], 300)
        self.assertEqual(cfg["config_path"], os.path.realpath(self.path))

    def test_unreadable_file_falls_back_to_defaults(self):
        with open(self.path, "w", encoding="utf-8") as f:
            f.write("{not json")
        cfg = config.load_config()
        self.assertEqual(cfg["logging"]["level"], "INFO")

    def test_persist_windowed_size(self):
        config.persist_windowed_size(800, 600)
        self.assertEqual(config.load_config()["display"]["windowed_size"], [800, 600])


if __name__ == "__main__":
    unittest.main()
