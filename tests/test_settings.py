import json
import os
import shutil
import sys
import tempfile
import unittest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from settings import LANE_COLOR_PALETTE, Settings, lane_color


class TestSettings(unittest.TestCase):
    def setUp(self):
        self.config_dir = os.path.join(tempfile.mkdtemp(), "config")

    def tearDown(self):
        shutil.rmtree(os.path.dirname(self.config_dir))

    def test_defaults(self):
        settings = Settings(self.config_dir)
        self.assertFalse(settings.get_include_remotes())
        self.assertFalse(settings.get_include_tags())
        self.assertFalse(settings.get_trace_history())
        self.assertIsNone(settings.get_last_repository())
        # nothing is written until a setting changes
        self.assertFalse(os.path.exists(settings.config_file))

    def test_persisted_between_instances(self):
        settings = Settings(self.config_dir)
        settings.set_include_remotes(True)
        settings.set_trace_history(True)
        settings.add_recent_repository("/tmp/repo")

        reloaded = Settings(self.config_dir)
        self.assertTrue(reloaded.get_include_remotes())
        self.assertTrue(reloaded.get_trace_history())
        self.assertFalse(reloaded.get_include_tags())
        self.assertEqual(reloaded.get_last_repository(), "/tmp/repo")

    def test_recent_repositories_order_and_limit(self):
        settings = Settings(self.config_dir)
        for i in range(12):
            settings.add_recent_repository(f"/repo/{i}")
        settings.add_recent_repository("/repo/5")

        recent = settings.get_recent_repositories()
        self.assertEqual(len(recent), 10)
        self.assertEqual(recent[0], "/repo/5")
        self.assertEqual(recent.count("/repo/5"), 1)

    def test_corrupt_file_keeps_defaults(self):
        os.makedirs(self.config_dir)
        with open(os.path.join(self.config_dir, "settings.json"), "w", encoding="utf-8") as f:
            f.write("{not json")
        settings = Settings(self.config_dir)
        self.assertFalse(settings.get_include_tags())
        self.assertEqual(settings.get_recent_repositories(), [])

    def test_saved_file_is_json(self):
        settings = Settings(self.config_dir)
        settings.set_include_tags(True)
        with open(settings.config_file, encoding="utf-8") as f:
            self.assertTrue(json.load(f)["include_tags"])

    def test_config_dir_from_environment(self):
        os.environ["COMMIT_HISTORY_CONFIG_DIR"] = self.config_dir
        try:
            self.assertEqual(Settings().config_dir, self.config_dir)
        finally:
            del os.environ["COMMIT_HISTORY_CONFIG_DIR"]

    def test_lane_color_wraps_palette(self):
        self.assertEqual(lane_color(0), LANE_COLOR_PALETTE[0])
        self.assertEqual(lane_color(len(LANE_COLOR_PALETTE) + 2), LANE_COLOR_PALETTE[2])
        self.assertEqual(lane_color(3).name(), "#d62728")


if __name__ == "__main__":
    unittest.main()
