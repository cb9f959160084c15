import io
import os
import shutil
import sys
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest.mock import patch

import git

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
import main
from settings import Settings


class TestMain(unittest.TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()
        self.repo_path = os.path.join(self.tmp_dir, "repo")
        self.repo = git.Repo.init(self.repo_path)
        with self.repo.config_writer() as config:
            config.set_value("user", "name", "Test User")
            config.set_value("user", "email", "test@example.com")
        self.first = self.repo.index.commit("First")
        self.second = self.repo.index.commit("Second")

        self.settings = Settings(os.path.join(self.tmp_dir, "config"))
        patcher = patch.object(main, "settings", self.settings)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def test_prints_one_row_per_commit(self):
        out = io.StringIO()
        with redirect_stdout(out):
            self.assertEqual(main.main([self.repo_path]), 0)
        lines = out.getvalue().splitlines()
        self.assertEqual(len(lines), 2)
        self.assertTrue(lines[0].startswith(self.second.hexsha[:8]))
        self.assertIn("[0]", lines[0])
        self.assertTrue(lines[1].endswith("First"))
        self.assertEqual(self.settings.get_last_repository(), os.path.abspath(self.repo_path))

    def test_not_a_repository(self):
        self.assertEqual(main.main([self.tmp_dir]), 1)


if __name__ == "__main__":
    unittest.main()
