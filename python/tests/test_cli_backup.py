"""
Integration tests for the backup command line.
"""

import io
import json
import os
import unittest
from unittest.mock import patch

from cli_backup import BackupCLI
from backup_ops.archive_creators import ZSTD_AVAILABLE

from .test_utils import FakeShortcutService, TempDirTestCase


class TestBackupCLI(TempDirTestCase):
    """End-to-end runs through BackupCLI.run()."""

    def setUp(self):
        super().setUp()
        self.cli = BackupCLI()
        self.source = self.make_dir("links")
        self.service = FakeShortcutService()
        self.stdout = io.StringIO()

        patches = [
            patch(
                "backup_ops.shortcut_resolver.default_shortcut_service",
                return_value=self.service,
            ),
            patch("sys.stdout", self.stdout),
            patch.dict(os.environ, {"BACKUP_SETTINGS": ""}),
        ]
        for p in patches:
            p.start()
            self.addCleanup(p.stop)

    def add_shortcut(self, link_name, target_rel, files):
        target_dir = self.make_dir(target_rel)
        for rel in files:
            self.make_file(f"{target_rel}/{rel}")
        self.service.add(os.path.join(self.source, link_name), target_dir)

    def test_single_archive_mode(self):
        self.add_shortcut("A - Shortcut.lnk", "dirA", ["x.txt"])
        self.add_shortcut("B.lnk", "dirB", ["y.txt"])
        output = self.path("all.zip")

        result = self.cli.run([self.source, output])

        self.assertEqual(result, 0)
        self.assertEqual(self.zip_names(output), ["A/x.txt", "B/y.txt"])
        self.assertIn(f"Done: 2 items -> {output}", self.stdout.getvalue())

    def test_split_mode(self):
        self.add_shortcut("A.lnk", "dirA", ["x.txt"])
        self.add_shortcut("B.lnk", "dirB", ["y.txt"])
        output_dir = self.path("out")

        result = self.cli.run(["--split", self.source, output_dir])

        self.assertEqual(result, 0)
        self.assertEqual(sorted(os.listdir(output_dir)), ["A.zip", "B.zip"])
        self.assertEqual(self.zip_names(os.path.join(output_dir, "A.zip")), ["x.txt"])

    def test_zero_shortcuts_fails_without_output(self):
        output = self.path("all.zip")

        result = self.cli.run([self.source, output])

        self.assertEqual(result, 1)
        self.assertFalse(os.path.exists(output))

    def test_split_without_shortcuts_fails(self):
        result = self.cli.run(["--split", self.source, self.path("out")])
        self.assertEqual(result, 1)

    def test_unwritable_output_fails(self):
        self.add_shortcut("A.lnk", "dirA", ["x.txt"])

        result = self.cli.run([self.source, self.path("missing", "all.zip")])

        self.assertEqual(result, 1)

    def test_usage_errors_return_one(self):
        with patch("sys.stderr", io.StringIO()):
            self.assertEqual(self.cli.run([]), 1)
            self.assertEqual(self.cli.run([self.source]), 1)
            self.assertEqual(self.cli.run(["--split", self.source]), 1)
            self.assertEqual(self.cli.run(["--format", "rar", self.source, "x"]), 1)

    def test_help_returns_zero(self):
        self.assertEqual(self.cli.run(["--help"]), 0)

    def test_quiet_suppresses_progress_line(self):
        self.add_shortcut("A.lnk", "dirA", ["x.txt"])
        output = self.path("all.zip")

        self.cli.run(["--quiet", self.source, output])

        self.assertNotIn("[  0%]", self.stdout.getvalue())
        self.assertIn("Done: 1 items", self.stdout.getvalue())

    def test_settings_file_configures_suffixes(self):
        self.add_shortcut("Photos (link).lnk", "photos", ["p.jpg"])
        settings_path = self.path("settings.json")
        with open(settings_path, "w", encoding="utf-8") as f:
            json.dump({"shortcut_suffixes": [" (link)"]}, f)
        output_dir = self.path("out")

        result = self.cli.run(["--split", "--settings", settings_path, self.source, output_dir])

        self.assertEqual(result, 0)
        self.assertEqual(os.listdir(output_dir), ["Photos.zip"])

    def test_out_of_range_level_fails_without_output(self):
        self.add_shortcut("A.lnk", "dirA", ["x.txt"])
        output_dir = self.path("out")

        with patch("cli_backup.logger") as mock_logger:
            result = self.cli.run(["--split", "--level", "20", self.source, output_dir])

        self.assertEqual(result, 1)
        self.assertFalse(os.path.exists(output_dir))
        mock_logger.failure.assert_called_once()
        mock_logger.success.assert_not_called()

    def test_keyboard_interrupt(self):
        with patch(
            "cli_backup.BackupOrchestrator.run_single", side_effect=KeyboardInterrupt
        ):
            result = self.cli.run([self.source, self.path("all.zip")])

        self.assertEqual(result, 130)

    @unittest.skipUnless(ZSTD_AVAILABLE, "zstandard not installed")
    def test_zstd_split_archives(self):
        self.add_shortcut("A.lnk", "dirA", ["x.txt"])
        output_dir = self.path("out")

        result = self.cli.run(["--split", "--format", "zstd", self.source, output_dir])

        self.assertEqual(result, 0)
        self.assertEqual(os.listdir(output_dir), ["A.zst"])


if __name__ == "__main__":
    unittest.main()
