"""
Tests for the inclusion policy and attribute reading.
"""

import os
import stat
import unittest
from types import SimpleNamespace

from backup_ops import FileAttributes, PathFilter, attributes_from_stat, read_attributes
from backup_ops.path_filter import FILE_ATTRIBUTE_HIDDEN, FILE_ATTRIBUTE_SYSTEM

from .test_utils import TempDirTestCase

PLAIN = FileAttributes()


class TestPathFilterRules(unittest.TestCase):
    """Exclusion rules, first match wins."""

    def setUp(self):
        self.path_filter = PathFilter()

    def test_regular_file_is_included(self):
        self.assertTrue(self.path_filter.include("notes.txt", PLAIN))

    def test_dot_entries_are_excluded(self):
        self.assertFalse(self.path_filter.include(".", PLAIN))
        self.assertFalse(self.path_filter.include("..", PLAIN))

    def test_hidden_and_system_are_excluded(self):
        self.assertFalse(self.path_filter.include("a.txt", FileAttributes(hidden=True)))
        self.assertFalse(self.path_filter.include("a.txt", FileAttributes(system=True)))
        self.assertFalse(
            self.path_filter.include("dir", FileAttributes(hidden=True, is_directory=True))
        )

    def test_desktop_ini_is_excluded_case_insensitively(self):
        for name in ("desktop.ini", "Desktop.ini", "DESKTOP.INI"):
            self.assertFalse(self.path_filter.include(name, PLAIN), name)

    def test_similar_names_are_included(self):
        self.assertTrue(self.path_filter.include("desktop.ini.bak", PLAIN))
        self.assertTrue(self.path_filter.include("my desktop.ini", PLAIN))

    def test_custom_excluded_names_extend_the_defaults(self):
        path_filter = PathFilter(["Thumbs.db"])
        self.assertFalse(path_filter.include("thumbs.DB", PLAIN))
        self.assertFalse(path_filter.include("desktop.ini", PLAIN))
        self.assertTrue(path_filter.include("notes.txt", PLAIN))

    def test_empty_exclusion_list_keeps_desktop_ini_rule(self):
        self.assertFalse(PathFilter([]).include("Desktop.ini", PLAIN))


class TestAttributesFromStat(unittest.TestCase):
    """Attribute extraction across platforms."""

    def test_windows_attribute_bits(self):
        st = SimpleNamespace(
            st_mode=stat.S_IFREG | 0o644,
            st_file_attributes=FILE_ATTRIBUTE_HIDDEN | FILE_ATTRIBUTE_SYSTEM,
        )
        attributes = attributes_from_stat("pagefile.sys", st)
        self.assertTrue(attributes.hidden)
        self.assertTrue(attributes.system)
        self.assertFalse(attributes.is_directory)

    def test_windows_dot_name_is_not_hidden_without_attribute(self):
        st = SimpleNamespace(st_mode=stat.S_IFDIR | 0o755, st_file_attributes=0)
        attributes = attributes_from_stat(".config", st)
        self.assertFalse(attributes.hidden)
        self.assertTrue(attributes.is_directory)

    def test_posix_dot_files_are_hidden(self):
        st = SimpleNamespace(st_mode=stat.S_IFREG | 0o644)
        self.assertTrue(attributes_from_stat(".bashrc", st).hidden)
        self.assertFalse(attributes_from_stat("bashrc", st).hidden)
        self.assertFalse(attributes_from_stat("bashrc", st).system)


class TestReadAttributes(TempDirTestCase):
    """On-disk attribute queries."""

    def test_read_attributes_of_file_and_directory(self):
        file_path = self.make_file("a.txt")
        dir_path = self.make_dir("sub")

        self.assertFalse(read_attributes(file_path).is_directory)
        self.assertTrue(read_attributes(dir_path).is_directory)

    def test_missing_path_has_no_attributes(self):
        self.assertIsNone(read_attributes(self.path("missing.txt")))
        self.assertFalse(PathFilter().include_path(self.path("missing.txt")))

    def test_include_path_uses_current_name(self):
        self.assertTrue(PathFilter().include_path(self.make_file("ok.txt")))
        self.assertFalse(PathFilter().include_path(self.make_file("desktop.ini")))

    @unittest.skipIf(os.name == "nt", "dot-files are not hidden on Windows")
    def test_include_path_rejects_dot_file(self):
        self.assertFalse(PathFilter().include_path(self.make_file(".secret")))


if __name__ == "__main__":
    unittest.main()
