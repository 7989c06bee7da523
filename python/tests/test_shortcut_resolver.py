"""
Tests for shortcut discovery, resolution and display-name derivation.
"""

import os
import unittest

from backup_ops import (
    ShortcutResolutionError,
    ShortcutResolver,
    ShortcutTarget,
    SymlinkShortcutService,
    derive_display_name,
)

from .test_utils import FakeShortcutService, TempDirTestCase

needs_symlinks = unittest.skipUnless(
    hasattr(os, "symlink") and os.name != "nt", "needs POSIX symlinks"
)


class TestDisplayName(unittest.TestCase):
    """Display name derivation from shortcut file names."""

    def test_localized_suffix_is_stripped(self):
        self.assertEqual(derive_display_name("Photos - Shortcut.lnk"), "Photos")

    def test_cyrillic_suffix_is_stripped(self):
        self.assertEqual(derive_display_name("Документы - Ярлык.lnk"), "Документы")

    def test_plain_name_keeps_stem(self):
        self.assertEqual(derive_display_name("Music.lnk"), "Music")

    def test_only_final_extension_is_removed(self):
        self.assertEqual(derive_display_name("backup.v2.lnk"), "backup.v2")

    def test_name_without_extension(self):
        self.assertEqual(derive_display_name("Projects"), "Projects")

    def test_directory_part_is_ignored(self):
        self.assertEqual(
            derive_display_name(os.path.join("links", "Work - Shortcut.lnk")), "Work"
        )

    def test_suffix_only_name_is_not_emptied(self):
        self.assertEqual(derive_display_name(" - Shortcut.lnk"), " - Shortcut")

    def test_suffix_in_middle_is_kept(self):
        self.assertEqual(
            derive_display_name("A - Shortcut copy.lnk"), "A - Shortcut copy"
        )

    def test_custom_suffix_list(self):
        self.assertEqual(
            derive_display_name("Photos - Verknüpfung.lnk", [" - Verknüpfung"]),
            "Photos",
        )
        self.assertEqual(
            derive_display_name("Photos - Shortcut.lnk", []), "Photos - Shortcut"
        )


class TestShortcutResolver(TempDirTestCase):
    """Resolution through a shortcut service."""

    def setUp(self):
        super().setUp()
        self.source = self.make_dir("links")
        self.service = FakeShortcutService()
        self.resolver = ShortcutResolver(self.service)

    def test_resolve_returns_target_and_display_name(self):
        target_dir = self.make_dir("data/photos")
        link = os.path.join(self.source, "Photos - Shortcut.lnk")
        self.service.add(link, target_dir)

        target = self.resolver.resolve(link)

        self.assertEqual(
            target,
            ShortcutTarget(display_name="Photos", target_dir=target_dir, link_path=link),
        )

    def test_service_failure_is_a_resolution_failure(self):
        link = os.path.join(self.source, "Broken.lnk")
        self.service.add(link, OSError("malformed"))

        with self.assertRaises(ShortcutResolutionError) as ctx:
            self.resolver.resolve(link)
        self.assertEqual(ctx.exception.link_path, link)

    def test_missing_target_is_a_resolution_failure(self):
        link = os.path.join(self.source, "Gone.lnk")
        self.service.add(link, self.path("data", "gone"))

        with self.assertRaises(ShortcutResolutionError):
            self.resolver.resolve(link)

    def test_file_target_is_a_resolution_failure(self):
        link = os.path.join(self.source, "File.lnk")
        self.service.add(link, self.make_file("data/file.txt"))

        with self.assertRaises(ShortcutResolutionError):
            self.resolver.resolve(link)

    def test_find_shortcuts_lists_only_shortcuts_sorted(self):
        target_dir = self.make_dir("data/x")
        for name in ("b.lnk", "A.LNK", "c.lnk"):
            self.service.add(os.path.join(self.source, name), target_dir)
        self.make_file("links/readme.txt")
        self.make_dir("links/folder.lnk")

        found = self.resolver.find_shortcuts(self.source)

        self.assertEqual(
            [os.path.basename(p) for p in found], ["A.LNK", "b.lnk", "c.lnk"]
        )

    def test_find_shortcuts_in_missing_folder(self):
        self.assertEqual(self.resolver.find_shortcuts(self.path("nope")), [])

    def test_configured_suffixes_are_used(self):
        resolver = ShortcutResolver(self.service, suffixes=[" (link)"])
        self.assertEqual(resolver.display_name("Music (link).lnk"), "Music")
        self.assertEqual(
            resolver.display_name("Music - Shortcut.lnk"), "Music - Shortcut"
        )


@needs_symlinks
class TestSymlinkShortcutService(TempDirTestCase):
    """Symbolic links as the POSIX shortcut mechanism."""

    def setUp(self):
        super().setUp()
        self.source = self.make_dir("links")
        self.resolver = ShortcutResolver(SymlinkShortcutService())

    def test_symlink_to_directory_resolves(self):
        target_dir = self.make_dir("data/music")
        link = os.path.join(self.source, "Music - Shortcut")
        os.symlink(target_dir, link)

        target = self.resolver.resolve(link)

        self.assertEqual(target.display_name, "Music")
        self.assertEqual(target.target_dir, os.path.realpath(target_dir))

    def test_regular_files_are_not_shortcuts(self):
        self.make_file("links/notes.txt")
        os.symlink(self.make_dir("data/a"), os.path.join(self.source, "A"))

        found = self.resolver.find_shortcuts(self.source)

        self.assertEqual([os.path.basename(p) for p in found], ["A"])

    def test_dangling_symlink_fails_to_resolve(self):
        link = os.path.join(self.source, "Dangling")
        os.symlink(self.path("data", "missing"), link)

        with self.assertRaises(ShortcutResolutionError):
            self.resolver.resolve(link)

    def test_non_link_fails_to_resolve(self):
        with self.assertRaises(ShortcutResolutionError):
            SymlinkShortcutService().resolve(self.make_file("links/plain.txt"))


if __name__ == "__main__":
    unittest.main()
