"""Entry snapshot and display-helper tests.

Covers binary-scaled size formatting, directory/mount size markers, permission
strings, and extension categories for names with and without extensions.
"""

from __future__ import annotations

import unittest
from datetime import datetime

from vfsview.entry import (
    CATEGORY_ICONS,
    Entry,
    FileCategory,
    classify_name,
    format_size,
    sort_entries,
)
from vfsview.storage.types import FileMode, Metadata

MTIME = datetime(2024, 3, 5, 14, 7, 9)


def _entry(name: str, *, size: int = 0, mode: FileMode | None = None) -> Entry:
    mode = mode if mode is not None else FileMode.file()
    return Entry.from_metadata(Metadata(key=name, size=size, mode=mode, modify_time=MTIME), "/docs")


class FormatSizeTests(unittest.TestCase):
    def test_small_sizes_render_in_bytes(self) -> None:
        self.assertEqual(format_size(0), "0 B")
        self.assertEqual(format_size(1023), "1023 B")

    def test_binary_scaling_uses_one_decimal(self) -> None:
        self.assertEqual(format_size(1024), "1.0 KB")
        self.assertEqual(format_size(1536), "1.5 KB")
        self.assertEqual(format_size(5 * 1024 * 1024), "5.0 MB")
        self.assertEqual(format_size(3 * 1024**3 + 512 * 1024**2), "3.5 GB")


class EntryDisplayTests(unittest.TestCase):
    def test_from_metadata_joins_parent_path(self) -> None:
        entry = _entry("notes.txt", size=12)
        self.assertEqual(entry.name, "notes.txt")
        self.assertEqual(entry.path, "/docs/notes.txt")
        self.assertFalse(entry.is_directory)
        self.assertEqual(entry.display_name, "notes.txt")
        self.assertEqual(entry.display_size, "12 B")

    def test_directory_shows_dir_marker_regardless_of_size(self) -> None:
        entry = _entry("sub", size=4096, mode=FileMode.directory())
        self.assertTrue(entry.is_directory)
        self.assertEqual(entry.display_size, "<DIR>")
        self.assertEqual(entry.display_name, "sub/")

    def test_mount_marker_wins_over_directory_marker(self) -> None:
        entry = _entry("ephemeral", mode=FileMode.mount())
        self.assertTrue(entry.is_directory)
        self.assertTrue(entry.is_mount)
        self.assertEqual(entry.display_size, "<MNT>")
        self.assertIs(entry.category, FileCategory.MOUNT)

    def test_permission_string_has_type_prefix(self) -> None:
        self.assertEqual(_entry("a.txt", mode=FileMode.file(0o644)).display_mode, "-rw-r--r--")
        self.assertEqual(_entry("d", mode=FileMode.directory(0o755)).display_mode, "drwxr-xr-x")
        self.assertEqual(_entry("m", mode=FileMode.mount(0o755)).display_mode, "mrwxr-xr-x")

    def test_modified_time_format(self) -> None:
        self.assertEqual(_entry("a.txt").display_modified, "2024-03-05 14:07:09")


class ClassificationTests(unittest.TestCase):
    def test_categories_by_lowercased_extension(self) -> None:
        self.assertIs(classify_name("README.MD"), FileCategory.TEXT)
        self.assertIs(classify_name("photo.JPG"), FileCategory.IMAGE)
        self.assertIs(classify_name("clip.mkv"), FileCategory.VIDEO)
        self.assertIs(classify_name("bundle.tar"), FileCategory.ARCHIVE)
        self.assertIs(classify_name("main.py"), FileCategory.CODE)
        self.assertIs(classify_name("data.unknownext"), FileCategory.DEFAULT)

    def test_names_without_extension_never_raise(self) -> None:
        for name in ("Makefile", ".bashrc", "", "trailing."):
            self.assertIs(classify_name(name), FileCategory.DEFAULT)

    def test_folder_icon_for_directories(self) -> None:
        entry = _entry("sub", mode=FileMode.directory())
        self.assertEqual(entry.icon, CATEGORY_ICONS[FileCategory.FOLDER])


class SortEntriesTests(unittest.TestCase):
    def test_directories_first_then_case_insensitive_names(self) -> None:
        entries = [
            _entry("b.txt"),
            _entry("Zed", mode=FileMode.directory()),
            _entry("A.txt"),
            _entry("alpha", mode=FileMode.directory()),
        ]
        self.assertEqual([e.name for e in sort_entries(entries)], ["alpha", "Zed", "A.txt", "b.txt"])


if __name__ == "__main__":
    unittest.main()
