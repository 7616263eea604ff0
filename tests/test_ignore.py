"""Tests for ignore-file maintenance."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from git_externals.ignore import IgnoreList


class IgnoreListTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.ignore_path = Path(self._tmp.name) / ".gitignore"
        self.ignore = IgnoreList(self.ignore_path)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_append_creates_file(self) -> None:
        self.assertTrue(self.ignore.append("libs/foo"))
        self.assertEqual(self.ignore_path.read_text(), "libs/foo\n")

    def test_append_adds_missing_trailing_newline(self) -> None:
        self.ignore_path.write_text("*.pyc")
        self.ignore.append("libs/foo")
        self.assertEqual(self.ignore_path.read_text(), "*.pyc\nlibs/foo\n")

    def test_append_does_not_duplicate(self) -> None:
        self.ignore.append("libs/foo")
        self.assertFalse(self.ignore.append("libs/foo"))
        self.assertEqual(self.ignore_path.read_text(), "libs/foo\n")

    def test_remove_only_drops_exact_lines(self) -> None:
        self.ignore_path.write_text("libs/foo\nlibs/foobar\n/libs/foo\n# libs/foo\nlibs/foo\n")

        self.assertTrue(self.ignore.remove("libs/foo"))

        self.assertEqual(self.ignore_path.read_text(), "libs/foobar\n/libs/foo\n# libs/foo\n")
        self.assertFalse(self.ignore.contains("libs/foo"))
        self.assertTrue(self.ignore.contains("libs/foobar"))

    def test_remove_missing_entry_leaves_file_untouched(self) -> None:
        self.ignore_path.write_text("build/\n")
        self.assertFalse(self.ignore.remove("libs/foo"))
        self.assertEqual(self.ignore_path.read_text(), "build/\n")

    def test_remove_without_file_is_a_no_op(self) -> None:
        self.assertFalse(self.ignore.remove("libs/foo"))
        self.assertFalse(self.ignore_path.exists())


if __name__ == "__main__":
    unittest.main()
