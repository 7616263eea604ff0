"""Tests for the registry file store."""

from __future__ import annotations

import tempfile
import textwrap
import unittest
from pathlib import Path

from git_externals.exceptions import EmptyRegistry, NotFound, ValidationError
from git_externals.git import run_git
from git_externals.models import External
from git_externals.registry import RegistryStore


class RegistryStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.config_path = self.root / ".gitexternals"
        self.store = RegistryStore(self.config_path)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_missing_file_is_an_empty_registry(self) -> None:
        self.assertEqual(self.store.entries(), [])
        self.assertFalse(self.config_path.exists())
        with self.assertRaises(EmptyRegistry):
            self.store.list_externals()

    def test_put_persists_immediately(self) -> None:
        self.store.put(External(url="https://example.com/repo.git", path="libs/foo", branch="dev"))

        reread = RegistryStore(self.config_path)
        self.assertEqual(
            reread.get("libs/foo"),
            External(url="https://example.com/repo.git", path="libs/foo", branch="dev"),
        )
        self.assertIn('[external "libs/foo"]', self.config_path.read_text())

    def test_entries_are_sorted_by_name(self) -> None:
        for path in ("vendor/zeta", "libs/alpha", "libs/beta"):
            self.store.put(External(url=f"https://example.com/{path}.git", path=path, branch="main"))

        names = [external.name for external in self.store.list_externals()]
        self.assertEqual(names, ["libs/alpha", "libs/beta", "vendor/zeta"])

    def test_put_replaces_existing_record(self) -> None:
        self.store.put(External(url="https://one.example/repo.git", path="libs/foo", branch="b1"))
        self.store.put(External(url="https://two.example/repo.git", path="libs/foo", branch="b2"))

        externals = self.store.list_externals()
        self.assertEqual(externals, [External(url="https://two.example/repo.git", path="libs/foo", branch="b2")])
        self.assertEqual(self.config_path.read_text().count('[external "libs/foo"]'), 1)

    def test_put_rejects_records_without_url(self) -> None:
        with self.assertRaises(ValidationError):
            self.store.put(External(url="", path="libs/foo", branch="main"))
        self.assertFalse(self.config_path.exists())

    def test_get_unknown_name_raises(self) -> None:
        self.store.put(External(url="https://example.com/repo.git", path="libs/foo", branch="main"))
        with self.assertRaises(NotFound):
            self.store.get("libs/bar")
        self.assertFalse(self.store.exists("libs/bar"))
        self.assertTrue(self.store.exists("libs/foo"))

    def test_remove_is_idempotent(self) -> None:
        self.store.put(External(url="https://example.com/repo.git", path="libs/foo", branch="main"))

        self.assertTrue(self.store.remove("libs/foo"))
        snapshot = self.config_path.read_text()
        self.assertFalse(self.store.remove("libs/foo"))
        self.assertEqual(self.config_path.read_text(), snapshot)
        self.assertEqual(self.store.entries(), [])

    def test_reads_git_config_syntax(self) -> None:
        self.config_path.write_text(
            textwrap.dedent(
                """\
                # managed by git-externals
                [core]
                \tfoo = bar
                [external "libs/foo"]
                \turl = https://example.com/repo.git
                \tpath = libs/foo
                \tbranch = dev
                [external "libs/quoted"]
                \turl = "https://example.com/repo.git#v1"
                \tpath = libs/quoted
                """
            )
        )

        externals = self.store.list_externals()
        self.assertEqual(
            externals,
            [
                External(url="https://example.com/repo.git", path="libs/foo", branch="dev"),
                External(url="https://example.com/repo.git#v1", path="libs/quoted", branch="master"),
            ],
        )

    def test_rewrite_keeps_unrelated_sections(self) -> None:
        self.config_path.write_text("[core]\n\tfoo = bar\n")

        self.store.put(External(url="https://example.com/repo.git", path="libs/foo", branch="main"))

        text = self.config_path.read_text()
        self.assertIn("[core]", text)
        self.assertIn("foo = bar", text)

    def test_malformed_records_are_skipped(self) -> None:
        self.config_path.write_text('[external "libs/broken"]\n\tbranch = main\n')

        with self.assertLogs("git_externals.registry", level="WARNING"):
            self.assertEqual(self.store.entries(), [])

    def test_values_with_comment_characters_round_trip(self) -> None:
        external = External(url="https://example.com/repo.git#frag;x", path="libs/foo", branch="main")
        self.store.put(external)

        self.assertEqual(self.store.get("libs/foo"), external)

    def test_inline_comments_are_not_part_of_values(self) -> None:
        self.config_path.write_text('[external "libs/foo"]\n\turl = https://x/r.git # pinned\n')

        self.assertEqual(self.store.get("libs/foo").url, "https://x/r.git")

    def test_written_file_is_readable_by_git(self) -> None:
        url = r"\\server\share\repo"
        self.store.put(External(url=url, path="libs/foo", branch="main"))

        result = run_git(["config", "-f", str(self.config_path), "external.libs/foo.url"])
        self.assertEqual(result.stdout.rstrip("\n"), url)
        self.assertEqual(self.store.get("libs/foo").url, url)

    def test_rewrite_keeps_comments(self) -> None:
        self.config_path.write_text("# pinned externals\n[core]\n\tbare = false\n[external \"libs/a\"]\n\turl = https://example.com/a.git\n")

        self.store.put(External(url="https://example.com/b.git", path="libs/b", branch="main"))
        self.store.remove("libs/a")

        self.assertIn("# pinned externals", self.config_path.read_text())

    def test_section_names_are_normalized(self) -> None:
        self.config_path.write_text('[external "libs/foo/"]\n\turl = https://example.com/repo.git\n')

        self.assertEqual(
            self.store.list_externals(),
            [External(url="https://example.com/repo.git", path="libs/foo", branch="master")],
        )
        self.assertTrue(self.store.exists("libs/foo"))
        self.assertTrue(self.store.remove("libs/foo"))
        self.assertEqual(self.store.entries(), [])
        self.assertNotIn("external", self.config_path.read_text())

    def test_put_replaces_unnormalized_section(self) -> None:
        self.config_path.write_text('[external "libs/foo/"]\n\turl = https://one.example/repo.git\n')

        self.store.put(External(url="https://two.example/repo.git", path="libs/foo", branch="dev"))

        self.assertEqual(
            self.store.entries(),
            [External(url="https://two.example/repo.git", path="libs/foo", branch="dev")],
        )
        self.assertNotIn("libs/foo/", self.config_path.read_text())


if __name__ == "__main__":
    unittest.main()
