"""Unit tests for the diff engine."""

import pytest

from sprig.core.errors import UserError
from sprig.operations.diff import DiffEngine, DiffHunk, FileDiff, sequence_diff


class TestSequenceDiff:
    """Tests for the line-diff oracle."""

    def test_identical(self):
        assert sequence_diff(["a", "b"], ["a", "b"]) == []

    def test_replacement(self):
        assert sequence_diff(["a", "b", "c"], ["a", "x", "c"]) == [(1, 1, 1, 1)]

    def test_insertion(self):
        assert sequence_diff(["a"], ["a", "b"]) == [(1, 0, 1, 1)]

    def test_deletion(self):
        assert sequence_diff(["a", "b", "c"], ["a", "c"]) == [(1, 1, 1, 0)]

    def test_empty_sides(self):
        assert sequence_diff([], ["x", "y"]) == [(0, 0, 0, 2)]
        assert sequence_diff(["x", "y"], []) == [(0, 2, 0, 0)]

    def test_two_regions(self):
        old = ["1", "2", "3", "4", "5"]
        new = ["1", "two", "3", "4", "five"]
        assert sequence_diff(old, new) == [(1, 1, 1, 1), (4, 1, 4, 1)]


class TestHunkHeader:
    """Tests for hunk header formatting."""

    def test_single_lines_omit_counts(self):
        assert str(DiffHunk(1, 1, 1, 1)) == "@@ -2 +2 @@"

    def test_counts_shown_when_not_one(self):
        assert str(DiffHunk(0, 3, 0, 2)) == "@@ -1,3 +1,2 @@"

    def test_empty_side_not_incremented(self):
        assert str(DiffHunk(1, 0, 1, 1)) == "@@ -1,0 +2 @@"
        assert str(DiffHunk(0, 2, 0, 0)) == "@@ -1,2 +0,0 @@"


class TestFileDiff:
    """Tests for per-file diffs."""

    def test_modified_lines(self):
        diff = FileDiff("f.txt", b"one\ntwo\n", b"one\nTWO\n").compute_diff()

        assert len(diff.hunks) == 1
        assert diff.hunks[0].lines == ["-two", "+TWO"]
        assert not diff.is_new and not diff.is_deleted

    def test_new_file(self):
        diff = FileDiff("f.txt", None, b"x\n").compute_diff()

        assert diff.is_new
        assert str(diff.hunks[0]) == "@@ -0,0 +1 @@"
        assert diff.hunks[0].lines == ["+x"]

    def test_invalid_utf8_is_replaced(self):
        diff = FileDiff("bin", b"\xff\n", b"ok\n").compute_diff()
        assert diff.hunks[0].lines == ["-\ufffd", "+ok"]


class TestDiffEngine:
    """Tests for branch and working tree diffs."""

    def test_engine_is_cached(self, repo):
        assert isinstance(repo.diff, DiffEngine)
        assert repo.diff is repo.diff

    def test_clean_working_tree(self, repo, commit_files):
        commit_files("add", f_txt="one\n")
        assert repo.diff.diff_working() == []

    def test_working_tree_changes(self, repo, commit_files, write_file):
        commit_files("add", f_txt="one\ntwo\n", g_txt="gone\n", h_txt="same\n")
        write_file("f.txt", "one\nTWO\n")
        (repo.work_tree / "g.txt").unlink()
        write_file("untracked.txt", "ignored\n")

        diffs = repo.diff.diff_working()

        assert [d.path for d in diffs] == ["f.txt", "g.txt"]
        assert diffs[1].is_deleted
        assert repo.diff.format_diff(diffs, color=False) == "\n".join([
            "diff --git a/f.txt b/f.txt",
            "--- a/f.txt",
            "+++ b/f.txt",
            "@@ -2 +2 @@",
            "-two",
            "+TWO",
            "diff --git a/g.txt /dev/null",
            "--- a/g.txt",
            "+++ /dev/null",
            "@@ -1 +0,0 @@",
            "-gone",
        ])

    def test_other_branch_against_working_tree(self, repo, commit_files):
        commit_files("v1", f_txt="v1\n")
        repo.branch("old")
        commit_files("v2", f_txt="v2\n")

        diffs = repo.diff.diff_working("old")

        assert diffs[0].hunks[0].lines == ["-v1", "+v2"]

    def test_branches(self, repo, commit_files):
        commit_files("base", f_txt="f\n", g_txt="g\n")
        repo.branch("other")
        repo.checkout.checkout_branch("other")
        repo.rm("g.txt")
        commit_files("change", f_txt="f2\n", n_txt="new\n")

        diffs = repo.diff.diff_branches("master", "other")

        assert [d.path for d in diffs] == ["f.txt", "g.txt", "n.txt"]
        output = repo.diff.format_diff(diffs, color=False)
        assert "--- /dev/null\n+++ b/n.txt\n@@ -0,0 +1 @@\n+new" in output
        assert "diff --git /dev/null b/n.txt\n--- /dev/null" in output
        assert "diff --git a/g.txt /dev/null\n" in output
        assert "--- a/g.txt\n+++ /dev/null" in output

    def test_trailing_newline_only_change_is_skipped(self, repo, commit_files, write_file):
        commit_files("add", f_txt="one\n")
        write_file("f.txt", "one")

        assert repo.diff.diff_working() == []
        assert repo.diff.format_diff(repo.diff.diff_working(), color=False) == ""

    def test_unknown_branch(self, repo):
        with pytest.raises(UserError, match="A branch with that name does not exist."):
            repo.diff.diff_working("nope")

    def test_coloured_output(self, repo, commit_files, write_file):
        from colorama import Fore

        commit_files("add", f_txt="a\n")
        write_file("f.txt", "b\n")

        output = repo.diff.format_diff(repo.diff.diff_working(), color=True)

        assert f"{Fore.RED}-a" in output
        assert f"{Fore.GREEN}+b" in output
