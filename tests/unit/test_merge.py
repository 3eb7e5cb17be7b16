"""Unit tests for merge operations."""

import pytest

from sprig.core.errors import UserError
from sprig.operations.checkout import UNTRACKED_IN_THE_WAY
from sprig.operations.merge import MergeEngine, MergeResult


@pytest.fixture
def diverged(repo, commit_files):
    """
    master and other diverge from a common base commit.

    Returns a callable taking the file changes for each side.
    """
    def _diverge(base, ours, theirs):
        base_hash = commit_files("base", **base)
        repo.branch("other")
        if ours:
            commit_files("ours", **ours)
        repo.checkout.checkout_branch("other")
        if theirs:
            commit_files("theirs", **theirs)
        repo.checkout.checkout_branch("master")
        return base_hash
    return _diverge


def test_merge_engine_initialization(repo):
    engine = repo.merge
    assert isinstance(engine, MergeEngine)
    assert engine.repo is repo


class TestSplitPoint:
    """Tests for finding the split point."""

    def test_ancestors_include_commit(self, repo_with_commits):
        repo = repo_with_commits
        assert repo.merge.ancestors(repo.head_id) == set(repo.commit_index)

    def test_split_of_diverged_branches(self, repo, diverged):
        base = diverged({"a_txt": "a"}, {"b_txt": "b"}, {"c_txt": "c"})

        split = repo.merge.find_split_point(repo.head_id, repo.refs.read_branch("other"))

        assert split == base

    def test_split_of_ancestor(self, repo_with_commits):
        repo = repo_with_commits
        head = repo.head_id
        parent = repo.head_commit().parent1

        assert repo.merge.find_split_point(head, parent) == parent
        assert repo.merge.find_split_point(parent, head) == parent

    def test_split_after_previous_merge(self, repo, diverged, commit_files):
        diverged({"a_txt": "a"}, {"b_txt": "b"}, {"c_txt": "c"})
        repo.merge.merge("other")
        other_head = repo.refs.read_branch("other")

        repo.checkout.checkout_branch("other")
        commit_files("more", d_txt="d")
        repo.checkout.checkout_branch("master")

        split = repo.merge.find_split_point(repo.head_id, repo.refs.read_branch("other"))
        assert split == other_head


class TestPreconditions:
    """Merges that are refused before anything changes."""

    def test_missing_branch(self, repo, write_file):
        write_file("a.txt", "a")
        repo.add("a.txt")
        with pytest.raises(UserError, match="A branch with that name does not exist."):
            repo.merge.merge("nope")

    def test_uncommitted_changes(self, repo, write_file):
        repo.branch("other")
        write_file("a.txt", "a")
        repo.add("a.txt")
        with pytest.raises(UserError, match="You have uncommitted changes."):
            repo.merge.merge("other")

    def test_merge_with_itself(self, repo):
        with pytest.raises(UserError, match="Cannot merge a branch with itself."):
            repo.merge.merge("master")

    def test_given_is_ancestor(self, repo, commit_files):
        repo.branch("other")
        head = commit_files("ahead", a_txt="a")
        index_before = dict(repo.commit_index)

        with pytest.raises(UserError, match="Given branch is an ancestor of the current branch."):
            repo.merge.merge("other")

        assert repo.head_id == head
        assert repo.commit_index == index_before

    def test_untracked_file_in_the_way(self, repo, diverged, write_file):
        diverged({"a_txt": "a"}, {"a_txt": "a2"}, {"new_txt": "theirs"})
        write_file("new.txt", "local")

        with pytest.raises(UserError) as exc_info:
            repo.merge.merge("other")

        assert exc_info.value.message == UNTRACKED_IN_THE_WAY
        assert (repo.work_tree / "new.txt").read_text() == "local"
        assert len(repo.add_stage) == 0


class TestFastForward:
    """Tests for fast-forward merges."""

    def test_fast_forward(self, repo, commit_files):
        repo.branch("other")
        repo.checkout.checkout_branch("other")
        given = commit_files("on other", x_txt="x")
        repo.checkout.checkout_branch("master")
        commits_before = len(repo.commit_index)

        result = repo.merge.merge("other")

        assert isinstance(result, MergeResult)
        assert result.fast_forward
        assert result.message == "Current branch fast-forwarded."
        assert result.commit_id == given
        assert repo.head_id == given
        assert repo.current_branch == "master"
        assert len(repo.commit_index) == commits_before
        assert (repo.work_tree / "x.txt").read_text() == "x"


class TestThreeWay:
    """Tests for merges that create a merge commit."""

    def test_clean_merge_of_disjoint_changes(self, repo, diverged):
        diverged({"a_txt": "a", "b_txt": "b"}, {"a_txt": "a2"}, {"b_txt": "b2"})
        current = repo.head_id
        given = repo.refs.read_branch("other")

        result = repo.merge.merge("other")

        assert not result.fast_forward
        assert result.conflicts == []
        assert result.message == "Merged other into master."
        merge = repo.read_commit(result.commit_id)
        assert merge.parents == [current, given]
        assert merge.message == "Merged other into master."
        assert (repo.work_tree / "a.txt").read_text() == "a2"
        assert (repo.work_tree / "b.txt").read_text() == "b2"
        assert repo.objects.get(merge.fingerprint("b.txt")) == b"b2"

    def test_file_added_on_given(self, repo, diverged):
        diverged({"a_txt": "a"}, {"a_txt": "a2"}, {"c_txt": "c"})

        result = repo.merge.merge("other")

        assert repo.read_commit(result.commit_id).tracks("c.txt")
        assert (repo.work_tree / "c.txt").read_text() == "c"

    def test_file_removed_on_given(self, repo, diverged):
        diverged({"a_txt": "a", "b_txt": "b"}, {"a_txt": "a2"}, None)
        repo.checkout.checkout_branch("other")
        repo.rm("b.txt")
        repo.commit("drop b")
        repo.checkout.checkout_branch("master")

        result = repo.merge.merge("other")

        assert not repo.read_commit(result.commit_id).tracks("b.txt")
        assert not (repo.work_tree / "b.txt").exists()

    def test_change_only_on_current_is_kept(self, repo, diverged):
        diverged({"a_txt": "a", "b_txt": "b"}, {"a_txt": "a2"}, {"b_txt": "b2"})

        result = repo.merge.merge("other")

        merge = repo.read_commit(result.commit_id)
        assert repo.objects.get(merge.fingerprint("a.txt")) == b"a2"

    def test_conflict(self, repo, diverged):
        diverged({"f_txt": "base\n"}, {"f_txt": "master\n"}, {"f_txt": "other\n"})

        result = repo.merge.merge("other")

        expected = b"<<<<<<< HEAD\nmaster\n=======\nother\n>>>>>>>\n"
        assert result.conflicts == ["f.txt"]
        assert result.message == "Encountered a merge conflict."
        assert (repo.work_tree / "f.txt").read_bytes() == expected
        merge = repo.read_commit(result.commit_id)
        assert merge.is_merge
        assert repo.objects.get(merge.fingerprint("f.txt")) == expected

    def test_conflict_with_deletion(self, repo, diverged):
        diverged({"f_txt": "base\n", "g_txt": "g"}, {"g_txt": "g2"}, {"f_txt": "other\n"})
        repo.rm("f.txt")
        repo.commit("drop f")

        result = repo.merge.merge("other")

        assert result.conflicts == ["f.txt"]
        assert (repo.work_tree / "f.txt").read_bytes() == (
            b"<<<<<<< HEAD\n=======\nother\n>>>>>>>\n"
        )

    def test_conflict_content_kept_raw(self, repo, diverged):
        diverged({"f_txt": "base"}, {"f_txt": "no newline"}, {"f_txt": "theirs"})

        repo.merge.merge("other")

        assert (repo.work_tree / "f.txt").read_bytes() == (
            b"<<<<<<< HEAD\nno newline=======\ntheirs>>>>>>>\n"
        )

    def test_same_change_on_both_sides_is_not_a_conflict(self, repo, diverged):
        diverged({"f_txt": "base", "h_txt": "h"}, {"f_txt": "same"},
                 {"f_txt": "same", "h_txt": "h2"})

        result = repo.merge.merge("other")

        assert result.conflicts == []
        assert (repo.work_tree / "f.txt").read_text() == "same"
        assert (repo.work_tree / "h.txt").read_text() == "h2"

    def test_nothing_to_merge(self, repo, diverged):
        diverged({"f_txt": "base", "g_txt": "g"}, {"f_txt": "same", "g_txt": "g2"},
                 {"f_txt": "same"})

        with pytest.raises(UserError, match="No changes added to the commit."):
            repo.merge.merge("other")
