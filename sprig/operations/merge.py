"""Merge operations for Sprig."""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import List, Optional, Set

from sprig.core.errors import UserError
from sprig.core.objects import Commit
from sprig.operations.checkout import UNTRACKED_IN_THE_WAY

logger = logging.getLogger(__name__)

CONFLICT_START = b'<<<<<<< HEAD\n'
CONFLICT_SEP = b'=======\n'
CONFLICT_END = b'>>>>>>>\n'


@dataclass
class MergeResult:
    """Result of a merge operation."""
    commit_id: Optional[str]
    fast_forward: bool = False
    conflicts: List[str] = field(default_factory=list)
    message: str = ""

    def __repr__(self) -> str:
        """String representation."""
        if self.fast_forward:
            return "MergeResult(fast-forward)"
        return f"MergeResult({self.commit_id[:7]}, conflicts={len(self.conflicts)})"


class MergeEngine:
    """
    Handles merge operations for Sprig.

    Supports:
    - Split point finding (latest common ancestor)
    - Fast-forward merges
    - Three-way file merges with conflict markers
    """

    def __init__(self, repo):
        """
        Initialize merge engine.

        Args:
            repo: Repository instance
        """
        self.repo = repo

    def ancestors(self, commit_hash: str) -> Set[str]:
        """
        Get all ancestors of a commit, following both parents.

        Args:
            commit_hash: Starting commit hash

        Returns:
            Set of ancestor commit hashes (including the commit itself)
        """
        visited: Set[str] = set()
        to_visit = [commit_hash]

        while to_visit:
            current = to_visit.pop()
            if current in visited:
                continue
            visited.add(current)
            to_visit.extend(self.repo.read_commit(current).parents)

        return visited

    def find_split_point(self, current_hash: str, given_hash: str) -> str:
        """
        Find the split point of two commits.

        Walks back from CURRENT_HASH breadth first, first parent before
        second, and returns the first commit that is also an ancestor of
        GIVEN_HASH. Every history shares the initial commit, so a split point
        always exists.
        """
        given_ancestors = self.ancestors(given_hash)

        queue = deque([current_hash])
        seen = {current_hash}
        while queue:
            commit_hash = queue.popleft()
            if commit_hash in given_ancestors:
                logger.debug("Split point of %s and %s is %s",
                             current_hash[:7], given_hash[:7], commit_hash[:7])
                return commit_hash
            for parent in self.repo.read_commit(commit_hash).parents:
                if parent not in seen:
                    seen.add(parent)
                    queue.append(parent)

        raise AssertionError("Histories share no commit")

    def merge(self, branch_name: str) -> MergeResult:
        """
        Merge BRANCH_NAME into the current branch.

        Args:
            branch_name: Name of the branch to merge

        Returns:
            MergeResult describing what happened

        Raises:
            UserError: If the merge cannot be attempted
        """
        given_hash = self.repo.refs.read_branch(branch_name)
        if given_hash is None:
            raise UserError("A branch with that name does not exist.")
        if self.repo.has_staged_changes():
            raise UserError("You have uncommitted changes.")
        current_branch = self.repo.current_branch
        if branch_name == current_branch:
            raise UserError("Cannot merge a branch with itself.")

        current_hash = self.repo.head_id
        split_hash = self.find_split_point(current_hash, given_hash)

        if split_hash == given_hash:
            raise UserError("Given branch is an ancestor of the current branch.")

        if split_hash == current_hash:
            self.repo.checkout.materialize(given_hash)
            self.repo.clear_staging()
            self.repo.refs.write_branch(current_branch, given_hash)
            logger.info("Fast-forwarded %s to %s", current_branch, given_hash[:7])
            return MergeResult(given_hash, fast_forward=True,
                               message="Current branch fast-forwarded.")

        split = self.repo.read_commit(split_hash)
        current = self.repo.read_commit(current_hash)
        given = self.repo.read_commit(given_hash)

        self.check_untracked(split, given)
        self.merge_given(split, current, given)
        conflicts = self.merge_conflicts(split, current, given)

        message = f"Merged {branch_name} into {current_branch}."
        commit_id = self.repo.commit(message, merge_parent=given_hash)

        return MergeResult(
            commit_id,
            conflicts=conflicts,
            message="Encountered a merge conflict." if conflicts else message,
        )

    def check_untracked(self, split: Commit, given: Commit) -> None:
        """Refuse to merge if an untracked file would be touched."""
        for name in self.repo.untracked_files():
            if split.fingerprint(name) != given.fingerprint(name):
                raise UserError(UNTRACKED_IN_THE_WAY)

    def merge_given(self, split: Commit, current: Commit, given: Commit) -> None:
        """
        Take the given branch's side wherever only it changed a file.

        Files changed only in GIVEN are checked out and staged; files
        GIVEN deleted and CURRENT left alone are staged for removal.
        """
        for name, given_fp in sorted(given.files.items()):
            split_fp = split.fingerprint(name)
            if split_fp == current.fingerprint(name) and split_fp != given_fp:
                (self.repo.work_tree / name).write_bytes(self.repo.objects.get(given_fp))
                self.repo.add(name)
                logger.debug("Merge takes %s from given", name)

        for name, split_fp in sorted(split.files.items()):
            if split_fp == current.fingerprint(name) and not given.tracks(name):
                self.repo.rm(name)
                logger.debug("Merge removes %s", name)

    def merge_conflicts(self, split: Commit, current: Commit, given: Commit) -> List[str]:
        """
        Write conflict markers for files changed differently on both sides.

        Returns:
            Sorted names of the conflicted files, each staged for addition
        """
        conflicts = []
        for name in sorted(set(given.files) | set(current.files)):
            split_fp = split.fingerprint(name)
            current_fp = current.fingerprint(name)
            given_fp = given.fingerprint(name)
            if split_fp == current_fp or split_fp == given_fp or current_fp == given_fp:
                continue

            (self.repo.work_tree / name).write_bytes(
                self.conflict_content(current_fp, given_fp)
            )
            self.repo.add(name)
            conflicts.append(name)
            logger.debug("Merge conflict in %s", name)

        return conflicts

    def conflict_content(self, current_fp: Optional[str], given_fp: Optional[str]) -> bytes:
        """Build the conflict file from the two sides' contents."""
        content = bytearray(CONFLICT_START)
        if current_fp is not None:
            content.extend(self.repo.objects.get(current_fp))
        content.extend(CONFLICT_SEP)
        if given_fp is not None:
            content.extend(self.repo.objects.get(given_fp))
        content.extend(CONFLICT_END)
        return bytes(content)
