"""Checkout and reset operations for Sprig."""

import logging
from typing import Optional

from sprig.core.errors import UserError
from sprig.core.objects import Commit

logger = logging.getLogger(__name__)

UNTRACKED_IN_THE_WAY = (
    "There is an untracked file in the way; delete it, or add and commit it first."
)


class CheckoutEngine:
    """
    Writes committed snapshots back into the working tree.

    Supports:
    - Restoring a single file from HEAD or any commit
    - Switching branches
    - Resetting the working tree and a branch head to an arbitrary commit
    """

    def __init__(self, repo):
        """
        Initialize checkout engine.

        Args:
            repo: Repository instance
        """
        self.repo = repo

    def checkout_file(self, commit_id: Optional[str], name: str) -> None:
        """
        Overwrite the working copy of NAME with its version in a commit.

        Args:
            commit_id: Full or abbreviated commit id, or None for HEAD
            name: File name

        Raises:
            UserError: If the commit or the file in it doesn't exist
        """
        if commit_id is None:
            commit_hash = self.repo.head_id
        else:
            commit_hash = self.repo.resolve_commit_id(commit_id)
            if commit_hash is None:
                raise UserError("No commit with that id exists.")

        commit = self.repo.read_commit(commit_hash)
        fingerprint = commit.fingerprint(name)
        if fingerprint is None:
            raise UserError("File does not exist in that commit.")

        (self.repo.work_tree / name).write_bytes(self.repo.objects.get(fingerprint))
        logger.debug("Checked out %s from %s", name, commit_hash[:7])

    def checkout_branch(self, branch_name: str) -> None:
        """
        Make BRANCH_NAME the current branch and materialize its head.

        Raises:
            UserError: If the branch is current or doesn't exist, or an
                untracked file would be overwritten
        """
        if branch_name == self.repo.current_branch:
            raise UserError("No need to checkout the current branch.")

        target_hash = self.repo.refs.read_branch(branch_name)
        if target_hash is None:
            raise UserError("No such branch exists.")

        self.materialize(target_hash)
        self.repo.clear_staging()
        self.repo.refs.set_head(branch_name)
        logger.info("Switched to branch %s", branch_name)

    def reset(self, commit_id: str) -> str:
        """
        Materialize a commit and move its branch head to it.

        The branch moved is the one the commit was made on. HEAD keeps
        naming the current branch.

        Returns:
            str: Full fingerprint of the commit

        Raises:
            UserError: If no commit matches COMMIT_ID, or an untracked file
                would be overwritten
        """
        commit_hash = self.repo.resolve_commit_id(commit_id)
        if commit_hash is None:
            raise UserError("No commit with that id exists.")

        self.materialize(commit_hash)
        self.repo.clear_staging()

        commit = self.repo.read_commit(commit_hash)
        self.repo.refs.write_branch(commit.branch, commit_hash)
        logger.info("Reset %s to %s", commit.branch, commit_hash[:7])
        return commit_hash

    def check_untracked(self, current: Commit, target: Commit) -> None:
        """
        Refuse to overwrite working files HEAD doesn't track.

        A file in the way is one present in the working tree, untracked by
        CURRENT, and tracked by TARGET with different content.
        """
        for name in self.repo.working_files():
            if current.tracks(name) or not target.tracks(name):
                continue
            if self.repo.working_fingerprint(name) != target.fingerprint(name):
                raise UserError(UNTRACKED_IN_THE_WAY)

    def materialize(self, commit_hash: str) -> None:
        """
        Replace the working tree with the snapshot of COMMIT_HASH.

        Every file of the target is written and every other working file
        is deleted, once the untracked-file check has passed.
        """
        current = self.repo.head_commit()
        target = self.repo.read_commit(commit_hash)
        self.check_untracked(current, target)

        for name, fingerprint in sorted(target.files.items()):
            (self.repo.work_tree / name).write_bytes(self.repo.objects.get(fingerprint))

        for name in self.repo.working_files():
            if not target.tracks(name):
                (self.repo.work_tree / name).unlink()

        logger.debug("Materialized %s (%d files)", commit_hash[:7], len(target.files))
