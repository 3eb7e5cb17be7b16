"""Reference management for Sprig."""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from .errors import IntegrityError

logger = logging.getLogger(__name__)

HEAD_PREFIX = 'ref: '
HEADS = 'refs/heads/'


class RefManager:
    """
    Manages branch references and HEAD.

    Handles:
    - Branch references (refs/heads/*), one file per branch holding the
      fingerprint of its head commit
    - HEAD, a symbolic reference naming the active branch
    """

    def __init__(self, sprig_dir: Path):
        """
        Initialize reference manager.

        Args:
            sprig_dir: Repository metadata directory
        """
        self.sprig_dir = Path(sprig_dir)
        self.heads_dir = self.sprig_dir / 'refs' / 'heads'
        self.head_file = self.sprig_dir / 'HEAD'

    @staticmethod
    def valid_name(branch_name: str) -> bool:
        """A branch name is one non-hidden file name under refs/heads."""
        return bool(branch_name) and not branch_name.startswith('.') \
            and '/' not in branch_name and '\\' not in branch_name

    def branch_path(self, branch_name: str) -> Path:
        """Return the ref file of BRANCH_NAME."""
        return self.heads_dir / branch_name

    def branch_exists(self, branch_name: str) -> bool:
        return self.valid_name(branch_name) and self.branch_path(branch_name).is_file()

    def read_branch(self, branch_name: str) -> Optional[str]:
        """
        Read a branch and return its head commit fingerprint.

        Returns:
            Commit fingerprint or None if the branch doesn't exist
        """
        if not self.valid_name(branch_name):
            return None
        path = self.branch_path(branch_name)
        if not path.is_file():
            return None
        return path.read_text().strip()

    def write_branch(self, branch_name: str, commit_hash: str) -> None:
        """
        Point BRANCH_NAME at COMMIT_HASH, creating the ref if needed.

        Callers write the commit object before calling this, so a ref never
        names a commit that is not stored.
        """
        path = self.branch_path(branch_name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(commit_hash + '\n')
        logger.debug("Branch %s -> %s", branch_name, commit_hash[:7])

    def delete_branch(self, branch_name: str) -> bool:
        """
        Delete a branch pointer. Its commits stay in the store.

        Returns:
            True if deleted, False if not found
        """
        if not self.valid_name(branch_name):
            return False
        path = self.branch_path(branch_name)
        if path.is_file():
            path.unlink()
            logger.debug("Deleted branch %s", branch_name)
            return True
        return False

    def list_branches(self) -> List[Tuple[str, str]]:
        """
        List all branches.

        Returns:
            List of (branch_name, commit_hash) tuples sorted by name
        """
        if not self.heads_dir.exists():
            return []

        branches = []
        for branch_file in self.heads_dir.iterdir():
            if branch_file.is_file():
                branches.append((branch_file.name, branch_file.read_text().strip()))

        return sorted(branches, key=lambda x: x[0])

    def get_current_branch(self) -> str:
        """
        Get the current branch name.

        Raises:
            IntegrityError: If HEAD is missing or not a branch reference
        """
        if not self.head_file.exists():
            raise IntegrityError("HEAD is missing")

        content = self.head_file.read_text().strip()
        if not content.startswith(HEAD_PREFIX + HEADS):
            raise IntegrityError(f"HEAD does not name a branch: {content}")

        return content[len(HEAD_PREFIX + HEADS):]

    def set_head(self, branch_name: str) -> None:
        """Make BRANCH_NAME the active branch."""
        self.head_file.write_text(f'{HEAD_PREFIX}{HEADS}{branch_name}\n')
        logger.debug("HEAD -> %s", branch_name)

    def resolve_head(self) -> str:
        """
        Resolve HEAD to a commit fingerprint.

        Raises:
            IntegrityError: If the current branch has no ref
        """
        branch = self.get_current_branch()
        commit_hash = self.read_branch(branch)
        if commit_hash is None:
            raise IntegrityError(f"Current branch {branch} has no head commit")
        return commit_hash
