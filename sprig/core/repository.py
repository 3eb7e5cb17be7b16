"""Repository management for Sprig."""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .config import Config
from .errors import IntegrityError, ObjectNotFoundError, UserError
from .hash import hash_file
from .objects import Commit, decode_object
from .refs import RefManager
from .staging import ADD, REMOVE, StagingArea
from .store import ObjectStore

logger = logging.getLogger(__name__)

INITIAL_MESSAGE = 'initial commit'


class Repository:
    """
    Represents a Sprig repository.

    A repository manages the .sprig directory structure: the permanent
    object store, per-branch commit directories, the global commit index,
    branch refs, HEAD and the two staging areas.

    A command works on an explicit handle: ``open()`` loads the staging
    areas and commit index, ``save()`` writes them back. Used as a context
    manager, the repository is saved only if the block finishes without
    raising.
    """

    def __init__(self, path: str = '.'):
        """
        Initialize repository.

        Args:
            path: Path to repository root (defaults to current directory)
        """
        self.work_tree = Path(path).resolve()
        self.sprig_dir = self.work_tree / '.sprig'
        self.objects_dir = self.sprig_dir / 'objects'
        self.commits_dir = self.sprig_dir / 'commits'
        self.refs_dir = self.sprig_dir / 'refs'
        self.heads_dir = self.refs_dir / 'heads'
        self.staging_dir = self.sprig_dir / 'staging'
        self.head_file = self.sprig_dir / 'HEAD'
        self.commit_index_file = self.sprig_dir / 'commit-index'
        self.config_file = self.sprig_dir / 'config'

        self.objects = ObjectStore(self.objects_dir)
        self.refs = RefManager(self.sprig_dir)
        self.add_stage = StagingArea(
            ADD, self.staging_dir / 'add', self.staging_dir / 'add.index', self.work_tree
        )
        self.remove_stage = StagingArea(
            REMOVE, self.staging_dir / 'remove', self.staging_dir / 'remove.index', self.work_tree
        )
        self.commit_index: Dict[str, str] = {}
        self._commit_cache: Dict[str, Commit] = {}

        # Engines are created lazily to avoid circular imports
        self._checkout_engine = None
        self._merge_engine = None
        self._diff_engine = None

    @property
    def checkout(self):
        """Get CheckoutEngine instance."""
        if self._checkout_engine is None:
            from sprig.operations.checkout import CheckoutEngine
            self._checkout_engine = CheckoutEngine(self)
        return self._checkout_engine

    @property
    def merge(self):
        """Get MergeEngine instance."""
        if self._merge_engine is None:
            from sprig.operations.merge import MergeEngine
            self._merge_engine = MergeEngine(self)
        return self._merge_engine

    @property
    def diff(self):
        """Get DiffEngine instance."""
        if self._diff_engine is None:
            from sprig.operations.diff import DiffEngine
            self._diff_engine = DiffEngine(self)
        return self._diff_engine

    @property
    def config(self) -> Config:
        return Config(self.config_file)

    def init(self, default_branch: Optional[str] = None) -> 'Repository':
        """
        Initialize a new repository.

        Creates the .sprig directory structure:
        .sprig/
        ├── objects/        # Blob store
        ├── commits/        # One directory of commits per branch
        ├── refs/heads/     # Branch references
        ├── staging/        # Pending additions and removals
        ├── commit-index    # Every commit fingerprint -> location
        ├── HEAD            # Current branch
        └── config          # Repository configuration

        and records the initial commit on the default branch.

        Returns:
            Repository: self for method chaining

        Raises:
            UserError: If repository already exists
        """
        if self.sprig_dir.exists():
            raise UserError(
                "A Sprig version-control system already exists in the current directory."
            )

        branch = default_branch or self.config.default_branch
        if not self.refs.valid_name(branch):
            raise UserError("Invalid branch name.")

        self.sprig_dir.mkdir()
        self.objects_dir.mkdir()
        self.commits_dir.mkdir()
        self.heads_dir.mkdir(parents=True)
        self.add_stage.store.root.mkdir(parents=True)
        self.remove_stage.store.root.mkdir(parents=True)

        self.config_file.write_text('[core]\n\trepositoryformatversion = 0\n')
        self.refs.set_head(branch)

        self.commit_index = {}
        root = Commit.create(INITIAL_MESSAGE, branch, [], {})
        self._store_commit(root)
        self.save()

        logger.info("Initialized repository at %s on branch %s", self.sprig_dir, branch)
        return self

    @classmethod
    def find_repository(cls, path: str = '.') -> Optional['Repository']:
        """
        Find repository by searching up the directory tree.

        Args:
            path: Starting path for search

        Returns:
            Repository if found, None otherwise
        """
        current = Path(path).resolve()

        while True:
            if (current / '.sprig').is_dir():
                return cls(str(current))

            if current == current.parent:
                return None

            current = current.parent

    def open(self) -> 'Repository':
        """Load the commit index and both staging areas from disk."""
        if not self.sprig_dir.is_dir():
            raise UserError("Not in an initialized Sprig directory.")

        try:
            self.commit_index = json.loads(self.commit_index_file.read_text())
        except FileNotFoundError:
            raise IntegrityError(f"Commit index missing: {self.commit_index_file}")
        except ValueError as e:
            raise IntegrityError(f"Corrupt commit index: {e}")

        self.add_stage.load()
        self.remove_stage.load()
        self._commit_cache.clear()
        return self

    def save(self) -> None:
        """Write the commit index and both staging areas to disk."""
        self._write_commit_index()
        self.add_stage.save()
        self.remove_stage.save()

    def __enter__(self) -> 'Repository':
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.save()

    def _write_commit_index(self) -> None:
        self.commit_index_file.write_text(json.dumps(self.commit_index, indent=2))

    # Commits

    def _store_commit(self, commit: Commit) -> str:
        """
        Persist COMMIT and advance its branch.

        The object is written first, then the global index, then the ref.
        """
        commit_hash = commit.hash
        path = self.commits_dir / commit.branch / commit_hash
        if not path.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(commit.encode())

        self.commit_index[commit_hash] = str(path.relative_to(self.sprig_dir))
        self._commit_cache[commit_hash] = commit
        self._write_commit_index()
        self.refs.write_branch(commit.branch, commit_hash)

        logger.debug("Stored commit %s on %s", commit_hash[:7], commit.branch)
        return commit_hash

    def read_commit(self, commit_hash: str) -> Commit:
        """
        Load a commit by its full fingerprint.

        Raises:
            ObjectNotFoundError: If the commit is not in the index or on disk
            IntegrityError: If the stored commit is corrupt
        """
        cached = self._commit_cache.get(commit_hash)
        if cached is not None:
            return cached

        location = self.commit_index.get(commit_hash)
        if location is None:
            raise ObjectNotFoundError(commit_hash)

        path = self.sprig_dir / location
        if not path.is_file():
            raise ObjectNotFoundError(commit_hash)

        try:
            commit = decode_object(path.read_bytes())
        except UnicodeDecodeError as e:
            raise IntegrityError(f"Corrupt commit {commit_hash}: {e}")
        if not isinstance(commit, Commit):
            raise IntegrityError(f"Object {commit_hash} is not a commit")
        if commit.hash != commit_hash:
            raise IntegrityError(f"Hash mismatch for commit {commit_hash}")

        self._commit_cache[commit_hash] = commit
        return commit

    def resolve_commit_id(self, commit_id: str) -> Optional[str]:
        """
        Expand a full or abbreviated commit id.

        Returns:
            The full fingerprint, or None if no commit matches

        Raises:
            UserError: If the prefix matches more than one commit
        """
        if commit_id in self.commit_index:
            return commit_id
        if not commit_id:
            return None

        matches = [h for h in self.commit_index if h.startswith(commit_id)]
        if len(matches) > 1:
            raise UserError(f"Commit id {commit_id} is ambiguous.")
        return matches[0] if matches else None

    @property
    def current_branch(self) -> str:
        return self.refs.get_current_branch()

    @property
    def head_id(self) -> str:
        return self.refs.resolve_head()

    def head_commit(self) -> Commit:
        return self.read_commit(self.head_id)

    def branch_head(self, branch_name: str) -> str:
        """
        Return the head fingerprint of BRANCH_NAME.

        Raises:
            UserError: If the branch doesn't exist
        """
        commit_hash = self.refs.read_branch(branch_name)
        if commit_hash is None:
            raise UserError("A branch with that name does not exist.")
        return commit_hash

    def commit(self, message: str, merge_parent: Optional[str] = None) -> str:
        """
        Record the staged changes as a new commit on the current branch.

        The new projection is a copy of the head commit's, patched with the
        staged additions and removals.

        Args:
            message: Commit message
            merge_parent: Second parent fingerprint for merge commits

        Returns:
            str: Fingerprint of the new commit

        Raises:
            UserError: If the message is empty or nothing is staged
        """
        if not message:
            raise UserError("Please enter a commit message.")
        if not len(self.add_stage) and not len(self.remove_stage):
            raise UserError("No changes added to the commit.")

        parent_hash = self.head_id
        parent = self.read_commit(parent_hash)
        files = dict(parent.files)

        for name, fingerprint in sorted(self.add_stage.entries.items()):
            stored = self.objects.put(self.add_stage.read_blob(name), name)
            if stored != fingerprint:
                raise IntegrityError(f"Staged blob for {name} does not match {fingerprint}")
            files[name] = fingerprint

        for name in self.remove_stage.entries:
            files.pop(name, None)

        parents = [parent_hash]
        if merge_parent is not None:
            parents.append(merge_parent)

        commit = Commit.create(message, self.current_branch, parents, files)
        commit_hash = self._store_commit(commit)
        self.clear_staging()
        return commit_hash

    # Staging

    def add(self, name: str) -> None:
        """Stage the working copy of NAME for addition."""
        self.add_stage.stage_add(name, self.head_commit(), self.remove_stage)

    def rm(self, name: str) -> None:
        """Unstage NAME, and stage it for removal if HEAD tracks it."""
        self.remove_stage.stage_remove(name, self.head_commit(), self.add_stage)

    def clear_staging(self) -> None:
        self.add_stage.clear()
        self.remove_stage.clear()

    def has_staged_changes(self) -> bool:
        return bool(len(self.add_stage) or len(self.remove_stage))

    # Branches

    def branch(self, name: str) -> None:
        """
        Create branch NAME pointing at the current head commit.

        Raises:
            UserError: If NAME is not a valid branch name or already exists
        """
        if not self.refs.valid_name(name):
            raise UserError("Invalid branch name.")
        if self.refs.branch_exists(name):
            raise UserError("A branch with that name already exists.")
        self.refs.write_branch(name, self.head_id)

    def rm_branch(self, name: str) -> None:
        """
        Delete the pointer of branch NAME, keeping its commits.

        Raises:
            UserError: If NAME is the current branch or doesn't exist
        """
        if name == self.current_branch:
            raise UserError("Cannot remove the current branch.")
        if not self.refs.delete_branch(name):
            raise UserError("A branch with that name does not exist.")

    # History

    def log(self) -> List[Tuple[str, Commit]]:
        """Follow first parents from HEAD back to the initial commit."""
        history = []
        commit_hash: Optional[str] = self.head_id
        while commit_hash is not None:
            commit = self.read_commit(commit_hash)
            history.append((commit_hash, commit))
            commit_hash = commit.parent1
        return history

    def global_log(self) -> List[Tuple[str, Commit]]:
        """Every commit ever made, in the order they were recorded."""
        return [(h, self.read_commit(h)) for h in self.commit_index]

    def find(self, message: str) -> List[str]:
        """
        Return ids of all commits whose message is exactly MESSAGE.

        Raises:
            UserError: If no commit matches
        """
        matches = [h for h, commit in self.global_log() if commit.message == message]
        if not matches:
            raise UserError("Found no commit with that message.")
        return matches

    # Working tree

    def working_files(self) -> List[str]:
        """Sorted names of the plain, non-hidden files in the working tree."""
        return sorted(
            entry.name for entry in self.work_tree.iterdir()
            if entry.is_file() and not entry.name.startswith('.')
        )

    def working_fingerprint(self, name: str) -> Optional[str]:
        """Fingerprint of the working copy of NAME, or None if missing."""
        path = self.work_tree / name
        if not path.is_file():
            return None
        return hash_file(path, name)

    def untracked_files(self) -> List[str]:
        """
        Working files neither staged for addition nor tracked by HEAD, plus
        files staged for removal that are back on disk.
        """
        head = self.head_commit()
        untracked = []
        for name in self.working_files():
            if (not self.add_stage.is_staged(name) and not head.tracks(name)) or \
                    (self.remove_stage.is_staged(name) and head.tracks(name)):
                untracked.append(name)
        return untracked

    def __repr__(self) -> str:
        """String representation of repository."""
        return f"Repository(path={self.work_tree})"
