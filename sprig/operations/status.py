"""Working tree status for Sprig."""

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass
class StatusReport:
    """Everything the status command shows, each list sorted."""
    branches: List[Tuple[str, bool]] = field(default_factory=list)
    staged: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    modified: List[str] = field(default_factory=list)
    untracked: List[str] = field(default_factory=list)


def modifications(repo) -> List[str]:
    """
    Changes in the working tree that are not staged.

    Returns:
        Sorted entries of the form ``name (modified)`` or ``name (deleted)``
    """
    head = repo.head_commit()
    adds = repo.add_stage
    removes = repo.remove_stage
    changes = set()

    for name, fingerprint in head.files.items():
        if adds.is_staged(name) or removes.is_staged(name):
            continue
        working = repo.working_fingerprint(name)
        if working is None:
            changes.add(f"{name} (deleted)")
        elif working != fingerprint:
            changes.add(f"{name} (modified)")

    for name, fingerprint in adds.entries.items():
        working = repo.working_fingerprint(name)
        if working is None:
            changes.add(f"{name} (deleted)")
        elif working != fingerprint:
            changes.add(f"{name} (modified)")

    return sorted(changes)


def compute_status(repo) -> StatusReport:
    """Collect branch, staging and working tree state of REPO."""
    current = repo.current_branch
    return StatusReport(
        branches=[(name, name == current) for name, _ in repo.refs.list_branches()],
        staged=sorted(repo.add_stage.entries),
        removed=sorted(repo.remove_stage.entries),
        modified=modifications(repo),
        untracked=repo.untracked_files(),
    )
