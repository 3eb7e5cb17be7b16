"""Diff engine for comparing branches and the working tree."""

import logging
from difflib import SequenceMatcher
from typing import Dict, List, Optional, Sequence, Tuple

from sprig.core.errors import UserError

logger = logging.getLogger(__name__)


def sequence_diff(a: Sequence[str], b: Sequence[str]) -> List[Tuple[int, int, int, int]]:
    """
    Compare two line sequences.

    Returns:
        One (start1, len1, start2, len2) tuple per changed region, with
        0-based starts, in order
    """
    matcher = SequenceMatcher(None, a, b, autojunk=False)
    return [
        (i1, i2 - i1, j1, j2 - j1)
        for tag, i1, i2, j1, j2 in matcher.get_opcodes()
        if tag != 'equal'
    ]


def _hunk_range(start: int, count: int) -> str:
    if count:
        start += 1
    if count == 1:
        return str(start)
    return f"{start},{count}"


class DiffHunk:
    """Represents a single hunk (continuous block of changes) in a diff."""

    def __init__(self, old_start: int, old_count: int, new_start: int, new_count: int):
        self.old_start = old_start
        self.old_count = old_count
        self.new_start = new_start
        self.new_count = new_count
        self.lines: List[str] = []

    def add_line(self, line: str):
        """Add a line to this hunk."""
        self.lines.append(line)

    def __str__(self):
        old = _hunk_range(self.old_start, self.old_count)
        new = _hunk_range(self.new_start, self.new_count)
        return f"@@ -{old} +{new} @@"


class FileDiff:
    """Represents the diff for a single file. A missing side is None."""

    def __init__(self, path: str, old_content: Optional[bytes], new_content: Optional[bytes]):
        self.path = path
        self.old_content = old_content
        self.new_content = new_content
        self.is_new = old_content is None
        self.is_deleted = new_content is None
        self.hunks: List[DiffHunk] = []

    @staticmethod
    def _lines(content: Optional[bytes]) -> List[str]:
        if content is None:
            return []
        return content.decode('utf-8', errors='replace').splitlines()

    def compute_diff(self) -> 'FileDiff':
        """Compute diff hunks for this file."""
        old_lines = self._lines(self.old_content)
        new_lines = self._lines(self.new_content)

        for old_start, old_count, new_start, new_count in sequence_diff(old_lines, new_lines):
            hunk = DiffHunk(old_start, old_count, new_start, new_count)
            for line in old_lines[old_start:old_start + old_count]:
                hunk.add_line(f"-{line}")
            for line in new_lines[new_start:new_start + new_count]:
                hunk.add_line(f"+{line}")
            self.hunks.append(hunk)

        return self


class DiffEngine:
    """
    Engine for computing diffs between branches and the working tree.

    Supports:
    - Branch head vs working tree (files tracked by the branch)
    - Branch head vs branch head (files tracked by either)
    - Unified-style output
    """

    def __init__(self, repo):
        """
        Initialize diff engine.

        Args:
            repo: Repository instance
        """
        self.repo = repo

    def _branch_files(self, branch_name: str) -> Dict[str, str]:
        commit_hash = self.repo.refs.read_branch(branch_name)
        if commit_hash is None:
            raise UserError("A branch with that name does not exist.")
        return self.repo.read_commit(commit_hash).files

    def _content(self, fingerprint: Optional[str]) -> Optional[bytes]:
        if fingerprint is None:
            return None
        return self.repo.objects.get(fingerprint)

    def diff_working(self, branch_name: Optional[str] = None) -> List[FileDiff]:
        """
        Compare a branch head with the working tree.

        Args:
            branch_name: Branch to compare (defaults to the current branch)

        Returns:
            List of FileDiff objects, sorted by file name
        """
        if branch_name is None:
            branch_name = self.repo.current_branch
        files = self._branch_files(branch_name)

        diffs = []
        for name in sorted(files):
            fingerprint = files[name]
            if self.repo.working_fingerprint(name) == fingerprint:
                continue

            path = self.repo.work_tree / name
            new_content = path.read_bytes() if path.is_file() else None
            diff = FileDiff(name, self._content(fingerprint), new_content).compute_diff()
            if diff.hunks:
                diffs.append(diff)

        logger.debug("%d files differ between %s and the working tree", len(diffs), branch_name)
        return diffs

    def diff_branches(self, old_branch: str, new_branch: str) -> List[FileDiff]:
        """
        Compare the heads of two branches.

        Returns:
            List of FileDiff objects, sorted by file name
        """
        old_files = self._branch_files(old_branch)
        new_files = self._branch_files(new_branch)

        diffs = []
        for name in sorted(set(old_files) | set(new_files)):
            old_fp = old_files.get(name)
            new_fp = new_files.get(name)
            if old_fp == new_fp:
                continue
            diff = FileDiff(name, self._content(old_fp), self._content(new_fp)).compute_diff()
            if diff.hunks:
                diffs.append(diff)

        return diffs

    def format_diff(self, diffs: List[FileDiff], color: bool = True) -> str:
        """
        Format diffs as unified diff output.

        Args:
            diffs: List of FileDiff objects
            color: Whether to use color output

        Returns:
            Formatted diff string
        """
        from colorama import Fore, Style

        output = []

        for diff in diffs:
            old = "/dev/null" if diff.is_new else f"a/{diff.path}"
            new = "/dev/null" if diff.is_deleted else f"b/{diff.path}"
            output.append(f"diff --git {old} {new}")
            output.append(f"--- {old}")
            output.append(f"+++ {new}")

            for hunk in diff.hunks:
                if color:
                    output.append(f"{Fore.CYAN}{hunk}{Style.RESET_ALL}")
                else:
                    output.append(str(hunk))

                for line in hunk.lines:
                    if not color:
                        output.append(line)
                    elif line.startswith('+'):
                        output.append(f"{Fore.GREEN}{line}{Style.RESET_ALL}")
                    else:
                        output.append(f"{Fore.RED}{line}{Style.RESET_ALL}")

        return '\n'.join(output)
