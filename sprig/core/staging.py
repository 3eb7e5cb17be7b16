"""Staging area implementation.

A repository owns two staging areas: the add side, holding new or changed
file versions waiting for the next commit, and the remove side, holding the
names of tracked files to drop from it. The two are coupled so a name is
never staged on both sides at once.
"""

import hashlib
import logging
import struct
from pathlib import Path
from typing import Dict, Optional

from .errors import IntegrityError, UserError
from .objects import Blob, Commit
from .store import ObjectStore

logger = logging.getLogger(__name__)

ADD = 'add'
REMOVE = 'remove'

SIGNATURE = b'STGE'
VERSION = 1


class StagingArea:
    """
    One side of the staging area.

    Maps file names to the fingerprint of the version that is pending.
    The add side also keeps a private copy of every pending blob, so the
    working file can change again before commit without affecting what was
    staged.
    """

    def __init__(self, kind: str, stage_dir: Path, index_file: Path, work_tree: Path):
        """
        Initialize a staging area.

        Args:
            kind: ADD or REMOVE
            stage_dir: Directory for the private blob store
            index_file: Path to the persisted name -> fingerprint index
            work_tree: Repository working tree
        """
        if kind not in (ADD, REMOVE):
            raise ValueError(f"Unknown staging area kind: {kind}")
        self.kind = kind
        self.store = ObjectStore(stage_dir)
        self.index_file = Path(index_file)
        self.work_tree = Path(work_tree)
        self.entries: Dict[str, str] = {}

    def fingerprint(self, name: str) -> Optional[str]:
        """Return the staged fingerprint for NAME, or None."""
        return self.entries.get(name)

    def is_staged(self, name: str) -> bool:
        """Return whether NAME is staged on this side."""
        return name in self.entries

    def read_blob(self, name: str) -> bytes:
        """Return the staged content of NAME (add side only)."""
        return self.store.get(self.entries[name])

    def stage_add(self, name: str, head: Commit, other: 'StagingArea') -> None:
        """
        Stage the working copy of NAME for addition.

        If HEAD already tracks exactly this version, the file ends up
        unstaged instead: adding an unchanged file is a no-op.

        Args:
            name: File name in the working tree
            head: Current head commit
            other: The remove-side staging area

        Raises:
            UserError: If the working file does not exist
        """
        file_path = self.work_tree / name
        if not file_path.is_file():
            raise UserError("File does not exist.")

        blob = Blob.from_file(file_path, name)
        fingerprint = blob.hash
        other.unstage(name)

        if head.tracks_fingerprint(fingerprint):
            self.unstage(name)
            logger.debug("%s matches HEAD, left unstaged", name)
            return

        self.unstage(name)
        self.store.put(blob.data, name)
        self.entries[name] = fingerprint
        logger.debug("Staged %s (%s) for addition", name, fingerprint[:7])

    def stage_remove(self, name: str, head: Commit, other: 'StagingArea') -> None:
        """
        Stage NAME for removal.

        A file tracked by HEAD is recorded here and deleted from the working
        tree. Either way the file is unstaged from the add side.

        Args:
            name: File name
            head: Current head commit
            other: The add-side staging area

        Raises:
            UserError: If the file is neither tracked nor staged for addition
        """
        if not head.tracks(name) and not other.is_staged(name):
            raise UserError("No reason to remove the file.")

        if head.tracks(name):
            self.entries[name] = head.fingerprint(name)
            file_path = self.work_tree / name
            if file_path.is_file():
                file_path.unlink()
            logger.debug("Staged %s for removal", name)

        other.unstage(name)

    def unstage(self, name: str) -> None:
        """Drop NAME from this side, deleting its private blob."""
        fingerprint = self.entries.pop(name, None)
        if fingerprint is None:
            return
        path = self.store.path(fingerprint)
        if path.exists():
            path.unlink()

    def clear(self) -> None:
        """Delete all blobs held by this area and empty its mapping."""
        self.store.clear()
        self.entries.clear()

    def save(self) -> None:
        """
        Write the index to disk.

        Format:
        - Header: 'STGE' + version (4 bytes) + entry count (4 bytes)
        - Entries: sorted by name, 20-byte SHA-1 + name length (2 bytes) + name,
          padded to 8-byte alignment
        - Checksum: SHA-1 of everything before it
        """
        content = bytearray()

        content.extend(SIGNATURE)
        content.extend(struct.pack('>I', VERSION))
        content.extend(struct.pack('>I', len(self.entries)))

        for name in sorted(self.entries):
            encoded = name.encode()
            entry_data = struct.pack('>20sH', bytes.fromhex(self.entries[name]), len(encoded))
            content.extend(entry_data)
            content.extend(encoded)

            entry_len = len(entry_data) + len(encoded)
            padlen = (8 - (entry_len % 8)) % 8
            content.extend(b'\x00' * padlen)

        content.extend(hashlib.sha1(content).digest())

        self.index_file.parent.mkdir(parents=True, exist_ok=True)
        self.index_file.write_bytes(bytes(content))

    def load(self) -> None:
        """
        Read the index from disk. A missing index means an empty area.

        Raises:
            IntegrityError: If the index is corrupt
        """
        self.entries.clear()
        if not self.index_file.exists():
            return

        data = self.index_file.read_bytes()
        content = data[:-20]
        checksum = data[-20:]

        if len(data) < 32 or hashlib.sha1(content).digest() != checksum:
            raise IntegrityError(f"Staging index checksum mismatch: {self.index_file}")

        if content[0:4] != SIGNATURE:
            raise IntegrityError(f"Invalid staging index signature: {content[0:4]!r}")

        entry_count = struct.unpack('>I', content[8:12])[0]
        offset = 12

        for _ in range(entry_count):
            sha_bytes, name_len = struct.unpack('>20sH', content[offset:offset + 22])
            offset += 22
            name = content[offset:offset + name_len].decode()
            offset += name_len

            entry_len = 22 + name_len
            offset += (8 - (entry_len % 8)) % 8

            self.entries[name] = sha_bytes.hex()

    def __len__(self) -> int:
        """Number of staged names."""
        return len(self.entries)

    def __contains__(self, name: str) -> bool:
        return name in self.entries

    def __repr__(self) -> str:
        return f"StagingArea({self.kind}, entries={len(self.entries)})"
