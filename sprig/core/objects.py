"""Sprig objects: blobs and commits."""

import zlib
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from .errors import IntegrityError
from .hash import hash_object


def format_date(moment: datetime) -> str:
    """Format a timezone-aware datetime the way commit dates are recorded."""
    return f"{moment:%a %b} {moment.day} {moment:%H:%M:%S %Y %z}"


EPOCH_DATE = format_date(datetime.fromtimestamp(0, timezone.utc))


class SprigObject(ABC):
    """Base class for all Sprig objects."""

    def __init__(self):
        self._hash: Optional[str] = None

    @abstractmethod
    def serialize(self) -> bytes:
        """
        Serialize object to bytes.

        Returns:
            bytes: Serialized object data
        """
        pass

    @abstractmethod
    def deserialize(self, data: bytes) -> None:
        """
        Deserialize object from bytes.

        Args:
            data: Serialized object data
        """
        pass

    @property
    def type(self) -> str:
        """
        Return object type name.

        Returns:
            str: Object type (blob, commit)
        """
        return self.__class__.__name__.lower()

    def header(self, data: bytes) -> bytes:
        """Return the ``<type> <size>\\0`` header written before the data."""
        return f"{self.type} {len(data)}\0".encode()

    def compute_hash(self) -> str:
        """
        Compute and cache object hash.

        Objects are hashed with a header containing the type and size.
        Format: <type> <size>\\0<content>

        Returns:
            str: 40-character SHA-1 hash
        """
        if self._hash is None:
            data = self.serialize()
            self._hash = hash_object(self.header(data) + data)
        return self._hash

    @property
    def hash(self) -> str:
        """
        Get object hash.

        Returns:
            str: 40-character SHA-1 hash
        """
        return self.compute_hash()

    def encode(self) -> bytes:
        """Return the compressed on-disk form of this object."""
        data = self.serialize()
        return zlib.compress(self.header(data) + data)


class Blob(SprigObject):
    """
    Represents the content of one file under one name.

    Unlike the object's other fields, the name takes part in the
    fingerprint: the same bytes under two names are two blobs.
    """

    def __init__(self, data: Optional[bytes] = None, name: str = ''):
        """
        Initialize a blob.

        Args:
            data: File content as bytes
            name: File name the content was staged under
        """
        super().__init__()
        self.data = data or b''
        self.name = name

    def serialize(self) -> bytes:
        return self.data

    def deserialize(self, data: bytes) -> None:
        self.data = data
        self._hash = None

    def header(self, data: bytes) -> bytes:
        return f"blob {len(data)} {self.name}\0".encode()

    def compute_hash(self) -> str:
        if self._hash is None:
            self._hash = hash_object(self.data, self.name)
        return self._hash

    @classmethod
    def from_file(cls, filepath, name: Optional[str] = None) -> 'Blob':
        """
        Create blob from file.

        Args:
            filepath: Path to file
            name: Name to record (defaults to the file's base name)

        Returns:
            Blob: New blob containing file content
        """
        path = Path(filepath)
        return cls(path.read_bytes(), name if name is not None else path.name)

    def __repr__(self) -> str:
        """String representation of blob."""
        return f"Blob(hash={self.hash[:7]}, name={self.name!r}, size={len(self.data)})"


class Commit(SprigObject):
    """
    Represents one snapshot in the history graph.

    A commit captures:
    - Its projection: tracked file name -> blob fingerprint
    - Parent commit fingerprint(s): none for the root, two for merges
    - The branch it was made on
    - Date and message

    Parents are kept as fingerprints only; loading a parent is always an
    explicit lookup through the repository.
    """

    def __init__(self):
        """Initialize empty commit."""
        super().__init__()
        self.date: str = ''
        self.branch: str = ''
        self.parents: List[str] = []
        self.files: Dict[str, str] = {}
        self.message: str = ''

    @property
    def parent1(self) -> Optional[str]:
        """First parent fingerprint, None for the root commit."""
        return self.parents[0] if self.parents else None

    @property
    def parent2(self) -> Optional[str]:
        """Second parent fingerprint, only set on merge commits."""
        return self.parents[1] if len(self.parents) > 1 else None

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1

    def fingerprint(self, name: str) -> Optional[str]:
        """Return the blob fingerprint recorded for NAME, if tracked."""
        return self.files.get(name)

    def tracks(self, name: str) -> bool:
        """Return True if NAME is part of this snapshot."""
        return name in self.files

    def tracks_fingerprint(self, fingerprint: str) -> bool:
        """Return True if some tracked file has exactly this fingerprint."""
        return fingerprint in self.files.values()

    def serialize(self) -> bytes:
        """
        Serialize commit to Sprig format.

        Format:
        date <date>
        branch <branch>
        parent <parent-hash>  (zero or more)
        file <blob-hash> <name>  (sorted by name)

        <commit message>

        Returns:
            bytes: Serialized commit data
        """
        lines = []

        lines.append(f'date {self.date}')
        lines.append(f'branch {self.branch}')

        for parent in self.parents:
            lines.append(f'parent {parent}')

        for name in sorted(self.files):
            lines.append(f'file {self.files[name]} {name}')

        lines.append('')
        lines.append(self.message)

        return '\n'.join(lines).encode()

    def deserialize(self, data: bytes) -> None:
        """
        Deserialize commit from Sprig format.

        Args:
            data: Serialized commit data
        """
        content = data.decode()
        lines = content.split('\n')

        self.parents = []
        self.files = {}
        message_start = len(lines)
        for i, line in enumerate(lines):
            if not line:
                message_start = i + 1
                break

            if line.startswith('date '):
                self.date = line[5:]

            elif line.startswith('branch '):
                self.branch = line[7:]

            elif line.startswith('parent '):
                self.parents.append(line[7:])

            elif line.startswith('file '):
                parts = line[5:].split(' ', 1)
                if len(parts) != 2:
                    raise IntegrityError(f"Invalid commit entry: {line}")
                self.files[parts[1]] = parts[0]

            else:
                raise IntegrityError(f"Invalid commit line: {line}")

        self.message = '\n'.join(lines[message_start:])
        self._hash = None

    @classmethod
    def create(
        cls,
        message: str,
        branch: str,
        parent_hashes: List[str],
        files: Dict[str, str],
        moment: Optional[datetime] = None
    ) -> 'Commit':
        """
        Create a new commit.

        The root commit (no parents) is always dated at the Unix epoch so
        every repository starts from the same initial commit.

        Args:
            message: Commit message
            branch: Branch the commit is made on
            parent_hashes: Parent commit hashes (parent-1 first)
            files: Projection of the snapshot; copied, never aliased
            moment: Commit time (defaults to now)

        Returns:
            Commit: New commit object
        """
        commit = cls()
        commit.message = message
        commit.branch = branch
        commit.parents = list(parent_hashes)
        commit.files = dict(files)

        if not commit.parents:
            commit.date = EPOCH_DATE
        else:
            if moment is None:
                moment = datetime.now().astimezone()
            commit.date = format_date(moment)

        return commit

    def __repr__(self) -> str:
        """String representation."""
        parent_info = f", parents={len(self.parents)}" if self.parents else ""
        msg_preview = self.message.split('\n')[0][:50]
        return f"Commit(hash={self.hash[:7]}{parent_info}, msg='{msg_preview}')"


def decode_object(raw: bytes) -> SprigObject:
    """
    Decode the compressed on-disk form of an object.

    Args:
        raw: Bytes as written by ``SprigObject.encode``

    Returns:
        SprigObject: Blob or Commit

    Raises:
        IntegrityError: If the data is not a valid object
    """
    try:
        content = zlib.decompress(raw)
        null_idx = content.index(b"\0")
        header = content[:null_idx].decode()
    except (zlib.error, ValueError) as e:
        raise IntegrityError(f"Corrupt object: {e}")

    data = content[null_idx + 1:]

    parts = header.split(' ', 2)
    try:
        obj_type, size = parts[0], int(parts[1])
    except (IndexError, ValueError):
        raise IntegrityError(f"Invalid object header: {header}")

    if len(data) != size:
        raise IntegrityError(f"Object size mismatch: expected {size}, got {len(data)}")

    if obj_type == 'blob':
        obj = Blob(name=parts[2] if len(parts) > 2 else '')
    elif obj_type == 'commit':
        obj = Commit()
    else:
        raise IntegrityError(f"Unknown object type: {obj_type}")

    obj.deserialize(data)
    return obj
