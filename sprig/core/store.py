"""Content-addressed blob storage."""

import logging
import shutil
from pathlib import Path

from .errors import IntegrityError, ObjectNotFoundError
from .objects import Blob, decode_object

logger = logging.getLogger(__name__)


class ObjectStore:
    """
    Maps blob fingerprints to file bytes.

    The permanent object directory and the private store of the add-side
    staging area are both ObjectStores. Objects are stored in subdirectories
    named by the first 2 characters of the fingerprint, compressed with zlib.
    """

    def __init__(self, root: Path):
        """
        Initialize store.

        Args:
            root: Directory holding the objects
        """
        self.root = Path(root)

    def path(self, fingerprint: str) -> Path:
        """
        Get filesystem path for an object.

        Example: ab/cdef0123456789... for fingerprint abcdef0123456789...

        Args:
            fingerprint: 40-character SHA-1 hash

        Returns:
            Path: Full path to object file
        """
        return self.root / fingerprint[:2] / fingerprint[2:]

    def exists(self, fingerprint: str) -> bool:
        """Check if an object with this fingerprint is stored."""
        return self.path(fingerprint).is_file()

    def put(self, data: bytes, name: str) -> str:
        """
        Store file content under its name-salted fingerprint.

        Writing the same (data, name) pair twice is a no-op.

        Args:
            data: File content
            name: File name

        Returns:
            str: Fingerprint of the blob
        """
        blob = Blob(data, name)
        fingerprint = blob.hash
        if self.exists(fingerprint):
            return fingerprint

        path = self.path(fingerprint)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(blob.encode())
        logger.debug("Stored blob %s for %s in %s", fingerprint[:7], name, self.root)
        return fingerprint

    def get_blob(self, fingerprint: str) -> Blob:
        """
        Read a blob and verify it hashes back to its fingerprint.

        Raises:
            ObjectNotFoundError: If nothing is stored under the fingerprint
            IntegrityError: If the stored object is corrupt
        """
        path = self.path(fingerprint)
        if not path.is_file():
            raise ObjectNotFoundError(fingerprint)

        obj = decode_object(path.read_bytes())
        if not isinstance(obj, Blob):
            raise IntegrityError(f"Object {fingerprint} is not a blob")
        if obj.hash != fingerprint:
            raise IntegrityError(f"Hash mismatch for object {fingerprint}")
        return obj

    def get(self, fingerprint: str) -> bytes:
        """Return the bytes stored under FINGERPRINT."""
        return self.get_blob(fingerprint).data

    def clear(self) -> None:
        """Delete every stored object."""
        if self.root.exists():
            shutil.rmtree(self.root)
        self.root.mkdir(parents=True, exist_ok=True)

    def __repr__(self) -> str:
        return f"ObjectStore(root={self.root})"
