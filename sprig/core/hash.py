"""Hash utilities for Sprig."""

import hashlib
from pathlib import Path
from typing import Optional


def hash_object(data: bytes, salt: Optional[str] = None) -> str:
    """
    Compute SHA-1 hash of data.
    
    Blob fingerprints are salted with the file name, so identical bytes
    stored under two different names get two different fingerprints.
    
    Args:
        data: Bytes to hash
        salt: Optional string appended to the data before hashing
        
    Returns:
        40-character hex string
    """
    sha = hashlib.sha1(data)
    if salt is not None:
        sha.update(salt.encode())
    return sha.hexdigest()


def hash_file(filepath, name: Optional[str] = None) -> str:
    """
    Compute the fingerprint of a file.
    
    Args:
        filepath: Path to file
        name: File name used as salt (defaults to the path's base name)
        
    Returns:
        40-character hex string
    """
    path = Path(filepath)
    if name is None:
        name = path.name
    return hash_object(path.read_bytes(), name)
