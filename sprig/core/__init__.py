"""Core functionality for Sprig.

This module contains the core data structures:
- Sprig objects (Blob, Commit)
- Content-addressed blob storage
- The two staging areas
- Repository management
- Reference management
- Configuration management
- Hashing utilities

For checkout, merge, diff and status, see sprig.operations
"""

from sprig.core.errors import SprigError, UserError, IntegrityError, ObjectNotFoundError
from sprig.core.objects import SprigObject, Blob, Commit
from sprig.core.repository import Repository
from sprig.core.hash import hash_object, hash_file
from sprig.core.store import ObjectStore
from sprig.core.staging import StagingArea
from sprig.core.refs import RefManager
from sprig.core.config import Config, get_config

__all__ = [
    'SprigError',
    'UserError',
    'IntegrityError',
    'ObjectNotFoundError',
    'SprigObject',
    'Blob',
    'Commit',
    'Repository',
    'ObjectStore',
    'StagingArea',
    'RefManager',
    'Config',
    'get_config',
    'hash_object',
    'hash_file',
]
