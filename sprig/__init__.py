"""Sprig - a small branching version-control system."""

__version__ = '0.1.0'

from sprig.core.repository import Repository
from sprig.core.objects import SprigObject, Blob, Commit

__all__ = [
    'Repository',
    'SprigObject',
    'Blob',
    'Commit',
]
