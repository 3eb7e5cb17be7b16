"""Exceptions raised by the Sprig core.

``UserError`` covers expected misuse (bad operands, nothing staged, a file in
the way). The CLI prints its message and leaves the repository untouched.

``IntegrityError`` means the on-disk store is not what the code expects:
a missing object, a hash mismatch, a corrupt index. It is never recovered.
"""

from typing import Optional


class SprigError(Exception):
    """Base exception for all Sprig errors.

    Attributes:
        message: User-facing error message.
        hint: Optional actionable suggestion.
    """

    def __init__(self, message: str, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class UserError(SprigError):
    """Raised when a command cannot run because of how it was used."""

    pass


class IntegrityError(SprigError):
    """Raised when stored data is missing or corrupt."""

    pass


class ObjectNotFoundError(IntegrityError):
    """Raised when a fingerprint has no stored object."""

    def __init__(self, fingerprint: str) -> None:
        super().__init__(f"Object {fingerprint} not found")
        self.fingerprint = fingerprint
