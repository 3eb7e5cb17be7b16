"""Repository sessions for CLI commands.

Every command that works on an existing repository runs inside
``repository_session()``: the repository is found and opened on entry and
saved on a clean exit. Expected misuse (``UserError``) is reported as one
line and leaves the on-disk state untouched. A damaged store is reported
through ``SprigCliError`` with a non-zero exit status.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

import click

from sprig.cli.output import error
from sprig.core.errors import IntegrityError, UserError
from sprig.core.repository import Repository

NOT_A_REPOSITORY = "Not in an initialized Sprig directory."
INCORRECT_OPERANDS = "Incorrect operands."


class SprigCliError(click.ClickException):
    """CLI error with an optional hint for the user.

    Attributes:
        message: The primary error message.
        hint: Optional actionable suggestion for the user.
    """

    def __init__(self, message: str, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.hint = hint

    def format_message(self) -> str:
        if self.hint:
            return f"{self.message}\nHint: {self.hint}"
        return self.message


def report(exc: UserError) -> None:
    """Print a UserError the way every command does."""
    click.echo(error(exc.message))


@contextmanager
def repository_session(save: bool = True) -> Iterator[Repository]:
    """
    Open the repository containing the current directory.

    Args:
        save: Whether to write staging and index state back on success

    Yields:
        The opened Repository
    """
    repo = Repository.find_repository()
    if repo is None:
        click.echo(error(NOT_A_REPOSITORY))
        click.get_current_context().exit(0)

    try:
        repo.open()
        yield repo
        if save:
            repo.save()
    except UserError as e:
        report(e)
    except IntegrityError as e:
        raise SprigCliError(
            e.message, hint=e.hint or "The repository store is damaged."
        ) from e
