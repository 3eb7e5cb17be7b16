"""Commit command - record staged changes."""

import click

from sprig.cli.output import success
from sprig.cli.session import repository_session


@click.command('commit')
@click.argument('message', default='')
def commit_cmd(message):
    """
    Record the staged changes with MESSAGE.

    Examples:
        sprig commit "Add notes"
    """
    with repository_session() as repo:
        commit_hash = repo.commit(message)
        click.echo(success(f"[{repo.current_branch} {commit_hash[:7]}] {message}"))
