"""Add command - stage a file for the next commit."""

import click

from sprig.cli.output import success
from sprig.cli.session import repository_session


@click.command('add')
@click.argument('filename')
def add_cmd(filename):
    """
    Stage the working copy of FILENAME.

    Adding a file that matches the current commit unstages it instead.

    Examples:
        sprig add notes.txt
    """
    with repository_session() as repo:
        repo.add(filename)
        if repo.add_stage.is_staged(filename):
            click.echo(success(f"Staged {filename}"))
