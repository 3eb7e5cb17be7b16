"""Rm command - unstage a file or stage its removal."""

import click

from sprig.cli.output import success
from sprig.cli.session import repository_session


@click.command('rm')
@click.argument('filename')
def rm_cmd(filename):
    """
    Unstage FILENAME; if the current commit tracks it, stage it for
    removal and delete the working copy.
    """
    with repository_session() as repo:
        repo.rm(filename)
        if repo.remove_stage.is_staged(filename):
            click.echo(success(f"Staged {filename} for removal"))
