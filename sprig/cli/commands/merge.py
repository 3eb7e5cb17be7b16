"""Merge command - merge another branch into the current one."""

import click

from sprig.cli.output import info, success, warning
from sprig.cli.session import repository_session


@click.command('merge')
@click.argument('branch')
def merge_cmd(branch):
    """
    Merge BRANCH into the current branch.

    Files changed on only one side are merged automatically. Files changed
    differently on both sides are written with conflict markers, staged,
    and committed as part of the merge.

    Examples:
        sprig merge feature
    """
    with repository_session() as repo:
        result = repo.merge.merge(branch)

        if result.fast_forward:
            click.echo(info(result.message))
        elif result.conflicts:
            click.echo(warning(result.message))
            for name in result.conflicts:
                click.echo(warning(f"  {name}"))
        else:
            click.echo(success(result.message))
