"""Diff command - compare branches with each other or the working tree."""

import click

from sprig.cli.output import color_enabled
from sprig.cli.session import repository_session


@click.command('diff')
@click.argument('branches', nargs=-1)
def diff_cmd(branches):
    """
    Show line differences.

    Examples:
        sprig diff                  # Current branch vs working tree
        sprig diff feature          # A branch vs working tree
        sprig diff master feature   # One branch vs another
    """
    if len(branches) > 2:
        raise click.UsageError("diff takes at most two branches")

    with repository_session(save=False) as repo:
        engine = repo.diff
        if len(branches) == 2:
            diffs = engine.diff_branches(branches[0], branches[1])
        else:
            diffs = engine.diff_working(branches[0] if branches else None)

        if diffs:
            click.echo(engine.format_diff(diffs, color=color_enabled()))
