"""Branch commands - create and delete branches."""

import click

from sprig.cli.output import success
from sprig.cli.session import repository_session


@click.command('branch')
@click.argument('name')
def branch_cmd(name):
    """
    Create branch NAME at the current commit.

    The current branch does not change.
    """
    with repository_session() as repo:
        repo.branch(name)
        click.echo(success(f"Created branch '{name}' at {repo.head_id[:7]}"))


@click.command('rm-branch')
@click.argument('name')
def rm_branch_cmd(name):
    """Delete the pointer of branch NAME. Its commits are kept."""
    with repository_session() as repo:
        repo.rm_branch(name)
        click.echo(success(f"Deleted branch '{name}'"))
