"""Initialize a new Sprig repository."""

from pathlib import Path

import click

from sprig.cli.output import info, success
from sprig.cli.session import report
from sprig.core.errors import UserError
from sprig.core.repository import Repository


@click.command('init')
@click.option('-b', '--initial-branch', 'branch', default=None,
              help='Name of the first branch (defaults to init.defaultbranch)')
def init_cmd(branch):
    """
    Initialize a new Sprig repository.

    Creates a .sprig directory in the current directory and records the
    initial commit.

    Examples:
        sprig init
        sprig init -b main
    """
    repo = Repository(str(Path.cwd()))
    try:
        repo.init(default_branch=branch)
    except UserError as e:
        report(e)
        return

    click.echo(success(f"Initialized empty Sprig repository in {repo.sprig_dir}"))
    click.echo(info(f"On branch {repo.current_branch}"))
