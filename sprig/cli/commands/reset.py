"""Reset command - move a branch head to a commit."""

import click

from sprig.cli.output import success
from sprig.cli.session import repository_session


@click.command('reset')
@click.argument('commit_id')
def reset_cmd(commit_id):
    """
    Check out every file of COMMIT_ID and move its branch head there.

    COMMIT_ID may be abbreviated. Staged changes are discarded.

    Examples:
        sprig reset a1b2c3d
    """
    with repository_session() as repo:
        commit_hash = repo.checkout.reset(commit_id)
        click.echo(success(f"HEAD is now at {commit_hash[:7]}"))
