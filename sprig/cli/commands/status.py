"""Status command - show branches, staging and working tree state."""

import click
from colorama import Fore

from sprig.cli.output import color_enabled, heading
from sprig.cli.session import repository_session
from sprig.operations.status import compute_status


def _section(title, entries, color=None):
    click.echo(heading(title))
    for entry in entries:
        if color and color_enabled():
            entry = f"{color}{entry}{Fore.RESET}"
        click.echo(entry)
    click.echo()


@click.command('status')
def status_cmd():
    """
    Show the working tree status.

    Lists branches (the current one marked with *), files staged for
    addition and removal, unstaged modifications and untracked files.
    """
    with repository_session(save=False) as repo:
        report = compute_status(repo)

        _section("Branches", [f"*{name}" if current else name
                              for name, current in report.branches])
        _section("Staged Files", report.staged, Fore.GREEN)
        _section("Removed Files", report.removed, Fore.RED)
        _section("Modifications Not Staged For Commit", report.modified, Fore.RED)
        _section("Untracked Files", report.untracked, Fore.RED)
