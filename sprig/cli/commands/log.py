"""Log commands - show commit history."""

import click
from colorama import Fore

from sprig.cli.output import color_enabled
from sprig.cli.session import repository_session
from sprig.core.objects import Commit


def format_entry(commit_hash: str, commit: Commit) -> str:
    """Render one log entry, including its trailing blank line."""
    header = f"commit {commit_hash}"
    if color_enabled():
        header = f"{Fore.YELLOW}{header}{Fore.RESET}"

    lines = ["===", header]
    if commit.is_merge:
        lines.append(f"Merge: {commit.parent1[:7]} {commit.parent2[:7]}")
    lines.append(f"Date: {commit.date}")
    lines.append(commit.message)
    lines.append("")
    return "\n".join(lines)


@click.command('log')
def log_cmd():
    """
    Show the history of the current branch.

    Follows first parents from the current commit back to the initial
    commit, newest first.
    """
    with repository_session(save=False) as repo:
        for commit_hash, commit in repo.log():
            click.echo(format_entry(commit_hash, commit))


@click.command('global-log')
def global_log_cmd():
    """Show every commit ever made, on any branch."""
    with repository_session(save=False) as repo:
        for commit_hash, commit in repo.global_log():
            click.echo(format_entry(commit_hash, commit))


@click.command('find')
@click.argument('message')
def find_cmd(message):
    """Print the ids of all commits whose message is exactly MESSAGE."""
    with repository_session(save=False) as repo:
        for commit_hash in repo.find(message):
            click.echo(commit_hash)
