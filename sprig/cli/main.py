"""Main CLI entry point for Sprig."""

import logging

import click
from colorama import init

from sprig import __version__
from sprig.cli.output import BANNER, error, set_color
from sprig.cli.session import INCORRECT_OPERANDS
from sprig.cli.commands import (init_cmd, add_cmd, rm_cmd, commit_cmd, log_cmd,
                                global_log_cmd, find_cmd, status_cmd, checkout_cmd,
                                branch_cmd, rm_branch_cmd, reset_cmd, merge_cmd,
                                diff_cmd, config_cmd)
from sprig.core.config import get_config
from sprig.core.repository import Repository

# Initialize colorama for cross-platform colored output
init(autoreset=True)

LOG_FORMAT = "%(levelname)s:%(name)s:%(message)s"
NO_COMMAND = "Please enter a command."
UNKNOWN_COMMAND = "No command with that name exists."


class SprigGroup(click.Group):
    """
    Custom Group class to display banner before help.

    Misuse of the command line is reported as one line with a success
    exit status, like any other user error.
    """

    def format_help(self, ctx, formatter):
        """Override to add banner before help text."""
        click.echo(BANNER)
        super().format_help(ctx, formatter)

    def parse_args(self, ctx, args):
        if not args:
            click.echo(error(NO_COMMAND))
            ctx.exit(0)
        return super().parse_args(ctx, args)

    def resolve_command(self, ctx, args):
        name = args[0]
        if not name.startswith('-') and self.get_command(ctx, name) is None:
            click.echo(error(UNKNOWN_COMMAND))
            ctx.exit(0)
        return super().resolve_command(ctx, args)

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            # Errors from the group's own parsing keep click's usage output
            if e.ctx is ctx:
                raise
            click.echo(error(INCORRECT_OPERANDS))
            ctx.exit(0)


def configure_logging(level_name: str) -> None:
    """Send records of the sprig logger at LEVEL_NAME and above to stderr."""
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.getLogger('sprig').setLevel(level)


@click.group(cls=SprigGroup)
@click.version_option(version=__version__)
@click.option('-v', '--verbose', is_flag=True, help='Log debug output to stderr')
def cli(verbose):
    config = get_config(Repository.find_repository())
    set_color(config.color)
    configure_logging('DEBUG' if verbose else config.log_level)


# Register commands
cli.add_command(init_cmd)
cli.add_command(add_cmd)
cli.add_command(rm_cmd)
cli.add_command(commit_cmd)
cli.add_command(log_cmd)
cli.add_command(global_log_cmd)
cli.add_command(find_cmd)
cli.add_command(status_cmd)
cli.add_command(checkout_cmd)
cli.add_command(branch_cmd)
cli.add_command(rm_branch_cmd)
cli.add_command(reset_cmd)
cli.add_command(merge_cmd)
cli.add_command(diff_cmd)
cli.add_command(config_cmd)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
