"""Config command - manage repository configuration."""

import click

from sprig.cli.output import error, info, success
from sprig.core.config import get_config, split_key
from sprig.core.repository import Repository


def _config_for(is_global):
    if is_global:
        return get_config()
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not in an initialized Sprig directory (use --global for global config)"))
        raise click.Abort()
    return get_config(repo)


@click.group('config')
def config_cmd():
    """Get and set repository or global options."""
    pass


@config_cmd.command('set')
@click.argument('key')
@click.argument('value')
@click.option('--global', 'is_global', is_flag=True, help='Set global config')
def config_set(key, value, is_global):
    """
    Set a config value.

    Examples:
        sprig config set init.defaultbranch main
        sprig config set --global color.ui false
    """
    section, option = split_key(key)
    _config_for(is_global).set(section, option, value, global_config=is_global)

    scope = "global" if is_global else "repository"
    click.echo(success(f"Set {scope} config: {key} = {value}"))


@config_cmd.command('get')
@click.argument('key')
def config_get(key):
    """
    Get a config value.

    Environment variables (SPRIG_<SECTION>_<KEY>) take precedence over the
    repository config, which takes precedence over the global config.
    """
    repo = Repository.find_repository()
    section, option = split_key(key)
    value = get_config(repo).get(section, option)

    if value is None:
        click.echo(error(f"Config key not found: {key}"))
        raise click.Abort()
    click.echo(value)


@config_cmd.command('unset')
@click.argument('key')
@click.option('--global', 'is_global', is_flag=True, help='Unset global config')
def config_unset(key, is_global):
    """Remove a config value."""
    section, option = split_key(key)
    if _config_for(is_global).unset(section, option, global_config=is_global):
        click.echo(success(f"Unset {key}"))
    else:
        click.echo(error(f"Config key not found: {key}"))
        raise click.Abort()


@config_cmd.command('list')
@click.option('--global', 'is_global', is_flag=True, help='List global config only')
def config_list(is_global):
    """
    List all config values.

    Examples:
        sprig config list
        sprig config list --global
    """
    repo = None if is_global else Repository.find_repository()
    values = get_config(repo).list_all(global_only=is_global)

    if not values:
        click.echo(info("No configuration set"))
        return

    for section in sorted(values):
        for key, value in values[section].items():
            click.echo(f"{section}.{key}={value}")
