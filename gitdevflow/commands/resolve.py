"""
Handles the 'resolve' and 'descriptor' commands.

Default output is the bare version string so the command can be used in
build scripts:

    VERSION=$(gitdevflow resolve)
"""

import click
from pathlib import Path

from ..api import resolve_version_from_descriptor
from ..cli_utils import standard_command, add_common_options
from ..render import render_resolution_table
from ..services.version_service import VersionService


@click.command(name='resolve')
@click.argument('path', default='.', required=False, type=click.Path(file_okay=False))
@add_common_options('verbose', 'json', 'table')
@standard_command
def resolve_handler(path, verbose, as_json, table, config):
    """Print the version of the working directory at PATH.

    PATH: Directory inside a git working tree (default: current directory)

    \b
    Output:
    - MAJOR.MINOR.PATCH on release branches (master)
    - BASE.TYPE.MAJOR.MINOR.PATCH on hotfix-BASE / support-BASE branches
    - BRANCH-SNAPSHOT on any other branch
    - unknown-SNAPSHOT when no version can be determined

    Examples:

    \b
        gitdevflow resolve                 # Current directory
        gitdevflow resolve ~/src/project   # Another working tree
        gitdevflow resolve --json          # Include base tag, bump and commits
        gitdevflow resolve --table -v      # Human-readable, with debug logging
    """
    resolution = VersionService(config=config).resolve(Path(path).expanduser())
    if table:
        render_resolution_table(resolution)
        return None
    if as_json:
        return resolution.to_dict()
    return resolution.version


@click.command(name='descriptor')
@click.argument('descriptor_path', type=click.Path())
@add_common_options('verbose')
@standard_command
def descriptor_handler(descriptor_path, verbose, config):
    """Print the version for a build descriptor such as pyproject.toml.

    The version is resolved for the directory containing DESCRIPTOR_PATH.
    """
    return resolve_version_from_descriptor(Path(descriptor_path).expanduser(), config=config)
