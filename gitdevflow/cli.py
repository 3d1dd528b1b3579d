#!/usr/bin/env python3

import click

from gitdevflow.commands.resolve import resolve_handler, descriptor_handler
from gitdevflow.commands.config import config_cmd


@click.group()
@click.version_option(package_name='gitdevflow')
def cli():
    """gitdevflow - Semantic versions from git history.

    Derives the next version from the current branch, the nearest
    release tag and the conventional commits made since.
    """
    pass


cli.add_command(resolve_handler, name='resolve')
cli.add_command(descriptor_handler, name='descriptor')
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
