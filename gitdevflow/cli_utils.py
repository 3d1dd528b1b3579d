"""
Common CLI utilities and decorators for consistent command behavior.
"""

import json
import sys
import click
from functools import wraps
from typing import Any

from .config import configure_logging, load_config
from .exit_codes import (
    SUCCESS, INTERRUPTED,
    get_exit_code_for_exception, CommandError
)


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Loads the configuration and injects it as `config`
    - Configures logging on stderr (-v/--verbose switches to DEBUG)
    - Prints the returned value on stdout
    - Consistent error handling and exit codes
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        verbose = kwargs.get('verbose', False)
        try:
            config = load_config()
            configure_logging(config, verbose=verbose)
            kwargs['config'] = config

            result = func(*args, **kwargs)
            if result is not None:
                output_result(result)
            sys.exit(SUCCESS)

        except KeyboardInterrupt:
            click.echo("Interrupted by user", err=True)
            sys.exit(INTERRUPTED)
        except click.ClickException:
            raise
        except CommandError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(e.exit_code)
        except Exception as e:
            click.echo(f"Command failed: {e}", err=True)
            sys.exit(get_exit_code_for_exception(e))

    return wrapper


def output_result(result: Any):
    """
    Standard output handler for results.

    Strings are printed as-is; dicts and lists as single-line JSON.
    """
    if isinstance(result, str):
        print(result, flush=True)
    else:
        print(json.dumps(result, ensure_ascii=False), flush=True)


# Standard options that many commands share
common_options = {
    'verbose': click.option('-v', '--verbose', is_flag=True,
                            help='Log every resolution step to stderr'),
    'json': click.option('--json', 'as_json', is_flag=True,
                         help='Output the full resolution as one JSON line'),
    'table': click.option('--table', is_flag=True,
                          help='Display the resolution as a formatted table'),
}


def add_common_options(*option_names):
    """
    Decorator to add common options to a command.

    Example:
        @add_common_options('verbose', 'json')
        def my_command(verbose, as_json):
            ...
    """
    def decorator(func):
        for name in reversed(option_names):
            if name in common_options:
                func = common_options[name](func)
        return func
    return decorator
