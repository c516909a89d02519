"""hookadapter CLI main entry point.

This module provides the main CLI interface for hookadapter.
"""

import click

from hookadapter import __version__


@click.group()
@click.version_option(version=__version__, prog_name="hookadapter")
def cli() -> None:
    """hookadapter - hook engine for AI coding agents.

    Normalizes agent hook events, runs decision callbacks, and keeps a
    session-scoped execution log.
    """
    pass


# Import and register subcommands
from hookadapter.cli.hook import hook  # noqa: E402
from hookadapter.cli.log import log  # noqa: E402

cli.add_command(hook)
cli.add_command(log)
