"""Command line entry point for collection-filter."""

import logging

import click

from .commands.collections import collections
from .logging_setup import init_json_logging
from .logging_setup import json_logging_requested

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(package_name="collection-filter")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Write JSONL logs to this file")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level for the JSONL log file",
)
def cli(log_file: str | None, log_level: str | None):
    """collection-filter - decide which configuration collections to watch."""
    if log_file or log_level or json_logging_requested():
        init_json_logging(path=log_file, level=log_level)
        logger.debug(f"JSONL logging enabled at level {log_level or 'default'}")


cli.add_command(collections)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
