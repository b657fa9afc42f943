"""Main CLI entry point."""

import logging
from pathlib import Path

import click
from dotenv import load_dotenv

from cosmos_tools import __version__

# Load .env from cwd
_env_file = Path.cwd() / ".env"
if _env_file.exists():
    load_dotenv(_env_file)


@click.group()
@click.version_option(version=__version__, prog_name="cosmos")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Cosmos CLI - Work with Azure Cosmos DB over its REST API."""
    from ..client import CosmosConfig

    level = "DEBUG" if verbose else CosmosConfig().log_level
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def setup_cli():
    """Register all commands."""
    from .collections import coll
    from .databases import db
    from .documents import doc
    from .offers import offer
    from .sign import sign

    cli.add_command(db)
    cli.add_command(coll)
    cli.add_command(doc)
    cli.add_command(offer)
    cli.add_command(sign)


setup_cli()


def main():
    """Entry point for cosmos CLI."""
    cli()


if __name__ == "__main__":
    main()
