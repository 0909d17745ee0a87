"""style-capsule CLI entry point: Click group with subcommands."""

import logging

import click

from style_capsule import __version__


@click.group()
@click.version_option(version=__version__, prog_name="style-capsule")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """style-capsule - attribute-scoped CSS for components."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Import and register subcommands
from style_capsule.cli.scope import scope  # noqa: E402
from style_capsule.cli.build import build, clear  # noqa: E402

cli.add_command(scope)
cli.add_command(build)
cli.add_command(clear)
