"""CLI commands: style-capsule build / clear -- manage pre-built CSS files."""

from __future__ import annotations

import importlib
import sys
from dataclasses import replace

import click

from style_capsule.builder import ComponentBuilder
from style_capsule.config import StyleCapsuleConfig
from style_capsule.writer import CssFileWriter


def _writer(output_dir: str | None) -> CssFileWriter:
    config = StyleCapsuleConfig.from_env()
    if output_dir:
        config = replace(config, output_dir=output_dir)
    return CssFileWriter(config)


@click.command()
@click.option("--output-dir", default=None, help="Directory for generated CSS files.")
@click.option(
    "-m",
    "--module",
    "modules",
    multiple=True,
    help="Module defining components (repeatable). Imported before building.",
)
def build(output_dir: str | None, modules: tuple[str, ...]) -> None:
    """Write CSS files for every component that uses file caching."""
    for name in modules:
        try:
            importlib.import_module(name)
        except ImportError as exc:
            click.echo(f"Cannot import {name}: {exc}", err=True)
            sys.exit(1)

    builder = ComponentBuilder(writer=_writer(output_dir))
    count = builder.build_all(output=click.echo)
    click.echo(f"{count} file(s) generated")


@click.command()
@click.option("--output-dir", default=None, help="Directory holding generated CSS files.")
def clear(output_dir: str | None) -> None:
    """Delete previously generated CSS files."""
    removed = _writer(output_dir).clear_files()
    click.echo(f"Removed {removed} file(s)")
