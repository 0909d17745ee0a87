"""CLI command: style-capsule scope -- scope a CSS file to one capsule."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from style_capsule.css import ScopingStrategy, scope_css
from style_capsule.errors import StyleCapsuleError


@click.command()
@click.argument("cssfile", type=click.Path(exists=True, dir_okay=False))
@click.option("--capsule-id", required=True, help="Capsule id to scope the CSS to.")
@click.option(
    "--strategy",
    type=click.Choice([s.value for s in ScopingStrategy]),
    default=ScopingStrategy.SELECTOR_PATCHING.value,
    show_default=True,
    help="Scoping strategy.",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the scoped CSS here instead of stdout.",
)
def scope(cssfile: str, capsule_id: str, strategy: str, output: str | None) -> None:
    """Rewrite CSSFILE so its rules only apply inside the capsule.

    Exits with code 1 if the CSS is too large or the capsule id is invalid.
    """
    source = Path(cssfile).read_text(encoding="utf-8")
    try:
        scoped = scope_css(source, capsule_id, strategy)
    except StyleCapsuleError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if output is None:
        click.echo(scoped, nl=False)
        return
    Path(output).write_text(scoped, encoding="utf-8")
    click.echo(f"Wrote {output}")
