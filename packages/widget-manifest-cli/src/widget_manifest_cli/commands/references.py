# SPDX-License-Identifier: MIT
"""List the symbol references a widget manifest declares."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from widget_manifest import iter_references

from ..main import Context, echo_info, pass_context


@click.command()
@click.argument(
    "manifest",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--package",
    "-p",
    help="Name of the package the manifest describes (default: from config).",
)
@pass_context
def references(ctx: Context, manifest: Optional[Path], package: Optional[str]) -> None:
    """Print each type reference with its normalized identifier.

    \b
    Examples:
        widget-manifest references widget-manifest.json
        widget-manifest references --package my-widget
    """
    document = ctx.read_manifest(manifest)
    package = package or ctx.load_config().package

    count = 0
    for reference, resolved in iter_references(document, package=package):
        click.echo(f"{reference.field_path}\t{resolved.scope.value}\t{resolved.identifier}")
        count += 1

    echo_info(f"{count} reference(s)")
