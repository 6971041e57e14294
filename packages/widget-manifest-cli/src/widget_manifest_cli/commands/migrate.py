# SPDX-License-Identifier: MIT
"""Migrate a widget manifest to a newer schema revision."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from widget_manifest import REGISTRY, migrate as migrate_document, serialize

from ..main import Context, echo_error, echo_info, echo_success, echo_warning, pass_context


@click.command()
@click.argument(
    "manifest",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--to",
    "target_version",
    type=click.Choice(REGISTRY.versions()),
    help="Schema version to migrate to (default: latest).",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the migrated manifest to this file instead of stdout.",
)
@click.option(
    "--in-place",
    "-i",
    is_flag=True,
    help="Overwrite the input manifest.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Check that migration succeeds without writing anything.",
)
@pass_context
def migrate(
    ctx: Context,
    manifest: Optional[Path],
    target_version: Optional[str],
    output: Optional[Path],
    in_place: bool,
    dry_run: bool,
) -> None:
    """Migrate a manifest forward to a newer schema version.

    The source and each intermediate revision are validated; if any fails nothing is
    written and the failing step is reported.

    \b
    Examples:
        widget-manifest migrate widget-manifest.json       # Print migrated manifest
        widget-manifest migrate --in-place                 # Rewrite configured manifest
        widget-manifest migrate old.json --to 3.0.0 -o new.json
    """
    if output is not None and in_place:
        echo_error("--output and --in-place cannot be used together")
        raise SystemExit(1)

    document = ctx.read_manifest(manifest)
    target = target_version or ctx.load_config().target_version or REGISTRY.latest.version

    if document.schema_version == target:
        echo_warning(f"Manifest already uses schema version {target}.")

    echo_info(f"Migrating from {document.schema_version} to {target}...")
    result = migrate_document(document, target)

    if result.error is not None:
        error = result.error
        echo_error(f"Migration failed at step {error.source_version}->{error.target_version}:")
        echo_error(f"  [{error.field}] {error} ({error.kind})")
        for detail in error.details:
            echo_error(f"  - [{detail.field}] {detail.message} ({detail.kind})")
        raise SystemExit(1)

    for label in result.applied:
        echo_info(f"  Applied {label}")

    text = serialize(result.document)

    if dry_run:
        echo_warning("Dry run - no files written.")
        return

    destination = ctx.resolve_manifest(manifest) if in_place else output
    if destination is None:
        click.echo(text, nl=False)
        return

    destination.write_text(text, encoding="utf-8")
    echo_success(f"Migration complete. Wrote: {destination}")
