# SPDX-License-Identifier: MIT
"""Validate a widget manifest against its schema revision."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import click

from widget_manifest import ValidationErrorDetail, ValidationResult, validate as validate_document

from ..main import Context, echo_error, echo_info, echo_success, echo_warning, pass_context


def _detail_to_dict(detail: ValidationErrorDetail) -> dict[str, str]:
    return {"kind": str(detail.kind), "field": detail.field, "message": detail.message}


def _report_json(result: ValidationResult, passed: bool) -> None:
    document = result.document
    click.echo(
        json.dumps(
            {
                "valid": passed,
                "schemaVersion": document.schema_version if document else None,
                "errors": [_detail_to_dict(e) for e in result.errors],
                "warnings": [_detail_to_dict(w) for w in result.warnings],
            },
            indent=2,
        )
    )


def _report_text(result: ValidationResult) -> None:
    echo_info("")

    if result.warnings:
        echo_warning(f"Warnings ({len(result.warnings)}):")
        for warning in result.warnings:
            echo_warning(f"  - [{warning.field}] {warning.message} ({warning.kind})")

    if result.errors:
        echo_error(f"Errors ({len(result.errors)}):")
        for error in result.errors:
            echo_error(f"  - [{error.field}] {error.message} ({error.kind})")


@click.command()
@click.argument(
    "manifest",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--strict",
    is_flag=True,
    help="Treat warnings as errors (also enabled by strict = true in config).",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Report format.",
)
@pass_context
def validate(
    ctx: Context,
    manifest: Optional[Path],
    strict: bool,
    output_format: str,
) -> None:
    """Validate a manifest.

    Checks the manifest against the rules of its schemaVersion and reports
    every error and warning found. Unrecognized fields are warnings.

    \b
    Examples:
        widget-manifest validate                      # Validate configured manifest
        widget-manifest validate widget-manifest.json # Validate specific manifest
        widget-manifest validate --strict             # Treat warnings as errors
    """
    document = ctx.read_manifest(manifest)
    strict = strict or ctx.load_config().strict
    echo_info(f"  Schema version: {document.schema_version}")

    result = validate_document(document)
    passed = result.valid and not (strict and result.warnings)

    if output_format == "json":
        _report_json(result, passed)
    else:
        _report_text(result)

    if not result.valid:
        echo_error("Validation failed!")
        raise SystemExit(1)

    if result.warnings and strict:
        echo_error("Validation failed (strict mode)!")
        raise SystemExit(1)

    if output_format == "text":
        if result.warnings:
            echo_success("Validation passed with warnings.")
        else:
            echo_success("Validation passed!")
