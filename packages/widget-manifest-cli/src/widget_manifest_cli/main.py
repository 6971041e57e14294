# SPDX-License-Identifier: MIT
"""CLI entry point for the widget-manifest command."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from widget_manifest import ManifestDocument, ManifestError, ParseError, parse_file

from .config import CLIConfig, ConfigError, load_config


class Context:
    """CLI context object passed to commands."""

    def __init__(self) -> None:
        self.config: Optional[CLIConfig] = None
        self.verbose: bool = False
        self.project_dir: Optional[Path] = None

    def load_config(self) -> CLIConfig:
        """Load configuration, caching the result."""
        if self.config is None:
            self.config = load_config(self.project_dir)
        return self.config

    def resolve_manifest(self, path: Optional[Path]) -> Path:
        """Return the given manifest path or the configured default."""
        if path is not None:
            return path
        manifest = self.load_config().manifest
        if not manifest.exists():
            raise FileNotFoundError(f"Manifest not found: {manifest}")
        return manifest

    def read_manifest(self, path: Optional[Path]) -> ManifestDocument:
        """Parse a manifest, exiting with status 1 if it cannot be read."""
        try:
            manifest_path = self.resolve_manifest(path)
            echo_info(f"Reading: {manifest_path}")
            return parse_file(manifest_path)
        except (ConfigError, FileNotFoundError) as e:
            echo_error(str(e))
        except ParseError as e:
            echo_error(f"{e} [{e.kind}]")
        raise SystemExit(1)


pass_context = click.make_pass_decorator(Context, ensure=True)


def echo_error(message: str) -> None:
    """Print an error message to stderr."""
    click.secho(f"Error: {message}", fg="red", err=True)


def echo_success(message: str) -> None:
    """Print a success message."""
    click.secho(message, fg="green")


def echo_info(message: str) -> None:
    """Print an info message to stderr so stdout stays machine-readable."""
    click.echo(message, err=True)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.secho(f"Warning: {message}", fg="yellow", err=True)


@click.group()
@click.version_option(package_name="widget-manifest")
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose output.",
)
@click.option(
    "-C",
    "--directory",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Change to directory before running command.",
)
@pass_context
def cli(ctx: Context, verbose: bool, directory: Optional[Path]) -> None:
    """Web widget manifest tool.

    Validate manifests, migrate them to the latest schema revision, and
    inspect the references they declare.

    \b
    Examples:
        widget-manifest validate widget-manifest.json
        widget-manifest migrate --in-place
        widget-manifest versions
        widget-manifest references --package my-widget
    """
    ctx.verbose = verbose
    ctx.project_dir = directory
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Import and register commands
from .commands import migrate, references, validate, versions

cli.add_command(validate.validate)
cli.add_command(migrate.migrate)
cli.add_command(versions.versions)
cli.add_command(references.references)


def main() -> None:
    """Main entry point for the CLI."""
    try:
        cli()
    except ConfigError as e:
        echo_error(str(e))
        sys.exit(1)
    except ManifestError as e:
        echo_error(f"{e} [{e.kind}]")
        sys.exit(1)
    except FileNotFoundError as e:
        echo_error(str(e))
        sys.exit(1)
    except Exception as e:
        echo_error(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
