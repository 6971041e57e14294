# SPDX-License-Identifier: MIT
"""List the registered manifest schema versions."""

from __future__ import annotations

import click

from widget_manifest import REGISTRY


@click.command()
def versions() -> None:
    """List known schema versions, oldest first."""
    latest = REGISTRY.latest.version
    for rule_set in REGISTRY:
        marker = " (latest)" if rule_set.version == latest else ""
        click.echo(f"{rule_set.version}{marker}  {rule_set.description}")
