# SPDX-License-Identifier: MIT
"""CLI command implementations."""

from . import migrate, references, validate, versions

__all__ = ["validate", "migrate", "versions", "references"]
