# SPDX-License-Identifier: MIT
"""Command line interface for web widget manifests."""

__version__ = "0.1.0"
