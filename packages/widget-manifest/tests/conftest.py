# SPDX-License-Identifier: MIT
"""Shared manifest fixtures for library tests."""

from __future__ import annotations

from typing import Any

import pytest


@pytest.fixture
def v1_manifest() -> dict[str, Any]:
    """A complete 1.0.0 manifest with one module and one declaration."""
    return {
        "schemaVersion": "1.0.0",
        "readme": "README.md",
        "modules": [
            {
                "kind": "web-widget-application",
                "path": "src/clock.js",
                "summary": "A clock",
                "description": "Shows the current time.",
                "declarations": [
                    {
                        "parameters": [
                            {
                                "name": "timezone",
                                "type": {"text": "string"},
                                "default": "UTC",
                                "optional": True,
                            }
                        ],
                        "slots": [{"name": "", "summary": "Default slot"}],
                        "cssProperties": [
                            {"name": "--clock-color", "syntax": "<color>", "default": "black"}
                        ],
                        "data": {
                            "name": "settings",
                            "type": {"text": "Record<string, number>"},
                            "default": {"refresh": 1000},
                        },
                    }
                ],
            }
        ],
    }


@pytest.fixture
def v2_manifest() -> dict[str, Any]:
    """A complete 2.0.0 manifest."""
    return {
        "schemaVersion": "2.0.0",
        "name": "clock",
        "path": "src/clock.js",
        "summary": "A clock",
        "icons": [{"path": "icons/clock.png", "sizes": "48x48", "type": "image/png"}],
        "declaration": {
            "parameters": [{"name": "timezone", "type": {"text": "string"}}],
            "data": {
                "name": "settings",
                "type": {"text": "'12h' | '24h'"},
                "default": "24h",
            },
        },
    }


@pytest.fixture
def v3_manifest() -> dict[str, Any]:
    """A complete 3.0.0 manifest."""
    return {
        "schemaVersion": "3.0.0",
        "name": "clock",
        "path": "src/clock.js",
        "declaration": {"portals": [{"name": "popup"}]},
        "dataSchema": {
            "name": "settings",
            "schema": {"type": "object", "properties": {"refresh": {"type": "integer"}}},
            "default": {"refresh": 1000},
        },
        "dataUserInterface": {"path": "src/clock-editor.js"},
    }


@pytest.fixture
def v4_manifest() -> dict[str, Any]:
    """A complete 4.0.0 manifest."""
    return {
        "schemaVersion": "4.0.0",
        "readme": "README.md",
        "modules": [
            {
                "kind": "web-widget-application",
                "path": "src/clock.js",
                "name": "clock",
                "icons": [{"path": "icons/clock.svg", "sizes": "any"}],
                "declaration": {
                    "parameters": [
                        {
                            "name": "target",
                            "type": {
                                "text": "HTMLElement | null",
                                "references": [
                                    {
                                        "name": "HTMLElement",
                                        "package": "global:",
                                        "start": 0,
                                        "end": 11,
                                    }
                                ],
                            },
                        }
                    ],
                    "data": {
                        "name": "settings",
                        "schema": {"type": "object"},
                        "default": {},
                    },
                },
                "dataUserInterface": {
                    "path": "src/clock-editor.js",
                    "fallbackPath": "src/fallback.js",
                },
            }
        ],
    }
