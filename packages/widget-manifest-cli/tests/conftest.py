# SPDX-License-Identifier: MIT
"""Pytest configuration and fixtures for CLI tests."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Callable

import pytest
from click.testing import CliRunner

V1_MANIFEST: dict[str, Any] = {
    "schemaVersion": "1.0.0",
    "modules": [
        {
            "kind": "web-widget-application",
            "path": "src/clock.js",
            "summary": "A clock",
            "declarations": [
                {
                    "data": {
                        "name": "settings",
                        "type": {"text": "Record<string, number>"},
                        "default": {"refresh": 1000},
                    }
                }
            ],
        }
    ],
}

V4_MANIFEST: dict[str, Any] = {
    "schemaVersion": "4.0.0",
    "modules": [
        {
            "kind": "web-widget-application",
            "path": "src/clock.js",
            "declaration": {
                "parameters": [
                    {
                        "name": "target",
                        "type": {
                            "text": "HTMLElement",
                            "references": [{"name": "HTMLElement", "package": "global:"}],
                        },
                    },
                    {
                        "name": "config",
                        "type": {"text": "ClockConfig", "references": [{"name": "ClockConfig"}]},
                    },
                ]
            },
        }
    ],
}


def _write(path: Path, manifest: dict[str, Any]) -> Path:
    path.write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def v4_manifest() -> dict[str, Any]:
    """A fresh copy of a valid 4.0.0 manifest."""
    return copy.deepcopy(V4_MANIFEST)


@pytest.fixture
def write_manifest(tmp_path: Path) -> Callable[..., Path]:
    """Write a manifest dictionary to a file in tmp_path."""

    def write(manifest: dict[str, Any], name: str = "manifest.json") -> Path:
        return _write(tmp_path / name, manifest)

    return write


@pytest.fixture
def v1_manifest_file(tmp_path: Path) -> Path:
    """A valid 1.0.0 manifest on disk."""
    return _write(tmp_path / "old-manifest.json", V1_MANIFEST)


@pytest.fixture
def v4_manifest_file(tmp_path: Path) -> Path:
    """A valid 4.0.0 manifest on disk."""
    return _write(tmp_path / "widget-manifest.json", V4_MANIFEST)


@pytest.fixture
def temp_project(tmp_path: Path) -> Path:
    """Create a project directory with pyproject.toml and a default manifest."""
    project_dir = tmp_path / "clock_widget"
    project_dir.mkdir()

    pyproject = project_dir / "pyproject.toml"
    pyproject.write_text(
        """[project]
name = "clock-widget"
version = "1.0.0"

[tool.widget-manifest]
manifest = "widget-manifest.json"
"""
    )

    _write(project_dir / "widget-manifest.json", V1_MANIFEST)
    return project_dir
