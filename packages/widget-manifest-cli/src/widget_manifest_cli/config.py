# SPDX-License-Identifier: MIT
"""CLI configuration loading from pyproject.toml."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from widget_manifest import REGISTRY

DEFAULT_MANIFEST_NAME = "widget-manifest.json"
TOOL_SECTION = "widget-manifest"


class ConfigError(Exception):
    """Raised when configuration loading fails."""

    pass


@dataclass
class CLIConfig:
    """CLI configuration loaded from ``[tool.widget-manifest]`` in pyproject.toml.

    Attributes:
        project_dir: Directory the configuration applies to
        manifest: Manifest path used when a command is given none
        strict: Treat validation warnings as errors
        target_version: Schema version ``migrate`` targets by default
        package: Package name used to scope local references
    """

    project_dir: Path
    manifest: Path
    strict: bool = False
    target_version: Optional[str] = None
    package: Optional[str] = None

    @classmethod
    def defaults(cls, project_dir: str | Path) -> "CLIConfig":
        project_path = Path(project_dir)
        return cls(project_dir=project_path, manifest=project_path / DEFAULT_MANIFEST_NAME)

    @classmethod
    def from_pyproject(cls, project_dir: str | Path) -> "CLIConfig":
        """Load configuration from pyproject.toml.

        Args:
            project_dir: Directory containing pyproject.toml

        Returns:
            CLIConfig instance

        Raises:
            ConfigError: If the file is invalid or holds invalid settings
            FileNotFoundError: If pyproject.toml doesn't exist
        """
        project_path = Path(project_dir)
        pyproject_path = project_path / "pyproject.toml"

        if not pyproject_path.exists():
            raise FileNotFoundError(f"pyproject.toml not found in {project_path}")

        try:
            with open(pyproject_path, "rb") as f:
                pyproject = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML syntax: {e}") from e

        return cls.from_pyproject_dict(pyproject, project_path)

    @classmethod
    def from_pyproject_dict(
        cls,
        pyproject: dict[str, Any],
        project_dir: Path,
    ) -> "CLIConfig":
        """Create CLIConfig from a parsed pyproject.toml dictionary.

        Args:
            pyproject: Parsed pyproject.toml as a dictionary
            project_dir: Directory containing pyproject.toml

        Returns:
            CLIConfig instance

        Raises:
            ConfigError: If a setting has the wrong type or names an unknown version
        """
        section = pyproject.get("tool", {}).get(TOOL_SECTION, {})
        if not isinstance(section, dict):
            raise ConfigError(f"[tool.{TOOL_SECTION}] must be a table")

        manifest = section.get("manifest", DEFAULT_MANIFEST_NAME)
        if not isinstance(manifest, str) or not manifest:
            raise ConfigError(f"[tool.{TOOL_SECTION}].manifest must be a non-empty string")

        strict = section.get("strict", False)
        if not isinstance(strict, bool):
            raise ConfigError(f"[tool.{TOOL_SECTION}].strict must be a boolean")

        target_version = section.get("target-version")
        if target_version is not None and target_version not in REGISTRY:
            known = ", ".join(REGISTRY.versions())
            raise ConfigError(
                f"[tool.{TOOL_SECTION}].target-version {target_version!r} is not a known "
                f"schema version (known versions: {known})"
            )

        package = section.get("package")
        if package is None:
            package = pyproject.get("project", {}).get("name")
        if package is not None and not isinstance(package, str):
            raise ConfigError(f"[tool.{TOOL_SECTION}].package must be a string")

        return cls(
            project_dir=project_dir,
            manifest=project_dir / manifest,
            strict=strict,
            target_version=target_version,
            package=package,
        )


def load_config(project_dir: Optional[str | Path] = None) -> CLIConfig:
    """Load CLI configuration for a project directory.

    Falls back to defaults when the directory has no pyproject.toml.

    Args:
        project_dir: Project directory (defaults to the current directory)

    Returns:
        CLIConfig instance

    Raises:
        ConfigError: If configuration cannot be loaded
    """
    project_path = Path(project_dir) if project_dir else Path.cwd()

    if (project_path / "pyproject.toml").exists():
        return CLIConfig.from_pyproject(project_path)
    return CLIConfig.defaults(project_path)
