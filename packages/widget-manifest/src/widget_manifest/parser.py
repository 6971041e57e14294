# SPDX-License-Identifier: MIT
"""Parsing and serialization of manifest documents."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from .errors import ErrorKind, ParseError
from .model import ManifestDocument
from .registry import REGISTRY, VersionRegistry

VERSION_FIELD = "schemaVersion"


def load(data: Any, registry: VersionRegistry | None = None) -> ManifestDocument:
    """Create a document from already decoded JSON.

    Args:
        data: The decoded JSON value
        registry: Registry used to select the rule set (default registry if None)

    Returns:
        A ManifestDocument tagged with the rule set of its ``schemaVersion``

    Raises:
        ParseError: If the value is not an object or its version is missing,
            malformed, or not registered
    """
    if registry is None:
        registry = REGISTRY

    if not isinstance(data, Mapping):
        raise ParseError(
            f"Manifest must be a JSON object, got {type(data).__name__}",
            ErrorKind.NOT_AN_OBJECT,
        )
    if VERSION_FIELD not in data:
        raise ParseError(
            f"Missing required field: {VERSION_FIELD}", ErrorKind.MISSING_VERSION, VERSION_FIELD
        )

    version = data[VERSION_FIELD]
    if not isinstance(version, str):
        raise ParseError(
            f"{VERSION_FIELD} must be a string, got {type(version).__name__}",
            ErrorKind.INVALID_VERSION,
            VERSION_FIELD,
        )

    rule_set = registry.lookup(version)
    if rule_set is None:
        known = ", ".join(registry.versions())
        raise ParseError(
            f"Unknown schema version {version!r} (known versions: {known})",
            ErrorKind.UNKNOWN_VERSION,
            VERSION_FIELD,
        )
    return ManifestDocument(data, rule_set)


def parse(text: str | bytes, registry: VersionRegistry | None = None) -> ManifestDocument:
    """Parse manifest JSON text.

    Args:
        text: UTF-8 JSON text
        registry: Registry used to select the rule set (default registry if None)

    Raises:
        ParseError: If the text is not valid JSON or has no registered version

    Example:
        >>> document = parse('{"schemaVersion": "2.0.0", "path": "widget.js"}')
        >>> document.schema_version
        '2.0.0'
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(f"Invalid JSON syntax: {e}", ErrorKind.INVALID_JSON) from e
    return load(data, registry)


def parse_file(path: str | Path, registry: VersionRegistry | None = None) -> ManifestDocument:
    """Read and parse a manifest file.

    Raises:
        FileNotFoundError: If the file does not exist
        ParseError: If the content is not a registered manifest
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Manifest not found: {path}")
    return parse(path.read_bytes(), registry)


def serialize(document: ManifestDocument, indent: int | None = 2) -> str:
    """Serialize a document back to JSON text.

    Keys are kept in document order, and absent fields stay absent.
    """
    return json.dumps(document.to_dict(), indent=indent, ensure_ascii=False) + "\n"
