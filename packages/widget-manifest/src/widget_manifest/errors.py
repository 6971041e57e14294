# SPDX-License-Identifier: MIT
"""Error taxonomy for widget manifest processing.

Fatal problems are raised as exceptions derived from ManifestError. Non-fatal
structural defects are collected as ValidationErrorDetail records so that a
single validation run reports every defect at once.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable

if TYPE_CHECKING:
    from .model import ManifestDocument


class ErrorKind(str, Enum):
    """Stable machine-readable identifiers for every reported problem."""

    # Parsing
    INVALID_JSON = "invalid-json"
    NOT_AN_OBJECT = "not-an-object"
    MISSING_VERSION = "missing-version"
    INVALID_VERSION = "invalid-version"
    UNKNOWN_VERSION = "unknown-version"

    # Validation errors
    MISSING_FIELD = "missing-field"
    INVALID_TYPE = "invalid-type"
    INVALID_VALUE = "invalid-value"
    INVALID_FORMAT = "invalid-format"
    PATTERN_MISMATCH = "pattern-mismatch"
    INVALID_SCHEMA = "invalid-schema"
    DEFAULT_MISMATCH = "default-mismatch"
    REFERENCE_INCOMPLETE_RANGE = "reference-incomplete-range"
    REFERENCE_OUT_OF_RANGE = "reference-out-of-range"

    # Validation warnings
    UNKNOWN_FIELD = "unknown-field"
    UI_WITHOUT_SCHEMA = "ui-without-schema"
    DUPLICATE_NAME = "duplicate-name"
    REFERENCE_NAME_MISMATCH = "reference-name-mismatch"

    # Migration
    MULTIPLICITY = "multiplicity"
    MISSING_MODULE = "missing-module"
    UNMAPPABLE_TYPE = "unmappable-type"
    INVALID_SOURCE = "invalid-source"
    INVALID_INTERMEDIATE = "invalid-intermediate"
    UNKNOWN_TARGET = "unknown-target"
    BACKWARD_MIGRATION = "backward-migration"

    # References and registry
    INVALID_REFERENCE = "invalid-reference"
    DUPLICATE_VERSION = "duplicate-version"

    def __str__(self) -> str:
        return self.value


ROOT_FIELD = "<root>"


def format_path(parts: Iterable[str | int]) -> str:
    """Render path segments as a readable field path, e.g. ``modules[0].path``."""
    rendered = []
    for part in parts:
        if isinstance(part, int):
            rendered.append(f"[{part}]")
        elif rendered:
            rendered.append(f".{part}")
        else:
            rendered.append(str(part))
    return "".join(rendered) or ROOT_FIELD


def join_path(prefix: str, *parts: str | int) -> str:
    """Extend an already rendered field path with more segments."""
    tail = format_path(parts)
    if not prefix or prefix == ROOT_FIELD:
        return tail
    if tail.startswith("["):
        return prefix + tail
    return f"{prefix}.{tail}"


@dataclass(frozen=True, slots=True)
class ValidationErrorDetail:
    """Details about a single validation problem.

    Attributes:
        kind: Stable identifier of the problem
        field: Path to the offending value (e.g. "declaration.data.default")
        message: Human-readable error message
        value: The offending value, when available
    """

    kind: ErrorKind
    field: str
    message: str
    value: Any = None

    def __str__(self) -> str:
        return f"[{self.field}] {self.message}"


class ManifestError(Exception):
    """Base exception for manifest-related errors.

    Attributes:
        kind: Stable identifier of the failure
        field: Path to the offending value, or "<root>"
    """

    def __init__(self, message: str, kind: ErrorKind, field: str = ROOT_FIELD):
        self.kind = kind
        self.field = field
        super().__init__(message)


class ParseError(ManifestError):
    """Raised when text cannot become a ManifestDocument.

    Covers malformed JSON and unregistered schema versions. No document is
    produced when this is raised.
    """

    pass


class RegistryError(ManifestError):
    """Raised when the version registry is used incorrectly."""

    pass


class InvalidReferenceError(ManifestError):
    """Raised when a reference or path cannot be normalized."""

    pass


class UnmappableTypeError(ManifestError):
    """Raised when an inline type string has no JSON Schema equivalent."""

    def __init__(self, text: str, field: str = ROOT_FIELD):
        self.text = text
        super().__init__(
            f"Type {text!r} cannot be mapped to a JSON Schema type",
            ErrorKind.UNMAPPABLE_TYPE,
            field,
        )


class ManifestValidationError(ManifestError):
    """Raised when strict validation fails.

    Attributes:
        errors: List of validation errors with field paths and messages
    """

    def __init__(self, errors: list[ValidationErrorDetail]):
        self.errors = errors
        message = f"Manifest validation failed with {len(errors)} error(s)"
        first = errors[0] if errors else None
        if first is not None:
            message += f": {first}"
        super().__init__(
            message,
            first.kind if first else ErrorKind.INVALID_VALUE,
            first.field if first else ROOT_FIELD,
        )


class MigrationError(ManifestError):
    """Raised or returned when a migration step cannot complete.

    Attributes:
        source_version: Version of the step's input
        target_version: Version the failing step was producing
        document: The original, unmodified input document
        details: Validation problems of a rejected source or intermediate document
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind,
        field: str = ROOT_FIELD,
        *,
        source_version: str | None = None,
        target_version: str | None = None,
        document: ManifestDocument | None = None,
        details: list[ValidationErrorDetail] | None = None,
    ):
        self.source_version = source_version
        self.target_version = target_version
        self.document = document
        self.details = details or []
        super().__init__(message, kind, field)
