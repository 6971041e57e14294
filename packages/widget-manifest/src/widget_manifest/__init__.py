# SPDX-License-Identifier: MIT
"""Document model, validation, and migration for web widget manifests.

This package provides utilities for working with widget manifests:
- JSON Schema definitions for every manifest revision
- A registry mapping ``schemaVersion`` strings to revision rules
- Parsing into immutable, version-tagged documents
- Validation with structured error and warning reporting
- Forward migration of older revisions to the latest one
- Normalization of symbol references and package paths

Example:
    >>> from widget_manifest import parse, validate, migrate
    >>>
    >>> document = parse(text)
    >>> result = validate(document)
    >>> result.valid
    True
    >>> migrated = migrate(document).document
"""

__version__ = "0.1.0"

from .errors import (
    ErrorKind,
    InvalidReferenceError,
    ManifestError,
    ManifestValidationError,
    MigrationError,
    ParseError,
    RegistryError,
    UnmappableTypeError,
    ValidationErrorDetail,
)
from .lowering import can_lower, lower_type
from .migrator import (
    MigrationResult,
    MigrationStep,
    Migrator,
    migrate,
    migrate_strict,
)
from .model import (
    MISSING,
    Collection,
    CssCustomProperty,
    CssPart,
    Data,
    DataUserInterface,
    Declaration,
    Demo,
    Icon,
    ManifestDocument,
    Module,
    Parameter,
    Portal,
    Presence,
    Slot,
    TypeInfo,
    TypeReference,
    presence,
)
from .parser import load, parse, parse_file, serialize
from .references import (
    GLOBAL_PACKAGE,
    ResolvedReference,
    Scope,
    iter_references,
    normalize_path,
    resolve_reference,
)
from .registry import (
    REGISTRY,
    DataStyle,
    Layout,
    RuleSet,
    VersionRegistry,
    get_rule_set,
    lookup,
)
from .schema import (
    LATEST_SCHEMA_VERSION,
    MANIFEST_SCHEMAS,
    SCHEMA_VERSIONS,
    get_manifest_schema,
)
from .validator import (
    ValidationResult,
    validate,
    validate_raw,
    validate_strict,
)

__all__ = [
    # Schema
    "MANIFEST_SCHEMAS",
    "SCHEMA_VERSIONS",
    "LATEST_SCHEMA_VERSION",
    "get_manifest_schema",
    # Registry
    "REGISTRY",
    "RuleSet",
    "VersionRegistry",
    "Layout",
    "DataStyle",
    "lookup",
    "get_rule_set",
    # Document model
    "ManifestDocument",
    "Module",
    "Declaration",
    "Data",
    "DataUserInterface",
    "Parameter",
    "Portal",
    "Slot",
    "CssPart",
    "CssCustomProperty",
    "Demo",
    "Icon",
    "TypeInfo",
    "TypeReference",
    "Collection",
    "Presence",
    "presence",
    "MISSING",
    # Parsing
    "parse",
    "parse_file",
    "load",
    "serialize",
    # Validation
    "validate",
    "validate_raw",
    "validate_strict",
    "ValidationResult",
    "ValidationErrorDetail",
    # Migration
    "migrate",
    "migrate_strict",
    "Migrator",
    "MigrationStep",
    "MigrationResult",
    "lower_type",
    "can_lower",
    # References
    "resolve_reference",
    "iter_references",
    "normalize_path",
    "ResolvedReference",
    "Scope",
    "GLOBAL_PACKAGE",
    # Errors
    "ErrorKind",
    "ManifestError",
    "ParseError",
    "ManifestValidationError",
    "MigrationError",
    "RegistryError",
    "InvalidReferenceError",
    "UnmappableTypeError",
]
