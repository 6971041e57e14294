# SPDX-License-Identifier: MIT
"""Forward migration between manifest revisions.

Migration runs as a chain of single-step transforms, each turning revision N
into revision N+1. The output of every step is validated against the step's
target revision before the next step runs. If any step fails, the whole
migration fails and the caller gets the original document back together with
the error; a partially migrated document is never returned.

Transforms work on deep copies of the document JSON and never modify their
input.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from .errors import ErrorKind, MigrationError, UnmappableTypeError, join_path
from .lowering import lower_type
from .model import ManifestDocument
from .registry import REGISTRY, VersionRegistry
from .schema import (
    MODULE_KIND,
    SCHEMA_VERSION_1,
    SCHEMA_VERSION_2,
    SCHEMA_VERSION_3,
    SCHEMA_VERSION_4,
)
from .validator import validate

logger = logging.getLogger(__name__)

Transform = Callable[[dict[str, Any]], dict[str, Any]]

_DESCRIPTIVE = ("name", "summary", "description")


class _StepFailure(Exception):
    """Raised inside a transform; converted to MigrationError by the chain."""

    def __init__(self, message: str, kind: ErrorKind, field: str):
        self.kind = kind
        self.field = field
        super().__init__(message)


@dataclass(frozen=True)
class MigrationStep:
    """A single forward transform between adjacent revisions."""

    source: str
    target: str
    transform: Transform

    @property
    def label(self) -> str:
        return f"{self.source}->{self.target}"


@dataclass
class MigrationResult:
    """Result of a migration.

    Attributes:
        document: The migrated document, or the untouched input on failure
        error: The failure, if any
        applied: Labels of the steps that ran, e.g. ``["1.0.0->2.0.0"]``
    """

    document: ManifestDocument
    error: MigrationError | None = None
    applied: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None


def _copy_present(source: dict[str, Any], target: dict[str, Any], keys: tuple[str, ...]) -> None:
    """Copy keys that are present, keeping absent keys absent."""
    for key in keys:
        if key in source:
            target[key] = copy.deepcopy(source[key])


def _unknown_keys(raw: dict[str, Any], known: tuple[str, ...]) -> list[str]:
    return [key for key in raw if key not in known]


def _modules_to_flat(raw: dict[str, Any]) -> dict[str, Any]:
    """1.0.0 -> 2.0.0: collapse the only module and its only declaration."""
    modules = raw.get("modules")
    if not isinstance(modules, list) or not modules:
        raise _StepFailure(
            "Manifest has no module to collapse into a flat package",
            ErrorKind.MISSING_MODULE,
            "modules",
        )
    if len(modules) > 1:
        raise _StepFailure(
            f"Manifest has {len(modules)} modules; multiplicity not representable "
            f"in target version {SCHEMA_VERSION_2}",
            ErrorKind.MULTIPLICITY,
            "modules",
        )

    module = modules[0]
    if not isinstance(module, dict):
        raise _StepFailure("Module must be an object", ErrorKind.MISSING_MODULE, "modules[0]")

    declarations = module.get("declarations")
    if isinstance(declarations, list) and len(declarations) > 1:
        raise _StepFailure(
            f"Module has {len(declarations)} declarations; multiplicity not representable "
            f"in target version {SCHEMA_VERSION_2}",
            ErrorKind.MULTIPLICITY,
            "modules[0].declarations",
        )

    migrated: dict[str, Any] = {"schemaVersion": SCHEMA_VERSION_2}
    _copy_present(raw, migrated, ("readme",))
    _copy_present(module, migrated, ("path", "summary", "description"))
    if isinstance(declarations, list) and declarations:
        migrated["declaration"] = copy.deepcopy(declarations[0])

    dropped = _unknown_keys(
        module, ("kind", "path", "summary", "description", "declarations")
    )
    if dropped:
        logger.warning(
            "Dropping unrecognized module fields during %s->%s migration: %s",
            SCHEMA_VERSION_1,
            SCHEMA_VERSION_2,
            ", ".join(dropped),
        )
    if isinstance(declarations, list) and not declarations:
        logger.debug("Module declares an empty declarations list; omitting declaration")

    for key in _unknown_keys(raw, ("schemaVersion", "readme", "modules")):
        migrated[key] = copy.deepcopy(raw[key])
    return migrated


def _lower_data(data: dict[str, Any], field_path: str) -> dict[str, Any]:
    """Turn an inline-typed data entry into a JSON Schema typed one."""
    lowered: dict[str, Any] = {}
    _copy_present(data, lowered, _DESCRIPTIVE)

    type_info = data.get("type")
    if type_info is None:
        # An undeclared type accepts any value
        lowered["schema"] = {}
    else:
        text = type_info.get("text") if isinstance(type_info, dict) else None
        if not isinstance(text, str):
            raise _StepFailure(
                "Data type has no text to lower",
                ErrorKind.UNMAPPABLE_TYPE,
                join_path(field_path, "type"),
            )
        try:
            lowered["schema"] = lower_type(text, join_path(field_path, "type", "text"))
        except UnmappableTypeError as e:
            raise _StepFailure(str(e), e.kind, e.field) from e

    _copy_present(data, lowered, ("default",))
    for key in _unknown_keys(data, (*_DESCRIPTIVE, "type", "default")):
        lowered[key] = copy.deepcopy(data[key])
    return lowered


def _inline_to_schema(raw: dict[str, Any]) -> dict[str, Any]:
    """2.0.0 -> 3.0.0: hoist declaration.data into a JSON Schema typed dataSchema."""
    migrated: dict[str, Any] = {}
    for key, value in raw.items():
        if key == "declaration":
            continue
        migrated[key] = copy.deepcopy(value)
    migrated["schemaVersion"] = SCHEMA_VERSION_3

    declaration = raw.get("declaration")
    if isinstance(declaration, dict):
        migrated["declaration"] = {
            key: copy.deepcopy(value) for key, value in declaration.items() if key != "data"
        }
        data = declaration.get("data")
        if isinstance(data, dict):
            migrated["dataSchema"] = _lower_data(data, "declaration.data")
    elif "declaration" in raw:
        migrated["declaration"] = copy.deepcopy(declaration)
    return migrated


def _flat_to_modules(raw: dict[str, Any]) -> dict[str, Any]:
    """3.0.0 -> 4.0.0: wrap the flat package into a single-module array."""
    migrated: dict[str, Any] = {"schemaVersion": SCHEMA_VERSION_4}
    _copy_present(raw, migrated, ("readme",))

    module: dict[str, Any] = {"kind": MODULE_KIND}
    _copy_present(raw, module, ("path", "name", "summary", "description", "icons"))

    declaration = raw.get("declaration")
    data_schema = raw.get("dataSchema")
    if isinstance(declaration, dict) or data_schema is not None:
        target: dict[str, Any] = {}
        if isinstance(declaration, dict):
            target = copy.deepcopy(declaration)
        if data_schema is not None:
            target["data"] = copy.deepcopy(data_schema)
        module["declaration"] = target
    elif "declaration" in raw:
        module["declaration"] = copy.deepcopy(declaration)

    _copy_present(raw, module, ("dataUserInterface",))
    migrated["modules"] = [module]

    known = (
        "schemaVersion",
        "readme",
        "path",
        "name",
        "summary",
        "description",
        "icons",
        "declaration",
        "dataSchema",
        "dataUserInterface",
    )
    for key in _unknown_keys(raw, known):
        migrated[key] = copy.deepcopy(raw[key])
    return migrated


DEFAULT_STEPS: tuple[MigrationStep, ...] = (
    MigrationStep(SCHEMA_VERSION_1, SCHEMA_VERSION_2, _modules_to_flat),
    MigrationStep(SCHEMA_VERSION_2, SCHEMA_VERSION_3, _inline_to_schema),
    MigrationStep(SCHEMA_VERSION_3, SCHEMA_VERSION_4, _flat_to_modules),
)


class Migrator:
    """Runs migration chains over a registry and a set of steps."""

    def __init__(
        self,
        registry: VersionRegistry | None = None,
        steps: tuple[MigrationStep, ...] = DEFAULT_STEPS,
    ):
        self.registry = REGISTRY if registry is None else registry
        self._steps = {step.source: step for step in steps}

    def plan(self, source: str, target: str) -> list[MigrationStep]:
        """Return the steps leading from ``source`` to ``target``.

        Raises:
            MigrationError: If the target is unknown, older than the source,
                or unreachable with the registered steps
        """
        if target not in self.registry:
            raise MigrationError(
                f"Unknown target schema version: {target}",
                ErrorKind.UNKNOWN_TARGET,
                source_version=source,
                target_version=target,
            )
        if self.registry.index(target) < self.registry.index(source):
            raise MigrationError(
                f"Cannot migrate backwards from {source} to {target}",
                ErrorKind.BACKWARD_MIGRATION,
                source_version=source,
                target_version=target,
            )

        steps = []
        version = source
        while version != target:
            step = self._steps.get(version)
            if step is None:
                raise MigrationError(
                    f"No migration step registered from {version}",
                    ErrorKind.UNKNOWN_TARGET,
                    source_version=version,
                    target_version=target,
                )
            steps.append(step)
            version = step.target
        return steps

    def migrate(
        self,
        document: ManifestDocument,
        target_version: str | None = None,
    ) -> MigrationResult:
        """Migrate a document forward to ``target_version`` (latest if None).

        A document already at the target version is returned as is. Otherwise
        the source must first validate against its own revision.
        """
        target = target_version or self.registry.latest.version
        source = document.schema_version

        try:
            steps = self.plan(source, target)
        except MigrationError as e:
            e.document = document
            return MigrationResult(document=document, error=e)

        if steps:
            source_result = validate(document)
            if not source_result.valid:
                first = source_result.errors[0]
                logger.debug("Source manifest is not a valid %s manifest: %s", source, first)
                return MigrationResult(
                    document=document,
                    error=MigrationError(
                        f"Source document is not a valid {source} manifest: {first}",
                        ErrorKind.INVALID_SOURCE,
                        first.field,
                        source_version=source,
                        target_version=target,
                        document=document,
                        details=source_result.errors,
                    ),
                )

        current = document
        applied: list[str] = []
        for step in steps:
            try:
                migrated = step.transform(current.to_dict())
            except _StepFailure as e:
                logger.debug("Migration step %s failed: %s", step.label, e)
                return MigrationResult(
                    document=document,
                    error=MigrationError(
                        str(e),
                        e.kind,
                        e.field,
                        source_version=step.source,
                        target_version=step.target,
                        document=document,
                    ),
                    applied=applied,
                )

            rule_set = self.registry.lookup(step.target)
            if rule_set is None:
                return MigrationResult(
                    document=document,
                    error=MigrationError(
                        f"Migration step targets unregistered version {step.target}",
                        ErrorKind.UNKNOWN_TARGET,
                        source_version=step.source,
                        target_version=step.target,
                        document=document,
                    ),
                    applied=applied,
                )
            candidate = ManifestDocument(migrated, rule_set)
            result = validate(candidate)
            if not result.valid:
                first = result.errors[0]
                logger.debug(
                    "Migration step %s produced an invalid document: %s",
                    step.label,
                    first,
                )
                return MigrationResult(
                    document=document,
                    error=MigrationError(
                        f"Migration step {step.label} produced an invalid document: {first}",
                        ErrorKind.INVALID_INTERMEDIATE,
                        first.field,
                        source_version=step.source,
                        target_version=step.target,
                        document=document,
                        details=result.errors,
                    ),
                    applied=applied,
                )

            logger.debug("Applied migration step %s", step.label)
            applied.append(step.label)
            current = candidate

        return MigrationResult(document=current, applied=applied)


_DEFAULT_MIGRATOR = Migrator()


def migrate(document: ManifestDocument, target_version: str | None = None) -> MigrationResult:
    """Migrate a document forward using the default registry.

    Args:
        document: The document to migrate; it is never modified
        target_version: Version to reach (latest registered version if None)

    Returns:
        MigrationResult with the migrated document, or the original document
        and the error if any step failed
    """
    return _DEFAULT_MIGRATOR.migrate(document, target_version)


def migrate_strict(
    document: ManifestDocument,
    target_version: str | None = None,
) -> ManifestDocument:
    """Migrate a document and raise on failure.

    Raises:
        MigrationError: If a step fails; ``error.document`` is the original
    """
    result = migrate(document, target_version)
    if result.error is not None:
        raise result.error
    return result.document
