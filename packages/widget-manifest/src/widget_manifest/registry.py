# SPDX-License-Identifier: MIT
"""Schema version registry.

Maps a ``schemaVersion`` string to the immutable RuleSet describing that
revision. Revisions differ only in data (their JSON Schema and where they keep
declarations, data and editing UI), so a RuleSet is a value object rather than
a class per revision.

The default registry is populated once at import time and is read-only
afterwards.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator

from jsonschema import Draft202012Validator

from .errors import ErrorKind, RegistryError
from .formats import FORMAT_CHECKER
from .schema import (
    MANIFEST_SCHEMAS,
    SCHEMA_VERSION_1,
    SCHEMA_VERSION_2,
    SCHEMA_VERSION_3,
    SCHEMA_VERSION_4,
)

logger = logging.getLogger(__name__)


class Layout(str, Enum):
    """Where a revision keeps its described modules."""

    # The document root is the single module
    FLAT = "flat"
    # The root holds a ``modules`` array
    MODULES = "modules"


class DataStyle(str, Enum):
    """How a revision describes the widget's configurable data."""

    INLINE_TYPE = "inline-type"
    JSON_SCHEMA = "json-schema"


@dataclass(frozen=True)
class RuleSet:
    """Structural rules for one manifest revision.

    Attributes:
        version: The literal ``schemaVersion`` value
        schema: JSON Schema for the per-field pass
        layout: Flat document or array of modules
        declarations_key: Key holding the declaration(s) in a module
        many_declarations: Whether ``declarations_key`` holds an array
        declaration_data_key: Key of the data entry inside a declaration
        module_data_key: Key of the data entry on the module itself
        data_style: Inline type strings or JSON Schema
        supports_icons: Whether modules may list icons
        supports_data_ui: Whether modules may name a data editing UI
    """

    version: str
    schema: dict[str, Any] = field(repr=False)
    layout: Layout
    declarations_key: str
    many_declarations: bool
    data_style: DataStyle
    declaration_data_key: str | None = None
    module_data_key: str | None = None
    supports_icons: bool = False
    supports_data_ui: bool = False
    description: str = ""
    validator: Draft202012Validator = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        Draft202012Validator.check_schema(self.schema)
        object.__setattr__(
            self,
            "validator",
            Draft202012Validator(self.schema, format_checker=FORMAT_CHECKER),
        )

    def get_schema(self) -> dict[str, Any]:
        """Return a copy of this revision's JSON Schema."""
        return copy.deepcopy(self.schema)


class VersionRegistry:
    """Append-only mapping of schema versions to rule sets.

    Versions are ordered by registration; the last registered version is the
    latest one.
    """

    def __init__(self) -> None:
        self._rule_sets: dict[str, RuleSet] = {}
        self._frozen = False

    def register(self, rule_set: RuleSet) -> RuleSet:
        """Add a rule set.

        Raises:
            RegistryError: If the registry is frozen or the version exists
        """
        if self._frozen:
            raise RegistryError(
                f"Cannot register {rule_set.version}: registry is frozen",
                ErrorKind.DUPLICATE_VERSION,
            )
        if rule_set.version in self._rule_sets:
            raise RegistryError(
                f"Schema version {rule_set.version} is already registered",
                ErrorKind.DUPLICATE_VERSION,
            )
        self._rule_sets[rule_set.version] = rule_set
        logger.debug("Registered manifest schema version %s", rule_set.version)
        return rule_set

    def freeze(self) -> None:
        """Reject any further registration."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def lookup(self, version: str) -> RuleSet | None:
        """Return the rule set for a version, or None when it is unknown."""
        return self._rule_sets.get(version)

    def versions(self) -> list[str]:
        """Registered versions, oldest first."""
        return list(self._rule_sets)

    @property
    def latest(self) -> RuleSet:
        if not self._rule_sets:
            raise RegistryError("No schema versions registered", ErrorKind.UNKNOWN_VERSION)
        return self._rule_sets[next(reversed(self._rule_sets))]

    def next_version(self, version: str) -> str | None:
        """Return the version registered right after ``version``."""
        versions = self.versions()
        index = versions.index(version)
        return versions[index + 1] if index + 1 < len(versions) else None

    def index(self, version: str) -> int:
        return self.versions().index(version)

    def __contains__(self, version: object) -> bool:
        return version in self._rule_sets

    def __iter__(self) -> Iterator[RuleSet]:
        return iter(self._rule_sets.values())

    def __len__(self) -> int:
        return len(self._rule_sets)


def _build_default_registry() -> VersionRegistry:
    registry = VersionRegistry()
    registry.register(
        RuleSet(
            version=SCHEMA_VERSION_1,
            schema=MANIFEST_SCHEMAS[SCHEMA_VERSION_1],
            layout=Layout.MODULES,
            declarations_key="declarations",
            many_declarations=True,
            data_style=DataStyle.INLINE_TYPE,
            declaration_data_key="data",
            description="Array of modules, each with an array of declarations",
        )
    )
    registry.register(
        RuleSet(
            version=SCHEMA_VERSION_2,
            schema=MANIFEST_SCHEMAS[SCHEMA_VERSION_2],
            layout=Layout.FLAT,
            declarations_key="declaration",
            many_declarations=False,
            data_style=DataStyle.INLINE_TYPE,
            declaration_data_key="data",
            supports_icons=True,
            description="Flat package with a single declaration",
        )
    )
    registry.register(
        RuleSet(
            version=SCHEMA_VERSION_3,
            schema=MANIFEST_SCHEMAS[SCHEMA_VERSION_3],
            layout=Layout.FLAT,
            declarations_key="declaration",
            many_declarations=False,
            data_style=DataStyle.JSON_SCHEMA,
            module_data_key="dataSchema",
            supports_icons=True,
            supports_data_ui=True,
            description="Flat package with top-level dataSchema and dataUserInterface",
        )
    )
    registry.register(
        RuleSet(
            version=SCHEMA_VERSION_4,
            schema=MANIFEST_SCHEMAS[SCHEMA_VERSION_4],
            layout=Layout.MODULES,
            declarations_key="declaration",
            many_declarations=False,
            data_style=DataStyle.JSON_SCHEMA,
            declaration_data_key="data",
            supports_icons=True,
            supports_data_ui=True,
            description="Array of modules, each with a single declaration",
        )
    )
    registry.freeze()
    return registry


REGISTRY = _build_default_registry()


def lookup(version: str) -> RuleSet | None:
    """Look up a rule set in the default registry."""
    return REGISTRY.lookup(version)


def get_rule_set(version: str) -> RuleSet:
    """Return a rule set from the default registry.

    Raises:
        RegistryError: If the version is not registered
    """
    rule_set = REGISTRY.lookup(version)
    if rule_set is None:
        raise RegistryError(f"Unknown schema version: {version}", ErrorKind.UNKNOWN_VERSION)
    return rule_set
