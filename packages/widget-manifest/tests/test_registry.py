# SPDX-License-Identifier: MIT
"""Tests for the schema version registry."""

import pytest

from widget_manifest.errors import ErrorKind, RegistryError
from widget_manifest.registry import (
    REGISTRY,
    DataStyle,
    Layout,
    RuleSet,
    VersionRegistry,
    get_rule_set,
    lookup,
)
from widget_manifest.schema import MANIFEST_SCHEMAS


def make_rule_set(version="2.0.0"):
    return RuleSet(
        version=version,
        schema=MANIFEST_SCHEMAS["2.0.0"],
        layout=Layout.FLAT,
        declarations_key="declaration",
        many_declarations=False,
        data_style=DataStyle.INLINE_TYPE,
        declaration_data_key="data",
    )


class TestDefaultRegistry:
    """Tests for the populated default registry."""

    def test_contains_all_versions(self):
        """Every revision is registered, oldest first."""
        assert REGISTRY.versions() == ["1.0.0", "2.0.0", "3.0.0", "4.0.0"]
        assert len(REGISTRY) == 4

    def test_latest(self):
        """The latest rule set is the last registered one."""
        assert REGISTRY.latest.version == "4.0.0"

    def test_is_frozen(self):
        """The default registry cannot be extended after import."""
        assert REGISTRY.frozen is True
        with pytest.raises(RegistryError) as exc_info:
            REGISTRY.register(make_rule_set("5.0.0"))
        assert exc_info.value.kind is ErrorKind.DUPLICATE_VERSION

    def test_lookup_unknown_returns_none(self):
        """Unknown versions are absent rather than an error."""
        assert lookup("1.0") is None
        assert lookup("4.0.0") is REGISTRY.lookup("4.0.0")
        assert "9.9.9" not in REGISTRY

    def test_get_rule_set_unknown_raises(self):
        """get_rule_set raises on unknown versions."""
        with pytest.raises(RegistryError) as exc_info:
            get_rule_set("0.9.0")
        assert exc_info.value.kind is ErrorKind.UNKNOWN_VERSION

    def test_next_version(self):
        """next_version walks the registration order."""
        assert REGISTRY.next_version("1.0.0") == "2.0.0"
        assert REGISTRY.next_version("3.0.0") == "4.0.0"
        assert REGISTRY.next_version("4.0.0") is None

    @pytest.mark.parametrize(
        "version,layout,style",
        [
            ("1.0.0", Layout.MODULES, DataStyle.INLINE_TYPE),
            ("2.0.0", Layout.FLAT, DataStyle.INLINE_TYPE),
            ("3.0.0", Layout.FLAT, DataStyle.JSON_SCHEMA),
            ("4.0.0", Layout.MODULES, DataStyle.JSON_SCHEMA),
        ],
    )
    def test_revision_shapes(self, version, layout, style):
        """Each revision records where it keeps its modules and how it types data."""
        rule_set = get_rule_set(version)
        assert rule_set.layout is layout
        assert rule_set.data_style is style

    def test_only_first_revision_has_many_declarations(self):
        """Only 1.0.0 allows several declarations per module."""
        assert [r.version for r in REGISTRY if r.many_declarations] == ["1.0.0"]

    def test_get_schema_returns_copy(self):
        """A rule set's schema cannot be modified through get_schema."""
        rule_set = get_rule_set("3.0.0")
        schema = rule_set.get_schema()
        schema["title"] = "changed"
        assert rule_set.schema["title"] != "changed"


class TestVersionRegistry:
    """Tests for building a registry."""

    def test_register_and_lookup(self):
        """Registered rule sets can be looked up."""
        registry = VersionRegistry()
        rule_set = registry.register(make_rule_set())
        assert registry.lookup("2.0.0") is rule_set
        assert registry.latest is rule_set

    def test_duplicate_version_rejected(self):
        """The same version cannot be registered twice."""
        registry = VersionRegistry()
        registry.register(make_rule_set())
        with pytest.raises(RegistryError, match="already registered"):
            registry.register(make_rule_set())

    def test_freeze_rejects_registration(self):
        """A frozen registry rejects registration."""
        registry = VersionRegistry()
        registry.freeze()
        with pytest.raises(RegistryError, match="frozen"):
            registry.register(make_rule_set())

    def test_empty_registry_has_no_latest(self):
        """An empty registry has no latest version."""
        with pytest.raises(RegistryError):
            VersionRegistry().latest

    def test_rule_set_rejects_invalid_schema(self):
        """A rule set cannot be built from a malformed schema."""
        from jsonschema.exceptions import SchemaError

        with pytest.raises(SchemaError):
            RuleSet(
                version="x",
                schema={"type": 12},
                layout=Layout.FLAT,
                declarations_key="declaration",
                many_declarations=False,
                data_style=DataStyle.JSON_SCHEMA,
            )

    def test_rule_set_is_immutable(self):
        """Rule sets are frozen value objects."""
        rule_set = make_rule_set()
        with pytest.raises(AttributeError):
            rule_set.version = "3.0.0"
