# SPDX-License-Identifier: MIT
"""Tests for the manifest JSON schema definitions."""

import pytest
from jsonschema import Draft202012Validator

from widget_manifest.schema import (
    LATEST_SCHEMA_VERSION,
    MANIFEST_SCHEMAS,
    MODULE_KIND,
    SCHEMA_VERSIONS,
    get_manifest_schema,
)


class TestManifestSchemas:
    """Tests for the per-revision schemas."""

    @pytest.mark.parametrize("version", SCHEMA_VERSIONS)
    def test_schema_is_valid_draft_2020_12(self, version):
        """Every revision schema should itself be a valid JSON Schema."""
        Draft202012Validator.check_schema(MANIFEST_SCHEMAS[version])

    @pytest.mark.parametrize("version", SCHEMA_VERSIONS)
    def test_schema_pins_its_version(self, version):
        """schemaVersion must be fixed to the revision's literal."""
        schema = MANIFEST_SCHEMAS[version]
        assert schema["properties"]["schemaVersion"]["const"] == version
        assert "schemaVersion" in schema["required"]

    @pytest.mark.parametrize("version", SCHEMA_VERSIONS)
    def test_schema_is_closed(self, version):
        """Unknown top-level fields must be detectable."""
        assert MANIFEST_SCHEMAS[version]["additionalProperties"] is False

    def test_versions_are_ordered(self):
        """Versions are listed oldest first with the latest last."""
        assert SCHEMA_VERSIONS == ("1.0.0", "2.0.0", "3.0.0", "4.0.0")
        assert LATEST_SCHEMA_VERSION == SCHEMA_VERSIONS[-1]

    def test_module_kind_constant(self):
        """Module-based revisions require the widget application kind."""
        for version in ("1.0.0", "4.0.0"):
            module = MANIFEST_SCHEMAS[version]["$defs"]["module"]
            assert module["properties"]["kind"]["const"] == MODULE_KIND

    def test_flat_revisions_require_path(self):
        """Flat revisions describe the package module at the root."""
        for version in ("2.0.0", "3.0.0"):
            assert "path" in MANIFEST_SCHEMAS[version]["required"]

    def test_v3_declaration_has_no_data(self):
        """3.0.0 keeps data in dataSchema, not in the declaration."""
        declaration = MANIFEST_SCHEMAS["3.0.0"]["$defs"]["declaration"]
        assert "data" not in declaration["properties"]
        assert "dataSchema" in MANIFEST_SCHEMAS["3.0.0"]["properties"]


class TestGetManifestSchema:
    """Tests for get_manifest_schema."""

    def test_defaults_to_latest(self):
        """The default schema is the latest revision."""
        schema = get_manifest_schema()
        assert schema["properties"]["schemaVersion"]["const"] == LATEST_SCHEMA_VERSION

    def test_returns_copy(self):
        """Modifying the returned schema must not affect the registry copy."""
        schema = get_manifest_schema("2.0.0")
        schema["properties"]["schemaVersion"]["const"] = "9.9.9"
        assert MANIFEST_SCHEMAS["2.0.0"]["properties"]["schemaVersion"]["const"] == "2.0.0"

    def test_unknown_version(self):
        """Unknown versions raise KeyError."""
        with pytest.raises(KeyError):
            get_manifest_schema("0.0.1")
