# SPDX-License-Identifier: MIT
"""Property-based tests for parsing, validation and migration.

These tests verify that:
- Serializing and re-parsing a document yields an equal document
- Unrecognized top-level fields produce exactly one warning each
- Migrating a valid older manifest yields a valid latest manifest
- Migrating a latest manifest is the identity
- Unregistered schema versions are always rejected at parse time
"""

from __future__ import annotations

import json
import string

from hypothesis import given, settings, strategies as st

from widget_manifest.errors import ErrorKind, ParseError
from widget_manifest.migrator import migrate
from widget_manifest.parser import load, parse, serialize
from widget_manifest.registry import REGISTRY
from widget_manifest.validator import validate


# =============================================================================
# Strategies for generating test data
# =============================================================================

# Inline types with a default value each type accepts
TYPED_DEFAULTS = [
    ("string", "hello"),
    ("number", 3),
    ("boolean", True),
    ("string[]", ["a", "b"]),
    ("'light' | 'dark'", "dark"),
    ("Record<string, number>", {"width": 120}),
    ("string | null", None),
    ("any", {"nested": [1, 2]}),
]

identifiers = st.text(alphabet=string.ascii_lowercase, min_size=1, max_size=10)
markdown = st.text(max_size=40)


@st.composite
def parameter_strategy(draw):
    parameter = {"name": draw(identifiers)}
    if draw(st.booleans()):
        parameter["type"] = {"text": draw(st.sampled_from(["string", "number", "boolean"]))}
    if draw(st.booleans()):
        parameter["summary"] = draw(markdown)
    return parameter


@st.composite
def data_strategy(draw):
    text, default = draw(st.sampled_from(TYPED_DEFAULTS))
    data = {"name": draw(identifiers), "type": {"text": text}}
    if draw(st.booleans()):
        data["default"] = default
    return data


@st.composite
def declaration_strategy(draw):
    declaration = {}
    if draw(st.booleans()):
        names = draw(st.lists(identifiers, max_size=3, unique=True))
        declaration["slots"] = [{"name": name} for name in names]
    if draw(st.booleans()):
        declaration["parameters"] = draw(
            st.lists(parameter_strategy(), max_size=3, unique_by=lambda p: p["name"])
        )
    if draw(st.booleans()):
        declaration["cssProperties"] = [{"name": "--" + draw(identifiers), "syntax": "<color>"}]
    if draw(st.booleans()):
        declaration["data"] = draw(data_strategy())
    return declaration


@st.composite
def v2_manifest_strategy(draw):
    manifest = {"schemaVersion": "2.0.0", "path": f"src/{draw(identifiers)}.js"}
    if draw(st.booleans()):
        manifest["name"] = draw(identifiers)
    if draw(st.booleans()):
        manifest["summary"] = draw(markdown)
    if draw(st.booleans()):
        manifest["icons"] = [{"path": "icon.png", "sizes": draw(st.sampled_from(["any", "48x48"]))}]
    if draw(st.booleans()):
        manifest["declaration"] = draw(declaration_strategy())
    return manifest


@st.composite
def v1_manifest_strategy(draw):
    flat = draw(v2_manifest_strategy())
    module = {"kind": "web-widget-application", "path": flat["path"]}
    if "summary" in flat:
        module["summary"] = flat["summary"]
    if "declaration" in flat:
        module["declarations"] = [flat["declaration"]]
    return {"schemaVersion": "1.0.0", "modules": [module]}


# =============================================================================
# Properties
# =============================================================================


class TestRoundTripProperties:
    """Serialization preserves documents."""

    @given(manifest=v2_manifest_strategy())
    @settings(max_examples=50)
    def test_serialize_parse_round_trip(self, manifest):
        document = load(manifest)
        reparsed = parse(serialize(document))
        assert reparsed == document
        assert reparsed.to_dict() == manifest

    @given(manifest=v2_manifest_strategy())
    @settings(max_examples=50)
    def test_generated_manifests_are_valid(self, manifest):
        result = validate(load(manifest))
        assert result.errors == []
        assert result.warnings == []


class TestUnknownFieldProperties:
    """Unrecognized fields are warnings, never errors."""

    @given(
        manifest=v2_manifest_strategy(),
        key=identifiers.map(lambda s: "x-" + s),
        value=st.one_of(st.none(), st.integers(), st.text(max_size=5)),
    )
    @settings(max_examples=50)
    def test_one_warning_per_extra_field(self, manifest, key, value):
        manifest[key] = value
        result = validate(load(manifest))
        assert result.valid
        assert len(result.warnings) == 1
        assert result.warnings[0].kind is ErrorKind.UNKNOWN_FIELD
        assert result.warnings[0].field == key


class TestMigrationProperties:
    """Migration of valid manifests."""

    @given(manifest=st.one_of(v1_manifest_strategy(), v2_manifest_strategy()))
    @settings(max_examples=50)
    def test_valid_manifests_migrate_to_valid_latest(self, manifest):
        document = load(manifest)
        result = migrate(document)
        assert result.ok, result.error
        assert result.document.schema_version == REGISTRY.latest.version
        assert validate(result.document).valid
        assert document.to_dict() == manifest

    @given(manifest=v2_manifest_strategy())
    @settings(max_examples=30)
    def test_migrating_latest_is_identity(self, manifest):
        latest = migrate(load(manifest)).document
        again = migrate(latest)
        assert again.ok
        assert again.applied == []
        assert again.document == latest


class TestVersionProperties:
    """Only registered versions parse."""

    @given(version=st.text(max_size=12).filter(lambda v: v not in REGISTRY))
    @settings(max_examples=50)
    def test_unregistered_versions_rejected(self, version):
        text = json.dumps({"schemaVersion": version, "path": "w.js"})
        try:
            parse(text)
        except ParseError as e:
            assert e.kind is ErrorKind.UNKNOWN_VERSION
        else:
            raise AssertionError(f"version {version!r} was accepted")
