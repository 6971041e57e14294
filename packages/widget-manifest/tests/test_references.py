# SPDX-License-Identifier: MIT
"""Tests for reference resolution and path normalization."""

import pytest

from widget_manifest.errors import ErrorKind, InvalidReferenceError
from widget_manifest.parser import load
from widget_manifest.references import (
    GLOBAL_PACKAGE,
    ResolvedReference,
    Scope,
    iter_references,
    normalize_path,
    resolve_reference,
)


class TestResolveReference:
    """Tests for resolve_reference."""

    def test_global(self):
        resolved = resolve_reference({"name": "HTMLElement", "package": GLOBAL_PACKAGE})
        assert resolved.scope is Scope.GLOBAL
        assert resolved.is_global
        assert resolved.identifier == "global:#HTMLElement"

    def test_global_ignores_module(self):
        resolved = resolve_reference(
            {"name": "Event", "package": "global:", "module": "lib.dom.d.ts"}, package="pkg"
        )
        assert resolved.module is None

    def test_external_package(self):
        resolved = resolve_reference(
            {"name": "LitElement", "package": "lit", "module": "./index.js"},
            package="my-widget",
        )
        assert resolved.scope is Scope.EXTERNAL
        assert resolved == ResolvedReference("lit", "index.js", "LitElement", Scope.EXTERNAL)
        assert str(resolved) == "lit/index.js#LitElement"

    def test_external_package_without_module(self):
        resolved = resolve_reference({"name": "Foo", "package": "other"})
        assert resolved.identifier == "other#Foo"

    def test_local_symbol_uses_current_module(self):
        resolved = resolve_reference(
            {"name": "Config"}, package="my-widget", module="src/clock.js"
        )
        assert resolved.scope is Scope.MODULE
        assert resolved.identifier == "my-widget/src/clock.js#Config"

    def test_same_package_other_module(self):
        resolved = resolve_reference(
            {"name": "Config", "package": "my-widget", "module": "src/./types.js"},
            package="my-widget",
            module="src/clock.js",
        )
        assert resolved.scope is Scope.PACKAGE
        assert resolved.module == "src/types.js"

    def test_same_module_explicitly(self):
        resolved = resolve_reference(
            {"name": "Config", "module": "/src/clock.js"},
            package="my-widget",
            module="src/clock.js",
        )
        assert resolved.scope is Scope.MODULE

    def test_without_context(self):
        resolved = resolve_reference({"name": "Config"})
        assert resolved.package is None
        assert resolved.module is None
        assert resolved.identifier == "#Config"

    def test_accepts_objects(self, v4_manifest):
        reference = next(iter(load(v4_manifest).modules()[0].types())).references.items[0]
        assert resolve_reference(reference).is_global

    @pytest.mark.parametrize(
        "reference",
        [
            {},
            {"name": ""},
            {"name": 3},
            {"name": "Foo", "package": ""},
            {"name": "Foo", "package": 1},
            {"name": "Foo", "module": 2},
        ],
    )
    def test_invalid(self, reference):
        with pytest.raises(InvalidReferenceError) as exc_info:
            resolve_reference(reference)
        assert exc_info.value.kind is ErrorKind.INVALID_REFERENCE


class TestNormalizePath:
    """Tests for normalize_path."""

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("src/clock.js", "src/clock.js"),
            ("./src/clock.js", "src/clock.js"),
            ("/src/clock.js", "src/clock.js"),
            ("src//a/../clock.js", "src/clock.js"),
            ("src\\clock.js", "src/clock.js"),
        ],
    )
    def test_normalizes(self, path, expected):
        assert normalize_path(path) == expected

    @pytest.mark.parametrize(
        "url", ["https://cdn.example/clock.js", "data:image/png;base64,AAAA"]
    )
    def test_urls_unchanged(self, url):
        assert normalize_path(url) == url

    @pytest.mark.parametrize("path", ["", "..", "../clock.js", "src/../../clock.js", ".", "./"])
    def test_invalid(self, path):
        with pytest.raises(InvalidReferenceError):
            normalize_path(path)


class TestIterReferences:
    """Tests for iter_references."""

    def test_yields_resolved_references(self, v4_manifest):
        pairs = list(iter_references(load(v4_manifest), package="clock"))
        assert len(pairs) == 1
        reference, resolved = pairs[0]
        assert reference.name == "HTMLElement"
        assert resolved.identifier == "global:#HTMLElement"

    def test_local_references_use_module_path(self, v2_manifest):
        v2_manifest["declaration"]["parameters"] = [
            {"name": "cfg", "type": {"text": "Config", "references": [{"name": "Config"}]}}
        ]
        pairs = list(iter_references(load(v2_manifest), package="clock"))
        assert [resolved.identifier for _, resolved in pairs] == ["clock/src/clock.js#Config"]

    def test_invalid_references_are_skipped(self, v2_manifest):
        v2_manifest["declaration"]["parameters"] = [
            {"name": "cfg", "type": {"text": "Config", "references": [{"name": ""}]}}
        ]
        assert list(iter_references(load(v2_manifest))) == []

    def test_no_references(self, v3_manifest):
        assert list(iter_references(load(v3_manifest))) == []
