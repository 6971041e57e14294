# SPDX-License-Identifier: MIT
"""JSON Schema definitions for every web widget manifest revision.

Each revision's field table is a draft 2020-12 JSON Schema. Objects are closed
with ``additionalProperties: false`` so unknown fields surface during
validation; the validator reports them as warnings rather than errors.
"""

from __future__ import annotations

import copy
from typing import Any

SCHEMA_VERSION_1 = "1.0.0"
SCHEMA_VERSION_2 = "2.0.0"
SCHEMA_VERSION_3 = "3.0.0"
SCHEMA_VERSION_4 = "4.0.0"

# Ordered oldest to newest
SCHEMA_VERSIONS = (SCHEMA_VERSION_1, SCHEMA_VERSION_2, SCHEMA_VERSION_3, SCHEMA_VERSION_4)
LATEST_SCHEMA_VERSION = SCHEMA_VERSION_4

MODULE_KIND = "web-widget-application"

# Custom property names always carry the leading dashes
CSS_PROPERTY_NAME_PATTERN = r"^--"

# Collections a declaration may carry, in document order
DECLARATION_COLLECTIONS = (
    "parameters",
    "portals",
    "slots",
    "cssParts",
    "cssProperties",
    "demos",
)

_MARKDOWN: dict[str, Any] = {"type": "string"}
_NON_EMPTY: dict[str, Any] = {"type": "string", "minLength": 1}


def _closed(properties: dict[str, Any], required: list[str] | None = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    schema["additionalProperties"] = False
    return schema


def _described(name: dict[str, Any] | None = None, **extra: Any) -> dict[str, Any]:
    """An object with a name plus markdown summary and description."""
    properties = {
        "name": name or _NON_EMPTY,
        "summary": _MARKDOWN,
        "description": _MARKDOWN,
    }
    properties.update(extra)
    return _closed(properties, ["name"])


def _array_of(definition: str) -> dict[str, Any]:
    return {"type": "array", "items": {"$ref": f"#/$defs/{definition}"}}


_DEFINITIONS: dict[str, Any] = {
    "sourceReference": _closed({"href": _NON_EMPTY}, ["href"]),
    "typeReference": _closed(
        {
            "name": _NON_EMPTY,
            "package": _NON_EMPTY,
            "module": {"type": "string"},
            "start": {"type": "integer", "minimum": 0},
            "end": {"type": "integer", "minimum": 0},
        },
        ["name"],
    ),
    "type": _closed(
        {
            "text": {"type": "string"},
            "references": _array_of("typeReference"),
            "source": {"$ref": "#/$defs/sourceReference"},
        },
        ["text"],
    ),
    # The empty string names the default slot
    "slot": _described(name={"type": "string"}),
    "cssPart": _described(),
    "portal": _described(),
    "cssCustomProperty": _described(
        name={"type": "string", "pattern": CSS_PROPERTY_NAME_PATTERN},
        syntax={"type": "string", "format": "css-syntax"},
        default={"type": "string"},
    ),
    "parameter": _described(
        type={"$ref": "#/$defs/type"},
        default={"type": "string"},
        optional={"type": "boolean"},
    ),
    "demo": _closed(
        {
            "url": _NON_EMPTY,
            "description": _MARKDOWN,
            "source": {"$ref": "#/$defs/sourceReference"},
        },
        ["url"],
    ),
    "icon": _closed(
        {
            "path": _NON_EMPTY,
            "sizes": {"type": "string", "format": "icon-sizes"},
            "type": {"type": "string", "format": "mime-type"},
        },
        ["path", "sizes"],
    ),
    "typedData": _described(type={"$ref": "#/$defs/type"}, default={}),
    "schemaData": _described(schema={"type": ["object", "boolean"]}, default={}),
    "dataUserInterface": _closed(
        {"path": _NON_EMPTY, "fallbackPath": _NON_EMPTY},
        ["path"],
    ),
}


def _declaration(data: dict[str, Any] | None) -> dict[str, Any]:
    properties: dict[str, Any] = {
        "parameters": _array_of("parameter"),
        "portals": _array_of("portal"),
        "slots": _array_of("slot"),
        "cssParts": _array_of("cssPart"),
        "cssProperties": _array_of("cssCustomProperty"),
        "demos": _array_of("demo"),
        "sandboxed": {"type": "boolean"},
    }
    if data is not None:
        properties["data"] = data
    return _closed(properties)


def _document(
    version: str,
    title: str,
    properties: dict[str, Any],
    required: list[str],
    definitions: dict[str, Any],
) -> dict[str, Any]:
    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "$id": f"https://widgets.example/schemas/manifest-{version}.json",
        "title": title,
        "type": "object",
        "required": ["schemaVersion", *required],
        "properties": {
            "schemaVersion": {"type": "string", "const": version},
            "readme": _MARKDOWN,
            **properties,
        },
        "additionalProperties": False,
        "$defs": {**_DEFINITIONS, **definitions},
    }


# 1.0.0: an array of modules, each with an array of declarations
MANIFEST_SCHEMA_V1: dict[str, Any] = _document(
    SCHEMA_VERSION_1,
    "Web Widget Application Manifest 1.0.0",
    {"modules": _array_of("module")},
    ["modules"],
    {
        "declaration": _declaration({"$ref": "#/$defs/typedData"}),
        "module": _closed(
            {
                "kind": {"type": "string", "const": MODULE_KIND},
                "path": _NON_EMPTY,
                "summary": _MARKDOWN,
                "description": _MARKDOWN,
                "declarations": _array_of("declaration"),
            },
            ["kind", "path"],
        ),
    },
)

_FLAT_PROPERTIES: dict[str, Any] = {
    "name": _NON_EMPTY,
    "path": _NON_EMPTY,
    "summary": _MARKDOWN,
    "description": _MARKDOWN,
    "icons": _array_of("icon"),
    "declaration": {"$ref": "#/$defs/declaration"},
}

# 2.0.0: a single flat package with one declaration
MANIFEST_SCHEMA_V2: dict[str, Any] = _document(
    SCHEMA_VERSION_2,
    "Web Widget Application Manifest 2.0.0",
    dict(_FLAT_PROPERTIES),
    ["path"],
    {"declaration": _declaration({"$ref": "#/$defs/typedData"})},
)

# 3.0.0: flat, with the data description hoisted into a JSON Schema typed
# dataSchema next to an optional editing UI
MANIFEST_SCHEMA_V3: dict[str, Any] = _document(
    SCHEMA_VERSION_3,
    "Web Widget Application Manifest 3.0.0",
    {
        **_FLAT_PROPERTIES,
        "dataSchema": {
            **_described(schema={"type": ["object", "boolean"]}, default={}),
            "required": ["name", "schema"],
        },
        "dataUserInterface": {"$ref": "#/$defs/dataUserInterface"},
    },
    ["path"],
    {"declaration": _declaration(None)},
)

# 4.0.0: an array of modules, each with a single declaration
MANIFEST_SCHEMA_V4: dict[str, Any] = _document(
    SCHEMA_VERSION_4,
    "Web Widget Application Manifest 4.0.0",
    {"modules": _array_of("module")},
    ["modules"],
    {
        "declaration": _declaration({"$ref": "#/$defs/schemaData"}),
        "module": _closed(
            {
                "kind": {"type": "string", "const": MODULE_KIND},
                "path": _NON_EMPTY,
                "name": _NON_EMPTY,
                "summary": _MARKDOWN,
                "description": _MARKDOWN,
                "icons": _array_of("icon"),
                "declaration": {"$ref": "#/$defs/declaration"},
                "dataUserInterface": {"$ref": "#/$defs/dataUserInterface"},
            },
            ["kind", "path"],
        ),
    },
)

MANIFEST_SCHEMAS: dict[str, dict[str, Any]] = {
    SCHEMA_VERSION_1: MANIFEST_SCHEMA_V1,
    SCHEMA_VERSION_2: MANIFEST_SCHEMA_V2,
    SCHEMA_VERSION_3: MANIFEST_SCHEMA_V3,
    SCHEMA_VERSION_4: MANIFEST_SCHEMA_V4,
}


def get_manifest_schema(version: str = LATEST_SCHEMA_VERSION) -> dict[str, Any]:
    """Return a copy of the manifest JSON schema for a revision.

    Args:
        version: A registered schema version string

    Returns:
        A dictionary containing the JSON Schema for that revision

    Raises:
        KeyError: If the version has no schema
    """
    return copy.deepcopy(MANIFEST_SCHEMAS[version])
