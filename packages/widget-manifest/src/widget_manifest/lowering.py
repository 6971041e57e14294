# SPDX-License-Identifier: MIT
"""Lower inline type strings to JSON Schema.

Older manifest revisions describe a widget's data with a free-form type
string (JSDoc, Closure or TypeScript syntax). This module maps the subset of
those strings with an unambiguous JSON Schema equivalent and refuses the
rest with UnmappableTypeError instead of guessing.
"""

from __future__ import annotations

import json
import re
from typing import Any

from .errors import ROOT_FIELD, UnmappableTypeError

_PRIMITIVES = {
    "string": "string",
    "String": "string",
    "number": "number",
    "Number": "number",
    "boolean": "boolean",
    "Boolean": "boolean",
    "object": "object",
    "Object": "object",
    "null": "null",
}

# Types that accept any JSON value
_UNCONSTRAINED = {"any", "unknown", "*"}

_NUMBER_LITERAL = re.compile(r"^-?(0|[1-9][0-9]*)(\.[0-9]+)?([eE][+-]?[0-9]+)?$")

_BRACKETS = {"<": ">", "(": ")", "[": "]", "{": "}"}

# Deeper nesting is refused rather than recursed into
MAX_NESTING_DEPTH = 32


def _split_top_level(text: str, separator: str) -> list[str]:
    """Split on a separator that is not nested in brackets or quotes."""
    parts: list[str] = []
    depth: list[str] = []
    quote: str | None = None
    start = 0
    for index, char in enumerate(text):
        if quote:
            if char == quote:
                quote = None
            continue
        if char in "'\"":
            quote = char
        elif char in _BRACKETS:
            depth.append(_BRACKETS[char])
        elif depth and char == depth[-1]:
            depth.pop()
        elif char == separator and not depth:
            parts.append(text[start:index])
            start = index + 1
    parts.append(text[start:])
    return parts


def _strip_parens(text: str) -> str:
    while text.startswith("(") and text.endswith(")"):
        inner = text[1:-1].strip()
        # "(a) | (b)" must not lose its outer characters
        if _split_top_level(inner, ")") != [inner]:
            break
        text = inner
    return text


def _string_literal(text: str) -> str | None:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"":
        return text[1:-1]
    return None


def _lower_union(
    members: list[str], original: str, field: str, depth: int
) -> dict[str, Any]:
    lowered = [_lower(member, original, field, depth + 1) for member in members]

    if any(schema == {} for schema in lowered):
        return {}

    literals = [_string_literal(member.strip()) for member in members]
    if all(literal is not None for literal in literals):
        return {"type": "string", "enum": literals}

    if all(set(schema) == {"type"} and isinstance(schema["type"], str) for schema in lowered):
        types: list[str] = []
        for schema in lowered:
            if schema["type"] not in types:
                types.append(schema["type"])
        return {"type": types[0]} if len(types) == 1 else {"type": types}

    return {"anyOf": lowered}


def _lower(text: str, original: str, field: str, depth: int = 0) -> dict[str, Any]:
    text = _strip_parens(text.strip())
    if not text or depth > MAX_NESTING_DEPTH:
        raise UnmappableTypeError(original, field)

    members = _split_top_level(text, "|")
    if len(members) > 1:
        return _lower_union(members, original, field, depth)

    if text in _UNCONSTRAINED:
        return {}
    if text in _PRIMITIVES:
        return {"type": _PRIMITIVES[text]}
    if text in ("Array", "array"):
        return {"type": "array"}
    if text in ("true", "false"):
        return {"const": text == "true"}

    literal = _string_literal(text)
    if literal is not None:
        return {"const": literal}
    if _NUMBER_LITERAL.match(text):
        return {"const": json.loads(text)}

    if text.endswith("[]"):
        return {"type": "array", "items": _lower(text[:-2], original, field, depth + 1)}

    if text.endswith(">"):
        generic, _, arguments = text[:-1].partition("<")
        generic = generic.strip()
        params = _split_top_level(arguments, ",")
        if generic in ("Array", "ReadonlyArray") and len(params) == 1:
            return {"type": "array", "items": _lower(params[0], original, field, depth + 1)}
        if generic in ("Record", "Object") and len(params) == 2:
            if _lower(params[0], original, field, depth + 1) != {"type": "string"}:
                raise UnmappableTypeError(original, field)
            return {
                "type": "object",
                "additionalProperties": _lower(params[1], original, field, depth + 1),
            }

    raise UnmappableTypeError(original, field)


def lower_type(text: str, field: str = ROOT_FIELD) -> dict[str, Any]:
    """Lower an inline type string to an equivalent JSON Schema.

    Args:
        text: The type string, e.g. ``"string | null"`` or ``"Array<number>"``
        field: Field path reported if lowering fails

    Returns:
        A JSON Schema dictionary

    Raises:
        UnmappableTypeError: If the type has no unambiguous JSON Schema form,
            or nests deeper than MAX_NESTING_DEPTH

    Example:
        >>> lower_type("string[]")
        {'type': 'array', 'items': {'type': 'string'}}
    """
    return _lower(text, text, field)


def can_lower(text: str) -> bool:
    """Return whether ``text`` has a JSON Schema equivalent."""
    try:
        lower_type(text)
    except UnmappableTypeError:
        return False
    return True
