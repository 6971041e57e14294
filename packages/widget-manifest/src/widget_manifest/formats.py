# SPDX-License-Identifier: MIT
"""String grammars checked during validation.

Only the well-formedness of the tokens is checked here. Whether a CSS data
type actually exists, or whether an icon file has the advertised size, is
outside the scope of a manifest library.
"""

from __future__ import annotations

import re

from jsonschema import FormatChecker

_SIZE_TOKEN = re.compile(r"^([1-9][0-9]*)x([1-9][0-9]*)$")
_MIME_TYPE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9!#$&^_.+-]*/[A-Za-z0-9][A-Za-z0-9!#$&^_.+-]*$")

# <name> with an optional + (space separated list) or # (comma separated list)
_DATA_TYPE_COMPONENT = re.compile(r"^<([A-Za-z][A-Za-z0-9-]*)>([+#]?)$")
_IDENT_COMPONENT = re.compile(r"^-?[A-Za-z_][A-Za-z0-9_-]*([+#]?)$")


def css_syntax_error(syntax: str) -> str | None:
    """Check a CSS Properties and Values syntax string for well-formedness.

    Args:
        syntax: e.g. ``"<length> | <percentage>"`` or ``"small | medium"``

    Returns:
        None if the syntax string is well-formed, otherwise a description
        of the first problem found
    """
    text = syntax.strip()
    if not text:
        return "syntax string is empty"
    if text == "*":
        return None

    for index, component in enumerate(text.split("|")):
        component = component.strip()
        if not component:
            return f"component {index} is empty"
        if component == "*":
            return "the universal syntax '*' cannot be combined with other components"
        match = _DATA_TYPE_COMPONENT.match(component)
        if match:
            if match.group(1) == "transform-list" and match.group(2):
                return "<transform-list> does not accept a multiplier"
            continue
        if component.startswith("<"):
            return f"malformed data type name {component!r}"
        if not _IDENT_COMPONENT.match(component):
            return f"{component!r} is neither a data type name nor an identifier"
    return None


def parse_icon_sizes(sizes: str) -> list[tuple[int, int]] | None:
    """Parse an icon ``sizes`` attribute.

    Returns:
        The (width, height) pairs, an empty list for ``"any"``, or None when
        the value is malformed
    """
    tokens = sizes.split(" ")
    if not sizes or any(not token for token in tokens):
        return None
    if tokens == ["any"]:
        return []

    dimensions = []
    for token in tokens:
        match = _SIZE_TOKEN.match(token)
        if match is None:
            return None
        dimensions.append((int(match.group(1)), int(match.group(2))))
    return dimensions


FORMAT_CHECKER = FormatChecker(formats=())


@FORMAT_CHECKER.checks("css-syntax")
def is_css_syntax(instance: object) -> bool:
    if not isinstance(instance, str):
        return True
    return css_syntax_error(instance) is None


@FORMAT_CHECKER.checks("icon-sizes")
def is_icon_sizes(instance: object) -> bool:
    if not isinstance(instance, str):
        return True
    return parse_icon_sizes(instance) is not None


@FORMAT_CHECKER.checks("mime-type")
def is_mime_type(instance: object) -> bool:
    if not isinstance(instance, str):
        return True
    return _MIME_TYPE.match(instance) is not None
