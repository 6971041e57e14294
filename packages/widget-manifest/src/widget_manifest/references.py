# SPDX-License-Identifier: MIT
"""Reference resolution.

Normalizes Reference-shaped values and module/icon paths into stable
identifiers. Resolution is string normalization only; no file system or
network access happens here, and nothing checks that the target exists.
"""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterator, Mapping

from .errors import ErrorKind, InvalidReferenceError

if TYPE_CHECKING:
    from .model import ManifestDocument, TypeReference

# Package name used for platform built-ins such as HTMLElement or Event
GLOBAL_PACKAGE = "global:"

_URL_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")


class Scope(str, Enum):
    """Where a resolved symbol lives relative to the referencing module."""

    GLOBAL = "global"
    MODULE = "module"
    PACKAGE = "package"
    EXTERNAL = "external"


@dataclass(frozen=True, slots=True)
class ResolvedReference:
    """A normalized ``(package, module, name)`` triple.

    ``package`` and ``module`` are None when the symbol is local and the
    caller did not supply the current package or module.
    """

    package: str | None
    module: str | None
    name: str
    scope: Scope

    @property
    def is_global(self) -> bool:
        return self.scope is Scope.GLOBAL

    @property
    def identifier(self) -> str:
        """Stable string form, e.g. ``my-pkg/src/x.js#Foo``."""
        if self.is_global:
            return f"{GLOBAL_PACKAGE}#{self.name}"
        location = "/".join(part for part in (self.package, self.module) if part)
        return f"{location}#{self.name}"

    def __str__(self) -> str:
        return self.identifier


def _field(reference: Any, key: str) -> Any:
    if isinstance(reference, Mapping):
        return reference.get(key)
    return getattr(reference, key, None)


def resolve_reference(
    reference: Any,
    *,
    package: str | None = None,
    module: str | None = None,
) -> ResolvedReference:
    """Resolve a Reference-shaped value.

    Args:
        reference: A mapping or object with ``name`` and optional ``package``
            and ``module``
        package: Name of the package containing the reference
        module: Path of the module containing the reference

    Returns:
        The normalized reference

    Raises:
        InvalidReferenceError: If the name or package is empty or not a string
    """
    name = _field(reference, "name")
    ref_package = _field(reference, "package")
    ref_module = _field(reference, "module")

    if not isinstance(name, str) or not name:
        raise InvalidReferenceError(
            "Reference name must be a non-empty string", ErrorKind.INVALID_REFERENCE
        )
    if ref_package is not None and (not isinstance(ref_package, str) or not ref_package):
        raise InvalidReferenceError(
            "Reference package must be a non-empty string", ErrorKind.INVALID_REFERENCE
        )
    if ref_module is not None and not isinstance(ref_module, str):
        raise InvalidReferenceError(
            "Reference module must be a string", ErrorKind.INVALID_REFERENCE
        )

    if ref_package == GLOBAL_PACKAGE:
        return ResolvedReference(GLOBAL_PACKAGE, None, name, Scope.GLOBAL)

    if ref_package is not None and ref_package != package:
        resolved_module = normalize_path(ref_module) if ref_module else None
        return ResolvedReference(ref_package, resolved_module, name, Scope.EXTERNAL)

    current_module = normalize_path(module) if module else None
    if not ref_module:
        return ResolvedReference(package, current_module, name, Scope.MODULE)

    resolved_module = normalize_path(ref_module)
    scope = Scope.MODULE if resolved_module == current_module else Scope.PACKAGE
    return ResolvedReference(package, resolved_module, name, scope)


def normalize_path(path: str) -> str:
    """Normalize a package-relative module, icon or UI path.

    Absolute URLs are returned unchanged.

    Raises:
        InvalidReferenceError: If the path is empty or escapes the package root
    """
    if not path:
        raise InvalidReferenceError("Path must not be empty", ErrorKind.INVALID_REFERENCE)
    if _URL_SCHEME.match(path):
        return path

    normalized = posixpath.normpath(path.replace("\\", "/")).lstrip("/")
    if normalized == ".." or normalized.startswith("../"):
        raise InvalidReferenceError(
            f"Path {path!r} points outside the package", ErrorKind.INVALID_REFERENCE
        )
    if normalized == ".":
        raise InvalidReferenceError(f"Path {path!r} names no file", ErrorKind.INVALID_REFERENCE)
    return normalized


def iter_references(
    document: ManifestDocument,
    *,
    package: str | None = None,
) -> Iterator[tuple[TypeReference, ResolvedReference]]:
    """Yield every type reference in a document with its resolution.

    References are scoped by the path of the module that declares them.
    Invalid references are skipped; the validator reports those.
    """
    for module in document.modules():
        module_path = module.path if module.path else None
        for type_info in module.types():
            for reference in type_info.references:
                try:
                    resolved = resolve_reference(reference, package=package, module=module_path)
                except InvalidReferenceError:
                    continue
                yield reference, resolved
