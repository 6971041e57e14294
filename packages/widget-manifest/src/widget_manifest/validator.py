# SPDX-License-Identifier: MIT
"""Manifest validation for web widget manifests.

Validation runs in two passes over a document:

1. A per-field pass checks the document against its revision's JSON Schema.
   Missing required fields and mistyped or malformed values are errors;
   fields the revision does not know are warnings, so that manifests may
   carry newer optional fields.
2. A cross-field pass checks invariants spanning several fields: type
   reference ranges, data defaults against their schema or inline type, and
   editing UIs declared without a data schema.

Every problem is collected; validation never stops at the first error and
never modifies the document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping, NoReturn

from jsonschema import Draft202012Validator, SchemaError, ValidationError
from jsonschema.exceptions import best_match
from referencing import Registry
from referencing.exceptions import NoSuchResource, Unresolvable

from .errors import (
    ErrorKind,
    ManifestValidationError,
    UnmappableTypeError,
    ValidationErrorDetail,
    format_path,
    join_path,
)
from .formats import FORMAT_CHECKER, css_syntax_error
from .lowering import lower_type
from .model import Data, Declaration, ManifestDocument, Module, TypeInfo
from .registry import DataStyle, RuleSet
from .schema import CSS_PROPERTY_NAME_PATTERN


@dataclass
class ValidationResult:
    """Result of manifest validation.

    Attributes:
        valid: Whether the manifest has no errors (warnings do not count)
        errors: Structural defects
        warnings: Unrecognized fields and other non-blocking findings
        document: The validated document, returned even when invalid
    """

    valid: bool
    errors: list[ValidationErrorDetail] = field(default_factory=list)
    warnings: list[ValidationErrorDetail] = field(default_factory=list)
    document: ManifestDocument | None = None

    def errors_at(self, path: str) -> list[ValidationErrorDetail]:
        """Errors reported for exactly this field path."""
        return [error for error in self.errors if error.field == path]


def _format_error_message(error: ValidationError) -> str:
    """Format a jsonschema error into a human-readable message."""
    if error.validator == "type":
        expected = error.validator_value
        if isinstance(expected, list):
            expected = " or ".join(expected)
        actual = type(error.instance).__name__
        return f"Expected {expected}, got {actual}"

    if error.validator == "pattern":
        if error.validator_value == CSS_PROPERTY_NAME_PATTERN:
            return "CSS custom property names must begin with '--'"
        return f"Value does not match required pattern {error.validator_value}"

    if error.validator == "format":
        if error.validator_value == "css-syntax" and isinstance(error.instance, str):
            return f"Invalid CSS syntax string: {css_syntax_error(error.instance)}"
        if error.validator_value == "icon-sizes":
            return "Icon sizes must be space-separated WxH tokens or 'any'"
        return f"Invalid {error.validator_value} format"

    if error.validator == "enum":
        allowed = ", ".join(repr(v) for v in error.validator_value)
        return f"Value must be one of: {allowed}"

    if error.validator == "const":
        return f"Value must be {error.validator_value!r}"

    if error.validator == "minLength":
        if error.validator_value == 1:
            return "String must not be empty"
        return f"String must be at least {error.validator_value} character(s)"

    if error.validator == "minimum":
        return f"Value must be at least {error.validator_value}"

    return error.message


_KINDS = {
    "type": ErrorKind.INVALID_TYPE,
    "pattern": ErrorKind.PATTERN_MISMATCH,
    "format": ErrorKind.INVALID_FORMAT,
}


def _field_pass(
    raw: Mapping[str, Any], rule_set: RuleSet
) -> tuple[list[ValidationErrorDetail], list[ValidationErrorDetail]]:
    errors: list[ValidationErrorDetail] = []
    warnings: list[ValidationErrorDetail] = []

    schema_errors = sorted(
        rule_set.validator.iter_errors(raw),
        key=lambda e: [str(part) for part in e.absolute_path],
    )
    for error in schema_errors:
        parent = format_path(error.absolute_path)

        if error.validator == "additionalProperties":
            known = error.schema.get("properties", {})
            for key in error.instance:
                if key not in known:
                    warnings.append(
                        ValidationErrorDetail(
                            kind=ErrorKind.UNKNOWN_FIELD,
                            field=join_path(parent, key),
                            message=f"Unrecognized field: {key}",
                            value=error.instance[key],
                        )
                    )
            continue

        if error.validator == "required":
            for key in error.validator_value:
                if isinstance(error.instance, Mapping) and key not in error.instance:
                    errors.append(
                        ValidationErrorDetail(
                            kind=ErrorKind.MISSING_FIELD,
                            field=join_path(parent, key),
                            message=f"Missing required field: {key}",
                        )
                    )
            continue

        errors.append(
            ValidationErrorDetail(
                kind=_KINDS.get(error.validator, ErrorKind.INVALID_VALUE),
                field=parent,
                message=_format_error_message(error),
                value=error.instance if error.absolute_path else None,
            )
        )

    # jsonschema yields one "required" error per missing key, each listing
    # every required key, so the loop above can report a key more than once
    unique: dict[tuple[ErrorKind, str, str], ValidationErrorDetail] = {}
    for detail in errors:
        unique.setdefault((detail.kind, detail.field, detail.message), detail)
    return list(unique.values()), warnings


def _check_type_references(type_info: TypeInfo) -> Iterator[tuple[bool, ValidationErrorDetail]]:
    """Yield (is_error, detail) for each reference problem in a type."""
    for reference in type_info.references:
        if reference.has_start != reference.has_end:
            yield True, ValidationErrorDetail(
                kind=ErrorKind.REFERENCE_INCOMPLETE_RANGE,
                field=reference.field_path,
                message="start/end must both be present or both absent",
            )
        elif reference.has_range:
            start, end = reference.start, reference.end
            if start is None or end is None:
                # Mistyped offsets are reported by the per-field pass
                continue
            if not 0 <= start <= end <= len(type_info.text):
                yield True, ValidationErrorDetail(
                    kind=ErrorKind.REFERENCE_OUT_OF_RANGE,
                    field=reference.field_path,
                    message=(
                        f"Range {start}..{end} must satisfy 0 <= start <= end <= "
                        f"{len(type_info.text)} (length of the type text)"
                    ),
                    value={"start": start, "end": end},
                )
        elif reference.name and reference.name != type_info.text.strip():
            yield False, ValidationErrorDetail(
                kind=ErrorKind.REFERENCE_NAME_MISMATCH,
                field=join_path(reference.field_path, "name"),
                message=(
                    f"Reference {reference.name!r} has no range, so it should name "
                    f"the whole type {type_info.text!r}"
                ),
                value=reference.name,
            )


def _refuse_retrieval(uri: str) -> NoReturn:
    raise NoSuchResource(ref=uri)


# Data schemas may only reference themselves; nothing is fetched
_LOCAL_ONLY = Registry(retrieve=_refuse_retrieval)


def _data_schema(data: Data) -> tuple[Any, ValidationErrorDetail | None]:
    """Return the JSON Schema that governs a data entry's default.

    Returns (None, None) when there is nothing to check against, and
    (None, error) when the declared schema is itself invalid.
    """
    if data.style is DataStyle.INLINE_TYPE:
        if data.type is None:
            return None, None
        try:
            return lower_type(data.type.text), None
        except UnmappableTypeError:
            # Free-form type strings cannot be checked structurally
            return None, None

    if not isinstance(data.schema, (Mapping, bool)):
        return None, None
    try:
        Draft202012Validator.check_schema(data.schema)
    except SchemaError as e:
        return None, ValidationErrorDetail(
            kind=ErrorKind.INVALID_SCHEMA,
            field=join_path(data.field_path, "schema"),
            message=f"Data schema is not a valid JSON Schema: {e.message}",
        )
    return data.schema, None


def _check_data(data: Data) -> list[ValidationErrorDetail]:
    schema, problem = _data_schema(data)
    if problem is not None:
        return [problem]
    if schema is None or not data.has_default:
        return []

    validator = Draft202012Validator(
        schema, registry=_LOCAL_ONLY, format_checker=FORMAT_CHECKER
    )
    try:
        error = best_match(validator.iter_errors(data.default))
    except Unresolvable as e:
        return [
            ValidationErrorDetail(
                kind=ErrorKind.INVALID_SCHEMA,
                field=join_path(data.field_path, "schema"),
                message=f"Data schema has an unresolvable reference: {e}",
            )
        ]
    except RecursionError:
        return [
            ValidationErrorDetail(
                kind=ErrorKind.INVALID_SCHEMA,
                field=join_path(data.field_path, "schema"),
                message="Data schema references itself without end",
            )
        ]
    if error is None:
        return []

    location = format_path(error.absolute_path)
    where = "" if not error.absolute_path else f" at {location}"
    return [
        ValidationErrorDetail(
            kind=ErrorKind.DEFAULT_MISMATCH,
            field=join_path(data.field_path, "default"),
            message=f"Default value does not satisfy the data schema{where}: {error.message}",
            value=data.default,
        )
    ]


def _check_duplicates(declaration: Declaration) -> list[ValidationErrorDetail]:
    warnings = []
    for key, collection in declaration.named_collections().items():
        seen: set[str] = set()
        for item in collection:
            if item.name is None:
                continue
            if item.name in seen:
                warnings.append(
                    ValidationErrorDetail(
                        kind=ErrorKind.DUPLICATE_NAME,
                        field=join_path(item.field_path, "name"),
                        message=f"Duplicate name {item.name!r} in {key}",
                        value=item.name,
                    )
                )
            seen.add(item.name)
    return warnings


def _check_module(
    module: Module,
) -> tuple[list[ValidationErrorDetail], list[ValidationErrorDetail]]:
    errors: list[ValidationErrorDetail] = []
    warnings: list[ValidationErrorDetail] = []

    for type_info in module.types():
        for is_error, detail in _check_type_references(type_info):
            (errors if is_error else warnings).append(detail)

    data_entries = module.data_entries()
    for data in data_entries:
        errors.extend(_check_data(data))

    for declaration in module.declarations:
        warnings.extend(_check_duplicates(declaration))

    ui = module.data_user_interface
    if ui is not None and not any(data.has_schema for data in data_entries):
        warnings.append(
            ValidationErrorDetail(
                kind=ErrorKind.UI_WITHOUT_SCHEMA,
                field=ui.field_path,
                message="A data user interface is declared but no data schema describes the data",
            )
        )
    return errors, warnings


def validate(document: ManifestDocument) -> ValidationResult:
    """Validate a manifest document against its revision's rules.

    Args:
        document: A parsed manifest

    Returns:
        ValidationResult with every error and warning found

    Example:
        >>> from widget_manifest import parse
        >>> result = validate(parse('{"schemaVersion": "2.0.0", "path": "w.js", "extra": 1}'))
        >>> result.valid, len(result.warnings)
        (True, 1)
    """
    raw = document.to_dict()
    errors, warnings = _field_pass(raw, document.rule_set)

    for module in document.modules():
        module_errors, module_warnings = _check_module(module)
        errors.extend(module_errors)
        warnings.extend(module_warnings)

    return ValidationResult(
        valid=not errors,
        errors=errors,
        warnings=warnings,
        document=document,
    )


def validate_raw(raw: Mapping[str, Any], rule_set: RuleSet) -> ValidationResult:
    """Validate decoded JSON against an explicit rule set.

    The document's own ``schemaVersion`` is checked against the rule set like
    any other field.
    """
    return validate(ManifestDocument(raw, rule_set))


def validate_strict(document: ManifestDocument) -> ManifestDocument:
    """Validate a document and raise if it has errors.

    Returns:
        The same document, for chaining

    Raises:
        ManifestValidationError: If the document has any errors
    """
    result = validate(document)
    if not result.valid:
        raise ManifestValidationError(result.errors)
    return document
