# SPDX-License-Identifier: MIT
"""In-memory document model for web widget manifests.

A ManifestDocument wraps the parsed JSON of one manifest together with the
RuleSet of its schema revision. The JSON is kept private and is never handed
out by reference, so a document cannot change once it has been created.

The entity classes below are read-only views over that JSON. Every revision
produces the same views (modules, declarations, data entries, icons), which
lets validation and tooling work across revisions without caring where a
particular revision keeps each piece.

View builders are lenient: a value of the wrong JSON type is skipped rather
than raised on. Reporting such values is the validator's job.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, Iterator, Mapping, TypeVar

from .errors import join_path
from .formats import parse_icon_sizes
from .registry import DataStyle, Layout, RuleSet

T = TypeVar("T")


class _Missing:
    """Marker for a key that is not present at all."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Missing:
        return self

    def __deepcopy__(self, memo: dict) -> _Missing:
        return self


MISSING: Any = _Missing()


class Presence(str, Enum):
    """Tri-state of an optional collection.

    An absent collection is undeclared, which is different from a
    collection that is declared to be empty.
    """

    ABSENT = "absent"
    EMPTY = "empty"
    POPULATED = "populated"


def presence(container: Any, key: str) -> Presence:
    """Return the presence of a list-valued key in a JSON object."""
    if not isinstance(container, Mapping) or key not in container:
        return Presence.ABSENT
    value = container[key]
    if isinstance(value, list) and not value:
        return Presence.EMPTY
    return Presence.POPULATED


@dataclass(frozen=True)
class Collection(Generic[T]):
    """An optional list-valued field together with its presence."""

    presence: Presence = Presence.ABSENT
    items: tuple[T, ...] = ()

    @classmethod
    def build(
        cls,
        container: Any,
        key: str,
        prefix: str,
        factory: Callable[[Mapping[str, Any], str], T | None],
    ) -> Collection[T]:
        state = presence(container, key)
        raw = container.get(key) if state is not Presence.ABSENT else None
        if not isinstance(raw, list):
            return cls(state)
        items = []
        for index, entry in enumerate(raw):
            if isinstance(entry, Mapping):
                item = factory(entry, join_path(prefix, key, index))
                if item is not None:
                    items.append(item)
        return cls(state, tuple(items))

    @property
    def is_absent(self) -> bool:
        return self.presence is Presence.ABSENT

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


def _text(raw: Mapping[str, Any], key: str) -> str | None:
    value = raw.get(key)
    return value if isinstance(value, str) else None


def _integer(raw: Mapping[str, Any], key: str) -> int | None:
    value = raw.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


@dataclass(frozen=True)
class Reference:
    """A named pointer to an exported symbol."""

    name: str | None = None
    package: str | None = None
    module: str | None = None
    field_path: str = ""


@dataclass(frozen=True)
class TypeReference(Reference):
    """A reference into a type string, optionally bounded by a character range.

    ``start`` and ``end`` are kept exactly as present in the document so that
    a half-specified range can be reported.
    """

    start: int | None = None
    end: int | None = None
    has_start: bool = False
    has_end: bool = False

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], field_path: str) -> TypeReference:
        return cls(
            name=_text(raw, "name"),
            package=_text(raw, "package"),
            module=_text(raw, "module"),
            start=_integer(raw, "start"),
            end=_integer(raw, "end"),
            has_start="start" in raw,
            has_end="end" in raw,
            field_path=field_path,
        )

    @property
    def has_range(self) -> bool:
        return self.has_start and self.has_end


@dataclass(frozen=True)
class TypeInfo:
    """An inline type description with references into its text."""

    text: str
    references: Collection[TypeReference] = field(default_factory=Collection)
    source: str | None = None
    field_path: str = ""

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], field_path: str) -> TypeInfo | None:
        text = _text(raw, "text")
        if text is None:
            return None
        source = raw.get("source")
        return cls(
            text=text,
            references=Collection.build(raw, "references", field_path, TypeReference.from_raw),
            source=_text(source, "href") if isinstance(source, Mapping) else None,
            field_path=field_path,
        )


def _type_of(raw: Mapping[str, Any], field_path: str) -> TypeInfo | None:
    value = raw.get("type")
    if not isinstance(value, Mapping):
        return None
    return TypeInfo.from_raw(value, join_path(field_path, "type"))


@dataclass(frozen=True)
class Described:
    """Common shape of named, documented declaration members."""

    name: str | None = None
    summary: str | None = None
    description: str | None = None
    field_path: str = ""

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], field_path: str) -> Any:
        return cls(
            name=_text(raw, "name"),
            summary=_text(raw, "summary"),
            description=_text(raw, "description"),
            field_path=field_path,
        )


@dataclass(frozen=True)
class Slot(Described):
    """A shadow DOM insertion point; the empty name is the default slot."""


@dataclass(frozen=True)
class CssPart(Described):
    """An internal element exposed for external styling."""


@dataclass(frozen=True)
class Portal(Described):
    pass


@dataclass(frozen=True)
class CssCustomProperty(Described):
    syntax: str | None = None
    default: str | None = None

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], field_path: str) -> CssCustomProperty:
        return cls(
            name=_text(raw, "name"),
            summary=_text(raw, "summary"),
            description=_text(raw, "description"),
            syntax=_text(raw, "syntax"),
            default=_text(raw, "default"),
            field_path=field_path,
        )


@dataclass(frozen=True)
class Parameter(Described):
    type: TypeInfo | None = None
    default: str | None = None
    optional: bool = False

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], field_path: str) -> Parameter:
        return cls(
            name=_text(raw, "name"),
            summary=_text(raw, "summary"),
            description=_text(raw, "description"),
            type=_type_of(raw, field_path),
            default=_text(raw, "default"),
            optional=raw.get("optional") is True,
            field_path=field_path,
        )


@dataclass(frozen=True)
class Demo:
    url: str | None = None
    description: str | None = None
    source: str | None = None
    field_path: str = ""

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], field_path: str) -> Demo:
        source = raw.get("source")
        return cls(
            url=_text(raw, "url"),
            description=_text(raw, "description"),
            source=_text(source, "href") if isinstance(source, Mapping) else None,
            field_path=field_path,
        )


@dataclass(frozen=True)
class Icon:
    path: str | None = None
    sizes: str | None = None
    type: str | None = None
    field_path: str = ""

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], field_path: str) -> Icon:
        return cls(
            path=_text(raw, "path"),
            sizes=_text(raw, "sizes"),
            type=_text(raw, "type"),
            field_path=field_path,
        )

    @property
    def dimensions(self) -> list[tuple[int, int]]:
        """Declared (width, height) pairs; empty for ``any`` or malformed sizes."""
        if self.sizes is None:
            return []
        return parse_icon_sizes(self.sizes) or []


@dataclass(frozen=True)
class DataUserInterface:
    """A secondary module providing an editor for the widget's data."""

    path: str | None = None
    fallback_path: str | None = None
    field_path: str = ""

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], field_path: str) -> DataUserInterface:
        return cls(
            path=_text(raw, "path"),
            fallback_path=_text(raw, "fallbackPath"),
            field_path=field_path,
        )


@dataclass(frozen=True)
class Data:
    """The widget's configurable data.

    Depending on the revision the shape is described either by an inline
    ``type`` or by a JSON Schema in ``schema``. ``schema`` and ``default``
    are MISSING when absent, since null is a legitimate value for both.
    """

    name: str | None = None
    summary: str | None = None
    description: str | None = None
    style: DataStyle = DataStyle.JSON_SCHEMA
    type: TypeInfo | None = None
    schema: Any = MISSING
    default: Any = MISSING
    field_path: str = ""

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], field_path: str, style: DataStyle) -> Data:
        return cls(
            name=_text(raw, "name"),
            summary=_text(raw, "summary"),
            description=_text(raw, "description"),
            style=style,
            type=_type_of(raw, field_path) if style is DataStyle.INLINE_TYPE else None,
            schema=raw.get("schema", MISSING) if style is DataStyle.JSON_SCHEMA else MISSING,
            default=raw.get("default", MISSING),
            field_path=field_path,
        )

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    @property
    def has_schema(self) -> bool:
        if self.style is DataStyle.INLINE_TYPE:
            return self.type is not None
        return self.schema is not MISSING


@dataclass(frozen=True)
class Declaration:
    """The described surface of a widget."""

    parameters: Collection[Parameter] = field(default_factory=Collection)
    portals: Collection[Portal] = field(default_factory=Collection)
    slots: Collection[Slot] = field(default_factory=Collection)
    css_parts: Collection[CssPart] = field(default_factory=Collection)
    css_properties: Collection[CssCustomProperty] = field(default_factory=Collection)
    demos: Collection[Demo] = field(default_factory=Collection)
    sandboxed: bool | None = None
    data: Data | None = None
    field_path: str = ""

    @classmethod
    def from_raw(
        cls,
        raw: Mapping[str, Any],
        field_path: str,
        rule_set: RuleSet,
    ) -> Declaration:
        data = None
        data_key = rule_set.declaration_data_key
        if data_key and isinstance(raw.get(data_key), Mapping):
            data = Data.from_raw(raw[data_key], join_path(field_path, data_key), rule_set.data_style)
        sandboxed = raw.get("sandboxed")
        return cls(
            parameters=Collection.build(raw, "parameters", field_path, Parameter.from_raw),
            portals=Collection.build(raw, "portals", field_path, Portal.from_raw),
            slots=Collection.build(raw, "slots", field_path, Slot.from_raw),
            css_parts=Collection.build(raw, "cssParts", field_path, CssPart.from_raw),
            css_properties=Collection.build(
                raw, "cssProperties", field_path, CssCustomProperty.from_raw
            ),
            demos=Collection.build(raw, "demos", field_path, Demo.from_raw),
            sandboxed=sandboxed if isinstance(sandboxed, bool) else None,
            data=data,
            field_path=field_path,
        )

    def named_collections(self) -> dict[str, Collection[Any]]:
        """Collections whose members are identified by name, keyed by JSON key."""
        return {
            "parameters": self.parameters,
            "portals": self.portals,
            "slots": self.slots,
            "cssParts": self.css_parts,
            "cssProperties": self.css_properties,
        }


@dataclass(frozen=True)
class Module:
    """One described widget module.

    Flat revisions describe exactly one module: the document itself, with an
    empty ``field_path``.
    """

    path: str | None = None
    name: str | None = None
    summary: str | None = None
    description: str | None = None
    icons: Collection[Icon] = field(default_factory=Collection)
    declarations: tuple[Declaration, ...] = ()
    data: Data | None = None
    data_user_interface: DataUserInterface | None = None
    field_path: str = ""

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], field_path: str, rule_set: RuleSet) -> Module:
        key = rule_set.declarations_key
        declarations: list[Declaration] = []
        if rule_set.many_declarations:
            entries = raw.get(key)
            if isinstance(entries, list):
                for index, entry in enumerate(entries):
                    if isinstance(entry, Mapping):
                        declarations.append(
                            Declaration.from_raw(entry, join_path(field_path, key, index), rule_set)
                        )
        elif isinstance(raw.get(key), Mapping):
            declarations.append(Declaration.from_raw(raw[key], join_path(field_path, key), rule_set))

        data = None
        data_key = rule_set.module_data_key
        if data_key and isinstance(raw.get(data_key), Mapping):
            data = Data.from_raw(raw[data_key], join_path(field_path, data_key), rule_set.data_style)

        ui = None
        if rule_set.supports_data_ui and isinstance(raw.get("dataUserInterface"), Mapping):
            ui = DataUserInterface.from_raw(
                raw["dataUserInterface"], join_path(field_path, "dataUserInterface")
            )

        return cls(
            path=_text(raw, "path"),
            name=_text(raw, "name"),
            summary=_text(raw, "summary"),
            description=_text(raw, "description"),
            icons=Collection.build(raw, "icons", field_path, Icon.from_raw)
            if rule_set.supports_icons
            else Collection(),
            declarations=tuple(declarations),
            data=data,
            data_user_interface=ui,
            field_path=field_path,
        )

    def data_entries(self) -> list[Data]:
        """Every data entry of this module, wherever the revision keeps it."""
        entries = [d.data for d in self.declarations if d.data is not None]
        if self.data is not None:
            entries.append(self.data)
        return entries

    def types(self) -> Iterator[TypeInfo]:
        """Every inline type description in this module."""
        for declaration in self.declarations:
            for parameter in declaration.parameters:
                if parameter.type is not None:
                    yield parameter.type
        for data in self.data_entries():
            if data.type is not None:
                yield data.type


class ManifestDocument:
    """An immutable, version-tagged manifest.

    Create documents with :func:`widget_manifest.parser.parse` or
    :func:`widget_manifest.parser.load`. The underlying JSON is only ever
    exposed as a deep copy.
    """

    __slots__ = ("_rule_set", "_content")

    def __init__(self, content: Mapping[str, Any], rule_set: RuleSet):
        self._rule_set = rule_set
        self._content: dict[str, Any] = copy.deepcopy(dict(content))

    @property
    def schema_version(self) -> str:
        return self._rule_set.version

    @property
    def rule_set(self) -> RuleSet:
        return self._rule_set

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy of the document's JSON object."""
        return copy.deepcopy(self._content)

    def get(self, key: str, default: Any = None) -> Any:
        """Return a deep copy of a top-level value."""
        return copy.deepcopy(self._content.get(key, default))

    def __contains__(self, key: object) -> bool:
        return key in self._content

    def keys(self) -> list[str]:
        return list(self._content)

    def modules(self) -> list[Module]:
        """The described modules, in document order."""
        if self._rule_set.layout is Layout.FLAT:
            return [Module.from_raw(self._content, "", self._rule_set)]

        modules = []
        raw_modules = self._content.get("modules")
        if isinstance(raw_modules, list):
            for index, raw in enumerate(raw_modules):
                if isinstance(raw, Mapping):
                    modules.append(
                        Module.from_raw(raw, join_path("modules", index), self._rule_set)
                    )
        return modules

    def declarations(self) -> list[Declaration]:
        return [d for module in self.modules() for d in module.declarations]

    def data_entries(self) -> list[Data]:
        return [d for module in self.modules() for d in module.data_entries()]

    def icons(self) -> list[Icon]:
        return [icon for module in self.modules() for icon in module.icons]

    def data_user_interfaces(self) -> list[DataUserInterface]:
        return [
            module.data_user_interface
            for module in self.modules()
            if module.data_user_interface is not None
        ]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ManifestDocument):
            return NotImplemented
        return self.schema_version == other.schema_version and self._content == other._content

    def __hash__(self) -> int:
        return hash(self.schema_version)

    def __repr__(self) -> str:
        return f"ManifestDocument(schema_version={self.schema_version!r}, keys={self.keys()!r})"
