# SPDX-License-Identifier: MIT
"""Data model for package descriptions.

Everything here is built once from the parsed JSON document and consumed
immediately by the emitters. Database actions are modelled as a common
``DatabaseAction`` envelope (table, versions, uninstall flag) carrying one
kind-specific payload type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Optional, Union


class Phase(str, Enum):
    """Package lifecycle phase a database action belongs to."""

    INSTALL = "Install"
    UPGRADE = "Upgrade"
    UNINSTALL = "Uninstall"

    @property
    def order(self) -> str:
        """Return the pre/post ordering tag used in the manifest."""
        return "pre" if self is Phase.UNINSTALL else "post"


class ActionKind(str, Enum):
    """Recognized database operation kinds."""

    TABLE_CREATE = "TableCreate"
    TABLE_DROP = "TableDrop"
    COLUMN_ADD = "ColumnAdd"
    COLUMN_DROP = "ColumnDrop"
    COLUMN_CHANGE = "ColumnChange"
    FOREIGN_KEY_CREATE = "ForeignKeyCreate"
    FOREIGN_KEY_DROP = "ForeignKeyDrop"
    UNIQUE_CREATE = "UniqueCreate"
    UNIQUE_DROP = "UniqueDrop"
    INSERT = "Insert"


KNOWN_ACTION_KINDS = frozenset(kind.value for kind in ActionKind)


def _text(value: Any) -> str:
    """Render a JSON scalar the way it appears in the manifest."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _optional_text(value: Any) -> Optional[str]:
    """Like _text, but empty values become None."""
    if value is None or value == "" or value is False:
        return None
    return _text(value)


def normalize_versions(raw: Any) -> tuple[Optional[str], ...]:
    """Normalize an action's ``version`` to a tuple of version strings.

    Examples:
        >>> normalize_versions(None)
        (None,)
        >>> normalize_versions("1.0.1")
        ('1.0.1',)
        >>> normalize_versions(["1.0.1", "1.0.2"])
        ('1.0.1', '1.0.2')
    """
    if isinstance(raw, (list, tuple)):
        return tuple(_optional_text(version) for version in raw)
    return (_optional_text(raw),)


# =============================================================================
# Database payloads
# =============================================================================


@dataclass(frozen=True, slots=True)
class Column:
    """Column definition used by TableCreate, ColumnAdd and ColumnChange.

    Attributes:
        name: Column name (for ColumnChange this is the new name)
        type: Column type, checked against the allowed set at render time
        required: Required flag, emitted verbatim
        size: Optional size (VARCHAR)
        auto_increment: Whether the column auto-increments
        primary_key: Whether the column is the primary key
        old_name: Previous column name (ColumnChange only)
    """

    name: str
    type: str
    required: str = ""
    size: Optional[str] = None
    auto_increment: bool = False
    primary_key: bool = False
    old_name: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Column:
        return cls(
            name=_text(data.get("new_name") or data.get("name")),
            type=_text(data.get("type")),
            required=_text(data.get("required")),
            size=_optional_text(data.get("size")),
            auto_increment=bool(data.get("auto_increment")),
            primary_key=bool(data.get("primary_key")),
            old_name=_text(data.get("old_name")),
        )


@dataclass(frozen=True, slots=True)
class UniqueConstraint:
    """Unique constraint nested in a TableCreate."""

    id: Optional[str] = None
    name: str = ""
    columns: tuple[str, ...] = ()

    @property
    def constraint_name(self) -> str:
        """Explicit id, else the column names joined with ``_``, else ``unique<name>``."""
        if self.id:
            return self.id
        if self.columns:
            return "_".join(self.columns)
        return "unique" + self.name


@dataclass(frozen=True, slots=True)
class ForeignKeyReference:
    """A local/foreign column pair pointing at ``foreign_table``."""

    foreign_table: str
    local: str
    foreign: str


@dataclass(frozen=True, slots=True)
class ForeignKey:
    """Foreign key nested in a TableCreate."""

    foreign_table: str
    references: tuple[ForeignKeyReference, ...] = ()


@dataclass(frozen=True, slots=True)
class InsertField:
    """One ``Data`` element of an Insert."""

    name: str
    value: str
    type: Optional[str] = None


@dataclass(frozen=True, slots=True)
class TableCreate:
    KIND: ClassVar[ActionKind] = ActionKind.TABLE_CREATE

    columns: tuple[Column, ...] = ()
    uniques: tuple[UniqueConstraint, ...] = ()
    foreign_keys: tuple[ForeignKey, ...] = ()


@dataclass(frozen=True, slots=True)
class TableDrop:
    KIND: ClassVar[ActionKind] = ActionKind.TABLE_DROP


@dataclass(frozen=True, slots=True)
class ColumnAdd:
    KIND: ClassVar[ActionKind] = ActionKind.COLUMN_ADD

    columns: tuple[Column, ...] = ()


@dataclass(frozen=True, slots=True)
class ColumnChange:
    KIND: ClassVar[ActionKind] = ActionKind.COLUMN_CHANGE

    columns: tuple[Column, ...] = ()


@dataclass(frozen=True, slots=True)
class ColumnDrop:
    KIND: ClassVar[ActionKind] = ActionKind.COLUMN_DROP

    columns: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ForeignKeyCreate:
    KIND: ClassVar[ActionKind] = ActionKind.FOREIGN_KEY_CREATE

    references: tuple[ForeignKeyReference, ...] = ()


@dataclass(frozen=True, slots=True)
class ForeignKeyDrop:
    KIND: ClassVar[ActionKind] = ActionKind.FOREIGN_KEY_DROP

    references: tuple[ForeignKeyReference, ...] = ()


@dataclass(frozen=True, slots=True)
class UniqueCreate:
    KIND: ClassVar[ActionKind] = ActionKind.UNIQUE_CREATE

    unique_name: str = ""
    columns: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class UniqueDrop:
    KIND: ClassVar[ActionKind] = ActionKind.UNIQUE_DROP

    unique_name: str = ""


@dataclass(frozen=True, slots=True)
class Insert:
    KIND: ClassVar[ActionKind] = ActionKind.INSERT

    fields: tuple[InsertField, ...] = ()


ActionPayload = Union[
    TableCreate,
    TableDrop,
    ColumnAdd,
    ColumnChange,
    ColumnDrop,
    ForeignKeyCreate,
    ForeignKeyDrop,
    UniqueCreate,
    UniqueDrop,
    Insert,
]


def _columns(data: dict[str, Any]) -> tuple[Column, ...]:
    return tuple(Column.from_dict(column) for column in data.get("columns") or [])


def _names(values: Any) -> tuple[str, ...]:
    return tuple(_text(value) for value in values or [])


def _references(entries: Any, foreign_table: Optional[str] = None) -> tuple[ForeignKeyReference, ...]:
    return tuple(
        ForeignKeyReference(
            foreign_table=foreign_table if foreign_table is not None else _text(entry.get("name")),
            local=_text(entry.get("local")),
            foreign=_text(entry.get("foreign")),
        )
        for entry in entries or []
    )


def _insert_value(value: Any) -> str:
    if isinstance(value, list):
        return "\n".join(_text(line) for line in value)
    return _text(value)


def parse_payload(kind: ActionKind, data: dict[str, Any]) -> ActionPayload:
    """Build the kind-specific payload from a raw ``database`` entry."""
    if kind is ActionKind.TABLE_CREATE:
        uniques = tuple(
            UniqueConstraint(
                id=_optional_text(unique.get("id")),
                name=_text(unique.get("name")),
                columns=_names(unique.get("columns")),
            )
            for unique in data.get("unique") or []
        )
        keys = tuple(
            ForeignKey(
                foreign_table=_text(key.get("name")),
                references=_references(key.get("references"), _text(key.get("name"))),
            )
            for key in data.get("keys") or []
        )
        return TableCreate(columns=_columns(data), uniques=uniques, foreign_keys=keys)
    if kind is ActionKind.TABLE_DROP:
        return TableDrop()
    if kind is ActionKind.COLUMN_ADD:
        return ColumnAdd(columns=_columns(data))
    if kind is ActionKind.COLUMN_CHANGE:
        return ColumnChange(columns=_columns(data))
    if kind is ActionKind.COLUMN_DROP:
        return ColumnDrop(columns=_names(data.get("columns")))
    if kind is ActionKind.FOREIGN_KEY_CREATE:
        return ForeignKeyCreate(references=_references(data.get("references")))
    if kind is ActionKind.FOREIGN_KEY_DROP:
        return ForeignKeyDrop(references=_references(data.get("references")))
    if kind is ActionKind.UNIQUE_CREATE:
        return UniqueCreate(
            unique_name=_text(data.get("unique_name")),
            columns=_names(data.get("columns")),
        )
    if kind is ActionKind.UNIQUE_DROP:
        return UniqueDrop(unique_name=_text(data.get("unique_name")))
    if kind is ActionKind.INSERT:
        fields = tuple(
            InsertField(
                name=_text(column.get("name")),
                value=_insert_value(column.get("value")),
                type=_optional_text(column.get("type")),
            )
            for column in data.get("columns") or []
        )
        return Insert(fields=fields)
    raise ValueError(f"Unhandled action kind: {kind}")


@dataclass(frozen=True, slots=True)
class DatabaseAction:
    """A declarative schema or data operation.

    Attributes:
        table: Table the action applies to
        payload: Kind-specific payload
        versions: Upgrade versions; ``(None,)`` means Install
        uninstall: Forces the Uninstall phase
    """

    table: str
    payload: ActionPayload
    versions: tuple[Optional[str], ...] = (None,)
    uninstall: bool = False

    @property
    def kind(self) -> ActionKind:
        return self.payload.KIND

    def phase_for(self, version: Optional[str]) -> Phase:
        """Classify one resolved version of this action."""
        if self.uninstall:
            return Phase.UNINSTALL
        return Phase.UPGRADE if version else Phase.INSTALL

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Optional[DatabaseAction]:
        """Parse a ``database`` entry, or return None for an unrecognized kind."""
        kind_name = data.get("type")
        if not isinstance(kind_name, str) or kind_name not in KNOWN_ACTION_KINDS:
            return None
        kind = ActionKind(kind_name)
        return cls(
            table=_text(data.get("name")),
            payload=parse_payload(kind, data),
            versions=normalize_versions(data.get("version")),
            uninstall=bool(data.get("uninstall")),
        )


# =============================================================================
# Hooks, intros and change log
# =============================================================================


@dataclass(frozen=True, slots=True)
class CodeHook:
    """Installation-time callback wrapped in framework glue code.

    Attributes:
        type: Hook type without prefix (Install, Upgrade, Uninstall, Reinstall)
        version: Optional version attribute
        function: Function to call (defaults to ``Code<type>``)
        package: Explicit target package name (defaults to the installed package)
        phase: pre/post ordering tag
    """

    type: str
    version: Optional[str] = None
    function: Optional[str] = None
    package: Optional[str] = None
    phase: str = "post"

    @property
    def tag(self) -> str:
        return f"Code{self.type}"

    @property
    def function_name(self) -> str:
        return self.function or self.tag

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CodeHook:
        return cls(
            type=_text(data.get("type")),
            version=_optional_text(data.get("version")),
            function=_optional_text(data.get("function")),
            package=_optional_text(data.get("package")),
            phase=_optional_text(data.get("time")) or "post",
        )


@dataclass(frozen=True, slots=True)
class IntroBlock:
    """Text shown to the administrator during a lifecycle phase."""

    type: str
    text: str
    phase: str = "post"
    lang: Optional[str] = None
    title: Optional[str] = None
    version: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IntroBlock:
        text = data.get("text")
        if isinstance(text, list):
            text = "<br />\n".join(_text(line) for line in text)
        return cls(
            type=_text(data.get("type")),
            text=_text(text),
            phase=_optional_text(data.get("time")) or "post",
            lang=_optional_text(data.get("lang")),
            title=_optional_text(data.get("title")),
            version=_optional_text(data.get("version")),
        )


@dataclass(frozen=True, slots=True)
class ChangeLogEntry:
    """One change log entry; ``cdata`` wraps the message in a CDATA section."""

    message: str
    version: Optional[str] = None
    date: Optional[str] = None
    cdata: bool = False

    @classmethod
    def from_value(cls, value: Any) -> ChangeLogEntry:
        if isinstance(value, dict):
            return cls(
                message=_text(value.get("message")),
                version=_optional_text(value.get("version")),
                date=_optional_text(value.get("date")),
            )
        return cls(message=_text(value))


# =============================================================================
# Package
# =============================================================================


@dataclass(frozen=True, slots=True)
class Vendor:
    name: str = ""
    url: str = ""


@dataclass(frozen=True, slots=True)
class Requirements:
    """Required packages and Perl modules, each mapping name to version."""

    packages: dict[str, str] = field(default_factory=dict)
    modules: dict[str, str] = field(default_factory=dict)


@dataclass
class PackageSpec:
    """Root entity built from the package description.

    Attributes:
        name: Package name, also the manifest file stem
        version: Package version
        frameworks: Supported framework versions, in declaration order
        vendor: Vendor name and URL
        license: License text
        descriptions: Language code to description text
        requirements: Required packages and modules
        database: Recognized database actions, in declaration order
        code_hooks: Code hooks, in declaration order
        intros: Intro blocks, in declaration order
        changes: Inline change log entries
        changes_file: Change log file, relative to the config file
        exclude_files: Regular expressions removing files from the file list
    """

    name: str
    version: str
    frameworks: list[str]
    vendor: Vendor = field(default_factory=Vendor)
    license: str = ""
    descriptions: dict[str, str] = field(default_factory=dict)
    requirements: Requirements = field(default_factory=Requirements)
    database: list[DatabaseAction] = field(default_factory=list)
    code_hooks: list[CodeHook] = field(default_factory=list)
    intros: list[IntroBlock] = field(default_factory=list)
    changes: list[ChangeLogEntry] = field(default_factory=list)
    changes_file: Optional[str] = None
    exclude_files: list[str] = field(default_factory=list)

    @property
    def manifest_filename(self) -> str:
        return f"{self.name}.sopm"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PackageSpec:
        """Create a PackageSpec from a validated package description."""
        vendor = data.get("vendor") or {}
        requires = data.get("requires") or {}

        database = []
        for entry in data.get("database") or []:
            action = DatabaseAction.from_dict(entry)
            if action is not None:
                database.append(action)

        return cls(
            name=_text(data["name"]),
            version=_text(data["version"]),
            frameworks=[_text(framework) for framework in data["framework"]],
            vendor=Vendor(name=_text(vendor.get("name")), url=_text(vendor.get("url"))),
            license=_text(data.get("license")),
            descriptions={
                _text(lang): _text(text) for lang, text in (data.get("description") or {}).items()
            },
            requirements=Requirements(
                packages={
                    _text(name): _text(version)
                    for name, version in (requires.get("package") or {}).items()
                },
                modules={
                    _text(name): _text(version)
                    for name, version in (requires.get("module") or {}).items()
                },
            ),
            database=database,
            code_hooks=[CodeHook.from_dict(hook) for hook in data.get("code") or []],
            intros=[IntroBlock.from_dict(intro) for intro in data.get("intro") or []],
            changes=[ChangeLogEntry.from_value(change) for change in data.get("changes") or []],
            changes_file=_optional_text(data.get("changes_file")),
            exclude_files=[_text(pattern) for pattern in data.get("exclude_files") or []],
        )
