# SPDX-License-Identifier: MIT
"""Database action compiler.

Translates the ordered list of declarative database actions into XML
fragments bucketed by lifecycle phase (Install, Upgrade, Uninstall), and
tracks created tables so every table that is never dropped explicitly gets a
``TableDrop`` on uninstall, most recently created first.

Example:
    >>> from opm_maker.models import DatabaseAction, TableCreate, Column
    >>> action = DatabaseAction(
    ...     table="opar_test",
    ...     payload=TableCreate(columns=(Column(name="id", type="INTEGER"),)),
    ... )
    >>> result = compile_database_actions([action])
    >>> [phase.value for phase in result.phases()]
    ['Install', 'Uninstall']
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from .markup import attr, cdata, indent, required_attr, text
from .models import (
    ActionPayload,
    Column,
    ColumnAdd,
    ColumnChange,
    ColumnDrop,
    DatabaseAction,
    ForeignKeyCreate,
    ForeignKeyDrop,
    ForeignKeyReference,
    Insert,
    Phase,
    TableCreate,
    TableDrop,
    UniqueCreate,
    UniqueDrop,
)

# Column types the installer's database abstraction understands
ALLOWED_COLUMN_TYPES = frozenset(
    {"DATE", "SMALLINT", "BIGINT", "INTEGER", "DECIMAL", "VARCHAR", "LONGBLOB"}
)

PHASE_ORDER = (Phase.INSTALL, Phase.UPGRADE, Phase.UNINSTALL)


class ColumnTypeError(Exception):
    """Raised when a column uses a type outside ALLOWED_COLUMN_TYPES.

    Attributes:
        column_type: The offending type
        operation: The operation the column belongs to (e.g. "TableCreate")
    """

    def __init__(self, column_type: str, operation: str):
        self.column_type = column_type
        self.operation = operation
        self.allowed = sorted(ALLOWED_COLUMN_TYPES)
        super().__init__(
            f"{column_type} is not allowed in {operation}. "
            f"Allowed types: {', '.join(self.allowed)}"
        )


class TableLifecycle:
    """Tracks tables created and not yet dropped, in creation order.

    A second create of the same table before a drop overwrites its sequence
    number.
    """

    def __init__(self) -> None:
        self._pending: dict[str, int] = {}
        self._counter = 0

    def created(self, table: str) -> None:
        self._pending[table] = self._counter
        self._counter += 1

    def dropped(self, table: str) -> None:
        self._pending.pop(table, None)

    def pending(self) -> list[str]:
        """Return pending tables, most recently created first."""
        return sorted(self._pending, key=self._pending.__getitem__, reverse=True)

    def __contains__(self, table: object) -> bool:
        return table in self._pending

    def __len__(self) -> int:
        return len(self._pending)


@dataclass
class DatabaseCompilation:
    """Result of compiling database actions.

    Attributes:
        fragments: Rendered fragments per phase, in emission order
        lifecycle: The table accumulator after compilation
    """

    fragments: dict[Phase, list[str]] = field(
        default_factory=lambda: {phase: [] for phase in PHASE_ORDER}
    )
    lifecycle: TableLifecycle = field(default_factory=TableLifecycle)

    @property
    def install(self) -> list[str]:
        return self.fragments[Phase.INSTALL]

    @property
    def upgrade(self) -> list[str]:
        return self.fragments[Phase.UPGRADE]

    @property
    def uninstall(self) -> list[str]:
        return self.fragments[Phase.UNINSTALL]

    def phases(self) -> list[Phase]:
        """Phases with at least one fragment, in document order."""
        return [phase for phase in PHASE_ORDER if self.fragments[phase]]

    def to_xml(self) -> list[str]:
        """Render one ``<Database{Phase} Type="..">`` block per non-empty phase."""
        blocks = []
        for phase in self.phases():
            tag = f"Database{phase.value}"
            body = "\n".join(self.fragments[phase])
            blocks.append(
                f'{indent(1)}<{tag} Type="{phase.order}">\n{body}\n{indent(1)}</{tag}>'
            )
        return blocks


def compile_database_actions(
    actions: Iterable[DatabaseAction],
    lifecycle: Optional[TableLifecycle] = None,
) -> DatabaseCompilation:
    """Compile database actions into phase-bucketed XML fragments.

    Each resolved version of an action is classified and rendered separately.
    After all actions, tables still pending in the lifecycle get an implicit
    unversioned ``TableDrop`` in the Uninstall phase.

    Args:
        actions: Database actions in declaration order
        lifecycle: Accumulator to continue from (a fresh one by default)

    Returns:
        DatabaseCompilation holding the fragments and the lifecycle

    Raises:
        ColumnTypeError: If a column type is not allowed
    """
    result = DatabaseCompilation(lifecycle=lifecycle if lifecycle is not None else TableLifecycle())

    for action in actions:
        for version in action.versions:
            if isinstance(action.payload, TableCreate):
                result.lifecycle.created(action.table)
            elif isinstance(action.payload, TableDrop):
                result.lifecycle.dropped(action.table)

            fragment = render_action(action.table, action.payload, version)
            result.fragments[action.phase_for(version)].append(fragment)

    for table in result.lifecycle.pending():
        result.fragments[Phase.UNINSTALL].append(render_action(table, TableDrop(), None))

    return result


# =============================================================================
# Renderers
# =============================================================================


def check_column_type(column_type: str, operation: str) -> str:
    """Return column_type if allowed, else raise ColumnTypeError."""
    if column_type not in ALLOWED_COLUMN_TYPES:
        raise ColumnTypeError(column_type, operation)
    return column_type


def _column_options(column: Column) -> str:
    options = attr("Size", column.size)
    if column.auto_increment:
        options += ' AutoIncrement="true"'
    if column.primary_key:
        options += ' PrimaryKey="true"'
    return options


def _column(tag: str, column: Column, operation: str) -> str:
    column_type = check_column_type(column.type, operation)
    if tag == "ColumnChange":
        names = required_attr("NameNew", column.name) + required_attr("NameOld", column.old_name)
    else:
        names = required_attr("Name", column.name)
    return (
        f"{indent(3)}<{tag}{names}"
        f"{required_attr('Required', column.required)}"
        f"{required_attr('Type', column_type)}"
        f"{_column_options(column)} />"
    )


def _reference(reference: ForeignKeyReference, level: int) -> str:
    return (
        f"{indent(level)}<Reference"
        f"{required_attr('Local', reference.local)}"
        f"{required_attr('Foreign', reference.foreign)} />"
    )


def _block(tag: str, table: str, version: Optional[str], lines: list[str]) -> str:
    """Wrap body lines in ``<tag Name=".." Version="..">``."""
    opening = f"{indent(2)}<{tag}{required_attr('Name', table)}{attr('Version', version)}>"
    return "\n".join([opening, *lines, f"{indent(2)}</{tag}>"])


def _table_create(table: str, payload: TableCreate, version: Optional[str]) -> str:
    lines = [_column("Column", column, "TableCreate") for column in payload.columns]

    for unique in payload.uniques:
        lines.append(f"{indent(3)}<Unique{required_attr('Name', unique.constraint_name)}>")
        lines.extend(
            f"{indent(4)}<UniqueColumn{required_attr('Name', column)} />"
            for column in unique.columns
        )
        lines.append(f"{indent(3)}</Unique>")

    for key in payload.foreign_keys:
        lines.append(f"{indent(3)}<ForeignKey{required_attr('ForeignTable', key.foreign_table)}>")
        lines.extend(_reference(reference, 4) for reference in key.references)
        lines.append(f"{indent(3)}</ForeignKey>")

    return _block("TableCreate", table, version, lines)


def _table_drop(table: str, version: Optional[str]) -> str:
    return f"{indent(2)}<TableDrop{required_attr('Name', table)}{attr('Version', version)} />"


def _foreign_keys(tag: str, references: tuple[ForeignKeyReference, ...]) -> list[str]:
    lines = []
    for reference in references:
        lines.append(f"{indent(3)}<{tag}{required_attr('ForeignTable', reference.foreign_table)}>")
        lines.append(_reference(reference, 4))
        lines.append(f"{indent(3)}</{tag}>")
    return lines


def _insert(table: str, payload: Insert, version: Optional[str]) -> str:
    lines = []
    for data in payload.fields:
        if data.type:
            value = attr("Type", data.type) + ">" + cdata(data.value)
        else:
            value = ">" + text(data.value)
        lines.append(f"{indent(3)}<Data{required_attr('Key', data.name)}{value}</Data>")

    opening = f"{indent(2)}<Insert{required_attr('Table', table)}{attr('Version', version)}>"
    return "\n".join([opening, *lines, f"{indent(2)}</Insert>"])


def render_action(table: str, payload: ActionPayload, version: Optional[str]) -> str:
    """Render one database action for a single resolved version.

    Args:
        table: Table the action applies to
        payload: Kind-specific payload
        version: Resolved version, or None for unversioned actions

    Returns:
        The XML fragment, indented for placement inside a Database block

    Raises:
        ColumnTypeError: If a column type is not allowed
        TypeError: If the payload is not a known action payload
    """
    if isinstance(payload, TableCreate):
        return _table_create(table, payload, version)
    if isinstance(payload, TableDrop):
        return _table_drop(table, version)
    if isinstance(payload, Insert):
        return _insert(table, payload, version)
    if isinstance(payload, ColumnAdd):
        lines = [_column("ColumnAdd", column, "ColumnAdd") for column in payload.columns]
    elif isinstance(payload, ColumnChange):
        lines = [_column("ColumnChange", column, "ColumnChange") for column in payload.columns]
    elif isinstance(payload, ColumnDrop):
        lines = [f"{indent(3)}<ColumnDrop{required_attr('Name', column)} />" for column in payload.columns]
    elif isinstance(payload, ForeignKeyCreate):
        lines = _foreign_keys("ForeignKeyCreate", payload.references)
    elif isinstance(payload, ForeignKeyDrop):
        lines = _foreign_keys("ForeignKeyDrop", payload.references)
    elif isinstance(payload, UniqueCreate):
        lines = [f"{indent(3)}<UniqueCreate{required_attr('Name', payload.unique_name)}>"]
        lines.extend(
            f"{indent(4)}<UniqueColumn{required_attr('Name', column)} />"
            for column in payload.columns
        )
        lines.append(f"{indent(3)}</UniqueCreate>")
    elif isinstance(payload, UniqueDrop):
        lines = [f"{indent(3)}<UniqueDrop{required_attr('Name', payload.unique_name)} />"]
    else:
        raise TypeError(f"Unknown database action payload: {type(payload).__name__}")

    return _block("TableAlter", table, version, lines)
