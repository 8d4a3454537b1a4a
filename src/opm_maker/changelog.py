# SPDX-License-Identifier: MIT
"""Change log entries from the package description and a changes file.

A changes file is a plain text file where each entry starts with a headline
of the form ``<version> - <YYYY-MM-DD> <HH:MM:SS>``::

    1.0.1 - 2024-02-01 10:00:00
     - fixed the ticket zoom

    1.0.0 - 2024-01-15 09:30:00
     - initial release
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from .markup import attr, cdata, indent, text
from .models import ChangeLogEntry

HEADLINE_PATTERN = re.compile(
    r"\s*^(\d+\.\d+(?:\.\d+)?\s+-\s+\d{4}-\d{2}-\d{2}\s\d{2}:\d{2}:\d{2})\s+",
    re.MULTILINE,
)


def parse_changes(content: str) -> list[ChangeLogEntry]:
    """Split changes file content into entries.

    Text before the first headline is ignored.
    """
    parts = HEADLINE_PATTERN.split(content)
    entries = []
    for header, body in zip(parts[1::2], parts[2::2]):
        version, date = re.split(r"\s+-\s+", header, maxsplit=1)
        entries.append(
            ChangeLogEntry(message=body.rstrip(), version=version, date=date, cdata=True)
        )
    return entries


def read_changes_file(path: Path) -> list[ChangeLogEntry]:
    """Read a changes file; a missing file yields no entries."""
    if not path.is_file():
        return []
    return parse_changes(path.read_text(encoding="utf-8"))


def render_changelog(entries: Iterable[ChangeLogEntry]) -> list[str]:
    """Render ``<ChangeLog>`` elements, skipping entries without a message."""
    lines = []
    for entry in entries:
        if not entry.message:
            continue
        attributes = attr("Version", entry.version) + attr("Date", entry.date)
        if entry.cdata:
            body = cdata(f" {entry.message} ")
        else:
            body = text(entry.message)
        lines.append(f"{indent(1)}<ChangeLog{attributes}>{body}</ChangeLog>")
    return lines
