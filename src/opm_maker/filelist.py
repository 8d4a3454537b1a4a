# SPDX-License-Identifier: MIT
"""File list collection for the manifest ``<Filelist>``."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from .markup import indent, required_attr

# Old-style DTL templates, unsupported from framework 4 on
DTL_TEMPLATE_PATTERN = re.compile(r"Kernel/Output/HTML/[^/]+/.*?\.dtl\Z")

DTL_TEMPLATE_WARNING = (
    "The old template engine was replaced with Template::Toolkit. "
    "Please use bin/otrs.MigrateDTLToTT.pl."
)


class FileListError(Exception):
    """Raised when the file list cannot be built."""

    pass


@dataclass(frozen=True, slots=True)
class PackageFile:
    """A file shipped with the package.

    Attributes:
        location: Path relative to the package root, with forward slashes
        permission: Unix permission written to the manifest
    """

    location: str
    permission: str

    @classmethod
    def from_location(cls, location: str) -> PackageFile:
        permission = "755" if location.startswith("bin") else "644"
        return cls(location=location, permission=permission)


def compile_exclude_patterns(patterns: Iterable[str]) -> list[re.Pattern[str]]:
    """Compile exclusion patterns, anchored at the end of the path.

    Raises:
        FileListError: If a pattern is not a valid regular expression
    """
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(f"(?:{pattern})\\Z"))
        except re.error as e:
            raise FileListError(f"Invalid exclude pattern {pattern!r}: {e}") from e
    return compiled


def _is_hidden(rel_path: str) -> bool:
    return any(part.startswith(".") for part in rel_path.split("/"))


def collect_files(
    root_dir: Path,
    exclude_patterns: Optional[Iterable[str]] = None,
    manifest_name: Optional[str] = None,
) -> list[PackageFile]:
    """Collect the files to list in the manifest.

    Hidden files and anything below hidden directories are skipped, as is the
    manifest itself. A file is dropped when any exclusion pattern matches the
    end of its relative path.

    Args:
        root_dir: Package root directory
        exclude_patterns: Regular expressions removing files from the list
        manifest_name: File name of the manifest being generated

    Returns:
        Files sorted by location

    Raises:
        FileListError: If an exclusion pattern is invalid
    """
    excludes = compile_exclude_patterns(exclude_patterns or [])
    collected: set[str] = set()

    for root, dirs, files in os.walk(root_dir):
        dirs[:] = [d for d in dirs if not d.startswith(".")]

        for filename in files:
            rel_path = (Path(root) / filename).relative_to(root_dir).as_posix()

            if _is_hidden(rel_path):
                continue
            if rel_path == manifest_name:
                continue
            if any(pattern.search(rel_path) for pattern in excludes):
                continue

            collected.add(rel_path)

    return [PackageFile.from_location(location) for location in sorted(collected)]


def find_legacy_templates(files: Iterable[PackageFile]) -> list[str]:
    """Return locations of DTL templates that newer frameworks cannot use."""
    return [file.location for file in files if DTL_TEMPLATE_PATTERN.search(file.location)]


def render_filelist(files: Iterable[PackageFile]) -> str:
    """Render the ``<Filelist>`` block."""
    entries = [
        f"{indent(2)}<File"
        f"{required_attr('Permission', file.permission)}"
        f"{required_attr('Location', file.location)} />"
        for file in files
    ]
    return "\n".join([f"{indent(1)}<Filelist>", *entries, f"{indent(1)}</Filelist>"])
