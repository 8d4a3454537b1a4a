# SPDX-License-Identifier: MIT
"""Assembly of the ``.sopm`` package manifest.

The manifest is built in a fixed element order: metadata, file list, change
log, database blocks, code hooks and intros. Identical input always produces
byte-identical output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from . import __version__
from .changelog import read_changes_file, render_changelog
from .database import DatabaseCompilation, compile_database_actions
from .filelist import (
    DTL_TEMPLATE_WARNING,
    PackageFile,
    collect_files,
    find_legacy_templates,
    render_filelist,
)
from .hooks import HookRenderer, HookStyle, resolve_hook_style
from .markup import indent, text
from .metadata import emit_metadata
from .models import PackageSpec

GENERATOR_COMMENT = f"<!-- GENERATED WITH opm-maker sopm ({__version__}) -->"

CVS_TAG = "<CVS>$Id: {name}.sopm,v 1.1.1.1 2011/04/15 07:49:58 rb Exp $</CVS>"


@dataclass
class SopmResult:
    """Result of building a manifest.

    Attributes:
        content: The manifest document
        hook_style: Glue code family used for code hooks
        database: The compiled database actions
        files: Files listed in the manifest
        warnings: Advisory warnings collected while building
        path: Where the manifest was written (None until written)
    """

    content: str
    hook_style: HookStyle
    database: DatabaseCompilation
    files: list[PackageFile] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    path: Optional[Path] = None


def build_sopm(
    spec: PackageSpec,
    files: list[PackageFile],
    config_dir: Optional[Path] = None,
    cvs: bool = False,
) -> SopmResult:
    """Assemble the manifest for a package.

    Args:
        spec: The package description
        files: Files to list in the manifest
        config_dir: Directory of the config file, used to resolve ``changes_file``
        cvs: Add the legacy CVS ``$Id$`` tag

    Returns:
        SopmResult with the document and advisory warnings

    Raises:
        ColumnTypeError: If a database column type is not allowed
        TemplateError: If hook templates cannot be rendered
    """
    warnings: list[str] = []

    metadata = emit_metadata(spec)
    warnings.extend(metadata.warnings)

    hook_style = resolve_hook_style(spec.frameworks)
    if hook_style is HookStyle.MODERN and find_legacy_templates(files):
        warnings.append(DTL_TEMPLATE_WARNING)

    changes = []
    if spec.changes_file and config_dir is not None:
        changes.extend(read_changes_file(config_dir / spec.changes_file))
    changes.extend(spec.changes)

    database = compile_database_actions(spec.database)
    renderer = HookRenderer(hook_style)

    parts = [
        *metadata.lines,
        render_filelist(files),
        *render_changelog(changes),
        *database.to_xml(),
        *(renderer.render_code(hook) for hook in spec.code_hooks),
        *(renderer.render_intro(intro) for intro in spec.intros),
    ]

    header = [
        '<?xml version="1.0" encoding="utf-8" ?>',
        '<otrs_package version="1.0">',
        f"{indent(1)}{GENERATOR_COMMENT}",
    ]
    if cvs:
        header.append(indent(1) + CVS_TAG.format(name=spec.name))
    header.append(f"{indent(1)}<Name>{text(spec.name)}</Name>")
    header.append(f"{indent(1)}<Version>{text(spec.version)}</Version>")

    content = "\n".join([*header, *parts, "</otrs_package>"]) + "\n"

    return SopmResult(
        content=content,
        hook_style=hook_style,
        database=database,
        files=files,
        warnings=warnings,
    )


def write_sopm(
    spec: PackageSpec,
    package_dir: str | Path,
    config_dir: Optional[Path] = None,
    cvs: bool = False,
) -> SopmResult:
    """Collect the file list, build the manifest and write ``<name>.sopm``.

    Args:
        spec: The package description
        package_dir: Package root; the manifest is written here
        config_dir: Directory of the config file (defaults to package_dir)
        cvs: Add the legacy CVS ``$Id$`` tag

    Returns:
        SopmResult with ``path`` set

    Raises:
        FileListError: If an exclusion pattern is invalid
        ColumnTypeError: If a database column type is not allowed
    """
    package_path = Path(package_dir)
    files = collect_files(
        package_path,
        exclude_patterns=spec.exclude_files,
        manifest_name=spec.manifest_filename,
    )

    result = build_sopm(
        spec,
        files,
        config_dir=config_dir if config_dir is not None else package_path,
        cvs=cvs,
    )

    output_path = package_path / spec.manifest_filename
    output_path.write_text(result.content, encoding="utf-8")
    result.path = output_path
    return result
