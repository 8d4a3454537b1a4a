# SPDX-License-Identifier: MIT
"""Build the .sopm manifest of a package."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from ..config import ConfigError, load_config
from ..database import ColumnTypeError
from ..filelist import FileListError
from ..main import Context, echo_error, echo_info, echo_success, echo_warning, pass_context
from ..sopm import write_sopm
from ..template_engine import TemplateError


@click.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file that provides all the metadata (defaults to the only *.json file).",
)
@click.option(
    "--cvs",
    is_flag=True,
    default=False,
    help="Add CVS tag to .sopm.",
)
@click.argument(
    "directory",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
)
@pass_context
def sopm(ctx: Context, config_path: Optional[Path], cvs: bool, directory: Path) -> None:
    """Build .sopm file based on metadata.

    DIRECTORY is the package root (defaults to the current directory). The
    manifest is written there as <name>.sopm.

    \b
    Examples:
        opmbuild sopm                           # Use the only *.json file
        opmbuild sopm --config Test.json .      # Explicit config file
        opmbuild sopm --cvs path/to/module      # Add the CVS $Id$ tag
    """
    try:
        config = load_config(config_path, directory=directory)
    except ConfigError as e:
        echo_error(str(e))
        raise SystemExit(1)

    spec = config.spec

    if ctx.verbose:
        echo_info(f"Config file: {config.path}")
        echo_info(f"Package: {spec.name} v{spec.version}")
        echo_info(f"Frameworks: {', '.join(spec.frameworks)}")

    try:
        result = write_sopm(spec, directory, config_dir=config.config_dir, cvs=cvs)
    except (ColumnTypeError, FileListError, TemplateError) as e:
        echo_error(str(e))
        raise SystemExit(1)

    for warning in result.warnings:
        echo_warning(warning)

    if ctx.verbose:
        echo_info(f"Hook style: {result.hook_style.value}")
        echo_info(f"Files listed: {len(result.files)}")
        for phase in result.database.phases():
            echo_info(f"Database{phase.value}: {len(result.database.fragments[phase])} action(s)")

    echo_success(f"Created: {result.path}")
