# SPDX-License-Identifier: MIT
"""Build OTRS package manifests (.sopm) from JSON metadata.

The package description lists metadata, database changes, code hooks and
intro texts; the file list is collected from the package directory.

Example:
    >>> from opm_maker import load_config, write_sopm
    >>>
    >>> config = load_config("Test.json")
    >>> result = write_sopm(config.spec, ".", config_dir=config.config_dir)
    >>> result.path
    PosixPath('Test.sopm')
"""

__version__ = "0.1.0"

from .config import (
    ConfigError,
    LoadedConfig,
    ValidationErrorDetail,
    build_package_spec,
    find_config_file,
    load_config,
    parse_document,
    validate_document,
)
from .database import (
    ALLOWED_COLUMN_TYPES,
    ColumnTypeError,
    DatabaseCompilation,
    TableLifecycle,
    compile_database_actions,
    render_action,
)
from .filelist import FileListError, PackageFile, collect_files, render_filelist
from .hooks import HookRenderer, HookStyle, resolve_hook_style
from .metadata import MetadataResult, emit_metadata
from .models import (
    ActionKind,
    CodeHook,
    Column,
    DatabaseAction,
    IntroBlock,
    PackageSpec,
    Phase,
)
from .sopm import SopmResult, build_sopm, write_sopm
from .template_engine import TemplateEngine, TemplateError

__all__ = [
    # Version
    "__version__",
    # Config
    "ConfigError",
    "LoadedConfig",
    "ValidationErrorDetail",
    "build_package_spec",
    "find_config_file",
    "load_config",
    "parse_document",
    "validate_document",
    # Database
    "ALLOWED_COLUMN_TYPES",
    "ColumnTypeError",
    "DatabaseCompilation",
    "TableLifecycle",
    "compile_database_actions",
    "render_action",
    # Files
    "FileListError",
    "PackageFile",
    "collect_files",
    "render_filelist",
    # Hooks
    "HookRenderer",
    "HookStyle",
    "resolve_hook_style",
    # Metadata
    "MetadataResult",
    "emit_metadata",
    # Models
    "ActionKind",
    "CodeHook",
    "Column",
    "DatabaseAction",
    "IntroBlock",
    "PackageSpec",
    "Phase",
    # Manifest
    "SopmResult",
    "build_sopm",
    "write_sopm",
    # Templates
    "TemplateEngine",
    "TemplateError",
]
