# SPDX-License-Identifier: MIT
"""Loading and validating package description files.

Package descriptions are relaxed JSON documents: comments and trailing commas
are accepted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import json5
from jsonschema import Draft202012Validator, ValidationError

from .models import PackageSpec
from .schema import PACKAGE_SCHEMA, REQUIRED_FIELDS


class ConfigError(Exception):
    """Raised when the package description cannot be loaded."""

    pass


@dataclass(frozen=True, slots=True)
class ValidationErrorDetail:
    """Details about a single validation error.

    Attributes:
        field: Path to the invalid field (e.g., "framework" or "database[0].type")
        message: Human-readable error message
    """

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


@dataclass
class LoadedConfig:
    """A package description together with where it was read from.

    Attributes:
        path: The config file
        document: The parsed document
        spec: The package built from the document
    """

    path: Path
    document: dict[str, Any] = field(repr=False)
    spec: PackageSpec

    @property
    def config_dir(self) -> Path:
        return self.path.parent


def find_config_file(directory: str | Path) -> Path:
    """Find the single ``*.json`` file below a directory.

    Args:
        directory: Directory to search recursively

    Returns:
        Path to the config file

    Raises:
        ConfigError: If no file or more than one file is found
    """
    candidates = sorted(path for path in Path(directory).rglob("*.json") if path.is_file())

    if len(candidates) > 1:
        raise ConfigError("found more than one json file, please specify the config file to use")
    if not candidates:
        raise ConfigError("Please specify the config file to use")

    return candidates[0]


def parse_document(content: str) -> dict[str, Any]:
    """Parse relaxed JSON text into a document.

    Raises:
        ConfigError: If the text is not valid (relaxed) JSON or not an object
    """
    try:
        document = json5.loads(content)
    except ValueError as e:
        raise ConfigError(f"config file has to be in JSON format: {e}") from e

    if not isinstance(document, dict):
        raise ConfigError(
            f"config file has to contain a JSON object, got {type(document).__name__}"
        )
    return document


def _json_path_from_error(error: ValidationError) -> str:
    """Convert a jsonschema error path to a readable field path."""
    if not error.absolute_path:
        return "<root>"
    parts = []
    for part in error.absolute_path:
        if isinstance(part, int):
            parts.append(f"[{part}]")
        else:
            if parts:
                parts.append(f".{part}")
            else:
                parts.append(str(part))
    return "".join(parts)


def _format_error_message(error: ValidationError) -> str:
    """Format a jsonschema error into a human-readable message."""
    if error.validator == "required":
        missing = [name for name in error.validator_value if name not in error.instance]
        return f"Missing required field: {', '.join(missing)}"

    if error.validator == "type":
        expected = error.validator_value
        if isinstance(expected, list):
            expected = " or ".join(expected)
        actual = type(error.instance).__name__
        return f"Expected {expected}, got {actual}"

    if error.validator == "enum":
        allowed = ", ".join(repr(v) for v in error.validator_value)
        return f"Value must be one of: {allowed}"

    if error.validator == "minLength":
        return f"String must be at least {error.validator_value} character(s)"

    if error.validator == "minItems":
        return f"List must contain at least {error.validator_value} item(s)"

    return error.message


def validate_document(document: dict[str, Any]) -> list[ValidationErrorDetail]:
    """Validate a package description against PACKAGE_SCHEMA.

    Returns:
        Validation errors in document order (empty if valid)
    """
    validator = Draft202012Validator(PACKAGE_SCHEMA)
    errors = sorted(
        validator.iter_errors(document),
        key=lambda error: [str(part) for part in error.absolute_path],
    )
    return [
        ValidationErrorDetail(
            field=_json_path_from_error(error),
            message=_format_error_message(error),
        )
        for error in errors
    ]


def build_package_spec(document: dict[str, Any]) -> PackageSpec:
    """Check a parsed document and build the PackageSpec.

    Raises:
        ConfigError: If a required field is missing or the document is malformed
    """
    for needed in REQUIRED_FIELDS:
        if not document.get(needed):
            raise ConfigError(f"Need {needed} in config file")

    errors = validate_document(document)
    if errors:
        details = "; ".join(str(error) for error in errors)
        raise ConfigError(f"Invalid config file ({len(errors)} error(s)): {details}")

    return PackageSpec.from_dict(document)


def load_config(config_path: Optional[str | Path] = None, directory: str | Path = ".") -> LoadedConfig:
    """Load a package description.

    Args:
        config_path: Explicit config file; searched below ``directory`` if omitted
        directory: Package directory

    Returns:
        LoadedConfig instance

    Raises:
        ConfigError: If the file cannot be found, parsed or validated
    """
    path = Path(config_path) if config_path else find_config_file(directory)

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    document = parse_document(content)
    return LoadedConfig(path=path, document=document, spec=build_package_spec(document))
