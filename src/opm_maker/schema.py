# SPDX-License-Identifier: MIT
"""JSON Schema definition for package descriptions.

The schema checks the document shape only: required top-level fields and the
types of the sections the manifest builder reads, down to the nested column,
constraint and reference entries of database actions. Column types are
checked when the fragments are rendered. Unknown keys are allowed everywhere.
"""

from __future__ import annotations

# Scalars accepted where a version or size is expected
_SCALAR = {"type": ["string", "number"]}

_VERSION = {"type": ["string", "number", "array"], "items": _SCALAR}

_STRING_MAP = {"type": "object", "additionalProperties": _SCALAR}

_OBJECT_LIST = {"type": "array", "items": {"type": "object"}}

_NAME_LIST = {"type": "array", "items": _SCALAR}

_REFERENCES = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {"name": _SCALAR, "local": _SCALAR, "foreign": _SCALAR},
    },
}

# Kinds whose ``columns`` hold column or field objects rather than names
_OBJECT_COLUMN_KINDS = ["TableCreate", "ColumnAdd", "ColumnChange", "Insert"]

_NAME_COLUMN_KINDS = ["ColumnDrop", "UniqueCreate"]

# Entries without a recognized ``type`` are accepted here and skipped when
# the package is built.
_DATABASE_ACTION = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "version": _VERSION,
        "uninstall": {"type": ["boolean", "string", "number"]},
        "columns": {"type": "array"},
        "unique": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {"id": _SCALAR, "name": _SCALAR, "columns": _NAME_LIST},
            },
        },
        "keys": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {"name": _SCALAR, "references": _REFERENCES},
            },
        },
        "references": _REFERENCES,
        "unique_name": {"type": "string"},
    },
    "allOf": [
        {
            "if": {
                "required": ["type"],
                "properties": {"type": {"enum": _OBJECT_COLUMN_KINDS}},
            },
            "then": {"properties": {"columns": _OBJECT_LIST}},
        },
        {
            "if": {
                "required": ["type"],
                "properties": {"type": {"enum": _NAME_COLUMN_KINDS}},
            },
            "then": {"properties": {"columns": _NAME_LIST}},
        },
    ],
}

_CODE_HOOK = {
    "type": "object",
    "required": ["type"],
    "properties": {
        "type": {"type": "string", "minLength": 1},
        "version": _SCALAR,
        "function": {"type": "string"},
        "package": {"type": "string"},
        "time": {"type": "string", "enum": ["pre", "post"]},
    },
}

_INTRO = {
    "type": "object",
    "required": ["type"],
    "properties": {
        "type": {"type": "string", "minLength": 1},
        "text": {"type": ["string", "array"], "items": {"type": "string"}},
        "time": {"type": "string", "enum": ["pre", "post"]},
        "lang": {"type": "string"},
        "title": {"type": "string"},
        "version": _SCALAR,
    },
}

_CHANGE = {
    "type": ["string", "object"],
    "properties": {
        "message": {"type": "string"},
        "version": _SCALAR,
        "date": {"type": "string"},
    },
}

# JSON Schema for the package description document
PACKAGE_SCHEMA: dict = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "OPM package description",
    "description": "Metadata used to build a .sopm manifest",
    "type": "object",
    "required": ["name", "version", "framework"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "version": {"type": ["string", "number"], "minLength": 1},
        "framework": {"type": "array", "minItems": 1, "items": _SCALAR},
        "vendor": {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "url": {"type": "string"},
            },
        },
        "license": {"type": "string"},
        "description": {"type": "object", "additionalProperties": {"type": "string"}},
        "requires": {
            "type": "object",
            "properties": {
                "package": _STRING_MAP,
                "module": _STRING_MAP,
            },
        },
        "database": {"type": "array", "items": _DATABASE_ACTION},
        "code": {"type": "array", "items": _CODE_HOOK},
        "intro": {"type": "array", "items": _INTRO},
        "changes": {"type": "array", "items": _CHANGE},
        "changes_file": {"type": "string"},
        "exclude_files": {"type": "array", "items": {"type": "string"}},
    },
    "additionalProperties": True,
}

# Top-level fields whose absence (or emptiness) is fatal
REQUIRED_FIELDS = ("name", "version", "framework")


def get_package_schema() -> dict:
    """Return a copy of the package description schema."""
    return PACKAGE_SCHEMA.copy()
