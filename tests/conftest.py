# SPDX-License-Identifier: MIT
"""Pytest configuration and fixtures for opm-maker tests."""

from __future__ import annotations

import json
import shutil
from pathlib import Path
from typing import Any, Callable, Generator

import pytest
from click.testing import CliRunner

from opm_maker.models import PackageSpec

SAMPLE_PACKAGE = Path(__file__).parent / "sample_package"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def sample_package(tmp_path: Path) -> Generator[Path, None, None]:
    """Copy the sample package to a temporary directory."""
    package_dir = tmp_path / "TicketSample"
    shutil.copytree(SAMPLE_PACKAGE, package_dir)

    # Hidden files must never show up in the file list
    (package_dir / ".gitignore").write_text("*.sopm\n")
    (package_dir / ".git").mkdir()
    (package_dir / ".git" / "HEAD").write_text("ref: refs/heads/main\n")

    yield package_dir


@pytest.fixture
def minimal_document() -> dict[str, Any]:
    """The smallest valid package description."""
    return {
        "name": "Test",
        "version": "0.0.3",
        "framework": ["3.0.x"],
    }


@pytest.fixture
def make_spec(minimal_document: dict[str, Any]) -> Callable[..., PackageSpec]:
    """Build a PackageSpec from the minimal document plus overrides."""

    def _make_spec(**overrides: Any) -> PackageSpec:
        document = {**minimal_document, **overrides}
        return PackageSpec.from_dict(document)

    return _make_spec


@pytest.fixture
def write_package(tmp_path: Path) -> Callable[..., Path]:
    """Create a package directory containing a JSON config and some files."""

    def _write_package(document: dict[str, Any], files: dict[str, str] | None = None) -> Path:
        package_dir = tmp_path / "package"
        package_dir.mkdir(exist_ok=True)
        (package_dir / "package.json").write_text(json.dumps(document, indent=4))
        for location, content in (files or {}).items():
            path = package_dir / location
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return package_dir

    return _write_package
