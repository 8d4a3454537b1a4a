# SPDX-License-Identifier: MIT
"""Template engine for the glue code emitted into manifests."""

from __future__ import annotations

import re
from pathlib import Path

# Pattern for matching template variables: {{variable_name}}
VARIABLE_PATTERN = re.compile(r"\{\{(\w+)\}\}")

TEMPLATE_DIR = Path(__file__).parent / "templates"


class TemplateError(Exception):
    """Raised when template processing fails."""

    pass


class TemplateEngine:
    """Renders named text templates with variable substitution.

    Templates are plain files below the template directory, addressed by
    their relative path (e.g. ``code/legacy.tmpl``). Trailing newlines of the
    template file are not part of the rendered text.

    Variable syntax: {{variable_name}}
    """

    def __init__(self, template_dir: Path = TEMPLATE_DIR) -> None:
        """Initialize with the root template directory.

        Args:
            template_dir: Path to the directory containing template files.

        Raises:
            TemplateError: If the template directory does not exist.
        """
        self.template_dir = template_dir
        if not template_dir.exists():
            raise TemplateError(f"Template directory not found: {template_dir}")
        self._cache: dict[str, str] = {}

    def _substitute_content(self, content: str, variables: dict[str, str]) -> str:
        """Substitute {{variable}} patterns in template content.

        Raises:
            TemplateError: If a variable in the content is not defined.
        """

        def replacer(match: re.Match[str]) -> str:
            var_name = match.group(1)
            if var_name not in variables:
                raise TemplateError(f"Undefined template variable: {var_name}")
            return variables[var_name]

        return VARIABLE_PATTERN.sub(replacer, content)

    def load(self, name: str) -> str:
        """Return the raw text of a template.

        Raises:
            TemplateError: If the template does not exist.
        """
        if name not in self._cache:
            path = self.template_dir / name
            if not path.is_file():
                raise TemplateError(f"Template not found: {name}")
            self._cache[name] = path.read_text(encoding="utf-8").rstrip("\n")
        return self._cache[name]

    def render(self, name: str, variables: dict[str, str]) -> str:
        """Render a template with the given variables.

        Args:
            name: Template path relative to the template directory.
            variables: Dictionary of template variables to substitute.

        Returns:
            The rendered text.

        Raises:
            TemplateError: If the template is missing or a variable is undefined.
        """
        return self._substitute_content(self.load(name), variables)
