# SPDX-License-Identifier: MIT
"""Code hook and intro rendering.

Code hooks call a function of the package's ``var::packagesetup`` module at
install time. The glue code differs between framework generations: up to
framework 3 the module is loaded and instantiated explicitly, from framework
4 on it is fetched from the object manager. The generation is resolved once
per package from the largest declared major framework version.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional

from .markup import attr, cdata_content
from .models import CodeHook, IntroBlock
from .template_engine import TemplateEngine

# Perl expression naming the setup module of the package being installed
INSTALLED_PACKAGE_MODULE = "'var::packagesetup::' . $Param{Structure}->{Name}->{Content}"

MIXED_MAJOR_VERSIONS_WARNING = (
    "Two major versions declared in framework settings. Those might be incompatible."
)


class HookStyle(str, Enum):
    """Glue code family for code hooks."""

    LEGACY = "legacy"
    MODERN = "modern"

    @property
    def template(self) -> str:
        return f"code/{self.value}.tmpl"


# First framework major version served by the object manager glue
MODERN_MIN_MAJOR = 4


def major_version(framework: str) -> str:
    """Return the leading component of a framework version string.

    Examples:
        >>> major_version("3.2.x")
        '3'
    """
    return framework.split(".", 1)[0]


def major_versions(frameworks: Iterable[str]) -> list[str]:
    """Distinct major versions in order of first appearance."""
    majors: list[str] = []
    for framework in frameworks:
        major = major_version(framework)
        if major not in majors:
            majors.append(major)
    return majors


def has_mixed_major_versions(frameworks: Iterable[str]) -> bool:
    return len(major_versions(frameworks)) > 1


def resolve_hook_style(frameworks: Iterable[str]) -> HookStyle:
    """Pick the hook style from the largest numeric major version.

    Non-numeric majors are ignored; without any numeric major the legacy
    style is used.
    """
    numeric = [int(major) for major in major_versions(frameworks) if major.isdigit()]
    if numeric and max(numeric) >= MODERN_MIN_MAJOR:
        return HookStyle.MODERN
    return HookStyle.LEGACY


class HookRenderer:
    """Renders code hooks and intros for one resolved hook style."""

    def __init__(self, style: HookStyle, engine: Optional[TemplateEngine] = None) -> None:
        self.style = style
        self.engine = engine or TemplateEngine()

    def render_code(self, hook: CodeHook) -> str:
        """Render ``<Code{Type} Type=".."{ Version=".."}>`` with CDATA glue code."""
        if hook.package:
            module = f"'var::packagesetup::{hook.package}'"
        else:
            module = INSTALLED_PACKAGE_MODULE
        return self.engine.render(
            self.style.template,
            {
                "tag": hook.tag,
                "phase": hook.phase,
                "version": attr("Version", hook.version),
                "function": hook.function_name,
                "module": module,
            },
        )

    def render_intro(self, intro: IntroBlock) -> str:
        """Render ``<Intro{Type} ..>`` with the text in a CDATA section."""
        attributes = attr("Lang", intro.lang) + attr("Title", intro.title) + attr("Version", intro.version)
        return self.engine.render(
            "intro.tmpl",
            {
                "tag": f"Intro{intro.type}",
                "phase": intro.phase,
                "attributes": attributes,
                "text": cdata_content(intro.text),
            },
        )
