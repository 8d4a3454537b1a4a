# SPDX-License-Identifier: MIT
"""Package metadata elements of the manifest."""

from __future__ import annotations

from dataclasses import dataclass, field

from .hooks import MIXED_MAJOR_VERSIONS_WARNING, has_mixed_major_versions
from .markup import indent, required_attr, text
from .models import PackageSpec


@dataclass
class MetadataResult:
    """Rendered metadata lines plus advisory warnings."""

    lines: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def _element(tag: str, value: str, attributes: str = "") -> str:
    return f"{indent(1)}<{tag}{attributes}>{text(value)}</{tag}>"


def emit_metadata(spec: PackageSpec) -> MetadataResult:
    """Render frameworks, requirements, vendor, descriptions and license.

    Frameworks keep their declaration order; required packages, required
    modules and descriptions are sorted by key so the output does not depend
    on input map ordering.
    """
    result = MetadataResult()

    for framework in spec.frameworks:
        result.lines.append(_element("Framework", framework))

    if has_mixed_major_versions(spec.frameworks):
        result.warnings.append(MIXED_MAJOR_VERSIONS_WARNING)

    for name, version in sorted(spec.requirements.packages.items()):
        result.lines.append(_element("PackageRequired", name, required_attr("Version", version)))

    for name, version in sorted(spec.requirements.modules.items()):
        result.lines.append(_element("ModuleRequired", name, required_attr("Version", version)))

    result.lines.append(_element("Vendor", spec.vendor.name))
    result.lines.append(_element("URL", spec.vendor.url))

    for lang, description in sorted(spec.descriptions.items()):
        result.lines.append(_element("Description", description, required_attr("Lang", lang)))

    if spec.license:
        result.lines.append(_element("License", spec.license))

    return result
