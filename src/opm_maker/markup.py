# SPDX-License-Identifier: MIT
"""Small helpers for writing manifest XML by hand.

The manifest layout (indentation, attribute order, CDATA placement) is part of
the output contract, so fragments are assembled as strings rather than through
an XML serializer.
"""

from __future__ import annotations

from typing import Optional
from xml.sax.saxutils import escape

INDENT = "    "

_ATTRIBUTE_ENTITIES = {'"': "&quot;"}


def text(value: str) -> str:
    """Escape character data."""
    return escape(value)


def attr(name: str, value: Optional[str]) -> str:
    """Render `` name="value"``, or nothing when value is empty.

    Examples:
        >>> attr("Version", "1.0.1")
        ' Version="1.0.1"'
        >>> attr("Version", None)
        ''
    """
    if not value:
        return ""
    return f' {name}="{escape(value, _ATTRIBUTE_ENTITIES)}"'


def required_attr(name: str, value: str) -> str:
    """Render an attribute that is emitted even when empty."""
    return f' {name}="{escape(value, _ATTRIBUTE_ENTITIES)}"'


def cdata_content(value: str) -> str:
    # "]]>" cannot appear inside a CDATA section; split it across two sections
    return value.replace("]]>", "]]]]><![CDATA[>")


def cdata(value: str) -> str:
    return "<![CDATA[" + cdata_content(value) + "]]>"


def indent(level: int) -> str:
    return INDENT * level
