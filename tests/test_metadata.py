# SPDX-License-Identifier: MIT
"""Tests for the metadata emitter."""

from __future__ import annotations

from hypothesis import given, settings, strategies as st

from opm_maker.hooks import MIXED_MAJOR_VERSIONS_WARNING
from opm_maker.metadata import emit_metadata
from opm_maker.models import PackageSpec


class TestEmitMetadata:
    """Tests for emit_metadata."""

    def test_minimal(self, make_spec):
        result = emit_metadata(make_spec())
        assert result.lines == [
            "    <Framework>3.0.x</Framework>",
            "    <Vendor></Vendor>",
            "    <URL></URL>",
        ]
        assert result.warnings == []

    def test_full(self, make_spec):
        spec = make_spec(
            framework=["3.0.x", "3.1.x"],
            vendor={"name": "Perl-Services.de", "url": "http://www.perl-services.de"},
            license="AGPL",
            description={"en": "Test sopm command", "de": "Test des sopm-Befehls"},
            requires={
                "package": {"TicketOverviewHooked": "3.2.1", "ArticleHooks": "1.0.0"},
                "module": {"Digest::MD5": "0.01"},
            },
        )
        assert emit_metadata(spec).lines == [
            "    <Framework>3.0.x</Framework>",
            "    <Framework>3.1.x</Framework>",
            '    <PackageRequired Version="1.0.0">ArticleHooks</PackageRequired>',
            '    <PackageRequired Version="3.2.1">TicketOverviewHooked</PackageRequired>',
            '    <ModuleRequired Version="0.01">Digest::MD5</ModuleRequired>',
            "    <Vendor>Perl-Services.de</Vendor>",
            "    <URL>http://www.perl-services.de</URL>",
            '    <Description Lang="de">Test des sopm-Befehls</Description>',
            '    <Description Lang="en">Test sopm command</Description>',
            "    <License>AGPL</License>",
        ]

    def test_frameworks_keep_declaration_order(self, make_spec):
        spec = make_spec(framework=["3.3.x", "3.0.x", "3.1.x"])
        lines = [line for line in emit_metadata(spec).lines if "Framework" in line]
        assert lines == [
            "    <Framework>3.3.x</Framework>",
            "    <Framework>3.0.x</Framework>",
            "    <Framework>3.1.x</Framework>",
        ]

    def test_mixed_major_versions_warn(self, make_spec):
        result = emit_metadata(make_spec(framework=["3.3.x", "4.0.x"]))
        assert result.warnings == [MIXED_MAJOR_VERSIONS_WARNING]

    def test_text_is_escaped(self, make_spec):
        spec = make_spec(vendor={"name": "Smith & Sons", "url": "http://example.com/?a=1&b=2"})
        lines = emit_metadata(spec).lines
        assert "    <Vendor>Smith &amp; Sons</Vendor>" in lines
        assert "    <URL>http://example.com/?a=1&amp;b=2</URL>" in lines


@given(
    requirements=st.dictionaries(
        keys=st.text(alphabet="abcdefghijklmnopqrstuvwxyz:", min_size=1, max_size=12),
        values=st.sampled_from(["0.01", "1.0.0", "3.2.1"]),
        max_size=8,
    )
)
@settings(max_examples=50)
def test_requirements_sorted_regardless_of_input_order(requirements):
    """Required modules are emitted sorted by name."""
    reversed_map = dict(reversed(list(requirements.items())))
    spec = PackageSpec.from_dict(
        {"name": "T", "version": "1", "framework": ["3.0.x"], "requires": {"module": reversed_map}}
    )
    lines = [line for line in emit_metadata(spec).lines if "ModuleRequired" in line]
    names = [line.split(">")[1].split("<")[0] for line in lines]
    assert names == sorted(requirements)
