# SPDX-License-Identifier: MIT
"""Tests for code hook and intro rendering."""

from __future__ import annotations

import pytest

from opm_maker.hooks import (
    INSTALLED_PACKAGE_MODULE,
    HookRenderer,
    HookStyle,
    has_mixed_major_versions,
    major_version,
    major_versions,
    resolve_hook_style,
)
from opm_maker.models import CodeHook, IntroBlock


class TestResolveHookStyle:
    """Tests for picking the glue code family."""

    @pytest.mark.parametrize(
        "frameworks, style",
        [
            (["2.4.x"], HookStyle.LEGACY),
            (["3.0.x", "3.3.x"], HookStyle.LEGACY),
            (["4.0.x"], HookStyle.MODERN),
            (["5.0.x", "6.0.x"], HookStyle.MODERN),
            (["3.3.x", "4.0.x"], HookStyle.MODERN),
            (["x.y"], HookStyle.LEGACY),
        ],
    )
    def test_largest_major_selects_style(self, frameworks, style):
        assert resolve_hook_style(frameworks) is style

    def test_major_version(self):
        assert major_version("3.2.x") == "3"
        assert major_version("10") == "10"

    def test_major_versions_are_distinct_and_ordered(self):
        assert major_versions(["5.0.x", "3.3.x", "5.1.x"]) == ["5", "3"]

    def test_mixed_major_versions(self):
        assert has_mixed_major_versions(["3.3.x", "4.0.x"])
        assert not has_mixed_major_versions(["3.2.x", "3.3.x"])

    def test_numeric_comparison(self):
        # "10" must win over "9" numerically, not lexically
        assert resolve_hook_style(["10.0.x", "9.0.x"]) is HookStyle.MODERN
        assert resolve_hook_style(["3.0.x", "10.0.x"]) is HookStyle.MODERN


class TestRenderCode:
    """Tests for code hook rendering."""

    def test_modern_hook(self):
        hook = CodeHook.from_dict({"type": "Install"})
        rendered = HookRenderer(HookStyle.MODERN).render_code(hook)
        assert rendered.splitlines() == [
            '    <CodeInstall Type="post"><![CDATA[',
            "        $Kernel::OM->Get('var::packagesetup::' . $Param{Structure}->{Name}->{Content})->CodeInstall();",
            "    ]]></CodeInstall>",
        ]

    def test_modern_hook_with_version_function_and_package(self):
        hook = CodeHook.from_dict(
            {"type": "Upgrade", "version": "1.0.1", "function": "Migrate", "package": "OtherPackage"}
        )
        rendered = HookRenderer(HookStyle.MODERN).render_code(hook)
        assert rendered.startswith('    <CodeUpgrade Type="post" Version="1.0.1"><![CDATA[')
        assert "$Kernel::OM->Get('var::packagesetup::OtherPackage')->Migrate();" in rendered

    def test_legacy_hook(self):
        hook = CodeHook.from_dict({"type": "Uninstall", "time": "pre"})
        rendered = HookRenderer(HookStyle.LEGACY).render_code(hook)
        lines = rendered.splitlines()

        assert lines[0] == '    <CodeUninstall Type="pre"><![CDATA['
        assert lines[-1] == "    ]]></CodeUninstall>"
        assert "        my $FunctionName = 'CodeUninstall';" in lines
        assert f"        my $CodeModule = {INSTALLED_PACKAGE_MODULE};" in lines
        assert "        if ( $Self->{MainObject}->Require($CodeModule) ) {" in lines
        assert 'Message  => "Could not call method new() on $CodeModule.pm."' in rendered

    def test_hook_phase_defaults_to_post(self):
        for style in HookStyle:
            rendered = HookRenderer(style).render_code(CodeHook(type="Reinstall"))
            assert rendered.startswith('    <CodeReinstall Type="post">')

    def test_function_defaults_to_tag(self):
        assert CodeHook(type="Install").function_name == "CodeInstall"
        assert CodeHook(type="Install", function="Setup").function_name == "Setup"


class TestRenderIntro:
    """Tests for intro rendering."""

    def test_intro_with_all_attributes(self):
        intro = IntroBlock.from_dict(
            {
                "type": "Install",
                "time": "pre",
                "lang": "de",
                "title": "Hinweis",
                "version": "1.0.1",
                "text": "Vielen Dank",
            }
        )
        rendered = HookRenderer(HookStyle.LEGACY).render_intro(intro)
        assert rendered.splitlines() == [
            '    <IntroInstall Type="pre" Lang="de" Title="Hinweis" Version="1.0.1"><![CDATA[',
            "            Vielen Dank",
            "    ]]></IntroInstall>",
        ]

    def test_intro_text_list_joined_with_breaks(self):
        intro = IntroBlock.from_dict({"type": "Upgrade", "text": ["first", "second"]})
        rendered = HookRenderer(HookStyle.MODERN).render_intro(intro)
        assert rendered.splitlines() == [
            '    <IntroUpgrade Type="post"><![CDATA[',
            "            first<br />",
            "second",
            "    ]]></IntroUpgrade>",
        ]

    def test_cdata_terminator_in_intro_text_is_split(self):
        intro = IntroBlock.from_dict({"type": "Install", "text": "see ]]> here"})
        rendered = HookRenderer(HookStyle.MODERN).render_intro(intro)
        assert "            see ]]]]><![CDATA[> here" in rendered.splitlines()
        assert rendered.count("]]>") == 2
