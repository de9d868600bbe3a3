"""Tests for inclusion rules, identity overrides and rewrite rules."""

from __future__ import annotations

import pytest

from licensefiles.exceptions import ConfigurationError, DuplicateRuleSetError
from licensefiles.models import ManifestEntry
from licensefiles.overrides import InclusionRule, OverrideRegistry, RewriteRule


def _entry(**overrides) -> ManifestEntry:
    defaults = {
        "dependency": "zlib",
        "product": "zlib",
        "sub_product": "",
        "version": "1.2.11",
        "license_type": "LICENSE",
        "license_filename": "zlib_1.2.11.txt",
    }
    defaults.update(overrides)
    return ManifestEntry(**defaults)


class TestInclusion:
    def test_no_rules_includes_everything(self):
        assert OverrideRegistry().is_included("anything")

    def test_unlisted_name_included(self):
        reg = OverrideRegistry([InclusionRule("zlib", include=False)])
        assert reg.is_included("curl")

    def test_excluded(self):
        reg = OverrideRegistry([InclusionRule("zlib", include=False)])
        assert not reg.is_included("zlib")

    def test_explicit_include(self):
        reg = OverrideRegistry([InclusionRule("zlib", include=True)])
        assert reg.is_included("zlib")

    def test_case_sensitive(self):
        reg = OverrideRegistry([InclusionRule("zlib", include=False)])
        assert reg.is_included("ZLIB")

    def test_duplicate_rule_rejected(self):
        with pytest.raises(ConfigurationError, match="duplicate"):
            OverrideRegistry([InclusionRule("zlib"), InclusionRule("zlib", include=False)])


class TestApplyIdentity:
    def test_replaces_configured_fields_only(self):
        reg = OverrideRegistry([InclusionRule("zlib", product="zlib compression", version="1.2")])
        out = reg.apply_identity("zlib", _entry())
        assert out.product == "zlib compression"
        assert out.version == "1.2"
        assert out.license_type == "LICENSE"
        assert out.license_filename == "zlib_1.2.11.txt"

    def test_no_rule_returns_entry_unchanged(self):
        entry = _entry()
        assert OverrideRegistry().apply_identity("zlib", entry) is entry

    def test_identity_applied_before_rewrite(self):
        reg = OverrideRegistry(
            [InclusionRule("zlib", product="libs-zlib")],
            [RewriteRule("libs-", "")],
        )
        assert reg.finalize("zlib", _entry()).product == "zlib"


class TestRewrite:
    def test_sequential_application(self):
        reg = OverrideRegistry(rewrite_rules=[RewriteRule("A", "B"), RewriteRule("B", "C")])
        assert reg.rewrite("A") == "C"

    def test_order_sensitive(self):
        reg = OverrideRegistry(rewrite_rules=[RewriteRule("B", "C"), RewriteRule("A", "B")])
        assert reg.rewrite("A") == "B"

    def test_regex_rule(self):
        rule = RewriteRule(r"_(\d+)\.(\d+)", r"-v\1\2", regex=True)
        assert rule.apply("zlib_1.2.txt") == "zlib-v12.txt"

    def test_no_rules(self):
        assert OverrideRegistry().rewrite("unchanged") == "unchanged"

    def test_finalize_rewrites_text_fields(self):
        reg = OverrideRegistry(rewrite_rules=[RewriteRule("zlib", "ZLib")])
        out = reg.finalize("zlib", _entry(sub_product="zlib-contrib"))
        assert out.product == "ZLib"
        assert out.sub_product == "ZLib-contrib"
        assert out.license_filename == "ZLib_1.2.11.txt"
        # version and type are not rewritten
        assert out.version == "1.2.11"
        assert out.dependency == "zlib"


class TestFromRuleSets:
    def test_single_sets(self):
        reg = OverrideRegistry.from_rule_sets(
            [[InclusionRule("zlib", include=False)]], [[RewriteRule("a", "b")]]
        )
        assert not reg.is_included("zlib")
        assert reg.rewrite("a") == "b"

    def test_no_sets(self):
        reg = OverrideRegistry.from_rule_sets()
        assert reg.is_included("x")
        assert reg.rewrite_rules == ()

    def test_second_inclusion_set_rejected(self):
        with pytest.raises(DuplicateRuleSetError, match="externals"):
            OverrideRegistry.from_rule_sets([[InclusionRule("a")], [InclusionRule("b")]])

    def test_second_rewrite_set_rejected(self):
        with pytest.raises(DuplicateRuleSetError, match="rewrites"):
            OverrideRegistry.from_rule_sets(rewrite_sets=[[], []])


class TestRewriteRuleValidation:
    def test_invalid_regex_raises_on_construction(self):
        with pytest.raises(ConfigurationError, match="invalid rewrite pattern"):
            RewriteRule("(unclosed", regex=True)

    def test_invalid_group_reference(self):
        with pytest.raises(ConfigurationError):
            RewriteRule("a", r"\2", regex=True)

    def test_plain_rule_accepts_regex_syntax(self):
        assert RewriteRule("(x", "y").apply("a(x") == "ay"
