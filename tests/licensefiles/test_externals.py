"""Tests for version extraction and svn:externals parsing."""

from __future__ import annotations

import pytest

from licensefiles.externals import (
    extract_version,
    parse_externals,
    sorted_declarations,
    split_line,
)
from licensefiles.models import DependencyDeclaration


class TestExtractVersion:
    def test_revision_pin_is_not_a_version(self):
        assert extract_version("libfoo", "-r123 libfoo-1.2.3") == "1.2.3"

    def test_revision_pin_with_space(self):
        assert extract_version("libfoo", "-r 123 libfoo-1.2.3") == "1.2.3"

    def test_underscores_become_dots(self):
        assert extract_version("curl", "libs/curl_7_68_0") == "7.68.0"

    def test_trailing_garbage_and_separator(self):
        assert extract_version("pkg", "bar_4_5_beta") == "4.5"

    def test_no_digits(self):
        assert extract_version("pkg", "nameonly") is None

    def test_only_revision(self):
        assert extract_version("pkg", "-r500 trunk") is None

    def test_garbage_between_digits_does_not_stop_scan(self):
        assert extract_version("x", "1.2-beta.3") == "1.2.3"

    def test_leading_separator_dropped(self):
        assert extract_version("x", "._lib.5") == "5"

    def test_trailing_dots_stripped_repeatedly(self):
        assert extract_version("x", "lib-2.0...") == "2.0"

    def test_surrounding_whitespace(self):
        assert extract_version("x", "   boost_1_72_0   ") == "1.72.0"

    def test_deterministic(self):
        assert extract_version("a", "x-9.8.7") == extract_version("a", "x-9.8.7")

    @pytest.mark.parametrize(
        "remainder,expected",
        [
            ("http://svn.example.com/repos/openssl-1.0.2u", "1.0.2"),
            ("third_party/expat-2.2.9/", "2.2.9"),
            ("-r1024 vendor/sqlite/3.31.1", "3.31.1"),
        ],
    )
    def test_realistic_paths(self, remainder, expected):
        assert extract_version("dep", remainder) == expected


class TestSplitLine:
    def test_two_tokens(self):
        assert split_line("zlib -r500 libs/zlib-1.2.11") == ("zlib", "-r500 libs/zlib-1.2.11")

    def test_tab_separated(self):
        assert split_line("zlib\tlibs/zlib-1.2.11") == ("zlib", "libs/zlib-1.2.11")

    def test_single_token(self):
        assert split_line("zlib") is None

    def test_blank(self):
        assert split_line("   ") is None


class TestParseExternals:
    def test_basic(self):
        text = "zlib -r500 libs/zlib-1.2.11\ncurl -r77 libs/curl_7_68_0\n"
        assert parse_externals(text) == {"zlib": "1.2.11", "curl": "7.68.0"}

    def test_carriage_return_separators(self):
        text = "a lib-1.0\r\nb lib-2.0\rc lib-3.0"
        assert parse_externals(text) == {"a": "1.0", "b": "2.0", "c": "3.0"}

    def test_malformed_lines_skipped(self):
        text = "\nlonely\n   \nok ok-1.0\n"
        assert parse_externals(text) == {"ok": "1.0"}

    def test_unparseable_version_dropped(self):
        text = "pkg nameonly\nzlib zlib-1.2.11\n"
        assert parse_externals(text) == {"zlib": "1.2.11"}

    def test_duplicate_name_first_wins(self):
        text = "zlib zlib-1.2.11\nzlib zlib-1.3\n"
        assert parse_externals(text) == {"zlib": "1.2.11"}

    def test_names_case_sensitive(self):
        assert parse_externals("Zlib z-1\nzlib z-2\n") == {"Zlib": "1", "zlib": "2"}

    def test_empty(self):
        assert parse_externals("") == {}


class TestSortedDeclarations:
    def test_lexicographic_order(self):
        decls = list(sorted_declarations({"zlib": "1.2.11", "curl": "7.68.0", "Boost": "1.72"}))
        assert decls == [
            DependencyDeclaration("Boost", "1.72"),
            DependencyDeclaration("curl", "7.68.0"),
            DependencyDeclaration("zlib", "1.2.11"),
        ]
