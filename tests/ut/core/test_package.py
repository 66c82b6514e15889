"""包描述解析测试"""

from __future__ import annotations

import dataclasses

import pytest

from grab.core.exceptions import ConfigError
from grab.core.package import (
    PackageSpec,
    derive_name,
    derive_path_query,
    parse_spec,
    strip_left,
    strip_right,
)


class TestDeriveName:
    @pytest.mark.parametrize("s", ["regex", "nim-result", "jsony", "a.b_c"])
    def test_plain_name_unchanged(self, s: str) -> None:
        assert derive_name(s) == s
        assert derive_path_query(s) == s

    def test_path_prefix_and_version(self) -> None:
        assert derive_name("dir/sub/pkgname@1.0") == "pkgname"
        assert derive_path_query("dir/sub/pkgname@1.0") == "pkgname@1.0"

    def test_query_suffix(self) -> None:
        assert derive_name("pkgname?arg=1") == "pkgname"
        assert derive_path_query("pkgname?arg=1@1.0") == "pkgname@1.0"
        assert derive_path_query("pkgname?arg=1") == "pkgname"

    def test_question_after_at_is_kept_in_path_query(self) -> None:
        assert derive_path_query("pkgname@1.0?x") == "pkgname@1.0?x"
        assert derive_name("pkgname@1.0?x") == "pkgname"

    def test_install_command_with_flags_and_url(self) -> None:
        raw = "-y https://github.com/arnetheduck/nim-result@#HEAD"
        assert derive_name(raw) == "nim-result"
        assert derive_path_query(raw) == "nim-result@#HEAD"

    def test_backslash_and_space_separators(self) -> None:
        assert derive_name("C:\\pkgs\\regex@0.20") == "regex"
        assert derive_name("--depsOnly jsony") == "jsony"

    @pytest.mark.parametrize("raw", ["pkg/", "@1.0", "?x"])
    def test_never_empty(self, raw: str) -> None:
        """剥离后为空时退回原串"""
        assert derive_name(raw) == raw

    @pytest.mark.parametrize("raw", ["pkg/", "?x", "https://github.com/foo/bar/"])
    def test_path_query_may_be_empty(self, raw: str) -> None:
        assert derive_path_query(raw) == ""

    def test_surrounding_whitespace_trimmed(self) -> None:
        assert derive_name("  regex  ") == "regex"
        assert derive_path_query(" regex@1 ") == "regex@1"


class TestStripPrimitives:
    def test_strip_left(self) -> None:
        assert strip_left("a/b\\c d") == "d"
        assert strip_left("abc") == "abc"

    def test_strip_right_earliest_marker(self) -> None:
        assert strip_right("a@1?x") == "a"
        assert strip_right("a?x@1") == "a"
        assert strip_right("a") == "a"


class TestParseSpec:
    def test_install_only(self) -> None:
        spec = parse_spec("dir/sub/pkgname@1.0")
        assert spec == PackageSpec(
            name="pkgname",
            install_query="dir/sub/pkgname@1.0",
            path_query="pkgname@1.0",
            force_install=False,
        )

    def test_with_name_uses_name_verbatim_for_path(self) -> None:
        spec = parse_spec(
            "-y https://github.com/arnetheduck/nim-result@#HEAD",
            name="result@0.1.0",
            force_install=True,
        )
        assert spec.name == "result"
        assert spec.path_query == "result@0.1.0"
        assert spec.install_query.startswith("-y ")
        assert spec.force_install is True

    def test_explicit_path_query(self) -> None:
        spec = parse_spec("fakename", "realname", "realname@0.1.0")
        assert spec.name == "realname"
        assert spec.path_query == "realname@0.1.0"

    def test_explicit_empty_path_query(self) -> None:
        assert parse_spec("regex", name="regex", path_query="").path_query == ""

    def test_frozen(self) -> None:
        spec = parse_spec("regex")
        with pytest.raises(dataclasses.FrozenInstanceError):
            spec.name = "other"  # type: ignore[misc]


class TestFromMapping:
    def test_full_entry(self) -> None:
        spec = PackageSpec.from_mapping({
            "install": "-y https://github.com/arnetheduck/nim-result@#HEAD",
            "name": "result",
            "force": True,
        })
        assert spec.name == "result"
        assert spec.path_query == "result"
        assert spec.force_install is True

    def test_install_only(self) -> None:
        assert PackageSpec.from_mapping({"install": "jsony@1.1.5"}).name == "jsony"

    @pytest.mark.parametrize("data", [
        {},
        {"install": ""},
        {"install": 3},
        {"install": "regex", "force": "yes"},
    ])
    def test_invalid_entry(self, data: dict) -> None:
        with pytest.raises(ConfigError):
            PackageSpec.from_mapping(data)
