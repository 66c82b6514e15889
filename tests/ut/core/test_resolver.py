"""Resolver 测试 — 安装跳过、强制重装、错误上报"""

from __future__ import annotations

import pytest

from grab.core.config import Config
from grab.core.exceptions import InstallFailedError, PathNotFoundError
from grab.core.package import parse_spec
from grab.core.resolver import Resolver


class TestInstallDecision:
    def test_already_installed_skips_install(self, store) -> None:
        path = store.register("regex", installed=True)
        directory = Resolver(store, Config()).resolve(parse_spec("regex"))
        assert directory == str(path)
        assert store.install_calls == []
        # 推测性查询的结果直接复用
        assert store.locate_calls == ["regex"]

    def test_resolve_twice_never_installs(self, store) -> None:
        store.register("regex", installed=True)
        resolver = Resolver(store, Config())
        first = resolver.resolve(parse_spec("regex"))
        second = resolver.resolve(parse_spec("regex"))
        assert first == second
        assert store.install_calls == []

    def test_missing_package_installed_once(self, store) -> None:
        path = store.register("regex@0.20.0")
        resolver = Resolver(store, Config())
        spec = parse_spec("regex@0.20.0")

        assert resolver.resolve(spec) == str(path)
        assert store.install_calls == [("regex@0.20.0", False)]
        assert store.locate_calls == ["regex@0.20.0", "regex@0.20.0"]

        resolver.resolve(spec)
        assert len(store.install_calls) == 1

    def test_force_install_always_installs(self, store) -> None:
        store.register("result", installed=True)
        spec = parse_spec(
            "-y https://github.com/arnetheduck/nim-result@#HEAD",
            name="result", force_install=True,
        )
        Resolver(store, Config()).resolve(spec)
        assert store.install_calls == [
            ("-y https://github.com/arnetheduck/nim-result@#HEAD", True),
        ]
        assert store.locate_calls == ["result"]


class TestErrors:
    def test_install_error_marker(self, store) -> None:
        store.register("regex")
        store.install_log = "Downloading regex\nError: something failed\n"
        with pytest.raises(InstallFailedError) as exc_info:
            Resolver(store, Config()).resolve(parse_spec("regex"))
        assert exc_info.value.package_name == "regex"
        assert exc_info.value.log == "Downloading regex\nError: something failed\n"
        assert exc_info.value.code == "INSTALL_FAILED"
        assert "regex" in str(exc_info.value)

    def test_install_error_not_retried(self, store) -> None:
        store.register("regex")
        store.install_log = "Error: nope"
        with pytest.raises(InstallFailedError):
            Resolver(store, Config()).resolve(parse_spec("regex"))
        assert len(store.install_calls) == 1

    def test_path_not_found_after_install(self, store) -> None:
        # 安装成功但路径查询仍然找不到
        with pytest.raises(PathNotFoundError) as exc_info:
            Resolver(store, Config()).resolve(parse_spec("ghost"))
        assert exc_info.value.path_query == "ghost"
        assert "Error:" in exc_info.value.output
        assert len(store.install_calls) == 1

    def test_custom_error_marker(self, store) -> None:
        store.register("regex")
        store.install_log = "FAILED: broken"
        with pytest.raises(InstallFailedError):
            Resolver(store, Config(error_marker="FAILED:")).resolve(parse_spec("regex"))


class TestEmptyPathQuery:
    def test_skip_lookup_returns_empty(self, store) -> None:
        spec = parse_spec("regex", name="regex", path_query="")
        assert Resolver(store, Config()).resolve(spec) == ""
        assert store.install_calls == []
        assert store.locate_calls == []

    def test_derived_empty_path_query_skips_lookup(self, store) -> None:
        spec = parse_spec("https://github.com/foo/bar/")
        assert spec.path_query == ""
        assert Resolver(store, Config()).resolve(spec) == ""
        assert store.install_calls == []
        assert store.locate_calls == []

    def test_forced_install_without_lookup(self, store) -> None:
        spec = parse_spec("regex", name="regex", path_query="", force_install=True)
        assert Resolver(store, Config()).resolve(spec) == ""
        assert store.install_calls == [("regex", True)]
        assert store.locate_calls == []

    def test_lookup_default_path_uses_name(self, store) -> None:
        path = store.register("regex", installed=True)
        spec = parse_spec("regex", name="regex", path_query="")
        resolver = Resolver(store, Config(lookup_default_path=True))
        assert resolver.resolve(spec) == str(path)
        assert store.locate_calls == ["regex"]


class TestIsInstalled:
    def test_is_installed(self, store) -> None:
        store.register("regex", installed=True)
        store.register("jsony")
        resolver = Resolver(store, Config())
        assert resolver.is_installed(parse_spec("regex")) is True
        assert resolver.is_installed(parse_spec("jsony")) is False
        assert resolver.is_installed(parse_spec("x", name="x", path_query="")) is False
        assert store.install_calls == []
