"""包描述解析

把松散格式的字符串（裸包名或完整的安装参数）解析为 PackageSpec:

    "regex"                              -> name=regex  path_query=regex
    "dir/sub/pkgname@1.0"                -> name=pkgname path_query=pkgname@1.0
    "-y https://host/nim-result@#HEAD"   -> name=nim-result
    "pkgname?arg=1@1.0"                  -> name=pkgname path_query=pkgname@1.0

解析是全函数，任何输入都不会报错；最差情况下 name 等于去空白后的原串，
path_query 则可能为空。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from grab.core.exceptions import ConfigError


@dataclass(frozen=True)
class PackageSpec:
    """一次 grab 调用的包信息"""

    name: str
    install_query: str
    path_query: str = ""
    force_install: bool = False

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> PackageSpec:
        """从清单条目构造，键: install / name / path / force"""
        install = data.get("install")
        if not isinstance(install, str) or not install.strip():
            raise ConfigError(f"清单条目缺少 install 字段: {data!r}")
        force = data.get("force", False)
        if not isinstance(force, bool):
            raise ConfigError(f"force 必须为布尔值: {data!r}")
        name = data.get("name")
        path = data.get("path")
        return parse_spec(
            install,
            name=str(name) if name is not None else None,
            path_query=str(path) if path is not None else None,
            force_install=force,
        )


def strip_left(s: str) -> str:
    """去掉最后一个 '/'、'\\' 或空格及其之前的部分"""
    cut = max(s.rfind("/"), s.rfind("\\"), s.rfind(" "))
    return s[cut + 1:]


def strip_right(s: str) -> str:
    """从第一个 '?' 或 '@' 处截断"""
    positions = [i for i in (s.find("?"), s.find("@")) if i >= 0]
    return s[:min(positions)] if positions else s


def derive_name(s: str) -> str:
    """推导规范包名，结果不会为空"""
    raw = s.strip()
    name = strip_right(strip_left(raw))
    return name or raw


def derive_path_query(s: str) -> str:
    """推导路径查询串: 保留 name@version，去掉 '?' 开始的参数段

    结果可以为空，表示不查询路径、按名称导入。
    """
    result = strip_left(s.strip())
    at = result.find("@")
    if at < 0:
        at = len(result)
    q = result.find("?")
    if 0 <= q <= at:
        result = result[:q] + result[at:]
    return result


def parse_spec(
    install_query: str,
    name: str | None = None,
    path_query: str | None = None,
    force_install: bool = False,
) -> PackageSpec:
    """解析包描述

    - 只给 install_query: 名称与路径查询均从中推导
    - 给出 name: 名称从 name 推导，路径查询直接使用 name 原文
    - 同时给出 path_query: 路径查询以其为准（可为空串，表示不查询路径）
    """
    if name is None:
        return PackageSpec(
            name=derive_name(install_query),
            install_query=install_query,
            path_query=derive_path_query(install_query),
            force_install=force_install,
        )
    return PackageSpec(
        name=derive_name(name),
        install_query=install_query,
        path_query=name if path_query is None else path_query,
        force_install=force_install,
    )
