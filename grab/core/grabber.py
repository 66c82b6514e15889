"""grab 入口 — 解析 → 安装/定位 → 改写导入

用法:
    from grab import grab

    tree = grab("regex")                         # import "<dir>/regex.nim"
    tree = grab("-y https://github.com/arnetheduck/nim-result@#HEAD",
                "import results")

    spec = parse_spec("-y https://...", name="result", force_install=True)
    tree = grab(spec, "from results import Result")

任何一步失败都直接抛出，不产生部分结果。
"""

from __future__ import annotations

import logging

from grab.core.config import Config, get_config
from grab.core.imports.models import Node
from grab.core.imports.rewriter import rewrite
from grab.core.package import PackageSpec, parse_spec
from grab.core.protocols import SyntaxAdapter
from grab.core.resolver import Resolver
from grab.core.store import PackageStore

logger = logging.getLogger(__name__)


def grab(
    package: str | PackageSpec,
    imports: Node | str | None = None,
    *,
    store: PackageStore | None = None,
    config: Config | None = None,
    adapter: SyntaxAdapter | None = None,
) -> Node:
    """安装包并返回改写后的导入树

    参数:
        package: 安装参数字符串或 PackageSpec
        imports: 导入树或导入语句文本，为空时导入与包同名的模块
        store: 包存储，默认通过子进程调用包管理器
        config: 配置，默认取全局配置
        adapter: 解析 imports 文本用的语法适配器，默认 Nim
    """
    cfg = config or get_config()
    spec = package if isinstance(package, PackageSpec) else parse_spec(package)
    if cfg.give_hint:
        logger.info("grabbing: %s", spec)

    if isinstance(imports, str):
        if adapter is None:
            from grab.adapters.nim import NimSyntaxAdapter
            adapter = NimSyntaxAdapter()
        imports = adapter.parse(imports)

    directory = Resolver(store=store, config=cfg).resolve(spec)
    return rewrite(
        directory, spec.name, imports,
        suffix=cfg.module_suffix, strict=cfg.strict_shapes,
    )
