"""包解析器 — 安装决策 + 安装目录定位

决策逻辑:
  1. 路径查询串非空才查询路径（lookup_default_path 打开时以包名兜底）
  2. 强制安装，或路径查询得到的目录不存在 → 执行安装
  3. 安装日志中出现错误标记 → InstallFailedError，不重试
  4. 查询安装目录，目录不存在 → PathNotFoundError
  5. 不查询路径时返回空串，调用方只能按名称导入

已安装且未强制时，第一次路径查询的结果直接作为最终目录，
不会重复调用包管理器。
"""

from __future__ import annotations

import logging
from pathlib import Path

from grab.core.config import Config, get_config
from grab.core.exceptions import InstallFailedError, PathNotFoundError
from grab.core.package import PackageSpec
from grab.core.store import CommandPackageStore, PackageStore

logger = logging.getLogger(__name__)


class Resolver:
    """安装并定位包"""

    def __init__(
        self,
        store: PackageStore | None = None,
        config: Config | None = None,
    ) -> None:
        self.config = config or get_config()
        self.store = store or CommandPackageStore(self.config)

    def path_query(self, spec: PackageSpec) -> str:
        """实际使用的路径查询串，空串表示不查询"""
        if spec.path_query:
            return spec.path_query
        if self.config.lookup_default_path:
            return spec.name
        return ""

    def is_installed(self, spec: PackageSpec) -> bool:
        """包是否已安装（只查询，不安装）"""
        query = self.path_query(spec)
        return bool(query) and self.store.exists(query)

    def resolve(self, spec: PackageSpec) -> str:
        """确保包已安装并返回其安装目录"""
        query = self.path_query(spec)
        do_path = bool(query)

        located: str | None = None
        if do_path and not spec.force_install:
            located = self.store.locate(query)

        do_install = spec.force_install or (do_path and not self._valid(located))
        if do_install:
            self._install(spec)
            located = None
        elif do_path:
            logger.info("已安装，跳过: %s -> %s", spec.name, located)

        if not do_path:
            logger.info("未指定路径查询，按名称导入: %s", spec.name)
            return ""

        if located is None:
            located = self.store.locate(query)
        if not self._valid(located):
            raise PathNotFoundError(query, located)
        return located

    def _install(self, spec: PackageSpec) -> None:
        logger.info(
            "安装: %s%s", spec.install_query, " (强制)" if spec.force_install else "",
        )
        log = self.store.install(spec.install_query, spec.force_install)
        if self.config.error_marker in log:
            raise InstallFailedError(spec.name, log)

    def _valid(self, located: str | None) -> bool:
        if not located or self.config.error_marker in located:
            return False
        return Path(located).is_dir()
