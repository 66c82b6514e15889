"""包存储 — 外部包管理器的窄接口

Resolver 只通过 PackageStore 协议与包管理器交互:

  - install(query, force) -> 合并后的安装日志
  - locate(query)         -> 路径查询输出的最后一个非空行
  - exists(query)         -> locate 结果是否为已存在的目录

CommandPackageStore 用子进程调用包管理器 (默认 nimble):

    nimble install -N <install_query>
    nimble install -Y <install_query>     # 强制重装
    nimble path <path_query>
"""

from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import Protocol

from grab.core.config import Config, get_config
from grab.core.exceptions import ConfigError
from grab.utils.shell import CommandExecutor, get_executor

logger = logging.getLogger(__name__)


class PackageStore(Protocol):
    """包管理器能力协议"""

    def install(self, query: str, force: bool) -> str:
        """安装包，返回安装日志"""
        ...

    def locate(self, query: str) -> str:
        """查询包的安装目录"""
        ...

    def exists(self, query: str) -> bool:
        """包是否已安装"""
        ...


def last_line(output: str) -> str:
    """返回输出中最后一个非空行"""
    result = ""
    for line in output.splitlines():
        if line.strip():
            result = line.strip()
    return result


def split_query(query: str) -> list[str]:
    """按 shell 规则把查询串拆成参数"""
    try:
        return shlex.split(query)
    except ValueError as e:
        raise ConfigError(f"无法拆分查询串 {query!r}: {e}") from e


class CommandPackageStore:
    """通过子进程调用包管理器"""

    def __init__(
        self,
        config: Config | None = None,
        executor: CommandExecutor | None = None,
    ) -> None:
        self.config = config or get_config()
        self.executor = executor or get_executor()

    def _run(self, *args: str) -> str:
        cmd = [self.config.package_manager, *args]
        logger.info("  执行: %s", shlex.join(cmd))
        r = self.executor.execute(cmd, timeout=self.config.timeout)
        if not r.success:
            logger.debug("  退出码 %d: %s", r.returncode, shlex.join(cmd))
        return r.output

    def install(self, query: str, force: bool) -> str:
        flag = self.config.force_flag if force else self.config.no_confirm_flag
        return self._run(self.config.install_command, flag, *split_query(query))

    def locate(self, query: str) -> str:
        return last_line(self._run(self.config.path_command, *split_query(query)))

    def exists(self, query: str) -> bool:
        path = self.locate(query)
        return bool(path) and Path(path).is_dir()
