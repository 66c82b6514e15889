"""共享 fixture — 假包存储 + 假命令执行器 + 全局配置隔离

所有测试都不调用真实的包管理器:
  - FakeStore 直接满足 PackageStore 协议，供 Resolver / grab / 展开器使用
  - FakeExecutor 满足 CommandExecutor 协议，模拟 nimble 子进程输出
"""

from __future__ import annotations

from pathlib import Path

import pytest

import grab.core.config as cfgmod
from grab.utils.shell import CommandResult


class FakeStore:
    """内存中的包存储: 路径查询串 -> root/<查询串> 目录"""

    def __init__(self, root: Path, install_log: str = "Success: installed") -> None:
        self.root = root
        self.install_log = install_log
        self.known: set[str] = set()
        self.install_calls: list[tuple[str, bool]] = []
        self.locate_calls: list[str] = []

    def dir_for(self, query: str) -> Path:
        return self.root / query

    def register(self, query: str, installed: bool = False) -> Path:
        self.known.add(query)
        path = self.dir_for(query)
        if installed:
            path.mkdir(parents=True, exist_ok=True)
        return path

    def install(self, query: str, force: bool) -> str:
        self.install_calls.append((query, force))
        if "Error: " not in self.install_log:
            for known in self.known:
                self.dir_for(known).mkdir(parents=True, exist_ok=True)
        return self.install_log

    def locate(self, query: str) -> str:
        self.locate_calls.append(query)
        if query not in self.known:
            return f"Error: Package '{query}' is not installed"
        return str(self.dir_for(query))

    def exists(self, query: str) -> bool:
        return Path(self.locate(query)).is_dir()


class FakeExecutor:
    """模拟包管理器子进程: path 返回 root/<包名>，install 创建该目录"""

    def __init__(self, root: Path, install_output: str = "Success: done") -> None:
        self.root = root
        self.install_output = install_output
        self.calls: list[list[str]] = []
        self.timeouts: list[int | None] = []

    def execute(self, cmd: list[str], *, timeout: int | None = None) -> CommandResult:
        self.calls.append(list(cmd))
        self.timeouts.append(timeout)
        sub = cmd[1]
        if sub == "install":
            if "Error: " not in self.install_output:
                (self.root / cmd[-1].split("@")[0]).mkdir(parents=True, exist_ok=True)
            return CommandResult(0, self.install_output, "")
        if sub == "path":
            target = self.root / cmd[-1].split("@")[0]
            if target.is_dir():
                return CommandResult(0, f"{target}\n", "")
            return CommandResult(1, "", f"Error: Package '{cmd[-1]}' is not installed\n")
        return CommandResult(1, "", f"Error: unknown command {sub}\n")


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """每个测试使用独立的默认配置"""
    monkeypatch.setattr(cfgmod, "_current", None)


@pytest.fixture
def store(tmp_path: Path) -> FakeStore:
    return FakeStore(tmp_path / "pkgs")


@pytest.fixture
def executor(tmp_path: Path) -> FakeExecutor:
    return FakeExecutor(tmp_path / "pkgs")
