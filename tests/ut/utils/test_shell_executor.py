"""shell.py 执行器单元测试"""

from __future__ import annotations

import pytest

from grab.core.exceptions import ExecutionError
from grab.utils import shell
from grab.utils.shell import CommandResult, LocalExecutor, get_executor, set_executor


class TestLocalExecutor:
    def test_success(self) -> None:
        r = LocalExecutor().execute(["echo", "hello"])
        assert r.success
        assert "hello" in r.stdout

    def test_failure_returncode(self) -> None:
        r = LocalExecutor().execute(["false"])
        assert not r.success

    def test_missing_executable(self) -> None:
        with pytest.raises(ExecutionError, match="找不到可执行文件"):
            LocalExecutor().execute(["grab-test-no-such-binary"])


class TestCommandResult:
    def test_output_joins_streams(self) -> None:
        assert CommandResult(0, "a\n", "b\n").output == "a\nb\n"
        assert CommandResult(0, "a", "b").output == "a\nb"
        assert CommandResult(0, "", "Error: x").output == "Error: x"


class TestDefaultExecutor:
    def test_set_and_get(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(shell, "_default_executor", shell._default_executor)
        custom = LocalExecutor()
        set_executor(custom)
        assert get_executor() is custom
