"""统一异常体系

所有业务异常继承 GrabError，替代散落的 ValueError / RuntimeError。
CLI 层可据此输出友好提示，构建流程据此中止。
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from grab.core.imports.models import Node


class GrabError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(GrabError):
    """配置、清单或包参数无效"""

    code = "CONFIG_ERROR"


class ExecutionError(GrabError):
    """包管理器进程无法启动或超时"""

    code = "EXECUTION_ERROR"


class InstallFailedError(GrabError):
    """安装输出中出现错误标记"""

    code = "INSTALL_FAILED"

    def __init__(self, package_name: str, log: str) -> None:
        super().__init__(f"无法安装 {package_name}，安装日志:\n{log}")
        self.package_name = package_name
        self.log = log


class PathNotFoundError(GrabError):
    """路径查询失败或返回的目录不存在"""

    code = "PATH_NOT_FOUND"

    def __init__(self, path_query: str, output: str) -> None:
        super().__init__(
            f"无法定位 {path_query}，返回错误或无效路径:\n{output}"
        )
        self.path_query = path_query
        self.output = output


class UnsupportedShapeError(GrabError):
    """导入子句中找不到模块名叶子"""

    code = "UNSUPPORTED_SHAPE"

    def __init__(self, message: str, node: Node | None = None) -> None:
        super().__init__(message)
        self.node = node


class ImportSyntaxError(GrabError):
    """导入语句文本无法解析"""

    code = "IMPORT_SYNTAX"

    def __init__(self, message: str, line: int = 0) -> None:
        super().__init__(f"第 {line} 行: {message}" if line else message)
        self.message = message
        self.line = line
