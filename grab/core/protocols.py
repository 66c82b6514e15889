"""领域协议定义

集中定义核心与宿主之间的接口契约（Protocol），
核心只依赖抽象，宿主语法由具体适配器提供。

使用 typing.Protocol 而非 ABC，现有类无需修改继承关系即可满足协议。
PackageStore 协议见 grab.core.store，CommandExecutor 协议见 grab.utils.shell。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from grab.core.imports.models import Node


class SyntaxAdapter(Protocol):
    """宿主语法适配器协议

    把宿主构建工具的导入语法转换为 Node 树，再把改写后的树转换回去。
    """

    def parse(self, text: str) -> Node:
        """解析导入语句文本，返回 STMT_LIST"""
        ...

    def render(self, node: Node) -> str:
        """把导入树渲染为宿主源码"""
        ...
