"""导入改写器 — 把模块名叶子替换为安装目录下的绝对路径

纯语法变换，不执行任何代码，输入树不被修改。

子句处理:
  - IMPORT:         每个子项独立改写
  - IMPORT_EXCEPT:  只改写第 0 项（except 名单不动）
  - FROM:           只改写第 0 项（成员列表不动）
  - INCLUDE:        只改写第 0 项
  - STMT_LIST:      递归处理
  - 其它语句原样保留

叶子定位（位置启发式）:
  节点本身是原子记号 → 就是叶子；否则按固定位置下降，
  COMMAND..POSTFIX 一族取下标 1，其余取下标 0，直到该位置的子节点是
  原子记号为止。例如 ``a as b`` 定位到 a，``./foo`` 定位到 foo，
  ``std/[os]`` 定位到 std，``a.b`` 定位到 a。
"""

from __future__ import annotations

import logging
import os

from grab.core.config import get_config
from grab.core.exceptions import UnsupportedShapeError
from grab.core.imports.models import (
    CLAUSE_KINDS,
    OPERATOR_KINDS,
    Node,
    NodeKind,
    ident,
    import_stmt,
    stmt_list,
    str_lit,
)

logger = logging.getLogger(__name__)


def locate_leaf_path(node: Node) -> tuple[int, ...] | None:
    """按位置启发式定位模块名叶子，返回下标路径；找不到返回 None"""
    if node.is_leaf:
        return ()
    path: list[int] = []
    cur = node
    while len(cur) != 0:
        index = 1 if cur.kind in OPERATOR_KINDS else 0
        if index >= len(cur):
            return None
        path.append(index)
        cur = cur[index]
        if cur.is_leaf:
            return tuple(path)
    return None


def substitute(directory: str, value: str, suffix: str) -> str:
    """拼接目录与模块名，并确保以模块后缀结尾

    模块名总是落在 directory 之下，开头的路径分隔符被去掉。
    """
    result = os.path.join(directory, value.lstrip("/" + os.sep))
    if not result.endswith(suffix):
        result += suffix
    return result


class ImportRewriter:
    """把导入树中的模块名叶子替换为 directory 下的文件路径

    directory 为空时叶子保持不变，依赖宿主的模块搜索路径按名称导入。
    """

    def __init__(self, directory: str, suffix: str = ".nim", strict: bool = True) -> None:
        self.directory = directory
        self.suffix = suffix
        self.strict = strict

    def rewrite(self, imports: Node) -> Node:
        return self._walk(imports)

    def _walk(self, stmts: Node) -> Node:
        out: list[Node] = []
        for stmt in stmts:
            if stmt.kind == NodeKind.STMT_LIST:
                out.append(self._walk(stmt))
            elif stmt.kind == NodeKind.IMPORT:
                out.append(stmt.with_children([self._patch(c, stmt) for c in stmt]))
            elif stmt.kind in CLAUSE_KINDS and len(stmt) != 0:
                out.append(stmt.with_child(0, self._patch(stmt[0], stmt)))
            else:
                logger.debug("跳过非导入语句: %s", stmt.dump())
                out.append(stmt)
        return stmts.with_children(out)

    def _patch(self, node: Node, clause: Node) -> Node:
        path = locate_leaf_path(node)
        if path is None:
            if self.strict:
                raise UnsupportedShapeError(
                    f"无法在导入子句中定位模块名: {clause.dump()}", clause,
                )
            logger.warning("无法定位模块名，保持原样: %s", clause.dump())
            return node
        return self._replace_at(node, path)

    def _replace_at(self, node: Node, path: tuple[int, ...]) -> Node:
        if not path:
            return self._replace(node)
        index = path[0]
        return node.with_child(index, self._replace_at(node[index], path[1:]))

    def _replace(self, leaf: Node) -> Node:
        if not self.directory:
            return leaf
        return str_lit(substitute(self.directory, leaf.value, self.suffix))


def normalize_imports(default_name: str, imports: Node | None) -> Node:
    """把调用方给出的导入统一为 STMT_LIST；为空时导入与包同名的默认模块"""
    if imports is None or imports.kind == NodeKind.EMPTY or (
        imports.kind == NodeKind.STMT_LIST and len(imports) == 0
    ):
        return stmt_list(import_stmt(ident(default_name)))
    if imports.kind == NodeKind.STMT_LIST:
        return imports
    if imports.kind in CLAUSE_KINDS:
        return stmt_list(imports)
    return stmt_list(import_stmt(imports))


def rewrite(
    directory: str,
    default_name: str,
    imports: Node | None = None,
    *,
    suffix: str | None = None,
    strict: bool | None = None,
) -> Node:
    """改写导入树，返回新的 STMT_LIST

    参数:
        directory: 包安装目录，空串表示只按名称导入
        default_name: 未给出导入时默认导入的模块名（通常为包名）
        imports: 导入树，可为 None
        suffix: 模块文件后缀，默认取配置 module_suffix
        strict: 无法定位叶子时是否报错，默认取配置 strict_shapes
    """
    cfg = get_config()
    rewriter = ImportRewriter(
        directory,
        suffix=cfg.module_suffix if suffix is None else suffix,
        strict=cfg.strict_shapes if strict is None else strict,
    )
    return rewriter.rewrite(normalize_imports(default_name, imports))
