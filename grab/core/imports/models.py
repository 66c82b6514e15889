"""导入表达式语法树

与宿主语言无关的标签树。每个节点是不可变的 Node:

    Node(kind, children, value)

叶子节点（原子记号）携带 value，没有子节点；其余节点按位置组织子节点。
例如 Nim 的 ``import std/[os, strutils] as x`` 对应:

    STMT_LIST
      IMPORT
        INFIX "as"
          IDENT as
          INFIX
            IDENT /
            IDENT std
            BRACKET (IDENT os, IDENT strutils)
          IDENT x
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class NodeKind(str, Enum):
    # 原子记号
    IDENT = "ident"
    SYM = "sym"
    ACC_QUOTED = "acc_quoted"
    STR_LIT = "str_lit"
    RSTR_LIT = "rstr_lit"
    TRIPLE_STR_LIT = "triple_str_lit"

    # 分组
    STMT_LIST = "stmt_list"
    BRACKET = "bracket"
    PAR = "par"

    # 导入子句
    IMPORT = "import"
    IMPORT_EXCEPT = "import_except"
    FROM = "from"
    INCLUDE = "include"

    # 复合表达式
    COMMAND = "command"
    CALL = "call"
    CALL_STR_LIT = "call_str_lit"
    INFIX = "infix"
    PREFIX = "prefix"
    POSTFIX = "postfix"
    DOT_EXPR = "dot_expr"

    EMPTY = "empty"


LEAF_KINDS = frozenset({
    NodeKind.IDENT, NodeKind.SYM, NodeKind.ACC_QUOTED,
    NodeKind.STR_LIT, NodeKind.RSTR_LIT, NodeKind.TRIPLE_STR_LIT,
})

# 模块名位于第二个子节点的复合形式（第一个子节点是运算符或被调用者）
OPERATOR_KINDS = frozenset({
    NodeKind.COMMAND, NodeKind.CALL, NodeKind.CALL_STR_LIT,
    NodeKind.INFIX, NodeKind.PREFIX, NodeKind.POSTFIX,
})

CLAUSE_KINDS = frozenset({
    NodeKind.IMPORT, NodeKind.IMPORT_EXCEPT, NodeKind.FROM, NodeKind.INCLUDE,
})


@dataclass(frozen=True)
class Node:
    """语法树节点"""

    kind: NodeKind
    children: tuple[Node, ...] = ()
    value: str = ""

    @property
    def is_leaf(self) -> bool:
        return self.kind in LEAF_KINDS

    def __len__(self) -> int:
        return len(self.children)

    def __getitem__(self, index: int) -> Node:
        return self.children[index]

    def __iter__(self):
        return iter(self.children)

    def with_child(self, index: int, child: Node) -> Node:
        """返回替换了第 index 个子节点的新节点"""
        children = list(self.children)
        children[index] = child
        return replace(self, children=tuple(children))

    def with_children(self, children: list[Node] | tuple[Node, ...]) -> Node:
        return replace(self, children=tuple(children))

    def dump(self) -> str:
        """紧凑的 S 表达式形式，用于日志和错误信息"""
        if self.is_leaf:
            return f"{self.kind.value}:{self.value!r}"
        inner = " ".join(c.dump() for c in self.children)
        return f"({self.kind.value} {inner})" if inner else f"({self.kind.value})"


# =========================================================================
# 构造辅助
# =========================================================================

def ident(name: str) -> Node:
    return Node(NodeKind.IDENT, value=name)


def str_lit(s: str) -> Node:
    return Node(NodeKind.STR_LIT, value=s)


def infix(op: str, left: Node, right: Node) -> Node:
    return Node(NodeKind.INFIX, (ident(op), left, right))


def prefix(op: str, operand: Node) -> Node:
    return Node(NodeKind.PREFIX, (ident(op), operand))


def dot(left: Node, right: Node) -> Node:
    return Node(NodeKind.DOT_EXPR, (left, right))


def bracket(*items: Node) -> Node:
    return Node(NodeKind.BRACKET, items)


def import_stmt(*items: Node) -> Node:
    return Node(NodeKind.IMPORT, items)


def import_except(module: Node, *names: Node) -> Node:
    return Node(NodeKind.IMPORT_EXCEPT, (module, *names))


def from_stmt(module: Node, *members: Node) -> Node:
    return Node(NodeKind.FROM, (module, *members))


def include_stmt(*items: Node) -> Node:
    return Node(NodeKind.INCLUDE, items)


def stmt_list(*stmts: Node) -> Node:
    return Node(NodeKind.STMT_LIST, stmts)
