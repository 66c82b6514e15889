"""Nim 导入语法适配器

支持的语句（每行一条，括号内或逗号、运算符结尾时可续行）:

    import os, strutils as su
    import std/[os, strutils]
    import ./local/module
    import "path/to/file.nim", r"C:\\raw\\path.nim"
    import `quoted name`
    import json except parseJson, `%`
    from tables import Table, toTable
    include inc_file

'#' 之后为注释。不认识的语句抛 ImportSyntaxError。
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from grab.core.exceptions import ImportSyntaxError
from grab.core.imports.models import (
    Node,
    NodeKind,
    bracket,
    dot,
    from_stmt,
    ident,
    import_except,
    import_stmt,
    include_stmt,
    infix,
    prefix,
    stmt_list,
)

_TOKEN_RE = re.compile(r'''
    (?P<ws>[ \t]+)
  | (?P<comment>\#[^\n]*)
  | (?P<newline>\r?\n)
  | (?P<triple>"""[\s\S]*?""")
  | (?P<rstr>[rR]"(?:[^"\n]|"")*")
  | (?P<str>"(?:[^"\\\n]|\\.)*")
  | (?P<ident>[^\W\d]\w*)
  | (?P<acc>`[^`\n]+`)
  | (?P<punct>[\[\](),])
  | (?P<op>[-+*/\\<>=!?@$%&^~|.:]+)
''', re.VERBOSE)

_ESCAPES = {
    "n": "\n", "t": "\t", "r": "\r", "\\": "\\", '"': '"', "'": "'",
    "a": "\a", "b": "\b", "e": "\x1b", "f": "\f", "v": "\v",
}

_OPEN = "[("
_CLOSE = "])"


@dataclass
class _Token:
    kind: str
    value: str
    line: int


def _unescape(body: str, line: int) -> str:
    out: list[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            nxt = body[i + 1]
            if nxt not in _ESCAPES:
                raise ImportSyntaxError(f"不支持的转义: \\{nxt}", line)
            out.append(_ESCAPES[nxt])
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def _escape(s: str) -> str:
    return (
        s.replace("\\", "\\\\").replace('"', '\\"')
        .replace("\n", "\\n").replace("\t", "\\t").replace("\r", "\\r")
    )


def tokenize(text: str) -> list[_Token]:
    """切分记号；括号内以及逗号、运算符之后的换行不作为语句结束"""
    tokens: list[_Token] = []
    line = 1
    depth = 0
    pos = 0
    while pos < len(text):
        m = _TOKEN_RE.match(text, pos)
        if m is None:
            raise ImportSyntaxError(f"无法识别的字符: {text[pos]!r}", line)
        kind = m.lastgroup or ""
        value = m.group()
        pos = m.end()
        start_line = line
        line += value.count("\n")

        if kind in ("ws", "comment"):
            continue
        if kind == "newline":
            continuing = tokens and tokens[-1].kind in ("comma", "op")
            if depth == 0 and not continuing and tokens and tokens[-1].kind != "newline":
                tokens.append(_Token("newline", value, start_line))
            continue
        if kind == "punct":
            if value in _OPEN:
                depth += 1
            elif value in _CLOSE:
                depth -= 1
                if depth < 0:
                    raise ImportSyntaxError(f"多余的 {value!r}", start_line)
            kind = "comma" if value == "," else value
        tokens.append(_Token(kind, value, start_line))

    if depth > 0:
        raise ImportSyntaxError("括号未闭合", line)
    tokens.append(_Token("eof", "", line))
    return tokens


class _Parser:
    """递归下降解析器，只覆盖导入相关语法"""

    def __init__(self, tokens: list[_Token]) -> None:
        self.tokens = tokens
        self.pos = 0

    def peek(self) -> _Token:
        return self.tokens[self.pos]

    def advance(self) -> _Token:
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def at_keyword(self, word: str) -> bool:
        tok = self.peek()
        return tok.kind == "ident" and tok.value == word

    def expect(self, kind: str) -> _Token:
        tok = self.peek()
        if tok.kind != kind:
            raise ImportSyntaxError(f"期望 {kind}，实际为 {tok.value!r}", tok.line)
        return self.advance()

    def parse(self) -> Node:
        stmts: list[Node] = []
        while True:
            while self.peek().kind == "newline":
                self.advance()
            if self.peek().kind == "eof":
                break
            stmts.append(self.statement())
            if self.peek().kind != "eof":
                self.expect("newline")
        return stmt_list(*stmts)

    def statement(self) -> Node:
        tok = self.peek()
        if self.at_keyword("import"):
            self.advance()
            first = self.expr()
            if self.at_keyword("except"):
                self.advance()
                return import_except(first, *self.expr_list())
            items = [first]
            while self.peek().kind == "comma":
                self.advance()
                items.append(self.expr())
            return import_stmt(*items)
        if self.at_keyword("from"):
            self.advance()
            module = self.expr()
            if not self.at_keyword("import"):
                raise ImportSyntaxError("from 语句缺少 import", self.peek().line)
            self.advance()
            return from_stmt(module, *self.expr_list())
        if self.at_keyword("include"):
            self.advance()
            return include_stmt(*self.expr_list())
        raise ImportSyntaxError(f"不支持的语句: {tok.value!r}", tok.line)

    def expr_list(self) -> list[Node]:
        items = [self.expr()]
        while self.peek().kind == "comma":
            self.advance()
            items.append(self.expr())
        return items

    def expr(self) -> Node:
        left = self.binary()
        while self.at_keyword("as"):
            self.advance()
            left = infix("as", left, self.binary())
        return left

    def binary(self) -> Node:
        left = self.unary()
        while self.peek().kind == "op" and self.peek().value != ".":
            op = self.advance().value
            left = infix(op, left, self.unary())
        return left

    def unary(self) -> Node:
        if self.peek().kind == "op":
            op = self.advance().value
            return prefix(op, self.unary())
        return self.postfix()

    def postfix(self) -> Node:
        node = self.primary()
        while self.peek().kind == "op" and self.peek().value == ".":
            self.advance()
            node = dot(node, self.primary())
        return node

    def primary(self) -> Node:
        tok = self.advance()
        if tok.kind == "ident":
            return ident(tok.value)
        if tok.kind == "acc":
            return Node(NodeKind.ACC_QUOTED, value=tok.value[1:-1].strip())
        if tok.kind == "str":
            return Node(NodeKind.STR_LIT, value=_unescape(tok.value[1:-1], tok.line))
        if tok.kind == "rstr":
            return Node(NodeKind.RSTR_LIT, value=tok.value[2:-1].replace('""', '"'))
        if tok.kind == "triple":
            return Node(NodeKind.TRIPLE_STR_LIT, value=tok.value[3:-3])
        if tok.kind == "[":
            items: list[Node] = []
            while self.peek().kind != "]":
                items.append(self.expr())
                if self.peek().kind != "comma":
                    break
                self.advance()
            self.expect("]")
            return bracket(*items)
        if tok.kind == "(":
            inner = self.expr()
            self.expect(")")
            return Node(NodeKind.PAR, (inner,))
        raise ImportSyntaxError(f"意外的记号: {tok.value!r}", tok.line)


def parse_imports(text: str) -> Node:
    """解析 Nim 导入语句文本，返回 STMT_LIST"""
    return _Parser(tokenize(text)).parse()


_STRING_TOKENS = ("str", "rstr", "triple")

ArgValue = str | bool


def normalize_ident(name: str) -> str:
    """Nim 风格无关比较: 首字母区分大小写，其余忽略大小写与下划线"""
    return name[:1] + name[1:].replace("_", "").lower()


def _arg_value(p: _Parser) -> ArgValue:
    tok = p.peek()
    if tok.kind in _STRING_TOKENS:
        return p.primary().value
    if tok.kind == "ident" and tok.value in ("true", "false"):
        p.advance()
        return tok.value == "true"
    raise ImportSyntaxError(f"参数只能是字符串或布尔值: {tok.value!r}", tok.line)


def parse_directive(text: str) -> tuple[list[ArgValue], dict[str, ArgValue]]:
    """解析 grab 指令的参数部分

    支持 ``"install args"`` 与 ``package("install args", name = "x",
    forceInstall = true)`` 两种写法，返回 (位置参数, 关键字参数)。
    关键字参数名经 normalize_ident 归一化。
    """
    p = _Parser([t for t in tokenize(text) if t.kind != "newline"])
    tok = p.peek()
    if tok.kind in _STRING_TOKENS:
        value = p.primary().value
        p.expect("eof")
        return [value], {}
    if tok.kind != "ident" or tok.value != "package":
        raise ImportSyntaxError(f"无法识别的 grab 参数: {text.strip()!r}", tok.line)

    p.advance()
    p.expect("(")
    args: list[ArgValue] = []
    kwargs: dict[str, ArgValue] = {}
    while p.peek().kind != ")":
        is_kw = p.peek().kind == "ident" and p.tokens[p.pos + 1].value == "="
        if is_kw:
            key = normalize_ident(p.advance().value)
            p.advance()
            kwargs[key] = _arg_value(p)
        else:
            if kwargs:
                raise ImportSyntaxError("位置参数不能出现在关键字参数之后", p.peek().line)
            args.append(_arg_value(p))
        if p.peek().kind != "comma":
            break
        p.advance()
    p.expect(")")
    p.expect("eof")
    return args, kwargs


# =========================================================================
# 渲染
# =========================================================================

def render_expr(node: Node) -> str:
    kind = node.kind
    if kind in (NodeKind.IDENT, NodeKind.SYM):
        return node.value
    if kind == NodeKind.ACC_QUOTED:
        return f"`{node.value}`"
    if kind == NodeKind.STR_LIT:
        return f'"{_escape(node.value)}"'
    if kind == NodeKind.RSTR_LIT:
        return 'r"' + node.value.replace('"', '""') + '"'
    if kind == NodeKind.TRIPLE_STR_LIT:
        return f'"""{node.value}"""'
    if kind == NodeKind.INFIX:
        op, left, right = (render_expr(c) for c in node.children)
        if op == "/":
            return f"{left}/{right}"
        return f"{left} {op} {right}"
    if kind == NodeKind.PREFIX:
        return "".join(render_expr(c) for c in node.children)
    if kind == NodeKind.POSTFIX:
        return render_expr(node[1]) + render_expr(node[0])
    if kind == NodeKind.DOT_EXPR:
        return ".".join(render_expr(c) for c in node.children)
    if kind == NodeKind.BRACKET:
        return "[" + ", ".join(render_expr(c) for c in node.children) + "]"
    if kind == NodeKind.PAR:
        return "(" + ", ".join(render_expr(c) for c in node.children) + ")"
    if kind == NodeKind.CALL:
        args = ", ".join(render_expr(c) for c in node.children[1:])
        return f"{render_expr(node[0])}({args})"
    if kind == NodeKind.CALL_STR_LIT:
        return render_expr(node[0]) + render_expr(node[1])
    if kind == NodeKind.COMMAND:
        return " ".join(render_expr(c) for c in node.children)
    if kind == NodeKind.EMPTY:
        return ""
    raise ImportSyntaxError(f"无法渲染的节点: {node.dump()}")


def _render_lines(node: Node) -> list[str]:
    kind = node.kind
    if kind == NodeKind.STMT_LIST:
        lines: list[str] = []
        for stmt in node:
            lines.extend(_render_lines(stmt))
        return lines
    items = [render_expr(c) for c in node.children]
    if kind == NodeKind.IMPORT:
        return ["import " + ", ".join(items)]
    if kind == NodeKind.IMPORT_EXCEPT:
        return [f"import {items[0]} except " + ", ".join(items[1:])]
    if kind == NodeKind.FROM:
        return [f"from {items[0]} import " + ", ".join(items[1:])]
    if kind == NodeKind.INCLUDE:
        return ["include " + ", ".join(items)]
    return [render_expr(node)]


def render(node: Node) -> str:
    """把导入树渲染为 Nim 源码，每条语句一行"""
    return "\n".join(_render_lines(node))


class NimSyntaxAdapter:
    """Nim 语法适配器，满足 SyntaxAdapter 协议

    模块文件后缀不属于适配器，统一取配置 module_suffix。
    """

    def parse(self, text: str) -> Node:
        return parse_imports(text)

    def render(self, node: Node) -> str:
        return render(node)
