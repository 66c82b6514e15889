"""源码展开 — 把 Nim 源文件中的 grab 指令替换为改写后的导入

支持的指令形式:

    grab "regex"

    grab "jsony@1.1.5":
      import jsony

    grab package("-y https://github.com/arnetheduck/nim-result@#HEAD",
                 name = "result", forceInstall = true):
      import results

指令（含缩进块）被替换为同缩进的导入语句，其余行保持不变。
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from grab.adapters.nim import ArgValue, NimSyntaxAdapter, normalize_ident, parse_directive
from grab.core.config import Config, get_config
from grab.core.exceptions import ImportSyntaxError, UnsupportedShapeError
from grab.core.grabber import grab
from grab.core.package import PackageSpec, parse_spec
from grab.core.store import PackageStore

logger = logging.getLogger(__name__)

_DIRECTIVE_RE = re.compile(r"^(?P<indent>[ \t]*)grab\b(?P<rest>.*)$")

_POSITIONAL = ("installCommand", "name", "pathQuery")


def _is_directive(rest: str) -> bool:
    """grab 之后紧跟字符串、package(...) 或括号才视为指令"""
    if rest[:1] not in ("", " ", "\t", "("):
        return False
    return rest.lstrip().startswith(('"', 'r"', 'R"', "package", "("))


def _indent_width(line: str) -> int:
    return len(line) - len(line.lstrip(" \t"))


def _paren_balance(text: str) -> int:
    """括号深度（忽略字符串与注释中的括号）"""
    depth = 0
    quote = False
    i = 0
    while i < len(text):
        ch = text[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == '"':
                quote = False
        elif ch == '"':
            quote = True
        elif ch == "#":
            while i < len(text) and text[i] != "\n":
                i += 1
            continue
        elif ch in "([":
            depth += 1
        elif ch in ")]":
            depth -= 1
        i += 1
    return depth


def _strip_comment(text: str) -> str:
    """去掉行尾注释（字符串内的 # 保留）"""
    quote = False
    for i, ch in enumerate(text):
        if ch == '"' and (i == 0 or text[i - 1] != "\\"):
            quote = not quote
        elif ch == "#" and not quote:
            return text[:i]
    return text


def spec_from_args(args: list[ArgValue], kwargs: dict[str, ArgValue]) -> PackageSpec:
    """把 package(...) 的参数映射为 PackageSpec"""
    strings: dict[str, str] = {}
    force = False
    positional = iter(_POSITIONAL)
    for value in args:
        if isinstance(value, bool):
            force = value
        else:
            key = next(positional, None)
            if key is None:
                raise ImportSyntaxError("package(...) 位置参数过多")
            strings[key] = value

    known = {normalize_ident(k): k for k in (*_POSITIONAL, "forceInstall")}
    for raw_key, value in kwargs.items():
        key = known.get(raw_key)
        if key is None:
            raise ImportSyntaxError(f"package(...) 未知参数: {raw_key}")
        if key == "forceInstall":
            if not isinstance(value, bool):
                raise ImportSyntaxError("forceInstall 必须为布尔值")
            force = value
        elif isinstance(value, bool):
            raise ImportSyntaxError(f"{key} 必须为字符串")
        else:
            strings[key] = value

    if "installCommand" not in strings:
        raise ImportSyntaxError("package(...) 缺少安装参数")
    return parse_spec(
        strings["installCommand"],
        name=strings.get("name"),
        path_query=strings.get("pathQuery"),
        force_install=force,
    )


class SourceExpander:
    """扫描源码中的 grab 指令并逐个展开"""

    def __init__(
        self,
        store: PackageStore | None = None,
        config: Config | None = None,
    ) -> None:
        self.config = config or get_config()
        self.store = store
        self.adapter = NimSyntaxAdapter()
        self.expanded = 0

    def expand(self, text: str) -> str:
        lines = text.splitlines()
        out: list[str] = []
        i = 0
        while i < len(lines):
            m = _DIRECTIVE_RE.match(lines[i])
            if m is None or not _is_directive(m.group("rest")):
                out.append(lines[i])
                i += 1
                continue
            i = self._expand_at(lines, i, m.group("indent"), out)
        result = "\n".join(out)
        if text.endswith("\n"):
            result += "\n"
        return result

    def _expand_at(self, lines: list[str], start: int, indent: str, out: list[str]) -> int:
        """展开从 start 行开始的指令，返回下一个待处理的行号"""
        end = start
        head = _strip_comment(_DIRECTIVE_RE.match(lines[start]).group("rest"))
        while _paren_balance(head) > 0:
            end += 1
            if end >= len(lines):
                raise ImportSyntaxError("grab 指令括号未闭合", start + 1)
            head += "\n" + _strip_comment(lines[end])

        head = head.strip()
        has_block = head.endswith(":")
        if has_block:
            head = head[:-1].rstrip()
        if head.startswith("(") and head.endswith(")"):
            head = head[1:-1]

        # 错误行号换算为源文件中的行号（1 起）
        try:
            spec = spec_from_args(*parse_directive(head))
        except ImportSyntaxError as e:
            raise ImportSyntaxError(e.message, start + max(e.line, 1)) from e

        block = ""
        nxt = end + 1
        if has_block:
            block_lines: list[str] = []
            width = len(indent.expandtabs())
            while nxt < len(lines) and (
                not lines[nxt].strip()
                or _indent_width(lines[nxt].expandtabs()) > width
            ):
                block_lines.append(lines[nxt])
                nxt += 1
            while block_lines and not block_lines[-1].strip():
                block_lines.pop()
                nxt -= 1
            block = "\n".join(line.strip() for line in block_lines)

        imports = None
        if block:
            try:
                imports = self.adapter.parse(block)
            except ImportSyntaxError as e:
                line = end + 1 + e.line if e.line else start + 1
                raise ImportSyntaxError(e.message, line) from e

        logger.info("展开第 %d 行: grab %s", start + 1, spec.name)
        try:
            tree = grab(spec, imports, store=self.store, config=self.config)
        except UnsupportedShapeError as e:
            raise UnsupportedShapeError(f"第 {start + 1} 行: {e}", e.node) from e
        out.extend(indent + line for line in self.adapter.render(tree).splitlines())
        self.expanded += 1
        return nxt


def expand_source(
    text: str,
    *,
    store: PackageStore | None = None,
    config: Config | None = None,
) -> str:
    """展开源码文本中的所有 grab 指令"""
    return SourceExpander(store=store, config=config).expand(text)


def _write_output(path: Path, text: str) -> None:
    """先写同目录临时文件再替换，构建中断时不留下半截源文件"""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.grab-tmp")
    try:
        tmp.write_text(text, encoding="utf-8")
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def expand_file(
    path: str | Path,
    output: str | Path | None = None,
    *,
    store: PackageStore | None = None,
    config: Config | None = None,
) -> str:
    """展开源文件，output 不为空时原子写入该文件；返回展开后的文本"""
    src = Path(path)
    expander = SourceExpander(store=store, config=config)
    result = expander.expand(src.read_text(encoding="utf-8"))
    logger.info("%s: 展开 %d 条 grab 指令", src, expander.expanded)
    if output is not None:
        _write_output(Path(output), result)
    return result
