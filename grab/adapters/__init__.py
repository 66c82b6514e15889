"""宿主语法适配器"""

from grab.adapters.nim import NimSyntaxAdapter, parse_imports, render

__all__ = ["NimSyntaxAdapter", "parse_imports", "render"]
