"""导入表达式模型与改写"""

from grab.core.imports.models import Node, NodeKind
from grab.core.imports.rewriter import (
    ImportRewriter,
    locate_leaf_path,
    normalize_imports,
    rewrite,
    substitute,
)

__all__ = [
    "Node",
    "NodeKind",
    "ImportRewriter",
    "locate_leaf_path",
    "normalize_imports",
    "rewrite",
    "substitute",
]
