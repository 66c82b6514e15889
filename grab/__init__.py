"""grab - 构建期安装包并把导入改写为包安装目录下的路径"""

__version__ = "0.3.0"

from grab.core.exceptions import (  # noqa: E402
    GrabError,
    InstallFailedError,
    PathNotFoundError,
    UnsupportedShapeError,
)
from grab.core.grabber import grab  # noqa: E402
from grab.core.imports.rewriter import rewrite  # noqa: E402
from grab.core.package import PackageSpec, parse_spec  # noqa: E402
from grab.core.resolver import Resolver  # noqa: E402

__all__ = [
    "__version__",
    "GrabError",
    "InstallFailedError",
    "PathNotFoundError",
    "UnsupportedShapeError",
    "PackageSpec",
    "Resolver",
    "grab",
    "parse_spec",
    "rewrite",
]
