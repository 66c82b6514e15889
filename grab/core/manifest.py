"""包清单加载

从 YAML 清单文件加载需要预先获取的包:

    packages:
      - install: "regex"
      - install: "-y https://github.com/arnetheduck/nim-result@#HEAD"
        name: result
        force: true
      - "jsony@1.1.5"          # 字符串条目等价于 {install: ...}
"""

from __future__ import annotations

import logging
from pathlib import Path

from grab.core.exceptions import ConfigError
from grab.core.package import PackageSpec, parse_spec
from grab.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)


def load_manifest(path: str | Path) -> list[PackageSpec]:
    """从清单文件加载所有包描述，文件不存在时返回空列表"""
    p = Path(path)
    if not p.exists():
        logger.warning("清单文件不存在: %s", p)
        return []

    data = load_yaml(p)
    entries = data.get("packages") or []
    if not isinstance(entries, list):
        raise ConfigError(f"packages 段必须为列表: {p}")

    specs: list[PackageSpec] = []
    for entry in entries:
        if entry is None:
            continue
        if isinstance(entry, str):
            specs.append(parse_spec(entry))
        elif isinstance(entry, dict):
            specs.append(PackageSpec.from_mapping(entry))
        else:
            raise ConfigError(f"无法识别的清单条目: {entry!r}")

    logger.info("已加载 %d 个包", len(specs))
    return specs
