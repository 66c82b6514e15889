"""grab.yml 读取

配置与清单共用同一个 YAML 文件，读取失败统一转换为 ConfigError，
CLI 据此给出 [CONFIG_ERROR] 提示而不是堆栈。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from grab.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

# grab.yml 只有配置与包清单，1MB 足够
MAX_YAML_SIZE = 1024 * 1024


def load_yaml(path: str | Path) -> dict[str, Any]:
    """读取 YAML 映射；文件不存在或为空时返回空字典

    异常:
        ConfigError: 文件过大、YAML 格式错误或顶层不是映射
    """
    p = Path(path)
    if not p.exists():
        return {}

    size = p.stat().st_size
    if size > MAX_YAML_SIZE:
        raise ConfigError(f"{p} 过大 ({size} 字节)，上限 {MAX_YAML_SIZE} 字节")

    try:
        result = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"{p} 不是合法的 YAML: {e}") from e

    if result is None:
        return {}
    if not isinstance(result, dict):
        raise ConfigError(f"{p} 顶层必须为映射，实际为 {type(result).__name__}")
    logger.debug("读取 %s: %s", p, ", ".join(map(str, result)) or "(空)")
    return result
