"""集中配置管理

包管理器命令、标志、错误标记、模块后缀等统一在此定义。
支持从 YAML 文件加载 + 编程式覆盖。
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, fields

from grab.core.exceptions import ConfigError
from grab.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """全局配置"""

    # 包管理器
    package_manager: str = "nimble"
    install_command: str = "install"
    path_command: str = "path"
    force_flag: str = "-Y"
    no_confirm_flag: str = "-N"
    error_marker: str = "Error: "

    # 导入改写
    module_suffix: str = ".nim"
    strict_shapes: bool = True

    # 路径查询为空时是否按包名查询
    lookup_default_path: bool = False

    give_hint: bool = False
    timeout: int | None = None
    manifest: str = "grab.yml"

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        for f in fields(self):
            if f.name in ("extra", "timeout"):
                continue
            expected = bool if f.type == "bool" else str
            value = getattr(self, f.name)
            if not isinstance(value, expected):
                raise ConfigError(
                    f"配置项 {f.name} 类型错误: 期望 {expected.__name__}, "
                    f"实际 {type(value).__name__}"
                )
        if self.timeout is not None and (
            not isinstance(self.timeout, int) or self.timeout <= 0
        ):
            raise ConfigError(f"配置项 timeout 必须为正整数: {self.timeout!r}")
        if not self.package_manager:
            raise ConfigError("配置项 package_manager 不能为空")

    @classmethod
    def from_file(cls, path: str = "grab.yml") -> Config:
        """从 YAML 文件加载配置，不存在则返回默认

        文件中的 config 段优先；没有 config 段时整个文件视为配置。
        """
        data = load_yaml(path)
        if not data:
            return cls()
        data = data.get("config", data)
        if not isinstance(data, dict):
            raise ConfigError(f"config 段必须为字典: {path}")
        known = {f.name for f in fields(cls)} - {"extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        cfg = cls(**matched)
        cfg.extra = extra
        return cfg

    def to_dict(self) -> dict:
        return asdict(self)


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = "grab.yml") -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
