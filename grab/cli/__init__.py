"""grab 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

from __future__ import annotations

import functools
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from grab import __version__
from grab.core.config import Config, init_config
from grab.core.exceptions import GrabError
from grab.core.package import PackageSpec, parse_spec
from grab.utils.logger import setup_logging


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """把 GrabError 转成 click 的友好错误输出（退出码 1）"""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except GrabError as e:
            raise click.ClickException(f"[{e.code}] {e}") from e

    return wrapper


def package_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """install 参数 + --name / --path / --force 公共选项"""
    func = click.option("--force", "-f", is_flag=True, help="强制重新安装")(func)
    func = click.option("--path", "path_query", default=None, help="路径查询串（覆盖推导结果）")(func)
    func = click.option("--name", default=None, help="包名（可带版本，如 result@0.1.0）")(func)
    return click.argument("install")(func)


def build_spec(install: str, name: str | None, path_query: str | None, force: bool) -> PackageSpec:
    return parse_spec(install, name=name, path_query=path_query, force_install=force)


def get_cfg(ctx: click.Context) -> Config:
    return ctx.find_object(Config) or Config()


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", "config_path", default="grab.yml", help="配置文件路径")
@click.pass_context
@handle_errors
def main(ctx: click.Context, config_path: str) -> None:
    """grab - 构建期安装包并改写导入"""
    setup_logging(
        level=os.getenv("GRAB_LOG_LEVEL", "INFO"),
        json_output=os.getenv("GRAB_LOG_JSON", "") == "1",
    )
    if Path(config_path).exists():
        ctx.obj = init_config(config_path)
    else:
        ctx.obj = Config()


# 注册各领域子命令
from grab.cli.cmd_imports import register as _reg_imports  # noqa: E402
from grab.cli.cmd_package import register as _reg_package  # noqa: E402

_reg_package(main)
_reg_imports(main)
