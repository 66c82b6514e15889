"""CLI — 包解析、安装与清单同步命令"""

from __future__ import annotations

import logging

import click

from grab.cli import build_spec, get_cfg, handle_errors, package_options
from grab.core.exceptions import GrabError
from grab.core.manifest import load_manifest
from grab.core.resolver import Resolver

logger = logging.getLogger(__name__)


def register(group: click.Group) -> None:
    group.add_command(parse)
    group.add_command(resolve)
    group.add_command(sync)


@click.command()
@package_options
@handle_errors
def parse(install: str, name: str | None, path_query: str | None, force: bool) -> None:
    """显示 install 参数解析出的包信息（不调用包管理器）"""
    spec = build_spec(install, name, path_query, force)
    click.echo(f"name:    {spec.name}")
    click.echo(f"install: {spec.install_query}")
    click.echo(f"path:    {spec.path_query}")
    click.echo(f"force:   {str(spec.force_install).lower()}")


@click.command()
@package_options
@click.pass_context
@handle_errors
def resolve(
    ctx: click.Context, install: str, name: str | None,
    path_query: str | None, force: bool,
) -> None:
    """按需安装并输出包的安装目录"""
    spec = build_spec(install, name, path_query, force)
    directory = Resolver(config=get_cfg(ctx)).resolve(spec)
    if directory:
        click.echo(directory)
    else:
        click.echo(f"未查询路径，按名称导入: {spec.name}")


@click.command()
@click.option("--manifest", "-m", default=None, help="包清单路径（默认取配置 manifest）")
@click.option("--check", is_flag=True, help="只检查是否已安装，不安装")
@click.pass_context
@handle_errors
def sync(ctx: click.Context, manifest: str | None, check: bool) -> None:
    """按清单逐个安装包，输出各包安装目录"""
    cfg = get_cfg(ctx)
    specs = load_manifest(manifest or cfg.manifest)
    if not specs:
        click.echo("清单中没有包。")
        return

    resolver = Resolver(config=cfg)
    failed: dict[str, str] = {}
    for spec in specs:
        if check:
            mark = "OK" if resolver.is_installed(spec) else "MISSING"
            click.echo(f"  [{mark:7s}] {spec.name}")
            if mark != "OK":
                failed[spec.name] = "未安装"
            continue
        try:
            directory = resolver.resolve(spec)
        except GrabError as exc:
            logger.exception("获取失败: %s", spec.name)
            failed[spec.name] = str(exc)
            click.echo(f"  {spec.name:20s} [FAILED] {exc.code}")
            continue
        click.echo(f"  {spec.name:20s} {directory or '(按名称导入)'}")

    if failed:
        logger.warning(
            "同步汇总: %d 成功, %d 失败 (%s)",
            len(specs) - len(failed), len(failed), ", ".join(failed),
        )
        raise click.ClickException(f"{len(failed)} 个包未就绪: {', '.join(failed)}")
