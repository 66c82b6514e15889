"""CLI — 导入改写与源码展开命令"""

from __future__ import annotations

import click

from grab.adapters.nim import NimSyntaxAdapter
from grab.cli import build_spec, get_cfg, handle_errors, package_options
from grab.core.expander import expand_file
from grab.core.grabber import grab


def register(group: click.Group) -> None:
    group.add_command(imports)
    group.add_command(expand)


@click.command()
@package_options
@click.option("--import", "-i", "import_lines", multiple=True, help="导入语句（可多次指定）")
@click.option(
    "--from-file", type=click.Path(exists=True, dir_okay=False), default=None,
    help="从文件读取导入语句",
)
@click.pass_context
@handle_errors
def imports(
    ctx: click.Context, install: str, name: str | None, path_query: str | None,
    force: bool, import_lines: tuple[str, ...], from_file: str | None,
) -> None:
    """安装包并输出改写后的导入语句"""
    adapter = NimSyntaxAdapter()
    text = "\n".join(import_lines)
    if from_file:
        with open(from_file, encoding="utf-8") as f:
            text = "\n".join(filter(None, [text, f.read()]))
    spec = build_spec(install, name, path_query, force)
    tree = grab(spec, text or None, config=get_cfg(ctx), adapter=adapter)
    click.echo(adapter.render(tree))


@click.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", default=None, help="输出文件（不指定则输出到 stdout）")
@click.pass_context
@handle_errors
def expand(ctx: click.Context, source: str, output: str | None) -> None:
    """展开 Nim 源文件中的 grab 指令"""
    result = expand_file(source, output, config=get_cfg(ctx))
    if output is None:
        click.echo(result, nl=False)
    else:
        click.echo(f"已写入: {output}")
