"""
fxpack CLI 主入口

提供命令行接口，支持 module/release/inspect/validate 等命令。
"""

from typing import Optional

import typer
from rich.console import Console

from .. import __version__
from ..utils import configure_logging
from ..utils.logging import OutputLevel
from .commands import inspect, module, release, validate


# 创建主应用
app = typer.Typer(
    name="fxpack",
    help="fxpack - 模块包与发布包打包工具",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    """显示版本信息"""
    if value:
        console.print(f"fxpack v{__version__}")
        raise typer.Exit()


def verbose_callback(verbose: bool) -> None:
    """配置详细输出"""
    configure_logging(level=OutputLevel.DEBUG if verbose else OutputLevel.INFO)


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="显示版本信息"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        callback=verbose_callback,
        help="启用详细输出"
    )
) -> None:
    """fxpack - 模块包与发布包打包工具

    使用 --help 查看可用命令的详细信息。
    """
    pass


# 注册子命令
app.command("module", help="打包单个模块")(module.module_command)
app.command("release", help="打包发布版本")(release.release_command)
app.command("inspect", help="检查打包产物")(inspect.inspect_command)
app.command("validate", help="验证 package.json 元数据")(validate.validate_command)


if __name__ == "__main__":
    app()
