"""
Module 命令实现

打包单个模块。stdout 只输出一行：产物归档的绝对路径，供父进程读取。
"""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ...build import BuildError, ModulePackager
from ...config import ConfigError, ConfigValidationError
from .common import err_console, resolve_settings


def module_command(
    name: str = typer.Argument(..., help="模块名（modules 目录下的目录名）"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML 设置文件路径"),
    app_root: Optional[Path] = typer.Option(None, "--app-root", help="应用根目录（默认当前目录）"),
    modules_dir: Optional[Path] = typer.Option(None, "--modules-dir", help="模块目录（默认 <app-root>/modules）"),
    dist_dir: Optional[Path] = typer.Option(None, "--dist-dir", help="产物输出目录（默认 <app-root>/build/dist）"),
    tmp_dir: Optional[Path] = typer.Option(None, "--tmp-dir", help="临时目录（默认 <app-root>/tmp）"),
    compress_level: Optional[int] = typer.Option(None, "--compress-level", min=0, max=9, help="ZIP 压缩级别"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="日志输出文件"),
) -> None:
    """打包模块

    生成 <dist>/<模块名>-<版本>.zip，内含 filelist.json 校验和清单。

    示例:
        fxpack module Framelix
        fxpack module Shop --app-root /var/www/app
    """
    settings = resolve_settings(config, app_root, modules_dir, dist_dir, tmp_dir, compress_level, log_file)

    try:
        archive_path = ModulePackager(settings).package(name)
    except ConfigValidationError as e:
        err_console.print(f"[red]模块 {escape(name)} 元数据验证失败:[/red]")
        err_console.print(e.format_errors(), markup=False)
        raise typer.Exit(1)
    except ConfigError as e:
        err_console.print(f"[red]配置错误[/red]: {escape(str(e))}")
        raise typer.Exit(1)
    except BuildError as e:
        err_console.print(f"[red]✗ 模块 {escape(name)} 打包失败[/red]: {escape(str(e))}")
        raise typer.Exit(1)

    typer.echo(str(archive_path))
