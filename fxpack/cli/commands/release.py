"""
Release 命令实现

打包发布版本：逐个打包内置模块，组装 release-<版本>.zip。
"""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ...build import BuildError, ReleasePackager, SubprocessBuildError
from ...config import ConfigError, ConfigValidationError
from .common import err_console, resolve_settings


def release_command(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML 设置文件路径"),
    app_root: Optional[Path] = typer.Option(None, "--app-root", help="应用根目录（默认当前目录）"),
    modules_dir: Optional[Path] = typer.Option(None, "--modules-dir", help="模块目录（默认 <app-root>/modules）"),
    dist_dir: Optional[Path] = typer.Option(None, "--dist-dir", help="产物输出目录（默认 <app-root>/build/dist）"),
    tmp_dir: Optional[Path] = typer.Option(None, "--tmp-dir", help="临时目录（默认 <app-root>/tmp）"),
    compress_level: Optional[int] = typer.Option(None, "--compress-level", min=0, max=9, help="ZIP 压缩级别"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="日志输出文件"),
) -> None:
    """打包发布版本

    读取应用根目录 package.json 中的 framelix.builtInModules，
    每个模块在独立子进程中依次打包，任一模块失败则不生成发布归档。

    示例:
        fxpack release
        fxpack release --app-root /var/www/app -c fxpack.yaml
    """
    settings = resolve_settings(config, app_root, modules_dir, dist_dir, tmp_dir, compress_level, log_file)

    try:
        archive_path = ReleasePackager(settings).package()
    except ConfigValidationError as e:
        err_console.print("[red]应用元数据验证失败:[/red]")
        err_console.print(e.format_errors(), markup=False)
        raise typer.Exit(1)
    except ConfigError as e:
        err_console.print(f"[red]配置错误[/red]: {escape(str(e))}")
        raise typer.Exit(1)
    except SubprocessBuildError as e:
        err_console.print(f"[red]✗ 发布打包中止，模块 {escape(e.module)} 失败[/red]")
        err_console.print(str(e), markup=False, soft_wrap=True)
        raise typer.Exit(1)
    except BuildError as e:
        err_console.print(f"[red]✗ 发布打包失败[/red]: {escape(str(e))}")
        raise typer.Exit(1)

    typer.echo(str(archive_path))
