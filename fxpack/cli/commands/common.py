"""
命令共享选项

各子命令共用的路径选项与设置解析。
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from ...config import ConfigError, ConfigValidationError, PackagerSettings, load_settings
from ...utils import expand_path
from ...utils.logging import debug, set_log_file, LogStage

# 诊断输出到 stderr，stdout 只输出产物路径
err_console = Console(stderr=True)


def resolve_settings(
    config: Optional[Path],
    app_root: Optional[Path],
    modules_dir: Optional[Path],
    dist_dir: Optional[Path],
    tmp_dir: Optional[Path],
    compress_level: Optional[int] = None,
    log_file: Optional[Path] = None,
) -> PackagerSettings:
    """加载设置文件并应用命令行覆盖项，失败时打印错误并退出"""
    if log_file:
        try:
            set_log_file(log_file)
        except OSError:
            err_console.print(f"[yellow]无法写入日志文件: {log_file}[/yellow]")

    overrides = {
        'app_root': expand_path(str(app_root)) if app_root else None,
        'modules_dir': expand_path(str(modules_dir)) if modules_dir else None,
        'dist_dir': expand_path(str(dist_dir)) if dist_dir else None,
        'tmp_dir': expand_path(str(tmp_dir)) if tmp_dir else None,
        'compress_level': compress_level,
    }

    try:
        settings = load_settings(config, overrides)
    except ConfigValidationError as e:
        err_console.print("[red]设置验证失败:[/red]")
        err_console.print(e.format_errors(), markup=False)
        raise typer.Exit(1)
    except ConfigError as e:
        err_console.print(f"[red]设置错误[/red]: {escape(str(e))}")
        raise typer.Exit(1)

    debug(f"应用根目录: {settings.app_root}", stage=LogStage.INIT)
    debug(f"模块目录: {settings.modules_dir}", stage=LogStage.INIT)
    debug(f"产物目录: {settings.dist_dir}", stage=LogStage.INIT)
    return settings
