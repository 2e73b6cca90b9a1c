"""
Validate 命令实现

验证应用或模块的 package.json 元数据及其排除模式。
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ...build.path_filter import MODULE_EXCLUDE_PATTERNS, compile_patterns
from ...config import ConfigError, ConfigValidationError, load_app_metadata, load_module_metadata
from .common import resolve_settings


console = Console()


def validate_command(
    name: Optional[str] = typer.Argument(None, help="模块名，省略时验证应用根目录 package.json"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML 设置文件路径"),
    app_root: Optional[Path] = typer.Option(None, "--app-root", help="应用根目录（默认当前目录）"),
    modules_dir: Optional[Path] = typer.Option(None, "--modules-dir", help="模块目录（默认 <app-root>/modules）"),
    json_output: bool = typer.Option(False, "--json", help="输出 JSON 格式的错误信息"),
) -> None:
    """验证 package.json 元数据

    示例:
        fxpack validate
        fxpack validate Framelix --json
    """
    settings = resolve_settings(config, app_root, modules_dir, None, None)

    if name is None:
        target = Path(settings.app_root)
    else:
        target = settings.module_root(name)
    errors = _collect_errors(name, target)

    if not errors:
        console.print(f"[green]✓ 元数据验证通过[/green]: {escape(str(target))}")
        return

    if json_output:
        error_data = {
            "target": str(target),
            "errors": errors,
            "error_count": len(errors),
        }
        typer.echo(json.dumps(error_data, ensure_ascii=False, indent=2, default=str))
    else:
        console.print(f"[red]元数据验证失败 ({len(errors)} 个错误):[/red]")
        table = Table(title="验证错误")
        table.add_column("位置", style="cyan", no_wrap=True)
        table.add_column("错误信息", style="red")
        for error in errors:
            location = " -> ".join(str(item) for item in error.get('loc', []))
            table.add_row(escape(location or "根级别"), escape(str(error.get('msg', '未知错误'))))
        console.print(table)

    raise typer.Exit(1)


def _collect_errors(name: Optional[str], target: Path) -> List[Dict[str, Any]]:
    if not target.is_dir():
        return [{'loc': [], 'msg': f"目录不存在: {target}", 'type': 'config_error'}]

    try:
        if name is None:
            load_app_metadata(target)
        else:
            metadata = load_module_metadata(target)
            compile_patterns(MODULE_EXCLUDE_PATTERNS + metadata.release_exclude)
    except ConfigValidationError as e:
        return [
            {'loc': list(error.get('loc', [])), 'msg': error.get('msg', ''), 'type': error.get('type', '')}
            for error in e.errors
        ]
    except ConfigError as e:
        return [{'loc': [], 'msg': str(e), 'type': 'config_error'}]
    return []
