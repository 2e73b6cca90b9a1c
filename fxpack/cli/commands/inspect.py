"""
Inspect 命令实现

检查已生成的模块包或发布包：列出成员、读取 filelist.json 并校验清单与成员是否一致。
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ...build import ArchiveIOError, MANIFEST_FILENAME, list_archive_members, read_archive_manifest
from ...build.build_context import Manifest


console = Console()


def check_manifest_consistency(members: List[str], manifest: Optional[Manifest]) -> List[str]:
    """比对清单与归档成员

    模块包清单（映射）必须与除 filelist.json 外的成员一一对应；
    发布包清单（列表）中的每个名称都必须是归档成员。

    Returns:
        List[str]: 不一致项描述，空列表表示一致
    """
    if manifest is None:
        return [f"归档中缺少 {MANIFEST_FILENAME}"]

    member_set = set(members) - {MANIFEST_FILENAME}
    problems = []

    if isinstance(manifest, dict):
        for key in manifest:
            if key not in member_set:
                problems.append(f"清单条目不在归档中: {key}")
        for member in sorted(member_set):
            if member not in manifest:
                problems.append(f"归档成员不在清单中: {member}")
    elif isinstance(manifest, list):
        for key in manifest:
            if key not in member_set:
                problems.append(f"清单条目不在归档中: {key}")
    else:
        problems.append(f"无法识别的清单格式: {type(manifest).__name__}")

    return problems


def inspect_command(
    archive: Path = typer.Argument(..., help="模块包或发布包路径"),
    json_output: bool = typer.Option(False, "--json", help="输出 JSON 格式"),
    show_members: bool = typer.Option(False, "--members", help="显示全部归档成员"),
) -> None:
    """检查打包产物

    示例:
        fxpack inspect build/dist/Framelix-1.0.0.zip
        fxpack inspect build/dist/release-1.0.0.zip --json
    """
    if not archive.is_file():
        console.print(f"[red]归档文件不存在: {escape(str(archive))}[/red]")
        raise typer.Exit(1)

    try:
        members = list_archive_members(archive)
        manifest = read_archive_manifest(archive)
    except ArchiveIOError as e:
        console.print(f"[red]检查归档失败: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    problems = check_manifest_consistency(members, manifest)
    kind = "module" if isinstance(manifest, dict) else "release" if isinstance(manifest, list) else "unknown"

    if json_output:
        data: Dict[str, Any] = {
            "archive": str(archive),
            "kind": kind,
            "members": members,
            "manifest": manifest,
            "problems": problems,
        }
        typer.echo(json.dumps(data, ensure_ascii=False, indent=2))
    else:
        _display_summary(archive, kind, members, manifest, show_members)
        if problems:
            console.print(f"[red]清单与归档不一致 ({len(problems)} 项):[/red]")
            for problem in problems:
                console.print(f"  - {escape(problem)}")
        else:
            console.print("[green]✓ 清单与归档一致[/green]")

    if problems:
        raise typer.Exit(1)


def _display_summary(archive: Path, kind: str, members: List[str],
                     manifest: Optional[Manifest], show_members: bool) -> None:
    table = Table(title=f"归档信息: {archive.name}")
    table.add_column("项目", style="cyan")
    table.add_column("值", style="green")

    table.add_row("类型", {"module": "模块包", "release": "发布包"}.get(kind, "未知"))
    table.add_row("成员数量", str(len(members)))
    if isinstance(manifest, dict):
        files = sum(1 for value in manifest.values() if value is not None)
        table.add_row("清单文件", str(files))
        table.add_row("清单目录", str(len(manifest) - files))
    elif isinstance(manifest, list):
        table.add_row("清单条目", str(len(manifest)))
    console.print(table)

    if show_members:
        member_table = Table(title="归档成员")
        member_table.add_column("路径", style="cyan")
        member_table.add_column("CRC32", style="yellow")
        for member in members:
            checksum = manifest.get(member) if isinstance(manifest, dict) else None
            member_table.add_row(escape(member), checksum or "-")
        console.print(member_table)
