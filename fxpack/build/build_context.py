"""
构建上下文模块

定义打包过程中的共享数据结构和异常类。
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from ..config.schema import PackagerSettings

# 进度回调类型: (阶段, 当前, 总数, 消息)
ProgressCallback = Callable[[str, int, int, str], None]

# 归档条目: 归档内路径 -> 源文件或源目录
ArchiveEntries = Dict[str, Path]

# 模块包清单为校验和映射，发布包清单为顶层成员名列表
Manifest = Union[Dict[str, Optional[str]], List[str]]


@dataclass
class PackageContext:
    """打包上下文，包含一次打包过程中的共享数据"""
    settings: PackagerSettings
    package_name: str
    progress_callback: Optional[ProgressCallback] = None

    # 打包过程中生成的数据
    source_root: Optional[Path] = None
    version: Optional[str] = None
    exclude_patterns: List[str] = field(default_factory=list)
    entries: ArchiveEntries = field(default_factory=dict)
    manifest: Optional[Manifest] = None
    manifest_path: Optional[Path] = None
    output_path: Optional[Path] = None

    build_stats: Dict[str, Any] = field(default_factory=lambda: {
        'start_time': 0,
        'end_time': 0,
        'total_files': 0,
        'total_directories': 0,
        'excluded': 0,
        'archive_size': 0,
    })

    def report_progress(self, stage: str, current: int, message: str = "") -> None:
        if self.progress_callback:
            self.progress_callback(stage, current, 100, message)


class BuildError(Exception):
    """打包错误"""
    pass


class ArchiveIOError(BuildError):
    """文件系统或归档读写错误"""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class SubprocessBuildError(BuildError):
    """模块打包子进程失败"""

    def __init__(self, module: str, message: str, returncode: Optional[int] = None, output: str = ""):
        super().__init__(f"模块 {module} 打包失败: {message}")
        self.module = module
        self.returncode = returncode
        self.output = output
