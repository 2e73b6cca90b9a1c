"""
文件收集器

负责遍历源目录树，应用排除规则，生成有序的归档条目。
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Set

from ..utils import to_archive_path
from .build_context import ArchiveEntries, ArchiveIOError
from .path_filter import PathFilter


@dataclass
class FileInfo:
    """文件信息"""
    path: Path  # 绝对路径
    relative_path: str  # 归档内路径（正斜杠，无前导斜杠）
    size: int  # 文件大小（字节）
    is_directory: bool = False

    def to_dict(self) -> Dict[str, object]:
        """转换为字典格式"""
        return {
            'path': self.relative_path,
            'size': self.size,
            'is_directory': self.is_directory,
        }


class TreeEnumerator:
    """目录树遍历器

    深度优先遍历，每层按名称排序，保证同一目录树多次遍历顺序一致。
    """

    def enumerate(self, root: Path) -> List[Path]:
        """列出 root 之下（不含 root 本身）的全部文件和目录

        Raises:
            ArchiveIOError: 根目录不存在、目录不可读或检测到符号链接循环
        """
        root = Path(root)
        if not root.is_dir():
            raise ArchiveIOError(f"目录不存在: {root}", root)
        return list(self._walk_directory(root, {os.path.realpath(root)}))

    def _walk_directory(self, directory: Path, active: Set[str]) -> Iterator[Path]:
        try:
            children = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise ArchiveIOError(f"无法读取目录 {directory}: {e}", directory) from e

        for item in children:
            yield item
            if not item.is_dir():
                continue

            real = os.path.realpath(item)
            if real in active:
                raise ArchiveIOError(f"检测到符号链接循环: {item} -> {real}", item)

            active.add(real)
            yield from self._walk_directory(item, active)
            active.discard(real)


class EntryCollector:
    """归档条目收集器

    将遍历结果按排除规则过滤，并为每个保留文件补全所有上级目录条目。
    """

    def __init__(self, enumerator: Optional[TreeEnumerator] = None):
        self.enumerator = enumerator or TreeEnumerator()
        self.collected: List[FileInfo] = []
        self.excluded_count = 0

    def collect(
        self,
        scan_root: Path,
        path_filter: PathFilter,
        key_root: Optional[Path] = None,
        entries: Optional[ArchiveEntries] = None,
    ) -> ArchiveEntries:
        """收集归档条目

        Args:
            scan_root: 遍历的根目录
            path_filter: 路径过滤器
            key_root: 计算归档内路径的基准目录，默认等于 scan_root
            entries: 追加到已有条目（保持其顺序）

        Returns:
            ArchiveEntries: 有序的归档条目
        """
        scan_root = Path(scan_root)
        key_root = Path(key_root) if key_root is not None else scan_root
        entries = entries if entries is not None else {}
        self.collected = []
        self.excluded_count = 0

        for path in self.enumerator.enumerate(scan_root):
            relative = to_archive_path(path.relative_to(key_root).as_posix())

            if path_filter.is_excluded("/" + relative):
                self.excluded_count += 1
                continue

            is_directory = path.is_dir()
            if not is_directory:
                self._add_parent_directories(relative, key_root, entries)

            if relative not in entries:
                try:
                    size = 0 if is_directory else path.stat().st_size
                except OSError as e:
                    raise ArchiveIOError(f"无法读取文件 {path}: {e}", path) from e

                entries[relative] = path
                self.collected.append(FileInfo(
                    path=path,
                    relative_path=relative,
                    size=size,
                    is_directory=is_directory,
                ))

        return entries

    def _add_parent_directories(self, relative: str, key_root: Path, entries: ArchiveEntries) -> None:
        """为文件补全上级目录条目（如 a/b/c.txt -> a, a/b）"""
        parts = relative.split("/")[:-1]
        for depth in range(1, len(parts) + 1):
            directory = "/".join(parts[:depth])
            if directory not in entries:
                entries[directory] = key_root / directory

    def get_statistics(self) -> Dict[str, int]:
        """获取收集统计信息"""
        files = [f for f in self.collected if not f.is_directory]
        return {
            'total_files': len(files),
            'total_directories': len(self.collected) - len(files),
            'total_size': sum(f.size for f in files),
            'excluded': self.excluded_count,
        }


def collect_entries(scan_root: Path, patterns: List[str]) -> ArchiveEntries:
    """便捷函数：按排除模式收集归档条目"""
    return EntryCollector().collect(scan_root, PathFilter(patterns))
