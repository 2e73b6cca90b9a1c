"""
归档写入器

将归档条目写入单个 ZIP 文件。先写入目标目录下的临时文件，成功后原子替换，
失败时删除临时文件，不会留下被当作成品的半成品归档。
"""

import json
import os
import tempfile
import zipfile
from pathlib import Path
from typing import List, Optional, Union

from ..utils import ensure_directory, remove_quietly
from .build_context import ArchiveEntries, ArchiveIOError, Manifest
from .manifest import MANIFEST_FILENAME


class ArchiveWriter:
    """ZIP 归档写入器"""

    def __init__(self, compress_level: int = 6):
        self.compress_level = min(9, max(0, compress_level))

    def create_archive(self, destination: Union[str, Path], entries: ArchiveEntries) -> Path:
        """创建归档

        Args:
            destination: 目标归档路径，已存在时被覆盖
            entries: 归档内路径 -> 源文件或源目录

        Returns:
            Path: 目标归档路径

        Raises:
            ArchiveIOError: 源文件不可读或目标不可写
        """
        destination = Path(destination)
        try:
            ensure_directory(destination.parent)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{destination.name}.", suffix=".tmp", dir=destination.parent
            )
            os.close(fd)
        except OSError as e:
            raise ArchiveIOError(f"无法写入目标位置 {destination}: {e}", destination) from e

        tmp_path = Path(tmp_name)
        try:
            with zipfile.ZipFile(tmp_path, 'w', zipfile.ZIP_DEFLATED, compresslevel=self.compress_level) as zf:
                for archive_path, source in entries.items():
                    self._write_entry(zf, archive_path, Path(source))
            os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, destination)
        except ArchiveIOError:
            remove_quietly(tmp_path)
            raise
        except (OSError, zipfile.BadZipFile) as e:
            remove_quietly(tmp_path)
            raise ArchiveIOError(f"写入归档失败 {destination}: {e}", destination) from e

        return destination

    def _write_entry(self, zf: zipfile.ZipFile, archive_path: str, source: Path) -> None:
        if source.is_dir():
            # 目录只写入结构条目
            zf.write(source, archive_path.rstrip('/') + '/')
            return

        if not source.is_file():
            raise ArchiveIOError(f"源文件不存在: {source}", source)

        try:
            zf.write(source, archive_path)
        except OSError as e:
            raise ArchiveIOError(f"添加文件到归档失败 {source}: {e}", source) from e


def list_archive_members(archive_path: Union[str, Path]) -> List[str]:
    """列出归档成员名（目录不带结尾斜杠）

    Raises:
        ArchiveIOError: 归档无法读取
    """
    try:
        with zipfile.ZipFile(archive_path, 'r') as zf:
            return [info.filename.rstrip('/') for info in zf.infolist()]
    except (OSError, zipfile.BadZipFile) as e:
        raise ArchiveIOError(f"无法读取归档 {archive_path}: {e}", Path(archive_path)) from e


def read_archive_manifest(archive_path: Union[str, Path]) -> Optional[Manifest]:
    """读取归档根目录下的 filelist.json，不存在时返回 None

    Raises:
        ArchiveIOError: 归档无法读取或清单不是有效 JSON
    """
    try:
        with zipfile.ZipFile(archive_path, 'r') as zf:
            if MANIFEST_FILENAME not in zf.namelist():
                return None
            return json.loads(zf.read(MANIFEST_FILENAME).decode('utf-8'))
    except (OSError, zipfile.BadZipFile, ValueError) as e:
        raise ArchiveIOError(f"无法读取归档清单 {archive_path}: {e}", Path(archive_path)) from e
