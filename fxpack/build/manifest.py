"""
清单构建器

计算每个文件的 CRC32 校验和，生成 filelist.json 变更检测清单。
CRC32 只用于检测变更，不用于完整性保证。
"""

import json
import zlib
from pathlib import Path
from typing import Dict, Optional, Union

from .build_context import ArchiveEntries, ArchiveIOError, Manifest

MANIFEST_FILENAME = "filelist.json"


def file_checksum(file_path: Path, chunk_size: int = 64 * 1024) -> str:
    """计算文件 CRC32 校验和（8 位小写十六进制）

    Raises:
        ArchiveIOError: 文件读取失败
    """
    crc = 0
    try:
        with open(file_path, 'rb') as f:
            while True:
                chunk = f.read(chunk_size)
                if not chunk:
                    break
                crc = zlib.crc32(chunk, crc)
    except OSError as e:
        raise ArchiveIOError(f"读取文件失败 {file_path}: {e}", Path(file_path)) from e
    return f"{crc & 0xFFFFFFFF:08x}"


class ManifestBuilder:
    """清单构建器"""

    def build(self, entries: ArchiveEntries) -> Dict[str, Optional[str]]:
        """按条目顺序构建清单：文件映射为校验和，目录映射为 None"""
        manifest: Dict[str, Optional[str]] = {}
        for archive_path, source in entries.items():
            manifest[archive_path] = None if Path(source).is_dir() else file_checksum(source)
        return manifest


def dump_manifest(manifest: Manifest) -> str:
    """序列化清单，保持条目顺序"""
    return json.dumps(manifest, ensure_ascii=False, indent=2) + "\n"


def write_manifest(manifest_path: Union[str, Path], manifest: Manifest) -> Path:
    """写入清单文件

    Raises:
        ArchiveIOError: 写入失败
    """
    manifest_path = Path(manifest_path)
    try:
        manifest_path.parent.mkdir(parents=True, exist_ok=True)
        manifest_path.write_text(dump_manifest(manifest), encoding='utf-8')
    except OSError as e:
        raise ArchiveIOError(f"写入清单失败 {manifest_path}: {e}", manifest_path) from e
    return manifest_path
