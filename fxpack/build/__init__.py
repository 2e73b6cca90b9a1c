"""打包服务模块

提供模块包与发布包的核心打包功能。
"""

from .build_context import ArchiveIOError, BuildError, PackageContext, SubprocessBuildError
from .path_filter import (
    MODULE_EXCLUDE_PATTERNS,
    RELEASE_EXCLUDE_PATTERNS,
    PathFilter,
    is_excluded,
)
from .collector import EntryCollector, FileInfo, TreeEnumerator, collect_entries
from .manifest import MANIFEST_FILENAME, ManifestBuilder, file_checksum, write_manifest
from .archive import ArchiveWriter, list_archive_members, read_archive_manifest
from .module_packager import ModulePackager
from .release_packager import ReleasePackager
from .runner import ModuleRunner, SubprocessModuleRunner

__all__ = [
    # 打包器
    "ModulePackager",
    "ReleasePackager",
    "ModuleRunner",
    "SubprocessModuleRunner",

    # 异常与上下文
    "BuildError",
    "ArchiveIOError",
    "SubprocessBuildError",
    "PackageContext",

    # 路径过滤
    "MODULE_EXCLUDE_PATTERNS",
    "RELEASE_EXCLUDE_PATTERNS",
    "PathFilter",
    "is_excluded",

    # 文件收集
    "TreeEnumerator",
    "EntryCollector",
    "FileInfo",
    "collect_entries",

    # 清单与归档
    "MANIFEST_FILENAME",
    "ManifestBuilder",
    "file_checksum",
    "write_manifest",
    "ArchiveWriter",
    "list_archive_members",
    "read_archive_manifest",
]
