"""
模块打包器

将单个模块打包为 <dist>/<module>-<version>.zip，内含 filelist.json 校验和清单。
"""

from pathlib import Path
from typing import Optional

from ..config.schema import PackagerSettings
from ..utils.logging import LogStage
from .build_context import PackageContext, ProgressCallback
from .build_pipeline import BuildPipeline
from .steps.archive_step import ArchiveStep, CleanupStep
from .steps.file_collection_step import FileCollectionStep
from .steps.manifest_step import ChecksumManifestStep
from .steps.metadata_step import ModuleMetadataStep


class ModulePackager:
    """模块打包器"""

    def __init__(self, settings: PackagerSettings):
        self.settings = settings
        self.pipeline = BuildPipeline([
            ModuleMetadataStep((0, 10)),
            FileCollectionStep((10, 40)),
            ChecksumManifestStep((40, 60)),
            ArchiveStep((60, 95)),
            CleanupStep((95, 100)),
        ], stage=LogStage.MODULE)

    def package(self, module_name: str, progress_callback: Optional[ProgressCallback] = None) -> Path:
        """打包模块

        Args:
            module_name: 模块名（<modules_dir> 下的目录名）
            progress_callback: 进度回调函数

        Returns:
            Path: 产物归档的绝对路径

        Raises:
            ConfigError: 模块名无效、元数据缺失或排除模式无效
            BuildError: 打包失败
        """
        context = PackageContext(
            settings=self.settings,
            package_name=module_name,
            progress_callback=progress_callback,
        )
        self.pipeline.execute(context)
        return context.output_path
