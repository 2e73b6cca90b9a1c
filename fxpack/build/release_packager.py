"""
发布打包器

逐个（子进程、顺序）打包内置模块，再将应用外壳、模块子归档与发布清单组装为
<dist>/release-<version>.zip。任一模块失败都不会生成发布归档。
"""

from pathlib import Path
from typing import Optional

from ..config.schema import PackagerSettings
from ..utils.logging import LogStage
from .build_context import PackageContext, ProgressCallback
from .build_pipeline import BuildPipeline
from .runner import ModuleRunner
from .steps.archive_step import ArchiveStep, CleanupStep
from .steps.manifest_step import ReleaseManifestStep
from .steps.metadata_step import ReleaseMetadataStep
from .steps.release_entries_step import ExtraModulesStep, ModuleBuildStep, ShellEntriesStep

RELEASE_PACKAGE_NAME = "release"


class ReleasePackager:
    """发布打包器"""

    def __init__(self, settings: PackagerSettings, runner: Optional[ModuleRunner] = None):
        self.settings = settings
        self.pipeline = BuildPipeline([
            ReleaseMetadataStep((0, 10)),
            ShellEntriesStep((10, 20)),
            ModuleBuildStep(runner, (20, 70)),
            ExtraModulesStep((70, 80)),
            ReleaseManifestStep((80, 85)),
            ArchiveStep((85, 98)),
            CleanupStep((98, 100)),
        ], stage=LogStage.RELEASE)

    def package(self, progress_callback: Optional[ProgressCallback] = None) -> Path:
        """打包发布版本

        Returns:
            Path: 发布归档的绝对路径

        Raises:
            ConfigError: 应用元数据缺失或无效
            SubprocessBuildError: 某个模块打包失败
            BuildError: 其他打包失败
        """
        context = PackageContext(
            settings=self.settings,
            package_name=RELEASE_PACKAGE_NAME,
            progress_callback=progress_callback,
        )
        self.pipeline.execute(context)
        return context.output_path
