"""
元数据读取步骤模块

解析模块或应用根目录，读取 package.json，确定版本号、排除模式与产物路径。
"""

from pathlib import Path

from ...config.loader import ConfigError, load_app_metadata, load_module_metadata
from ...utils.logging import info, debug, LogStage
from fxpack.build.build_context import PackageContext
from fxpack.build.path_filter import MODULE_EXCLUDE_PATTERNS, PathFilter
from .build_step import BuildStep


class ModuleMetadataStep(BuildStep):
    """模块元数据读取步骤"""

    def __init__(self, progress_range: tuple[int, int] = (0, 10)):
        super().__init__("module-metadata", "读取模块元数据", progress_range)

    def execute(self, context: PackageContext) -> None:
        module_name = context.package_name
        module_root = context.settings.module_root(module_name)

        if not module_name or module_name in ('.', '..') or '/' in module_name or not module_root.is_dir():
            raise ConfigError(f"'{module_name}' 不是有效的模块名: 目录不存在 {module_root}")

        metadata = load_module_metadata(module_root)

        context.source_root = module_root.resolve()
        context.version = metadata.version
        context.exclude_patterns = MODULE_EXCLUDE_PATTERNS + metadata.release_exclude
        # 提前编译，无效正则在遍历前即报错
        PathFilter(context.exclude_patterns)

        context.output_path = (Path(context.settings.dist_dir) / f"{module_name}-{metadata.version}.zip").resolve()

        info(f"模块 {module_name} 版本 {metadata.version}", stage=LogStage.MODULE)
        if metadata.release_exclude:
            debug(f"模块附加排除模式: {metadata.release_exclude}", stage=LogStage.MODULE)

        context.report_progress("读取元数据", self.get_progress_range()[1], module_root.name)


class ReleaseMetadataStep(BuildStep):
    """应用元数据读取步骤"""

    def __init__(self, progress_range: tuple[int, int] = (0, 10)):
        super().__init__("release-metadata", "读取应用元数据", progress_range)

    def execute(self, context: PackageContext) -> None:
        app_root = Path(context.settings.app_root)
        if not app_root.is_dir():
            raise ConfigError(f"应用根目录不存在: {app_root}")

        metadata = load_app_metadata(app_root)

        context.source_root = app_root.resolve()
        context.version = metadata.version
        context.build_stats['built_in_modules'] = metadata.built_in_modules
        context.output_path = (Path(context.settings.dist_dir) / f"release-{metadata.version}.zip").resolve()

        info(f"发布版本 {metadata.version}，内置模块: {', '.join(metadata.built_in_modules) or '-'}",
             stage=LogStage.RELEASE)

        context.report_progress("读取元数据", self.get_progress_range()[1], app_root.name)
