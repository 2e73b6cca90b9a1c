"""
文件收集步骤模块

遍历模块源码树，应用排除规则，生成归档条目。
"""

from ...utils import format_size
from ...utils.logging import info, success, debug, LogStage
from fxpack.build.build_context import BuildError, PackageContext
from fxpack.build.collector import EntryCollector
from fxpack.build.path_filter import PathFilter
from .build_step import BuildStep


class FileCollectionStep(BuildStep):
    """文件收集步骤"""

    def __init__(self, progress_range: tuple[int, int] = (10, 40)):
        super().__init__("collect", "收集要打包的文件", progress_range)
        self.collector = EntryCollector()

    def execute(self, context: PackageContext) -> None:
        if context.source_root is None:
            raise BuildError("源目录未解析，无法收集文件")

        info(f"收集文件: {context.source_root}", stage=LogStage.COLLECT)
        context.report_progress("收集文件", self.get_progress_range()[0], f"扫描: {context.source_root}")

        path_filter = PathFilter(context.exclude_patterns)
        context.entries = self.collector.collect(context.source_root, path_filter)

        stats = self.collector.get_statistics()
        context.build_stats['total_files'] = stats['total_files']
        context.build_stats['total_directories'] = sum(
            1 for source in context.entries.values() if source.is_dir()
        )
        context.build_stats['total_size'] = stats['total_size']
        context.build_stats['excluded'] = stats['excluded']

        success("文件收集完成", stage=LogStage.COLLECT)
        info(f"  文件数量: {stats['total_files']}")
        info(f"  目录数量: {context.build_stats['total_directories']}")
        info(f"  排除条目: {stats['excluded']}")
        info(f"  总大小: {format_size(stats['total_size'])}")

        # 在 DEBUG 级别输出前 20 个条目用于诊断
        keys = list(context.entries)
        for idx, key in enumerate(keys[:20]):
            debug(f"条目[{idx}]: {key}", stage=LogStage.COLLECT)
        if len(keys) > 20:
            debug(f"... 还有 {len(keys) - 20} 个条目未列出", stage=LogStage.COLLECT)

        context.report_progress("收集文件", self.get_progress_range()[1], f"找到 {len(keys)} 个条目")
