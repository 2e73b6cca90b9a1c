"""
归档写入与清理步骤模块
"""

from ...utils import format_size, remove_quietly
from ...utils.logging import info, success, warning, LogStage
from fxpack.build.archive import ArchiveWriter
from fxpack.build.build_context import BuildError, PackageContext
from .build_step import BuildStep


class ArchiveStep(BuildStep):
    """归档写入步骤"""

    def __init__(self, progress_range: tuple[int, int] = (60, 95)):
        super().__init__("archive", "写入归档", progress_range)

    def execute(self, context: PackageContext) -> None:
        if context.output_path is None:
            raise BuildError("产物路径未确定")

        info(f"写入归档: {context.output_path}", stage=LogStage.ARCHIVE)
        context.report_progress("写入归档", self.get_progress_range()[0], context.output_path.name)

        writer = ArchiveWriter(context.settings.compress_level)
        writer.create_archive(context.output_path, context.entries)

        archive_size = context.output_path.stat().st_size
        context.build_stats['archive_size'] = archive_size

        success(f"归档完成 - {len(context.entries)} 个成员, 大小: {format_size(archive_size)}",
                stage=LogStage.ARCHIVE)
        context.report_progress("写入归档", self.get_progress_range()[1], format_size(archive_size))


class CleanupStep(BuildStep):
    """临时清单清理步骤，删除失败只记录警告"""

    def __init__(self, progress_range: tuple[int, int] = (95, 100)):
        super().__init__("cleanup", "清理临时文件", progress_range)

    def execute(self, context: PackageContext) -> None:
        if context.manifest_path is None:
            return

        if remove_quietly(context.manifest_path):
            info(f"已删除临时清单: {context.manifest_path}", stage=LogStage.CLEANUP)
        else:
            warning(f"无法删除临时清单: {context.manifest_path}", stage=LogStage.CLEANUP)

        context.report_progress("清理", self.get_progress_range()[1], "")
