"""
清单生成步骤模块

模块包清单为 "归档路径 -> CRC32 或 null" 映射；发布包清单为顶层成员名列表。
两种形态均被下游使用，需保持不同。
"""

from pathlib import Path

from ...utils.logging import info, success, LogStage
from fxpack.build.build_context import BuildError, PackageContext
from fxpack.build.manifest import MANIFEST_FILENAME, ManifestBuilder, write_manifest
from .build_step import BuildStep


def _manifest_tmp_path(context: PackageContext) -> Path:
    return Path(context.settings.tmp_dir) / f"{context.package_name}-{MANIFEST_FILENAME}"


class ChecksumManifestStep(BuildStep):
    """模块清单生成步骤"""

    def __init__(self, progress_range: tuple[int, int] = (40, 60)):
        super().__init__("manifest", "生成校验和清单", progress_range)
        self.builder = ManifestBuilder()

    def execute(self, context: PackageContext) -> None:
        if MANIFEST_FILENAME in context.entries:
            raise BuildError(f"源目录根部不能包含 {MANIFEST_FILENAME}，该名称保留给清单")

        info(f"计算 {len(context.entries)} 个条目的校验和", stage=LogStage.MANIFEST)
        context.report_progress("生成清单", self.get_progress_range()[0], "计算校验和...")

        context.manifest = self.builder.build(context.entries)
        context.manifest_path = write_manifest(_manifest_tmp_path(context), context.manifest)
        context.entries[MANIFEST_FILENAME] = context.manifest_path

        success(f"清单已写入: {context.manifest_path}", stage=LogStage.MANIFEST)
        context.report_progress("生成清单", self.get_progress_range()[1], MANIFEST_FILENAME)


class ReleaseManifestStep(BuildStep):
    """发布清单写入步骤

    清单内容在前序步骤中按构造顺序累积（context.manifest 为列表）。
    """

    def __init__(self, progress_range: tuple[int, int] = (80, 85)):
        super().__init__("release-manifest", "写入发布清单", progress_range)

    def execute(self, context: PackageContext) -> None:
        if not isinstance(context.manifest, list):
            raise BuildError("发布清单尚未构造")

        context.manifest_path = write_manifest(_manifest_tmp_path(context), context.manifest)
        context.entries[MANIFEST_FILENAME] = context.manifest_path

        info(f"发布清单包含 {len(context.manifest)} 个成员", stage=LogStage.MANIFEST)
        context.report_progress("写入清单", self.get_progress_range()[1], MANIFEST_FILENAME)
