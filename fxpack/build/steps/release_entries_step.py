"""
发布条目步骤模块

构造发布包的应用外壳条目、逐个打包内置模块，并原样包含非内置模块目录。
"""

from pathlib import Path
from typing import List, Optional

from ...utils.logging import info, success, warning, debug, LogStage
from fxpack.build.build_context import ArchiveIOError, BuildError, PackageContext
from fxpack.build.collector import EntryCollector
from fxpack.build.path_filter import RELEASE_EXCLUDE_PATTERNS, PathFilter
from fxpack.build.runner import ModuleRunner, SubprocessModuleRunner
from .build_step import BuildStep

# 发布包根部的应用外壳条目（顺序即清单顺序）
SHELL_ENTRIES: List[str] = ["logs", "modules", ".htaccess", "index.php", "package.json"]


class ShellEntriesStep(BuildStep):
    """应用外壳条目步骤"""

    def __init__(self, progress_range: tuple[int, int] = (10, 20)):
        super().__init__("shell", "收集应用外壳文件", progress_range)

    def execute(self, context: PackageContext) -> None:
        app_root = context.source_root
        if app_root is None:
            raise BuildError("应用根目录未解析")

        context.entries = {}
        for name in SHELL_ENTRIES:
            source = app_root / name
            if not source.exists():
                raise ArchiveIOError(f"应用外壳文件不存在: {source}", source)
            context.entries[name] = source

        context.manifest = list(SHELL_ENTRIES)
        debug(f"外壳条目: {SHELL_ENTRIES}", stage=LogStage.RELEASE)
        context.report_progress("收集外壳", self.get_progress_range()[1], "")


class ModuleBuildStep(BuildStep):
    """内置模块打包步骤

    按模块列表顺序逐个在子进程中打包，任一失败即中止整个发布。
    """

    def __init__(self, runner: Optional[ModuleRunner] = None, progress_range: tuple[int, int] = (20, 70)):
        super().__init__("modules", "打包内置模块", progress_range)
        self.runner = runner or SubprocessModuleRunner()

    def execute(self, context: PackageContext) -> None:
        if not isinstance(context.manifest, list):
            raise BuildError("发布清单尚未构造")

        modules = context.build_stats.get('built_in_modules', [])
        start, end = self.get_progress_range()

        for index, module_name in enumerate(modules):
            context.report_progress(
                "打包模块",
                start + int(index / max(1, len(modules)) * (end - start)),
                module_name,
            )
            info(f"打包模块: {module_name}", stage=LogStage.MODULE)

            archive_path = self.runner(module_name, context.settings)

            key = f"modules/{module_name}.zip"
            context.entries[key] = archive_path
            context.manifest.append(key)
            success(f"模块 {module_name} -> {archive_path}", stage=LogStage.MODULE)

        context.report_progress("打包模块", end, f"{len(modules)} 个模块")


class ExtraModulesStep(BuildStep):
    """非内置模块步骤

    modules/ 下不在内置列表中的模块目录按发布排除规则原样加入，不写入发布清单。
    """

    def __init__(self, progress_range: tuple[int, int] = (70, 80)):
        super().__init__("extra-modules", "包含非内置模块", progress_range)

    def execute(self, context: PackageContext) -> None:
        if not context.settings.include_extra_modules:
            return

        app_root = context.source_root
        modules_dir = Path(context.settings.modules_dir).resolve()
        if app_root is None or not modules_dir.is_dir():
            return

        built_in = set(context.build_stats.get('built_in_modules', []))
        if not modules_dir.is_relative_to(app_root):
            warning(f"模块目录不在应用根目录之下，跳过非内置模块: {modules_dir}", stage=LogStage.RELEASE)
            return

        path_filter = PathFilter(RELEASE_EXCLUDE_PATTERNS)
        collector = EntryCollector()

        extra = sorted(p for p in modules_dir.iterdir() if p.is_dir() and p.name not in built_in)
        for module_root in extra:
            key = module_root.relative_to(app_root).as_posix()
            if path_filter.is_excluded("/" + key):
                continue

            context.entries.setdefault(key, module_root)
            collector.collect(module_root, path_filter, key_root=app_root, entries=context.entries)
            info(f"包含非内置模块: {module_root.name}", stage=LogStage.RELEASE)

        context.report_progress("非内置模块", self.get_progress_range()[1], f"{len(extra)} 个")
