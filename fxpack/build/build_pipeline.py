"""
构建管道模块

使用管道模式协调打包步骤的执行。
"""

import time
from typing import List, Optional

from ..config.loader import ConfigError
from ..utils import format_size, remove_quietly
from ..utils.logging import info, success, error, debug, LogStage
from .build_context import BuildError, PackageContext
from .steps.build_step import BuildStep


class BuildPipeline:
    """构建管道，负责按顺序执行打包步骤"""

    def __init__(self, steps: Optional[List[BuildStep]] = None, stage: str = LogStage.DONE):
        self._steps: List[BuildStep] = list(steps or [])
        self.stage = stage

    def add_step(self, step: BuildStep, position: Optional[int] = None):
        """添加打包步骤"""
        if position is None:
            self._steps.append(step)
        else:
            self._steps.insert(position, step)

    def remove_step(self, step_name: str):
        """移除打包步骤"""
        self._steps = [step for step in self._steps if step.name != step_name]

    def get_steps(self) -> List[BuildStep]:
        """获取所有打包步骤"""
        return self._steps.copy()

    def execute(self, context: PackageContext) -> PackageContext:
        """执行构建管道

        Args:
            context: 打包上下文

        Returns:
            PackageContext: 打包上下文，包含所有打包结果

        Raises:
            ConfigError: 配置错误（原样抛出）
            BuildError: 打包失败
        """
        context.build_stats['start_time'] = time.time()
        info(f"开始打包: {context.package_name}", stage=self.stage)

        try:
            for step in self._steps:
                debug(f"执行步骤: {step.description}", stage=self.stage)
                step.execute(context)
        except Exception as e:
            context.build_stats['end_time'] = time.time()
            error(f"打包失败 [{context.package_name}]: {e}", stage=self.stage)

            # 失败时临时清单已无用
            if context.manifest_path is not None:
                remove_quietly(context.manifest_path)

            if isinstance(e, (ConfigError, BuildError)):
                raise
            raise BuildError(f"打包失败 [{context.package_name}]: {e}") from e

        context.build_stats['end_time'] = time.time()
        build_time = context.build_stats['end_time'] - context.build_stats['start_time']

        success(f"打包成功: {context.output_path}", stage=self.stage)
        info(f"打包时间: {build_time:.1f}秒")
        info(f"归档大小: {format_size(context.build_stats.get('archive_size', 0))}")

        return context

    def validate_pipeline(self) -> List[str]:
        """验证构建管道的完整性

        Returns:
            List[str]: 验证错误列表，空列表表示验证通过
        """
        errors = []

        if not self._steps:
            errors.append("构建管道中没有步骤")
            return errors

        # 检查步骤的进度范围是否连续
        prev_end = 0
        for step in self._steps:
            start, end = step.get_progress_range()
            if start != prev_end:
                errors.append(f"步骤 '{step.name}' 的进度范围不连续: 期望起始 {prev_end}%, 实际 {start}%")
            if start >= end:
                errors.append(f"步骤 '{step.name}' 的进度范围无效: {start}% - {end}%")
            prev_end = end

        if prev_end != 100:
            errors.append(f"构建管道的总进度范围不是100%: {prev_end}%")

        return errors
