"""
构建步骤基类模块

定义打包步骤的抽象接口和基础功能。
"""

from abc import ABC, abstractmethod

from fxpack.build.build_context import PackageContext


class BuildStep(ABC):
    """打包步骤抽象基类

    同一步骤可出现在模块与发布两条管道中，进度范围由管道在构造时指定。
    """

    def __init__(self, name: str, description: str, progress_range: tuple[int, int] = (0, 100)):
        self.name = name
        self.description = description
        self._progress_range = progress_range

    @abstractmethod
    def execute(self, context: PackageContext) -> None:
        """执行打包步骤"""
        pass

    def get_progress_range(self) -> tuple[int, int]:
        """获取此步骤的进度范围 (start_percent, end_percent)"""
        return self._progress_range
