"""
路径过滤器

按有序的正则排除模式判断相对路径是否应被排除。
相对路径以 "/" 开头（如 "/config/config-editable.php"），匹配不区分大小写。
"""

import re
from typing import Iterable, List, Pattern

from ..config.loader import ConfigError

# 始终保留的版本控制忽略文件后缀
IGNORE_FILE_SUFFIX = ".gitignore"

# 模块包默认排除模式
MODULE_EXCLUDE_PATTERNS: List[str] = [
    r"^/.(git|svn|idea)",
    r"^/config/config-editable.php$",
    r"^/(js|node_modules|scss|tests|tmp)",
    r"^/package-lock\.json",
]

# 发布包默认排除模式
RELEASE_EXCLUDE_PATTERNS: List[str] = [
    r"^/.(git|svn|idea)",
    r"^/config/config-editable.php$",
    r"^/(dev|js|nodejs|node_modules|scss|tests|tmp)",
    r"^/package-lock\.json",
]


def compile_patterns(patterns: Iterable[str]) -> List[Pattern[str]]:
    """编译排除模式

    Raises:
        ConfigError: 存在无效的正则表达式
    """
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern, re.IGNORECASE))
        except re.error as e:
            raise ConfigError(f"无效的排除模式 '{pattern}': {e}") from e
    return compiled


class PathFilter:
    """路径过滤器

    所有模式依次尝试，任一匹配即排除；模式不去重，也不互相覆盖。
    """

    def __init__(self, patterns: Iterable[str]):
        self.patterns = list(patterns)
        self._compiled = compile_patterns(self.patterns)

    def is_excluded(self, relative_path: str) -> bool:
        """检查路径是否被排除

        Args:
            relative_path: 相对于扫描根目录的路径，以 "/" 开头

        Returns:
            bool: 是否被排除
        """
        if relative_path.endswith(IGNORE_FILE_SUFFIX):
            return False

        for regex in self._compiled:
            if regex.search(relative_path):
                return True
        return False


def is_excluded(relative_path: str, patterns: Iterable[str]) -> bool:
    """便捷函数：检查路径是否被排除"""
    return PathFilter(patterns).is_excluded(relative_path)
