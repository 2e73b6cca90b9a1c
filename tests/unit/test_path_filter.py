"""
路径过滤器单元测试

测试默认排除模式、模块附加模式、.gitignore 豁免与无效正则处理。
"""

import pytest

from fxpack.build.path_filter import (
    MODULE_EXCLUDE_PATTERNS,
    RELEASE_EXCLUDE_PATTERNS,
    PathFilter,
    compile_patterns,
    is_excluded,
)
from fxpack.config.loader import ConfigError


class TestModulePatterns:
    """模块默认排除模式测试"""

    @pytest.mark.parametrize("path", [
        "/.git",
        "/.git/config",
        "/.svn/entries",
        "/.idea/workspace.xml",
        "/config/config-editable.php",
        "/js/app.js",
        "/node_modules/x.js",
        "/scss/main.scss",
        "/tests/FooTest.php",
        "/tmp/cache",
        "/package-lock.json",
    ])
    def test_excluded(self, path):
        """测试默认排除的路径"""
        assert PathFilter(MODULE_EXCLUDE_PATTERNS).is_excluded(path)

    @pytest.mark.parametrize("path", [
        "/foo.php",
        "/src/js/app.js",
        "/config/config-module.php",
        "/public/dist/js/form.js",
        "/package.json",
    ])
    def test_kept(self, path):
        """测试不被排除的路径"""
        assert not PathFilter(MODULE_EXCLUDE_PATTERNS).is_excluded(path)

    def test_case_insensitive(self):
        """测试大小写不敏感"""
        path_filter = PathFilter(MODULE_EXCLUDE_PATTERNS)
        assert path_filter.is_excluded("/Node_Modules/x.js")
        assert path_filter.is_excluded("/CONFIG/Config-Editable.php")

    def test_dev_only_excluded_in_release_scope(self):
        """测试 dev 与 nodejs 只在发布范围内排除"""
        assert not is_excluded("/dev/tool.php", MODULE_EXCLUDE_PATTERNS)
        assert is_excluded("/dev/tool.php", RELEASE_EXCLUDE_PATTERNS)
        assert not is_excluded("/nodejs/compiler.js", MODULE_EXCLUDE_PATTERNS)
        assert is_excluded("/nodejs/compiler.js", RELEASE_EXCLUDE_PATTERNS)


class TestPathFilter:
    """PathFilter 行为测试"""

    def test_gitignore_always_kept(self):
        """测试 .gitignore 文件不受任何排除模式影响"""
        path_filter = PathFilter(MODULE_EXCLUDE_PATTERNS + [r".*"])
        assert not path_filter.is_excluded("/node_modules/.gitignore")
        assert not path_filter.is_excluded("/.gitignore")
        assert path_filter.is_excluded("/node_modules/.gitkeep")

    def test_extra_patterns_appended(self):
        """测试附加模式与默认模式共同生效"""
        path_filter = PathFilter(MODULE_EXCLUDE_PATTERNS + [r"^/docs/", r"\.md$"])
        assert path_filter.is_excluded("/docs/index.html")
        assert path_filter.is_excluded("/README.MD")
        assert path_filter.is_excluded("/.git/HEAD")
        assert not path_filter.is_excluded("/src/docs.php")

    def test_duplicate_patterns_allowed(self):
        """测试重复模式不会被去重且不影响结果"""
        path_filter = PathFilter([r"^/a", r"^/a"])
        assert path_filter.patterns == [r"^/a", r"^/a"]
        assert path_filter.is_excluded("/a.txt")

    def test_no_patterns(self):
        """测试空模式列表不排除任何路径"""
        assert not PathFilter([]).is_excluded("/anything")

    def test_invalid_pattern_raises_config_error(self):
        """测试无效正则抛出配置错误并指明模式"""
        with pytest.raises(ConfigError) as exc_info:
            PathFilter([r"^/ok", r"^/(unclosed"])
        assert "^/(unclosed" in str(exc_info.value)

    def test_compile_patterns(self):
        """测试编译结果忽略大小写"""
        compiled = compile_patterns([r"^/abc"])
        assert compiled[0].search("/ABC")
