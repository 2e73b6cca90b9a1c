"""
配置系统单元测试

测试打包器设置、YAML 设置加载与 package.json 元数据验证。
"""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError
from ruamel.yaml import YAML

from fxpack.config.loader import (
    ConfigError,
    ConfigLoader,
    ConfigValidationError,
    load_app_metadata,
    load_module_metadata,
    load_settings,
)
from fxpack.config.schema import AppPackageMetadata, ModulePackageMetadata, PackagerSettings


def _write_yaml(path: Path, data) -> Path:
    yaml = YAML()
    with open(path, 'w', encoding='utf-8') as f:
        yaml.dump(data, f)
    return path


class TestPackagerSettings:
    """PackagerSettings 测试"""

    def test_default_directories(self, tmp_path):
        """测试目录默认值按 app_root 推导"""
        settings = PackagerSettings(app_root=tmp_path)

        assert settings.modules_dir == tmp_path / "modules"
        assert settings.dist_dir == tmp_path / "build" / "dist"
        assert settings.tmp_dir == tmp_path / "tmp"
        assert settings.include_extra_modules is True
        assert settings.compress_level == 6

    def test_explicit_directories(self, tmp_path):
        """测试显式指定目录"""
        settings = PackagerSettings(app_root=tmp_path, dist_dir=tmp_path / "out")
        assert settings.dist_dir == tmp_path / "out"
        assert settings.modules_dir == tmp_path / "modules"

    def test_module_root(self, tmp_path):
        """测试模块根目录"""
        settings = PackagerSettings(app_root=tmp_path)
        assert settings.module_root("Shop") == tmp_path / "modules" / "Shop"

    def test_compress_level_range(self, tmp_path):
        """测试压缩级别范围"""
        with pytest.raises(ValidationError):
            PackagerSettings(app_root=tmp_path, compress_level=10)

    def test_unknown_field_rejected(self, tmp_path):
        """测试未知字段被拒绝"""
        with pytest.raises(ValidationError):
            PackagerSettings(app_root=tmp_path, compression="zstd")

    def test_to_cli_args(self, tmp_path):
        """测试转换为子进程命令行参数"""
        settings = PackagerSettings(app_root=tmp_path, compress_level=9)
        args = settings.to_cli_args()

        assert args[args.index("--app-root") + 1] == str(tmp_path)
        assert args[args.index("--dist-dir") + 1] == str(tmp_path / "build" / "dist")
        assert args[args.index("--compress-level") + 1] == "9"


class TestConfigLoader:
    """ConfigLoader 设置加载测试"""

    def test_load_without_file(self, tmp_path):
        """测试不提供设置文件时使用默认值与覆盖项"""
        settings = load_settings(None, {'app_root': tmp_path, 'dist_dir': None})
        assert settings.app_root == tmp_path
        assert settings.dist_dir == tmp_path / "build" / "dist"

    def test_relative_paths_resolved_against_file(self, tmp_path):
        """测试设置文件中的相对路径相对于文件所在目录解析"""
        config_path = _write_yaml(tmp_path / "fxpack.yaml", {
            'app_root': "app",
            'dist_dir': "out/dist",
            'compress_level': 3,
        })

        settings = ConfigLoader().load_settings(config_path)

        assert settings.app_root == (tmp_path / "app").resolve()
        assert settings.dist_dir == (tmp_path / "out" / "dist").resolve()
        assert settings.modules_dir == (tmp_path / "app").resolve() / "modules"
        assert settings.compress_level == 3

    def test_overrides_take_precedence(self, tmp_path):
        """测试命令行覆盖项优先于设置文件"""
        config_path = _write_yaml(tmp_path / "fxpack.yml", {'app_root': str(tmp_path), 'compress_level': 3})

        settings = load_settings(config_path, {'compress_level': 9, 'tmp_dir': None})

        assert settings.compress_level == 9
        assert settings.tmp_dir == tmp_path / "tmp"

    def test_empty_file(self, tmp_path):
        """测试空设置文件"""
        config_path = tmp_path / "empty.yaml"
        config_path.write_text("", encoding="utf-8")
        settings = load_settings(config_path, {'app_root': tmp_path})
        assert settings.app_root == tmp_path

    def test_missing_file(self, tmp_path):
        """测试设置文件不存在"""
        with pytest.raises(ConfigError):
            load_settings(tmp_path / "missing.yaml")

    def test_wrong_suffix(self, tmp_path):
        """测试设置文件格式错误"""
        config_path = tmp_path / "fxpack.json"
        config_path.write_text("{}", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_settings(config_path)

    def test_invalid_yaml(self, tmp_path):
        """测试 YAML 语法错误"""
        config_path = tmp_path / "bad.yaml"
        config_path.write_text("app_root: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError) as exc_info:
            load_settings(config_path)
        assert not isinstance(exc_info.value, ConfigValidationError)

    def test_non_mapping_root(self, tmp_path):
        """测试根级别不是字典"""
        config_path = tmp_path / "list.yaml"
        config_path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_settings(config_path)

    def test_unknown_key(self, tmp_path):
        """测试设置文件包含未知字段"""
        config_path = _write_yaml(tmp_path / "fxpack.yaml", {'app_root': str(tmp_path), 'colour': "red"})

        with pytest.raises(ConfigValidationError) as exc_info:
            load_settings(config_path)

        assert "colour" in exc_info.value.format_errors()
        assert json.loads(exc_info.value.format_errors_json())


class TestModuleMetadata:
    """模块 package.json 元数据测试"""

    def test_load(self, tmp_path):
        """测试读取模块元数据并忽略未知字段"""
        (tmp_path / "package.json").write_text(json.dumps({
            "name": "shop",
            "version": "1.2.3",
            "dependencies": {"x": "1"},
            "framelix": {"release": {"exclude": [r"^/docs/"]}},
        }), encoding="utf-8")

        metadata = load_module_metadata(tmp_path)

        assert metadata.version == "1.2.3"
        assert metadata.release_exclude == [r"^/docs/"]

    def test_exclude_defaults_to_empty(self):
        """测试未声明附加排除模式"""
        metadata = ModulePackageMetadata.from_dict({"version": "1.0.0"})
        assert metadata.release_exclude == []

    @pytest.mark.parametrize("data", [{}, {"version": ""}, {"version": "   "}])
    def test_version_required(self, data):
        """测试版本号必填且不能为空"""
        with pytest.raises(ValidationError):
            ModulePackageMetadata.from_dict(data)

    def test_missing_file(self, tmp_path):
        """测试 package.json 不存在"""
        with pytest.raises(ConfigError) as exc_info:
            load_module_metadata(tmp_path)
        assert not isinstance(exc_info.value, ConfigValidationError)

    def test_invalid_json(self, tmp_path):
        """测试 package.json 不是有效 JSON"""
        (tmp_path / "package.json").write_text("{version:", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_module_metadata(tmp_path)

    def test_validation_error(self, tmp_path):
        """测试元数据验证失败"""
        (tmp_path / "package.json").write_text(json.dumps({"name": "x"}), encoding="utf-8")
        with pytest.raises(ConfigValidationError) as exc_info:
            load_module_metadata(tmp_path)
        assert "version" in exc_info.value.format_errors()


class TestAppMetadata:
    """应用 package.json 元数据测试"""

    def test_load(self, tmp_path):
        """测试读取应用元数据，保持模块顺序"""
        (tmp_path / "package.json").write_text(json.dumps({
            "version": "2.0.0",
            "framelix": {"builtInModules": ["Framelix", "Shop", "Blog"]},
        }), encoding="utf-8")

        metadata = load_app_metadata(tmp_path)

        assert metadata.version == "2.0.0"
        assert metadata.built_in_modules == ["Framelix", "Shop", "Blog"]

    def test_empty_module_list(self):
        """测试内置模块列表可以为空"""
        metadata = AppPackageMetadata.from_dict({"version": "1.0.0", "framelix": {"builtInModules": []}})
        assert metadata.built_in_modules == []

    @pytest.mark.parametrize("data", [
        {"version": "1.0.0"},
        {"version": "1.0.0", "framelix": {}},
        {"framelix": {"builtInModules": ["A"]}},
    ])
    def test_required_fields(self, data):
        """测试版本号与 builtInModules 必填"""
        with pytest.raises(ValidationError):
            AppPackageMetadata.from_dict(data)

    @pytest.mark.parametrize("name", ["", "a/b", "a\\b", "..", "."])
    def test_invalid_module_names(self, name):
        """测试无效模块名被拒绝"""
        with pytest.raises(ValidationError):
            AppPackageMetadata.from_dict({"version": "1.0.0", "framelix": {"builtInModules": [name]}})
